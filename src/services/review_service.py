"""Review ledger: reviews embedded in product documents."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from src.config import REVIEW_PAGE_SIZE
from src.db.mongodb_client import mongo_client
from src.errors import Forbidden, NotFound, StoreFailure, Unauthorized, ValidationFailure
from src.models.products import MAX_RATING, MIN_RATING, Product, Review
from src.models.queries import PageResult
from src.services.product_query_service import product_id_candidates

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _review_time(review: Review) -> datetime:
    """Parse a review date. Legacy dates end in Z or carry no offset and are UTC."""
    try:
        parsed = datetime.fromisoformat(review.date.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparseable date on review {review.id}: {review.date}")
        return datetime.min.replace(tzinfo=timezone.utc)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class ReviewService:
    def __init__(self):
        self.collection_name = "products"

    def _collection(self):
        return mongo_client.get_collection(self.collection_name)

    def _validate_rating(self, rating: int):
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationFailure(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

    def _load_product(self, product_id: str) -> dict[str, Any]:
        doc = self._collection().find_one({"_id": {"$in": product_id_candidates(product_id)}})
        if not doc:
            raise NotFound("Product not found")
        return doc

    def add_review(self, product_id: str, author_id: str, reviewer_name: str, rating: int, comment: str) -> Product:
        """
        Append a review to a product.

        Args:
            product_id: Product to review
            author_id: Identity of the signed-in reviewer
            reviewer_name: Display name shown with the review
            rating: Integer from 1 to 5
            comment: Free text, may be empty

        Returns:
            The updated product
        """
        self._validate_rating(rating)
        review = Review(
            id=uuid.uuid4().hex,
            reviewer_name=reviewer_name,
            rating=rating,
            comment=comment,
            date=_now(),
            author_id=author_id,
        )

        try:
            doc = self._collection().find_one_and_update(
                {"_id": {"$in": product_id_candidates(product_id)}},
                {"$push": {"reviews": review.model_dump(by_alias=True)}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Error adding review to {product_id}: {e}")
            raise StoreFailure("Failed to add review", cause=e) from e

        if not doc:
            raise NotFound("Product not found")
        logger.info(f"Review {review.id} added to product {product_id} by {author_id}")
        return Product.from_document(doc)

    def edit_review(self, product_id: str, review_id: str, author_id: str, rating: int, comment: str) -> Review:
        """Overwrite rating, comment and date of a review owned by `author_id`."""
        self._validate_rating(rating)
        try:
            product = Product.from_document(self._load_product(product_id))
            review = next((r for r in product.reviews if r.id == review_id), None)
            if review is None:
                raise NotFound("Review not found")
            if review.author_id != author_id:
                raise Forbidden("You cannot edit this review")

            updated = review.model_copy(update={"rating": rating, "comment": comment, "date": _now()})
            result = self._collection().update_one(
                {"_id": {"$in": product_id_candidates(product_id)}, "reviews.id": review_id},
                {
                    "$set": {
                        "reviews.$.rating": updated.rating,
                        "reviews.$.comment": updated.comment,
                        "reviews.$.date": updated.date,
                    }
                },
            )
            if result.matched_count == 0:
                # Removed between the read and the write
                raise NotFound("Review not found")
        except PyMongoError as e:
            logger.error(f"Error updating review {review_id}: {e}")
            raise StoreFailure("Failed to update review", cause=e) from e

        logger.info(f"Review {review_id} on product {product_id} updated")
        return updated

    def delete_reviews(self, product_id: str, author_id: str | None) -> int:
        """
        Remove every review on the product written by `author_id`.

        Returns:
            Number of reviews removed
        """
        if not author_id:
            raise Unauthorized("Authentication required")

        try:
            product = Product.from_document(self._load_product(product_id))
            owned = sum(1 for r in product.reviews if r.author_id == author_id)
            if owned:
                # Legacy reviews store the author under uid
                self._collection().update_one(
                    {"_id": {"$in": product_id_candidates(product_id)}},
                    {"$pull": {"reviews": {"$or": [{"authorId": author_id}, {"uid": author_id}]}}},
                )
        except PyMongoError as e:
            logger.error(f"Error deleting reviews on {product_id}: {e}")
            raise StoreFailure("Failed to delete reviews", cause=e) from e

        logger.info(f"Deleted {owned} reviews by {author_id} on product {product_id}")
        return owned

    def list_reviews(self, product_id: str, page: int = 1, page_size: int = REVIEW_PAGE_SIZE) -> PageResult:
        """Reviews of a product, newest first."""
        if page < 1 or page_size < 1:
            raise ValidationFailure("Invalid pagination parameters: page and limit must be at least 1")
        try:
            product = Product.from_document(self._load_product(product_id))
        except PyMongoError as e:
            logger.error(f"Error fetching reviews for {product_id}: {e}")
            raise StoreFailure("Failed to fetch reviews", cause=e) from e

        # Stable sort keeps insertion order between reviews with equal dates
        reviews = sorted(product.reviews, key=_review_time, reverse=True)
        start = (page - 1) * page_size
        return PageResult(
            items=reviews[start : start + page_size],
            current_page=page,
            page_size=page_size,
            total_items=len(reviews),
        )


# Singleton instance
review_service = ReviewService()
