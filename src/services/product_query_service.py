"""Product listing service: filtering, sorting and cursor pagination over MongoDB."""

import logging
from typing import Any

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from src.db.mongodb_client import mongo_client
from src.errors import NotFound, QueryFailure
from src.models.products import Product
from src.models.queries import PageResult, QueryParams

logger = logging.getLogger(__name__)


class ProductQueryService:
    def __init__(self):
        self.collection_name = "products"

    def _collection(self):
        return mongo_client.get_collection(self.collection_name)

    def _build_filter(self, params: QueryParams) -> dict[str, Any]:
        """Equality filter applied by the store."""
        return {"category": params.category} if params.category else {}

    def _build_sort(self, params: QueryParams) -> list[tuple[str, int]]:
        """Sort specification. `_id` always closes it so positions are unique."""
        if params.sort_field:
            direction = DESCENDING if params.sort_direction == "desc" else ASCENDING
            return [(params.sort_field, direction), ("_id", ASCENDING)]
        return [("_id", ASCENDING)]

    def _after_position(self, base_filter: dict[str, Any], sort: list[tuple[str, int]], last_doc: dict[str, Any]):
        """
        Filter matching documents strictly after `last_doc` in `sort` order.

        Mirrors a "start after this document" cursor on a store without offsets.
        """
        if len(sort) == 1:
            position = {"_id": {"$gt": last_doc["_id"]}}
        else:
            field, direction = sort[0]
            value = last_doc.get(field)
            if value is None and direction == ASCENDING:
                # Missing values sort first and `$gt: null` matches nothing
                after_value = {field: {"$ne": None}}
            else:
                operator = "$lt" if direction == DESCENDING else "$gt"
                after_value = {field: {operator: value}}
            position = {
                "$or": [
                    after_value,
                    {field: value, "_id": {"$gt": last_doc["_id"]}},
                ]
            }
        if not base_filter:
            return position
        return {"$and": [base_filter, position]}

    def list_products(self, params: QueryParams) -> PageResult:
        """
        List products for one page of the catalogue.

        Args:
            params: Normalized query parameters

        Returns:
            PageResult of Product items
        """
        try:
            if params.search_term:
                return self._search_products(params)
            return self._paginate_products(params)
        except PyMongoError as e:
            logger.error(f"Error fetching products: {e}")
            raise QueryFailure("Failed to fetch products", cause=e) from e

    def _search_products(self, params: QueryParams) -> PageResult:
        """
        Substring search on title.

        The store only offers prefix matches, so the category-filtered set is
        scanned in full and filtered here before slicing out the page.
        """
        cursor = self._collection().find(self._build_filter(params), sort=self._build_sort(params))
        needle = params.search_term.lower()
        matches = [doc for doc in cursor if needle in str(doc.get("title", "")).lower()]
        logger.info(f"Search '{params.search_term}' matched {len(matches)} products")

        page_docs = matches[params.offset : params.offset + params.page_size]
        return PageResult(
            items=[Product.from_document(doc) for doc in page_docs],
            current_page=params.page,
            page_size=params.page_size,
            total_items=len(matches),
        )

    def _paginate_products(self, params: QueryParams) -> PageResult:
        """Store-native query, walking to the requested page with a position cursor."""
        collection = self._collection()
        base_filter = self._build_filter(params)
        sort = self._build_sort(params)
        docs: list[dict[str, Any]] = []

        if params.page == 1:
            docs = list(collection.find(base_filter, sort=sort, limit=params.page_size))
        else:
            # Walk past the previous pages to find the last-seen document
            projection = {field: 1 for field, _ in sort}
            previous = list(collection.find(base_filter, projection, sort=sort, limit=params.offset))
            # A short walk means the requested page is past the end
            if len(previous) == params.offset:
                page_filter = self._after_position(base_filter, sort, previous[-1])
                docs = list(collection.find(page_filter, sort=sort, limit=params.page_size))

        total_items = collection.count_documents(base_filter)
        return PageResult(
            items=[Product.from_document(doc) for doc in docs],
            current_page=params.page,
            page_size=params.page_size,
            total_items=total_items,
        )

    def get_product(self, product_id: str) -> Product:
        """Fetch a single product by id."""
        try:
            doc = self._collection().find_one({"_id": {"$in": product_id_candidates(product_id)}})
        except PyMongoError as e:
            logger.error(f"Error fetching product {product_id}: {e}")
            raise QueryFailure("Failed to fetch product", cause=e) from e
        if not doc:
            raise NotFound("Product not found")
        return Product.from_document(doc)


def product_id_candidates(product_id: str) -> list[Any]:
    """Ids are stored as strings, but seeded documents may use ObjectIds."""
    candidates: list[Any] = [product_id]
    if ObjectId.is_valid(product_id):
        candidates.append(ObjectId(product_id))
    return candidates


# Singleton instance
product_query_service = ProductQueryService()
