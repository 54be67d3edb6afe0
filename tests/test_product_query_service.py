"""Tests for ProductQueryService."""

from unittest.mock import MagicMock, patch

import pytest
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from src.errors import NotFound, QueryFailure, ValidationFailure
from src.models.queries import QueryParams
from src.services.product_query_service import ProductQueryService


def make_doc(i: int, **overrides):
    doc = {
        "_id": f"p-{i:03d}",
        "title": f"Product {i}",
        "category": "food",
        "price": float(i),
        "rating": 4.0,
        "stock": 10,
        "tags": [],
        "images": [],
        "reviews": [],
    }
    doc.update(overrides)
    return doc


class TestProductQueryService:
    @pytest.fixture
    def query_service(self):
        return ProductQueryService()

    @pytest.fixture
    def mock_collection(self):
        with patch("src.services.product_query_service.mongo_client") as mock_mongo:
            collection = MagicMock()
            mock_mongo.get_collection.return_value = collection
            yield collection

    def test_first_page_uses_default_order(self, query_service, mock_collection):
        """Test first page without filters."""
        mock_collection.find.return_value = [make_doc(i) for i in range(1, 21)]
        mock_collection.count_documents.return_value = 45

        result = query_service.list_products(QueryParams())

        assert len(result.items) == 20
        assert result.current_page == 1
        assert result.total_items == 45
        assert result.total_pages == 3
        mock_collection.find.assert_called_once_with({}, sort=[("_id", ASCENDING)], limit=20)
        mock_collection.count_documents.assert_called_once_with({})

    def test_category_filter(self, query_service, mock_collection):
        """Test category equality filter is pushed to the store."""
        mock_collection.find.return_value = [make_doc(1)]
        mock_collection.count_documents.return_value = 1

        result = query_service.list_products(QueryParams(category="food"))

        assert result.items[0].category == "food"
        args, kwargs = mock_collection.find.call_args
        assert args[0] == {"category": "food"}
        mock_collection.count_documents.assert_called_once_with({"category": "food"})

    def test_sort_by_price_descending(self, query_service, mock_collection):
        """Test sort field and direction reach the store with an _id tie-break."""
        mock_collection.find.return_value = [make_doc(2), make_doc(1)]
        mock_collection.count_documents.return_value = 2

        query_service.list_products(QueryParams(sort_field="price", sort_direction="desc"))

        _, kwargs = mock_collection.find.call_args
        assert kwargs["sort"] == [("price", DESCENDING), ("_id", ASCENDING)]

    def test_unknown_sort_field_uses_default_order(self, query_service, mock_collection):
        """Test unsupported sort fields are ignored."""
        mock_collection.find.return_value = []
        mock_collection.count_documents.return_value = 0

        query_service.list_products(QueryParams.from_request(sort_by="title", order="desc"))

        _, kwargs = mock_collection.find.call_args
        assert kwargs["sort"] == [("_id", ASCENDING)]

    def test_later_page_starts_after_last_seen_document(self, query_service, mock_collection):
        """Test page 3 walks past the first two pages with a position cursor."""
        previous = [make_doc(i) for i in range(1, 41)]
        page = [make_doc(i) for i in range(41, 46)]
        mock_collection.find.side_effect = [previous, page]
        mock_collection.count_documents.return_value = 45

        result = query_service.list_products(QueryParams(page=3))

        assert [p.id for p in result.items] == [f"p-{i:03d}" for i in range(41, 46)]
        assert result.current_page == 3
        first_call, second_call = mock_collection.find.call_args_list
        assert first_call.args == ({}, {"_id": 1})
        assert first_call.kwargs["limit"] == 40
        assert second_call.args == ({"_id": {"$gt": "p-040"}},)
        assert second_call.kwargs["limit"] == 20

    def test_later_page_with_sort_and_category(self, query_service, mock_collection):
        """Test the position cursor combines with filters and sort keys."""
        previous = [make_doc(1, price=3.0), make_doc(2, price=5.0)]
        mock_collection.find.side_effect = [previous, [make_doc(3, price=7.0)]]
        mock_collection.count_documents.return_value = 3

        params = QueryParams(page=2, page_size=2, category="food", sort_field="price")
        query_service.list_products(params)

        first_call, second_call = mock_collection.find.call_args_list
        assert first_call.args == ({"category": "food"}, {"price": 1, "_id": 1})
        assert second_call.args[0] == {
            "$and": [
                {"category": "food"},
                {"$or": [{"price": {"$gt": 5.0}}, {"price": 5.0, "_id": {"$gt": "p-002"}}]},
            ]
        }

    def test_descending_cursor_uses_less_than(self, query_service, mock_collection):
        """Test descending order continues with smaller values."""
        mock_collection.find.side_effect = [[make_doc(9, rating=4.5)], []]
        mock_collection.count_documents.return_value = 1

        query_service.list_products(QueryParams(page=2, page_size=1, sort_field="rating", sort_direction="desc"))

        second_call = mock_collection.find.call_args_list[1]
        assert second_call.args[0] == {"$or": [{"rating": {"$lt": 4.5}}, {"rating": 4.5, "_id": {"$gt": "p-009"}}]}

    def test_ascending_cursor_after_missing_value(self, query_service, mock_collection):
        """Test a last-seen document without the sort field continues with the rest."""
        last_seen = make_doc(1)
        del last_seen["rating"]
        mock_collection.find.side_effect = [[last_seen], [make_doc(2, rating=3.5)]]
        mock_collection.count_documents.return_value = 2

        result = query_service.list_products(QueryParams(page=2, page_size=1, sort_field="rating"))

        assert [p.id for p in result.items] == ["p-002"]
        second_call = mock_collection.find.call_args_list[1]
        assert second_call.args[0] == {"$or": [{"rating": {"$ne": None}}, {"rating": None, "_id": {"$gt": "p-001"}}]}

    def test_page_past_the_end_is_empty(self, query_service, mock_collection):
        """Test a page beyond the last document returns no items."""
        mock_collection.find.return_value = [make_doc(i) for i in range(1, 6)]
        mock_collection.count_documents.return_value = 5

        result = query_service.list_products(QueryParams(page=4, page_size=5))

        assert result.items == []
        assert result.total_pages == 1
        mock_collection.find.assert_called_once()

    def test_page_never_exceeds_page_size(self, query_service, mock_collection):
        """Test items are bounded by page size and currentPage echoes page."""
        mock_collection.find.return_value = [make_doc(i) for i in range(1, 6)]
        mock_collection.count_documents.return_value = 12

        result = query_service.list_products(QueryParams(page_size=5))

        assert len(result.items) <= 5
        assert result.current_page == 1

    def test_search_filters_titles_case_insensitively(self, query_service, mock_collection):
        """Test substring search within a category."""
        mock_collection.find.return_value = [
            make_doc(1, title="Margherita PIZZA"),
            make_doc(2, title="Chicken Burger"),
            make_doc(3, title="pizza bianca"),
            make_doc(4, title="Deep dish Pizza pie"),
        ]

        result = query_service.list_products(QueryParams(search_term="pizza", category="food"))

        assert [p.id for p in result.items] == ["p-001", "p-003", "p-004"]
        assert all("pizza" in p.title.lower() for p in result.items)
        assert all(p.category == "food" for p in result.items)
        assert result.total_items == 3
        args, _ = mock_collection.find.call_args
        assert args[0] == {"category": "food"}
        mock_collection.count_documents.assert_not_called()

    def test_search_paginates_after_filtering(self, query_service, mock_collection):
        """Test search results are sliced after the substring filter."""
        mock_collection.find.return_value = [make_doc(i, title=f"Pizza {i}") for i in range(1, 6)]

        result = query_service.list_products(QueryParams(search_term="pizza", page=2, page_size=2))

        assert [p.title for p in result.items] == ["Pizza 3", "Pizza 4"]
        assert result.total_items == 5
        assert result.total_pages == 3

    def test_store_failure_raises_query_failure(self, query_service, mock_collection):
        """Test store errors surface as QueryFailure with the cause attached."""
        error = PyMongoError("connection refused")
        mock_collection.find.side_effect = error

        with pytest.raises(QueryFailure) as exc_info:
            query_service.list_products(QueryParams())

        assert exc_info.value.cause is error

    def test_malformed_document_fails_fast(self, query_service, mock_collection):
        """Test documents with a bad shape are rejected."""
        mock_collection.find.return_value = [{"_id": "p-001", "title": "No price", "category": "food"}]
        mock_collection.count_documents.return_value = 1

        with pytest.raises(ValidationFailure):
            query_service.list_products(QueryParams())

    def test_get_product(self, query_service, mock_collection):
        """Test fetching a product by id."""
        mock_collection.find_one.return_value = make_doc(7, title="Mango Smoothie")

        product = query_service.get_product("p-007")

        assert product.id == "p-007"
        assert product.title == "Mango Smoothie"
        mock_collection.find_one.assert_called_once_with({"_id": {"$in": ["p-007"]}})

    def test_get_product_not_found(self, query_service, mock_collection):
        """Test fetching a missing product."""
        mock_collection.find_one.return_value = None

        with pytest.raises(NotFound) as exc_info:
            query_service.get_product("missing")

        assert exc_info.value.message == "Product not found"
