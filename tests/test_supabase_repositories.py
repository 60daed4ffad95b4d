"""
Tests for the Supabase-backed repositories against a mocked client.

The query builder is a single MagicMock whose filter methods return
itself, so the calls made while building a request can be asserted.
"""

from unittest.mock import MagicMock, call

import httpx
import pytest
from postgrest.exceptions import APIError

from storefront.domain.entities import OrderStatus, ProductSort, SkillLevel
from storefront.exceptions import (
    BackendRejectedException,
    BackendUnavailableException,
    OrderNotFoundException,
)
from storefront.models import OrderSearchCriteria, ProductFilters
from storefront.repositories import (
    SupabaseCartRepository,
    SupabaseOrderRepository,
    SupabaseProductAdminRepository,
    SupabaseProductRepository,
    SupabaseProfileRepository,
)
from storefront.repositories.product_repository import product_select

BUILDER_METHODS = (
    "select",
    "eq",
    "or_",
    "ilike",
    "gte",
    "lte",
    "contains",
    "order",
    "limit",
    "insert",
    "update",
    "upsert",
    "delete",
)


def make_client(data=None):
    query = MagicMock()
    for name in BUILDER_METHODS:
        getattr(query, name).return_value = query
    query.execute.return_value = MagicMock(data=data)

    client = MagicMock()
    client.table.return_value = query
    client.rpc.return_value = query
    return client, query


@pytest.mark.asyncio
class TestErrorMapping:
    async def test_missing_client(self):
        with pytest.raises(BackendUnavailableException, match="not configured"):
            await SupabaseCartRepository(None).fetch("user-1")

    async def test_api_error(self):
        client, query = make_client()
        query.execute.side_effect = APIError({"message": "permission denied for table cart_items"})

        with pytest.raises(BackendUnavailableException) as exc_info:
            await SupabaseCartRepository(client).fetch("user-1")

        assert exc_info.value.operation == "fetch_cart"
        assert "permission denied" in exc_info.value.message

    async def test_transport_error(self):
        client, query = make_client()
        query.execute.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(BackendUnavailableException, match="connection refused"):
            await SupabaseOrderRepository(client).get("order-1")

    async def test_rpc_failure_envelope(self):
        client, _ = make_client({"success": False, "error": "SKU already exists"})

        with pytest.raises(BackendRejectedException) as exc_info:
            await SupabaseProductAdminRepository(client).add({"p_sku": "DUP"})

        assert exc_info.value.message == "SKU already exists"
        client.rpc.assert_called_once_with("add_product", {"p_sku": "DUP"})


@pytest.mark.asyncio
class TestProductRepository:
    async def test_search_builds_filtered_query(self):
        client, query = make_client([{"id": "1"}])
        filters = ProductFilters(
            search="guitar",
            category="string_instruments",
            brand="Yamaha",
            min_price=1000,
            max_price=50000,
            skill_level=SkillLevel.BEGINNER,
            sort_by=ProductSort.PRICE_HIGH,
        )

        rows = await SupabaseProductRepository(client).search(filters, limit=10)

        assert rows == [{"id": "1"}]
        client.table.assert_called_once_with("products")
        query.select.assert_called_once_with(product_select(filters))
        query.or_.assert_called_once_with("name.ilike.%guitar%,description.ilike.%guitar%")
        query.eq.assert_has_calls(
            [call("is_active", True), call("categories.slug", "string_instruments"), call("brands.name", "Yamaha")]
        )
        query.gte.assert_called_once_with("price", 1000)
        query.lte.assert_called_once_with("price", 50000)
        query.contains.assert_called_once_with("suitable_for", ["beginner"])
        query.order.assert_called_once_with("price", desc=True)
        query.limit.assert_called_once_with(10)

    async def test_zero_limit_is_sent(self):
        client, query = make_client([])

        await SupabaseProductRepository(client).search(ProductFilters(), limit=0)

        query.limit.assert_called_once_with(0)

    async def test_no_limit(self):
        client, query = make_client([])
        await SupabaseProductRepository(client).search(ProductFilters())
        query.limit.assert_not_called()

    async def test_get_missing_product(self):
        client, _ = make_client([])
        assert await SupabaseProductRepository(client).get("9") is None


@pytest.mark.asyncio
class TestCartRepository:
    async def test_upsert_uses_conflict_target(self):
        client, query = make_client([])

        await SupabaseCartRepository(client).upsert("user-1", [{"product_id": "1", "quantity": 2, "price": 10}])

        query.upsert.assert_called_once_with(
            [{"user_id": "user-1", "product_id": "1", "quantity": 2}], on_conflict="user_id,product_id"
        )

    async def test_upsert_nothing(self):
        client, query = make_client([])
        await SupabaseCartRepository(client).upsert("user-1", [])
        query.execute.assert_not_called()


@pytest.mark.asyncio
class TestOrderRepository:
    async def test_search_criteria(self):
        client, query = make_client([])
        criteria = OrderSearchCriteria(customer_name="nimal", city="Kandy", status=OrderStatus.SHIPPED)

        await SupabaseOrderRepository(client).search(criteria)

        client.table.assert_called_once_with("order_details")
        query.ilike.assert_has_calls(
            [call("customer_full_name", "%nimal%"), call("delivery_city", "%Kandy%")]
        )
        query.eq.assert_called_once_with("order_status", "shipped")
        query.order.assert_called_once_with("created_at", desc=True)

    async def test_update_missing_order(self):
        client, _ = make_client([])
        with pytest.raises(OrderNotFoundException):
            await SupabaseOrderRepository(client).update("missing", {"order_status": "shipped"})

    async def test_get_items(self):
        client, _ = make_client([{"order_items": [{"product_id": "1"}]}])
        assert await SupabaseOrderRepository(client).get_items("o-1") == [{"product_id": "1"}]


@pytest.mark.asyncio
class TestProfileAndAdminRepositories:
    async def test_profile_is_unwrapped(self):
        client, _ = make_client({"success": True, "user": {"id": "user-1", "full_name": "Nimal"}})

        profile = await SupabaseProfileRepository(client).get("user-1")

        assert profile == {"id": "user-1", "full_name": "Nimal"}
        client.rpc.assert_called_once_with("get_user_by_id", {"p_user_id": "user-1"})

    async def test_profile_update_prefixes_parameters(self):
        client, _ = make_client({"success": True})

        await SupabaseProfileRepository(client).update("user-1", {"city": "Galle"})

        client.rpc.assert_called_once_with("update_user_profile", {"p_user_id": "user-1", "p_city": "Galle"})

    async def test_admin_product_list(self):
        client, _ = make_client({"success": True, "products": [{"id": "p1"}]})
        assert await SupabaseProductAdminRepository(client).list_all() == [{"id": "p1"}]

        client, _ = make_client([{"id": "p2"}])
        assert await SupabaseProductAdminRepository(client).list_all() == [{"id": "p2"}]


def test_inner_joins_only_when_filtering():
    assert "categories!inner" not in product_select(ProductFilters())
    assert "categories!inner" in product_select(ProductFilters(category="electronic"))
    assert "brands!inner" in product_select(ProductFilters(brand="Roland"))
