# Test configuration
import os
import tempfile
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

# Set test environment variables BEFORE importing storefront modules
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_SERVICE_KEY"] = ""
os.environ["SUPABASE_ANON_KEY"] = ""
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret-for-testing-only-32chars"
os.environ["LOCAL_STORE_DIR"] = tempfile.mkdtemp(prefix="storefront-test-")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DEBUG"] = "false"

import jwt
import pytest

from storefront.config import settings
from storefront.exceptions import BackendUnavailableException, OrderNotFoundException
from storefront.local_store import MemoryLocalStore
from storefront.models import OrderSearchCriteria
from storefront.repositories import (
    ICartRepository,
    IOrderRepository,
    IProductAdminRepository,
    IProfileRepository,
    LocalCartRepository,
    LocalWishlistRepository,
    MockOrderRepository,
    SampleProductRepository,
)
from storefront.services import (
    CartService,
    CatalogService,
    CheckoutService,
    OrderService,
    OrderViewer,
    ProductAdminService,
    ProfileService,
    WishlistService,
)


class Switchable:
    """Mixin for fakes that can be told to behave like an unreachable backend."""

    failing = False

    def _check(self, operation: str) -> None:
        if self.failing:
            raise BackendUnavailableException(operation, "connection refused")


class FakeProductRepository(Switchable, SampleProductRepository):
    """Remote catalog stand-in answering from the sample data."""

    async def search(self, filters, limit=None):
        self._check("search_products")
        return await super().search(filters, limit)

    async def get(self, product_id):
        self._check("get_product")
        return await super().get(product_id)

    async def list_categories(self):
        self._check("list_categories")
        return await super().list_categories()

    async def list_brands(self):
        self._check("list_brands")
        return await super().list_brands()


class FakeCartRepository(Switchable, ICartRepository):
    """In-memory ``cart_items`` table."""

    def __init__(self):
        self.rows: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.upserts: List[List[Dict[str, Any]]] = []

    async def fetch(self, user_id):
        self._check("fetch_cart")
        return [dict(row) for row in self.rows.get(user_id, {}).values()]

    async def upsert(self, user_id, lines):
        self._check("upsert_cart")
        self.upserts.append([dict(line) for line in lines])
        user_rows = self.rows.setdefault(user_id, {})
        for line in lines:
            user_rows[str(line["product_id"])] = {
                "user_id": user_id,
                "product_id": str(line["product_id"]),
                "quantity": line["quantity"],
                "created_at": datetime.now(timezone.utc).isoformat(),
            }

    async def delete_item(self, user_id, product_id):
        self._check("delete_cart_item")
        self.rows.get(user_id, {}).pop(str(product_id), None)

    async def clear(self, user_id):
        self._check("clear_cart")
        self.rows.pop(user_id, None)


class FakeOrderRepository(Switchable, IOrderRepository):
    """In-memory ``order_details`` table."""

    def __init__(self):
        self.records: List[Dict[str, Any]] = []

    async def insert(self, record):
        self._check("insert_order")
        stored = dict(record, id=str(uuid.uuid4()), created_at=datetime.now(timezone.utc).isoformat())
        self.records.append(stored)
        time.sleep(0.001)
        return stored

    async def get(self, order_id):
        self._check("get_order")
        for record in self.records:
            if record["id"] == order_id:
                return record
        return None

    async def update(self, order_id, fields):
        self._check("update_order")
        record = await self.get(order_id)
        if record is None:
            raise OrderNotFoundException(order_id)
        record.update(fields)
        return record

    async def search(self, criteria: Optional[OrderSearchCriteria] = None):
        self._check("search_orders")
        criteria = criteria or OrderSearchCriteria()

        def contains(value, term):
            return term is None or term.lower() in (value or "").lower()

        result = []
        for r in self.records:
            if criteria.user_id and r.get("user_id") != criteria.user_id:
                continue
            if criteria.status and r.get("order_status") != criteria.status.value:
                continue
            if criteria.created_after and r.get("created_at") < criteria.created_after.isoformat():
                continue
            if not (
                contains(r.get("order_number"), criteria.order_number)
                and contains(r.get("customer_full_name"), criteria.customer_name)
                and contains(r.get("customer_phone"), criteria.customer_phone)
                and contains(r.get("delivery_city"), criteria.city)
            ):
                continue
            result.append(r)
        return sorted(result, key=lambda r: r.get("created_at") or "", reverse=True)

    async def get_items(self, order_id):
        self._check("get_order_items")
        record = await self.get(order_id)
        return (record or {}).get("order_items") or []

    async def summary_rows(self):
        self._check("order_statistics")
        return [
            {k: r.get(k) for k in ("order_status", "total_amount", "created_at")}
            for r in self.records
        ]


class FakeProfileRepository(Switchable, IProfileRepository):
    """Profiles and onboarding answers kept in dicts."""

    def __init__(self):
        self.profiles: Dict[str, Dict[str, Any]] = {}
        self.onboarding: Dict[str, List[Dict[str, Any]]] = {}

    async def get(self, user_id):
        self._check("get_user_by_id")
        return self.profiles.get(user_id)

    async def update(self, user_id, fields):
        self._check("update_user_profile")
        self.profiles.setdefault(user_id, {"id": user_id}).update(fields)
        return {"success": True, "user": self.profiles[user_id]}

    async def save_onboarding_responses(self, user_id, responses):
        self._check("save_onboarding_responses")
        self.onboarding.setdefault(user_id, []).extend(responses)


class FakeProductAdminRepository(Switchable, IProductAdminRepository):
    """Records stored-function calls."""

    def __init__(self, products=None):
        self.products = products or []
        self.calls: List[tuple] = []

    async def list_all(self):
        self._check("get_all_products_admin")
        return list(self.products)

    async def add(self, params):
        self._check("add_product")
        self.calls.append(("add_product", params))
        return {"success": True, "product_id": "new-id"}

    async def update(self, params):
        self._check("update_product")
        self.calls.append(("update_product", params))
        return {"success": True}

    async def delete(self, product_id):
        self._check("delete_product")
        self.calls.append(("delete_product", {"p_product_id": product_id}))
        return {"success": True, "message": "Product deleted successfully"}


@pytest.fixture
def store():
    return MemoryLocalStore()


@pytest.fixture
def product_repo():
    return FakeProductRepository()


@pytest.fixture
def catalog(product_repo):
    return CatalogService(product_repo, cache_ttl=60)


@pytest.fixture
def cart_repo():
    return FakeCartRepository()


@pytest.fixture
def local_cart_repo(store):
    return LocalCartRepository(store)


@pytest.fixture
def cart_service(cart_repo, local_cart_repo, catalog):
    return CartService(cart_repo, local_cart_repo, catalog, default_item_price=15000)


@pytest.fixture
def order_repo():
    return FakeOrderRepository()


@pytest.fixture
def mock_order_repo(store):
    return MockOrderRepository(store)


@pytest.fixture
def order_service(order_repo, mock_order_repo):
    return OrderService(order_repo, mock_order_repo, order_number_prefix="MUS")


@pytest.fixture
def order_viewer(order_repo):
    return OrderViewer(order_repo, recent_days=30)


@pytest.fixture
def checkout_service(cart_service, order_service):
    return CheckoutService(cart_service, order_service, free_delivery_threshold=15000, delivery_fee_amount=1500)


@pytest.fixture
def wishlist_service(store, catalog):
    return WishlistService(LocalWishlistRepository(store), catalog)


@pytest.fixture
def profile_repo():
    return FakeProfileRepository()


@pytest.fixture
def profile_service(profile_repo):
    return ProfileService(profile_repo)


@pytest.fixture
def product_admin_repo():
    return FakeProductAdminRepository(
        products=[
            {"id": "p1", "name": "Yamaha FG830", "sku": "STR-YAM-FG83-A1B2", "category_id": "1"},
            {"id": "p2", "name": "Roland FP-30X", "sku": "ELE-ROL-FP30-C3D4", "category_id": "4"},
            {"id": "p3", "name": "Tabla Set", "sku": "TRA-GEN-TABL-E5F6", "category": {"id": "6"}},
        ]
    )


@pytest.fixture
def product_admin_service(product_admin_repo, catalog):
    return ProductAdminService(product_admin_repo, catalog)


@pytest.fixture
def make_token():
    """Mint bearer tokens the way the auth provider does."""

    def _make(user_id="user-1", email="user@example.com", role=None, expires_in=3600, audience=None):
        payload = {
            "sub": user_id,
            "email": email,
            "aud": audience or settings.JWT_AUDIENCE,
            "role": "authenticated",
            "exp": int(time.time()) + expires_in,
        }
        if role:
            payload["app_metadata"] = {"role": role}
        return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    return _make
