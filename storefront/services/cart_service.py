"""
Cart service.

Guest carts live in the local document store. Signed-in carts live in the
backend's ``cart_items`` table, with a local copy under the user's key that
is used whenever the backend cannot be reached. When a guest signs in,
their local cart is merged into the server-side cart.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import structlog

from ..domain.entities import CartOwner
from ..exceptions import BackendUnavailableException, CartItemNotFoundException, ValidationException
from ..metrics import track_cart_merge, track_cart_operation, track_fallback
from ..models import CartItemView, CartResponse
from ..repositories.cart_repository import ICartRepository, LocalCartRepository
from .catalog_service import CatalogService

logger = structlog.get_logger(__name__)

REMOTE = "remote"
LOCAL = "local"


def _find_line(lines: List[Dict[str, Any]], product_id: str) -> Optional[Dict[str, Any]]:
    for line in lines:
        if str(line.get("product_id")) == str(product_id):
            return line
    return None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class CartService:
    """
    Cart operations for guests and signed-in users.

    Attributes:
        cart_repo: Server-side cart repository
        local_repo: Local cart repository for guests and fallbacks
        catalog: Catalog used to price and describe cart lines
        default_item_price: Price of a line whose product is unknown
    """

    def __init__(
        self,
        cart_repo: ICartRepository,
        local_repo: LocalCartRepository,
        catalog: CatalogService,
        default_item_price: float = 15000,
    ):
        self.cart_repo = cart_repo
        self.local_repo = local_repo
        self.catalog = catalog
        self.default_item_price = default_item_price

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def totals(items: List[CartItemView]) -> float:
        """Sum of price times quantity over the cart lines."""
        return sum(item.price * item.quantity for item in items)

    @staticmethod
    def count(items: List[CartItemView]) -> int:
        """Number of units in the cart."""
        return sum(item.quantity for item in items)

    async def _load_lines(self, owner: CartOwner) -> Tuple[List[Dict[str, Any]], str]:
        """Load raw cart lines and report where they came from."""
        if owner.is_guest:
            return self.local_repo.load(owner.storage_key), LOCAL

        try:
            return await self.cart_repo.fetch(owner.id), REMOTE
        except BackendUnavailableException as e:
            logger.warning("Cart fetch failed, using local cart", user_id=owner.id, error=e.message)
            track_fallback("get_cart")
            return self.local_repo.load(owner.storage_key), LOCAL

    async def _enrich(self, lines: List[Dict[str, Any]]) -> List[CartItemView]:
        items = []
        for line in lines:
            product_id = str(line.get("product_id"))
            product = line.get("products") or await self.catalog.find_product(product_id)

            price = None
            if product and product.get("price") is not None:
                price = product["price"]
            elif line.get("price") is not None:
                price = line["price"]
            if price is None:
                price = self.default_item_price

            quantity = int(line.get("quantity") or 0)
            items.append(
                CartItemView(
                    product_id=product_id,
                    quantity=quantity,
                    price=price,
                    line_total=price * quantity,
                    product=product,
                    user_id=line.get("user_id"),
                    added_at=line.get("added_at") or line.get("created_at"),
                )
            )
        return items

    async def _build_response(self, lines: List[Dict[str, Any]], source: str) -> CartResponse:
        items = await self._enrich(lines)
        return CartResponse(items=items, total=self.totals(items), count=self.count(items), source=source)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def get_cart(self, owner: CartOwner) -> CartResponse:
        """
        Get the enriched cart of an owner.

        Signed-in users are served from the backend; if it cannot be
        reached their local copy is returned instead.
        """
        lines, source = await self._load_lines(owner)
        return await self._build_response(lines, source)

    async def add_item(self, owner: CartOwner, product_id: str, quantity: int = 1) -> CartResponse:
        """
        Add units of a product, incrementing an existing line.

        Raises:
            ValidationException: If quantity is below 1
        """
        if quantity < 1:
            raise ValidationException("quantity", quantity, "Quantity must be at least 1")

        product_id = str(product_id)

        if not owner.is_guest:
            try:
                remote_lines = await self.cart_repo.fetch(owner.id)
                existing = _find_line(remote_lines, product_id)
                new_quantity = (existing["quantity"] if existing else 0) + quantity
                await self.cart_repo.upsert(owner.id, [{"product_id": product_id, "quantity": new_quantity}])
                track_cart_operation("add", True)
                logger.info("Added to cart", user_id=owner.id, product_id=product_id, quantity=new_quantity)
                return await self.get_cart(owner)
            except BackendUnavailableException as e:
                logger.warning("Remote add to cart failed, writing local cart", user_id=owner.id, error=e.message)
                track_cart_operation("add", False)
                track_fallback("add_to_cart")

        lines = self.local_repo.load(owner.storage_key)
        existing = _find_line(lines, product_id)
        if existing:
            existing["quantity"] = int(existing.get("quantity") or 0) + quantity
        else:
            line = {"product_id": product_id, "quantity": quantity, "added_at": _now_iso()}
            if not owner.is_guest:
                line["user_id"] = owner.id
            lines.append(line)
        self.local_repo.save(owner.storage_key, lines)

        if owner.is_guest:
            track_cart_operation("add", True)
        return await self._build_response(lines, LOCAL)

    async def update_item(self, owner: CartOwner, product_id: str, quantity: int) -> CartResponse:
        """
        Set the quantity of a line; zero or less removes it.

        Raises:
            CartItemNotFoundException: If the product is not in the cart
        """
        lines, source = await self._load_lines(owner)
        line = _find_line(lines, product_id)
        if line is None:
            raise CartItemNotFoundException(product_id)

        if quantity <= 0:
            return await self.remove_item(owner, product_id)

        if source == REMOTE:
            await self.cart_repo.upsert(owner.id, [{"product_id": str(product_id), "quantity": quantity}])
            track_cart_operation("update", True)
            return await self.get_cart(owner)

        line["quantity"] = quantity
        self.local_repo.save(owner.storage_key, lines)
        track_cart_operation("update", True)
        return await self._build_response(lines, LOCAL)

    async def remove_item(self, owner: CartOwner, product_id: str) -> CartResponse:
        """
        Remove a line from the cart.

        Raises:
            CartItemNotFoundException: If the product is not in the cart
        """
        lines, source = await self._load_lines(owner)
        if _find_line(lines, product_id) is None:
            raise CartItemNotFoundException(product_id)

        if source == REMOTE:
            await self.cart_repo.delete_item(owner.id, str(product_id))
            track_cart_operation("remove", True)
            return await self.get_cart(owner)

        remaining = [line for line in lines if str(line.get("product_id")) != str(product_id)]
        self.local_repo.save(owner.storage_key, remaining)
        track_cart_operation("remove", True)
        return await self._build_response(remaining, LOCAL)

    async def clear(self, owner: CartOwner) -> None:
        """
        Empty the cart.

        The local copy is removed even when the remote delete fails.

        Raises:
            BackendUnavailableException: If a signed-in user's remote cart cannot be cleared
        """
        try:
            if not owner.is_guest:
                await self.cart_repo.clear(owner.id)
        finally:
            self.local_repo.remove(owner.storage_key)
        track_cart_operation("clear", True)
        logger.info("Cart cleared", owner=owner.id, guest=owner.is_guest)

    async def merge_on_login(self, user_id: str, guest_session: str) -> Tuple[CartResponse, bool]:
        """
        Merge a guest cart into the signed-in user's server-side cart.

        Local lines win over server lines for the same product; server
        lines for other products are kept. Local lines are the guest cart
        plus the user's own local copy left by an earlier outage, with guest
        lines taking precedence. Both local carts are removed only after the
        merged set has been written. If any remote step fails, the local
        lines become the user's local cart.

        Args:
            user_id: User who just signed in
            guest_session: Session id of the guest cart

        Returns:
            Tuple of the resulting cart and whether the remote merge succeeded
        """
        guest = CartOwner.guest(guest_session)
        user = CartOwner.user(user_id)
        guest_items = self.local_repo.load(guest.storage_key)
        guest_ids = {str(item.get("product_id")) for item in guest_items}
        local_items = guest_items + [
            item
            for item in self.local_repo.load(user.storage_key)
            if str(item.get("product_id")) not in guest_ids
        ]

        if not local_items:
            cart = await self.get_cart(user)
            return cart, cart.source == REMOTE

        try:
            db_items = await self.cart_repo.fetch(user_id)

            local_ids = {str(item.get("product_id")) for item in local_items}
            merged_items = [
                {"product_id": str(item["product_id"]), "quantity": int(item.get("quantity") or 1)}
                for item in local_items
            ]
            merged_items.extend(
                {"product_id": str(item["product_id"]), "quantity": item["quantity"]}
                for item in db_items
                if str(item.get("product_id")) not in local_ids
            )

            await self.cart_repo.upsert(user_id, merged_items)
            self.local_repo.remove(guest.storage_key)
            self.local_repo.remove(user.storage_key)
        except BackendUnavailableException as e:
            logger.warning(
                "Cart merge failed, keeping local cart",
                user_id=user_id,
                items=len(local_items),
                error=e.message,
            )
            track_cart_merge(False)
            track_fallback("merge_cart")

            user_lines = [dict(item, user_id=user_id) for item in local_items]
            self.local_repo.save(user.storage_key, user_lines)
            return await self._build_response(user_lines, LOCAL), False

        track_cart_merge(True)
        logger.info("Cart merged", user_id=user_id, items=len(merged_items))
        return await self.get_cart(user), True
