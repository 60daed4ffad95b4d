"""
Checkout service.

Turns the current cart into an order: validates the shipping address,
prices the cart, creates the order (or a mock order when the backend is
down) and empties the cart.
"""

from typing import Dict

import structlog

from ..auth import CurrentUser
from ..domain.entities import CartOwner
from ..exceptions import (
    AuthenticationException,
    BackendUnavailableException,
    ValidationException,
)
from ..models import Address, CheckoutQuote, CheckoutRequest, CheckoutResponse, OrderDraft
from ..utils import format_price
from .cart_service import CartService
from .order_service import OrderService

logger = structlog.get_logger(__name__)

REQUIRED_SHIPPING_FIELDS = {
    "full_name": "Full name is required",
    "phone": "Phone number is required",
    "address_line_1": "Address is required",
    "city": "City is required",
    "postal_code": "Postal code is required",
}


class CheckoutService:
    """
    Checkout orchestration.

    Attributes:
        cart_service: Cart of the customer
        order_service: Order creation
        free_delivery_threshold: Subtotal from which delivery is free
        delivery_fee_amount: Delivery fee below the threshold
    """

    def __init__(
        self,
        cart_service: CartService,
        order_service: OrderService,
        free_delivery_threshold: float = 15000,
        delivery_fee_amount: float = 1500,
    ):
        self.cart_service = cart_service
        self.order_service = order_service
        self.free_delivery_threshold = free_delivery_threshold
        self.delivery_fee_amount = delivery_fee_amount

    def delivery_fee(self, subtotal: float) -> float:
        """Delivery is free from the threshold upwards."""
        return 0 if subtotal >= self.free_delivery_threshold else self.delivery_fee_amount

    @staticmethod
    def validate_shipping(address: Address) -> Dict[str, str]:
        """
        Check the required shipping fields.

        Returns:
            Map of field name to error message; empty when the address is valid
        """
        errors = {}
        for field_name, message in REQUIRED_SHIPPING_FIELDS.items():
            if not (getattr(address, field_name) or "").strip():
                errors[field_name] = message
        return errors

    async def quote(self, owner: CartOwner) -> CheckoutQuote:
        """Price the current cart."""
        cart = await self.cart_service.get_cart(owner)
        fee = self.delivery_fee(cart.total)
        return CheckoutQuote(
            subtotal=cart.total,
            delivery_fee=fee,
            total=cart.total + fee,
            item_count=cart.count,
            free_delivery_threshold=self.free_delivery_threshold,
        )

    async def place_order(self, user: CurrentUser, request: CheckoutRequest) -> CheckoutResponse:
        """
        Place an order for the signed-in user's cart.

        Raises:
            AuthenticationException: If there is no signed-in user
            ValidationException: If the cart is empty or the shipping address is incomplete
        """
        if user is None:
            raise AuthenticationException("Sign in to place an order")

        owner = CartOwner.user(user.id)
        cart = await self.cart_service.get_cart(owner)
        if not cart.items:
            raise ValidationException("cart", None, "Cart is empty")

        errors = self.validate_shipping(request.shipping_address)
        if errors:
            raise ValidationException(
                "shipping_address", None, "Shipping address is incomplete", details={"fields": errors}
            )

        subtotal = cart.total
        fee = self.delivery_fee(subtotal)
        total_amount = subtotal + fee

        shipping = request.shipping_address.model_dump()
        if request.billing_address.same_as_shipping:
            billing = dict(shipping)
        else:
            billing = request.billing_address.model_dump(exclude={"same_as_shipping"})

        draft = OrderDraft(
            user_id=user.id,
            user_email=user.email,
            total_amount=total_amount,
            subtotal=subtotal,
            delivery_fee=fee,
            shipping_address=shipping,
            billing_address=billing,
            customer_notes=request.customer_notes,
            payment_method=request.payment_method.value,
        )

        result = await self.order_service.create_order(draft, cart.items)
        if not result.success:
            logger.warning("Falling back to mock order", user_id=user.id, error=result.error)
            result = self.order_service.create_mock_order(draft, cart.items)

        try:
            await self.cart_service.clear(owner)
        except BackendUnavailableException as e:
            logger.error("Failed to clear cart after checkout", user_id=user.id, error=e.message)

        message = f"Order {result.order_number} placed successfully, total {format_price(total_amount)}"
        if result.is_mock:
            message += "; it will be confirmed once our systems are back online"

        return CheckoutResponse(
            order_id=result.order_id,
            order_number=result.order_number,
            subtotal=subtotal,
            delivery_fee=fee,
            total_amount=total_amount,
            is_mock=result.is_mock,
            message=message,
        )
