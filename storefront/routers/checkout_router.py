"""Checkout router."""

from fastapi import APIRouter, Depends, status

from ..auth import CurrentUser, get_cart_owner, get_current_user
from ..dependencies import get_checkout_service
from ..domain.entities import CartOwner
from ..models import CheckoutQuote, CheckoutRequest, CheckoutResponse, ErrorResponse
from ..services.checkout_service import CheckoutService

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])


@router.get("/quote", response_model=CheckoutQuote, summary="Price the cart")
async def checkout_quote(
    owner: CartOwner = Depends(get_cart_owner),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """Subtotal, delivery fee and total for the current cart."""
    return await checkout.quote(owner)


@router.post(
    "",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"description": "Unauthorized", "model": ErrorResponse},
        422: {"description": "Empty cart or incomplete address", "model": ErrorResponse},
    },
    summary="Place order",
)
async def place_order(
    request: CheckoutRequest,
    user: CurrentUser = Depends(get_current_user),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """
    Place an order for the signed-in user's cart.

    When the backend cannot store the order it is kept as a mock order and
    ``is_mock`` is set.
    """
    return await checkout.place_order(user, request)
