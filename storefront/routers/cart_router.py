"""
Cart router.

Signed-in users are identified by their bearer token; guests send an
``X-Guest-Session`` header.
"""

import structlog
from fastapi import APIRouter, Depends, status

from ..auth import CurrentUser, get_cart_owner, get_current_user
from ..dependencies import get_cart_service
from ..domain.entities import CartOwner
from ..models import (
    CartItemCreate,
    CartItemUpdate,
    CartMergeRequest,
    CartMergeResponse,
    CartResponse,
    ErrorResponse,
    MessageResponse,
)
from ..services.cart_service import CartService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


@router.get("", response_model=CartResponse, summary="Get cart")
async def get_cart(
    owner: CartOwner = Depends(get_cart_owner),
    cart_service: CartService = Depends(get_cart_service),
):
    """Get the cart with product details and totals."""
    return await cart_service.get_cart(owner)


@router.post(
    "/items",
    response_model=CartResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add to cart",
)
async def add_item(
    item: CartItemCreate,
    owner: CartOwner = Depends(get_cart_owner),
    cart_service: CartService = Depends(get_cart_service),
):
    return await cart_service.add_item(owner, item.product_id, item.quantity)


@router.patch(
    "/items/{product_id}",
    response_model=CartResponse,
    responses={404: {"description": "Item not in cart", "model": ErrorResponse}},
    summary="Change quantity",
)
async def update_item(
    product_id: str,
    update: CartItemUpdate,
    owner: CartOwner = Depends(get_cart_owner),
    cart_service: CartService = Depends(get_cart_service),
):
    """Set the quantity of a line; zero or less removes it."""
    return await cart_service.update_item(owner, product_id, update.quantity)


@router.delete(
    "/items/{product_id}",
    response_model=CartResponse,
    responses={404: {"description": "Item not in cart", "model": ErrorResponse}},
    summary="Remove from cart",
)
async def remove_item(
    product_id: str,
    owner: CartOwner = Depends(get_cart_owner),
    cart_service: CartService = Depends(get_cart_service),
):
    return await cart_service.remove_item(owner, product_id)


@router.delete("", response_model=MessageResponse, summary="Clear cart")
async def clear_cart(
    owner: CartOwner = Depends(get_cart_owner),
    cart_service: CartService = Depends(get_cart_service),
):
    await cart_service.clear(owner)
    return MessageResponse(message="Cart cleared")


@router.post("/merge", response_model=CartMergeResponse, summary="Merge guest cart on login")
async def merge_cart(
    request: CartMergeRequest,
    user: CurrentUser = Depends(get_current_user),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Merge the guest cart of ``guest_session`` into the signed-in user's cart.

    ``merged`` is false when the backend could not be reached and the
    guest items were kept as the user's local cart.
    """
    cart, merged = await cart_service.merge_on_login(user.id, request.guest_session)
    return CartMergeResponse(cart=cart, merged=merged)
