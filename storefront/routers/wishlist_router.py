"""Wishlist router."""

from fastapi import APIRouter, Depends, status

from ..auth import get_cart_owner
from ..dependencies import get_wishlist_service
from ..domain.entities import CartOwner
from ..models import ErrorResponse, WishlistItemCreate, WishlistResponse
from ..services.wishlist_service import WishlistService

router = APIRouter(prefix="/api/wishlist", tags=["Wishlist"])


@router.get("", response_model=WishlistResponse, summary="Get wishlist")
async def get_wishlist(
    owner: CartOwner = Depends(get_cart_owner),
    wishlist: WishlistService = Depends(get_wishlist_service),
):
    return await wishlist.list(owner)


@router.post(
    "",
    response_model=WishlistResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Product not found", "model": ErrorResponse},
        409: {"description": "Already in wishlist", "model": ErrorResponse},
    },
    summary="Add to wishlist",
)
async def add_to_wishlist(
    item: WishlistItemCreate,
    owner: CartOwner = Depends(get_cart_owner),
    wishlist: WishlistService = Depends(get_wishlist_service),
):
    return await wishlist.add(owner, item.product_id)


@router.delete("/{product_id}", response_model=WishlistResponse, summary="Remove from wishlist")
async def remove_from_wishlist(
    product_id: str,
    owner: CartOwner = Depends(get_cart_owner),
    wishlist: WishlistService = Depends(get_wishlist_service),
):
    return await wishlist.remove(owner, product_id)
