"""Pydantic models for request/response validation."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .domain.entities import OrderStatus, PaymentMethod, ProductSort, SkillLevel


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class ProductFilters(BaseModel):
    """Catalog listing filters."""

    search: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, description="Category slug")
    brand: Optional[str] = Field(None, description="Brand name")
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    skill_level: Optional[SkillLevel] = None
    sort_by: ProductSort = ProductSort.NAME


class ProductListResponse(BaseModel):
    """Catalog listing."""

    products: List[Dict[str, Any]]
    total: int
    source: str = Field(..., description="'remote' or 'sample'")


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------


class CartItemCreate(BaseModel):
    """Request model for adding a product to the cart."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(default=1, ge=1, le=100)


class CartItemUpdate(BaseModel):
    """Request model for changing a line quantity; zero or less removes the line."""

    quantity: int = Field(..., le=100)


class CartItemView(BaseModel):
    """A cart line enriched with product information."""

    product_id: str
    quantity: int
    price: float
    line_total: float
    product: Optional[Dict[str, Any]] = None
    user_id: Optional[str] = None
    added_at: Optional[str] = None


class CartResponse(BaseModel):
    """Cart contents with totals."""

    items: List[CartItemView]
    total: float
    count: int
    source: str = Field(..., description="'remote' or 'local'")


class CartMergeRequest(BaseModel):
    """Request model for merging a guest cart into the signed-in user's cart."""

    guest_session: str = Field(..., min_length=1, max_length=128)


class CartMergeResponse(BaseModel):
    """Result of a guest cart merge."""

    cart: CartResponse
    merged: bool


# ---------------------------------------------------------------------------
# Checkout and orders
# ---------------------------------------------------------------------------


class Address(BaseModel):
    """Postal address; required fields are checked at checkout."""

    full_name: str = ""
    phone: str = ""
    address_line_1: str = ""
    address_line_2: str = ""
    city: str = ""
    postal_code: str = ""


class BillingAddress(Address):
    """Billing address, optionally copied from the shipping address."""

    same_as_shipping: bool = True


class CheckoutRequest(BaseModel):
    """Request model for placing an order."""

    shipping_address: Address
    billing_address: BillingAddress = Field(default_factory=BillingAddress)
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    customer_notes: Optional[str] = Field(None, max_length=1000)


class CheckoutQuote(BaseModel):
    """Totals the customer would pay for the current cart."""

    subtotal: float
    delivery_fee: float
    total: float
    item_count: int
    free_delivery_threshold: float


class CheckoutResponse(BaseModel):
    """Result of placing an order."""

    order_id: str
    order_number: str
    subtotal: float
    delivery_fee: float
    total_amount: float
    is_mock: bool = False
    message: str


class OrderDraft(BaseModel):
    """Order information handed from checkout to the order service."""

    user_id: Optional[str] = None
    user_email: Optional[str] = None
    total_amount: float
    subtotal: Optional[float] = None
    delivery_fee: float = 0
    shipping_address: Dict[str, Any] = Field(default_factory=dict)
    billing_address: Dict[str, Any] = Field(default_factory=dict)
    customer_notes: Optional[str] = None
    payment_method: str = PaymentMethod.CASH_ON_DELIVERY.value


class OrderResult(BaseModel):
    """Outcome of an order creation attempt."""

    success: bool
    order_id: Optional[str] = None
    order_number: str
    message: str
    is_mock: bool = False
    error: Optional[str] = None


class OrderSearchCriteria(BaseModel):
    """Order search filters; text fields match case-insensitive substrings."""

    order_number: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    status: Optional[OrderStatus] = None
    city: Optional[str] = None
    user_id: Optional[str] = None
    created_after: Optional[datetime] = None

    def is_empty(self) -> bool:
        return not any(self.model_dump().values())


class OrderStatusUpdate(BaseModel):
    """Request model for a staff status update."""

    status: OrderStatus
    admin_notes: Optional[str] = Field(None, max_length=2000)
    tracking_number: Optional[str] = Field(None, max_length=100)


class OrderCustomer(BaseModel):
    """Customer block of an order view."""

    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None


class OrderView(BaseModel):
    """Order as shown on the order history and back office pages."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    order_number: Optional[str] = None
    user_id: Optional[str] = None
    customer: OrderCustomer = Field(default_factory=OrderCustomer)
    shipping_address: Optional[Dict[str, Any]] = None
    billing_address: Optional[Dict[str, Any]] = None
    total_amount: float = 0
    subtotal: Optional[float] = None
    delivery_fee: Optional[float] = None
    status: str = OrderStatus.PENDING.value
    payment_status: Optional[str] = None
    payment_method: Optional[str] = None
    customer_notes: Optional[str] = None
    admin_notes: Optional[str] = None
    tracking_number: Optional[str] = None
    estimated_delivery_date: Optional[str] = None
    actual_delivery_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    items: List[Dict[str, Any]] = Field(default_factory=list)
    total_items: int = 0
    is_mock: bool = False


class OrderStatistics(BaseModel):
    """Aggregate order figures for the back office."""

    total_orders: int
    total_revenue: float
    status_counts: Dict[str, int]
    recent_orders: int


# ---------------------------------------------------------------------------
# Wishlist
# ---------------------------------------------------------------------------


class WishlistItemCreate(BaseModel):
    """Request model for adding a product to the wishlist."""

    product_id: str = Field(..., min_length=1)


class WishlistEntry(BaseModel):
    """Wishlist entry with product information."""

    product_id: str
    added_at: Optional[str] = None
    product: Optional[Dict[str, Any]] = None


class WishlistResponse(BaseModel):
    """Wishlist contents."""

    items: List[WishlistEntry]
    count: int


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


class ProfileUpdate(BaseModel):
    """Profile fields a customer may change; omitted fields are left untouched."""

    full_name: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=30)
    city: Optional[str] = Field(None, max_length=100)
    age: Optional[int] = Field(None, ge=5, le=120)
    skill_level: Optional[SkillLevel] = None
    onboarding_completed: Optional[bool] = None


class OnboardingAnswer(BaseModel):
    """One answered onboarding question."""

    question_id: int
    answer: str
    points_beginner: int = 0
    points_intermediate: int = 0
    points_professional: int = 0


class OnboardingRequest(BaseModel):
    """Request model for completing onboarding."""

    responses: List[OnboardingAnswer] = Field(default_factory=list)
    skill_level: Optional[SkillLevel] = None


# ---------------------------------------------------------------------------
# Product administration
# ---------------------------------------------------------------------------


class ProductForm(BaseModel):
    """Back office product form."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    price: float = Field(..., ge=0)
    category_id: str
    brand_id: Optional[str] = None
    sku: str = ""
    suitable_for: List[SkillLevel] = Field(default_factory=list)
    features: str = Field("", description="Comma-separated feature list")
    warranty_months: int = Field(default=12, ge=0)
    quantity_available: int = Field(default=0, ge=0)
    image_url: Optional[str] = None


# ---------------------------------------------------------------------------
# Generic
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str
    error_code: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str
    timestamp: str
    backend_configured: bool
