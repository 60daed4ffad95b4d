"""Domain enums and constants."""

from .entities import (
    CartOwner,
    ONBOARDING_QUESTIONS,
    SRI_LANKAN_CITIES,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ProductCategory,
    ProductSort,
    ProductStatus,
    SkillLevel,
    UserRole,
)

__all__ = [
    "CartOwner",
    "ONBOARDING_QUESTIONS",
    "SRI_LANKAN_CITIES",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "ProductCategory",
    "ProductSort",
    "ProductStatus",
    "SkillLevel",
    "UserRole",
]
