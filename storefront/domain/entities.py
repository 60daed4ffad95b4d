"""
Domain enums and constants for the storefront.

These values mirror the strings stored by the hosted backend, so members
compare equal to their raw string values.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List


class SkillLevel(str, Enum):
    """Player skill levels used for onboarding and recommendations."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    PROFESSIONAL = "professional"


class UserRole(str, Enum):
    """Account roles issued by the auth provider."""

    CUSTOMER = "customer"
    STAFF = "staff"
    ADMIN = "admin"

    @property
    def is_staff(self) -> bool:
        """Admins can do everything staff can."""
        return self in (UserRole.STAFF, UserRole.ADMIN)


class ProductCategory(str, Enum):
    """Catalog categories."""

    STRING_INSTRUMENTS = "string_instruments"
    WIND_INSTRUMENTS = "wind_instruments"
    PERCUSSION = "percussion"
    ELECTRONIC = "electronic"
    ACCESSORIES = "accessories"
    SHEET_MUSIC = "sheet_music"
    AUDIO_EQUIPMENT = "audio_equipment"


class ProductStatus(str, Enum):
    """Product availability states."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    OUT_OF_STOCK = "out_of_stock"


class OrderStatus(str, Enum):
    """Order fulfilment states."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment states of an order."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    """Payment methods offered at checkout."""

    CASH_ON_DELIVERY = "cash_on_delivery"
    BANK_TRANSFER = "bank_transfer"
    CARD = "card"


class ProductSort(str, Enum):
    """Sort orders for catalog listings."""

    NAME = "name"
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"
    NEWEST = "newest"
    POPULAR = "popular"


SRI_LANKAN_CITIES: List[str] = [
    "Colombo",
    "Kandy",
    "Galle",
    "Jaffna",
    "Negombo",
    "Anuradhapura",
    "Polonnaruwa",
    "Batticaloa",
    "Trincomalee",
    "Kurunegala",
    "Ratnapura",
    "Matara",
    "Kalutara",
    "Badulla",
    "Nuwara Eliya",
    "Hambantota",
]


def _answer(text: str, beginner: int, intermediate: int, professional: int) -> Dict[str, Any]:
    return {
        "text": text,
        "points": {
            "beginner": beginner,
            "intermediate": intermediate,
            "professional": professional,
        },
    }


ONBOARDING_QUESTIONS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "question": "How long have you been playing musical instruments?",
        "options": [
            _answer("I'm completely new to music", 5, 0, 0),
            _answer("Less than 1 year", 4, 1, 0),
            _answer("1-3 years", 2, 4, 0),
            _answer("3-7 years", 0, 3, 2),
            _answer("7+ years", 0, 1, 5),
        ],
    },
    {
        "id": 2,
        "question": "What best describes your musical goals?",
        "options": [
            _answer("Learn to play for fun and relaxation", 5, 1, 0),
            _answer("Play with friends and family", 3, 3, 0),
            _answer("Join a band or perform locally", 1, 4, 1),
            _answer("Pursue music professionally or teach", 0, 2, 4),
            _answer("Already performing/teaching professionally", 0, 0, 5),
        ],
    },
    {
        "id": 3,
        "question": "How comfortable are you with music theory?",
        "options": [
            _answer("I don't know any music theory", 5, 0, 0),
            _answer("I know basic notes and chords", 3, 2, 0),
            _answer("I understand scales and key signatures", 1, 4, 1),
            _answer("I'm comfortable with advanced theory", 0, 2, 3),
            _answer("I can analyze and compose complex pieces", 0, 0, 5),
        ],
    },
    {
        "id": 4,
        "question": "What's your experience with different instruments?",
        "options": [
            _answer("I've never played any instrument", 5, 0, 0),
            _answer("I play one instrument at a basic level", 4, 1, 0),
            _answer("I play 1-2 instruments reasonably well", 1, 4, 1),
            _answer("I play multiple instruments competently", 0, 2, 3),
            _answer("I'm proficient in many instruments", 0, 0, 5),
        ],
    },
    {
        "id": 5,
        "question": "What's your budget range for musical instruments?",
        "options": [
            _answer("Under LKR 25,000 (starter instruments)", 4, 1, 0),
            _answer("LKR 25,000 - 75,000 (quality beginner to intermediate)", 3, 3, 0),
            _answer("LKR 75,000 - 200,000 (professional quality)", 1, 3, 2),
            _answer("LKR 200,000 - 500,000 (high-end instruments)", 0, 1, 4),
            _answer("Over LKR 500,000 (premium/vintage instruments)", 0, 0, 5),
        ],
    },
]


@dataclass(frozen=True)
class CartOwner:
    """
    Owner of a cart or wishlist.

    Either a signed-in user or an anonymous browser session. Guest keys are
    prefixed so that a session id can never collide with a user id.
    """

    id: str
    is_guest: bool = False

    @classmethod
    def user(cls, user_id: str) -> "CartOwner":
        return cls(id=user_id, is_guest=False)

    @classmethod
    def guest(cls, session_id: str) -> "CartOwner":
        return cls(id=session_id, is_guest=True)

    @property
    def storage_key(self) -> str:
        return f"guest-{self.id}" if self.is_guest else self.id
