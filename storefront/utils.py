"""
Formatting and small helper functions shared across services.
"""

import random
import re
import string
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from .domain.entities import SkillLevel

_SLUG_STRIP = re.compile(r"[^\w ]+")
_SLUG_SPACES = re.compile(r" +")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def format_price(amount: Union[int, float, Decimal, str, None]) -> str:
    """
    Format an amount as Sri Lankan rupees without decimals.

    Example:
        >>> format_price(45000)
        'LKR 45,000'
    """
    value = Decimal(str(amount or 0)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}LKR {abs(int(value)):,}"


def format_date(value: Union[str, date, datetime]) -> str:
    """Format a date, datetime or ISO-8601 string as ``19 August 2025``."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return f"{value.day} {value.strftime('%B')} {value.year}"


def slugify(text: str) -> str:
    """Lower-case the text, drop punctuation and join words with dashes."""
    text = _SLUG_STRIP.sub("", text.lower())
    return _SLUG_SPACES.sub("-", text)


def generate_sku(
    category: str,
    brand: Optional[str],
    name: str,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Generate a product SKU of the form ``CAT-BRA-NAME-XXXX``.

    Args:
        category: Category name or slug; its first three characters are used
        brand: Brand name, ``GEN`` is used when empty
        name: Product name; its first four alphanumerics are used
        rng: Random source for the suffix (tests pass a seeded instance)

    Returns:
        Upper-case SKU string
    """
    rng = rng or random.Random()
    category_code = category[:3].upper()
    brand_code = brand[:3].upper() if brand else "GEN"
    name_code = _NON_ALNUM.sub("", name)[:4].upper()
    random_code = "".join(rng.choices(string.ascii_uppercase + string.digits, k=4))
    return f"{category_code}-{brand_code}-{name_code}-{random_code}"


def calculate_skill_level(responses: Iterable[Mapping[str, Any]]) -> SkillLevel:
    """
    Derive a skill level from onboarding responses.

    Each response carries ``points_beginner``, ``points_intermediate`` and
    ``points_professional``. Ties resolve towards the lower level.
    """
    scores: Dict[SkillLevel, int] = {level: 0 for level in SkillLevel}
    for response in responses:
        scores[SkillLevel.BEGINNER] += response.get("points_beginner") or 0
        scores[SkillLevel.INTERMEDIATE] += response.get("points_intermediate") or 0
        scores[SkillLevel.PROFESSIONAL] += response.get("points_professional") or 0

    max_score = max(scores.values())
    for level in (SkillLevel.BEGINNER, SkillLevel.INTERMEDIATE):
        if scores[level] == max_score:
            return level
    return SkillLevel.PROFESSIONAL


def now_ms() -> int:
    """Current time as milliseconds since the epoch."""
    return int(datetime.now().timestamp() * 1000)


def make_order_number(prefix: str, timestamp_ms: Optional[int] = None) -> str:
    """Build a human-facing order number from the last six digits of a timestamp."""
    timestamp_ms = now_ms() if timestamp_ms is None else timestamp_ms
    return f"{prefix}-{str(timestamp_ms)[-6:]}"
