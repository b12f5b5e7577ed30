# services/pricing.py
"""Money and numbering rules for bookings.

Totals are always derived from the line items; client supplied ``subtotal``,
``itemsTotal`` and ``grandTotal`` values are never trusted.
"""
import random
import string
import time
from typing import Iterable, Mapping, Optional

_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def generate_booking_no() -> str:
    """``BK`` + epoch millis + 5 random uppercase alphanumerics."""
    suffix = "".join(random.choices(_SUFFIX_ALPHABET, k=5))
    return f"BK{time.time_ns() // 1_000_000}{suffix}"


def generate_transaction_ref() -> str:
    return f"TX{time.time_ns() // 1_000_000}"


def calculate_item_subtotal(item: Mapping) -> float:
    adult_total = (item.get("qtyAdults") or 0) * (item.get("priceAdult") or 0)
    child_total = (item.get("qtyChildren") or 0) * (item.get("priceChild") or 0)
    options_total = sum((option.get("price") or 0) for option in item.get("options") or [])
    return adult_total + child_total + options_total


def calculate_amounts(items: Iterable[Mapping], overrides: Optional[Mapping] = None) -> dict:
    overrides = overrides or {}
    items_total = sum(calculate_item_subtotal(item) for item in items)
    discount = overrides.get("discount") or 0
    tax = overrides.get("tax") or 0
    fee = overrides.get("fee") or 0
    return {
        "itemsTotal": items_total,
        "discount": discount,
        "tax": tax,
        "fee": fee,
        "grandTotal": items_total - discount + tax + fee,
    }


def price_items(items: Iterable[Mapping]) -> list:
    return [{**item, "subtotal": calculate_item_subtotal(item)} for item in items]
