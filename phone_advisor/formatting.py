"""Display helpers for prices."""

from __future__ import annotations


def format_price(price: int) -> str:
    """Format a price with currency symbol, e.g. 1299 -> '$1,299'."""
    return f"${price:,}"


def monthly_payment(price: int, months: int = 24) -> str:
    """Monthly financing amount, e.g. 799 over 24 months -> '$33.29/mo'."""
    if months <= 0:
        raise ValueError("months must be positive")
    return f"${price / months:.2f}/mo"
