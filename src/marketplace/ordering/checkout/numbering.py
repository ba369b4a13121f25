"""Order numbers: ``ORD-YYYYMMDD-`` plus eight uppercase hex digits."""

import secrets
from datetime import UTC, datetime


def generate_order_number(today=None) -> str:
    today = today or datetime.now(UTC)
    return f"ORD-{today.strftime('%Y%m%d')}-{secrets.token_hex(4).upper()}"


def allocate_order_number(is_taken, today=None) -> str:
    """Draw numbers until ``is_taken(number)`` says one is free."""
    while True:
        number = generate_order_number(today)
        if not is_taken(number):
            return number
