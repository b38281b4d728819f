"""
Order and tracking number generation.

Both numbers share the last 8 digits of the epoch-millisecond clock. The
tracking number adds 4 random base-36 characters; the order number does not,
so two orders in the same millisecond window collide on it. The database's
unique constraints are the real guard and the caller retries on conflict.
"""
import re
import secrets
import string
import time
from typing import NamedTuple, Optional

TRACKING_PREFIX = "TRK"
ORDER_PREFIX = "ORD"
TIMESTAMP_DIGITS = 8
RANDOM_CHARS = 4

_BASE36 = string.digits + string.ascii_uppercase

TRACKING_NUMBER_RE = re.compile(r"^TRK\d{8}[A-Z0-9]{4}$")
ORDER_NUMBER_RE = re.compile(r"^ORD\d{8}$")


class Identifiers(NamedTuple):
    tracking_number: str
    order_number: str


def timestamp_part(now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return str(now_ms)[-TIMESTAMP_DIGITS:].zfill(TIMESTAMP_DIGITS)


def random_part(length: int = RANDOM_CHARS) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_identifiers(now_ms: Optional[int] = None) -> Identifiers:
    stamp = timestamp_part(now_ms)
    return Identifiers(
        tracking_number=f"{TRACKING_PREFIX}{stamp}{random_part()}",
        order_number=f"{ORDER_PREFIX}{stamp}",
    )


def normalize_tracking_number(value: Optional[str]) -> Optional[str]:
    """Upper-cases and trims user input. Returns None if it cannot be a tracking number."""
    if not value:
        return None
    candidate = value.strip().upper()
    if not TRACKING_NUMBER_RE.match(candidate):
        return None
    return candidate
