from enum import Enum
from typing import Optional, Tuple


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    COMPLETED = "completed"


# Progress bar shown on the tracking page, in order
TRACKING_STEPS = (
    (OrderStatus.PENDING.value, "Order Placed"),
    (OrderStatus.PROCESSING.value, "Processing"),
    (OrderStatus.SHIPPED.value, "Shipped"),
    (OrderStatus.DELIVERED.value, "Delivered"),
)

_ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def describe_status(value) -> Tuple[str, Optional[int]]:
    """
    Returns (label, step) for a fulfillment status.

    step is the index into TRACKING_STEPS, or None for cancelled orders and
    for values this service does not know about. Never raises: statuses are
    written by an external fulfillment process and may be anything.
    """
    if isinstance(value, Enum):
        value = value.value
    raw = str(value or "").strip()
    key = raw.lower()
    for index, (step_key, label) in enumerate(TRACKING_STEPS):
        if key == step_key:
            return label, index
    if not raw:
        return "Unknown", None
    return raw[0].upper() + raw[1:], None


def can_transition(current, new) -> bool:
    """Whether a fulfillment status may move from current to new. Unknown values never may."""
    try:
        current, new = OrderStatus(current), OrderStatus(new)
    except ValueError:
        return False
    return new in _ALLOWED_TRANSITIONS[current]
