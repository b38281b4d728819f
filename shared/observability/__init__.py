from .setup import setup_observability, configure_logging, configure_metrics
from .metrics import (
    storefront_orders_created_total,
    storefront_order_create_failures_total,
    storefront_order_identifier_collisions_total,
    storefront_order_create_duration_seconds,
    storefront_tracking_lookups_total
)
