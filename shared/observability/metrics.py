from prometheus_client import Counter, Histogram

# Business Metrics
storefront_orders_created_total = Counter(
    "storefront_orders_created_total",
    "Total orders persisted",
    ["payment_status"] # Labels: 'pending', 'paid', 'failed', 'completed'
)

storefront_order_create_failures_total = Counter(
    "storefront_order_create_failures_total",
    "Order creations that did not persist",
    ["reason"] # Labels: 'validation', 'persistence'
)

storefront_order_identifier_collisions_total = Counter(
    "storefront_order_identifier_collisions_total",
    "Inserts rejected by the unique order/tracking number constraints"
)

storefront_order_create_duration_seconds = Histogram(
    "storefront_order_create_duration_seconds",
    "Order creation duration in seconds"
)

storefront_tracking_lookups_total = Counter(
    "storefront_tracking_lookups_total",
    "Tracking number lookups",
    ["outcome"] # Labels: 'found', 'not_found', 'malformed'
)
