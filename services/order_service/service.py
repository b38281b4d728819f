import asyncio
from typing import Dict, Iterable, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth_service.models import User
from services.auth_service.repository import UserRepository
from services.product_service.models import Product
from services.product_service.repository import ProductRepository
from shared.config import settings
from shared.observability.metrics import (
    storefront_order_create_duration_seconds,
    storefront_order_create_failures_total,
    storefront_order_identifier_collisions_total,
    storefront_orders_created_total,
    storefront_tracking_lookups_total,
)

from .exceptions import NotFoundError, PersistenceError, UniqueConstraintViolation, ValidationError
from .identifiers import Identifiers, generate_identifiers, normalize_tracking_number
from .models import Order, OrderItem
from .repository import OrderRepository
from .schemas import CustomerInfo, OrderCreate, OrderCreated, ShippingInfoIn
from .status import OrderStatus, PaymentStatus, describe_status

logger = structlog.get_logger(__name__)


def join_address(*parts: Optional[str]) -> str:
    """Comma-joins the non-empty parts, e.g. ("1 Main St", "", "NY") -> "1 Main St, NY"."""
    return ", ".join(part.strip() for part in parts if part and part.strip())


def validate_order(data: OrderCreate) -> CustomerInfo:
    """
    Applies the strict checkout policy and returns the normalized customer.

    Raises ValidationError with field-level messages. Pydantic has already
    rejected malformed shapes; this covers what the shape alone allows.
    """
    if not data.items:
        raise ValidationError("no items provided", {"items": "At least one item is required"})

    info = data.customer_info
    errors = {}
    if info is None or not info.name:
        errors["customerInfo.name"] = "Customer name is required"
    if info is None or not info.email:
        errors["customerInfo.email"] = "Customer email is required"
    if errors:
        raise ValidationError("customer name/email required", errors)

    return CustomerInfo(
        name=info.name,
        email=str(info.email),
        phone=info.phone or "",
        address=info.address or "",
        city=info.city or "",
        state=info.state or "",
        zip_code=info.zip_code or "",
        country=info.country or "",
    )


def resolve_shipping(explicit: Optional[ShippingInfoIn], customer: CustomerInfo) -> Optional[dict]:
    if explicit is not None:
        return {
            "country": explicit.country,
            "postalCode": explicit.postal_code,
            "city": explicit.city,
            "address": explicit.address,
        }
    if not customer.address:
        return None
    return {
        "country": customer.country or "Unknown",
        "postalCode": customer.zip_code,
        "city": customer.city,
        "address": customer.address,
    }


def build_order(
    data: OrderCreate,
    customer: CustomerInfo,
    identifiers: Identifiers,
    user_ref: Optional[str] = None,
) -> Order:
    total = data.total_amount
    if total is None:
        total = sum(item.quantity * item.unit_price for item in data.items)
    shipping = resolve_shipping(data.shipping_info, customer) or {}
    payment_status = data.payment_status or PaymentStatus.PENDING

    order = Order(
        order_number=identifiers.order_number,
        tracking_number=identifiers.tracking_number,
        user_ref=user_ref,
        total_price=float(total),
        status=OrderStatus.PENDING.value,
        payment_status=PaymentStatus(payment_status).value,
        customer_name=customer.name,
        customer_email=customer.email,
        customer_phone=customer.phone,
        customer_address=customer.address,
        customer_city=customer.city,
        customer_state=customer.state,
        customer_zip_code=customer.zip_code,
        phone_no=customer.phone,
        address=join_address(customer.address, customer.city, customer.state, customer.zip_code),
        shipping_country=shipping.get("country"),
        shipping_postal_code=shipping.get("postalCode"),
        shipping_city=shipping.get("city"),
        shipping_address=shipping.get("address"),
    )
    order.items = [
        OrderItem(
            position=position,
            product_ref=item.product_ref,
            quantity=item.quantity,
            unit_price=item.unit_price,
        )
        for position, item in enumerate(data.items)
    ]
    return order


def customer_info_of(order: Order) -> dict:
    return {
        "name": order.customer_name,
        "email": order.customer_email,
        "phone": order.customer_phone or "",
        "address": order.customer_address or "",
        "city": order.customer_city or "",
        "state": order.customer_state or "",
        "zipCode": order.customer_zip_code or "",
    }


def shipping_info_of(order: Order) -> Optional[dict]:
    if order.shipping_country is None and order.shipping_address is None:
        return None
    return {
        "country": order.shipping_country,
        "postalCode": order.shipping_postal_code,
        "city": order.shipping_city,
        "address": order.shipping_address,
    }


def project_order(order: Order, products: Dict[str, Product], user: Optional[User] = None) -> dict:
    """Client-facing view of an order, as returned by the tracking endpoint."""
    lines = []
    for item in order.items:
        product = products.get(item.product_ref)
        lines.append({
            "productRef": item.product_ref,
            "quantity": item.quantity,
            "price": item.unit_price,
            # A product removed from the catalog leaves the line without details
            "product": {
                "id": product.id,
                "name": product.name,
                "image": product.image,
                "price": product.price,
            } if product else None,
        })

    label, step = describe_status(order.status)
    return {
        "id": order.id,
        "orderNumber": order.order_number,
        "trackingNumber": order.tracking_number,
        "status": order.status,
        "statusLabel": label,
        "statusStep": step,
        "paymentStatus": order.payment_status,
        "totalPrice": order.total_price,
        "createdAt": order.created_at.isoformat() if order.created_at else None,
        "customerInfo": customer_info_of(order),
        "products": lines,
        "shippingInfo": shipping_info_of(order),
        "email": order.customer_email or settings.FALLBACK_CUSTOMER_EMAIL,
        "userRef": order.user_ref,
        "user": {"id": user.id, "email": user.email} if user else None,
    }


def summarize_order(order: Order) -> dict:
    return {
        "id": order.id,
        "orderNumber": order.order_number,
        "trackingNumber": order.tracking_number,
        "status": order.status,
        "paymentStatus": order.payment_status,
        "totalPrice": order.total_price,
        "createdAt": order.created_at.isoformat() if order.created_at else None,
        "customerInfo": customer_info_of(order),
        "itemCount": len(order.items),
    }


class OrderService:
    @staticmethod
    async def create_order(
        db: AsyncSession,
        data: OrderCreate,
        user_ref: Optional[str] = None,
        max_attempts: Optional[int] = None,
    ) -> OrderCreated:
        """
        Validates the checkout payload and persists a new pending order.

        The order and tracking numbers are regenerated and the insert retried
        whenever the store reports one of them as taken, up to max_attempts.
        """
        try:
            customer = validate_order(data)
        except ValidationError as exc:
            storefront_order_create_failures_total.labels(reason="validation").inc()
            logger.info("order_rejected", error=exc.message, fields=sorted(exc.errors))
            raise

        max_attempts = max_attempts or settings.ORDER_ID_MAX_ATTEMPTS
        # A signed-in customer cannot place orders for another user id
        owner = user_ref or data.user_ref or (data.customer_info.user_id if data.customer_info else None)

        with storefront_order_create_duration_seconds.time():
            for attempt in range(1, max_attempts + 1):
                identifiers = generate_identifiers()
                order = build_order(data, customer, identifiers, owner)
                try:
                    order = await OrderRepository.create_order(db, order)
                except UniqueConstraintViolation as exc:
                    storefront_order_identifier_collisions_total.inc()
                    logger.warning(
                        "order_identifier_collision",
                        field=exc.field,
                        attempt=attempt,
                        max_attempts=max_attempts,
                        order_number=identifiers.order_number,
                    )
                    # Order numbers only change with the clock
                    await asyncio.sleep(0.001 * attempt)
                    continue
                except PersistenceError:
                    storefront_order_create_failures_total.labels(reason="persistence").inc()
                    logger.exception("order_persist_failed", attempt=attempt)
                    raise

                storefront_orders_created_total.labels(payment_status=order.payment_status).inc()
                logger.info(
                    "order_created",
                    order_id=order.id,
                    order_number=order.order_number,
                    tracking_number=order.tracking_number,
                    payment_status=order.payment_status,
                    attempts=attempt,
                )
                return OrderCreated(
                    order_id=order.id,
                    tracking_number=order.tracking_number,
                    order_number=order.order_number,
                )

        storefront_order_create_failures_total.labels(reason="persistence").inc()
        logger.error("order_persist_failed", reason="identifiers_exhausted", attempts=max_attempts)
        raise PersistenceError(f"no unique order identifiers after {max_attempts} attempts")

    @staticmethod
    async def get_by_tracking_number(db: AsyncSession, tracking_number: Optional[str]) -> dict:
        candidate = normalize_tracking_number(tracking_number)
        if candidate is None:
            storefront_tracking_lookups_total.labels(outcome="malformed").inc()
            logger.info("order_lookup_miss", reason="malformed")
            raise NotFoundError(tracking_number)

        try:
            order = await OrderRepository.find_by_tracking_number(db, candidate)
            if order is None:
                storefront_tracking_lookups_total.labels(outcome="not_found").inc()
                logger.info("order_lookup_miss", reason="unknown", tracking_number=candidate)
                raise NotFoundError(candidate)

            products = await ProductRepository.get_products_by_ids(db, _refs(order.items))
            user = await UserRepository.get_by_id(db, order.user_ref) if order.user_ref else None
        except SQLAlchemyError as exc:
            logger.exception("order_lookup_failed", tracking_number=candidate)
            raise PersistenceError("order lookup failed") from exc

        storefront_tracking_lookups_total.labels(outcome="found").inc()
        return project_order(order, products, user)

    @staticmethod
    async def list_orders(
        db: AsyncSession,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> dict:
        try:
            orders, total = await OrderRepository.list_orders(
                db, status=status, payment_status=payment_status, search=search, limit=limit, offset=offset
            )
        except SQLAlchemyError as exc:
            logger.exception("order_listing_failed", status=status, payment_status=payment_status)
            raise PersistenceError("order listing failed") from exc
        return {"data": [summarize_order(order) for order in orders], "total": total}


def _refs(items: Iterable[OrderItem]):
    return {item.product_ref for item in items}
