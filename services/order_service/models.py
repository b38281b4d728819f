from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from shared.config.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        # Authoritative guard against identifier collisions between concurrent checkouts
        UniqueConstraint("tracking_number", name="uq_orders_tracking_number"),
        UniqueConstraint("order_number", name="uq_orders_order_number"),
        {"schema": "order_schema"},
    )

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(16), nullable=False)
    tracking_number = Column(String(20), nullable=False)
    user_ref = Column(String(64), nullable=True, index=True) # weak ref to auth_schema.users
    total_price = Column(Float, nullable=False)
    status = Column(String(32), nullable=False, default="pending", index=True)
    payment_status = Column(String(32), nullable=False, default="pending", index=True)

    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(64), nullable=False, default="")
    customer_address = Column(String(255), nullable=False, default="")
    customer_city = Column(String(128), nullable=False, default="")
    customer_state = Column(String(128), nullable=False, default="")
    customer_zip_code = Column(String(32), nullable=False, default="")

    # Flattened copies kept for the admin listing
    phone_no = Column(String(64), nullable=False, default="")
    address = Column(String(512), nullable=False, default="")

    shipping_country = Column(String(128), nullable=True)
    shipping_postal_code = Column(String(32), nullable=True)
    shipping_city = Column(String(128), nullable=True)
    shipping_address = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    items = relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = {"schema": "order_schema"}

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("order_schema.orders.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    product_ref = Column(String(64), nullable=False) # weak ref to product_schema.products
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)

    order = relationship("Order", back_populates="items")
