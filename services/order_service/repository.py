from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, MultipleResultsFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import PersistenceError, UniqueConstraintViolation
from .models import Order

_UNIQUE_FIELDS = ("tracking_number", "order_number")


def _conflicting_field(exc: IntegrityError) -> Optional[str]:
    # Postgres reports the constraint name (uq_orders_tracking_number),
    # SQLite the column (orders.tracking_number); both contain the field.
    message = str(exc.orig)
    for field in _UNIQUE_FIELDS:
        if field in message:
            return field
    return None


class OrderRepository:
    @staticmethod
    async def create_order(db: AsyncSession, order: Order) -> Order:
        """Inserts the order and its items in one transaction. Nothing is kept on failure."""
        db.add(order)
        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            field = _conflicting_field(exc)
            if field:
                raise UniqueConstraintViolation(field) from exc
            raise PersistenceError("order insert rejected by the store") from exc
        except SQLAlchemyError as exc:
            await db.rollback()
            raise PersistenceError("order insert failed") from exc
        return order

    @staticmethod
    async def find_by_tracking_number(db: AsyncSession, tracking_number: str) -> Optional[Order]:
        result = await db.execute(select(Order).where(Order.tracking_number == tracking_number))
        try:
            return result.scalars().one_or_none()
        except MultipleResultsFound:
            # Cannot happen with the unique constraint in place; treat as a miss
            return None

    @staticmethod
    async def list_orders(
        db: AsyncSession,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Order], int]:
        filters = []
        if status:
            filters.append(Order.status == status)
        if payment_status:
            filters.append(Order.payment_status == payment_status)
        if search:
            pattern = f"%{search}%"
            filters.append(or_(
                Order.order_number.ilike(pattern),
                Order.tracking_number.ilike(pattern),
                Order.customer_name.ilike(pattern),
                Order.customer_email.ilike(pattern),
            ))

        total = await db.scalar(select(func.count()).select_from(Order).where(*filters))
        result = await db.execute(
            select(Order)
            .where(*filters)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), total or 0
