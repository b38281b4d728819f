from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config import settings
from shared.config.database import get_db
from shared.security.dependencies import get_optional_user, verify_internal_api_key
from shared.security.rate_limiter import limiter

from .exceptions import NotFoundError, PersistenceError, ValidationError
from .schemas import OrderCreate
from .service import OrderService
from .status import OrderStatus, PaymentStatus

# Operator endpoints need the internal key; checkout and tracking are public
router = APIRouter(dependencies=[Depends(verify_internal_api_key)])
public_router = APIRouter()

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "order", "status": "running"}


@public_router.post("/create", status_code=201)
async def create_order(
    payload: OrderCreate,
    db: AsyncSession = Depends(get_db),
    user_id: Optional[str] = Depends(get_optional_user),
):
    try:
        created = await OrderService.create_order(db, payload, user_ref=user_id)
    except ValidationError as e:
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": e.message, "errors": e.errors},
        )
    except PersistenceError:
        # Details are in the service log; the client only learns it failed
        return JSONResponse(status_code=500, content={"success": False, "error": "Failed to create order"})

    return {
        "success": True,
        "orderId": created.order_id,
        "trackingNumber": created.tracking_number,
        "orderNumber": created.order_number,
        "message": "Order created successfully",
    }


@public_router.get("/tracking/{tracking_number}")
@limiter.limit(settings.TRACKING_RATE_LIMIT)
async def track_order(request: Request, tracking_number: str, db: AsyncSession = Depends(get_db)):
    try:
        order = await OrderService.get_by_tracking_number(db, tracking_number)
    except NotFoundError:
        # Unknown and malformed numbers look the same from outside
        return JSONResponse(status_code=404, content={"success": False, "error": "Order not found"})
    except PersistenceError:
        return JSONResponse(status_code=500, content={"success": False, "error": "Failed to fetch order"})
    return {"success": True, "order": order}


@router.get("/")
async def list_orders(
    status: Optional[OrderStatus] = Query(default=None),
    payment_status: Optional[PaymentStatus] = Query(default=None, alias="paymentStatus"),
    search: Optional[str] = Query(default=None, max_length=100),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    try:
        page = await OrderService.list_orders(
            db,
            status=status.value if status else None,
            payment_status=payment_status.value if payment_status else None,
            search=search.strip() if search else None,
            limit=limit,
            offset=offset,
        )
    except PersistenceError:
        return JSONResponse(status_code=500, content={"success": False, "error": "Failed to fetch orders"})
    return {"success": True, **page}
