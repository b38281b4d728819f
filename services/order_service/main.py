from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shared.config.database import Database
from shared.observability import configure_logging, setup_observability
from shared.security.rate_limiter import limiter

# Import to register with Base
from services.auth_service.models import User  # noqa: F401
from services.product_service.models import Product  # noqa: F401
from .models import Order, OrderItem  # noqa: F401
from .router import router, public_router


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Same envelope as the service's own ValidationError, one message per field."""
    errors = {}
    for error in exc.errors():
        loc = [part for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        # Unparseable JSON reports only a character offset
        if all(isinstance(part, int) for part in loc):
            key = "body"
        else:
            key = ".".join(str(part) for part in loc)
        errors[key] = error.get("msg", "Invalid value")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Validation failed", "errors": errors},
    )


def create_order_app(db: Database, observability: bool = True, metrics: bool = True) -> FastAPI:
    """
    Builds the order service around an already constructed Database.

    Schema creation and engine disposal are tied to this app's startup and
    shutdown; when mounted under another app, the parent owns them instead,
    and should pass metrics=False and serve /metrics itself.
    """
    order_app = FastAPI(title="Order Service", version="1.0.0")
    order_app.state.db = db
    order_app.state.limiter = limiter

    # --- OBSERVABILITY BOOTSTRAP ---
    if observability:
        setup_observability(order_app, "order_service", metrics=metrics)
    else:
        configure_logging()

    order_app.add_exception_handler(RequestValidationError, request_validation_handler)
    order_app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    order_app.include_router(public_router)
    order_app.include_router(router)

    @order_app.on_event("startup")
    async def startup_event():
        await db.create_all()

    @order_app.on_event("shutdown")
    async def shutdown_event():
        await db.dispose()

    return order_app
