"""
Shared fixtures for the order service tests.

Each test gets its own SQLite file, so orders never leak between tests.
Postgres schema names are mapped away since SQLite has no schemas.
"""
import httpx
import pytest

from shared.config.database import Database, SCHEMAS
from shared.security.api_key import INTERNAL_API_KEY
from shared.security.rate_limiter import limiter
from services.order_service.main import create_order_app


@pytest.fixture
async def database(tmp_path):
    db = Database(
        f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}",
        execution_options={"schema_translate_map": {schema: None for schema in SCHEMAS}},
    )
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.sessionmaker() as db_session:
        yield db_session


@pytest.fixture
def order_app(database):
    limiter.reset()
    return create_order_app(database, observability=False)


@pytest.fixture
async def client(order_app):
    transport = httpx.ASGITransport(app=order_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def operator_headers():
    return {"X-Internal-API-Key": INTERNAL_API_KEY}


@pytest.fixture
def checkout_payload():
    return {
        "items": [{"productRef": "p1", "quantity": 2, "unitPrice": 10}],
        "totalAmount": 20,
        "customerInfo": {"name": "Jane", "email": "jane@x.com"},
        "paymentStatus": "completed",
    }
