from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from . import settings

Base = declarative_base()

# We use a separate schema per service to simulate microservice isolation
SCHEMAS = ("order_schema", "product_schema", "auth_schema")


class Database:
    """
    Owns the async engine and session factory for one process.

    Built once at startup and handed to the apps that need it, then
    disposed on shutdown. Nothing reads it from module globals.
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = url
        self.engine = create_async_engine(url, echo=echo, **engine_kwargs)
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    @classmethod
    def from_settings(cls) -> "Database":
        return cls(settings.DATABASE_URL, echo=settings.DB_ECHO)

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            if conn.dialect.name == "postgresql":
                for schema in SCHEMAS:
                    await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema}"))
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request):
    async with request.app.state.db.sessionmaker() as session:
        yield session
