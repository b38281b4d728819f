import os
from dotenv import load_dotenv

load_dotenv()

DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("POSTGRES_HOST", "localhost") # In Docker, this will be 'postgres'
DB_PORT = os.getenv("POSTGRES_PORT", "5433")
DB_NAME = os.getenv("POSTGRES_DB", "storefront")

# DATABASE_URL wins over the individual POSTGRES_* parts
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
DB_ECHO = os.getenv("DB_ECHO", "false").lower() in ("1", "true", "yes")

# Total insert attempts when the store rejects a generated order/tracking number
ORDER_ID_MAX_ATTEMPTS = int(os.getenv("ORDER_ID_MAX_ATTEMPTS", "5"))

FALLBACK_CUSTOMER_EMAIL = os.getenv("FALLBACK_CUSTOMER_EMAIL", "guest@example.com")

TRACKING_RATE_LIMIT = os.getenv("TRACKING_RATE_LIMIT", "60/minute")

# Tracing stays off unless a collector endpoint is configured
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
