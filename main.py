from fastapi import FastAPI

from shared.config.database import Database
from shared.observability import configure_metrics
from services.order_service.main import create_order_app

# One store handle for the whole process, built here and passed down
database = Database.from_settings()

order_app = create_order_app(database, metrics=False)

app = FastAPI(title="Storefront Cluster")

# Instruments mounted apps too and serves /metrics here
configure_metrics(app)

# Mounted apps do not get their own startup/shutdown events
@app.on_event("startup")
async def startup_event():
    await database.create_all()

@app.on_event("shutdown")
async def shutdown_event():
    await database.dispose()

app.mount("/api/orders", order_app)
