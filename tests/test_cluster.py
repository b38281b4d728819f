"""The process entry app: order routes mounted under /api/orders, metrics at the root."""
import httpx
import pytest

from main import app


@pytest.fixture
async def cluster_client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


async def test_metrics_served_at_root(cluster_client):
    response = await cluster_client.get("/metrics")
    assert response.status_code == 200
    assert "storefront_order_identifier_collisions_total" in response.text


async def test_metrics_not_under_order_routes(cluster_client):
    assert (await cluster_client.get("/api/orders/metrics")).status_code == 404


async def test_order_routes_mounted(cluster_client):
    response = await cluster_client.get("/api/orders/health")
    assert response.json() == {"service": "order", "status": "running"}
