"""Smoke tests for health and app wiring."""

from httpx import AsyncClient


async def test_smoke_route_returns_plain_text(client: AsyncClient) -> None:
    """GET /test returns the literal text Success!."""
    response = await client.get("/test")
    assert response.status_code == 200
    assert response.text == "Success!"
    assert "text/plain" in response.headers.get("content-type", "")


async def test_health_returns_ok(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["documentBackend"] == "memory"
    assert body["storageBackend"] == "memory"


async def test_request_id_is_generated_and_forwarded(client: AsyncClient) -> None:
    """Responses echo a sane client X-Request-ID and replace unsafe ones."""
    forwarded = await client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert forwarded.headers["x-request-id"] == "abc-123"

    replaced = await client.get("/health", headers={"X-Request-ID": "bad id with spaces!"})
    assert replaced.headers["x-request-id"] != "bad id with spaces!"
    assert replaced.headers["x-request-id"]


async def test_unknown_route_returns_json_message(client: AsyncClient) -> None:
    response = await client.get("/nope")
    assert response.status_code == 404
    assert "message" in response.json()
