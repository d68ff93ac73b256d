"""
Name: HTTP Middleware Tests

Responsibilities:
  - X-Request-Id propagation / generation
  - Body size limit (Content-Length y chunked) -> 413 RFC7807
"""

import uuid

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from commerce_api.crosscutting.middleware import (
    BodyLimitMiddleware,
    RequestContextMiddleware,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    app.add_middleware(BodyLimitMiddleware, max_bytes=16)
    app.add_middleware(RequestContextMiddleware)

    @app.post("/echo")
    async def echo(request: Request):
        body = await request.body()
        return {"size": len(body), "request_id": request.state.request_id}

    return TestClient(app)


def test_incoming_request_id_is_echoed(client):
    response = client.post("/echo", content=b"hi", headers={"X-Request-Id": "abc-123"})

    assert response.headers["X-Request-Id"] == "abc-123"
    assert response.json()["request_id"] == "abc-123"


def test_oversized_request_id_is_replaced(client):
    response = client.post("/echo", content=b"hi", headers={"X-Request-Id": "x" * 500})

    generated = response.headers["X-Request-Id"]
    assert generated != "x" * 500
    uuid.UUID(generated)


def test_body_under_limit_passes(client):
    response = client.post("/echo", content=b"0123456789")

    assert response.status_code == 200
    assert response.json()["size"] == 10


def test_body_over_limit_is_rejected(client):
    response = client.post("/echo", content=b"x" * 100)

    assert response.status_code == 413
    body = response.json()
    assert body["code"] == "PAYLOAD_TOO_LARGE"
    assert body["success"] is False


def _chunks(count: int, size: int = 10):
    for _ in range(count):
        yield b"x" * size


def test_chunked_body_over_limit_is_rejected(client):
    response = client.post("/echo", content=_chunks(5))

    assert response.status_code == 413
    assert response.headers["content-type"].startswith("application/problem+json")
    assert response.json()["code"] == "PAYLOAD_TOO_LARGE"


def test_chunked_body_under_limit_reaches_route(client):
    response = client.post("/echo", content=_chunks(1, size=12))

    assert response.status_code == 200
    assert response.json()["size"] == 12
