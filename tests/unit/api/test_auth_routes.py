"""
Name: Auth Endpoints Tests (register / login / profile / admin)

Responsibilities:
  - Full HTTP flow against the in-memory container (APP_ENV=test)
  - Error contract: RFC7807 + success=false + stable code
  - Deactivated accounts cannot log in

Collaborators:
  - commerce_api.api.main.create_app
  - conftest.seed_account (accounts with explicit role)
"""

import pytest
from fastapi.testclient import TestClient

from commerce_api.api.main import create_app
from conftest import STRONG_PASSWORD, seed_account

pytestmark = pytest.mark.unit


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def _register(client: TestClient, **overrides):
    payload = {
        "document": "D1",
        "password": STRONG_PASSWORD,
        "fullname": "A B",
        "email": "a@b.com",
    }
    payload.update(overrides)
    return client.post("/auth/register", json=payload)


def _login(client: TestClient, document: str = "D1", password: str = STRONG_PASSWORD):
    return client.post("/auth/login", json={"document": document, "password": password})


def _bearer(client: TestClient, document: str) -> dict:
    token = _login(client, document).json()["token"]
    return {"Authorization": f"Bearer {token}"}


def _fields(body: dict) -> list[str]:
    return [e["field"] for e in body.get("errors", []) if "field" in e]


# =============================================================================
# Registro
# =============================================================================


def test_register_creates_user_with_default_role(client):
    response = _register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Usuario registrado correctamente."
    assert body["user"]["document"] == "D1"
    assert body["user"]["email"] == "a@b.com"
    assert body["user"]["role"] == {"id": 2, "name": "User"}
    assert "password" not in body["user"]


def test_register_ignores_client_supplied_role(client):
    response = _register(client, role="Admin", role_id=1)

    assert response.status_code == 201
    assert response.json()["user"]["role"]["name"] == "User"


def test_register_reports_every_missing_field(client):
    response = client.post("/auth/register", json={})

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("application/problem+json")
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_ERROR"
    assert set(_fields(body)) == {"document", "password", "fullname", "email"}


def test_register_rejects_invalid_email(client):
    response = _register(client, email="not-an-email")

    assert response.status_code == 400
    assert _fields(response.json()) == ["email"]


def test_register_rejects_weak_password(client):
    response = _register(client, password="short")

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "WEAK_PASSWORD"
    assert set(_fields(body)) == {"password"}


@pytest.mark.parametrize(
    "overrides,code",
    [
        ({"email": "other@b.com"}, "DUPLICATE_DOCUMENT"),
        ({"document": "D2", "email": "A@B.com "}, "DUPLICATE_EMAIL"),
    ],
)
def test_register_duplicates_conflict(client, overrides, code):
    assert _register(client).status_code == 201

    response = _register(client, **overrides)

    assert response.status_code == 409
    assert response.json()["code"] == code


def test_malformed_json_is_bad_request(client):
    response = client.post(
        "/auth/register",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


# =============================================================================
# Login
# =============================================================================


def test_login_returns_token_and_identity(client):
    _register(client)

    response = _login(client)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["token_type"] == "bearer"
    assert body["token"]
    assert body["expires_in"] > 0
    assert body["user"]["role"]["name"] == "User"


def test_login_failures_are_indistinguishable(client):
    _register(client)

    wrong_password = _login(client, password="Wr0ng!Pass")
    unknown = _login(client, document="nobody")

    assert wrong_password.status_code == unknown.status_code == 401
    assert wrong_password.json()["code"] == unknown.json()["code"] == "INVALID_CREDENTIALS"
    assert wrong_password.json()["detail"] == unknown.json()["detail"]


def test_login_validation_lists_missing_fields(client):
    response = client.post("/auth/login", json={})

    assert response.status_code == 400
    assert set(_fields(response.json())) == {"document", "password"}


# =============================================================================
# Perfil
# =============================================================================


def test_profile_returns_token_holder(client):
    _register(client, birth_date="1990-05-01")

    response = client.get("/auth/profile", headers=_bearer(client, "D1"))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["document"] == "D1"
    assert data["fullname"] == "A B"
    assert data["email"] == "a@b.com"
    assert data["birth_date"] == "1990-05-01"
    assert data["role"] == {"id": 2, "name": "User"}


def test_profile_requires_token(client):
    response = client.get("/auth/profile")

    assert response.status_code == 401
    assert response.json()["detail"] == "Token requerido."


def test_profile_rejects_invalid_token(client):
    response = client.get("/auth/profile", headers={"Authorization": "Bearer abc.def.ghi"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Token inválido o expirado."


# =============================================================================
# Administración de cuentas
# =============================================================================


def test_admin_deactivation_blocks_login(client):
    _register(client)
    account_id = client.get("/auth/profile", headers=_bearer(client, "D1")).json()[
        "data"
    ]["access_id"]
    seed_account(role_id=1, document="ADMIN", email="admin@b.com")
    admin = _bearer(client, "ADMIN")

    response = client.post(f"/admin/accounts/{account_id}/deactivate", headers=admin)

    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is False

    blocked = _login(client)
    assert blocked.status_code == 403
    assert blocked.json()["code"] == "ACCOUNT_DEACTIVATED"

    assert client.post(f"/admin/accounts/{account_id}/activate", headers=admin).status_code == 200
    assert _login(client).status_code == 200


def test_admin_cannot_deactivate_self(client):
    seed_account(role_id=1, document="ADMIN", email="admin@b.com")
    admin = _bearer(client, "ADMIN")
    own_id = client.get("/auth/profile", headers=admin).json()["data"]["access_id"]

    response = client.post(f"/admin/accounts/{own_id}/deactivate", headers=admin)

    assert response.status_code == 403


def test_admin_unknown_account_is_not_found(client):
    seed_account(role_id=1, document="ADMIN", email="admin@b.com")

    response = client.post(
        "/admin/accounts/999/deactivate", headers=_bearer(client, "ADMIN")
    )

    assert response.status_code == 404


def test_non_admin_cannot_manage_accounts(client):
    _register(client)

    response = client.post("/admin/accounts/1/deactivate", headers=_bearer(client, "D1"))

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"
