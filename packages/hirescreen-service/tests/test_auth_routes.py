"""Auth and company endpoint tests against the in-memory store."""

from __future__ import annotations

from uuid import UUID, uuid4

import jwt
from fastapi.testclient import TestClient


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _create_company(tc: TestClient, admin_email: str = "owner@acme.com") -> dict:
    resp = tc.post(
        "/api/v1/companies",
        json={
            "name": "Acme",
            "domain": "acme.com",
            "admin_email": admin_email,
            "admin_password": "Secret123!",
            "admin_first_name": "Olive",
            "admin_last_name": "Owner",
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def _register(tc: TestClient, company_id: str, email: str = "a@x.com", password: str = "Secret123!", **extra):
    return tc.post(
        "/api/v1/auth/register",
        json={
            "email": email,
            "password": password,
            "first_name": "A",
            "last_name": "B",
            "company_id": company_id,
            **extra,
        },
    )


def _login(tc: TestClient, email: str = "a@x.com", password: str = "Secret123!"):
    return tc.post("/api/v1/auth/login", json={"email": email, "password": password})


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Company onboarding
# ---------------------------------------------------------------------------


def test_create_company_returns_admin_and_tokens(client):
    tc, _store = client
    data = _create_company(tc)
    assert data["user"]["role"] == "ADMIN"
    assert data["user"]["email"] == "owner@acme.com"
    assert data["user"]["company"]["name"] == "Acme"
    assert data["user"]["company"]["is_active"] is True
    assert data["access_token"]
    assert data["refresh_token"]
    assert data["token_type"] == "bearer"


def test_create_company_weak_password_returns_422(client):
    tc, _ = client
    resp = tc.post(
        "/api/v1/companies",
        json={
            "name": "Acme",
            "domain": "acme.com",
            "admin_email": "owner@acme.com",
            "admin_password": "alllowercase1",
            "admin_first_name": "O",
            "admin_last_name": "O",
        },
    )
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Register
# ---------------------------------------------------------------------------


def test_register_scenario(client):
    tc, _ = client
    company_id = _create_company(tc)["user"]["company_id"]

    resp = _register(tc, company_id)
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["user"]["role"] == "RECRUITER"
    assert data["user"]["company_id"] == company_id
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]
    assert data["access_token"] and data["refresh_token"]

    wrong = _login(tc, password="wrong")
    assert wrong.status_code == 401
    assert wrong.json()["detail"] == "Invalid credentials"

    ok = _login(tc)
    assert ok.status_code == 200
    assert ok.json()["user"]["last_login"] is not None


def test_register_duplicate_email_returns_409(client):
    tc, _ = client
    company_id = _create_company(tc)["user"]["company_id"]
    assert _register(tc, company_id).status_code == 201

    resp = _register(tc, company_id, password="Another456!")
    assert resp.status_code == 409
    assert "already exists" in resp.json()["detail"]

    # First user still logs in with the original password.
    assert _login(tc).status_code == 200


def test_register_unknown_company_returns_404(client):
    tc, _ = client
    resp = _register(tc, str(uuid4()))
    assert resp.status_code == 404


def test_register_with_role(client):
    tc, _ = client
    company_id = _create_company(tc)["user"]["company_id"]
    resp = _register(tc, company_id, role="HR_MANAGER")
    assert resp.status_code == 201
    assert resp.json()["user"]["role"] == "HR_MANAGER"


def test_register_validation_errors(client):
    tc, _ = client
    company_id = _create_company(tc)["user"]["company_id"]
    assert _register(tc, company_id, password="Short1").status_code == 422
    assert _register(tc, company_id, password="nouppercase1").status_code == 422
    assert _register(tc, company_id, password="NoDigitsHere").status_code == 422
    assert _register(tc, company_id, password="A1" + "a" * 80).status_code == 422
    assert _register(tc, company_id, email="not-an-email").status_code == 422
    assert _register(tc, "not-a-uuid").status_code == 422
    assert _register(tc, company_id, role="OVERLORD").status_code == 422


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


def test_login_unknown_email_returns_401(client):
    tc, _ = client
    resp = _login(tc, email="nobody@x.com")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"


def test_login_deactivated_account_returns_403(client):
    tc, store = client
    company_id = _create_company(tc)["user"]["company_id"]
    user_id = _register(tc, company_id).json()["user"]["id"]
    store.set_user_active(UUID(user_id), False)

    resp = _login(tc)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Account is deactivated"


def test_login_deactivated_company_returns_403(client):
    tc, store = client
    company_id = _create_company(tc)["user"]["company_id"]
    _register(tc, company_id)
    store.set_company_active(UUID(company_id), False)

    resp = _login(tc)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Company account is deactivated"


# ---------------------------------------------------------------------------
# Refresh / logout
# ---------------------------------------------------------------------------


def test_refresh_rotates_and_is_single_use(client):
    tc, _ = client
    company_id = _create_company(tc)["user"]["company_id"]
    _register(tc, company_id)
    rt = _login(tc).json()["refresh_token"]

    first = tc.post("/api/v1/auth/refresh", json={"refresh_token": rt})
    assert first.status_code == 200
    assert first.json()["refresh_token"] != rt

    replay = tc.post("/api/v1/auth/refresh", json={"refresh_token": rt})
    assert replay.status_code == 401
    assert replay.json()["detail"] == "Invalid refresh token"


def test_refresh_with_access_token_returns_401(client):
    tc, _ = client
    access = _create_company(tc)["access_token"]
    resp = tc.post("/api/v1/auth/refresh", json={"refresh_token": access})
    assert resp.status_code == 401


def test_refresh_with_garbage_returns_401(client):
    tc, _ = client
    resp = tc.post("/api/v1/auth/refresh", json={"refresh_token": "not.a.token"})
    assert resp.status_code == 401


def test_refresh_empty_token_returns_422(client):
    tc, _ = client
    assert tc.post("/api/v1/auth/refresh", json={"refresh_token": ""}).status_code == 422


def test_logout_then_refresh_fails(client):
    tc, _ = client
    rt = _create_company(tc)["refresh_token"]

    assert tc.post("/api/v1/auth/logout", json={"refresh_token": rt}).status_code == 204
    # Logging out twice is not an error.
    assert tc.post("/api/v1/auth/logout", json={"refresh_token": rt}).status_code == 204

    resp = tc.post("/api/v1/auth/refresh", json={"refresh_token": rt})
    assert resp.status_code == 401


def test_logout_all_revokes_every_session(client):
    tc, _ = client
    company_id = _create_company(tc)["user"]["company_id"]
    first = _register(tc, company_id).json()
    second = _login(tc).json()

    resp = tc.post("/api/v1/auth/logout-all", headers=_bearer(second["access_token"]))
    assert resp.status_code == 204

    for rt in (first["refresh_token"], second["refresh_token"]):
        assert tc.post("/api/v1/auth/refresh", json={"refresh_token": rt}).status_code == 401


def test_logout_all_requires_auth(client):
    tc, _ = client
    assert tc.post("/api/v1/auth/logout-all").status_code == 401


# ---------------------------------------------------------------------------
# /me and bearer handling
# ---------------------------------------------------------------------------


def test_me_returns_claims(client, auth_config):
    tc, _ = client
    data = _create_company(tc)
    resp = tc.get("/api/v1/auth/me", headers=_bearer(data["access_token"]))
    assert resp.status_code == 200
    me = resp.json()
    assert me["email"] == "owner@acme.com"
    assert me["role"] == "ADMIN"
    assert me["user_id"] == data["user"]["id"]
    assert me["company_id"] == data["user"]["company_id"]

    claims = jwt.decode(data["access_token"], auth_config.access_token_secret, algorithms=["HS256"])
    assert claims["exp"] - claims["iat"] == 15 * 60


def test_me_without_token_returns_401(client):
    tc, _ = client
    resp = tc.get("/api/v1/auth/me")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Access token required"


def test_me_with_invalid_token_returns_401(client):
    tc, _ = client
    resp = tc.get("/api/v1/auth/me", headers=_bearer("invalid.token.here"))
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid or expired token"


def test_me_with_refresh_token_returns_401(client):
    tc, _ = client
    rt = _create_company(tc)["refresh_token"]
    assert tc.get("/api/v1/auth/me", headers=_bearer(rt)).status_code == 401


def test_me_after_deactivation_returns_401(client):
    tc, store = client
    data = _create_company(tc)
    store.set_company_active(UUID(data["user"]["company_id"]), False)
    resp = tc.get("/api/v1/auth/me", headers=_bearer(data["access_token"]))
    assert resp.status_code == 401

