"""Integration tests for the token check endpoint."""

from __future__ import annotations

from datetime import timedelta

import pytest
from freezegun import freeze_time
from tests.factories.credentials import DEFAULT_PASSWORD, CredentialsFactory

T0 = "2030-01-01 09:00:00"


@pytest.fixture()
def login(client, headers):
    CredentialsFactory(email="ada@example.com")

    def _login(device: str = "Pixel 8") -> dict:
        resp = client.post(
            "/api/v1/auth/login",
            json={"email": "ada@example.com", "password": DEFAULT_PASSWORD},
            headers=headers(device_name=device),
        )
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()["data"]

    return _login


def test_check_rotates_access_token(client, headers, login, app) -> None:
    tokens = login()
    resp = client.get(
        "/api/v1/token/check",
        headers=headers(access=tokens["access_token"], refresh=tokens["refresh_token"]),
    )
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["decision"] == "rotate"
    assert data["device_id"] == tokens["device_id"]
    assert data["claims"]["email"] == "ada@example.com"
    assert resp.headers[app.config["ACCESS_TOKEN_HEADER"]] != tokens["access_token"]


def test_check_without_tokens(client) -> None:
    resp = client.get("/api/v1/token/check")
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "invalid_token"


def test_check_with_corrupted_access_remints(client, headers, login, app) -> None:
    tokens = login()
    resp = client.get(
        "/api/v1/token/check",
        headers=headers(access="corrupted", refresh=tokens["refresh_token"]),
    )
    assert resp.status_code == 200
    assert resp.headers[app.config["ACCESS_TOKEN_HEADER"]] not in ("corrupted", tokens["access_token"])


def test_check_refresh_only_returns_refresh(client, headers, login, app) -> None:
    tokens = login()
    resp = client.get("/api/v1/token/check", headers=headers(refresh=tokens["refresh_token"]))
    assert resp.status_code == 200
    assert resp.get_json()["data"]["decision"] == "pass_through"
    assert resp.headers[app.config["REFRESH_TOKEN_HEADER"]] == tokens["refresh_token"]
    assert app.config["ACCESS_TOKEN_HEADER"] not in resp.headers


def test_old_refresh_rejected_after_same_device_logs_in_again(client, headers, login, app) -> None:
    first = login("Laptop")
    login("Laptop")
    resp = client.get("/api/v1/token/check", headers=headers(refresh=first["refresh_token"]))
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "device_not_registered"
    assert resp.headers[app.config["REFRESH_EXPIRED_HEADER"]] == "true"


def test_refresh_rotated_near_expiry(client, headers, login, app) -> None:
    with freeze_time(T0) as frozen:
        tokens = login()
        frozen.tick(timedelta(days=26))
        resp = client.get(
            "/api/v1/token/check",
            headers=headers(access=tokens["access_token"], refresh=tokens["refresh_token"]),
        )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["rotated"] is True
    new_refresh = resp.headers[app.config["REFRESH_TOKEN_HEADER"]]
    assert new_refresh != tokens["refresh_token"]


def test_expired_refresh_requires_relogin(client, headers, login, app) -> None:
    with freeze_time(T0) as frozen:
        tokens = login()
        frozen.tick(timedelta(days=31))
        resp = client.get("/api/v1/token/check", headers=headers(refresh=tokens["refresh_token"]))
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "refresh_expired"
    assert resp.headers[app.config["REFRESH_EXPIRED_HEADER"]] == "true"
