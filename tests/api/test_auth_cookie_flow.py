import json

import pytest
from django.conf import settings
from django.test import Client


def _login_via_api(client, email: str, password: str):
    return client.post(
        "/api/v1/auth/token/",
        data=json.dumps({"email": email, "password": password}),
        content_type="application/json",
    )


@pytest.mark.django_db
def test_auth_login_sets_http_only_jwt_cookies(client, superadmin_user):
    response = _login_via_api(client, superadmin_user.email, "testpass123")

    assert response.status_code == 200
    payload = response.json()
    assert payload["user"]["email"] == superadmin_user.email
    assert payload["user"]["is_privileged"] is True
    assert "access" not in payload
    assert "refresh" not in payload

    access_cookie_name = settings.JWT_AUTH_COOKIE
    refresh_cookie_name = settings.JWT_AUTH_REFRESH_COOKIE
    assert response.cookies[access_cookie_name]["httponly"]
    assert response.cookies[refresh_cookie_name]["httponly"]


@pytest.mark.django_db
def test_auth_login_rejects_bad_password(client, sales_user):
    response = _login_via_api(client, sales_user.email, "wrong-password")

    assert response.status_code == 401


@pytest.mark.django_db
def test_cookie_authenticates_read_requests(client, sales_user):
    _login_via_api(client, sales_user.email, "testpass123")

    response = client.get("/api/v1/auth/me/")

    assert response.status_code == 200
    assert response.json()["email"] == sales_user.email
    assert response.json()["is_privileged"] is False


@pytest.mark.django_db
def test_cookie_authenticated_patch_requires_csrf_header(sales_user):
    strict_client = Client(enforce_csrf_checks=True)
    login_response = _login_via_api(strict_client, sales_user.email, "testpass123")
    assert login_response.status_code == 200

    response = strict_client.patch(
        "/api/v1/auth/me/",
        data=json.dumps({"first_name": "Changed"}),
        content_type="application/json",
    )

    assert response.status_code == 403


@pytest.mark.django_db
def test_invalid_bearer_header_is_rejected(client, sales_user):
    response = client.get("/api/v1/auth/me/", HTTP_AUTHORIZATION="Bearer not-a-token")

    assert response.status_code == 401


@pytest.mark.django_db
def test_stale_cookie_leaves_public_endpoints_open(client, library_file):
    client.cookies[settings.JWT_AUTH_COOKIE] = "expired-or-garbage"

    response = client.get("/api/v1/files/")

    assert response.status_code == 200


@pytest.mark.django_db
def test_refresh_uses_refresh_cookie_when_body_missing(client, superadmin_user):
    login_response = _login_via_api(client, superadmin_user.email, "testpass123")
    assert login_response.status_code == 200

    refresh_response = client.post(
        "/api/v1/auth/token/refresh/",
        data=json.dumps({}),
        content_type="application/json",
    )

    assert refresh_response.status_code == 200
    assert settings.JWT_AUTH_COOKIE in refresh_response.cookies


@pytest.mark.django_db
def test_logout_clears_cookies(client, sales_user):
    _login_via_api(client, sales_user.email, "testpass123")

    response = client.post("/api/v1/auth/logout/")

    assert response.status_code == 204
    assert response.cookies[settings.JWT_AUTH_COOKIE].value == ""
