"""
Tests for the authentication endpoints.
"""
import re

import pytest
from django.contrib.auth import get_user_model
from django.core import mail, signing

from blog_api.auth import issue_token, user_from_token

User = get_user_model()

REGISTER_URL = "/api/auth/register/"
LOGIN_URL = "/api/auth/login/"
ME_URL = "/api/auth/me/"


def registration(**overrides):
    data = {
        "username": "newbie",
        "email": "Newbie@Example.com",
        "password": "secret123",
        "first_name": "New",
        "last_name": "Bie",
    }
    data.update(overrides)
    return data


def error_fields(response):
    return {error["field"] for error in response.json()["errors"]}


class TestRegister:
    def test_register(self, db, api):
        response = api.post(REGISTER_URL, registration())

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["user"]["username"] == "newbie"
        assert body["data"]["user"]["email"] == "newbie@example.com"
        assert body["data"]["user"]["role"] == "user"
        assert "password" not in body["data"]["user"]

        user = User.objects.get(username="newbie")
        assert user.check_password("secret123")
        assert user_from_token(body["data"]["token"]) == user

    def test_duplicate_email_and_username(self, db, api, user):
        response = api.post(
            REGISTER_URL,
            registration(username="TestUser", email="TESTUSER@example.com"),
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        messages = {e["message"] for e in response.json()["errors"]}
        assert "Username is already taken" in messages
        assert "Email is already registered" in messages

    def test_validation_errors_listed(self, db, api):
        response = api.post(
            REGISTER_URL,
            {"username": "ab", "email": "not-an-email", "password": "123"},
        )

        assert response.status_code == 400
        assert error_fields(response) == {
            "username",
            "email",
            "password",
            "first_name",
            "last_name",
        }
        assert User.objects.count() == 0

    def test_invalid_json(self, db, client):
        response = client.post(REGISTER_URL, "{oops", content_type="application/json")

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid JSON body"}

    def test_wrong_method(self, db, api):
        response = api.get(REGISTER_URL)

        assert response.status_code == 405
        assert response.json()["success"] is False


class TestLogin:
    def test_login(self, db, api, user):
        response = api.post(LOGIN_URL, {"email": "TestUser@example.com", "password": "testpass123"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["id"] == user.pk
        assert user_from_token(data["token"]) == user

    def test_wrong_password(self, db, api, user):
        response = api.post(LOGIN_URL, {"email": user.email, "password": "nope-nope"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials"}

    def test_unknown_email(self, db, api):
        response = api.post(LOGIN_URL, {"email": "ghost@example.com", "password": "whatever"})

        assert response.status_code == 401

    def test_disabled_account(self, db, api, user):
        user.is_active = False
        user.save()

        response = api.post(LOGIN_URL, {"email": user.email, "password": "testpass123"})

        assert response.status_code == 401
        assert response.json()["message"] == "Account is disabled"


class TestMe:
    def test_requires_token(self, db, api):
        response = api.get(ME_URL)

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "Not authorized, no valid token",
        }

    def test_current_user(self, db, api, user):
        response = api.get(ME_URL, user=user)

        assert response.status_code == 200
        assert response.json()["data"]["user"]["username"] == "testuser"

    def test_tampered_token(self, db, client, user):
        token = issue_token(user) + "x"

        response = client.get(ME_URL, HTTP_AUTHORIZATION=f"Bearer {token}")

        assert response.status_code == 401

    def test_token_for_other_salt_rejected(self, db, client, user):
        token = signing.dumps({"id": user.pk}, salt="something-else")

        response = client.get(ME_URL, HTTP_AUTHORIZATION=f"Bearer {token}")

        assert response.status_code == 401

    def test_token_of_deleted_user(self, db, client, user):
        token = issue_token(user)
        user.delete_account()

        response = client.get(ME_URL, HTTP_AUTHORIZATION=f"Bearer {token}")

        assert response.status_code == 401


class TestPasswordReset:
    def test_unknown_email_same_response(self, db, api):
        response = api.post("/api/auth/forgot-password/", {"email": "ghost@example.com"})

        assert response.status_code == 200
        assert "password reset link" in response.json()["message"]
        assert len(mail.outbox) == 0

    def test_reset_flow(self, db, api, user):
        response = api.post("/api/auth/forgot-password/", {"email": user.email})

        assert response.status_code == 200
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == [user.email]

        match = re.search(
            r"https://blog\.example\.com/reset-password/([^/\s]+)/([^/\s]+)",
            mail.outbox[0].body,
        )
        assert match is not None
        uidb64, token = match.groups()

        response = api.post(
            f"/api/auth/reset-password/{uidb64}/{token}/",
            {"password": "brand-new-pass"},
        )
        assert response.status_code == 200

        user.refresh_from_db()
        assert user.check_password("brand-new-pass")

        # Tokens are single use once the password changes
        response = api.post(
            f"/api/auth/reset-password/{uidb64}/{token}/",
            {"password": "another-pass"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid or expired reset token"

    @pytest.mark.parametrize("uidb64", ["bogus", "MTAwMDA"])
    def test_bad_reset_link(self, db, api, user, uidb64):
        response = api.post(
            f"/api/auth/reset-password/{uidb64}/abc-123/",
            {"password": "brand-new-pass"},
        )

        assert response.status_code == 400
