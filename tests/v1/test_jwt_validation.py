"""Tests for registration session token handling at the HTTP boundary."""

from datetime import UTC, datetime, timedelta

from fastapi import status
from jose import jwt

from registration_gate.core.settings import settings
from registration_gate.services.session_tokens import RegistrationTokenService

GATED_ROUTES = [
    ("get", "/api/v1/register/draft"),
    ("post", "/api/v1/register/draft"),
    ("post", "/api/v1/register"),
    ("get", "/api/v1/form"),
]


def _call(client, method: str, path: str, headers: dict[str, str]):
    if method == "get":
        return client.get(path, headers=headers)
    return client.post(path, json={"formData": {}}, headers=headers)


class TestRegistrationTokenEdgeCases:
    """Every gated route rejects requests without a valid session token."""

    def test_missing_token(self, client):
        for method, path in GATED_ROUTES:
            response = _call(client, method, path, {})
            assert response.status_code == status.HTTP_401_UNAUTHORIZED
            assert response.json()["message"] == "Unauthorized: No registration token"

    def test_token_without_bearer_prefix(self, client):
        response = client.get("/api/v1/register/draft", headers={"Authorization": "InvalidToken123"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_empty_bearer_token(self, client):
        response = client.get("/api/v1/register/draft", headers={"Authorization": "Bearer "})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_malformed_token(self, client):
        for method, path in GATED_ROUTES:
            response = _call(client, method, path, {"Authorization": "Bearer not.a.valid.jwt"})
            assert response.status_code == status.HTTP_401_UNAUTHORIZED
            assert response.json()["code"] == "unauthorized"

    def test_token_with_wrong_secret(self, client):
        token = RegistrationTokenService(secret_key="wrong_secret_key").mint("a@x.com", "+1555").token
        response = client.get("/api/v1/register/draft", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_expired_token(self, client, token_service):
        issued = token_service.mint("a@x.com", "+1555", now=datetime.now(UTC) - timedelta(hours=2))
        for method, path in GATED_ROUTES:
            response = _call(client, method, path, {"Authorization": f"Bearer {issued.token}"})
            assert response.status_code == status.HTTP_401_UNAUTHORIZED
            assert response.json()["message"] == "Invalid or expired registration session"

    def test_token_of_another_type(self, client):
        now = int(datetime.now(UTC).timestamp())
        token = jwt.encode(
            {"sub": "someone", "typ": "access", "email": "a@x.com", "mobile": "+1555", "iat": now, "exp": now + 60},
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )
        response = client.get("/api/v1/register/draft", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_minted_token_is_accepted(self, client, token_service):
        token = token_service.mint("a@x.com", "+1555").token
        response = client.get("/api/v1/register/draft", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_200_OK
