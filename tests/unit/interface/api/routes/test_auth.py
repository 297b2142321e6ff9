"""Unit tests for the authentication routes.

The app runs against the all-mock container; repositories and the mock
identity provider are app-scoped, so state carries across requests.
"""

import httpx
import pytest
import pytest_asyncio

from warden.domain.service import IdentityProvider, OtpSender
from warden.domain.value import ProviderErrorKind
from warden.interface.api.app import create_app
from tests.di import build_test_container

SIGNUP = {
    "email": "ada@example.com",
    "full_name": "Ada Lovelace",
    "phone_number": "+15550100",
    "password": "correct horse battery",
}


@pytest_asyncio.fixture
async def container():
    container = build_test_container()
    yield container
    await container.close()


@pytest_asyncio.fixture
async def client(container):
    app = create_app(container)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuthRoutes:
    """Tests for the /auth routes."""

    @pytest.mark.asyncio
    async def test_signup_verify_and_login_flow(self, client, container):
        """A new user signs up, verifies, and logs in both ways."""
        # Signup
        response = await client.post("/auth/signup", json=SIGNUP)
        assert response.status_code == 201
        assert response.json()["status"] == "pending_verification"

        # Verify with the provider's code
        identity_provider = await container.get(IdentityProvider)
        response = await client.post(
            "/auth/verify-email",
            json={"email": SIGNUP["email"], "code": identity_provider.confirmation_code},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["account"]["status"] == "active"
        assert data["account"]["role"]["type"] == "user"
        assert data["tokens"]["access_token"]
        assert "password_hash" not in data["account"]

        # Password login
        response = await client.post(
            "/auth/login/password",
            json={"email": SIGNUP["email"], "password": SIGNUP["password"]},
        )
        assert response.status_code == 200
        assert response.json()["tokens"]["access_token"]

        # OTP login
        response = await client.post("/auth/login/otp", json={"email": SIGNUP["email"]})
        assert response.status_code == 200
        assert "code" not in response.json()

        mailer = await container.get(OtpSender)
        response = await client.post(
            "/auth/login/otp/verify",
            json={"email": SIGNUP["email"], "code": mailer.last_code(SIGNUP["email"])},
        )
        assert response.status_code == 200
        assert response.json()["tokens"]["access_token"]

    @pytest.mark.asyncio
    async def test_duplicate_signup_is_400(self, client):
        await client.post("/auth/signup", json=SIGNUP)
        await client.post(
            "/auth/verify-email", json={"email": SIGNUP["email"], "code": "123456"}
        )

        response = await client.post("/auth/signup", json=SIGNUP)

        assert response.status_code == 400
        assert response.json() == {"detail": "User with this email already exists"}

    @pytest.mark.asyncio
    async def test_wrong_verification_code_is_400(self, client):
        await client.post("/auth/signup", json=SIGNUP)

        response = await client.post(
            "/auth/verify-email", json={"email": SIGNUP["email"], "code": "000000"}
        )

        assert response.status_code == 400
        assert "detail" in response.json()

    @pytest.mark.asyncio
    async def test_bad_password_is_401(self, client):
        response = await client.post(
            "/auth/login/password",
            json={"email": "nobody@example.com", "password": "whatever"},
        )

        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid email or password"}

    @pytest.mark.asyncio
    async def test_otp_for_unknown_account_is_404(self, client):
        response = await client.post(
            "/auth/login/otp", json={"email": "nobody@example.com"}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_rate_limited_reset_is_429(self, client, container):
        await client.post("/auth/signup", json=SIGNUP)
        await client.post(
            "/auth/verify-email", json={"email": SIGNUP["email"], "code": "123456"}
        )
        identity_provider = await container.get(IdentityProvider)
        identity_provider.fail_on(
            "send_reset_challenge", ProviderErrorKind.RATE_LIMITED
        )

        response = await client.post(
            "/auth/password/forgot", json={"email": SIGNUP["email"]}
        )

        assert response.status_code == 429

    @pytest.mark.asyncio
    async def test_password_reset_round_trip(self, client, container):
        await client.post("/auth/signup", json=SIGNUP)
        await client.post(
            "/auth/verify-email", json={"email": SIGNUP["email"], "code": "123456"}
        )
        identity_provider = await container.get(IdentityProvider)

        forgot = await client.post(
            "/auth/password/forgot", json={"email": SIGNUP["email"]}
        )
        reset = await client.post(
            "/auth/password/reset",
            json={
                "email": SIGNUP["email"],
                "code": identity_provider.reset_code,
                "new_password": "staple battery horse",
            },
        )
        login = await client.post(
            "/auth/login/password",
            json={"email": SIGNUP["email"], "password": "staple battery horse"},
        )

        assert forgot.status_code == 200
        assert reset.status_code == 200
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_invalid_body_is_422(self, client):
        response = await client.post(
            "/auth/signup", json={**SIGNUP, "email": "not-an-email"}
        )

        assert response.status_code == 422
