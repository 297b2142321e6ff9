"""Unit tests for login OTP mailers."""

from datetime import datetime, timezone
import json

import httpx
import pytest

from warden.adapter.mail import MockOtpMailer, RealOtpMailer
from warden.adapter.mail.sender import render_body
from warden.domain.service import OtpDeliveryError

EXPIRES = datetime(2026, 5, 1, 10, 30, tzinfo=timezone.utc)


def make_mailer(handler, **overrides) -> RealOtpMailer:
    options = {
        "api_url": "https://mail.example.com/v3/mail/send",
        "api_key": "key-123",
        "sender": "no-reply@example.com",
        "transport": httpx.MockTransport(handler),
    }
    options.update(overrides)
    return RealOtpMailer(**options)


class TestRenderBody:
    def test_body_contains_code_and_expiry(self):
        body = render_body("Ada", "123456", EXPIRES)

        assert "Hello Ada" in body
        assert "123456" in body
        assert "2026-05-01 10:30 UTC" in body


class TestRealOtpMailer:
    """Tests for RealOtpMailer."""

    @pytest.mark.asyncio
    async def test_sends_message(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(202)

        mailer = make_mailer(handler)

        await mailer.send_login_otp("ada@example.com", "Ada", "123456", EXPIRES)

        request = seen[0]
        assert request.headers["Authorization"] == "Bearer key-123"
        payload = json.loads(request.content)
        assert payload["personalizations"][0]["to"] == [{"email": "ada@example.com"}]
        assert "123456" in payload["content"][0]["value"]

    @pytest.mark.asyncio
    async def test_rejected_message_raises(self):
        mailer = make_mailer(lambda request: httpx.Response(401, text="bad key"))

        with pytest.raises(OtpDeliveryError, match="401"):
            await mailer.send_login_otp("ada@example.com", "Ada", "123456", EXPIRES)

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        mailer = make_mailer(handler)

        with pytest.raises(OtpDeliveryError):
            await mailer.send_login_otp("ada@example.com", "Ada", "123456", EXPIRES)

    @pytest.mark.asyncio
    async def test_unconfigured_mailer_raises(self):
        mailer = make_mailer(lambda request: httpx.Response(202), api_url="")

        with pytest.raises(OtpDeliveryError, match="not configured"):
            await mailer.send_login_otp("ada@example.com", "Ada", "123456", EXPIRES)


class TestMockOtpMailer:
    @pytest.mark.asyncio
    async def test_records_last_code_per_email(self):
        mailer = MockOtpMailer()

        await mailer.send_login_otp("ada@example.com", "Ada", "111111", EXPIRES)
        await mailer.send_login_otp("grace@example.com", "Grace", "222222", EXPIRES)
        await mailer.send_login_otp("ada@example.com", "Ada", "333333", EXPIRES)

        assert mailer.last_code("ada@example.com") == "333333"
        assert mailer.last_code("grace@example.com") == "222222"
        assert mailer.last_code("nobody@example.com") is None
