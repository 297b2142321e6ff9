"""Identity provider client implementations.

The real client speaks a JSON RPC dialect: every call is a POST to one
endpoint, the action is named in a target header, and failures come back
as a JSON body whose ``__type`` names the error.
"""

import base64
import hashlib
import hmac
from uuid import uuid4

import httpx
import logfire

from warden.domain.service.identity_provider import (
    IdentityProvider,
    IdentityProviderError,
)
from warden.domain.value import (
    ExternalIdentityLookup,
    ExternalIdentityResult,
    ExternalIdentityStatus,
    ProviderErrorKind,
    TokenBundle,
)

TARGET_PREFIX = "IdentityProviderService"

# Provider error names -> closed error categories
ERROR_KINDS: dict[str, ProviderErrorKind] = {
    "UsernameExistsException": ProviderErrorKind.DUPLICATE,
    "AliasExistsException": ProviderErrorKind.DUPLICATE,
    "UserNotFoundException": ProviderErrorKind.NOT_FOUND,
    "CodeMismatchException": ProviderErrorKind.INVALID_CODE,
    "ExpiredCodeException": ProviderErrorKind.EXPIRED_CODE,
    "LimitExceededException": ProviderErrorKind.RATE_LIMITED,
    "TooManyRequestsException": ProviderErrorKind.RATE_LIMITED,
    "TooManyFailedAttemptsException": ProviderErrorKind.RATE_LIMITED,
    "NotAuthorizedException": ProviderErrorKind.NOT_AUTHORIZED,
    "UserNotConfirmedException": ProviderErrorKind.NOT_CONFIRMED,
    "InvalidParameterException": ProviderErrorKind.INVALID_PARAMETER,
    "InvalidPasswordException": ProviderErrorKind.INVALID_PASSWORD,
    "ResourceNotFoundException": ProviderErrorKind.MISCONFIGURED,
}

STATUS_MAP: dict[str, ExternalIdentityStatus] = {
    "CONFIRMED": ExternalIdentityStatus.CONFIRMED,
    "UNCONFIRMED": ExternalIdentityStatus.UNCONFIRMED,
    "FORCE_CHANGE_PASSWORD": ExternalIdentityStatus.FORCE_CHANGE_PASSWORD,
}


def error_kind(error_type: str) -> ProviderErrorKind:
    """Map a provider ``__type`` value to an error category.

    Namespaced names (``prefix#Name``) are reduced to the bare name.
    """
    name = error_type.rsplit("#", 1)[-1].split(":", 1)[0]
    return ERROR_KINDS.get(name, ProviderErrorKind.UNKNOWN)


def _attributes(email: str, full_name: str, phone_number: str | None) -> list[dict]:
    attributes = [
        {"Name": "email", "Value": email},
        {"Name": "name", "Value": full_name},
    ]
    if phone_number:
        attributes.append({"Name": "phone_number", "Value": phone_number})
    return attributes


def _attribute(attributes: list[dict], name: str) -> str | None:
    for attribute in attributes:
        if attribute.get("Name") == name:
            return attribute.get("Value")
    return None


class IdentityProviderClient(IdentityProvider):
    """Base class for identity provider clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealIdentityProviderClient(IdentityProviderClient):
    """HTTP client for the managed identity provider."""

    def __init__(
        self,
        endpoint: str,
        client_id: str,
        client_secret: str = "",
        admin_token: str = "",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize identity provider client.

        Args:
            endpoint: Provider RPC endpoint URL
            client_id: App client ID registered with the provider
            client_secret: App client secret (optional)
            admin_token: Credential for administrative actions
            timeout_seconds: Upper bound for each call
            transport: Custom httpx transport (tests)
        """
        self.endpoint = endpoint
        self.client_id = client_id
        self.client_secret = client_secret
        self.admin_token = admin_token
        self.timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport

    def _secret_hash(self, username: str) -> str | None:
        """Compute the secret hash the provider requires when the client has a secret."""
        if not self.client_secret:
            return None
        digest = hmac.new(
            self.client_secret.encode("utf-8"),
            (username + self.client_id).encode("utf-8"),
            hashlib.sha256,
        ).digest()
        return base64.b64encode(digest).decode("ascii")

    def _client_payload(self, username: str, **payload) -> dict:
        payload["ClientId"] = self.client_id
        secret_hash = self._secret_hash(username)
        if secret_hash:
            payload["SecretHash"] = secret_hash
        return payload

    async def _call(self, action: str, payload: dict, admin: bool = False) -> dict:
        """Invoke one provider action.

        Args:
            action: Action name
            payload: JSON body
            admin: Whether the action needs the administrative credential

        Returns:
            Decoded JSON response (empty dict for empty bodies)

        Raises:
            IdentityProviderError: On any provider, transport or config failure
        """
        if not self.endpoint or not self.client_id:
            raise IdentityProviderError(
                ProviderErrorKind.MISCONFIGURED,
                "Identity provider endpoint or client ID is not configured",
            )
        if admin and not self.admin_token:
            raise IdentityProviderError(
                ProviderErrorKind.MISCONFIGURED,
                "Identity provider admin credential is not configured",
            )

        headers = {
            "Content-Type": "application/x-amz-json-1.1",
            "X-Amz-Target": f"{TARGET_PREFIX}.{action}",
        }
        if admin:
            headers["Authorization"] = f"Bearer {self.admin_token}"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            logfire.error("Identity provider timeout", action=action, error=str(e))
            raise IdentityProviderError(ProviderErrorKind.TIMEOUT, str(e)) from e
        except httpx.HTTPError as e:
            logfire.error("Identity provider HTTP error", action=action, error=str(e))
            raise IdentityProviderError(ProviderErrorKind.UNKNOWN, str(e)) from e

        try:
            body = response.json() if response.content else {}
        except ValueError:
            # Gateway error pages and other non-JSON bodies
            body = None

        if response.status_code != 200:
            error_type = body.get("__type", "") if isinstance(body, dict) else ""
            message = body.get("message", "") if isinstance(body, dict) else ""
            kind = error_kind(error_type)
            logfire.warn(
                "Identity provider rejected request",
                action=action,
                status_code=response.status_code,
                error_type=error_type,
                kind=kind.value,
            )
            raise IdentityProviderError(
                kind, message or f"Provider returned HTTP {response.status_code}"
            )

        if not isinstance(body, dict):
            logfire.warn("Identity provider returned malformed body", action=action)
            raise IdentityProviderError(
                ProviderErrorKind.UNKNOWN, "Provider returned a malformed response"
            )
        return body

    async def check_exists(self, email: str) -> ExternalIdentityLookup:
        with logfire.span("identity_provider.check_exists", email=email):
            try:
                body = await self._call("AdminGetUser", {"Username": email}, admin=True)
            except IdentityProviderError as e:
                if e.kind == ProviderErrorKind.NOT_FOUND:
                    return ExternalIdentityLookup(exists=False)
                raise

            return ExternalIdentityLookup(
                exists=True,
                status=STATUS_MAP.get(
                    body.get("UserStatus", ""), ExternalIdentityStatus.UNKNOWN
                ),
                external_id=_attribute(body.get("UserAttributes", []), "sub"),
                external_username=body.get("Username"),
            )

    async def provision_self_service(
        self,
        email: str,
        full_name: str,
        phone_number: str | None,
        credential: str,
    ) -> ExternalIdentityResult:
        with logfire.span("identity_provider.provision_self_service", email=email):
            body = await self._call(
                "SignUp",
                self._client_payload(
                    email,
                    Username=email,
                    Password=credential,
                    UserAttributes=_attributes(email, full_name, phone_number),
                ),
            )
            logfire.info("Identity provisioned (self-service)", email=email)
            return ExternalIdentityResult(
                success=True,
                external_id=body.get("UserSub"),
                external_username=email,
            )

    async def provision_administrative(
        self, email: str, full_name: str, phone_number: str | None
    ) -> ExternalIdentityResult:
        with logfire.span("identity_provider.provision_administrative", email=email):
            body = await self._call(
                "AdminCreateUser",
                {
                    "Username": email,
                    "UserAttributes": _attributes(email, full_name, phone_number),
                    "DesiredDeliveryMediums": ["EMAIL"],
                },
                admin=True,
            )
            user = body.get("User", {})
            logfire.info("Identity provisioned (administrative)", email=email)
            return ExternalIdentityResult(
                success=True,
                external_id=_attribute(user.get("Attributes", []), "sub"),
                external_username=user.get("Username", email),
            )

    async def confirm_code(self, email: str, code: str) -> None:
        with logfire.span("identity_provider.confirm_code", email=email):
            await self._call(
                "ConfirmSignUp",
                self._client_payload(email, Username=email, ConfirmationCode=code),
            )

    async def resend_code(self, email: str) -> None:
        with logfire.span("identity_provider.resend_code", email=email):
            await self._call(
                "ResendConfirmationCode", self._client_payload(email, Username=email)
            )

    async def force_confirm(self, email: str) -> None:
        with logfire.span("identity_provider.force_confirm", email=email):
            await self._call("AdminConfirmSignUp", {"Username": email}, admin=True)

    async def set_durable_credential(self, email: str, credential: str) -> None:
        with logfire.span("identity_provider.set_durable_credential", email=email):
            await self._call(
                "AdminSetUserPassword",
                {"Username": email, "Password": credential, "Permanent": True},
                admin=True,
            )

    async def issue_tokens(self, email: str, credential: str) -> TokenBundle:
        with logfire.span("identity_provider.issue_tokens", email=email):
            parameters = {"USERNAME": email, "PASSWORD": credential}
            secret_hash = self._secret_hash(email)
            if secret_hash:
                parameters["SECRET_HASH"] = secret_hash
            body = await self._call(
                "InitiateAuth",
                {
                    "AuthFlow": "USER_PASSWORD_AUTH",
                    "ClientId": self.client_id,
                    "AuthParameters": parameters,
                },
            )
            result = body.get("AuthenticationResult")
            if not result:
                # A challenge (e.g. new password required) is not a session
                raise IdentityProviderError(
                    ProviderErrorKind.NOT_AUTHORIZED,
                    f"Authentication challenge required: {body.get('ChallengeName')}",
                )
            return TokenBundle(
                access_token=result["AccessToken"],
                id_token=result.get("IdToken"),
                refresh_token=result.get("RefreshToken"),
                token_type=result.get("TokenType", "Bearer"),
                expires_in=result.get("ExpiresIn", 3600),
            )

    async def send_reset_challenge(self, email: str) -> None:
        with logfire.span("identity_provider.send_reset_challenge", email=email):
            await self._call(
                "ForgotPassword", self._client_payload(email, Username=email)
            )

    async def confirm_reset(self, email: str, code: str, new_password: str) -> None:
        with logfire.span("identity_provider.confirm_reset", email=email):
            await self._call(
                "ConfirmForgotPassword",
                self._client_payload(
                    email,
                    Username=email,
                    ConfirmationCode=code,
                    Password=new_password,
                ),
            )


class MockIdentityProviderClient(IdentityProviderClient):
    """In-memory identity provider for tests and local development.

    Keeps identities per email, issues fixed confirmation and reset codes,
    and can be told to fail specific calls. ``calls`` records every call
    as ``(method, email)``.
    """

    def __init__(
        self, confirmation_code: str = "123456", reset_code: str = "654321"
    ) -> None:
        """Initialize mock provider without real configuration.

        Args:
            confirmation_code: Code every confirmation email carries
            reset_code: Code every reset email carries
        """
        self.confirmation_code = confirmation_code
        self.reset_code = reset_code
        self.identities: dict[str, dict] = {}
        self.calls: list[tuple[str, str]] = []
        self._failures: dict[str, list[IdentityProviderError]] = {}

    def fail_on(
        self, method: str, kind: ProviderErrorKind, times: int = 1, message: str = ""
    ) -> None:
        """Make the next ``times`` calls of ``method`` raise ``kind``."""
        self._failures.setdefault(method, []).extend(
            IdentityProviderError(kind, message) for _ in range(times)
        )

    def seed_identity(
        self,
        email: str,
        status: ExternalIdentityStatus = ExternalIdentityStatus.CONFIRMED,
        password: str | None = None,
    ) -> str:
        """Create an identity directly and return its external id."""
        external_id = str(uuid4())
        self.identities[email] = {
            "external_id": external_id,
            "status": status,
            "password": password,
        }
        return external_id

    def calls_to(self, method: str) -> list[str]:
        """Emails passed to ``method``, in call order."""
        return [email for name, email in self.calls if name == method]

    def _enter(self, method: str, email: str) -> None:
        self.calls.append((method, email))
        pending = self._failures.get(method)
        if pending:
            raise pending.pop(0)

    def _get(self, email: str) -> dict:
        identity = self.identities.get(email)
        if identity is None:
            raise IdentityProviderError(ProviderErrorKind.NOT_FOUND, "User does not exist.")
        return identity

    async def check_exists(self, email: str) -> ExternalIdentityLookup:
        self._enter("check_exists", email)
        identity = self.identities.get(email)
        if identity is None:
            return ExternalIdentityLookup(exists=False)
        return ExternalIdentityLookup(
            exists=True,
            status=identity["status"],
            external_id=identity["external_id"],
            external_username=email,
        )

    async def _provision(
        self, email: str, status: ExternalIdentityStatus, password: str | None
    ) -> ExternalIdentityResult:
        if email in self.identities:
            raise IdentityProviderError(
                ProviderErrorKind.DUPLICATE, "User already exists"
            )
        external_id = self.seed_identity(email, status, password)
        return ExternalIdentityResult(
            success=True, external_id=external_id, external_username=email
        )

    async def provision_self_service(
        self,
        email: str,
        full_name: str,
        phone_number: str | None,
        credential: str,
    ) -> ExternalIdentityResult:
        self._enter("provision_self_service", email)
        return await self._provision(
            email, ExternalIdentityStatus.UNCONFIRMED, credential
        )

    async def provision_administrative(
        self, email: str, full_name: str, phone_number: str | None
    ) -> ExternalIdentityResult:
        self._enter("provision_administrative", email)
        return await self._provision(
            email, ExternalIdentityStatus.FORCE_CHANGE_PASSWORD, None
        )

    async def confirm_code(self, email: str, code: str) -> None:
        self._enter("confirm_code", email)
        identity = self._get(email)
        if identity["status"] == ExternalIdentityStatus.CONFIRMED:
            raise IdentityProviderError(
                ProviderErrorKind.NOT_AUTHORIZED, "User cannot be confirmed"
            )
        if code != self.confirmation_code:
            raise IdentityProviderError(
                ProviderErrorKind.INVALID_CODE, "Invalid verification code provided"
            )
        identity["status"] = ExternalIdentityStatus.CONFIRMED

    async def resend_code(self, email: str) -> None:
        self._enter("resend_code", email)
        identity = self._get(email)
        if identity["status"] != ExternalIdentityStatus.UNCONFIRMED:
            raise IdentityProviderError(
                ProviderErrorKind.NOT_AUTHORIZED,
                "Cannot resend codes. Auto verification not turned on.",
            )

    async def force_confirm(self, email: str) -> None:
        self._enter("force_confirm", email)
        self._get(email)["status"] = ExternalIdentityStatus.CONFIRMED

    async def set_durable_credential(self, email: str, credential: str) -> None:
        self._enter("set_durable_credential", email)
        identity = self._get(email)
        identity["password"] = credential
        identity["status"] = ExternalIdentityStatus.CONFIRMED

    async def issue_tokens(self, email: str, credential: str) -> TokenBundle:
        self._enter("issue_tokens", email)
        identity = self._get(email)
        if identity["password"] is None or identity["password"] != credential:
            raise IdentityProviderError(
                ProviderErrorKind.NOT_AUTHORIZED, "Incorrect username or password."
            )
        if identity["status"] == ExternalIdentityStatus.UNCONFIRMED:
            raise IdentityProviderError(
                ProviderErrorKind.NOT_CONFIRMED, "User is not confirmed."
            )
        return TokenBundle(
            access_token=f"access-{uuid4().hex}",
            id_token=f"id-{uuid4().hex}",
            refresh_token=f"refresh-{uuid4().hex}",
            expires_in=3600,
        )

    async def send_reset_challenge(self, email: str) -> None:
        self._enter("send_reset_challenge", email)
        self._get(email)["reset_pending"] = True

    async def confirm_reset(self, email: str, code: str, new_password: str) -> None:
        self._enter("confirm_reset", email)
        identity = self._get(email)
        if not identity.get("reset_pending") or code != self.reset_code:
            raise IdentityProviderError(
                ProviderErrorKind.INVALID_CODE, "Invalid verification code provided"
            )
        identity["password"] = new_password
        identity["reset_pending"] = False
