"""Identity provider interface.

The external provider is a separate system of record for verified
identities, confirmation codes and token issuance. The engine only sees
this interface; implementations live in the adapter layer.
"""

from warden.domain.value import (
    ExternalIdentityLookup,
    ExternalIdentityResult,
    ProviderErrorKind,
    TokenBundle,
)


class IdentityProviderError(Exception):
    """Categorized identity provider failure.

    ``kind`` is always one of the closed ``ProviderErrorKind`` members;
    callers match on it, never on ``message``.
    """

    def __init__(self, kind: ProviderErrorKind, message: str = ""):
        self.kind = kind
        self.message = message or kind.value
        super().__init__(f"{kind.value}: {self.message}")


class IdentityProvider:
    """Generic identity provider interface.

    Every method raises ``IdentityProviderError`` on failure.
    """

    async def check_exists(self, email: str) -> ExternalIdentityLookup:
        """Look up whether an identity exists for an email.

        Args:
            email: Account email

        Returns:
            Existence, provider-side status and external id
        """
        raise NotImplementedError

    async def provision_self_service(
        self,
        email: str,
        full_name: str,
        phone_number: str | None,
        credential: str,
    ) -> ExternalIdentityResult:
        """Create an identity through the provider's self-service signup.

        The provider sends its own email confirmation code.

        Args:
            email: Account email
            full_name: Display name
            phone_number: Optional phone number
            credential: Initial provider-side password

        Returns:
            Provisioning outcome with external id and username
        """
        raise NotImplementedError

    async def provision_administrative(
        self, email: str, full_name: str, phone_number: str | None
    ) -> ExternalIdentityResult:
        """Create an identity through the provider's administrative API.

        Args:
            email: Account email
            full_name: Display name
            phone_number: Optional phone number

        Returns:
            Provisioning outcome with external id and username
        """
        raise NotImplementedError

    async def confirm_code(self, email: str, code: str) -> None:
        """Confirm an identity with the code the provider emailed.

        Args:
            email: Account email
            code: Confirmation code
        """
        raise NotImplementedError

    async def resend_code(self, email: str) -> None:
        """Ask the provider to send a new confirmation code.

        Args:
            email: Account email
        """
        raise NotImplementedError

    async def force_confirm(self, email: str) -> None:
        """Confirm an identity administratively, without a code.

        Args:
            email: Account email
        """
        raise NotImplementedError

    async def set_durable_credential(self, email: str, credential: str) -> None:
        """Set a permanent provider-side password.

        Args:
            email: Account email
            credential: New permanent password
        """
        raise NotImplementedError

    async def issue_tokens(self, email: str, credential: str) -> TokenBundle:
        """Authenticate with a password and return a token bundle.

        Args:
            email: Account email
            credential: Provider-side password

        Returns:
            Access, id and refresh tokens
        """
        raise NotImplementedError

    async def send_reset_challenge(self, email: str) -> None:
        """Start the provider-owned password reset flow.

        Args:
            email: Account email
        """
        raise NotImplementedError

    async def confirm_reset(self, email: str, code: str, new_password: str) -> None:
        """Finish the password reset flow.

        Args:
            email: Account email
            code: Reset code the provider emailed
            new_password: Password chosen by the user
        """
        raise NotImplementedError
