"""Domain services."""

from .account_service import AccountService
from .base import Service
from .credential_service import CredentialService
from .identity_provider import IdentityProvider, IdentityProviderError
from .otp_sender import OtpDeliveryError, OtpSender
from .otp_service import OtpService
from .provider_errors import map_provider_error

__all__ = [
    "AccountService",
    "CredentialService",
    "IdentityProvider",
    "IdentityProviderError",
    "OtpDeliveryError",
    "OtpSender",
    "OtpService",
    "Service",
    "map_provider_error",
]
