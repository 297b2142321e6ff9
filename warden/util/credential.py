"""Derived provider credential.

OTP-only accounts still need a password on the identity provider side so the
service can request tokens on their behalf. Instead of storing a second
secret per account, the password is recomputed from the email and the
process-wide service secret whenever it is needed.
"""

import base64
import hashlib
import hmac

from warden.util.error import ConfigurationError

# Fixed affixes guarantee upper, lower, digit and symbol classes so the
# value passes common provider password policies.
_PREFIX = "Wd1!"
_SUFFIX = "#9a"


def normalize_email(email: str) -> str:
    """Normalize an email for derivation and lookups."""
    return email.strip().lower()


def derive_credential(secret: str, email: str) -> str:
    """Derive the provider-side password for an account.

    Deterministic: the same secret and email always give the same value.

    Args:
        secret: Process-wide service secret
        email: Account email (case and surrounding whitespace ignored)

    Returns:
        Password string suitable for the identity provider

    Raises:
        ConfigurationError: If the service secret is empty
    """
    if not secret:
        raise ConfigurationError("Service secret is not configured")

    digest = hmac.new(
        secret.encode("utf-8"),
        normalize_email(email).encode("utf-8"),
        hashlib.sha256,
    ).digest()
    body = base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
    return f"{_PREFIX}{body}{_SUFFIX}"
