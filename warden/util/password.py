"""Local password hashing utilities."""

from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError

password_hash = PasswordHash.recommended()


def hash_password(password: str) -> str:
    """Hash a plaintext password for local storage.

    Args:
        password: Plaintext password

    Returns:
        Encoded hash (algorithm and parameters embedded)
    """
    return password_hash.hash(password)


def verify_password(password: str, hashed: str | None) -> bool:
    """Check a plaintext password against a stored hash.

    A missing or unparseable hash never verifies.

    Args:
        password: Plaintext password supplied by the caller
        hashed: Stored hash, may be None for OTP-only accounts

    Returns:
        True if the password matches
    """
    if not hashed:
        return False
    try:
        return password_hash.verify(password, hashed)
    except UnknownHashError:
        return False
