"""Account lifecycle transitions.

Stateless functions over explicit Account values. Every function returns a
new Account and never touches storage or the identity provider, so the
saga steps in the use cases can be tested in isolation.

State machine:

    pending_verification --activate--> active

No other status transition exists.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from warden.domain.error import InvariantViolationError
from warden.domain.model.account import Account
from warden.domain.value import (
    AccountId,
    AccountStatus,
    ExternalIdentityLookup,
    ExternalIdentityStatus,
    RoleId,
    TokenBundle,
)


class SignupDecision(str, Enum):
    """What signup does about the provider-side identity."""

    PROVISION = "provision"  # No external identity yet
    RESUME = "resume"  # Unconfirmed identity exists, reuse it
    REJECT = "reject"  # Confirmed identity exists, duplicate


def check_invariants(account: Account) -> Account:
    """Verify the account can still authenticate by at least one path.

    Args:
        account: Account to check

    Returns:
        The same account

    Raises:
        InvariantViolationError: If the account breaks a lifecycle invariant
    """
    if account.status == AccountStatus.PENDING_VERIFICATION and not account.is_linked:
        raise InvariantViolationError(
            f"Pending account {account.id} has no external linkage"
        )
    if (
        account.status == AccountStatus.ACTIVE
        and not account.is_linked
        and not account.password_hash
    ):
        raise InvariantViolationError(
            f"Active account {account.id} has neither password nor external linkage"
        )
    return account


def new_pending_account(
    email: str,
    full_name: str,
    phone_number: str | None,
    password_hash: str,
    role_id: RoleId,
    now: datetime,
) -> Account:
    """Build the local row signup creates before provisioning.

    The row has no linkage yet; it is the saga's rollback point and gains
    linkage or gets deleted before signup returns.
    """
    return Account(
        id=AccountId(uuid4()),
        email=email,
        full_name=full_name,
        phone_number=phone_number,
        role_id=role_id,
        password_hash=password_hash,
        status=AccountStatus.PENDING_VERIFICATION,
        created_at=now,
        updated_at=now,
    )


def decide_signup(
    lookup: ExternalIdentityLookup, allow_resumable: bool
) -> SignupDecision:
    """Decide how signup treats an existing provider identity.

    Args:
        lookup: Provider-side existence check for the email
        allow_resumable: Whether an unconfirmed identity may be reused

    Returns:
        The decision
    """
    if not lookup.exists:
        return SignupDecision.PROVISION
    if lookup.status == ExternalIdentityStatus.CONFIRMED:
        return SignupDecision.REJECT
    return SignupDecision.RESUME if allow_resumable else SignupDecision.REJECT


def link_external(
    account: Account,
    external_id: str,
    external_username: str | None,
    now: datetime,
) -> Account:
    """Attach an external identity to the account."""
    return account.model_copy(
        update={
            "external_id": external_id,
            "external_username": external_username or account.email,
            "updated_at": now,
        }
    )


def activate(account: Account, now: datetime, record_login: bool = True) -> Account:
    """Move a pending account to active.

    Activating an already active account is a no-op so retries are safe.

    Args:
        account: Pending account
        now: Transition time
        record_login: Whether to stamp last_login_at as well

    Returns:
        Active account

    Raises:
        InvariantViolationError: If the account is not linked
    """
    if account.status == AccountStatus.ACTIVE:
        return account
    update = {
        "status": AccountStatus.ACTIVE,
        "email_verified_at": now,
        "updated_at": now,
    }
    if record_login:
        update["last_login_at"] = now
    return check_invariants(account.model_copy(update=update))


def record_login(account: Account, now: datetime) -> Account:
    """Stamp a successful login."""
    return account.model_copy(update={"last_login_at": now, "updated_at": now})


def store_tokens(account: Account, tokens: TokenBundle, now: datetime) -> Account:
    """Copy a provider token bundle onto the account."""
    return account.model_copy(update={"tokens": tokens, "updated_at": now})


def change_password_hash(account: Account, password_hash: str, now: datetime) -> Account:
    """Replace the local password hash."""
    return account.model_copy(
        update={"password_hash": password_hash, "updated_at": now}
    )


class LinkagePlan(str, Enum):
    """How a login gives an unlinked account an external identity."""

    NONE = "none"  # Already linked
    LINK_EXISTING = "link_existing"
    PROVISION = "provision"


def plan_linkage(account: Account, lookup: ExternalIdentityLookup | None) -> LinkagePlan:
    """Decide how to link an account that authenticates by OTP.

    Args:
        account: Account logging in
        lookup: Provider-side existence check, None when not looked up

    Returns:
        The plan
    """
    if account.is_linked:
        return LinkagePlan.NONE
    if lookup is not None and lookup.exists:
        return LinkagePlan.LINK_EXISTING
    return LinkagePlan.PROVISION
