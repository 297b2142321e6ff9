"""SQLAlchemy table definitions for Warden.

Core tables only; domain models are mapped by hand in ``mappers``.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# ROLES TABLE (read-only for the credential lifecycle)
# ============================================================================
roles_table = Table(
    "roles",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("gen_random_uuid()")),
    Column("name", String(100), nullable=False, unique=True),
    Column("type", String(50), nullable=False),  # 'super_admin', 'user', ...
    Column("description", Text, nullable=True),
    Column("is_active", Boolean, nullable=False, server_default="true"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
)

# ============================================================================
# PERMISSIONS TABLE
# ============================================================================
permissions_table = Table(
    "permissions",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("gen_random_uuid()")),
    Column("resource", String(100), nullable=False),
    Column("action", String(50), nullable=False),
    UniqueConstraint("resource", "action", name="uq_permission_resource_action"),
)

# ============================================================================
# ROLE PERMISSIONS TABLE (many-to-many)
# ============================================================================
role_permissions_table = Table(
    "role_permissions",
    metadata,
    Column(
        "role_id", UUID, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "permission_id",
        UUID,
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

# ============================================================================
# ACCOUNTS TABLE
# ============================================================================
accounts_table = Table(
    "accounts",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("gen_random_uuid()")),
    Column("email", String(255), nullable=False, unique=True),
    Column("full_name", String(255), nullable=False),
    Column("phone_number", String(32), nullable=True, unique=True),
    Column("role_id", UUID, ForeignKey("roles.id"), nullable=False),
    Column("password_hash", Text, nullable=True),  # Null for OTP-only accounts
    Column("external_id", String(255), nullable=True, unique=True),
    Column("external_username", String(255), nullable=True),
    Column(
        "status",
        String(32),
        nullable=False,
        server_default="pending_verification",
    ),
    Column("is_kyc_verified", Boolean, nullable=False, server_default="false"),
    Column("email_verified_at", TIMESTAMP(timezone=True), nullable=True),
    Column("last_login_at", TIMESTAMP(timezone=True), nullable=True),
    # Last token bundle issued by the identity provider
    Column("access_token", Text, nullable=True),
    Column("id_token", Text, nullable=True),
    Column("refresh_token", Text, nullable=True),
    Column("token_type", String(32), nullable=True),
    Column("token_expires_in", Integer, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    CheckConstraint(
        "status IN ('pending_verification', 'active')", name="ck_account_status"
    ),
)

Index("idx_accounts_role_id", accounts_table.c.role_id)

# ============================================================================
# LOGIN OTPS TABLE
# ============================================================================
login_otps_table = Table(
    "login_otps",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("gen_random_uuid()")),
    Column("email", String(255), nullable=False),
    Column("code", String(6), nullable=False),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("consumed_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
)

Index("idx_login_otps_email", login_otps_table.c.email)
Index(
    "idx_login_otps_email_expires",
    login_otps_table.c.email,
    login_otps_table.c.expires_at,
)
