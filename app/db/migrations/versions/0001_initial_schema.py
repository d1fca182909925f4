"""Documents, access grants, invitations, access requests and presence.

Revision ID: 0001_initial_schema
Revises:
"""

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

ROLE_VALUES = ("viewer", "editor")
INVITATION_STATUS_VALUES = ("pending", "accepted", "declined")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _role_column():
    return sa.Column(
        "role",
        sa.Enum(*ROLE_VALUES, name="access_role", native_enum=False, length=20),
        nullable=False,
    )


def _document_fk():
    return sa.Column(
        "document_id",
        sa.UUID(),
        sa.ForeignKey("documents.uuid", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "documents",
        sa.Column("uuid", sa.UUID(), primary_key=True),
        sa.Column("owner_id", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("is_archived", sa.Boolean(), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_documents_owner_id", "documents", ["owner_id"])

    op.create_table(
        "access_grants",
        sa.Column("uuid", sa.UUID(), primary_key=True),
        _document_fk(),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        _role_column(),
        sa.Column("invited_by", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("document_id", "user_id", name="uq_access_grants_document_user"),
    )
    op.create_index("ix_access_grants_document_id", "access_grants", ["document_id"])
    op.create_index("ix_access_grants_user_id", "access_grants", ["user_id"])

    op.create_table(
        "invitations",
        sa.Column("uuid", sa.UUID(), primary_key=True),
        _document_fk(),
        sa.Column("invited_by", sa.String(length=255), nullable=False),
        sa.Column("invited_email", sa.String(length=320), nullable=False),
        _role_column(),
        sa.Column(
            "status",
            sa.Enum(*INVITATION_STATUS_VALUES, name="invitation_status", native_enum=False, length=20),
            nullable=False,
        ),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_invitations_document_id", "invitations", ["document_id"])
    op.create_index("ix_invitations_invited_email", "invitations", ["invited_email"])
    op.create_index("ix_invitations_status", "invitations", ["status"])
    op.create_index(
        "uq_invitations_pending_email",
        "invitations",
        ["document_id", "invited_email"],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
        sqlite_where=sa.text("status = 'pending'"),
    )

    op.create_table(
        "access_requests",
        sa.Column("uuid", sa.UUID(), primary_key=True),
        _document_fk(),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("document_id", "user_id", name="uq_access_requests_document_user"),
    )
    op.create_index("ix_access_requests_document_id", "access_requests", ["document_id"])

    op.create_table(
        "presence",
        sa.Column("uuid", sa.UUID(), primary_key=True),
        _document_fk(),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("avatar_url", sa.String(length=2048), nullable=False),
        sa.Column("last_seen", sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("document_id", "user_id", name="uq_presence_document_user"),
    )
    op.create_index("ix_presence_document_id", "presence", ["document_id"])


def downgrade() -> None:
    op.drop_index("ix_presence_document_id", table_name="presence")
    op.drop_table("presence")

    op.drop_index("ix_access_requests_document_id", table_name="access_requests")
    op.drop_table("access_requests")

    op.drop_index("uq_invitations_pending_email", table_name="invitations")
    op.drop_index("ix_invitations_status", table_name="invitations")
    op.drop_index("ix_invitations_invited_email", table_name="invitations")
    op.drop_index("ix_invitations_document_id", table_name="invitations")
    op.drop_table("invitations")

    op.drop_index("ix_access_grants_user_id", table_name="access_grants")
    op.drop_index("ix_access_grants_document_id", table_name="access_grants")
    op.drop_table("access_grants")

    op.drop_index("ix_documents_owner_id", table_name="documents")
    op.drop_table("documents")
