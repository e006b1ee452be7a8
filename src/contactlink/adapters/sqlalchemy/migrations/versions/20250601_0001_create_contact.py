"""Create the contact table.

Revision ID: 0001
Revises:
Create Date: 2025-06-01 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

LIVE_PRIMARY_CLAUSE = "link_precedence = 'primary' AND deleted_at IS NULL"


def upgrade() -> None:
    op.create_table(
        "contact",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("phone_number", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("linked_id", sa.Integer(), nullable=True),
        sa.Column("link_precedence", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["linked_id"],
            ["contact.id"],
            name="fk_contact_linked_id_contact",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_contact"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_contact_email", "contact", ["email"])
    op.create_index("ix_contact_phone_number", "contact", ["phone_number"])
    op.create_index("ix_contact_linked_id", "contact", ["linked_id"])
    op.create_index(
        "uq_contact_live_primary_email",
        "contact",
        ["email"],
        unique=True,
        sqlite_where=sa.text(f"{LIVE_PRIMARY_CLAUSE} AND email IS NOT NULL"),
        postgresql_where=sa.text(f"{LIVE_PRIMARY_CLAUSE} AND email IS NOT NULL"),
    )
    op.create_index(
        "uq_contact_live_primary_phone_number",
        "contact",
        ["phone_number"],
        unique=True,
        sqlite_where=sa.text(f"{LIVE_PRIMARY_CLAUSE} AND phone_number IS NOT NULL"),
        postgresql_where=sa.text(f"{LIVE_PRIMARY_CLAUSE} AND phone_number IS NOT NULL"),
    )


def downgrade() -> None:
    op.drop_index("uq_contact_live_primary_phone_number", table_name="contact")
    op.drop_index("uq_contact_live_primary_email", table_name="contact")
    op.drop_index("ix_contact_linked_id", table_name="contact")
    op.drop_index("ix_contact_phone_number", table_name="contact")
    op.drop_index("ix_contact_email", table_name="contact")
    op.drop_table("contact")
