"""SQLAlchemy mapping metadata for the contactlink domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    orm,
    text,
)
from sqlalchemy.orm import configure_mappers

from contactlink.domain.model import Contact, LinkPrecedence

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum_values(enum_cls: type[LinkPrecedence]) -> list[str]:
    return [member.value for member in enum_cls]


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Live primaries; the partial unique indexes below only constrain these rows.
LIVE_PRIMARY_CLAUSE = "link_precedence = 'primary' AND deleted_at IS NULL"

contact_table = Table(
    "contact",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("phone_number", String, nullable=True),
    Column("email", String, nullable=True),
    Column("linked_id", Integer, ForeignKey("contact.id"), nullable=True),
    Column(
        "link_precedence",
        Enum(
            LinkPrecedence,
            native_enum=False,
            values_callable=_enum_values,
            length=16,
        ),
        nullable=False,
    ),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Column("deleted_at", UTCDateTime(), nullable=True),
    Index("ix_contact_email", "email"),
    Index("ix_contact_phone_number", "phone_number"),
    Index("ix_contact_linked_id", "linked_id"),
    sqlite_autoincrement=True,
)

Index(
    "uq_contact_live_primary_email",
    contact_table.c.email,
    unique=True,
    sqlite_where=text(f"{LIVE_PRIMARY_CLAUSE} AND email IS NOT NULL"),
    postgresql_where=text(f"{LIVE_PRIMARY_CLAUSE} AND email IS NOT NULL"),
)

Index(
    "uq_contact_live_primary_phone_number",
    contact_table.c.phone_number,
    unique=True,
    sqlite_where=text(f"{LIVE_PRIMARY_CLAUSE} AND phone_number IS NOT NULL"),
    postgresql_where=text(f"{LIVE_PRIMARY_CLAUSE} AND phone_number IS NOT NULL"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Contact, contact_table)

    configure_mappers()
    return mapper_registry
