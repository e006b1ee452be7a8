from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import inspect

from contactlink.adapters.sqlalchemy.mappings import UTCDateTime, contact_table, start_mappers
from contactlink.adapters.sqlalchemy.migrations import current_revision, upgrade_head
from contactlink.domain.model import Contact

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session


def test_start_mappers_is_idempotent() -> None:
    registry = start_mappers()

    assert start_mappers() is registry
    assert inspect(Contact).local_table is contact_table


def test_migrations_create_contact_table_with_indexes(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    assert "contact" in inspector.get_table_names()
    columns = {column["name"] for column in inspector.get_columns("contact")}
    assert columns == {
        "id",
        "phone_number",
        "email",
        "linked_id",
        "link_precedence",
        "created_at",
        "updated_at",
        "deleted_at",
    }
    indexes = {index["name"]: index for index in inspector.get_indexes("contact")}
    assert {"ix_contact_email", "ix_contact_phone_number", "ix_contact_linked_id"} <= set(indexes)
    assert indexes["uq_contact_live_primary_email"]["unique"]
    assert indexes["uq_contact_live_primary_phone_number"]["unique"]


def test_utc_datetime_round_trips_naive_values_as_utc() -> None:
    column_type = UTCDateTime()

    bound = column_type.process_bind_param(datetime(2023, 4, 1, 12, 0), dialect=None)  # type: ignore[arg-type]
    loaded = column_type.process_result_value(datetime(2023, 4, 1, 12, 0), dialect=None)  # type: ignore[arg-type]

    assert bound == datetime(2023, 4, 1, 12, 0, tzinfo=UTC)
    assert loaded == datetime(2023, 4, 1, 12, 0, tzinfo=UTC)
    assert column_type.process_bind_param(None, dialect=None) is None  # type: ignore[arg-type]


def test_loaded_timestamps_are_timezone_aware(sqlite_session: Session) -> None:
    contact = Contact(email="doc@hillvalley.edu")
    sqlite_session.add(contact)
    sqlite_session.commit()
    sqlite_session.expire_all()

    reloaded = sqlite_session.get(Contact, contact.id)

    assert reloaded is not None
    assert reloaded.created_at.tzinfo is not None


def test_upgrade_head_stamps_latest_revision(sqlite_engine: Engine) -> None:
    assert current_revision(sqlite_engine) == "0001"

    upgrade_head(engine=sqlite_engine)

    assert current_revision(sqlite_engine) == "0001"
