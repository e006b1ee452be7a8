"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError

from contactlink.adapters.sqlalchemy.mappings import contact_table
from contactlink.domain.errors import DuplicatePrimaryError
from contactlink.domain.model import Contact, LinkPrecedence
from contactlink.domain.reconciliation.contracts import DemotePrimaries, RelinkSecondaries

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from sqlalchemy import CursorResult, Select, Update
    from sqlalchemy.orm import Session

    from contactlink.domain.model import ContactId, Email, PhoneNumber
    from contactlink.domain.reconciliation.contracts import ContactUpdate


class SqlAlchemyContactRepository:
    """Contact store on top of one session; never commits on its own."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Contact) -> Contact:
        self.session.add(entity)
        try:
            # flush immediately so the store assigns the id
            self.session.flush()
        except IntegrityError as exc:
            if entity.is_primary:
                raise DuplicatePrimaryError(
                    "A live primary already exists for "
                    f"email={entity.email!r} phone_number={entity.phone_number!r}"
                ) from exc
            raise
        return entity

    def select_where(
        self,
        *,
        email: Email | None,
        phone_number: PhoneNumber | None,
    ) -> Sequence[Contact]:
        clauses = []
        if email is not None:
            clauses.append(contact_table.c.email == email)
        if phone_number is not None:
            clauses.append(contact_table.c.phone_number == phone_number)
        if not clauses:
            return ()

        linked_primary = contact_table.alias("linked_primary")
        primary_is_live = (
            select(linked_primary.c.id)
            .where(linked_primary.c.id == contact_table.c.linked_id)
            .where(linked_primary.c.deleted_at.is_(None))
            .exists()
        )
        stmt = (
            self._live_contacts()
            .where(or_(*clauses))
            .where(or_(contact_table.c.linked_id.is_(None), primary_is_live))
        )
        return self.session.execute(stmt).scalars().all()

    def select_chain(self, primary_id: ContactId) -> Sequence[Contact]:
        stmt = (
            self._live_contacts()
            .where(
                or_(
                    contact_table.c.id == primary_id,
                    contact_table.c.linked_id == primary_id,
                )
            )
            .order_by(contact_table.c.created_at.asc(), contact_table.c.id.asc())
        )
        return self.session.execute(stmt).scalars().all()

    def oldest_among(self, contact_ids: Iterable[ContactId]) -> Contact | None:
        ids = list(contact_ids)
        if not ids:
            return None
        stmt = (
            self._live_contacts()
            .where(contact_table.c.id.in_(ids))
            .order_by(contact_table.c.created_at.asc(), contact_table.c.id.asc())
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def apply_updates(self, updates: Sequence[ContactUpdate], *, updated_at: datetime) -> None:
        for contact_update in updates:
            self.session.execute(self._update_statement(contact_update, updated_at))

    def soft_delete(self, contact_id: ContactId, *, deleted_at: datetime) -> bool:
        stmt = (
            update(contact_table)
            .where(contact_table.c.id == contact_id)
            .where(contact_table.c.deleted_at.is_(None))
            .values(deleted_at=deleted_at, updated_at=deleted_at)
        )
        result = cast("CursorResult[tuple[()]]", self.session.execute(stmt))
        return result.rowcount > 0

    def count(self) -> int:
        stmt = (
            select(func.count())
            .select_from(contact_table)
            .where(contact_table.c.deleted_at.is_(None))
        )
        return self.session.execute(stmt).scalar_one()

    @staticmethod
    def _live_contacts() -> Select[tuple[Contact]]:
        # bulk updates bypass the identity map, so reads must refresh loaded rows
        return (
            select(Contact)
            .where(contact_table.c.deleted_at.is_(None))
            .execution_options(populate_existing=True)
        )

    @staticmethod
    def _update_statement(contact_update: ContactUpdate, updated_at: datetime) -> Update:
        if isinstance(contact_update, DemotePrimaries):
            return (
                update(contact_table)
                .where(contact_table.c.id.in_(contact_update.contact_ids))
                .where(contact_table.c.link_precedence == LinkPrecedence.PRIMARY)
                .values(
                    link_precedence=LinkPrecedence.SECONDARY,
                    linked_id=contact_update.linked_id,
                    updated_at=updated_at,
                )
            )
        if isinstance(contact_update, RelinkSecondaries):
            return (
                update(contact_table)
                .where(contact_table.c.linked_id.in_(contact_update.previous_primary_ids))
                .values(linked_id=contact_update.linked_id, updated_at=updated_at)
            )
        raise TypeError(f"Unsupported contact update: {contact_update!r}")


if TYPE_CHECKING:
    from contactlink.domain.ports.persistence import ContactRepository

    _session_stub = cast("Session", object())
    _repo_check: ContactRepository = SqlAlchemyContactRepository(_session_stub)
