"""Ports for persisting contacts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from contactlink.domain.model import Contact

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from contactlink.domain.model import ContactId, Email, PhoneNumber
    from contactlink.domain.reconciliation.contracts import ContactUpdate


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> TEntity: ...


@runtime_checkable
class ContactRepository(Repository[Contact], Protocol):
    """Persistence contract for identity records.

    All reads see live (non-deleted) records only.
    """

    def add(self, entity: Contact) -> Contact:
        """Insert ``entity`` and return it with its store-assigned id.

        Raises ``DuplicatePrimaryError`` when a primary collides with a live
        primary sharing its email or phone number.
        """
        ...

    def select_where(
        self,
        *,
        email: Email | None,
        phone_number: PhoneNumber | None,
    ) -> Sequence[Contact]:
        """Return records whose email or phone equals the given value(s).

        Secondaries whose primary has been soft-deleted are not returned.
        """
        ...

    def select_chain(self, primary_id: ContactId) -> Sequence[Contact]:
        """Return the record ``primary_id`` and every record linked to it, oldest first."""
        ...

    def oldest_among(self, contact_ids: Iterable[ContactId]) -> Contact | None:
        """Return the oldest record among ``contact_ids`` (created_at, then id)."""
        ...

    def apply_updates(self, updates: Sequence[ContactUpdate], *, updated_at: datetime) -> None:
        """Apply a batch of merge updates within the current transaction."""
        ...

    def soft_delete(self, contact_id: ContactId, *, deleted_at: datetime) -> bool:
        """Mark a live record deleted; return whether a record was affected."""
        ...

    def count(self) -> int: ...
