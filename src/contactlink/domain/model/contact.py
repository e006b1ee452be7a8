"""Identity records.

A chain is one primary contact plus the secondaries pointing at it through
``linked_id``. Chains are flat: a secondary always points at the primary itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from contactlink.domain.model.enums import LinkPrecedence

if TYPE_CHECKING:
    from contactlink.domain.model.primitives import (
        ContactFragment,
        ContactId,
        Email,
        PhoneNumber,
    )


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(eq=False, kw_only=True)
class Contact:
    """One stored identity record; ``id`` is assigned by the store on insert."""

    id: ContactId | None = None
    email: Email | None = None
    phone_number: PhoneNumber | None = None
    linked_id: ContactId | None = None
    link_precedence: LinkPrecedence = LinkPrecedence.PRIMARY
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    deleted_at: datetime | None = None

    @classmethod
    def new_primary(cls, fragment: ContactFragment, *, now: datetime) -> Contact:
        return cls(
            email=fragment.email,
            phone_number=fragment.phone_number,
            link_precedence=LinkPrecedence.PRIMARY,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def new_secondary(
        cls,
        fragment: ContactFragment,
        *,
        primary_id: ContactId,
        now: datetime,
    ) -> Contact:
        return cls(
            email=fragment.email,
            phone_number=fragment.phone_number,
            linked_id=primary_id,
            link_precedence=LinkPrecedence.SECONDARY,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_primary(self) -> bool:
        return self.link_precedence is LinkPrecedence.PRIMARY

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def primary_id(self) -> ContactId:
        """Return own id for primaries, else the linked primary id."""
        if self.is_primary:
            if self.id is None:
                raise ValueError("contact has not been persisted yet")
            return self.id
        if self.linked_id is None:
            raise ValueError(f"secondary contact {self.id} has no linked_id")
        return self.linked_id

    @property
    def age_key(self) -> tuple[datetime, int]:
        """Sort key for "which record is older": created_at, then id."""
        return (self.created_at, self.id if self.id is not None else 0)
