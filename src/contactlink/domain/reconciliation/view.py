"""Consolidated view assembly."""

from __future__ import annotations

from typing import TYPE_CHECKING

from contactlink.domain.errors import InconsistentChainError

from .contracts import ContactView

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from contactlink.domain.model import Contact


def build_view(chain: Sequence[Contact]) -> ContactView:
    """Build the consolidated view of one chain.

    The primary's own email and phone come first; the remaining distinct values
    follow in chain order. Secondary ids are sorted oldest first.
    """

    primaries = [contact for contact in chain if contact.is_primary]
    if len(primaries) != 1:
        raise InconsistentChainError(
            f"Chain must contain exactly one primary contact, found {len(primaries)}"
        )
    primary = primaries[0]
    if primary.id is None:
        raise InconsistentChainError("Primary contact has no id")

    secondaries = sorted(
        (contact for contact in chain if not contact.is_primary),
        key=lambda contact: contact.age_key,
    )
    secondary_ids: list[int] = []
    for contact in secondaries:
        if contact.id is None:
            raise InconsistentChainError("Secondary contact has no id")
        secondary_ids.append(contact.id)

    return ContactView(
        primary_contact_id=primary.id,
        emails=_primary_first(primary.email, (contact.email for contact in chain)),
        phone_numbers=_primary_first(
            primary.phone_number,
            (contact.phone_number for contact in chain),
        ),
        secondary_contact_ids=tuple(secondary_ids),
    )


def _primary_first(primary_value: str | None, values: Iterable[str | None]) -> tuple[str, ...]:
    ordered: list[str] = [primary_value] if primary_value else []
    for value in values:
        if value and value not in ordered:
            ordered.append(value)
    return tuple(ordered)
