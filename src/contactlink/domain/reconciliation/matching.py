"""Exact-match lookup and resolution of matches to their chains.

Matching is exact equality on email or phone; there is no fuzzy matching.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contactlink.domain.model import Contact, ContactFragment, ContactId
    from contactlink.domain.ports.persistence import ContactRepository

log = logging.getLogger(__name__)


def find_matches(repository: ContactRepository, fragment: ContactFragment) -> tuple[Contact, ...]:
    """Return every live record sharing the fragment's email or phone number."""

    if fragment.is_empty:
        return ()
    matches = tuple(
        repository.select_where(email=fragment.email, phone_number=fragment.phone_number)
    )
    log.debug("Fragment %s matched %d record(s)", fragment, len(matches))
    return matches


def resolve_to_primaries(matches: Iterable[Contact]) -> frozenset[ContactId]:
    """Map matched records to the ids of the primaries heading their chains."""

    return frozenset(contact.primary_id for contact in matches)
