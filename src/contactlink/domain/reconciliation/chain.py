"""Chain retrieval and extension."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contactlink.domain.errors import InconsistentChainError
from contactlink.domain.model import Contact

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from contactlink.domain.model import ContactFragment, ContactId
    from contactlink.domain.ports.persistence import ContactRepository

log = logging.getLogger(__name__)


def fetch_chain(repository: ContactRepository, primary_id: ContactId) -> tuple[Contact, ...]:
    """Return the primary ``primary_id`` and its live secondaries, oldest first."""

    chain = tuple(sorted(repository.select_chain(primary_id), key=lambda c: c.age_key))
    if not any(contact.id == primary_id and contact.is_primary for contact in chain):
        raise InconsistentChainError(f"No live primary contact with id {primary_id}")
    return chain


def has_new_information(chain: Sequence[Contact], fragment: ContactFragment) -> bool:
    """Return whether the fragment carries an email or phone absent from ``chain``."""

    if fragment.email and all(contact.email != fragment.email for contact in chain):
        return True
    return bool(
        fragment.phone_number
        and all(contact.phone_number != fragment.phone_number for contact in chain)
    )


def extend_chain(
    repository: ContactRepository,
    chain: tuple[Contact, ...],
    fragment: ContactFragment,
    *,
    primary_id: ContactId,
    now: datetime,
) -> tuple[Contact, ...]:
    """Append a secondary for ``fragment`` when it adds information, else return ``chain``."""

    if not has_new_information(chain, fragment):
        log.debug("Fragment %s adds nothing to chain %s", fragment, primary_id)
        return chain
    secondary = repository.add(Contact.new_secondary(fragment, primary_id=primary_id, now=now))
    log.info("Created secondary contact %s under primary %s", secondary.id, primary_id)
    return (*chain, secondary)
