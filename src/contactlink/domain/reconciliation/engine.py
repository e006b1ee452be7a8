"""Orchestrator for one reconciliation.

The engine decides which path a fragment takes (create, extend or merge) and
delegates the work to the stage functions. It holds no matching or merging logic
of its own.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contactlink.domain.errors import EmptyFragmentError
from contactlink.domain.model import Contact, ContactFragment, utcnow

from .chain import extend_chain, fetch_chain
from .contracts import CreatePrimary, ExtendChain, MergeChains
from .matching import find_matches, resolve_to_primaries
from .merge import merge_chains
from .view import build_view

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from contactlink.domain.model import ContactId
    from contactlink.domain.ports.persistence import ContactRepository

    from .contracts import ContactView, ReconciliationOutcome

type Clock = Callable[[], datetime]

log = logging.getLogger(__name__)


def plan_reconciliation(primary_ids: frozenset[ContactId]) -> ReconciliationOutcome:
    """Classify the resolved primaries of a fragment.

    - no primaries -> ``CreatePrimary``
    - one primary -> ``ExtendChain``
    - several primaries -> ``MergeChains``
    """

    if not primary_ids:
        return CreatePrimary()
    if len(primary_ids) == 1:
        (primary_id,) = primary_ids
        return ExtendChain(primary_id=primary_id)
    return MergeChains(primary_ids=primary_ids)


def reconcile(
    repository: ContactRepository,
    email: str | None,
    phone_number: int | str | None,
    *,
    clock: Clock = utcnow,
) -> ContactView:
    """Resolve one fragment against ``repository`` and return the consolidated view."""

    fragment = ContactFragment.from_input(email, phone_number)
    return reconcile_fragment_once(repository, fragment, clock=clock)


def reconcile_fragment_once(
    repository: ContactRepository,
    fragment: ContactFragment,
    *,
    clock: Clock = utcnow,
) -> ContactView:
    if fragment.is_empty:
        raise EmptyFragmentError("At least one of email or phone number must be provided")

    matches = find_matches(repository, fragment)
    outcome = plan_reconciliation(resolve_to_primaries(matches))
    log.debug("Fragment %s resolved to %s", fragment, outcome)
    now = clock()

    if isinstance(outcome, CreatePrimary):
        primary = repository.add(Contact.new_primary(fragment, now=now))
        log.info("Created primary contact %s", primary.id)
        return build_view((primary,))

    if isinstance(outcome, ExtendChain):
        chain = fetch_chain(repository, outcome.primary_id)
        chain = extend_chain(repository, chain, fragment, primary_id=outcome.primary_id, now=now)
        return build_view(chain)

    return merge_chains(repository, outcome.primary_ids, fragment, now=now)
