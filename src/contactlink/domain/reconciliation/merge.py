"""Chain merging.

Responsibilities of this stage:
- pick the oldest candidate primary as the survivor
- demote every other candidate and relink its former secondaries, as one batch
- persist the triggering fragment when it adds information to the unified chain

Out of scope for this stage:
- commit/rollback (owned by the unit of work wrapping the whole reconciliation)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contactlink.domain.errors import ConcurrentWriteError, MergePreconditionError

from .chain import extend_chain, fetch_chain
from .contracts import DemotePrimaries, RelinkSecondaries
from .view import build_view

if TYPE_CHECKING:
    from collections.abc import Collection
    from datetime import datetime

    from contactlink.domain.model import ContactFragment, ContactId
    from contactlink.domain.ports.persistence import ContactRepository

    from .contracts import ContactUpdate, ContactView

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class MergePlan:
    """Survivor and demoted primaries of one merge."""

    survivor_id: ContactId
    demoted_ids: tuple[ContactId, ...]

    @classmethod
    def for_candidates(
        cls,
        survivor_id: ContactId,
        candidate_ids: Collection[ContactId],
    ) -> MergePlan:
        demoted = tuple(sorted(set(candidate_ids) - {survivor_id}))
        return cls(survivor_id=survivor_id, demoted_ids=demoted)

    def updates(self) -> tuple[ContactUpdate, ...]:
        if not self.demoted_ids:
            return ()
        return (
            DemotePrimaries(contact_ids=self.demoted_ids, linked_id=self.survivor_id),
            RelinkSecondaries(previous_primary_ids=self.demoted_ids, linked_id=self.survivor_id),
        )


def merge_chains(
    repository: ContactRepository,
    primary_ids: Collection[ContactId],
    fragment: ContactFragment,
    *,
    now: datetime,
) -> ContactView:
    """Unify the chains headed by ``primary_ids`` under the oldest of them."""

    candidate_ids = frozenset(primary_ids)
    if len(candidate_ids) < 2:
        raise MergePreconditionError(
            f"Merge requires at least two primaries, got {len(candidate_ids)}"
        )

    survivor = repository.oldest_among(candidate_ids)
    if survivor is None or survivor.id is None:
        raise MergePreconditionError(
            f"No live candidate primary found among {sorted(candidate_ids)}"
        )
    if not survivor.is_primary:
        # demoted by a merge committed after the candidates were resolved
        raise ConcurrentWriteError(
            f"Merge candidate {survivor.id} is no longer a primary contact"
        )

    plan = MergePlan.for_candidates(survivor.id, candidate_ids)
    repository.apply_updates(plan.updates(), updated_at=now)
    log.info("Merged primaries %s into %s", list(plan.demoted_ids), plan.survivor_id)

    chain = fetch_chain(repository, plan.survivor_id)
    chain = extend_chain(repository, chain, fragment, primary_id=plan.survivor_id, now=now)
    return build_view(chain)
