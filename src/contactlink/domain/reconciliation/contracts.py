"""Shared reconciliation contract components.

This module holds only:
- the consolidated view returned to callers
- the closed set of reconciliation outcomes (create / extend / merge)
- the batch updates a merge hands to the store
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from contactlink.domain.model import ContactId, Email, PhoneNumber


@dataclass(frozen=True, slots=True, kw_only=True)
class ContactView:
    """Consolidated identity: index 0 of each value list is the primary's own value."""

    primary_contact_id: ContactId
    emails: tuple[Email, ...]
    phone_numbers: tuple[PhoneNumber, ...]
    secondary_contact_ids: tuple[ContactId, ...]


class OutcomeKind(StrEnum):
    """Which path a fragment takes through the orchestrator."""

    CREATE = "create"
    EXTEND = "extend"
    MERGE = "merge"


@dataclass(frozen=True, slots=True, kw_only=True)
class CreatePrimary:
    """No live chain matched; the fragment becomes a new primary."""

    kind: Literal[OutcomeKind.CREATE] = OutcomeKind.CREATE


@dataclass(frozen=True, slots=True, kw_only=True)
class ExtendChain:
    """Exactly one chain matched; it may gain a secondary."""

    primary_id: ContactId
    kind: Literal[OutcomeKind.EXTEND] = OutcomeKind.EXTEND


@dataclass(frozen=True, slots=True, kw_only=True)
class MergeChains:
    """Several chains matched and must be unified under the oldest primary."""

    primary_ids: frozenset[ContactId]
    kind: Literal[OutcomeKind.MERGE] = OutcomeKind.MERGE

    def __post_init__(self) -> None:
        if len(self.primary_ids) < 2:
            raise ValueError("Merge outcome must include at least two primaries")


type ReconciliationOutcome = CreatePrimary | ExtendChain | MergeChains


@dataclass(frozen=True, slots=True, kw_only=True)
class DemotePrimaries:
    """Turn still-primary ``contact_ids`` into secondaries of ``linked_id``."""

    contact_ids: tuple[ContactId, ...]
    linked_id: ContactId


@dataclass(frozen=True, slots=True, kw_only=True)
class RelinkSecondaries:
    """Repoint every record linked to one of ``previous_primary_ids`` at ``linked_id``."""

    previous_primary_ids: tuple[ContactId, ...]
    linked_id: ContactId


type ContactUpdate = DemotePrimaries | RelinkSecondaries
