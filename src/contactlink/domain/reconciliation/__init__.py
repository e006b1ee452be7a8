"""Contact reconciliation core."""

from __future__ import annotations

from .chain import extend_chain, fetch_chain, has_new_information
from .contracts import (
    ContactUpdate,
    ContactView,
    CreatePrimary,
    DemotePrimaries,
    ExtendChain,
    MergeChains,
    OutcomeKind,
    ReconciliationOutcome,
    RelinkSecondaries,
)
from .engine import plan_reconciliation, reconcile, reconcile_fragment_once
from .matching import find_matches, resolve_to_primaries
from .merge import MergePlan, merge_chains
from .service import DEFAULT_MAX_ATTEMPTS, reconcile_fragment
from .view import build_view

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "ContactUpdate",
    "ContactView",
    "CreatePrimary",
    "DemotePrimaries",
    "ExtendChain",
    "MergeChains",
    "MergePlan",
    "OutcomeKind",
    "ReconciliationOutcome",
    "RelinkSecondaries",
    "build_view",
    "extend_chain",
    "fetch_chain",
    "find_matches",
    "has_new_information",
    "merge_chains",
    "plan_reconciliation",
    "reconcile",
    "reconcile_fragment",
    "reconcile_fragment_once",
    "resolve_to_primaries",
]
