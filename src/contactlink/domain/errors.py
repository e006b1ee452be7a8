"""Error taxonomy for contact reconciliation."""

from __future__ import annotations


class EmptyFragmentError(ValueError):
    """Raised when neither an email nor a phone number was supplied."""


class ReconciliationError(RuntimeError):
    """Base class for failures inside the reconciliation core."""


class InconsistentChainError(ReconciliationError):
    """A resolved primary does not exist or a chain does not hold exactly one primary."""


class MergePreconditionError(ReconciliationError):
    """A merge was requested with fewer than two usable candidate primaries."""


class ConcurrentWriteError(ReconciliationError):
    """A concurrent writer won a race; the reconciliation may be retried."""


class DuplicatePrimaryError(ConcurrentWriteError):
    """Inserting a primary collided with a live primary sharing its email or phone."""
