"""Application service running reconciliations inside units of work."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contactlink.domain.errors import ConcurrentWriteError, EmptyFragmentError
from contactlink.domain.model import ContactFragment, utcnow

from .engine import reconcile_fragment_once

if TYPE_CHECKING:
    from collections.abc import Callable

    from contactlink.domain.ports.unit_of_work import ContactUnitOfWork

    from .contracts import ContactView
    from .engine import Clock

DEFAULT_MAX_ATTEMPTS = 3

log = logging.getLogger(__name__)


def reconcile_fragment(
    fragment: ContactFragment,
    *,
    unit_of_work_factory: Callable[[], ContactUnitOfWork],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    clock: Clock = utcnow,
) -> ContactView:
    """Reconcile ``fragment`` in its own transaction and commit the result.

    A concurrent request creating the same identity makes the insert of a new
    primary fail; the transaction is rolled back and the whole reconciliation is
    re-run so that it observes the winner's record.
    """

    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    if fragment.is_empty:
        raise EmptyFragmentError("At least one of email or phone number must be provided")

    attempt = 1
    while True:
        try:
            with unit_of_work_factory() as uow:
                view = reconcile_fragment_once(uow.repositories.contacts, fragment, clock=clock)
                uow.commit()
                return view
        except ConcurrentWriteError:
            if attempt >= max_attempts:
                log.exception("Giving up on fragment %s after %d attempt(s)", fragment, attempt)
                raise
            log.warning(
                "Concurrent write while reconciling %s (attempt %d/%d), retrying",
                fragment,
                attempt,
                max_attempts,
            )
            attempt += 1

