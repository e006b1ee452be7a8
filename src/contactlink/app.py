"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from contactlink.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyContactUnitOfWork,
    is_started,
    startup,
)
from contactlink.config import get_reconciliation_config
from contactlink.domain.errors import EmptyFragmentError
from contactlink.domain.model import ContactFragment, utcnow
from contactlink.domain.ports.unit_of_work import ContactUnitOfWork
from contactlink.domain.reconciliation import reconcile_fragment

if TYPE_CHECKING:
    from contactlink.domain.model import ContactId
    from contactlink.domain.reconciliation import ContactView
    from contactlink.domain.reconciliation.engine import Clock

UnitOfWorkFactory = Callable[[], ContactUnitOfWork]


log = getLogger(__name__)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyContactUnitOfWork


def identify_contact(
    *,
    email: str | None,
    phone_number: int | str | None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    max_attempts: int | None = None,
    clock: Clock = utcnow,
) -> ContactView:
    """Reconcile one (email, phone) pair against the configured store."""

    fragment = ContactFragment.from_input(email, phone_number)
    if fragment.is_empty:
        raise EmptyFragmentError("At least one of email or phone number must be provided")

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    if max_attempts is None:
        max_attempts = get_reconciliation_config().max_attempts
    log.info("Identifying contact: email=%s, phone_number=%s", fragment.email, fragment.phone_number)

    view = reconcile_fragment(
        fragment,
        unit_of_work_factory=effective_uow,
        max_attempts=max_attempts,
        clock=clock,
    )

    log.info(
        f"Resolved to primary {view.primary_contact_id}: "
        f"emails={len(view.emails)}, phone_numbers={len(view.phone_numbers)}, "
        f"secondaries={len(view.secondary_contact_ids)}"
    )
    return view


def soft_delete_contact(
    contact_id: ContactId,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    clock: Clock = utcnow,
) -> bool:
    """Mark one contact as deleted; returns False when no live record had that id."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with effective_uow() as uow:
        deleted = uow.repositories.contacts.soft_delete(contact_id, deleted_at=clock())
        uow.commit()

    if deleted:
        log.info("Soft-deleted contact %s", contact_id)
    else:
        log.warning("No live contact with id %s", contact_id)
    return deleted


def count_contacts(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> int:
    """Return the number of live contact records."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with effective_uow() as uow:
        return uow.repositories.contacts.count()
