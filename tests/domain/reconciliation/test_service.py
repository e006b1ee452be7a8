from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from typing import TYPE_CHECKING

import pytest

from contactlink.domain.errors import (
    DuplicatePrimaryError,
    EmptyFragmentError,
    InconsistentChainError,
)
from contactlink.domain.model import LinkPrecedence
from contactlink.domain.reconciliation import reconcile_fragment
from tests.helpers.contacts import (
    EPOCH,
    FakeContactRepository,
    FakeUnitOfWorkFactory,
    InMemoryContactStore,
    TickingClock,
    fragment,
    make_contact,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contactlink.domain.model import Contact


def test_reconcile_fragment_commits_the_unit_of_work(clock: TickingClock) -> None:
    factory = FakeUnitOfWorkFactory()

    view = reconcile_fragment(
        fragment("doc@hillvalley.edu", 123456),
        unit_of_work_factory=factory,
        clock=clock,
    )

    (unit_of_work,) = factory.created
    assert unit_of_work.committed
    assert not unit_of_work.rolled_back
    assert [row.id for row in factory.store.live()] == [view.primary_contact_id]


def test_reconcile_fragment_rejects_empty_fragment_without_a_transaction() -> None:
    factory = FakeUnitOfWorkFactory()

    with pytest.raises(EmptyFragmentError):
        reconcile_fragment(fragment(), unit_of_work_factory=factory)

    assert factory.created == []


def test_reconcile_fragment_rejects_non_positive_attempts() -> None:
    with pytest.raises(ValueError, match="max_attempts"):
        reconcile_fragment(
            fragment("doc@hillvalley.edu"),
            unit_of_work_factory=FakeUnitOfWorkFactory(),
            max_attempts=0,
        )


def test_lost_creation_race_is_retried_as_an_extension(
    clock: TickingClock,
    caplog: pytest.LogCaptureFixture,
) -> None:
    store = InMemoryContactStore()
    winner: list[Contact] = []

    def concurrent_insert(_: Contact) -> None:
        # another request commits the same identity first
        if not winner:
            winner.append(
                store.seed(make_contact(email="doc@hillvalley.edu", phone_number="123456"))
            )

    factory = FakeUnitOfWorkFactory(store, before_add=concurrent_insert)

    with caplog.at_level(logging.WARNING):
        view = reconcile_fragment(
            fragment("doc@hillvalley.edu", 123456),
            unit_of_work_factory=factory,
            clock=clock,
        )

    first, second = factory.created
    assert first.rolled_back
    assert not first.committed
    assert second.committed
    assert view.primary_contact_id == winner[0].id
    assert view.secondary_contact_ids == ()
    assert len(store.live()) == 1
    assert "retrying" in caplog.text


def test_retry_gives_up_after_max_attempts(clock: TickingClock) -> None:
    store = InMemoryContactStore()

    def always_conflict(_: Contact) -> None:
        raise DuplicatePrimaryError("conflict")

    factory = FakeUnitOfWorkFactory(store, before_add=always_conflict)

    with pytest.raises(DuplicatePrimaryError):
        reconcile_fragment(
            fragment("doc@hillvalley.edu"),
            unit_of_work_factory=factory,
            max_attempts=2,
            clock=clock,
        )

    assert len(factory.created) == 2
    assert all(unit_of_work.rolled_back for unit_of_work in factory.created)
    assert store.rows == {}


def test_fatal_errors_are_not_retried(clock: TickingClock) -> None:
    store = InMemoryContactStore()

    def broken_store(_: Contact) -> None:
        raise InconsistentChainError("broken")

    factory = FakeUnitOfWorkFactory(store, before_add=broken_store)

    with pytest.raises(InconsistentChainError):
        reconcile_fragment(
            fragment("doc@hillvalley.edu"),
            unit_of_work_factory=factory,
            max_attempts=3,
            clock=clock,
        )

    (unit_of_work,) = factory.created
    assert unit_of_work.rolled_back


def test_failed_merge_leaves_the_store_untouched(
    clock: TickingClock,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    store = InMemoryContactStore()
    george = store.seed(make_contact(email="george@hillvalley.edu", phone_number="919191"))
    biff = store.seed(make_contact(email="biff@hillvalley.edu", phone_number="717171"))

    def store_went_away(self: FakeContactRepository, primary_id: int) -> list[Contact]:
        raise RuntimeError("store went away")

    monkeypatch.setattr(FakeContactRepository, "select_chain", store_went_away)
    factory = FakeUnitOfWorkFactory(store)

    with pytest.raises(RuntimeError, match="went away"):
        reconcile_fragment(
            fragment("george@hillvalley.edu", 717171),
            unit_of_work_factory=factory,
            clock=clock,
        )

    (unit_of_work,) = factory.created
    assert unit_of_work.rolled_back
    assert store.get(biff.id).is_primary
    assert store.get(george.id).is_primary


def test_merge_into_a_concurrently_demoted_primary_is_retried(
    clock: TickingClock,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    store = InMemoryContactStore()
    george = store.seed(make_contact(email="george@hillvalley.edu", created_at=EPOCH))
    biff = store.seed(
        make_contact(email="biff@hillvalley.edu", created_at=EPOCH + timedelta(hours=1))
    )
    lorraine = store.seed(
        make_contact(phone_number="555123", created_at=EPOCH + timedelta(hours=2))
    )
    original_oldest_among = FakeContactRepository.oldest_among
    demoted: list[int] = []

    def oldest_after_concurrent_merge(
        self: FakeContactRepository,
        contact_ids: Iterable[int],
    ) -> Contact | None:
        if not demoted:
            # another request merged biff into george after our candidates were resolved
            demoted.append(biff.id)
            merged = replace(
                store.rows[biff.id],
                link_precedence=LinkPrecedence.SECONDARY,
                linked_id=george.id,
            )
            store.rows[biff.id] = merged
            self.rows[biff.id] = replace(merged)
        return original_oldest_among(self, contact_ids)

    monkeypatch.setattr(FakeContactRepository, "oldest_among", oldest_after_concurrent_merge)
    factory = FakeUnitOfWorkFactory(store)

    view = reconcile_fragment(
        fragment("biff@hillvalley.edu", 555123),
        unit_of_work_factory=factory,
        max_attempts=3,
        clock=clock,
    )

    first, second = factory.created
    assert first.rolled_back
    assert second.committed
    assert view.primary_contact_id == george.id
    assert view.secondary_contact_ids == (biff.id, lorraine.id)
    assert store.get(lorraine.id).linked_id == george.id
