from __future__ import annotations

from contactlink.domain.reconciliation import find_matches, resolve_to_primaries
from tests.helpers.contacts import EPOCH, FakeContactRepository, fragment, make_contact


def test_find_matches_returns_records_sharing_email_or_phone() -> None:
    repository = FakeContactRepository()
    doc = repository.store.seed(make_contact(email="doc@hillvalley.edu", phone_number="123456"))
    repository.store.seed(make_contact(email="biff@hillvalley.edu", phone_number="717171"))
    mcfly = repository.store.seed(
        make_contact(email="mcfly@hillvalley.edu", phone_number="555", linked_id=doc.id)
    )

    matches = find_matches(repository, fragment("mcfly@hillvalley.edu", 123456))

    assert sorted(contact.id for contact in matches) == [doc.id, mcfly.id]


def test_find_matches_is_exact_and_case_sensitive() -> None:
    repository = FakeContactRepository()
    repository.store.seed(make_contact(email="doc@hillvalley.edu"))

    assert find_matches(repository, fragment("Doc@HillValley.edu")) == ()
    assert find_matches(repository, fragment("doc@hillvalley")) == ()


def test_find_matches_ignores_soft_deleted_records() -> None:
    repository = FakeContactRepository()
    repository.store.seed(make_contact(email="doc@hillvalley.edu", deleted_at=EPOCH))

    assert find_matches(repository, fragment("doc@hillvalley.edu")) == ()


def test_find_matches_ignores_secondaries_of_deleted_primary() -> None:
    repository = FakeContactRepository()
    doc = repository.store.seed(make_contact(email="doc@hillvalley.edu", deleted_at=EPOCH))
    repository.store.seed(make_contact(phone_number="123456", linked_id=doc.id))

    assert find_matches(repository, fragment(phone_number=123456)) == ()


def test_find_matches_with_empty_fragment_matches_nothing() -> None:
    repository = FakeContactRepository()
    repository.store.seed(make_contact(phone_number="123456"))

    assert find_matches(repository, fragment()) == ()


def test_resolve_to_primaries_collapses_chain_members() -> None:
    repository = FakeContactRepository()
    doc = repository.store.seed(make_contact(email="doc@hillvalley.edu"))
    mcfly = repository.store.seed(make_contact(email="mcfly@hillvalley.edu", linked_id=doc.id))
    biff = repository.store.seed(make_contact(email="biff@hillvalley.edu"))

    assert resolve_to_primaries([doc, mcfly, biff]) == frozenset({doc.id, biff.id})
    assert resolve_to_primaries([]) == frozenset()
