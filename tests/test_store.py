"""Tests for the contact store."""
from __future__ import annotations

import pydantic
import pytest

from contact_store.domain import addresses, contacts
from contact_store.exceptions import InvalidArgumentError, NotFoundError
from contact_store.seed import SEED_CONTACTS, as_records
from contact_store.store import ContactStore, ContactView


def _batch() -> list[dict]:
    return [
        {
            "name": "Ann",
            "addresses": [
                {"street": "1 First St", "city": "Springfield"},
                {"street": "2 Second St", "city": "Ogdenville"},
            ],
        },
        {"name": "Ben", "addresses": [{"street": "3 Third St", "city": "Shelbyville"}]},
    ]


def test_new_store_is_empty(store: ContactStore) -> None:
    assert store.is_empty()
    assert store.count() == (0, 0)
    assert list(store.all_contacts()) == []


def test_insert_assigns_ids_and_links_addresses(store: ContactStore) -> None:
    inserted = store.insert(_batch())
    assert [contact.name for contact in inserted] == ["Ann", "Ben"]
    for contact in inserted:
        assert contact.id is not None
        assert all(address.contact_id == contact.id for address in contact.addresses)
    assert not store.is_empty()
    assert store.count() == (2, 3)


def test_insert_accepts_write_dtos(store: ContactStore) -> None:
    record = contacts.WriteDTO(
        name="Cleo", addresses=[addresses.WriteDTO(street="9 Ninth St", city="Capital City")]
    )
    (inserted,) = store.insert([record])
    assert inserted.name == "Cleo"
    assert [(a.street, a.city) for a in inserted.addresses] == [("9 Ninth St", "Capital City")]


def test_insert_ignores_caller_supplied_keys(store: ContactStore) -> None:
    (inserted,) = store.insert(
        [{"id": 99, "name": "Dot", "addresses": [{"street": "s", "city": "c", "contact_id": 42}]}]
    )
    assert inserted.id != 99
    assert inserted.addresses[0].contact_id == inserted.id


def test_referential_integrity(seeded_store: ContactStore) -> None:
    all_contacts = list(seeded_store.all_contacts())
    ids = {contact.id for contact in all_contacts}
    for contact in all_contacts:
        for address in contact.addresses:
            assert address.contact_id == contact.id
            assert address.contact_id in ids


def test_all_contacts_matches_input(seeded_store: ContactStore) -> None:
    all_contacts = list(seeded_store.all_contacts())
    assert len(all_contacts) == len(SEED_CONTACTS)
    assert len({contact.id for contact in all_contacts}) == len(SEED_CONTACTS)
    for contact, (name, address_pairs) in zip(all_contacts, SEED_CONTACTS):
        assert contact.name == name
        assert len(contact.addresses) == len(address_pairs)
        assert [(a.street, a.city) for a in contact.addresses] == list(address_pairs)


def test_all_contacts_ordered_by_id(seeded_store: ContactStore) -> None:
    ids = [contact.id for contact in seeded_store.all_contacts()]
    assert ids == sorted(ids)


def test_all_contacts_is_lazy_and_restartable(store: ContactStore) -> None:
    view = store.all_contacts()
    assert isinstance(view, ContactView)
    store.insert(_batch())
    assert [contact.name for contact in view] == ["Ann", "Ben"]
    store.insert([{"name": "Cal", "addresses": []}])
    assert [contact.name for contact in view] == ["Ann", "Ben", "Cal"]


def test_ids_are_monotonic_across_batches(store: ContactStore) -> None:
    first = store.insert(_batch())
    second = store.insert(_batch())
    contact_ids = [contact.id for contact in first + second]
    address_ids = [a.id for contact in first + second for a in contact.addresses]
    assert contact_ids == sorted(contact_ids)
    assert len(set(contact_ids)) == 4
    assert address_ids == sorted(address_ids)
    assert len(set(address_ids)) == 6


def test_insert_twice_duplicates(store: ContactStore) -> None:
    store.insert(_batch())
    store.insert(_batch())
    assert [contact.name for contact in store.all_contacts()] == ["Ann", "Ben", "Ann", "Ben"]


def test_contact_without_addresses(store: ContactStore) -> None:
    store.insert([{"name": "Solo", "addresses": []}])
    (contact,) = store.all_contacts()
    assert contact.name == "Solo"
    assert contact.addresses == []


def test_addresses_default_to_empty(store: ContactStore) -> None:
    (inserted,) = store.insert([{"name": "Solo"}])
    assert inserted.addresses == []


@pytest.mark.parametrize(
    "bad_address",
    [
        {"street": "1 First St", "city": None},
        {"street": "1 First St"},
        {"street": None, "city": "Springfield"},
        {"street": 12, "city": "Springfield"},
        {"street": "1 First St", "city": b"Springfield"},
        {"street": b"1 First St", "city": "Springfield"},
    ],
)
def test_invalid_address_rejects_whole_batch(store: ContactStore, bad_address: dict) -> None:
    batch = _batch()
    batch.append({"name": "Broken", "addresses": [bad_address]})
    with pytest.raises(InvalidArgumentError) as exc_info:
        store.insert(batch)
    assert isinstance(exc_info.value.__cause__, pydantic.ValidationError)
    assert store.is_empty()
    assert store.count() == (0, 0)


def test_invalid_name_rejects_whole_batch(store: ContactStore) -> None:
    with pytest.raises(InvalidArgumentError):
        store.insert([*_batch(), {"name": None, "addresses": []}])
    assert list(store.all_contacts()) == []


@pytest.mark.parametrize("batch", [None, 5, {"name": "Ann", "addresses": []}, "Ann"])
def test_non_iterable_batch_rejected(store: ContactStore, batch: object) -> None:
    with pytest.raises(InvalidArgumentError, match="iterable of records"):
        store.insert(batch)  # type: ignore[arg-type]
    assert store.is_empty()


def test_bytes_name_rejected(store: ContactStore) -> None:
    with pytest.raises(InvalidArgumentError):
        store.insert([{"name": b"Ann", "addresses": []}])
    assert store.is_empty()


def test_non_mapping_record_rejected(store: ContactStore) -> None:
    with pytest.raises(InvalidArgumentError, match="record 1"):
        store.insert([_batch()[0], ("Ann", [])])
    assert store.is_empty()


def test_invalid_argument_is_value_error() -> None:
    assert issubclass(InvalidArgumentError, ValueError)


def test_find_contacts_is_existential(seeded_store: ContactStore) -> None:
    found = seeded_store.find_contacts(lambda address: address.city == "Capital City")
    assert [contact.name for contact in found] == [
        "David Martinez",
        "Grace Lee",
        "Iris Chen",
        "Kelly Anderson",
    ]


def test_find_contacts_no_match(seeded_store: ContactStore) -> None:
    assert seeded_store.find_contacts(lambda address: False) == []


def test_returned_records_are_frozen(seeded_store: ContactStore) -> None:
    contact = next(iter(seeded_store.all_contacts()))
    with pytest.raises(pydantic.ValidationError):
        contact.name = "Changed"


def test_get_contact(seeded_store: ContactStore) -> None:
    first = next(iter(seeded_store.all_contacts()))
    assert seeded_store.get_contact(first.id) == first
    assert seeded_store.get_contact_or_raise(first.id) == first


def test_get_contact_missing_returns_none(seeded_store: ContactStore) -> None:
    assert seeded_store.get_contact(10_000) is None


def test_get_contact_or_raise_missing(seeded_store: ContactStore) -> None:
    with pytest.raises(NotFoundError):
        seeded_store.get_contact_or_raise(10_000)


def test_contact_of(seeded_store: ContactStore) -> None:
    for contact in seeded_store.all_contacts():
        for address in contact.addresses:
            assert seeded_store.contact_of(address) == contact


def test_contact_of_accepts_mapping(seeded_store: ContactStore) -> None:
    first = next(iter(seeded_store.all_contacts()))
    address = first.addresses[0].model_dump()
    assert seeded_store.contact_of(address).name == first.name


def test_contact_of_dangling_key(seeded_store: ContactStore) -> None:
    address = addresses.ReadDTO(id=1, street="s", city="c", contact_id=10_000)
    with pytest.raises(NotFoundError):
        seeded_store.contact_of(address)


def test_seed_records_round_into_store(store: ContactStore) -> None:
    inserted = store.insert(as_records(SEED_CONTACTS))
    assert len(inserted) == 13
    assert sum(len(contact.addresses) for contact in inserted) == 20
