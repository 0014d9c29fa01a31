import pytest
from pydantic import ValidationError

from sample_records import Address, Person, Pet, Resident


def test_equal_records_hash_identically() -> None:
    a = Person(name="Lister", age=62)
    b = Person(name="Lister", age=62)
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1


def test_records_are_frozen() -> None:
    person = Person(name="Lister", age=62)
    with pytest.raises(ValidationError):
        person.age = 63  # type: ignore[misc]


def test_extra_fields_rejected() -> None:
    with pytest.raises(ValidationError):
        _ = Person.from_bytes(b'{"name":"Cat","age":10,"species":"cat"}')


def test_bytes_roundtrip_nested() -> None:
    resident = Resident(name="Kochanski", address=Address(city="London", street="High"), tags=("a",))
    assert Resident.from_bytes(resident.to_bytes()) == resident
    assert resident.to_dict()["address"] == {"city": "London", "street": "High"}


def test_fingerprint_is_stable_and_type_specific() -> None:
    assert Person.schema_fingerprint() == Person.schema_fingerprint()
    assert len(Person.schema_fingerprint()) == 32
    assert Person.schema_fingerprint() != Pet.schema_fingerprint()
