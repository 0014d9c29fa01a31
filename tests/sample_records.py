"""Record types shared by the tests."""

from recordstore.schemas import Record


class Person(Record):
    name: str
    age: int


class Address(Record):
    city: str
    street: str


class Resident(Record):
    name: str
    address: Address
    tags: tuple[str, ...] = ()


class Pet(Record):
    name: str
    species: str


class Crew(Person):
    rank: str


class Hologram(Person):
    pass
