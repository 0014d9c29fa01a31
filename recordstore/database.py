"""
In-memory record container.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import Generic, TypeAlias, TypeVar

from .errors import DuplicateFound, ItemNotFound
from .schemas import Record


logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Record)

Projection: TypeAlias = Callable[[T], object] | str


def _as_getter(projection: Projection[T]) -> Callable[[T], object]:
    if isinstance(projection, str):
        if not projection:
            raise ValueError("projection field name must not be empty")
        return operator.attrgetter(projection)
    return projection


class Database(Generic[T]):
    """An unordered set of records of one type, unique by value.

    With ``strict_duplicates`` enabled, inserting a record equal to one
    already stored raises :class:`DuplicateFound`; otherwise the insert
    silently replaces the stored copy.
    """

    label: str
    save_path: str | None
    strict_duplicates: bool
    record_type: type[T]

    def __init__(
        self,
        label: str,
        record_type: type[T],
        save_path: str | Path | None = None,
        strict_duplicates: bool = False,
    ) -> None:
        if not isinstance(label, str) or not label:
            raise ValueError("label must be a non-empty string")
        if not (isinstance(record_type, type) and issubclass(record_type, Record)):
            raise TypeError("record_type must be a Record subclass")
        self.label = label
        self.record_type = record_type
        self.save_path = None if save_path is None else str(save_path)
        self.strict_duplicates = bool(strict_duplicates)
        self._items: set[T] = set()

    def __repr__(self) -> str:
        return (
            f"Database(label={self.label!r}, record_type={self.record_type.__name__}, "
            f"save_path={self.save_path!r}, strict_duplicates={self.strict_duplicates}, "
            f"items={len(self._items)})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Database):
            return NotImplemented
        return (
            self.label == other.label
            and self.save_path == other.save_path
            and self.strict_duplicates == other.strict_duplicates
            and self.record_type is other.record_type
            and self._items == other._items
        )

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(frozenset(self._items))

    def __contains__(self, record: object) -> bool:
        return self.contains(record)

    @property
    def items(self) -> frozenset[T]:
        """Snapshot of every stored record."""
        return frozenset(self._items)

    def _check_type(self, record: object) -> T:
        # subclasses would not survive a dump/load as record_type
        if type(record) is not self.record_type:
            raise TypeError(
                f"{self.label}: expected {self.record_type.__name__}, "
                f"got {type(record).__name__}"
            )
        return record

    def insert(self, record: T) -> None:
        record = self._check_type(record)
        if self.strict_duplicates and record in self._items:
            raise DuplicateFound(f"{self.label}: record already exists: {record!r}")
        # set.add keeps the stored copy on a hit; replace it so the insert upserts.
        self._items.discard(record)
        self._items.add(record)
        logger.debug(f"{self.label}: inserted {record!r}")

    def extend(self, records: Iterable[T]) -> None:
        """Insert several records; under strict policy nothing is inserted
        if any record is a duplicate."""
        batch = [self._check_type(record) for record in records]
        if self.strict_duplicates:
            seen: set[T] = set()
            for record in batch:
                if record in self._items or record in seen:
                    raise DuplicateFound(f"{self.label}: record already exists: {record!r}")
                seen.add(record)
        for record in batch:
            self._items.discard(record)
            self._items.add(record)
        logger.debug(f"{self.label}: inserted {len(batch)} records")

    def remove(self, record: T) -> None:
        try:
            self._items.remove(record)
        except (KeyError, TypeError):
            raise ItemNotFound(f"{self.label}: record not found: {record!r}") from None
        logger.debug(f"{self.label}: removed {record!r}")

    def update(self, old: T, new: T) -> None:
        """Replace ``old`` with ``new``."""
        new = self._check_type(new)
        if not self.contains(old):
            raise ItemNotFound(f"{self.label}: record not found: {old!r}")
        if self.strict_duplicates and new != old and new in self._items:
            raise DuplicateFound(f"{self.label}: record already exists: {new!r}")
        self._items.remove(old)
        self._items.discard(new)
        self._items.add(new)
        logger.debug(f"{self.label}: updated {old!r} -> {new!r}")

    def contains(self, record: object) -> bool:
        try:
            return record in self._items
        except TypeError:
            # unhashable values are never stored
            return False

    def query(self, projection: Projection[T], expected: object) -> T:
        """Return a record whose projected value equals ``expected``.

        ``projection`` is a callable or an attribute path such as ``"age"`` or
        ``"address.city"``. Which record is returned when several match is
        unspecified.
        """
        getter = _as_getter(projection)
        for record in self._items:
            if getter(record) == expected:
                return record
        raise ItemNotFound(f"{self.label}: no record matches {expected!r}")

    def query_all(self, projection: Projection[T], expected: object) -> list[T]:
        getter = _as_getter(projection)
        return [record for record in self._items if getter(record) == expected]

    def dump(self, allow_default: bool = True) -> Path:
        """Write this database to disk. See :func:`recordstore.persistence.dump`."""
        from .persistence import dump

        return dump(self, allow_default=allow_default)

    @classmethod
    def load(cls, path: str | Path, record_type: type[T]) -> "Database[T]":
        """Read a database from disk. See :func:`recordstore.persistence.load`."""
        from .persistence import load

        return load(path, record_type)
