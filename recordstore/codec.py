"""
Binary encoding of a whole :class:`~recordstore.database.Database`.

Layout, integers big-endian, fields in this order::

    magic              4 bytes  b"RSDB"
    version            u8
    label              u32 length + UTF-8
    save_path          u8 flag (0 = absent, 1 = present) [+ u32 length + UTF-8]
    strict_duplicates  u8 (0/1)
    fingerprint        32 bytes, Record.schema_fingerprint() of the record type
    item count         u32
    items              u32 length + Record.to_bytes() payload, per item

The whole buffer must be consumed; trailing bytes are an error.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import TypeVar

from .database import Database
from .errors import CorruptDatabase, DuplicateFound
from .schemas import Record


MAGIC = b"RSDB"
FORMAT_VERSION = 1
FINGERPRINT_SIZE = 32

_U8 = struct.Struct(">B")
_U32 = struct.Struct(">I")
_U32_MAX = 2**32 - 1

T = TypeVar("T", bound=Record)


@dataclass(frozen=True)
class DatabaseHeader:
    """Everything in an encoded database except the records themselves."""

    label: str
    save_path: str | None
    strict_duplicates: bool
    fingerprint: bytes
    item_count: int


def _pack_bytes(payload: bytes) -> bytes:
    if len(payload) > _U32_MAX:
        raise ValueError("field exceeds 4 GiB")
    return _U32.pack(len(payload)) + payload


def _pack_str(value: str) -> bytes:
    return _pack_bytes(value.encode("utf-8"))


def encode_database(db: Database[T]) -> bytes:
    parts: list[bytes] = [MAGIC, _U8.pack(FORMAT_VERSION), _pack_str(db.label)]
    if db.save_path is None:
        parts.append(_U8.pack(0))
    else:
        parts.append(_U8.pack(1))
        parts.append(_pack_str(db.save_path))
    parts.append(_U8.pack(1 if db.strict_duplicates else 0))
    parts.append(db.record_type.schema_fingerprint())
    records = db.items
    parts.append(_U32.pack(len(records)))
    for record in records:
        parts.append(_pack_bytes(record.to_bytes()))
    return b"".join(parts)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._view = memoryview(data)
        self._offset = 0

    def take(self, size: int, field: str) -> bytes:
        end = self._offset + size
        if end > len(self._view):
            raise CorruptDatabase(f"truncated data while reading {field}")
        chunk = self._view[self._offset : end].tobytes()
        self._offset = end
        return chunk

    def u8(self, field: str) -> int:
        return int(_U8.unpack(self.take(_U8.size, field))[0])

    def u32(self, field: str) -> int:
        return int(_U32.unpack(self.take(_U32.size, field))[0])

    def flag(self, field: str) -> bool:
        value = self.u8(field)
        if value not in (0, 1):
            raise CorruptDatabase(f"invalid boolean {value} for {field}")
        return value == 1

    def sized(self, field: str) -> bytes:
        return self.take(self.u32(field), field)

    def text(self, field: str) -> str:
        raw = self.sized(field)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CorruptDatabase(f"invalid UTF-8 in {field}") from exc

    def finish(self) -> None:
        remaining = len(self._view) - self._offset
        if remaining:
            raise CorruptDatabase(f"{remaining} trailing bytes after last record")


def _read_header(reader: _Reader) -> DatabaseHeader:
    if reader.take(len(MAGIC), "magic") != MAGIC:
        raise CorruptDatabase("not a record store database (bad magic)")
    version = reader.u8("version")
    if version != FORMAT_VERSION:
        raise CorruptDatabase(f"unsupported format version {version}")
    label = reader.text("label")
    save_path = reader.text("save_path") if reader.flag("save_path flag") else None
    strict_duplicates = reader.flag("strict_duplicates")
    fingerprint = reader.take(FINGERPRINT_SIZE, "fingerprint")
    item_count = reader.u32("item count")
    return DatabaseHeader(
        label=label,
        save_path=save_path,
        strict_duplicates=strict_duplicates,
        fingerprint=fingerprint,
        item_count=item_count,
    )


def read_header(data: bytes) -> DatabaseHeader:
    """Decode the configuration fields without decoding any record."""
    return _read_header(_Reader(data))


def decode_database(data: bytes, record_type: type[T]) -> Database[T]:
    reader = _Reader(data)
    header = _read_header(reader)
    if header.fingerprint != record_type.schema_fingerprint():
        raise CorruptDatabase(
            f"database {header.label!r} was not written with records of type "
            f"{record_type.__name__}"
        )
    if not header.label:
        raise CorruptDatabase("empty label")
    db: Database[T] = Database(
        label=header.label,
        record_type=record_type,
        save_path=header.save_path,
        strict_duplicates=True,
    )
    for index in range(header.item_count):
        payload = reader.sized(f"item {index}")
        try:
            record = record_type.from_bytes(payload)
        except (ValueError, struct.error) as exc:  # pydantic.ValidationError included
            raise CorruptDatabase(f"item {index} does not decode as {record_type.__name__}") from exc
        try:
            db.insert(record)
        except DuplicateFound as exc:
            raise CorruptDatabase(f"item {index} is a duplicate") from exc
    reader.finish()
    db.strict_duplicates = header.strict_duplicates
    return db
