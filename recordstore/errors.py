"""Error types raised by the record store."""

from __future__ import annotations


class RecordStoreError(Exception):
    """Base class for every error raised by :mod:`recordstore`."""


class ItemNotFound(RecordStoreError, KeyError):
    """The addressed record is not in the database."""

    def __str__(self) -> str:
        # KeyError repr()s its argument; keep plain messages readable.
        return Exception.__str__(self)


class DuplicateFound(RecordStoreError, ValueError):
    """An equal record already exists and the database rejects duplicates."""


class SavePathRequired(RecordStoreError):
    """No file path could be resolved for persisting the database."""


class BadDatabaseName(RecordStoreError):
    """A database label could not be derived from the given path."""


class DatabaseNotFound(RecordStoreError, FileNotFoundError):
    """No database file exists at the requested path."""


class DatabaseIOError(RecordStoreError, OSError):
    """Reading or writing the database file failed.

    The originating exception is available as ``__cause__``.
    """


class CorruptDatabase(DatabaseIOError):
    """The bytes on disk do not match the expected layout or record type."""
