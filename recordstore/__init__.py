"""
Record Store

In-memory record container with single-file binary persistence.

This package provides:
- A set-backed Database of frozen pydantic records, unique by value
- Optional strict duplicate rejection
- Lookup by arbitrary projections
- Whole-database dump/load to a length-delimited binary file
"""

__version__ = "0.1.0"

from .codec import DatabaseHeader, decode_database, encode_database, read_header
from .database import Database
from .errors import (
    BadDatabaseName,
    CorruptDatabase,
    DatabaseIOError,
    DatabaseNotFound,
    DuplicateFound,
    ItemNotFound,
    RecordStoreError,
    SavePathRequired,
)
from .persistence import dump, load, load_or_create, resolve_save_path
from .schemas import Record

__all__ = [
    "BadDatabaseName",
    "CorruptDatabase",
    "Database",
    "DatabaseHeader",
    "DatabaseIOError",
    "DatabaseNotFound",
    "DuplicateFound",
    "ItemNotFound",
    "Record",
    "RecordStoreError",
    "SavePathRequired",
    "decode_database",
    "dump",
    "encode_database",
    "load",
    "load_or_create",
    "read_header",
    "resolve_save_path",
]
