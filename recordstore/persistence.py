"""
File persistence for record databases.

A dump always rewrites the whole file: any existing file at the target path
is removed first and the full encoding is written in one go. A dump that is
interrupted mid-write can leave a truncated file behind; the next load then
fails with :class:`~recordstore.errors.CorruptDatabase`.

Files are tied to the record type's fingerprint (class name and pydantic
JSON schema). Renaming or moving the class, or a pydantic upgrade that changes
schema output, makes existing files load as CorruptDatabase as well.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TypeVar

from .codec import decode_database, encode_database
from .database import Database
from .errors import (
    BadDatabaseName,
    DatabaseIOError,
    DatabaseNotFound,
    SavePathRequired,
)
from .schemas import Record


logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "rdb"

T = TypeVar("T", bound=Record)


def resolve_save_path(
    label: str,
    save_path: str | Path | None,
    extension: str = DEFAULT_EXTENSION,
    allow_default: bool = True,
) -> Path:
    """Return ``save_path`` if set, else ``<label>.<extension>``.

    The derived default is relative to the working directory.
    """
    if save_path is not None and str(save_path):
        return Path(save_path)
    if not allow_default:
        raise SavePathRequired(f"database {label!r} has no save_path")
    if not label:
        raise SavePathRequired("cannot derive a file name from an empty label")
    return Path(f"{label}.{extension.lstrip('.')}")


def dump(
    db: Database[T],
    allow_default: bool = True,
    extension: str = DEFAULT_EXTENSION,
) -> Path:
    """Write ``db`` to its resolved path, replacing any existing file."""
    path = resolve_save_path(db.label, db.save_path, extension, allow_default)
    payload = encode_database(db)
    try:
        if path.exists():
            logger.warning(f"Replacing existing database file {path}")
            path.unlink()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "xb") as f:
            f.write(payload)
    except OSError as e:
        raise DatabaseIOError(f"Failed to write database {db.label!r} to {path}: {e}") from e
    logger.info(f"Dumped database {db.label!r} ({len(db)} records) to {path}")
    return path


def load(path: str | Path, record_type: type[T]) -> Database[T]:
    """Read a database previously written by :func:`dump`.

    Raises:
        DatabaseNotFound: If no file exists at ``path``
        DatabaseIOError: If the file cannot be read
        CorruptDatabase: If the contents do not decode as ``record_type`` records
    """
    path = Path(path)
    if not path.is_file():
        raise DatabaseNotFound(f"Database file not found: {path}")
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise DatabaseIOError(f"Failed to read database file {path}: {e}") from e
    db = decode_database(data, record_type)
    logger.info(f"Loaded database {db.label!r} ({len(db)} records) from {path}")
    return db


def load_or_create(
    path: str | Path,
    record_type: type[T],
    label: str | None = None,
    strict_duplicates: bool = False,
) -> Database[T]:
    """Load the database at ``path``, or start an empty one bound to it.

    A new database takes its label from the file stem unless ``label`` is
    given.
    """
    path = Path(path)
    if path.exists():
        return load(path, record_type)
    if label is None:
        label = path.stem
        if not label or label in (".", ".."):
            raise BadDatabaseName(f"Cannot derive a database label from {path}")
    logger.debug(f"No database at {path}, creating {label!r}")
    return Database(
        label=label,
        record_type=record_type,
        save_path=str(path),
        strict_duplicates=strict_duplicates,
    )
