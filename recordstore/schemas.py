"""Record base model.

Records are frozen pydantic models: they compare and hash by their full
value, and each record type owns the binary layout of its instances.
"""

from __future__ import annotations

import hashlib
import json
from typing import TypeVar

from pydantic import BaseModel, ConfigDict


TRecord = TypeVar("TRecord", bound="Record")


class Record(BaseModel):
    """Base class for values stored in a :class:`~recordstore.database.Database`.

    Subclasses declare their fields as usual for pydantic. Fields must hold
    hashable values (use ``tuple`` or ``frozenset`` rather than ``list`` or
    ``set``) so that records can live in a set.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    def to_bytes(self) -> bytes:
        """Encode this record. Override together with :meth:`from_bytes`."""
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls: type[TRecord], data: bytes) -> TRecord:
        """Decode a record. Overrides raise ValueError on malformed data."""
        return cls.model_validate_json(data)

    def to_dict(self) -> dict[str, object]:
        return self.model_dump()

    @classmethod
    def schema_fingerprint(cls) -> bytes:
        """SHA-256 digest identifying this record type's persisted shape.

        Covers the qualified class name and pydantic's JSON schema, so a
        pydantic release that changes schema output also changes the digest.
        """
        payload = json.dumps(
            {
                "name": f"{cls.__module__}.{cls.__qualname__}",
                "schema": cls.model_json_schema(),
            },
            sort_keys=True,
            separators=(",", ":"),
            default=str,
        )
        return hashlib.sha256(payload.encode("utf-8")).digest()
