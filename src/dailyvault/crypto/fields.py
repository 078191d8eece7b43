"""Field-level encryption of API records.

Tasks, subtasks and diary entries each carry a few encrypted fields next to
plaintext metadata (status, priority, dates). A :class:`RecordSchema` names
those fields and the keys they travel under; :class:`RecordCipher` seals a
plaintext record into a wire payload and opens wire records back, one field
at a time, substituting a placeholder for any field that fails to decrypt.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from .codec import SealedBoxCodec
from .exceptions import DecryptionError, MissingSecretError

logger = logging.getLogger(__name__)

DECRYPT_FAILED_PLACEHOLDER = "[unable to decrypt]"
DECRYPT_ERRORS_KEY = "decrypt_errors"


class FieldKind(str, Enum):
    """How a field's plaintext is serialized before encryption."""

    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True)
class EncryptedField:
    """A plaintext attribute and the wire key holding its sealed package."""

    name: str
    wire_name: str
    kind: FieldKind = FieldKind.JSON
    aliases: tuple[str, ...] = ()

    @property
    def wire_keys(self) -> tuple[str, ...]:
        return (self.wire_name, *self.aliases)

    def read_package(self, record: dict[str, Any]) -> str | None:
        """Return the first non-empty package among the wire key and its aliases."""
        for key in self.wire_keys:
            value = record.get(key)
            if value:
                return value
        return None


@dataclass(frozen=True)
class RecordSchema:
    """The encrypted fields of one record type."""

    name: str
    fields: tuple[EncryptedField, ...]

    @property
    def wire_keys(self) -> frozenset[str]:
        return frozenset(key for f in self.fields for key in f.wire_keys)


TASK_SCHEMA = RecordSchema(
    name="task",
    fields=(
        EncryptedField("title", "title_enc", aliases=("title_encrypted",)),
        EncryptedField(
            "description", "description_enc", aliases=("description_encrypted",)
        ),
    ),
)

SUBTASK_SCHEMA = RecordSchema(
    name="subtask",
    fields=(EncryptedField("title", "title_encrypted"),),
)

DIARY_SCHEMA = RecordSchema(
    name="diary",
    fields=(
        EncryptedField("title", "title_encrypted"),
        EncryptedField("content", "content_encrypted"),
        EncryptedField("tags", "tags_encrypted"),
    ),
)


class RecordCipher:
    """Seal and open records for one user's secret."""

    def __init__(
        self,
        codec: SealedBoxCodec,
        secret: str,
        placeholder: str = DECRYPT_FAILED_PLACEHOLDER,
    ):
        self.codec = codec
        self.secret = secret
        self.placeholder = placeholder

    def __repr__(self) -> str:
        return f"RecordCipher(codec={self.codec!r})"

    def _require_secret(self) -> None:
        if not self.secret:
            raise MissingSecretError("Secret required for record encryption")

    async def _seal_field(self, field: EncryptedField, value: Any) -> str | None:
        if value is None or value == "" or value == [] or value == {}:
            return None
        if field.kind is FieldKind.TEXT:
            return await self.codec.seal_text_async(self.secret, value)
        return await self.codec.seal_async(self.secret, value)

    async def seal_record(self, schema: RecordSchema, record: dict[str, Any]) -> dict[str, Any]:
        """Build a wire payload from a plaintext record.

        Fields of ``schema`` present in ``record`` are replaced by their sealed
        package under the wire key; an empty value is sent as ``None``. Keys
        that are not part of the schema pass through untouched.
        """
        self._require_secret()
        payload = {k: v for k, v in record.items() if k not in schema.wire_keys}
        present = [f for f in schema.fields if f.name in payload]
        sealed = await asyncio.gather(
            *(self._seal_field(f, payload.pop(f.name)) for f in present)
        )
        for field, package in zip(present, sealed):
            payload[field.wire_name] = package
        return payload

    async def _open_field(
        self, schema: RecordSchema, field: EncryptedField, record: dict[str, Any]
    ) -> tuple[Any, bool]:
        package = field.read_package(record)
        if not package:
            return "", True
        try:
            if field.kind is FieldKind.TEXT:
                return await self.codec.open_text_async(self.secret, package), True
            return await self.codec.open_async(self.secret, package), True
        except DecryptionError:
            logger.warning("Could not decrypt field %s.%s", schema.name, field.name)
            return self.placeholder, False

    async def open_record(self, schema: RecordSchema, record: dict[str, Any]) -> dict[str, Any]:
        """Decrypt the fields of a wire record.

        Missing or empty packages decode to ``""``. A field that fails to
        decrypt is set to the placeholder and listed under
        ``decrypt_errors``; the rest of the record is still returned.
        """
        self._require_secret()
        result = {k: v for k, v in record.items() if k not in schema.wire_keys}
        outcomes = await asyncio.gather(
            *(self._open_field(schema, f, record) for f in schema.fields)
        )
        errors = []
        for field, (value, ok) in zip(schema.fields, outcomes):
            result[field.name] = value
            if not ok:
                errors.append(field.name)
        result[DECRYPT_ERRORS_KEY] = errors
        return result

    async def open_records(
        self, schema: RecordSchema, records: Iterable[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Decrypt a page of records concurrently, best effort per field."""
        self._require_secret()
        return list(
            await asyncio.gather(*(self.open_record(schema, r) for r in records))
        )
