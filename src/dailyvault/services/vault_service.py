"""Vault service for DailyVault.

High-level service layer that seals records before they are sent to the API
and opens them after they come back. Collections are decrypted best effort:
one unreadable field never aborts a page.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from dailyvault.api.client import APIClient
from dailyvault.api.diary import DiaryAPI
from dailyvault.api.tasks import SubtasksAPI, TasksAPI
from dailyvault.crypto.codec import SealedBoxCodec
from dailyvault.crypto.exceptions import (
    DECRYPTION_FAILED_MESSAGE,
    DecryptionError,
    MissingSecretError,
)
from dailyvault.crypto.fields import (
    DECRYPT_FAILED_PLACEHOLDER,
    DIARY_SCHEMA,
    SUBTASK_SCHEMA,
    TASK_SCHEMA,
    RecordCipher,
)
from dailyvault.services.config_service import ConfigService
from dailyvault.services.identity import Identity, IdentityError, identity_from_token

logger = logging.getLogger(__name__)

TASK_PRIORITIES = ("Low", "Medium", "High")
TASK_STATUS_PENDING = "Pending"
TASK_STATUS_COMPLETED = "Completed"
DIARY_VISIBILITIES = ("private", "public")

# A task PUT replaces all of these
TASK_FIELDS = ("title", "description", "priority", "due_date", "category_id", "status")
DIARY_FIELDS = (
    "title",
    "content",
    "tags",
    "mood",
    "visibility",
    "entry_date",
    "emotion_score",
)


class VaultService:
    """Encrypted task and diary operations for one signed-in user."""

    def __init__(
        self,
        api_client: APIClient,
        secret: str,
        codec: SealedBoxCodec | None = None,
        placeholder: str = DECRYPT_FAILED_PLACEHOLDER,
        identity: Identity | None = None,
    ):
        if not secret:
            raise MissingSecretError("Secret required to open the vault")
        self.api_client = api_client
        self.identity = identity
        self.cipher = RecordCipher(codec or SealedBoxCodec(), secret, placeholder)
        self.tasks_api = TasksAPI(api_client)
        self.subtasks_api = SubtasksAPI(api_client)
        self.diary_api = DiaryAPI(api_client)

    @classmethod
    def from_config(
        cls,
        config_service: ConfigService,
        secret: str | None = None,
        api_client: APIClient | None = None,
    ) -> "VaultService":
        """Build a service from stored config and credentials.

        ``secret`` overrides the identity carried by the stored token. The
        stored identity, when there is one, still selects the task owner.

        Raises:
            MissingSecretError: If no secret is given and no identity can be
                resolved from the stored credentials.
        """
        try:
            identity = resolve_stored_identity(config_service)
        except MissingSecretError:
            if not secret:
                raise
            identity = None
        crypto = config_service.config.crypto
        return cls(
            api_client or APIClient(config_service),
            secret or identity.secret,
            codec=SealedBoxCodec(crypto.kdf_iterations),
            placeholder=crypto.placeholder,
            identity=identity,
        )

    def _owner(self) -> dict[str, str]:
        return self.identity.query_params() if self.identity else {}

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def _open_task(self, task: dict[str, Any]) -> dict[str, Any]:
        opened, subtasks = await asyncio.gather(
            self.cipher.open_record(TASK_SCHEMA, task),
            self.cipher.open_records(SUBTASK_SCHEMA, task.get("subtasks") or []),
        )
        if "subtasks" in task:
            opened["subtasks"] = subtasks
        return opened

    async def list_tasks(self, **filters: Any) -> list[dict[str, Any]]:
        """Fetch tasks (with their subtasks) and decrypt them."""
        result = await self.tasks_api.list_tasks(**filters)
        tasks = result.get("tasks") or []
        return list(await asyncio.gather(*(self._open_task(t) for t in tasks)))

    async def get_task(self, task_id: int | str) -> dict[str, Any]:
        """Fetch one task with its subtasks and decrypt it."""
        result = await self.tasks_api.get_task(task_id)
        task = result.get("task")
        if not task:
            raise KeyError(f"Task {task_id} not found")
        return await self._open_task(task)

    async def create_task(
        self,
        title: str,
        description: str | None = None,
        *,
        priority: str = "Medium",
        due_date: str | None = None,
        category_id: int | None = None,
        status: str = TASK_STATUS_PENDING,
    ) -> dict[str, Any]:
        """Seal and create a task. Returns the server response."""
        if not title:
            raise ValueError("Task title required")
        _check_priority(priority)

        payload = await self.cipher.seal_record(
            TASK_SCHEMA,
            {
                "title": title,
                "description": description,
                "priority": priority,
                "due_date": due_date,
                "category_id": category_id,
                "status": status,
            },
        )
        payload.update(self._owner())
        return await self.tasks_api.create_task(payload)

    async def update_task(self, task_id: int | str, **changes: Any) -> dict[str, Any]:
        """Apply ``changes`` to a task and send it back whole.

        The server replaces every task field on update, so the current task
        is fetched, opened and merged first.

        Raises:
            ValueError: If nothing is changed or a value is invalid.
            DecryptionError: If a field that is not being replaced could not
                be decrypted; sending it back would overwrite it.
        """
        unknown = set(changes) - set(TASK_FIELDS)
        if unknown:
            raise ValueError(f"Unknown task field(s): {', '.join(sorted(unknown))}")
        if not changes:
            raise ValueError("No fields to update")
        if "title" in changes and not changes["title"]:
            raise ValueError("Task title required")
        if "priority" in changes:
            _check_priority(changes["priority"])

        current = await self.get_task(task_id)
        stale = [f for f in current.get("decrypt_errors") or [] if f not in changes]
        if stale:
            logger.warning("refusing to rewrite task with undecryptable fields")
            raise DecryptionError(DECRYPTION_FAILED_MESSAGE)

        merged = {name: current.get(name) for name in TASK_FIELDS}
        merged.update(changes)
        payload = await self.cipher.seal_record(TASK_SCHEMA, merged)
        payload.update(self._owner())
        return await self.tasks_api.update_task(task_id, payload)

    async def set_task_status(self, task_id: int | str, done: bool = True) -> dict[str, Any]:
        status = TASK_STATUS_COMPLETED if done else TASK_STATUS_PENDING
        return await self.tasks_api.set_status(task_id, status)

    async def delete_task(self, task_id: int | str) -> None:
        await self.tasks_api.delete_task(task_id)

    # ------------------------------------------------------------------
    # Subtasks
    # ------------------------------------------------------------------

    async def list_subtasks(self, task_id: int | str) -> list[dict[str, Any]]:
        result = await self.subtasks_api.list_for_task(task_id)
        return await self.cipher.open_records(SUBTASK_SCHEMA, result.get("subtasks") or [])

    async def add_subtask(self, task_id: int | str, title: str) -> dict[str, Any]:
        title = (title or "").strip()
        if not title:
            raise ValueError("Subtask required")
        payload = await self.cipher.seal_record(SUBTASK_SCHEMA, {"title": title})
        return await self.subtasks_api.create_subtask(task_id, payload["title_encrypted"])

    async def set_subtask_status(
        self, subtask_id: int | str, done: bool = True
    ) -> dict[str, Any]:
        status = TASK_STATUS_COMPLETED if done else TASK_STATUS_PENDING
        return await self.subtasks_api.set_status(subtask_id, status)

    async def delete_subtask(self, subtask_id: int | str) -> None:
        await self.subtasks_api.delete_subtask(subtask_id)

    # ------------------------------------------------------------------
    # Diary
    # ------------------------------------------------------------------

    async def list_entries(self, **filters: Any) -> list[dict[str, Any]]:
        result = await self.diary_api.list_entries(**filters)
        return await self.cipher.open_records(DIARY_SCHEMA, result.get("entries") or [])

    async def get_entry(self, entry_id: int | str) -> dict[str, Any]:
        result = await self.diary_api.get_entry(entry_id)
        entry = result.get("entry")
        if not entry:
            raise KeyError(f"Entry {entry_id} not found")
        return await self.cipher.open_record(DIARY_SCHEMA, entry)

    async def add_entry(
        self,
        content: str,
        title: str | None = None,
        tags: list[str] | str | None = None,
        *,
        mood: str | None = None,
        visibility: str = "private",
        entry_date: str | None = None,
        emotion_score: int | None = None,
    ) -> dict[str, Any]:
        """Seal and create a diary entry. Returns the server response.

        Tags are sealed as one comma separated string, the form the web
        diary writes.
        """
        if not content:
            raise ValueError("Diary content required")
        _check_visibility(visibility)

        payload = await self.cipher.seal_record(
            DIARY_SCHEMA,
            {
                "title": title,
                "content": content,
                "tags": join_tags(tags),
                "mood": mood,
                "visibility": visibility,
                "entry_date": entry_date,
                "emotion_score": emotion_score,
            },
        )
        return await self.diary_api.create_entry(payload)

    async def update_entry(self, entry_id: int | str, **changes: Any) -> dict[str, Any]:
        """Re-seal the given fields and update the entry.

        The server keeps any field that is not sent.
        """
        unknown = set(changes) - set(DIARY_FIELDS)
        if unknown:
            raise ValueError(f"Unknown diary field(s): {', '.join(sorted(unknown))}")
        if not changes:
            raise ValueError("No fields to update")
        if "content" in changes and not changes["content"]:
            raise ValueError("Diary content required")
        if "visibility" in changes:
            _check_visibility(changes["visibility"])
        if "tags" in changes:
            changes["tags"] = join_tags(changes["tags"])

        payload = await self.cipher.seal_record(DIARY_SCHEMA, changes)
        return await self.diary_api.update_entry(entry_id, payload)

    async def delete_entry(self, entry_id: int | str) -> None:
        await self.diary_api.delete_entry(entry_id)

    async def search_entries(
        self, query: str = "", *, tag: str | None = None, mood: str | None = None
    ) -> list[dict[str, Any]]:
        """Search diary entries on the client.

        The server returns candidates only; they are decrypted here and
        matched case-insensitively on title and content, and exactly on tag.
        Entries whose fields failed to decrypt never match.
        """
        result = await self.diary_api.candidates(q=query, mood=mood)
        entries = await self.cipher.open_records(DIARY_SCHEMA, result.get("entries") or [])
        return [e for e in entries if matches_entry(e, query, tag)]


def _check_priority(priority: str) -> None:
    if priority not in TASK_PRIORITIES:
        raise ValueError(f"Priority must be one of {', '.join(TASK_PRIORITIES)}")


def _check_visibility(visibility: str) -> None:
    if visibility not in DIARY_VISIBILITIES:
        raise ValueError(f"Visibility must be one of {', '.join(DIARY_VISIBILITIES)}")


def split_tags(value: Any) -> list[str]:
    """Return the tags of an opened entry as a list.

    Entries written by the web diary hold a free-text string such as
    ``"work, travel"``; older entries hold a JSON list.
    """
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, list):
        items = value
    else:
        return []
    return [str(t).strip() for t in items if str(t).strip()]


def join_tags(tags: list[str] | str | None) -> str | None:
    """Normalize tags to the comma separated string sealed on the wire."""
    if tags is None:
        return None
    return ", ".join(split_tags(tags)) or None


def matches_entry(entry: dict[str, Any], query: str = "", tag: str | None = None) -> bool:
    """Return True if a decrypted diary entry matches ``query`` and ``tag``."""
    failed = entry.get("decrypt_errors") or []

    if tag:
        tags = split_tags(entry.get("tags")) if "tags" not in failed else []
        if tag.strip() not in tags:
            return False

    needle = query.strip().lower()
    if not needle:
        return True

    for name in ("title", "content"):
        value = entry.get(name)
        if name not in failed and isinstance(value, str) and needle in value.lower():
            return True
    return False


def resolve_stored_identity(config_service: ConfigService) -> Identity:
    """Return the identity of the user whose token is stored in credentials.

    Raises:
        MissingSecretError: If there is no token or it carries no user id.
    """
    credentials = config_service.load_credentials()
    token = (credentials or {}).get("token")
    if not token:
        raise MissingSecretError("Not logged in: no stored token")

    try:
        identity = identity_from_token(token)
    except IdentityError as e:
        raise MissingSecretError("Stored token does not carry a user identity") from e

    if identity is None or not identity.secret:
        raise MissingSecretError("Stored token does not carry a user identity")
    return identity


def resolve_stored_secret(config_service: ConfigService) -> str:
    """Return the secret of the signed-in user."""
    return resolve_stored_identity(config_service).secret
