"""Tasks and subtasks API endpoints."""

from typing import Any

from dailyvault.api.client import APIClient

# Older web builds sent these names; the server stores *_enc.
_LEGACY_TASK_KEYS = {
    "title_encrypted": "title_enc",
    "description_encrypted": "description_enc",
}


def normalize_task_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Rename legacy encrypted keys to the names the server expects."""
    normalized = dict(payload)
    for legacy, current in _LEGACY_TASK_KEYS.items():
        if legacy in normalized:
            value = normalized.pop(legacy)
            if normalized.get(current) is None:
                normalized[current] = value
    return normalized


class TasksAPI:
    """Tasks API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def list_tasks(
        self,
        *,
        status: str | None = None,
        priority: str | None = None,
        category_id: int | None = None,
        due_date: str | None = None,
        page: int | None = None,
        limit: int | None = None,
        **filters: Any,
    ) -> dict:
        """List tasks with optional filters."""
        params: dict[str, Any] = {}

        if status:
            params["status"] = status
        if priority:
            params["priority"] = priority
        if category_id is not None:
            params["category_id"] = category_id
        if due_date:
            params["due_date"] = due_date
        if page is not None:
            params["page"] = page
        if limit is not None:
            params["limit"] = limit

        params.update(filters)

        response = await self.client.get("/tasks", params=params)
        return response.json()

    async def get_task(self, task_id: int | str) -> dict:
        """Get a specific task by ID."""
        response = await self.client.get(f"/tasks/{task_id}")
        return response.json()

    async def create_task(self, payload: dict[str, Any]) -> dict:
        """Create a task from an already sealed payload."""
        response = await self.client.post("/tasks", json=normalize_task_payload(payload))
        return response.json()

    async def update_task(self, task_id: int | str, payload: dict[str, Any]) -> dict:
        """Replace a task with an already sealed payload."""
        response = await self.client.put(
            f"/tasks/{task_id}", json=normalize_task_payload(payload)
        )
        return response.json()

    async def delete_task(self, task_id: int | str) -> None:
        """Delete a task."""
        await self.client.delete(f"/tasks/{task_id}")

    async def set_status(self, task_id: int | str, status: str) -> dict:
        """Update a task's status."""
        response = await self.client.patch(
            f"/tasks/{task_id}/status", json={"status": status}
        )
        return response.json()


class SubtasksAPI:
    """Subtasks API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def list_for_task(self, task_id: int | str) -> dict:
        """List the subtasks of a task."""
        response = await self.client.get(f"/subtasks/task/{task_id}")
        return response.json()

    async def create_subtask(self, task_id: int | str, title_encrypted: str) -> dict:
        """Create a subtask with a sealed title."""
        response = await self.client.post(
            "/subtasks", json={"task_id": task_id, "title_encrypted": title_encrypted}
        )
        return response.json()

    async def set_status(self, subtask_id: int | str, status: str) -> dict:
        """Update a subtask's status."""
        response = await self.client.patch(
            f"/subtasks/{subtask_id}/status", json={"status": status}
        )
        return response.json()

    async def delete_subtask(self, subtask_id: int | str) -> None:
        """Delete a subtask."""
        await self.client.delete(f"/subtasks/{subtask_id}")
