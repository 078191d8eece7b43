"""Diary API endpoints."""

from typing import Any

from dailyvault.api.client import APIClient


class DiaryAPI:
    """Diary API client.

    Title, content and tags travel sealed. The server can only filter on the
    plaintext metadata (mood, visibility, date).
    """

    def __init__(self, client: APIClient):
        self.client = client

    async def list_entries(
        self,
        *,
        mood: str | None = None,
        visibility: str | None = None,
        entry_date: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict:
        """List diary entries with optional filters."""
        params: dict[str, Any] = {}

        if mood:
            params["mood"] = mood
        if visibility:
            params["visibility"] = visibility
        if entry_date:
            params["entry_date"] = entry_date
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset

        response = await self.client.get("/diary", params=params)
        return response.json()

    async def get_entry(self, entry_id: int | str) -> dict:
        response = await self.client.get(f"/diary/{entry_id}")
        return response.json()

    async def create_entry(self, payload: dict[str, Any]) -> dict:
        """Create an entry from an already sealed payload."""
        if not payload.get("content_encrypted"):
            raise ValueError("content_encrypted is required")
        response = await self.client.post("/diary", json=payload)
        return response.json()

    async def update_entry(self, entry_id: int | str, payload: dict[str, Any]) -> dict:
        response = await self.client.put(f"/diary/{entry_id}", json=payload)
        return response.json()

    async def delete_entry(self, entry_id: int | str) -> None:
        await self.client.delete(f"/diary/{entry_id}")

    async def candidates(self, q: str = "", mood: str | None = None) -> dict:
        """Fetch search candidates.

        The server cannot match encrypted text, so this returns unfiltered
        entries that the caller decrypts and filters locally.
        """
        params: dict[str, Any] = {"q": q}
        if mood:
            params["mood"] = mood
        response = await self.client.get("/diary/search", params=params)
        return response.json()

    async def mood_stats(self, since: str | None = None, until: str | None = None) -> dict:
        """Count entries per mood, optionally between two dates."""
        params: dict[str, Any] = {}
        if since:
            params["since"] = since
        if until:
            params["until"] = until
        response = await self.client.get("/diary/moods/stats", params=params)
        return response.json()

    async def missing_dates(self) -> dict:
        """Dates in the last three days, today excluded, that have no entry."""
        response = await self.client.get("/diary/missing")
        return response.json()
