"""Categories API endpoints. Category names are not encrypted."""

from typing import Any

from dailyvault.api.client import APIClient


class CategoriesAPI:
    """Categories API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def list_categories(self, **params: Any) -> dict:
        response = await self.client.get("/categories", params=params or None)
        return response.json()

    async def create_category(self, name: str, color_code: str | None = None) -> dict:
        data: dict[str, Any] = {"category_name": name}
        if color_code:
            data["color_code"] = color_code
        response = await self.client.post("/categories", json=data)
        return response.json()

    async def update_category(self, category_id: int | str, **updates: Any) -> dict:
        response = await self.client.put(f"/categories/{category_id}", json=updates)
        return response.json()

    async def delete_category(self, category_id: int | str) -> None:
        await self.client.delete(f"/categories/{category_id}")

    async def delete_categories(self, ids: list[int]) -> dict:
        """Delete several categories in one request."""
        response = await self.client.delete("/categories", json={"ids": ids})
        return response.json()
