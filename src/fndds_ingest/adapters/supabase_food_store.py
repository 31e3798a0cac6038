"""Supabase-backed document store for aggregate foods."""

from dataclasses import dataclass
from typing import Any

from supabase import Client

from fndds_ingest.domain.foods import Food
from fndds_ingest.errors import StoreError
from fndds_ingest.services.store import FoodStore


@dataclass
class SupabaseFoodStore(FoodStore):
    """Stores each food as a jsonb document keyed by FDC id.

    Client failures (API errors, transport errors) are raised as StoreError.
    """

    client: Client
    foods_table: str = "foods"
    dictionaries_table: str = "dictionaries"

    def get(self, key: str) -> Food | None:
        """Return the food stored under a key, if present."""
        query = (
            self.client.table(self.foods_table)
            .select("id, document")
            .eq("id", key)
            .limit(1)
        )
        response = _execute(query, f"read food {key}")
        if not response.data:
            return None
        return Food.from_document(response.data[0]["document"])

    def update(self, key: str, food: Food) -> None:
        """Replace the document stored under a key."""
        query = self.client.table(self.foods_table).upsert(
            {"id": key, "document": food.to_document()}
        )
        response = _execute(query, f"write food {key}")
        if not response.data:
            raise StoreError(f"Failed to write food {key}")

    def dictionary_lookup(
        self, namespace: str, category: str, offset: int, limit: int
    ) -> list[dict[str, object]]:
        """Return one page of reference entries ordered by position."""
        query = (
            self.client.table(self.dictionaries_table)
            .select("entry")
            .eq("namespace", namespace)
            .eq("category", category)
            .order("position")
            .range(offset, offset + limit - 1)
        )
        response = _execute(query, f"read {namespace}/{category} dictionary")
        return [row["entry"] for row in response.data or []]


def _execute(query: Any, action: str) -> Any:
    try:
        return query.execute()
    except Exception as exc:
        raise StoreError(f"Failed to {action}: {exc}") from exc
