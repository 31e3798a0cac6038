"""Document store interface consumed by the merge pipeline."""

from typing import Protocol

from fndds_ingest.domain.foods import Food


class FoodStore(Protocol):
    """Keyed document store holding aggregate foods and reference data.

    ``update`` replaces the whole document. It is not a partial merge, so
    concurrent read-modify-write cycles on one key must be serialized by the
    caller (see ``KeyedLock``).
    """

    def get(self, key: str) -> Food | None:
        """Return the food stored under a key, if present."""

    def update(self, key: str, food: Food) -> None:
        """Replace the document stored under a key."""

    def dictionary_lookup(
        self, namespace: str, category: str, offset: int, limit: int
    ) -> list[dict[str, object]]:
        """Return one page of raw reference entries for a category."""
