"""Reference dictionary loading for nutrient enrichment."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from fndds_ingest.domain.dictionaries import DerivationInfo, NutrientInfo
from fndds_ingest.errors import DictionaryLoadError
from fndds_ingest.services.store import FoodStore

NUTRIENT_CATEGORY = "NUT"
DERIVATION_CATEGORY = "DERV"

_logger = logging.getLogger(__name__)

_Entry = TypeVar("_Entry")


@dataclass
class DictionaryService:
    """Loads reference dictionaries from the store once per run."""

    store: FoodStore
    namespace: str
    page_size: int = 500

    def load_nutrients(self) -> dict[int, NutrientInfo]:
        """Return nutrient metadata keyed by nutrient number."""
        entries = self._load(NUTRIENT_CATEGORY, _parse_nutrient)
        return {entry.number: entry for entry in entries}

    def load_derivations(self) -> dict[int, DerivationInfo]:
        """Return derivation codes keyed by derivation id."""
        entries = self._load(DERIVATION_CATEGORY, _parse_derivation)
        return {entry.id: entry for entry in entries}

    def _load(
        self, category: str, parse: Callable[[dict[str, object]], _Entry]
    ) -> list[_Entry]:
        rows = self._fetch_all(category)
        entries = []
        for row in rows:
            try:
                entries.append(parse(row))
            except (KeyError, TypeError, ValueError) as exc:
                _logger.warning(
                    "Skipping malformed %s entry %r: %s", category, row, exc
                )
        _logger.info(
            "Loaded %s %s dictionary entries from %s",
            len(entries),
            category,
            self.namespace,
        )
        return entries

    def _fetch_all(self, category: str) -> list[dict[str, object]]:
        if self.page_size <= 0:
            raise DictionaryLoadError(
                f"Dictionary page size must be positive, got {self.page_size}"
            )
        rows: list[dict[str, object]] = []
        offset = 0
        while True:
            try:
                page = self.store.dictionary_lookup(
                    self.namespace, category, offset, self.page_size
                )
            except Exception as exc:
                raise DictionaryLoadError(
                    f"Failed to load {category} dictionary at offset {offset}: {exc}"
                ) from exc
            rows.extend(page)
            if len(page) < self.page_size:
                return rows
            offset += self.page_size


def _parse_nutrient(row: dict[str, object]) -> NutrientInfo:
    return NutrientInfo(
        number=int(row["nutrientno"]),
        name=str(row.get("name", "")),
        unit=str(row.get("unit", "")),
        tag=str(row.get("tagname", "")),
        category=str(row.get("type", "")),
    )


def _parse_derivation(row: dict[str, object]) -> DerivationInfo:
    return DerivationInfo(
        id=int(row["id"]),
        code=str(row["code"]),
        description=str(row.get("description", "")),
    )
