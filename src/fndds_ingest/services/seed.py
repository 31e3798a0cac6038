"""Seed loading of base food aggregates from the primary extract."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from fndds_ingest.domain.foods import Food
from fndds_ingest.domain.ingest import IngestCounts
from fndds_ingest.services.extracts import cell, parse_date, read_rows
from fndds_ingest.services.store import FoodStore

FOOD_TYPE = "FOOD"

_ID_COLUMN = 0
_DESCRIPTION_COLUMN = 2
_CATEGORY_COLUMN = 3
_PUBLICATION_DATE_COLUMN = 4

_logger = logging.getLogger(__name__)


@dataclass
class SeedLoader:
    """Creates one base food per row of the primary extract.

    Must finish before any join worker starts: the workers only merge into
    foods that already exist in the store.
    """

    store: FoodStore
    source_tag: str
    delimiter: str = ","
    skip_header: bool = True
    progress_interval: int = 1000

    async def run(self, path: Path) -> IngestCounts:
        """Load every food in the extract and return the row tallies.

        Raises:
            ExtractReadError: If the extract cannot be opened or read.
        """
        foods = 0
        skipped = 0
        rows = read_rows(path, delimiter=self.delimiter, skip_header=self.skip_header)
        for row in rows:
            foods += 1
            if self.progress_interval and foods % self.progress_interval == 0:
                _logger.info("Foods count = %s", foods)
            food = self._build_food(row, path.name)
            if food is None:
                skipped += 1
                continue
            await asyncio.to_thread(self.store.update, food.fdc_id, food)
        _logger.info(
            "Seeded %s foods from %s (%s skipped)", foods - skipped, path.name, skipped
        )
        return IngestCounts(foods=foods, skipped=skipped)

    def _build_food(self, row: list[str], source: str) -> Food | None:
        fdc_id = cell(row, _ID_COLUMN)
        if not fdc_id:
            _logger.warning("%s: skipping row without an id: %r", source, row)
            return None
        return Food(
            fdc_id=fdc_id,
            description=cell(row, _DESCRIPTION_COLUMN),
            source=self.source_tag,
            publication_date=parse_date(
                row, _PUBLICATION_DATE_COLUMN, field="publication_date", source=source
            ),
            type=FOOD_TYPE,
            category=cell(row, _CATEGORY_COLUMN) or None,
            updated_at=datetime.now(tz=UTC),
        )
