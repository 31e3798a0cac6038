"""Join workers merging dependent extracts into existing food aggregates.

Each worker scans one extract that is sorted by foreign key, accumulates the
decoded subrecords of a contiguous key run, and flushes them into the food's
subfield when the key changes and once more at end of stream. Rows whose key
reappears after a different key are flushed as a separate run and overwrite
the earlier one; unsorted input is not detected.
"""

import asyncio
import logging
from contextlib import nullcontext
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel

from fndds_ingest.domain.dictionaries import DerivationInfo, NutrientInfo
from fndds_ingest.domain.foods import Food, InputFood, NutrientMeasurement, Serving
from fndds_ingest.domain.ingest import IngestCounts, WorkerOutcome
from fndds_ingest.services.dictionaries import DictionaryService
from fndds_ingest.services.extracts import (
    cell,
    parse_float,
    parse_int,
    read_rows,
)
from fndds_ingest.services.locks import KeyedLock
from fndds_ingest.services.store import FoodStore

FOREIGN_KEY_COLUMN = 1

_logger = logging.getLogger(__name__)


class RowDecoder(Protocol):
    """Turns one extract row into a subrecord of a food."""

    name: str
    subfield: str
    counter: str

    async def prepare(self) -> None:
        """Load anything needed before the first row is decoded."""

    def decode(self, row: list[str], source: str) -> BaseModel:
        """Return the subrecord for a row."""


@dataclass
class ServingDecoder(RowDecoder):
    """Decodes food_portion rows into servings."""

    name: str = "servings"
    subfield: str = "servings"
    counter: str = "servings"

    async def prepare(self) -> None:
        return None

    def decode(self, row: list[str], source: str) -> Serving:
        return Serving(
            nutrient_basis="g",
            description=cell(row, 5),
            amount=parse_float(row, 3, field="amount", source=source),
            weight=parse_float(row, 7, field="gram_weight", source=source),
        )


@dataclass
class NutrientDecoder(RowDecoder):
    """Decodes food_nutrient rows, resolving names and units by nutrient number."""

    dictionaries: DictionaryService
    nutrients: dict[int, NutrientInfo] = field(default_factory=dict)
    derivations: dict[int, DerivationInfo] = field(default_factory=dict)
    name: str = "nutrients"
    subfield: str = "nutrients"
    counter: str = "nutrients"

    async def prepare(self) -> None:
        self.nutrients = await asyncio.to_thread(self.dictionaries.load_nutrients)
        self.derivations = await asyncio.to_thread(self.dictionaries.load_derivations)

    def decode(self, row: list[str], source: str) -> NutrientMeasurement:
        number = parse_int(row, 2, field="nutrient_id", source=source)
        info = self.nutrients.get(number)
        return NutrientMeasurement(
            nutrient_number=number,
            name=info.name if info else "",
            unit=info.unit if info else "",
            value=parse_float(row, 3, field="amount", source=source),
            derivation=self._derivation_code(cell(row, 5)),
        )

    def _derivation_code(self, raw: str) -> str | None:
        if not raw.isdigit():
            return None
        derivation = self.derivations.get(int(raw))
        return derivation.code if derivation else None


@dataclass
class InputFoodDecoder(RowDecoder):
    """Decodes input_food rows into constituent foods."""

    name: str = "input foods"
    subfield: str = "input_foods"
    counter: str = "other"

    async def prepare(self) -> None:
        return None

    def decode(self, row: list[str], source: str) -> InputFood:
        return InputFood(
            seq_no=parse_int(row, 3, field="seq_num", source=source),
            amount=parse_float(row, 4, field="amount", source=source),
            sr_code=parse_int(row, 5, field="sr_code", source=source),
            description=cell(row, 6),
            unit=cell(row, 7),
            portion_code=cell(row, 8),
            portion_description=cell(row, 9),
            weight=parse_float(row, 10, field="gram_weight", source=source),
        )


@dataclass
class _Tally:
    rows: int = 0
    skipped: int = 0
    orphaned: int = 0
    flushes: int = 0


@dataclass
class JoinWorker:
    """Merges one dependent extract into the foods already in the store."""

    path: Path
    decoder: RowDecoder
    store: FoodStore
    locks: KeyedLock | None = None
    key_column: int = FOREIGN_KEY_COLUMN
    delimiter: str = ","
    skip_header: bool = True
    progress_interval: int = 10000

    @property
    def name(self) -> str:
        return self.decoder.name

    async def run(self) -> WorkerOutcome:
        """Merge the extract and report the terminal outcome.

        Fatal problems (unreadable file, dictionary or store failure) end the
        scan and are returned as the outcome's error. Foods flushed before
        the failure stay in the store.
        """
        tally = _Tally()
        try:
            await self.decoder.prepare()
            await self._merge(tally)
        except Exception as exc:
            _logger.exception("%s ingest failed after %s rows", self.name, tally.rows)
            return WorkerOutcome(name=self.name, counts=self._counts(tally), error=exc)
        return WorkerOutcome(name=self.name, counts=self._counts(tally))

    async def _merge(self, tally: _Tally) -> None:
        source = self.path.name
        current_key = ""
        base: Food | None = None
        pending: list[BaseModel] = []
        rows = read_rows(
            self.path, delimiter=self.delimiter, skip_header=self.skip_header
        )
        for row in rows:
            tally.rows += 1
            if self.progress_interval and tally.rows % self.progress_interval == 0:
                _logger.info("%s count = %s", self.name, tally.rows)
            key = cell(row, self.key_column)
            if not key:
                _logger.warning("%s: skipping row without a key: %r", source, row)
                tally.skipped += 1
                continue
            if key != current_key:
                if current_key:
                    await self._flush(current_key, pending, tally)
                current_key = key
                pending = []
                base = await asyncio.to_thread(self.store.get, key)
                if base is None:
                    _logger.warning(
                        "%s: no food %s in store, skipping its %s",
                        source,
                        key,
                        self.name,
                    )
            if base is None:
                tally.orphaned += 1
                continue
            pending.append(self.decoder.decode(row, source))
        if current_key:
            await self._flush(current_key, pending, tally)

    async def _flush(self, key: str, items: list[BaseModel], tally: _Tally) -> None:
        if not items:
            return
        guard = self.locks.hold(key) if self.locks is not None else nullcontext()
        async with guard:
            food = await asyncio.to_thread(self.store.get, key)
            if food is None:
                _logger.warning("%s: food %s vanished before flush", self.name, key)
                return
            updated = food.model_copy(
                update={
                    self.decoder.subfield: list(items),
                    "updated_at": datetime.now(tz=UTC),
                }
            )
            await asyncio.to_thread(self.store.update, key, updated)
        tally.flushes += 1

    def _counts(self, tally: _Tally) -> IngestCounts:
        return IngestCounts(
            **{self.decoder.counter: tally.rows},
            skipped=tally.skipped,
            orphaned=tally.orphaned,
            flushes=tally.flushes,
        )
