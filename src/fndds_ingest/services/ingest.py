"""Ingest orchestration for the FNDDS survey extracts."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from fndds_ingest.domain.ingest import IngestCounts, IngestReport, WorkerOutcome
from fndds_ingest.services.dictionaries import DictionaryService
from fndds_ingest.services.joins import (
    InputFoodDecoder,
    JoinWorker,
    NutrientDecoder,
    RowDecoder,
    ServingDecoder,
)
from fndds_ingest.services.locks import KeyedLock
from fndds_ingest.services.seed import SeedLoader
from fndds_ingest.services.store import FoodStore

_COMPLETION_MESSAGES = {
    "servings": "Servings ingest complete.",
    "nutrients": "Nutrient ingest complete.",
    "input foods": "Food input complete.",
}

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractFiles:
    """File names of the four co-located extracts."""

    foods: str = "food.csv"
    servings: str = "food_portion.csv"
    nutrients: str = "food_nutrient.csv"
    input_foods: str = "input_food.csv"


@dataclass
class IngestService:
    """Runs the seed load, then the three join workers concurrently."""

    store: FoodStore
    dictionaries: DictionaryService
    source_tag: str = "FNDDS"
    files: ExtractFiles = ExtractFiles()
    delimiter: str = ","
    skip_header: bool = True
    serialize_flushes: bool = True
    progress_interval: int = 10000

    async def run(self, data_dir: Path) -> IngestReport:
        """Ingest the extracts found in a directory.

        The seed load runs to completion first; if it raises, no join worker
        is started and the error propagates. Join worker failures do not stop
        their siblings. The first one observed becomes the report's error
        once all three workers have finished.

        Raises:
            ExtractReadError: If the primary extract cannot be read.
        """
        seed_loader = SeedLoader(
            store=self.store,
            source_tag=self.source_tag,
            delimiter=self.delimiter,
            skip_header=self.skip_header,
            progress_interval=self.progress_interval,
        )
        seed_counts = await seed_loader.run(data_dir / self.files.foods)

        workers = self._build_workers(data_dir)
        tasks = [asyncio.create_task(worker.run()) for worker in workers]
        outcomes: list[WorkerOutcome] = []
        error: Exception | None = None
        for next_done in asyncio.as_completed(tasks):
            outcome = await next_done
            outcomes.append(outcome)
            if outcome.error is not None:
                _logger.error("Error from %s: %s", outcome.name, outcome.error)
                if error is None:
                    error = outcome.error
            else:
                _logger.info(_COMPLETION_MESSAGES.get(outcome.name, outcome.name))

        counts = sum((outcome.counts for outcome in outcomes), seed_counts)
        _log_summary(counts)
        return IngestReport(counts=counts, outcomes=outcomes, error=error)

    def _build_workers(self, data_dir: Path) -> list[JoinWorker]:
        locks = KeyedLock() if self.serialize_flushes else None
        jobs: list[tuple[str, RowDecoder]] = [
            (self.files.servings, ServingDecoder()),
            (self.files.nutrients, NutrientDecoder(self.dictionaries)),
            (self.files.input_foods, InputFoodDecoder()),
        ]
        return [
            JoinWorker(
                path=data_dir / file_name,
                decoder=decoder,
                store=self.store,
                locks=locks,
                delimiter=self.delimiter,
                skip_header=self.skip_header,
                progress_interval=self.progress_interval,
            )
            for file_name, decoder in jobs
        ]


def _log_summary(counts: IngestCounts) -> None:
    _logger.info(
        "Finished.  Counts: %s Foods %s Servings %s Nutrients %s Other",
        counts.foods,
        counts.servings,
        counts.nutrients,
        counts.other,
    )
    if counts.skipped or counts.orphaned:
        _logger.warning(
            "%s rows skipped, %s rows without a matching food",
            counts.skipped,
            counts.orphaned,
        )
