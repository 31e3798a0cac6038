"""Domain models describing ingest progress and results."""

from dataclasses import dataclass, field, fields


@dataclass(frozen=True)
class IngestCounts:
    """Row tallies for one worker or a whole run."""

    foods: int = 0
    servings: int = 0
    nutrients: int = 0
    other: int = 0
    skipped: int = 0
    orphaned: int = 0
    flushes: int = 0

    def __add__(self, other: "IngestCounts") -> "IngestCounts":
        if not isinstance(other, IngestCounts):
            return NotImplemented
        return IngestCounts(
            **{
                item.name: getattr(self, item.name) + getattr(other, item.name)
                for item in fields(self)
            }
        )


@dataclass(frozen=True)
class WorkerOutcome:
    """Terminal result of a single join worker."""

    name: str
    counts: IngestCounts
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """Return True when the worker finished without a fatal error."""
        return self.error is None


@dataclass(frozen=True)
class IngestReport:
    """Summary of a complete ingest run."""

    counts: IngestCounts
    outcomes: list[WorkerOutcome] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """Return True when every worker succeeded."""
        return self.error is None
