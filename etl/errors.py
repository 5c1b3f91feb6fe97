"""Error kinds raised or reported by the normalizer."""

from dataclasses import dataclass
from collections.abc import Iterable


class SchemaError(ValueError):
    """A required input column is absent; nothing is produced."""

    def __init__(self, source: str, missing: Iterable[str]):
        self.source = source
        self.missing = tuple(missing)
        columns = ", ".join(self.missing)
        super().__init__(f"Source {source} is missing required column(s): {columns}")


@dataclass(frozen=True)
class RowRejected:
    """Rows of one source excluded for one reason. Processing continues."""

    source: str
    reason: str
    count: int

    def __str__(self) -> str:
        return f"{self.source}: {self.count:,} row(s) rejected ({self.reason})"
