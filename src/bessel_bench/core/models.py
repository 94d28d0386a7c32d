"""Data model shared by the dataset, screening, timing and reporting code."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Iterator, NamedTuple, Sequence


class DatasetRow(NamedTuple):
    """One reference case: `j_order(x) == expected`."""

    order: int
    x: float
    expected: float


@dataclass(frozen=True, slots=True)
class Dataset(Sequence[DatasetRow]):
    """Immutable ordered collection of reference rows."""

    rows: tuple[DatasetRow, ...]
    name: str = "dataset"
    source: str | None = None

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[float]], *, name: str = "dataset", source: str | None = None) -> "Dataset":
        return cls(
            rows=tuple(
                row if isinstance(row, DatasetRow) else DatasetRow(int(row[0]), float(row[1]), float(row[2]))
                for row in rows
            ),
            name=name,
            source=source,
        )

    def derive(self, rows: Iterable[DatasetRow]) -> "Dataset":
        """Returns a new dataset with the same name and source."""

        return Dataset(rows=tuple(rows), name=self.name, source=self.source)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[DatasetRow]:
        return iter(self.rows)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self.derive(self.rows[index])
        return self.rows[index]


@dataclass(frozen=True, slots=True)
class ScreeningResult:
    """Outcome of screening a dataset against one or more probes."""

    dataset: Dataset
    total: int
    rejected: tuple[tuple[DatasetRow, str], ...] = ()

    @property
    def used(self) -> int:
        return len(self.dataset)


@dataclass(frozen=True, slots=True)
class TimingResult:
    """Wall-clock measurement of the final timed pass."""

    elapsed: float
    rows: int
    repeats: int
    checksum: float = 0.0

    @property
    def evaluations(self) -> int:
        return self.rows * self.repeats

    @property
    def per_evaluation(self) -> float:
        if self.evaluations == 0:
            return 0.0
        return self.elapsed / self.evaluations


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True, slots=True)
class ReportRecord:
    """One comparable data point: `value` seconds per evaluation."""

    group: str
    series: str
    source: str
    value: float
    recorded_at: str = field(default_factory=_utc_now)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict) -> "ReportRecord":
        return cls(
            group=str(payload["group"]),
            series=str(payload["series"]),
            source=str(payload["source"]),
            value=float(payload["value"]),
            recorded_at=str(payload.get("recorded_at") or ""),
        )
