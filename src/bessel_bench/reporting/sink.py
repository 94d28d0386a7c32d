"""Append-only sinks for timing records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Protocol

import structlog

from bessel_bench.core.errors import ReportSinkError
from bessel_bench.core.models import ReportRecord

logger = structlog.get_logger(__name__)


class ReportSink(Protocol):
    """Destination accumulating timing records across runs."""

    def append(self, record: ReportRecord) -> None:
        """Stores one record without touching earlier ones."""

    def records(self) -> List[ReportRecord]:
        """Returns every stored record in insertion order."""


class InMemoryReportSink:
    """List-backed sink, for tests and embedding."""

    def __init__(self) -> None:
        self._records: List[ReportRecord] = []

    def append(self, record: ReportRecord) -> None:
        self._records.append(record)

    def records(self) -> List[ReportRecord]:
        return list(self._records)


class JsonLinesReportSink:
    """Sink writing one JSON object per line.

    The file is opened in append mode for every record, so several runs can
    share one file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def append(self, record: ReportRecord) -> None:
        line = json.dumps(record.to_dict(), ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        except OSError as exc:
            raise ReportSinkError(f"cannot append to report file {self.path}: {exc}") from exc

    def records(self) -> List[ReportRecord]:
        if not self.path.exists():
            return []
        try:
            lines = self.path.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            raise ReportSinkError(f"cannot read report file {self.path}: {exc}") from exc

        out: List[ReportRecord] = []
        for line_no, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                out.append(ReportRecord.from_dict(json.loads(line)))
            except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
                raise ReportSinkError(f"{self.path}:{line_no}: malformed record: {exc}") from exc
        return out


def report_execution_time(
    sink: ReportSink,
    elapsed: float,
    group: str,
    series: str,
    source: str,
) -> ReportRecord:
    """Appends one timing to `sink` and returns the stored record."""

    if elapsed < 0:
        raise ValueError("elapsed time must be >= 0")
    record = ReportRecord(group=group, series=series, source=source, value=float(elapsed))
    sink.append(record)
    logger.debug("record-appended", group=group, series=series, source=source, value=record.value)
    return record
