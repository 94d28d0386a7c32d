"""Exceptions raised by the benchmark phases."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import DatasetRow


class BenchmarkError(Exception):
    """Base class; `phase` names the stage of the run that failed."""

    phase = "run"


class DatasetError(BenchmarkError):
    """The dataset could not be read or parsed."""

    phase = "load"


class TimingError(BenchmarkError):
    """A callable failed while being timed; the measurement is discarded."""

    phase = "timing"

    def __init__(self, message: str, *, index: int, row: "DatasetRow", variant: str | None = None) -> None:
        super().__init__(message)
        self.index = index
        self.row = row
        self.variant = variant


class ReportSinkError(BenchmarkError):
    """The report sink cannot be written or read."""

    phase = "reporting"
