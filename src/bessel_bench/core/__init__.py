"""Core data model and error types."""

from .errors import BenchmarkError, DatasetError, ReportSinkError, TimingError
from .models import Dataset, DatasetRow, ReportRecord, ScreeningResult, TimingResult

__all__ = [
    "BenchmarkError",
    "Dataset",
    "DatasetError",
    "DatasetRow",
    "ReportRecord",
    "ReportSinkError",
    "ScreeningResult",
    "TimingError",
    "TimingResult",
]
