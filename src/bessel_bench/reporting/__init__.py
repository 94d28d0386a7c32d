"""Recording and tabulation of benchmark timings."""

from .sink import InMemoryReportSink, JsonLinesReportSink, ReportSink, report_execution_time
from .tables import ComparisonTable, build_comparison_tables, write_tables

__all__ = [
    "ComparisonTable",
    "InMemoryReportSink",
    "JsonLinesReportSink",
    "ReportSink",
    "build_comparison_tables",
    "report_execution_time",
    "write_tables",
]
