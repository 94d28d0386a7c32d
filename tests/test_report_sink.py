"""Tests for timing record sinks."""

from __future__ import annotations

import json

import pytest

from bessel_bench.core.errors import ReportSinkError
from bessel_bench.core.models import ReportRecord
from bessel_bench.reporting import InMemoryReportSink, JsonLinesReportSink, report_execution_time

GROUP = "Library Comparison with CPython 3.12.1 on Linux"


def test_three_reports_produce_three_records() -> None:
    sink = InMemoryReportSink()

    for series in ("a", "b", "c"):
        report_execution_time(sink, 1e-6, GROUP, series, "SciPy")

    records = sink.records()
    assert [r.series for r in records] == ["a", "b", "c"]


def test_json_lines_sink_appends_across_instances(tmp_path) -> None:
    path = tmp_path / "reports" / "results.jsonl"

    report_execution_time(JsonLinesReportSink(path), 1e-6, GROUP, "sph_bessel", "SciPy")
    report_execution_time(JsonLinesReportSink(path), 2e-6, GROUP, "sph_bessel", "SciPy jv")
    report_execution_time(JsonLinesReportSink(path), 3e-6, GROUP, "sph_bessel", "SciPy")

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert json.loads(lines[1])["source"] == "SciPy jv"

    records = JsonLinesReportSink(path).records()
    assert [r.value for r in records] == [1e-6, 2e-6, 3e-6]


def test_missing_report_file_reads_as_empty(tmp_path) -> None:
    assert JsonLinesReportSink(tmp_path / "none.jsonl").records() == []


def test_unwritable_sink_raises_report_sink_error(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    sink = JsonLinesReportSink(blocker / "results.jsonl")

    with pytest.raises(ReportSinkError) as excinfo:
        report_execution_time(sink, 1e-6, GROUP, "sph_bessel", "SciPy")
    assert excinfo.value.phase == "reporting"


def test_malformed_line_raises(tmp_path) -> None:
    path = tmp_path / "results.jsonl"
    path.write_text('{"group": "g"}\n', encoding="utf-8")
    with pytest.raises(ReportSinkError, match="malformed record"):
        JsonLinesReportSink(path).records()


def test_negative_elapsed_rejected() -> None:
    with pytest.raises(ValueError):
        report_execution_time(InMemoryReportSink(), -1.0, GROUP, "s", "SciPy")


def test_record_round_trips_through_dict() -> None:
    record = ReportRecord(group=GROUP, series="s", source="SciPy", value=1.5e-7)
    assert ReportRecord.from_dict(record.to_dict()) == record
