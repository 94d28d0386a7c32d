"""Tests for dataset screening."""

from __future__ import annotations

import math
import sys

import pytest

from bessel_bench.benchmarks.screening import relative_difference, screen_all, screen_data
from bessel_bench.core.models import Dataset, DatasetRow


def _exact(row: DatasetRow) -> float:
    return row.expected


def test_all_rows_kept_for_exact_probe(small_dataset: Dataset) -> None:
    result = screen_data(small_dataset, _exact)

    assert result.total == len(small_dataset)
    assert result.used == len(small_dataset)
    assert result.rejected == ()


def test_reduced_dataset_is_subset_by_identity(small_dataset: Dataset) -> None:
    def probe(row: DatasetRow) -> float:
        return row.expected if row.order % 2 == 0 else row.expected * 2

    result = screen_data(small_dataset, probe)

    assert result.used <= result.total
    original_ids = {id(row) for row in small_dataset}
    assert all(id(row) in original_ids for row in result.dataset)
    assert [row.order for row in result.dataset] == [0, 2]


def test_probe_exceptions_reject_rows_without_aborting(small_dataset: Dataset) -> None:
    def probe(row: DatasetRow) -> float:
        if row.order == 1:
            raise ValueError("math domain error")
        if row.order == 2:
            raise OverflowError("range")
        return row.expected

    result = screen_data(small_dataset, probe)

    assert [row.order for row in result.dataset] == [0, 5]
    reasons = [reason for _, reason in result.rejected]
    assert reasons[0].startswith("error: ValueError")
    assert reasons[1].startswith("error: OverflowError")


def test_non_finite_result_is_rejected(small_dataset: Dataset) -> None:
    result = screen_data(small_dataset, lambda row: math.nan if row.order == 0 else row.expected)
    assert result.used == len(small_dataset) - 1
    assert "non-finite" in result.rejected[0][1]


def test_tolerance_controls_acceptance() -> None:
    dataset = Dataset.from_rows([(0, 1.0, 1.0)])

    def probe(row: DatasetRow) -> float:
        return 1.0 + 1e-6

    assert screen_data(dataset, probe).used == 0
    assert screen_data(dataset, probe, tolerance=1e-5).used == 1


def test_reference_extractor_is_used() -> None:
    dataset = Dataset.from_rows([(0, 2.0, 99.0)])
    result = screen_data(dataset, lambda row: row.x * 2, reference=lambda row: 4.0)
    assert result.used == 1


def test_reference_extractor_failure_rejects_only_that_row() -> None:
    dataset = Dataset.from_rows([(0, 1.0, 1.0), (1, 2.0, 2.0), (2, 3.0, 3.0)])

    def reference(row: DatasetRow) -> float:
        if row.order == 1:
            raise KeyError("no tabulated value")
        return row.expected

    result = screen_data(dataset, lambda row: row.x, reference=reference)

    assert [row.order for row in result.dataset] == [0, 2]
    assert result.total == 3
    assert [reason for _, reason in result.rejected] == ["no reference value: KeyError: 'no tabulated value'"]


def test_screen_all_keeps_original_total(small_dataset: Dataset) -> None:
    probes = [
        ("drop-odd", lambda row: row.expected if row.order % 2 == 0 else math.inf),
        ("drop-two", lambda row: row.expected if row.order != 2 else math.nan),
    ]

    result = screen_all(small_dataset, probes)

    assert result.total == len(small_dataset)
    assert [row.order for row in result.dataset] == [0]
    assert all(reason.startswith(("drop-odd:", "drop-two:")) for _, reason in result.rejected)
    assert len(result.rejected) == 3


def test_screening_empty_dataset() -> None:
    result = screen_data(Dataset.from_rows([]), _exact)
    assert result.total == 0
    assert result.used == 0


@pytest.mark.parametrize(
    "a,b,expected",
    [
        (1.0, 1.0, 0.0),
        (2.0, 1.0, 1.0),
        (0.0, 0.0, 0.0),
        (0.0, 5e-320, 0.0),
        (math.inf, math.inf, 0.0),
    ],
)
def test_relative_difference(a: float, b: float, expected: float) -> None:
    assert relative_difference(a, b) == pytest.approx(expected)


def test_relative_difference_sign_mismatch_and_nan() -> None:
    assert relative_difference(1.0, -1.0) == sys.float_info.max
    assert relative_difference(math.inf, 1.0) == sys.float_info.max
    assert math.isnan(relative_difference(math.nan, 1.0))
