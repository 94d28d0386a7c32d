"""Tests for the timed executor."""

from __future__ import annotations

import pytest

from bessel_bench.benchmarks.timing import TimingPolicy, exec_timed_test, time_execution
from bessel_bench.core.errors import TimingError
from bessel_bench.core.models import Dataset, DatasetRow


class CountingCallable:
    def __init__(self) -> None:
        self.calls = 0
        self.seen: list[DatasetRow] = []

    def __call__(self, row: DatasetRow) -> float:
        self.calls += 1
        self.seen.append(row)
        return 42.0


def test_single_pass_when_min_time_is_zero(small_dataset: Dataset) -> None:
    func = CountingCallable()

    result = exec_timed_test(small_dataset, func, policy=TimingPolicy(min_time=0.0))

    assert func.calls == len(small_dataset)
    assert result.repeats == 1
    assert result.evaluations == len(small_dataset)
    assert result.elapsed >= 0.0


@pytest.mark.parametrize("repeats", [1, 3, 7])
def test_fixed_repeats_call_count(distinct_rows: Dataset, repeats: int) -> None:
    func = CountingCallable()

    exec_timed_test(distinct_rows, func, policy=TimingPolicy(min_time=0.0, repeats=repeats))

    assert func.calls == repeats * len(distinct_rows)


def test_no_work_elided_for_repeated_rows(distinct_rows: Dataset) -> None:
    func = CountingCallable()

    exec_timed_test(distinct_rows, func, policy=TimingPolicy(min_time=0.0, repeats=5))

    assert func.calls == 5 * 10
    assert func.seen == list(distinct_rows) * 5


def test_doubling_follows_policy_formula(small_dataset: Dataset) -> None:
    func = CountingCallable()
    policy = TimingPolicy(min_time=1e9, repeats=1, max_repeats=8)

    result = exec_timed_test(small_dataset, func, policy=policy)

    # passes of 1, 2, 4 and 8 repeats
    assert func.calls == len(small_dataset) * (1 + 2 + 4 + 8)
    assert result.repeats == 8


def test_results_are_consumed(small_dataset: Dataset) -> None:
    result = exec_timed_test(small_dataset, lambda row: row.expected, policy=TimingPolicy(min_time=0.0, repeats=2))
    assert result.checksum == pytest.approx(2 * sum(row.expected for row in small_dataset))


def test_elapsed_is_non_negative_and_stable(distinct_rows: Dataset) -> None:
    def constant_work(row: DatasetRow) -> float:
        return float(sum(range(50)))

    policy = TimingPolicy(min_time=0.02)
    first = exec_timed_test(distinct_rows, constant_work, policy=policy)
    second = exec_timed_test(distinct_rows, constant_work, policy=policy)

    assert first.per_evaluation > 0.0
    assert second.per_evaluation > 0.0
    ratio = first.per_evaluation / second.per_evaluation
    assert 0.1 < ratio < 10.0


def test_time_execution_returns_float(small_dataset: Dataset) -> None:
    elapsed = time_execution(small_dataset, lambda row: 0.0, policy=TimingPolicy(min_time=0.0))
    assert isinstance(elapsed, float)
    assert elapsed >= 0.0


def test_failure_on_second_row_propagates() -> None:
    dataset = Dataset.from_rows([(0, 1.0, 0.84), (1, 2.0, 0.43)])

    def func(row: DatasetRow) -> float:
        if row.order == 1:
            raise ZeroDivisionError("boom")
        return row.expected

    with pytest.raises(TimingError) as excinfo:
        time_execution(dataset, func, policy=TimingPolicy(min_time=0.0))

    assert excinfo.value.index == 1
    assert excinfo.value.row == dataset[1]
    assert isinstance(excinfo.value.__cause__, ZeroDivisionError)
    assert excinfo.value.phase == "timing"


def test_empty_dataset_is_not_timed() -> None:
    func = CountingCallable()
    result = exec_timed_test(Dataset.from_rows([]), func)
    assert func.calls == 0
    assert result.elapsed == 0.0
    assert result.per_evaluation == 0.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_time": -1.0},
        {"min_time": float("nan")},
        {"min_time": float("inf")},
        {"repeats": 0},
        {"repeats": 4, "max_repeats": 2},
    ],
)
def test_invalid_policy_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        TimingPolicy(**kwargs)
