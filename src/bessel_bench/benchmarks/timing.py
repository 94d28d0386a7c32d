"""Timed execution of a callable over a dataset."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable

import structlog

from bessel_bench.core.errors import TimingError
from bessel_bench.core.models import Dataset, DatasetRow, TimingResult

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TimingPolicy:
    """Repetition policy for `exec_timed_test`.

    Each attempt runs `repeats` full passes over the dataset. While an
    attempt takes less than `min_time` seconds the repeat count doubles,
    up to `max_repeats`. The last attempt is the measurement.
    """

    min_time: float = 0.5
    repeats: int = 1
    max_repeats: int = 2**20

    def __post_init__(self) -> None:
        if not math.isfinite(self.min_time) or self.min_time < 0:
            raise ValueError("min_time must be a finite number >= 0")
        if self.repeats < 1:
            raise ValueError("repeats must be >= 1")
        if self.max_repeats < self.repeats:
            raise ValueError("max_repeats must be >= repeats")


def _timed_pass(dataset: Dataset, func: Callable[[DatasetRow], float], repeats: int) -> tuple[float, float]:
    checksum = 0.0
    start = time.perf_counter()
    for _ in range(repeats):
        for index, row in enumerate(dataset):
            try:
                checksum += func(row)
            except Exception as exc:
                raise TimingError(
                    f"evaluation failed on row {index} {tuple(row)}: {type(exc).__name__}: {exc}",
                    index=index,
                    row=row,
                ) from exc
    elapsed = time.perf_counter() - start
    return max(elapsed, 0.0), checksum


def exec_timed_test(
    dataset: Dataset,
    func: Callable[[DatasetRow], float],
    *,
    policy: TimingPolicy | None = None,
) -> TimingResult:
    """Times `func` over every row of `dataset`.

    Every result is added to a checksum so each call is observed. Any
    exception raised by `func` aborts the measurement with `TimingError`.
    """

    policy = policy or TimingPolicy()
    if not dataset:
        return TimingResult(elapsed=0.0, rows=0, repeats=0)

    repeats = policy.repeats
    while True:
        elapsed, checksum = _timed_pass(dataset, func, repeats)
        if elapsed >= policy.min_time or repeats * 2 > policy.max_repeats:
            break
        repeats *= 2

    result = TimingResult(elapsed=elapsed, rows=len(dataset), repeats=repeats, checksum=checksum)
    logger.debug(
        "timed-pass",
        rows=result.rows,
        repeats=result.repeats,
        elapsed=result.elapsed,
        per_evaluation=result.per_evaluation,
    )
    return result


def time_execution(
    dataset: Dataset,
    func: Callable[[DatasetRow], float],
    *,
    policy: TimingPolicy | None = None,
) -> float:
    """Elapsed seconds of the measured pass; see `exec_timed_test`."""

    return exec_timed_test(dataset, func, policy=policy).elapsed
