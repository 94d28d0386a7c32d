"""Screening of reference data against an implementation under test.

Rows the implementation cannot evaluate, or evaluates to something other
than the reference value, are removed before timing. Screening checks
applicability, not accuracy: the tolerance is deliberately loose.
"""

from __future__ import annotations

import math
import sys
from typing import Callable, Iterable

import numpy as np
import structlog

from bessel_bench.core.models import Dataset, DatasetRow, ScreeningResult

DEFAULT_TOLERANCE = 1e-7

Probe = Callable[[DatasetRow], float]
Reference = Callable[[DatasetRow], float]

logger = structlog.get_logger(__name__)


def expected_value(row: DatasetRow) -> float:
    return row.expected


def relative_difference(a: float, b: float) -> float:
    """Relative difference of two doubles.

    Magnitudes below the smallest normal double are treated as that value,
    so two results that both underflow compare equal.
    """

    if math.isnan(a) or math.isnan(b):
        return math.nan
    if math.isinf(a) or math.isinf(b):
        return 0.0 if a == b else sys.float_info.max

    tiny = sys.float_info.min
    a_abs = max(abs(a), tiny)
    b_abs = max(abs(b), tiny)
    if a_abs == tiny and b_abs == tiny:
        return 0.0
    if (a < 0.0) != (b < 0.0):
        return sys.float_info.max
    return min(abs(a_abs - b_abs) / min(a_abs, b_abs), sys.float_info.max)


def _check_row(row: DatasetRow, probe: Probe, reference: Reference, tolerance: float) -> str | None:
    """Returns the rejection reason, or None when the row is usable."""

    try:
        computed = float(probe(row))
    except Exception as exc:  # domain/range failures are expected here
        return f"error: {type(exc).__name__}: {exc}"

    try:
        expected = float(reference(row))
    except Exception as exc:
        return f"no reference value: {type(exc).__name__}: {exc}"

    if not np.isfinite(computed) and np.isfinite(expected):
        return f"non-finite result {computed!r}"

    err = relative_difference(computed, expected)
    if math.isnan(err) or err > tolerance:
        return f"erroneous result {computed!r} (expected {expected!r}, relative error {err:.3g})"
    return None


def screen_data(
    dataset: Dataset,
    probe: Probe,
    reference: Reference = expected_value,
    *,
    tolerance: float = DEFAULT_TOLERANCE,
    label: str | None = None,
) -> ScreeningResult:
    """Keeps the rows `probe` evaluates to within `tolerance` of the reference.

    Never raises because of a row: exceptions from the probe reject the row.
    """

    kept: list[DatasetRow] = []
    rejected: list[tuple[DatasetRow, str]] = []

    for row in dataset:
        reason = _check_row(row, probe, reference, tolerance)
        if reason is None:
            kept.append(row)
        else:
            rejected.append((row, reason))
            logger.debug("row-rejected", probe=label, order=row.order, x=row.x, reason=reason)

    result = ScreeningResult(dataset=dataset.derive(kept), total=len(dataset), rejected=tuple(rejected))
    logger.info(
        "screening-complete",
        probe=label,
        total=result.total,
        used=result.used,
        rejected=len(result.rejected),
    )
    return result


def screen_all(
    dataset: Dataset,
    probes: Iterable[tuple[str, Probe]],
    reference: Reference = expected_value,
    *,
    tolerance: float = DEFAULT_TOLERANCE,
) -> ScreeningResult:
    """Screens with every probe in turn; `total` stays the original size."""

    current = dataset
    rejected: list[tuple[DatasetRow, str]] = []
    for label, probe in probes:
        step = screen_data(current, probe, reference, tolerance=tolerance, label=label)
        current = step.dataset
        rejected.extend((row, f"{label}: {reason}") for row, reason in step.rejected)

    return ScreeningResult(dataset=current, total=len(dataset), rejected=tuple(rejected))
