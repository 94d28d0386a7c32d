"""Implementations of j_n(x) that can be benchmarked.

Each `Variant` wraps one way of evaluating the spherical Bessel function
of the first kind together with the label it is reported under.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from scipy import special

from bessel_bench.core.models import DatasetRow
from bessel_bench.shared.config import BenchConfig


@dataclass(frozen=True, slots=True)
class Variant:
    key: str
    label: str
    evaluate: Callable[[DatasetRow], float]

    def __call__(self, row: DatasetRow) -> float:
        return self.evaluate(row)


def sph_bessel(row: DatasetRow) -> float:
    return float(special.spherical_jn(int(row[0]), row[1]))


def sph_bessel_raising(row: DatasetRow) -> float:
    # SpecialFunctionError instead of a silent nan/inf; underflow to zero is fine
    with special.errstate(all="raise", underflow="ignore"):
        return float(special.spherical_jn(int(row[0]), row[1]))


def sph_bessel_from_jv(row: DatasetRow) -> float:
    """j_n(x) = sqrt(pi / 2x) * J_{n+1/2}(x); undefined at x <= 0."""

    order, x = int(row[0]), row[1]
    return math.sqrt(math.pi / (2.0 * x)) * float(special.jv(order + 0.5, x))


SCIPY = Variant(key="scipy", label="SciPy", evaluate=sph_bessel)
SCIPY_RAISE = Variant(
    key="scipy-raise",
    label="SciPy[br](special function errors raised)",
    evaluate=sph_bessel_raising,
)
SCIPY_JV = Variant(
    key="scipy-jv",
    label="SciPy jv[br](half-integer order)",
    evaluate=sph_bessel_from_jv,
)

ALL_VARIANTS: tuple[Variant, ...] = (SCIPY, SCIPY_RAISE, SCIPY_JV)


def enabled_variants(config: BenchConfig) -> list[Variant]:
    """Variants to run, in report order, for the given configuration."""

    variants = [SCIPY]
    if config.comparison_tables:
        return variants
    if config.policy_variant:
        variants.append(SCIPY_RAISE)
    if config.alternate:
        variants.append(SCIPY_JV)
    return variants
