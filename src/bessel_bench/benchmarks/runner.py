"""Benchmark run: load, screen, then time and report each variant."""

from __future__ import annotations

import platform
from dataclasses import dataclass, field
from typing import Sequence

import structlog

from bessel_bench.core.errors import TimingError
from bessel_bench.core.models import Dataset, ReportRecord, ScreeningResult, TimingResult
from bessel_bench.reporting.sink import ReportSink, report_execution_time
from bessel_bench.shared.config import BenchConfig

from .dataset import load_dataset
from .screening import DEFAULT_TOLERANCE, screen_all
from .timing import TimingPolicy, exec_timed_test
from .variants import Variant, enabled_variants

FUNCTION_NAME = "sph_bessel"

logger = structlog.get_logger(__name__)


def group_label(interpreter: str | None = None, system: str | None = None) -> str:
    """`Library Comparison with <interpreter> on <platform>`."""

    if interpreter is None:
        interpreter = f"{platform.python_implementation()} {platform.python_version()}"
    if system is None:
        system = platform.system() or "unknown"
    return f"Library Comparison with {interpreter} on {system}"


def series_label(used: int, total: int, function: str = FUNCTION_NAME) -> str:
    return f"{function}[br]({used}/{total} tests selected)"


@dataclass(frozen=True, slots=True)
class VariantTiming:
    variant: Variant
    timing: TimingResult
    record: ReportRecord


@dataclass(slots=True)
class BenchmarkRun:
    group: str
    series: str
    screening: ScreeningResult
    timings: list[VariantTiming] = field(default_factory=list)


def run_benchmark(
    dataset: Dataset,
    variants: Sequence[Variant],
    sink: ReportSink,
    *,
    probes: Sequence[Variant] | None = None,
    policy: TimingPolicy | None = None,
    tolerance: float = DEFAULT_TOLERANCE,
    group: str | None = None,
) -> BenchmarkRun:
    """Screens `dataset` with `probes` (default: `variants`), then times and
    reports every variant over the rows that survived."""

    probes = variants if probes is None else probes
    screening = screen_all(dataset, [(probe.label, probe.evaluate) for probe in probes], tolerance=tolerance)

    run = BenchmarkRun(
        group=group or group_label(),
        series=series_label(screening.used, screening.total),
        screening=screening,
    )
    logger.info("benchmark-started", series=run.series, group=run.group, variants=[v.key for v in variants])

    for variant in variants:
        try:
            timing = exec_timed_test(screening.dataset, variant.evaluate, policy=policy)
        except TimingError as exc:
            exc.variant = variant.key
            raise
        record = report_execution_time(sink, timing.per_evaluation, run.group, run.series, variant.label)
        logger.info(
            "variant-timed",
            variant=variant.key,
            per_evaluation=timing.per_evaluation,
            repeats=timing.repeats,
            elapsed=timing.elapsed,
        )
        run.timings.append(VariantTiming(variant=variant, timing=timing, record=record))

    return run


def run_from_config(config: BenchConfig, sink: ReportSink, *, dataset: Dataset | None = None) -> BenchmarkRun:
    """Runs the benchmark described by `config`."""

    if dataset is None:
        dataset = load_dataset(config.dataset)
    return run_benchmark(
        dataset,
        enabled_variants(config),
        sink,
        policy=TimingPolicy(min_time=config.min_time),
        tolerance=config.tolerance,
        group=config.group,
    )
