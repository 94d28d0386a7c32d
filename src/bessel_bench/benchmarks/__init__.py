"""Benchmark harness for the spherical Bessel function.

This package provides:
- loading of reference datasets,
- screening of datasets against an implementation,
- timed execution over the screened rows,
- the run driver reporting one record per implementation variant.
"""

from .dataset import load_dataset
from .runner import BenchmarkRun, run_benchmark, run_from_config
from .screening import screen_data
from .timing import TimingPolicy, exec_timed_test, time_execution

__all__ = [
    "BenchmarkRun",
    "TimingPolicy",
    "exec_timed_test",
    "load_dataset",
    "run_benchmark",
    "run_from_config",
    "screen_data",
    "time_execution",
]
