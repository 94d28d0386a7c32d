"""Benchmark run configuration."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from pathlib import Path

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_path(name: str, default: Path | None) -> Path | None:
    raw = (os.getenv(name) or "").strip()
    return Path(raw) if raw else default


@dataclass(frozen=True, slots=True)
class BenchConfig:
    """Settings for one benchmark run.

    `dataset` of None means the reference table shipped with the package.
    The variant flags mirror the build-time switches of the classic
    performance tables: `comparison_tables` keeps only the plain library call
    so results from different interpreters line up.
    """

    report_file: Path
    dataset: Path | None = None
    min_time: float = 0.5
    tolerance: float = 1e-7
    policy_variant: bool = True
    alternate: bool = False
    comparison_tables: bool = False
    group: str | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.min_time) or self.min_time < 0:
            raise ValueError(f"min_time must be a finite number >= 0, got {self.min_time}")
        if not math.isfinite(self.tolerance) or not self.tolerance > 0:
            raise ValueError(f"tolerance must be a finite number > 0, got {self.tolerance}")

    @classmethod
    def default(cls) -> "BenchConfig":
        """Creates the default configuration."""

        return cls(report_file=Path("benchmark_reports") / "results.jsonl")

    @classmethod
    def from_env(cls) -> "BenchConfig":
        """Default configuration overridden by `BESSELBENCH_*` variables."""

        base = cls.default()
        return replace(
            base,
            report_file=_env_path("BESSELBENCH_REPORT_FILE", base.report_file) or base.report_file,
            dataset=_env_path("BESSELBENCH_DATASET", base.dataset),
            min_time=_env_float("BESSELBENCH_MIN_TIME", base.min_time),
            tolerance=_env_float("BESSELBENCH_TOLERANCE", base.tolerance),
            policy_variant=_env_flag("BESSELBENCH_POLICY_VARIANT", base.policy_variant),
            alternate=_env_flag("BESSELBENCH_ALTERNATE", base.alternate),
            comparison_tables=_env_flag("BESSELBENCH_COMPARISON_TABLES", base.comparison_tables),
        )

    def with_overrides(self, **changes: object) -> "BenchConfig":
        """Returns a copy with every non-None keyword applied."""

        effective = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **effective)
