"""Shared fixtures for the benchmark harness tests."""

from __future__ import annotations

import logging

import pytest
import structlog

from bessel_bench.core.models import Dataset, DatasetRow


@pytest.fixture
def small_dataset() -> Dataset:
    return Dataset.from_rows(
        [
            (0, 1.0, 0.8414709848078965),
            (1, 1.0, 0.30116867893975674),
            (2, 2.5, 0.2346438551463052),
            (5, 0.5, 2.977466875457442e-06),
        ],
        name="small",
    )


@pytest.fixture
def distinct_rows() -> Dataset:
    return Dataset.from_rows([DatasetRow(i, float(i) + 0.5, 0.0) for i in range(10)], name="distinct")


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
