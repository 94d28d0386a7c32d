"""Loading of reference datasets (CSV or JSON).

The default dataset is the spherical Bessel reference table shipped in
`bessel_bench.data`. Rows are `(order, x, expected)`.
"""

from __future__ import annotations

import csv
import io
import json
import math
from importlib import resources
from pathlib import Path
from typing import Iterable, Iterator, Sequence

import structlog

from bessel_bench.core.errors import DatasetError
from bessel_bench.core.models import Dataset, DatasetRow

_DATA_PACKAGE = "bessel_bench.data"
_DEFAULT_FILE = "sph_bessel_data.csv"

_FIELDS = ("order", "x", "expected")

logger = structlog.get_logger(__name__)


def _parse_row(values: Sequence[object], *, where: str) -> DatasetRow:
    if len(values) != len(_FIELDS):
        raise DatasetError(f"{where}: expected {len(_FIELDS)} fields, got {len(values)}")
    try:
        order_value = float(values[0])  # type: ignore[arg-type]
        x = float(values[1])  # type: ignore[arg-type]
        expected = float(values[2])  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError) as exc:
        raise DatasetError(f"{where}: {exc}") from exc
    if not math.isfinite(order_value) or order_value != int(order_value):
        raise DatasetError(f"{where}: order must be an integer, got {values[0]!r}")
    return DatasetRow(int(order_value), x, expected)


def _csv_rows(handle: Iterable[str]) -> Iterator[DatasetRow]:
    reader = csv.reader(line for line in handle if not line.lstrip().startswith("#"))
    for line_no, values in enumerate(reader, start=1):
        cells = [cell.strip() for cell in values]
        if not any(cells):
            continue
        if tuple(cell.lower() for cell in cells) == _FIELDS:
            continue
        yield _parse_row(cells, where=f"row {line_no}")


def _json_rows(payload: object) -> Iterator[DatasetRow]:
    if not isinstance(payload, list):
        raise DatasetError("JSON dataset must be a list of rows")
    for index, item in enumerate(payload):
        where = f"item {index}"
        if isinstance(item, dict):
            try:
                values = [item[name] for name in _FIELDS]
            except KeyError as exc:
                raise DatasetError(f"{where}: missing field {exc.args[0]!r}") from exc
            yield _parse_row(values, where=where)
        elif isinstance(item, (list, tuple)):
            yield _parse_row(item, where=where)
        else:
            raise DatasetError(f"{where}: unsupported row type {type(item).__name__}")


def parse_dataset(text: str, *, fmt: str = "csv", name: str = "dataset", source: str | None = None) -> Dataset:
    """Parses dataset text in `csv` or `json` format."""

    if fmt == "csv":
        rows = list(_csv_rows(io.StringIO(text)))
    elif fmt == "json":
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DatasetError(f"invalid JSON dataset: {exc}") from exc
        rows = list(_json_rows(payload))
    else:
        raise DatasetError(f"unsupported dataset format: {fmt}")
    return Dataset(rows=tuple(rows), name=name, source=source)


def load_dataset(path: Path | None = None) -> Dataset:
    """Loads a dataset file, or the packaged reference table when `path` is None."""

    if path is None:
        try:
            text = resources.files(_DATA_PACKAGE).joinpath(_DEFAULT_FILE).read_text(encoding="utf-8")
        except OSError as exc:  # pragma: no cover - broken installation
            raise DatasetError(f"packaged dataset unavailable: {exc}") from exc
        dataset = parse_dataset(text, fmt="csv", name="sph_bessel", source=f"{_DATA_PACKAGE}/{_DEFAULT_FILE}")
    else:
        path = Path(path)
        fmt = "json" if path.suffix.lower() == ".json" else "csv"
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DatasetError(f"cannot read dataset {path}: {exc}") from exc
        dataset = parse_dataset(text, fmt=fmt, name=path.stem, source=str(path))

    if not dataset:
        raise DatasetError(f"dataset {dataset.source} contains no rows")

    logger.debug("dataset-loaded", source=dataset.source, rows=len(dataset))
    return dataset
