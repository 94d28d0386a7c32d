"""Comparison tables built from accumulated timing records.

One table per group label (interpreter and platform). Rows are series
(function and selection count), columns are sources (implementations).
Each cell shows the time relative to the fastest cell in its row followed
by the absolute time per evaluation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from bessel_bench.core.models import ReportRecord

LINE_BREAK = "[br]"


@dataclass(slots=True)
class ComparisonTable:
    group: str
    series: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    cells: dict[tuple[str, str], float] = field(default_factory=dict)

    def set(self, series: str, source: str, value: float) -> None:
        if series not in self.series:
            self.series.append(series)
        if source not in self.sources:
            self.sources.append(source)
        self.cells[(series, source)] = value

    def best(self, series: str) -> float | None:
        values = [v for (s, _), v in self.cells.items() if s == series]
        return min(values) if values else None

    def relative(self, series: str, source: str) -> float | None:
        value = self.cells.get((series, source))
        best = self.best(series)
        if value is None or best is None:
            return None
        if best == 0.0:
            return 1.0 if value == 0.0 else None
        return value / best

    def to_dict(self) -> dict:
        rows = []
        for series in self.series:
            cells = {}
            for source in self.sources:
                value = self.cells.get((series, source))
                if value is not None:
                    cells[source] = {"seconds": value, "relative": self.relative(series, source)}
            rows.append({"series": series, "cells": cells})
        return {"group": self.group, "sources": list(self.sources), "rows": rows}

    def to_markdown(self) -> str:
        def text(label: str) -> str:
            return label.replace(LINE_BREAK, "<br>").replace("|", "\\|")

        lines = [f"## {text(self.group)}", ""]
        lines.append("| Function | " + " | ".join(text(s) for s in self.sources) + " |")
        lines.append("|---|" + "---|" * len(self.sources))
        for series in self.series:
            cells = []
            for source in self.sources:
                value = self.cells.get((series, source))
                if value is None:
                    cells.append("")
                    continue
                ratio = self.relative(series, source)
                prefix = f"{ratio:.2f}" if ratio is not None else "-"
                cells.append(f"{prefix} ({value:.3e}s)")
            lines.append(f"| {text(series)} | " + " | ".join(cells) + " |")
        lines.append("")
        return "\n".join(lines)


def build_comparison_tables(records: Iterable[ReportRecord]) -> list[ComparisonTable]:
    """Groups records into tables; a later record for the same cell wins."""

    tables: dict[str, ComparisonTable] = {}
    for record in records:
        table = tables.get(record.group)
        if table is None:
            table = tables[record.group] = ComparisonTable(group=record.group)
        table.set(record.series, record.source, record.value)
    return list(tables.values())


def tables_to_markdown(tables: Iterable[ComparisonTable]) -> str:
    parts = ["# Performance Comparison", ""]
    parts.extend(table.to_markdown() for table in tables)
    return "\n".join(parts).rstrip() + "\n"


def write_tables(
    tables: list[ComparisonTable],
    *,
    output_dir: Path,
    stem: str = "comparison",
    formats: tuple[str, ...] = ("json", "md"),
) -> list[Path]:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    if "json" in formats:
        path = output_dir / f"{stem}.json"
        payload = {"tables": [table.to_dict() for table in tables]}
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        written.append(path)

    if "md" in formats:
        path = output_dir / f"{stem}.md"
        path.write_text(tables_to_markdown(tables), encoding="utf-8")
        written.append(path)

    return written
