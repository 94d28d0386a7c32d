"""Command line interface for running benchmarks and rendering tables."""

from __future__ import annotations

import logging
import sys
from argparse import SUPPRESS, ArgumentParser, Namespace
from pathlib import Path

import structlog

from bessel_bench.benchmarks import run_from_config
from bessel_bench.core.errors import BenchmarkError
from bessel_bench.reporting import JsonLinesReportSink, build_comparison_tables, write_tables
from bessel_bench.shared import BenchConfig, configure_logging, write_error_report


def _logging_options(parser: ArgumentParser, *, default: object) -> None:
    parser.add_argument("--verbose", action="store_true", default=default, help="Show debug logs")
    parser.add_argument("--json-logs", action="store_true", default=default, help="Emit logs as JSON lines")


def _build_parser() -> ArgumentParser:
    # Logging flags are accepted before or after the subcommand.
    common = ArgumentParser(add_help=False)
    _logging_options(common, default=SUPPRESS)

    parser = ArgumentParser(
        prog="bessel-bench",
        description="Time spherical Bessel function implementations and tabulate the results.",
    )
    _logging_options(parser, default=False)
    commands = parser.add_subparsers(dest="command", required=True)

    run = commands.add_parser("run", parents=[common], help="Screen the dataset, time every variant and record the results")
    run.add_argument(
        "--dataset",
        type=Path,
        help="CSV or JSON file with order,x,expected rows (default: packaged reference table)",
    )
    run.add_argument(
        "--report",
        type=Path,
        help="JSON-lines file the records are appended to (default: benchmark_reports/results.jsonl)",
    )
    run.add_argument("--min-time", type=float, help="Minimum duration of a timed pass in seconds (default: 0.5)")
    run.add_argument("--tolerance", type=float, help="Relative tolerance used when screening rows (default: 1e-7)")
    run.add_argument("--group", type=str, help="Override the platform/interpreter group label")
    run.add_argument(
        "--alternate",
        action="store_true",
        default=None,
        help="Also time the half-integer order jv implementation",
    )
    run.add_argument(
        "--no-policy-variant",
        dest="policy_variant",
        action="store_false",
        default=None,
        help="Skip the variant evaluated with special function errors raised",
    )
    run.add_argument(
        "--comparison-tables",
        action="store_true",
        default=None,
        help="Only time the plain library call",
    )

    tables = commands.add_parser("tables", parents=[common], help="Render comparison tables from recorded results")
    tables.add_argument("--report", type=Path, help="JSON-lines results file (default: benchmark_reports/results.jsonl)")
    tables.add_argument(
        "--output-dir",
        type=Path,
        default=Path("benchmark_reports"),
        help="Directory for generated tables (default: benchmark_reports)",
    )
    tables.add_argument("--stem", type=str, default="comparison", help="Output filename stem (default: comparison)")
    tables.add_argument(
        "--format",
        action="append",
        dest="formats",
        choices=["json", "md"],
        help="Table format (can be provided multiple times). Default: json+md",
    )
    return parser


def _config_from_args(args: Namespace) -> BenchConfig:
    return BenchConfig.from_env().with_overrides(
        dataset=getattr(args, "dataset", None),
        report_file=getattr(args, "report", None),
        min_time=getattr(args, "min_time", None),
        tolerance=getattr(args, "tolerance", None),
        group=getattr(args, "group", None),
        alternate=getattr(args, "alternate", None),
        policy_variant=getattr(args, "policy_variant", None),
        comparison_tables=getattr(args, "comparison_tables", None),
    )


def _report_failure(exc: BaseException, *, phase: str, config: BenchConfig | None) -> None:
    logger = structlog.get_logger(__name__)
    logger.error("benchmark-failed", phase=phase, error=str(exc), error_type=type(exc).__name__)
    context = {"phase": phase}
    if config is not None:
        context["config"] = {
            "dataset": str(config.dataset) if config.dataset else None,
            "report_file": str(config.report_file),
            "min_time": config.min_time,
        }
    try:
        report = write_error_report(exc, where=f"bessel-bench {phase}", context=context)
    except OSError as report_exc:
        logger.warning("error-report-not-written", error=str(report_exc))
    else:
        logger.info("error-report-written", path=str(report.path))


def _run_benchmark(args: Namespace) -> int:
    logger = structlog.get_logger(__name__)
    try:
        config = _config_from_args(args)
    except ValueError as exc:
        _report_failure(exc, phase="config", config=None)
        return 1

    sink = JsonLinesReportSink(config.report_file)
    try:
        run = run_from_config(config, sink)
    except BenchmarkError as exc:
        _report_failure(exc, phase=exc.phase, config=config)
        return 1

    for result in run.timings:
        print(f"{result.variant.key}\t{result.timing.per_evaluation:.6e}")
    logger.info(
        "benchmark-complete",
        series=run.series,
        variants=len(run.timings),
        report=str(config.report_file),
    )
    return 0


def _render_tables(args: Namespace) -> int:
    try:
        config = _config_from_args(args)
    except ValueError as exc:
        _report_failure(exc, phase="config", config=None)
        return 1

    formats = tuple(args.formats) if args.formats else ("json", "md")
    try:
        records = JsonLinesReportSink(config.report_file).records()
        written = write_tables(
            build_comparison_tables(records),
            output_dir=args.output_dir,
            stem=args.stem,
            formats=formats,
        )
    except BenchmarkError as exc:
        _report_failure(exc, phase=exc.phase, config=config)
        return 1
    except OSError as exc:
        _report_failure(exc, phase="reporting", config=config)
        return 1

    for path in written:
        print(path)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO, json_output=args.json_logs)
    if args.command == "tables":
        return _render_tables(args)
    return _run_benchmark(args)


if __name__ == "__main__":
    sys.exit(main())
