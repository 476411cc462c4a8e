"""Command line entry point for batch label analysis.

Usage examples:

- Analyze an annotation file with defaults from ``config/analysis.yaml``:
    python -m histomorph analyze sections.yaml --out results.csv

- Override calibration and compute MAR / BFR for a 7 day label interval:
    python -m histomorph analyze sections.yaml --out results.csv \
        --scale 0.645 --interval-days 7

- Also write one overlay per perimeter:
    python -m histomorph analyze sections.yaml --out results.csv --plot-dir plots/

A bare annotation path is treated as ``analyze``.
"""

from __future__ import annotations

import argparse
import re
import sys

from histomorph.analysis.engine import run_batch
from histomorph.config.validation import ensure_positive
from histomorph.debug_utils import debug_print, enable_logging
from histomorph.io.annotations import load_annotation_file
from histomorph.io.report import ReportSink
from histomorph.path_config import get_analysis_settings, get_dir


def _safe_filename(text: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", text).strip("_") or "unit"


def _positive_float(text: str) -> float:
    try:
        return ensure_positive(text, name="value")
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {text!r}") from exc


def _write_plots(analyzed, plot_dir: str) -> int:
    from histomorph.plotting import save_perimeter_plot

    for unit, result in analyzed:
        surface = unit.surface.value if unit.surface is not None else ""
        stem = _safe_filename(f"{unit.name}_{surface}" if surface else unit.name)
        save_perimeter_plot(
            f"{plot_dir}/{stem}.png",
            unit.perimeter,
            result.labels,
            title=f"{unit.name} {surface}".strip(),
        )
    return len(analyzed)


def _cmd_analyze(args: argparse.Namespace) -> None:
    settings = get_analysis_settings()
    scale = args.scale if args.scale is not None else settings.um_per_pixel
    interval = args.interval_days if args.interval_days is not None else settings.interval_days
    workers = args.workers if args.workers is not None else settings.max_workers
    debug_print("Effective settings:", settings, "scale:", scale, "interval:", interval)

    doc = load_annotation_file(
        args.annotations,
        perimeter_points=settings.perimeter_points,
        line_points=settings.line_points,
    )

    sink = ReportSink()
    for rejected in doc.rejected:
        sink.append(
            {
                "name": rejected.name,
                "surface": rejected.surface.value if rejected.surface is not None else "",
                "error": rejected.reason,
            }
        )
    summary = run_batch(
        doc.perimeters,
        doc.thickness,
        sink=sink,
        scale=scale,
        step=settings.thickness_step,
        margin=settings.thickness_margin,
        max_workers=workers,
        interval_days=interval,
    )

    out = args.out if args.out is not None else str(get_dir("results") / "histomorph_results.csv")
    written = sink.write(out)

    failed = summary.failed + len(doc.rejected)
    total = summary.completed + failed
    print(f"Analyzed {total} units ({failed} failed); wrote {written}")

    if args.plot_dir:
        count = _write_plots(summary.perimeters, args.plot_dir)
        print(f"Wrote {count} perimeter plot(s) to {args.plot_dir}")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Dynamic histomorphometry from label annotations.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log progress at INFO level")
    subparsers = ap.add_subparsers(dest="command")

    analyze = subparsers.add_parser(
        "analyze",
        help="Label perimeters, measure interlabel thickness and write a results table.",
    )
    analyze.add_argument("annotations", help="YAML/JSON annotation file")
    analyze.add_argument(
        "--out",
        default=None,
        help="Results table (.csv, .tsv or .json); defaults to the configured results directory",
    )
    analyze.add_argument("--scale", type=_positive_float, default=None, help="Physical length per pixel (e.g. um/px)")
    analyze.add_argument(
        "--interval-days",
        type=_positive_float,
        default=None,
        help="Days between label injections; adds MS/BS, MAR and BFR/BS columns",
    )
    analyze.add_argument("--workers", type=int, default=None, help="Worker threads for the batch")
    analyze.add_argument("--plot-dir", default=None, help="Directory for perimeter overlay PNGs")
    analyze.set_defaults(func=_cmd_analyze)

    return ap


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    ap = _build_parser()

    first = next((a for a in argv if a not in {"-v", "--verbose"}), None)
    if first is not None and first not in {"analyze", "-h", "--help"}:
        pos = argv.index(first)
        argv = argv[:pos] + ["analyze"] + argv[pos:]

    args = ap.parse_args(argv)
    enable_logging("INFO" if args.verbose else None)

    handler = getattr(args, "func", None)
    if handler is None:
        ap.print_help()
        return

    handler(args)


if __name__ == "__main__":  # pragma: no cover
    main()
