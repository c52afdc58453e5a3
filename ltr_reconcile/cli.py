"""Console entry-point for ltr-reconcile."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from .errors import ReconcileError
from .filters import FilterConfig
from .parser import load_gff
from .pipeline import ReconcileResult, reconcile
from .render_svg import PALETTES, svg_group
from .serializer import write_gff
from .summary import write_filtered_summary, write_resolution_summary

logger = logging.getLogger("ltr_reconcile")


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Reconcile two LTR retrotransposon GFF3 sets called at different "
            "similarity thresholds into one non-redundant GFF3"
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("primary", help="Low-stringency (high recall) GFF3, e.g. LTRdigest 85%%")
    parser.add_argument("secondary", help="High-stringency (high precision) GFF3, e.g. LTRdigest 99%%")
    parser.add_argument("-o", "--output", help="Output GFF3 (default: stdout)")
    parser.add_argument(
        "--max-length",
        type=int,
        default=FilterConfig.max_length,
        help="Drop repeat regions at least this long (bp)",
    )
    parser.add_argument("--report", help="TSV with one row per resolved overlap group")
    parser.add_argument("--filtered", help="TSV with one row per region removed by the element filter")
    parser.add_argument("--svg-dir", help="Directory for per-group SVG postcards")
    parser.add_argument(
        "--palette",
        choices=sorted(PALETTES),
        default="classic",
        help="Color palette for SVG postcards",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log every filter and resolution decision")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    return parser.parse_args(argv)


def _configure_logging(args: argparse.Namespace) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[ltr-reconcile] %(levelname)s %(message)s"))
    logger.handlers[:] = [handler]
    logger.propagate = False
    if args.verbose:
        logger.setLevel(logging.DEBUG)
    elif args.quiet:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.INFO)


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(os.path.abspath(path))
    if parent:
        os.makedirs(parent, exist_ok=True)


def _slugify(text: str) -> str:
    slug = "".join(ch if ch.isalnum() or ch in "-." else "_" for ch in text)
    return slug.strip("_") or "group"


def _write_reports(result: ReconcileResult, args: argparse.Namespace) -> None:
    if args.report:
        _ensure_parent(args.report)
        with open(args.report, "w", encoding="utf-8") as handle:
            write_resolution_summary(result.resolutions, handle)
        logger.info("Resolution report written to %s", args.report)

    if args.filtered:
        _ensure_parent(args.filtered)
        with open(args.filtered, "w", encoding="utf-8") as handle:
            write_filtered_summary(result.filtered_primary + result.filtered_secondary, handle)
        logger.info("Filtered-region report written to %s", args.filtered)

    if args.svg_dir:
        os.makedirs(args.svg_dir, exist_ok=True)
        for resolution in result.resolutions:
            drawing = svg_group(resolution, palette=args.palette)
            drawing.saveas(os.path.join(args.svg_dir, f"{_slugify(str(resolution.query))}.svg"))
        logger.info("%d group postcards saved under %s", len(result.resolutions), args.svg_dir)


def run(args: argparse.Namespace) -> ReconcileResult:
    config = FilterConfig(max_length=args.max_length)

    logger.info("Reading elements from %s ...", args.primary)
    primary = load_gff(args.primary, label="primary")
    logger.info("Loaded %d repeat_region features", len(primary.region_keys))
    logger.info("Reading elements from %s ...", args.secondary)
    secondary = load_gff(args.secondary, label="secondary")
    logger.info("Loaded %d repeat_region features", len(secondary.region_keys))

    result = reconcile(primary, secondary, config)
    for line in result.merged.stats.diagnostic_lines():
        print(line, file=sys.stderr)

    if args.output:
        _ensure_parent(args.output)
        with open(args.output, "w", encoding="utf-8") as handle:
            count = write_gff(result.merged.features, primary.header, handle)
        logger.info("%d GFF3 lines written to %s", count, args.output)
    else:
        write_gff(result.merged.features, primary.header, sys.stdout)
        sys.stdout.flush()

    _write_reports(result, args)
    return result


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    _configure_logging(args)
    try:
        run(args)
    except ReconcileError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc
    logger.info("Done.")


if __name__ == "__main__":  # pragma: no cover
    main()
