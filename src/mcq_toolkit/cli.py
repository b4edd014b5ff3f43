"""
Command-line entry point: ``mcq-extract``.

Extracts multiple-choice questions from PDF files (or folders of PDFs)
and appends one JSON line per document to an output file.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from mcq_toolkit import __version__
from mcq_toolkit.extractor.batch import DocumentOutcome, process_documents
from mcq_toolkit.extractor.config import ExtractionConfig
from mcq_toolkit.extractor.diagnostics import DiagnosticsCollector

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcq-extract",
        description="Extract multiple-choice questions and answer keys from PDF documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s quiz.pdf
  %(prog)s quizzes/ --output questions.jsonl --workers 8
  %(prog)s scan.pdf --lang fra --render-scale 5 --diagnostics report.json
        """,
    )
    parser.add_argument("paths", nargs="+", type=Path, help="PDF files or folders of PDFs")
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("questions.jsonl"),
        help="JSONL file to append results to (default: questions.jsonl)",
    )
    parser.add_argument("-w", "--workers", type=int, default=4, help="Documents processed in parallel (default: 4)")
    parser.add_argument("--lang", default="eng", help="Tesseract language code for OCR (default: eng)")
    parser.add_argument("--render-scale", type=float, default=None, help="OCR rendering scale (default: 4.5)")
    parser.add_argument("--no-ocr", action="store_true", help="Use the text layer only")
    parser.add_argument("--diagnostics", type=Path, default=None, help="Write a diagnostics report (JSON)")
    parser.add_argument("--timings", type=Path, default=None, help="Merge per-document timings into a JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _config_from_args(args: argparse.Namespace) -> ExtractionConfig:
    options = {"ocr_language": args.lang, "enable_ocr_fallback": not args.no_ocr}
    if args.render_scale is not None:
        options["render_scale"] = args.render_scale
    return ExtractionConfig.from_mapping(options)


def _print_outcome(outcome: DocumentOutcome) -> None:
    print(outcome.describe())


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        config = _config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    missing = [p for p in args.paths if not p.exists()]
    if missing:
        logger.warning(f"Skipping missing paths: {', '.join(str(p) for p in missing)}")
    paths = [p for p in args.paths if p.exists()]

    collector = DiagnosticsCollector() if args.diagnostics else None
    try:
        result = process_documents(
            paths,
            config,
            max_workers=args.workers,
            output_path=args.output,
            collector=collector,
            timings_path=args.timings,
            on_outcome=_print_outcome,
        )
    except ValueError as e:
        parser.error(str(e))

    if collector is not None:
        collector.generate_report().save(args.diagnostics)

    print(result.summary())
    if result.question_count:
        print(f"Questions written to {args.output}: {result.question_count}")

    if missing or result.fatal:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
