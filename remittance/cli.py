"""Command-line entry point: receipts on disk in, remittance schedule out.

Usage:
    remittance-schedule receipts/*.pdf --mode standard --output-dir out/

Requirements:
    - OPENAI_API_KEY environment variable set for the OpenAI provider
"""

import argparse
import logging
import sys
from pathlib import Path

from remittance.export.factory import ExporterRegistry, create_exporter
from remittance.export.writer import WorkbookWriter
from remittance.extraction.factory import create_extraction_service
from remittance.pipeline.intake import document_from_path
from remittance.pipeline.orchestrator import ReceiptBatchProcessor
from remittance.shared.config import Settings, get_settings
from remittance.shared.errors import ExportPrecondition, ServiceUnavailable

logger = logging.getLogger(__name__)

_MARKERS = {"success": "✓", "warning": "!", "error": "✗"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remittance-schedule",
        description="Extract payment receipts and write a remittance schedule",
    )
    parser.add_argument("files", nargs="+", type=Path, help="Receipt files (PNG, JPEG, WebP, PDF)")
    parser.add_argument(
        "--mode",
        choices=ExporterRegistry.list_modes(),
        default="upload",
        help="Template: 'upload' for the portal, 'standard' for the attachment schedule",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the schedule (default: APP_OUTPUT_DIR or current directory)",
    )
    return parser


def run(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    """Run the CLI.

    Returns:
        Process exit code (0 on success)
    """
    args = build_parser().parse_args(argv)
    settings = settings or get_settings()

    missing = [path for path in args.files if not path.is_file()]
    if missing:
        for path in missing:
            print(f"File not found: {path}", file=sys.stderr)
        return 2

    processor = ReceiptBatchProcessor(settings, create_extraction_service(settings))
    documents = [document_from_path(path) for path in args.files]

    try:
        result = processor.process_batch(documents)
    except ServiceUnavailable as e:
        print(f"Cannot start batch: {e}", file=sys.stderr)
        return 1

    for diagnostic in result.diagnostics:
        print(f"{_MARKERS[diagnostic.level]} {diagnostic.text}")

    try:
        artifact = create_exporter(args.mode).export(result.ledger)
    except ExportPrecondition as e:
        print(f"Nothing exported: {e}", file=sys.stderr)
        return 1

    output_dir = args.output_dir or Path(settings.output_dir)
    path = WorkbookWriter().write(artifact, output_dir)
    print(f"Schedule written: {path} ({len(result.ledger)} receipts)")
    return 0


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    sys.exit(run(settings=settings))


if __name__ == "__main__":
    main()
