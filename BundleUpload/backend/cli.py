"""Command line entry point: build upload workbooks from text files.

Usage:
    bundle-upload export numbers.txt                 # ./UploadTemplate.xlsx
    bundle-upload export a.txt b.txt --output-dir out
    bundle-upload buckets numbers.txt
    bundle-upload serve --port 9000
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

from BundleUpload.backend.app.core.config import get_settings
from BundleUpload.backend.app.core.exporter import EmptyExportError, ExportError
from BundleUpload.backend.app.core.logging import configure_logging
from BundleUpload.backend.app.core.text_reader import read_text_file
from BundleUpload.backend.app.models.domain import RecordSummary
from BundleUpload.backend.app.services.upload_service import UploadService, UploadSession

logger = logging.getLogger(__name__)


def write_atomic(path: Path, content: bytes) -> None:
    """Write ``content`` next to ``path`` first so a failed write leaves nothing behind."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=".bundle-", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def format_summary(summary: RecordSummary) -> str:
    return (
        f"Total exported: {summary.total} entries\n"
        f"Valid: {summary.valid}\n"
        f"Duplicates (highlighted in yellow): {summary.duplicates}\n"
        f"Invalid (highlighted in red): {summary.invalid}\n"
        f"Total data: {summary.total_gb:g} GB ({summary.total_mb:g} MB)"
    )


def _output_path(source: Path, args: argparse.Namespace, filename: str, multiple: bool) -> Path:
    if args.output and not multiple:
        return Path(args.output)
    name = f"{source.stem}_{filename}" if multiple else filename
    return Path(args.output_dir) / name


def cmd_export(args: argparse.Namespace) -> int:
    settings = get_settings()
    service = UploadService()
    multiple = len(args.inputs) > 1
    if args.output and multiple:
        print("Error: --output only applies to a single input; use --output-dir", file=sys.stderr)
        return 2

    status = 0
    for raw_path in args.inputs:
        source = Path(raw_path)
        try:
            text = read_text_file(source)
        except OSError as exc:
            logger.error("Cannot read %s: %s", source, exc)
            print(f"[{source.name}] Unable to read input: {exc}", file=sys.stderr)
            status = 1
            continue

        session = UploadSession(service=service, filename=settings.export_filename)
        session.update_input(text)

        advisory = session.advisory()
        if advisory is not None:
            print(f"[{source.name}] {advisory.message}\n")

        target = _output_path(source, args, settings.export_filename, multiple)
        try:
            result = session.export(deliver=lambda res: write_atomic(target, res.content))
        except EmptyExportError as exc:
            print(f"[{source.name}] {exc}", file=sys.stderr)
            status = 1
            continue
        except (ExportError, OSError) as exc:
            logger.error("Export failed for %s: %s", source, exc)
            print(f"[{source.name}] Error exporting to Excel: {exc}", file=sys.stderr)
            status = 1
            continue

        print(f"[{source.name}] Excel file exported successfully to {target}\n")
        print(format_summary(result.summary))
    return status


def cmd_buckets(args: argparse.Namespace) -> int:
    service = UploadService()
    status = 0
    for raw_path in args.inputs:
        source = Path(raw_path)
        try:
            text = read_text_file(source)
        except OSError as exc:
            print(f"[{source.name}] Unable to read input: {exc}", file=sys.stderr)
            status = 1
            continue
        buckets = service.build_buckets(text)
        print(f"{source.name}")
        if not buckets:
            print("  (no lines)")
        for bucket in buckets:
            print(f"  {bucket.label:<12} {bucket.count:>6}")
    return status


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "BundleUpload.backend.app.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bundle-upload",
        description="Validate msisdn/data allocation lists and build bulk upload workbooks.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="Write an upload workbook for each input file")
    export.add_argument("inputs", nargs="+", help="Text files with '<msisdn> <allocation>GB' lines")
    export.add_argument("-o", "--output", default=None, help="Output path (single input only)")
    export.add_argument("--output-dir", default=".", help="Directory for generated workbooks (default: .)")
    export.set_defaults(func=cmd_export)

    buckets = sub.add_parser("buckets", help="Count lines per allocation size")
    buckets.add_argument("inputs", nargs="+")
    buckets.set_defaults(func=cmd_buckets)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=int(os.getenv("APP_PORT", "8000")))
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
