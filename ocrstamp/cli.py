#!/usr/bin/env python3
"""Command-line interface for the OCR timestamp renamer."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from ocrstamp.config import DEFAULT_ENDPOINT, OcrConfig, resolve_api_key
from ocrstamp.display import OCRProgressDisplay
from ocrstamp.errors import OcrStampError
from ocrstamp.models import RenamedImage, progress_percent
from ocrstamp.ocr_space_client import OCRSpaceClient
from ocrstamp.processor import IMAGE_EXTENSION, process_images
from ocrstamp.rename_executor import OUTPUT_FOLDER_NAME, display_rename_summary

logger = logging.getLogger(__name__)

LOG_FORMAT = "{asctime} - {levelname} - {name} - {message}"


def _configure_logging(log_file: Optional[str]):
    """Route package logs to a file, or silence them so they don't interfere with rich display."""
    package_logger = logging.getLogger('ocrstamp')
    package_logger.propagate = False

    if log_file:
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT, style="{", datefmt="%Y-%m-%d %H:%M:%S"))
        package_logger.setLevel(logging.DEBUG)
        package_logger.handlers = [handler]
    else:
        package_logger.setLevel(logging.CRITICAL)
        package_logger.handlers = [logging.NullHandler()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ocrstamp",
        description="Rename photos by the HH:MM:SS time printed on them, using OCR.space",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Renamed copies are written to "<input>/{OUTPUT_FOLDER_NAME}"; the originals are not modified.

Examples:
  # API key from the environment:
  OCR_SPACE_API_KEY=... ocrstamp --input ~/photos/site-visit/

  # English text, engine 1, log to a file:
  ocrstamp --input ~/photos/ --api-key KEY --language eng --engine 1 --log-file ocrstamp.log
        """
    )

    # Required arguments
    parser.add_argument("--input", type=str, required=True, help="Folder containing the images (searched recursively)")

    # OCR settings
    parser.add_argument("--api-key", type=str, default=None, help="OCR.space API key (default: OCR_SPACE_API_KEY environment variable)")
    parser.add_argument("--language", type=str, default="pol", help="OCR language code (default: pol)")
    parser.add_argument("--engine", type=str, default="2", choices=["1", "2", "3"], help="OCR.space engine (default: 2)")
    parser.add_argument("--overlay", action="store_true", help="Request word positions along with the text")
    parser.add_argument("--endpoint", type=str, default=DEFAULT_ENDPOINT, help=f"OCR API URL (default: {DEFAULT_ENDPOINT})")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (default: none)")

    # Processing
    parser.add_argument("--extension", type=str, default=IMAGE_EXTENSION, help=f"Case-sensitive image extension (default: {IMAGE_EXTENSION})")

    # Output
    parser.add_argument("--log-file", type=str, default=None, help="Write logs to this file")
    parser.add_argument("--no-display", action="store_true", help="Print plain progress instead of the live display")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    _configure_logging(args.log_file)

    console = Console(stderr=True)

    try:
        api_key = resolve_api_key(args.api_key)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    input_folder = Path(args.input).expanduser()
    if not input_folder.is_dir():
        console.print(f"[red]Error:[/red] Input folder not found: {input_folder}")
        return 1

    config = OcrConfig(
        api_key=api_key,
        language=args.language,
        engine=args.engine,
        overlay=args.overlay,
        endpoint=args.endpoint,
        timeout=args.timeout,
    )
    client = OCRSpaceClient(config)

    display = None
    if not args.no_display:
        try:
            display = OCRProgressDisplay()
            display.set_input_folder(str(input_folder))
            display.start()
        except Exception as e:
            console.print(f"[red]ERROR:[/red] Failed to start display: {e}")
            console.print("[yellow]WARNING:[/yellow] Continuing without display")
            display = None

    if display:
        on_progress = display.on_progress
        on_complete = display.on_complete
        on_result = display.add_result
    else:
        def on_progress(done: int, total: int):
            console.print(f"[dim]{done}/{total}[/dim] {progress_percent(done, total)}%")

        def on_complete():
            console.print("[green]All images processed[/green]")

        def on_result(result: RenamedImage):
            if result.skipped:
                console.print(f"[red]✗[/red] {result.source.name} [dim](no text recognized)[/dim]")
            else:
                console.print(f"[green]✓[/green] {result.source.name} → {result.destination.name}")

    try:
        results = process_images(
            input_folder,
            client,
            on_progress=on_progress,
            on_complete=on_complete,
            on_result=on_result,
            extension=args.extension,
        )
    except OcrStampError as e:
        if display:
            display.show_error(str(e))
            display.stop()
        console.print(f"[red]Error:[/red] {e}")
        console.print("[yellow]Processing stopped; remaining images were not renamed.[/yellow]")
        return 1
    except KeyboardInterrupt:
        if display:
            display.stop()
        return 130

    if display:
        display.stop()

    display_rename_summary(results, input_folder)
    return 0


if __name__ == "__main__":
    sys.exit(main())
