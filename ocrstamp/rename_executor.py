"""Output folder handling, file copying and the rename summary."""

import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional, Union

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ocrstamp.errors import FileAccessError
from ocrstamp.models import RenamedImage

logger = logging.getLogger(__name__)

OUTPUT_FOLDER_NAME = "Fotos Renomeadas"


def ensure_output_folder(input_folder: Union[str, Path], name: str = OUTPUT_FOLDER_NAME) -> Path:
    """
    Create the output folder inside the input folder if it does not exist yet.

    Returns:
        Path to the output folder

    Raises:
        FileAccessError: If the folder cannot be created
    """
    output_folder = Path(input_folder) / name
    if not output_folder.is_dir():
        try:
            os.makedirs(output_folder, mode=0o755, exist_ok=True)
        except OSError as e:
            raise FileAccessError(f"Cannot create output folder {output_folder}: {e}") from e
        logger.info(f"Created output folder {output_folder}")
    return output_folder


def copy_image(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Copy an image byte for byte, replacing any existing file at the destination.

    The source file is left untouched.

    Raises:
        FileAccessError: If the source cannot be read or the destination written
    """
    source = Path(source)
    destination = Path(destination)
    try:
        shutil.copyfile(source, destination)
    except OSError as e:
        raise FileAccessError(f"Cannot copy {source} to {destination}: {e}") from e
    logger.debug(f"Copied {source} -> {destination}")
    return destination


def display_rename_summary(
    results: List[RenamedImage],
    input_folder: Union[str, Path],
    console: Optional[Console] = None
):
    """Display the renamed images using rich console formatting."""
    console = console or Console()
    input_folder = Path(input_folder)
    renamed_count = sum(1 for result in results if not result.skipped)
    total_count = len(results)

    console.print()
    console.print(Panel(
        f"[bold cyan]{input_folder}[/bold cyan]\n"
        f"[green]{renamed_count}[/green] of [yellow]{total_count}[/yellow] images renamed",
        title="[bold]Rename Summary[/bold]",
        border_style="cyan"
    ))
    console.print()

    if not results:
        console.print("[yellow]No images found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan", border_style="dim")
    table.add_column("Original Image", style="yellow", overflow="fold")
    table.add_column("New Filename", style="green", overflow="fold")

    for result in results:
        try:
            original = str(result.source.relative_to(input_folder))
        except ValueError:
            original = str(result.source)

        if result.skipped:
            table.add_row(original, "[red][No text recognized][/red]")
        elif not result.token:
            table.add_row(original, f"[yellow]{result.destination.name} (no time found)[/yellow]")
        else:
            table.add_row(original, result.destination.name)

    console.print(table)
    console.print()
