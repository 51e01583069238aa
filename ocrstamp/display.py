"""Display module for image renaming progress using rich."""

import threading
import time
from collections import deque
from pathlib import Path
from typing import List, Optional

from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.text import Text

from ocrstamp.models import RenamedImage, progress_percent


class OCRProgressDisplay:
    """Display progress for a renaming batch."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the display."""
        self.lock = threading.Lock()

        # State
        self.input_folder: Optional[str] = None
        self.current_file: Optional[str] = None
        self.processed = 0
        self.total_files = 0
        self.percent = 0
        self.status = "Waiting..."
        self.finished = False
        self.log: deque = deque(maxlen=100)

        # Results
        self.results: List[RenamedImage] = []

        # Timing
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

        # UI
        self.console = console or Console()
        self.live: Optional[Live] = None
        self.running = False
        self.display_thread: Optional[threading.Thread] = None
        self.activity_log_max_lines = 10

    def on_progress(self, done: int, total: int):
        """Progress hook for process_images."""
        with self.lock:
            if self.start_time is None:
                self.start_time = time.time()
            self.processed = done
            self.total_files = total
            self.percent = progress_percent(done, total)
            self.status = "Processing"

    def on_complete(self):
        """Completion hook for process_images."""
        with self.lock:
            self.finished = True
            self.status = "Finished"
            self.end_time = time.time()
        self.add_log("All images processed")

    def set_input_folder(self, folder: str):
        with self.lock:
            self.input_folder = folder
            self.start_time = time.time()
            self.status = "Scanning..."

    def add_log(self, message: str):
        """Add a message to the activity log."""
        with self.lock:
            self.log.append(f"[{time.strftime('%H:%M:%S')}] {message}")

    def add_result(self, result: RenamedImage):
        """Add a processed image to the results pane and the activity log."""
        name = Path(result.source).name
        with self.lock:
            self.current_file = name
            self.results.append(result)

        if result.skipped:
            self.add_log(f"{name}: no text recognized, skipped")
        elif not result.token:
            self.add_log(f"{name} → {result.destination.name} (no time found)")
        else:
            self.add_log(f"{name} → {result.destination.name}")

    def show_error(self, error_message: str):
        """Display an error message."""
        with self.lock:
            self.status = "Failed"
            self.end_time = time.time()
        self.add_log(f"ERROR: {error_message}")

    def _elapsed(self) -> Optional[str]:
        if self.start_time is None:
            return None
        end_time = self.end_time if self.end_time else time.time()
        elapsed = end_time - self.start_time

        if elapsed < 60:
            return f"{elapsed:.1f}s"
        if elapsed < 3600:
            return f"{int(elapsed // 60)}m {int(elapsed % 60)}s"
        return f"{int(elapsed // 3600)}h {int((elapsed % 3600) // 60)}m"

    def _get_status_pane_content(self) -> Panel:
        """Get content for status pane."""
        with self.lock:
            text = Text()
            text.append("Folder: ", style="dim")
            text.append(f"{self.input_folder or '-'}\n", style="bright_white")
            text.append("File: ", style="dim")
            text.append(f"{self.current_file or '-'}\n", style="bright_white")
            text.append("Images: ", style="dim")
            text.append(f"{self.processed}/{self.total_files}", style="bright_white")
            elapsed = self._elapsed()
            if elapsed:
                text.append("  Elapsed: ", style="dim")
                text.append(elapsed, style="bright_white")
            text.append("\n")
            text.append("Status: ", style="dim")
            text.append(self.status, style="green" if self.finished else "bright_white")

            bar = ProgressBar(total=100, completed=self.percent)
            percent = Text(f"{self.percent}%", style="bold")

            return Panel(
                Group(text, bar, percent),
                title="Status",
                border_style="green"
            )

    def _get_log_pane_content(self) -> Panel:
        """Get content for log pane."""
        with self.lock:
            text = Text()

            # Newest at top
            if self.log:
                for msg in reversed(list(self.log)[-self.activity_log_max_lines:]):
                    text.append(f"{msg}\n", style="dim")
            else:
                text.append("No activity yet...\n", style="dim")

            return Panel(
                text,
                title="Activity Log",
                border_style="blue"
            )

    def _get_results_pane_content(self) -> Panel:
        """Get content for results pane."""
        with self.lock:
            text = Text()

            if self.results:
                for result in reversed(self.results):
                    if result.skipped:
                        text.append("✗ ", style="red")
                        text.append(f"{Path(result.source).name}", style="bright_white")
                        text.append("  (no text recognized)\n", style="dim")
                    else:
                        text.append("✓ " if result.token else "? ", style="green" if result.token else "yellow")
                        text.append(f"{Path(result.source).name}", style="bright_white")
                        text.append(f"  → {result.destination.name}\n", style="dim")
            else:
                text.append("No images renamed yet...\n", style="dim")

            return Panel(
                text,
                title="Renamed",
                border_style="cyan"
            )

    def _create_layout(self) -> Layout:
        """Create the layout."""
        layout = Layout()
        layout.split_column(
            Layout(self._get_status_pane_content(), size=8),
            Layout(self._get_log_pane_content(), size=12),
            Layout(self._get_results_pane_content())
        )
        return layout

    def start(self):
        """Start the display."""
        def run_display():
            try:
                self.console.clear()
                with Live(self._create_layout(), refresh_per_second=4, screen=False, console=self.console) as live:
                    self.live = live
                    while self.running:
                        live.update(self._create_layout())
                        time.sleep(0.25)
                    # Final frame so the finished state stays on screen
                    live.update(self._create_layout())
            except KeyboardInterrupt:
                self.running = False
            finally:
                self.running = False

        self.running = True
        self.display_thread = threading.Thread(target=run_display, daemon=True)
        self.display_thread.start()
        time.sleep(0.5)

    def stop(self):
        """Stop the display."""
        self.running = False
        if self.display_thread is not None:
            self.display_thread.join(timeout=2.0)
            self.display_thread = None
