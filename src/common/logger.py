import logging
import sys
import time

import colorlog
from rich.console import Console
from rich.markup import escape
from rich.table import Table


# Ensure UTF-8 encoding on Windows
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

console = Console(force_terminal=True, legacy_windows=False)

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class Logger:
    def __init__(self, level: str | int = logging.INFO):
        self.status = None
        self.start_time = None
        self.level = logging.INFO
        self.set_level(level)
        self._setup_standard_logging()

    def _setup_standard_logging(self):
        """Setup colorlog for standard Python logging integration"""
        if not logging.getLogger().handlers:
            handler = colorlog.StreamHandler()
            handler.setFormatter(
                colorlog.ColoredFormatter(
                    "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s: %(message)s",
                )
            )
            logging.basicConfig(level=self.level, handlers=[handler])

    def set_level(self, level: str | int):
        if isinstance(level, str):
            level = LEVELS.get(level.upper(), logging.INFO)
        self.level = level
        logging.getLogger().setLevel(level)

    def _format_message(self, text, elapsed=None, status=None):
        elapsed_str = f"{elapsed:>8}" if elapsed else ""
        if status == "success":
            text = f"[bold green]{text}[/]"
            elapsed_str = f"[bold green]{elapsed_str}[/]" if elapsed_str else ""
        elif status == "fail":
            text = f"[bold red]{text}[/]"
            elapsed_str = f"[bold red]{elapsed_str}[/]" if elapsed_str else ""
        else:
            text = f"[bold blue]{text}[/]"
            elapsed_str = f"[blue]{elapsed_str}[/]" if elapsed_str else ""
        return text, elapsed_str

    def _rich_log(self, text, elapsed=None, status=None):
        text, elapsed_str = self._format_message(text, elapsed, status)
        table = Table.grid(expand=True)
        table.add_column(justify="left", width=32, ratio=2, no_wrap=False)
        table.add_column(justify="right", width=12, ratio=1, no_wrap=True, highlight=True)
        table.add_row(text, elapsed_str)
        console.print(table)

    def _elapsed(self):
        if self.start_time is None:
            return None
        elapsed = f"{time.monotonic() - self.start_time:.2f}s"
        self.start_time = None
        return elapsed

    def _stop_status(self):
        if self.status:
            self.status.__exit__(None, None, None)
            self.status = None

    def start(self, text):
        self._stop_status()
        self.start_time = time.monotonic()
        self.status = console.status(escape(text))
        self.status.__enter__()

    def succeed(self, text):
        elapsed = self._elapsed()
        self._stop_status()
        self._rich_log(f"[bold green]✔[/] {escape(text)}", elapsed, "success")

    def fail(self, text):
        elapsed = self._elapsed()
        self._stop_status()
        self._rich_log(f"[bold red]✖[/] {escape(text)}", elapsed, "fail")

    def info(self, text):
        if self.level <= logging.INFO:
            self._rich_log(f"[bold blue]ℹ[/] {escape(text)}")

    def warning(self, text):
        if self.level <= logging.WARNING:
            self._rich_log(f"[bold yellow]⚠[/] {escape(text)}")

    def debug(self, text):
        if self.level <= logging.DEBUG:
            self._rich_log(f"[dim]🐛 {escape(text)}[/]")

    def error(self, text):
        """Alias for fail() method to maintain compatibility"""
        self.fail(text)

    def log(self, level, msg, *args, **kwargs):
        """stdlib-style entry point so tenacity's before_sleep_log/after_log can write here."""
        if isinstance(level, str):
            level = LEVELS.get(level.upper(), logging.INFO)
        text = msg % args if args else str(msg)
        if level >= logging.ERROR:
            self.error(text)
        elif level >= logging.WARNING:
            self.warning(text)
        elif level >= logging.INFO:
            self.info(text)
        else:
            self.debug(text)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.status:
            self.status.__exit__(exc_type, exc_val, exc_tb)
            self.status = None


# Create a single logger instance that can be imported throughout the codebase
logger = Logger()
