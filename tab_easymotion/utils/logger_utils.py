# logger_utils.py - application log file, metrics and timing blocks

import os
import time
from datetime import datetime
from typing import Optional

from rich.console import Console

# Directory where log files are stored (created on first write)
LOG_DIR = "logs"

# Path to the default log file, can be overridden with Log.configure()
DEFAULT_LOG_PATH = os.path.join(LOG_DIR, "tab_easymotion.log")


class Log:
    """Lightweight logger for writing messages and tracking metrics."""

    STYLES = {
        "DEBUG": "dim",
        "INFO": "blue",
        "WARNING": "yellow",
        "ERROR": "red",
    }

    path = DEFAULT_LOG_PATH
    # echo to the console as well; off while a TUI owns the terminal
    echo = False
    _console = Console(stderr=True)

    @classmethod
    def configure(cls, path: Optional[str] = None, echo: Optional[bool] = None) -> None:
        if path is not None:
            cls.path = path
        if echo is not None:
            cls.echo = bool(echo)

    @classmethod
    def write(cls, msg: str, level: str = "INFO") -> None:
        """
        Append a message to the log file with a timestamp.
        Each entry is written as: [YYYY-MM-DD HH:MM:SS] LEVEL   | message
        """
        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{ts}] {level:<7} | {msg}"

        try:
            folder = os.path.dirname(cls.path)
            if folder:
                os.makedirs(folder, exist_ok=True)
            with open(cls.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError:
            # the log is best-effort; never take the session down with it
            pass

        if cls.echo:
            cls._console.print(line, style=cls.STYLES.get(level, ""), markup=False, highlight=False)

    # Public logging methods
    @classmethod
    def debug(cls, msg: str) -> None:
        cls.write(msg, "DEBUG")

    @classmethod
    def info(cls, msg: str) -> None:
        cls.write(msg, "INFO")

    @classmethod
    def warning(cls, msg: str) -> None:
        cls.write(msg, "WARNING")

    @classmethod
    def error(cls, msg: str) -> None:
        cls.write(msg, "ERROR")

    @classmethod
    def metric(cls, tag: str, value, unit: str = "") -> None:
        """
        Record a metric (timing, counts).
        Example: [12:45:02] prepare_entries: 0.004s
        """
        cls.write(f"{tag}: {value}{unit}", "METRIC")

    @staticmethod
    def time_block(label: str) -> "_Timer":
        """
        Measure execution time of a code block:
            with Log.time_block("prepare_entries"):
                do_some_work()
        """
        return _Timer(label)


class _Timer:
    """Context manager used internally to measure time for a code block."""

    def __init__(self, label: str):
        self.label = label
        self.start = time.perf_counter()
        self.elapsed = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start
        Log.metric(self.label, round(self.elapsed, 4), "s")
        return False
