"""Console logging utilities for vipchip sessions.

This module provides a small level-filtered console logger, a session logger
used by the scheduler, the hook that traced instruction code reports through,
and a tqdm progress bar for headless runs.
"""

import sys
import time
from typing import Any, Dict, Optional

from tqdm import tqdm


class ConsoleLogger:
    """Flexible console logger with levels, colors and timestamps."""

    def __init__(
        self,
        name: str = "vipchip",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def set_level(self, log_level: str):
        """Change the minimum level that gets printed."""
        log_level = log_level.upper()
        if log_level not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order)}"
            )
        self.log_level = log_level

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger for emulation sessions with start/end summaries."""

    def log_session_start(self, config: Dict[str, Any]):
        """Log session configuration."""
        self.info("=" * 60)
        self.info("Starting session with configuration:")
        for key, value in config.items():
            if isinstance(value, tuple):
                self.info(f"  {key}: #" + "".join(f"{c:02X}" for c in value))
            else:
                self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_run_state(self, previous, current):
        """Log a pause/resume/quit transition."""
        if previous == current:
            return
        self.info(f"<<<<< {current.name} >>>>>")

    def log_fault(self, fault, pc: int):
        """Log a fatal fault with the offending address."""
        self.critical(f"FATAL: {fault.description} at PC 0x{pc:03X}")

    def log_session_end(self, ticks: int, instructions: int):
        """Log session totals."""
        elapsed = time.time() - self.start_time
        self.info(
            f"Session ended after {ticks} ticks, {instructions} instructions "
            f"({elapsed:.1f}s)"
        )


_logger = EmulatorLogger()


def get_logger() -> EmulatorLogger:
    """Return the shared package logger."""
    return _logger


def set_log_level(log_level: str):
    """Set the level of the shared package logger."""
    _logger.set_level(log_level)


def report_unknown_opcode(opcode, pc):
    """Host-side hook called from traced code via ``jax.debug.callback``."""
    _logger.warning(f"Unknown opcode 0x{int(opcode):04X} at PC 0x{int(pc):03X}, skipped")


def build_tqdm_progress_bar(n: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """Build a tqdm progress bar counting scheduler ticks."""
    if desc is None:
        desc = f"Emulating ({n:,} ticks)"

    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)

    return tqdm(total=n, desc=desc, unit="tick", **kwargs)
