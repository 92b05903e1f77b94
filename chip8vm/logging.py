"""Console logging utilities for chip8vm.

A small leveled logger with optional colors, and a machine-specific subclass
with helpers for the events the CPU reports: resets, program loads, key waits
and faults.
"""

import time
import sys
from typing import Optional


class ConsoleLogger:
    """Flexible console logger with levels, colors and timestamps."""

    LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        if log_level.upper() not in self.LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {self.LEVELS}")

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
            else {k: "" for k in self.LEVELS + ["RESET"]}
        )

        self.level_order = {level: i for i, level in enumerate(self.LEVELS)}

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


class MachineLogger(ConsoleLogger):
    """Logger for CPU lifecycle events."""

    def __init__(self, name: str = "chip8vm", **kwargs):
        super().__init__(name, **kwargs)
        self.fault_count = 0

    def log_reset(self, instructions_per_tick: int, strict: bool):
        self.debug(f"Reset (instructions_per_tick={instructions_per_tick}, strict={strict})")

    def log_load(self, size: int, address: int):
        self.debug(f"Loaded {size} byte(s) at 0x{address:03X}")

    def log_key_wait(self, register: int, pc: int):
        self.debug(f"Waiting for key into V{register:X} (PC=0x{pc:03X})")

    def log_key_resume(self, key: int, register: int):
        self.debug(f"Key {key:X} stored in V{register:X}, resuming")

    def log_fault(self, error: Exception, pc: Optional[int] = None):
        self.fault_count += 1
        where = f" (PC=0x{pc:03X})" if pc is not None else ""
        self.error(f"Execution halted: {error}{where}")
