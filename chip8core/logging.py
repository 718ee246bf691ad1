"""Console logging utilities for chip8core machines.

This module provides a small logging system with callbacks, giving hosts
visibility into machine events (loads, unknown opcodes, tones and faults)
without the core itself doing any I/O.
"""

import time
import sys
from typing import Any, Dict, List, Optional

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ANSI_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
ANSI_RESET = "\033[0m"


class ConsoleLogger:
    """Console logger with level filtering, elapsed-time stamps and optional colors.

    Colors are only emitted when stdout is a terminal.
    """

    def __init__(
        self,
        name: str = "chip8core",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        if self.log_level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")

        self.use_colors = use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def _should_log(self, level: str) -> bool:
        return LEVELS.index(level) >= LEVELS.index(self.log_level)

    def _format_message(self, level: str, message: str) -> str:
        prefix = f"[{level:>8s}]"
        if self.use_colors:
            prefix = f"{ANSI_COLORS[level]}{prefix}{ANSI_RESET}"
        if self.show_timestamps:
            prefix = f"[{time.time() - self.start_time:8.2f}s]{prefix}"
        return f"{prefix}[{self.name}] {message}"

    def log(self, level: str, message: str):
        """Print ``message`` if ``level`` is at or above the logger's level."""
        level = level.upper()
        if self._should_log(level):
            print(self._format_message(level, message), flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class MachineCallback:
    """Base class for machine event callbacks."""

    def on_reset(self):
        """Called after the machine state is rebuilt."""
        pass

    def on_load(self, size: int):
        """Called after a program image is copied into memory."""
        pass

    def on_step(self, state: Any):
        """Called after every step that was not already halted."""
        pass

    def on_unknown_opcode(self, error):
        """Called when a step skipped an unknown instruction."""
        pass

    def on_tone(self):
        """Called when the sound timer ticks through 1."""
        pass

    def on_fault(self, error):
        """Called when a step faults and halts the machine."""
        pass


class ConsoleCallback(MachineCallback):
    """Console logging callback."""

    def __init__(self, logger: Optional[ConsoleLogger] = None):
        self.logger = logger or ConsoleLogger()

    def on_reset(self):
        self.logger.debug("Machine reset")

    def on_load(self, size: int):
        self.logger.info(f"Loaded {size} bytes at 0x200")

    def on_unknown_opcode(self, error):
        self.logger.warning(f"Unknown opcode: 0x{error.opcode:04X} at 0x{error.address:03X}")

    def on_tone(self):
        self.logger.debug("Tone")

    def on_fault(self, error):
        self.logger.error(f"Machine halted: {error}")


class StatsCallback(MachineCallback):
    """Callback counting machine events."""

    def __init__(self):
        self.counts = {"steps": 0, "unknown_opcodes": 0, "tones": 0, "faults": 0}
        self.unknown_opcodes: List[int] = []

    def on_reset(self):
        for key in self.counts:
            self.counts[key] = 0
        self.unknown_opcodes.clear()

    def on_step(self, state: Any):
        self.counts["steps"] += 1

    def on_unknown_opcode(self, error):
        self.counts["unknown_opcodes"] += 1
        self.unknown_opcodes.append(error.opcode)

    def on_tone(self):
        self.counts["tones"] += 1

    def on_fault(self, error):
        self.counts["faults"] += 1

    def get_statistics(self) -> Dict[str, Any]:
        """Get event counts, plus the distinct unknown opcodes seen."""
        stats: Dict[str, Any] = dict(self.counts)
        stats["distinct_unknown_opcodes"] = sorted(set(self.unknown_opcodes))
        return stats
