"""Console logging for CHIP-8 hosts.

The machine core performs no I/O. Hosts report ROM loading, instruction
traces and fault dumps through ``ConsoleLogger``, and follow long headless
runs with ``build_progress_bar``.
"""

import time
import sys
from typing import Optional

from tqdm import tqdm

from chip8vm.errors import MachineFault

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_ANSI = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_ANSI_RESET = "\033[0m"


class ConsoleLogger:
    """Levelled console logger for emulator hosts.

    Lines look like ``[   0.42s][    INFO][chip8vm] message``. Colours are
    only emitted when stdout is a terminal.
    """

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        level = log_level.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")

        self.name = name
        self.threshold = LEVELS.index(level)
        self.use_colors = use_colors and sys.stdout.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def enabled(self, level: str) -> bool:
        return LEVELS.index(level) >= self.threshold

    def _emit(self, level: str, message: str):
        if not self.enabled(level):
            return
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{_ANSI[level]}{tag}{_ANSI_RESET}"
        stamp = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        print(f"{stamp}{tag}[{self.name}] {message}", flush=True)

    def info(self, message: str):
        self._emit("INFO", message)

    def error(self, message: str):
        self._emit("ERROR", message)

    def trace(self, address: int, word: int, text: Optional[str]):
        """Log one instruction at DEBUG as ``0xAAA: WWWW  MNEMONIC``."""
        self._emit("DEBUG", f"0x{address:03X}: {word:04X}  {text or '???'}")

    def fault(self, fault: MachineFault):
        """Log a machine fault at CRITICAL followed by its register dump."""
        self._emit("CRITICAL", str(fault))
        for line in fault.snapshot.format().splitlines():
            self._emit("CRITICAL", f"  {line}")


def build_progress_bar(n: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """Build a tqdm progress bar counting emitted frames."""
    if desc is None:
        desc = f"Running ({n:,} frames)"

    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)

    return tqdm(total=n, desc=desc, unit="frame", **kwargs)
