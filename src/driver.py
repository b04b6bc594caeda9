"""Line driver: feeds lines through the beautifier and writes them out."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, TextIO

from src.beautifier import Beautifier
from src.styles import BOLD, Output

logger = logging.getLogger(__name__)

BANNER_RULE = "━" * 28 + "┫"


@dataclass
class DriverStats:
    lines: int = 0
    matched: int = 0
    passed_through: int = 0
    separators: int = 0


def format_duration(seconds: float) -> str:
    """Compact duration: ``7.2s``, ``1m5.0s``, ``1h2m3.0s``."""
    # whole tenths first, so 59.96 carries over to 1m0.0s
    tenths = round(seconds * 10)
    hours, rest = divmod(tenths, 36000)
    minutes, tenths = divmod(rest, 600)
    secs = tenths / 10
    if hours:
        return f"{hours}h{minutes}m{secs:.1f}s"
    if minutes:
        return f"{minutes}m{secs:.1f}s"
    return f"{secs:.1f}s"


def format_separator(output: Output, elapsed: float) -> str:
    """Blank line, bold "After <duration>" banner, blank line."""
    banner = output.render(f"{BANNER_RULE} After {format_duration(elapsed)}", BOLD)
    return f"\n{banner}\n\n"


class IdleTimer:
    """Tracks time between lines; reports gaps longer than *threshold*.

    A threshold of zero or less disables gap reporting.
    """

    def __init__(self, threshold: float, clock: Callable[[], float] = time.monotonic):
        self._threshold = threshold
        self._clock = clock
        self._last: float | None = None

    def tick(self) -> float | None:
        """Register a new line. Returns the idle gap if it exceeds the threshold."""
        now = self._clock()
        last, self._last = self._last, now
        if last is None or self._threshold <= 0:
            return None
        elapsed = now - last
        if elapsed > self._threshold:
            return elapsed
        return None


def run(
    lines: Iterable[str],
    beautifier: Beautifier,
    out: TextIO,
    base_package: str = "",
    idle_gap: float = 5.0,
    clock: Callable[[], float] = time.monotonic,
) -> DriverStats:
    """Beautify every line from *lines* into *out*, one output line per input line."""
    stats = DriverStats()
    timer = IdleTimer(idle_gap, clock)

    for line in lines:
        gap = timer.tick()
        if gap is not None:
            out.write(format_separator(beautifier.output, gap))
            stats.separators += 1

        styled, matched = beautifier.apply(line, base_package)
        out.write(styled)
        out.write("\n")
        out.flush()

        stats.lines += 1
        if matched:
            stats.matched += 1
        else:
            stats.passed_through += 1

    logger.info("Processed %d lines: %d styled, %d passed through, %d idle separators",
                stats.lines, stats.matched, stats.passed_through, stats.separators)
    return stats
