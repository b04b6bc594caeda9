"""Generator-based line sources: stdin, files, glob expansion, and tail."""

import glob
import os
import time
from typing import Generator, Iterable, TextIO


def strip_terminator(line: str) -> str:
    """Drop one trailing "\\n" and then one "\\r", if present."""
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def read_stream(stream: TextIO) -> Generator[str, None, None]:
    """Yield lines from an open text stream, without terminators."""
    for line in stream:
        yield strip_terminator(line)


def read_lines(filepath: str) -> Generator[str, None, None]:
    """Yield each line of a single file."""
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        yield from read_stream(f)


def read_multiple(paths: Iterable[str]) -> Generator[str, None, None]:
    """Yield lines from multiple files, sequentially."""
    for path in paths:
        yield from read_lines(path)


def expand_paths(raw_paths: list[str]) -> list[str]:
    """Expand globs, deduplicate, and validate that files exist.

    Raises FileNotFoundError if a non-glob path doesn't exist.
    Raises FileNotFoundError if expansion produces zero files.
    """
    expanded = []
    seen = set()

    for raw in raw_paths:
        if any(c in raw for c in ("*", "?", "[")):
            candidates = sorted(glob.glob(raw))
        else:
            if not os.path.isfile(raw):
                raise FileNotFoundError(f"File not found: {raw}")
            candidates = [raw]
        for path in candidates:
            if path not in seen:
                seen.add(path)
                expanded.append(path)

    if not expanded:
        raise FileNotFoundError("No log files found matching the given paths")

    return expanded


def tail_file(filepath: str, poll_interval: float = 0.1) -> Generator[str, None, None]:
    """Seek to end of file and yield new lines as they appear.

    Polls with time.sleep(poll_interval). Runs until interrupted.
    """
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        f.seek(0, os.SEEK_END)
        buffer = ""
        while True:
            chunk = f.read()
            if chunk:
                buffer += chunk
                while "\n" in buffer:
                    line, buffer = buffer.split("\n", 1)
                    yield strip_terminator(line)
            else:
                time.sleep(poll_interval)
