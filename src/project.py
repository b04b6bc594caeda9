"""Base package detection from a JVM project's source tree."""

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_ROOTS = ("src/main/java", "src/main/kotlin")


def detect_base_package(project_dir: str = ".", source_roots=DEFAULT_SOURCE_ROOTS) -> str:
    """Return the project's base package, e.g. ``com.example.shop``.

    Starting from the first existing source root, descend while a directory
    contains exactly one entry and that entry is a directory. The path walked
    (with dots for separators) is the base package. Returns "" when no source
    root exists or the root itself branches.

    Raises OSError if a directory on the way cannot be listed.
    """
    for root in source_roots:
        start = os.path.join(project_dir, root)
        if not os.path.isdir(start):
            logger.debug("Source root %s not found", start)
            continue

        current = start
        while True:
            entries = os.listdir(current)
            if len(entries) != 1:
                break
            child = os.path.join(current, entries[0])
            if not os.path.isdir(child):
                break
            current = child

        rel = os.path.relpath(current, start)
        if rel == os.curdir:
            return ""
        return rel.replace(os.sep, ".")

    return ""
