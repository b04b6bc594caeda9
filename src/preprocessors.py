"""Field reclassification run between matching and styling.

Both transforms are left-to-right folds over the field list and return a new
list; the input list is never modified.
"""

from enum import Enum

from src.models import Field

SQL_DEBUG = "sql_debug"
SQL_LOGGERS = frozenset({"org.hibernate.SQL"})

INTERNAL = "internal"
INTERNAL_NAMESPACES = ("java.base", "jdk.internal.", "sun.")

# frame fields that switch to a project_* variant for the caller's own code
FRAME_FIELDS = ("class", "method", "file", "no_file")
PROJECT_PREFIX = "project_"


def mark_sql_debug(fields: list[Field], context: str = "") -> list[Field]:
    """Relabel everything after an SQL logger field as ``sql_debug``."""
    result = []
    active = False
    for f in fields:
        result.append(f.relabel(SQL_DEBUG) if active else f)
        if f.name == "logger" and f.value in SQL_LOGGERS:
            active = True
    return result


class FrameOwner(Enum):
    NONE = "none"
    INTERNAL = "internal"
    PROJECT = "project"


def frame_owner(fields: list[Field], base_package: str = "") -> FrameOwner:
    """Classify a stack frame by the namespace of its ``class`` field."""
    for f in fields:
        if f.name != "class":
            continue
        if f.value.startswith(INTERNAL_NAMESPACES):
            return FrameOwner.INTERNAL
        if base_package and f.value.startswith(base_package.rstrip(".") + "."):
            return FrameOwner.PROJECT
        return FrameOwner.NONE
    return FrameOwner.NONE


def mark_frame_owner(fields: list[Field], context: str = "") -> list[Field]:
    """Fade runtime-internal frames; accent frames from the base package."""
    owner = frame_owner(fields, context)
    if owner is FrameOwner.INTERNAL:
        return [f.relabel(INTERNAL) for f in fields]
    if owner is FrameOwner.PROJECT:
        return [
            f.relabel(PROJECT_PREFIX + f.name) if f.name in FRAME_FIELDS else f
            for f in fields
        ]
    return list(fields)
