"""Field and Rule, the matching half of the beautifier."""

import re
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from src.styles import Output

# Group names may carry a "__suffix" so one field name can appear twice in a
# pattern, e.g. (?P<method>\w+\()...(?P<method__close>\)).
FIELD_SUFFIX_SEP = "__"

FormatFn = Callable[[Output, str], str]


@dataclass(frozen=True)
class Field:
    name: str    # "" for text not covered by a named group
    value: str

    def relabel(self, name: str) -> "Field":
        return replace(self, name=name)


Preprocess = Callable[[list[Field], str], list[Field]]


class RuleError(ValueError):
    """A rule definition is invalid (bad pattern, no patterns, bad style)."""


def field_name(group_name: str) -> str:
    return group_name.split(FIELD_SUFFIX_SEP, 1)[0]


class Rule:
    """One recognizable line shape: alternative patterns plus field styling.

    Patterns are tried in order with ``re.search``; they carry their own
    anchors. The first match yields the field list, which always covers the
    whole line: text outside named groups becomes unnamed fields that are
    emitted verbatim.
    """

    def __init__(
        self,
        name: str,
        patterns: str | Iterable[str],
        formatters: Mapping[str, FormatFn] | None = None,
        preprocess: Preprocess | None = None,
        priority: int = 0,
    ):
        if isinstance(patterns, str):
            patterns = [patterns]
        sources = list(patterns)
        if not sources:
            raise RuleError(f"Rule {name!r} has no patterns")

        compiled = []
        for i, source in enumerate(sources):
            try:
                compiled.append(re.compile(source))
            except re.error as e:
                raise RuleError(f"Rule {name!r}: pattern #{i} does not compile: {e}") from e

        self.name = name
        self.patterns: tuple[re.Pattern, ...] = tuple(compiled)
        self.formatters = MappingProxyType(dict(formatters or {}))
        self.preprocess = preprocess
        self.priority = priority

    def __repr__(self) -> str:
        return f"Rule({self.name!r}, patterns={len(self.patterns)}, priority={self.priority})"

    def match(self, line: str) -> list[Field] | None:
        """Fields of the first matching alternative, or None."""
        for pattern in self.patterns:
            m = pattern.search(line)
            if m:
                return _split_fields(pattern, m, line)
        return None

    def render(self, fields: list[Field], output: Output) -> str:
        parts = []
        for f in fields:
            fmt = self.formatters.get(f.name)
            if fmt is None or not f.value:
                parts.append(f.value)
            else:
                parts.append(fmt(output, f.value))
        return "".join(parts)

    def format(self, fields: list[Field], output: Output, context: str = "") -> str:
        """Preprocess then render fields produced by :meth:`match`."""
        if self.preprocess is not None:
            fields = self.preprocess(fields, context)
        return self.render(fields, output)

    def apply(self, line: str, output: Output, context: str = "") -> str | None:
        """Styled line, or None if no alternative matches."""
        fields = self.match(line)
        if fields is None:
            return None
        return self.format(fields, output, context)


def _split_fields(pattern: re.Pattern, m: re.Match, line: str) -> list[Field]:
    spans = []
    for group_name, index in pattern.groupindex.items():
        start, end = m.span(index)
        if start == -1:
            continue
        spans.append((start, end, field_name(group_name)))
    # an outer group sorts ahead of the groups nested inside it
    spans.sort(key=lambda span: (span[0], -span[1]))

    fields = []
    cursor = 0
    for start, end, name in spans:
        if start < cursor:
            # nested named group; the outer one already covers it
            continue
        if start > cursor:
            fields.append(Field("", line[cursor:start]))
        fields.append(Field(name, line[start:end]))
        cursor = end
    if cursor < len(line):
        fields.append(Field("", line[cursor:]))
    return fields
