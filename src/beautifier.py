"""Ordered rule registry. The first matching rule styles a line."""

import logging
from typing import Iterable

from src.models import Field, Rule
from src.styles import Output

logger = logging.getLogger(__name__)


class Beautifier:
    """Applies a fixed, ordered set of rules to single lines.

    Rules run by descending ``priority``; equal priorities keep registration
    order, so with default priorities the list order alone decides.
    """

    def __init__(self, rules: Iterable[Rule], output: Output | None = None):
        indexed = list(enumerate(rules))
        indexed.sort(key=lambda item: (-item[1].priority, item[0]))
        self._rules: tuple[Rule, ...] = tuple(rule for _, rule in indexed)
        self._output = output or Output()
        logger.debug("Beautifier ready with %d rules: %s",
                     len(self._rules), ", ".join(r.name for r in self._rules))

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def output(self) -> Output:
        return self._output

    def match(self, line: str) -> tuple[Rule, list[Field]] | None:
        """The first rule matching *line* and its fields, or None."""
        for rule in self._rules:
            fields = rule.match(line)
            if fields is not None:
                return rule, fields
        return None

    def apply(self, line: str, context: str = "") -> tuple[str, bool]:
        """Return (styled line, matched). Unmatched lines come back unchanged."""
        found = self.match(line)
        if found is None:
            return line, False
        rule, fields = found
        return rule.format(fields, self._output, context), True
