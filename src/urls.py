"""URL highlighting for free-form message text."""

import re

from src.styles import UNDERLINE, Output

URL_PATTERN = re.compile(
    r"https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"([-a-zA-Z0-9()@:%_+.~#?&/=]*)"
)


def highlight_urls(output: Output, text: str) -> str:
    """Underline every http(s) URL in *text*; everything else is kept verbatim."""
    parts = []
    last = 0
    for m in URL_PATTERN.finditer(text):
        parts.append(text[last:m.start()])
        parts.append(output.render(m.group(0), UNDERLINE))
        last = m.end()
    parts.append(text[last:])
    return "".join(parts)
