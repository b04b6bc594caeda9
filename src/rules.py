"""Default rule table for Spring Boot, Hibernate, JVM stack traces, Gradle and Maven.

Order matters: the first matching rule styles a line, so specific shapes
are listed before the general ones that would also match them.
"""

import re

from src.colors import style_logger
from src.models import FormatFn, Rule
from src.preprocessors import INTERNAL, SQL_DEBUG, mark_frame_owner, mark_sql_debug
from src.styles import BOLD, FAINT, Output, Style
from src.urls import highlight_urls

DEFAULT_LEVEL_COLOR = "bright_white"

LEVEL_COLORS = {
    "TRACE": "cyan",
    "DEBUG": "blue",
    "INFO": "green",
    "WARN": "yellow",
    "WARNING": "yellow",
    "ERROR": "red",
    "FATAL": "bright_red",
}

GRADLE_STATE_COLORS = {
    "UP-TO-DATE": "green",
    "FAILED": "red",
}


def level_style(level: str) -> Style:
    """Badge style for a severity: black on the severity color, bold."""
    definition = f"bold black on {LEVEL_COLORS.get(level, DEFAULT_LEVEL_COLOR)}"
    if level == "FATAL":
        definition = f"italic underline {definition}"
    return Style(definition)


def make_level_badge(pad: bool = False) -> FormatFn:
    """Level formatter. With *pad*, one space is added on each side."""

    def level_badge(output: Output, value: str) -> str:
        text = f" {value} " if pad else value
        return output.render(text, level_style(value.strip()))

    return level_badge


def maven_level(output: Output, value: str) -> str:
    level = value.strip("[]")
    return output.render(value, Style(f"bold {LEVEL_COLORS.get(level, DEFAULT_LEVEL_COLOR)}"))


def gradle_state(output: Output, value: str) -> str:
    return output.render(value, Style(GRADLE_STATE_COLORS.get(value.strip(), DEFAULT_LEVEL_COLOR)))


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_ISO_TIMESTAMP = r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3,9}(?:Z|[+-]\d{2}:?\d{2})"
_PLAIN_TIMESTAMP = r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3}"


def _spring_pattern(timestamp: str, with_application: bool = False) -> str:
    application = r"(?P<application>\[[^\]]*\])\s+" if with_application else ""
    return (
        rf"^(?P<timestamp>{timestamp})"
        r"(?P<level>\s+[A-Z]+)\s+"
        r"(?P<pid>\d+)\s+"
        r"(?P<separator>---)\s+"
        rf"{application}"
        r"(?P<thread>\[.*?\])\s+"
        r"(?P<logger>\S+)\s+"
        r"(?P<colon>:)\s+"
        r"(?P<message>.*)$"
    )


SPRING_LOG_PATTERNS = (
    _spring_pattern(_ISO_TIMESTAMP, with_application=True),
    _spring_pattern(_ISO_TIMESTAMP),
    _spring_pattern(_PLAIN_TIMESTAMP),
)

_EXCEPTION_HEAD = (
    r"^\s*(?P<caused_by>(?:Caused by|Suppressed): )?"
    r"(?P<exception_path>[^ ]+\.)"
    r"(?P<exception_name>[^ ]*(?:Exception|Error))"
)

EXCEPTION_PATTERNS = (
    _EXCEPTION_HEAD + r"(?P<colon>:)(?P<message>.*)$",
    _EXCEPTION_HEAD + r"$",
)

_JAR = r"(?P<jar> ~?\[[^ ]+:[^ ]+\])?"

# not anchored: frames are found anywhere in the line
STACK_FRAME_PATTERNS = (
    r"(?P<at>\tat )(?P<class>[^ ]+\.)(?P<method>[^ (]+\()"
    r"(?P<file>[^ ]+:\d+)(?P<method__close>\))" + _JAR,
    r"(?P<at>\tat )(?P<class>[^ ]+\.)(?P<method>[^ (]+\()"
    r"(?P<no_file>Native Method|Unknown Source)(?P<method__close>\))" + _JAR,
)

FRAMES_OMITTED_PATTERN = r"^(?P<omitted>\s+\.\.\. \d+ (?:more|common frames omitted))$"

HIBERNATE_SQL_PATTERN = r"^Hibernate: (?P<query>.*)$"

GRADLE_TASK_PATTERN = r"^> Task (?P<name>:[^ ]+)(?P<state> [^ ]+)?$"
GRADLE_BUILD_PATTERN = r"^(?:(?P<successful>BUILD SUCCESSFUL)|(?P<failed>BUILD FAILED))( in .+)$"

MAVEN_BUILD_PATTERN = (
    r"^(?P<maven_level>\[INFO\]) "
    r"(?:(?P<successful>BUILD SUCCESS)|(?P<failed>BUILD FAILURE))\s*$"
)
MAVEN_LINE_PATTERN = r"^(?P<maven_level>\[(?:TRACE|DEBUG|INFO|WARN|WARNING|ERROR|FATAL)\])(?P<message> .*)?$"

SPRING_VERSION_PATTERN = r"^(?P<name> :: Spring Boot :: )\s*(?P<version>.+)$"

SPRING_BANNER_LINES = (
    (("crystal", "  ."), ("logo", "   ____          _            "), ("chevrons", "__ _ _")),
    (("crystal", " /\\\\"), ("logo", " / ___'_ __ _ _(_)_ __  __ _ "), ("chevrons", "\\ \\ \\ \\")),
    (("crystal", "( ( )"), ("logo", "\\___ | '_ | '_| | '_ \\/ _` | "), ("chevrons", "\\ \\ \\ \\")),
    (("crystal", " \\\\/"), ("logo", "  ___)| |_)| | | | | || (_| |  "), ("chevrons", ") ) ) )")),
    (("crystal", "  '  "), ("logo", "|____| .__|_| |_|_| |_\\__, |"), ("chevrons", " / / / /")),
    (
        ("underline", " ========="), ("logo", "|_|"), ("underline", "=============="),
        ("logo", "|___/"), ("underline", "="), ("chevrons", "/_/_/_/"),
    ),
)


def literal_pattern(parts) -> str:
    """Anchored pattern matching *parts* literally, one named group per part."""
    seen: dict[str, int] = {}
    groups = []
    for name, text in parts:
        seen[name] = seen.get(name, 0) + 1
        group = name if seen[name] == 1 else f"{name}__{seen[name]}"
        groups.append(f"(?P<{group}>{re.escape(text)})")
    return "^" + "".join(groups) + "$"


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------


def default_rules(pad_levels: bool = False) -> list[Rule]:
    """Build the built-in rules, in priority order."""
    red = Style("red")
    red_bold = Style("bold red")
    green_bold = Style("bold green")
    accent = Style("cyan")
    accent_bold = Style("bold cyan")

    return [
        Rule(
            "spring-log",
            SPRING_LOG_PATTERNS,
            {
                "timestamp": Style("italic dim"),
                "level": make_level_badge(pad_levels),
                "pid": Style("magenta"),
                "separator": FAINT,
                "application": FAINT,
                "thread": FAINT,
                "logger": style_logger,
                "colon": FAINT,
                "message": highlight_urls,
                SQL_DEBUG: FAINT,
            },
            preprocess=mark_sql_debug,
        ),
        Rule("hibernate-sql", HIBERNATE_SQL_PATTERN, {"query": FAINT}),
        Rule(
            "exception",
            EXCEPTION_PATTERNS,
            {
                "caused_by": red_bold,
                "exception_path": red,
                "exception_name": red_bold,
                "colon": Style("dim red"),
                "message": highlight_urls,
            },
        ),
        Rule(
            "stack-frame",
            STACK_FRAME_PATTERNS,
            {
                "at": red_bold,
                "class": FAINT,
                "file": BOLD,
                "no_file": FAINT,
                "jar": FAINT,
                INTERNAL: FAINT,
                "project_class": accent,
                "project_method": accent_bold,
                "project_file": accent_bold,
                "project_no_file": accent,
            },
            preprocess=mark_frame_owner,
        ),
        Rule("frames-omitted", FRAMES_OMITTED_PATTERN, {"omitted": FAINT}),
        Rule("gradle-task", GRADLE_TASK_PATTERN, {"name": BOLD, "state": gradle_state}),
        Rule("gradle-build", GRADLE_BUILD_PATTERN, {"successful": green_bold, "failed": red_bold}),
        Rule(
            "maven-build",
            MAVEN_BUILD_PATTERN,
            {"maven_level": maven_level, "successful": green_bold, "failed": red_bold},
        ),
        Rule("maven-line", MAVEN_LINE_PATTERN, {"maven_level": maven_level, "message": highlight_urls}),
        Rule(
            "spring-banner",
            [literal_pattern(line) for line in SPRING_BANNER_LINES],
            {
                "crystal": green_bold,
                "logo": Style("green"),
                "chevrons": Style("green"),
                "underline": BOLD,
            },
        ),
        Rule("spring-version", SPRING_VERSION_PATTERN, {"name": BOLD, "version": FAINT}),
    ]
