"""Terminal styling on top of rich: color system detection and SGR rendering."""

from dataclasses import dataclass

from rich.color import ColorSystem
from rich.console import Console
from rich.errors import StyleSyntaxError
from rich.style import Style as RichStyle

COLOR_MODES = ("auto", "always", "never")

# Console.color_system reports names; legacy Windows consoles take the 16 colors
_COLOR_SYSTEMS = {
    "standard": ColorSystem.STANDARD,
    "256": ColorSystem.EIGHT_BIT,
    "truecolor": ColorSystem.TRUECOLOR,
    "windows": ColorSystem.STANDARD,
}


def detect_color_system(mode: str = "auto", stream=None) -> ColorSystem | None:
    """Resolve a color mode (auto, always, never) for *stream*.

    ``auto`` lets rich inspect the stream and the environment (NO_COLOR,
    TERM, COLORTERM); a non-TTY stream gets no styling. ``always`` styles
    regardless and falls back to the 16 standard colors. None means plain text.
    """
    mode = mode.lower()
    if mode not in COLOR_MODES:
        raise ValueError(f"Unknown color mode: {mode!r}")
    if mode == "never":
        return None

    console = Console(file=stream, force_terminal=True if mode == "always" else None)
    if mode == "auto" and console.no_color:
        return None
    system = _COLOR_SYSTEMS.get(console.color_system)
    if system is None and mode == "always":
        return ColorSystem.STANDARD
    return system


@dataclass(frozen=True)
class Style:
    """A rich style definition such as ``"bold black on green"``.

    Callable as a field formatter: ``style(output, value)``.
    """

    definition: str

    def __post_init__(self):
        try:
            RichStyle.parse(self.definition)
        except StyleSyntaxError as e:
            raise ValueError(f"Invalid style {self.definition!r}: {e}") from e

    @property
    def rich(self) -> RichStyle:
        return RichStyle.parse(self.definition)

    def __call__(self, output: "Output", value: str) -> str:
        return output.render(value, self)


def _detached(style: RichStyle) -> RichStyle:
    return RichStyle(
        color=style.color,
        bgcolor=style.bgcolor,
        bold=style.bold,
        dim=style.dim,
        italic=style.italic,
        underline=style.underline,
        blink=style.blink,
        reverse=style.reverse,
        strike=style.strike,
    )


class Output:
    """Renders styled text for one color system. None renders plain text."""

    def __init__(self, color_system: ColorSystem | None = ColorSystem.TRUECOLOR):
        self.color_system = color_system
        # rich caches SGR codes on a Style whatever the color system, and
        # Style.parse shares instances, so each Output renders through its own
        self._styles: dict[Style, RichStyle] = {}

    def render(self, text: str, style: Style) -> str:
        if self.color_system is None:
            return text
        rich_style = self._styles.get(style)
        if rich_style is None:
            rich_style = self._styles[style] = _detached(style.rich)
        return rich_style.render(text, color_system=self.color_system)


BOLD = Style("bold")
FAINT = Style("dim")
UNDERLINE = Style("underline")


def parse_style(spec: str) -> Style:
    """Parse a configured style, e.g. ``"bold cyan"`` or ``"dim on #202020"``."""
    return Style(" ".join(spec.split()))
