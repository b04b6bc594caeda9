#!/usr/bin/env python3
"""log-beautify: restyle Spring Boot, JVM, Gradle and Maven output for the terminal."""

import logging
import sys
from argparse import ArgumentParser

from src.beautifier import Beautifier
from src.config import build_rule, load_config, load_yaml_config
from src.driver import run
from src.models import RuleError
from src.project import detect_base_package
from src.reader import expand_paths, read_multiple, read_stream, tail_file
from src.rules import default_rules
from src.styles import Output, detect_color_system

logger = logging.getLogger("log-beautify")


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="log-beautify",
        description="Read log lines (stdin or files) and re-emit them with terminal styling.",
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="Log file path(s) or glob pattern(s); stdin when omitted",
    )
    parser.add_argument(
        "--follow", "-f",
        action="store_true",
        help="Follow a single log file for new lines (like tail -f)",
    )
    parser.add_argument(
        "--config",
        help="YAML config file (settings and extra rules)",
    )
    parser.add_argument(
        "--base-package",
        help="Package prefix of your own code, highlighted in stack traces "
             "(default: detected from src/main/java)",
    )
    parser.add_argument(
        "--project-dir",
        help="Project directory used to detect the base package (default: .)",
    )
    parser.add_argument(
        "--idle-gap",
        type=float,
        help="Seconds of silence before a separator banner is printed; 0 disables (default: 5)",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        help="When to emit terminal styling (default: auto)",
    )
    parser.add_argument(
        "--pad-levels",
        action="store_true",
        default=None,
        help="Pad level badges with a space on each side",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log diagnostics to stderr (-v info, -vv debug)",
    )
    return parser


def configure_logging(verbosity: int):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s [BEAUTIFY] %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def resolve_base_package(config) -> str:
    """Configured base package, or the one detected from the project tree."""
    if config.base_package is not None:
        return config.base_package
    try:
        base_package = detect_base_package(config.project_dir, config.source_roots)
    except OSError as e:
        logger.warning("Cannot determine project's base package: %s", e)
        return ""
    if not base_package:
        logger.warning("Cannot determine project's base package")
    else:
        logger.info("Detected base package: %s", base_package)
    return base_package


def open_input(args):
    """Pick the line source: tailed file, listed files, or stdin."""
    if args.follow:
        if len(args.files) != 1:
            raise ValueError("--follow requires exactly one file")
        paths = expand_paths(args.files)
        return tail_file(paths[0])
    if args.files:
        return read_multiple(expand_paths(args.files))
    # malformed bytes become U+FFFD, as in the file readers
    sys.stdin.reconfigure(encoding="utf-8", errors="replace")
    return read_stream(sys.stdin)


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    configure_logging(args.verbose)

    try:
        config = load_config(args, load_yaml_config(args.config))
        rules = [build_rule(d) for d in config.rules] + default_rules(config.pad_levels)
        lines = open_input(args)
    except (RuleError, ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    color_system = detect_color_system(config.color, sys.stdout)
    logger.info("Color system: %s, %d rules",
                color_system.name if color_system else "none", len(rules))
    output = Output(color_system)
    beautifier = Beautifier(rules, output)

    run(
        lines,
        beautifier,
        sys.stdout,
        base_package=resolve_base_package(config),
        idle_gap=config.idle_gap_seconds,
    )
    return 0


def cli():
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)


if __name__ == "__main__":
    cli()
