import os

import pytest
from rich.color import ColorSystem

from src.beautifier import Beautifier
from src.rules import default_rules
from src.styles import Output

SAMPLE_LOG = os.path.join(os.path.dirname(__file__), "..", "logs", "sample.log")


@pytest.fixture
def color_output():
    return Output(ColorSystem.TRUECOLOR)


@pytest.fixture
def plain_output():
    return Output(None)


@pytest.fixture
def beautifier(color_output):
    return Beautifier(default_rules(), color_output)


@pytest.fixture
def sample_lines():
    with open(SAMPLE_LOG, "r", encoding="utf-8") as f:
        return f.read().splitlines()


@pytest.fixture
def spring_line():
    return "2024-01-01T10:00:00.000+00:00 INFO  12345 --- [main] com.example.App : starting up"
