import json

import pytest
from rich.console import Console

from stardust.infrastructure.cli.display import ConsoleDisplay


@pytest.fixture
def display():
    return ConsoleDisplay(console=Console(record=True, width=120, color_system=None))


def test_display_json_prints_parsable_document(display):
    data = {"owner/alpha": ["AI: LLM"], "owner/beta": ["Lang: Python", "Web: Frontend"]}
    display.display_json(data)
    assert json.loads(display.console.export_text()) == data


def test_display_error(display):
    display.display_error("Could not load input")
    text = display.console.export_text()
    assert "Error" in text
    assert "Could not load input" in text


def test_display_warning_is_logged(display, caplog):
    with caplog.at_level("WARNING"):
        display.display_warning("2 repositories could not be classified")
    assert "Warning" in display.console.export_text()
    assert "2 repositories could not be classified" in caplog.text


def test_display_info_and_output(display):
    display.display_info("Results written to out.json")
    display.display_output("plain text", title="Summary")
    text = display.console.export_text()
    assert "Results written to out.json" in text
    assert "Summary" in text
    assert "plain text" in text
