from __future__ import annotations

import logging

from panelchart.viz.formatting import (
    default_click_action,
    default_tooltip_format,
    format_percent_value,
    format_value,
)


def test_format_value() -> None:
    assert format_value(1234.5) == "1,234.5"
    assert format_value(1000) == "1,000"
    assert format_value(0.126) == "0.13"
    assert format_value("n/a") == "n/a"


def test_format_percent_value() -> None:
    assert format_percent_value(12.5) == "12.5%"


def test_tooltip() -> None:
    assert default_tooltip_format("Q1", "North", 10) == "Q1, North:  10"
    assert default_tooltip_format("Q1", "North", 10, {"percent_label": "25%"}) == "Q1, North:  10 (25%)"


def test_click_action_logs(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="panelchart.viz.formatting"):
        default_click_action("Q1", "North", 10)
    assert "You clicked on series Q1" in caplog.text
