from __future__ import annotations

import logging

from panelchart.core.margins import parse_margins, resolve_sides


def test_single_token_applies_to_all_sides() -> None:
    assert parse_margins("1") == {"all": 1}


def test_two_tokens_are_vertical_then_horizontal() -> None:
    assert parse_margins("1 2") == {"top": 1, "left": 2, "right": 2, "bottom": 1}


def test_three_tokens() -> None:
    assert parse_margins("1 2 3") == {"top": 1, "left": 2, "right": 2, "bottom": 3}


def test_four_tokens_go_clockwise_from_top() -> None:
    # top, right, bottom, left like CSS; every token lands on its own side
    assert parse_margins("1 2 3 4") == {"top": 1, "right": 2, "bottom": 3, "left": 4}


def test_tokens_are_coerced_and_whitespace_tolerated() -> None:
    assert parse_margins("  1.5   2 ") == {"top": 1.5, "left": 2, "right": 2, "bottom": 1.5}


def test_number_is_all_sides() -> None:
    assert parse_margins(10) == {"all": 10}
    assert parse_margins(2.5) == {"all": 2.5}


def test_mapping_passes_through_as_copy() -> None:
    src = {"top": 3}
    out = parse_margins(src)
    assert out == {"top": 3}
    assert out is not src


def test_none_stays_none() -> None:
    assert parse_margins(None) is None


def test_five_tokens_warn_and_yield_none(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="panelchart.core.margins"):
        assert parse_margins("1 2 3 4 5") is None
    assert "Invalid 'margins' option value" in caplog.text


def test_other_types_warn_and_yield_none(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="panelchart.core.margins"):
        assert parse_margins(True) is None
        assert parse_margins([1, 2]) is None
    assert caplog.text.count("Invalid 'margins' option value") == 2


def test_parsing_is_idempotent() -> None:
    once = parse_margins("4 8")
    assert parse_margins(once) == once


def test_resolve_sides_fills_from_all() -> None:
    assert resolve_sides({"all": 5, "top": 1}) == {"top": 1.0, "right": 5.0, "bottom": 5.0, "left": 5.0}
    assert resolve_sides(None) == {"top": 0.0, "right": 0.0, "bottom": 0.0, "left": 0.0}
