from __future__ import annotations

import pytest

from panelchart.viz.colors import ColorScheme, create_color_scheme


def test_same_key_same_color() -> None:
    scheme = create_color_scheme()
    first = scheme("North")
    scheme("South")
    assert scheme("North") == first


def test_colors_cycle_in_first_seen_order() -> None:
    scheme = create_color_scheme(["red", "blue"])
    assert [scheme(k) for k in ("a", "b", "c")] == ["#ff0000", "#0000ff", "#ff0000"]


def test_palette_name_and_single_color() -> None:
    assert len(create_color_scheme("tab10").colors) == 10
    assert create_color_scheme("green").colors == ["#008000"]


def test_existing_scheme_is_reused() -> None:
    scheme = ColorScheme(["red"])
    assert create_color_scheme(scheme) is scheme


def test_reset_forgets_assignments() -> None:
    scheme = create_color_scheme(["red", "blue"])
    scheme("a")
    scheme.reset()
    assert scheme("b") == "#ff0000"


def test_empty_scheme_rejected() -> None:
    with pytest.raises(ValueError):
        ColorScheme([])
