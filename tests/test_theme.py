import pytest

from krillin.theme import Color, CustomTheme, ThemeVariant


class _Base:
    def __init__(self):
        self.calls = []

    def color(self, name, variant):
        self.calls.append((name, variant))
        return Color(1, 2, 3, 4)

    def size(self, name):
        self.calls.append(name)
        return 42.0


def test_light_primary():
    assert CustomTheme().color("primary", ThemeVariant.LIGHT) == Color(100, 150, 240, 255)


def test_dark_background():
    assert CustomTheme().color("background", ThemeVariant.DARK) == Color(20, 22, 30, 255)


def test_force_dark_ignores_variant():
    theme = CustomTheme(force_dark=True)
    assert theme.color("shadow", ThemeVariant.LIGHT) == theme.color("shadow", ThemeVariant.DARK)
    assert theme.color("shadow", ThemeVariant.LIGHT) != CustomTheme().color("shadow", ThemeVariant.LIGHT)


def test_light_and_dark_cover_same_names():
    theme = CustomTheme()
    for name in ("primary", "hover", "inputBorder", "focus", "error"):
        light = theme.color(name, ThemeVariant.LIGHT)
        dark = theme.color(name, ThemeVariant.DARK)
        assert light != dark


def test_unknown_colour_without_base():
    with pytest.raises(KeyError):
        CustomTheme().color("menuBackground", ThemeVariant.LIGHT)


def test_unknown_colour_falls_back_with_variant():
    base = _Base()
    theme = CustomTheme(force_dark=True, base=base)
    assert theme.color("menuBackground", ThemeVariant.LIGHT) == Color(1, 2, 3, 4)
    assert base.calls == [("menuBackground", ThemeVariant.DARK)]


def test_sizes():
    theme = CustomTheme()
    assert theme.size("padding") == 10
    assert theme.size("inputBorder") == 1.5


def test_unknown_size():
    with pytest.raises(KeyError):
        CustomTheme().size("headingText")
    base = _Base()
    assert CustomTheme(base=base).size("headingText") == 42.0