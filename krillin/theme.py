"""Colour and size scheme of the desktop client, with light and dark variants."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol


@dataclass(frozen=True)
class Color:
    """A colour with non-premultiplied alpha."""

    r: int
    g: int
    b: int
    a: int = 255


class ThemeVariant(Enum):
    DARK = 0
    LIGHT = 1


class _BaseTheme(Protocol):
    def color(self, name: str, variant: ThemeVariant) -> Any: ...

    def size(self, name: str) -> float: ...


_LIGHT: dict[str, Color] = {
    "primary": Color(100, 150, 240, 255),
    "background": Color(248, 249, 252, 255),
    "foreground": Color(30, 35, 45, 255),
    "disabled": Color(180, 185, 190, 150),
    "button": Color(70, 130, 230, 255),
    "hover": Color(90, 150, 240, 255),
    "pressed": Color(50, 110, 210, 255),
    "inputBackground": Color(255, 255, 255, 255),
    "inputBorder": Color(210, 215, 220, 255),
    "placeholder": Color(160, 165, 170, 200),
    "selection": Color(200, 225, 255, 180),
    "scrollBar": Color(200, 205, 210, 200),
    "shadow": Color(0, 0, 0, 25),
    "error": Color(230, 70, 70, 255),
    "warning": Color(245, 160, 50, 255),
    "success": Color(60, 180, 120, 255),
    "focus": Color(70, 130, 230, 100),
}

_DARK: dict[str, Color] = {
    "primary": Color(90, 150, 250, 255),
    "background": Color(20, 22, 30, 255),
    "foreground": Color(230, 235, 240, 255),
    "disabled": Color(100, 105, 110, 150),
    "button": Color(50, 55, 65, 255),
    "hover": Color(70, 75, 85, 255),
    "pressed": Color(30, 35, 45, 255),
    "inputBackground": Color(35, 38, 48, 255),
    "inputBorder": Color(60, 65, 75, 255),
    "placeholder": Color(120, 125, 130, 200),
    "selection": Color(70, 130, 230, 180),
    "scrollBar": Color(60, 65, 75, 200),
    "shadow": Color(0, 0, 0, 50),
    "error": Color(240, 80, 80, 255),
    "warning": Color(255, 170, 60, 255),
    "success": Color(70, 190, 130, 255),
    "focus": Color(80, 140, 240, 100),
}

_SIZES: dict[str, float] = {
    "padding": 10,
    "iconInline": 20,
    "scrollBar": 10,
    "scrollBarSmall": 4,
    "separator": 1,
    "text": 14,
    "inputBorder": 1.5,
    "inputRadius": 5,
}


class CustomTheme:
    """Custom palette over an optional base theme that supplies everything else."""

    def __init__(self, force_dark: bool = False, base: _BaseTheme | None = None) -> None:
        self.force_dark = force_dark
        self.base = base

    def color(self, name: str, variant: ThemeVariant = ThemeVariant.LIGHT) -> Any:
        """Return the colour for a name; unknown names go to the base theme."""
        dark = self.force_dark or variant is ThemeVariant.DARK
        palette = _DARK if dark else _LIGHT
        if name in palette:
            return palette[name]
        if self.base is None:
            raise KeyError(f"unknown colour name: {name}")
        return self.base.color(name, ThemeVariant.DARK if dark else ThemeVariant.LIGHT)

    def size(self, name: str) -> float:
        """Return the size for a name; unknown names go to the base theme."""
        if name in _SIZES:
            return _SIZES[name]
        if self.base is None:
            raise KeyError(f"unknown size name: {name}")
        return self.base.size(name)