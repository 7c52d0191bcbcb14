"""Inline SVG icons (Heroicons outline paths) used by the components."""

from __future__ import annotations

from .markup import Element


CHEVRON_DOWN = "M19 9l-7 7-7-7"
SEARCH = "M21 21l-6-6m2-5a7 7 0 11-14 0 7 7 0 0114 0z"
CHECK = "M5 13l4 4L19 7"
CLOSE = "M6 18L18 6M6 6l12 12"

# Toast type -> icon path
TOAST_ICONS: dict[str, str] = {
    "success": "M9 12l2 2 4-4m6 2a9 9 0 11-18 0 9 9 0 0118 0z",
    "error": "M10 14l2-2m0 0l2-2m-2 2l-2-2m2 2l2 2m7-2a9 9 0 11-18 0 9 9 0 0118 0z",
    "info": "M13 16h-1v-4h-1m1-4h.01M21 12a9 9 0 11-18 0 9 9 0 0118 0z",
    "warning": (
        "M12 9v2m0 4h.01m-6.938 4h13.856c1.54 0 2.502-1.667 1.732-3L13.732 4"
        "c-.77-1.333-2.694-1.333-3.464 0L3.34 16c-.77 1.333.192 3 1.732 3z"
    ),
    "default": "M8 12h.01M12 12h.01M16 12h.01M21 12a9 9 0 11-18 0 9 9 0 0118 0z",
}


def icon(path: str, css_class: str) -> Element:
    """Build a stroked 24x24 SVG icon."""
    return Element(
        "svg",
        {
            "class": css_class,
            "fill": "none",
            "stroke": "currentColor",
            "viewBox": "0 0 24 24",
            "aria-hidden": "true",
        },
        Element(
            "path",
            {
                "stroke-linecap": "round",
                "stroke-linejoin": "round",
                "stroke-width": "2",
                "d": path,
            },
        ),
    )
