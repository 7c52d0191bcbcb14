"""Builders for Alpine.js reactive-state descriptors.

An ``x-data`` value is a JavaScript object literal holding initial state
fields and named methods. ``AlpineDataBuilder`` assembles one from Python
values, encoding every string through ``js_string`` so user-controlled text
cannot break out of its literal.
"""

from __future__ import annotations

import re

from collections.abc import Mapping, Sequence
from typing import Any

from .markup import js_string


_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class JsExpression(str):
    """Raw JavaScript source that ``js_literal`` emits unchanged."""

    __slots__ = ()


def js_literal(value: Any) -> str:
    """Convert a Python value to a JavaScript literal.

    Supports None, bools, numbers, strings, mappings, sequences and
    ``JsExpression``. Object keys that are not plain identifiers are quoted.

    Raises
    ------
    TypeError
        If the value has no JavaScript literal form.
    """
    if isinstance(value, JsExpression):
        return str(value)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return js_string(value)
    if isinstance(value, Mapping):
        items = ", ".join(f"{_js_key(k)}: {js_literal(v)}" for k, v in value.items())
        return "{" + items + "}"
    if isinstance(value, Sequence):
        return "[" + ", ".join(js_literal(v) for v in value) + "]"
    raise TypeError(f"Cannot convert {type(value).__name__} to a JavaScript literal")


def _js_key(key: Any) -> str:
    key = str(key)
    return key if _IDENTIFIER.match(key) else js_string(key)


class AlpineDataBuilder:
    """Fluent builder for an ``x-data`` object literal.

    Example:
        data = (
            AlpineDataBuilder()
            .add_property("open", False)
            .add_method("toggle() { this.open = !this.open; }")
            .build()
        )
        # "{open: false, toggle() { this.open = !this.open; }}"
    """

    def __init__(self) -> None:
        self._entries: list[str] = []
        self._names: set[str] = set()

    def _claim(self, name: str) -> None:
        if name in self._names:
            raise ValueError(f"Duplicate x-data member: {name!r}")
        self._names.add(name)

    def add_property(self, name: str, value: Any) -> AlpineDataBuilder:
        """Add a state field with an initial value."""
        self._claim(name)
        self._entries.append(f"{_js_key(name)}: {js_literal(value)}")
        return self

    def add_method(self, source: str) -> AlpineDataBuilder:
        """Add a method written in shorthand form, e.g. ``close() { ... }``."""
        name = source.split("(", 1)[0].strip()
        if not _IDENTIFIER.match(name):
            raise ValueError(f"Invalid method source: {source[:40]!r}")
        self._claim(name)
        self._entries.append(source.strip())
        return self

    def members(self) -> list[str]:
        """Names of the fields and methods added so far."""
        return sorted(self._names)

    def build(self) -> str:
        """Render the object literal."""
        return "{" + ", ".join(self._entries) + "}"
