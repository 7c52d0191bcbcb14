"""Typed markup tree used by every alpinekit component.

Components build ``Element`` trees instead of interpolating strings, so
text and attribute values are always escaped on output. Pre-rendered
fragments that are already safe are wrapped in ``Markup``.

Usage:
    from alpinekit.markup import Element, Markup

    button = Element(
        "button",
        {"type": "button", "@click": "toggle()", "class": "btn"},
        "O'Brien & Co",
    )
    button.render()
    # '<button type="button" @click="toggle()" class="btn">O&#x27;Brien &amp; Co</button>'
"""

from __future__ import annotations

import html

from collections.abc import Iterable, Mapping
from typing import Union


# Elements that never have children or a closing tag
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)

# Characters that must not appear raw inside a JS string literal.
# U+2028/U+2029 terminate lines in older engines; "</" could close a <script>.
_JS_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class Markup(str):
    """A string that is already safe to emit as HTML."""

    __slots__ = ()

    def __html__(self) -> str:
        return str(self)


AttrValue = Union[str, int, bool, None]
Node = Union["Element", Markup, str]


def escape(text: object) -> str:
    """Escape text for HTML element or attribute context.

    ``Markup`` values pass through unchanged.
    """
    if isinstance(text, Markup):
        return str(text)
    return html.escape(str(text), quote=True)


def js_string(value: object) -> str:
    """Encode a value as a single-quoted JavaScript string literal.

    Parameters
    ----------
    value : object
        Converted with ``str()``; None becomes an empty string.

    Returns
    -------
    str
        The literal including the surrounding quotes, safe for embedding
        in a script block or in a (subsequently HTML-escaped) attribute.
    """
    text = "" if value is None else str(value)
    escaped = "".join(_JS_ESCAPES.get(ch, ch) for ch in text)
    return "'" + escaped.replace("</", "<\\/") + "'"


def class_names(*parts: str | None) -> str:
    """Join CSS class fragments, skipping empty ones."""
    return " ".join(p.strip() for p in parts if p and p.strip())


class Element:
    """An HTML element with attributes and children.

    Attribute names are emitted verbatim so Alpine directives such as
    ``@click``, ``:class`` and ``x-for`` can be used directly. A value of
    True renders a bare attribute; False or None omits it.
    """

    __slots__ = ("attrs", "children", "tag")

    def __init__(
        self,
        tag: str,
        attrs: Mapping[str, AttrValue] | None = None,
        *children: Node | Iterable[Node] | None,
    ) -> None:
        self.tag = tag
        self.attrs: dict[str, AttrValue] = dict(attrs or {})
        self.children: list[Node] = []
        self.extend(children)

    def append(self, child: Node | None) -> Element:
        """Append a child node (None is ignored)."""
        if child is not None:
            self.children.append(child)
        return self

    def extend(self, children: Iterable[Node | Iterable[Node] | None]) -> Element:
        """Append several children; nested iterables are flattened one level."""
        for child in children:
            if child is None:
                continue
            if isinstance(child, (Element, str)):
                self.children.append(child)
            else:
                self.children.extend(c for c in child if c is not None)
        return self

    def set(self, name: str, value: AttrValue) -> Element:
        """Set an attribute."""
        self.attrs[name] = value
        return self

    def add_class(self, *classes: str | None) -> Element:
        """Append CSS classes to the ``class`` attribute."""
        existing = self.attrs.get("class")
        self.attrs["class"] = class_names(existing if isinstance(existing, str) else None, *classes)
        return self

    def _render_attrs(self) -> str:
        parts = []
        for name, value in self.attrs.items():
            if value is None or value is False:
                continue
            if value is True:
                parts.append(f" {name}")
            else:
                parts.append(f' {name}="{escape(value)}"')
        return "".join(parts)

    def render(self) -> str:
        """Render the element and its children to an HTML string."""
        open_tag = f"<{self.tag}{self._render_attrs()}>"
        if self.tag in VOID_ELEMENTS:
            return open_tag
        inner = "".join(render(child) for child in self.children)
        return f"{open_tag}{inner}</{self.tag}>"

    def __html__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Element({self.tag!r}, {self.attrs!r}, <{len(self.children)} children>)"


def render(node: Node | None) -> str:
    """Render a node: elements render themselves, text is escaped."""
    if node is None:
        return ""
    if isinstance(node, Element):
        return node.render()
    return escape(node)


def fragment(*nodes: Node | None) -> Markup:
    """Render several nodes into a single safe fragment."""
    return Markup("".join(render(n) for n in nodes))


def script(source: str, **attrs: AttrValue) -> Markup:
    """Build an inline ``<script>`` block.

    The source is emitted raw; any ``</script`` sequence in it is broken up
    so the block cannot be terminated early.
    """
    body = source.replace("</script", "<\\/script")
    attrs_html = Element("script", attrs)._render_attrs()
    return Markup(f"<script{attrs_html}>{body}</script>")
