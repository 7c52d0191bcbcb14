"""Custom element expansion for HTML templates.

Templates can use these elements; ``expand_tags`` replaces them with the
rendered components:

    <ak-select name="department" for="form.department" placeholder="Choose..."
               options-source="departments" value-field="value" text-field="text">
        <ak-option value="">None</ak-option>
    </ak-select>

    <ak-toast-container position="bottom-right" default-duration="4000"></ak-toast-container>

``options-source`` and ``for`` are dotted paths into the render context
(mapping keys or attributes). ``for`` supplies the bound current value; the
input name defaults to its last segment.
"""

from __future__ import annotations

import re

from collections.abc import Mapping
from html.parser import HTMLParser
from typing import Any

from . import log
from .exceptions import ComponentError, TemplateBindingError
from .markup import script
from .options import OptionCollector, field_accessor
from .select import SelectConfig, render_select
from .toast import TOAST_RUNTIME_KEY, ToastConfig, render_toast_container


# Quoted attribute values may contain ">"
_ATTRS = r"""(?:"[^"]*"|'[^']*'|[^'">/]|/(?!>))*"""

_TAG_PATTERN = re.compile(
    rf"<ak-select\b(?P<select_attrs>{_ATTRS})>(?P<select_body>.*?)</ak-select\s*>"
    rf"|<ak-toast-container\b(?P<toast_attrs>{_ATTRS})(?:/>|>\s*</ak-toast-container\s*>)",
    re.DOTALL | re.IGNORECASE,
)

_TRUE = frozenset({"", "true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})

# attribute -> SelectConfig field
_SELECT_TEXT_ATTRS = {
    "id": "input_id",
    "placeholder": "placeholder",
    "search-placeholder": "search_placeholder",
    "no-results-text": "no_results_text",
    "select-all-text": "select_all_text",
    "max-height": "max_height_class",
    "label": "label",
    "class": "css_class",
}
_SELECT_BOOL_ATTRS = {"multiple": "multiple", "searchable": "searchable"}
_SELECT_BINDING_ATTRS = {"name", "for", "options-source", "value-field", "text-field"}

_TOAST_TEXT_ATTRS = {
    "position": "position",
    "max-width": "max_width_class",
    "z-index": "z_index_class",
    "default-sound": "default_sound",
    "class": "css_class",
}


class _AttributeParser(HTMLParser):
    """Reads the attributes of a single start tag."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.attrs: dict[str, str | None] = {}

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if not self.attrs:
            self.attrs = dict(attrs)

    handle_startendtag = handle_starttag


class _OptionParser(HTMLParser):
    """Collects ``<ak-option>`` children: attributes plus text content."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.options: list[tuple[dict[str, str | None], str]] = []
        self._current: dict[str, str | None] | None = None
        self._text: list[str] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag == "ak-option":
            self._flush()
            self._current = dict(attrs)
            self._text = []

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag == "ak-option":
            self._flush()
            self.options.append((dict(attrs), ""))

    def handle_endtag(self, tag: str) -> None:
        if tag == "ak-option":
            self._flush()

    def handle_data(self, data: str) -> None:
        if self._current is not None:
            self._text.append(data)

    def _flush(self) -> None:
        if self._current is not None:
            self.options.append((self._current, "".join(self._text).strip()))
            self._current = None
            self._text = []

    def close(self) -> None:
        super().close()
        self._flush()


def parse_attributes(attrs_source: str) -> dict[str, str | None]:
    """Parse an attribute string (``name="x" multiple``) into a dict."""
    parser = _AttributeParser()
    parser.feed(f"<ak-tag {attrs_source.strip().rstrip('/')}>")
    parser.close()
    return parser.attrs


def parse_bool(value: str | None, attribute: str, component: str) -> bool:
    """Interpret a boolean attribute; a bare attribute means True."""
    normalized = (value or "").strip().lower()
    if normalized in _TRUE or normalized == attribute:
        return True
    if normalized in _FALSE:
        return False
    raise ComponentError(
        f"Invalid boolean for '{attribute}': {value!r}", component=component, attribute=attribute
    )


def resolve(context: Any, path: str, component: str = "") -> Any:
    """Resolve a dotted path against mappings and object attributes."""
    target = context
    for segment in path.split("."):
        if isinstance(target, Mapping):
            if segment not in target:
                raise TemplateBindingError(
                    f"Cannot resolve '{path}': no key '{segment}'", expression=path, component=component
                )
            target = target[segment]
        elif hasattr(target, segment):
            target = getattr(target, segment)
        else:
            raise TemplateBindingError(
                f"Cannot resolve '{path}': no attribute '{segment}'",
                expression=path,
                component=component,
            )
    return target


def expand_select(attrs: dict[str, str | None], body: str, context: Mapping[str, Any]) -> str:
    """Render one ``<ak-select>`` element."""
    component = "ak-select"
    unknown = attrs.keys() - _SELECT_TEXT_ATTRS.keys() - _SELECT_BOOL_ATTRS.keys() - _SELECT_BINDING_ATTRS
    if unknown:
        log.debug(f"Ignoring unknown {component} attributes: {', '.join(sorted(unknown))}")

    bound_path = attrs.get("for")
    name = attrs.get("name") or (bound_path.rsplit(".", 1)[-1] if bound_path else None)
    if not name:
        raise ComponentError("ak-select requires a 'name' or 'for' attribute", component=component)

    fields: dict[str, Any] = {"input_name": name}
    for attr, field in _SELECT_TEXT_ATTRS.items():
        if attrs.get(attr) is not None:
            fields[field] = attrs[attr]
    for attr, field in _SELECT_BOOL_ATTRS.items():
        if attr in attrs:
            fields[field] = parse_bool(attrs[attr], attr, component)
    config = SelectConfig(**fields)

    collector = OptionCollector()
    option_parser = _OptionParser()
    option_parser.feed(body)
    option_parser.close()
    for option_attrs, text in option_parser.options:
        collector.add(
            option_attrs.get("value") or "",
            text or None,
            selected="selected" in option_attrs
            and parse_bool(option_attrs["selected"], "selected", "ak-option"),
            disabled="disabled" in option_attrs
            and parse_bool(option_attrs["disabled"], "disabled", "ak-option"),
        )

    source_path = attrs.get("options-source")
    if source_path:
        records = resolve(context, source_path, component)
        current = resolve(context, bound_path, component) if bound_path else None
        accessor = field_accessor(
            attrs.get("value-field") or "Value", attrs.get("text-field") or "Text"
        )
        collector.add_records(records, accessor=accessor, current=current, multiple=config.multiple)

    return render_select(collector.collect(), config).html


def expand_toast_container(attrs: dict[str, str | None], include_script: bool) -> str:
    """Render one ``<ak-toast-container>`` element."""
    component = "ak-toast-container"
    fields: dict[str, Any] = {}
    for attr, field in _TOAST_TEXT_ATTRS.items():
        if attrs.get(attr) is not None:
            fields[field] = attrs[attr]
    if "enable-sound" in attrs:
        fields["enable_sound"] = parse_bool(attrs["enable-sound"], "enable-sound", component)
    if attrs.get("default-duration") is not None:
        try:
            fields["default_duration"] = int(attrs["default-duration"] or "")
        except ValueError as exc:
            raise ComponentError(
                f"Invalid default-duration: {attrs['default-duration']!r}", component=component
            ) from exc

    rendered = render_toast_container(ToastConfig(**fields), container_id=attrs.get("id"))
    if include_script:
        return rendered.html + script(rendered.script)
    return rendered.html


def expand_tags(
    template: str,
    context: Mapping[str, Any] | None = None,
    installed: set[str] | None = None,
) -> str:
    """Replace alpinekit custom elements in ``template`` with rendered HTML.

    Parameters
    ----------
    template : str
        HTML containing ``<ak-select>`` / ``<ak-toast-container>`` elements.
    context : Mapping, optional
        Values referenced by ``options-source`` and ``for`` attributes.
    installed : set of str, optional
        Keys of page-level assets already present. The toast runtime script
        is emitted with the first container only when its key is absent, and
        the key is added to the set.

    Returns
    -------
    str
        The expanded markup.

    Raises
    ------
    TemplateBindingError
        If an ``options-source`` or ``for`` path cannot be resolved.
    ComponentError
        If a tag is missing required attributes or has invalid values.
    """
    context = context or {}
    installed = installed if installed is not None else set()

    def replace(match: re.Match[str]) -> str:
        if match.group("select_attrs") is not None:
            attrs = parse_attributes(match.group("select_attrs"))
            return expand_select(attrs, match.group("select_body"), context)

        attrs = parse_attributes(match.group("toast_attrs"))
        include_script = TOAST_RUNTIME_KEY not in installed
        installed.add(TOAST_RUNTIME_KEY)
        return expand_toast_container(attrs, include_script)

    return _TAG_PATTERN.sub(replace, template)
