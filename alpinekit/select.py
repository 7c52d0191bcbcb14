"""Searchable single/multi select component.

The component renders a button, a dropdown panel and hidden form inputs,
and attaches an Alpine.js state descriptor (``x-data``) holding the options
snapshot. Filtering, selection toggling and the display text all run in the
browser against that snapshot; the server never re-renders per keystroke.

Descriptor contract (other page code may rely on these names):
    fields:  open, search, selected, options
    methods: toggle, close, selectOption, isSelected, getDisplayText,
             filteredOptions, selectAll (multiple mode only)

Usage:
    from alpinekit.options import field_accessor
    from alpinekit.select import Select

    select = Select(
        input_name="department",
        placeholder="Choose a department",
        records=departments,
        accessor=field_accessor("Value", "Text"),
        current="sales",
    )
    html = select.build_html()
"""

from __future__ import annotations

import re
import uuid

from collections.abc import Sequence
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .alpine import AlpineDataBuilder
from .config import get_settings
from .icons import CHECK, CHEVRON_DOWN, SEARCH, icon
from .markup import Element, js_string
from .options import Accessor, Option, collect_options
from .state import SelectState, initial_selection


_ID_UNSAFE = re.compile(r"[^A-Za-z0-9_-]+")


def _select_default(name: str) -> Any:
    return lambda: getattr(get_settings().select, name)


def input_id_for(name: str) -> str:
    """Derive an element id from a form input name (``a.b[0]`` -> ``a_b_0``)."""
    derived = _ID_UNSAFE.sub("_", name).strip("_")
    return derived or f"select-{uuid.uuid4().hex[:8]}"


class SelectConfig(BaseModel):
    """Rendering options for one select; immutable per render call."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    input_name: str = ""
    input_id: str = ""
    multiple: bool = False
    searchable: bool = Field(default_factory=_select_default("searchable"))
    placeholder: str | None = None
    search_placeholder: str = Field(default_factory=_select_default("search_placeholder"))
    no_results_text: str = Field(default_factory=_select_default("no_results_text"))
    select_all_text: str = Field(default_factory=_select_default("select_all_text"))
    max_height_class: str = Field(default_factory=_select_default("max_height_class"))
    label: str | None = None
    css_class: str = ""

    @model_validator(mode="after")
    def derive_input_id(self) -> SelectConfig:
        """Use an id derived from the input name when none is given."""
        if not self.input_id:
            object.__setattr__(self, "input_id", input_id_for(self.input_name))
        return self

    @property
    def display_placeholder(self) -> str:
        """The placeholder shown while nothing is selected."""
        if self.placeholder is not None:
            return self.placeholder
        settings = get_settings().select
        return settings.multiple_placeholder if self.multiple else settings.single_placeholder


class SelectRender(NamedTuple):
    """Output of a select render: the markup and its state descriptor."""

    html: str
    state: str


# =============================================================================
# State descriptor
# =============================================================================


def build_select_state(options: Sequence[Option], config: SelectConfig) -> str:
    """Build the ``x-data`` object literal for a select."""
    placeholder = js_string(config.display_placeholder)
    builder = (
        AlpineDataBuilder()
        .add_property("open", False)
        .add_property("search", "")
        .add_property("selected", initial_selection(options, config.multiple))
        .add_property("options", [opt.to_client() for opt in options])
        .add_method("toggle() { this.open = !this.open; }")
        .add_method("close() { this.open = false; this.search = ''; }")
    )

    if config.multiple:
        builder.add_method(
            "selectOption(option) { if (option.disabled) return; "
            "if (this.selected.includes(option.value)) { "
            "this.selected = this.selected.filter(value => value !== option.value); "
            "} else { this.selected.push(option.value); } }"
        )
        builder.add_method("isSelected(option) { return this.selected.includes(option.value); }")
        builder.add_method(
            "getDisplayText() { "
            f"if (this.selected.length === 0) return {placeholder}; "
            "if (this.selected.length === 1) { "
            "const option = this.options.find(opt => opt.value === this.selected[0]); "
            "return option ? option.text : this.selected[0]; } "
            "return this.selected.length + ' selected'; }"
        )
    else:
        builder.add_method(
            "selectOption(option) { if (option.disabled) return; "
            "this.selected = option.value; this.close(); }"
        )
        builder.add_method("isSelected(option) { return this.selected === option.value; }")
        builder.add_method(
            "getDisplayText() { "
            f"if (!this.selected) return {placeholder}; "
            "const option = this.options.find(opt => opt.value === this.selected); "
            "return option ? option.text : this.selected; }"
        )

    builder.add_method(
        "filteredOptions() { if (!this.search) return this.options; "
        "const needle = this.search.toLowerCase(); "
        "return this.options.filter(option => option.text.toLowerCase().includes(needle)); }"
    )

    if config.multiple:
        builder.add_method(
            "selectAll() { "
            "const visible = this.filteredOptions().filter(opt => !opt.disabled).map(opt => opt.value); "
            "if (visible.every(value => this.selected.includes(value))) { "
            "this.selected = this.selected.filter(value => !visible.includes(value)); "
            "} else { visible.forEach(value => { "
            "if (!this.selected.includes(value)) this.selected.push(value); }); } }"
        )

    return builder.build()


# =============================================================================
# Markup
# =============================================================================

_TRANSITION = {
    "x-transition:enter": "transition ease-out duration-100",
    "x-transition:enter-start": "transform opacity-0 scale-95",
    "x-transition:enter-end": "transform opacity-100 scale-100",
    "x-transition:leave": "transition ease-in duration-75",
    "x-transition:leave-start": "transform opacity-100 scale-100",
    "x-transition:leave-end": "transform opacity-0 scale-95",
}


def _toggle_button(config: SelectConfig, display_text: str) -> Element:
    return Element(
        "button",
        {
            "type": "button",
            "id": config.input_id,
            "@click": "toggle()",
            "aria-haspopup": "listbox",
            ":aria-expanded": "open",
            "class": (
                "relative w-full bg-white border border-gray-300 rounded-md shadow-sm "
                "pl-3 pr-10 py-2 text-left cursor-default focus:outline-none focus:ring-1 "
                "focus:ring-blue-500 focus:border-blue-500 sm:text-sm"
            ),
            ":class": "{ 'ring-1 ring-blue-500 border-blue-500': open }",
        },
        Element("span", {"class": "block truncate", "x-text": "getDisplayText()"}, display_text),
        Element(
            "span",
            {"class": "absolute inset-y-0 right-0 flex items-center pr-2 pointer-events-none"},
            Element(
                "div",
                {
                    "class": "transition-transform duration-200",
                    ":class": "{ 'rotate-180': open }",
                },
                icon(CHEVRON_DOWN, "w-5 h-5 text-gray-400"),
            ),
        ),
    )


def _search_box(config: SelectConfig) -> Element:
    return Element(
        "div",
        {"class": "px-2 py-2 border-b border-gray-200"},
        Element(
            "div",
            {"class": "relative"},
            Element(
                "div",
                {"class": "absolute inset-y-0 left-0 pl-2 flex items-center pointer-events-none"},
                icon(SEARCH, "w-4 h-4 text-gray-400"),
            ),
            Element(
                "input",
                {
                    "type": "text",
                    "x-model": "search",
                    "placeholder": config.search_placeholder,
                    "aria-label": config.search_placeholder,
                    "autocomplete": "off",
                    "class": (
                        "block w-full pl-8 pr-3 py-2 border border-gray-300 rounded-md leading-5 "
                        "bg-white placeholder-gray-500 focus:outline-none focus:placeholder-gray-400 "
                        "focus:ring-1 focus:ring-blue-500 focus:border-blue-500 sm:text-sm"
                    ),
                },
            ),
        ),
    )


def _option_rows() -> Element:
    row = Element(
        "div",
        {
            "@click": "selectOption(option)",
            "role": "option",
            ":aria-selected": "isSelected(option)",
            ":aria-disabled": "option.disabled",
            "class": "cursor-pointer select-none relative py-2 pl-3 pr-9 hover:bg-blue-50",
            ":class": (
                "{ 'bg-blue-50': isSelected(option), "
                "'opacity-50 cursor-not-allowed': option.disabled }"
            ),
        },
        Element(
            "span",
            {
                "class": "block truncate",
                ":class": "{ 'font-semibold': isSelected(option) }",
                "x-text": "option.text",
            },
        ),
        Element(
            "span",
            {
                "x-show": "isSelected(option)",
                "class": "absolute inset-y-0 right-0 flex items-center pr-4 text-blue-600",
            },
            icon(CHECK, "w-4 h-4"),
        ),
    )
    return Element(
        "template",
        {"x-for": "(option, index) in filteredOptions()", ":key": "index"},
        row,
    )


def _hidden_inputs(config: SelectConfig, selected: str | list[str]) -> Element:
    if config.multiple:
        # One input per selected value: name[0], name[1], ...
        return Element(
            "template",
            {"x-for": "(value, index) in selected", ":key": "index"},
            Element(
                "input",
                {
                    "type": "hidden",
                    ":name": f"{js_string(config.input_name)} + '[' + index + ']'",
                    ":value": "value",
                },
            ),
        )
    return Element(
        "input",
        {
            "type": "hidden",
            "name": config.input_name,
            "value": selected if isinstance(selected, str) else "",
            ":value": "selected",
        },
    )


def build_select_element(options: Sequence[Option], config: SelectConfig) -> Element:
    """Build the select's element tree, state descriptor included."""
    state = build_select_state(options, config)
    preview = SelectState(options, multiple=config.multiple, placeholder=config.display_placeholder)

    panel = Element(
        "div",
        {
            "x-show": "open",
            "@click.outside": "close()",
            **_TRANSITION,
            "role": "listbox",
            "aria-multiselectable": "true" if config.multiple else None,
            "class": (
                f"absolute z-10 mt-1 w-full bg-white shadow-lg {config.max_height_class} "
                "rounded-md py-1 text-base ring-1 ring-black ring-opacity-5 overflow-auto "
                "focus:outline-none sm:text-sm"
            ),
            "x-cloak": True,
        },
    )
    if config.searchable:
        panel.append(_search_box(config))
    if config.multiple:
        panel.append(
            Element(
                "div",
                {
                    "@click": "selectAll()",
                    "x-show": "filteredOptions().length > 0",
                    "class": (
                        "cursor-pointer select-none py-2 px-3 text-blue-600 font-medium "
                        "border-b border-gray-100 hover:bg-blue-50"
                    ),
                },
                config.select_all_text,
            )
        )
    panel.append(
        Element(
            "div",
            {"x-show": "filteredOptions().length === 0", "class": "px-3 py-2 text-gray-500"},
            config.no_results_text,
        )
    )
    panel.append(_option_rows())

    wrapper = Element(
        "div",
        {
            "class": "relative w-full",
            "x-data": state,
            "data-component": "select",
            "data-input-name": config.input_name,
        },
    )
    wrapper.add_class(config.css_class)
    if config.label:
        wrapper.append(
            Element(
                "label",
                {"for": config.input_id, "class": "block text-sm font-medium text-gray-700 mb-1"},
                config.label,
            )
        )
    wrapper.append(
        Element("div", {"class": "relative"}, _toggle_button(config, preview.get_display_text()), panel)
    )
    wrapper.append(_hidden_inputs(config, preview.selected))
    return wrapper


def render_select(options: Sequence[Option], config: SelectConfig) -> SelectRender:
    """Render a select.

    Parameters
    ----------
    options : sequence of Option
        The collected options, in display order.
    config : SelectConfig
        Rendering options.

    Returns
    -------
    SelectRender
        ``html`` is the complete component (descriptor included in its
        ``x-data`` attribute); ``state`` is the descriptor on its own.
    """
    element = build_select_element(options, config)
    state = element.attrs["x-data"]
    return SelectRender(html=element.render(), state=str(state))


# =============================================================================
# Component
# =============================================================================


class Select(BaseModel):
    """A select component: configuration plus its option sources.

    Config fields may be passed directly (``Select(input_name="x")``) or as
    ``config=SelectConfig(...)``.

    Attributes
    ----------
        config: Rendering options
        options: Declarative options (Option, dict or plain string)
        records: Optional record source appended after the declarative options
        accessor: ``accessor(record) -> (value, text)`` for the record source
        current: Bound current value (string, or collection for multiple)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    config: SelectConfig = Field(default_factory=SelectConfig)
    options: list[Option] = Field(default_factory=list)
    records: Any = None
    accessor: Accessor | None = None
    current: Any = None

    @model_validator(mode="before")
    @classmethod
    def split_config_fields(cls, data: Any) -> Any:
        """Gather SelectConfig fields given at the top level into ``config``."""
        if not isinstance(data, dict) or "config" in data:
            return data
        config_keys = SelectConfig.model_fields.keys() & data.keys()
        if not config_keys:
            return data
        rest = {k: v for k, v in data.items() if k not in config_keys}
        rest["config"] = SelectConfig(**{k: data[k] for k in config_keys})
        return rest

    @field_validator("options", mode="before")
    @classmethod
    def normalize_options(cls, v: Any) -> list[Option]:
        """Accept list of dicts, strings or Option objects."""
        if not v:
            return []
        return collect_options(v)

    @field_validator("records", mode="before")
    @classmethod
    def materialize_records(cls, v: Any) -> Any:
        """Read one-shot iterables (generators) once."""
        if v is None or isinstance(v, (list, tuple)):
            return v
        return list(v)

    def collect_options(self) -> list[Option]:
        """Declarative options followed by those read from ``records``."""
        return collect_options(
            self.options,
            records=self.records,
            accessor=self.accessor,
            current=self.current,
            multiple=self.config.multiple,
        )

    def render(self) -> SelectRender:
        """Render markup and state descriptor."""
        return render_select(self.collect_options(), self.config)

    def build_html(self) -> str:
        """Build the component HTML."""
        return self.render().html
