"""Tests for <ak-*> template tag expansion."""

from __future__ import annotations

from dataclasses import dataclass, field
from html import unescape

import pytest

from alpinekit.exceptions import ComponentError, TemplateBindingError
from alpinekit.tags import expand_tags, parse_attributes, parse_bool, resolve
from alpinekit.toast import TOAST_RUNTIME_KEY


@dataclass
class Form:
    country: str | None = None
    services: list[str] = field(default_factory=list)


def expand(*args: object, **kwargs: object) -> str:
    """Expand and decode HTML entities so x-data literals read as written."""
    return unescape(expand_tags(*args, **kwargs))  # type: ignore[arg-type]


@pytest.fixture
def context(countries: list[dict[str, str]]) -> dict[str, object]:
    return {
        "form": Form(country="uk", services=["design"]),
        "lookups": {"countries": countries},
        "services": [
            {"id": "design", "label": "UI/UX Design"},
            {"id": "testing", "label": "Quality Assurance"},
        ],
    }


class TestParsing:
    """Tests for attribute helpers."""

    def test_parse_attributes(self) -> None:
        attrs = parse_attributes(' name="x" multiple placeholder=\'It&#x27;s\' DATA-A="1" ')
        assert attrs == {"name": "x", "multiple": None, "placeholder": "It's", "data-a": "1"}

    @pytest.mark.parametrize("value", [None, "", "true", "TRUE", "multiple", "1"])
    def test_parse_bool_true(self, value: str | None) -> None:
        assert parse_bool(value, "multiple", "ak-select") is True

    @pytest.mark.parametrize("value", ["false", "False", "0", "no"])
    def test_parse_bool_false(self, value: str) -> None:
        assert parse_bool(value, "multiple", "ak-select") is False

    def test_parse_bool_invalid(self) -> None:
        with pytest.raises(ComponentError, match="Invalid boolean"):
            parse_bool("maybe", "multiple", "ak-select")


class TestResolve:
    """Tests for dotted-path resolution."""

    def test_mapping_and_attribute_paths(self, context: dict[str, object]) -> None:
        assert resolve(context, "form.country") == "uk"
        assert len(resolve(context, "lookups.countries")) == 3

    def test_none_value_resolves(self) -> None:
        assert resolve({"form": Form()}, "form.country") is None

    def test_missing_key(self, context: dict[str, object]) -> None:
        with pytest.raises(TemplateBindingError) as info:
            resolve(context, "lookups.regions", "ak-select")
        assert info.value.expression == "lookups.regions"
        assert info.value.component == "ak-select"

    def test_missing_attribute(self, context: dict[str, object]) -> None:
        with pytest.raises(TemplateBindingError, match="no attribute 'city'"):
            resolve(context, "form.city")


class TestExpandSelect:
    """Tests for <ak-select> expansion."""

    def test_plain_markup_untouched(self) -> None:
        template = "<div><p>Hello</p></div>"
        assert expand(template) == template

    def test_declared_options(self) -> None:
        html = expand(
            '<ak-select name="size">'
            '<ak-option value="s">Small</ak-option>'
            '<ak-option value="m" selected>Medium</ak-option>'
            '<ak-option value="l" disabled="true">Large</ak-option>'
            "</ak-select>"
        )
        assert "<ak-" not in html
        assert "{value: 's', text: 'Small', disabled: false}" in html
        assert "{value: 'l', text: 'Large', disabled: true}" in html
        assert "selected: 'm'" in html
        assert ">Medium</span>" in html

    def test_quoted_gt_in_attributes(self) -> None:
        html = expand(
            '<ak-select name="n" placeholder="a > b" label="Size > 10">'
            '<ak-option value="x">X</ak-option></ak-select>'
        )
        assert "<ak-" not in html
        assert "return 'a > b';" in html
        assert ">Size > 10</label>" in html
        assert "{value: 'x', text: 'X', disabled: false}" in html

    def test_option_text_defaults_to_value(self) -> None:
        html = expand('<ak-select name="x"><ak-option value="only"></ak-option></ak-select>')
        assert "{value: 'only', text: 'only', disabled: false}" in html

    def test_option_text_entities_decoded_then_escaped(self) -> None:
        raw = expand_tags(
            '<ak-select name="x"><ak-option value="ob">O&#x27;Brien &amp; Co</ak-option></ak-select>'
        )
        assert "O\\&#x27;Brien &amp; Co" in raw
        assert "text: 'O\\'Brien & Co'" in unescape(raw)

    def test_options_source_with_for_binding(self, context: dict[str, object]) -> None:
        html = expand(
            '<ak-select for="form.country" options-source="lookups.countries">'
            '<ak-option value="">None</ak-option></ak-select>',
            context,
        )
        assert 'data-input-name="country"' in html
        assert "selected: 'uk'" in html
        assert html.index("text: 'None'") < html.index("text: 'United States'")
        assert ">United Kingdom</span>" in html

    def test_custom_fields_and_multiple(self, context: dict[str, object]) -> None:
        html = expand(
            '<ak-select for="form.services" multiple options-source="services" '
            'value-field="id" text-field="label"></ak-select>',
            context,
        )
        assert "selected: ['design']" in html
        assert "text: 'Quality Assurance'" in html
        assert "selectAll()" in html

    def test_name_overrides_for(self, context: dict[str, object]) -> None:
        html = expand(
            '<ak-select name="home_country" for="form.country" options-source="lookups.countries"></ak-select>',
            context,
        )
        assert 'data-input-name="home_country"' in html

    def test_text_attributes(self) -> None:
        html = expand(
            '<ak-select name="c" placeholder="Pick" search-placeholder="Find..." '
            'no-results-text="Nothing" label="Country" id="country-select" '
            'class="w-64" max-height="max-h-40"></ak-select>'
        )
        assert "return 'Pick';" in html
        assert 'placeholder="Find..."' in html
        assert ">Nothing</div>" in html
        assert '<label for="country-select"' in html
        assert 'id="country-select"' in html
        assert "relative w-full w-64" in html
        assert "max-h-40" in html

    def test_searchable_false(self) -> None:
        html = expand('<ak-select name="c" searchable="false"></ak-select>')
        assert 'x-model="search"' not in html

    def test_unresolvable_source_raises(self) -> None:
        with pytest.raises(TemplateBindingError) as info:
            expand('<ak-select name="c" options-source="missing"></ak-select>', {})
        assert info.value.expression == "missing"

    def test_unresolvable_for_raises(self, context: dict[str, object]) -> None:
        with pytest.raises(TemplateBindingError):
            expand(
                '<ak-select for="form.city" options-source="lookups.countries"></ak-select>', context
            )

    def test_missing_name_raises(self) -> None:
        with pytest.raises(ComponentError, match="requires a 'name'"):
            expand("<ak-select></ak-select>")

    def test_several_selects(self, context: dict[str, object]) -> None:
        html = expand(
            '<ak-select name="a"></ak-select><hr><ak-select name="b"></ak-select>', context
        )
        assert html.count('data-component="select"') == 2
        assert "<hr>" in html


class TestExpandToastContainer:
    """Tests for <ak-toast-container> expansion."""

    def test_attributes(self) -> None:
        html = expand_tags(
            '<ak-toast-container position="bottom-left" max-width="max-w-md" z-index="z-40" '
            'enable-sound default-duration="5000" class="pb-8"></ak-toast-container>'
        )
        assert "bottom-4 left-4" in html
        assert "max-w-md" in html
        assert "z-40" in html
        assert "pb-8" in html
        assert "defaultDuration: 5000, enableSound: true" in html

    def test_self_closing(self) -> None:
        html = expand_tags('<ak-toast-container position="top-center" />')
        assert 'data-component="toast-container"' in html
        assert "<ak-" not in html

    def test_quoted_gt_and_slash_in_attributes(self) -> None:
        html = expand('<ak-toast-container default-sound="/sounds/ding.mp3?v=>1" enable-sound />')
        assert "<ak-" not in html
        assert "enableSound: true, defaultSound: '/sounds/ding.mp3?v=>1'" in html

    def test_runtime_emitted_once_per_template(self) -> None:
        html = expand_tags(
            "<ak-toast-container></ak-toast-container>"
            '<ak-toast-container position="bottom-right"/>'
            "<ak-toast-container></ak-toast-container>"
        )
        assert html.count('data-component="toast-container"') == 3
        assert html.count("if (!window.toast)") == 1

    def test_shared_installed_set(self) -> None:
        installed = {TOAST_RUNTIME_KEY}
        html = expand_tags("<ak-toast-container></ak-toast-container>", installed=installed)
        assert "window.toast" not in html

    def test_installed_set_updated(self) -> None:
        installed: set[str] = set()
        expand_tags("<ak-toast-container/>", installed=installed)
        assert TOAST_RUNTIME_KEY in installed

    def test_invalid_duration(self) -> None:
        with pytest.raises(ComponentError, match="default-duration"):
            expand_tags('<ak-toast-container default-duration="soon"></ak-toast-container>')
