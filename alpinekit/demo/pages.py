"""Forms page of the demo application."""

from __future__ import annotations

from datetime import date
from typing import Any

from ..markup import Element
from ..page import Page
from .models import ContactForm, FormsViewModel


PAGE_TITLE = "Forms - alpinekit demo"
ERROR_SUMMARY = "Please correct the highlighted fields."

CONTACT_METHODS = [
    {"value": "email", "text": "Email"},
    {"value": "phone", "text": "Phone"},
    {"value": "sms", "text": "Text message"},
]
SERVICE_RATINGS = [
    {"value": "1", "text": "1 - Poor"},
    {"value": "2", "text": "2 - Fair"},
    {"value": "3", "text": "3 - Good"},
    {"value": "4", "text": "4 - Very good"},
    {"value": "5", "text": "5 - Excellent"},
]

_INPUT_CLASS = (
    "mt-1 block w-full rounded-md border border-gray-300 px-3 py-2 shadow-sm "
    "focus:border-blue-500 focus:outline-none focus:ring-1 focus:ring-blue-500 sm:text-sm"
)
_SECTION_CLASS = "bg-white shadow rounded-lg p-6 space-y-4"

# Component markup; {placeholders} are filled with pre-rendered fields
FORMS_TEMPLATE = """
<ak-toast-container position="top-right" default-duration="4000"></ak-toast-container>
<main class="max-w-3xl mx-auto py-10 px-4 space-y-6">
  <h1 class="text-2xl font-bold">Contact us</h1>
  <form method="post" action="/forms" class="space-y-6" novalidate>
    <section class="{section}">
      <h2 class="text-lg font-semibold">About you</h2>
      <div class="grid grid-cols-1 gap-4 sm:grid-cols-2">
        {first_name}
        {last_name}
        {email}
        {phone}
      </div>
      <ak-select name="country" label="Country" placeholder="Select a country"
                 options-source="countries" value-field="value" text-field="text"></ak-select>
    </section>

    <section class="{section}">
      <h2 class="text-lg font-semibold">Your project</h2>
      <ak-select for="form.department" label="Department" placeholder="Choose a department"
                 searchable="false" options-source="departments" value-field="value" text-field="text">
        <ak-option value="">No preference</ak-option>
      </ak-select>
      {department_error}
      <ak-select for="form.interested_services" multiple label="Services of Interest"
                 placeholder="Pick services" search-placeholder="Search services..."
                 options-source="services" value-field="value" text-field="text"></ak-select>
      <ak-select for="form.team_members" multiple label="Team Members" placeholder="Add people"
                 no-results-text="No matching people" select-all-text="Everyone"
                 options-source="users" value-field="id" text-field="name"></ak-select>
      <div class="grid grid-cols-1 gap-4 sm:grid-cols-3">
        {preferred_contact_date}
        {project_start_date}
        {project_end_date}
      </div>
      {form_error}
    </section>

    <section class="{section}">
      <h2 class="text-lg font-semibold">Message</h2>
      {message}
      <div class="grid grid-cols-1 gap-4 sm:grid-cols-2">
        <ak-select for="form.preferred_contact_method" label="Preferred Contact Method"
                   searchable="false" options-source="contact_methods"
                   value-field="value" text-field="text"></ak-select>
        <ak-select for="form.service_rating" label="Service Rating" placeholder="Not rated"
                   searchable="false" options-source="service_ratings"
                   value-field="value" text-field="text"></ak-select>
      </div>
      {service_rating_error}
      {subscribe_to_newsletter}
      {agree_to_terms}
    </section>

    <div class="flex justify-end">
      <button type="submit"
              class="inline-flex items-center rounded-md bg-blue-600 px-4 py-2 text-white font-medium shadow-sm hover:bg-blue-700">
        Submit
      </button>
    </div>
  </form>
</main>
"""


def field_label(name: str) -> str:
    """Display label of a ``ContactForm`` field."""
    field = ContactForm.model_fields.get(name)
    return (field.title if field is not None else None) or name.replace("_", " ").title()


def _error(name: str, errors: dict[str, str]) -> str:
    if name not in errors:
        return ""
    return Element(
        "p", {"class": "mt-1 text-sm text-red-600", "data-error-for": name}, errors[name]
    ).render()


def _input_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _text_field(
    name: str, form: dict[str, Any], errors: dict[str, str], input_type: str = "text"
) -> str:
    input_id = f"field-{name}"
    control = Element(
        "input",
        {
            "type": input_type,
            "id": input_id,
            "name": name,
            "value": _input_value(form.get(name)),
            "class": _INPUT_CLASS,
            "aria-invalid": "true" if name in errors else None,
        },
    )
    if name in errors:
        control.add_class("border-red-500")
    label = Element(
        "label", {"for": input_id, "class": "block text-sm font-medium text-gray-700"}, field_label(name)
    )
    return Element("div", {}, label, control).render() + _error(name, errors)


def _textarea_field(name: str, form: dict[str, Any], errors: dict[str, str]) -> str:
    input_id = f"field-{name}"
    return (
        Element(
            "div",
            {},
            Element(
                "label",
                {"for": input_id, "class": "block text-sm font-medium text-gray-700"},
                field_label(name),
            ),
            Element(
                "textarea",
                {"id": input_id, "name": name, "rows": "4", "class": _INPUT_CLASS},
                _input_value(form.get(name)),
            ),
        ).render()
        + _error(name, errors)
    )


def _checkbox_field(name: str, form: dict[str, Any], errors: dict[str, str]) -> str:
    input_id = f"field-{name}"
    return (
        Element(
            "div",
            {"class": "flex items-center gap-2"},
            Element(
                "input",
                {
                    "type": "checkbox",
                    "id": input_id,
                    "name": name,
                    "value": "true",
                    "checked": bool(form.get(name)),
                    "class": "h-4 w-4 rounded border-gray-300 text-blue-600",
                },
            ),
            Element("label", {"for": input_id, "class": "text-sm text-gray-700"}, field_label(name)),
        ).render()
        + _error(name, errors)
    )


def build_forms_template(view: FormsViewModel, errors: dict[str, str]) -> str:
    """Fill the page template with the plain form fields."""
    form = view.form
    return FORMS_TEMPLATE.format(
        section=_SECTION_CLASS,
        first_name=_text_field("first_name", form, errors),
        last_name=_text_field("last_name", form, errors),
        email=_text_field("email", form, errors, input_type="email"),
        phone=_text_field("phone", form, errors, input_type="tel"),
        preferred_contact_date=_text_field("preferred_contact_date", form, errors, "date"),
        project_start_date=_text_field("project_start_date", form, errors, "date"),
        project_end_date=_text_field("project_end_date", form, errors, "date"),
        department_error=_error("department", errors),
        form_error=_error("__root__", errors),
        message=_textarea_field("message", form, errors),
        service_rating_error=_error("service_rating", errors),
        subscribe_to_newsletter=_checkbox_field("subscribe_to_newsletter", form, errors),
        agree_to_terms=_checkbox_field("agree_to_terms", form, errors),
    )


def render_forms_page(
    view: FormsViewModel,
    errors: dict[str, str] | None = None,
    flash: str | None = None,
) -> str:
    """Render the complete forms page.

    Parameters
    ----------
    view : FormsViewModel
        Current form values and option sources.
    errors : dict, optional
        Field name -> message for a failed submission; ``"__root__"`` holds
        errors not tied to one field.
    flash : str, optional
        Success message shown as a toast after load.

    Returns
    -------
    str
        The HTML document.
    """
    errors = errors if errors is not None else view.errors
    # Every field is bindable even when a submission omitted it
    form = {name: None for name in ContactForm.model_fields} | view.form
    context = {
        "form": form,
        "countries": view.countries,
        "departments": view.departments,
        "services": view.services,
        "users": view.users,
        "contact_methods": CONTACT_METHODS,
        "service_ratings": SERVICE_RATINGS,
    }

    page = Page(title=PAGE_TITLE)
    page.add_template(build_forms_template(view, errors), context)
    if errors:
        page.add_toast(ERROR_SUMMARY, "error")
    if flash:
        page.add_toast(flash, "success")
    return page.render()

