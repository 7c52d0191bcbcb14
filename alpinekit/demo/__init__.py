"""Demo forms application built with alpinekit components."""

from .app import create_app
from .models import (
    ContactForm,
    CountryOption,
    DepartmentOption,
    FormsViewModel,
    ServiceOption,
    UserInfo,
    build_forms_view_model,
)
from .pages import render_forms_page


__all__ = [
    "ContactForm",
    "CountryOption",
    "DepartmentOption",
    "FormsViewModel",
    "ServiceOption",
    "UserInfo",
    "build_forms_view_model",
    "create_app",
    "render_forms_page",
]
