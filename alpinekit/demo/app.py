"""FastAPI application serving the demo forms page.

Routes:
    GET  /        redirect to /forms
    GET  /forms   the forms page (shows a pending flash message as a toast)
    POST /forms   validate a submission; re-render with errors (422) or
                  redirect back with a flash message (303)
    GET  /health  liveness probe
"""

from __future__ import annotations

import re

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from pydantic import ValidationError

from .. import log
from .models import ContactForm, build_forms_view_model
from .pages import field_label, render_forms_page


FLASH_COOKIE = "alpinekit_flash"
FLASH_MESSAGES = {
    "submitted": "Thank you! Your form has been submitted successfully.",
}

# Multi-select inputs post as name[0], name[1], ...
_INDEXED_NAME = re.compile(r"^(?P<name>[^\[\]]+)\[(?P<index>\d+)\]$")

_LIST_FIELDS = ("interested_services", "team_members")
_CHECKBOX_FIELDS = ("subscribe_to_newsletter", "agree_to_terms")


def parse_form_items(items: list[tuple[str, Any]]) -> dict[str, Any]:
    """Fold posted (name, value) pairs into ``ContactForm`` input.

    Indexed names are gathered into lists ordered by index; unchecked
    checkboxes (absent from the post) become False.
    """
    data: dict[str, Any] = {}
    indexed: dict[str, dict[int, str]] = {}
    for key, value in items:
        if not isinstance(value, str):
            continue
        match = _INDEXED_NAME.match(key)
        if match:
            indexed.setdefault(match["name"], {})[int(match["index"])] = value
        else:
            data[key] = value

    for name, values in indexed.items():
        data[name] = [values[i] for i in sorted(values)]
    for name in _LIST_FIELDS:
        data.setdefault(name, [])
    for name in _CHECKBOX_FIELDS:
        data.setdefault(name, False)
    return data


def validation_messages(exc: ValidationError) -> dict[str, str]:
    """Map validation errors to field name -> message (first error wins)."""
    messages: dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        name = str(loc[0]) if loc else "__root__"
        if name in messages:
            continue
        if err["type"] == "missing" or (
            err["type"] == "string_too_short" and err.get("ctx", {}).get("min_length") == 1
        ):
            messages[name] = f"{field_label(name)} is required"
        else:
            messages[name] = err["msg"].removeprefix("Value error, ")
    return messages


def create_app() -> FastAPI:
    """Create the demo application."""
    app = FastAPI(title="alpinekit demo")

    @app.get("/", include_in_schema=False)
    async def index() -> RedirectResponse:
        return RedirectResponse(url="/forms", status_code=302)

    @app.get("/forms", response_class=HTMLResponse)
    async def forms_page(request: Request) -> HTMLResponse:
        flash = FLASH_MESSAGES.get(request.cookies.get(FLASH_COOKIE, ""))
        response = HTMLResponse(render_forms_page(build_forms_view_model(), flash=flash))
        if FLASH_COOKIE in request.cookies:
            response.delete_cookie(key=FLASH_COOKIE)
        return response

    @app.post("/forms", response_class=HTMLResponse, response_model=None)
    async def submit_form(request: Request) -> HTMLResponse | RedirectResponse:
        posted = await request.form()
        data = parse_form_items(list(posted.multi_items()))
        try:
            form = ContactForm.model_validate(data)
        except ValidationError as exc:
            errors = validation_messages(exc)
            log.debug(f"Form rejected: {', '.join(sorted(errors))}")
            view = build_forms_view_model(form=data)
            return HTMLResponse(render_forms_page(view, errors=errors), status_code=422)

        log.info(f"Form submitted: {form.model_dump(mode='json')}")
        response = RedirectResponse(url="/forms", status_code=303)
        response.set_cookie(key=FLASH_COOKIE, value="submitted", httponly=True, samesite="lax")
        return response

    @app.get("/health", include_in_schema=False)
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return app
