"""HTML document builder for pages using alpinekit components."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from . import log
from .config import get_settings
from .markup import Element, Markup, escape, script
from .select import Select
from .state import ToastPayload, ToastType
from .tags import expand_tags
from .toast import TOAST_RUNTIME_KEY, ToastConfig, flash_script, render_toast_container


if TYPE_CHECKING:
    from .config import AssetSettings


CLOAK_CSS = "[x-cloak] { display: none !important; }"


class Page:
    """A full HTML document with Alpine.js wiring.

    Scripts and styles registered with a key are installed once no matter
    how many components ask for them.

    Example:
        page = Page(title="Forms")
        page.add_select(Select(input_name="country", options=["ca", "us"]))
        page.add_toast_container(ToastConfig(position="bottom-right"))
        page.add_toast("Saved", "success")
        html = page.render()
    """

    def __init__(self, title: str = "", lang: str = "en", assets: AssetSettings | None = None) -> None:
        self.title = title
        self.lang = lang
        self.assets = assets or get_settings().asset
        self._body: list[str] = []
        self._head: list[str] = []
        self._scripts: list[str] = []
        self._installed: set[str] = set()
        self._toasts: list[ToastPayload] = []
        self.add_style(CLOAK_CSS, key="x-cloak")

    def _install_once(self, key: str | None) -> bool:
        """Return True the first time ``key`` is seen (always for None)."""
        if key is None:
            return True
        if key in self._installed:
            log.debug(f"Page asset '{key}' already installed")
            return False
        self._installed.add(key)
        return True

    def is_installed(self, key: str) -> bool:
        return key in self._installed

    def add(self, markup: str | Element) -> Page:
        """Append body content (strings are treated as trusted markup)."""
        self._body.append(markup.render() if isinstance(markup, Element) else str(markup))
        return self

    def add_style(self, css: str, key: str | None = None) -> Page:
        if self._install_once(key):
            self._head.append(Element("style", {}, Markup(css)).render())
        return self

    def add_script(self, source: str, key: str | None = None) -> Page:
        """Append an inline script to the end of the body."""
        if self._install_once(key):
            self._scripts.append(script(source))
        return self

    def add_select(self, select: Select) -> Page:
        return self.add(select.build_html())

    def add_toast_container(self, config: ToastConfig | None = None) -> Page:
        """Mount a toast container; its runtime script is installed once."""
        rendered = render_toast_container(config or ToastConfig())
        self.add(rendered.html)
        # Runtime must be defined before Alpine evaluates x-data
        if self._install_once(TOAST_RUNTIME_KEY):
            self._head.append(script(rendered.script))
        return self

    def add_template(self, template: str, context: Mapping[str, Any] | None = None) -> Page:
        """Expand ``<ak-*>`` elements in ``template`` and append the result.

        The toast runtime script is shared with containers added through
        ``add_toast_container``.
        """
        return self.add(expand_tags(template, context, installed=self._installed))

    def add_toast(
        self,
        message: str | ToastPayload,
        type: ToastType = "default",  # noqa: A002
        duration: int | None = None,
    ) -> Page:
        """Queue a notification shown once the page has loaded."""
        if not isinstance(message, ToastPayload):
            message = ToastPayload(message=message, type=type, duration=duration)
        self._toasts.append(message)
        return self

    def render(self) -> str:
        """Render the complete document."""
        head = [
            '<meta charset="utf-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1">',
            f"<title>{escape(self.title)}</title>",
        ]
        if self.assets.tailwind:
            head.append(Element("script", {"src": self.assets.tailwind_url}).render())
        head.extend(self._head)
        head.append(Element("script", {"defer": True, "src": self.assets.alpine_src()}).render())

        body = list(self._body)
        body.extend(self._scripts)
        if self._toasts:
            if not self.is_installed(TOAST_RUNTIME_KEY):
                log.warn("Page has queued toasts but no toast container")
            body.append(flash_script(self._toasts))

        return (
            "<!DOCTYPE html>\n"
            f'<html lang="{escape(self.lang)}">\n'
            "<head>\n" + "\n".join(head) + "\n</head>\n"
            '<body class="bg-gray-50 text-gray-900">\n' + "\n".join(body) + "\n</body>\n"
            "</html>\n"
        )

