"""alpinekit - server-rendered UI components wired to Alpine.js.

This package renders a searchable single/multi select and a toast
notification container as HTML carrying Alpine.js state, plus the page
assembly and template tags needed to use them.
"""

from .config import (
    AlpineKitSettings,
    AssetSettings,
    LogSettings,
    SelectSettings,
    ServerSettings,
    ToastSettings,
    get_settings,
)
from .exceptions import AlpineKitException, ComponentError, TemplateBindingError
from .markup import Element, Markup, escape, js_string
from .options import Option, OptionCollector, collect_options, field_accessor
from .page import Page
from .select import Select, SelectConfig, SelectRender, render_select
from .state import (
    EventChannel,
    ManualScheduler,
    SelectState,
    ToastApi,
    ToastPayload,
    ToastStore,
    get_toast_api,
    install_toast_api,
)
from .tags import expand_tags
from .toast import ToastConfig, ToastRender, render_toast_container, toast_call


__version__ = "0.1.0"

__all__ = [
    "AlpineKitException",
    "AlpineKitSettings",
    "AssetSettings",
    "ComponentError",
    "Element",
    "EventChannel",
    "LogSettings",
    "ManualScheduler",
    "Markup",
    "Option",
    "OptionCollector",
    "Page",
    "Select",
    "SelectConfig",
    "SelectRender",
    "SelectSettings",
    "SelectState",
    "ServerSettings",
    "TemplateBindingError",
    "ToastApi",
    "ToastConfig",
    "ToastPayload",
    "ToastRender",
    "ToastSettings",
    "ToastStore",
    "__version__",
    "collect_options",
    "escape",
    "expand_tags",
    "field_accessor",
    "get_settings",
    "get_toast_api",
    "install_toast_api",
    "js_string",
    "render_select",
    "render_toast_container",
    "toast_call",
]
