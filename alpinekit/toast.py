"""Toast notification container and the global ``window.toast`` API.

A container renders the live toast list of an Alpine component created by
``window.toastContainer(config)`` and listens for the page-wide ``toast``
event. The runtime script (keyframe styles, the component factory and the
``window.toast`` API) is identical for every container and guards each
installation with a presence check, so mounting several containers on one
page installs everything exactly once.

Usage:
    from alpinekit.toast import ToastConfig, render_toast_container

    rendered = render_toast_container(ToastConfig(position="bottom-right"))
    page_html = rendered.html + f"<script>{rendered.script}</script>"

    # In the browser:
    #   window.toast.success("Saved", 2000)
"""

from __future__ import annotations

import uuid

from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import log
from .alpine import JsExpression, js_literal
from .config import get_settings
from .icons import CLOSE, TOAST_ICONS, icon
from .markup import Element, Markup, script
from .state import TOAST_TYPES, ToastPayload


STYLE_ELEMENT_ID = "alpinekit-toast-animations"
TOAST_RUNTIME_KEY = "alpinekit-toast-runtime"

# Position -> layout classes; unknown positions use top-right
POSITION_CLASSES: dict[str, str] = {
    "top-left": "top-4 left-4",
    "top-center": "top-4 left-1/2 transform -translate-x-1/2",
    "top-right": "top-4 right-4",
    "bottom-left": "bottom-4 left-4",
    "bottom-center": "bottom-4 left-1/2 transform -translate-x-1/2",
    "bottom-right": "bottom-4 right-4",
}
DEFAULT_POSITION = "top-right"

# Toast type -> (container accent, progress bar, icon color)
TOAST_VARIANTS: dict[str, tuple[str, str, str]] = {
    "success": (
        "border-l-4 border-green-500 bg-gradient-to-r from-green-50 to-white",
        "bg-green-500",
        "text-green-500",
    ),
    "error": (
        "border-l-4 border-red-500 bg-gradient-to-r from-red-50 to-white",
        "bg-red-500",
        "text-red-500",
    ),
    "info": (
        "border-l-4 border-blue-500 bg-gradient-to-r from-blue-50 to-white",
        "bg-blue-500",
        "text-blue-500",
    ),
    "warning": (
        "border-l-4 border-yellow-500 bg-gradient-to-r from-yellow-50 to-white",
        "bg-yellow-500",
        "text-yellow-500",
    ),
    "default": (
        "border-l-4 border-gray-500 bg-gradient-to-r from-gray-50 to-white",
        "bg-gray-500",
        "text-gray-500",
    ),
}


def _toast_default(name: str) -> Any:
    return lambda: getattr(get_settings().toast, name)


class ToastConfig(BaseModel):
    """Settings for one toast container."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    position: str = Field(default_factory=_toast_default("position"), validate_default=True)
    max_width_class: str = Field(default_factory=_toast_default("max_width_class"))
    z_index_class: str = Field(default_factory=_toast_default("z_index_class"))
    enable_sound: bool = Field(default_factory=_toast_default("enable_sound"))
    default_duration: int = Field(default_factory=_toast_default("default_duration"), ge=0)
    default_sound: str | None = Field(default_factory=_toast_default("default_sound"))
    css_class: str = ""

    @field_validator("position", mode="before")
    @classmethod
    def normalize_position(cls, v: Any) -> str:
        """Positions are matched case-insensitively."""
        return str(v or "").strip().lower()

    @property
    def position_classes(self) -> str:
        """Layout classes for the configured position."""
        classes = POSITION_CLASSES.get(self.position)
        if classes is None:
            log.debug(f"Unknown toast position '{self.position}'; using {DEFAULT_POSITION}")
            return POSITION_CLASSES[DEFAULT_POSITION]
        return classes

    def client_config(self) -> dict[str, Any]:
        """Settings passed to ``window.toastContainer`` in the browser."""
        return {
            "defaultDuration": self.default_duration,
            "enableSound": self.enable_sound,
            "defaultSound": self.default_sound,
        }


class ToastRender(NamedTuple):
    """Output of a toast container render."""

    html: str
    script: str


TOAST_RUNTIME_SCRIPT = f"""
(function () {{
  // Keyframes are added once per page
  if (!document.getElementById('{STYLE_ELEMENT_ID}')) {{
    const style = document.createElement('style');
    style.id = '{STYLE_ELEMENT_ID}';
    style.textContent = `
      @keyframes shrink {{
        0% {{ width: 100%; }}
        100% {{ width: 0%; }}
      }}
      @keyframes bounce-in {{
        0% {{ transform: scale(0.8); opacity: 0; }}
        70% {{ transform: scale(1.05); opacity: 1; }}
        100% {{ transform: scale(1); opacity: 1; }}
      }}
      .toast-bounce-in {{
        animation: bounce-in 0.5s ease-out forwards;
      }}
    `;
    document.head.appendChild(style);
  }}

  if (!window.toastContainer) {{
    window.toastContainer = function (config) {{
      config = config || {{}};
      const defaultDuration =
        typeof config.defaultDuration === 'number' ? config.defaultDuration : 3000;
      return {{
        toasts: [],
        init() {{}},
        add(toast) {{
          const id = Date.now().toString() + Math.random().toString(36).substring(2, 11);
          const duration = toast.duration || defaultDuration;
          this.toasts.push({{
            id,
            message: toast.message,
            type: toast.type || 'default',
            duration,
          }});

          const sound = toast.sound || config.defaultSound;
          if (config.enableSound && sound) {{
            try {{
              const audio = new Audio(sound);
              audio.volume = 0.5;
              audio.play().catch((e) => console.log('Audio play failed:', e));
            }} catch (e) {{
              console.log('Audio play failed:', e);
            }}
          }}

          setTimeout(() => {{
            this.remove(id);
          }}, duration);
          return id;
        }},
        remove(id) {{
          this.toasts = this.toasts.filter((toast) => toast.id !== id);
        }},
      }};
    }};
  }}

  if (!window.toast) {{
    window.toast = {{
      show(message, type = 'default', duration = undefined, options = {{}}) {{
        window.dispatchEvent(
          new CustomEvent('toast', {{
            detail: {{ message, type, duration, sound: options.sound || null }},
          }})
        );
      }},
      success(message, duration) {{
        this.show(message, 'success', duration);
      }},
      error(message, duration) {{
        this.show(message, 'error', duration);
      }},
      info(message, duration) {{
        this.show(message, 'info', duration);
      }},
      warning(message, duration) {{
        this.show(message, 'warning', duration);
      }},
    }};
  }}
}})();
"""


def _type_class_map(index: int) -> str:
    """Alpine ``:class`` object selecting a variant class by ``toast.type``."""
    entries = ", ".join(
        f"'{TOAST_VARIANTS[t][index]}': toast.type === '{t}'" for t in TOAST_TYPES
    )
    return "{ " + entries + " }"


def _toast_item() -> Element:
    icons = [
        Element(
            "template",
            {"x-if": f"toast.type === '{t}'"},
            icon(TOAST_ICONS[t], f"w-6 h-6 {TOAST_VARIANTS[t][2]}"),
        )
        for t in TOAST_TYPES
    ]
    return Element(
        "div",
        {
            ":class": _type_class_map(0),
            "class": (
                "flex items-center p-4 mb-1 text-gray-800 rounded-lg shadow-lg transform "
                "transition-all duration-500 ease-out relative overflow-hidden "
                "backdrop-blur-sm bg-opacity-95"
            ),
            ":style": "`transition-delay: ${index * 100}ms`",
            "role": "status",
            "x-transition:enter": "translate-x-full opacity-0 scale-95",
            "x-transition:enter-start": "translate-x-full opacity-0 scale-95",
            "x-transition:enter-end": "translate-x-0 opacity-100 scale-100",
            "x-transition:leave": "translate-x-0 opacity-100 scale-100",
            "x-transition:leave-start": "translate-x-0 opacity-100 scale-100",
            "x-transition:leave-end": "translate-x-full opacity-0 scale-95",
        },
        # Progress bar shrinks over the toast's lifetime
        Element(
            "div",
            {
                "class": "absolute bottom-0 left-0 h-1 bg-opacity-40",
                ":class": _type_class_map(1),
                ":style": "`width: 100%; animation: shrink ${toast.duration}ms linear forwards;`",
            },
        ),
        Element("div", {"class": "flex-shrink-0 mr-3"}, icons),
        Element(
            "div",
            {"class": "flex-1"},
            Element("div", {"class": "font-medium", "x-text": "toast.message"}),
        ),
        Element(
            "button",
            {
                "type": "button",
                "@click": "remove(toast.id)",
                "class": (
                    "ml-3 p-1 rounded-full hover:bg-gray-200 focus:outline-none focus:ring-2 "
                    "focus:ring-gray-300 transition-colors duration-200"
                ),
                "aria-label": "Close toast",
            },
            icon(CLOSE, "w-4 h-4 text-gray-500"),
        ),
    )


def build_toast_container_element(config: ToastConfig, container_id: str | None = None) -> Element:
    """Build the container element for a toast list."""
    container = Element(
        "div",
        {
            "id": container_id or f"toast-container-{uuid.uuid4().hex[:8]}",
            "class": "fixed flex flex-col gap-3 w-full",
            "x-data": f"toastContainer({js_literal(config.client_config())})",
            "x-init": "init()",
            "@toast.window": "add($event.detail)",
            "aria-live": "polite",
            "data-component": "toast-container",
        },
        Element(
            "template",
            {"x-for": "(toast, index) in toasts", ":key": "toast.id"},
            _toast_item(),
        ),
    )
    container.add_class(
        config.position_classes, config.z_index_class, config.max_width_class, config.css_class
    )
    return container


def render_toast_container(config: ToastConfig, container_id: str | None = None) -> ToastRender:
    """Render a toast container.

    Parameters
    ----------
    config : ToastConfig
        Container settings.
    container_id : str, optional
        Element id; a unique ``toast-container-<hex>`` id by default.

    Returns
    -------
    ToastRender
        ``html`` is the container markup; ``script`` is the runtime script
        (safe to include more than once per page).
    """
    element = build_toast_container_element(config, container_id)
    return ToastRender(html=element.render(), script=TOAST_RUNTIME_SCRIPT)


def build_toast_container_html(config: ToastConfig | None = None) -> str:
    """Container markup followed by its runtime ``<script>`` block."""
    rendered = render_toast_container(config or ToastConfig())
    return rendered.html + script(rendered.script)


def toast_call(
    payload: ToastPayload | str,
    type: str = "default",  # noqa: A002
    duration: int | None = None,
) -> str:
    """Build a JavaScript call that shows a toast via ``window.toast``.

    Used for server-triggered notifications such as flash messages.
    """
    if isinstance(payload, str):
        payload = ToastPayload(message=payload, type=type, duration=duration)
    args = [
        js_literal(payload.message),
        js_literal(payload.type),
        JsExpression("undefined") if payload.duration is None else js_literal(payload.duration),
    ]
    if payload.sound:
        args.append(js_literal({"sound": payload.sound}))
    return f"window.toast.show({', '.join(args)});"


def flash_script(payloads: list[ToastPayload]) -> Markup:
    """Script showing toasts once Alpine has mounted the containers."""
    calls = "\n  ".join(toast_call(p) for p in payloads)
    return script(
        "document.addEventListener('alpine:initialized', function () {\n  " + calls + "\n});"
    )
