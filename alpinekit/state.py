"""Python reference implementation of the client-side component contract.

The select and toast components ship their behaviour to the browser as
JavaScript. The classes here implement the same behaviour in Python so the
server can compute initial state (e.g. a select's display text before
Alpine hydrates) and so the contract can be exercised without a browser:

- ``SelectState`` mirrors a select's ``x-data`` object
- ``EventChannel`` mirrors page-wide ``window`` events
- ``ToastStore`` mirrors a mounted toast container
- ``ToastApi`` mirrors the global ``window.toast`` object
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import time
import uuid

from collections import defaultdict
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

from pydantic import BaseModel, Field

from . import log
from .options import Option


# =============================================================================
# Select
# =============================================================================


@dataclass
class SelectState:
    """State and behaviour of one select component.

    ``selected`` is a string in single mode and a list in multiple mode;
    it starts from the options flagged ``selected``.
    """

    options: Sequence[Option]
    multiple: bool = False
    placeholder: str = "Select option"
    open: bool = False
    search: str = ""
    selected: str | list[str] = field(init=False)

    def __post_init__(self) -> None:
        self.selected = initial_selection(self.options, self.multiple)

    def toggle(self) -> None:
        self.open = not self.open

    def close(self) -> None:
        self.open = False
        self.search = ""

    def select_option(self, option: Option) -> None:
        """Toggle membership (multiple) or replace the value and close (single)."""
        if option.disabled:
            return
        if isinstance(self.selected, list):
            if option.value in self.selected:
                self.selected = [v for v in self.selected if v != option.value]
            else:
                self.selected = [*self.selected, option.value]
        else:
            self.selected = option.value
            self.close()

    def is_selected(self, option: Option) -> bool:
        if isinstance(self.selected, list):
            return option.value in self.selected
        return self.selected == option.value

    def get_display_text(self) -> str:
        """Placeholder, the single selected option's text, or ``"{n} selected"``."""
        if isinstance(self.selected, list):
            values = self.selected
        else:
            values = [self.selected] if self.selected else []
        if not values:
            return self.placeholder
        if len(values) == 1:
            match = next((o for o in self.options if o.value == values[0]), None)
            return match.text if match is not None else values[0]
        return f"{len(values)} selected"

    def filtered_options(self) -> list[Option]:
        """Options whose text contains the search text, ignoring case."""
        if not self.search:
            return list(self.options)
        needle = self.search.lower()
        return [o for o in self.options if needle in (o.text or "").lower()]

    def select_all(self) -> None:
        """Select every enabled visible option, or clear them if all are selected."""
        if not isinstance(self.selected, list):
            return
        visible = [o.value for o in self.filtered_options() if not o.disabled]
        if all(v in self.selected for v in visible):
            self.selected = [v for v in self.selected if v not in visible]
        else:
            self.selected = [*self.selected, *(v for v in visible if v not in self.selected)]


def initial_selection(options: Sequence[Option], multiple: bool) -> str | list[str]:
    """Seed the client selection from options flagged ``selected``.

    Single mode takes the first flagged option; multiple mode takes all of
    them in order (duplicate values collapse to one entry).
    """
    flagged = [o.value for o in options if o.selected]
    if multiple:
        return list(dict.fromkeys(flagged))
    return flagged[0] if flagged else ""


# =============================================================================
# Events and timers
# =============================================================================


class EventChannel:
    """Page-wide named events with synchronous dispatch."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable[[dict[str, Any]], None]]] = defaultdict(list)

    def add_listener(self, name: str, listener: Callable[[dict[str, Any]], None]) -> None:
        self._listeners[name].append(listener)

    def remove_listener(self, name: str, listener: Callable[[dict[str, Any]], None]) -> None:
        if listener in self._listeners.get(name, []):
            self._listeners[name].remove(listener)

    def dispatch(self, name: str, detail: dict[str, Any]) -> int:
        """Deliver ``detail`` to every listener of ``name``; return the count."""
        listeners = list(self._listeners.get(name, []))
        for listener in listeners:
            listener(detail)
        return len(listeners)


class Scheduler(Protocol):
    """Runs a callback after a delay in milliseconds."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None: ...


class ManualScheduler:
    """Deterministic scheduler driven by ``advance()``."""

    def __init__(self) -> None:
        self.now = 0
        self._queue: list[tuple[int, int, Callable[[], None]]] = []
        self._counter = itertools.count()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        heapq.heappush(self._queue, (self.now + max(delay_ms, 0), next(self._counter), callback))

    def advance(self, ms: int) -> int:
        """Move time forward, running due callbacks in order; return how many ran."""
        target = self.now + ms
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self.now = due
            callback()
            ran += 1
        self.now = target
        return ran

    @property
    def pending(self) -> int:
        return len(self._queue)


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        loop = self._loop or asyncio.get_running_loop()
        loop.call_later(max(delay_ms, 0) / 1000, callback)


# =============================================================================
# Toasts
# =============================================================================

ToastType = Literal["success", "error", "info", "warning", "default"]
TOAST_TYPES: tuple[str, ...] = ("success", "error", "info", "warning", "default")


class ToastPayload(BaseModel):
    """Detail carried by the page-wide ``toast`` event."""

    message: str = Field(..., description="Notification text")
    type: ToastType = "default"
    duration: int | None = Field(
        default=None,
        ge=0,
        description="Auto-dismiss delay in ms (None uses the container default)",
    )
    sound: str | None = Field(default=None, description="Audio URL (used when sound is enabled)")


@dataclass
class Toast:
    """A live notification."""

    id: str
    message: str
    type: str
    duration: int


def generate_toast_id() -> str:
    """High-resolution timestamp plus a random suffix."""
    return f"{time.time_ns()}{uuid.uuid4().hex[:9]}"


class ToastStore:
    """The live toast list of one mounted container.

    Parameters
    ----------
    scheduler : Scheduler
        Runs the auto-dismiss timers.
    default_duration : int
        Used when a toast has no (or a zero) duration.
    enable_sound : bool
        Whether toasts with a sound URL play it.
    sound_player : callable, optional
        ``sound_player(url)``; failures are logged and swallowed.
    default_sound : str, optional
        Sound URL for toasts that do not name one.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        default_duration: int = 3000,
        enable_sound: bool = False,
        sound_player: Callable[[str], None] | None = None,
        default_sound: str | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.default_duration = default_duration
        self.enable_sound = enable_sound
        self.sound_player = sound_player
        self.default_sound = default_sound
        self.toasts: list[Toast] = []

    def add(self, toast: ToastPayload | dict[str, Any]) -> str:
        """Show a toast and schedule its removal; return its id."""
        if isinstance(toast, dict):
            toast = ToastPayload(**toast)
        toast_id = generate_toast_id()
        duration = toast.duration or self.default_duration
        self.toasts.append(
            Toast(id=toast_id, message=toast.message, type=toast.type or "default", duration=duration)
        )

        sound = toast.sound or self.default_sound
        if self.enable_sound and sound:
            self._play(sound)

        self.scheduler.call_later(duration, lambda: self.remove(toast_id))
        return toast_id

    def remove(self, toast_id: str) -> None:
        """Remove a toast; unknown ids are ignored."""
        self.toasts = [t for t in self.toasts if t.id != toast_id]

    def listen(self, channel: EventChannel) -> None:
        """Register ``add`` as the listener for the page-wide ``toast`` event."""
        channel.add_listener("toast", self.add)

    def _play(self, url: str) -> None:
        if self.sound_player is None:
            return
        try:
            self.sound_player(url)
        except Exception as exc:  # noqa: BLE001
            log.warn(f"Toast sound playback failed: {exc}")


class ToastApi:
    """Global notification API dispatching ``toast`` events."""

    def __init__(self, channel: EventChannel, default_duration: int | None = None) -> None:
        self.channel = channel
        self.default_duration = default_duration

    def show(
        self,
        message: str,
        type: ToastType = "default",  # noqa: A002
        duration: int | None = None,
        options: dict[str, Any] | None = None,
    ) -> None:
        options = options or {}
        payload = ToastPayload(
            message=message,
            type=type,
            duration=duration if duration is not None else self.default_duration,
            sound=options.get("sound"),
        )
        self.channel.dispatch("toast", payload.model_dump())

    def success(self, message: str, duration: int | None = None) -> None:
        self.show(message, "success", duration)

    def error(self, message: str, duration: int | None = None) -> None:
        self.show(message, "error", duration)

    def info(self, message: str, duration: int | None = None) -> None:
        self.show(message, "info", duration)

    def warning(self, message: str, duration: int | None = None) -> None:
        self.show(message, "warning", duration)


class _ToastApiHolder:
    """Holder for the process-wide toast API."""

    instance: ToastApi | None = None


def install_toast_api(channel: EventChannel, default_duration: int | None = None) -> ToastApi:
    """Install the global toast API unless one is already present.

    Returns the installed (or pre-existing) API.
    """
    if _ToastApiHolder.instance is None:
        _ToastApiHolder.instance = ToastApi(channel, default_duration)
    else:
        log.debug("Toast API already installed; keeping the existing instance")
    return _ToastApiHolder.instance


def get_toast_api() -> ToastApi | None:
    """Get the installed toast API, if any."""
    return _ToastApiHolder.instance


def reset_toast_api() -> None:
    """Remove the installed toast API."""
    _ToastApiHolder.instance = None
