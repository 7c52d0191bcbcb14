"""Tests for the Python mirror of the client-side component behaviour."""

from __future__ import annotations

import asyncio

import pytest

from pydantic import ValidationError

from alpinekit.options import Option
from alpinekit.state import (
    AsyncioScheduler,
    EventChannel,
    ManualScheduler,
    SelectState,
    ToastApi,
    ToastPayload,
    ToastStore,
    generate_toast_id,
    get_toast_api,
    initial_selection,
    install_toast_api,
    reset_toast_api,
)


@pytest.fixture
def fruit() -> list[Option]:
    return [
        Option(value="apple", text="Apple"),
        Option(value="banana", text="Banana"),
        Option(value="cherry", text="Cherry", disabled=True),
    ]


class TestSelectStateSingle:
    """Single-mode select behaviour."""

    def test_initial_state(self, fruit: list[Option]) -> None:
        state = SelectState(fruit)
        assert state.open is False
        assert state.search == ""
        assert state.selected == ""
        assert state.get_display_text() == "Select option"

    def test_toggle_flips_open(self, fruit: list[Option]) -> None:
        state = SelectState(fruit)
        state.toggle()
        assert state.open
        state.toggle()
        assert not state.open

    def test_select_replaces_and_closes(self, fruit: list[Option]) -> None:
        state = SelectState(fruit)
        state.toggle()
        state.search = "ban"
        state.select_option(fruit[1])
        assert state.selected == "banana"
        assert state.open is False
        assert state.search == ""
        state.select_option(fruit[0])
        assert state.selected == "apple"
        assert state.get_display_text() == "Apple"

    def test_disabled_option_ignored(self, fruit: list[Option]) -> None:
        state = SelectState(fruit)
        state.select_option(fruit[2])
        assert state.selected == ""

    def test_unknown_value_shows_raw(self, fruit: list[Option]) -> None:
        state = SelectState(fruit)
        state.selected = "kiwi"
        assert state.get_display_text() == "kiwi"

    def test_initial_selection_from_flag(self) -> None:
        options = [Option(value="a"), Option(value="b", selected=True), Option(value="c", selected=True)]
        assert SelectState(options).selected == "b"


class TestSelectStateMultiple:
    """Multiple-mode select behaviour."""

    def test_toggle_membership_keeps_panel_open(self, fruit: list[Option]) -> None:
        state = SelectState(fruit, multiple=True, placeholder="Pick")
        state.toggle()
        state.select_option(fruit[0])
        state.select_option(fruit[1])
        assert state.selected == ["apple", "banana"]
        assert state.open
        state.select_option(fruit[0])
        assert state.selected == ["banana"]

    def test_display_text(self, fruit: list[Option]) -> None:
        state = SelectState(fruit, multiple=True, placeholder="Pick")
        assert state.get_display_text() == "Pick"
        state.select_option(fruit[0])
        assert state.get_display_text() == "Apple"
        state.select_option(fruit[1])
        assert state.get_display_text() == "2 selected"

    def test_is_selected(self, fruit: list[Option]) -> None:
        state = SelectState(fruit, multiple=True)
        state.select_option(fruit[1])
        assert state.is_selected(fruit[1])
        assert not state.is_selected(fruit[0])

    def test_select_all_skips_disabled_then_clears(self, fruit: list[Option]) -> None:
        state = SelectState(fruit, multiple=True)
        state.select_all()
        assert state.selected == ["apple", "banana"]
        state.select_all()
        assert state.selected == []

    def test_select_all_respects_filter(self, fruit: list[Option]) -> None:
        state = SelectState(fruit, multiple=True)
        state.search = "APP"
        state.select_all()
        assert state.selected == ["apple"]

    def test_initial_selection_deduplicates(self) -> None:
        options = [Option(value="a", selected=True), Option(value="a", selected=True)]
        assert initial_selection(options, multiple=True) == ["a"]


class TestFilteredOptions:
    """Search filtering."""

    def test_empty_search_returns_all(self, fruit: list[Option]) -> None:
        assert SelectState(fruit).filtered_options() == fruit

    def test_case_insensitive_substring(self, fruit: list[Option]) -> None:
        state = SelectState(fruit)
        state.search = "AN"
        assert [o.value for o in state.filtered_options()] == ["banana"]

    def test_no_match(self, fruit: list[Option]) -> None:
        state = SelectState(fruit)
        state.search = "zzz"
        assert state.filtered_options() == []


class TestEventChannel:
    """Tests for EventChannel."""

    def test_dispatch_reaches_listeners(self) -> None:
        channel = EventChannel()
        seen: list[dict] = []
        channel.add_listener("toast", seen.append)
        assert channel.dispatch("toast", {"message": "hi"}) == 1
        assert seen == [{"message": "hi"}]

    def test_dispatch_without_listeners(self) -> None:
        assert EventChannel().dispatch("toast", {}) == 0

    def test_remove_listener(self) -> None:
        channel = EventChannel()
        seen: list[dict] = []
        channel.add_listener("toast", seen.append)
        channel.remove_listener("toast", seen.append)
        channel.remove_listener("other", seen.append)
        channel.dispatch("toast", {})
        assert seen == []


class TestManualScheduler:
    """Tests for ManualScheduler."""

    def test_runs_due_callbacks_in_order(self) -> None:
        scheduler = ManualScheduler()
        ran: list[str] = []
        scheduler.call_later(200, lambda: ran.append("b"))
        scheduler.call_later(100, lambda: ran.append("a"))
        scheduler.call_later(500, lambda: ran.append("c"))
        assert scheduler.advance(199) == 1
        assert ran == ["a"]
        assert scheduler.advance(1) == 1
        assert ran == ["a", "b"]
        assert scheduler.pending == 1
        assert scheduler.now == 200


class TestToastStore:
    """Toast lifecycle."""

    def test_add_then_expire(self) -> None:
        scheduler = ManualScheduler()
        store = ToastStore(scheduler)
        toast_id = store.add({"message": "Saved", "type": "success", "duration": 2000})
        assert [t.id for t in store.toasts] == [toast_id]
        assert store.toasts[0].type == "success"
        scheduler.advance(1999)
        assert len(store.toasts) == 1
        scheduler.advance(1)
        assert store.toasts == []

    def test_missing_or_zero_duration_uses_default(self) -> None:
        store = ToastStore(ManualScheduler(), default_duration=5000)
        store.add({"message": "a"})
        store.add({"message": "b", "duration": 0})
        assert [t.duration for t in store.toasts] == [5000, 5000]
        assert store.toasts[0].type == "default"

    def test_manual_remove_then_late_timer_is_noop(self) -> None:
        scheduler = ManualScheduler()
        store = ToastStore(scheduler)
        first = store.add(ToastPayload(message="one"))
        store.add(ToastPayload(message="two", duration=10_000))
        store.remove(first)
        assert [t.message for t in store.toasts] == ["two"]
        scheduler.advance(3000)
        assert [t.message for t in store.toasts] == ["two"]

    def test_remove_unknown_id(self) -> None:
        store = ToastStore(ManualScheduler())
        store.add({"message": "x"})
        store.remove("nope")
        assert len(store.toasts) == 1

    def test_sound_played_when_enabled(self) -> None:
        played: list[str] = []
        store = ToastStore(ManualScheduler(), enable_sound=True, sound_player=played.append)
        store.add({"message": "a", "sound": "/ding.mp3"})
        store.add({"message": "b"})
        assert played == ["/ding.mp3"]

    def test_default_sound(self) -> None:
        played: list[str] = []
        store = ToastStore(
            ManualScheduler(), enable_sound=True, sound_player=played.append, default_sound="/d.mp3"
        )
        store.add({"message": "a"})
        assert played == ["/d.mp3"]

    def test_sound_disabled(self) -> None:
        played: list[str] = []
        store = ToastStore(ManualScheduler(), sound_player=played.append)
        store.add({"message": "a", "sound": "/ding.mp3"})
        assert played == []

    def test_sound_failure_swallowed(self, caplog: pytest.LogCaptureFixture) -> None:
        def fail(url: str) -> None:
            raise OSError("no audio device")

        store = ToastStore(ManualScheduler(), enable_sound=True, sound_player=fail)
        store.add({"message": "a", "sound": "/ding.mp3"})
        assert len(store.toasts) == 1
        assert "no audio device" in caplog.text

    def test_invalid_payload_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ToastStore(ManualScheduler()).add({"message": "x", "type": "fatal"})

    def test_ids_are_unique(self) -> None:
        assert len({generate_toast_id() for _ in range(50)}) == 50


class TestToastApi:
    """The global notification API."""

    def test_show_reaches_listening_store(self) -> None:
        channel = EventChannel()
        scheduler = ManualScheduler()
        store = ToastStore(scheduler)
        store.listen(channel)

        ToastApi(channel).show("Saved", "success", 2000)
        assert len(store.toasts) == 1
        assert (store.toasts[0].message, store.toasts[0].type) == ("Saved", "success")
        scheduler.advance(2000)
        assert store.toasts == []

    def test_every_container_receives_event(self) -> None:
        channel = EventChannel()
        stores = [ToastStore(ManualScheduler()) for _ in range(2)]
        for store in stores:
            store.listen(channel)
        ToastApi(channel).info("hello")
        assert [len(s.toasts) for s in stores] == [1, 1]

    @pytest.mark.parametrize("kind", ["success", "error", "info", "warning"])
    def test_wrappers_set_type(self, kind: str) -> None:
        channel = EventChannel()
        seen: list[dict] = []
        channel.add_listener("toast", seen.append)
        getattr(ToastApi(channel), kind)("msg", 1500)
        assert seen == [{"message": "msg", "type": kind, "duration": 1500, "sound": None}]

    def test_sound_option(self) -> None:
        channel = EventChannel()
        seen: list[dict] = []
        channel.add_listener("toast", seen.append)
        ToastApi(channel).show("m", options={"sound": "/s.mp3"})
        assert seen[0]["sound"] == "/s.mp3"
        assert seen[0]["duration"] is None

    def test_api_default_duration(self) -> None:
        channel = EventChannel()
        seen: list[dict] = []
        channel.add_listener("toast", seen.append)
        ToastApi(channel, default_duration=4000).show("m")
        assert seen[0]["duration"] == 4000


class TestToastApiSingleton:
    """Process-wide toast API installation."""

    def test_install_once(self) -> None:
        assert get_toast_api() is None
        first = install_toast_api(EventChannel())
        second = install_toast_api(EventChannel())
        assert first is second
        assert get_toast_api() is first

    def test_reset(self) -> None:
        install_toast_api(EventChannel())
        reset_toast_api()
        assert get_toast_api() is None


class TestAsyncioScheduler:
    """Tests for AsyncioScheduler."""

    @pytest.mark.asyncio
    async def test_toast_expires_on_event_loop(self) -> None:
        store = ToastStore(AsyncioScheduler())
        store.add({"message": "soon", "duration": 10})
        assert len(store.toasts) == 1
        await asyncio.sleep(0.1)
        assert store.toasts == []
