"""Tests for the in-memory session store."""

import threading
import time

from minesweeper_bot.session_store import SessionStore
from minesweeper_bot.types import DEFAULT_SETTINGS, PRESETS, InputState


def test_get_or_create_returns_same_session(store: SessionStore) -> None:
    first = store.get_or_create("chat-1")
    second = store.get_or_create("chat-1")

    assert first is second
    assert "chat-1" in store
    assert len(store) == 1


def test_defaults_for_new_session(store: SessionStore) -> None:
    assert store.get_settings("chat-1") == DEFAULT_SETTINGS
    assert store.get_game("chat-1") is None
    assert store.get_input_state("chat-1") == InputState.IDLE
    assert not store.is_awaiting_custom_input("chat-1")


def test_settings_and_flag_are_per_session(store: SessionStore) -> None:
    store.set_settings("chat-1", PRESETS["hard"])
    store.set_awaiting_custom_input("chat-2", True)

    assert store.get_settings("chat-1") == PRESETS["hard"]
    assert store.get_settings("chat-2") == DEFAULT_SETTINGS
    assert store.is_awaiting_custom_input("chat-2")
    assert not store.is_awaiting_custom_input("chat-1")

    store.set_awaiting_custom_input("chat-2", False)
    assert store.get_input_state("chat-2") == InputState.IDLE


def test_set_game_replaces_previous(store: SessionStore, make_game) -> None:
    first, second = make_game([".*"]), make_game(["*."])

    store.set_game("chat-1", first)
    store.set_game("chat-1", second)

    assert store.get_game("chat-1") is second


def test_close_drops_all_sessions() -> None:
    store = SessionStore()
    store.get_or_create("a")
    store.get_or_create("b")

    store.close()

    assert len(store) == 0


def test_lock_serializes_actions_on_one_session() -> None:
    """Two threads holding the same session lock never overlap."""
    store = SessionStore()
    active = []
    overlaps = []

    def work():
        with store.lock("chat-1"):
            active.append(1)
            if len(active) > 1:
                overlaps.append(True)
            time.sleep(0.01)
            active.pop()

    threads = [threading.Thread(target=work) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert overlaps == []


def test_lock_is_reentrant_and_yields_session() -> None:
    store = SessionStore()

    with store.lock("chat-1") as session:
        with store.lock("chat-1") as inner:
            assert inner is session
    assert session.session_id == "chat-1"
