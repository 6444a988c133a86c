"""Tests for the in-process session store (infrastructure/cache/session_store.py)."""

import asyncio
from decimal import Decimal

import pytest

from gkash_ussd.domain.models.session import UssdState
from gkash_ussd.infrastructure.cache.session_store import SessionStore


def test_create_starts_at_welcome_with_empty_form(store):
    session = store.create("s1", "+254712345678")

    assert session.state == UssdState.WELCOME
    assert session.form.name is None
    assert session.form.account_ids == []
    assert store.get("s1") is session


def test_create_overwrites_existing_entry(store):
    store.create("s1", "+254712345678")
    store.update("s1", state=UssdState.MAIN_MENU)

    fresh = store.create("s1", "+254712345678")

    assert store.get("s1") is fresh
    assert fresh.state == UssdState.WELCOME


def test_get_unknown_session_returns_none(store):
    assert store.get("missing") is None


def test_stale_session_unreachable_before_sweep(store, clock):
    store.create("s1", "+254712345678")
    clock.advance(301)

    assert store.get("s1") is None
    assert len(store) == 0


def test_get_refreshes_activity(store, clock):
    store.create("s1", "+254712345678")
    clock.advance(200)
    assert store.get("s1") is not None
    clock.advance(200)

    assert store.get("s1") is not None


def test_update_sets_state_and_refreshes(store, clock):
    store.create("s1", "+254712345678")
    clock.advance(100)

    store.update("s1", state=UssdState.CREATE_NAME)

    session = store.get("s1")
    assert session.state == UssdState.CREATE_NAME
    assert session.last_activity == clock.now


def test_update_accepts_state_value_string(store):
    store.create("s1", "+254712345678")
    store.update("s1", state="MAIN_MENU")
    assert store.get("s1").state is UssdState.MAIN_MENU


def test_update_rejects_state_outside_closed_set(store):
    store.create("s1", "+254712345678")
    with pytest.raises(ValueError):
        store.update("s1", state="NOT_A_STATE")
    assert store.get("s1").state == UssdState.WELCOME


def test_update_rejects_unknown_fields(store):
    store.create("s1", "+254712345678")
    with pytest.raises(TypeError):
        store.update("s1", phone_number="+254700000000")


def test_update_missing_session_is_noop(store):
    store.update("missing", state=UssdState.MAIN_MENU)
    assert store.get("missing") is None


def test_form_fields_round_through_store(store):
    store.create("s1", "+254712345678")
    store.set_form_field("s1", "amount", Decimal("500"))

    assert store.get_form_field("s1", "amount") == Decimal("500")
    assert store.get_form_field("s1", "name") is None


def test_form_field_unknown_key_raises(store):
    store.create("s1", "+254712345678")
    with pytest.raises(KeyError):
        store.set_form_field("s1", "favourite_colour", "blue")


def test_form_fields_on_gone_session_are_silent(store, clock):
    store.create("s1", "+254712345678")
    clock.advance(301)

    store.set_form_field("s1", "name", "Jane")
    assert store.get_form_field("s1", "name") is None


def test_destroy(store):
    store.create("s1", "+254712345678")
    store.destroy("s1")
    store.destroy("s1")
    assert store.get("s1") is None


def test_sweep_removes_only_stale_sessions(store, clock):
    store.create("old", "+254712345678")
    clock.advance(200)
    store.create("new", "+254700000001")
    clock.advance(150)

    removed = store.sweep()

    assert removed == 1
    assert len(store) == 1
    assert store.get("new") is not None


def test_sweep_loop_removes_stale_sessions(event_loop, clock):
    store = SessionStore(timeout_seconds=300, sweep_interval_seconds=0.01, clock=clock)

    async def scenario():
        store.create("s1", "+254712345678")
        clock.advance(301)
        store.start()
        assert store.running
        await asyncio.sleep(0.05)
        await store.stop()

    event_loop.run_until_complete(scenario())

    assert len(store) == 0
    assert not store.running


def test_start_twice_keeps_one_task(event_loop, store):
    async def scenario():
        store.start()
        first = store._sweep_task
        store.start()
        assert store._sweep_task is first
        await store.stop()

    event_loop.run_until_complete(scenario())


def test_stop_without_start_is_noop(event_loop, store):
    event_loop.run_until_complete(store.stop())
    assert not store.running
