# tests/test_auth_flow.py

from __future__ import annotations

import asyncio

import pytest

from taskpad.accounts.session import SessionManager
from taskpad.cli.bootstrap import create_initial_state, start_app
from taskpad.storage.keys import CURRENT_USER_KEY
from taskpad.ui.auth_flow import STORAGE_WARNING, AuthFlow
from taskpad.ui.pages import Page

from .fakes import FakePageView, FlakyStore


def _slow_flow(state, delay: float = 0.05) -> AuthFlow:
    return AuthFlow(
        state.accounts,
        state.session,
        state.pages,
        signup_delay=delay,
        login_delay=delay,
        redirect_delay=0.0,
    )


@pytest.mark.asyncio
async def test_signup_example_flow(state, view) -> None:
    await start_app(state)
    assert state.pages.current == Page.LANDING

    outcome = await state.auth.submit_signup("Ann", "ann@x.com", "secret1", "secret1")

    assert outcome.ok
    assert outcome.message == "Account created successfully!"
    assert state.session.current == outcome.account
    assert state.pages.current == Page.DASHBOARD
    assert view.visible == Page.DASHBOARD

    task = state.tasks.add("buy milk")
    assert [(t.id, t.text, t.completed) for t in state.tasks.all()] == [(1, "buy milk", False)]
    state.tasks.toggle_complete(task.id)
    assert state.tasks.all()[0].completed is True
    state.tasks.delete(task.id)
    assert state.tasks.all() == []
    assert state.tasks.add("walk dog").id == 2


@pytest.mark.asyncio
async def test_signup_validation_errors_do_not_register(state) -> None:
    outcome = await state.auth.submit_signup("Ann", "not-an-email", "123", "321")
    assert not outcome.ok
    assert set(outcome.errors) == {"email", "password", "confirm_password"}
    assert state.accounts.list_all() == []
    assert state.session.current is None


@pytest.mark.asyncio
async def test_signup_trims_name_and_email(state) -> None:
    outcome = await state.auth.submit_signup("  Ann ", " ann@x.com ", "secret1", "secret1")
    assert outcome.account.name == "Ann"
    assert outcome.account.email == "ann@x.com"


@pytest.mark.asyncio
async def test_duplicate_signup_reports_email_error(state) -> None:
    await state.auth.submit_signup("Ann", "ann@x.com", "secret1", "secret1")
    await state.auth.logout()

    outcome = await state.auth.submit_signup("Ann", "ann@x.com", "secret1", "secret1")
    assert not outcome.ok
    assert outcome.errors == {"email": "An account with this email already exists"}
    assert len(state.accounts.list_all()) == 1


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(state) -> None:
    await state.auth.submit_signup("Ann", "ann@x.com", "secret1", "secret1")
    await state.auth.logout()

    wrong_pw = await state.auth.submit_login("ann@x.com", "wrong-pw")
    unknown = await state.auth.submit_login("bob@x.com", "secret1")

    assert wrong_pw.errors == unknown.errors
    assert wrong_pw.errors["email"] == wrong_pw.errors["password"] == "Invalid email or password"
    assert state.session.current is None


@pytest.mark.asyncio
async def test_login_and_logout(state, view) -> None:
    await start_app(state)
    await state.auth.submit_signup("Ann", "ann@x.com", "secret1", "secret1")
    state.tasks.add("buy milk")
    await state.auth.logout()

    assert state.session.current is None
    assert state.tasks.owner is None
    assert state.tasks.all() == []
    assert state.pages.current == Page.LANDING

    outcome = await state.auth.submit_login("ann@x.com", "secret1")
    assert outcome.ok
    assert outcome.message == "Welcome back!"
    assert [t.text for t in state.tasks.all()] == ["buy milk"]
    assert state.pages.current == Page.DASHBOARD


@pytest.mark.asyncio
async def test_second_submit_is_ignored_while_in_flight(state) -> None:
    flow = _slow_flow(state)

    first = asyncio.create_task(flow.submit_signup("Ann", "ann@x.com", "secret1", "secret1"))
    await asyncio.sleep(0.01)
    assert flow.in_flight

    second = await flow.submit_signup("Bob", "bob@x.com", "secret1", "secret1")
    assert second.ignored
    assert not second.ok

    result = await first
    assert result.ok
    assert not flow.in_flight
    assert [a.email for a in state.accounts.list_all()] == ["ann@x.com"]


@pytest.mark.asyncio
async def test_guard_released_after_failed_login(state) -> None:
    flow = _slow_flow(state, delay=0.0)
    failed = await flow.submit_login("ghost@x.com", "secret1")
    assert not failed.ok
    assert not flow.in_flight


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_signup(state) -> None:
    flow = _slow_flow(state, delay=0.02)

    waiter = asyncio.create_task(flow.submit_signup("Ann", "ann@x.com", "secret1", "secret1"))
    await asyncio.sleep(0)
    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter

    await asyncio.sleep(0.1)
    assert state.accounts.find_by_email("ann@x.com") is not None
    assert state.session.current is not None
    assert not flow.in_flight


@pytest.mark.asyncio
async def test_restored_session_starts_on_dashboard(settings, kv) -> None:
    first = create_initial_state(settings=settings, store=kv, view_factory=lambda _s, _t: FakePageView())
    await first.auth.submit_signup("Ann", "ann@x.com", "secret1", "secret1")
    first.tasks.add("buy milk")

    view = FakePageView()
    second = create_initial_state(settings=settings, store=kv, view_factory=lambda _s, _t: view)
    await start_app(second)

    assert second.session.current.email == "ann@x.com"
    assert second.pages.current == Page.DASHBOARD
    assert view.calls[0] == ("hide_all", None)
    assert [t.text for t in second.tasks.all()] == ["buy milk"]


@pytest.mark.asyncio
async def test_malformed_session_starts_on_landing(settings, kv) -> None:
    kv.set(CURRENT_USER_KEY, "{broken")
    state = create_initial_state(settings=settings, store=kv, view_factory=lambda _s, _t: FakePageView())
    await start_app(state)
    assert state.pages.current == Page.LANDING
    assert SessionManager(kv).restore() is None


@pytest.mark.asyncio
async def test_session_write_failure_still_logs_in_with_warning(settings) -> None:
    kv = FlakyStore()
    view = FakePageView()
    state = create_initial_state(settings=settings, store=kv, view_factory=lambda _s, _t: view)
    await start_app(state)
    await state.auth.submit_signup("Ann", "ann@x.com", "secret1", "secret1")
    await state.auth.logout()

    kv.fail_keys.add(CURRENT_USER_KEY)
    outcome = await state.auth.submit_login("ann@x.com", "secret1")

    assert outcome.ok
    assert outcome.warning == STORAGE_WARNING
    assert state.session.current == outcome.account
    assert state.tasks.owner == outcome.account.id
    assert state.pages.current == Page.DASHBOARD
    assert not state.auth.in_flight

    # Logging out cannot remove the record either; the session still ends.
    assert await state.auth.logout() == STORAGE_WARNING
    assert state.session.current is None
    assert state.pages.current == Page.LANDING


@pytest.mark.asyncio
async def test_signup_session_write_failure_is_a_warning(settings) -> None:
    kv = FlakyStore()
    kv.fail_keys.add(CURRENT_USER_KEY)
    state = create_initial_state(settings=settings, store=kv, view_factory=lambda _s, _t: FakePageView())

    outcome = await state.auth.submit_signup("Ann", "ann@x.com", "secret1", "secret1")

    assert outcome.ok
    assert outcome.warning == STORAGE_WARNING
    assert state.accounts.find_by_email("ann@x.com") is not None
    assert state.session.is_active
