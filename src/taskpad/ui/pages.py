# src/taskpad/ui/pages.py

from __future__ import annotations

"""
Page transition state machine.

    Idle(from) --navigate(to != from)--> FadingOut(from, to)
               --fade delay-----------> Switching(to)
               --hide/reset/show------> Idle(to)

With no page shown yet, or when `to` is already current, navigate() switches
immediately without the fade. Navigations are serialised on a lock, so one
requested mid-transition runs after the current one finishes.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum

from ..accounts.models import AccountProjection
from ..core.ports import PageView

logger = logging.getLogger(__name__)


class Page(StrEnum):
    LANDING = "landing"
    SIGNUP = "signup"
    LOGIN = "login"
    DASHBOARD = "dashboard"

    @classmethod
    def parse(cls, raw: str) -> Page | None:
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            return None


FORM_PAGES = frozenset({Page.SIGNUP, Page.LOGIN})


class Phase(StrEnum):
    IDLE = "idle"
    FADING_OUT = "fading_out"
    SWITCHING = "switching"


@dataclass(frozen=True, slots=True)
class PageState:
    phase: Phase
    page: Page | None
    target: Page | None = None

    @property
    def in_transition(self) -> bool:
        return self.phase is not Phase.IDLE


def initial_page(restored: AccountProjection | None) -> Page:
    return Page.DASHBOARD if restored is not None else Page.LANDING


class PageTransitionMachine:
    def __init__(self, view: PageView, *, fade_seconds: float = 0.25) -> None:
        self._view = view
        self._fade_seconds = max(0.0, float(fade_seconds))
        self._state = PageState(phase=Phase.IDLE, page=None)
        self._lock = asyncio.Lock()
        self.history: list[PageState] = []

    @property
    def state(self) -> PageState:
        return self._state

    @property
    def current(self) -> Page | None:
        return self._state.page

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def in_transition(self) -> bool:
        return self._state.in_transition

    def _enter(self, state: PageState) -> None:
        self._state = state
        self.history.append(state)
        logger.debug("page state -> %s page=%s target=%s", state.phase, state.page, state.target)

    async def navigate(self, to: Page) -> None:
        async with self._lock:
            frm = self._state.page

            if frm is None or frm == to:
                self._view.hide_all()
                self._view.show(to)
                self._enter(PageState(phase=Phase.IDLE, page=to))
                return

            self._enter(PageState(phase=Phase.FADING_OUT, page=frm, target=to))
            self._view.fade_out(frm)
            await asyncio.sleep(self._fade_seconds)

            self._enter(PageState(phase=Phase.SWITCHING, page=frm, target=to))
            self._view.hide_all()
            if frm in FORM_PAGES:
                self._view.clear_form_errors(frm)
                self._view.reset_form(frm)
            self._view.show(to)
            self._enter(PageState(phase=Phase.IDLE, page=to))
            logger.info("Navigated %s -> %s", frm, to)
