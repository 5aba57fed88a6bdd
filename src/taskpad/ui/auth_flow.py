# src/taskpad/ui/auth_flow.py

"""
Signup / login / logout as the UI triggers them.

Signup and login complete after a simulated delay. While one is pending the
flow is "in flight" and further submits are ignored (the console equivalent
of a disabled submit button). Once started, the delayed part always runs to
completion, even if whoever awaited it is cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from ..accounts.models import AccountProjection
from ..accounts.session import SessionManager
from ..accounts.store import AccountStore
from ..accounts.validation import validate_login, validate_signup
from ..core.errors import DuplicateEmail, FieldErrors, InvalidCredentials, StorageFailure
from .pages import Page, PageTransitionMachine

logger = logging.getLogger(__name__)

STORAGE_WARNING = "Your changes may not be saved: local storage is unavailable."


@dataclass(frozen=True, slots=True)
class AuthOutcome:
    ok: bool
    errors: FieldErrors = field(default_factory=dict)
    message: str = ""
    account: AccountProjection | None = None
    warning: str = ""
    ignored: bool = False


class AuthFlow:
    def __init__(
        self,
        accounts: AccountStore,
        session: SessionManager,
        pages: PageTransitionMachine,
        *,
        signup_delay: float = 1.0,
        login_delay: float = 0.8,
        redirect_delay: float = 1.5,
        notify: Callable[[str], None] | None = None,
    ) -> None:
        self._accounts = accounts
        self._session = session
        self._pages = pages
        self._signup_delay = max(0.0, float(signup_delay))
        self._login_delay = max(0.0, float(login_delay))
        self._redirect_delay = max(0.0, float(redirect_delay))
        self._notify = notify
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def _run_guarded(self, op: Callable[[], Awaitable[AuthOutcome]]) -> AuthOutcome:
        if self._in_flight:
            logger.debug("Submit ignored: request already in flight")
            return AuthOutcome(ok=False, ignored=True)
        self._in_flight = True
        job = asyncio.ensure_future(op())
        return await asyncio.shield(job)

    def _establish(self, projection: AccountProjection) -> str:
        try:
            self._session.establish(projection)
        except StorageFailure:
            logger.exception("Session established in memory only")
            return STORAGE_WARNING
        return ""

    async def _redirect(self, outcome: AuthOutcome) -> AuthOutcome:
        if self._notify is not None:
            self._notify(outcome.message)
        await asyncio.sleep(self._redirect_delay)
        await self._pages.navigate(Page.DASHBOARD)
        return outcome

    async def submit_signup(
        self, name: str, email: str, password: str, confirm_password: str
    ) -> AuthOutcome:
        name = (name or "").strip()
        email = (email or "").strip()
        errors = validate_signup(name, email, password, confirm_password)
        if errors:
            return AuthOutcome(ok=False, errors=errors)

        async def op() -> AuthOutcome:
            try:
                await asyncio.sleep(self._signup_delay)
                try:
                    projection = self._accounts.register(name, email, password)
                except DuplicateEmail as e:
                    return AuthOutcome(ok=False, errors={"email": str(e)})
                except StorageFailure:
                    logger.exception("Signup could not be saved")
                    return AuthOutcome(ok=False, errors={"email": STORAGE_WARNING})
                warning = self._establish(projection)
            finally:
                # Released before the redirect pause, like a re-enabled button.
                self._in_flight = False
            return await self._redirect(
                AuthOutcome(
                    ok=True,
                    message="Account created successfully!",
                    account=projection,
                    warning=warning,
                )
            )

        return await self._run_guarded(op)

    async def submit_login(self, email: str, password: str) -> AuthOutcome:
        email = (email or "").strip()
        errors = validate_login(email, password)
        if errors:
            return AuthOutcome(ok=False, errors=errors)

        async def op() -> AuthOutcome:
            try:
                await asyncio.sleep(self._login_delay)
                try:
                    projection = self._accounts.authenticate(email, password)
                except InvalidCredentials as e:
                    msg = str(e)
                    return AuthOutcome(ok=False, errors={"email": msg, "password": msg})
                warning = self._establish(projection)
            finally:
                self._in_flight = False
            return await self._redirect(
                AuthOutcome(ok=True, message="Welcome back!", account=projection, warning=warning)
            )

        return await self._run_guarded(op)

    async def logout(self) -> str:
        """Drop the session and go back to the landing page; returns a storage warning or ""."""
        warning = ""
        try:
            self._session.clear()
        except StorageFailure:
            logger.exception("Logged out in memory only")
            warning = STORAGE_WARNING
        await self._pages.navigate(Page.LANDING)
        return warning
