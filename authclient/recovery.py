import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, TYPE_CHECKING

from .config import LOGIN_PATH, REFRESH_PATH, SINGLE_FLIGHT_REFRESH
from .errors import ApiError
from .pipeline import Outcome

if TYPE_CHECKING:
    from .dispatcher import RequestDispatcher

logger = logging.getLogger(__name__)


class RecoveryState(str, Enum):
    NORMAL = "normal"
    RECOVERING = "recovering"
    RECOVERED_RETRY = "recovered-retry"
    FAILED_TERMINAL = "failed-terminal"


def classify(outcome: Outcome, refresh_path: str = REFRESH_PATH) -> RecoveryState:
    """Decide what to do with an outcome before any recovery is attempted.

    NORMAL: pass through untouched (success, or any error but 401).
    FAILED_TERMINAL: 401 on a request that was already replayed once, or on
    the refresh call itself.
    RECOVERING: 401 eligible for one refresh-and-replay.
    """
    error = outcome.error
    if error is None or not error.is_session_expired:
        return RecoveryState.NORMAL
    if outcome.request.retried:
        return RecoveryState.FAILED_TERMINAL
    if outcome.request.targets(refresh_path):
        return RecoveryState.FAILED_TERMINAL
    return RecoveryState.RECOVERING


class SessionRecovery:
    """Response hook that renews an expired session once and replays the call.

    On a recoverable 401 the request is marked ``retried``, ``refresh`` is
    awaited and the same descriptor is sent again through the dispatcher,
    whose result replaces the original outcome. If the refresh fails, its
    error is returned instead and ``on_session_lost`` receives the login path.

    By default every expired request runs its own refresh. With
    ``single_flight`` enabled, requests that hit 401 while a refresh is
    already running wait for that refresh instead of starting another.
    """

    def __init__(
        self,
        refresh: Callable[[], Awaitable[Any]],
        on_session_lost: Optional[Callable[[str], Any]] = None,
        refresh_path: str = REFRESH_PATH,
        login_path: str = LOGIN_PATH,
        single_flight: bool = SINGLE_FLIGHT_REFRESH,
    ):
        self.refresh = refresh
        self.on_session_lost = on_session_lost
        self.refresh_path = refresh_path
        self.login_path = login_path
        self.single_flight = single_flight
        self._pending: Optional[asyncio.Future] = None

    async def __call__(self, outcome: Outcome, dispatcher: "RequestDispatcher") -> Outcome:
        state = classify(outcome, self.refresh_path)
        request = outcome.request
        if state is RecoveryState.NORMAL:
            return outcome
        if state is RecoveryState.FAILED_TERMINAL:
            self._enter(request, state)
            return outcome

        self._enter(request, RecoveryState.RECOVERING)
        request.retried = True
        try:
            await self._refresh()
        except ApiError as refresh_error:
            self._enter(request, RecoveryState.FAILED_TERMINAL)
            logger.warning(f"Session refresh failed ({refresh_error}), redirecting to {self.login_path}")
            self._session_lost()
            return Outcome(request, error=refresh_error)

        self._enter(request, RecoveryState.RECOVERED_RETRY)
        try:
            payload = await dispatcher.send(request)
        except ApiError as replay_error:
            return Outcome(request, error=replay_error)
        return Outcome(request, payload=payload)

    async def _refresh(self) -> Any:
        if not self.single_flight:
            return await self.refresh()
        if self._pending is None:
            self._pending = asyncio.ensure_future(self.refresh())
            self._pending.add_done_callback(self._release)
        else:
            logger.debug("Joining refresh already in flight")
        return await asyncio.shield(self._pending)

    def _release(self, future: asyncio.Future) -> None:
        if self._pending is future:
            self._pending = None

    def _session_lost(self) -> None:
        if self.on_session_lost is not None:
            self.on_session_lost(self.login_path)

    @staticmethod
    def _enter(request, state: RecoveryState) -> None:
        if state is RecoveryState.RECOVERING:
            logger.warning(f"Session expired on {request.method} {request.path}, refreshing")
        elif state is RecoveryState.RECOVERED_RETRY:
            logger.info(f"Session refreshed, replaying {request.method} {request.path}")
        else:
            logger.debug(f"{request.method} {request.path} -> {state.value}")
