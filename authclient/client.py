import logging
from typing import Optional

import httpx

from .api import AuthAPI
from .config import API_BASE_URL, HTTP_TIMEOUT, LOGIN_PATH, REFRESH_PATH, SINGLE_FLIGHT_REFRESH
from .csrf import CSRFAttacher
from .dispatcher import RequestDispatcher
from .navigation import Navigator
from .pipeline import Pipeline
from .recovery import SessionRecovery
from .session import SessionState

logger = logging.getLogger(__name__)


class AuthClient:
    """Everything an application needs to talk to the auth service.

    Wires the CSRF request hook and the session recovery response hook into
    one dispatcher, and connects recovery failure to a hard navigation to
    the login page, which in turn clears the session state.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        navigator: Optional[Navigator] = None,
        session: Optional[SessionState] = None,
        login_path: str = LOGIN_PATH,
        refresh_path: str = REFRESH_PATH,
        single_flight: bool = SINGLE_FLIGHT_REFRESH,
    ):
        self.pipeline = Pipeline()
        self.dispatcher = RequestDispatcher(base_url, self.pipeline, timeout=timeout, transport=transport)
        self.api = AuthAPI(self.dispatcher, refresh_path=refresh_path)
        self.session = session or SessionState(login_path=login_path)
        self.navigator = navigator or Navigator()
        self.navigator.on_reset(self.session.clear)

        self.csrf = CSRFAttacher(self.dispatcher.cookies)
        self.recovery = SessionRecovery(
            refresh=self.api.refresh,
            on_session_lost=self.navigator.assign,
            refresh_path=refresh_path,
            login_path=login_path,
            single_flight=single_flight,
        )
        self.pipeline.add_request_hook(self.csrf)
        self.pipeline.add_response_hook(self.recovery)
        logger.debug(f"Auth client ready for {base_url}")

    async def aclose(self) -> None:
        await self.dispatcher.aclose()

    async def __aenter__(self) -> "AuthClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
