import logging
from enum import Enum
from typing import Callable, List, Optional, TYPE_CHECKING

from .config import LOGIN_PATH
from .errors import ApiError
from .schema import User

if TYPE_CHECKING:
    from .api import AuthAPI

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class SessionState:
    """Who the client believes is logged in.

    Starts ``unknown``; changes only through ``probe``, ``login``,
    ``set_authenticated``, ``logout`` and ``clear`` (the latter is also what
    a failed session recovery ends up calling via the navigator).
    """

    def __init__(self, login_path: str = LOGIN_PATH):
        self.status = SessionStatus.UNKNOWN
        self.user: Optional[User] = None
        self.last_error: Optional[ApiError] = None
        self.login_path = login_path
        self._listeners: List[Callable[["SessionState"], None]] = []

    @property
    def is_authenticated(self) -> bool:
        return self.status is SessionStatus.AUTHENTICATED

    def subscribe(self, listener: Callable[["SessionState"], None]) -> None:
        self._listeners.append(listener)

    def _set(self, status: SessionStatus, user: Optional[User]) -> None:
        changed = status is not self.status or user != self.user
        self.status = status
        self.user = user
        if changed:
            logger.debug(f"Session state -> {status.value}")
            for listener in self._listeners:
                listener(self)

    def set_authenticated(self, user: User) -> None:
        self._set(SessionStatus.AUTHENTICATED, user)

    def clear(self) -> None:
        self._set(SessionStatus.UNAUTHENTICATED, None)

    async def probe(self, api: "AuthAPI") -> SessionStatus:
        """Ask the server who we are; any API error means logged out."""
        try:
            user = await api.get_me()
        except ApiError as e:
            logger.info(f"Session probe: not authenticated ({e})")
            self.last_error = e
            self.clear()
        else:
            self.last_error = None
            self.set_authenticated(user)
        return self.status

    async def login(self, api: "AuthAPI", email: str, password: str) -> Optional[User]:
        resp = await api.login(email, password)
        if resp.user is None:
            # message-only login response, ask /user/me
            await self.probe(api)
            return self.user
        self.set_authenticated(resp.user)
        return resp.user

    async def logout(self, api: "AuthAPI") -> None:
        await api.logout()
        self.clear()

    def guard(self) -> Optional[str]:
        """Protected-page check: None when allowed, else the path to go to."""
        if self.status is SessionStatus.UNKNOWN:
            raise RuntimeError("session state not probed yet")
        if self.status is SessionStatus.AUTHENTICATED:
            return None
        return self.login_path
