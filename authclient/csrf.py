import logging
from typing import Optional

import httpx

from .config import CSRF_COOKIE_NAME, CSRF_HEADER_NAME, REQUESTED_WITH_HEADER, REQUESTED_WITH_VALUE
from .request import RequestDescriptor

logger = logging.getLogger(__name__)


def read_cookie(cookies: httpx.Cookies, name: str) -> Optional[str]:
    """Return the value of cookie ``name`` or None.

    Walks the jar directly: ``Cookies.get`` raises on duplicate names set
    for different domains or paths, the first one wins here.
    """
    for cookie in cookies.jar:
        if cookie.name == name and cookie.value:
            return cookie.value
    return None


class CSRFAttacher:
    """Request hook echoing the ``csrf_token`` cookie back as a header.

    Double-submit pattern: the server compares the header with the cookie it
    set. Read-only methods are left alone, and so is every request while no
    token cookie exists (the server decides whether to reject those).
    """

    def __init__(
        self,
        cookies: httpx.Cookies,
        cookie_name: str = CSRF_COOKIE_NAME,
        header_name: str = CSRF_HEADER_NAME,
    ):
        self.cookies = cookies
        self.cookie_name = cookie_name
        self.header_name = header_name

    def token(self) -> Optional[str]:
        return read_cookie(self.cookies, self.cookie_name)

    def __call__(self, request: RequestDescriptor) -> RequestDescriptor:
        if request.is_read_only:
            return request
        token = self.token()
        if token is None:
            logger.debug(f"No {self.cookie_name} cookie, sending {request.method} {request.path} without it")
            return request
        request.headers[self.header_name] = token
        request.headers[REQUESTED_WITH_HEADER] = REQUESTED_WITH_VALUE
        return request
