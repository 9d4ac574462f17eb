from typing import Any, Optional, TYPE_CHECKING

from pydantic import ValidationError

if TYPE_CHECKING:
    from .request import RequestDescriptor


class ClientValidationError(ValueError):
    """Input rejected before anything is sent to the server."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "ClientValidationError":
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "invalid value")
        return cls(f"{field}: {message}" if field else message)


class ApiError(Exception):
    """A request that did not produce a successful response.

    ``status_code`` is the HTTP status returned by the server and ``detail``
    the server-provided message when the body carried one.
    """

    def __init__(
        self,
        status_code: Optional[int],
        detail: str,
        payload: Any = None,
        request: Optional["RequestDescriptor"] = None,
    ):
        super().__init__(f"{status_code}: {detail}" if status_code is not None else detail)
        self.status_code = status_code
        self.detail = detail
        self.payload = payload
        self.request = request

    @property
    def is_session_expired(self) -> bool:
        return self.status_code == 401


class NetworkError(ApiError):
    """The request never got a response (DNS, connect, timeout...)."""

    def __init__(self, detail: str, request: Optional["RequestDescriptor"] = None):
        super().__init__(None, detail, request=request)
