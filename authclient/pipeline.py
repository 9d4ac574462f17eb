from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, TYPE_CHECKING

from .errors import ApiError
from .request import RequestDescriptor

if TYPE_CHECKING:
    from .dispatcher import RequestDispatcher


@dataclass
class Outcome:
    """Result of one transmission: a decoded payload or an error, never both."""

    request: RequestDescriptor
    payload: Any = None
    error: Optional[ApiError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.payload


RequestHook = Callable[[RequestDescriptor], RequestDescriptor]
ResponseHook = Callable[[Outcome, "RequestDispatcher"], Awaitable[Outcome]]


class Pipeline:
    """Ordered request and response hooks.

    Request hooks run in registration order before transmission. Response
    hooks run in registration order on every outcome; a response hook may
    replay the request through the dispatcher it receives and return the
    replay's outcome in place of the original.
    """

    def __init__(
        self,
        request_hooks: Optional[List[RequestHook]] = None,
        response_hooks: Optional[List[ResponseHook]] = None,
    ):
        self.request_hooks: List[RequestHook] = list(request_hooks or [])
        self.response_hooks: List[ResponseHook] = list(response_hooks or [])

    def add_request_hook(self, hook: RequestHook) -> None:
        self.request_hooks.append(hook)

    def add_response_hook(self, hook: ResponseHook) -> None:
        self.response_hooks.append(hook)

    def prepare(self, request: RequestDescriptor) -> RequestDescriptor:
        for hook in self.request_hooks:
            request = hook(request)
        return request

    async def settle(self, outcome: Outcome, dispatcher: "RequestDispatcher") -> Outcome:
        for hook in self.response_hooks:
            outcome = await hook(outcome, dispatcher)
        return outcome
