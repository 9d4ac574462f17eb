import logging
from typing import Any, Optional

import httpx

from .config import API_BASE_URL, HTTP_TIMEOUT
from .errors import ApiError, NetworkError
from .pipeline import Outcome, Pipeline
from .request import RequestDescriptor

logger = logging.getLogger(__name__)


def _error_detail(response: httpx.Response, body: Any) -> str:
    if isinstance(body, dict):
        for key in ("error", "detail", "message"):
            value = body.get(key)
            if value:
                return value if isinstance(value, str) else str(value)
    return response.reason_phrase or f"HTTP {response.status_code}"


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class RequestDispatcher:
    """Single chokepoint for every call to the API.

    The base URL and cookie jar are fixed at construction; cookies set by the
    server are stored and sent back on every request. Each call runs the
    pipeline's request hooks, is transmitted, and then handed to the
    response hooks before the caller sees a payload or an ``ApiError``.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        pipeline: Optional[Pipeline] = None,
        timeout: float = HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        cookies: Optional[httpx.Cookies] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.pipeline = pipeline or Pipeline()
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            cookies=cookies,
            transport=transport,
        )

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    async def send(self, request: RequestDescriptor) -> Any:
        request = self.pipeline.prepare(request)
        outcome = await self._transmit(request)
        outcome = await self.pipeline.settle(outcome, self)
        return outcome.unwrap()

    async def request(self, method: str, path: str, json: Any = None) -> Any:
        return await self.send(RequestDescriptor(method=method, path=path, json=json))

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def _transmit(self, request: RequestDescriptor) -> Outcome:
        logger.debug(f"-> {request.method} {request.path} (retried={request.retried})")
        try:
            response = await self._client.request(
                request.method,
                request.path.lstrip("/"),
                json=request.json,
                headers=request.headers,
            )
        except httpx.TransportError as e:
            logger.error(f"{request.method} {request.path} failed: {type(e).__name__}: {e}")
            return Outcome(request, error=NetworkError(str(e) or type(e).__name__, request=request))

        body = _decode(response)
        logger.debug(f"<- {request.method} {request.path} {response.status_code}")
        if response.is_success:
            return Outcome(request, payload=body)
        return Outcome(
            request,
            error=ApiError(response.status_code, _error_detail(response, body), payload=body, request=request),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RequestDispatcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
