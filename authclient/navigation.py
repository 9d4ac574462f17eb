import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class Navigator:
    """Hard navigation between application entry points.

    ``assign`` behaves like a full page load: every registered reset callback
    runs so in-memory application state is dropped, then ``location`` points
    at the new path. Cookies are not touched.
    """

    def __init__(self, location: str = "/"):
        self.location = location
        self.last_redirect: Optional[str] = None
        self._resets: List[Callable[[], None]] = []

    def on_reset(self, callback: Callable[[], None]) -> None:
        self._resets.append(callback)

    def assign(self, path: str) -> None:
        logger.info(f"Navigating to {path}")
        for reset in self._resets:
            reset()
        self.last_redirect = path
        self.location = path
