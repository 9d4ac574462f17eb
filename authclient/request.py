from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .config import SAFE_METHODS


@dataclass
class RequestDescriptor:
    """One outbound API call.

    ``headers`` is mutated by request hooks before transmission. ``retried``
    is set by session recovery and travels with the descriptor into the
    replay, so the replay can never trigger a second refresh.
    """

    method: str
    path: str
    json: Optional[Any] = None
    headers: Dict[str, str] = field(default_factory=dict)
    retried: bool = False

    def __post_init__(self):
        self.method = self.method.upper()
        if not self.path.startswith("/"):
            self.path = "/" + self.path

    @property
    def is_read_only(self) -> bool:
        return self.method in SAFE_METHODS

    def targets(self, path: str) -> bool:
        return self.path.split("?", 1)[0].rstrip("/") == path.rstrip("/")

    def __repr__(self) -> str:
        # headers may hold the csrf token
        return f"RequestDescriptor({self.method} {self.path}, retried={self.retried})"
