# Async client for the cookie-session auth API: CSRF header injection and
# one-shot session refresh on 401 happen inside the dispatcher pipeline.
from .api import AuthAPI, validate_registration
from .client import AuthClient
from .csrf import CSRFAttacher
from .dispatcher import RequestDispatcher
from .errors import ApiError, ClientValidationError, NetworkError
from .navigation import Navigator
from .pipeline import Outcome, Pipeline
from .recovery import RecoveryState, SessionRecovery, classify
from .request import RequestDescriptor
from .schema import User
from .session import SessionState, SessionStatus

__all__ = [
    "ApiError",
    "AuthAPI",
    "AuthClient",
    "ClientValidationError",
    "CSRFAttacher",
    "Navigator",
    "NetworkError",
    "Outcome",
    "Pipeline",
    "RecoveryState",
    "RequestDescriptor",
    "RequestDispatcher",
    "SessionRecovery",
    "SessionState",
    "SessionStatus",
    "User",
    "classify",
    "validate_registration",
]
