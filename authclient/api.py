import logging
from typing import Any, Optional

from pydantic import ValidationError

from .config import MIN_PASSWORD_LENGTH, REFRESH_PATH
from .dispatcher import RequestDispatcher
from .errors import ClientValidationError
from .schema import AuthResponse, LoginRequest, MessageResponse, RegisterRequest, User, UserEnvelope

logger = logging.getLogger(__name__)


def validate_registration(email: str, password: str, confirm_password: Optional[str] = None) -> RegisterRequest:
    """Check a registration form locally, before any request is made."""
    if confirm_password is not None and password != confirm_password:
        raise ClientValidationError("Passwords do not match")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ClientValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    try:
        return RegisterRequest(email=email, password=password)
    except ValidationError as e:
        raise ClientValidationError.from_pydantic(e) from e


def _message(data: Any) -> MessageResponse:
    message = data.get("message") if isinstance(data, dict) else None
    return MessageResponse(message=message if isinstance(message, str) else "")

class AuthAPI:
    """Endpoint operations of the auth service, one method per endpoint."""

    def __init__(self, dispatcher: RequestDispatcher, refresh_path: str = REFRESH_PATH):
        self.dispatcher = dispatcher
        self.refresh_path = refresh_path

    async def register(self, email: str, password: str, confirm_password: Optional[str] = None) -> AuthResponse:
        req = validate_registration(email, password, confirm_password)
        data = await self.dispatcher.post("/auth/register", json=req.model_dump(mode="json"))
        logger.info(f"Registered {req.email}")
        return AuthResponse.model_validate(data or {"message": ""})

    async def login(self, email: str, password: str) -> AuthResponse:
        try:
            req = LoginRequest(email=email, password=password)
        except ValidationError as e:
            raise ClientValidationError.from_pydantic(e) from e
        data = await self.dispatcher.post("/auth/login", json=req.model_dump(mode="json"))
        logger.info(f"Logged in as {req.email}")
        return AuthResponse.model_validate(data or {"message": ""})

    async def logout(self) -> MessageResponse:
        data = await self.dispatcher.post("/auth/logout")
        logger.info("Logged out")
        return _message(data)

    async def refresh(self) -> MessageResponse:
        # only the rotated cookies matter, the body is informational
        data = await self.dispatcher.post(self.refresh_path)
        return _message(data)

    async def get_me(self) -> User:
        data = await self.dispatcher.get("/user/me")
        return UserEnvelope.model_validate(data).user
