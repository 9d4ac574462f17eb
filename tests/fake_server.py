"""
In-process stand-in for the auth service, served to the client over httpx.ASGITransport.

Cookie contract: HTTP-only ``access_token`` (short-lived JWT) and
``refresh_token`` (opaque, rotated on every refresh) plus a readable
``csrf_token`` checked double-submit style on logout.
"""

import secrets
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request, Response
from jose import JWTError, jwt
from pydantic import BaseModel, EmailStr, Field

SECRET = "test-secret"
ALGORITHM = "HS256"


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class FakeAuthServer:
    def __init__(self, access_ttl: int = 300):
        self.access_ttl = access_ttl
        self.clock_offset = 0.0
        self.users: Dict[str, Dict[str, Any]] = {}
        self.refresh_tokens: Dict[str, str] = {}
        self.hits: Dict[str, int] = {}
        self.app = self._build()

    def now(self) -> float:
        return time.time() + self.clock_offset

    def advance(self, seconds: float) -> None:
        self.clock_offset += seconds

    def _count(self, name: str) -> None:
        self.hits[name] = self.hits.get(name, 0) + 1

    def _public(self, user: Dict[str, Any]) -> Dict[str, Any]:
        return {k: user[k] for k in ("id", "email", "verified", "created_at")}

    def _issue(self, response: Response, email: str) -> None:
        access = jwt.encode({"sub": email, "exp": int(self.now()) + self.access_ttl}, SECRET, algorithm=ALGORITHM)
        refresh = secrets.token_urlsafe(16)
        self.refresh_tokens[refresh] = email
        response.set_cookie("access_token", access, httponly=True, samesite="strict", path="/")
        response.set_cookie("refresh_token", refresh, httponly=True, samesite="strict", path="/")
        response.set_cookie("csrf_token", secrets.token_urlsafe(16), httponly=False, samesite="strict", path="/")

    def _current_user(self, request: Request) -> Dict[str, Any]:
        token = request.cookies.get("access_token")
        if not token:
            raise HTTPException(status_code=401, detail="Not authenticated")
        try:
            claims = jwt.decode(token, SECRET, algorithms=[ALGORITHM], options={"verify_exp": False})
        except JWTError as e:
            raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}")
        if claims.get("exp", 0) <= self.now():
            raise HTTPException(status_code=401, detail="Token expired")
        user = self.users.get(claims.get("sub"))
        if user is None:
            raise HTTPException(status_code=401, detail="Unknown user")
        return user

    def _build(self) -> FastAPI:
        auth = APIRouter(tags=["auth"])
        users = APIRouter(tags=["user"])

        @auth.post("/register", status_code=201)
        def register(req: RegisterRequest):
            self._count("register")
            email = str(req.email)
            if email in self.users:
                raise HTTPException(status_code=409, detail="user already exists")
            user = {
                "id": len(self.users) + 1,
                "email": email,
                "password": req.password,
                "verified": False,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
            self.users[email] = user
            return {"message": "registration successful", "user": self._public(user)}

        @auth.post("/login")
        def login(req: LoginRequest, response: Response):
            self._count("login")
            user = self.users.get(str(req.email))
            if user is None or user["password"] != req.password:
                raise HTTPException(status_code=400, detail="invalid credentials")
            self._issue(response, user["email"])
            return {"message": "login successful", "user": self._public(user)}

        @auth.post("/refresh")
        def refresh(request: Request, response: Response):
            self._count("refresh")
            token = request.cookies.get("refresh_token")
            email: Optional[str] = self.refresh_tokens.pop(token, None) if token else None
            if email is None:
                raise HTTPException(status_code=401, detail="invalid refresh token")
            self._issue(response, email)
            return {"message": "token refreshed successfully"}

        @auth.post("/logout")
        def logout(request: Request, response: Response):
            self._count("logout")
            cookie = request.cookies.get("csrf_token")
            header = request.headers.get("X-CSRF-Token")
            if not cookie or cookie != header:
                raise HTTPException(status_code=403, detail="CSRF token mismatch")
            self.refresh_tokens.pop(request.cookies.get("refresh_token", ""), None)
            for name in ("access_token", "refresh_token", "csrf_token"):
                response.delete_cookie(name, path="/")
            return {"message": "logged out successfully"}

        @users.get("/me")
        def me(request: Request):
            self._count("me")
            return {"user": self._public(self._current_user(request))}

        app = FastAPI(title="Fake auth API")
        app.include_router(auth, prefix="/api/auth")
        app.include_router(users, prefix="/api/user")
        return app
