"""
Authentication: login, registration and password recovery.

A successful login stores the bearer token and the user object in local
storage; every later request reads the token from there.
"""

from typing import Optional

from Vesta.core.client.models.wire import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    User,
)
from Vesta.core.logging import get_logger

from .base import BaseService, Body, parse_one, to_body

logger = get_logger(__name__)


class AuthService(BaseService):
    """Session management on top of /auth."""

    @property
    def storage(self):
        return self.api.storage

    async def login(self, username: str, password: str) -> AuthResponse:
        """
        Log in and persist the session.

        Raises:
            UnauthorizedError: wrong credentials (no forced logout for this call)
        """
        data = await self.api.post("/auth/login", LoginRequest(username=username, password=password).to_wire())
        response = parse_one(AuthResponse, data)
        if response.token:
            self.storage.set_session(response.token, response.to_user().model_dump(by_alias=True, mode="json"))
            logger.info("Logged in as %s", response.username)
        return response

    async def register(self, request: RegisterRequest) -> MessageResponse:
        data = await self.api.post("/auth/register", request.to_wire())
        return parse_one(MessageResponse, data if isinstance(data, dict) else {"message": data or ""})

    async def forgot_password(self, request: Body) -> MessageResponse:
        if not isinstance(request, ForgotPasswordRequest):
            request = ForgotPasswordRequest.model_validate(request or {})
        data = await self.api.post("/auth/forgot-password", request.to_wire())
        return parse_one(MessageResponse, data if isinstance(data, dict) else {"message": data or ""})

    async def reset_password(self, email: str, code: str, new_password: str) -> MessageResponse:
        request = ResetPasswordRequest(email=email, code=code, new_password=new_password)
        data = await self.api.post("/auth/reset-password", to_body(request))
        return parse_one(MessageResponse, data if isinstance(data, dict) else {"message": data or ""})

    def logout(self) -> None:
        self.storage.clear_session()
        logger.info("Logged out")

    def get_user(self) -> Optional[User]:
        """The persisted user, or None when absent or unreadable."""
        raw = self.storage.get_user()
        if raw is None:
            return None
        try:
            return User.model_validate(raw)
        except ValueError:
            logger.warning("Stored user does not match the user schema, ignoring it")
            return None

    def set_user(self, user: User) -> None:
        token = self.get_token()
        if token:
            self.storage.set_session(token, user.model_dump(by_alias=True, mode="json"))

    def get_token(self) -> Optional[str]:
        return self.storage.token

    def is_authenticated(self) -> bool:
        return bool(self.storage.token)
