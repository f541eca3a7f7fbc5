"""Session state: current user and token."""

from typing import Any, Dict, Optional

from Vesta.core.client.models.wire import RegisterRequest, User
from Vesta.services.auth_service import AuthService

from .base import Slice


class AuthSlice(Slice):
    name = "auth"

    def __init__(self, service: AuthService, toasts=None):
        super().__init__(toasts)
        self._service = service
        self.user: Optional[User] = None
        self.token: Optional[str] = None
        self.is_authenticated = False
        self.restore()

    def restore(self) -> None:
        """Reload the session from local storage."""
        self.user = self._service.get_user()
        self.token = self._service.get_token()
        self.is_authenticated = self._service.is_authenticated()
        self._changed()

    async def login(self, username: str, password: str) -> Optional[User]:
        response = await self._run(lambda: self._service.login(username, password), "Login failed")
        if response is None:
            self.user = None
            self.token = None
            self.is_authenticated = False
            self._changed()
            return None

        self.user = response.to_user()
        self.token = response.token
        self.is_authenticated = True
        self._success("Logged in successfully")
        self._changed()
        return self.user

    async def register(self, request: RegisterRequest) -> bool:
        response = await self._run(lambda: self._service.register(request), "Registration failed")
        if response is None:
            return False
        self._success(response.message or "Registration successful")
        return True

    def logout(self) -> None:
        self._service.logout()
        self.user = None
        self.token = None
        self.is_authenticated = False
        self.error = None
        self._changed()

    def set_user(self, user: User) -> None:
        self._service.set_user(user)
        self.user = user
        self._changed()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "user": self.user,
            "token": self.token,
            "is_authenticated": self.is_authenticated,
            "is_loading": self.is_loading,
            "error": self.error,
        }
