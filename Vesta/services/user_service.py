"""Profile management for the logged-in user (/users)."""

from Vesta.core.client.models.wire import ChangePasswordRequest, MessageResponse, UpdateProfileRequest, User

from .base import BaseService, parse_one


class UserService(BaseService):

    async def update_profile(self, request: UpdateProfileRequest) -> User:
        return parse_one(User, await self.api.put("/users/profile", request.to_wire()))

    async def change_password(self, current_password: str, new_password: str) -> MessageResponse:
        request = ChangePasswordRequest(current_password=current_password, new_password=new_password)
        data = await self.api.post("/users/change-password", request.to_wire())
        return parse_one(MessageResponse, data if isinstance(data, dict) else {"message": data or ""})
