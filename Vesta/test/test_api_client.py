"""
Tests for the REST client and central error handling.

Tests cover:
- Query string building and paging parameters
- Bearer authentication read from local storage
- Typed errors per status and the toasts they produce
- Forced logout on 401 and JWT signature errors
"""

import pytest

from Vesta.api.client import VestaAPIClient, build_page_params, build_query_string, clean_params
from Vesta.api.errors import (
    MSG_FORBIDDEN,
    MSG_GENERIC,
    MSG_INVALID_SESSION,
    MSG_NETWORK,
    MSG_NOT_FOUND,
    MSG_SERVER_ERROR,
    MSG_SESSION_EXPIRED,
    MSG_VALIDATION,
    ErrorHandler,
    payload_message,
)
from Vesta.core.client.models.wire import ListingStatus
from Vesta.core.client.services.toast_service import ToastLevel, ToastService
from Vesta.core.client.utils.exceptions import (
    ApiError,
    ForbiddenError,
    NetworkError,
    NotFoundError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)
from Vesta.test.conftest import user_payload


class TestQueryParams:
    """Tests for query parameter helpers."""

    def test_skips_none_and_empty(self):
        assert build_query_string({"city": "Izmir", "minPrice": None, "district": ""}) == "city=Izmir"

    def test_renders_booleans_and_enums(self):
        params = clean_params({"furnished": True, "status": ListingStatus.ACTIVE, "page": 0})
        assert params == {"furnished": "true", "status": "ACTIVE", "page": "0"}

    def test_keeps_zero(self):
        assert build_query_string({"minPrice": 0}) == "minPrice=0"

    def test_page_params(self):
        assert build_page_params(2, 10, "price,asc") == {"page": 2, "size": 10, "sort": "price,asc"}
        assert build_page_params() == {}


class TestPayloadMessage:

    def test_message_key(self):
        assert payload_message({"message": "Listing not found"}) == "Listing not found"

    def test_error_key(self):
        assert payload_message({"error": "Bad Request"}) == "Bad Request"

    def test_plain_text(self):
        assert payload_message("  oops ") == "oops"

    def test_nothing(self):
        assert payload_message(None) is None
        assert payload_message({}) is None


class TestVestaAPIClient:
    """Requests against the fake backend."""

    @pytest.mark.asyncio
    async def test_get_json(self, api, backend):
        backend.reply("GET", "/categories", [{"id": 1, "name": "Konut", "slug": "konut"}])

        data = await api.get("/categories", params={"active": True, "q": None})

        assert data == [{"id": 1, "name": "Konut", "slug": "konut"}]
        assert backend.requests[0].query == {"active": "true"}

    @pytest.mark.asyncio
    async def test_bearer_header_from_storage(self, api, backend, storage):
        backend.reply("GET", "/favorites", [])
        await api.get("/favorites")
        assert "Authorization" not in backend.requests[0].headers

        storage.set_session("jwt-123", user_payload())
        await api.get("/favorites")
        assert backend.requests[1].headers["Authorization"] == "Bearer jwt-123"

    @pytest.mark.asyncio
    async def test_empty_and_text_bodies(self, api, backend):
        backend.reply("DELETE", "/favorites/3", None)
        backend.reply("POST", "/auth/register", "User registered successfully!")

        assert await api.delete("/favorites/3") is None
        assert await api.post("/auth/register", {"username": "x"}) == "User registered successfully!"
        assert backend.requests[1].body == {"username": "x"}

    @pytest.mark.asyncio
    async def test_context_manager_closes_session(self, backend, storage):
        async with VestaAPIClient(backend.base_url, storage) as client:
            backend.reply("GET", "/categories", [])
            await client.get("/categories")
            assert client._sessions.is_closed is False
        assert client._sessions.is_closed is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,error_type,toast", [
        (403, ForbiddenError, MSG_FORBIDDEN),
        (404, NotFoundError, MSG_NOT_FOUND),
        (500, ServerError, MSG_SERVER_ERROR),
    ])
    async def test_status_errors(self, api, backend, toasts, status, error_type, toast):
        backend.reply("GET", "/listings/1", {"message": "detail"}, status=status)

        with pytest.raises(error_type) as exc_info:
            await api.get("/listings/1")

        assert exc_info.value.status == status
        assert exc_info.value.message == "detail"
        assert [t.message for t in toasts.history] == [toast]
        assert toasts.history[0].level == ToastLevel.ERROR

    @pytest.mark.asyncio
    async def test_other_status_uses_server_message(self, api, backend, toasts):
        backend.reply("POST", "/favorites", {"message": "Already in favorites"}, status=400)

        with pytest.raises(ApiError) as exc_info:
            await api.post("/favorites", params={"listingId": 1})

        assert type(exc_info.value) is ApiError
        assert [t.message for t in toasts.history] == ["Already in favorites"]

    @pytest.mark.asyncio
    async def test_other_status_generic_message(self, api, backend, toasts):
        backend.reply("GET", "/x", None, status=409)

        with pytest.raises(ApiError):
            await api.get("/x")

        assert [t.message for t in toasts.history] == [MSG_GENERIC]

    @pytest.mark.asyncio
    async def test_validation_field_errors(self, api, backend, toasts):
        backend.reply("POST", "/realestates", {
            "message": "Validation failed",
            "errors": {"title": "must not be blank", "price": ["must be positive"]},
        }, status=422)

        with pytest.raises(ValidationError) as exc_info:
            await api.post("/realestates", {})

        assert exc_info.value.field_errors == {"title": ["must not be blank"], "price": ["must be positive"]}
        assert sorted(t.message for t in toasts.history) == ["must be positive", "must not be blank"]

    @pytest.mark.asyncio
    async def test_validation_without_fields(self, api, backend, toasts):
        backend.reply("POST", "/realestates", None, status=422)

        with pytest.raises(ValidationError):
            await api.post("/realestates", {})

        assert [t.message for t in toasts.history] == [MSG_VALIDATION]

    @pytest.mark.asyncio
    async def test_unauthorized_forces_logout(self, api, backend, storage, toasts):
        storage.set_session("expired", user_payload())
        expired = []
        api.error_handler.add_session_expired_listener(lambda: expired.append(True))
        backend.reply("GET", "/favorites", {"message": "Unauthorized"}, status=401)

        with pytest.raises(UnauthorizedError):
            await api.get("/favorites")

        assert storage.token is None
        assert storage.get_user() is None
        assert expired == [True]
        assert [t.message for t in toasts.history] == [MSG_SESSION_EXPIRED]

    @pytest.mark.asyncio
    async def test_failed_login_keeps_its_message(self, api, backend, storage, toasts):
        expired = []
        api.error_handler.add_session_expired_listener(lambda: expired.append(True))
        backend.reply("POST", "/auth/login", {"message": "Bad credentials"}, status=401)

        with pytest.raises(UnauthorizedError) as exc_info:
            await api.post("/auth/login", {"username": "a", "password": "b"})

        assert exc_info.value.message == "Bad credentials"
        assert expired == []
        assert toasts.history == []

    @pytest.mark.asyncio
    async def test_jwt_signature_error(self, api, backend, storage, toasts):
        storage.set_session("forged", user_payload())
        backend.reply("GET", "/listings/my-listings",
                      {"message": "JWT signature does not match locally computed signature"}, status=400)

        with pytest.raises(ApiError):
            await api.get("/listings/my-listings")

        assert storage.token is None
        assert [t.message for t in toasts.history] == [MSG_INVALID_SESSION]

    @pytest.mark.asyncio
    async def test_network_error(self, storage, toasts):
        client = VestaAPIClient("http://127.0.0.1:9/api", storage, ErrorHandler(storage, toasts), timeout=2.0)
        try:
            with pytest.raises(NetworkError):
                await client.get("/categories")
        finally:
            await client.close()

        assert [t.message for t in toasts.history] == [MSG_NETWORK]


class TestErrorHandler:
    """Direct tests for the mapping, without HTTP."""

    def setup_method(self):
        """Set up test fixtures."""
        from Vesta.core.client.services.persistence_service import LocalStorage

        self.storage = LocalStorage("/nonexistent-vesta-test")
        self.toasts = ToastService()
        self.handler = ErrorHandler(self.storage, self.toasts)

    def test_unknown_error(self):
        from Vesta.core.client.utils.exceptions import ClientError
        from Vesta.api.errors import MSG_UNEXPECTED

        self.handler.handle(ClientError("weird"))

        assert [t.message for t in self.toasts.history] == [MSG_UNEXPECTED]

    def test_failing_session_listener_is_contained(self):
        self.storage.set_session("t", user_payload())
        calls = []

        def explode():
            raise RuntimeError("listener bug")

        self.handler.add_session_expired_listener(explode)
        self.handler.add_session_expired_listener(lambda: calls.append(True))

        self.handler.handle(UnauthorizedError(401, "Unauthorized", None, "/favorites"))

        assert calls == [True]
        assert self.storage.token is None

    def test_remove_session_listener(self):
        calls = []
        remove = self.handler.add_session_expired_listener(lambda: calls.append(True))
        remove()

        self.handler.handle(UnauthorizedError(401, "Unauthorized", None, "/favorites"))

        assert calls == []

    def test_server_error_503_is_generic(self):
        self.handler.handle(ServerError(503, "Service Unavailable", {"message": "Maintenance"}))

        assert [t.message for t in self.toasts.history] == ["Maintenance"]
