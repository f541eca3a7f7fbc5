"""
High-level REST client for the Vesta backend.
Provides a clean interface for calling API endpoints with bearer
authentication, typed errors and central error handling.
"""

import asyncio
import json
import time
from enum import Enum
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import aiohttp

from Vesta.config import config
from Vesta.core.client.services.persistence_service import LocalStorage
from Vesta.core.client.utils.exceptions import NetworkError, error_for_status
from Vesta.core.logging import get_logger
from Vesta.core.logging.utils import RequestLogger

from .errors import ErrorHandler, payload_message

logger = get_logger(__name__)


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Drop None and empty values and render the rest as query strings."""
    cleaned = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        cleaned[key] = _param_value(value)
    return cleaned


def build_query_string(params: Optional[Mapping[str, Any]]) -> str:
    """
    Build a query string, skipping None and empty values.

    Example:
        build_query_string({"city": "Izmir", "minPrice": None}) == "city=Izmir"
    """
    return urlencode(clean_params(params))


def build_page_params(page: Optional[int] = None, size: Optional[int] = None,
                      sort: Optional[str] = None) -> Dict[str, Any]:
    """Paging parameters in Spring Data form."""
    params: Dict[str, Any] = {}
    if page is not None:
        params["page"] = page
    if size is not None:
        params["size"] = size
    if sort:
        params["sort"] = sort
    return params


class SessionManager:
    """
    Owns the aiohttp.ClientSession of one API client.

    The session is created lazily on the running loop and reused for every
    request, enabling connection pooling.
    """

    def __init__(self, timeout: float):
        self._timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None
        self._lock = asyncio.Lock()

    async def get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            async with self._lock:
                if self._session is None or self._session.closed:
                    connector = aiohttp.TCPConnector(
                        limit=0,
                        limit_per_host=0,
                        ttl_dns_cache=300,
                        enable_cleanup_closed=True
                    )
                    self._session = aiohttp.ClientSession(
                        connector=connector,
                        timeout=aiohttp.ClientTimeout(total=self._timeout),
                        trust_env=False
                    )
        return self._session

    async def close(self) -> None:
        """Close the session."""
        async with self._lock:
            if self._session and not self._session.closed:
                await self._session.close()
            self._session = None

    @property
    def is_closed(self) -> bool:
        """Check if the session is closed."""
        return self._session is None or self._session.closed


class VestaAPIClient:
    """
    REST client for the Vesta backend.

    The bearer token is read from local storage on every request, so a
    login or forced logout takes effect on the next call.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        storage: Optional[LocalStorage] = None,
        error_handler: Optional[ErrorHandler] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url (str): API root, e.g. http://localhost:8080/api
            storage (LocalStorage): Local storage holding the bearer token
            error_handler (ErrorHandler): Receives every failure before it is raised
            timeout (float): Total request timeout in seconds
        """
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.storage = storage or LocalStorage()
        self.error_handler = error_handler or ErrorHandler(self.storage)
        self._sessions = SessionManager(config.REQUEST_TIMEOUT_SECONDS if timeout is None else timeout)
        self._request_logger = RequestLogger(logger)

    async def __aenter__(self) -> 'VestaAPIClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._sessions.close()

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _auth_headers(self) -> Dict[str, str]:
        token = self.storage.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Any:
        text = await response.text()
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text

    async def _make_request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Any = None,
        data: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Make an HTTP request to the API.

        Args:
            method (str): HTTP method to use
            path (str): Path below the API root
            params (dict): Query parameters; None and empty values are dropped
            json_body: JSON-serializable request body
            data: Raw or multipart body
            headers (dict): Additional headers to send

        Returns:
            Decoded JSON body, raw text, or None for an empty body

        Raises:
            ApiError: the server answered with an error status
            NetworkError: no response arrived
        """
        url = self.url_for(path)
        request_headers = self._auth_headers()
        if headers:
            request_headers.update(headers)

        started = time.perf_counter()
        try:
            session = await self._sessions.get_session()
            async with session.request(
                method=method,
                url=url,
                params=clean_params(params),
                json=json_body,
                data=data,
                headers=request_headers,
            ) as response:
                body = await self._read_body(response)
                status = response.status
                reason = response.reason or ""
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._request_logger.log_request(method, path, None, time.perf_counter() - started)
            error = NetworkError(f"Request failed: {str(e) or type(e).__name__}", {"url": url})
            self.error_handler.handle(error)
            raise error from e

        self._request_logger.log_request(method, path, status, time.perf_counter() - started)
        if status >= 400:
            message = payload_message(body) or reason or f"Request failed with status {status}"
            error = error_for_status(status, message, body, path)
            self.error_handler.handle(error)
            raise error
        return body

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._make_request("GET", path, params=params)

    async def post(self, path: str, body: Any = None, params: Optional[Mapping[str, Any]] = None,
                   data: Any = None) -> Any:
        return await self._make_request("POST", path, params=params, json_body=body, data=data)

    async def put(self, path: str, body: Any = None, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._make_request("PUT", path, params=params, json_body=body)

    async def patch(self, path: str, body: Any = None) -> Any:
        return await self._make_request("PATCH", path, json_body=body)

    async def delete(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._make_request("DELETE", path, params=params)


__all__ = [
    'VestaAPIClient',
    'SessionManager',
    'build_query_string',
    'build_page_params',
    'clean_params',
]
