"""
Base class for backend integrations
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from toolgateway.config import InstanceConfig
from toolgateway.errors import BackendFault
from toolgateway.models.schemas import ToolStatus


DEFAULT_TIMEOUT = 30.0


class BaseIntegration(ABC):
    """Base class for all backend integrations.

    One integration object is built per configured instance and reused for the
    process lifetime; the underlying httpx.AsyncClient keeps connections alive.
    """

    def __init__(
        self,
        config: InstanceConfig,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        verify: bool = True,
    ):
        self.config = config
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport, verify=verify)

    @property
    @abstractmethod
    def name(self) -> str:
        """Vendor name"""
        pass

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    @abstractmethod
    async def health_check(self) -> ToolStatus:
        """Check if the instance is reachable and healthy"""
        pass

    async def get_version(self) -> Optional[str]:
        return None

    def _get_headers(self) -> Dict[str, str]:
        """Get default headers for API requests"""
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = getattr(self.config, "api_token", None)
        if token and self._get_auth() is None:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _get_auth(self) -> Optional[tuple]:
        """Get basic auth credentials if configured"""
        username = getattr(self.config, "username", None)
        token = getattr(self.config, "api_token", None)
        if username and token:
            return (username, token)
        return None

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict] = None,
        json: Optional[Any] = None,
        headers: Optional[Dict] = None
    ) -> httpx.Response:
        """Make an HTTP request to the backend API.

        Transport failures are raised as BackendFault; HTTP status is left to the caller.
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        req_headers = self._get_headers()
        if headers:
            req_headers.update(headers)

        try:
            return await self.client.request(
                method=method,
                url=url,
                params=params,
                json=json,
                headers=req_headers,
                auth=self._get_auth()
            )
        except httpx.TimeoutException as e:
            raise BackendFault(f"{self.name} request timed out: {method} {url}") from e
        except httpx.RequestError as e:
            raise BackendFault(f"{self.name} request failed: {method} {url}: {e}") from e

    async def get(self, endpoint: str, params: Optional[Dict] = None, **kwargs) -> httpx.Response:
        return await self._request("GET", endpoint, params=params, **kwargs)

    async def post(self, endpoint: str, json: Optional[Any] = None, **kwargs) -> httpx.Response:
        return await self._request("POST", endpoint, json=json, **kwargs)

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        detail = response.text.strip()[:200]
        message = (
            f"{self.name} returned HTTP {response.status_code} {response.reason_phrase} "
            f"for {response.request.method} {response.request.url}"
        )
        if detail:
            message += f": {detail}"
        raise BackendFault(message, status_code=response.status_code)

    async def get_json(self, endpoint: str, params: Optional[Dict] = None) -> Any:
        """GET an endpoint and decode its JSON body"""
        response = await self.get(endpoint, params=params)
        self._raise_for_status(response)
        try:
            return response.json()
        except ValueError as e:
            raise BackendFault(f"{self.name} returned a non-JSON body for {endpoint}") from e

    async def get_text(self, endpoint: str, params: Optional[Dict] = None) -> str:
        response = await self.get(endpoint, params=params, headers={"Accept": "text/plain"})
        self._raise_for_status(response)
        return response.text

    async def close(self):
        """Close the HTTP client"""
        await self.client.aclose()
