"""Pod service API client for making HTTP requests."""

import httpx
from typing import Optional, List, Dict, Any


class ServiceClientError(Exception):
    """Base exception for pod service client errors."""

    def __init__(self, message: str, code: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.code = code
        self.status = status


class ConnectionError(ServiceClientError):
    """Raised when connection to the pod service fails."""
    pass


class AuthenticationError(ServiceClientError):
    """Raised when authentication fails."""
    pass


class NotFoundError(ServiceClientError):
    """Raised when a pod record or deployment is not found."""
    pass


class ConflictError(ServiceClientError):
    """Raised when the pod already exists in the cluster."""
    pass


def _error_from_response(response: httpx.Response) -> ServiceClientError:
    try:
        detail = response.json().get("detail", "Unknown error")
    except ValueError:
        detail = response.text or "Unknown error"

    code = status = None
    if isinstance(detail, dict):
        code = detail.get("code")
        status = detail.get("status")
        message = detail.get("message", "Unknown error")
    else:
        message = str(detail)

    if response.status_code == 401:
        return AuthenticationError("Authentication failed. Check your API key.")
    if response.status_code == 403:
        return AuthenticationError("Access forbidden. Check your permissions.")
    if response.status_code == 404:
        return NotFoundError(message, code=code, status=status)
    if response.status_code == 409:
        return ConflictError(message, code=code, status=status)
    return ServiceClientError(f"API error: {message}", code=code, status=status)


class PodServiceClient:
    """Client for interacting with the pod service API."""

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: float = 30.0):
        """
        Initialize the pod service client.

        Args:
            base_url: Base URL of the pod service
            api_key: Optional API key for authentication
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        """Get the HTTP client, creating it if necessary."""
        if self._client is None:
            headers = {}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"

            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout
            )
        return self._client

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        client = self._get_client()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.ConnectError as e:
            raise ConnectionError(f"Failed to connect to pod service at {self.base_url}: {e}")
        except httpx.TimeoutException:
            raise ConnectionError(f"Request timed out after {self.timeout} seconds")
        except httpx.HTTPError as e:
            raise ServiceClientError(f"HTTP error: {e}")

        if response.status_code >= 400:
            raise _error_from_response(response)
        return response.json()

    async def add_pod(self, spec: Dict[str, Any]) -> int:
        data = await self._request("POST", "/api/v1/pods", json=spec)
        return data["id"]

    async def list_pods(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/v1/pods")

    async def get_pod(self, pod_id: int) -> Dict[str, Any]:
        """
        Get a pod record by id.

        Raises:
            NotFoundError: If the record does not exist
            ConnectionError: If connection to the pod service fails
            ServiceClientError: For other API errors
        """
        return await self._request("GET", f"/api/v1/pods/{pod_id}")

    async def update_pod(self, pod_id: int, spec: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/api/v1/pods/{pod_id}", json=spec)

    async def delete_pod(self, pod_id: int) -> Dict[str, Any]:
        return await self._request("DELETE", f"/api/v1/pods/{pod_id}")

    async def create_deployment(self, spec: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create the pod's Deployment in the cluster.

        Raises:
            ConflictError: If the Deployment already exists
        """
        return await self._request("POST", "/api/v1/deployments", json=spec)

    async def update_deployment(self, spec: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", "/api/v1/deployments", json=spec)

    async def delete_deployment(self, pod_id: int) -> Dict[str, Any]:
        return await self._request("DELETE", f"/api/v1/pods/{pod_id}/deployment")

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
