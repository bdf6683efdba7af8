"""
Base API client with common HTTP functionality.

This module provides a base class for the MLB API clients with shared
functionality:
- HTTP session management with connection pooling
- Bounded request timeouts
- Mapping of transport failures onto the NetworkError hierarchy
- Request/response logging (never headers, which carry bearer tokens)

Requests are not retried here. The only retry in mlbv is the single
refresh-and-retry performed by SessionManager for expired tokens.
"""

import logging
from typing import Any, Dict, Optional

import requests

from .exceptions import ConnectionFailedError, NetworkError, NetworkTimeoutError

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/133.0.0.0 Safari/537.36"
)


class BaseAPIClient:
    """
    Base class for API clients with common HTTP functionality.

    This class provides:
    - Session management with connection pooling
    - A bounded timeout on every request
    - Consistent error mapping and logging

    Subclasses should:
    - Set BASE_URL class attribute (absolute URLs bypass it)
    - Add domain-specific methods

    Example:
        class StatsClient(BaseAPIClient):
            BASE_URL = "https://statsapi.mlb.com"

            def get_teams(self) -> Dict[str, Any]:
                return self.get("/api/v1/teams").json()
    """

    BASE_URL: str = ""

    def __init__(
        self,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize base API client.

        Args:
            timeout: Request timeout in seconds (applies to every call)
            session: Optional shared requests session
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        self.timeout = timeout
        self.session = session or requests.Session()

        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        })

        logger.debug(f"{self.__class__.__name__} initialized (timeout={timeout}s)")

    def _get_full_url(self, endpoint: str) -> str:
        """
        Construct full API URL from endpoint path.

        Args:
            endpoint: API endpoint path (e.g., "/api/v1/schedule") or an
                      absolute URL

        Returns:
            Full URL with base URL
        """
        if endpoint.startswith(("http://", "https://")):
            return endpoint

        if not self.BASE_URL:
            raise ValueError(f"{self.__class__.__name__} must set BASE_URL class attribute")

        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"

        return f"{self.BASE_URL.rstrip('/')}{endpoint}"

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        allow_redirects: bool = True,
    ) -> requests.Response:
        """
        Make a single HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: Endpoint path or absolute URL
            params: Query parameters
            json_data: JSON request body
            data: Form-encoded request body
            headers: Additional request headers
            allow_redirects: Whether to follow redirects

        Returns:
            HTTP response object (any status code)

        Raises:
            NetworkTimeoutError: If the request timed out
            ConnectionFailedError: If the connection could not be made
            NetworkError: For any other transport failure
        """
        url = self._get_full_url(endpoint)

        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json_data,
                data=data,
                timeout=self.timeout,
                allow_redirects=allow_redirects,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(f"{method} {url} timed out after {self.timeout}s")
            raise NetworkTimeoutError(
                f"Request to {url} timed out after {self.timeout}s"
            ) from e
        except requests.exceptions.ConnectionError as e:
            logger.warning(f"Could not connect to {url}: {e}")
            raise ConnectionFailedError(f"Could not connect to {url}: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"Request to {url} failed: {e}")
            raise NetworkError(f"Request to {url} failed: {e}") from e

        logger.debug(f"Response: {response.status_code}")
        return response

    def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """
        Make GET request.

        Args:
            endpoint: API endpoint path
            params: Query parameters
            headers: Additional request headers

        Returns:
            HTTP response object
        """
        return self._request("GET", endpoint, params=params, headers=headers)

    def post(
        self,
        endpoint: str,
        json_data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """
        Make POST request with a JSON body.

        Args:
            endpoint: API endpoint path
            json_data: JSON request body
            params: Query parameters
            headers: Additional request headers

        Returns:
            HTTP response object
        """
        post_headers = {"Content-Type": "application/json"}
        if headers:
            post_headers.update(headers)

        return self._request(
            "POST", endpoint, params=params, json_data=json_data, headers=post_headers
        )

    def post_form(
        self,
        endpoint: str,
        data: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """
        Make POST request with a form-encoded body (OAuth token endpoints).

        Args:
            endpoint: API endpoint path
            data: Form fields
            headers: Additional request headers

        Returns:
            HTTP response object
        """
        post_headers = {"Content-Type": "application/x-www-form-urlencoded"}
        if headers:
            post_headers.update(headers)

        return self._request("POST", endpoint, data=data, headers=post_headers)

    def close(self) -> None:
        """
        Close the HTTP session and cleanup resources.

        Should be called when done using the client, or use the client
        as a context manager.
        """
        self.session.close()
        logger.debug(f"{self.__class__.__name__} closed")

    def __enter__(self) -> "BaseAPIClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - ensures cleanup."""
        self.close()
