"""
Base HTTP client shared by the Sonarr and TMDB clients
"""

import logging
from typing import Any, Iterable

import requests

from .errors import DecodeError, HTTPStatusError, InvalidURLError, TransportError

logger = logging.getLogger(__name__)


class BaseApiClient:
    """Thin wrapper around a requests session.

    Subclasses set ``api_prefix`` and add their authentication to the
    session. Every failure surfaces as a ``CatalogError`` subclass.
    """

    api_prefix = ""

    def __init__(self, url: str, timeout: float | None = None):
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def build_url(self, endpoint: str) -> str:
        return f"{self.url}{self.api_prefix}/{endpoint.lstrip('/')}"

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict | None = None,
        data: Any = None,
        expected: Iterable[int] = (200,),
    ) -> requests.Response:
        """Send a request and check its status code.

        Raises:
            InvalidURLError: if the URL cannot be built into a request
            TransportError: on connectivity, DNS or TLS failure
            HTTPStatusError: if the status code is not in ``expected``
        """
        url = self.build_url(endpoint)
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method, url, params=params, json=data, timeout=self.timeout
            )
        except (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL,
        ) as e:
            raise InvalidURLError(f"Invalid server URL: {url}") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Network error: {e}") from e

        expected = tuple(expected)
        if response.status_code not in expected:
            raise HTTPStatusError(
                f"{method} {endpoint} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _json(response: requests.Response) -> Any:
        """Parse a response body as JSON"""
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Response is not valid JSON: {e}") from e

    def _get(self, endpoint: str, params: dict | None = None) -> Any:
        """Perform a GET request to the API"""
        return self._json(self._request("GET", endpoint, params=params))

    def close(self):
        self.session.close()
