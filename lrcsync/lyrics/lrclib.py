"""
LRCLIB API client for synchronized lyrics lookups

LRCLIB exposes two lookup protocols that this client wraps:

- Exact lookup (`GET /api/get`): keyed by track, artist, album and duration,
  returns at most one record.
- Search (`GET /api/search`): keyed by track, artist and album, returns a list
  of records that the caller ranks itself.

Status mapping is the same for both:
- 2xx: body decoded into LyricsCandidate records; a body that does not match
  the schema raises SchemaError, since it means the API changed
- 404: logical "not found", returned as None
- anything else: ServiceError carrying the status
- no response at all (connection error, timeout): TransportError

Nothing is retried here. A failure belongs to the file being resolved and the
caller moves on to the next one.
"""

from typing import Any, List, Optional

import requests

from ..config.settings import get_settings
from ..exceptions import SchemaError, ServiceError, TransportError
from ..utils.helpers import build_user_agent
from ..utils.logger import get_logger
from .models import LookupQuery, LyricsCandidate


class LrclibClient:
    """
    HTTP client for an LRCLIB-compatible lyrics service

    One requests.Session is kept for the lifetime of the client so that the
    connection pool is reused across files. The client holds no per-file
    state and can be shared by independent resolutions.
    """

    def __init__(self, base_url: str = "https://lrclib.net", timeout: float = 30.0, user_agent: Optional[str] = None):
        """
        Initialize the client

        Args:
            base_url: Service root, e.g. https://lrclib.net (trailing slashes are ignored)
            timeout: Per-request timeout in seconds, enforced by the transport
            user_agent: Identification string; defaults to lrcsync/<version> (<homepage>)
        """
        self.logger = get_logger(__name__)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        agent = user_agent or build_user_agent()
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': agent,
            'Lrclib-Client': agent,
        })

    def exact_get(self, query: LookupQuery) -> Optional[LyricsCandidate]:
        """
        Look up the single record matching the query exactly

        Args:
            query: Lookup parameters; artist_name is always sent

        Returns:
            The matching candidate, or None when the service has no match

        Raises:
            TransportError: If no response was received
            ServiceError: On a non-success status other than 404
            SchemaError: If the body is not a single lyrics record
        """
        data = self._request("/api/get", query.to_get_params())
        if data is None:
            return None
        return LyricsCandidate.from_api_data(data)

    def fuzzy_search(self, query: LookupQuery) -> Optional[List[LyricsCandidate]]:
        """
        Search for records loosely matching the query

        Duration is never sent: ranking by duration happens client-side.

        Args:
            query: Lookup parameters; empty artist and absent album are left out

        Returns:
            Candidates in service order (possibly empty), or None on a 404

        Raises:
            TransportError: If no response was received
            ServiceError: On a non-success status other than 404
            SchemaError: If the body is not a list of lyrics records
        """
        data = self._request("/api/search", query.to_search_params())
        if data is None:
            return None
        if not isinstance(data, list):
            raise SchemaError(
                f"Expected a list of lyrics records from search, got {type(data).__name__}",
                details={'url': f"{self.base_url}/api/search"}
            )
        return [LyricsCandidate.from_api_data(item) for item in data]

    def _request(self, endpoint: str, params) -> Optional[Any]:
        """
        Perform a GET request and decode the JSON body

        Args:
            endpoint: Path below the base URL
            params: Ordered query parameters

        Returns:
            Decoded JSON body, or None on a 404
        """
        url = f"{self.base_url}{endpoint}"
        self.logger.debug(f"GET {url} {params}")

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"Request to {url} failed: {e}",
                details={'url': url, 'original_error': e}
            )

        if response.status_code == 404:
            self.logger.debug(f"{url} returned 404")
            return None

        if not response.ok:
            raise ServiceError(
                f"Lyrics service returned HTTP {response.status_code} for {endpoint}",
                status_code=response.status_code,
                details={'url': response.url}
            )

        try:
            return response.json()
        except ValueError as e:
            raise SchemaError(
                f"Error parsing lrclib response (did the api schema change?): {e}",
                details={'url': response.url, 'original_error': e}
            )

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()

    def __enter__(self) -> 'LrclibClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


# Global LRCLIB client instance management using singleton pattern
_lrclib_client: Optional[LrclibClient] = None


def get_lrclib_client() -> LrclibClient:
    """
    Get global LRCLIB client instance using singleton pattern

    The client is created from the current settings on first access and
    reused afterwards, so every file shares one connection pool.

    Returns:
        Global LrclibClient instance
    """
    global _lrclib_client
    if not _lrclib_client:
        settings = get_settings()
        _lrclib_client = LrclibClient(
            base_url=settings.lrclib.url,
            timeout=float(settings.lrclib.timeout),
            user_agent=settings.lrclib.user_agent or None,
        )
    return _lrclib_client


def reset_lrclib_client() -> None:
    """
    Reset global LRCLIB client instance

    Closes the current client so the next get_lrclib_client() call builds a
    new one from the current settings (used after CLI overrides and in tests).
    """
    global _lrclib_client
    if _lrclib_client:
        _lrclib_client.close()
    _lrclib_client = None
