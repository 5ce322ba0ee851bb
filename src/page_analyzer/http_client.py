"""HTTP capability used to fetch pages and probe links."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx

from page_analyzer.constants import DEFAULT_REQUEST_HEADERS, DEFAULT_USER_AGENT
from page_analyzer.exceptions import FetchError, LinkUnreachable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedPage:
    """A fully downloaded page."""
    url: str
    final_url: str
    status_code: int
    content: bytes
    encoding: Optional[str] = None  # Charset declared by the response, if any


class HttpClient(ABC):
    """Network capability handed to the analyzer.

    Implementations must be safe to call concurrently from several
    coroutines on the same event loop.
    """

    @abstractmethod
    async def fetch(self, url: str, timeout: float) -> FetchedPage:
        """GET a page with its full body.

        Raises:
            FetchError: On network failure or a non-success status
        """

    @abstractmethod
    async def probe(self, url: str, timeout: float) -> int:
        """Issue a lightweight existence check and return the status code.

        Raises:
            LinkUnreachable: If no response was received
        """

    async def aclose(self) -> None:
        """Release network resources."""

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


class HttpxClient(HttpClient):
    """HttpClient backed by httpx.AsyncClient."""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        verify_ssl: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            user_agent: User agent sent with every request
            verify_ssl: Verify TLS certificates
            transport: Optional transport (e.g. httpx.MockTransport in tests)
        """
        self.user_agent = user_agent
        headers = {"User-Agent": user_agent, **DEFAULT_REQUEST_HEADERS}
        self._client = httpx.AsyncClient(
            headers=headers,
            follow_redirects=True,
            verify=verify_ssl,
            transport=transport,
        )

    async def fetch(self, url: str, timeout: float) -> FetchedPage:
        try:
            response = await self._client.get(url, timeout=timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise FetchError(f"Page returned HTTP {status}", url=url, status_code=status) from e
        except httpx.TimeoutException as e:
            raise FetchError(f"Request timeout after {timeout}s", url=url) from e
        except httpx.InvalidURL as e:
            raise FetchError(f"Invalid URL: {e}", url=url) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Connection error: {e}", url=url) from e

        return FetchedPage(
            url=url,
            final_url=str(response.url),
            status_code=response.status_code,
            content=response.content,
            encoding=response.charset_encoding,
        )

    async def probe(self, url: str, timeout: float) -> int:
        try:
            response = await self._client.head(url, timeout=timeout)
        except httpx.TimeoutException as e:
            raise LinkUnreachable(url, f"timed out after {timeout}s") from e
        except httpx.InvalidURL as e:
            raise LinkUnreachable(url, f"invalid URL: {e}") from e
        except httpx.HTTPError as e:
            raise LinkUnreachable(url, str(e) or type(e).__name__) from e
        return response.status_code

    async def aclose(self) -> None:
        await self._client.aclose()
