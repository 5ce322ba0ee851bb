"""Single-page analysis: fetch, parse, classify and verify links."""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from urllib.parse import urlsplit

from page_analyzer.config import AnalyzerConfig
from page_analyzer.constants import NETWORK_SCHEMES
from page_analyzer.exceptions import FetchError, ParseError
from page_analyzer.http_client import FetchedPage, HttpClient, HttpxClient
from page_analyzer.link_verifier import LinkVerifier
from page_analyzer.models import LinkRecord, PageAnalysis
from page_analyzer.parser import DocumentParser
from page_analyzer.resolver import classify_links, host_of

logger = logging.getLogger(__name__)


class PageAnalyzer:
    """Analyzes a single web page.

    A failure to fetch or parse the page itself raises an AnalysisError
    (FetchError or ParseError). Problems with individual links never raise;
    they are reported in PageAnalysis.broken_links.
    """

    def __init__(
        self,
        config: Optional[AnalyzerConfig] = None,
        client: Optional[HttpClient] = None,
        parser: Optional[DocumentParser] = None,
    ):
        """Initialize the analyzer.

        Args:
            config: Timeouts, concurrency and client settings
            client: Network capability; when omitted an HttpxClient is
                created for each analysis and closed afterwards
            parser: Document parser to use
        """
        self.config = config or AnalyzerConfig()
        self._client = client
        self.parser = parser or DocumentParser()

    @asynccontextmanager
    async def _client_session(self) -> AsyncIterator[HttpClient]:
        if self._client is not None:
            yield self._client
            return
        async with HttpxClient(
            user_agent=self.config.user_agent,
            verify_ssl=self.config.verify_ssl,
        ) as client:
            yield client

    async def analyze(self, page_url: str, deadline: Optional[float] = None) -> PageAnalysis:
        """Analyze a page.

        Args:
            page_url: Absolute http(s) address of the page
            deadline: Seconds the whole analysis may take; defaults to
                config.analysis_deadline. Link checks still running when it
                expires are reported as inaccessible.

        Returns:
            Fully populated PageAnalysis

        Raises:
            FetchError: If the page could not be retrieved
            ParseError: If the body could not be parsed
        """
        page_url = page_url.strip()
        base_host = self._validate_page_url(page_url)

        loop = asyncio.get_running_loop()
        if deadline is None:
            deadline = self.config.analysis_deadline
        deadline_at = loop.time() + deadline if deadline is not None else None

        start_time = time.time()
        logger.info(f"Analyzing {page_url}")

        async with self._client_session() as client:
            page = await self._fetch(client, page_url, deadline_at)
            try:
                document = self.parser.parse(page.content, page_url, encoding=page.encoding)
            except ParseError as e:
                logger.warning(f"Failed to parse {page_url}: {e}")
                raise

            links = classify_links(document.hrefs, document.base_url, base_host)
            verifier = LinkVerifier(
                client,
                concurrency=self.config.max_concurrent_probes,
                probe_timeout=self.config.probe_timeout,
            )
            results = await verifier.check_all(
                [link.address for link in links], deadline=deadline_at
            )

        records = tuple(
            LinkRecord(
                address=link.address,
                is_internal=link.is_internal,
                status_code=result.status_code,
                is_inaccessible=not result.accessible,
            )
            for link, result in zip(links, results)
        )
        internal = sum(1 for link in links if link.is_internal)

        analysis = PageAnalysis(
            url=page_url,
            final_url=page.final_url,
            document_version=document.document_version,
            title=document.title,
            heading_counts=document.heading_counts,
            internal_link_count=internal,
            external_link_count=len(links) - internal,
            has_login_form=document.has_login_form,
            broken_links=tuple(result for result in results if not result.accessible),
            links=records,
        )

        logger.info(
            f"Analyzed {page_url} in {time.time() - start_time:.2f}s: "
            f"{analysis.internal_link_count} internal, "
            f"{analysis.external_link_count} external, "
            f"{analysis.inaccessible_count} inaccessible"
        )
        return analysis

    async def _fetch(
        self, client: HttpClient, page_url: str, deadline_at: Optional[float]
    ) -> FetchedPage:
        timeout = self.config.fetch_timeout
        if deadline_at is not None:
            remaining = deadline_at - asyncio.get_running_loop().time()
            if remaining <= 0:
                raise FetchError("Analysis deadline exceeded before fetch", url=page_url)
            timeout = min(timeout, remaining)

        try:
            return await asyncio.wait_for(client.fetch(page_url, timeout), timeout=timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"Fetch of {page_url} timed out after {timeout:.2f}s")
            raise FetchError(f"Request timeout after {timeout:.2f}s", url=page_url) from e
        except FetchError as e:
            logger.warning(f"Failed to fetch {page_url}: {e}")
            raise

    @staticmethod
    def _validate_page_url(page_url: str) -> str:
        """Return the page host, raising FetchError for unusable addresses."""
        try:
            scheme = urlsplit(page_url).scheme.lower()
        except ValueError as e:
            raise FetchError(f"Invalid URL: {e}", url=page_url) from e
        if scheme not in NETWORK_SCHEMES:
            raise FetchError(f"Unsupported URL scheme {scheme!r}", url=page_url)
        host = host_of(page_url)
        if not host:
            raise FetchError("URL has no host", url=page_url)
        return host


def analyze_page(
    page_url: str,
    config: Optional[AnalyzerConfig] = None,
    deadline: Optional[float] = None,
) -> PageAnalysis:
    """Synchronously analyze a page (runs its own event loop).

    Raises:
        AnalysisError: If the page could not be fetched or parsed
    """
    analyzer = PageAnalyzer(config=config)
    return asyncio.run(analyzer.analyze(page_url, deadline=deadline))
