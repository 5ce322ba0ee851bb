"""Concurrent reachability checks for resolved link addresses."""

import asyncio
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from page_analyzer.constants import (
    DEFAULT_MAX_CONCURRENT_PROBES,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    NO_RESPONSE_STATUS,
)
from page_analyzer.exceptions import LinkUnreachable
from page_analyzer.http_client import HttpClient
from page_analyzer.models import LinkCheckResult

logger = logging.getLogger(__name__)


class LinkVerifier:
    """Probes link addresses with a fixed-size pool of asyncio workers.

    Workers pull (index, address) pairs from a shared queue and publish
    results to a single results queue; nothing else is shared between them.
    A failed probe is recorded, never retried and never raised.
    """

    def __init__(
        self,
        client: HttpClient,
        concurrency: int = DEFAULT_MAX_CONCURRENT_PROBES,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
    ):
        """Initialize the verifier.

        Args:
            client: Network capability used for probes
            concurrency: Maximum probes in flight at once
            probe_timeout: Seconds allowed per probe
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        if probe_timeout <= 0:
            raise ValueError("probe_timeout must be positive")
        self.client = client
        self.concurrency = concurrency
        self.probe_timeout = probe_timeout

    async def check(self, address: str) -> LinkCheckResult:
        """Probe one address.

        Returns:
            LinkCheckResult with the response status, or status 0 when no
            response arrived within probe_timeout
        """
        try:
            status = await asyncio.wait_for(
                self.client.probe(address, self.probe_timeout),
                timeout=self.probe_timeout,
            )
        except LinkUnreachable as e:
            logger.debug(f"Link unreachable: {e}")
            return LinkCheckResult(address=address, status_code=NO_RESPONSE_STATUS)
        except asyncio.TimeoutError:
            logger.debug(f"Link probe timed out after {self.probe_timeout}s: {address}")
            return LinkCheckResult(address=address, status_code=NO_RESPONSE_STATUS)
        except Exception as e:
            logger.warning(f"Unexpected error probing {address}: {e}", exc_info=True)
            return LinkCheckResult(address=address, status_code=NO_RESPONSE_STATUS)

        return LinkCheckResult(address=address, status_code=status)

    async def check_all(
        self,
        addresses: Sequence[str],
        deadline: Optional[float] = None,
    ) -> List[LinkCheckResult]:
        """Probe every address.

        Args:
            addresses: Absolute addresses in discovery order
            deadline: Optional event-loop time after which unfinished probes
                are cancelled and reported with status 0

        Returns:
            One LinkCheckResult per address, in the order given
        """
        if not addresses:
            return []

        timeout = None
        if deadline is not None:
            timeout = deadline - asyncio.get_running_loop().time()
            if timeout <= 0:
                logger.warning(
                    f"Deadline passed before checking {len(addresses)} links; "
                    f"reporting them as inaccessible"
                )
                return [
                    LinkCheckResult(address=address, status_code=NO_RESPONSE_STATUS)
                    for address in addresses
                ]

        pending: asyncio.Queue = asyncio.Queue()
        for item in enumerate(addresses):
            pending.put_nowait(item)
        results: asyncio.Queue = asyncio.Queue()

        worker_count = min(self.concurrency, len(addresses))
        workers = [
            asyncio.create_task(self._worker(pending, results))
            for _ in range(worker_count)
        ]

        try:
            _, unfinished = await asyncio.wait(workers, timeout=timeout)
            if unfinished:
                logger.warning(
                    f"Deadline reached with {pending.qsize() + len(unfinished)} "
                    f"link checks outstanding; reporting them as inaccessible"
                )
        finally:
            for worker in workers:
                if not worker.done():
                    worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        collected: Dict[int, LinkCheckResult] = {}
        while not results.empty():
            index, result = results.get_nowait()
            collected[index] = result

        return [
            collected.get(index) or LinkCheckResult(address=address, status_code=NO_RESPONSE_STATUS)
            for index, address in enumerate(addresses)
        ]

    async def verify_all(
        self,
        addresses: Sequence[str],
        deadline: Optional[float] = None,
    ) -> List[LinkCheckResult]:
        """Probe every address and return only the inaccessible ones, in order."""
        results = await self.check_all(addresses, deadline=deadline)
        return [result for result in results if not result.accessible]

    async def _worker(
        self,
        pending: "asyncio.Queue[Tuple[int, str]]",
        results: "asyncio.Queue[Tuple[int, LinkCheckResult]]",
    ) -> None:
        while True:
            try:
                index, address = pending.get_nowait()
            except asyncio.QueueEmpty:
                return
            result = await self.check(address)
            results.put_nowait((index, result))
