"""Shared fixtures for page analyzer tests."""

import asyncio

import pytest

from page_analyzer.http_client import FetchedPage, HttpClient


class ScriptedClient(HttpClient):
    """HttpClient with canned pages and probe outcomes.

    Probe outcomes are status codes or exceptions to raise; unknown
    addresses answer 200. ``delays`` holds seconds to wait before answering.
    """

    def __init__(self, pages=None, statuses=None, delays=None):
        self.pages = pages or {}
        self.statuses = statuses or {}
        self.delays = delays or {}
        self.fetched = []
        self.probed = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def fetch(self, url, timeout):
        self.fetched.append(url)
        delay = self.delays.get(url)
        if delay:
            await asyncio.sleep(delay)
        outcome = self.pages[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def probe(self, url, timeout):
        self.probed.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(url)
            if delay:
                await asyncio.sleep(delay)
            outcome = self.statuses.get(url, 200)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1

    async def aclose(self):
        self.closed = True


def html_page(url: str, body: str, final_url: str = None) -> FetchedPage:
    """Build a successful FetchedPage for an HTML body."""
    return FetchedPage(
        url=url,
        final_url=final_url or url,
        status_code=200,
        content=body.encode("utf-8"),
        encoding="utf-8",
    )


@pytest.fixture
def scripted_client():
    """Factory for ScriptedClient instances."""
    return ScriptedClient


@pytest.fixture
def make_page():
    """Factory for successful HTML FetchedPage instances."""
    return html_page
