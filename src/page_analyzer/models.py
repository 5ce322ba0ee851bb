"""Data models for page analysis."""

import json
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from page_analyzer.constants import (
    HEADING_LEVELS,
    INACCESSIBLE_STATUS_THRESHOLD,
    NO_RESPONSE_STATUS,
)


class DocumentVersion(str, Enum):
    """HTML version detected from the leading document declaration."""
    HTML5 = "HTML5"
    HTML4 = "HTML4"
    UNKNOWN = "Unknown"


def empty_heading_counts() -> dict[str, int]:
    """Heading map with every level present and zeroed."""
    return {level: 0 for level in HEADING_LEVELS}


@dataclass(frozen=True)
class ParsedDocument:
    """Metadata and raw hyperlink targets extracted from a page body."""

    base_url: str
    document_version: DocumentVersion = DocumentVersion.UNKNOWN
    title: str = ""
    heading_counts: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType(empty_heading_counts())
    )
    has_login_form: bool = False
    hrefs: tuple[str, ...] = ()


@dataclass(frozen=True)
class ResolvedLink:
    """A hyperlink resolved to an absolute address and classified."""

    index: int  # Discovery order within the document
    address: str
    is_internal: bool


@dataclass(frozen=True)
class LinkCheckResult:
    """Outcome of probing a single address."""

    address: str
    status_code: int = NO_RESPONSE_STATUS

    @property
    def accessible(self) -> bool:
        return NO_RESPONSE_STATUS < self.status_code < INACCESSIBLE_STATUS_THRESHOLD

    def to_dict(self) -> dict:
        return {"url": self.address, "status_code": self.status_code}


@dataclass(frozen=True)
class LinkRecord:
    """A classified link together with its verification outcome."""

    address: str
    is_internal: bool
    status_code: int = NO_RESPONSE_STATUS
    is_inaccessible: bool = False

    def to_dict(self) -> dict:
        return {
            "url": self.address,
            "is_internal": self.is_internal,
            "status_code": self.status_code,
            "is_inaccessible": self.is_inaccessible,
        }


@dataclass(frozen=True)
class PageAnalysis:
    """Structured result of analyzing a single page."""

    url: str
    document_version: DocumentVersion = DocumentVersion.UNKNOWN
    title: str = ""
    heading_counts: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType(empty_heading_counts())
    )
    internal_link_count: int = 0
    external_link_count: int = 0
    has_login_form: bool = False
    broken_links: tuple[LinkCheckResult, ...] = ()
    links: tuple[LinkRecord, ...] = ()
    final_url: Optional[str] = None  # Page address after redirects

    @property
    def inaccessible_count(self) -> int:
        return len(self.broken_links)

    @property
    def total_links(self) -> int:
        return self.internal_link_count + self.external_link_count

    def to_dict(self) -> dict:
        """Serialize using the field names of the JSON API."""
        return {
            "url": self.url,
            "final_url": self.final_url,
            "html_version": self.document_version.value,
            "title": self.title,
            "headings": dict(self.heading_counts),
            "internal_links": self.internal_link_count,
            "external_links": self.external_link_count,
            "inaccessible_links": self.inaccessible_count,
            "login_form": self.has_login_form,
            "broken_links": [link.to_dict() for link in self.broken_links],
            "links": [link.to_dict() for link in self.links],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
