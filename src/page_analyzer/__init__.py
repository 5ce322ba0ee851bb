"""Single-page HTML analyzer with concurrent link verification."""

__version__ = "0.1.0"

from page_analyzer.analyzer import PageAnalyzer, analyze_page
from page_analyzer.config import AnalyzerConfig
from page_analyzer.exceptions import (
    AnalysisError,
    FetchError,
    ParseError,
    LinkUnreachable,
    MalformedHref,
)
from page_analyzer.http_client import HttpClient, HttpxClient, FetchedPage
from page_analyzer.link_verifier import LinkVerifier
from page_analyzer.models import (
    DocumentVersion,
    PageAnalysis,
    LinkCheckResult,
    LinkRecord,
    ParsedDocument,
    ResolvedLink,
)
from page_analyzer.parser import DocumentParser, parse_document
from page_analyzer.resolver import resolve, is_internal, classify_links

__all__ = [
    # Core
    "PageAnalyzer",
    "analyze_page",
    "AnalyzerConfig",
    "DocumentParser",
    "parse_document",
    "LinkVerifier",
    "resolve",
    "is_internal",
    "classify_links",
    # Network
    "HttpClient",
    "HttpxClient",
    "FetchedPage",
    # Models
    "DocumentVersion",
    "PageAnalysis",
    "LinkCheckResult",
    "LinkRecord",
    "ParsedDocument",
    "ResolvedLink",
    # Errors
    "AnalysisError",
    "FetchError",
    "ParseError",
    "LinkUnreachable",
    "MalformedHref",
]
