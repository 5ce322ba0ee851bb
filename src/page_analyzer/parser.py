"""HTML document parsing and metadata extraction."""

import logging
from types import MappingProxyType
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Doctype, ParserRejectedMarkup, Tag, UnicodeDammit

from page_analyzer.constants import BINARY_SNIFF_BYTES, HEADING_LEVELS, PARSER_FEATURES
from page_analyzer.exceptions import ParseError
from page_analyzer.models import DocumentVersion, ParsedDocument

logger = logging.getLogger(__name__)


def detect_document_version(soup: BeautifulSoup) -> DocumentVersion:
    """Detect the HTML version from the leading document declaration.

    Only the declaration before the first element is inspected:
    ``<!DOCTYPE html>`` is HTML5, a declaration with a PUBLIC identifier
    is HTML4, and anything else is Unknown. Keyword and name are compared
    case-insensitively, so ``<!doctype HTML>`` is HTML5 too, unlike a
    byte-exact match on ``<!DOCTYPE html>``.
    """
    for node in soup.contents:
        if isinstance(node, Doctype):
            return _classify_doctype(str(node))
        if isinstance(node, Tag):
            break
        # Whitespace, comments and processing instructions may precede it
    return DocumentVersion.UNKNOWN


def _classify_doctype(declaration: str) -> DocumentVersion:
    tokens = declaration.split()
    if tokens and tokens[0].lower() == "doctype":
        tokens = tokens[1:]
    if [t.lower() for t in tokens] == ["html"]:
        return DocumentVersion.HTML5
    if any(t.upper() == "PUBLIC" for t in tokens):
        return DocumentVersion.HTML4
    return DocumentVersion.UNKNOWN


class DocumentParser:
    """Turns raw page bytes into a ParsedDocument."""

    def __init__(self, features: str = PARSER_FEATURES):
        """Initialize the parser.

        Args:
            features: BeautifulSoup tree builder to use
        """
        self.features = features

    def parse(self, raw: bytes, base_url: str, encoding: Optional[str] = None) -> ParsedDocument:
        """Parse a page body.

        Args:
            raw: Response body
            base_url: Declared address of the page
            encoding: Charset from the response headers, if any

        Returns:
            ParsedDocument with metadata and hrefs in document order

        Raises:
            ParseError: If the body cannot be read as a document tree
        """
        # Decode before sniffing: UTF-16/32 pages are full of NUL bytes
        dammit = UnicodeDammit(raw, [encoding] if encoding else [], is_html=True)
        markup = dammit.unicode_markup
        if markup is None:
            raise ParseError("Response body could not be decoded", url=base_url)
        if "\x00" in markup[:BINARY_SNIFF_BYTES]:
            raise ParseError("Response body is binary, not a document", url=base_url)

        try:
            soup = BeautifulSoup(markup, self.features)
        except ParserRejectedMarkup as e:
            raise ParseError(f"Parser rejected markup: {e}", url=base_url) from e

        title = soup.find("title")
        heading_counts = {level: len(soup.find_all(level)) for level in HEADING_LEVELS}
        has_login_form = soup.find("input", attrs={"type": "password"}) is not None

        hrefs = []
        for anchor in soup.find_all("a", href=True):
            href = anchor["href"]
            if href:
                hrefs.append(href)

        document = ParsedDocument(
            base_url=self._document_base(soup, base_url),
            document_version=detect_document_version(soup),
            title=title.get_text(strip=True) if title else "",
            heading_counts=MappingProxyType(heading_counts),
            has_login_form=has_login_form,
            hrefs=tuple(hrefs),
        )
        logger.debug(
            f"Parsed {base_url}: version={document.document_version.value}, "
            f"{len(document.hrefs)} hrefs"
        )
        return document

    @staticmethod
    def _document_base(soup: BeautifulSoup, base_url: str) -> str:
        base = soup.find("base", href=True)
        if base is None or not base["href"].strip():
            return base_url
        try:
            return urljoin(base_url, base["href"].strip())
        except ValueError:
            return base_url


def parse_document(raw: bytes, base_url: str, encoding: Optional[str] = None) -> ParsedDocument:
    """Convenience wrapper around DocumentParser.parse."""
    return DocumentParser().parse(raw, base_url, encoding=encoding)
