# src/page_analyzer/constants.py
"""Centralized constants for the page analyzer.

Defaults for user-configurable values live here; see config.py and
AnalyzerConfig for the environment overrides.
"""

# =============================================================================
# Network Defaults
# =============================================================================

# Seconds allowed for the full GET of the analyzed page
DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0

# Seconds allowed for a single link existence probe
DEFAULT_PROBE_TIMEOUT_SECONDS = 5.0

# Number of link probes in flight at once
DEFAULT_MAX_CONCURRENT_PROBES = 10

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; Page-Analyzer/1.0)"

DEFAULT_REQUEST_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


# =============================================================================
# Link Verification
# =============================================================================

# Status code recorded when a probe got no response at all
NO_RESPONSE_STATUS = 0

# Lowest status code considered inaccessible
INACCESSIBLE_STATUS_THRESHOLD = 400

# Schemes that can be probed over the network
NETWORK_SCHEMES = frozenset({"http", "https"})


# =============================================================================
# Document Parsing
# =============================================================================

HEADING_LEVELS = ("h1", "h2", "h3", "h4", "h5", "h6")

# Leading bytes inspected for binary content
BINARY_SNIFF_BYTES = 1024

PARSER_FEATURES = "html.parser"
