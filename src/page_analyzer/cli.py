"""Command-line interface for the page analyzer."""

import sys
from dataclasses import replace
from typing import Optional, Sequence

from page_analyzer.analyzer import analyze_page
from page_analyzer.config import AnalyzerConfig
from page_analyzer.exceptions import AnalysisError
from page_analyzer.logging_config import get_logger, setup_logging
from page_analyzer.models import PageAnalysis

logger = get_logger(__name__)


def print_analysis(analysis: PageAnalysis):
    """Print a page analysis in a formatted way.

    Args:
        analysis: PageAnalysis object
    """
    print(f"\n{'=' * 60}")
    print(f"Page Analysis for: {analysis.url}")
    print(f"{'=' * 60}")
    print(f"\nHTML Version: {analysis.document_version.value}")
    print(f"Title: {analysis.title or 'No title'}")
    print(f"Login Form: {'yes' if analysis.has_login_form else 'no'}")

    print(f"\nHeadings:")
    for level, count in analysis.heading_counts.items():
        print(f"  • {level.upper()}: {count}")

    print(f"\nLinks:")
    print(f"  • Internal: {analysis.internal_link_count}")
    print(f"  • External: {analysis.external_link_count}")
    print(f"  • Inaccessible: {analysis.inaccessible_count}")

    if analysis.broken_links:
        print(f"\n⚠️  Broken Links:")
        for link in analysis.broken_links:
            status = link.status_code or "no response"
            print(f"  • [{status}] {link.address}")

    print(f"\n{'=' * 60}\n")


def _build_config(args, config: AnalyzerConfig) -> AnalyzerConfig:
    overrides = {
        "max_concurrent_probes": args.max_concurrent,
        "probe_timeout": args.probe_timeout,
        "fetch_timeout": args.fetch_timeout,
        "analysis_deadline": args.deadline,
    }
    return replace(config, **{k: v for k, v in overrides.items() if v is not None})


def analyze_command(args, config: AnalyzerConfig) -> int:
    """Analyze a single URL."""
    try:
        config = _build_config(args, config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        analysis = analyze_page(args.url, config=config)
    except AnalysisError as e:
        logger.error(f"Analysis failed ({e.kind}): {e}")
        print(f"\n❌ Failed to analyze {args.url}: {e}", file=sys.stderr)
        return 1

    if args.output == "json":
        output = analysis.to_json()
        if args.output_file:
            with open(args.output_file, "w") as f:
                f.write(output)
            print(f"\nReport written to {args.output_file}")
        else:
            print(output)
    else:
        print_analysis(analysis)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Page Analyzer - Inspect a web page's structure and verify its links"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging verbosity (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser(
        "analyze", help="Analyze a single page and check its links."
    )
    analyze_parser.add_argument("url", help="Absolute http(s) URL of the page")
    analyze_parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    analyze_parser.add_argument(
        "--output-file",
        "-f",
        help="Write output to file (only for json format)",
    )
    analyze_parser.add_argument(
        "--max-concurrent",
        type=int,
        help="Maximum concurrent link checks (default: MAX_CONCURRENT_PROBES or 10)",
    )
    analyze_parser.add_argument(
        "--probe-timeout",
        type=float,
        help="Seconds allowed per link check (default: PROBE_TIMEOUT or 5)",
    )
    analyze_parser.add_argument(
        "--fetch-timeout",
        type=float,
        help="Seconds allowed to download the page (default: FETCH_TIMEOUT or 10)",
    )
    analyze_parser.add_argument(
        "--deadline",
        type=float,
        help="Seconds the whole analysis may take (default: unbounded)",
    )
    analyze_parser.set_defaults(func=analyze_command)

    args = parser.parse_args(argv)

    try:
        config = AnalyzerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_logging(
        level=args.log_level or config.log_level,
        log_file=getattr(args, 'log_file', None),
    )
    logger.debug(f"Configuration: {config.to_dict()}")

    if hasattr(args, "func"):
        return args.func(args, config)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
