"""
Command line entry point.

Usage:
    # Parse one or more gzip files, events as NDJSON on stdout
    linehaul data/edge-1.log.gz data/edge-2.log.gz

    # Read from stdin, JSON logs, write events to a file
    cat edge.log.gz | linehaul - --log-style json --output events.ndjson

    # Only package downloads, quieter logs
    LINEHAUL_LOG=info linehaul --downloads-only data/edge-1.log.gz
"""

import argparse
import json
import logging
import sys
from typing import IO, Iterable, Optional

from .config.settings import Settings, get_settings
from .events.models import Event
from .ingestion.exceptions import DecompressionError
from .pipeline.driver import ProcessingStats, process_file, process_reader
from .pipeline.logging_setup import LogStyle, configure_logging
from .ua.parser import default_parser

logger = logging.getLogger(__name__)


def write_ndjson(events: Iterable[Event], stream: IO[str]) -> int:
    """
    Write events as newline-delimited JSON.

    Args:
        events: Events to write
        stream: Text stream to write to

    Returns:
        Number of events written
    """
    count = 0
    for event in events:
        stream.write(json.dumps(event.to_dict(), sort_keys=True))
        stream.write("\n")
        count += 1
    return count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linehaul",
        description="Parse CDN syslog files into package download events",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  linehaul data/edge-1.log.gz
  cat edge.log.gz | linehaul - --log-style json
  LINEHAUL_LOG=info,linehaul.pipeline=trace linehaul data/edge-1.log.gz
        """,
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        help="Gzip-compressed syslog files, or '-' for stdin",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Write NDJSON events to this file (default: stdout)",
    )
    parser.add_argument(
        "--log-style",
        choices=[style.value for style in LogStyle],
        help="Log rendering (default: LINEHAUL_LOG_STYLE or 'readable')",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Log level directives (default: LINEHAUL_LOG or 'debug')",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="YAML config file (default: LINEHAUL_CONFIG or linehaul.yaml)",
    )
    parser.add_argument(
        "--downloads-only",
        action="store_true",
        help="Only emit events that reference a distribution file",
    )
    return parser


def _resolve_settings(args: argparse.Namespace) -> Settings:
    settings = get_settings(args.config)
    if args.log_style:
        settings = Settings(
            log_level=settings.log_level,
            log_style=args.log_style,
            ignored_user_agents=settings.ignored_user_agents,
        )
    if args.log_level:
        settings = Settings(
            log_level=args.log_level,
            log_style=settings.log_style,
            ignored_user_agents=settings.ignored_user_agents,
        )
    return settings


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the command line.

    Returns:
        Exit status: 0 on success, 1 on fatal errors, 2 on bad configuration,
        130 when interrupted
    """
    args = build_parser().parse_args(argv)
    settings = _resolve_settings(args)

    errors = settings.validate()
    if errors:
        for error in errors:
            print(f"linehaul: configuration error: {error}", file=sys.stderr)
        return 2

    # Logs go to stderr when events are written to stdout
    log_stream = sys.stderr if not args.output else sys.stdout
    try:
        configure_logging(
            LogStyle(settings.log_style), level=settings.log_level, stream=log_stream
        )
    except ValueError as e:
        print(f"linehaul: configuration error: {e}", file=sys.stderr)
        return 2

    ua_parser = default_parser(tuple(settings.ignored_user_agents))
    stats = ProcessingStats()

    output = open(args.output, "w", encoding="utf-8") if args.output else sys.stdout
    try:
        for input_path in args.inputs:
            if input_path == "-":
                events = process_reader(
                    sys.stdin.buffer, ua_parser=ua_parser, stats=stats, source="<stdin>"
                )
            else:
                events = process_file(input_path, ua_parser=ua_parser, stats=stats)

            if args.downloads_only:
                events = (event for event in events if event.is_download)

            written = write_ndjson(events, output)
            logger.info(f"Processed {input_path}: {written} events")
    except (DecompressionError, FileNotFoundError, PermissionError) as e:
        logger.error(f"Ingestion failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    finally:
        if output is not sys.stdout:
            output.close()
        logger.info("Processing summary", extra={"context": stats.to_dict()})

    return 0
