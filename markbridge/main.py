"""Command line entry point for MarkBridge."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from markbridge import __version__
from markbridge.adapters import SlackChannelDirectory, load_identity_mapping
from markbridge.config import Settings, load_config
from markbridge.exceptions import ConfigurationError
from markbridge.markup import ConversionContext, DialectPair, convert, convert_title

PAIR_NAMES = {
    "github-slack": DialectPair.GITHUB_TO_SLACK,
    "slack-github": DialectPair.SLACK_TO_GITHUB,
    "bitbucket-slack": DialectPair.BITBUCKET_TO_SLACK,
    "slack-bitbucket": DialectPair.SLACK_TO_BITBUCKET,
}


def setup_logging(debug: bool = False) -> None:
    """Configure structured logging.

    Logs go to stderr: stdout carries the converted text.
    """
    level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.processors.JSONRenderer()
                if not debug
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="markbridge",
        description="Translate pull request markup between GitHub, Bitbucket and Slack",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version", action="version", version=f"MarkBridge {__version__}"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--env-file", type=Path, help="Path to a .env file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    convert_parser = subparsers.add_parser("convert", help="Convert a message body")
    convert_parser.add_argument(
        "--pair", required=True, choices=sorted(PAIR_NAMES), help="Translation direction"
    )
    convert_parser.add_argument("--thread-url", default="", help="Pull request URL")
    convert_parser.add_argument(
        "--short-url", default="", help="Link target for shortened hyperlinks"
    )
    convert_parser.add_argument(
        "--identities", type=Path, help="JSON file mapping platform users to identities"
    )
    convert_parser.add_argument(
        "file", nargs="?", type=Path, help="Input file (default: stdin)"
    )

    title_parser = subparsers.add_parser("title", help="Linkify a pull request title")
    title_parser.add_argument("--thread-url", default="", help="Pull request URL")
    title_parser.add_argument("title", help="Pull request title")

    return parser.parse_args(argv)


def _read_input(path: Optional[Path]) -> str:
    if path is None:
        return sys.stdin.read()
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read input file {path}: {e}")


def build_context(args: argparse.Namespace, config: Settings) -> ConversionContext:
    """Create the conversion context for a ``convert`` invocation."""
    identities = load_identity_mapping(args.identities) if args.identities else None

    channels = None
    token = config.slack_bot_token_str
    if token:
        channels = SlackChannelDirectory.from_token(token)

    return config.conversion_context(
        pair=PAIR_NAMES[args.pair],
        thread_url=args.thread_url,
        short_url=args.short_url,
        identities=identities,
        channels=channels,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit status."""
    args = parse_args(argv)
    setup_logging(debug=args.debug)
    logger = structlog.get_logger()

    try:
        config = load_config(env_file=args.env_file)
        if not args.debug:
            logging.getLogger().setLevel("DEBUG" if config.debug else config.log_level)

        if args.command == "title":
            context = config.conversion_context(thread_url=args.thread_url)
            print(convert_title(args.title, context))
            return 0

        context = build_context(args, config)
        text = _read_input(args.file)
        sys.stdout.write(convert(text, context=context))
        return 0

    except ConfigurationError as e:
        logger.error("Configuration error", error=str(e))
        return 1


def run() -> None:
    """Synchronous entry point for setuptools."""
    sys.exit(main())


if __name__ == "__main__":
    run()
