# =============================================================================
# Moondream Client - Command-Line Entry Point
# =============================================================================
# Thin argparse wrapper around Client for calling the Moondream API from a
# shell. Prints the raw response body to stdout; caption --stream prints
# chunks as they arrive.
#
#   moondream query https://example.com/cat.jpg "What is in this image?"
#   moondream caption https://example.com/cat.jpg --length short --stream
# =============================================================================

import argparse
import logging
import sys

from config import get_config
from moondream.client import Client
from moondream.errors import InvalidArgument, TransportError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _build_parser(config) -> argparse.ArgumentParser:
    """Assemble the parser with one subcommand per API operation."""
    parser = argparse.ArgumentParser(
        prog="moondream",
        description="Moondream API client: query, detect, point, caption",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--api-key", type=str, default=None,
        help="Moondream API key (overrides MOONDREAM_API_KEY)",
    )
    parser.add_argument(
        "--log-level", type=str.upper, default=None, choices=LOG_LEVELS,
        help="Logging level (overrides MOONDREAM_LOG_LEVEL)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    query = commands.add_parser("query", help="Ask a question about an image")
    query.add_argument("image_url")
    query.add_argument("prompt")

    detect = commands.add_parser("detect", help="Detect bounding boxes of an object")
    detect.add_argument("image_url")
    detect.add_argument("object")

    point = commands.add_parser("point", help="Locate center points of an object")
    point.add_argument("image_url")
    point.add_argument("object")

    caption = commands.add_parser("caption", help="Caption an image")
    caption.add_argument("image_url")
    caption.add_argument("--length", type=str, default=config.caption_length)
    caption.add_argument(
        "--stream", action=argparse.BooleanOptionalAction, default=config.caption_stream,
        help="Print the caption as it streams in",
    )
    return parser


def _write_chunk(chunk: str) -> None:
    sys.stdout.write(chunk)
    sys.stdout.flush()


def run(client: Client, args: argparse.Namespace) -> str:
    """
    Dispatch parsed arguments to the matching client operation.

    Returns:
        str: The response body. When streaming, it has already been written
        to stdout chunk by chunk.
    """
    logger.debug("Running %s on %s", args.command, args.image_url)
    if args.command == "query":
        return client.query(args.image_url, args.prompt)
    if args.command == "detect":
        return client.detect(args.image_url, args.object)
    if args.command == "point":
        return client.point(args.image_url, args.object)
    return client.caption(
        image_url=args.image_url,
        length=args.length,
        stream=args.stream,
        on_chunk=_write_chunk if args.stream else None,
    )


def main(argv=None) -> int:
    """CLI entry point for the Moondream client."""
    config = get_config()
    args = _build_parser(config).parse_args(argv)

    level = (args.log_level or config.log_level).upper()
    if level not in LOG_LEVELS:
        print(
            f"error: invalid log level {level!r}; choose from {', '.join(LOG_LEVELS)}",
            file=sys.stderr,
        )
        return 2

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        client = Client(api_key=args.api_key or config.api_key)
    except InvalidArgument:
        print("error: no API key; pass --api-key or set MOONDREAM_API_KEY", file=sys.stderr)
        return 2

    try:
        body = run(client, args)
    except TransportError as exc:
        print(f"error: request failed: {exc}", file=sys.stderr)
        return 1

    if args.command == "caption" and args.stream:
        sys.stdout.write("\n")
    else:
        sys.stdout.write(body + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
