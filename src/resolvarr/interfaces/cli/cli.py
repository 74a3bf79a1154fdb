from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from resolvarr.domain.entities.streams import RawStream
from resolvarr.infrastructure.config import AppConfig, load_config
from resolvarr.infrastructure.logging.setup import configure_logging, shutdown_logging
from resolvarr.interfaces.composition import resolver_session

log = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_NO_STREAMS = 1
EXIT_USAGE = 2


def _parse_header(value: str) -> tuple[str, str]:
    name, sep, content = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME:VALUE, got {value!r}")
    return name.strip(), content.strip()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resolvarr",
        description="Resolve a video host page into playable stream URLs.",
    )
    parser.add_argument("url", nargs="?", help="Embed/page URL to resolve.")

    # Request options
    parser.add_argument(
        "--referer",
        default=None,
        help="Referer sent with the first page request.",
    )
    parser.add_argument(
        "--header",
        action="append",
        type=_parse_header,
        default=[],
        metavar="NAME:VALUE",
        help="Extra request header (repeatable).",
    )

    # Output options
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print streams as a JSON array.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List supported extractor ids and exit.",
    )

    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )
    parser.add_argument(
        "--timeout",
        default=None,
        type=float,
        help="Per-request timeout in seconds (10-20).",
    )
    return parser


def _format_stream(stream: RawStream) -> str:
    kind = "hls" if stream.is_m3u8 else "file"
    line = f"[{stream.quality}] {stream.source_label or '-'} ({kind}) {stream.url}"
    extras = [f"    {k}: {v}" for k, v in stream.headers.items()]
    extras += [
        f"    subtitle {sub.language or sub.name or '?'}: {sub.url}"
        for sub in stream.subtitles
    ]
    return "\n".join([line, *extras])


def _render(streams: Sequence[RawStream], as_json: bool) -> str:
    if as_json:
        return json.dumps([s.to_dict() for s in streams], indent=2)
    return "\n".join(_format_stream(s) for s in streams)


async def _run(args: argparse.Namespace, config: AppConfig) -> int:
    async with resolver_session(config) as resolver:
        if args.list:
            for descriptor in resolver.registry.descriptors:
                patterns = ", ".join(p.pattern for p in descriptor.patterns)
                marker = " (composite)" if descriptor.composite else ""
                print(f"{descriptor.id}{marker}: {patterns}")
            return EXIT_OK

        log.debug("cli_resolve_start", url=args.url)
        streams = await resolver.resolve(
            args.url,
            referer=args.referer,
            headers=dict(args.header),
        )

    if streams or args.json:
        print(_render(streams, args.json))
    return EXIT_OK if streams else EXIT_NO_STREAMS


def start(argv: Iterable[str] | None = None) -> int:
    """Process entrypoint; returns the exit code."""
    if argv is None:
        argv = sys.argv[1:]

    parser = _build_parser()
    args = parser.parse_args(list(argv))
    if not args.list and not args.url:
        parser.error("a URL is required unless --list is given")

    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format
    if args.timeout is not None:
        cli_overrides["http_timeout_seconds"] = args.timeout

    try:
        config = load_config(
            config_path=Path(args.config) if args.config else None,
            dotenv_path=Path(args.dotenv) if args.dotenv else None,
            cli_overrides=cli_overrides,
        )
    except (ValidationError, FileNotFoundError, ValueError) as exc:
        print(f"resolvarr: configuration error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    configure_logging(config)
    try:
        return asyncio.run(_run(args, config))
    finally:
        shutdown_logging()


if __name__ == "__main__":
    raise SystemExit(start())
