from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from collections.abc import Iterable
from dataclasses import asdict
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from dopeflix.domain.entities.media import EpisodeDescriptor
from dopeflix.domain.exceptions import FetchError, StructuralParseError
from dopeflix.infrastructure.config import AppConfig, load_config
from dopeflix.infrastructure.logging.setup import configure_logging
from dopeflix.interfaces.composition import build_services, create_http_client
from dopeflix.interfaces.main import build_app

log = structlog.get_logger(__name__)


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="dopeflix")

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
        "--domain",
        default=None,
        help="Override the active mirror domain.",
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

    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument(
        "--host",
        default=None,
        help="Bind host (overrides HOST env).",
    )
    serve.add_argument(
        "--port",
        default=None,
        type=int,
        help="Bind port (overrides PORT env).",
    )

    episodes = sub.add_parser("episodes", help="List a show's episodes as JSON.")
    episodes.add_argument("url", help="Show watch page path or URL.")

    videos = sub.add_parser("videos", help="Resolve an episode's videos as JSON.")
    videos.add_argument("url", help="Episode server-list URL.")
    videos.add_argument("--referer", default="", help="Page that led to the episode.")
    videos.add_argument("--quality", default=None, help="Preferred quality.")
    videos.add_argument(
        "--sub-language", default=None, help="Preferred subtitle language."
    )

    return parser.parse_args(argv)


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    cli_overrides: dict[str, Any] = {}
    if args.domain:
        cli_overrides["source_domain"] = args.domain
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format
    return cli_overrides


async def _list_episodes(config: AppConfig, url: str) -> dict[str, Any]:
    async with create_http_client(config) as http_client:
        uc = build_services(config, http_client).episodes_uc
        show_page = await uc.fetch_show_page(url)
        episodes = await uc.execute(show_page)
    return {
        "title": show_page.title,
        "kind": show_page.kind.value,
        "episodes": [asdict(episode) for episode in episodes],
    }


async def _resolve_videos(config: AppConfig, args: argparse.Namespace) -> dict[str, Any]:
    preferences = config.preferences.to_preferences(
        quality=args.quality, sub_language=args.sub_language
    )
    episode = EpisodeDescriptor(name="", url=args.url, referer=args.referer)
    async with create_http_client(config) as http_client:
        uc = build_services(config, http_client).videos_uc
        variants = await uc.execute(episode, preferences)
    return {"videos": [asdict(variant) for variant in variants]}


def _serve(config: AppConfig, args: argparse.Namespace, log_config: dict[str, Any]) -> int:
    host = args.host or os.getenv("HOST", "0.0.0.0")
    port = int(args.port or os.getenv("PORT", "8080"))

    uvicorn.run(
        build_app(config),
        host=host,
        port=port,
        log_config=log_config,
    )
    return 0


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, configures logging, then dispatches the
    subcommand.  Logs go to stderr; ``episodes`` and ``videos`` print
    JSON to stdout.
    """

    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    config_path = Path(args.config) if args.config else None
    dotenv_path = Path(args.dotenv) if args.dotenv else None

    config = load_config(
        config_path=config_path,
        dotenv_path=dotenv_path,
        cli_overrides=_cli_overrides(args),
    )

    log_config = configure_logging(config)

    if args.command == "serve":
        return _serve(config, args, log_config)

    try:
        if args.command == "episodes":
            result = asyncio.run(_list_episodes(config, args.url))
        else:
            result = asyncio.run(_resolve_videos(config, args))
    except (StructuralParseError, FetchError) as exc:
        log.error("command_failed", command=args.command, error=str(exc))
        return 1

    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(start())
