from __future__ import annotations

import argparse
import sys
from typing import Optional

import uvicorn
from rich.console import Console

from quiet_hn.config import Settings, build_settings, load_config
from quiet_hn.logging_config import configure_logging
from quiet_hn.main import create_app

console: Console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Quiet Hacker News")
    parser.add_argument("--config", help="Path to a TOML config file")
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="The port to start the web server on (default: 3000)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Interface to bind (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--num-stories",
        "--num_stories",
        dest="num_stories",
        type=int,
        default=None,
        help="The number of top stories to display (default: 30)",
    )
    parser.add_argument(
        "--cache-ttl",
        type=float,
        default=None,
        help="Seconds a fetched story list is reused (default: 10)",
    )
    parser.add_argument(
        "--item-timeout",
        type=float,
        default=None,
        help="Per-item lookup deadline in seconds, 0 to disable (default: 10)",
    )
    parser.add_argument(
        "--max-concurrency",
        type=int,
        default=None,
        help="Max simultaneous item lookups, 0 for unbounded (default: 0)",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")
    return parser


def parse_args(argv: Optional[list[str]] = None) -> Settings:
    argv = list(sys.argv[1:] if argv is None else argv)
    file_config, _ = load_config(argv)
    args = build_parser().parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if k != "config"}
    return build_settings(file_config, overrides)


def main(argv: Optional[list[str]] = None) -> None:
    try:
        settings = parse_args(argv)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/]")
        raise SystemExit(2)

    configure_logging(settings.log_level)
    console.print(
        f"[bold]Quiet HN[/] serving top [cyan]{settings.num_stories}[/] stories "
        f"on [cyan]http://{settings.host}:{settings.port}[/]"
    )
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
