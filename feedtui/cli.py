"""Command line entry point."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from feedtui.config import ConfigError, default_config, default_config_path, load_config

logger = logging.getLogger(__name__)


def default_log_path() -> Path:
    return Path.home() / ".feedtui" / "feedtui.log"


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Log to a file; the terminal belongs to the dashboard."""
    log_file = log_file or default_log_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        filename=str(log_file),
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="feedtui",
        description="Terminal dashboard for news, markets, sports and more",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.toml (default: ~/.feedtui/config.toml)",
    )
    parser.add_argument(
        "--creature-file",
        type=Path,
        help="Path to the companion save file (default: ~/.feedtui/tui.json)",
    )
    parser.add_argument(
        "--refresh-interval",
        type=int,
        help="Override general.refresh_interval_secs",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Log file (default: ~/.feedtui/feedtui.log)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )

    args = parser.parse_args(argv)
    if args.refresh_interval is not None and args.refresh_interval <= 0:
        parser.error("--refresh-interval must be positive")

    setup_logging(args.log_level, args.log_file)

    config_path = args.config or default_config_path()
    if config_path.exists():
        try:
            config = load_config(config_path)
        except ConfigError as e:
            logger.warning("Using default layout: %s", e)
            print(f"Config error, using defaults: {e}", file=sys.stderr)
            config = default_config()
    else:
        logger.warning("No config at %s; using default layout", config_path)
        config = default_config()

    if args.refresh_interval is not None:
        config = dataclasses.replace(
            config,
            general=dataclasses.replace(
                config.general, refresh_interval_secs=args.refresh_interval
            ),
        )

    from feedtui.app import run

    run(config=config, creature_path=args.creature_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
