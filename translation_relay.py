"""Translation relay bot for Discord.

Loads the configuration, sets up logging and runs the relay bot until interrupted.
The Discord token is read from the DISCORD_TOKEN environment variable.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final, NoReturn

from config.loader import ConfigLoader, ConfigLoaderError
from core.bot import RelayBot
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from models.config_models import Config

CFG_FILE: Final[str] = "translation_relay.ini"
VERSION: Final[str] = "1.0.0"
TOKEN_ENV: Final[str] = "DISCORD_TOKEN"


def check_python_version() -> None:
    """Check if Python version is 3.12 or later.

    Raises:
        RuntimeError: If Python version is below 3.12.
    """
    if sys.version_info < (3, 12):
        msg = "Python 3.12 or later is required"
        raise RuntimeError(msg)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        print(f"\n{message}\n", file=sys.stderr)
        self.print_help(sys.stderr)
        raise SystemExit(2)


def parse_arguments() -> argparse.Namespace:
    parser = _ArgumentParser(
        description="Relay and translate messages between paired Discord channels",
        epilog="Example: python translation_relay.py --config translation_relay.ini --debug",
    )
    parser.add_argument("--config", dest="config_filename", default=CFG_FILE, help="Configuration file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--db-path", dest="db_path", metavar="PATH", help="Override the sqlite database path")
    return parser.parse_args()


def load_config(args: argparse.Namespace) -> Config:
    """Load configuration file and apply CLI overrides.

    Raises:
        ConfigLoaderError: If configuration file cannot be loaded.
    """
    script_name: str = Path(sys.argv[0]).name
    overrides: dict[str, object] = {"debug": args.debug, "db_path": args.db_path}
    config: Config = ConfigLoader(
        config_filename=args.config_filename, script_name=script_name, **overrides
    ).config
    config.GENERAL.VERSION = VERSION
    config.GENERAL.SCRIPT_NAME = Path(script_name).stem
    return config


def main() -> None:
    check_python_version()
    args: argparse.Namespace = parse_arguments()
    try:
        config: Config = load_config(args)
    except ConfigLoaderError as err:
        print("\nError: Failed to load configuration file.", file=sys.stderr)
        print(f"Details: {err}", file=sys.stderr)
        raise SystemExit(1) from None

    logger_utils = LoggerUtils(config.GENERAL.LOG_FILE)
    logger_utils.set_level("DEBUG" if config.GENERAL.DEBUG else "INFO")
    logger: logging.Logger = LoggerUtils.get_logger(__name__)
    logger.info("%s %s starting", config.GENERAL.SCRIPT_NAME, config.GENERAL.VERSION)

    token: str | None = os.getenv(TOKEN_ENV)
    if not token:
        logger.critical("The %s environment variable is not set", TOKEN_ENV)
        raise SystemExit(1)

    bot = RelayBot(config)
    # discord logger handlers are attached by RelayBot
    bot.run(token, log_handler=None)
    logger.info("%s stopped", config.GENERAL.SCRIPT_NAME)


if __name__ == "__main__":
    main()
