"""
Command-line entry point.

Usage:
    kafka-producer-tui [--version] [--help]
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from kafka_producer_tui import __version__
from kafka_producer_tui.common.exceptions import ConfigLoadError
from kafka_producer_tui.config import DEFAULT_CONFIG_PATH, DEFAULT_LOG_PATH, AppSettings, load_settings

PROG = "kafka-producer-tui"

logger = logging.getLogger(__name__)


def build_parser(app_settings: Optional[AppSettings] = None) -> argparse.ArgumentParser:
    """Build the parser; without settings the help text shows the default paths."""
    config_path = app_settings.config_path if app_settings is not None else DEFAULT_CONFIG_PATH
    log_file = app_settings.log_file if app_settings is not None else DEFAULT_LOG_PATH
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Interactive terminal producer for Kafka topics with optional mTLS.",
        epilog=(
            f"Configuration file: {config_path}\n"
            f"Log file: {log_file}\n\n"
            "Keys: Tab/Shift+Tab move focus, F2 switches views, F5 connects, F9 saves,\n"
            "F10 formats the JSON value, Enter sends, Esc or Ctrl+C quits."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"{PROG} {__version__}")
    return parser


def configure_logging(app_settings: AppSettings) -> None:
    """Send logs to a file; the terminal belongs to the UI."""
    app_settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(app_settings.log_file),
        level=app_settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    try:
        app_settings = AppSettings()
    except PydanticValidationError as e:
        # --help and --version still work with a broken environment
        build_parser().parse_args(argv)
        print(f"Error in KAFKA_PRODUCER_* environment settings: {e}", file=sys.stderr)
        return 1
    build_parser(app_settings).parse_args(argv)

    configure_logging(app_settings)

    try:
        settings = load_settings(app_settings.config_path)
    except ConfigLoadError as e:
        logger.error(f"Error loading config: {e}")
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    # Textual is imported late so --help and --version stay fast
    from kafka_producer_tui.ui.app import ProducerApp
    from kafka_producer_tui.ui.model import InteractionState

    state = InteractionState(
        settings,
        config_path=app_settings.config_path,
        history_limit=app_settings.history_limit,
    )
    logger.info(f"Starting {PROG} {__version__}")
    ProducerApp(state).run()
    return 0
