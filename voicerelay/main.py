"""Main application entry point for VoiceRelay."""

import sys
import argparse
import logging
from pathlib import Path

from . import __version__
from .config import VoiceRelayConfig

logger = logging.getLogger(__name__)


def setup_logging(config: VoiceRelayConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'data/logs/voicerelay.log')
    console_output = config.get('logging.console_output', True)
    console_level = config.get('logging.console_level', 'INFO')

    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, str(console_level).upper()))
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info(f"VoiceRelay v{__version__} starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="VoiceRelay - push-to-talk transcription relay",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: voicerelay.yaml if present)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, else INFO)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"VoiceRelay v{__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the transcription relay server")
    serve.add_argument("--host", type=str, help="Bind address (overrides config)")
    serve.add_argument("--port", type=int, help="Listen port (overrides config)")

    ptt = subparsers.add_parser("ptt", help="Run the terminal push-to-talk client")
    ptt.add_argument("--url", type=str, help="Relay server URL (overrides config)")

    return parser


def main() -> None:
    """Main entry point for VoiceRelay."""
    args = build_parser().parse_args()

    try:
        config = VoiceRelayConfig(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

    log_level = args.log_level or config.get('logging.level', 'INFO')
    setup_logging(config, log_level)

    try:
        if args.command == "serve":
            from .server import run_server
            run_server(config, host=args.host, port=args.port)
        elif args.command == "ptt":
            from .ui.push_to_talk import main_push_to_talk
            relay_url = args.url or config.get('client.relay_url')
            sys.exit(main_push_to_talk(config, relay_url))
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
    except ValueError as e:
        print(f"❌ Error: {e}")
        logger.error(f"Startup failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
