"""Entry point for notetrail."""

import logging
import sys

from textual.logging import TextualHandler

from .app import run_app
from .config import Config


def setup_logging(config: Config) -> None:
    """Send log records to the log file and the Textual dev console."""
    log_path = config.get_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logging.basicConfig(
        level=config.logging.level,
        handlers=[file_handler, TextualHandler()],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main() -> int:
    """Main entry point for notetrail."""
    try:
        # Load configuration
        config = Config.load()

        setup_logging(config)

        # Run the application
        run_app(config)

        return 0
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
