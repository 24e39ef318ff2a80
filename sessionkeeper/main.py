"""Main entry point for sessionkeeper."""

import argparse
import logging
import sys
from pathlib import Path

from sessionkeeper.errors import SessionKeeperError


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        description="sessionkeeper - session timeout demo in a desktop window"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config/default.yaml"),
        help="Path to configuration file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="store_true",
        help="Show version and exit",
    )

    args = parser.parse_args()

    if args.version:
        from sessionkeeper import __version__

        print(f"sessionkeeper v{__version__}")
        return 0

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from sessionkeeper.runtime.controller import RuntimeController

    try:
        controller = RuntimeController(config_path=args.config)
        controller.start()
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    except SessionKeeperError as e:
        logging.getLogger(__name__).error("Configuration error: %s", e)
        return 2
    except Exception:
        logging.getLogger(__name__).exception("Fatal error")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
