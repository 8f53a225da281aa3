#!/usr/bin/env python3
"""Command line runner for the weather alerts service."""

import argparse
import json
import logging
import sys

from .config import load_config, setup_logging
from .errors import AlertServiceError
from .handler import get_report


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Fetch active National Weather Service alerts for a location"
    )
    parser.add_argument(
        "--lat",
        required=True,
        help="Latitude in decimal degrees",
    )
    parser.add_argument(
        "--long",
        required=True,
        help="Longitude in decimal degrees",
    )
    parser.add_argument(
        "--config",
        help="Path to config YAML file (defaults are used when omitted)",
    )
    parser.add_argument(
        "--mode",
        choices=["direct", "aggregate"],
        help="Override mode from config",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-file",
        help="Path to log file",
    )

    args = parser.parse_args()

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    # Load config
    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        logging.error(f"Configuration error: {e}")
        sys.exit(1)
    except Exception as e:
        logging.error(f"Error loading config: {e}")
        sys.exit(1)

    if args.mode:
        config["app"]["mode"] = args.mode

    # Run
    try:
        report = get_report(args.lat, args.long, config)
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        sys.exit(0)
    except (AlertServiceError, ValueError) as e:
        logging.error(f"problem getting weather alerts: {e}")
        sys.exit(1)

    print(json.dumps(report.to_dict(), indent=2))


if __name__ == "__main__":
    main()
