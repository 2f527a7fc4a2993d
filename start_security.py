#!/usr/bin/env python3
"""Entry point for the Catpoint security system."""

import argparse
import json
import sys

from catpoint_security.config_manager import ConfigManager
from catpoint_security.exceptions import SecuritySystemError
from catpoint_security.logging_config import get_logger
from catpoint_security.models.security import ArmingStatus
from catpoint_security.security_system import SecuritySystem

ARMING_CHOICES = {
    "disarmed": ArmingStatus.DISARMED,
    "home": ArmingStatus.ARMED_HOME,
    "away": ArmingStatus.ARMED_AWAY,
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Scan camera images with the Catpoint security system")
    parser.add_argument("images", nargs="*", help="Image files to scan, in order")
    parser.add_argument("--config", default=None, help="Path to the JSON config file")
    parser.add_argument("--arm", choices=sorted(ARMING_CHOICES), default=None,
                        help="Set the arming status before scanning")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the security system."""
    args = parse_args(argv)
    logger = get_logger("start_security")

    try:
        system = SecuritySystem(ConfigManager(args.config))
    except SecuritySystemError as e:
        logger.error(f"Security system failed to start: {e}")
        return 1

    try:
        if args.arm:
            system.arm(ARMING_CHOICES[args.arm])

        for image_path in args.images:
            system.scan_image(image_path)

        print(json.dumps(system.get_status(), indent=2, default=str))
        return 0

    except SecuritySystemError as e:
        logger.error(f"Security system failed: {e}")
        return 1
    finally:
        system.shutdown()


if __name__ == "__main__":
    sys.exit(main())
