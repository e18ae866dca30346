import argparse
import logging
import sys
from typing import List, Optional

from kassenblick.core.app import LOG_FORMAT, KassenBlickApp
from kassenblick.core.config import Config
from kassenblick.core.sources import SourceUnavailableError


def setup_basic_logging():
    """Setup basic stdout logging before config is loaded"""
    root_logger = logging.getLogger()
    if not root_logger.handlers:  # Only add handler if none exists
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name("kassenblick.basic")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.DEBUG)  # Set initial level to DEBUG
        logging.debug("Basic logging initialized")


def run_maintenance(config_path: Optional[str], validate_only: bool) -> int:
    """Run the bills header check (and the status reset unless validate_only) once."""
    from kassenblick.plugins.bills.maintenance import BillsMaintenanceTask

    config = Config(config_path=config_path, watch=False)
    bills_config = config.get_component_config("Bills") or {}
    if not bills_config.get("path"):
        logging.error("Bills component has no path configured")
        return 2

    task_config = dict(config.data.get("maintenance") or {})
    task_config.setdefault("use_aliases", bills_config.get("use_aliases", True))
    task = BillsMaintenanceTask(config.resolve_path(bills_config["path"]), task_config)
    try:
        if task.validate():
            return 1
        if not validate_only:
            task.reset()
    except SourceUnavailableError as e:
        logging.error(str(e))
        return 2
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    setup_basic_logging()

    parser = argparse.ArgumentParser(description='KassenBlick bill and bucket status engine')
    parser.add_argument('--config',
                        help='Path to config file (default: ./config.yaml)')
    parser.add_argument('--once', action='store_true',
                        help='Run a single refresh tick and exit')
    parser.add_argument('--validate', action='store_true',
                        help='Check the Bills.csv header and exit')
    parser.add_argument('--reset', action='store_true',
                        help='Mark all paid bills unpaid (monthly reset) and exit')

    args = parser.parse_args(argv)
    config_path = args.config if args.config else "config.yaml"

    if args.validate or args.reset:
        return run_maintenance(config_path, validate_only=not args.reset)

    app = KassenBlickApp(config_path=config_path, watch_config=not args.once)
    app.run(once=args.once)
    return 0


if __name__ == "__main__":
    sys.exit(main())
