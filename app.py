#!/usr/bin/env python3
"""
Run script for the inventory service
"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env before the app reads them
load_dotenv()

from app import create_app  # noqa: E402
from app.build import build_database  # noqa: E402
from app.utils.logger import get_logger  # noqa: E402

logger = get_logger("inventory.run")


def _env_flag(name, default='False'):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Inventory Service')
    parser.add_argument('--build-only', action='store_true',
                        help='Create the database tables and exit without starting the server')
    parser.add_argument('--seed', action=argparse.BooleanOptionalAction, default=False,
                        help='Insert the demo data set when the database is empty (default: --no-seed)')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_arguments(argv)
    app = create_app()

    with app.app_context():
        build_database(seed=args.seed)

    if args.build_only:
        logger.info("Build completed. Exiting without starting web server.")
        return 0

    # FLASK_DEBUG / USE_RELOADER default to off
    debug_mode = _env_flag('FLASK_DEBUG')
    use_reloader = _env_flag('USE_RELOADER')
    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("⚠️  DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
    return 0


if __name__ == '__main__':
    sys.exit(main())
