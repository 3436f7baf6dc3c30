"""
=============================================================================
USER SERVER CLI ENTRY POINT
=============================================================================

    # Run with defaults (localhost:8080, local PostgreSQL)
    python -m userserver

    # Custom port and store
    python -m userserver --port 3000 --database-url postgresql+psycopg2://app:secret@db/users

    # SQLite file instead of PostgreSQL
    python -m userserver -d sqlite:///users.db

    # Listen on all interfaces (for containers)
    python -m userserver --host 0.0.0.0

Defaults come from the environment (HTTP_HOST, HTTP_PORT, HTTP_WORKERS,
HTTP_TIMEOUT, HTTP_LOG_LEVEL, DATABASE_URL); flags override them.

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import ServerConfig
from .server import UserServer


def build_config(argv: Optional[List[str]] = None) -> ServerConfig:
    """
    Translate command-line arguments into a ServerConfig.

    - --host, -H: Server host
    - --port, -p: Server port
    - --workers, -w: Number of worker threads
    - --database-url, -d: Store connection URL
    - --log-level, -l: Logging verbosity
    - --no-init-schema: Do not create the users table at startup
    - --version, -v: Show version

    Raises:
        ValueError: If an HTTP_* environment variable is not a number.
    """
    defaults = ServerConfig.from_env()

    parser = argparse.ArgumentParser(
        description="User CRUD server over raw TCP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m userserver                          # Run with defaults
  python -m userserver --port 3000              # Custom port
  python -m userserver -d sqlite:///users.db    # SQLite store
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host}, use 0.0.0.0 for containers)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=defaults.workers,
        help=f"Number of worker threads (default: {defaults.workers})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # STORE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--database-url", "-d",
        default=defaults.database_url,
        help="SQLAlchemy URL of the user store (default: $DATABASE_URL or local PostgreSQL)"
    )

    parser.add_argument(
        "--no-init-schema",
        dest="init_schema",
        action="store_false",
        help="Do not create the users table at startup"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"userserver {__version__}"
    )

    args = parser.parse_args(argv)

    return ServerConfig(
        host=args.host,
        port=args.port,
        timeout=defaults.timeout,
        workers=args.workers,
        database_url=args.database_url,
        init_schema=args.init_schema,
        log_level=args.log_level,
    )


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point. Exits with status 1 on any startup error."""
    try:
        config = build_config(argv)
        server = UserServer(config)
        server.run()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
