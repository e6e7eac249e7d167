"""
Snippetbox - Command-line Entry Point
======================================

    python -m snippetbox --addr :4000 --dsn postgresql+asyncpg://web:pass@/snippetbox

Flags override the environment-derived settings; everything else (pool
sizing, log level, UI directory) still comes from the environment.
"""

import argparse
from typing import List, Optional

import uvicorn

from snippetbox.config import Settings, settings
from snippetbox.main import create_app


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="snippetbox", description="Snippetbox web server")
    parser.add_argument("--addr", default=settings.addr, help="HTTP network address (default: %(default)s)")
    parser.add_argument("--dsn", default=settings.database_url, help="SQLAlchemy async database URL")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    # Keyword arguments take priority over environment variables
    config = Settings(addr=args.addr, database_url=args.dsn)
    host, port = config.listen_address

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_level=config.log_level.lower(),
        timeout_graceful_shutdown=config.shutdown_timeout,
    )


if __name__ == "__main__":
    main()
