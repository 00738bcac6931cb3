"""
Command line.

    atelier serve [--host H] [--port P] [--reload]
    atelier init-db
    atelier seed [--keep]
"""

import argparse
import asyncio
from collections.abc import Sequence

import structlog
import uvicorn

from atelier.config import Settings, get_settings
from atelier.db import create_database
from atelier.log import configure_logging
from atelier.seed import seed

log = structlog.get_logger(__name__)


async def _init_db(settings: Settings) -> None:
    _, engine = await create_database(settings.database_url)
    await engine.dispose()
    log.info("db.initialized")


async def _seed(settings: Settings, reset: bool) -> None:
    sessions, engine = await create_database(settings.database_url)
    try:
        products = await seed(sessions, reset=reset)
    finally:
        await engine.dispose()
    for slug, product in products.items():
        print(f"  {slug:<24} {product.id}  ₹{product.price / 100:,.2f}  stock={product.inventory}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="atelier", description="Jewelry storefront backend")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true")

    commands.add_parser("init-db", help="create tables")

    seed_cmd = commands.add_parser("seed", help="load the demo catalog")
    seed_cmd.add_argument(
        "--keep", action="store_true", help="do not wipe orders and catalog first"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level, json=settings.log_json)

    match args.command:
        case "serve":
            uvicorn.run(
                "atelier.app:create_app",
                factory=True,
                host=args.host or settings.host,
                port=args.port or settings.port,
                reload=args.reload,
                log_level=settings.log_level.lower(),
            )
        case "init-db":
            asyncio.run(_init_db(settings))
        case "seed":
            asyncio.run(_seed(settings, reset=not args.keep))


if __name__ == "__main__":
    main()
