from __future__ import annotations

import argparse
import sys

import uvicorn

from order_composer.adapters.inbound.cli import run_cli
from order_composer.bootstrap import build_usecases
from order_composer.config import load_settings
from order_composer.core.domain.model.order import Actor
from order_composer.logging_config import setup_logging


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="order-composer")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="run the HTTP API")

    compose = sub.add_parser("compose", help="compose one order from a JSON request")
    compose.add_argument("payload", help="order request as a JSON string")
    compose.add_argument("--actor", required=True, help="id of the user placing the order")
    compose.add_argument("--actor-name", default="")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv if argv is not None else sys.argv[1:])
    settings = load_settings()
    setup_logging(settings.log_level, settings.json_logs)

    if args.command == "serve":
        uvicorn.run(
            "order_composer.asgi:create_asgi_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            reload=False,
            log_config=None,
        )
        return 0

    svc = build_usecases(settings).compose_order
    actor = Actor(user_id=args.actor, display_name=args.actor_name)
    return run_cli(svc, args.payload, actor, settings.compose_timeout_seconds)


if __name__ == "__main__":
    raise SystemExit(main())
