"""
Command line entry point: run one of the demo services under uvicorn.

    otel-demo orders --port 8081
    otel-demo items --port 8082
    otel-demo shop
"""
import argparse
import sys
from typing import List, Optional

import uvicorn

from otel_demo.config import get_settings

APP_FACTORIES = {
    "shop": "otel_demo.api.shop:create_app",
    "orders": "otel_demo.api.orders:create_app",
    "items": "otel_demo.api.items:create_app",
}

DEFAULT_PORTS = {
    "shop": 8080,
    "orders": 8081,
    "items": 8082,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="otel-demo",
        description="Run a service of the OpenTelemetry shop demo",
    )
    parser.add_argument("service", choices=sorted(APP_FACTORIES), help="Service to run")
    parser.add_argument("--host", default=None, help="Bind address (default: API_HOST)")
    parser.add_argument("--port", type=int, default=None, help="Bind port")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (dev only)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    uvicorn.run(
        APP_FACTORIES[args.service],
        factory=True,
        host=args.host or settings.api_host,
        port=args.port or DEFAULT_PORTS[args.service],
        reload=args.reload,
        log_config=None,  # Use our structured logging config
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
