#!/usr/bin/env python3
"""
Start the expense API with uvicorn.

Uso:
  python scripts/serve.py [--host 0.0.0.0] [--port 8080] [--file expense.json] [--single-writer]
"""
from __future__ import annotations

import argparse
import os
import sys

import uvicorn

from expense_api.core.config import get_settings
from expense_api.core.log_config import build_logging_config


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Run the expense API")
    ap.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    ap.add_argument("--port", type=int, default=settings.port, help=f"TCP port (default: {settings.port})")
    ap.add_argument("--file", help="JSON document holding the expenses (overrides EXPENSES_FILE)")
    ap.add_argument("--single-writer", action="store_true", help="Serialize mutations inside this process")
    args = ap.parse_args()

    # a factory le o ambiente, entao os overrides viram env vars
    if args.file:
        os.environ["EXPENSES_FILE"] = args.file
    if args.single_writer:
        os.environ["EXPENSES_SINGLE_WRITER"] = "1"
    get_settings.cache_clear()

    print(f"Servidor iniciado em http://{args.host}:{args.port}")
    uvicorn.run(
        "expense_api.app_factory:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_config=build_logging_config(get_settings().log_level),
    )


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:  # pragma: no cover - uso CLI
        raise SystemExit(0)
    except Exception as exc:  # pragma: no cover - uso CLI
        sys.stderr.write(f"Error starting server: {exc}\n")
        raise SystemExit(1)
