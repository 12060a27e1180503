#!/usr/bin/env python3
"""
Route Matcher Runner Script.

This script starts the FastAPI application with uvicorn.

Usage:
    python run.py                    # Development mode (auto-reload)
    python run.py --production       # Production mode

Host and port default to the application settings (HOST, PORT),
so `.env` and environment overrides apply here too.
"""

import argparse

import uvicorn

from route_matcher.config import settings


def build_parser() -> argparse.ArgumentParser:
    """Command-line options, defaulting to the application settings."""
    parser = argparse.ArgumentParser(description="Route Matcher Server")
    parser.add_argument(
        "--production",
        action="store_true",
        help="Run in production mode (no auto-reload)"
    )
    parser.add_argument(
        "--host",
        default=settings.HOST,
        help=f"Host to bind to (default: {settings.HOST})"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help=f"Port to bind to (default: {settings.PORT})"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes (production only)"
    )
    return parser


def main():
    """Run the Route Matcher server."""
    args = build_parser().parse_args()

    config = {
        "app": "route_matcher.main:app",
        "host": args.host,
        "port": args.port,
        "log_level": "debug" if settings.DEBUG else "info",
    }

    if args.production:
        config["workers"] = args.workers
        config["reload"] = False
        print("Starting Route Matcher in PRODUCTION mode...")
        print(f"Workers: {args.workers}")
    else:
        config["reload"] = True
        config["reload_dirs"] = ["route_matcher"]
        print("Starting Route Matcher in DEVELOPMENT mode...")
        print("Auto-reload enabled")

    print(f"Server: http://{args.host}:{args.port}")
    print(f"API Docs: http://{args.host}:{args.port}/docs")
    print(f"Health Check: http://{args.host}:{args.port}{settings.API_V1_PREFIX}/health")
    print("-" * 50)

    uvicorn.run(**config)


if __name__ == "__main__":
    main()
