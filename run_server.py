#!/usr/bin/env python
"""
Server Entry Point

Starts the leaderboard API with Uvicorn.
Usage:
    Development:  python run_server.py --dev
    Production:   python run_server.py --port 3000

The reporting client must be attached to ``staff_analytics.main.app`` by the
deployment before traffic is served.
"""

import argparse
import os


def run_dev_server(port: int):
    """Run development server with auto-reload."""
    import uvicorn

    uvicorn.run(
        "staff_analytics.main:app",
        host="127.0.0.1",
        port=port,
        reload=True,
        reload_dirs=["staff_analytics"],
        log_level="debug",
    )


def run_prod_server(port: int):
    """Run production server with Uvicorn directly."""
    import uvicorn

    uvicorn.run(
        "staff_analytics.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=port,
        workers=int(os.getenv("WORKERS", 2)),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        proxy_headers=True,
        server_header=False,
    )


def main():
    parser = argparse.ArgumentParser(description="Staff Analytics Leaderboards API Server")
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Run in development mode with auto-reload"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", 3000)),
        help="Port to run on (default: $PORT or 3000)"
    )

    args = parser.parse_args()

    if args.dev:
        run_dev_server(args.port)
    else:
        run_prod_server(args.port)


if __name__ == "__main__":
    main()
