#!/usr/bin/env python3
"""Post Uploader API Server.

This module provides the server entry point.

Usage:
    python -m post_uploader [--posts-dir DIR] [--port PORT] [--api-key KEY]

    or:

    uvicorn post_uploader.api:create_app --factory --port 8080

Settings are taken from command-line flags, then environment variables
(a .env file in the working directory is loaded first), then defaults.
"""

import argparse
import logging
import os

import uvicorn

from .config import DEFAULT_HOST, Settings, load_env


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Post Uploader API Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Run with settings from the environment / .env
    python -m post_uploader

    # Serve a specific Jekyll posts directory
    python -m post_uploader --posts-dir ~/site/_posts --api-key secret

    # Run with auto-reload for development
    python -m post_uploader --reload --log-level debug
""",
    )
    parser.add_argument(
        "--posts-dir",
        type=str,
        default="",
        help="Path to the Jekyll _posts directory (env: POSTS_DIR)",
    )
    parser.add_argument(
        "--port",
        type=str,
        default="",
        help="Port to run the server on (env: PORT, default: 8080)",
    )
    parser.add_argument(
        "--api-key",
        type=str,
        default="",
        help="API key for authentication (env: API_KEY)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=DEFAULT_HOST,
        help=f"Host to bind to (default: {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="info",
        choices=["debug", "info", "warning", "error", "critical"],
        help="Log level (default: info)",
    )
    return parser


def apply_flags(args: argparse.Namespace) -> None:
    """Export non-empty flags to the environment so they win over .env values."""
    if args.posts_dir:
        os.environ["POSTS_DIR"] = args.posts_dir
    if args.api_key:
        os.environ["API_KEY"] = args.api_key
    if args.port:
        os.environ["PORT"] = args.port


def main(argv=None):
    """Main entry point for the API server."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    load_env()
    apply_flags(args)
    settings = Settings.from_env()
    os.makedirs(settings.posts_dir, exist_ok=True)

    print("=" * 60)
    print("POST UPLOADER API SERVER")
    print("=" * 60)
    print(f"Host: {args.host}")
    print(f"Port: {settings.port}")
    print(f"Posts directory: {settings.posts_dir}")
    print(f"Reload: {args.reload}")
    print(f"Log Level: {args.log_level}")
    print()
    print(f"OpenAPI docs: http://{args.host}:{settings.port}/docs")
    print("=" * 60)

    uvicorn.run(
        "post_uploader.api.app:create_app",
        host=args.host,
        port=settings.port,
        reload=args.reload,
        log_level=args.log_level,
        factory=True,
    )


if __name__ == "__main__":
    main()
