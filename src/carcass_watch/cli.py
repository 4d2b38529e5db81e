"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import http.server
import logging
import sys
from functools import partial

from carcass_watch import __version__
from carcass_watch.config import get_settings
from carcass_watch.errors import CarcassWatchError
from carcass_watch.flows.build import build_all
from carcass_watch.flows.fetch import fetch_all


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="carcass-watch",
        description="Map keyword-filtered carcass reports against colonies and outbreak sites",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application settings")

    fetch_parser = subparsers.add_parser("fetch", help="Fetch the observation snapshot")
    fetch_parser.add_argument(
        "--force",
        action="store_true",
        help="Query the API even if the snapshot is still fresh",
    )

    subparsers.add_parser("build", help="Build maps and export files from the snapshot")

    refresh_parser = subparsers.add_parser("refresh", help="Fetch data, then build outputs")
    refresh_parser.add_argument(
        "--force",
        action="store_true",
        help="Query the API even if the snapshot is still fresh",
    )

    serve_parser = subparsers.add_parser("serve", help="Serve the output directory locally")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to serve on (default: serve_port from settings)",
    )

    return parser


def configure_logging(debug: bool = False) -> None:
    """Configure root logging from settings (``--debug`` forces DEBUG)."""
    level = "DEBUG" if debug else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Taxon: {settings.taxon_name} (place {settings.place_id})")
    print(f"Country: {settings.country_name}")
    print(f"Cutoff date: {settings.cutoff_date.isoformat()}")
    print(f"Include keywords: {', '.join(settings.include_keywords)}")
    print(f"Exclude keywords: {', '.join(settings.exclude_keywords)}")
    print(f"Output directory: {settings.output_dir}")
    return 0


def cmd_fetch(args: argparse.Namespace) -> int:
    """Handle the 'fetch' command."""
    result = fetch_all(get_settings(), force=args.force)
    print(f"Snapshot: {result['snapshot']} ({result['observations']} observations)")
    return 0


def cmd_build(_args: argparse.Namespace) -> int:
    """Handle the 'build' command."""
    result = build_all(get_settings())
    print(f"Built {len(result['outputs'])} files.")
    return 0


def cmd_refresh(args: argparse.Namespace) -> int:
    """Handle the 'refresh' command: fetch data then build outputs."""
    settings = get_settings()
    print(f"Fetching observations of {settings.taxon_name}...")
    fetch_all(settings, force=args.force)

    print("Building outputs...")
    build_all(settings)

    print("Done.")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle the 'serve' command: serve the output directory locally."""
    settings = get_settings()
    port = args.port if args.port is not None else settings.serve_port
    output_dir = settings.output_dir

    if not output_dir.exists():
        print("No output directory found. Run 'carcass-watch refresh' first.", file=sys.stderr)
        return 1

    handler = partial(http.server.SimpleHTTPRequestHandler, directory=str(output_dir))

    with http.server.HTTPServer(("", port), handler) as server:
        print(f"Serving {output_dir} on http://localhost:{port}/map.html (Ctrl+C to stop)")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "fetch": cmd_fetch,
        "build": cmd_build,
        "refresh": cmd_refresh,
        "serve": cmd_serve,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    configure_logging(args.debug)
    try:
        return handler(args)
    except CarcassWatchError as exc:
        print(f"Error [{exc.error_code}]: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
