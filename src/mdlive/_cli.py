"""mdlive CLI — ``mdlive dev``.

Entry point for the ``mdlive`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the mdlive CLI."""
    parser = argparse.ArgumentParser(
        prog="mdlive",
        description="Markdown development server with live reload.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Options default to None so values from mdlive.yaml / mdlive.toml win
    # unless given explicitly on the command line.
    dev_parser = subparsers.add_parser(
        "dev",
        help="Serve Markdown documents and reload browsers on change",
    )
    dev_parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    dev_parser.add_argument("--host", default=None, help="Bind address (default 127.0.0.1)")
    dev_parser.add_argument("--port", type=int, default=None, help="HTTP port (default 3000)")
    dev_parser.add_argument(
        "--ws-port", type=int, default=None, help="Websocket port (default 3001)",
    )
    dev_parser.add_argument(
        "--docs-dir", default=None, help="Document directory under root (default www)",
    )
    dev_parser.add_argument(
        "--quiet", action="store_true", help="Do not print per-connection diagnostics",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from mdlive import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from mdlive._errors import MdliveError
    from mdlive.app import dev

    if args.command == "dev":
        try:
            dev(
                root=args.root,
                host=args.host,
                port=args.port,
                ws_port=args.ws_port,
                docs_dir=args.docs_dir,
                verbose=False if args.quiet else None,
            )
        except MdliveError as exc:
            print(f"mdlive: {exc}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
