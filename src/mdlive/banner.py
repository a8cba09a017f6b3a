"""Startup banner — status output for ``mdlive dev``.

Prints the docs directory, the HTTP URL and the websocket endpoint.
Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mdlive.config import MdliveConfig


# ---------------------------------------------------------------------------
# ANSI helpers, respecting NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""


def _clickable_url(url: str) -> str:
    """Wrap *url* in an OSC 8 hyperlink escape if the terminal supports it."""
    if not _COLOR:
        return url
    return f"\033]8;;{url}\033\\{_BOLD}{_CYAN}{url}{_RESET}\033]8;;\033\\"


def ws_endpoint(config: MdliveConfig) -> str:
    """Return the websocket URL clients connect to."""
    return f"ws://{config.host}:{config.ws_port}{config.ws_path}"


def print_banner(
    config: MdliveConfig,
    *,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print the mdlive startup banner to stderr.

    Args:
        config: Resolved MdliveConfig.
        load_ms: Time spent setting up the app in milliseconds.
        warnings: Optional list of warning messages to display.

    """
    from mdlive import __version__

    header = f"  {_BOLD}mdlive{_RESET} {_DIM}v{__version__}{_RESET}  {_GREEN}[dev]{_RESET}"
    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""

    lines: list[str] = [
        "",
        header,
        f"  {_DIM}{'─' * 43}{_RESET}",
        f"  {_DIM}├─{_RESET} docs: {_DIM}{config.docs_path}{_RESET}{timing}",
        f"  {_DIM}├─{_RESET} templates: {_DIM}{config.templates_path}{_RESET}",
        f"  {_DIM}└─{_RESET} {_GREEN}live{_RESET} reload on {_DIM}{ws_endpoint(config)}{_RESET}",
        "",
        f"  {_clickable_url(f'http://{config.host}:{config.port}')}",
        "",
        f"  {_DIM}Watching for changes...{_RESET}",
    ]

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    lines.append("")

    print("\n".join(lines), file=sys.stderr)
