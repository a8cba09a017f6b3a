"""mdlive theme — bundled page template and live-reload client.

User templates (``<root>/templates``) take priority.  When ``page.html`` is
not found there, Kida falls through to the bundled default theme.  Same
pattern for static assets served under ``/static``.

Thread Safety:
    All returned values are read-only path lists.  Safe for free-threading.

"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mdlive.config import MdliveConfig


def bundled_theme_path() -> Path:
    """Return the absolute path to the bundled default theme."""
    return Path(__file__).parent / "default"


def _with_fallback(user_dir: Path, bundled: Path) -> tuple[Path, ...]:
    # The user directory is kept even if it does not exist yet
    if user_dir == bundled:
        return (bundled,)
    return (user_dir, bundled)


def get_template_dirs(config: MdliveConfig) -> tuple[Path, ...]:
    """Return template directories in priority order.

    Returns:
        ``(user_templates_dir, bundled_default_templates)``

    """
    return _with_fallback(config.templates_path, bundled_theme_path() / "templates")


def get_asset_dirs(config: MdliveConfig) -> tuple[Path, ...]:
    """Return static asset directories in priority order.

    Returns:
        ``(user_static_dir, bundled_default_assets)``

    """
    return _with_fallback(config.static_path, bundled_theme_path() / "assets")
