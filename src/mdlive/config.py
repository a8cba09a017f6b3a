"""mdlive configuration.

MdliveConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class MdliveConfig:
    """Configuration for an mdlive server.

    Attributes:
        root: Project root directory. Always resolved to an absolute path on
              construction.
        docs_dir: Directory (under root) holding the Markdown documents.
            Listed at ``/``, served under ``/<path>`` and watched for changes.
        host: Bind address for both the HTTP server and the websocket endpoint.
        port: HTTP port.
        ws_port: Websocket port for live-reload notifications.
        ws_path: The only path at which websocket upgrades are accepted.
        templates_dir: Directory with user template overrides (``page.html``).
        static_dir: Directory with user static asset overrides.
        debounce_ms: Watcher debounce window; changes inside the window are
            grouped into one batch.
        step_ms: How often the watcher checks for new changes and for stop.
        verbose: Print a diagnostic line to stderr for connection events.

    """

    root: Path = field(default_factory=Path.cwd)
    docs_dir: str = "www"
    host: str = "127.0.0.1"
    port: int = 3000
    ws_port: int = 3001
    ws_path: str = "/ws"
    templates_dir: str = "templates"
    static_dir: str = "static"
    debounce_ms: int = 300
    step_ms: int = 100
    verbose: bool = True

    def __post_init__(self) -> None:
        # Resolve root to absolute so that watchfiles (which returns
        # absolute paths) reports paths under docs_path.
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

    @property
    def docs_path(self) -> Path:
        """Absolute path to the documents directory."""
        return self.root / self.docs_dir

    @property
    def templates_path(self) -> Path:
        """Absolute path to the user templates directory."""
        return self.root / self.templates_dir

    @property
    def static_path(self) -> Path:
        """Absolute path to the user static assets directory."""
        return self.root / self.static_dir
