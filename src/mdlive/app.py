"""mdlive application — chirp HTTP app plus the live-reload websocket server.

``create_app`` builds a chirp App serving the docs directory and wires the
websocket endpoint into its startup and shutdown hooks.  ``dev`` is the
entry point used by the CLI.
"""

import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from mdlive._errors import ContentError
from mdlive.config import MdliveConfig
from mdlive.config_loader import load_config

if TYPE_CHECKING:
    from chirp import App

    from mdlive.content.pipeline import DocumentRenderer
    from mdlive.content.router import ContentRouter
    from mdlive.live.server import LiveReloadServer
    from mdlive.observability.collector import LiveCollector


def _create_chirp_app(config: MdliveConfig, *, debug: bool = False) -> App:
    """Create a chirp App bound to the configured host and port."""
    from chirp import App, AppConfig

    from mdlive.theme import get_template_dirs

    app_config = AppConfig(
        template_dir=get_template_dirs(config)[0],
        debug=debug,
        host=config.host,
        port=config.port,
    )
    return App(config=app_config)


def _create_renderer(config: MdliveConfig) -> DocumentRenderer:
    from mdlive.content.pipeline import DocumentRenderer
    from mdlive.theme import get_template_dirs

    return DocumentRenderer(config.docs_path, get_template_dirs(config))


def _wire_content_routes(
    app: App,
    renderer: DocumentRenderer,
    collector: LiveCollector,
    server: LiveReloadServer,
) -> ContentRouter:
    """Register the index, stats and document routes.

    The stats route is registered before the catch-all document route.

    Raises:
        ContentError: If route registration fails.

    """
    from mdlive.content.router import ContentRouter

    try:
        router = ContentRouter(renderer, app)
        router.register_index()
        router.register_stats_endpoint(collector, server)
        router.register_documents()
    except Exception as exc:
        msg = f"Failed to register content routes: {exc}"
        raise ContentError(msg) from exc
    return router


def _mount_static_files(app: App, config: MdliveConfig) -> None:
    """Mount static file middleware with theme fallback.

    User assets are mounted first, then the bundled live-reload client.
    All are served under ``/static``.

    """
    from chirp.middleware import StaticFiles

    from mdlive.theme import get_asset_dirs

    for asset_dir in get_asset_dirs(config):
        if asset_dir.is_dir():
            app.add_middleware(StaticFiles(directory=asset_dir, prefix="/static"))


def _wire_dev_middleware(app: App, config: MdliveConfig) -> None:
    """Add the error page and reload-script injection middleware."""
    from mdlive.live.error_overlay import error_overlay_middleware
    from mdlive.live.hmr import make_reload_middleware

    # Handler exceptions become a styled HTML page
    app.add_middleware(error_overlay_middleware)
    app.add_middleware(make_reload_middleware(config))


def _wire_live_reload(app: App, server: LiveReloadServer) -> None:
    """Run the websocket server inside the event loop managed by the app.

    Flow:
        on_startup  -> bind the websocket server
        connection  -> one supervisor (and one watcher) per client
        on_shutdown -> close the server and every open connection

    """

    @app.on_startup
    async def _start_live_reload() -> None:
        await server.start()

    @app.on_shutdown
    async def _stop_live_reload() -> None:
        await server.stop()


def create_app(
    config: MdliveConfig,
    *,
    collector: LiveCollector | None = None,
    debug: bool = True,
) -> tuple[App, LiveReloadServer, LiveCollector]:
    """Build the chirp app, its live-reload server and the shared collector."""
    from mdlive.live.server import LiveReloadServer
    from mdlive.observability import EventLog, LiveCollector

    if collector is None:
        collector = LiveCollector(EventLog(), verbose=config.verbose)

    app = _create_chirp_app(config, debug=debug)
    server = LiveReloadServer(config, collector=collector)

    _wire_content_routes(app, _create_renderer(config), collector, server)
    _wire_dev_middleware(app, config)
    _mount_static_files(app, config)
    _wire_live_reload(app, server)
    return app, server, collector


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def dev(root: str | Path = ".", **kwargs: object) -> None:
    """Start the Markdown development server.

    Serves rendered documents over HTTP and pushes a reload notification to
    every connected browser whenever a file under the docs root changes.

    Args:
        root: Path to the project root directory.
        **kwargs: Override MdliveConfig fields.

    """
    from mdlive.banner import print_banner

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()

    if not config.docs_path.is_dir():
        print(
            f"  Warning: {config.docs_path} does not exist yet; "
            "connections will close until it is created.",
            file=sys.stderr,
        )

    app, _server, collector = create_app(config)
    load_ms = (time.perf_counter() - t0) * 1000

    print_banner(config, load_ms=load_ms)

    # The collector doubles as the HTTP server's lifecycle collector so
    # request events land in the same EventLog as websocket events.
    app.run(host=config.host, port=config.port, lifecycle_collector=collector)
