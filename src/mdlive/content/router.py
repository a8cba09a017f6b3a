"""Content router — serves the docs directory as chirp routes.

``/`` lists the docs root as plain text, any other path renders the
Markdown file at that location, and ``/__mdlive/stats`` reports the event
log and live connection count as JSON.
"""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Any

from mdlive._errors import ContentError, DocumentNotFoundError, DocumentReadError

if TYPE_CHECKING:
    from chirp import App, Request

    from mdlive.content.pipeline import DocumentRenderer
    from mdlive.live.server import LiveReloadServer
    from mdlive.observability.collector import LiveCollector


STATS_ENDPOINT = "/__mdlive/stats"
DOCUMENT_ROUTE = "/{path:path}"

NOT_FOUND_BODY = "File not found"
READ_ERROR_BODY = "Something went wrong trying to read the file"


def _text(body: str, status: int = 200) -> Any:
    from chirp.http.response import Response

    return Response(body=body, status=status, content_type="text/plain; charset=utf-8")


class ContentRouter:
    """Registers the document routes on a chirp App.

    Args:
        renderer: Renders and lists documents under the docs root.
        app: Chirp App to register routes on (must not yet be frozen).

    """

    def __init__(self, renderer: DocumentRenderer, app: App) -> None:
        self._renderer = renderer
        self._app = app

    def register_index(self) -> None:
        """Register ``/``: one docs root entry per line."""
        renderer = self._renderer

        async def index_handler(request: Request) -> Any:
            try:
                entries = renderer.list_directory()
            except ContentError as exc:
                return _text(f"{exc}\n", status=500)
            return _text("".join(f"{name}\n" for name in entries))

        index_handler.__name__ = "mdlive_index"
        self._app.route("/", name="mdlive:index")(index_handler)

    def register_documents(self) -> None:
        """Register the catch-all route rendering Markdown documents."""
        renderer = self._renderer

        async def document_handler(request: Request, path: str) -> Any:
            from chirp.http.response import Response

            try:
                page = renderer.render_document(path)
            except DocumentNotFoundError:
                return _text(NOT_FOUND_BODY, status=404)
            except DocumentReadError as exc:
                print(f"  {exc}", file=sys.stderr)
                return _text(READ_ERROR_BODY, status=500)
            return Response(body=page, status=200, content_type="text/html; charset=utf-8")

        document_handler.__name__ = "mdlive_document"
        self._app.route(DOCUMENT_ROUTE, name="mdlive:document")(document_handler)

    def register_stats_endpoint(
        self,
        collector: LiveCollector,
        server: LiveReloadServer | None = None,
    ) -> None:
        """Register the ``/__mdlive/stats`` JSON endpoint.

        Args:
            collector: LiveCollector for accessing the event log.
            server: Live-reload server, for the active connection count.

        """

        async def stats_handler(request: Request) -> Any:
            from chirp.http.response import Response

            payload = json.dumps(
                {
                    "event_log": collector.log.stats(),
                    "active_connections": server.active_connections if server else 0,
                    "recent": [repr(e) for e in collector.log.recent(20)],
                },
                indent=2,
            )
            return Response(body=payload, status=200, content_type="application/json")

        stats_handler.__name__ = "mdlive_stats"
        self._app.route(STATS_ENDPOINT, name="mdlive:stats")(stats_handler)
