"""Live-reload script injection for HTML responses.

Adds a ``<script>`` tag to every HTML page the HTTP app serves.  The tag
loads the bundled ``livereload.js`` from ``/static`` and tells it where the
websocket endpoint lives; the script reloads the tab when a
``File changed <path>`` message mentions the page being viewed.
"""

from __future__ import annotations

import html
from dataclasses import replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from chirp.http.request import Request
    from chirp.http.response import Response, StreamingResponse
    from chirp.middleware.protocol import Next

    from mdlive.config import MdliveConfig

    type AnyResponse = Response | StreamingResponse

RELOAD_SCRIPT_URL = "/static/livereload.js"


def reload_script_tag(ws_port: int, ws_path: str) -> str:
    """Return the script tag pointing the client at the websocket endpoint."""
    return (
        f'<script type="module" data-mdlive-reload '
        f'data-ws-port="{ws_port}" data-ws-path="{html.escape(ws_path, quote=True)}" '
        f'src="{RELOAD_SCRIPT_URL}"></script>\n'
    )


def inject_script(body: str, tag: str) -> str:
    """Insert *tag* before ``</body>`` (or ``</html>``), else append it."""
    if "</body>" in body:
        return body.replace("</body>", tag + "</body>", 1)
    if "</html>" in body:
        return body.replace("</html>", tag + "</html>", 1)
    return body + tag


def make_reload_middleware(
    config: MdliveConfig,
) -> Callable[[Request, Next], Awaitable[AnyResponse]]:
    """Build the chirp middleware that injects the reload script tag."""
    tag = reload_script_tag(config.ws_port, config.ws_path)

    async def reload_middleware(request: Request, next: Next) -> AnyResponse:
        response = await next(request)

        # Only regular (non-streaming) HTML responses carry a body to rewrite
        if not hasattr(response, "body") or not hasattr(response, "content_type"):
            return response
        if "text/html" not in response.content_type:
            return response

        body = response.body
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        if "data-mdlive-reload" in body:
            return response

        return replace(response, body=inject_script(body, tag))

    return reload_middleware
