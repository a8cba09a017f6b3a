"""Dev-mode error page — renders unexpected handler exceptions as HTML.

``error_overlay_middleware`` wraps request handling; if a route handler
raises, the browser gets a readable page with the exception and traceback
instead of a bare 500.
"""

from __future__ import annotations

import html
import traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chirp.http.request import Request
    from chirp.http.response import Response, StreamingResponse
    from chirp.middleware.protocol import Next

    type AnyResponse = Response | StreamingResponse


_ERROR_PAGE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>mdlive: {error_type}</title>
<style>
body{{margin:0;padding:2rem;font-family:ui-monospace,Menlo,Consolas,monospace;
  background:#1b1b1b;color:#ddd;line-height:1.5}}
h1{{margin:0 0 .5rem;font-size:1rem;color:#ff6b6b}}
p{{margin:0 0 1.5rem;color:#f5b5b5;word-break:break-word}}
pre{{background:#242424;border:1px solid #3a3a3a;border-radius:6px;
  padding:1rem;font-size:.8rem;overflow-x:auto;color:#aaa}}
</style>
</head>
<body>
<h1>{error_type}</h1>
<p>{error_message}</p>
<pre>{stack_trace}</pre>
</body>
</html>
"""


def render_error_page(exc: BaseException) -> str:
    """Render a full HTML error page for the given exception."""
    return _ERROR_PAGE.format(
        error_type=html.escape(type(exc).__qualname__),
        error_message=html.escape(str(exc)),
        stack_trace=html.escape(
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        ),
    )


async def error_overlay_middleware(request: Request, next: Next) -> AnyResponse:
    """Chirp middleware that turns handler exceptions into an error page."""
    try:
        return await next(request)
    except Exception as exc:
        from chirp.http.response import Response

        return Response(
            body=render_error_page(exc),
            status=500,
            content_type="text/html; charset=utf-8",
        )
