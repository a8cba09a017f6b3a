"""mdlive — a Markdown development server with live reload.

Serves the Markdown files of a docs directory as HTML pages and keeps a
websocket open to every browser tab.  When a document changes on disk, each
connected tab showing it reloads.

Quick start::

    import mdlive

    mdlive.dev("my-notes/")       # serves my-notes/www on :3000, websocket on :3001

Built on:

    chirp       Web framework     (serves HTML)
    kida        Template engine   (renders HTML)
    patitas     Markdown parser   (parses content)
    watchfiles  File watcher      (detects changes)
    websockets  Websocket server  (pushes reloads)

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "MdliveConfig",
    "__version__",
    "create_app",
    "dev",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import mdlive`` fast while providing a clean top-level API.
    """
    if name == "MdliveConfig":
        from mdlive.config import MdliveConfig

        return MdliveConfig

    if name == "dev":
        from mdlive.app import dev

        return dev

    if name == "create_app":
        from mdlive.app import create_app

        return create_app

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
