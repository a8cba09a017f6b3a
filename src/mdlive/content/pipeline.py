"""Document rendering — Markdown files under the docs root to HTML pages.

``DocumentRenderer`` resolves a request path below the docs root, reads the
file, converts it with Patitas and wraps the result in the ``page.html``
Kida template.  It also lists directories for the plain-text index route.

Paths are always resolved and checked against the docs root, so a request
such as ``../secret.md`` is reported as not found rather than read.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from mdlive._errors import ContentError, DocumentNotFoundError, DocumentReadError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from kida import Environment
    from patitas import Markdown

PAGE_TEMPLATE = "page.html"


def _title_for(source: str, fallback: str) -> str:
    """First ATX level-one heading, else *fallback*."""
    for line in source.splitlines():
        stripped = line.strip()
        if stripped.startswith("# "):
            return stripped[2:].strip() or fallback
    return fallback


class DocumentRenderer:
    """Render Markdown documents from a docs directory.

    Args:
        docs_root: Directory documents are served from.
        template_dirs: Kida template directories in priority order.

    """

    __slots__ = ("_docs_root", "_env", "_markdown")

    def __init__(self, docs_root: Path, template_dirs: Sequence[Path]) -> None:
        from kida import Environment, FileSystemLoader
        from patitas import Markdown

        self._docs_root = docs_root.resolve()
        self._env: Environment = Environment(
            loader=FileSystemLoader([str(d) for d in template_dirs]),
            autoescape=True,
        )
        self._markdown: Markdown = Markdown(plugins=["table"])

    @property
    def docs_root(self) -> Path:
        return self._docs_root

    def resolve(self, path: str) -> Path:
        """Resolve *path* to a file under the docs root.

        Raises:
            DocumentNotFoundError: If the path escapes the root, does not
                exist, or is not a regular file.

        """
        candidate = (self._docs_root / path.lstrip("/")).resolve()
        if not candidate.is_relative_to(self._docs_root) or not candidate.is_file():
            msg = f"File not found: {path}"
            raise DocumentNotFoundError(msg)
        return candidate

    def render_markdown(self, source: str) -> str:
        """Convert Markdown source to an HTML fragment."""
        return self._markdown(source)

    def render_document(self, path: str) -> str:
        """Render the document at *path* as a full HTML page.

        Invalid UTF-8 sequences are replaced rather than rejected.

        Raises:
            DocumentNotFoundError: See ``resolve``.
            DocumentReadError: If the file exists but cannot be read.

        """
        file_path = self.resolve(path)
        try:
            raw = file_path.read_bytes()
        except OSError as exc:
            msg = f"Could not read {path}: {exc}"
            raise DocumentReadError(msg) from exc

        source = raw.decode("utf-8", errors="replace")
        template = self._env.get_template(PAGE_TEMPLATE)
        return template.render(
            title=_title_for(source, file_path.name),
            content=self.render_markdown(source),
        )

    def list_directory(self, path: str = "") -> list[str]:
        """Return sorted entry names of a directory under the docs root.

        Directory entries carry a trailing ``/``.

        Raises:
            ContentError: If the directory is missing, outside the root, or
                cannot be read.

        """
        directory = (self._docs_root / path.lstrip("/")).resolve()
        if not directory.is_relative_to(self._docs_root) or not directory.is_dir():
            msg = f"Not a directory under the docs root: {path or '.'}"
            raise ContentError(msg)
        try:
            entries = list(directory.iterdir())
        except OSError as exc:
            msg = f"Could not list {directory}: {exc}"
            raise ContentError(msg) from exc
        return sorted(e.name + "/" if e.is_dir() else e.name for e in entries)
