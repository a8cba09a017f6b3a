"""Tests for mdlive.live.hmr — live-reload script injection middleware."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from mdlive.config import MdliveConfig
from mdlive.live.hmr import (
    RELOAD_SCRIPT_URL,
    inject_script,
    make_reload_middleware,
    reload_script_tag,
)


# ---------------------------------------------------------------------------
# Minimal response mock (frozen dataclass like chirp's Response)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _MockResponse:
    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"


@dataclass(frozen=True, slots=True)
class _MockStreamingResponse:
    """Streaming response: no body attribute to rewrite."""

    chunks: object = None
    content_type: str = "text/html"


def _make_next(response: object) -> AsyncMock:
    return AsyncMock(return_value=response)


@pytest.fixture
def middleware() -> object:
    return make_reload_middleware(MdliveConfig(root=Path("/tmp/notes"), ws_port=4001))


class TestReloadScriptTag:
    def test_carries_port_path_and_source(self) -> None:
        tag = reload_script_tag(4001, "/ws")
        assert "data-mdlive-reload" in tag
        assert 'data-ws-port="4001"' in tag
        assert 'data-ws-path="/ws"' in tag
        assert f'src="{RELOAD_SCRIPT_URL}"' in tag

    def test_path_is_escaped(self) -> None:
        assert 'data-ws-path="/a&quot;b"' in reload_script_tag(1, '/a"b')


class TestInjectScript:
    def test_before_body_close(self) -> None:
        result = inject_script("<html><body><h1>Hi</h1></body></html>", "<s/>")
        assert result == "<html><body><h1>Hi</h1><s/></body></html>"

    def test_before_html_close_without_body(self) -> None:
        assert inject_script("<html><p>x</p></html>", "<s/>") == "<html><p>x</p><s/></html>"

    def test_appended_to_fragment(self) -> None:
        assert inject_script("<h1>Fragment</h1>", "<s/>") == "<h1>Fragment</h1><s/>"


class TestReloadMiddleware:
    """Tests for the middleware built by make_reload_middleware."""

    @pytest.mark.asyncio
    async def test_injects_into_html(self, middleware) -> None:
        response = _MockResponse(body="<html><body><h1>Hello</h1></body></html>")
        result = await middleware(object(), _make_next(response))

        assert 'data-ws-port="4001"' in result.body
        assert result.body.index("data-mdlive-reload") < result.body.index("</body>")

    @pytest.mark.asyncio
    async def test_decodes_bytes_body(self, middleware) -> None:
        response = _MockResponse(body=b"<html><body></body></html>")
        result = await middleware(object(), _make_next(response))
        assert "data-mdlive-reload" in result.body

    @pytest.mark.asyncio
    async def test_skips_non_html(self, middleware) -> None:
        response = _MockResponse(body="readme.md\n", content_type="text/plain; charset=utf-8")
        result = await middleware(object(), _make_next(response))
        assert result is response

    @pytest.mark.asyncio
    async def test_skips_streaming_response(self, middleware) -> None:
        response = _MockStreamingResponse()
        result = await middleware(object(), _make_next(response))
        assert result is response

    @pytest.mark.asyncio
    async def test_does_not_inject_twice(self, middleware) -> None:
        response = _MockResponse(body="<html><body></body></html>")
        once = await middleware(object(), _make_next(response))
        twice = await middleware(object(), _make_next(once))
        assert twice.body.count("data-mdlive-reload") == 1

    @pytest.mark.asyncio
    async def test_preserves_status(self, middleware) -> None:
        response = _MockResponse(body="<body></body>", status=404)
        result = await middleware(object(), _make_next(response))
        assert result.status == 404
