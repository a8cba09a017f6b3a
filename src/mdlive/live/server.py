"""Live-reload websocket endpoint.

Runs a websockets server next to the HTTP app.  Upgrades are accepted only
at the configured path; every accepted connection gets its own
``ConnectionSupervisor`` and therefore its own watcher on the docs root.
"""

from __future__ import annotations

from functools import partial
from http import HTTPStatus
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from websockets.asyncio.server import serve

from mdlive.content.watcher import create_bridge
from mdlive.live.channel import WebSocketChannel
from mdlive.live.supervisor import ConnectionSupervisor

if TYPE_CHECKING:
    from websockets.asyncio.server import Server, ServerConnection
    from websockets.http11 import Request, Response

    from mdlive._types import BridgeFactory
    from mdlive.config import MdliveConfig
    from mdlive.observability.collector import LiveCollector


class LiveReloadServer:
    """Accepts websocket clients and supervises one connection per client.

    Args:
        config: Resolved MdliveConfig (host, ws_port, ws_path, docs_path).
        collector: Receives connection lifecycle events.
        bridge_factory: Creates each connection's watcher; defaults to a
            watchfiles bridge using the configured debounce and step.

    """

    def __init__(
        self,
        config: MdliveConfig,
        *,
        collector: LiveCollector,
        bridge_factory: BridgeFactory | None = None,
    ) -> None:
        self._config = config
        self._collector = collector
        self._bridge_factory = bridge_factory or partial(
            create_bridge,
            debounce_ms=config.debounce_ms,
            step_ms=config.step_ms,
        )
        self._server: Server | None = None
        self._supervisors: set[ConnectionSupervisor] = set()

    @property
    def active_connections(self) -> int:
        """Number of connections that have not reached CLOSED yet."""
        return len(self._supervisors)

    @property
    def port(self) -> int | None:
        """Bound port (useful when configured with ``ws_port=0``)."""
        if self._server is None:
            return None
        for sock in self._server.sockets:
            return sock.getsockname()[1]
        return None

    @property
    def is_serving(self) -> bool:
        return self._server is not None

    async def start(self) -> None:
        """Bind the websocket server. Starting twice is a no-op."""
        if self._server is not None:
            return
        self._server = await serve(
            self._handle,
            self._config.host,
            self._config.ws_port,
            process_request=self._check_path,
        )

    async def stop(self) -> None:
        """Close the server and every open connection, then wait for handlers."""
        if self._server is None:
            return
        server, self._server = self._server, None
        server.close()
        await server.wait_closed()

    def _check_path(self, connection: ServerConnection, request: Request) -> Response | None:
        """Reject upgrades outside the configured path with a plain 404."""
        if urlsplit(request.path).path != self._config.ws_path:
            return connection.respond(HTTPStatus.NOT_FOUND, "Not found\n")
        return None

    async def _handle(self, connection: ServerConnection) -> None:
        channel = WebSocketChannel(connection)
        self._collector.record_open(channel.peer, connection.request.path)
        supervisor = ConnectionSupervisor(
            channel,
            self._config.docs_path,
            collector=self._collector,
            bridge_factory=self._bridge_factory,
        )
        self._supervisors.add(supervisor)
        try:
            await supervisor.run()
        finally:
            self._supervisors.discard(supervisor)
