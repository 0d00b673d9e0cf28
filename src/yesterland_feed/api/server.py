"""Minimal HTTP/1.1 listener for the feed.

Every connection carries exactly one request and is closed after the
response. Concurrent connections are capped by a semaphore that gates
``accept`` itself: once all slots are taken, further clients wait in the
kernel backlog until one frees up.
"""

import asyncio
import contextlib
import logging
import re
import socket

from yesterland_feed.config import settings
from yesterland_feed.dto import FeedRequest, FeedResponse
from yesterland_feed.handlers import FeedHandler

logger = logging.getLogger(__name__)

MAX_HEADER_LINES = 100
HEADER_RE = re.compile(r"^([^:]+):\s*(.*?)\s*$")


class MalformedRequest(Exception):
    """The request head could not be parsed; no response is sent."""


class FeedServer:
    """asyncio-based listener dispatching each connection to its own task.

    Example:
        ```python
        server = FeedServer(handler, host="0.0.0.0", port=4567)
        await server.start()
        ...
        await server.close()
        ```
    """

    def __init__(
        self,
        handler: FeedHandler,
        host: str | None = None,
        port: int | None = None,
        max_clients: int | None = None,
        read_timeout: float | None = None,
    ) -> None:
        """Initialize the server.

        Args:
            handler: Builds the response for each parsed request (required).
            host: Bind address. Defaults to settings.host.
            port: Bind port, 0 for an ephemeral one. Defaults to settings.port.
            max_clients: Concurrent connection cap. Defaults to settings.max_clients.
            read_timeout: Seconds allowed per line read. Defaults to settings.client_read_timeout.
        """
        self._handler = handler
        self._host = settings.host if host is None else host
        self._port = settings.port if port is None else port
        self._max_clients = settings.max_clients if max_clients is None else max_clients
        self._read_timeout = settings.client_read_timeout if read_timeout is None else read_timeout
        if self._max_clients < 1:
            raise ValueError("max_clients must be at least 1")
        self._slots = asyncio.Semaphore(self._max_clients)
        self._sock: socket.socket | None = None
        self._accept_task: asyncio.Task | None = None
        self._connections: set[asyncio.Task] = set()

    async def start(self) -> None:
        """Bind and start accepting.

        Raises:
            OSError: If the endpoint cannot be bound
        """
        self._sock = socket.create_server((self._host, self._port))
        self._sock.setblocking(False)
        self._accept_task = asyncio.create_task(self._accept_loop(), name="feed-accept")
        logger.info("[http] Listening on %s:%d (max %d clients)", self._host, self.port, self._max_clients)

    async def close(self) -> None:
        """Stop accepting, then wait for in-flight connections to finish."""
        if self._sock is None:
            return
        if self._accept_task is not None:
            self._accept_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._accept_task
            self._accept_task = None
        self._sock.close()
        self._sock = None
        if self._connections:
            await asyncio.gather(*self._connections, return_exceptions=True)
        logger.info("[http] Listener closed")

    @property
    def port(self) -> int:
        """The bound port (resolves an ephemeral port after ``start``)."""
        if self._sock is None:
            return self._port
        return self._sock.getsockname()[1]

    @property
    def active_connections(self) -> int:
        """Connections accepted and not yet closed."""
        return len(self._connections)

    async def _accept_loop(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            await self._slots.acquire()
            try:
                conn, _ = await loop.sock_accept(self._sock)
            except OSError as e:
                self._slots.release()
                logger.warning("[http] Accept failed: %s: %s", type(e).__name__, e)
                continue
            except BaseException:
                self._slots.release()
                raise
            task = asyncio.create_task(self._handle_connection(conn))
            self._connections.add(task)
            task.add_done_callback(self._connections.discard)

    async def _handle_connection(self, conn: socket.socket) -> None:
        writer: asyncio.StreamWriter | None = None
        try:
            reader, writer = await asyncio.open_connection(sock=conn)
            await self._serve(reader, writer)
        except Exception as e:
            logger.warning("[http] Handler error: %s: %s", type(e).__name__, e)
        finally:
            if writer is not None:
                writer.close()
                with contextlib.suppress(ConnectionError):
                    await writer.wait_closed()
            else:
                conn.close()
            self._slots.release()

    async def _serve(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            request = await self._read_request(reader)
        except asyncio.TimeoutError:
            logger.warning("[http] Request timeout")
            await self._write(writer, self._handler.request_timeout())
            return
        except MalformedRequest as e:
            logger.info("[http] Dropping connection: %s", e)
            return

        logger.debug("[http] Request: %s %s headers=%s", request.method, request.target, ",".join(request.headers))
        response = self._handler.handle(request)
        await self._write(writer, response)
        logger.info("[http] %d %s bytes=%d", response.status, request.target, len(response.body))

    async def _read_line(self, reader: asyncio.StreamReader) -> str:
        line = await asyncio.wait_for(reader.readline(), timeout=self._read_timeout)
        return line.decode("latin-1")

    async def _read_request(self, reader: asyncio.StreamReader) -> FeedRequest:
        request_line = await self._read_line(reader)
        parts = request_line.split()
        if len(parts) < 2:
            raise MalformedRequest(f"bad request line {request_line.strip()!r}")
        method, target = parts[0], parts[1]

        headers: dict[str, str] = {}
        for _ in range(MAX_HEADER_LINES):
            line = await self._read_line(reader)
            if line in ("\r\n", "\n", ""):
                return FeedRequest(method=method, target=target, headers=headers)
            match = HEADER_RE.match(line)
            if match:
                headers[match.group(1).strip().lower()] = match.group(2)
        raise MalformedRequest(f"more than {MAX_HEADER_LINES} header lines")

    async def _write(self, writer: asyncio.StreamWriter, response: FeedResponse) -> None:
        writer.write(response.to_bytes())
        await writer.drain()
