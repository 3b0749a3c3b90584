# TCP listener: replies with a fixed greeting to every chunk a client sends.
# One asyncio task per connection; lifecycle events go to the logger and to
# any observers registered with on().

import asyncio
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Set

from tcpgreeter.config import ListenerConfig
from tcpgreeter.logger import get_logger

EVENTS = ("listening", "connection", "data", "end", "error", "close")


class ListenerError(RuntimeError):
    pass


class BindError(ListenerError):
    pass


class Listener:
    def __init__(self, cfg: ListenerConfig, logger=None):
        self.cfg = cfg
        self.logger = logger or get_logger(cfg.log_path)
        self.connections = 0
        self.chunks = 0
        self.errors = 0
        self._server: Optional[asyncio.AbstractServer] = None
        self._observers: Dict[str, List[Callable[..., Any]]] = defaultdict(list)
        self._writers: Set[asyncio.StreamWriter] = set()
        self._closed: Optional[asyncio.Event] = None

    # ---------------- observers -----------------
    def on(self, event: str, callback: Callable[..., Any]) -> None:
        if event not in EVENTS:
            raise ValueError(f"unknown event {event!r}")
        self._observers[event].append(callback)

    def _emit(self, event: str, *args) -> None:
        for cb in list(self._observers.get(event, [])):
            try:
                cb(*args)
            except Exception:
                self.logger.exception(f"{event} observer failed")

    def _report(self, err: Exception) -> None:
        self.errors += 1
        self.logger.error(f"Server error: {err}")
        self._emit("error", err)

    # ---------------- server -----------------
    @property
    def bound(self) -> bool:
        return self._server is not None

    @property
    def port(self) -> Optional[int]:
        if not self._server or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> bool:
        """Bind and listen. Failures are reported on the error channel, never raised."""
        if self._server:
            return True
        try:
            self._server = await asyncio.start_server(
                self._handle_client, host=self.cfg.host, port=self.cfg.port
            )
        except OSError as e:
            err = BindError(f"listen on port {self.cfg.port} failed: {e}")
            err.__cause__ = e
            self._report(err)
            return False
        self._closed = asyncio.Event()
        self.logger.info(f"Server is listening on port {self.port}.")
        self._emit("listening", self.port)
        return True

    async def serve_forever(self) -> None:
        """Serve until close() is called; cancellation closes the listener first."""
        if not self._server:
            raise ListenerError("listener is not bound")
        try:
            await self._closed.wait()
        finally:
            await self.close()

    async def close(self) -> None:
        if not self._server:
            return
        server, self._server = self._server, None
        server.close()
        # Server.wait_closed() waits for open connections on 3.12+.
        for writer in list(self._writers):
            writer.close()
        await server.wait_closed()
        self._closed.set()
        self.logger.info("Server closed.")
        self._emit("close")

    def status(self) -> Dict[str, Any]:
        return {
            "port": self.port if self.bound else self.cfg.port,
            "bound": self.bound,
            "connections": self.connections,
            "chunks": self.chunks,
            "errors": self.errors,
        }

    # ---------------- connections -----------------
    async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        peer = writer.get_extra_info("peername")
        self._writers.add(writer)
        self.connections += 1
        self.logger.info("Client connected.")
        self._emit("connection", peer)
        try:
            while True:
                data = await reader.read(self.cfg.read_size)
                if not data:
                    self.logger.info("Client disconnected.")
                    self._emit("end", peer)
                    break
                self.chunks += 1
                self.logger.info(f"Received data from client: {data.decode(errors='replace')}")
                self._emit("data", peer, data)
                writer.write(self.cfg.reply)
                await writer.drain()
        except OSError as e:
            self._report(e)
        finally:
            self._writers.discard(writer)
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                pass
