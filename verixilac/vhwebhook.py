"""Client for a websocket ingress proxy that relays webhook requests."""

from __future__ import annotations

import asyncio
import json
import logging
import random
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping
from urllib.parse import urlsplit, urlunsplit

import websockets

logger = logging.getLogger(__name__)


@dataclass
class WebhookRequest:
    """An incoming webhook request relayed by the ingress."""

    type: str = ""
    id: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body_b64: str = ""
    method: str = ""
    path: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WebhookRequest:
        if not isinstance(data, Mapping):
            raise ValueError("webhook request must be an object")
        values: dict[str, Any] = {}
        for name in ("type", "id", "body_b64", "method", "path"):
            value = data.get(name)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ValueError(f"field {name!r} must be a string")
            values[name] = value
        headers = data.get("headers")
        if headers is not None:
            if not isinstance(headers, Mapping) or not all(
                isinstance(k, str) and isinstance(v, str) for k, v in headers.items()
            ):
                raise ValueError("field 'headers' must map strings to strings")
            values["headers"] = dict(headers)
        return cls(**values)


@dataclass(frozen=True)
class Options:
    """Client settings; zero values mean the default."""

    backoff_initial_ms: int = 0
    backoff_max_ms: int = 0
    backoff_jitter: float = 0.0
    max_queue: int = 0
    proxy_chunking: bool = False
    heartbeat_timeout_ms: int = 0

    def with_defaults(self) -> Options:
        return replace(
            self,
            backoff_initial_ms=self.backoff_initial_ms if self.backoff_initial_ms > 0 else 250,
            backoff_max_ms=self.backoff_max_ms if self.backoff_max_ms > 0 else 30_000,
            backoff_jitter=self.backoff_jitter if self.backoff_jitter > 0 else 0.2,
            max_queue=self.max_queue if self.max_queue > 0 else 500,
            heartbeat_timeout_ms=(
                self.heartbeat_timeout_ms if self.heartbeat_timeout_ms > 0 else 60_000
            ),
        )


class VHWebHook:
    """Keeps a reconnecting websocket to the ingress and dispatches requests."""

    def __init__(
        self, url: str, app_name: str, app_token: str, options: Options | None = None
    ) -> None:
        self.url = url
        self.app_name = app_name
        self.app_token = app_token
        self.options = (options or Options()).with_defaults()
        self.queue: list[str] = []
        self._backoff_ms = self.options.backoff_initial_ms
        self._handler: Callable[[WebhookRequest], Any] | None = None
        self._stopped = True
        self._lock = threading.RLock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._wake: asyncio.Event | None = None
        self._ws: Any = None
        self._outbox: asyncio.Queue[str] | None = None

    @property
    def backoff_ms(self) -> int:
        return self._backoff_ms

    @property
    def stopped(self) -> bool:
        return self._stopped

    def on_webhook_request(self, handler: Callable[[WebhookRequest], Any] | None) -> None:
        self._handler = handler

    # lifecycle

    def start(self) -> None:
        """Begin connecting in the background; does nothing if already running."""
        with self._lock:
            if not self._stopped:
                return
            self._stopped = False
            loop = asyncio.new_event_loop()
            self._loop = loop
            self._wake = None
            thread = threading.Thread(
                target=self._run_loop, args=(loop,), name="vhwebhook", daemon=True
            )
            self._thread = thread
        thread.start()

    def stop(self) -> None:
        """Disconnect and stop reconnecting; does nothing if already stopped."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            ws = self._ws
            self._ws = None
            self._outbox = None
            self.queue = []
            self.reset_backoff()
            loop = self._loop
            wake = self._wake
        if loop is None:
            return
        try:
            if wake is not None:
                loop.call_soon_threadsafe(wake.set)
            if ws is not None:
                asyncio.run_coroutine_threadsafe(ws.close(), loop)
        except RuntimeError:
            pass

    # outgoing messages

    def send(self, message: Mapping[str, Any]) -> None:
        """Send ``message`` as JSON, or queue it while disconnected."""
        try:
            data = json.dumps(message, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError):
            logger.exception("failed to marshal message")
            return
        with self._lock:
            outbox = self._outbox
            loop = self._loop
            if self._ws is not None and outbox is not None and loop is not None:
                try:
                    loop.call_soon_threadsafe(outbox.put_nowait, data)
                except RuntimeError:
                    logger.error("failed to send message: event loop closed")
                return
            if len(self.queue) >= self.options.max_queue:
                del self.queue[0]
                logger.warning("send queue full; dropping oldest message")
            self.queue.append(data)

    # helpers

    def build_connect_url(self) -> str:
        """The ``/connect`` websocket URL derived from the configured URL."""
        u = self.url
        if u.startswith("http://"):
            u = "ws://" + u[len("http://"):]
        elif u.startswith("https://"):
            u = "wss://" + u[len("https://"):]
        if not (u.startswith("ws://") or u.startswith("wss://")):
            u = "wss://" + u
        u = u.rstrip("/")
        try:
            parts = urlsplit(u)
        except ValueError:
            return u + "/connect"
        return urlunsplit(parts._replace(path=parts.path.rstrip("/") + "/connect"))

    def jittered(self, ms: int) -> int:
        """``ms`` shifted randomly by up to the jitter fraction, never negative."""
        jitter = self.options.backoff_jitter
        if jitter <= 0:
            return ms
        delta = ms * jitter
        result = round(ms + (random.random() * 2 - 1) * delta)
        return max(result, 0)

    def bump_backoff(self) -> None:
        with self._lock:
            self._backoff_ms = int(
                min(
                    self.options.backoff_max_ms,
                    max(self.options.backoff_initial_ms, self._backoff_ms * 2),
                )
            )

    def reset_backoff(self) -> None:
        with self._lock:
            self._backoff_ms = self.options.backoff_initial_ms

    # incoming messages

    def handle_raw_message(self, data: str | bytes) -> None:
        """Acknowledge and dispatch a webhook request, or answer a ping."""
        try:
            msg = json.loads(data)
        except (TypeError, ValueError):
            logger.error("failed to parse JSON message")
            return
        if not isinstance(msg, dict):
            logger.error("failed to parse JSON message: not an object")
            return

        kind = msg.get("type")
        if kind == "webhook_request":
            ack: dict[str, Any] = {"type": "webhook_ack"}
            if msg.get("id"):
                ack["id"] = msg["id"]
            self.send(ack)
            try:
                request = WebhookRequest.from_dict(msg)
            except ValueError:
                logger.exception("failed to parse webhook request")
                return
            handler = self._handler
            if handler is not None:
                threading.Thread(
                    target=self._run_handler, args=(handler, request), daemon=True
                ).start()
        elif kind == "ping":
            self.send({"type": "pong", "data": msg.get("data")})
        else:
            logger.debug("unhandled message type %r", kind)

    @staticmethod
    def _run_handler(handler: Callable[[WebhookRequest], Any], request: WebhookRequest) -> None:
        try:
            handler(request)
        except Exception:
            logger.exception("webhook handler failed")

    # connection loop

    def _run_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        try:
            loop.run_until_complete(self._main())
        finally:
            loop.close()

    async def _main(self) -> None:
        wake = asyncio.Event()
        with self._lock:
            self._wake = wake
        delay_ms = 0
        while not self._stopped:
            if delay_ms > 0:
                try:
                    await asyncio.wait_for(wake.wait(), delay_ms / 1000)
                except asyncio.TimeoutError:
                    pass
            if self._stopped:
                break
            why, err = await self._session()
            if self._stopped:
                break
            if err is not None:
                logger.error("%s: %s", why, err)
            else:
                logger.warning("%s", why)
            with self._lock:
                delay_ms = self.jittered(self._backoff_ms)
                self.bump_backoff()

    async def _session(self) -> tuple[str, BaseException | None]:
        url = self.build_connect_url()
        logger.info("connecting to %s", url)
        try:
            ws = await websockets.connect(url)
        except Exception as exc:
            return "failed to connect", exc

        outbox: asyncio.Queue[str] = asyncio.Queue()
        with self._lock:
            if self._stopped:
                await self._close_quietly(ws)
                return "stopped", None
            self._ws = ws
            self._outbox = outbox
            self.reset_backoff()
        logger.info("connected to %s", self.url)

        self.send(
            {
                "type": "handshake",
                **({"application": self.app_name} if self.app_name else {}),
                **({"token": self.app_token} if self.app_token else {}),
                "options": (
                    {"proxy_chunking": True} if self.options.proxy_chunking else {}
                ),
            }
        )
        with self._lock:
            pending, self.queue = self.queue, []
        for data in pending:
            outbox.put_nowait(data)

        writer = asyncio.ensure_future(self._write_loop(ws, outbox))
        timeout = self.options.heartbeat_timeout_ms / 1000
        try:
            while True:
                try:
                    message = await asyncio.wait_for(ws.recv(), timeout)
                except asyncio.TimeoutError:
                    return "heartbeat timeout; terminating connection", None
                except Exception as exc:
                    return "WebSocket read error", exc
                self.handle_raw_message(message)
        finally:
            with self._lock:
                if self._ws is ws:
                    self._ws = None
                    self._outbox = None
            writer.cancel()
            await self._close_quietly(ws)

    @staticmethod
    async def _write_loop(ws: Any, outbox: asyncio.Queue[str]) -> None:
        while True:
            data = await outbox.get()
            try:
                await ws.send(data)
            except Exception as exc:
                logger.error("failed to send message: %s", exc)
                return

    @staticmethod
    async def _close_quietly(ws: Any) -> None:
        try:
            await ws.close()
        except Exception:
            pass