import asyncio
import json
import threading
from unittest import mock

import pytest
import websockets

from verixilac.vhwebhook import Options, VHWebHook, WebhookRequest


def _client(**opts):
    return VHWebHook("https://ingress.example.com", "app", "token", Options(**opts))


def test_options_defaults_fill_zero_values():
    opts = Options().with_defaults()
    assert opts.backoff_initial_ms == 250
    assert opts.backoff_max_ms == 30_000
    assert opts.max_queue == 500
    assert opts.heartbeat_timeout_ms == 60_000
    kept = Options(backoff_initial_ms=7, max_queue=3).with_defaults()
    assert kept.backoff_initial_ms == 7
    assert kept.max_queue == 3


@pytest.mark.parametrize(
    "url,want",
    [
        ("http://ingress.example.com", "ws://ingress.example.com/connect"),
        ("https://ingress.example.com/base/", "wss://ingress.example.com/base/connect"),
        ("ingress.example.com", "wss://ingress.example.com/connect"),
        ("ws://ingress.example.com", "ws://ingress.example.com/connect"),
    ],
)
def test_build_connect_url(url, want):
    assert VHWebHook(url, "app", "token").build_connect_url() == want


def test_jittered_stays_within_bounds():
    vh = _client()
    for _ in range(200):
        value = vh.jittered(1000)
        assert 800 <= value <= 1200
    assert vh.jittered(0) == 0


def test_jittered_upper_extreme():
    vh = _client()
    with mock.patch("verixilac.vhwebhook.random.random", return_value=1.0):
        assert vh.jittered(250) == 300


def test_backoff_bumps_to_cap_and_resets():
    vh = _client()
    assert vh.backoff_ms == 250
    vh.bump_backoff()
    assert vh.backoff_ms > 250
    for _ in range(20):
        vh.bump_backoff()
    assert vh.backoff_ms == 30_000
    vh.reset_backoff()
    assert vh.backoff_ms == 250


def test_send_queues_and_drops_oldest():
    vh = _client(max_queue=2)
    for n in range(3):
        vh.send({"type": "t", "id": str(n)})
    assert [json.loads(m)["id"] for m in vh.queue] == ["1", "2"]


def test_ping_is_answered_with_pong():
    vh = _client()
    vh.handle_raw_message('{"type":"ping","data":{"n":1}}')
    assert [json.loads(m) for m in vh.queue] == [{"type": "pong", "data": {"n": 1}}]


def test_webhook_request_is_acked_and_dispatched():
    vh = _client()
    received = []
    done = threading.Event()

    def handler(req):
        received.append(req)
        done.set()

    vh.on_webhook_request(handler)
    vh.handle_raw_message(
        json.dumps(
            {
                "type": "webhook_request",
                "id": "r1",
                "headers": {"A": "b"},
                "body_b64": "e30=",
                "path": "/hook/abc",
            }
        )
    )
    assert json.loads(vh.queue[0]) == {"type": "webhook_ack", "id": "r1"}
    assert done.wait(5)
    assert received[0] == WebhookRequest(
        type="webhook_request", id="r1", headers={"A": "b"}, body_b64="e30=", path="/hook/abc"
    )


def test_invalid_and_unknown_messages_are_ignored():
    vh = _client()
    vh.handle_raw_message("not json")
    vh.handle_raw_message('{"type":"other"}')
    vh.handle_raw_message("[1, 2]")
    assert vh.queue == []


def test_webhook_request_from_dict_validates():
    with pytest.raises(ValueError):
        WebhookRequest.from_dict({"id": 5})
    with pytest.raises(ValueError):
        WebhookRequest.from_dict({"headers": ["x"]})
    req = WebhookRequest.from_dict({"type": "webhook_request", "method": "POST"})
    assert req.method == "POST"
    assert req.headers == {}


def test_stop_clears_queue_and_is_idempotent():
    vh = _client()
    vh.send({"type": "t"})
    vh.stop()
    assert vh.stopped is True
    assert len(vh.queue) == 1


@pytest.mark.asyncio
async def test_handshake_and_ping_over_socket():
    inbox: asyncio.Queue = asyncio.Queue()

    async def handler(ws, *args):
        await inbox.put(json.loads(await ws.recv()))
        await ws.send(json.dumps({"type": "ping", "data": "x"}))
        await inbox.put(json.loads(await ws.recv()))
        try:
            await ws.recv()
        except websockets.exceptions.ConnectionClosed:
            pass

    async with websockets.serve(handler, "127.0.0.1", 0) as server:
        port = server.sockets[0].getsockname()[1]
        vh = VHWebHook(f"http://127.0.0.1:{port}", "app", "token")
        vh.start()
        try:
            handshake = await asyncio.wait_for(inbox.get(), 10)
            pong = await asyncio.wait_for(inbox.get(), 10)
            running = vh.stopped
            queued = list(vh.queue)
            backoff = vh.backoff_ms
        finally:
            vh.stop()
    assert handshake["type"] == "handshake"
    assert handshake["application"] == "app"
    assert pong == {"type": "pong", "data": "x"}
    assert running is False
    assert queued == []
    assert backoff == 250
    assert vh.stopped is True