import asyncio
import json

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from boardhub.connection_handler import ConnectionHandler
from boardhub.connection_service import NotAdminError
from boardhub.dto import MessageType
from boardhub.logs import get_nop_logger


class FakeService:
    def __init__(self, error=None):
        self.error = error
        self.updates = []
        self.joins = []
        self.closed = 0

    async def update_room(self, msg, user_id):
        self.updates.append((msg, user_id))
        if self.error is not None:
            raise self.error

    async def join_room(self, room_id, conn):
        self.joins.append((room_id, conn))
        if self.error is not None:
            raise self.error

    async def close_connections(self):
        self.closed += 1


class FakeConn:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    async def send_json(self, data):
        if self.fail:
            raise ConnectionResetError("gone")
        self.sent.append(data)


def _handler(service):
    return ConnectionHandler(service, get_nop_logger())


@pytest.mark.asyncio
async def test_update_goes_to_service_with_user_id():
    service = FakeService()
    conn = FakeConn()
    raw = json.dumps({"type": "update", "roomID": "r1", "content": ["a", "b"]})
    await _handler(service).dispatch(raw, "placeholder", conn)
    assert len(service.updates) == 1
    msg, user_id = service.updates[0]
    assert msg.message_type == MessageType.UPDATE
    assert msg.room_id == "r1"
    assert msg.content == ["a", "b"]
    assert user_id == "placeholder"
    assert conn.sent == []


@pytest.mark.asyncio
async def test_join_passes_room_and_connection():
    service = FakeService()
    conn = FakeConn()
    await _handler(service).dispatch(json.dumps({"type": "join", "roomID": "r2"}), "", conn)
    assert service.joins == [("r2", conn)]
    assert conn.sent == []


@pytest.mark.asyncio
async def test_unsupported_type_is_reported():
    service = FakeService()
    conn = FakeConn()
    await _handler(service).dispatch(json.dumps({"type": "delete", "roomID": "r"}), "", conn)
    assert conn.sent == [{"message": "unsupported message type: delete"}]
    assert service.updates == [] and service.joins == []


@pytest.mark.asyncio
async def test_service_error_is_reported():
    service = FakeService(error=NotAdminError("you're not admin of this room"))
    conn = FakeConn()
    raw = json.dumps({"type": "update", "roomID": "r", "content": []})
    await _handler(service).dispatch(raw, "someone", conn)
    assert conn.sent == [{"message": "you're not admin of this room"}]


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["not json", "[1, 2]", json.dumps({"type": "update", "content": [1]})])
async def test_unreadable_message_is_ignored(raw):
    service = FakeService()
    conn = FakeConn()
    await _handler(service).dispatch(raw, "", conn)
    assert conn.sent == []
    assert service.updates == [] and service.joins == []


@pytest.mark.asyncio
async def test_write_failure_does_not_raise():
    service = FakeService()
    conn = FakeConn(fail=True)
    await _handler(service).dispatch(json.dumps({"type": "nope"}), "", conn)
    assert conn.sent == []


async def _wait_for(predicate, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate() and loop.time() < deadline:
        await asyncio.sleep(0.01)
    return predicate()


@pytest.mark.asyncio
async def test_websocket_round_trip_and_cleanup():
    service = FakeService()
    handler = _handler(service)
    app = web.Application()
    app.router.add_get("/api/v1/ws", handler.handle_websocket)
    async with TestClient(TestServer(app)) as client:
        ws = await client.ws_connect("/api/v1/ws", headers={"Cookie": "userID=placeholder"})
        await ws.send_json({"type": "update", "roomID": "r1", "content": ["x"]})
        await ws.send_json({"type": "other"})
        reply = await ws.receive_json(timeout=2)
        await ws.close()
        assert await _wait_for(lambda: service.closed == 1)
    assert reply == {"message": "unsupported message type: other"}
    assert [(m.room_id, uid) for m, uid in service.updates] == [("r1", "placeholder")]


@pytest.mark.asyncio
async def test_websocket_without_cookie_uses_empty_user():
    service = FakeService()
    handler = _handler(service)
    app = web.Application()
    app.router.add_get("/ws", handler.handle_websocket)
    async with TestClient(TestServer(app)) as client:
        ws = await client.ws_connect("/ws")
        await ws.send_str(json.dumps({"type": "update", "roomID": "r", "content": []}))
        await ws.send_str(json.dumps({"type": ""}))
        reply = await ws.receive_json(timeout=2)
        await ws.close()
        assert await _wait_for(lambda: service.closed == 1)
    assert reply == {"message": "unsupported message type: "}
    assert service.updates[0][1] == ""