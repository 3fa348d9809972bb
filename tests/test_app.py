import os
import uuid

import pytest
from aiohttp.test_utils import TestClient, TestServer

from boardhub.app import create_app, main
from boardhub.logs import get_nop_logger


class FakePubSub:
    def __init__(self):
        self.subscribed = set()
        self.punsubscribed = []

    async def get_message(self, ignore_subscribe_messages=False, timeout=None):
        return None

    async def subscribe(self, *channels):
        self.subscribed.update(channels)

    async def punsubscribe(self, *patterns):
        self.punsubscribed.extend(patterns)


class FakePipeline:
    def __init__(self, store):
        self.store = store
        self.ops = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def set(self, key, value, ex=None):
        self.ops.append(lambda: self.store.__setitem__(key, value))
        return self

    def hset(self, key, mapping=None):
        self.ops.append(lambda: self.store.setdefault(key, {}).update(mapping))
        return self

    def expire(self, key, ttl):
        return self

    async def execute(self):
        for op in self.ops:
            op()
        return [True] * len(self.ops)


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.pubsub_client = FakePubSub()
        self.closed = False

    def pubsub(self):
        return self.pubsub_client

    async def get(self, key):
        return self.store.get(key)

    async def hget(self, key, field):
        return self.store.get(key, {}).get(field)

    async def hset(self, key, field, value):
        self.store.setdefault(key, {})[field] = value

    async def publish(self, channel, message):
        return 0

    def pipeline(self, transaction=True):
        return FakePipeline(self.store)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def redis():
    return FakeRedis()


@pytest.mark.asyncio
async def test_health_through_full_app(redis):
    app = create_app(redis, get_nop_logger())
    async with TestClient(TestServer(app)) as client:
        response = await client.get("/health")
        assert await response.text() == "OK"


@pytest.mark.asyncio
async def test_create_room_issues_cookie_and_stores_admin(redis):
    app = create_app(redis, get_nop_logger())
    async with TestClient(TestServer(app)) as client:
        response = await client.post("/api/v1/rooms")
        assert response.status == 201
        room_id = await response.text()
        user_id = response.cookies["userID"].value
    assert str(uuid.UUID(room_id)) == room_id
    assert redis.store[f"room:{room_id}"]["admin_id"] == user_id
    assert redis.store[f"user:{user_id}:room"] == room_id


@pytest.mark.asyncio
async def test_existing_room_is_returned_for_known_user(redis):
    redis.store["user:user-1:room"] = "room-1"
    app = create_app(redis, get_nop_logger())
    async with TestClient(TestServer(app)) as client:
        response = await client.post("/api/v1/rooms", headers={"Cookie": "userID=user-1"})
        assert response.status == 201
        assert await response.text() == "room-1"
        assert "userID" not in response.cookies


@pytest.mark.asyncio
async def test_websocket_reports_unsupported_type(redis):
    app = create_app(redis, get_nop_logger())
    async with TestClient(TestServer(app)) as client:
        ws = await client.ws_connect("/api/v1/ws")
        await ws.send_json({"type": "bogus", "roomID": "r"})
        reply = await ws.receive_json(timeout=5)
        await ws.close()
    assert reply == {"message": "unsupported message type: bogus"}
    assert "room:*" in redis.pubsub_client.punsubscribed


@pytest.mark.asyncio
async def test_websocket_join_sends_content(redis):
    redis.store["room:abc"] = {"admin_id": "someone", "content": "[]"}
    app = create_app(redis, get_nop_logger())
    async with TestClient(TestServer(app)) as client:
        ws = await client.ws_connect("/api/v1/ws")
        await ws.send_json({"type": "join", "roomID": "abc"})
        reply = await ws.receive_json(timeout=5)
        await ws.close()
    assert reply == "[]"
    assert "room:abc" in redis.pubsub_client.subscribed


@pytest.mark.asyncio
async def test_cleanup_closes_redis(redis):
    app = create_app(redis, get_nop_logger())
    async with TestClient(TestServer(app)) as client:
        await client.get("/health")
        assert redis.closed is False
    assert redis.closed is True


def test_main_fails_on_bad_port(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PORT", "abc")
    assert main([]) == 1


def test_main_reads_env_file_before_discovery(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PORT", "placeholder")
    monkeypatch.delenv("PORT")
    env_file = tmp_path / "settings.env"
    env_file.write_text("PORT=not-a-number\n")
    assert main(["--env-file", str(env_file)]) == 1
    assert os.environ["PORT"] == "not-a-number"