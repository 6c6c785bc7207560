# tests/test_stream.py

from __future__ import annotations

import asyncio
import json

from fastapi.testclient import TestClient

from tarefas.main import app
from tarefas.routers.auth import create_session_token
from tarefas.schemas.user import Identity
from tarefas.store.tasks import TASKS, TaskStore


def stream_scope(token: str) -> dict:
    return {
        "type": "http",
        "asgi": {"version": "3.0", "spec_version": "2.3"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": "/api/tasks/stream",
        "raw_path": b"/api/tasks/stream",
        "root_path": "",
        "query_string": b"",
        "headers": [
            (b"host", b"testserver"),
            (b"accept", b"text/event-stream"),
            (b"authorization", f"Bearer {token}".encode()),
        ],
        "client": ("testclient", 50000),
        "server": ("testserver", 80),
    }


class StreamingClient:
    """
    Drives the app over raw ASGI so an endless response can be read
    incrementally and then disconnected.
    """

    def __init__(self) -> None:
        self.messages: asyncio.Queue = asyncio.Queue()
        self.disconnected = asyncio.Event()
        self._request_sent = False

    async def receive(self) -> dict:
        if not self._request_sent:
            self._request_sent = True
            return {"type": "http.request", "body": b"", "more_body": False}
        await self.disconnected.wait()
        return {"type": "http.disconnect"}

    async def send(self, message: dict) -> None:
        await self.messages.put(message)

    async def next_event(self) -> tuple[str, list]:
        while True:
            message = await asyncio.wait_for(self.messages.get(), timeout=5)
            if message["type"] == "http.response.start":
                assert message["status"] == 200
                continue
            if message["type"] == "http.response.body" and message.get("body"):
                lines = message["body"].decode().strip().split("\n")
                fields = dict(line.split(": ", 1) for line in lines)
                return fields["event"], json.loads(fields["data"])


def test_stream_sends_snapshots_and_releases_subscription_on_disconnect(
    client: TestClient, task_store: TaskStore, alice: Identity, bob: Identity
) -> None:
    async def scenario() -> None:
        browser = StreamingClient()
        request = asyncio.create_task(app(stream_scope(create_session_token(alice)), browser.receive, browser.send))

        event, tasks = await browser.next_event()
        assert event == "snapshot"
        assert tasks == []
        assert task_store.feed.listener_count(TASKS) == 1

        task_store.add_task(alice, "Buy milk")
        event, tasks = await browser.next_event()
        assert event == "snapshot"
        assert [t["task"] for t in tasks] == ["Buy milk"]
        assert tasks[0]["user"]["email"] == alice.email

        # Another user's write still yields a full snapshot of alice's list only.
        task_store.add_task(bob, "not alice's")
        _, tasks = await browser.next_event()
        assert [t["task"] for t in tasks] == ["Buy milk"]

        browser.disconnected.set()
        await asyncio.wait_for(request, timeout=5)
        assert task_store.feed.listener_count(TASKS) == 0

    asyncio.run(scenario())


def test_stream_requires_session(client: TestClient) -> None:
    assert client.get("/api/tasks/stream").status_code == 401
