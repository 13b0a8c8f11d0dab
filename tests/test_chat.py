import asyncio

import pytest
from starlette.websockets import WebSocketDisconnect

from app.main import app
from app.modules.chat.routes import get_feed_opener


def _send_direct(client, sender, receiver, content, auth_headers):
    return client.post(
        "/api/v1/chat/direct",
        json={"receiver_id": receiver["id"], "content": content},
        headers=auth_headers(sender),
    )


def test_direct_conversation_is_both_directions_oldest_first(client, student, other_student, faculty, auth_headers):
    _send_direct(client, student, other_student, "hi Ben", auth_headers)
    _send_direct(client, other_student, student, "hey Asha", auth_headers)
    _send_direct(client, student, faculty, "unrelated", auth_headers)
    _send_direct(client, student, other_student, "  study tonight?  ", auth_headers)

    response = client.get(f"/api/v1/chat/direct/{other_student['id']}", headers=auth_headers(student))
    assert response.status_code == 200
    assert [m["content"] for m in response.json()] == ["hi Ben", "hey Asha", "study tonight?"]

    mirrored = client.get(f"/api/v1/chat/direct/{student['id']}", headers=auth_headers(other_student))
    assert [m["id"] for m in mirrored.json()] == [m["id"] for m in response.json()]


def test_blank_message_rejected(client, fake_db, student, other_student, auth_headers):
    response = _send_direct(client, student, other_student, "   ", auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Message cannot be empty"
    assert "messages" not in fake_db.tables


def test_blank_room_message_rejected(client, student, auth_headers):
    room_id = client.post("/api/v1/chat/rooms", json={"name": "Quiet"}, headers=auth_headers(student)).json()["id"]
    response = client.post(
        f"/api/v1/chat/rooms/{room_id}/messages", json={"content": "\t \n"}, headers=auth_headers(student)
    )
    assert response.status_code == 400


def test_direct_to_unknown_user(client, student, auth_headers):
    response = client.post(
        "/api/v1/chat/direct", json={"receiver_id": "ghost", "content": "hello?"}, headers=auth_headers(student)
    )
    assert response.status_code == 404


def test_failed_insert_is_reported(client, fake_db, student, other_student, auth_headers):
    fake_db.failing_tables.add("messages")
    response = _send_direct(client, student, other_student, "hello", auth_headers)
    assert response.status_code == 500
    assert response.json()["detail"] == "messages is unavailable"


def test_room_flow(client, student, other_student, faculty, auth_headers):
    room = client.post(
        "/api/v1/chat/rooms",
        json={"name": "Project X", "participant_ids": [other_student["id"], student["id"]]},
        headers=auth_headers(student),
    )
    assert room.status_code == 201
    room_id = room.json()["id"]

    participants = client.get(f"/api/v1/chat/rooms/{room_id}/participants", headers=auth_headers(other_student))
    assert sorted(p["user_id"] for p in participants.json()) == sorted([student["id"], other_student["id"]])

    client.post(f"/api/v1/chat/rooms/{room_id}/messages", json={"content": "kickoff"}, headers=auth_headers(student))
    client.post(f"/api/v1/chat/rooms/{room_id}/messages", json={"content": "ready"}, headers=auth_headers(other_student))
    messages = client.get(f"/api/v1/chat/rooms/{room_id}/messages", headers=auth_headers(student)).json()
    assert [m["content"] for m in messages] == ["kickoff", "ready"]
    assert all(m["room_id"] == room_id and m["receiver_id"] is None for m in messages)

    assert [r["id"] for r in client.get("/api/v1/chat/rooms", headers=auth_headers(other_student)).json()] == [room_id]
    assert client.get("/api/v1/chat/rooms", headers=auth_headers(faculty)).json() == []


def test_room_requires_participation(client, student, faculty, auth_headers):
    room_id = client.post("/api/v1/chat/rooms", json={"name": "Private"}, headers=auth_headers(student)).json()["id"]

    assert client.get(f"/api/v1/chat/rooms/{room_id}/messages", headers=auth_headers(faculty)).status_code == 403
    posted = client.post(
        f"/api/v1/chat/rooms/{room_id}/messages", json={"content": "let me in"}, headers=auth_headers(faculty)
    )
    assert posted.status_code == 403
    assert client.get("/api/v1/chat/rooms/missing/messages", headers=auth_headers(faculty)).status_code == 404


def test_participant_can_invite(client, student, faculty, auth_headers):
    room_id = client.post("/api/v1/chat/rooms", json={"name": "Lab"}, headers=auth_headers(student)).json()["id"]
    added = client.post(
        f"/api/v1/chat/rooms/{room_id}/participants", json={"user_id": faculty["id"]}, headers=auth_headers(student)
    )
    assert added.status_code == 201
    again = client.post(
        f"/api/v1/chat/rooms/{room_id}/participants", json={"user_id": faculty["id"]}, headers=auth_headers(student)
    )
    assert again.status_code == 400
    assert client.get(f"/api/v1/chat/rooms/{room_id}", headers=auth_headers(faculty)).status_code == 200


class FakeFeed:
    def __init__(self, rows):
        self.rows = list(rows)
        self.closed = False

    async def next_message(self):
        if self.rows:
            return self.rows.pop(0)
        await asyncio.Event().wait()

    async def close(self):
        self.closed = True


@pytest.fixture
def feeds():
    opened = []

    def opener():
        async def open_feed(user_id, room_id=None, peer_id=None):
            feed = FakeFeed([{
                "id": "m1",
                "sender_id": peer_id or "someone",
                "receiver_id": None if room_id else user_id,
                "room_id": room_id,
                "content": "pushed",
                "created_at": "2026-01-01T00:00:00+00:00",
            }])
            opened.append((user_id, room_id, peer_id, feed))
            return feed
        return open_feed

    app.dependency_overrides[get_feed_opener] = opener
    yield opened
    app.dependency_overrides.pop(get_feed_opener, None)


def test_websocket_relays_feed_messages(client, feeds, student, other_student):
    url = f"/api/v1/chat/ws?token=token-{student['id']}&peer_id={other_student['id']}"
    with client.websocket_connect(url) as ws:
        message = ws.receive_json()
    assert message["content"] == "pushed"
    assert message["receiver_id"] == student["id"]
    assert feeds[0][:3] == (student["id"], None, other_student["id"])


def test_websocket_rejects_bad_token(client, feeds, other_student):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"/api/v1/chat/ws?token=token-nobody&peer_id={other_student['id']}") as ws:
            ws.receive_json()
    assert feeds == []


def test_websocket_room_requires_participation(client, feeds, student, faculty, auth_headers):
    room_id = client.post("/api/v1/chat/rooms", json={"name": "Private"}, headers=auth_headers(student)).json()["id"]
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"/api/v1/chat/ws?token=token-{faculty['id']}&room_id={room_id}") as ws:
            ws.receive_json()

    with client.websocket_connect(f"/api/v1/chat/ws?token=token-{student['id']}&room_id={room_id}") as ws:
        assert ws.receive_json()["room_id"] == room_id


def test_websocket_needs_exactly_one_target(client, feeds, student):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"/api/v1/chat/ws?token=token-{student['id']}") as ws:
            ws.receive_json()


class ScriptedFeed(FakeFeed):
    """Yields the given rows, then raises `error` if set, otherwise blocks."""

    def __init__(self, rows, error=None):
        super().__init__(rows)
        self.error = error

    async def next_message(self):
        if not self.rows and self.error is not None:
            raise self.error
        return await super().next_message()


def _use_feed(feed):
    async def open_feed(user_id, room_id=None, peer_id=None):
        return feed
    app.dependency_overrides[get_feed_opener] = lambda: open_feed


def test_websocket_skips_malformed_rows(client, student, other_student):
    good = {
        "id": "m1",
        "sender_id": other_student["id"],
        "receiver_id": student["id"],
        "content": "still here",
        "created_at": "2026-01-01T00:00:00+00:00",
    }
    feed = ScriptedFeed([{"id": "broken", "content": None}, good])
    _use_feed(feed)

    with client.websocket_connect(f"/api/v1/chat/ws?token=token-{student['id']}&peer_id={other_student['id']}") as ws:
        assert ws.receive_json()["id"] == "m1"
    assert feed.closed


def test_websocket_closes_when_feed_fails(client, student, other_student):
    feed = ScriptedFeed([], error=RuntimeError("realtime connection lost"))
    _use_feed(feed)

    with client.websocket_connect(f"/api/v1/chat/ws?token=token-{student['id']}&peer_id={other_student['id']}") as ws:
        with pytest.raises(WebSocketDisconnect) as closed:
            ws.receive_json()
    assert closed.value.code == 1011
    assert feed.closed
