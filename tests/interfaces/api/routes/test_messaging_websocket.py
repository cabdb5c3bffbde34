"""Integration tests for the realtime websocket."""

from __future__ import annotations

import time

import pytest

pytest.importorskip("fastapi")
from sqlalchemy.exc import OperationalError
from starlette.websockets import WebSocketDisconnect

from campusshare.infrastructure.security import create_access_token
from campusshare.interfaces.api.routes import realtime


def _ws_url(user) -> str:
    return f"/ws?token={create_access_token(user.id)}"


def test_connection_without_token_is_closed(client) -> None:
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect("/ws"):
            pass
    assert excinfo.value.code == 1008


def test_connection_with_invalid_token_is_closed(client) -> None:
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect("/ws?token=garbage"):
            pass
    assert excinfo.value.code == 1008


def test_init_frame_lists_unread_notifications(client, make_user, auth_headers) -> None:
    alice, bob = make_user("alice"), make_user("bob")
    client.post(
        "/messages",
        json={"recipient_id": bob.id, "text": "while you were away", "listing_id": 1},
        headers=auth_headers(alice),
    )

    with client.websocket_connect(_ws_url(bob)) as websocket:
        init = websocket.receive_json()
        websocket.send_json({"type": "ping"})
        pong = websocket.receive_json()

    assert init["type"] == "init"
    assert [n["message"] for n in init["data"]] == ["alice: while you were away"]
    assert pong == {"type": "pong"}


def test_connected_recipient_receives_message_and_notification(
    client, make_user, auth_headers
) -> None:
    alice, bob = make_user("alice"), make_user("bob")

    with client.websocket_connect(_ws_url(bob)) as websocket:
        assert websocket.receive_json() == {"type": "init", "data": []}
        assert client.app.state.connection_registry.is_online(bob.id)

        sent = client.post(
            "/messages",
            json={"recipient_id": bob.id, "text": "ping from alice", "note_id": 4},
            headers=auth_headers(alice),
        ).json()
        frames = [websocket.receive_json(), websocket.receive_json()]

    by_type = {frame["type"]: frame["data"] for frame in frames}
    assert set(by_type) == {"new_message", "new_notification"}
    assert by_type["new_message"]["id"] == sent["id"]
    assert by_type["new_message"]["note_id"] == 4
    assert by_type["new_message"]["sender"]["username"] == "alice"
    assert by_type["new_notification"]["related_id"] == sent["id"]
    assert by_type["new_notification"]["title"] == "New message from alice"


def test_every_open_tab_receives_the_message(client, make_user, auth_headers) -> None:
    alice, bob = make_user("alice"), make_user("bob")

    with client.websocket_connect(_ws_url(bob)) as first_tab:
        with client.websocket_connect(_ws_url(bob)) as second_tab:
            first_tab.receive_json()
            second_tab.receive_json()
            assert len(client.app.state.connection_registry.lookup(bob.id)) == 2

            client.post(
                "/messages",
                json={"recipient_id": bob.id, "text": "both tabs", "listing_id": 1},
                headers=auth_headers(alice),
            )
            first = {first_tab.receive_json()["type"], first_tab.receive_json()["type"]}
            second = {second_tab.receive_json()["type"], second_tab.receive_json()["type"]}

    assert first == second == {"new_message", "new_notification"}


def test_send_message_frame_is_acknowledged(client, make_user) -> None:
    alice, bob = make_user("alice"), make_user("bob")

    with client.websocket_connect(_ws_url(alice)) as websocket:
        websocket.receive_json()
        websocket.send_json(
            {
                "type": "send_message",
                "data": {"recipient_id": bob.id, "text": "over the socket", "textbook_id": 2},
            }
        )
        ack = websocket.receive_json()
        websocket.send_json({"type": "send_message", "recipient_id": bob.id, "text": "no context"})
        error = websocket.receive_json()

    assert ack["type"] == "message_sent"
    assert ack["data"]["text"] == "over the socket"
    assert ack["data"]["textbook_id"] == 2
    assert error == {
        "type": "error",
        "data": {"detail": "listing_id, textbook_id, or note_id is required"},
    }


def test_mark_read_frame_updates_messages(client, make_user, auth_headers) -> None:
    alice, bob = make_user("alice"), make_user("bob")
    sent = client.post(
        "/messages",
        json={"recipient_id": bob.id, "text": "read me", "listing_id": 1},
        headers=auth_headers(alice),
    ).json()

    with client.websocket_connect(_ws_url(bob)) as websocket:
        websocket.receive_json()
        websocket.send_json({"type": "mark_read", "data": {"message_ids": [sent["id"]]}})
        reply = websocket.receive_json()

    assert reply == {"type": "messages_read", "data": {"updated": 1}}


def test_database_failure_while_connecting_closes_the_socket(client, make_user, monkeypatch) -> None:
    bob = make_user("bob")

    def failing_list(*args, **kwargs):
        raise OperationalError("SELECT notification", {}, Exception("database is locked"))

    monkeypatch.setattr(realtime, "list_notifications", failing_list)

    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect(_ws_url(bob)):
            pass
    assert excinfo.value.code == 1011
    assert not client.app.state.connection_registry.is_online(bob.id)


def test_database_failure_on_mark_read_keeps_the_socket_open(client, make_user, monkeypatch) -> None:
    bob = make_user("bob")

    def failing_mark_read(*args, **kwargs):
        raise OperationalError("UPDATE message", {}, Exception("database is locked"))

    monkeypatch.setattr(realtime, "mark_messages_read", failing_mark_read)

    with client.websocket_connect(_ws_url(bob)) as websocket:
        websocket.receive_json()
        websocket.send_json({"type": "mark_read", "data": {"message_ids": [1]}})
        error = websocket.receive_json()
        websocket.send_json({"type": "ping"})
        pong = websocket.receive_json()

    assert error == {"type": "error", "data": {"detail": "Failed to mark messages as read"}}
    assert pong == {"type": "pong"}


def test_disconnect_unregisters_the_connection(client, make_user) -> None:
    bob = make_user("bob")

    with client.websocket_connect(_ws_url(bob)) as websocket:
        websocket.receive_json()
        websocket.send_json({"type": "ping"})
        websocket.receive_json()

    registry = client.app.state.connection_registry
    deadline = time.monotonic() + 2
    while registry.is_online(bob.id) and time.monotonic() < deadline:
        time.sleep(0.01)
    assert not registry.is_online(bob.id)
