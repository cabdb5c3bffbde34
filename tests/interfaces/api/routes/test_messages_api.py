"""Integration tests for the message endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")

from campusshare.infrastructure.database import SessionLocal
from campusshare.infrastructure.models import ConversationModel, MessageModel, NotificationModel


def _count(model) -> int:
    session = SessionLocal()
    try:
        return session.query(model).count()
    finally:
        session.close()


def test_requests_without_token_are_rejected(client) -> None:
    assert client.post("/messages", json={}).status_code == 401
    assert client.get("/messages").status_code == 401
    assert client.patch("/messages/read", json={"message_ids": [1]}).status_code == 401


def test_invalid_token_is_rejected(client) -> None:
    response = client.get("/messages", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Could not validate credentials"


def test_send_message_returns_created_message(client, make_user, auth_headers) -> None:
    alice, bob = make_user("alice"), make_user("bob")

    response = client.post(
        "/messages",
        json={"recipient_id": bob.id, "text": " Still available? ", "listing_id": "7"},
        headers=auth_headers(alice),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["sender_id"] == alice.id
    assert body["recipient_id"] == bob.id
    assert body["text"] == "Still available?"
    assert body["context_type"] == "listing"
    assert body["listing_id"] == 7
    assert body["textbook_id"] is None
    assert body["read"] is False
    assert body["sender"]["username"] == "alice"
    assert _count(MessageModel) == 1
    assert _count(ConversationModel) == 1
    assert _count(NotificationModel) == 1


@pytest.mark.parametrize(
    ("payload", "detail"),
    [
        ({"text": "hi", "listing_id": 1}, "recipient_id is required"),
        ({"recipient_id": "abc", "text": "hi", "listing_id": 1}, "recipient_id is not a valid identifier"),
        ({"recipient_id": "²", "text": "hi", "listing_id": 1}, "recipient_id is not a valid identifier"),
        ({"recipient_id": 2, "text": "hi", "listing_id": "①"}, "listing_id is not a valid identifier"),
        ({"recipient_id": 2, "text": "  ", "listing_id": 1}, "text is required"),
        ({"recipient_id": 2, "text": "hi"}, "listing_id, textbook_id, or note_id is required"),
    ],
)
def test_send_message_validation_errors(client, make_user, auth_headers, payload, detail) -> None:
    alice = make_user("alice")
    make_user("bob")

    response = client.post("/messages", json=payload, headers=auth_headers(alice))

    assert response.status_code == 400
    assert response.json()["detail"] == detail
    assert _count(MessageModel) == 0


def test_send_message_to_unknown_recipient(client, make_user, auth_headers) -> None:
    alice = make_user("alice")

    response = client.post(
        "/messages",
        json={"recipient_id": 404, "text": "hi", "note_id": 1},
        headers=auth_headers(alice),
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Recipient not found"
    assert _count(MessageModel) == 0


def test_get_thread_between_two_users(client, make_user, auth_headers) -> None:
    alice, bob = make_user("alice"), make_user("bob")
    for sender, recipient, text in ((alice, bob, "one"), (bob, alice, "two"), (alice, bob, "three")):
        client.post(
            "/messages",
            json={"recipient_id": recipient.id, "text": text, "textbook_id": 3},
            headers=auth_headers(sender),
        )
    client.post(
        "/messages",
        json={"recipient_id": bob.id, "text": "elsewhere", "textbook_id": 4},
        headers=auth_headers(alice),
    )

    response = client.get(
        "/messages",
        params={"other_user_id": alice.id, "textbook_id": 3},
        headers=auth_headers(bob),
    )

    assert response.status_code == 200
    messages = response.json()
    assert [message["text"] for message in messages] == ["one", "two", "three"]
    assert [message["sender"]["username"] for message in messages] == ["alice", "bob", "alice"]


def test_get_thread_requires_parameters(client, make_user, auth_headers) -> None:
    alice = make_user("alice")

    missing_context = client.get(
        "/messages", params={"other_user_id": 2}, headers=auth_headers(alice)
    )
    missing_user = client.get("/messages", params={"listing_id": 2}, headers=auth_headers(alice))

    assert missing_context.status_code == 400
    assert missing_user.status_code == 400
    assert missing_user.json()["detail"] == "other_user_id is required"


def test_mark_messages_read_only_updates_inbound(client, make_user, auth_headers) -> None:
    alice, bob = make_user("alice"), make_user("bob")
    inbound = client.post(
        "/messages",
        json={"recipient_id": bob.id, "text": "to bob", "listing_id": 1},
        headers=auth_headers(alice),
    ).json()
    outbound = client.post(
        "/messages",
        json={"recipient_id": alice.id, "text": "to alice", "listing_id": 1},
        headers=auth_headers(bob),
    ).json()

    response = client.patch(
        "/messages/read",
        json={"message_ids": [inbound["id"], outbound["id"]]},
        headers=auth_headers(bob),
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Messages marked as read", "updated": 1}

    thread = client.get(
        "/messages",
        params={"other_user_id": alice.id, "listing_id": 1},
        headers=auth_headers(bob),
    ).json()
    assert {message["text"]: message["read"] for message in thread} == {
        "to bob": True,
        "to alice": False,
    }


def test_mark_messages_read_rejects_bad_ids(client, make_user, auth_headers) -> None:
    alice = make_user("alice")

    empty = client.patch("/messages/read", json={"message_ids": []}, headers=auth_headers(alice))
    malformed = client.patch(
        "/messages/read", json={"message_ids": ["x"]}, headers=auth_headers(alice)
    )

    assert empty.status_code == 400
    assert malformed.status_code == 400
