"""Tests for reading a thread and marking messages read."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from campusshare.application.use_cases.messages import get_messages, mark_messages_read
from campusshare.domain.entities import ContextRef, Message
from campusshare.domain.exceptions import MessagingValidationError
from campusshare.infrastructure.database import SessionLocal
from campusshare.infrastructure.repositories import MessageRepository
from campusshare.utils import datetime as datetime_utils

BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _store(session, sender, recipient, text, context, *, minutes=0, **extra) -> Message:
    return MessageRepository(session).add(
        Message(
            id=None,
            sender_id=sender.id,
            recipient_id=recipient.id,
            text=text,
            context=context,
            created_at=BASE_TIME + timedelta(minutes=minutes),
            **extra,
        )
    )


def _reload(message_id: int) -> Message:
    session = SessionLocal()
    try:
        return MessageRepository(session).get(message_id)
    finally:
        session.close()


def test_thread_is_ordered_by_creation_time(db_session, make_user) -> None:
    alice, bob = make_user("alice"), make_user("bob")
    listing = ContextRef.listing(4)
    _store(db_session, alice, bob, "third", listing, minutes=3)
    _store(db_session, bob, alice, "first", listing, minutes=1)
    _store(db_session, alice, bob, "second", listing, minutes=2)

    thread = get_messages(db_session, caller_id=bob.id, other_user_id=str(alice.id), context=listing)

    assert [message.text for message in thread] == ["first", "second", "third"]


def test_thread_only_contains_the_pair_and_context(db_session, make_user) -> None:
    alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
    listing = ContextRef.listing(4)
    _store(db_session, alice, bob, "wanted", listing)
    _store(db_session, alice, bob, "other listing", ContextRef.listing(5))
    _store(db_session, alice, bob, "same id, other kind", ContextRef.textbook(4))
    _store(db_session, carol, bob, "third party", listing)

    thread = get_messages(db_session, caller_id=alice.id, other_user_id=bob.id, context=listing)

    assert [message.text for message in thread] == ["wanted"]


def test_empty_thread_is_an_empty_list(db_session, make_user) -> None:
    alice, bob = make_user("alice"), make_user("bob")

    assert list(get_messages(db_session, caller_id=alice.id, other_user_id=bob.id, context=ContextRef.note(1))) == []


def test_thread_requires_other_user_and_context(db_session, make_user) -> None:
    alice = make_user("alice")

    with pytest.raises(MessagingValidationError, match="other_user_id is required"):
        get_messages(db_session, caller_id=alice.id, other_user_id=None, context=ContextRef.note(1))
    with pytest.raises(MessagingValidationError, match="is required"):
        get_messages(db_session, caller_id=alice.id, other_user_id=2, context=None)


def test_mark_read_only_touches_messages_the_caller_received(db_session, make_user) -> None:
    alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
    listing = ContextRef.listing(1)
    to_bob = _store(db_session, alice, bob, "for bob", listing)
    from_bob = _store(db_session, bob, alice, "from bob", listing)
    to_carol = _store(db_session, alice, carol, "for carol", listing)

    updated = mark_messages_read(
        db_session, caller_id=bob.id, message_ids=[to_bob.id, from_bob.id, to_carol.id, 9999]
    )

    assert updated == 1
    assert _reload(to_bob.id).read is True
    assert _reload(from_bob.id).read is False
    assert _reload(to_carol.id).read is False


def test_mark_read_leaves_email_flags_alone(db_session, make_user) -> None:
    alice, bob = make_user("alice"), make_user("bob")
    sent_at = BASE_TIME + timedelta(minutes=11)
    escalated = _store(
        db_session,
        alice,
        bob,
        "hello",
        ContextRef.listing(1),
        email_notification_sent=True,
        email_notification_sent_at=sent_at,
    )

    mark_messages_read(db_session, caller_id=bob.id, message_ids=[escalated.id])

    reloaded = _reload(escalated.id)
    assert reloaded.read is True
    assert reloaded.email_notification_sent is True
    assert reloaded.email_notification_sent_at == sent_at


def test_mark_read_is_idempotent(db_session, make_user) -> None:
    alice, bob = make_user("alice"), make_user("bob")
    message = _store(db_session, alice, bob, "hello", ContextRef.listing(1))

    mark_messages_read(db_session, caller_id=bob.id, message_ids=[message.id])
    mark_messages_read(db_session, caller_id=bob.id, message_ids=[message.id, message.id])

    assert _reload(message.id).read is True


def test_mark_read_rejects_malformed_batches(db_session, make_user) -> None:
    alice, bob = make_user("alice"), make_user("bob")
    message = _store(db_session, alice, bob, "hello", ContextRef.listing(1))

    with pytest.raises(MessagingValidationError):
        mark_messages_read(db_session, caller_id=bob.id, message_ids=[])
    with pytest.raises(MessagingValidationError):
        mark_messages_read(db_session, caller_id=bob.id, message_ids=[message.id, "oops"])

    assert _reload(message.id).read is False


@pytest.fixture()
def eastern_timezone(monkeypatch):
    try:
        tz = ZoneInfo("America/New_York")
    except ZoneInfoNotFoundError:
        pytest.skip("timezone database not available")
    monkeypatch.setattr(datetime_utils, "get_app_timezone", lambda: tz)
    return tz


def test_thread_order_survives_the_dst_fall_back_hour(db_session, make_user, eastern_timezone) -> None:
    alice, bob = make_user("alice"), make_user("bob")
    listing = ContextRef.listing(4)
    # 01:50 EDT and 01:10 EST on 2025-11-02; the second is twenty minutes later.
    earlier = datetime(2025, 11, 2, 5, 50, tzinfo=timezone.utc)
    later = datetime(2025, 11, 2, 6, 10, tzinfo=timezone.utc)
    for text, created_at in (("later", later), ("earlier", earlier)):
        MessageRepository(db_session).add(
            Message(
                id=None,
                sender_id=alice.id,
                recipient_id=bob.id,
                text=text,
                context=listing,
                created_at=created_at,
            )
        )

    thread = get_messages(db_session, caller_id=bob.id, other_user_id=alice.id, context=listing)

    assert [message.text for message in thread] == ["earlier", "later"]
    assert thread[0].created_at == earlier
    assert thread[0].created_at.utcoffset() == timedelta(hours=-4)
    assert thread[1].created_at.utcoffset() == timedelta(hours=-5)


def test_pending_email_cutoff_survives_the_dst_fall_back_hour(
    db_session, make_user, eastern_timezone
) -> None:
    alice, bob = make_user("alice"), make_user("bob")
    message_time = datetime(2025, 11, 2, 5, 50, tzinfo=timezone.utc)
    repository = MessageRepository(db_session)
    message = repository.add(
        Message(
            id=None,
            sender_id=alice.id,
            recipient_id=bob.id,
            text="late night",
            context=ContextRef.listing(1),
            created_at=message_time,
        )
    )

    before = repository.list_pending_email(message_time + timedelta(minutes=9))
    after = repository.list_pending_email(message_time + timedelta(minutes=11))

    assert before == []
    assert [pending.id for pending in after] == [message.id]
