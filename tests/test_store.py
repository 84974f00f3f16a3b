"""Tests for the in-memory chat store."""
import re
from concurrent.futures import ThreadPoolExecutor

import pydantic
import pytest

from errors import NotFoundError, ValidationError
from store import ChatStore, pair_key


ISO_UTC = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def test_start_same_pair_returns_same_chat(store):
    first = store.start("Alice", "Bob")
    second = store.start("Alice", "Bob")
    assert first == second
    assert len(store) == 1


def test_start_is_symmetric(store):
    chat_id = store.start("Alice", "Bob")
    assert store.start("Bob", "Alice") == chat_id
    assert store.get(chat_id).users == ("Alice", "Bob")


def test_start_distinct_pairs_get_distinct_chats(store):
    ab = store.start("Alice", "Bob")
    ac = store.start("Alice", "Carol")
    assert ab != ac
    assert len(store) == 2


def test_names_are_case_sensitive(store):
    assert store.start("alice", "Bob") != store.start("Alice", "Bob")


@pytest.mark.parametrize("user1,user2", [("", "Bob"), ("Alice", ""), (None, "Bob"), ("Alice", None)])
def test_start_requires_both_users(store, user1, user2):
    with pytest.raises(ValidationError):
        store.start(user1, user2)
    assert len(store) == 0


def test_append_unknown_chat(store):
    with pytest.raises(NotFoundError):
        store.append("missing", "Alice", "hi")


def test_append_unknown_chat_checked_before_fields(store):
    with pytest.raises(NotFoundError):
        store.append("missing", "", "")


@pytest.mark.parametrize("sender,text", [("", "hi"), ("Alice", ""), (None, "hi")])
def test_append_requires_sender_and_text(store, sender, text):
    chat_id = store.start("Alice", "Bob")
    with pytest.raises(ValidationError):
        store.append(chat_id, sender, text)
    assert store.list_messages(chat_id) == []


def test_list_returns_messages_in_append_order(store):
    chat_id = store.start("Alice", "Bob")
    sent = [store.append(chat_id, "Alice" if i % 2 else "Bob", f"msg {i}") for i in range(5)]

    messages = store.list_messages(chat_id)
    assert len(messages) == 5
    assert [m.text for m in messages] == [f"msg {i}" for i in range(5)]
    assert messages == sent
    timestamps = [m.timestamp for m in messages]
    assert timestamps == sorted(timestamps)
    assert all(ISO_UTC.match(t) for t in timestamps)


def test_list_unknown_chat(store):
    with pytest.raises(NotFoundError):
        store.list_messages("missing")


def test_list_returns_a_copy(store):
    chat_id = store.start("Alice", "Bob")
    store.append(chat_id, "Alice", "hi")
    snapshot = store.list_messages(chat_id)
    snapshot.clear()
    assert len(store.list_messages(chat_id)) == 1


def test_messages_are_immutable(store):
    chat_id = store.start("Alice", "Bob")
    message = store.append(chat_id, "Alice", "hi")
    with pytest.raises(pydantic.ValidationError):
        message.text = "edited"


def test_stores_are_independent():
    one, two = ChatStore(), ChatStore()
    chat_id = one.start("Alice", "Bob")
    assert chat_id in one
    assert chat_id not in two


def test_pair_key_is_order_insensitive():
    assert pair_key("Bob", "Alice") == pair_key("Alice", "Bob") == ("Alice", "Bob")


def test_concurrent_start_creates_one_chat(store):
    def start_many(i):
        pair = ("Alice", "Bob") if i % 2 else ("Bob", "Alice")
        return {store.start(*pair) for _ in range(200)}

    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = set().union(*pool.map(start_many, range(8)))

    assert len(ids) == 1
    assert len(store) == 1


def test_concurrent_appends_lose_nothing(store):
    chat_id = store.start("Alice", "Bob")

    def send_many(worker):
        for i in range(100):
            store.append(chat_id, f"user{worker}", f"{worker}-{i}")

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(send_many, range(8)))

    messages = store.list_messages(chat_id)
    assert len(messages) == 800
    assert len({m.text for m in messages}) == 800
    timestamps = [m.timestamp for m in messages]
    assert timestamps == sorted(timestamps)
    for worker in range(8):
        own = [m.text for m in messages if m.sender == f"user{worker}"]
        assert own == [f"{worker}-{i}" for i in range(100)]
