"""Unit tests for the Redis document store."""

from datetime import datetime


def user_record(user_id="u1", email="a@example.com"):
    return {
        'id': user_id,
        'email': email,
        'password_hash': "hash",
        'first_name': "A",
        'last_name': "B",
        'name': "A B",
        'created_at': datetime(2024, 1, 1).isoformat(),
    }


def test_user_lookup_by_email_and_id(store):
    assert store.insert_user(user_record())
    assert store.find_user_by_email("a@example.com")['id'] == "u1"
    assert store.find_user_by_id("u1")['email'] == "a@example.com"
    assert store.find_user_by_email("b@example.com") is None


def test_email_unique(store):
    assert store.insert_user(user_record("u1"))
    assert not store.insert_user(user_record("u2"))
    assert store.find_user_by_id("u2") is None


def test_reset_clears_everything(store):
    store.insert_user(user_record())
    store.insert_product({'id': "p1", 'product_id': "p1", 'name': "Shoe", 'price': 50,
                          'image': "/uploads/default.jpeg", 'description': None})

    assert store.reset() > 0
    assert store.find_products() == []
    assert store.find_user_by_email("a@example.com") is None


def test_ping(store):
    assert store.ping()
