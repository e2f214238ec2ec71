"""Tests for app.services.user_store against an in-memory SQLite database."""

import unittest

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from app.core.database import create_session_factory
from app.models import Base, User
from app.services.user_store import DuplicateUserError, UserStore


def _user(id: str = "u1", username: str = "alice", **kwargs: object) -> User:
    defaults = {"type": "member", "password_hash": "$2b$04$digest"}
    defaults.update(kwargs)
    return User(id=id, username=username, **defaults)


class UserStoreTestCase(unittest.TestCase):
    """Fresh schema per test; a second session stands in for another request."""

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        self.addCleanup(self.engine.dispose)
        Base.metadata.create_all(self.engine)
        self.session_factory = create_session_factory(self.engine)
        self.session = self.session_factory()
        self.addCleanup(self.session.close)
        self.store = UserStore(self.session)

    def other_store(self) -> UserStore:
        session = self.session_factory()
        self.addCleanup(session.close)
        return UserStore(session)


class TestInsertAndFind(UserStoreTestCase):
    def test_insert_then_find_by_id_and_username(self) -> None:
        self.store.insert(_user(recovery_mail="a@example.com"))
        other = self.other_store()
        by_id = other.find_by_id("u1")
        by_name = other.find_by_username("alice")
        self.assertIsNotNone(by_id)
        self.assertEqual(by_id.username, "alice")
        self.assertEqual(by_id.recovery_mail, "a@example.com")
        self.assertIsNone(by_id.active_day)
        self.assertEqual(by_name.id, "u1")

    def test_find_missing_returns_none(self) -> None:
        self.assertIsNone(self.store.find_by_id("nope"))
        self.assertIsNone(self.store.find_by_username("nobody"))

    def test_duplicate_username_raises(self) -> None:
        self.store.insert(_user())
        with self.assertRaises(DuplicateUserError) as ctx:
            self.other_store().insert(_user(id="u2", username="alice"))
        self.assertEqual(ctx.exception.field, "username")

    def test_duplicate_id_raises(self) -> None:
        self.store.insert(_user())
        with self.assertRaises(DuplicateUserError) as ctx:
            self.other_store().insert(_user(id="u1", username="bob"))
        self.assertEqual(ctx.exception.field, "id")

    def test_store_usable_after_duplicate(self) -> None:
        self.store.insert(_user())
        store = self.other_store()
        with self.assertRaises(DuplicateUserError):
            store.insert(_user(id="u2", username="alice"))
        store.insert(_user(id="u3", username="carol"))
        self.assertEqual(store.count(), 2)


class TestFindAll(UserStoreTestCase):
    def setUp(self) -> None:
        super().setUp()
        for i in range(5):
            self.store.insert(_user(id=f"u{i}", username=f"user{i}"))

    def test_returns_all_ordered_by_id(self) -> None:
        users = self.store.find_all()
        self.assertEqual([u.id for u in users], ["u0", "u1", "u2", "u3", "u4"])

    def test_limit_and_offset(self) -> None:
        users = self.store.find_all(limit=2, offset=1)
        self.assertEqual([u.id for u in users], ["u1", "u2"])
        self.assertEqual(self.store.count(), 5)


class TestUpdateAndDelete(UserStoreTestCase):
    def test_update_changes_fields(self) -> None:
        self.store.insert(_user())
        updated = self.other_store().update_by_id("u1", {"type": "admin", "active_day": "2026-10-19"})
        self.assertEqual(updated.type, "admin")
        self.assertEqual(updated.active_day, "2026-10-19")
        self.assertEqual(self.other_store().find_by_id("u1").type, "admin")

    def test_update_missing_returns_none(self) -> None:
        self.assertIsNone(self.store.update_by_id("ghost", {"type": "admin"}))

    def test_update_to_taken_username_raises(self) -> None:
        self.store.insert(_user())
        self.store.insert(_user(id="u2", username="bob"))
        with self.assertRaises(DuplicateUserError):
            self.other_store().update_by_id("u2", {"username": "alice"})

    def test_id_cannot_be_updated(self) -> None:
        self.store.insert(_user())
        with self.assertRaises(ValueError):
            self.store.update_by_id("u1", {"id": "u9"})

    def test_delete_returns_removed_record(self) -> None:
        self.store.insert(_user())
        deleted = self.other_store().delete_by_id("u1")
        self.assertEqual(deleted.id, "u1")
        self.assertEqual(deleted.username, "alice")
        self.assertIsNone(self.other_store().find_by_id("u1"))

    def test_delete_missing_returns_none(self) -> None:
        self.assertIsNone(self.store.delete_by_id("ghost"))
