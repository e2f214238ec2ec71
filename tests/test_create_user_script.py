"""Tests for the app.scripts.create_user command-line entrypoint."""

import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import patch

from pydantic import SecretStr
from sqlalchemy import create_engine

from app.core.config import Settings
from app.core.database import create_session_factory
from app.core.security import TokenCodec
from app.models import Base
from app.scripts.create_user import main
from app.services.user_store import UserStore

SECRET = "script-test-secret-with-enough-length-000001"


class TestCreateUserScript(unittest.TestCase):
    """main() builds its own context per run, so the database is a temp SQLite file."""

    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        url = f"sqlite:///{Path(tmp.name) / 'accounts.db'}"
        engine = create_engine(url)
        Base.metadata.create_all(engine)
        engine.dispose()
        self.url = url
        self.settings = Settings(
            _env_file=None,
            DATABASE_URL=url,
            JWT_SECRET=SecretStr(SECRET),
            BCRYPT_ROUNDS=4,
        )
        patcher = patch("app.scripts.create_user.get_settings", return_value=self.settings)
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_main(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_creates_account_and_prints_token(self) -> None:
        code, out, _ = self.run_main(
            "u-001", "admin", "alice", "secure-pass", "--recovery-mail", "a@example.com"
        )
        self.assertEqual(code, 0)
        self.assertIn("Created user 'alice' (id=u-001).", out)
        token = out.strip().splitlines()[-1].removeprefix("Access token: ")
        self.assertEqual(TokenCodec(SECRET).verify(token), "u-001")

        engine = create_engine(self.url)
        self.addCleanup(engine.dispose)
        with create_session_factory(engine)() as session:
            user = UserStore(session).find_by_id("u-001")
        self.assertIsNotNone(user)
        self.assertEqual(user.type, "admin")
        self.assertEqual(user.recovery_mail, "a@example.com")
        self.assertNotEqual(user.password_hash, "secure-pass")

    def test_duplicate_username_exits_1(self) -> None:
        self.assertEqual(self.run_main("u-001", "admin", "alice", "secure-pass")[0], 0)
        code, out, err = self.run_main("u-002", "member", "alice", "other-pass")
        self.assertEqual(code, 1)
        self.assertIn("Username already taken", err)
        self.assertEqual(out, "")
