"""Tests for engine construction and the script session scope."""

import unittest
from unittest.mock import patch

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from farmapp.core import database
from farmapp.core.config import Settings
from farmapp.models import Base, Farm


class TestBuildEngine(unittest.TestCase):
    def test_pool_follows_settings(self) -> None:
        engine = database.build_engine(Settings(DB_POOL_SIZE=7, DB_MAX_OVERFLOW=2))
        self.addCleanup(engine.dispose)
        self.assertEqual(engine.pool.size(), 7)
        self.assertEqual(engine.url.get_backend_name(), "postgresql")


class TestSessionScope(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
        )
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine)
        patcher = patch.object(database, "SessionLocal", self.Session)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self.engine.dispose)

    def _farm(self) -> Farm:
        return Farm(name="Hill View", location="Salem", owner_name="P. Raj", phone="9899999999")

    def test_commits_on_success(self) -> None:
        with database.session_scope() as db:
            db.add(self._farm())
        with self.Session() as db:
            self.assertEqual(db.query(Farm).count(), 1)

    def test_rolls_back_and_reraises(self) -> None:
        with self.assertRaises(RuntimeError):
            with database.session_scope() as db:
                db.add(self._farm())
                db.flush()
                raise RuntimeError("boom")
        with self.Session() as db:
            self.assertEqual(db.query(Farm).count(), 0)


if __name__ == "__main__":
    unittest.main()
