"""Shared setup for API tests: in-memory SQLite database, seeded users and bearer tokens."""

import unittest
from itertools import count

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from farmapp.core.config import Settings, get_settings
from farmapp.core.database import get_db
from farmapp.core.security import create_access_token, hash_password
from farmapp.main import app
from farmapp.models import Base, Farm, User

PASSWORD = "correct-horse"
# bcrypt is slow by design; hash once per test run.
PASSWORD_HASH = hash_password(PASSWORD)

_usernames = count(1)


class ApiTestCase(unittest.TestCase):
    """Runs the real app against a fresh SQLite database per test."""

    ai_features_enabled = False

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.settings = Settings(AI_FEATURES_ENABLED=self.ai_features_enabled)

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_settings] = lambda: self.settings
        self.client = TestClient(app)
        self.prefix = self.settings.API_V1_PREFIX
        self.farm_id = self.add_farm()

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def url(self, path: str) -> str:
        return f"{self.prefix}{path}"

    def add_farm(self, name: str = "Green Acres", is_active: bool = True) -> int:
        with self.Session() as db:
            farm = Farm(
                name=name,
                location="Namakkal",
                owner_name="R. Kumar",
                phone="9800011111",
                is_active=is_active,
            )
            db.add(farm)
            db.commit()
            return farm.id

    def add_user(self, role: str, is_active: bool = True, username: str | None = None) -> int:
        """Insert a user directly and return its id."""
        username = username or f"{role}{next(_usernames)}"
        with self.Session() as db:
            user = User(
                username=username,
                email=f"{username}@example.com",
                password_hash=PASSWORD_HASH,
                role=role,
                is_active=is_active,
            )
            db.add(user)
            db.commit()
            return user.id

    def set_user(self, user_id: int, **fields: object) -> None:
        """Change a stored user behind the token's back (e.g. demote or deactivate)."""
        with self.Session() as db:
            user = db.get(User, user_id)
            for key, value in fields.items():
                setattr(user, key, value)
            db.commit()

    def delete_user(self, user_id: int) -> None:
        with self.Session() as db:
            db.delete(db.get(User, user_id))
            db.commit()

    def headers_for(self, user_id: int, role: str = "staff") -> dict[str, str]:
        token = create_access_token(sub=user_id, role=role)
        return {"Authorization": f"Bearer {token}"}

    def login_as(self, role: str) -> tuple[int, dict[str, str]]:
        """Create an active user with role and return (id, auth headers)."""
        user_id = self.add_user(role)
        return user_id, self.headers_for(user_id, role)
