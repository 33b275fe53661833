"""Shared fixtures for API tests: fresh in-memory schema, users and tokens."""

import shutil
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from config import settings
from database import Base, SessionLocal, engine
from main import app
from models.category import Category
from models.users import User
from utils.hashing import get_password_hash

PASSWORD = "secret123"


class ApiTestCase(unittest.TestCase):
    """Each test starts with empty tables and an empty upload directory."""

    def setUp(self) -> None:
        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
        self.upload_dir = Path(settings.UPLOAD_DIR)
        shutil.rmtree(self.upload_dir, ignore_errors=True)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.client = TestClient(app)
        self.db = SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        app.dependency_overrides.clear()

    def make_user(self, email: str = "writer@example.com", role: int = 1, fullname: str = "Writer") -> User:
        user = User(
            fullname=fullname,
            username=email.split("@")[0],
            email=email,
            password_hash=get_password_hash(PASSWORD),
            tel="0800000000",
            role=role,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def make_category(self, name: str = "Mobile") -> Category:
        category = Category(name=name, status=True)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def login(self, email: str, password: str = PASSWORD) -> str:
        resp = self.client.post("/login", json={"email": email, "password": password})
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["token"]

    def auth(self, token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    def writer_headers(self, email: str = "writer@example.com") -> dict:
        self.make_user(email=email, role=1)
        return self.auth(self.login(email))

    def reader_headers(self, email: str = "reader@example.com") -> dict:
        self.make_user(email=email, role=0, fullname="Reader")
        return self.auth(self.login(email))
