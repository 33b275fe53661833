"""Registration, login, token refresh and logout through the HTTP API."""

import unittest
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from config import settings
from helpers import PASSWORD, ApiTestCase
from models.token import PersonalAccessToken
from models.users import User


def _registration(**overrides) -> dict:
    body = {
        "fullname": "Somchai Jaidee",
        "username": "somchai",
        "email": "somchai@example.com",
        "password": PASSWORD,
        "password_confirmation": PASSWORD,
        "tel": "0812345678",
        "role": 1,
    }
    body.update(overrides)
    return body


class TestRegister(ApiTestCase):

    def test_creates_user_without_exposing_hash(self) -> None:
        resp = self.client.post("/register", json=_registration())
        self.assertEqual(resp.status_code, 201, resp.text)
        body = resp.json()
        self.assertTrue(body["status"])
        self.assertEqual(body["user"]["email"], "somchai@example.com")
        self.assertNotIn("password_hash", body["user"])
        self.assertNotIn("password", body["user"])

        stored = self.db.query(User).filter(User.email == "somchai@example.com").one()
        self.assertNotEqual(stored.password_hash, PASSWORD)

    def test_duplicate_email_is_conflict_and_creates_nothing(self) -> None:
        self.assertEqual(self.client.post("/register", json=_registration()).status_code, 201)

        resp = self.client.post("/register", json=_registration(username="other", email="SOMCHAI@example.com"))
        self.assertEqual(resp.status_code, 409)
        self.assertIn("email", resp.json()["errors"])
        self.db.expire_all()
        self.assertEqual(self.db.query(User).count(), 1)

    def test_password_must_match_confirmation(self) -> None:
        resp = self.client.post("/register", json=_registration(password_confirmation="different"))
        self.assertEqual(resp.status_code, 422)
        self.assertIn("password", resp.json()["errors"])
        self.assertEqual(self.db.query(User).count(), 0)

    def test_out_of_range_role_is_rejected(self) -> None:
        resp = self.client.post("/register", json=_registration(role=10**19))
        self.assertEqual(resp.status_code, 422)
        self.assertIn("role", resp.json()["errors"])
        self.assertEqual(self.db.query(User).count(), 0)

    def test_missing_fields_are_reported_per_field(self) -> None:
        resp = self.client.post("/register", json={"email": "not-an-email"})
        self.assertEqual(resp.status_code, 422)
        body = resp.json()
        self.assertFalse(body["status"])
        for field in ("fullname", "username", "email", "password", "tel", "role"):
            self.assertIn(field, body["errors"])


class TestLogin(ApiTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.user = self.make_user(email="writer@example.com", role=1)

    def test_success_returns_token_and_user(self) -> None:
        resp = self.client.post("/login", json={"email": "writer@example.com", "password": PASSWORD})
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertTrue(body["token"])
        self.assertEqual(body["user"]["id"], self.user.id)

        me = self.client.get("/me", headers=self.auth(body["token"]))
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["email"], "writer@example.com")

    def test_wrong_password_fails(self) -> None:
        resp = self.client.post("/login", json={"email": "writer@example.com", "password": "nope"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Login failed")
        self.assertEqual(self.db.query(PersonalAccessToken).count(), 0)

    def test_unknown_email_fails(self) -> None:
        resp = self.client.post("/login", json={"email": "ghost@example.com", "password": PASSWORD})
        self.assertEqual(resp.status_code, 401)

    def test_new_login_revokes_previous_token(self) -> None:
        first = self.login("writer@example.com")
        second = self.login("writer@example.com")
        self.assertNotEqual(first, second)

        self.assertEqual(self.client.get("/me", headers=self.auth(first)).status_code, 401)
        self.assertEqual(self.client.get("/me", headers=self.auth(second)).status_code, 200)
        self.db.expire_all()
        self.assertEqual(
            self.db.query(PersonalAccessToken).filter(PersonalAccessToken.user_id == self.user.id).count(), 1
        )

    def test_token_claim_is_stringified_role(self) -> None:
        self.login("writer@example.com")
        stored = self.db.query(PersonalAccessToken).one()
        self.assertEqual(stored.abilities, ["1"])

    def test_unknown_role_gets_guest_claim_and_cannot_write(self) -> None:
        self.make_user(email="odd@example.com", role=7)
        token = self.login("odd@example.com")
        stored = self.db.query(PersonalAccessToken).one()
        self.assertEqual(stored.abilities, ["2"])
        resp = self.client.post("/categories", json={"name": "Mobile"}, headers=self.auth(token))
        self.assertEqual(resp.status_code, 403)

    def test_malformed_json_is_reported_under_body(self) -> None:
        resp = self.client.post("/login", content=b"{not json", headers={"Content-Type": "application/json"})
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(list(resp.json()["errors"]), ["body"])


class TestRefreshToken(ApiTestCase):

    def test_refresh_replaces_token(self) -> None:
        self.make_user(email="writer@example.com")
        old = self.login("writer@example.com")

        resp = self.client.post("/refreshtoken", headers=self.auth(old))
        self.assertEqual(resp.status_code, 201)
        new = resp.json()["token"]

        self.assertEqual(self.client.get("/me", headers=self.auth(old)).status_code, 401)
        self.assertEqual(self.client.get("/me", headers=self.auth(new)).status_code, 200)

    def test_refresh_requires_token(self) -> None:
        self.assertEqual(self.client.post("/refreshtoken").status_code, 401)
        resp = self.client.post("/refreshtoken", headers=self.auth("garbage"))
        self.assertEqual(resp.status_code, 401)
        self.assertFalse(resp.json()["status"])

    def test_capability_follows_role_only_after_refresh(self) -> None:
        user = self.make_user(email="member@example.com", role=0)
        token = self.login("member@example.com")

        user.role = 1
        self.db.commit()

        resp = self.client.post("/categories", json={"name": "Mobile"}, headers=self.auth(token))
        self.assertEqual(resp.status_code, 403)

        refreshed = self.client.post("/refreshtoken", headers=self.auth(token)).json()["token"]
        resp = self.client.post("/categories", json={"name": "Mobile"}, headers=self.auth(refreshed))
        self.assertEqual(resp.status_code, 201)


class TestLogout(ApiTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.make_user(email="writer@example.com")
        self.token = self.login("writer@example.com")

    def test_requires_token(self) -> None:
        self.assertEqual(self.client.post("/logout").status_code, 401)

    def test_reports_success_and_keeps_token_by_default(self) -> None:
        resp = self.client.post("/logout", headers=self.auth(self.token))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "Logged out")
        self.assertEqual(self.client.get("/me", headers=self.auth(self.token)).status_code, 200)

    def test_revokes_when_policy_enabled(self) -> None:
        with patch.object(settings, "REVOKE_TOKENS_ON_LOGOUT", True):
            resp = self.client.post("/logout", headers=self.auth(self.token))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/me", headers=self.auth(self.token)).status_code, 401)

    def test_store_failure_is_internal_error(self) -> None:
        with patch("routes.auth.write_log", side_effect=OperationalError("INSERT", {}, Exception("disk full"))):
            resp = self.client.post("/logout", headers=self.auth(self.token))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["message"], "An error occurred while logging out.")


if __name__ == "__main__":
    unittest.main()
