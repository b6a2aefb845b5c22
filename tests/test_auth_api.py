"""HTTP tests for /api/auth: register, login, check and logout."""

import unittest

from app.models import Role, User
from support import COOKIE_NAME, ApiTestHarness

REGISTER = "/api/auth/register"
AUTH = "/api/auth"


def _user_data(**overrides: object) -> dict:
    data = {"name": "Test Name", "username": "test_name", "password": "password"}
    data.update(overrides)
    return {k: v for k, v in data.items() if v is not None}


class AuthApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.harness = ApiTestHarness()
        self.client = self.harness.client

    def tearDown(self) -> None:
        self.harness.close()

    def use_cookie(self, cookie: str) -> None:
        self.client.cookies.clear()
        self.client.cookies.set(COOKIE_NAME, cookie)


class TestRegister(AuthApiTestCase):
    """Registration creates a client user and logs it in."""

    def test_register_logs_in(self) -> None:
        data = _user_data()
        response = self.client.post(REGISTER, json=data)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["name"], data["name"])
        self.assertEqual(body["username"], data["username"])
        self.assertIsInstance(body["id"], int)
        self.assertNotIn("password", body)
        self.assertNotIn("passwordHash", body)
        self.assertIn(COOKIE_NAME, response.cookies)

        self.assertEqual(self.client.get(AUTH).status_code, 200)

    def test_password_is_stored_hashed(self) -> None:
        self.client.post(REGISTER, json=_user_data())
        with self.harness.db() as db:
            user = db.query(User).filter(User.username == "test_name").one()
            self.assertNotEqual(user.password_hash, "password")
            self.assertEqual(user.password_hash, self.harness.hasher.hash("password"))
            self.assertEqual(user.role, Role.CLIENT.value)

    def test_role_in_body_is_ignored(self) -> None:
        self.client.post(REGISTER, json=_user_data(role="admin"))
        with self.harness.db() as db:
            user = db.query(User).filter(User.username == "test_name").one()
            self.assertEqual(user.role, Role.CLIENT.value)
        self.assertEqual(self.client.post("/api/category", json={"name": "x"}).status_code, 401)

    def test_missing_fields(self) -> None:
        for field in ("name", "username", "password"):
            response = self.client.post(REGISTER, json=_user_data(**{field: None}))
            self.assertEqual(response.status_code, 422, field)
            self.assertTrue(response.text.startswith("ValidationError: "))

    def test_duplicate_username(self) -> None:
        self.assertEqual(self.client.post(REGISTER, json=_user_data()).status_code, 200)
        self.client.cookies.clear()
        response = self.client.post(REGISTER, json=_user_data(name="Other"))
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.text, "ValidationError: Invalid data received.")
        self.assertNotIn(COOKIE_NAME, response.cookies)

    def test_session_store_failure_creates_no_account(self) -> None:
        self.harness.redis.fail_on.add("set")
        with self.assertLogs("app.core.errors", "ERROR"):
            response = self.client.post(REGISTER, json=_user_data())
        self.assertEqual(response.status_code, 500)
        with self.harness.db() as db:
            self.assertEqual(db.query(User).count(), 0)

        self.harness.redis.fail_on.clear()
        self.assertEqual(self.client.post(REGISTER, json=_user_data()).status_code, 200)


class TestLogin(AuthApiTestCase):
    """Login verifies credentials and never tells which part was wrong."""

    def test_login(self) -> None:
        self.harness.add_user("test_name", password="password", name="Test Name")
        response = self.client.post(AUTH, json={"username": "test_name", "password": "password"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Test Name")
        self.assertEqual(response.json()["username"], "test_name")
        self.assertNotIn("password", response.json())
        self.assertEqual(self.client.get(AUTH).status_code, 200)

    def test_unknown_user_and_wrong_password_look_the_same(self) -> None:
        self.harness.add_user("test_name", password="password")
        unknown = self.client.post(AUTH, json={"username": "nobody", "password": "password"})
        wrong = self.client.post(AUTH, json={"username": "test_name", "password": "nope"})
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.text, wrong.text)
        self.assertEqual(
            unknown.text,
            "AuthenticationError: Username does not exist or password didn't match.",
        )
        self.assertEqual(self.client.get(AUTH).status_code, 401)

    def test_session_keeps_role_from_login(self) -> None:
        cookie = self.harness.login_as(Role.ADMIN, username="boss")
        session = self.harness.store.load(cookie)
        self.assertEqual(session.user.role, Role.ADMIN)


class TestCheck(AuthApiTestCase):
    def test_anonymous(self) -> None:
        response = self.client.get(AUTH)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.text, "NotAuthenticatedError: Not authenticated.")

    def test_forged_cookie(self) -> None:
        self.use_cookie("forged")
        self.assertEqual(self.client.get(AUTH).status_code, 401)

    def test_expired_session(self) -> None:
        self.client.post(REGISTER, json=_user_data())
        self.harness.redis.expire_all()
        self.assertEqual(self.client.get(AUTH).status_code, 401)

    def test_authenticated_body_is_empty(self) -> None:
        self.client.post(REGISTER, json=_user_data())
        response = self.client.get(AUTH)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b"")


class TestLogout(AuthApiTestCase):
    """Logout invalidates the session and is idempotent and fail-soft."""

    def test_logout_invalidates_session(self) -> None:
        cookie = self.client.post(REGISTER, json=_user_data()).cookies[COOKIE_NAME]
        self.assertEqual(self.client.delete(AUTH).status_code, 200)

        self.use_cookie(cookie)
        self.assertEqual(self.client.get(AUTH).status_code, 401)

    def test_logout_twice_with_same_cookie(self) -> None:
        cookie = self.client.post(REGISTER, json=_user_data()).cookies[COOKIE_NAME]
        self.use_cookie(cookie)
        self.assertEqual(self.client.delete(AUTH).status_code, 200)
        self.use_cookie(cookie)
        self.assertEqual(self.client.delete(AUTH).status_code, 200)

    def test_logout_without_session(self) -> None:
        self.assertEqual(self.client.delete(AUTH).status_code, 200)

    def test_store_failure_still_succeeds(self) -> None:
        self.client.post(REGISTER, json=_user_data())
        self.harness.redis.fail_on.add("delete")
        with self.assertLogs("app.api.v1.auth", level="ERROR"):
            response = self.client.delete(AUTH)
        self.assertEqual(response.status_code, 200)


if __name__ == "__main__":
    unittest.main()
