"""User account API tests."""

from __future__ import annotations

from datetime import UTC, datetime
import os
import unittest

from fastapi.testclient import TestClient

from app.adapters.base import UserAccount
from app.core.config import get_settings
from app.main import create_app

_ADMIN = {"Authorization": "Bearer test:admin-1:admin"}


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = ("STARTER_AUTH_PROVIDER", "STARTER_BACKEND", "STARTER_ADMIN_ROLES")

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["STARTER_AUTH_PROVIDER"] = "mock"
        os.environ["STARTER_BACKEND"] = "memory"
        os.environ.pop("STARTER_ADMIN_ROLES", None)
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()

    def _seed(self, app, uid: str = "user-1", **fields) -> UserAccount:
        account = UserAccount(
            uid=uid,
            email=fields.pop("email", f"{uid}@example.com"),
            display_name=fields.pop("display_name", "Ada"),
            created_at=datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC),
            **fields,
        )
        return app.state.backends.users.seed(account)


class CreateUserApiTests(_SettingsEnvCase):
    def test_self_registration_is_public(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.post(
            "/api/auth/users",
            json={"email": "new@example.com", "password": "secret1", "displayName": "New"},
        )

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "User created successfully")
        account = app.state.backends.users.users[body["uid"]]
        self.assertEqual(account.email, "new@example.com")
        self.assertEqual(account.display_name, "New")
        self.assertFalse(account.disabled)
        self.assertEqual(app.state.backends.token_verifier.verified_tokens, [])

    def test_invalid_registration_lists_all_field_errors(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.post("/api/auth/users", json={"email": "bad", "password": "1"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(set(response.json()["details"]), {"email", "password"})
        self.assertEqual(app.state.backends.users.log.calls, [])

    def test_photo_url_is_stored_as_sent(self) -> None:
        app = create_app()
        client = TestClient(app)

        created = client.post(
            "/api/auth/users",
            json={"email": "pic@example.com", "password": "secret1", "photoURL": "https://example.com"},
        )
        rejected = client.post(
            "/api/auth/users",
            json={"email": "pic2@example.com", "password": "secret1", "photoURL": "not a url"},
        )

        self.assertEqual(created.status_code, 201)
        account = app.state.backends.users.users[created.json()["uid"]]
        self.assertEqual(account.photo_url, "https://example.com")
        self.assertEqual(rejected.status_code, 400)
        self.assertIn("photoURL", rejected.json()["details"])


class SelfProfileApiTests(_SettingsEnvCase):
    def test_get_me_uses_principal_identity(self) -> None:
        app = create_app()
        client = TestClient(app)
        self._seed(app, "user-1")
        self._seed(app, "user-2", display_name="Other")

        response = client.get("/api/auth/me", headers={"Authorization": "Bearer test:user-1"})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["uid"], "user-1")
        self.assertEqual(body["displayName"], "Ada")
        self.assertEqual(body["emailVerified"], False)
        self.assertTrue(body["createdAt"].startswith("2026-01-02T03:04:05"))
        self.assertNotIn("disabled", body)

    def test_get_me_requires_authentication(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.get("/api/auth/me")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(app.state.backends.users.log.calls, [])

    def test_patch_me_updates_profile(self) -> None:
        app = create_app()
        client = TestClient(app)
        self._seed(app, "user-1")

        response = client.patch(
            "/api/auth/me",
            headers={"Authorization": "Bearer test:user-1"},
            json={"displayName": "Grace", "photoURL": "https://example.com/g.png"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["displayName"], "Grace")
        self.assertEqual(body["photoURL"], "https://example.com/g.png")
        self.assertIn("updatedAt", body)
        self.assertNotIn("createdAt", body)

    def test_patch_me_cannot_change_account_status_flags(self) -> None:
        app = create_app()
        client = TestClient(app)
        self._seed(app, "user-1")

        response = client.patch(
            "/api/auth/me",
            headers={"Authorization": "Bearer test:user-1"},
            json={"displayName": "Grace", "emailVerified": True, "disabled": True},
        )

        self.assertEqual(response.status_code, 200)
        account = app.state.backends.users.users["user-1"]
        self.assertEqual(account.display_name, "Grace")
        self.assertFalse(account.email_verified)
        self.assertFalse(account.disabled)

    def test_patch_me_validates_payload(self) -> None:
        app = create_app()
        client = TestClient(app)
        self._seed(app, "user-1")

        response = client.patch(
            "/api/auth/me",
            headers={"Authorization": "Bearer test:user-1"},
            json={"email": "nope", "password": "123"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(set(response.json()["details"]), {"email", "password"})


class AdminUserApiTests(_SettingsEnvCase):
    def test_non_admin_cannot_target_other_users(self) -> None:
        app = create_app()
        client = TestClient(app)
        self._seed(app, "user-2")
        headers = {"Authorization": "Bearer test:user-1:editor"}

        responses = [
            client.get("/api/auth/users/user-2", headers=headers),
            client.patch("/api/auth/users/user-2", headers=headers, json={"disabled": True}),
            client.delete("/api/auth/users/user-2", headers=headers),
        ]

        self.assertEqual([response.status_code for response in responses], [403, 403, 403])
        self.assertEqual(app.state.backends.users.log.calls, [])
        self.assertIn("user-2", app.state.backends.users.users)

    def test_admin_get_includes_disabled_flag(self) -> None:
        app = create_app()
        client = TestClient(app)
        self._seed(app, "user-2", disabled=True)

        response = client.get("/api/auth/users/user-2", headers=_ADMIN)

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["disabled"])

    def test_admin_get_missing_user_returns_404(self) -> None:
        client = TestClient(create_app())

        response = client.get("/api/auth/users/ghost", headers=_ADMIN)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "User not found"})

    def test_empty_patch_succeeds_and_changes_nothing(self) -> None:
        app = create_app()
        client = TestClient(app)
        before = self._seed(app, "user-2", email_verified=True)
        snapshot = (before.email, before.display_name, before.photo_url, before.disabled, before.email_verified)

        response = client.patch("/api/auth/users/user-2", headers=_ADMIN, json={})

        self.assertEqual(response.status_code, 200)
        after = app.state.backends.users.users["user-2"]
        self.assertEqual(
            (after.email, after.display_name, after.photo_url, after.disabled, after.email_verified),
            snapshot,
        )
        self.assertEqual(response.json()["email"], "user-2@example.com")
        self.assertFalse(response.json()["disabled"])

    def test_admin_patch_disables_user(self) -> None:
        app = create_app()
        client = TestClient(app)
        self._seed(app, "user-2")

        response = client.patch("/api/auth/users/user-2", headers=_ADMIN, json={"disabled": True})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["disabled"])
        self.assertTrue(app.state.backends.users.users["user-2"].disabled)

    def test_delete_twice_reports_not_found_second_time(self) -> None:
        app = create_app()
        client = TestClient(app)
        self._seed(app, "user-2")

        first = client.delete("/api/auth/users/user-2", headers=_ADMIN)
        second = client.delete("/api/auth/users/user-2", headers=_ADMIN)

        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json(), {"message": "User deleted successfully"})
        self.assertEqual(second.status_code, 404)


if __name__ == "__main__":
    unittest.main()
