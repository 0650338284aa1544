"""Signed URL and file listing API tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import os
import re
import unittest

from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.main import create_app
from app.routes.dependencies import get_clock
from app.services.files import is_owned_path

_FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)
_U1 = {"Authorization": "Bearer test:U1"}
_U2 = {"Authorization": "Bearer test:U2"}


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = ("STARTER_AUTH_PROVIDER", "STARTER_BACKEND")

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["STARTER_AUTH_PROVIDER"] = "mock"
        os.environ["STARTER_BACKEND"] = "memory"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()

    def _app(self):
        app = create_app()
        app.dependency_overrides[get_clock] = lambda: (lambda: _FIXED_NOW)
        return app


def _parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class UploadUrlApiTests(_SettingsEnvCase):
    def test_upload_url_path_and_expiry(self) -> None:
        client = TestClient(self._app())

        response = client.post(
            "/api/storage/upload-url",
            headers=_U1,
            json={"fileName": "a.png", "contentType": "image/png"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertRegex(body["filePath"], r"^uploads/U1/\d+_a\.png$")
        timestamp_ms = int(re.match(r"^uploads/U1/(\d+)_", body["filePath"]).group(1))
        self.assertEqual(timestamp_ms, int(_FIXED_NOW.timestamp() * 1000))
        self.assertEqual(_parse(body["expiresAt"]), _FIXED_NOW + timedelta(minutes=15))
        self.assertIn(body["filePath"], body["signedUrl"])

    def test_upload_url_honours_folder(self) -> None:
        client = TestClient(self._app())

        response = client.post(
            "/api/storage/upload-url",
            headers=_U1,
            json={"fileName": "cv.pdf", "contentType": "application/pdf", "folder": "documents"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["filePath"].startswith("documents/U1/"))

    def test_upload_url_validation_failure(self) -> None:
        app = self._app()
        client = TestClient(app)

        response = client.post("/api/storage/upload-url", headers=_U1, json={"fileName": ""})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(set(response.json()["details"]), {"fileName", "contentType"})
        self.assertEqual(app.state.backends.objects.log.calls, [])

    def test_upload_url_requires_authentication(self) -> None:
        app = self._app()
        client = TestClient(app)

        response = client.post("/api/storage/upload-url", json={"fileName": "a.png", "contentType": "image/png"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(app.state.backends.objects.log.calls, [])


class FileListingApiTests(_SettingsEnvCase):
    def test_listing_is_scoped_to_principal_prefix(self) -> None:
        app = self._app()
        objects = app.state.backends.objects
        objects.put_object("uploads/U1/1_a.png", content_type="image/png", size=10)
        objects.put_object("uploads/U1/2_b.txt", content_type="text/plain", size=3)
        objects.put_object("uploads/U2/3_c.png", content_type="image/png", size=7)
        objects.put_object("uploads/U10/4_d.png", content_type="image/png", size=7)
        objects.put_object("documents/U1/5_e.pdf", content_type="application/pdf", size=1)
        client = TestClient(app)

        response = client.get("/api/storage/files", headers=_U1)

        self.assertEqual(response.status_code, 200)
        files = response.json()["files"]
        self.assertEqual([entry["path"] for entry in files], ["uploads/U1/1_a.png", "uploads/U1/2_b.txt"])
        self.assertEqual(files[0]["contentType"], "image/png")
        self.assertEqual(files[0]["size"], 10)
        self.assertTrue(files[0]["downloadUrl"].endswith("uploads/U1/1_a.png"))

        other = client.get("/api/storage/files", headers=_U2).json()["files"]
        self.assertEqual([entry["path"] for entry in other], ["uploads/U2/3_c.png"])

    def test_listing_uses_folder_query(self) -> None:
        app = self._app()
        app.state.backends.objects.put_object("documents/U1/5_e.pdf")
        client = TestClient(app)

        response = client.get("/api/storage/files", headers=_U1, params={"folder": "documents"})

        self.assertEqual([entry["path"] for entry in response.json()["files"]], ["documents/U1/5_e.pdf"])

    def test_empty_folder_query_lists_default_folder(self) -> None:
        app = self._app()
        app.state.backends.objects.put_object("uploads/U1/1_a.png")
        app.state.backends.objects.put_object("documents/U1/5_e.pdf")
        client = TestClient(app)

        response = client.get("/api/storage/files?folder=", headers=_U1)

        self.assertEqual(response.status_code, 200)
        self.assertEqual([entry["path"] for entry in response.json()["files"]], ["uploads/U1/1_a.png"])

    def test_folder_cannot_reach_into_another_prefix(self) -> None:
        app = self._app()
        app.state.backends.objects.put_object("uploads/U2/U1/x")
        client = TestClient(app)

        response = client.get("/api/storage/files", headers=_U1, params={"folder": "uploads/U2"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("folder", response.json()["details"])
        self.assertEqual(app.state.backends.objects.log.calls, [])


class DeleteFileApiTests(_SettingsEnvCase):
    def test_delete_own_file(self) -> None:
        app = self._app()
        objects = app.state.backends.objects
        objects.put_object("uploads/U1/1_a.png")
        client = TestClient(app)

        response = client.delete("/api/storage/files/1_a.png", headers=_U1)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "File deleted successfully"})
        self.assertNotIn("uploads/U1/1_a.png", objects.objects)

    def test_delete_with_empty_folder_query_uses_default_folder(self) -> None:
        app = self._app()
        objects = app.state.backends.objects
        objects.put_object("uploads/U1/1_a.png")
        client = TestClient(app)

        response = client.delete("/api/storage/files/1_a.png?folder=", headers=_U1)

        self.assertEqual(response.status_code, 200)
        self.assertNotIn("uploads/U1/1_a.png", objects.objects)

    def test_delete_missing_file_returns_404_each_time(self) -> None:
        client = TestClient(self._app())

        first = client.delete("/api/storage/files/ghost.png", headers=_U1)
        second = client.delete("/api/storage/files/ghost.png", headers=_U1)

        self.assertEqual((first.status_code, second.status_code), (404, 404))
        self.assertEqual(first.json(), {"error": "File not found"})

    def test_delete_is_scoped_to_principal(self) -> None:
        app = self._app()
        objects = app.state.backends.objects
        objects.put_object("uploads/U2/1_a.png")
        client = TestClient(app)

        response = client.delete("/api/storage/files/1_a.png", headers=_U1)

        self.assertEqual(response.status_code, 404)
        self.assertIn("uploads/U2/1_a.png", objects.objects)


class DownloadUrlApiTests(_SettingsEnvCase):
    def test_download_url_for_own_file(self) -> None:
        app = self._app()
        app.state.backends.objects.put_object("uploads/U1/1_a.png")
        client = TestClient(app)

        response = client.get("/api/storage/download-url/uploads/U1/1_a.png", headers=_U1)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertIn("uploads/U1/1_a.png", body["signedUrl"])
        self.assertEqual(_parse(body["expiresAt"]), _FIXED_NOW + timedelta(minutes=60))

    def test_download_url_for_missing_file_returns_404(self) -> None:
        client = TestClient(self._app())

        response = client.get("/api/storage/download-url/uploads/U1/ghost.png", headers=_U1)

        self.assertEqual(response.status_code, 404)

    def test_download_url_for_other_principal_is_not_leaked(self) -> None:
        app = self._app()
        app.state.backends.objects.put_object("uploads/U2/1_a.png")
        client = TestClient(app)

        response = client.get("/api/storage/download-url/uploads/U2/1_a.png", headers=_U1)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "File not found"})
        self.assertNotIn("signed_download_url", app.state.backends.objects.log.calls)


class OwnedPathTests(unittest.TestCase):
    def test_owned_path_rules(self) -> None:
        self.assertTrue(is_owned_path("uploads/U1/1_a.png", "U1"))
        self.assertTrue(is_owned_path("uploads/U1/nested/a.png", "U1"))
        self.assertFalse(is_owned_path("uploads/U2/1_a.png", "U1"))
        self.assertFalse(is_owned_path("uploads/U1", "U1"))
        self.assertFalse(is_owned_path("uploads/U1/../U2/a.png", "U1"))
        self.assertFalse(is_owned_path("uploads/U1//a.png", "U1"))


if __name__ == "__main__":
    unittest.main()
