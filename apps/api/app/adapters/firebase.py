"""Firebase Admin backed implementations of the backend capabilities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
import logging
from typing import Any

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials, firestore, storage
from firebase_admin.exceptions import FirebaseError
from google.api_core import exceptions as google_exceptions
from google.auth.exceptions import GoogleAuthError

from app.adapters.base import (
    BackendError,
    Document,
    DocumentStore,
    ObjectStorage,
    ResourceNotFoundError,
    StoredObject,
    UserAccount,
    UserDirectory,
)
from app.core.config import Settings

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "starter-kit"
_GOOGLE_CALL_ERRORS = (google_exceptions.GoogleAPIError, GoogleAuthError)


@dataclass(slots=True)
class FirebaseHandle:
    """Initialized Firebase app shared by every adapter built from it."""

    app: firebase_admin.App

    @classmethod
    def initialize(cls, settings: Settings) -> FirebaseHandle:
        """Return the named app, initializing it on first use."""
        try:
            return cls(firebase_admin.get_app(FIREBASE_APP_NAME))
        except ValueError:
            pass

        credential = None
        if settings.firebase_credentials_file:
            credential = credentials.Certificate(settings.firebase_credentials_file)

        options: dict[str, Any] = {}
        if settings.firebase_project_id:
            options["projectId"] = settings.firebase_project_id
        if settings.firebase_storage_bucket:
            options["storageBucket"] = settings.firebase_storage_bucket

        app = firebase_admin.initialize_app(credential, options or None, name=FIREBASE_APP_NAME)
        logger.info(
            "firebase.initialized credentials=%s bucket_configured=%s",
            "service_account" if credential is not None else "application_default",
            bool(settings.firebase_storage_bucket),
        )
        return cls(app)

    def auth_client(self) -> firebase_auth.Client:
        return firebase_auth.Client(self.app)

    def firestore_client(self) -> Any:
        return firestore.client(self.app)

    def bucket(self) -> Any:
        return storage.bucket(app=self.app)


def _from_millis(value: int | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromtimestamp(value / 1000, UTC)


class FirebaseUserDirectory(UserDirectory):
    def __init__(self, client: firebase_auth.Client) -> None:
        self._client = client

    def create_user(self, fields: dict[str, Any]) -> UserAccount:
        try:
            record = self._client.create_user(**fields)
        except (FirebaseError, ValueError) as exc:
            raise BackendError(str(exc)) from exc
        return self._to_account(record)

    def get_user(self, uid: str) -> UserAccount:
        try:
            record = self._client.get_user(uid)
        except firebase_auth.UserNotFoundError as exc:
            raise ResourceNotFoundError(str(exc)) from exc
        except (FirebaseError, ValueError) as exc:
            raise BackendError(str(exc)) from exc
        return self._to_account(record)

    def update_user(self, uid: str, changes: dict[str, Any]) -> UserAccount:
        if not changes:
            return self.get_user(uid)
        try:
            record = self._client.update_user(uid, **changes)
        except firebase_auth.UserNotFoundError as exc:
            raise ResourceNotFoundError(str(exc)) from exc
        except (FirebaseError, ValueError) as exc:
            raise BackendError(str(exc)) from exc
        return self._to_account(record)

    def delete_user(self, uid: str) -> None:
        try:
            self._client.delete_user(uid)
        except firebase_auth.UserNotFoundError as exc:
            raise ResourceNotFoundError(str(exc)) from exc
        except (FirebaseError, ValueError) as exc:
            raise BackendError(str(exc)) from exc

    @staticmethod
    def _to_account(record: Any) -> UserAccount:
        metadata = record.user_metadata
        return UserAccount(
            uid=record.uid,
            email=record.email,
            display_name=record.display_name,
            photo_url=record.photo_url,
            disabled=bool(record.disabled),
            email_verified=bool(record.email_verified),
            created_at=_from_millis(metadata.creation_timestamp if metadata else None),
            last_sign_in_at=_from_millis(metadata.last_sign_in_timestamp if metadata else None),
        )


class FirestoreDocumentStore(DocumentStore):
    def __init__(self, client: Any) -> None:
        self._client = client

    def list_documents(self, collection: str) -> list[Document]:
        try:
            snapshots = list(self._client.collection(collection).stream())
        except _GOOGLE_CALL_ERRORS as exc:
            raise BackendError(str(exc)) from exc
        return [Document(id=snapshot.id, data=snapshot.to_dict() or {}) for snapshot in snapshots]

    def get_document(self, collection: str, document_id: str) -> Document | None:
        try:
            snapshot = self._client.collection(collection).document(document_id).get()
        except _GOOGLE_CALL_ERRORS as exc:
            raise BackendError(str(exc)) from exc
        if not snapshot.exists:
            return None
        return Document(id=snapshot.id, data=snapshot.to_dict() or {})

    def add_document(self, collection: str, data: dict[str, Any]) -> str:
        try:
            _, reference = self._client.collection(collection).add(data)
        except _GOOGLE_CALL_ERRORS as exc:
            raise BackendError(str(exc)) from exc
        return reference.id

    def update_document(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        try:
            self._client.collection(collection).document(document_id).update(data)
        except google_exceptions.NotFound as exc:
            raise ResourceNotFoundError(str(exc)) from exc
        except _GOOGLE_CALL_ERRORS as exc:
            raise BackendError(str(exc)) from exc

    def delete_document(self, collection: str, document_id: str) -> None:
        # Firestore deletes are no-ops on missing documents unless an exists precondition is set.
        option = self._client.write_option(exists=True)
        try:
            self._client.collection(collection).document(document_id).delete(option=option)
        except (google_exceptions.NotFound, google_exceptions.FailedPrecondition) as exc:
            raise ResourceNotFoundError(str(exc)) from exc
        except _GOOGLE_CALL_ERRORS as exc:
            raise BackendError(str(exc)) from exc


class CloudStorageObjects(ObjectStorage):
    def __init__(self, bucket: Any) -> None:
        self._bucket = bucket

    def signed_upload_url(self, path: str, *, content_type: str, expires_at: datetime) -> str:
        try:
            return self._bucket.blob(path).generate_signed_url(
                version="v4",
                expiration=expires_at,
                method="PUT",
                content_type=content_type,
            )
        except _GOOGLE_CALL_ERRORS as exc:
            raise BackendError(str(exc)) from exc

    def signed_download_url(self, path: str, *, expires_at: datetime) -> str:
        try:
            return self._bucket.blob(path).generate_signed_url(
                version="v4",
                expiration=expires_at,
                method="GET",
            )
        except _GOOGLE_CALL_ERRORS as exc:
            raise BackendError(str(exc)) from exc

    def list_objects(self, prefix: str) -> list[StoredObject]:
        try:
            blobs = list(self._bucket.list_blobs(prefix=prefix))
        except _GOOGLE_CALL_ERRORS as exc:
            raise BackendError(str(exc)) from exc
        return [
            StoredObject(
                name=blob.name,
                content_type=blob.content_type,
                size=int(blob.size) if blob.size is not None else None,
                created_at=blob.time_created,
                updated_at=blob.updated,
                public_url=f"https://storage.googleapis.com/{self._bucket.name}/{blob.name}",
            )
            for blob in blobs
        ]

    def exists(self, path: str) -> bool:
        try:
            return bool(self._bucket.blob(path).exists())
        except _GOOGLE_CALL_ERRORS as exc:
            raise BackendError(str(exc)) from exc

    def delete(self, path: str) -> None:
        try:
            self._bucket.blob(path).delete()
        except google_exceptions.NotFound as exc:
            raise ResourceNotFoundError(str(exc)) from exc
        except _GOOGLE_CALL_ERRORS as exc:
            raise BackendError(str(exc)) from exc


__all__ = [
    "CloudStorageObjects",
    "FIREBASE_APP_NAME",
    "FirebaseHandle",
    "FirebaseUserDirectory",
    "FirestoreDocumentStore",
]
