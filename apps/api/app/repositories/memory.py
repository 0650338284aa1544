"""In-memory backends used for local development and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from app.adapters.base import (
    Document,
    DocumentStore,
    ObjectStorage,
    ResourceNotFoundError,
    StoredObject,
    UserAccount,
    UserDirectory,
)


@dataclass(slots=True)
class CallLog:
    """Records every external-style call made against an in-memory backend."""

    calls: list[str] = field(default_factory=list)

    def record(self, operation: str) -> None:
        self.calls.append(operation)


@dataclass(slots=True)
class InMemoryUserDirectory(UserDirectory):
    users: dict[str, UserAccount] = field(default_factory=dict)
    log: CallLog = field(default_factory=CallLog)

    def create_user(self, fields: dict[str, Any]) -> UserAccount:
        self.log.record("create_user")
        account = UserAccount(
            uid=uuid4().hex,
            email=fields.get("email"),
            display_name=fields.get("display_name"),
            photo_url=fields.get("photo_url"),
            disabled=bool(fields.get("disabled", False)),
            email_verified=bool(fields.get("email_verified", False)),
            created_at=datetime.now(UTC),
        )
        self.users[account.uid] = account
        return account

    def get_user(self, uid: str) -> UserAccount:
        self.log.record("get_user")
        account = self.users.get(uid)
        if account is None:
            raise ResourceNotFoundError(f"No user record found for the provided user ID: {uid}.")
        return account

    def update_user(self, uid: str, changes: dict[str, Any]) -> UserAccount:
        self.log.record("update_user")
        account = self.users.get(uid)
        if account is None:
            raise ResourceNotFoundError(f"No user record found for the provided user ID: {uid}.")
        for key, value in changes.items():
            if key != "password":
                setattr(account, key, value)
        return account

    def delete_user(self, uid: str) -> None:
        self.log.record("delete_user")
        if self.users.pop(uid, None) is None:
            raise ResourceNotFoundError(f"No user record found for the provided user ID: {uid}.")

    def seed(self, account: UserAccount) -> UserAccount:
        self.users[account.uid] = account
        return account


@dataclass(slots=True)
class InMemoryDocumentStore(DocumentStore):
    collections: dict[str, dict[str, dict[str, Any]]] = field(default_factory=dict)
    log: CallLog = field(default_factory=CallLog)

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self.collections.setdefault(name, {})

    def list_documents(self, collection: str) -> list[Document]:
        self.log.record("list_documents")
        return [Document(id=doc_id, data=dict(data)) for doc_id, data in self._collection(collection).items()]

    def get_document(self, collection: str, document_id: str) -> Document | None:
        self.log.record("get_document")
        data = self._collection(collection).get(document_id)
        if data is None:
            return None
        return Document(id=document_id, data=dict(data))

    def add_document(self, collection: str, data: dict[str, Any]) -> str:
        self.log.record("add_document")
        document_id = uuid4().hex[:20]
        self._collection(collection)[document_id] = dict(data)
        return document_id

    def update_document(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        self.log.record("update_document")
        existing = self._collection(collection).get(document_id)
        if existing is None:
            raise ResourceNotFoundError(f"No document to update: {collection}/{document_id}")
        existing.update(data)

    def delete_document(self, collection: str, document_id: str) -> None:
        self.log.record("delete_document")
        if self._collection(collection).pop(document_id, None) is None:
            raise ResourceNotFoundError(f"No document to delete: {collection}/{document_id}")


@dataclass(slots=True)
class InMemoryObjectStorage(ObjectStorage):
    """Object storage double; signed URLs are deterministic strings."""

    base_url: str = "https://storage.example.test/bucket"
    objects: dict[str, StoredObject] = field(default_factory=dict)
    log: CallLog = field(default_factory=CallLog)

    def signed_upload_url(self, path: str, *, content_type: str, expires_at: datetime) -> str:
        self.log.record("signed_upload_url")
        return f"{self.base_url}/{path}?op=put&contentType={content_type}&expires={int(expires_at.timestamp())}"

    def signed_download_url(self, path: str, *, expires_at: datetime) -> str:
        self.log.record("signed_download_url")
        return f"{self.base_url}/{path}?op=get&expires={int(expires_at.timestamp())}"

    def list_objects(self, prefix: str) -> list[StoredObject]:
        self.log.record("list_objects")
        return [stored for name, stored in sorted(self.objects.items()) if name.startswith(prefix)]

    def exists(self, path: str) -> bool:
        self.log.record("exists")
        return path in self.objects

    def delete(self, path: str) -> None:
        self.log.record("delete")
        if self.objects.pop(path, None) is None:
            raise ResourceNotFoundError(f"No such object: {path}")

    def put_object(self, path: str, *, content_type: str = "application/octet-stream", size: int = 0) -> StoredObject:
        now = datetime.now(UTC)
        stored = StoredObject(
            name=path,
            content_type=content_type,
            size=size,
            created_at=now,
            updated_at=now,
            public_url=f"{self.base_url}/{path}",
        )
        self.objects[path] = stored
        return stored


__all__ = [
    "CallLog",
    "InMemoryDocumentStore",
    "InMemoryObjectStorage",
    "InMemoryUserDirectory",
]
