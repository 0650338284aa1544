"""Capability interfaces for the managed backends.

Each method maps to exactly one call against the external service.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


class BackendError(Exception):
    """Raised when an external service call fails for a reason other than a missing resource."""


class ResourceNotFoundError(BackendError):
    """Raised when the referenced external resource does not exist."""


@dataclass(slots=True)
class UserAccount:
    uid: str
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None
    disabled: bool = False
    email_verified: bool = False
    created_at: datetime | None = None
    last_sign_in_at: datetime | None = None


@dataclass(slots=True)
class Document:
    id: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class StoredObject:
    name: str
    content_type: str | None = None
    size: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    public_url: str | None = None


class UserDirectory(ABC):
    """Identity provider account management."""

    @abstractmethod
    def create_user(self, fields: dict[str, Any]) -> UserAccount:
        """Create an account from snake_case profile fields."""

    @abstractmethod
    def get_user(self, uid: str) -> UserAccount:
        """Return the account or raise ``ResourceNotFoundError``."""

    @abstractmethod
    def update_user(self, uid: str, changes: dict[str, Any]) -> UserAccount:
        """Apply ``changes`` and return the updated account."""

    @abstractmethod
    def delete_user(self, uid: str) -> None:
        """Delete the account or raise ``ResourceNotFoundError``."""


class DocumentStore(ABC):
    """Collection-scoped document access."""

    @abstractmethod
    def list_documents(self, collection: str) -> list[Document]:
        ...

    @abstractmethod
    def get_document(self, collection: str, document_id: str) -> Document | None:
        ...

    @abstractmethod
    def add_document(self, collection: str, data: dict[str, Any]) -> str:
        """Store ``data`` under a store-assigned id and return that id."""

    @abstractmethod
    def update_document(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        """Merge ``data`` into an existing document; missing ids raise ``ResourceNotFoundError``."""

    @abstractmethod
    def delete_document(self, collection: str, document_id: str) -> None:
        """Delete an existing document; missing ids raise ``ResourceNotFoundError``."""


class ObjectStorage(ABC):
    """Object storage reached through time-bounded signed URLs."""

    @abstractmethod
    def signed_upload_url(self, path: str, *, content_type: str, expires_at: datetime) -> str:
        ...

    @abstractmethod
    def signed_download_url(self, path: str, *, expires_at: datetime) -> str:
        ...

    @abstractmethod
    def list_objects(self, prefix: str) -> list[StoredObject]:
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        ...

    @abstractmethod
    def delete(self, path: str) -> None:
        """Delete the object; missing paths raise ``ResourceNotFoundError``."""


__all__ = [
    "BackendError",
    "Document",
    "DocumentStore",
    "ObjectStorage",
    "ResourceNotFoundError",
    "StoredObject",
    "UserAccount",
    "UserDirectory",
]
