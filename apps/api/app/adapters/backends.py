"""Backend handles built once per application."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from app.adapters.auth import FirebaseTokenVerifier, MockTokenVerifier, TokenVerifier
from app.adapters.base import DocumentStore, ObjectStorage, UserDirectory
from app.core.config import Settings
from app.repositories.memory import InMemoryDocumentStore, InMemoryObjectStorage, InMemoryUserDirectory

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Backends:
    token_verifier: TokenVerifier
    users: UserDirectory
    documents: DocumentStore
    objects: ObjectStorage


def build_backends(settings: Settings) -> Backends:
    """Resolve provider adapters from configuration."""
    handle = None
    if settings.uses_firebase:
        from app.adapters.firebase import FirebaseHandle

        handle = FirebaseHandle.initialize(settings)

    if settings.auth_provider == "firebase":
        token_verifier: TokenVerifier = FirebaseTokenVerifier(
            handle.auth_client(),
            project_id=settings.firebase_project_id,
            audience=settings.firebase_audience,
            check_revoked=settings.check_revoked_tokens,
        )
    else:
        token_verifier = MockTokenVerifier()

    if settings.backend == "firebase":
        from app.adapters.firebase import (
            CloudStorageObjects,
            FirebaseUserDirectory,
            FirestoreDocumentStore,
        )

        backends = Backends(
            token_verifier=token_verifier,
            users=FirebaseUserDirectory(handle.auth_client()),
            documents=FirestoreDocumentStore(handle.firestore_client()),
            objects=CloudStorageObjects(handle.bucket()),
        )
    else:
        backends = Backends(
            token_verifier=token_verifier,
            users=InMemoryUserDirectory(),
            documents=InMemoryDocumentStore(),
            objects=InMemoryObjectStorage(),
        )

    logger.info("backends.ready auth_provider=%s backend=%s", settings.auth_provider, settings.backend)
    return backends


__all__ = ["Backends", "build_backends"]
