"""File storage service layer.

Objects live under ``{folder}/{principal_id}/``. Every path this service builds
or accepts is checked against that prefix, so one principal can never list,
delete or sign another principal's objects.
"""

from collections.abc import Callable
from datetime import datetime, timedelta
import logging

from app.adapters.base import BackendError, ObjectStorage, ResourceNotFoundError
from app.core.logging_safety import safe_log_identifier, safe_log_object_path
from app.domain.result import Err, Ok, Result
from app.errors import internal, not_found
from app.schemas.auth import AuthPrincipal
from app.schemas.error import MessageResponse
from app.schemas.storage import (
    DownloadUrlResponse,
    FileList,
    StoredFile,
    UploadUrlRequest,
    UploadUrlResponse,
)

logger = logging.getLogger(__name__)

UPLOAD_URL_TTL = timedelta(minutes=15)
DOWNLOAD_URL_TTL = timedelta(minutes=60)


def owner_prefix(folder: str, principal_id: str) -> str:
    return f"{folder}/{principal_id}/"


def is_owned_path(path: str, principal_id: str) -> bool:
    segments = path.split("/")
    if len(segments) < 3 or segments[1] != principal_id:
        return False
    return all(segment not in {"", ".", ".."} for segment in segments)


class FileService:
    def __init__(self, objects: ObjectStorage, clock: Callable[[], datetime]) -> None:
        self._objects = objects
        self._clock = clock

    def create_upload_url(self, principal: AuthPrincipal, payload: UploadUrlRequest) -> Result[UploadUrlResponse]:
        issued_at = self._clock()
        expires_at = issued_at + UPLOAD_URL_TTL
        timestamp_ms = int(issued_at.timestamp() * 1000)
        file_path = f"{owner_prefix(payload.folder, principal.user_id)}{timestamp_ms}_{payload.file_name}"
        try:
            signed_url = self._objects.signed_upload_url(
                file_path,
                content_type=payload.content_type,
                expires_at=expires_at,
            )
        except BackendError as exc:
            return Err(internal("Failed to generate upload URL", exc))

        logger.info(
            "storage.upload_url_issued principal_id=%s path=%s",
            safe_log_identifier(principal.user_id, prefix="pid"),
            safe_log_object_path(file_path),
        )
        return Ok(UploadUrlResponse(signed_url=signed_url, file_path=file_path, expires_at=expires_at))

    def list_files(self, principal: AuthPrincipal, folder: str) -> Result[FileList]:
        prefix = owner_prefix(folder, principal.user_id)
        try:
            objects = self._objects.list_objects(prefix)
        except BackendError as exc:
            return Err(internal("Failed to list files", exc))

        files = [
            StoredFile(
                name=stored.name,
                path=stored.name,
                content_type=stored.content_type,
                size=stored.size,
                created_at=stored.created_at,
                updated_at=stored.updated_at,
                download_url=stored.public_url,
            )
            for stored in objects
            if stored.name.startswith(prefix)
        ]
        return Ok(FileList(files=files))

    def delete_file(self, principal: AuthPrincipal, folder: str, filename: str) -> Result[MessageResponse]:
        file_path = f"{owner_prefix(folder, principal.user_id)}{filename}"
        if not is_owned_path(file_path, principal.user_id):
            return Err(not_found("File not found"))
        try:
            self._objects.delete(file_path)
        except ResourceNotFoundError:
            return Err(not_found("File not found"))
        except BackendError as exc:
            return Err(internal("Failed to delete file", exc))

        logger.info(
            "storage.deleted principal_id=%s path=%s",
            safe_log_identifier(principal.user_id, prefix="pid"),
            safe_log_object_path(file_path),
        )
        return Ok(MessageResponse(message="File deleted successfully"))

    def create_download_url(self, principal: AuthPrincipal, file_path: str) -> Result[DownloadUrlResponse]:
        if not is_owned_path(file_path, principal.user_id):
            return Err(not_found("File not found"))

        issued_at = self._clock()
        expires_at = issued_at + DOWNLOAD_URL_TTL
        try:
            if not self._objects.exists(file_path):
                return Err(not_found("File not found"))
            signed_url = self._objects.signed_download_url(file_path, expires_at=expires_at)
        except BackendError as exc:
            return Err(internal("Failed to generate download URL", exc))

        return Ok(DownloadUrlResponse(signed_url=signed_url, expires_at=expires_at))
