"""Storage API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_FOLDER = "uploads"


def _check_path_segment(value: str) -> str:
    if "/" in value or value in {".", ".."}:
        raise ValueError("must be a single path segment")
    return value


class UploadUrlRequest(BaseModel):
    file_name: str = Field(min_length=1, alias="fileName")
    content_type: str = Field(min_length=1, alias="contentType")
    folder: str = Field(default=DEFAULT_FOLDER, min_length=1)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("file_name", "folder")
    @classmethod
    def _single_segment(cls, value: str) -> str:
        return _check_path_segment(value)


class FolderQuery(BaseModel):
    folder: str = Field(default=DEFAULT_FOLDER, min_length=1)

    @field_validator("folder", mode="before")
    @classmethod
    def _empty_means_default(cls, value: object) -> object:
        return value or DEFAULT_FOLDER

    @field_validator("folder")
    @classmethod
    def _single_segment(cls, value: str) -> str:
        return _check_path_segment(value)


class UploadUrlResponse(BaseModel):
    signed_url: str = Field(serialization_alias="signedUrl")
    file_path: str = Field(serialization_alias="filePath")
    expires_at: datetime = Field(serialization_alias="expiresAt")


class DownloadUrlResponse(BaseModel):
    signed_url: str = Field(serialization_alias="signedUrl")
    expires_at: datetime = Field(serialization_alias="expiresAt")


class StoredFile(BaseModel):
    name: str
    path: str
    content_type: str | None = Field(default=None, serialization_alias="contentType")
    size: int | None = None
    created_at: datetime | None = Field(default=None, serialization_alias="createdAt")
    updated_at: datetime | None = Field(default=None, serialization_alias="updatedAt")
    download_url: str | None = Field(default=None, serialization_alias="downloadUrl")


class FileList(BaseModel):
    files: list[StoredFile]
