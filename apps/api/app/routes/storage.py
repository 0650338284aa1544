"""Storage routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse

from app.responses import render
from app.routes.dependencies import get_authenticated_principal, get_file_service
from app.schemas.auth import AuthPrincipal
from app.schemas.error import ErrorResponse, MessageResponse, ValidationErrorResponse
from app.schemas.storage import (
    DownloadUrlResponse,
    FileList,
    FolderQuery,
    UploadUrlRequest,
    UploadUrlResponse,
)
from app.services.files import FileService
from app.validation import request_body_openapi, validated_body, validated_query

router = APIRouter(prefix="/storage", tags=["Storage"])

_ERRORS = {401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@router.post(
    "/upload-url",
    response_model=UploadUrlResponse,
    responses={**_ERRORS, 400: {"model": ValidationErrorResponse}},
    openapi_extra=request_body_openapi(UploadUrlRequest),
)
def create_upload_url(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    payload: Annotated[UploadUrlRequest, Depends(validated_body(UploadUrlRequest))],
    service: Annotated[FileService, Depends(get_file_service)],
) -> JSONResponse:
    return render(service.create_upload_url(principal, payload))


@router.get(
    "/files",
    response_model=FileList,
    responses={**_ERRORS, 400: {"model": ValidationErrorResponse}},
)
def list_files(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    query: Annotated[FolderQuery, Depends(validated_query(FolderQuery))],
    service: Annotated[FileService, Depends(get_file_service)],
) -> JSONResponse:
    return render(service.list_files(principal, query.folder))


@router.delete(
    "/files/{filename}",
    response_model=MessageResponse,
    responses={**_ERRORS, 400: {"model": ValidationErrorResponse}, 404: {"model": ErrorResponse}},
)
def delete_file(
    filename: Annotated[str, Path()],
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    query: Annotated[FolderQuery, Depends(validated_query(FolderQuery))],
    service: Annotated[FileService, Depends(get_file_service)],
) -> JSONResponse:
    return render(service.delete_file(principal, query.folder, filename))


@router.get(
    "/download-url/{file_path:path}",
    response_model=DownloadUrlResponse,
    responses={**_ERRORS, 404: {"model": ErrorResponse}},
)
def create_download_url(
    file_path: str,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[FileService, Depends(get_file_service)],
) -> JSONResponse:
    return render(service.create_download_url(principal, file_path))
