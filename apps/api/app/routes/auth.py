"""User account routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.responses import render
from app.routes.dependencies import get_authenticated_principal, get_user_service, require_admin
from app.schemas.auth import AuthPrincipal
from app.schemas.error import ErrorResponse, MessageResponse, ValidationErrorResponse
from app.schemas.user import (
    CreateUserRequest,
    CreateUserResponse,
    ProfileUpdateRequest,
    UpdateUserRequest,
    UserProfile,
)
from app.services.users import UserService
from app.validation import request_body_openapi, validated_body

router = APIRouter(prefix="/auth", tags=["Auth"])

_COMMON_ERRORS = {401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
_ADMIN_ERRORS = {**_COMMON_ERRORS, 403: {"model": ErrorResponse}}


@router.post(
    "/users",
    response_model=CreateUserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ValidationErrorResponse}, 500: {"model": ErrorResponse}},
    openapi_extra=request_body_openapi(CreateUserRequest),
)
def create_user(
    payload: Annotated[CreateUserRequest, Depends(validated_body(CreateUserRequest))],
    service: Annotated[UserService, Depends(get_user_service)],
) -> JSONResponse:
    # Self-registration is public.
    return render(service.create_user(payload))


@router.get("/me", response_model=UserProfile, responses=_COMMON_ERRORS)
def get_me(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> JSONResponse:
    return render(service.get_profile(principal.user_id))


@router.patch(
    "/me",
    response_model=UserProfile,
    responses={**_COMMON_ERRORS, 400: {"model": ValidationErrorResponse}},
    openapi_extra=request_body_openapi(ProfileUpdateRequest),
)
def update_me(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    payload: Annotated[ProfileUpdateRequest, Depends(validated_body(ProfileUpdateRequest))],
    service: Annotated[UserService, Depends(get_user_service)],
) -> JSONResponse:
    return render(service.update_profile(principal.user_id, payload))


@router.get("/users/{uid}", response_model=UserProfile, responses=_ADMIN_ERRORS)
def get_user(
    uid: str,
    principal: Annotated[AuthPrincipal, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> JSONResponse:
    return render(service.get_profile(uid, include_disabled=True))


@router.patch(
    "/users/{uid}",
    response_model=UserProfile,
    responses={**_ADMIN_ERRORS, 400: {"model": ValidationErrorResponse}},
    openapi_extra=request_body_openapi(UpdateUserRequest),
)
def update_user(
    uid: str,
    principal: Annotated[AuthPrincipal, Depends(require_admin)],
    payload: Annotated[UpdateUserRequest, Depends(validated_body(UpdateUserRequest))],
    service: Annotated[UserService, Depends(get_user_service)],
) -> JSONResponse:
    return render(service.update_profile(uid, payload, include_disabled=True))


@router.delete("/users/{uid}", response_model=MessageResponse, responses=_ADMIN_ERRORS)
def delete_user(
    uid: str,
    principal: Annotated[AuthPrincipal, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> JSONResponse:
    return render(service.delete_user(uid))
