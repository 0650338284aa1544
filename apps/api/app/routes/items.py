"""Item routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from fastapi.responses import JSONResponse

from app.responses import render
from app.routes.dependencies import get_authenticated_principal, get_item_service
from app.schemas.error import ErrorResponse, MessageResponse, ValidationErrorResponse
from app.schemas.item import CreateItemResponse, Item, ItemList, ItemPayload
from app.services.items import ItemService
from app.validation import request_body_openapi, validated_body

# Every item route requires a principal; declaring it first also keeps
# unauthenticated writes from reaching payload validation.
router = APIRouter(prefix="/items", tags=["Items"], dependencies=[Depends(get_authenticated_principal)])

_READ_ERRORS = {401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
_WRITE_ERRORS = {**_READ_ERRORS, 400: {"model": ValidationErrorResponse}}


@router.get("", response_model=ItemList, responses=_READ_ERRORS)
def list_items(
    service: Annotated[ItemService, Depends(get_item_service)],
) -> JSONResponse:
    return render(service.list_items())


@router.get("/{itemId}", response_model=Item, responses=_READ_ERRORS)
def get_item(
    item_id: Annotated[str, Path(alias="itemId")],
    service: Annotated[ItemService, Depends(get_item_service)],
) -> JSONResponse:
    return render(service.get_item(item_id))


@router.post(
    "",
    response_model=CreateItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_WRITE_ERRORS,
    openapi_extra=request_body_openapi(ItemPayload),
)
def create_item(
    payload: Annotated[ItemPayload, Depends(validated_body(ItemPayload))],
    service: Annotated[ItemService, Depends(get_item_service)],
) -> JSONResponse:
    return render(service.create_item(payload))


@router.put(
    "/{itemId}",
    response_model=MessageResponse,
    responses=_WRITE_ERRORS,
    openapi_extra=request_body_openapi(ItemPayload),
)
def replace_item(
    item_id: Annotated[str, Path(alias="itemId")],
    payload: Annotated[ItemPayload, Depends(validated_body(ItemPayload))],
    service: Annotated[ItemService, Depends(get_item_service)],
) -> JSONResponse:
    return render(service.update_item(item_id, payload))


@router.delete("/{itemId}", response_model=MessageResponse, responses=_READ_ERRORS)
def delete_item(
    item_id: Annotated[str, Path(alias="itemId")],
    service: Annotated[ItemService, Depends(get_item_service)],
) -> JSONResponse:
    return render(service.delete_item(item_id))
