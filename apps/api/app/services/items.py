"""Item service layer."""

import logging

from app.adapters.base import BackendError, Document, DocumentStore, ResourceNotFoundError
from app.domain.result import Err, Ok, Result
from app.errors import internal, not_found
from app.schemas.error import MessageResponse
from app.schemas.item import CreateItemResponse, Item, ItemList, ItemPayload

logger = logging.getLogger(__name__)


class ItemService:
    def __init__(self, documents: DocumentStore, *, collection: str = "items") -> None:
        self._documents = documents
        self._collection = collection

    def list_items(self) -> Result[ItemList]:
        try:
            documents = self._documents.list_documents(self._collection)
        except BackendError as exc:
            return Err(internal("Failed to fetch items", exc))
        return Ok(ItemList(items=[self._to_item(document) for document in documents]))

    def get_item(self, item_id: str) -> Result[Item]:
        try:
            document = self._documents.get_document(self._collection, item_id)
        except BackendError as exc:
            return Err(internal("Failed to fetch item", exc))
        if document is None:
            return Err(not_found("Item not found"))
        return Ok(self._to_item(document))

    def create_item(self, payload: ItemPayload) -> Result[CreateItemResponse]:
        try:
            item_id = self._documents.add_document(self._collection, payload.to_document())
        except BackendError as exc:
            return Err(internal("Failed to create item", exc))

        logger.info("item.created item_id=%s", item_id)
        return Ok(CreateItemResponse(message="Item created successfully", id=item_id), status_code=201)

    def update_item(self, item_id: str, payload: ItemPayload) -> Result[MessageResponse]:
        try:
            self._documents.update_document(self._collection, item_id, payload.to_document())
        except ResourceNotFoundError:
            return Err(not_found("Item not found"))
        except BackendError as exc:
            return Err(internal("Failed to update item", exc))

        logger.info("item.updated item_id=%s", item_id)
        return Ok(MessageResponse(message="Item updated successfully"))

    def delete_item(self, item_id: str) -> Result[MessageResponse]:
        try:
            self._documents.delete_document(self._collection, item_id)
        except ResourceNotFoundError:
            return Err(not_found("Item not found"))
        except BackendError as exc:
            return Err(internal("Failed to delete item", exc))

        logger.info("item.deleted item_id=%s", item_id)
        return Ok(MessageResponse(message="Item deleted successfully"))

    @staticmethod
    def _to_item(document: Document) -> Item:
        return Item.model_validate({**document.data, "id": document.id})
