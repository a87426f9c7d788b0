"""
HTTP routes for the cards API.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from sitecards.db import CardRecord, CardStore, StorageError
from sitecards.dependencies import get_card_store
from sitecards.schemas import CardPayload, DeleteResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(responses={500: {"model": ErrorResponse}})


def _to_record(payload: CardPayload) -> CardRecord:
    return CardRecord(
        id=payload.id,
        company_name=payload.companyName,
        site_name=payload.siteName,
        product_name=payload.productName,
        construction_date=payload.constructionDate,
        arrival_date=payload.arrivalDate,
        status=payload.status,
        notes=payload.notes,
    )


def _error(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": message})


@router.get("/cards", response_model=list[CardPayload])
def list_cards(store: CardStore = Depends(get_card_store)):
    try:
        cards = store.list_all()
    except StorageError:
        logger.exception("GET /cards error")
        return _error("Failed to fetch cards")
    return [card.as_dict() for card in cards]


@router.post("/cards", response_model=CardPayload)
def create_card(payload: CardPayload, store: CardStore = Depends(get_card_store)):
    try:
        card = store.create(_to_record(payload))
    except StorageError:
        logger.exception("POST /cards error")
        return _error("Failed to create card")
    return card.as_dict()


@router.put("/cards/{card_id}", response_model=CardPayload)
def update_card(
    card_id: str,
    payload: CardPayload,
    store: CardStore = Depends(get_card_store),
):
    """
    Overwrite every field of the card; the id in the path wins over the body.
    """
    try:
        card = store.update(card_id, _to_record(payload))
    except StorageError:
        logger.exception("PUT /cards/%s error", card_id)
        return _error("Failed to update card")
    return card.as_dict()


@router.delete("/cards/{card_id}", response_model=DeleteResponse)
def delete_card(card_id: str, store: CardStore = Depends(get_card_store)):
    try:
        store.delete(card_id)
    except StorageError:
        logger.exception("DELETE /cards/%s error", card_id)
        return _error("Failed to delete card")
    return DeleteResponse(success=True)
