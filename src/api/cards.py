"""Card API endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_owner
from src.api.schemas import (
    CardResponse,
    CardTypesResponse,
    CreateCardPayload,
    MessageResponse,
    UpdateCardPayload,
)
from src.models.user import User
from src.services import get_db
from src.services.card_service import CardService

router = APIRouter(prefix="/api/cards", tags=["cards"])


@router.get("", response_model=list[CardResponse])
def list_cards(
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> list[CardResponse]:
    """List the owner's cards."""
    return [CardResponse.model_validate(c) for c in CardService(db).list_cards(owner.id)]


@router.get("/types", response_model=CardTypesResponse)
def card_types(
    owner: User = Depends(get_current_owner),  # noqa: B008
) -> CardTypesResponse:
    """Card types with their labels and suggested banks."""
    return CardTypesResponse(**CardService.card_types())


@router.post("", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
def create_card(
    payload: CreateCardPayload,
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> CardResponse:
    """Register a card."""
    card = CardService(db).create_card(
        owner_id=owner.id,
        name=payload.name,
        bank=payload.bank,
        card_type=payload.card_type,
        credit_limit=payload.credit_limit,
        closing_day=payload.closing_day,
        due_day=payload.due_day,
    )
    return CardResponse.model_validate(card)


@router.put("/{card_id}", response_model=CardResponse)
def update_card(
    card_id: int,
    payload: UpdateCardPayload,
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> CardResponse:
    """Update a card; omitted fields keep their value."""
    card = CardService(db).update_card(
        card_id,
        owner.id,
        name=payload.name,
        bank=payload.bank,
        card_type=payload.card_type,
        credit_limit=payload.credit_limit,
        closing_day=payload.closing_day,
        due_day=payload.due_day,
    )
    return CardResponse.model_validate(card)


@router.delete("/{card_id}", response_model=MessageResponse)
def delete_card(
    card_id: int,
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> MessageResponse:
    """Delete a card."""
    CardService(db).delete_card(card_id, owner.id)
    return MessageResponse(message="Card deleted")
