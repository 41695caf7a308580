"""Card service: owner-scoped CRUD for payment cards."""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from src.models.card import CARD_TYPE_LABELS, Card, CardType
from src.models.debt import Debt
from src.services.errors import NotFoundError, ValidationError
from src.services.locale_service import to_money
from src.services.unit_of_work import atomic

logger = logging.getLogger(__name__)

# Banks offered as suggestions when registering a card
COMMON_BANKS = [
    "Nubank",
    "Santander",
    "Itaú",
    "Bradesco",
    "Caixa",
    "Banco do Brasil",
    "C6 Bank",
    "Inter",
    "Sicoob",
    "Sicredi",
    "Other",
]


def _card_type(value: CardType | str) -> CardType:
    try:
        return CardType(value)
    except ValueError as e:
        raise ValidationError(f"Invalid card type: {value!r}") from e


def _check_day(field: str, day: int | None) -> None:
    if day is not None and not 1 <= day <= 31:
        raise ValidationError(f"{field} must be between 1 and 31")


def _limit(credit_limit: Decimal | str) -> Decimal:
    try:
        return to_money(credit_limit)
    except ValueError as e:
        raise ValidationError(str(e)) from e


class CardService:
    """Service for card database operations."""

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def get_card(self, card_id: int, owner_id: int) -> Card:
        """Get card by id, scoped to its owner.

        Raises:
            NotFoundError: If the card does not exist for this owner
        """
        card = self.db.query(Card).filter(Card.id == card_id, Card.owner_id == owner_id).first()
        if not card:
            raise NotFoundError("card", card_id)
        return card

    def list_cards(self, owner_id: int) -> list[Card]:
        """List the owner's cards ordered by name."""
        return self.db.query(Card).filter(Card.owner_id == owner_id).order_by(Card.name).all()

    def create_card(
        self,
        owner_id: int,
        name: str,
        bank: str,
        card_type: CardType | str,
        credit_limit: Decimal | str | None = None,
        closing_day: int | None = None,
        due_day: int | None = None,
    ) -> Card:
        """Create a card.

        Raises:
            ValidationError: If a required field is missing or a day is out of range
        """
        if not name or not bank:
            raise ValidationError("name and bank are required")
        card_type = _card_type(card_type)
        _check_day("closing_day", closing_day)
        _check_day("due_day", due_day)
        limit = _limit(credit_limit) if credit_limit is not None else None

        with atomic(self.db, "create_card"):
            card = Card(
                name=name,
                bank=bank,
                card_type=card_type.value,
                credit_limit=limit,
                closing_day=closing_day,
                due_day=due_day,
                owner_id=owner_id,
            )
            self.db.add(card)

        self.db.refresh(card)
        logger.info(f"Created card {card.id} ({card.bank}) for owner_id={owner_id}")
        return card

    def update_card(
        self,
        card_id: int,
        owner_id: int,
        name: str | None = None,
        bank: str | None = None,
        card_type: CardType | str | None = None,
        credit_limit: Decimal | str | None = None,
        closing_day: int | None = None,
        due_day: int | None = None,
    ) -> Card:
        """Update the given fields of a card; fields left as None are kept.

        Raises:
            NotFoundError: If the card does not exist for this owner
            ValidationError: If a field is blank, unknown or out of range
        """
        if name is not None and not name.strip():
            raise ValidationError("name cannot be blank")
        if bank is not None and not bank.strip():
            raise ValidationError("bank cannot be blank")
        new_type = _card_type(card_type) if card_type is not None else None
        _check_day("closing_day", closing_day)
        _check_day("due_day", due_day)
        limit = _limit(credit_limit) if credit_limit is not None else None

        with atomic(self.db, "update_card"):
            card = self.get_card(card_id, owner_id)
            if name is not None:
                card.name = name
            if bank is not None:
                card.bank = bank
            if new_type is not None:
                card.card_type = new_type.value
            if limit is not None:
                card.credit_limit = limit
            if closing_day is not None:
                card.closing_day = closing_day
            if due_day is not None:
                card.due_day = due_day

        self.db.refresh(card)
        logger.info(f"Updated card {card_id} (owner_id={owner_id})")
        return card

    @staticmethod
    def card_types() -> dict:
        """Card types with display labels, plus suggested banks."""
        return {
            "types": [{"value": t.value, "label": CARD_TYPE_LABELS[t]} for t in CardType],
            "banks": list(COMMON_BANKS),
        }

    def delete_card(self, card_id: int, owner_id: int) -> None:
        """Delete a card; debts that referenced it keep no card.

        Raises:
            NotFoundError: If the card does not exist for this owner
        """
        with atomic(self.db, "delete_card"):
            card = self.get_card(card_id, owner_id)
            self.db.query(Debt).filter(Debt.card_id == card.id).update(
                {Debt.card_id: None}, synchronize_session="fetch"
            )
            self.db.delete(card)
        logger.info(f"Deleted card {card_id} (owner_id={owner_id})")


__all__ = ["CardService", "COMMON_BANKS"]
