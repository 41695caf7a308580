"""Card ORM model for payment cards referenced by debts and ledger rows."""

from decimal import Decimal
from enum import Enum

from sqlalchemy import ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel


class CardType(str, Enum):
    """Card classification."""

    CREDIT = "credit"
    DEBIT = "debit"
    CREDIT_DEBIT = "credit_debit"


CARD_TYPE_LABELS = {
    CardType.CREDIT: "Credit",
    CardType.DEBIT: "Debit",
    CardType.CREDIT_DEBIT: "Credit and debit",
}


class Card(Base, BaseModel):
    """Model representing a user's payment card."""

    __tablename__ = "cards"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    bank: Mapped[str] = mapped_column(String(100), nullable=False)
    card_type: Mapped[CardType] = mapped_column(
        String(20),
        nullable=False,
        default=CardType.CREDIT,
        comment="credit, debit or credit_debit",
    )
    credit_limit: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    closing_day: Mapped[int | None] = mapped_column(Integer, nullable=True)
    due_day: Mapped[int | None] = mapped_column(Integer, nullable=True)

    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="Card owner",
    )

    owner: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="cards",
        foreign_keys=[owner_id],
    )

    __table_args__ = (
        Index("idx_card_owner", "owner_id"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<Card(id={self.id}, name={self.name!r}, bank={self.bank!r}, type={self.card_type})>"


__all__ = ["Card", "CardType", "CARD_TYPE_LABELS"]
