"""Ledger transaction ORM model: append-only inflow/outflow records."""

from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models import Base, BaseModel


class TransactionDirection(str, Enum):
    """Direction of money relative to the owner's reserves."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"


class LedgerTransaction(Base, BaseModel):
    """Model representing one immutable ledger movement.

    Flows recorded:
    - Reserve creation / deposit: inflow tagged to the reserve
    - Debt paid from a reserve: outflow tagged to the debt and the reserve
    - Debt paid from external funds: outflow tagged to the debt only

    ``card_id``, ``debt_id`` and ``reserve_id`` are plain integers rather than
    foreign keys, so the trail outlives the rows it mentions.
    """

    __tablename__ = "ledger_transactions"

    direction: Mapped[TransactionDirection] = mapped_column(
        String(10),
        nullable=False,
        comment="inflow or outflow",
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment="Always positive; sign comes from direction",
    )
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)

    card_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    debt_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    reserve_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # Indexes for the aggregate queries
    __table_args__ = (
        Index("idx_ledger_reserve_owner_direction", "reserve_id", "owner_id", "direction"),
        Index("idx_ledger_debt_owner", "debt_id", "owner_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<LedgerTransaction(id={self.id}, direction={self.direction}, "
            f"amount={self.amount}, debt_id={self.debt_id}, reserve_id={self.reserve_id})>"
        )


__all__ = ["LedgerTransaction", "TransactionDirection"]
