"""Debt ORM model for tracked payable obligations."""

from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import Boolean, Date, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel


class PaymentMethod(str, Enum):
    """How a debt payment or ledger movement was made."""

    DEBIT = "debit"
    CREDIT = "credit"
    CASH = "cash"
    PIX = "pix"
    """Instant transfer."""

    TRANSFER = "transfer"
    """Bank transfer."""

    OTHER = "other"


PAYMENT_METHOD_LABELS = {
    PaymentMethod.DEBIT: "Debit",
    PaymentMethod.CREDIT: "Credit",
    PaymentMethod.CASH: "Cash",
    PaymentMethod.PIX: "PIX",
    PaymentMethod.TRANSFER: "Bank transfer",
    PaymentMethod.OTHER: "Other",
}


class Debt(Base, BaseModel):
    """Model representing a debt with its accumulated payments.

    A debt is mutated only by the payment flow (paid_amount, is_paid,
    payment_method, card_id). ``is_paid`` always equals
    ``paid_amount >= amount``.
    """

    __tablename__ = "debts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment="Principal",
    )
    paid_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
        comment="Accumulated paid amount",
    )
    is_paid: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
        comment="True once paid_amount >= amount",
    )

    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="Null for recurring debts",
    )
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    payment_method: Mapped[PaymentMethod | None] = mapped_column(String(20), nullable=True)
    card_id: Mapped[int | None] = mapped_column(
        ForeignKey("cards.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="Debt owner",
    )

    # Relationships
    card: Mapped["Card | None"] = relationship(  # noqa: F821
        "Card",
        foreign_keys=[card_id],
    )
    owner: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="debts",
        foreign_keys=[owner_id],
    )

    # Ids are never reused: ledger rows keep pointing at deleted debts
    __table_args__ = (
        Index("idx_debt_owner", "owner_id"),
        Index("idx_debt_owner_paid", "owner_id", "is_paid"),
        {"sqlite_autoincrement": True},
    )

    @property
    def remaining_amount(self) -> Decimal:
        """Amount still owed (never negative)."""
        remaining = (self.amount or Decimal("0")) - (self.paid_amount or Decimal("0"))
        return max(remaining, Decimal("0.00"))

    def __repr__(self) -> str:
        return (
            f"<Debt(id={self.id}, name={self.name!r}, amount={self.amount}, "
            f"paid_amount={self.paid_amount}, is_paid={self.is_paid})>"
        )


__all__ = ["Debt", "PaymentMethod", "PAYMENT_METHOD_LABELS"]
