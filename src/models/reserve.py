"""Reserve ORM model for savings buckets."""

from decimal import Decimal
from enum import Enum

from sqlalchemy import ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel


class ReserveType(str, Enum):
    """Reserve classification."""

    SAVINGS = "savings"
    INVESTMENT = "investment"
    EMERGENCY_FUND = "emergency_fund"
    OTHER = "other"


class Reserve(Base, BaseModel):
    """Model representing a named pool of saved funds.

    The balance of a reserve is derived from the ledger:
    sum(inflows) - sum(outflows) tagged with its id. ``value`` is a
    projection of that balance, rewritten inside every transaction that
    touches the reserve. A reserve whose balance reaches zero is deleted.
    """

    __tablename__ = "reserves"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    value: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
        comment="Cached balance, projected from the ledger",
    )
    reserve_type: Mapped[ReserveType] = mapped_column(
        String(20),
        nullable=False,
        default=ReserveType.SAVINGS,
        comment="savings, investment, emergency_fund or other",
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="Reserve owner",
    )

    owner: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="reserves",
        foreign_keys=[owner_id],
    )

    # Ids are never reused: a new reserve must not inherit old ledger rows
    __table_args__ = (
        Index("idx_reserve_owner_name", "owner_id", "name"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return (
            f"<Reserve(id={self.id}, name={self.name!r}, value={self.value}, "
            f"type={self.reserve_type})>"
        )


__all__ = ["Reserve", "ReserveType"]
