"""Financial profile ORM model: the owner's income and savings plan."""

from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from src.models import Base, BaseModel

DEFAULT_SIMULATION_MONTHS = 12


class FinancialProfile(Base, BaseModel):
    """At most one row per owner, feeding the savings simulation."""

    __tablename__ = "financial_profiles"

    monthly_income: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
    )
    savings_goal: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
    )
    simulation_months: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=DEFAULT_SIMULATION_MONTHS,
        comment="Horizon of the savings simulation",
    )
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        unique=True,
    )

    def __repr__(self) -> str:
        return (
            f"<FinancialProfile(owner_id={self.owner_id}, income={self.monthly_income}, "
            f"goal={self.savings_goal}, months={self.simulation_months})>"
        )


__all__ = ["FinancialProfile", "DEFAULT_SIMULATION_MONTHS"]
