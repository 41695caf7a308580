"""Financial profile service: the owner's monthly income and savings goal.

Each owner has at most one profile. Reading before one exists returns the
defaults without storing them; saving replaces every field, so a field left
out of the request goes back to its default.
"""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from src.models.financial_profile import DEFAULT_SIMULATION_MONTHS, FinancialProfile
from src.services.errors import ValidationError
from src.services.locale_service import to_money
from src.services.unit_of_work import atomic

logger = logging.getLogger(__name__)

MAX_SIMULATION_MONTHS = 600


def _non_negative(value, field: str) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")
    try:
        amount = to_money(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative")
    return amount


class FinancialProfileService:
    """Service for financial profile database operations."""

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def get_profile(self, owner_id: int) -> FinancialProfile:
        """Get the owner's profile, or an unsaved one holding the defaults."""
        profile = (
            self.db.query(FinancialProfile).filter(FinancialProfile.owner_id == owner_id).first()
        )
        if profile is None:
            return FinancialProfile(
                owner_id=owner_id,
                monthly_income=Decimal("0.00"),
                savings_goal=Decimal("0.00"),
                simulation_months=DEFAULT_SIMULATION_MONTHS,
            )
        return profile

    def save_profile(
        self,
        owner_id: int,
        monthly_income: Decimal | str | None = None,
        savings_goal: Decimal | str | None = None,
        simulation_months: int | None = None,
    ) -> FinancialProfile:
        """Create or replace the owner's profile.

        Raises:
            ValidationError: If an amount is malformed or negative, or the
                simulation horizon is outside 1..600 months
        """
        income = _non_negative(monthly_income, "monthly_income")
        goal = _non_negative(savings_goal, "savings_goal")
        months = DEFAULT_SIMULATION_MONTHS if simulation_months is None else simulation_months
        if not 1 <= months <= MAX_SIMULATION_MONTHS:
            raise ValidationError(
                f"simulation_months must be between 1 and {MAX_SIMULATION_MONTHS}"
            )

        with atomic(self.db, "save_profile"):
            profile = (
                self.db.query(FinancialProfile)
                .filter(FinancialProfile.owner_id == owner_id)
                .with_for_update()
                .first()
            )
            if profile is None:
                profile = FinancialProfile(owner_id=owner_id)
                self.db.add(profile)
            profile.monthly_income = income
            profile.savings_goal = goal
            profile.simulation_months = months

        self.db.refresh(profile)
        logger.info(
            f"Saved financial profile for owner_id={owner_id} "
            f"(income={income}, goal={goal}, months={months})"
        )
        return profile


__all__ = ["FinancialProfileService", "MAX_SIMULATION_MONTHS"]
