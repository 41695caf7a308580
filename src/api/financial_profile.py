"""Financial profile API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_owner
from src.api.schemas import FinancialProfilePayload, FinancialProfileResponse
from src.models.user import User
from src.services import get_db
from src.services.financial_profile_service import FinancialProfileService

router = APIRouter(prefix="/api/financial-profile", tags=["financial-profile"])


@router.get("", response_model=FinancialProfileResponse)
def get_profile(
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> FinancialProfileResponse:
    """The owner's profile, or the defaults when none was saved."""
    profile = FinancialProfileService(db).get_profile(owner.id)
    return FinancialProfileResponse.model_validate(profile)


@router.post("", response_model=FinancialProfileResponse)
def save_profile(
    payload: FinancialProfilePayload,
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> FinancialProfileResponse:
    """Create or replace the owner's profile."""
    profile = FinancialProfileService(db).save_profile(
        owner.id,
        monthly_income=payload.monthly_income,
        savings_goal=payload.savings_goal,
        simulation_months=payload.simulation_months,
    )
    return FinancialProfileResponse.model_validate(profile)
