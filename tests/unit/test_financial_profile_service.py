"""Unit tests for FinancialProfileService."""

from decimal import Decimal

import pytest

from src.models.financial_profile import FinancialProfile
from src.services.errors import ValidationError
from src.services.financial_profile_service import FinancialProfileService

pytestmark = pytest.mark.unit


@pytest.fixture
def service(db_session):
    return FinancialProfileService(db_session)


def test_defaults_without_saved_profile(service, db_session, owner):
    profile = service.get_profile(owner.id)

    assert profile.monthly_income == Decimal("0.00")
    assert profile.savings_goal == Decimal("0.00")
    assert profile.simulation_months == 12
    # Reading does not store anything
    assert db_session.query(FinancialProfile).count() == 0


def test_save_then_update_keeps_one_row(service, db_session, owner):
    service.save_profile(
        owner.id, monthly_income="5000", savings_goal="1.500,00", simulation_months=24
    )
    profile = service.save_profile(owner.id, monthly_income="5200.50", savings_goal="800")

    assert profile.monthly_income == Decimal("5200.50")
    assert profile.savings_goal == Decimal("800.00")
    assert profile.simulation_months == 12
    assert db_session.query(FinancialProfile).count() == 1


def test_omitted_fields_reset_to_defaults(service, owner):
    service.save_profile(owner.id, monthly_income="3000", savings_goal="500", simulation_months=6)

    profile = service.save_profile(owner.id)

    assert profile.monthly_income == Decimal("0.00")
    assert profile.savings_goal == Decimal("0.00")
    assert profile.simulation_months == 12


def test_profiles_are_owner_scoped(service, owner, other_owner):
    service.save_profile(owner.id, monthly_income="4000")

    assert service.get_profile(other_owner.id).monthly_income == Decimal("0.00")
    assert service.get_profile(owner.id).monthly_income == Decimal("4000.00")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"monthly_income": "-1"},
        {"savings_goal": "plenty"},
        {"simulation_months": 0},
        {"simulation_months": 601},
    ],
)
def test_invalid_input(service, db_session, owner, kwargs):
    with pytest.raises(ValidationError):
        service.save_profile(owner.id, **kwargs)
    assert db_session.query(FinancialProfile).count() == 0
