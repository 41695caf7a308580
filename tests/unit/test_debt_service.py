"""Unit tests for DebtService."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.models.debt import Debt, PaymentMethod
from src.models.ledger_transaction import LedgerTransaction
from src.services.card_service import CardService
from src.services.debt_service import (
    MESSAGE_CREATED,
    MESSAGE_CREATED_AND_PAID,
    DebtService,
)
from src.services.errors import (
    DebtAlreadyPaidError,
    InsufficientReserveBalanceError,
    NotFoundError,
    OverpaymentError,
    ValidationError,
)
from src.services.reserve_service import ReserveService

pytestmark = pytest.mark.unit


@pytest.fixture
def service(db_session):
    return DebtService(db_session, record_external_payments=False)


@pytest.fixture
def card(db_session, owner):
    return CardService(db_session).create_card(owner.id, "Gold", "Banco X", "credit")


@pytest.fixture
def debt(service, owner):
    return service.create_debt(owner.id, "Phone bill", "300.00", start_date="2024-05-01").debt


class TestCreateDebt:
    """Tests for create_debt without a reserve."""

    def test_creates_unpaid_debt(self, service, db_session, owner):
        result = service.create_debt(
            owner.id,
            "  Internet  ",
            "99.90",
            start_date=datetime(2024, 5, 1, 13, 45),
            end_date="2024-12-01T08:00:00",
            payment_method="pix",
        )

        assert result.message == MESSAGE_CREATED
        assert result.paid_from_reserve is False
        assert result.reserve is None
        debt = result.debt
        assert debt.name == "Internet"
        assert debt.amount == Decimal("99.90")
        assert debt.paid_amount == Decimal("0.00")
        assert debt.is_paid is False
        assert debt.start_date == date(2024, 5, 1)
        assert debt.end_date == date(2024, 12, 1)
        assert debt.payment_method == "pix"
        assert db_session.query(LedgerTransaction).count() == 0

    def test_recurring_debt_drops_end_date(self, service, owner):
        result = service.create_debt(
            owner.id, "Gym", "80", start_date="2024-01-01", end_date="2024-06-01", is_recurring=True
        )
        assert result.debt.is_recurring is True
        assert result.debt.end_date is None

    @pytest.mark.parametrize(
        ("name", "amount"),
        [(None, "10"), ("", "10"), ("Rent", None), ("Rent", "0"), ("Rent", "-1"), ("Rent", "x")],
    )
    def test_missing_or_invalid_fields(self, service, db_session, owner, name, amount):
        with pytest.raises(ValidationError):
            service.create_debt(owner.id, name, amount)
        assert db_session.query(Debt).count() == 0

    def test_end_before_start(self, service, owner):
        with pytest.raises(ValidationError, match="end_date"):
            service.create_debt(
                owner.id, "Loan", "100", start_date="2024-06-01", end_date="2024-05-01"
            )

    def test_invalid_date(self, service, owner):
        with pytest.raises(ValidationError, match="Invalid date"):
            service.create_debt(owner.id, "Loan", "100", start_date="first of may")

    def test_invalid_payment_method(self, service, owner):
        with pytest.raises(ValidationError, match="payment method"):
            service.create_debt(owner.id, "Loan", "100", payment_method="barter")

    def test_with_card(self, service, owner, card):
        result = service.create_debt(owner.id, "TV", "1200", card_id=card.id)
        assert result.debt.card.id == card.id

    def test_with_foreign_card(self, service, db_session, other_owner, card):
        with pytest.raises(NotFoundError):
            service.create_debt(other_owner.id, "TV", "1200", card_id=card.id)
        assert db_session.query(Debt).count() == 0


class TestCreateDebtFromReserve:
    """Tests for create_debt paying from a reserve."""

    @pytest.fixture
    def reserve(self, db_session, owner):
        return ReserveService(db_session).create_reserve(owner.id, "Savings", "500", "savings")

    def test_creates_paid_debt_and_draws(self, service, db_session, owner, reserve):
        result = service.create_debt(owner.id, "Course", "200", reserve_id=reserve.id)

        assert result.message == MESSAGE_CREATED_AND_PAID
        assert result.paid_from_reserve is True
        assert result.reserve_deleted is False
        assert result.debt.is_paid is True
        assert result.debt.paid_amount == Decimal("200.00")
        assert result.reserve.value == Decimal("300.00")

        outflow = (
            db_session.query(LedgerTransaction)
            .filter_by(debt_id=result.debt.id, direction="outflow")
            .one()
        )
        assert outflow.reserve_id == reserve.id
        assert outflow.description == "Payment: Course"

    def test_exact_balance_deletes_reserve(self, service, owner, reserve):
        result = service.create_debt(owner.id, "Course", "500", reserve_id=reserve.id)
        assert result.reserve is None
        assert result.reserve_deleted is True
        with pytest.raises(NotFoundError):
            ReserveService(service.db).get_reserve(reserve.id, owner.id)

    def test_insufficient_balance_creates_nothing(self, service, db_session, owner, reserve):
        with pytest.raises(InsufficientReserveBalanceError):
            service.create_debt(owner.id, "Car", "500.01", reserve_id=reserve.id)
        assert db_session.query(Debt).count() == 0
        assert ReserveService(db_session).compute_balance(reserve.id, owner.id) == Decimal(
            "500.00"
        )

    def test_unknown_reserve(self, service, db_session, owner):
        with pytest.raises(NotFoundError):
            service.create_debt(owner.id, "Car", "5", reserve_id=404)
        assert db_session.query(Debt).count() == 0


class TestPayDebt:
    """Tests for pay_debt without a reserve."""

    def test_partial_payment(self, service, owner, debt):
        result = service.pay_debt(debt.id, owner.id, "100", payment_method="cash")

        assert result.fully_paid is False
        assert result.reserve is None
        assert result.reserve_deleted is False
        assert result.transaction is None
        assert result.debt.paid_amount == Decimal("100.00")
        assert result.debt.remaining_amount == Decimal("200.00")
        assert result.debt.payment_method == "cash"

    def test_final_payment_marks_paid(self, service, owner, debt):
        service.pay_debt(debt.id, owner.id, "100", payment_method="cash")
        result = service.pay_debt(debt.id, owner.id, "200", payment_method="pix")
        assert result.fully_paid is True
        assert result.debt.is_paid is True
        assert result.debt.remaining_amount == Decimal("0.00")

    def test_paying_paid_debt_is_rejected(self, service, owner, debt):
        service.pay_debt(debt.id, owner.id, "300")
        with pytest.raises(DebtAlreadyPaidError):
            service.pay_debt(debt.id, owner.id, "1")

    def test_overpayment_is_rejected(self, service, owner, debt):
        with pytest.raises(OverpaymentError) as exc_info:
            service.pay_debt(debt.id, owner.id, "300.01")
        assert exc_info.value.remaining == Decimal("300.00")
        assert service.get_debt(debt.id, owner.id).paid_amount == Decimal("0.00")

    @pytest.mark.parametrize("amount", [None, "0", "-20", "lots"])
    def test_invalid_amount(self, service, owner, debt, amount):
        with pytest.raises(ValidationError):
            service.pay_debt(debt.id, owner.id, amount)

    def test_method_defaults(self, service, owner, debt):
        """Without a method the debt keeps its own, falling back to other."""
        result = service.pay_debt(debt.id, owner.id, "10")
        assert result.debt.payment_method == PaymentMethod.OTHER.value

    def test_card_replaces_debt_card(self, service, owner, debt, card):
        result = service.pay_debt(debt.id, owner.id, "10", payment_method="credit", card_id=card.id)
        assert result.debt.card_id == card.id

    def test_foreign_card(self, service, db_session, owner, other_owner, debt):
        theirs = CardService(db_session).create_card(other_owner.id, "Black", "Banco Y", "debit")
        with pytest.raises(NotFoundError):
            service.pay_debt(debt.id, owner.id, "10", card_id=theirs.id)

    def test_other_owners_debt(self, service, other_owner, debt):
        with pytest.raises(NotFoundError):
            service.pay_debt(debt.id, other_owner.id, "10")

    def test_external_payment_recorded_when_enabled(self, db_session, owner, debt):
        service = DebtService(db_session, record_external_payments=True)
        result = service.pay_debt(
            debt.id, owner.id, "50", payment_method="pix", payment_date=date(2024, 5, 10)
        )

        assert result.transaction is not None
        assert result.transaction.reserve_id is None
        assert result.transaction.debt_id == debt.id
        assert result.transaction.transaction_date == date(2024, 5, 10)
        assert service.ledger.sum_outflows_for_debt(debt.id, owner.id) == Decimal("50.00")

    def test_external_payment_not_recorded_by_default(self, service, db_session, owner, debt):
        service.pay_debt(debt.id, owner.id, "50")
        assert db_session.query(LedgerTransaction).count() == 0


class TestListAndDelete:
    """Tests for list_debts, delete_debt and payment_methods."""

    def test_list_is_owner_scoped(self, service, owner, other_owner, debt):
        service.create_debt(other_owner.id, "Theirs", "10")
        assert [d.id for d in service.list_debts(owner.id)] == [debt.id]

    def test_delete_debt(self, service, owner, debt):
        service.delete_debt(debt.id, owner.id)
        with pytest.raises(NotFoundError):
            service.get_debt(debt.id, owner.id)

    def test_delete_other_owners_debt(self, service, other_owner, debt):
        with pytest.raises(NotFoundError):
            service.delete_debt(debt.id, other_owner.id)

    def test_payment_methods(self, service, owner, card):
        info = service.payment_methods(owner.id)
        assert [value for value, _ in info.methods] == [m.value for m in PaymentMethod]
        assert ("pix", "PIX") in info.methods
        assert [c.id for c in info.cards] == [card.id]
