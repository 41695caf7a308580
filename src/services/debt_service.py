"""Debt service: creation and payment of debts, optionally from a reserve.

Both flows run as one unit of work (see ``atomic``):

    lock debt -> lock reserve -> check balance -> ledger outflow
        -> delete or shrink reserve -> update debt -> commit

Lock order is always debt before reserve. Any failure rolls the whole
transaction back, so a debt, its reserve and the ledger never end up in a
mix of old and new state.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import NamedTuple

from sqlalchemy.orm import Session, joinedload

from src.models.card import Card
from src.models.debt import PAYMENT_METHOD_LABELS, Debt, PaymentMethod
from src.models.ledger_transaction import LedgerTransaction, TransactionDirection
from src.models.reserve import Reserve
from src.services.card_service import CardService
from src.services.config import settings
from src.services.errors import (
    DebtAlreadyPaidError,
    NotFoundError,
    OverpaymentError,
    ValidationError,
)
from src.services.ledger_service import LedgerService
from src.services.locale_service import to_money
from src.services.reserve_service import ReserveService, parse_positive_amount
from src.services.unit_of_work import atomic

logger = logging.getLogger(__name__)

MESSAGE_CREATED = "Debt created"
MESSAGE_CREATED_AND_PAID = "Debt created and paid from reserve"


class PaymentResult(NamedTuple):
    """Outcome of a debt payment."""

    debt: Debt
    reserve: Reserve | None  # None if no reserve was used or it was exhausted
    fully_paid: bool
    reserve_deleted: bool
    transaction: LedgerTransaction | None


class CreateDebtResult(NamedTuple):
    """Outcome of a debt creation."""

    debt: Debt
    message: str
    paid_from_reserve: bool
    reserve: Reserve | None
    reserve_deleted: bool


class PaymentMethodsInfo(NamedTuple):
    """Fixed payment methods with labels plus the owner's cards."""

    methods: list[tuple[str, str]]
    cards: list[Card]


def _parse_method(value: PaymentMethod | str | None) -> PaymentMethod | None:
    if value is None or value == "":
        return None
    try:
        return PaymentMethod(value)
    except ValueError as e:
        raise ValidationError(f"Invalid payment method: {value!r}") from e


def _to_day(value: date | datetime | str | None) -> date | None:
    """Truncate a date-like input to day precision."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(value.strip()).date()
    except (AttributeError, ValueError) as e:
        raise ValidationError(f"Invalid date: {value!r}") from e


class DebtService:
    """Debt payment and creation engine plus owner-scoped debt queries."""

    def __init__(self, db_session: Session, record_external_payments: bool | None = None):
        """Initialize with database session.

        Args:
            db_session: Database session
            record_external_payments: Append a ledger outflow for payments made
                without a reserve (defaults to LEDGER_EXTERNAL_PAYMENTS)
        """
        self.db = db_session
        self.ledger = LedgerService(db_session)
        self.reserves = ReserveService(db_session)
        self.cards = CardService(db_session)
        if record_external_payments is None:
            record_external_payments = settings.ledger_external_payments
        self.record_external_payments = record_external_payments

    def get_debt(self, debt_id: int, owner_id: int) -> Debt:
        """Get a debt by id for its owner.

        Raises:
            NotFoundError: If the debt does not exist for this owner
        """
        debt = (
            self.db.query(Debt)
            .options(joinedload(Debt.card))
            .filter(Debt.id == debt_id, Debt.owner_id == owner_id)
            .first()
        )
        if not debt:
            raise NotFoundError("debt", debt_id)
        return debt

    def lock_debt(self, debt_id: int, owner_id: int) -> Debt:
        """Select the debt row FOR UPDATE inside the current transaction.

        Raises:
            NotFoundError: If the debt does not exist for this owner
        """
        debt = (
            self.db.query(Debt)
            .filter(Debt.id == debt_id, Debt.owner_id == owner_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not debt:
            raise NotFoundError("debt", debt_id)
        return debt

    def list_debts(self, owner_id: int) -> list[Debt]:
        """All debts of an owner with their card loaded."""
        return (
            self.db.query(Debt)
            .options(joinedload(Debt.card))
            .filter(Debt.owner_id == owner_id)
            .order_by(Debt.id)
            .all()
        )

    def pay_debt(
        self,
        debt_id: int,
        owner_id: int,
        amount,
        payment_method: PaymentMethod | str | None = None,
        card_id: int | None = None,
        reserve_id: int | None = None,
        payment_date: date | None = None,
    ) -> PaymentResult:
        """Apply a payment to a debt, optionally drawing it from a reserve.

        Args:
            debt_id: Debt to pay
            owner_id: Owner of the debt (and of the reserve/card, if given)
            amount: Positive decimal-compatible amount, rounded to cents
            payment_method: How the payment was made; keeps the debt's
                current method when omitted
            card_id: Card used for the payment (replaces the debt's card)
            reserve_id: Reserve to draw the money from
            payment_date: Ledger date (default: today)

        Returns:
            PaymentResult with the refreshed debt and reserve

        Raises:
            ValidationError: If amount or method is invalid (before any lock)
            NotFoundError: If debt, reserve or card does not exist for the owner
            DebtAlreadyPaidError: If the debt is already fully paid
            OverpaymentError: If amount exceeds what is still owed
            InsufficientReserveBalanceError: If the reserve cannot cover amount
            StorageError: If the database fails
        """
        amount = parse_positive_amount(amount)
        method = _parse_method(payment_method)

        with atomic(self.db, "pay_debt"):
            debt = self.lock_debt(debt_id, owner_id)
            if debt.is_paid:
                raise DebtAlreadyPaidError(debt.id)

            paid = to_money(debt.paid_amount or 0)
            principal = to_money(debt.amount)
            remaining = principal - paid
            if amount > remaining:
                raise OverpaymentError(remaining=remaining, requested=amount)

            if card_id is not None:
                self.cards.get_card(card_id, owner_id)

            method = method or _parse_method(debt.payment_method) or PaymentMethod.OTHER
            description = f"Debt payment: {debt.name}"

            reserve = None
            reserve_deleted = False
            entry = None
            if reserve_id is not None:
                locked = self.reserves.lock_reserve(reserve_id, owner_id)
                drawn = self.reserves.draw(
                    locked,
                    owner_id,
                    amount,
                    description=description,
                    payment_method=method,
                    debt_id=debt.id,
                    card_id=card_id,
                    transaction_date=payment_date,
                )
                entry = drawn.transaction
                reserve = drawn.reserve
                reserve_deleted = reserve is None
            elif self.record_external_payments:
                entry = self.ledger.record(
                    TransactionDirection.OUTFLOW,
                    amount,
                    owner_id=owner_id,
                    payment_method=method,
                    description=description,
                    transaction_date=payment_date,
                    debt_id=debt.id,
                    card_id=card_id,
                )

            new_paid = paid + amount
            fully_paid = new_paid >= principal
            debt.paid_amount = new_paid
            debt.is_paid = fully_paid
            debt.payment_method = method.value
            debt.card_id = card_id

        self.db.refresh(debt)
        if reserve is not None:
            self.db.refresh(reserve)

        logger.info(
            f"Paid debt {debt_id}: amount={amount}, paid_amount={new_paid}, "
            f"fully_paid={fully_paid}, reserve_id={reserve_id}, "
            f"reserve_deleted={reserve_deleted}, owner_id={owner_id}"
        )
        return PaymentResult(
            debt=debt,
            reserve=reserve,
            fully_paid=fully_paid,
            reserve_deleted=reserve_deleted,
            transaction=entry,
        )

    def create_debt(
        self,
        owner_id: int,
        name: str,
        amount,
        start_date: date | datetime | str | None = None,
        end_date: date | datetime | str | None = None,
        is_recurring: bool = False,
        payment_method: PaymentMethod | str | None = None,
        card_id: int | None = None,
        reserve_id: int | None = None,
    ) -> CreateDebtResult:
        """Create a debt; with a reserve, create it already paid from that reserve.

        Dates are truncated to day precision. Recurring debts never have an
        end date.

        Raises:
            ValidationError: If name/amount is missing, amount is not positive,
                or end_date is before start_date
            NotFoundError: If reserve or card does not exist for the owner
            InsufficientReserveBalanceError: If the reserve cannot cover amount
            StorageError: If the database fails
        """
        if not name or not name.strip():
            raise ValidationError("name is required")
        amount = parse_positive_amount(amount)
        method = _parse_method(payment_method)
        start = _to_day(start_date)
        end = None if is_recurring else _to_day(end_date)
        if start and end and end < start:
            raise ValidationError("end_date must not be before start_date")

        with atomic(self.db, "create_debt"):
            if card_id is not None:
                self.cards.get_card(card_id, owner_id)

            locked = None
            if reserve_id is not None:
                locked = self.reserves.lock_reserve(reserve_id, owner_id)

            debt = Debt(
                name=name.strip(),
                amount=amount,
                paid_amount=amount if locked is not None else Decimal("0.00"),
                is_paid=locked is not None,
                start_date=start,
                end_date=end,
                is_recurring=bool(is_recurring),
                payment_method=method.value if method else None,
                card_id=card_id,
                owner_id=owner_id,
            )
            self.db.add(debt)
            self.db.flush()

            reserve = None
            reserve_deleted = False
            if locked is not None:
                drawn = self.reserves.draw(
                    locked,
                    owner_id,
                    amount,
                    description=f"Payment: {debt.name}",
                    payment_method=method or PaymentMethod.OTHER,
                    debt_id=debt.id,
                    card_id=card_id,
                )
                reserve = drawn.reserve
                reserve_deleted = reserve is None

        debt = self.get_debt(debt.id, owner_id)
        if reserve is not None:
            self.db.refresh(reserve)

        paid_from_reserve = reserve_id is not None
        message = MESSAGE_CREATED_AND_PAID if paid_from_reserve else MESSAGE_CREATED
        logger.info(
            f"Created debt: {debt.name} (ID={debt.id}, amount={amount}, "
            f"reserve_id={reserve_id}, owner_id={owner_id})"
        )
        return CreateDebtResult(
            debt=debt,
            message=message,
            paid_from_reserve=paid_from_reserve,
            reserve=reserve,
            reserve_deleted=reserve_deleted,
        )

    def delete_debt(self, debt_id: int, owner_id: int) -> None:
        """Delete a debt owned by ``owner_id``. Ledger rows are kept.

        Raises:
            NotFoundError: If the debt does not exist for this owner
        """
        with atomic(self.db, "delete_debt"):
            debt = self.lock_debt(debt_id, owner_id)
            self.db.delete(debt)
        logger.info(f"Deleted debt {debt_id} (owner_id={owner_id})")

    def payment_methods(self, owner_id: int) -> PaymentMethodsInfo:
        """Fixed payment method list plus the owner's cards."""
        methods = [(method.value, PAYMENT_METHOD_LABELS[method]) for method in PaymentMethod]
        return PaymentMethodsInfo(methods=methods, cards=self.cards.list_cards(owner_id))


__all__ = [
    "DebtService",
    "PaymentResult",
    "CreateDebtResult",
    "PaymentMethodsInfo",
]
