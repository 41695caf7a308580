"""Ledger recorder: append-only inflow/outflow rows and their aggregates."""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from src.models.debt import PaymentMethod
from src.models.ledger_transaction import LedgerTransaction, TransactionDirection
from src.services.errors import ValidationError
from src.services.locale_service import to_money

logger = logging.getLogger(__name__)


class LedgerService:
    """Record ledger movements and answer aggregate queries.

    Rows are only ever added. ``record`` flushes but never commits; the
    caller owns the surrounding transaction.
    """

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def record(
        self,
        direction: TransactionDirection | str,
        amount: Decimal,
        owner_id: int,
        payment_method: PaymentMethod | str,
        description: str | None = None,
        transaction_date: date | None = None,
        debt_id: int | None = None,
        reserve_id: int | None = None,
        card_id: int | None = None,
    ) -> LedgerTransaction:
        """Append one ledger row.

        Args:
            direction: inflow or outflow
            amount: Positive amount
            owner_id: Owner of the row
            payment_method: How the money moved
            description: Optional free text
            transaction_date: Defaults to today
            debt_id: Debt the movement pays, if any
            reserve_id: Reserve the movement touches, if any
            card_id: Card used, if any

        Returns:
            The flushed LedgerTransaction

        Raises:
            ValidationError: If direction is unknown or amount is not positive
        """
        try:
            direction = TransactionDirection(direction)
            payment_method = PaymentMethod(payment_method)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        amount = to_money(amount)
        if amount <= 0:
            raise ValidationError("Ledger amount must be positive")

        entry = LedgerTransaction(
            direction=direction.value,
            amount=amount,
            description=description,
            transaction_date=transaction_date or date.today(),
            payment_method=payment_method.value,
            debt_id=debt_id,
            reserve_id=reserve_id,
            card_id=card_id,
            owner_id=owner_id,
        )
        self.db.add(entry)
        self.db.flush()
        logger.debug(
            "ledger.record: id=%d direction=%s amount=%s debt_id=%s reserve_id=%s owner_id=%d",
            entry.id,
            direction.value,
            amount,
            debt_id,
            reserve_id,
            owner_id,
        )
        return entry

    def sum_for_reserve(
        self, reserve_id: int, owner_id: int, direction: TransactionDirection
    ) -> Decimal:
        """Total amount recorded for a reserve in one direction."""
        total = (
            self.db.query(func.coalesce(func.sum(LedgerTransaction.amount), 0))
            .filter(
                LedgerTransaction.reserve_id == reserve_id,
                LedgerTransaction.owner_id == owner_id,
                LedgerTransaction.direction == direction.value,
            )
            .scalar()
        )
        return to_money(total)

    def reserve_balance(self, reserve_id: int, owner_id: int) -> Decimal:
        """Derived balance: sum(inflows) - sum(outflows) for the reserve."""
        inflows = self.sum_for_reserve(reserve_id, owner_id, TransactionDirection.INFLOW)
        outflows = self.sum_for_reserve(reserve_id, owner_id, TransactionDirection.OUTFLOW)
        return inflows - outflows

    def balances_by_reserve(self, owner_id: int) -> dict[int, Decimal]:
        """Derived balance of every reserve the owner has ledger rows for."""
        signed_amount = case(
            (
                LedgerTransaction.direction == TransactionDirection.INFLOW.value,
                LedgerTransaction.amount,
            ),
            else_=-LedgerTransaction.amount,
        )
        rows = (
            self.db.query(LedgerTransaction.reserve_id, func.sum(signed_amount))
            .filter(
                LedgerTransaction.owner_id == owner_id,
                LedgerTransaction.reserve_id.is_not(None),
            )
            .group_by(LedgerTransaction.reserve_id)
            .all()
        )
        return {reserve_id: to_money(total or 0) for reserve_id, total in rows}

    def sum_outflows_for_debt(self, debt_id: int, owner_id: int) -> Decimal:
        """Total outflows recorded against a debt."""
        total = (
            self.db.query(func.coalesce(func.sum(LedgerTransaction.amount), 0))
            .filter(
                LedgerTransaction.debt_id == debt_id,
                LedgerTransaction.owner_id == owner_id,
                LedgerTransaction.direction == TransactionDirection.OUTFLOW.value,
            )
            .scalar()
        )
        return to_money(total)

    def list_for_reserve(self, reserve_id: int, owner_id: int) -> list[LedgerTransaction]:
        """Ledger history of a reserve, oldest first."""
        return (
            self.db.query(LedgerTransaction)
            .filter(
                LedgerTransaction.reserve_id == reserve_id,
                LedgerTransaction.owner_id == owner_id,
            )
            .order_by(LedgerTransaction.transaction_date, LedgerTransaction.id)
            .all()
        )


__all__ = ["LedgerService"]
