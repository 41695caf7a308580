"""Reserve balance engine.

Balance model:
    Balance = sum(Inflows) - sum(Outflows), over ledger rows tagged with the
    reserve id and owner.

``Reserve.value`` is a projection of that balance. It is rewritten from the
ledger inside every transaction that touches the reserve and is never used
to decide whether a reserve can cover a payment. A reserve whose balance
reaches zero is deleted.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import NamedTuple

from sqlalchemy.orm import Session

from src.models.debt import PaymentMethod
from src.models.ledger_transaction import LedgerTransaction, TransactionDirection
from src.models.reserve import Reserve, ReserveType
from src.services.errors import (
    InsufficientReserveBalanceError,
    NotFoundError,
    ValidationError,
)
from src.services.ledger_service import LedgerService
from src.services.locale_service import to_money
from src.services.unit_of_work import atomic

logger = logging.getLogger(__name__)


class ReserveBalance(NamedTuple):
    """Reserve row together with its ledger-derived balance."""

    reserve: Reserve
    balance: Decimal


class DrawResult(NamedTuple):
    """Outcome of drawing funds from a locked reserve."""

    transaction: LedgerTransaction
    reserve: Reserve | None  # None when the reserve was exhausted and deleted
    balance: Decimal


def parse_positive_amount(value, field: str = "amount") -> Decimal:
    """Parse a monetary input and require it to be strictly positive.

    Raises:
        ValidationError: If value is missing, malformed or not positive
    """
    if value is None or value == "":
        raise ValidationError(f"{field} is required")
    try:
        amount = to_money(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    if amount <= 0:
        raise ValidationError(f"{field} must be positive")
    return amount


class ReserveService:
    """Create, fund, draw from and query reserves."""

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session
        self.ledger = LedgerService(db_session)

    def get_reserve(self, reserve_id: int, owner_id: int) -> Reserve:
        """Get a reserve by id for its owner.

        Raises:
            NotFoundError: If the reserve does not exist for this owner
        """
        reserve = (
            self.db.query(Reserve)
            .filter(Reserve.id == reserve_id, Reserve.owner_id == owner_id)
            .first()
        )
        if not reserve:
            raise NotFoundError("reserve", reserve_id)
        return reserve

    def lock_reserve(self, reserve_id: int, owner_id: int) -> Reserve:
        """Select the reserve row FOR UPDATE inside the current transaction.

        Raises:
            NotFoundError: If the reserve does not exist for this owner
        """
        reserve = (
            self.db.query(Reserve)
            .filter(Reserve.id == reserve_id, Reserve.owner_id == owner_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not reserve:
            raise NotFoundError("reserve", reserve_id)
        return reserve

    def create_reserve(
        self,
        owner_id: int,
        name: str,
        value,
        reserve_type: ReserveType | str,
        description: str | None = None,
    ) -> Reserve:
        """Create a reserve and its initial inflow.

        Right after creation the derived balance equals ``value``.

        Raises:
            ValidationError: If name, value or type is missing or invalid
        """
        if not name or not name.strip():
            raise ValidationError("name is required")
        amount = parse_positive_amount(value, "value")
        try:
            reserve_type = ReserveType(reserve_type)
        except ValueError as e:
            raise ValidationError(f"Invalid reserve type: {reserve_type!r}") from e

        with atomic(self.db, "create_reserve"):
            reserve = Reserve(
                name=name.strip(),
                value=amount,
                reserve_type=reserve_type.value,
                description=description or "",
                owner_id=owner_id,
            )
            self.db.add(reserve)
            self.db.flush()

            self.ledger.record(
                TransactionDirection.INFLOW,
                amount,
                owner_id=owner_id,
                payment_method=PaymentMethod.TRANSFER,
                description="Initial deposit",
                reserve_id=reserve.id,
            )

        self.db.refresh(reserve)
        logger.info(
            f"Created reserve: {reserve.name} (ID={reserve.id}, value={amount}, owner_id={owner_id})"
        )
        return reserve

    def compute_balance(self, reserve_id: int, owner_id: int) -> Decimal:
        """Ledger-derived balance of a reserve.

        Read-only; calling it twice without a mutation in between returns the
        same value.

        Raises:
            NotFoundError: If the reserve does not exist (or was exhausted)
        """
        self.get_reserve(reserve_id, owner_id)
        return self.ledger.reserve_balance(reserve_id, owner_id)

    def history(self, reserve_id: int, owner_id: int) -> list[LedgerTransaction]:
        """Ledger movements of a reserve, oldest first.

        Raises:
            NotFoundError: If the reserve does not exist (or was exhausted)
        """
        self.get_reserve(reserve_id, owner_id)
        return self.ledger.list_for_reserve(reserve_id, owner_id)

    def add_funds(
        self,
        reserve_id: int,
        owner_id: int,
        amount,
        description: str | None = None,
        payment_method: PaymentMethod | str = PaymentMethod.TRANSFER,
    ) -> ReserveBalance:
        """Deposit money into a reserve.

        Raises:
            ValidationError: If amount is not positive
            NotFoundError: If the reserve does not exist for this owner
        """
        amount = parse_positive_amount(amount)

        with atomic(self.db, "add_funds"):
            reserve = self.lock_reserve(reserve_id, owner_id)
            self.ledger.record(
                TransactionDirection.INFLOW,
                amount,
                owner_id=owner_id,
                payment_method=payment_method,
                description=description or "Deposit",
                reserve_id=reserve.id,
            )
            balance = self.ledger.reserve_balance(reserve.id, owner_id)
            reserve.value = balance

        self.db.refresh(reserve)
        logger.info(
            f"Added funds to reserve {reserve_id}: amount={amount}, balance={balance}, owner_id={owner_id}"
        )
        return ReserveBalance(reserve=reserve, balance=balance)

    def draw(
        self,
        reserve: Reserve,
        owner_id: int,
        amount: Decimal,
        description: str,
        payment_method: PaymentMethod | str,
        debt_id: int | None = None,
        card_id: int | None = None,
        transaction_date: date | None = None,
    ) -> DrawResult:
        """Take ``amount`` out of a reserve the caller has already locked.

        Must run inside the caller's transaction, after ``lock_reserve``.
        The balance is recomputed from the ledger under that lock; the
        reserve is deleted when the draw leaves it at zero.

        Raises:
            InsufficientReserveBalanceError: If the balance is below amount
        """
        balance = self.ledger.reserve_balance(reserve.id, owner_id)
        if balance < amount:
            raise InsufficientReserveBalanceError(
                available=balance, requested=amount, reserve_id=reserve.id
            )

        entry = self.ledger.record(
            TransactionDirection.OUTFLOW,
            amount,
            owner_id=owner_id,
            payment_method=payment_method,
            description=description,
            transaction_date=transaction_date,
            debt_id=debt_id,
            reserve_id=reserve.id,
            card_id=card_id,
        )

        remaining = self.ledger.reserve_balance(reserve.id, owner_id)
        if remaining <= 0:
            logger.info(f"Reserve {reserve.id} exhausted, deleting (owner_id={owner_id})")
            self.db.delete(reserve)
            self.db.flush()
            return DrawResult(transaction=entry, reserve=None, balance=Decimal("0.00"))

        reserve.value = remaining
        self.db.flush()
        return DrawResult(transaction=entry, reserve=reserve, balance=remaining)

    def list_reserves(self, owner_id: int) -> list[ReserveBalance]:
        """All reserves of an owner ordered by name, with derived balances."""
        reserves = (
            self.db.query(Reserve)
            .filter(Reserve.owner_id == owner_id)
            .order_by(Reserve.name, Reserve.id)
            .all()
        )
        balances = self.ledger.balances_by_reserve(owner_id)
        return [
            ReserveBalance(reserve=r, balance=balances.get(r.id, Decimal("0.00"))) for r in reserves
        ]

    def total_balance(self, owner_id: int) -> Decimal:
        """Sum of derived balances over the owner's existing reserves."""
        return sum((item.balance for item in self.list_reserves(owner_id)), Decimal("0.00"))

    def update_reserve(
        self,
        reserve_id: int,
        owner_id: int,
        name: str | None = None,
        reserve_type: ReserveType | str | None = None,
        description: str | None = None,
    ) -> Reserve:
        """Edit descriptive fields. Funds only move through the ledger.

        Raises:
            ValidationError: If name is blank or type is invalid
            NotFoundError: If the reserve does not exist for this owner
        """
        if name is not None and not name.strip():
            raise ValidationError("name cannot be blank")
        if reserve_type is not None:
            try:
                reserve_type = ReserveType(reserve_type)
            except ValueError as e:
                raise ValidationError(f"Invalid reserve type: {reserve_type!r}") from e

        with atomic(self.db, "update_reserve"):
            reserve = self.lock_reserve(reserve_id, owner_id)
            if name is not None:
                reserve.name = name.strip()
            if reserve_type is not None:
                reserve.reserve_type = reserve_type.value
            if description is not None:
                reserve.description = description

        self.db.refresh(reserve)
        logger.info(f"Updated reserve {reserve_id} (owner_id={owner_id})")
        return reserve

    def delete_reserve(self, reserve_id: int, owner_id: int) -> None:
        """Explicitly delete a reserve. Its ledger rows are kept.

        Raises:
            NotFoundError: If the reserve does not exist for this owner
        """
        with atomic(self.db, "delete_reserve"):
            reserve = self.lock_reserve(reserve_id, owner_id)
            self.db.delete(reserve)
        logger.info(f"Deleted reserve {reserve_id} (owner_id={owner_id})")


__all__ = [
    "ReserveService",
    "ReserveBalance",
    "DrawResult",
    "parse_positive_amount",
]
