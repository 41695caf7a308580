"""SQLAlchemy declarative base, shared columns and model exports."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, MetaData
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Deterministic constraint names so schema diffs stay stable across databases
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel:
    """Surrogate key plus audit timestamps for every finance table."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )


# Models import Base from here, so they are registered after it exists
from src.models.card import Card, CardType  # noqa: E402
from src.models.debt import Debt, PaymentMethod  # noqa: E402
from src.models.financial_profile import FinancialProfile  # noqa: E402
from src.models.ledger_transaction import (  # noqa: E402
    LedgerTransaction,
    TransactionDirection,
)
from src.models.reserve import Reserve, ReserveType  # noqa: E402
from src.models.user import User  # noqa: E402

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "Card",
    "CardType",
    "Debt",
    "PaymentMethod",
    "FinancialProfile",
    "Reserve",
    "ReserveType",
    "LedgerTransaction",
    "TransactionDirection",
]
