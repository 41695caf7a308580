"""Pydantic request and response schemas for the finance API.

Requests accept amounts as numbers or strings, including locale-formatted
ones; services turn them into ``Decimal``. Responses serialize amounts as
strings so no binary float reaches the client.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# "10.50", 10.5 and "1.234,56" (pt_BR) are all accepted
MoneyInput = Decimal | str


# Cards
class CardSummaryResponse(BaseModel):
    """Card as embedded in a debt."""

    id: int
    name: str
    bank: str

    model_config = ConfigDict(from_attributes=True)


class CardResponse(CardSummaryResponse):
    """Full card representation."""

    card_type: str
    credit_limit: Decimal | None = None
    closing_day: int | None = None
    due_day: int | None = None


class CreateCardPayload(BaseModel):
    """Request payload for POST /api/cards."""

    name: str
    bank: str
    card_type: str = "credit"
    credit_limit: MoneyInput | None = None
    closing_day: int | None = None
    due_day: int | None = None


class UpdateCardPayload(BaseModel):
    """Request payload for PUT /api/cards/{id}; omitted fields are kept."""

    name: str | None = None
    bank: str | None = None
    card_type: str | None = None
    credit_limit: MoneyInput | None = None
    closing_day: int | None = None
    due_day: int | None = None


class CardTypeItem(BaseModel):
    value: str
    label: str


class CardTypesResponse(BaseModel):
    """Card types the API accepts, plus suggested banks."""

    types: list[CardTypeItem]
    banks: list[str]


# Debts
class DebtResponse(BaseModel):
    """Debt row as seen by the client."""

    id: int
    name: str
    amount: Decimal
    paid_amount: Decimal
    remaining_amount: Decimal
    is_paid: bool
    start_date: date | None = None
    end_date: date | None = None
    is_recurring: bool
    payment_method: str | None = None
    card: CardSummaryResponse | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CreateDebtPayload(BaseModel):
    """Request payload for POST /api/debts."""

    name: str | None = None
    amount: MoneyInput | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_recurring: bool = False
    payment_method: str | None = None
    card_id: int | None = None
    reserve_id: int | None = Field(None, description="Pay the new debt from this reserve")


class CreateDebtResponse(BaseModel):
    """Response schema for a created debt."""

    id: int
    debt: DebtResponse
    message: str


class PayDebtPayload(BaseModel):
    """Request payload for POST /api/debts/{id}/pay."""

    amount: MoneyInput | None = None
    payment_method: str | None = None
    card_id: int | None = None
    reserve_id: int | None = Field(None, description="Draw the payment from this reserve")
    payment_date: date | None = None


# Reserves
class ReserveResponse(BaseModel):
    """Reserve row with its cached value."""

    id: int
    name: str
    value: Decimal
    reserve_type: str
    description: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReserveWithBalanceResponse(ReserveResponse):
    """Reserve with its ledger-derived balance."""

    balance: Decimal


class PayDebtResponse(BaseModel):
    """Response schema for a debt payment."""

    debt: DebtResponse
    reserve: ReserveResponse | None = None
    fully_paid: bool = Field(alias="fullyPaid")
    reserve_deleted: bool = Field(False, alias="reserveDeleted")

    model_config = ConfigDict(populate_by_name=True)


class CreateReservePayload(BaseModel):
    """Request payload for POST /api/reserves."""

    name: str | None = None
    value: MoneyInput | None = None
    reserve_type: str | None = None
    description: str | None = None


class UpdateReservePayload(BaseModel):
    """Request payload for PUT /api/reserves/{id}."""

    name: str | None = None
    reserve_type: str | None = None
    description: str | None = None


class DepositPayload(BaseModel):
    """Request payload for POST /api/reserves/{id}/deposit."""

    amount: MoneyInput | None = None
    description: str | None = None
    payment_method: str = "transfer"


class BalanceResponse(BaseModel):
    """Derived balance of one reserve."""

    reserve_id: int
    balance: Decimal


class TotalResponse(BaseModel):
    """Sum of balances over all reserves of the owner."""

    total: Decimal


class LedgerTransactionResponse(BaseModel):
    """One ledger movement."""

    id: int
    direction: str
    amount: Decimal
    description: str | None = None
    transaction_date: date
    payment_method: str
    debt_id: int | None = None
    reserve_id: int | None = None
    card_id: int | None = None

    model_config = ConfigDict(from_attributes=True)


# Financial profile
class FinancialProfileResponse(BaseModel):
    """Income and savings plan of the owner."""

    monthly_income: Decimal
    savings_goal: Decimal
    simulation_months: int

    model_config = ConfigDict(from_attributes=True)


class FinancialProfilePayload(BaseModel):
    """Request payload for POST /api/financial-profile; omitted fields reset to defaults."""

    monthly_income: MoneyInput | None = None
    savings_goal: MoneyInput | None = None
    simulation_months: int | None = None


# Payment methods
class PaymentMethodItem(BaseModel):
    value: str
    label: str


class PaymentMethodsResponse(BaseModel):
    """Fixed methods plus the owner's cards."""

    methods: list[PaymentMethodItem]
    cards: list[CardResponse]


class MessageResponse(BaseModel):
    message: str
