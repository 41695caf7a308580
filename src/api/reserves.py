"""Reserve API endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_owner
from src.api.schemas import (
    BalanceResponse,
    CreateReservePayload,
    DepositPayload,
    LedgerTransactionResponse,
    MessageResponse,
    ReserveResponse,
    ReserveWithBalanceResponse,
    TotalResponse,
    UpdateReservePayload,
)
from src.models.user import User
from src.services import get_db
from src.services.reserve_service import ReserveBalance, ReserveService

router = APIRouter(prefix="/api/reserves", tags=["reserves"])


def _with_balance(item: ReserveBalance) -> ReserveWithBalanceResponse:
    base = ReserveResponse.model_validate(item.reserve)
    return ReserveWithBalanceResponse(**base.model_dump(), balance=item.balance)


@router.get("", response_model=list[ReserveWithBalanceResponse])
def list_reserves(
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> list[ReserveWithBalanceResponse]:
    """List the owner's reserves with their derived balances."""
    return [_with_balance(item) for item in ReserveService(db).list_reserves(owner.id)]


@router.post("", response_model=ReserveResponse, status_code=status.HTTP_201_CREATED)
def create_reserve(
    payload: CreateReservePayload,
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> ReserveResponse:
    """Create a reserve with its initial deposit."""
    reserve = ReserveService(db).create_reserve(
        owner_id=owner.id,
        name=payload.name,
        value=payload.value,
        reserve_type=payload.reserve_type,
        description=payload.description,
    )
    return ReserveResponse.model_validate(reserve)


@router.get("/total", response_model=TotalResponse)
def total_reserves(
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> TotalResponse:
    """Sum of the owner's reserve balances."""
    return TotalResponse(total=ReserveService(db).total_balance(owner.id))


@router.get("/{reserve_id}/balance", response_model=BalanceResponse)
def reserve_balance(
    reserve_id: int,
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> BalanceResponse:
    """Ledger-derived balance of one reserve."""
    balance = ReserveService(db).compute_balance(reserve_id, owner.id)
    return BalanceResponse(reserve_id=reserve_id, balance=balance)


@router.get("/{reserve_id}/transactions", response_model=list[LedgerTransactionResponse])
def reserve_transactions(
    reserve_id: int,
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> list[LedgerTransactionResponse]:
    """Deposits and payments of one reserve, oldest first."""
    return [
        LedgerTransactionResponse.model_validate(t)
        for t in ReserveService(db).history(reserve_id, owner.id)
    ]


@router.post("/{reserve_id}/deposit", response_model=ReserveWithBalanceResponse)
def deposit(
    reserve_id: int,
    payload: DepositPayload,
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> ReserveWithBalanceResponse:
    """Add funds to a reserve."""
    item = ReserveService(db).add_funds(
        reserve_id,
        owner.id,
        payload.amount,
        description=payload.description,
        payment_method=payload.payment_method,
    )
    return _with_balance(item)


@router.put("/{reserve_id}", response_model=ReserveResponse)
def update_reserve(
    reserve_id: int,
    payload: UpdateReservePayload,
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> ReserveResponse:
    """Rename, retype or redescribe a reserve."""
    reserve = ReserveService(db).update_reserve(
        reserve_id,
        owner.id,
        name=payload.name,
        reserve_type=payload.reserve_type,
        description=payload.description,
    )
    return ReserveResponse.model_validate(reserve)


@router.delete("/{reserve_id}", response_model=MessageResponse)
def delete_reserve(
    reserve_id: int,
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> MessageResponse:
    """Delete a reserve explicitly."""
    ReserveService(db).delete_reserve(reserve_id, owner.id)
    return MessageResponse(message="Reserve deleted")
