"""Debt API endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_owner
from src.api.schemas import (
    CardResponse,
    CreateDebtPayload,
    CreateDebtResponse,
    DebtResponse,
    MessageResponse,
    PayDebtPayload,
    PayDebtResponse,
    PaymentMethodItem,
    PaymentMethodsResponse,
    ReserveResponse,
)
from src.models.user import User
from src.services import get_db
from src.services.debt_service import DebtService

router = APIRouter(prefix="/api/debts", tags=["debts"])


@router.get("", response_model=list[DebtResponse])
def list_debts(
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> list[DebtResponse]:
    """List the owner's debts."""
    debts = DebtService(db).list_debts(owner.id)
    return [DebtResponse.model_validate(d) for d in debts]


@router.post("", response_model=CreateDebtResponse, status_code=status.HTTP_201_CREATED)
def create_debt(
    payload: CreateDebtPayload,
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> CreateDebtResponse:
    """
    Create a debt, optionally paid in full from a reserve.

    Returns:
        201: id, debt and outcome message
        404: reserve or card not found
        409: reserve balance too low
        422: missing name/amount or non-positive amount
    """
    result = DebtService(db).create_debt(
        owner_id=owner.id,
        name=payload.name,
        amount=payload.amount,
        start_date=payload.start_date,
        end_date=payload.end_date,
        is_recurring=payload.is_recurring,
        payment_method=payload.payment_method,
        card_id=payload.card_id,
        reserve_id=payload.reserve_id,
    )
    return CreateDebtResponse(
        id=result.debt.id,
        debt=DebtResponse.model_validate(result.debt),
        message=result.message,
    )


@router.get("/payment-methods", response_model=PaymentMethodsResponse)
def payment_methods(
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> PaymentMethodsResponse:
    """Fixed payment methods and the owner's cards."""
    info = DebtService(db).payment_methods(owner.id)
    return PaymentMethodsResponse(
        methods=[PaymentMethodItem(value=value, label=label) for value, label in info.methods],
        cards=[CardResponse.model_validate(c) for c in info.cards],
    )


@router.post("/{debt_id}/pay", response_model=PayDebtResponse)
def pay_debt(
    debt_id: int,
    payload: PayDebtPayload,
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> PayDebtResponse:
    """
    Pay a debt, partially or fully, optionally from a reserve.

    Returns:
        200: updated debt, updated reserve (null if none or exhausted), fullyPaid
        404: debt, reserve or card not found
        409: reserve balance too low, or debt already paid
        422: invalid amount or overpayment
    """
    result = DebtService(db).pay_debt(
        debt_id=debt_id,
        owner_id=owner.id,
        amount=payload.amount,
        payment_method=payload.payment_method,
        card_id=payload.card_id,
        reserve_id=payload.reserve_id,
        payment_date=payload.payment_date,
    )
    return PayDebtResponse(
        debt=DebtResponse.model_validate(result.debt),
        reserve=ReserveResponse.model_validate(result.reserve) if result.reserve else None,
        fully_paid=result.fully_paid,
        reserve_deleted=result.reserve_deleted,
    )


@router.delete("/{debt_id}", response_model=MessageResponse)
def delete_debt(
    debt_id: int,
    owner: User = Depends(get_current_owner),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> MessageResponse:
    """Delete one of the owner's debts."""
    DebtService(db).delete_debt(debt_id, owner.id)
    return MessageResponse(message="Debt deleted")
