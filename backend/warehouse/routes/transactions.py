from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from warehouse.database.deps import get_db
from warehouse.models.transaction import TransactionType
from warehouse.schemas.transaction import BookingRequest, CheckInRequest, CheckOutRequest, TransactionOut
from warehouse.services import ledger, lifecycle

router = APIRouter(prefix="/transactions", tags=["Transactions"])


def clean_optional_text(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text or None


def require_user_name(value: str) -> str:
    text = (value or "").strip()
    if not text:
        raise HTTPException(status_code=422, detail="user_name is required.")
    return text


@router.post("/check-out", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def check_out_equipment(payload: CheckOutRequest, db: Session = Depends(get_db)):
    return lifecycle.check_out_equipment(
        db,
        equipment_id=payload.equipment_id,
        admin_id=payload.admin_id,
        user_name=require_user_name(payload.user_name),
        user_contact=clean_optional_text(payload.user_contact),
        expected_return_date=payload.expected_return_date,
        notes=clean_optional_text(payload.notes),
    )


@router.post("/booking", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def book_equipment(payload: BookingRequest, db: Session = Depends(get_db)):
    return lifecycle.book_equipment(
        db,
        equipment_id=payload.equipment_id,
        admin_id=payload.admin_id,
        user_name=require_user_name(payload.user_name),
        user_contact=clean_optional_text(payload.user_contact),
        expected_return_date=payload.expected_return_date,
        notes=clean_optional_text(payload.notes),
    )


@router.post("/check-in", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def check_in_equipment(payload: CheckInRequest, db: Session = Depends(get_db)):
    return lifecycle.check_in_equipment(
        db,
        equipment_id=payload.equipment_id,
        admin_id=payload.admin_id,
        notes=clean_optional_text(payload.notes),
    )


@router.get("/", response_model=list[TransactionOut])
def list_transactions(
    equipment_id: Optional[int] = None,
    admin_id: Optional[int] = None,
    transaction_type: Optional[TransactionType] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    db: Session = Depends(get_db),
):
    return ledger.list_transactions(
        db,
        equipment_id=equipment_id,
        admin_id=admin_id,
        transaction_type=transaction_type,
        start_date=start_date,
        end_date=end_date,
    )
