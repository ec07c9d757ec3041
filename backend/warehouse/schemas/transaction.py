from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from warehouse.models.transaction import TransactionType


class CheckOutRequest(BaseModel):
    equipment_id: int
    admin_id: int
    user_name: str = Field(min_length=1, max_length=200)
    user_contact: Optional[str] = Field(default=None, max_length=200)
    expected_return_date: Optional[datetime] = None
    notes: Optional[str] = None


class BookingRequest(BaseModel):
    equipment_id: int
    admin_id: int
    user_name: str = Field(min_length=1, max_length=200)
    user_contact: Optional[str] = Field(default=None, max_length=200)
    expected_return_date: datetime
    notes: Optional[str] = None


class CheckInRequest(BaseModel):
    equipment_id: int
    admin_id: int
    notes: Optional[str] = None


class TransactionOut(BaseModel):
    id: int
    equipment_id: int
    admin_id: int
    transaction_type: TransactionType
    user_name: str
    user_contact: Optional[str] = None
    notes: Optional[str] = None
    transaction_date: datetime
    expected_return_date: Optional[datetime] = None
    actual_return_date: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
