from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from warehouse.models.equipment import EquipmentStatus
from warehouse.schemas.transaction import TransactionOut


class EquipmentBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    serial_number: str = Field(min_length=1, max_length=120)
    description: Optional[str] = None
    category: str = Field(min_length=1, max_length=120)
    brand: Optional[str] = Field(default=None, max_length=120)
    model: Optional[str] = Field(default=None, max_length=120)


class EquipmentCreate(EquipmentBase):
    status: EquipmentStatus = EquipmentStatus.available


class EquipmentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    serial_number: Optional[str] = Field(default=None, min_length=1, max_length=120)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=120)
    brand: Optional[str] = Field(default=None, max_length=120)
    model: Optional[str] = Field(default=None, max_length=120)
    status: Optional[EquipmentStatus] = None


class EquipmentStatusUpdate(BaseModel):
    status: EquipmentStatus


class EquipmentOut(EquipmentBase):
    id: int
    status: EquipmentStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EquipmentDeleteOut(BaseModel):
    deleted: bool


class EquipmentWithTransactionsOut(BaseModel):
    equipment: EquipmentOut
    transactions: list[TransactionOut]
    current_user: Optional[str] = None
