from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from warehouse.database.deps import get_db
from warehouse.models.equipment import Equipment, EquipmentStatus
from warehouse.schemas.equipment import (
    EquipmentCreate,
    EquipmentDeleteOut,
    EquipmentOut,
    EquipmentStatusUpdate,
    EquipmentUpdate,
    EquipmentWithTransactionsOut,
)
from warehouse.schemas.transaction import TransactionOut
from warehouse.services import catalog, deletion, lifecycle

router = APIRouter(prefix="/equipment", tags=["Equipment"])

REQUIRED_TEXT_FIELDS = ("name", "serial_number", "category")


def normalize_required_text(value: Optional[str], field_name: str) -> str:
    text = (value or "").strip()
    if not text:
        raise HTTPException(status_code=422, detail=f"{field_name} is required.")
    return text


def normalize_optional_text(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text or None


def build_equipment_out(item: Equipment) -> EquipmentOut:
    return EquipmentOut.model_validate(item)


@router.post("/", response_model=EquipmentOut, status_code=status.HTTP_201_CREATED)
def create_equipment(payload: EquipmentCreate, db: Session = Depends(get_db)):
    row = catalog.create_equipment(
        db,
        name=normalize_required_text(payload.name, "name"),
        serial_number=normalize_required_text(payload.serial_number, "serial_number"),
        category=normalize_required_text(payload.category, "category"),
        description=normalize_optional_text(payload.description),
        brand=normalize_optional_text(payload.brand),
        model=normalize_optional_text(payload.model),
        status=payload.status,
    )
    return build_equipment_out(row)


@router.get("/", response_model=list[EquipmentOut])
def list_equipment(
    status_filter: Optional[EquipmentStatus] = Query(default=None, alias="status"),
    category: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    rows = catalog.list_equipment(
        db,
        status=status_filter,
        category=category,
        search=normalize_optional_text(search),
    )
    return [build_equipment_out(row) for row in rows]


@router.get("/categories", response_model=list[str])
def list_categories(db: Session = Depends(get_db)):
    return catalog.get_equipment_categories(db)


@router.get("/serial/{serial_number}", response_model=Optional[EquipmentOut])
def get_equipment_by_serial(serial_number: str, db: Session = Depends(get_db)):
    row = catalog.get_equipment_by_serial(db, serial_number)
    return build_equipment_out(row) if row else None


@router.get("/{equipment_id}", response_model=Optional[EquipmentOut])
def get_equipment(equipment_id: int, db: Session = Depends(get_db)):
    row = catalog.get_equipment_by_id(db, equipment_id)
    return build_equipment_out(row) if row else None


@router.put("/{equipment_id}", response_model=Optional[EquipmentOut])
def update_equipment(equipment_id: int, payload: EquipmentUpdate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    for field_name in REQUIRED_TEXT_FIELDS:
        if field_name in data:
            data[field_name] = normalize_required_text(data[field_name], field_name)
    for field_name in ("description", "brand", "model"):
        if field_name in data:
            data[field_name] = normalize_optional_text(data[field_name])
    if "status" in data and data["status"] is None:
        raise HTTPException(status_code=422, detail="status cannot be null.")

    row = catalog.update_equipment(db, equipment_id, data)
    return build_equipment_out(row) if row else None


@router.delete("/{equipment_id}", response_model=EquipmentDeleteOut)
def delete_equipment(equipment_id: int, db: Session = Depends(get_db)):
    return EquipmentDeleteOut(deleted=deletion.delete_equipment(db, equipment_id))


@router.put("/{equipment_id}/status", response_model=Optional[EquipmentOut])
def update_equipment_status(equipment_id: int, payload: EquipmentStatusUpdate, db: Session = Depends(get_db)):
    row = lifecycle.update_equipment_status(db, equipment_id, payload.status)
    return build_equipment_out(row) if row else None


@router.get("/{equipment_id}/transactions", response_model=Optional[EquipmentWithTransactionsOut])
def get_equipment_with_transactions(equipment_id: int, db: Session = Depends(get_db)):
    result = lifecycle.get_equipment_with_transactions(db, equipment_id)
    if result is None:
        return None
    return EquipmentWithTransactionsOut(
        equipment=build_equipment_out(result["equipment"]),
        transactions=[TransactionOut.model_validate(row) for row in result["transactions"]],
        current_user=result["current_user"],
    )
