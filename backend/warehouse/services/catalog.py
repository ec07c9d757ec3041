import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warehouse.core.errors import InvalidTransitionError, UniqueConstraintError
from warehouse.database.base import utcnow
from warehouse.models.equipment import Equipment, EquipmentStatus
from warehouse.services import ledger
from warehouse.services.lifecycle import status_value

logger = logging.getLogger("warehouse.catalog")

EDITABLE_FIELDS = ("name", "serial_number", "description", "category", "brand", "model", "status")
# Catalog edits may only toggle maintenance; the other states carry ledger records.
CATALOG_STATUSES = {EquipmentStatus.available, EquipmentStatus.maintenance}


def create_equipment(
    db: Session,
    name: str,
    serial_number: str,
    category: str,
    description: Optional[str] = None,
    brand: Optional[str] = None,
    model: Optional[str] = None,
    status: EquipmentStatus = EquipmentStatus.available,
) -> Equipment:
    row = Equipment(
        name=name,
        serial_number=serial_number,
        category=category,
        description=description,
        brand=brand,
        model=model,
        status=EquipmentStatus(status),
    )
    try:
        db.add(row)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise UniqueConstraintError(f"Serial number {serial_number} already registered.") from exc
    db.refresh(row)
    logger.info("Registered equipment %s (%s).", row.id, row.serial_number)
    return row


def list_equipment(
    db: Session,
    status: Optional[EquipmentStatus] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> list[Equipment]:
    query = db.query(Equipment)
    if status is not None:
        query = query.filter(Equipment.status == EquipmentStatus(status))
    if category:
        query = query.filter(Equipment.category == category)
    if search:
        term = f"%{search}%"
        query = query.filter(
            or_(
                Equipment.name.ilike(term),
                Equipment.serial_number.ilike(term),
                Equipment.description.ilike(term),
            )
        )
    return query.order_by(Equipment.id.asc()).all()


def get_equipment_by_id(db: Session, equipment_id: int) -> Optional[Equipment]:
    return db.query(Equipment).filter(Equipment.id == equipment_id).first()


def get_equipment_by_serial(db: Session, serial_number: str) -> Optional[Equipment]:
    return db.query(Equipment).filter(Equipment.serial_number == serial_number).first()


def get_equipment_categories(db: Session) -> list[str]:
    rows = db.query(Equipment.category).distinct().order_by(Equipment.category.asc()).all()
    return [row[0] for row in rows]


def _check_catalog_status_change(db: Session, equipment: Equipment, new_status: EquipmentStatus) -> None:
    if new_status == equipment.status:
        return
    current = status_value(equipment.status)
    if new_status not in CATALOG_STATUSES or equipment.status not in CATALOG_STATUSES:
        raise InvalidTransitionError(
            current,
            f"change to {new_status.value}",
            message=(
                f"Equipment is currently {current}; status {new_status.value} can only be "
                "reached through check-out, booking or check-in."
            ),
        )
    if ledger.has_open_transaction(db, equipment.id):
        raise InvalidTransitionError(
            current,
            f"change to {new_status.value}",
            message=f"Equipment is currently {current} with an open transaction; check it in first.",
        )


def update_equipment(db: Session, equipment_id: int, changes: dict) -> Optional[Equipment]:
    """Apply a partial catalog edit.

    ``changes`` holds only the fields the caller sent; ``description``,
    ``brand`` and ``model`` may be reset with ``None``. An empty edit leaves the
    row, timestamps included, untouched.
    """
    equipment = db.query(Equipment).filter(Equipment.id == equipment_id).first()
    if not equipment:
        return None
    data = {key: value for key, value in changes.items() if key in EDITABLE_FIELDS}
    if not data:
        return equipment

    try:
        if "status" in data:
            data["status"] = EquipmentStatus(data["status"])
            _check_catalog_status_change(db, equipment, data["status"])
        for key, value in data.items():
            setattr(equipment, key, value)
        equipment.updated_at = utcnow()
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise UniqueConstraintError(f"Serial number {data.get('serial_number')} already registered.") from exc
    except Exception:
        db.rollback()
        raise
    db.refresh(equipment)
    return equipment
