"""Equipment lifecycle engine.

Legal transitions:

    available   --check_out-->  checked_out
    available   --book------->  booked
    checked_out --check_in--->  available
    booked      --check_in--->  available

Every transition runs as one database transaction: the equipment row is read
with ``FOR UPDATE`` and the status write is a compare-and-swap on the status
that was validated, so two callers can never both leave ``available``.
"""
import logging
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from warehouse.core.config import CHECK_IN_USER_NAME
from warehouse.core.errors import InvalidTransitionError, NotFoundError
from warehouse.database.base import to_utc, utcnow
from warehouse.models.admin import Admin
from warehouse.models.equipment import Equipment, EquipmentStatus
from warehouse.models.transaction import EquipmentTransaction, TransactionType
from warehouse.services import ledger

logger = logging.getLogger("warehouse.lifecycle")

CHECK_IN_SOURCE_STATUSES = (EquipmentStatus.checked_out, EquipmentStatus.booked)
HOLDER_TRANSACTION_TYPES = {
    EquipmentStatus.checked_out: TransactionType.check_out,
    EquipmentStatus.booked: TransactionType.booking,
}


def status_value(status) -> str:
    return status.value if isinstance(status, EquipmentStatus) else str(status)


def _require_admin(db: Session, admin_id: int) -> Admin:
    admin = db.query(Admin).filter(Admin.id == admin_id).first()
    if not admin:
        raise NotFoundError("admin", admin_id)
    return admin


def _lock_equipment(db: Session, equipment_id: int) -> Equipment:
    equipment = (
        db.query(Equipment)
        .filter(Equipment.id == equipment_id)
        .with_for_update()
        .first()
    )
    if not equipment:
        raise NotFoundError("equipment", equipment_id)
    return equipment


def _swap_status(
    db: Session,
    equipment: Equipment,
    expected: Iterable[EquipmentStatus],
    new_status: EquipmentStatus,
    action: str,
    now: datetime,
) -> None:
    expected = tuple(expected)
    if equipment.status not in expected:
        raise InvalidTransitionError(status_value(equipment.status), action)

    result = db.execute(
        update(Equipment)
        .where(Equipment.id == equipment.id, Equipment.status.in_(expected))
        .values(status=new_status, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        # another session moved the item between our read and the write
        db.refresh(equipment)
        raise InvalidTransitionError(status_value(equipment.status), action)


def _run(db: Session, operation, *args, **kwargs):
    try:
        row = operation(db, *args, **kwargs)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(row)
    return row


def _check_out(
    db: Session,
    equipment_id: int,
    admin_id: int,
    user_name: str,
    user_contact: Optional[str],
    expected_return_date: Optional[datetime],
    notes: Optional[str],
) -> EquipmentTransaction:
    _require_admin(db, admin_id)
    equipment = _lock_equipment(db, equipment_id)
    now = utcnow()
    _swap_status(db, equipment, [EquipmentStatus.available], EquipmentStatus.checked_out, "check out", now)
    return ledger.record_transaction(
        db,
        equipment_id=equipment.id,
        admin_id=admin_id,
        transaction_type=TransactionType.check_out,
        user_name=user_name,
        user_contact=user_contact,
        notes=notes,
        expected_return_date=expected_return_date,
        occurred_at=now,
    )


def check_out_equipment(
    db: Session,
    equipment_id: int,
    admin_id: int,
    user_name: str,
    user_contact: Optional[str] = None,
    expected_return_date: Optional[datetime] = None,
    notes: Optional[str] = None,
) -> EquipmentTransaction:
    row = _run(db, _check_out, equipment_id, admin_id, user_name, user_contact, to_utc(expected_return_date), notes)
    logger.info("Equipment %s checked out to %s by admin %s.", equipment_id, user_name, admin_id)
    return row


def _book(
    db: Session,
    equipment_id: int,
    admin_id: int,
    user_name: str,
    user_contact: Optional[str],
    expected_return_date: datetime,
    notes: Optional[str],
) -> EquipmentTransaction:
    if expected_return_date is None:
        raise ValueError("expected_return_date is required to book equipment")
    _require_admin(db, admin_id)
    equipment = _lock_equipment(db, equipment_id)
    now = utcnow()
    _swap_status(db, equipment, [EquipmentStatus.available], EquipmentStatus.booked, "book", now)
    return ledger.record_transaction(
        db,
        equipment_id=equipment.id,
        admin_id=admin_id,
        transaction_type=TransactionType.booking,
        user_name=user_name,
        user_contact=user_contact,
        notes=notes,
        expected_return_date=expected_return_date,
        occurred_at=now,
    )


def book_equipment(
    db: Session,
    equipment_id: int,
    admin_id: int,
    user_name: str,
    expected_return_date: datetime,
    user_contact: Optional[str] = None,
    notes: Optional[str] = None,
) -> EquipmentTransaction:
    row = _run(db, _book, equipment_id, admin_id, user_name, user_contact, to_utc(expected_return_date), notes)
    logger.info("Equipment %s booked for %s by admin %s.", equipment_id, user_name, admin_id)
    return row


def _check_in(db: Session, equipment_id: int, admin_id: int, notes: Optional[str]) -> EquipmentTransaction:
    _require_admin(db, admin_id)
    equipment = _lock_equipment(db, equipment_id)
    now = utcnow()
    _swap_status(db, equipment, CHECK_IN_SOURCE_STATUSES, EquipmentStatus.available, "check in", now)
    ledger.close_open_transaction(db, equipment.id, now)
    return ledger.record_transaction(
        db,
        equipment_id=equipment.id,
        admin_id=admin_id,
        transaction_type=TransactionType.check_in,
        user_name=CHECK_IN_USER_NAME,
        notes=notes,
        actual_return_date=now,
        occurred_at=now,
    )


def check_in_equipment(
    db: Session,
    equipment_id: int,
    admin_id: int,
    notes: Optional[str] = None,
) -> EquipmentTransaction:
    row = _run(db, _check_in, equipment_id, admin_id, notes)
    logger.info("Equipment %s checked in by admin %s.", equipment_id, admin_id)
    return row


def update_equipment_status(db: Session, equipment_id: int, status: EquipmentStatus) -> Optional[Equipment]:
    """Overwrite the status without transition checks or a ledger entry.

    Used to move items in and out of maintenance.
    """
    equipment = db.query(Equipment).filter(Equipment.id == equipment_id).first()
    if not equipment:
        return None
    previous = status_value(equipment.status)
    equipment.status = EquipmentStatus(status)
    equipment.updated_at = utcnow()
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(equipment)
    logger.info("Equipment %s status forced from %s to %s.", equipment_id, previous, status_value(equipment.status))
    return equipment


def derive_current_user(equipment: Equipment, transactions: Iterable[EquipmentTransaction]) -> Optional[str]:
    holder_type = HOLDER_TRANSACTION_TYPES.get(equipment.status)
    if holder_type is None:
        return None
    for row in transactions:
        if row.transaction_type == holder_type and row.actual_return_date is None:
            return row.user_name
    return None


def get_equipment_with_transactions(db: Session, equipment_id: int) -> Optional[dict]:
    equipment = db.query(Equipment).filter(Equipment.id == equipment_id).first()
    if not equipment:
        return None
    transactions = ledger.list_transactions(db, equipment_id=equipment_id)
    return {
        "equipment": equipment,
        "transactions": transactions,
        "current_user": derive_current_user(equipment, transactions),
    }
