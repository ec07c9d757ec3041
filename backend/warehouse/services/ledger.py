"""Query and reconciliation helpers for the equipment transaction ledger.

A transaction is *open* while it is a check-out or booking whose
``actual_return_date`` is still empty. Equipment status gating keeps at most
one open transaction per item; the helpers here never commit, the caller owns
the unit of work.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from warehouse.database.base import to_utc
from warehouse.models.transaction import OPEN_TRANSACTION_TYPES, EquipmentTransaction, TransactionType

logger = logging.getLogger("warehouse.ledger")


def open_transactions_query(db: Session, equipment_id: int):
    return db.query(EquipmentTransaction).filter(
        EquipmentTransaction.equipment_id == equipment_id,
        EquipmentTransaction.actual_return_date.is_(None),
    )


def has_open_transaction(db: Session, equipment_id: int) -> bool:
    return open_transactions_query(db, equipment_id).first() is not None


def find_open_transaction(db: Session, equipment_id: int) -> Optional[EquipmentTransaction]:
    """Most recently created open check-out or booking for the item, if any."""
    return (
        open_transactions_query(db, equipment_id)
        .filter(EquipmentTransaction.transaction_type.in_(OPEN_TRANSACTION_TYPES))
        .order_by(EquipmentTransaction.created_at.desc(), EquipmentTransaction.id.desc())
        .first()
    )


def close_open_transaction(db: Session, equipment_id: int, returned_at: datetime) -> Optional[EquipmentTransaction]:
    open_row = find_open_transaction(db, equipment_id)
    if open_row is None:
        logger.warning("No open transaction to reconcile for equipment %s; skipping.", equipment_id)
        return None
    open_row.actual_return_date = to_utc(returned_at)
    db.flush()
    logger.info(
        "Closed %s transaction %s for equipment %s.",
        open_row.transaction_type.value,
        open_row.id,
        equipment_id,
    )
    return open_row


def record_transaction(
    db: Session,
    *,
    equipment_id: int,
    admin_id: int,
    transaction_type: TransactionType,
    user_name: str,
    occurred_at: datetime,
    user_contact: Optional[str] = None,
    notes: Optional[str] = None,
    expected_return_date: Optional[datetime] = None,
    actual_return_date: Optional[datetime] = None,
) -> EquipmentTransaction:
    row = EquipmentTransaction(
        equipment_id=equipment_id,
        admin_id=admin_id,
        transaction_type=transaction_type,
        user_name=user_name,
        user_contact=user_contact,
        notes=notes,
        transaction_date=to_utc(occurred_at),
        expected_return_date=to_utc(expected_return_date),
        actual_return_date=to_utc(actual_return_date),
        created_at=to_utc(occurred_at),
    )
    db.add(row)
    db.flush()
    return row


def list_transactions(
    db: Session,
    equipment_id: Optional[int] = None,
    admin_id: Optional[int] = None,
    transaction_type: Optional[TransactionType] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> list[EquipmentTransaction]:
    query = db.query(EquipmentTransaction)
    if equipment_id is not None:
        query = query.filter(EquipmentTransaction.equipment_id == equipment_id)
    if admin_id is not None:
        query = query.filter(EquipmentTransaction.admin_id == admin_id)
    if transaction_type is not None:
        query = query.filter(EquipmentTransaction.transaction_type == transaction_type)
    if start_date is not None:
        query = query.filter(EquipmentTransaction.transaction_date >= to_utc(start_date))
    if end_date is not None:
        query = query.filter(EquipmentTransaction.transaction_date <= to_utc(end_date))
    return query.order_by(EquipmentTransaction.transaction_date.desc(), EquipmentTransaction.id.desc()).all()
