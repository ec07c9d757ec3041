import logging

from sqlalchemy.orm import Session

from warehouse.core.errors import ConflictError
from warehouse.models.equipment import Equipment
from warehouse.models.transaction import EquipmentTransaction
from warehouse.services import ledger

logger = logging.getLogger("warehouse.deletion")


def delete_equipment(db: Session, equipment_id: int) -> bool:
    """Remove an item and its history unless the ledger still has it out.

    The open-transaction check trusts the ledger, not ``Equipment.status``.
    """
    try:
        equipment = (
            db.query(Equipment)
            .filter(Equipment.id == equipment_id)
            .with_for_update()
            .first()
        )
        if not equipment:
            db.rollback()
            return False
        if ledger.has_open_transaction(db, equipment_id):
            raise ConflictError(
                "Cannot delete equipment with active transactions. Please check in equipment first."
            )
        removed = (
            db.query(EquipmentTransaction)
            .filter(EquipmentTransaction.equipment_id == equipment_id)
            .delete(synchronize_session=False)
        )
        db.delete(equipment)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted equipment %s with %s historical transactions.", equipment_id, removed)
    return True
