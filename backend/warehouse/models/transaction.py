import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text, func

from warehouse.database.base import Base, utcnow


class TransactionType(str, enum.Enum):
    check_out = "check_out"
    check_in = "check_in"
    booking = "booking"


OPEN_TRANSACTION_TYPES = (TransactionType.check_out, TransactionType.booking)


class EquipmentTransaction(Base):
    __tablename__ = "equipment_transactions"
    __table_args__ = (
        Index("ix_equipment_transactions_open", "equipment_id", "actual_return_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment.id"), nullable=False, index=True)
    admin_id = Column(Integer, ForeignKey("admins.id"), nullable=False, index=True)
    transaction_type = Column(Enum(TransactionType, name="transaction_type"), nullable=False, index=True)
    user_name = Column(String(200), nullable=False)
    user_contact = Column(String(200), nullable=True)
    notes = Column(Text, nullable=True)
    transaction_date = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False, index=True)
    expected_return_date = Column(DateTime(timezone=True), nullable=True)
    actual_return_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)
