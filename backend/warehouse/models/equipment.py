import enum

from sqlalchemy import Column, DateTime, Enum, Index, Integer, String, Text, UniqueConstraint, func

from warehouse.database.base import Base, utcnow


class EquipmentStatus(str, enum.Enum):
    available = "available"
    checked_out = "checked_out"
    booked = "booked"
    maintenance = "maintenance"


class Equipment(Base):
    __tablename__ = "equipment"
    __table_args__ = (
        UniqueConstraint("serial_number", name="uq_equipment_serial_number"),
        Index("ix_equipment_category_status", "category", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    serial_number = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(120), nullable=False, index=True)
    brand = Column(String(120), nullable=True)
    model = Column(String(120), nullable=True)
    status = Column(
        Enum(EquipmentStatus, name="equipment_status"),
        nullable=False,
        default=EquipmentStatus.available,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, onupdate=utcnow, nullable=False)
