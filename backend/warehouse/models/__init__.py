from warehouse.models.admin import Admin  # noqa: F401
from warehouse.models.equipment import Equipment, EquipmentStatus  # noqa: F401
from warehouse.models.transaction import EquipmentTransaction, TransactionType  # noqa: F401
