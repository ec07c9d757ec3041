from typing import Optional


class WarehouseError(Exception):
    """Base class for failures raised by the warehouse services.

    Each subclass carries the HTTP status the API answers with; the message is
    sent back to the caller as ``detail``.
    """

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(WarehouseError):
    status_code = 404

    def __init__(self, entity: str, identifier: object):
        super().__init__(f"{entity.capitalize()} with ID {identifier} not found")
        self.entity = entity
        self.identifier = identifier


class InvalidTransitionError(WarehouseError):
    status_code = 409

    def __init__(self, current_status: str, action: str, message: Optional[str] = None):
        super().__init__(message or f"Equipment is currently {current_status}, cannot {action}")
        self.current_status = current_status
        self.action = action


class ConflictError(WarehouseError):
    status_code = 409


class UniqueConstraintError(WarehouseError):
    status_code = 409
