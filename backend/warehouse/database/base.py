from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Shift aware datetimes to UTC; naive values are taken as UTC already.

    SQLite keeps only the wall-clock part of a bound datetime, so offsets must
    be resolved before the value reaches a query or a column.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)
