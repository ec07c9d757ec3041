import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warehouse.core.errors import UniqueConstraintError
from warehouse.core.security import get_password_hash, verify_password
from warehouse.models.admin import Admin

logger = logging.getLogger("warehouse.admins")


def create_admin(db: Session, username: str, email: str, password: str) -> Admin:
    admin = Admin(
        username=username,
        email=email,
        password_hash=get_password_hash(password),
    )
    try:
        db.add(admin)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise UniqueConstraintError("Username or email already registered.") from exc
    db.refresh(admin)
    logger.info("Created admin %s.", admin.username)
    return admin


def login_admin(db: Session, username: str, password: str) -> Optional[Admin]:
    admin = db.query(Admin).filter(Admin.username == username).first()
    if not admin:
        return None
    if not verify_password(password, admin.password_hash):
        return None
    return admin


def get_admin(db: Session, admin_id: int) -> Optional[Admin]:
    return db.query(Admin).filter(Admin.id == admin_id).first()


def list_admins(db: Session) -> list[Admin]:
    return db.query(Admin).order_by(Admin.username.asc()).all()
