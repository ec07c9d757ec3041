import re

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from warehouse.core.auth import get_current_admin
from warehouse.core.security import create_access_token
from warehouse.database.deps import get_db
from warehouse.models.admin import Admin
from warehouse.schemas.admin import AdminCreate, AdminLogin, AdminOut, AdminToken
from warehouse.services import admins as admin_service

router = APIRouter(prefix="/admins", tags=["Admins"])
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_email(value: str) -> bool:
    if not value:
        return False
    return bool(EMAIL_PATTERN.match(value))


@router.post("/", response_model=AdminOut, status_code=status.HTTP_201_CREATED)
def create_admin(payload: AdminCreate, db: Session = Depends(get_db)):
    email = payload.email.strip()
    if not is_valid_email(email):
        raise HTTPException(status_code=422, detail="Invalid email address.")
    return admin_service.create_admin(db, payload.username, email, payload.password)


@router.post("/login", response_model=AdminToken)
def login_admin(credentials: AdminLogin, db: Session = Depends(get_db)):
    admin = admin_service.login_admin(db, credentials.username, credentials.password)
    if not admin:
        raise HTTPException(status_code=401, detail="Invalid username or password.")
    token = create_access_token({"sub": str(admin.id), "username": admin.username})
    return AdminToken(access_token=token, admin=AdminOut.model_validate(admin))


@router.get("/", response_model=list[AdminOut])
def list_admins(db: Session = Depends(get_db)):
    return admin_service.list_admins(db)


@router.get("/me", response_model=AdminOut)
def me(current_admin: Admin = Depends(get_current_admin)):
    return current_admin
