import os
import tempfile
from pathlib import Path
from uuid import uuid4

import pytest

TEST_DB_FILE = Path(tempfile.gettempdir()) / f"test_warehouse_{uuid4().hex}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_FILE.as_posix()}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ALGORITHM", "HS256")
os.environ.setdefault("ACCESS_TOKEN_EXPIRE_MINUTES", "60")
os.environ.setdefault("DB_BOOTSTRAP_MODE", "off")

from warehouse import models  # noqa: E402,F401
from warehouse.database.base import Base  # noqa: E402
from warehouse.database.session import SessionLocal, engine  # noqa: E402
from warehouse.services import admins, catalog  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    engine.dispose()
    if TEST_DB_FILE.exists():
        TEST_DB_FILE.unlink()
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
        if TEST_DB_FILE.exists():
            TEST_DB_FILE.unlink()


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def admin(db_session):
    suffix = uuid4().hex[:8]
    return admins.create_admin(
        db_session,
        username=f"admin_{suffix}",
        email=f"admin.{suffix}@test.local",
        password="Admin@123",
    )


@pytest.fixture
def make_equipment(db_session):
    def factory(serial_number: str = "CAM001", **overrides):
        fields = {
            "name": "Camera",
            "category": "Video",
            "description": "Test camera",
            "brand": "Canon",
            "model": "XA40",
        }
        fields.update(overrides)
        return catalog.create_equipment(db_session, serial_number=serial_number, **fields)

    return factory
