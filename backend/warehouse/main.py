import logging
import threading

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from warehouse.routes import admins, equipment, transactions
from warehouse.database.base import Base
from warehouse.database.session import engine, SessionLocal
from warehouse import models  # noqa: F401
from warehouse.core.config import (
    ADMIN_EMAIL,
    ADMIN_PASSWORD,
    ADMIN_USERNAME,
    CORS_ORIGINS,
    CORS_ORIGIN_REGEX,
    DB_BOOTSTRAP_MODE,
    parse_cors_origins,
)
from warehouse.core.errors import WarehouseError
from warehouse.core.security import get_password_hash
from warehouse.models.admin import Admin

logger = logging.getLogger("uvicorn.error")
app = FastAPI(title="Equipment Warehouse")

cors_origins = parse_cors_origins(CORS_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_origin_regex=CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)


@app.middleware("http")
async def ensure_utf8_json_charset(request: Request, call_next):
    response = await call_next(request)
    content_type = str(response.headers.get("content-type", ""))
    if content_type.startswith("application/json") and "charset=" not in content_type.lower():
        response.headers["content-type"] = "application/json; charset=utf-8"
    return response


@app.exception_handler(WarehouseError)
async def warehouse_error_handler(request: Request, exc: WarehouseError):
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def ensure_admin_user():
    if not ADMIN_USERNAME or not ADMIN_EMAIL or not ADMIN_PASSWORD:
        return
    db = SessionLocal()
    try:
        existing = db.query(Admin).filter(Admin.username == ADMIN_USERNAME).first()
        if existing:
            if existing.email != ADMIN_EMAIL:
                existing.email = ADMIN_EMAIL
                db.commit()
            return
        seeded = Admin(
            username=ADMIN_USERNAME,
            email=ADMIN_EMAIL,
            password_hash=get_password_hash(ADMIN_PASSWORD),
        )
        db.add(seeded)
        db.commit()
        logger.info("Seeded admin account %s.", ADMIN_USERNAME)
    finally:
        db.close()


def run_db_bootstrap() -> None:
    steps = [
        ("create_all", lambda: Base.metadata.create_all(bind=engine)),
        ("ensure_admin_user", ensure_admin_user),
    ]
    for step_name, step_fn in steps:
        try:
            step_fn()
        except Exception:  # pragma: no cover - startup hardening
            logger.exception("Database bootstrap step failed (step: %s)", step_name)


_bootstrap_lock = threading.Lock()
_bootstrap_started = False


def trigger_db_bootstrap() -> None:
    global _bootstrap_started
    with _bootstrap_lock:
        if _bootstrap_started:
            return
        _bootstrap_started = True

    mode = DB_BOOTSTRAP_MODE
    if mode == "off":
        logger.info("DB bootstrap disabled (DB_BOOTSTRAP_MODE=off).")
        return
    if mode == "sync":
        logger.info("Running DB bootstrap synchronously.")
        run_db_bootstrap()
        return

    logger.info("Running DB bootstrap in background.")
    threading.Thread(target=run_db_bootstrap, daemon=True, name="db-bootstrap").start()


app.include_router(admins.router)
app.include_router(equipment.router)
app.include_router(transactions.router)


@app.get("/")
def root():
    return {"message": "Equipment warehouse API is running"}


@app.get("/health")
def healthcheck():
    return {"status": "ok"}


@app.get("/health/db")
def healthcheck_db():
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
    return {"status": "ok"}


@app.on_event("startup")
def startup_event():
    trigger_db_bootstrap()
