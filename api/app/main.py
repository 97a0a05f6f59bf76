import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from . import models  # noqa: F401  registers tables on Base.metadata
from .config import ALLOWED_ORIGINS, APP_NAME, DB_WAIT_ATTEMPTS, DB_WAIT_DELAY_SECONDS, LOG_LEVEL, UPLOADS_DIR
from .database import Base, SessionLocal, engine
from .routes import include_modular_routers

logging.getLogger("app").setLevel(LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=APP_NAME)
include_modular_routers(app)

UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(UPLOADS_DIR)), name="uploads")

# Credentialed CORS needs explicit origins, not "*".
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def create_schema() -> None:
    Base.metadata.create_all(bind=engine)


def wait_for_db(max_attempts: int = DB_WAIT_ATTEMPTS, delay_seconds: float = DB_WAIT_DELAY_SECONDS) -> None:
    last_err: Exception | None = None
    for _ in range(max_attempts):
        try:
            with SessionLocal() as db:
                db.execute(text("SELECT 1"))
                db.commit()
            return
        except OperationalError as exc:
            last_err = exc
            logger.warning("Database not ready, retrying in %ss", delay_seconds)
            time.sleep(delay_seconds)
    if last_err:
        raise last_err


@app.on_event("startup")
def on_startup() -> None:
    wait_for_db()
    create_schema()


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"[INTERNAL] {request.method} {request.url.path} failed")
    return JSONResponse(status_code=500, content={"detail": "Internal error"})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
