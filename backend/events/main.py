from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging
import os

from fastapi import FastAPI, Depends, HTTPException, Request, status, Query
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session
from sqlalchemy import text

# ── local modules ───────────────────────────────────────────────────
from .db import Base, DB_URL, engine, get_db
from .datetimes import InvalidFormat, to_storage, format_for_display, format_records_for_display
from .pagination import PER_PAGE_OPTIONS, DEFAULT_PER_PAGE_INDEX, resolve_per_page, build_pagination
from .repository import EventRepo
from .schemas import EventForm, EventDisplay, EventFormData, EventPage, PerPageOptions
from . import views
# ────────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ───────────────────────── DB migrations (optional) ─────────────────
from alembic import command
from alembic.config import Config

def run_migrations() -> None:
    app_dir = Path(__file__).resolve().parent
    cfg = Config(str(app_dir / "alembic.ini"))
    cfg.set_main_option("script_location", str(app_dir / "migrations"))
    cfg.set_main_option("sqlalchemy.url", DB_URL.replace("%", "%%"))
    command.upgrade(cfg, "head")

@asynccontextmanager
async def lifespan(app: FastAPI):
    if os.getenv("AUTO_MIGRATE") == "1":
        logger.info("Running migrations")
        run_migrations()
    elif os.getenv("CREATE_TABLES", "1") == "1":
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ready")
    yield
    logger.info("Application shutdown")

app = FastAPI(title="Events API", lifespan=lifespan)

# ───────────────────────── CORS ─────────────────────────────────────
from fastapi.middleware.cors import CORSMiddleware

def _clean(s: str | None) -> str | None:
    return s.strip().rstrip("/") if s and s.strip() else None

FRONTEND_ORIGIN = _clean(os.getenv("FRONTEND_ORIGIN")) or "http://localhost:5173"
_raw_extra = os.getenv("EXTRA_CORS_ORIGINS", "")
EXTRA = [x for x in (_clean(p) for p in _raw_extra.split(",")) if x]
allow_origins = ["*"] if "*" in EXTRA else [o for o in {FRONTEND_ORIGIN, *EXTRA} if o]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=86400,
)

# ───────────────────────── Sessions (flash messages) ─────────────────
from starlette.middleware.sessions import SessionMiddleware

SECRET_KEY = os.getenv("SECRET_KEY") or "dev-secret-change-me"
if SECRET_KEY == "dev-secret-change-me":
    logger.warning("SECRET_KEY is not set; using the development default")

app.add_middleware(SessionMiddleware, secret_key=SECRET_KEY, session_cookie="events_session")

# ───────────────────────── Errors ───────────────────────────────────
@app.exception_handler(InvalidFormat)
async def invalid_format_handler(request: Request, exc: InvalidFormat):
    if not request.url.path.startswith("/api/"):
        return views.invalid_format_page(request, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})

# ───────────────────────── Lifecycle & health ───────────────────────
@app.get("/health")
def health_check():
    return {"status": "ok"}

@app.get("/dbcheck")
def dbcheck(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"db": "ok"}

# ───────────────────────── Event CRUD ───────────────────────────────
def _storage_data(payload: EventForm) -> dict:
    return {
        "name": payload.name,
        "location": payload.location,
        "start": to_storage(payload.start),
    }

@app.get("/api/events", response_model=EventPage)
def list_events(
    page: Optional[str] = Query(default=None),
    per_page: Optional[str] = Query(default=None, description="index into the per-page options"),
    db: Session = Depends(get_db),
):
    limit = resolve_per_page(per_page)
    pagination = build_pagination(EventRepo.count(db), page, limit)
    rows = EventRepo.fetch(db, pagination.per_page, pagination.offset)
    return {"rows": format_records_for_display(rows), "pagination": pagination.as_dict()}

@app.get("/api/events/per_page_options", response_model=PerPageOptions)
def per_page_options():
    return {"options": list(PER_PAGE_OPTIONS), "default_index": DEFAULT_PER_PAGE_INDEX}

@app.get("/api/events/{event_id}", response_model=EventDisplay)
def get_event(event_id: int, db: Session = Depends(get_db)):
    record = EventRepo.get_by_id(db, event_id)
    if not record:
        raise HTTPException(status_code=404, detail="Event not found")
    return format_for_display(record)

@app.get("/api/events/{event_id}/form", response_model=EventFormData)
def get_event_form(event_id: int, db: Session = Depends(get_db)):
    form = EventRepo.get_form_data(db, event_id)
    if not form:
        raise HTTPException(status_code=404, detail="Event not found")
    return form

@app.post("/api/events", response_model=EventDisplay, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventForm, db: Session = Depends(get_db)):
    record = EventRepo.insert(db, _storage_data(payload))
    return format_for_display(record)

@app.put("/api/events/{event_id}", response_model=EventDisplay)
def update_event(event_id: int, payload: EventForm, db: Session = Depends(get_db)):
    record = EventRepo.update(db, event_id, _storage_data(payload))
    if not record:
        raise HTTPException(status_code=404, detail="Event not found")
    return format_for_display(record)

@app.delete("/api/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, db: Session = Depends(get_db)):
    if not EventRepo.delete(db, event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# ───────────────────────── HTML pages ───────────────────────────────
app.include_router(views.router)

# Run with `python -m events.main`, or point uvicorn/gunicorn at events.main:app.
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("events.main:app", host="127.0.0.1", port=int(os.getenv("PORT", "8000")), reload=True)
