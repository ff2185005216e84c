# backend/events/views.py
"""
Server-rendered pages: manage list, detail, create/edit form, delete confirmation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.orm import Session

from .db import get_db
from .datetimes import InvalidFormat, to_storage, format_for_display, format_records_for_display
from .pagination import PER_PAGE_OPTIONS, resolve_per_page_index, build_pagination
from .repository import EventRepo
from .schemas import EventForm, EventFormData

router = APIRouter(prefix="/events", tags=["pages"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

FIELD_LABELS = {"name": "Event Name", "location": "Event Location", "start": "Event Start"}

FLASH_KEY = "flash"


def set_flash(request: Request, message: str) -> None:
    request.session[FLASH_KEY] = message


def pop_flash(request: Request) -> Optional[str]:
    """Message queued by the previous request; shown once."""
    return request.session.pop(FLASH_KEY, None)


def _form_errors(exc: ValidationError) -> list[str]:
    """Turn pydantic errors into one readable line per problem."""
    out: list[str] = []
    for err in exc.errors():
        field = str(err["loc"][-1]) if err.get("loc") else ""
        label = FIELD_LABELS.get(field, field)
        kind = err.get("type")
        ctx = err.get("ctx") or {}
        if kind == "string_too_short":
            out.append(f"The {label} field is required.")
        elif kind == "string_too_long":
            out.append(f"The {label} field cannot exceed {ctx.get('max_length')} characters.")
        elif kind == "value_error" and "error" in ctx:
            out.append(str(ctx["error"]))
        else:
            out.append(f"{label}: {err['msg']}")
    return out


def _not_found(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "not_found.html", {}, status_code=404)


def invalid_format_page(request: Request, exc: InvalidFormat) -> HTMLResponse:
    return templates.TemplateResponse(
        request, "invalid_datetime.html", {"message": str(exc)}, status_code=422
    )


def _render_form(request: Request, form: EventFormData, errors: list[str], status_code: int = 200) -> HTMLResponse:
    update_id = form.id or 0
    return templates.TemplateResponse(
        request,
        "create.html",
        {
            "headline": "Update Event Details" if update_id else "Create New Event Record",
            "form": form,
            "errors": errors,
            "form_location": f"/events/submit/{update_id}" if update_id else "/events/submit",
            "cancel_url": f"/events/show/{update_id}" if update_id else "/events/manage",
        },
        status_code=status_code,
    )


# ───────────────────────── list ─────────────────────────────────────
@router.get("", response_class=HTMLResponse)
@router.get("/manage", response_class=HTMLResponse)
def manage(
    request: Request,
    page: Optional[str] = None,
    per_page: Optional[str] = None,
    db: Session = Depends(get_db),
):
    selected = resolve_per_page_index(per_page)
    pagination = build_pagination(EventRepo.count(db), page, PER_PAGE_OPTIONS[selected])
    rows = format_records_for_display(EventRepo.fetch(db, pagination.per_page, pagination.offset))
    return templates.TemplateResponse(
        request,
        "manage.html",
        {
            "rows": rows,
            "pagination": pagination,
            "per_page_options": PER_PAGE_OPTIONS,
            "selected_per_page": selected,
            "flash": pop_flash(request),
        },
    )


# ───────────────────────── detail ───────────────────────────────────
@router.get("/show/{update_id}", response_class=HTMLResponse)
def show(request: Request, update_id: int, db: Session = Depends(get_db)):
    record = EventRepo.get_by_id(db, update_id)
    if not record:
        return _not_found(request)
    return templates.TemplateResponse(
        request,
        "show.html",
        {
            "headline": "Event Information",
            "event": format_for_display(record),
            "update_id": update_id,
            "flash": pop_flash(request),
        },
    )


# ───────────────────────── create / edit ────────────────────────────
@router.get("/create", response_class=HTMLResponse)
@router.get("/create/{update_id}", response_class=HTMLResponse)
def create(request: Request, update_id: int = 0, db: Session = Depends(get_db)):
    if update_id > 0:
        form = EventRepo.get_form_data(db, update_id)
        if not form:
            return _not_found(request)
    else:
        form = EventFormData()
    return _render_form(request, form, [])


@router.post("/submit", response_class=HTMLResponse)
@router.post("/submit/{update_id}", response_class=HTMLResponse)
def submit(
    request: Request,
    update_id: int = 0,
    event_name: str = Form(""),
    event_location: str = Form(""),
    event_start: str = Form(""),
    db: Session = Depends(get_db),
):
    posted = EventFormData(id=update_id or None, name=event_name, location=event_location, start=event_start)
    try:
        payload = EventForm(name=event_name, location=event_location, start=event_start)
        data = {"name": payload.name, "location": payload.location, "start": to_storage(payload.start)}
    except ValidationError as exc:
        return _render_form(request, posted, _form_errors(exc), status_code=422)
    except InvalidFormat as exc:
        return _render_form(request, posted, [str(exc)], status_code=422)

    if update_id > 0:
        record = EventRepo.update(db, update_id, data)
        if not record:
            return _not_found(request)
        set_flash(request, "The record was successfully updated.")
    else:
        record = EventRepo.insert(db, data)
        set_flash(request, "The record was successfully created.")
    return RedirectResponse(url=f"/events/show/{record.id}", status_code=303)


# ───────────────────────── delete ───────────────────────────────────
@router.get("/delete_conf/{update_id}", response_class=HTMLResponse)
def delete_conf(request: Request, update_id: int, db: Session = Depends(get_db)):
    record = EventRepo.get_by_id(db, update_id)
    if not record:
        return _not_found(request)
    return templates.TemplateResponse(
        request,
        "delete_conf.html",
        {"headline": "Delete Record", "event": format_for_display(record), "update_id": update_id},
    )


@router.post("/submit_delete/{update_id}")
def submit_delete(request: Request, update_id: int, db: Session = Depends(get_db)):
    if not EventRepo.delete(db, update_id):
        return _not_found(request)
    set_flash(request, "The record was successfully deleted.")
    return RedirectResponse(url="/events/manage", status_code=303)
