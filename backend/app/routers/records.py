# app/routers/records.py
from fastapi import APIRouter, Body, Depends, Path
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session
from typing import Any, Dict
import logging

from app.database.session import get_db
from app.exceptions import ExportError, PersistenceError, RecordValidationError
from app.schemas.records import MAX_RECORD_ID, validate_form
from app.services.registry import EntityDefinition
from app.services.table_view import TableView

logger = logging.getLogger(__name__)


def _error(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _invalid(error: RecordValidationError) -> JSONResponse:
    return JSONResponse({"errors": error.errors}, status_code=422)


def build_router(entity: EntityDefinition) -> APIRouter:
    """One resource family (list/create/update/delete/export) for an entity"""
    router = APIRouter(prefix=f"/{entity.name}", tags=[entity.name])
    label = entity.singular.capitalize()

    @router.get("")
    def list_records(db: Session = Depends(get_db)):
        try:
            return entity.service.list(db)
        except PersistenceError as e:
            logger.error(f"Database error: {e}")
            return _error(f"Failed to fetch {entity.name}")

    @router.post("")
    def create_record(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
        try:
            record = validate_form(entity.form, payload)
            return entity.service.create(db, record)
        except RecordValidationError as e:
            return _invalid(e)
        except PersistenceError as e:
            logger.error(f"Database error: {e}")
            return _error(f"Failed to create {entity.singular}")

    @router.put("/{record_id}")
    def update_record(
        record_id: int = Path(..., ge=0, le=MAX_RECORD_ID),
        payload: Dict[str, Any] = Body(...),
        db: Session = Depends(get_db),
    ):
        try:
            record = validate_form(entity.form, payload)
            entity.service.update(db, record_id, record)
        except RecordValidationError as e:
            return _invalid(e)
        except PersistenceError as e:
            logger.error(f"Database error: {e}")
            return _error(f"Failed to update {entity.singular}")
        return {"message": f"{label} updated successfully"}

    @router.delete("/{record_id}")
    def delete_record(record_id: int = Path(..., ge=0, le=MAX_RECORD_ID), db: Session = Depends(get_db)):
        try:
            entity.service.delete(db, record_id)
        except PersistenceError as e:
            logger.error(f"Database error: {e}")
            return _error(f"Failed to delete {entity.singular}")
        return {"message": f"{label} deleted successfully"}

    @router.get("/export/csv")
    def export_csv(db: Session = Depends(get_db)):
        try:
            table = TableView(entity.title, entity.service.list(db), entity.columns)
        except PersistenceError as e:
            logger.error(f"Database error: {e}")
            return _error(f"Failed to export {entity.name}")
        return Response(
            content=table.to_csv(),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{table.csv_filename}"'},
        )

    @router.get("/export/pdf")
    def export_pdf(db: Session = Depends(get_db)):
        try:
            table = TableView(entity.title, entity.service.list(db), entity.columns)
            content = table.to_pdf()
        except (PersistenceError, ExportError) as e:
            logger.error(f"Export error: {e}")
            return _error(f"Failed to export {entity.name}")
        return Response(
            content=content,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{table.pdf_filename}"'},
        )

    return router
