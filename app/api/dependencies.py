"""
app/api/dependencies.py

Shared FastAPI dependencies.
"""

from __future__ import annotations

from fastapi import Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.config import get_order_import_settings
from app.repositories.order_repository import OrderRepository
from app.services.order_ingestion_service import OrderIngestionService, build_order_ingestion_service
from db.session import get_db

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
    "text/plain",
}


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    is_csv_filename = filename.endswith(".csv")
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return file


def get_order_repository(db: Session = Depends(get_db)) -> OrderRepository:
    return OrderRepository(db, chunk_size=get_order_import_settings().lookup_chunk_size)


def get_order_ingestion_service(db: Session = Depends(get_db)) -> OrderIngestionService:
    return build_order_ingestion_service(db)
