"""
Receipt record store: create / get / list / delete over SQLAlchemy.

Records are never updated in place. Atomicity is left to the database.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from receipt_store.models import ReceiptModel

logger = logging.getLogger(__name__)


def create(
    db: Session,
    *,
    user_id: str,
    vendor: str,
    date: datetime,
    raw_items: list[str],
    total_amount: float,
    summary_encrypted: str,
    cloudinary_url: Optional[str] = None,
) -> ReceiptModel:
    record = ReceiptModel(
        id=str(uuid.uuid4()),
        user_id=user_id,
        vendor=vendor,
        date=date,
        cloudinary_url=cloudinary_url,
        raw_items=list(raw_items),
        total_amount=total_amount,
        summary_encrypted=summary_encrypted,
        created_at=datetime.now(timezone.utc),
    )
    try:
        db.add(record)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(record)
    logger.info("Stored receipt %s for user %s", record.id, user_id)
    return record


def get(db: Session, receipt_id: str) -> Optional[ReceiptModel]:
    return db.query(ReceiptModel).filter(ReceiptModel.id == receipt_id).first()


def list_for_user(db: Session, user_id: str) -> list[ReceiptModel]:
    rows = (
        db.query(ReceiptModel)
        .filter(ReceiptModel.user_id == user_id)
        .order_by(ReceiptModel.created_at.desc())
        .all()
    )
    logger.info("Found %d receipts for user %s", len(rows), user_id)
    return rows


def delete(db: Session, record: ReceiptModel) -> None:
    try:
        db.delete(record)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info("Deleted receipt %s", record.id)
