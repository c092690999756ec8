"""
SQLAlchemy model for receipt persistence.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, JSON, String, Text

from receipt_store.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReceiptModel(Base):
    __tablename__ = "receipts"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    vendor = Column(String, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    cloudinary_url = Column(String)
    raw_items = Column(JSON, nullable=False)
    total_amount = Column(Float, nullable=False)
    summary_encrypted = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
