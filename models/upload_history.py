from uuid import uuid4
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel
from sqlalchemy import DateTime, Text, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, utcnow

class UploadStatus(str, Enum):
    """Outcome of one ingestion attempt."""
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"

class UploadHistoryORM(Base):
    """Audit record of one ingestion attempt."""
    __tablename__ = 'upload_history'

    id: Mapped[str] = mapped_column(primary_key=True, default=lambda: str(uuid4()))
    file_type: Mapped[str] = mapped_column(nullable=False)
    rows_processed: Mapped[int] = mapped_column(nullable=False, default=0)
    total_rows: Mapped[Optional[int]] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(
        SQLEnum(UploadStatus, values_callable=lambda x: [e.value for e in x], native_enum=False),
        default=UploadStatus.SUCCESS
    )
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    uploaded_by: Mapped[Optional[str]] = mapped_column(nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    def __repr__(self):
        return f"<UploadHistory(id={self.id}, file_type={self.file_type}, status={self.status})>"

class UploadHistory(BaseModel):
    id: str
    file_type: str
    rows_processed: int = 0
    total_rows: Optional[int] = None
    status: UploadStatus = UploadStatus.SUCCESS
    error_message: Optional[str] = None
    uploaded_by: Optional[str] = None
    uploaded_at: Optional[datetime] = None
