"""Audit log model for tracking privileged changes."""
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from hrcompliance.models.base import Base
from hrcompliance.core.time import utc_now


class AuditLog(Base):
    """Audit trail of override grants and revocations."""
    __tablename__ = "audit_logs"

    log_id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    organisation_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)  # e.g., "Employee"
    entity_id: Mapped[str] = mapped_column(String(36), nullable=False)
    action: Mapped[str] = mapped_column(String(50), nullable=False)  # COMPLIANCE_OVERRIDE_CREATE, ...
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.user_id"), nullable=False)
    changes: Mapped[dict] = mapped_column(JSON, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    user: Mapped["User"] = relationship("User")
