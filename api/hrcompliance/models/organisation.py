"""Organisation (tenant) model."""
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from hrcompliance.models.base import Base, new_uuid
from hrcompliance.core.time import utc_now


class Organisation(Base):
    """A tenant. Employees, certifications and overrides are scoped to one."""
    __tablename__ = "organisations"

    organisation_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    legal_name: Mapped[str] = mapped_column(String(255), nullable=False)
    trading_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="Australia/Sydney")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now)
