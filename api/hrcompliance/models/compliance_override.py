"""Time-bound compliance override granted by a supervisor."""
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Text, ForeignKey, DateTime, Boolean, JSON, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from hrcompliance.models.base import Base, new_uuid
from hrcompliance.core.time import utc_now


class ComplianceOverride(Base):
    """
    Exception allowing an employee to be assigned despite blocking reasons.

    Lifecycle:
    - Created by an Admin or Director with a documented reason and an expiry
      no more than OVERRIDE_MAX_DAYS ahead
    - Lapsed (is_active=False) by the expiry pass once expires_at has passed
    - Revoked manually (is_active=False with revoked_at/revoked_by_user_id)

    Context types: shift, client, service, general. A "general" override
    applies to every context; a "general" evaluation accepts any override.
    """
    __tablename__ = "compliance_overrides"

    override_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    organisation_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organisations.organisation_id", ondelete="CASCADE"),
        nullable=False
    )
    employee_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("employees.employee_id", ondelete="CASCADE"),
        nullable=False
    )

    # Granter snapshot
    override_by_user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.user_id"), nullable=False)
    override_by_name: Mapped[str] = mapped_column(String(255), nullable=False)
    override_by_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    reason: Mapped[str] = mapped_column(Text, nullable=False)
    blocked_certifications: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
        comment="Blocking reasons outstanding when the override was granted"
    )
    context_type: Mapped[str] = mapped_column(String(20), nullable=False, default="general")
    context_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    revoked_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    revoked_by_user_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.user_id"), nullable=True)

    override_by_user = relationship("User", foreign_keys=[override_by_user_id])
    revoked_by_user = relationship("User", foreign_keys=[revoked_by_user_id])

    __table_args__ = (
        CheckConstraint(
            "context_type IN ('shift', 'client', 'service', 'general')",
            name="check_override_context_type_valid"
        ),
        Index("ix_compliance_overrides_employee_active", "employee_id", "is_active"),
        Index("ix_compliance_overrides_expires_at", "expires_at"),
    )

    def __repr__(self):
        return f"<ComplianceOverride(id={self.override_id}, employee_id={self.employee_id}, context={self.context_type}, active={self.is_active})>"
