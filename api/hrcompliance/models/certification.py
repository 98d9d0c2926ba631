"""Employee certification records read by the compliance engine."""
from datetime import datetime, date
from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from hrcompliance.models.base import Base, new_uuid
from hrcompliance.core.time import utc_now

if TYPE_CHECKING:
    from hrcompliance.models.employee import Employee

CERTIFICATION_STATUSES = ("valid", "compliant", "expiring", "expired", "pending", "rejected")


class EmployeeCertification(Base):
    """
    Current determination for one certification type held by an employee.

    Rows are written by the document review workflow; the compliance engine
    only reads them. `type` is a free-form key compared case-insensitively
    (police_check, ndis_screening, first_aid, cpr, wwcc, drivers_license, ...).
    """
    __tablename__ = "employee_certifications"

    certification_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    organisation_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organisations.organisation_id", ondelete="CASCADE"),
        nullable=False
    )
    employee_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("employees.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    issue_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    expiry_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    document_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    employee: Mapped["Employee"] = relationship("Employee", back_populates="certifications")

    __table_args__ = (
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in CERTIFICATION_STATUSES) + ")",
            name="check_certification_status_valid"
        ),
    )

    def __repr__(self):
        return f"<EmployeeCertification(employee_id={self.employee_id}, type={self.type}, status={self.status}, expiry={self.expiry_date})>"
