"""Employee model."""
from datetime import datetime, date
from typing import List, Optional, TYPE_CHECKING
from sqlalchemy import String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from hrcompliance.models.base import Base, new_uuid
from hrcompliance.core.time import utc_now

if TYPE_CHECKING:
    from hrcompliance.models.certification import EmployeeCertification


class Employee(Base):
    """Workforce member who can be rostered onto shifts, clients or services."""
    __tablename__ = "employees"

    employee_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    organisation_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organisations.organisation_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now)

    certifications: Mapped[List["EmployeeCertification"]] = relationship(
        "EmployeeCertification", back_populates="employee", cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint("organisation_id", "email", name="uq_employee_org_email"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
