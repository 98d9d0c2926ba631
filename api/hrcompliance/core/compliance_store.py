"""Typed read/write access to the tables the compliance engine depends on.

The evaluator only talks to the two Protocols below. The SQLAlchemy-backed
implementations translate driver errors into the explicit exceptions the
evaluator knows how to handle, so a database outage can never surface as an
empty certification list.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Protocol

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hrcompliance.models.certification import EmployeeCertification
from hrcompliance.models.compliance_override import ComplianceOverride

logger = logging.getLogger(__name__)


class ComplianceStoreError(Exception):
    """Base class for store failures."""


class ComplianceDataUnavailable(ComplianceStoreError):
    """Certification records could not be read; callers must fail closed."""


class OverrideLapseError(ComplianceStoreError):
    """The expiry pass over overrides failed."""


class OverrideLookupError(ComplianceStoreError):
    """Active overrides could not be read."""


@dataclass(frozen=True)
class CertificationRecord:
    employee_id: str
    type: str
    status: str
    expiry_date: Optional[date] = None


@dataclass(frozen=True)
class OverrideRecord:
    override_id: str
    employee_id: str
    reason: str
    context_type: str
    expires_at: datetime
    is_active: bool
    created_at: datetime
    override_by_name: str


class CertificationStore(Protocol):
    def list_for_employee(self, employee_id: str) -> List[CertificationRecord]:
        ...


class OverrideStore(Protocol):
    def expire_lapsed(self, now: datetime) -> int:
        ...

    def list_active(self, employee_id: str, now: datetime) -> List[OverrideRecord]:
        ...


class SqlCertificationStore:
    """Reads the current certification rows for an employee."""

    def __init__(self, db: Session):
        self.db = db

    def list_for_employee(self, employee_id: str) -> List[CertificationRecord]:
        try:
            rows = self.db.query(EmployeeCertification).filter(
                EmployeeCertification.employee_id == employee_id
            ).all()
        except SQLAlchemyError as exc:
            raise ComplianceDataUnavailable(
                f"Failed to load certifications for employee {employee_id}"
            ) from exc

        return [
            CertificationRecord(
                employee_id=row.employee_id,
                type=row.type,
                status=row.status,
                expiry_date=row.expiry_date,
            )
            for row in rows
        ]


class SqlOverrideStore:
    """Lapses stale overrides and reads the live ones."""

    def __init__(self, db: Session):
        self.db = db

    def expire_lapsed(self, now: datetime) -> int:
        """Flip is_active off for every override whose expiry has passed.

        Runs tenant-wide. Returns the number of rows lapsed.
        """
        try:
            result = self.db.execute(
                update(ComplianceOverride)
                .where(
                    ComplianceOverride.is_active == True,  # noqa: E712
                    ComplianceOverride.expires_at < now,
                )
                .values(is_active=False, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise OverrideLapseError("Failed to lapse expired compliance overrides") from exc

        lapsed = result.rowcount or 0
        if lapsed:
            logger.info("Lapsed %s expired compliance override(s)", lapsed)
        return lapsed

    def list_active(self, employee_id: str, now: datetime) -> List[OverrideRecord]:
        """Active, unexpired overrides for an employee, newest first."""
        try:
            rows = self.db.query(ComplianceOverride).filter(
                ComplianceOverride.employee_id == employee_id,
                ComplianceOverride.is_active == True,  # noqa: E712
                ComplianceOverride.expires_at > now,
            ).order_by(ComplianceOverride.created_at.desc()).all()
        except SQLAlchemyError as exc:
            raise OverrideLookupError(
                f"Failed to load overrides for employee {employee_id}"
            ) from exc

        return [
            OverrideRecord(
                override_id=row.override_id,
                employee_id=row.employee_id,
                reason=row.reason,
                context_type=row.context_type,
                expires_at=row.expires_at,
                is_active=row.is_active,
                created_at=row.created_at,
                override_by_name=row.override_by_name,
            )
            for row in rows
        ]
