"""Compliance override management (Admin/Director only)."""
import logging
from datetime import timedelta
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hrcompliance.core.compliance_store import OverrideLapseError, OverrideStore
from hrcompliance.core.config import settings
from hrcompliance.core.database import get_db
from hrcompliance.core.deps import get_current_user, get_override_store
from hrcompliance.core.roles import can_manage_overrides
from hrcompliance.core.time import to_naive_utc, utc_now
from hrcompliance.models import AuditLog, ComplianceOverride, Employee, User
from hrcompliance.schemas.compliance_override import (
    ExpireOverridesResponse,
    OverrideCreate,
    OverrideResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def create_audit_log(
    db: Session,
    entity_type: str,
    entity_id: str,
    action: str,
    user_id: str,
    organisation_id: str | None = None,
    changes: dict | None = None
):
    """Create an audit log entry."""
    audit_log = AuditLog(
        organisation_id=organisation_id,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        user_id=user_id,
        changes=changes
    )
    db.add(audit_log)


def require_override_manager(current_user: User) -> None:
    if not can_manage_overrides(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only Admin or Director can manage compliance overrides"
        )


@router.post(
    "/overrides",
    response_model=OverrideResponse,
    status_code=status.HTTP_201_CREATED
)
def create_override(
    override_data: OverrideCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Grant a time-bound compliance override for an employee.

    Business rules:
    - Only Admins and Directors may grant overrides
    - Expiry must be in the future and within OVERRIDE_MAX_DAYS
    - The employee must exist; the override inherits its organisation
    """
    require_override_manager(current_user)

    now = utc_now()
    expires_at = to_naive_utc(override_data.expires_at)
    if expires_at <= now:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Override expiry must be in the future"
        )
    if expires_at > now + timedelta(days=settings.OVERRIDE_MAX_DAYS):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Override expiry cannot exceed {settings.OVERRIDE_MAX_DAYS} days"
        )

    employee = db.query(Employee).filter(
        Employee.employee_id == override_data.employee_id
    ).first()
    if not employee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee {override_data.employee_id} not found"
        )

    blocked = [
        reason.model_dump(mode="json", by_alias=True, exclude_none=True)
        for reason in override_data.blocked_certifications
    ]
    override = ComplianceOverride(
        organisation_id=employee.organisation_id,
        employee_id=employee.employee_id,
        override_by_user_id=current_user.user_id,
        override_by_name=current_user.full_name or current_user.email or "Unknown",
        override_by_email=current_user.email or "",
        reason=override_data.reason,
        blocked_certifications=blocked,
        context_type=override_data.context_type,
        context_id=override_data.context_id,
        expires_at=expires_at,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(override)
    db.flush()

    create_audit_log(
        db=db,
        entity_type="Employee",
        entity_id=employee.employee_id,
        action="COMPLIANCE_OVERRIDE_CREATE",
        user_id=current_user.user_id,
        organisation_id=employee.organisation_id,
        changes={
            "override_id": override.override_id,
            "reason": override.reason,
            "expires_at": expires_at.isoformat(),
            "context_type": override.context_type,
            "blocked_certifications": blocked,
        }
    )
    db.commit()
    db.refresh(override)

    logger.info(
        "Compliance override %s granted for employee %s by %s until %s",
        override.override_id,
        employee.employee_id,
        current_user.email,
        expires_at.isoformat(),
    )
    return override


@router.post(
    "/overrides/{override_id}/revoke",
    response_model=OverrideResponse
)
def revoke_override(
    override_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Deactivate an override before it expires."""
    require_override_manager(current_user)

    override = db.query(ComplianceOverride).filter(
        ComplianceOverride.override_id == override_id
    ).first()
    if not override:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Override {override_id} not found"
        )
    if not override.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Override is not active"
        )

    now = utc_now()
    override.is_active = False
    override.revoked_at = now
    override.revoked_by_user_id = current_user.user_id
    override.updated_at = now

    create_audit_log(
        db=db,
        entity_type="Employee",
        entity_id=override.employee_id,
        action="COMPLIANCE_OVERRIDE_REVOKE",
        user_id=current_user.user_id,
        organisation_id=override.organisation_id,
        changes={
            "override_id": override.override_id,
            "override_active": {"old": True, "new": False},
        }
    )
    db.commit()
    db.refresh(override)

    logger.info("Compliance override %s revoked by %s", override_id, current_user.email)
    return override


@router.get(
    "/employees/{employee_id}/overrides",
    response_model=List[OverrideResponse]
)
def list_active_overrides(
    employee_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Active, unexpired overrides for an employee, newest first."""
    require_override_manager(current_user)

    return db.query(ComplianceOverride).filter(
        ComplianceOverride.employee_id == employee_id,
        ComplianceOverride.is_active == True,
        ComplianceOverride.expires_at > utc_now()
    ).order_by(ComplianceOverride.created_at.desc()).all()


@router.post(
    "/overrides/expire",
    response_model=ExpireOverridesResponse
)
def expire_overrides(
    current_user: User = Depends(get_current_user),
    override_store: OverrideStore = Depends(get_override_store)
):
    """Run the override lapse pass on demand."""
    require_override_manager(current_user)

    try:
        lapsed = override_store.expire_lapsed(utc_now())
    except OverrideLapseError:
        logger.exception("Manual override lapse pass failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not lapse expired overrides"
        )
    return ExpireOverridesResponse(lapsed=lapsed)
