"""Compliance evaluation endpoints consumed by rostering and scheduling."""
import logging
from typing import Union
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from hrcompliance.core.compliance_evaluation import InvalidEvaluationRequest, evaluate_compliance
from hrcompliance.core.compliance_rules import build_blocking_message
from hrcompliance.core.compliance_store import (
    CertificationStore,
    ComplianceDataUnavailable,
    OverrideStore,
)
from hrcompliance.core.config import settings
from hrcompliance.core.database import get_db
from hrcompliance.core.deps import get_certification_store, get_current_user, get_override_store
from hrcompliance.models import Employee, User
from hrcompliance.schemas.compliance import (
    CanAssignResponse,
    ComplianceEvaluationRequest,
    ComplianceResult,
    FailedClosedResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

DATA_UNAVAILABLE_MESSAGE = "Failed to retrieve compliance data. Assignment blocked for safety."
INTERNAL_ERROR_MESSAGE = "Internal server error during compliance evaluation"

FAILED_CLOSED_RESPONSES = {
    500: {"model": FailedClosedResponse, "description": "Compliance could not be determined; treat as blocked"},
}


def failed_closed_response(message: str) -> JSONResponse:
    body = FailedClosedResponse(error=message).model_dump(by_alias=True)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def require_employee_id(request: ComplianceEvaluationRequest) -> str:
    employee_id = (request.employee_id or "").strip()
    if not employee_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="employeeId is required"
        )
    return employee_id


def check_tenant_scope(db: Session, current_user: User, employee_id: str) -> None:
    """Restrict evaluation to the caller's organisation when scoping is enforced."""
    if not settings.ENFORCE_TENANT_SCOPE:
        return
    employee = db.query(Employee).filter(Employee.employee_id == employee_id).first()
    if not employee or employee.organisation_id != current_user.organisation_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee {employee_id} not found"
        )


def run_evaluation(
    request: ComplianceEvaluationRequest,
    current_user: User,
    db: Session,
    certification_store: CertificationStore,
    override_store: OverrideStore,
) -> Union[ComplianceResult, JSONResponse]:
    """Validate, evaluate and map every failure to the fail-closed shape."""
    employee_id = require_employee_id(request)
    check_tenant_scope(db, current_user, employee_id)

    context_type = request.context.context_type if request.context else "general"
    logger.info(
        "Compliance evaluation for employee %s (context=%s) requested by %s",
        employee_id,
        context_type,
        current_user.email,
    )

    try:
        return evaluate_compliance(
            employee_id,
            request.context,
            certification_store,
            override_store,
        )
    except InvalidEvaluationRequest as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except ComplianceDataUnavailable:
        logger.exception("Error fetching certifications for employee %s", employee_id)
        return failed_closed_response(DATA_UNAVAILABLE_MESSAGE)
    except Exception:
        logger.exception("Compliance evaluation error for employee %s", employee_id)
        return failed_closed_response(INTERNAL_ERROR_MESSAGE)


@router.post(
    "/evaluate",
    response_model=ComplianceResult,
    response_model_exclude_none=True,
    responses=FAILED_CLOSED_RESPONSES,
)
def evaluate_employee_compliance(
    request: ComplianceEvaluationRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    certification_store: CertificationStore = Depends(get_certification_store),
    override_store: OverrideStore = Depends(get_override_store),
):
    """
    Evaluate whether an employee is cleared for assignment.

    Returns the verdict with blocking reasons, expiry warnings and any active
    override. A 500 response always carries `failedClosed: true` and must be
    treated as a hard block.
    """
    return run_evaluation(request, current_user, db, certification_store, override_store)


@router.post(
    "/can-assign",
    response_model=CanAssignResponse,
    response_model_exclude_none=True,
    responses=FAILED_CLOSED_RESPONSES,
)
def can_assign_employee(
    request: ComplianceEvaluationRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    certification_store: CertificationStore = Depends(get_certification_store),
    override_store: OverrideStore = Depends(get_override_store),
):
    """
    Assignment gate: allowed when compliant or covered by an active override.
    """
    outcome = run_evaluation(request, current_user, db, certification_store, override_store)
    if isinstance(outcome, JSONResponse):
        return outcome

    return CanAssignResponse(
        allowed=outcome.compliant or outcome.override_active,
        message=build_blocking_message(outcome.blocking_reasons),
        result=outcome,
    )
