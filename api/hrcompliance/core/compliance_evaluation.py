"""Compliance evaluation for work assignment.

Decides whether an employee is cleared to be assigned in a given context:

1. Lapse stale overrides (best effort; failures are logged and ignored)
2. Load the employee's certification records (failure here fails closed)
3. Compose the required certification types for the context
4. Classify each required type as missing, rejected, pending, expired,
   expiring soon, or fine
5. When anything blocks, look up the newest active override that applies
   to the context
6. Assemble the verdict; `compliant` depends on blocking reasons alone

Errors raised from step 2 are `ComplianceDataUnavailable` and must be mapped
by the caller to a fail-closed response, never to a compliant verdict.
"""
import logging
import math
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from hrcompliance.core.compliance_rules import build_required_certifications
from hrcompliance.core.compliance_store import (
    CertificationRecord,
    CertificationStore,
    OverrideLookupError,
    OverrideRecord,
    OverrideStore,
)
from hrcompliance.core.config import settings
from hrcompliance.core.time import start_of_day, utc_now
from hrcompliance.schemas.compliance import (
    CertificationStatus,
    ComplianceResult,
    EvaluationContext,
    OverrideDetails,
)

logger = logging.getLogger(__name__)

GENERAL_CONTEXT = "general"
SECONDS_PER_DAY = 24 * 60 * 60


class InvalidEvaluationRequest(ValueError):
    """The request cannot be evaluated as given (e.g. no employee id)."""


def days_until(expiry: datetime, now: datetime) -> int:
    """Whole days remaining, rounded up (29.1 days left reports as 30)."""
    return math.ceil((expiry - now).total_seconds() / SECONDS_PER_DAY)


def classify_certification(
    required_type: str,
    record: Optional[CertificationRecord],
    now: datetime,
    warning_days: int,
) -> Optional[CertificationStatus]:
    """Classify one required type against its current record.

    Returns None when the certification is in order. Any returned status
    other than `expiring_soon` is blocking.
    """
    if record is None:
        return CertificationStatus(type=required_type, status="missing")

    status = (record.status or "").lower()
    if status == "rejected":
        return CertificationStatus(type=required_type, status="rejected")
    if status == "pending":
        return CertificationStatus(type=required_type, status="pending")

    if record.expiry_date is None:
        if status == "expired":
            return CertificationStatus(type=required_type, status="expired")
        return None

    expiry = start_of_day(record.expiry_date)
    if expiry < now or status == "expired":
        return CertificationStatus(
            type=required_type,
            status="expired",
            expiry_date=record.expiry_date,
        )
    if expiry < now + timedelta(days=warning_days):
        return CertificationStatus(
            type=required_type,
            status="expiring_soon",
            expiry_date=record.expiry_date,
            days_until_expiry=days_until(expiry, now),
        )
    return None


def override_applies(override_context: str, evaluation_context: str) -> bool:
    return (
        override_context == evaluation_context
        or override_context == GENERAL_CONTEXT
        or evaluation_context == GENERAL_CONTEXT
    )


def select_override(
    overrides: Iterable[OverrideRecord],
    context_type: str,
    now: datetime,
) -> Optional[OverrideRecord]:
    """Pick the most recently created override that is live and in scope."""
    eligible = [
        o for o in overrides
        if o.is_active and o.expires_at > now and override_applies(o.context_type, context_type)
    ]
    if not eligible:
        return None
    return max(eligible, key=lambda o: o.created_at)


def _lapse_overrides(override_store: OverrideStore, now: datetime) -> None:
    try:
        override_store.expire_lapsed(now)
    except Exception:
        # Any failure here is non-fatal
        logger.warning("Override lapse pass failed; continuing evaluation", exc_info=True)


def _find_override(
    override_store: OverrideStore,
    employee_id: str,
    context_type: str,
    now: datetime,
) -> Optional[OverrideRecord]:
    try:
        overrides = override_store.list_active(employee_id, now)
    except OverrideLookupError:
        # Reporting no override keeps the verdict on the blocking side
        logger.warning(
            "Override lookup failed for employee %s; reporting no active override",
            employee_id,
            exc_info=True,
        )
        return None
    return select_override(overrides, context_type, now)


def evaluate_compliance(
    employee_id: str,
    context: Optional[EvaluationContext],
    certification_store: CertificationStore,
    override_store: OverrideStore,
    now: Optional[datetime] = None,
    warning_days: Optional[int] = None,
) -> ComplianceResult:
    """Produce the compliance verdict for one employee and context.

    Raises:
        InvalidEvaluationRequest: employee_id is empty. Nothing is read.
        ComplianceDataUnavailable: certification records could not be loaded.
    """
    if not employee_id or not employee_id.strip():
        raise InvalidEvaluationRequest("employeeId is required")

    context = context or EvaluationContext()
    now = now or utc_now()
    if warning_days is None:
        warning_days = settings.EXPIRY_WARNING_DAYS

    _lapse_overrides(override_store, now)

    records = certification_store.list_for_employee(employee_id)
    by_type = {}
    for record in records:
        by_type[record.type.lower()] = record

    required = build_required_certifications(
        requires_driving=context.requires_driving,
        additional_requirements=context.additional_requirements,
    )

    blocking_reasons: List[CertificationStatus] = []
    expiring_soon: List[CertificationStatus] = []
    for required_type in required:
        outcome = classify_certification(
            required_type, by_type.get(required_type.lower()), now, warning_days
        )
        if outcome is None:
            continue
        if outcome.status == "expiring_soon":
            expiring_soon.append(outcome)
        else:
            blocking_reasons.append(outcome)

    override = None
    if blocking_reasons:
        override = _find_override(override_store, employee_id, context.context_type, now)

    override_details = None
    if override is not None:
        override_details = OverrideDetails(
            id=override.override_id,
            reason=override.reason,
            expires_at=override.expires_at,
            override_by=override.override_by_name,
        )

    logger.debug(
        "Evaluated employee %s (%s): %s blocking, %s expiring, override=%s",
        employee_id,
        context.context_type,
        len(blocking_reasons),
        len(expiring_soon),
        override is not None,
    )

    return ComplianceResult(
        employee_id=employee_id,
        compliant=len(blocking_reasons) == 0,
        blocking_reasons=blocking_reasons,
        expiring_soon=expiring_soon,
        override_active=override is not None,
        override_details=override_details,
        evaluated_at=now,
    )
