"""Compliance evaluation request/response schemas.

Field names are snake_case in Python and camelCase on the wire.
"""
from datetime import date, datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel
from hrcompliance.core.time import to_utc_iso

ContextType = Literal["shift", "client", "service", "general"]
CertificationStatusKind = Literal["missing", "expired", "expiring_soon", "valid", "rejected", "pending"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EvaluationContext(CamelModel):
    """What the employee is being assigned to."""
    context_type: ContextType = "general"
    context_id: Optional[str] = None
    requires_driving: bool = False
    additional_requirements: List[str] = Field(default_factory=list)


class ComplianceEvaluationRequest(CamelModel):
    # Optional here so a missing id is reported as 400, not a schema error
    employee_id: Optional[str] = None
    context: Optional[EvaluationContext] = None


class CertificationStatus(CamelModel):
    """One problem or warning for a required certification type."""
    type: str
    status: CertificationStatusKind
    expiry_date: Optional[date] = None
    days_until_expiry: Optional[int] = None


class OverrideDetails(CamelModel):
    id: str
    reason: str
    expires_at: datetime
    override_by: str

    @field_serializer("expires_at", when_used="json")
    def serialize_expires_at(self, value: datetime) -> str:
        return to_utc_iso(value)


class ComplianceResult(CamelModel):
    """Verdict for one employee/context pair.

    `compliant` reflects blocking reasons only; an active override is
    reported separately and never flips it.
    """
    employee_id: str
    compliant: bool
    blocking_reasons: List[CertificationStatus] = Field(default_factory=list)
    expiring_soon: List[CertificationStatus] = Field(default_factory=list)
    override_active: bool = False
    override_details: Optional[OverrideDetails] = None
    evaluated_at: datetime

    @field_serializer("evaluated_at", when_used="json")
    def serialize_evaluated_at(self, value: datetime) -> str:
        return to_utc_iso(value)


class CanAssignResponse(CamelModel):
    allowed: bool
    message: str
    result: ComplianceResult


class FailedClosedResponse(CamelModel):
    error: str
    failed_closed: bool = True
