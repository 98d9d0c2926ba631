"""Compliance override schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel
from hrcompliance.core.time import to_utc_iso
from hrcompliance.schemas.compliance import CamelModel, CertificationStatus, ContextType


class OverrideCreate(CamelModel):
    """Schema for granting a compliance override."""
    employee_id: str = Field(..., min_length=1)
    reason: str = Field(
        ..., min_length=10, description="Justification for the override (min 10 characters)"
    )
    expires_at: datetime = Field(
        ..., description="Must be in the future and within the maximum override window"
    )
    context_type: ContextType = "general"
    context_id: Optional[str] = None
    blocked_certifications: List[CertificationStatus] = Field(default_factory=list)

    @field_validator('reason')
    @classmethod
    def validate_reason_length(cls, v: str) -> str:
        if len(v.strip()) < 10:
            raise ValueError("Reason must be at least 10 characters")
        return v.strip()


class OverrideResponse(CamelModel):
    override_id: str
    organisation_id: str
    employee_id: str
    reason: str
    context_type: str
    context_id: Optional[str] = None
    expires_at: datetime
    is_active: bool
    created_at: datetime
    override_by_user_id: str
    override_by_name: str
    override_by_email: str
    blocked_certifications: list = Field(default_factory=list)
    revoked_at: Optional[datetime] = None
    revoked_by_user_id: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    @field_serializer("expires_at", "created_at", "revoked_at", when_used="json")
    def serialize_timestamps(self, value: Optional[datetime]) -> Optional[str]:
        return to_utc_iso(value)


class ExpireOverridesResponse(CamelModel):
    lapsed: int
