"""Certification requirements and display vocabulary for work assignment.

The effective requirement set for an evaluation is the baseline list, plus
any context-conditional additions switched on by the evaluation context,
plus whatever extra keys the caller supplies. Keys are compared
case-insensitively; the first spelling seen wins, so baseline keys keep
their canonical casing in the output.
"""
from typing import Dict, Iterable, List, Optional, Tuple

# Baseline certifications every worker needs before being rostered
REQUIRED_CERTIFICATIONS: Tuple[str, ...] = (
    "police_check",
    "ndis_screening",
    "first_aid",
    "cpr",
    "wwcc",
)

# Extra certifications switched on by evaluation context flags
CONTEXT_CERTIFICATIONS: Dict[str, Tuple[str, ...]] = {
    "driving": ("drivers_license",),
}

CERTIFICATION_DISPLAY_NAMES: Dict[str, str] = {
    "police_check": "Police Check",
    "ndis_screening": "NDIS Worker Screening",
    "first_aid": "First Aid Certificate",
    "cpr": "CPR Certificate",
    "wwcc": "Working With Children Check",
    "drivers_license": "Driver's License",
    "wwcc_vic": "WWCC Victoria",
    "wwcc_nsw": "WWCC NSW",
}

# kind -> (label, severity)
STATUS_DISPLAY: Dict[str, Tuple[str, str]] = {
    "missing": ("Missing", "destructive"),
    "expired": ("Expired", "destructive"),
    "rejected": ("Rejected", "destructive"),
    "pending": ("Pending Approval", "outline"),
    "expiring_soon": ("Expiring Soon", "outline"),
}
DEFAULT_STATUS_DISPLAY = ("Valid", "secondary")


def _union_case_insensitive(*groups: Iterable[str]) -> List[str]:
    seen = set()
    merged = []
    for group in groups:
        for key in group:
            if not isinstance(key, str):
                continue
            cleaned = key.strip()
            if not cleaned:
                continue
            folded = cleaned.lower()
            if folded in seen:
                continue
            seen.add(folded)
            merged.append(cleaned)
    return merged


def build_required_certifications(
    requires_driving: bool = False,
    additional_requirements: Optional[Iterable[str]] = None,
    baseline: Iterable[str] = REQUIRED_CERTIFICATIONS,
) -> List[str]:
    """Compose the ordered, de-duplicated list of required certification keys.

    Never raises for well-typed input; blank or non-string extras are ignored.
    """
    groups = [baseline]
    if requires_driving:
        groups.append(CONTEXT_CERTIFICATIONS["driving"])
    if additional_requirements:
        groups.append(additional_requirements)
    return _union_case_insensitive(*groups)


def get_certification_display_name(cert_type: str) -> str:
    """Human-readable name for a certification key; unknown keys echo back."""
    return CERTIFICATION_DISPLAY_NAMES.get(cert_type.lower(), cert_type)


def get_status_display(kind: str) -> Dict[str, str]:
    label, variant = STATUS_DISPLAY.get(kind, DEFAULT_STATUS_DISPLAY)
    return {"label": label, "variant": variant}


def build_blocking_message(blocking_reasons: Iterable) -> str:
    """Summarize blocking reasons as a single sentence for schedulers.

    Accepts any objects exposing `type` and `status`. Returns an empty string
    when there is nothing blocking.
    """
    issues = [
        f"{get_certification_display_name(reason.type)} ({get_status_display(reason.status)['label']})"
        for reason in blocking_reasons
    ]
    if not issues:
        return ""
    return f"Assignment blocked: {', '.join(issues)}"
