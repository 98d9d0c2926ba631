"""Models package."""
from hrcompliance.models.base import Base
from hrcompliance.models.organisation import Organisation
from hrcompliance.models.role import Role
from hrcompliance.models.user import User
from hrcompliance.models.employee import Employee
from hrcompliance.models.certification import EmployeeCertification, CERTIFICATION_STATUSES
from hrcompliance.models.compliance_override import ComplianceOverride
from hrcompliance.models.audit_log import AuditLog

__all__ = [
    "Base",
    "Organisation",
    "Role",
    "User",
    "Employee",
    "EmployeeCertification",
    "CERTIFICATION_STATUSES",
    "ComplianceOverride",
    "AuditLog",
]
