"""Role codes and permission helpers."""
from __future__ import annotations

import enum
from typing import Optional, Dict, TYPE_CHECKING

if TYPE_CHECKING:
    from hrcompliance.models.user import User


class RoleCode(str, enum.Enum):
    ADMIN = "ADMIN"
    DIRECTOR = "DIRECTOR"
    MANAGER = "MANAGER"
    STAFF = "STAFF"


ROLE_CODE_TO_DISPLAY: Dict[str, str] = {
    RoleCode.ADMIN.value: "Admin",
    RoleCode.DIRECTOR.value: "Director",
    RoleCode.MANAGER.value: "Manager",
    RoleCode.STAFF.value: "Staff",
}

OVERRIDE_MANAGER_ROLES = frozenset({RoleCode.ADMIN.value, RoleCode.DIRECTOR.value})


def get_user_role_code(user: "User") -> Optional[str]:
    if user.role_ref:
        return user.role_ref.code
    return None


def can_manage_overrides(user: "User") -> bool:
    """Only Admins and Directors may grant, revoke or list compliance overrides."""
    return get_user_role_code(user) in OVERRIDE_MANAGER_ROLES
