"""Seed minimal reference data."""
import os
import sys
from datetime import timedelta
from sqlalchemy.orm import Session
from hrcompliance.core.config import settings
from hrcompliance.core.compliance_rules import REQUIRED_CERTIFICATIONS, get_certification_display_name
from hrcompliance.core.database import SessionLocal
from hrcompliance.core.roles import ROLE_CODE_TO_DISPLAY, RoleCode
from hrcompliance.core.time import utc_now
from hrcompliance.models import Employee, EmployeeCertification, Organisation, Role, User


def is_production_env() -> bool:
    return settings.ENVIRONMENT.lower() == "production"


def parse_bool_env(value: str | None) -> bool | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y"}:
        return True
    if normalized in {"0", "false", "no", "n"}:
        return False
    return None


def should_seed_demo_data() -> bool:
    override = parse_bool_env(os.getenv("SEED_DEMO_DATA"))
    if override is None:
        return not is_production_env()
    return override


def seed_roles(db: Session) -> dict[str, Role]:
    """Create the canonical role rows if missing. Returns roles keyed by code."""
    roles = {}
    for code, display in ROLE_CODE_TO_DISPLAY.items():
        role = db.query(Role).filter(Role.code == code).first()
        if not role:
            role = Role(code=code, display_name=display, is_active=True)
            db.add(role)
        roles[code] = role
    db.commit()
    return roles


def seed_demo_organisation(db: Session, roles: dict[str, Role]) -> Organisation:
    """Demo tenant with an admin and one fully certified employee."""
    org = db.query(Organisation).filter(Organisation.legal_name == "Demo Care Services Pty Ltd").first()
    if not org:
        org = Organisation(legal_name="Demo Care Services Pty Ltd", trading_name="Demo Care")
        db.add(org)
        db.flush()
        print("✓ Created demo organisation")

    admin = db.query(User).filter(User.email == "admin@example.com").first()
    if not admin:
        admin = User(
            email="admin@example.com",
            full_name="Admin User",
            role_id=roles[RoleCode.ADMIN.value].role_id,
            organisation_id=org.organisation_id,
        )
        db.add(admin)
        print("✓ Created admin user (admin@example.com)")

    employee = db.query(Employee).filter(
        Employee.organisation_id == org.organisation_id,
        Employee.email == "jordan.lee@example.com"
    ).first()
    if not employee:
        employee = Employee(
            organisation_id=org.organisation_id,
            first_name="Jordan",
            last_name="Lee",
            email="jordan.lee@example.com",
        )
        db.add(employee)
        db.flush()
        expiry = (utc_now() + timedelta(days=365)).date()
        for cert_type in REQUIRED_CERTIFICATIONS:
            db.add(EmployeeCertification(
                organisation_id=org.organisation_id,
                employee_id=employee.employee_id,
                name=get_certification_display_name(cert_type),
                type=cert_type,
                status="valid",
                expiry_date=expiry,
            ))
        print("✓ Created demo employee with baseline certifications")

    db.commit()
    return org


def seed_database():
    """Seed essential data."""
    db = SessionLocal()
    try:
        print("Starting database seeding...")
        roles = seed_roles(db)
        print(f"✓ Ensured {len(roles)} roles")

        if should_seed_demo_data():
            seed_demo_organisation(db, roles)
        elif is_production_env():
            print("Skipping demo data in production", file=sys.stderr)
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
