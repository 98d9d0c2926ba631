"""Pytest fixtures for API testing."""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hrcompliance.main import app
from hrcompliance.core.compliance_store import ComplianceDataUnavailable, OverrideLapseError
from hrcompliance.core.database import get_db
from hrcompliance.core.deps import get_certification_store, get_override_store
from hrcompliance.core.roles import RoleCode
from hrcompliance.core.security import create_access_token
from hrcompliance.core.time import utc_now
from hrcompliance.models import (
    Base, ComplianceOverride, Employee, EmployeeCertification, Organisation, User
)
from hrcompliance.seed import seed_roles

# In-memory SQLite for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


class FailingCertificationStore:
    """Certification store whose backend is unreachable."""

    def list_for_employee(self, employee_id):
        raise ComplianceDataUnavailable("connection refused")


class BrokenCertificationStore:
    """Certification store with a programming error."""

    def list_for_employee(self, employee_id):
        raise RuntimeError("unexpected None in certification row")


class FailingLapseOverrideStore:
    """Override store whose lapse pass fails but reads succeed (no overrides)."""

    def __init__(self):
        self.lapse_calls = 0

    def expire_lapsed(self, now):
        self.lapse_calls += 1
        raise OverrideLapseError("lock timeout")

    def list_active(self, employee_id, now):
        return []


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Test client with database override."""
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def roles(db_session):
    return seed_roles(db_session)


@pytest.fixture
def organisation(db_session):
    org = Organisation(legal_name="Acme Support Services Pty Ltd", trading_name="Acme Support")
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


@pytest.fixture
def other_organisation(db_session):
    org = Organisation(legal_name="Elsewhere Care Ltd")
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


def _make_user(db_session, email, full_name, role, organisation):
    user = User(
        email=email,
        full_name=full_name,
        role_id=role.role_id,
        organisation_id=organisation.organisation_id,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session, roles, organisation):
    return _make_user(db_session, "admin@example.com", "Alex Admin", roles[RoleCode.ADMIN.value], organisation)


@pytest.fixture
def director_user(db_session, roles, organisation):
    return _make_user(db_session, "director@example.com", "Dana Director", roles[RoleCode.DIRECTOR.value], organisation)


@pytest.fixture
def staff_user(db_session, roles, organisation):
    return _make_user(db_session, "scheduler@example.com", "Sam Scheduler", roles[RoleCode.STAFF.value], organisation)


@pytest.fixture
def admin_headers(admin_user):
    token = create_access_token(data={"sub": admin_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def director_headers(director_user):
    token = create_access_token(data={"sub": director_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(staff_user):
    token = create_access_token(data={"sub": staff_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def employee(db_session, organisation):
    emp = Employee(
        organisation_id=organisation.organisation_id,
        first_name="Riley",
        last_name="Nguyen",
        email="riley.nguyen@example.com",
    )
    db_session.add(emp)
    db_session.commit()
    db_session.refresh(emp)
    return emp


@pytest.fixture
def add_certification(db_session):
    """Factory: add_certification(employee, type, status="valid", expires_in_days=None)."""
    def _add(employee, cert_type, status="valid", expires_in_days=None):
        expiry = None
        if expires_in_days is not None:
            expiry = (utc_now() + timedelta(days=expires_in_days)).date()
        cert = EmployeeCertification(
            organisation_id=employee.organisation_id,
            employee_id=employee.employee_id,
            name=cert_type.replace("_", " ").title(),
            type=cert_type,
            status=status,
            expiry_date=expiry,
        )
        db_session.add(cert)
        db_session.commit()
        return cert
    return _add


@pytest.fixture
def add_override(db_session):
    """Factory: add_override(employee, granted_by, ...) with offsets from now."""
    def _add(
        employee,
        granted_by,
        context_type="general",
        expires_in=timedelta(days=5),
        created_ago=timedelta(days=1),
        is_active=True,
        reason="Certificate renewal lodged, awaiting issue",
    ):
        now = utc_now()
        override = ComplianceOverride(
            organisation_id=employee.organisation_id,
            employee_id=employee.employee_id,
            override_by_user_id=granted_by.user_id,
            override_by_name=granted_by.full_name,
            override_by_email=granted_by.email,
            reason=reason,
            context_type=context_type,
            expires_at=now + expires_in,
            is_active=is_active,
            created_at=now - created_ago,
            updated_at=now - created_ago,
        )
        db_session.add(override)
        db_session.commit()
        db_session.refresh(override)
        return override
    return _add


@pytest.fixture
def fully_certified_employee(employee, add_certification):
    for cert_type in ("police_check", "ndis_screening", "first_aid", "cpr", "wwcc"):
        add_certification(employee, cert_type, status="valid")
    return employee


@pytest.fixture
def failing_certification_store():
    app.dependency_overrides[get_certification_store] = lambda: FailingCertificationStore()
    yield
    app.dependency_overrides.pop(get_certification_store, None)


@pytest.fixture
def failing_lapse_store():
    store = FailingLapseOverrideStore()
    app.dependency_overrides[get_override_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_override_store, None)


@pytest.fixture
def broken_certification_store():
    app.dependency_overrides[get_certification_store] = lambda: BrokenCertificationStore()
    yield
    app.dependency_overrides.pop(get_certification_store, None)


@pytest.fixture
def unguarded_client(db_session):
    """Test client that returns 500 responses instead of re-raising server errors."""
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def broken_store_dependency():
    def build_store():
        raise RuntimeError("store construction failed")

    app.dependency_overrides[get_certification_store] = build_store
    yield
    app.dependency_overrides.pop(get_certification_store, None)
