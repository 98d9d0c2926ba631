"""Shared FastAPI dependencies."""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session, joinedload
from hrcompliance.core.compliance_store import (
    CertificationStore,
    OverrideStore,
    SqlCertificationStore,
    SqlOverrideStore,
)
from hrcompliance.core.database import get_db
from hrcompliance.core.security import decode_token
from hrcompliance.models.user import User

# auto_error=False so a missing header is reported as 401 rather than 403
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token to an active user or raise 401."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized()

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise _unauthorized("Could not validate credentials")

    email = payload.get("sub")
    if not email:
        raise _unauthorized("Could not validate credentials")

    user = db.query(User).options(joinedload(User.role_ref)).filter(
        User.email == email
    ).first()
    if user is None or not user.is_active:
        raise _unauthorized("Could not validate credentials")
    return user


def get_certification_store(db: Session = Depends(get_db)) -> CertificationStore:
    return SqlCertificationStore(db)


def get_override_store(db: Session = Depends(get_db)) -> OverrideStore:
    return SqlOverrideStore(db)
