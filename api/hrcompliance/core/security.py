"""Bearer token utilities."""
from datetime import timedelta
from jose import JWTError, jwt
from hrcompliance.core.config import settings
from hrcompliance.core.time import utc_now


def create_access_token(data: dict, expires_minutes: int | None = None) -> str:
    """Create a signed JWT access token for a principal."""
    to_encode = data.copy()
    lifetime = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    to_encode.update({"exp": utc_now() + timedelta(minutes=lifetime)})
    if settings.JWT_ISSUER:
        to_encode["iss"] = settings.JWT_ISSUER
    if settings.JWT_AUDIENCE:
        to_encode["aud"] = settings.JWT_AUDIENCE
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict | None:
    """Decode a JWT, returning None if it is invalid, expired or mis-scoped."""
    try:
        options = {
            "verify_aud": bool(settings.JWT_AUDIENCE),
            "verify_iss": bool(settings.JWT_ISSUER),
        }
        decode_kwargs = {
            "token": token,
            "key": settings.SECRET_KEY,
            "algorithms": [settings.ALGORITHM],
            "options": options,
        }
        if settings.JWT_AUDIENCE:
            decode_kwargs["audience"] = settings.JWT_AUDIENCE
        if settings.JWT_ISSUER:
            decode_kwargs["issuer"] = settings.JWT_ISSUER
        return jwt.decode(**decode_kwargs)
    except JWTError:
        return None
