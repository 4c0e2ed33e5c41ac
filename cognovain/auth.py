from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from cognovain.config import settings
from cognovain.errors import AuthenticationError
from cognovain.utils.logger import logger

security = HTTPBearer(auto_error=False)

# Cookie the identity provider stores the session token in
SESSION_COOKIE = "__session"


def decode_token(token: str) -> Optional[str]:
    """Verifies an identity-provider session token and returns its subject."""
    options = {"verify_aud": settings.AUTH_JWT_AUDIENCE is not None}
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_JWT_KEY,
            algorithms=settings.AUTH_JWT_ALGORITHMS,
            audience=settings.AUTH_JWT_AUDIENCE,
            issuer=settings.AUTH_JWT_ISSUER,
            options=options,
        )
    except JWTError as e:
        logger.warning(f"Rejected session token: {str(e)}")
        return None

    subject = payload.get("sub")
    if not subject or not isinstance(subject, str):
        return None
    return subject


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Returns the verified user id, or raises AuthenticationError (401)."""
    token = credentials.credentials if credentials else request.cookies.get(SESSION_COOKIE)
    if not token:
        raise AuthenticationError()

    identity = decode_token(token)
    if not identity:
        raise AuthenticationError()
    return identity
