"""
Bearer token handling.

Tokens are issued by the product's auth surface.  This module only decodes
them into a :class:`Principal`; ``create_access_token`` exists for scripts
and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from app.core.config import settings

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


class Principal(BaseModel):
    """Authenticated caller, scoped to one organization."""

    user_id: str
    organization_id: str


def create_access_token(user_id: str, organization_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT carrying the user id (``sub``) and organization id (``org_id``)."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {"sub": user_id, "org_id": organization_id, "exp": expire}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[Principal]:
    """Decode a JWT.  Returns ``None`` when the token is invalid, expired or lacks claims."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    user_id = payload.get("sub")
    organization_id = payload.get("org_id")
    if not user_id or not organization_id:
        return None
    return Principal(user_id=str(user_id), organization_id=str(organization_id))
