"""
Shared API dependencies.

Reusable FastAPI dependencies for authentication and pipeline wiring.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlmodel import Session

from app.alternatives.metering import UsageMeter
from app.alternatives.pipeline import AlternativesPipeline
from app.core.security import Principal, decode_access_token, oauth2_scheme
from app.db.session import get_db


def get_current_principal(token: Optional[str] = Depends(oauth2_scheme)) -> Principal:
    """Extract and validate the caller from the bearer token."""
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated",
                            headers={"WWW-Authenticate": "Bearer"}, )
    principal = decode_access_token(token)
    if principal is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token",
                            headers={"WWW-Authenticate": "Bearer"}, )
    return principal


def get_alternatives_pipeline(request: Request, db: Session = Depends(get_db)) -> AlternativesPipeline:
    """Pipeline bound to this request's session and the process-wide ranking client."""
    return AlternativesPipeline(db, ranking_client=request.app.state.ranking_client)


def get_usage_meter(db: Session = Depends(get_db)) -> UsageMeter:
    return UsageMeter(db)
