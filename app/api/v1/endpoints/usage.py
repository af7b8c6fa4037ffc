"""
AI usage endpoint.
"""

from fastapi import APIRouter, Depends

from app.alternatives.metering import UsageMeter
from app.api.dependencies import get_current_principal, get_usage_meter
from app.core.security import Principal
from app.schemas.usage import UsageSummary

router = APIRouter()


@router.get("/usage", summary="AI usage for the caller's organization.", response_model=UsageSummary, )
def get_usage(principal: Principal = Depends(get_current_principal), meter: UsageMeter = Depends(get_usage_meter), ):
    return meter.summary(principal.organization_id, principal.user_id)
