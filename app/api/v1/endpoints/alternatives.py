"""
Exercise alternatives endpoint.
"""

from fastapi import APIRouter, Depends

from app.alternatives.pipeline import AlternativesPipeline
from app.api.dependencies import get_alternatives_pipeline, get_current_principal
from app.core.security import Principal
from app.schemas.alternatives import AlternativesRequest, AlternativesResponse

router = APIRouter()


@router.post("/alternatives", summary="Suggest substitutes for an exercise.", response_model=AlternativesResponse, )
def get_alternatives(data: AlternativesRequest, principal: Principal = Depends(get_current_principal),
                     pipeline: AlternativesPipeline = Depends(get_alternatives_pipeline), ):
    """
    Rank catalog exercises that can replace ``exercise_id`` with the gym's
    available equipment.

    - Results are cached per organization, exercise, equipment set, filter and limit
    - ``ranking`` tells whether the order was refined by the AI model
    - ``remaining_requests`` is -1 when the caller has no request limit
    """
    return pipeline.run(principal, data).to_response()
