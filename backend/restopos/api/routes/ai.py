"""AI menu recommendation routes."""

from fastapi import APIRouter, HTTPException, Request

from restopos.api.deps import AppConfigDep, Repo
from restopos.core.rate_limit import limiter
from restopos.schemas.ai import RecommendationRequest, RecommendationResponse
from restopos.services import order_service
from restopos.services.ai_recommendation_service import build_order_summary, get_ai_service

router = APIRouter()


@router.post("/recommendations", response_model=RecommendationResponse)
@limiter.limit("10/minute")
async def get_recommendations(
    request: Request,
    data: RecommendationRequest,
    repo: Repo,
    config: AppConfigDep,
):
    """Suggest additions to an order. Advisory only; the order is not changed."""
    summary = data.order_summary
    if not summary and data.order_id:
        summary = build_order_summary(order_service.load_manager(repo, config).get(data.order_id))
    if not summary:
        raise HTTPException(status_code=422, detail="Provide order_summary or order_id")

    return await get_ai_service().get_recommendations(summary, data.dietary_restrictions)
