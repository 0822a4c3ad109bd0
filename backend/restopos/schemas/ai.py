"""AI menu recommendation schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field


class RecommendationRequest(BaseModel):
    """Either a free-text order summary or an order id to summarize."""
    order_summary: Optional[str] = None
    order_id: Optional[str] = None
    dietary_restrictions: Optional[str] = None


class RecommendationResponse(BaseModel):
    recommendations: List[str] = Field(default_factory=list)
    reasoning: str = ""
