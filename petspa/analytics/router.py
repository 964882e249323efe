"""Analytics router - Public event tracking endpoint"""

import logging
from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..database import get_db
from .service import AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


class TrackEventRequest(BaseModel):
    eventType: Literal[
        "page_view",
        "appointment_click",
        "phone_click",
        "form_open",
        "form_start",
        "form_submit",
        "form_abandon",
    ]
    visitorId: Optional[str] = Field(None, max_length=100)
    page: Optional[str] = Field(None, max_length=500)
    occurredAt: Optional[datetime] = None


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    """Dependency injection for AnalyticsService"""
    return AnalyticsService(db)


@router.post("/events", status_code=201)
async def track_event(data: TrackEventRequest, service: AnalyticsService = Depends(get_analytics_service)):
    """Record a page view, CTA click or form funnel step"""
    event = service.record_event(data.eventType, data.visitorId, data.page, data.occurredAt)
    logger.debug(f"Tracked {event.event_type} for visitor {event.visitor_id}")
    return {"success": True}
