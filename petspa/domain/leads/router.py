"""Lead router - Public appointment-request intake"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...config import load_notification_config
from ...database import get_db
from ...services.alert_service import send_form_error_alert
from ...services.notification_service import LeadNotificationDispatcher
from ...shared.errors import ValidationError
from .schemas import LeadIntakeResponse
from .service import LeadService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Leads"])

GENERIC_ERROR = "Something went wrong. Please try again later."


def get_notification_dispatcher() -> LeadNotificationDispatcher:
    """Dependency injection for the four-channel dispatcher"""
    return LeadNotificationDispatcher(load_notification_config())


def get_lead_service(
    db: Session = Depends(get_db),
    dispatcher: LeadNotificationDispatcher = Depends(get_notification_dispatcher),
) -> LeadService:
    """Dependency injection for LeadService"""
    return LeadService(db, dispatcher)


@router.post("/leads", response_model=LeadIntakeResponse)
async def submit_lead(request: Request, service: LeadService = Depends(get_lead_service)):
    """
    Accept a lead from the appointment popup.

    Returns 200 whenever the submission is valid, even if every notification
    channel failed; the ``notifications`` flags say which ones went out.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        logger.error(f"❌ Lead submission with unreadable body: {e}")
        return JSONResponse(status_code=500, content={"error": GENERIC_ERROR})

    try:
        return await service.submit_lead(payload)
    except ValidationError as e:
        return JSONResponse(status_code=400, content=e.to_response())
    except Exception as e:
        logger.error(f"❌ Lead submission failed: {e}", exc_info=True)
        await send_form_error_alert("leads", str(e), payload if isinstance(payload, dict) else None)
        return JSONResponse(status_code=500, content={"error": GENERIC_ERROR})
