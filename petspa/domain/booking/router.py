"""Booking router - Booking wizard and service catalog"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...database import get_db
from ...email_service import ResendEmailSender, get_email_sender
from ...services.alert_service import send_form_error_alert
from .schemas import BookingRequest, BookingResponse, ServiceResponse
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Booking"])


def get_booking_service(
    db: Session = Depends(get_db),
    email_sender: ResendEmailSender = Depends(get_email_sender),
) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db, email_sender)


@router.get("/services", response_model=list[ServiceResponse])
async def list_services(service: BookingService = Depends(get_booking_service)):
    """Active catalog services for the wizard"""
    return service.get_services()


@router.post("/booking", response_model=BookingResponse)
async def create_booking(data: BookingRequest, service: BookingService = Depends(get_booking_service)):
    """Book an appointment; confirmation emails are best-effort"""
    try:
        return await service.book(data)
    except Exception as e:
        logger.error(f"❌ Booking failed for {data.ownerInfo.email}: {e}", exc_info=True)
        await send_form_error_alert(
            "booking",
            str(e),
            {
                "email": data.ownerInfo.email,
                "phone": data.ownerInfo.phone,
                "petName": data.petInfo.name,
                "selectedDate": data.selectedDate,
                "selectedTime": data.selectedTime,
            },
        )
        return JSONResponse(
            status_code=500, content={"error": "Booking failed. Please try again or contact us directly."}
        )
