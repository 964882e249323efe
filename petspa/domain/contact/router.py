"""Contact router - Public contact form endpoint"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...email_service import ResendEmailSender, get_email_sender
from ...shared.errors import ChannelDeliveryError
from .schemas import ContactResponse, ContactSubmission
from .service import ContactService

router = APIRouter(prefix="/api", tags=["Contact"])


def get_contact_service(email_sender: ResendEmailSender = Depends(get_email_sender)) -> ContactService:
    """Dependency injection for ContactService"""
    return ContactService(email_sender)


@router.post("/contact", response_model=ContactResponse)
async def submit_contact(data: ContactSubmission, service: ContactService = Depends(get_contact_service)):
    """Forward a contact-page message to the shop, reply-to the sender"""
    try:
        return await service.submit(data)
    except ChannelDeliveryError:
        return JSONResponse(status_code=500, content={"error": "Failed to send email. Please try again later."})
