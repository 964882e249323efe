"""Contact service - Forwards contact-page messages to the shop inbox"""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from ...config import BUSINESS_TIMEZONE
from ...email_service import ResendEmailSender
from ...email_templates import contact_notification_template
from ...shared.errors import ChannelDeliveryError
from .schemas import ContactResponse, ContactSubmission

logger = logging.getLogger(__name__)


class ContactService:
    """Service layer for the contact form"""

    def __init__(self, email_sender: ResendEmailSender):
        self.email_sender = email_sender

    @property
    def recipient(self) -> str:
        config = self.email_sender.config
        return config.admin_email or config.reply_to

    async def submit(self, data: ContactSubmission) -> ContactResponse:
        logger.info(f"📥 Contact form from {data.email} ({data.service})")

        if not self.email_sender.configured:
            logger.warning("⚠️ Resend not configured, contact message not forwarded")
            return ContactResponse(message="Message received! We'll get back to you soon.")

        submitted_at = datetime.now(ZoneInfo(BUSINESS_TIMEZONE)).strftime("%B %d, %Y %I:%M %p %Z")
        try:
            response = await self.email_sender.send(
                to=self.recipient,
                subject=f"New Contact Form: {data.service_label} - {data.name}",
                mjml_content=contact_notification_template(
                    name=data.name,
                    email=data.email,
                    service=data.service_label,
                    contact_method=data.contact_method_label,
                    message=data.message,
                    phone=data.phone,
                    submitted_at=submitted_at,
                ),
                reply_to=data.email,
                channel="contact_email",
            )
        except ChannelDeliveryError as e:
            logger.error(f"❌ Contact email failed: {e.reason}")
            raise

        return ContactResponse(
            message="Thank you for your message! We'll get back to you soon.",
            id=(response or {}).get("id"),
        )
