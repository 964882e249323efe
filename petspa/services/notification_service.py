"""
Lead Notification Service
Fans a validated lead out to business SMS, customer SMS, customer email and
business email, and turns the outcomes into the customer-facing message
"""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from ..config import BUSINESS_TIMEZONE, NotificationConfig
from ..domain.leads.schemas import LeadSubmission, NotificationFlags
from ..domain.leads.validation import parse_name_and_phone
from ..email_service import ResendEmailSender
from ..email_templates import BUSINESS_NAME, lead_confirmation_template, new_lead_notification_template
from ..shared.errors import ChannelDeliveryError
from ..shared.validators import digits_only
from .sms_service import SlickTextSmsSender

logger = logging.getLogger(__name__)

BUSINESS_SMS = "business_sms"
CUSTOMER_SMS = "customer_sms"
CUSTOMER_EMAIL = "customer_email"
BUSINESS_EMAIL = "business_email"


class ChannelOutcome(BaseModel):
    channel: str
    attempted: bool = True
    success: bool
    error: Optional[str] = None


class NotificationResults(BaseModel):
    """One outcome slot per channel, always fully populated"""

    business_sms: ChannelOutcome
    customer_sms: ChannelOutcome
    customer_email: ChannelOutcome
    business_email: ChannelOutcome

    def flags(self) -> NotificationFlags:
        return NotificationFlags(
            businessSms=self.business_sms.success,
            customerSms=self.customer_sms.success,
            customerEmail=self.customer_email.success,
            businessEmail=self.business_email.success,
        )


# Acknowledgement clauses in the order they appear in the response message
SUCCESS_CLAUSES = (
    (CUSTOMER_EMAIL, "We've sent you a confirmation email."),
    (CUSTOMER_SMS, "We've sent you a confirmation text message."),
    (BUSINESS_SMS, "Our team has been notified and will contact you soon."),
    (BUSINESS_EMAIL, "Your inquiry details have been forwarded to our front desk."),
)


def build_success_message(results: NotificationResults) -> str:
    """Concatenate one acknowledgement clause per channel that succeeded"""
    parts = ["Thank you for your inquiry!"]
    for channel, clause in SUCCESS_CLAUSES:
        if getattr(results, channel).success:
            parts.append(clause)
    return " ".join(parts)


def business_sms_text(submission: LeadSubmission) -> str:
    requested = f" | Requested: {submission.dateTimeRequested}" if submission.dateTimeRequested else ""
    return (
        f"🔔 NEW LEAD: {submission.nameAndPhone} | {submission.customer_type} | "
        f"Pets: {submission.petsNameAndBreed}{requested}. Check email for details."
    )


def customer_sms_text(customer_name: str) -> str:
    return (
        f"Hi {customer_name}! Thanks for your interest in {BUSINESS_NAME}. "
        "We'll be in touch soon about your pet's needs. Reply STOP to opt out."
    )


class LeadNotificationDispatcher:
    """
    Runs the four notification channels for one lead concurrently.

    Each channel converts its own failures into a ChannelOutcome, so a slow or
    broken provider never prevents the other channels from completing.
    """

    def __init__(
        self,
        config: NotificationConfig,
        sms_sender: Optional[SlickTextSmsSender] = None,
        email_sender: Optional[ResendEmailSender] = None,
    ):
        self.config = config
        self.sms_sender = sms_sender or SlickTextSmsSender(config.sms)
        self.email_sender = email_sender or ResendEmailSender(config.email)

    async def _settle(self, channel: str, operation: Awaitable) -> ChannelOutcome:
        try:
            await operation
            return ChannelOutcome(channel=channel, success=True)
        except ChannelDeliveryError as e:
            logger.error(f"❌ {channel} failed: {e.reason}")
            return ChannelOutcome(channel=channel, success=False, error=e.reason)
        except Exception as e:
            logger.error(f"❌ {channel} failed unexpectedly: {e}", exc_info=True)
            return ChannelOutcome(channel=channel, success=False, error=str(e))

    async def _skipped(self, channel: str, reason: str) -> ChannelOutcome:
        logger.info(f"ℹ️ {channel} skipped: {reason}")
        return ChannelOutcome(channel=channel, attempted=False, success=False, error=reason)

    async def _send_business_email(self, submission: LeadSubmission, phone: str, submitted_at: str):
        if not self.config.email.admin_email:
            raise ChannelDeliveryError(BUSINESS_EMAIL, "ADMIN_EMAIL not configured")
        return await self.email_sender.send(
            to=self.config.email.admin_email,
            subject=f"New Lead: {submission.nameAndPhone}",
            mjml_content=new_lead_notification_template(
                name_and_phone=submission.nameAndPhone,
                email=submission.email,
                customer_type=submission.customer_type,
                pets=submission.petsNameAndBreed,
                message=submission.message,
                customer_phone_digits=digits_only(phone),
                date_time_requested=submission.dateTimeRequested,
                submitted_at=submitted_at,
            ),
            reply_to=submission.email,
            channel=BUSINESS_EMAIL,
        )

    async def dispatch(self, submission: LeadSubmission) -> NotificationResults:
        contact = parse_name_and_phone(submission.nameAndPhone)
        submitted_at = datetime.now(ZoneInfo(BUSINESS_TIMEZONE)).strftime("%B %d, %Y %I:%M %p %Z")

        if contact.can_text:
            customer_sms = self._settle(
                CUSTOMER_SMS,
                self.sms_sender.send(contact.phone, customer_sms_text(contact.name), channel=CUSTOMER_SMS),
            )
        else:
            customer_sms = self._skipped(CUSTOMER_SMS, "No valid phone number provided")

        business_sms, customer_sms, customer_email, business_email = await asyncio.gather(
            self._settle(
                BUSINESS_SMS,
                self.sms_sender.send(
                    self.config.sms.business_phone, business_sms_text(submission), channel=BUSINESS_SMS
                ),
            ),
            customer_sms,
            self._settle(
                CUSTOMER_EMAIL,
                self.email_sender.send(
                    to=submission.email,
                    subject=f"Welcome to {BUSINESS_NAME}! 🐾",
                    mjml_content=lead_confirmation_template(
                        customer_name=contact.name,
                        customer_type=submission.customer_type,
                        pets=submission.petsNameAndBreed,
                        message=submission.message,
                        email=submission.email,
                        date_time_requested=submission.dateTimeRequested,
                    ),
                    reply_to=self.config.email.reply_to,
                    channel=CUSTOMER_EMAIL,
                ),
            ),
            self._settle(BUSINESS_EMAIL, self._send_business_email(submission, contact.phone, submitted_at)),
        )

        results = NotificationResults(
            business_sms=business_sms,
            customer_sms=customer_sms,
            customer_email=customer_email,
            business_email=business_email,
        )
        logger.info(
            "Notification results: "
            + ", ".join(
                f"{o.channel}={'✅ Sent' if o.success else '❌ Failed' if o.attempted else '⏭️ Skipped'}"
                for o in (business_sms, customer_sms, customer_email, business_email)
            )
        )
        return results
