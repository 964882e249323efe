"""Lead service - Intake and admin operations for appointment-request leads"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import BUSINESS_TIMEZONE
from ...models import Lead
from ...services.notification_service import LeadNotificationDispatcher, build_success_message
from .reports import leads_by_source, repeat_customer_report
from .repository import LeadRepository
from .schemas import LeadIntakeResponse, LeadSubmission
from .validation import parse_name_and_phone, validate_lead_submission

logger = logging.getLogger(__name__)


class LeadService:
    """Service layer for lead business logic"""

    def __init__(self, db: Session, dispatcher: Optional[LeadNotificationDispatcher] = None):
        self.db = db
        self.repo = LeadRepository()
        self.dispatcher = dispatcher

    def record_lead(self, submission: LeadSubmission) -> Optional[int]:
        """
        Persist a validated lead for the admin dashboard.

        A storage failure is logged and returns None; the customer still gets
        their notifications.
        """
        contact = parse_name_and_phone(submission.nameAndPhone)
        try:
            lead = self.repo.create_lead(
                self.db,
                # Without a " - " separator the parsed name is only the first word
                name=contact.name if contact.phone else submission.nameAndPhone,
                name_and_phone=submission.nameAndPhone,
                email=submission.email,
                phone=contact.phone or None,
                new_customer=submission.newCustomer,
                pets_name_and_breed=submission.petsNameAndBreed,
                date_time_requested=submission.dateTimeRequested,
                message=submission.message,
                source="appointment_form",
                status="new",
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to store lead for {submission.email}: {e}")
            return None

        logger.info(f"✅ Lead {lead.id} stored for {submission.email}")
        return lead.id

    async def submit_lead(self, payload: Any) -> LeadIntakeResponse:
        """Validate, store and notify. Raises ValidationError for bad input."""
        submission = validate_lead_submission(payload)
        logger.info(f"📥 New lead from {submission.email} ({submission.customer_type})")

        lead_id = self.record_lead(submission)
        results = await self.dispatcher.dispatch(submission)

        return LeadIntakeResponse(
            success=True,
            message=build_success_message(results),
            leadId=lead_id,
            notifications=results.flags(),
        )

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def get_leads(self, status: Optional[str] = None) -> list[Lead]:
        return self.repo.get_leads(self.db, status)

    def get_lead(self, lead_id: int) -> Lead:
        lead = self.repo.get_lead_by_id(self.db, lead_id)
        if not lead:
            raise HTTPException(status_code=404, detail="Lead not found")
        return lead

    def update_status(self, lead_id: int, status: str) -> Lead:
        lead = self.get_lead(lead_id)
        logger.info(f"🔄 Lead {lead_id} status {lead.status} -> {status}")
        return self.repo.update_status(self.db, lead, status)

    def delete_lead(self, lead_id: int) -> None:
        lead = self.get_lead(lead_id)
        self.repo.delete_lead(self.db, lead)
        logger.info(f"🗑️ Lead {lead_id} deleted")

    def get_stats(self, now: Optional[datetime] = None) -> dict:
        """Lead counts for the dashboard header cards"""
        now = now or datetime.now(ZoneInfo(BUSINESS_TIMEZONE))
        today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        month_start = today_start.replace(day=1)

        def since(moment: datetime) -> int:
            return self.repo.count_since(self.db, moment.astimezone(timezone.utc))

        return {
            "stats": {
                "total": self.repo.count_since(self.db),
                "today": since(today_start),
                "thisWeek": since(now - timedelta(days=7)),
                "thisMonth": since(month_start),
                "byStatus": self.repo.count_by_status(self.db),
            },
            "recentLeads": self.repo.get_recent(self.db, limit=10),
        }

    def get_repeat_customers(self, now: Optional[datetime] = None) -> dict:
        """Visit history per email address across every stored lead"""
        return repeat_customer_report(self.repo.get_leads(self.db), now or datetime.now(timezone.utc))

    def get_weekly_report(self, now: Optional[datetime] = None) -> dict:
        """Lead counts plus the source mix of the 20 most recent leads"""
        stats = self.get_stats(now)
        recent = self.repo.get_recent(self.db, limit=20)
        return {
            **stats["stats"],
            "bySource": leads_by_source(recent),
            "recentLeads": recent,
        }
