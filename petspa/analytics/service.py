"""Analytics service - Event storage and the admin dashboard payload"""

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from ..config import BUSINESS_TIMEZONE
from ..models import AnalyticsEvent
from . import aggregation
from .aggregation import TrackedEvent

logger = logging.getLogger(__name__)

BREAKDOWN_DAYS = 30


class AnalyticsService:
    """Loads tracked events and feeds them through the aggregation functions"""

    def __init__(self, db: Session, tz: Optional[tzinfo] = None, today: Optional[date] = None):
        self.db = db
        self.tz = tz or ZoneInfo(BUSINESS_TIMEZONE)
        self._today = today

    @property
    def today(self) -> date:
        return self._today or datetime.now(self.tz).date()

    def record_event(
        self,
        event_type: str,
        visitor_id: Optional[str] = None,
        page: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ) -> AnalyticsEvent:
        occurred_at = occurred_at or datetime.now(timezone.utc)
        if occurred_at.tzinfo is None:
            occurred_at = occurred_at.replace(tzinfo=timezone.utc)

        event = AnalyticsEvent(
            event_type=event_type,
            visitor_id=visitor_id,
            page=page,
            occurred_at=occurred_at.astimezone(timezone.utc),
        )
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        return event

    def _local_midnight_utc(self, day: date) -> datetime:
        return datetime.combine(day, time.min, tzinfo=self.tz).astimezone(timezone.utc)

    def load_events(self, start: date, end: date) -> list[TrackedEvent]:
        """Events whose local date falls in [start, end]"""
        rows = (
            self.db.query(AnalyticsEvent.event_type, AnalyticsEvent.visitor_id, AnalyticsEvent.occurred_at)
            .filter(
                AnalyticsEvent.occurred_at >= self._local_midnight_utc(start),
                AnalyticsEvent.occurred_at < self._local_midnight_utc(end + timedelta(days=1)),
            )
            .all()
        )
        return [TrackedEvent(event_type, visitor_id, occurred_at) for event_type, visitor_id, occurred_at in rows]

    def _between(self, events: list[TrackedEvent], start: date, end: date) -> list[TrackedEvent]:
        return [e for e in events if start <= aggregation.to_local(e.occurred_at, self.tz).date() <= end]

    def _summary(self, events: list[TrackedEvent], start: date, end: date, label: str) -> dict:
        length = (end - start).days + 1
        previous_end = start - timedelta(days=1)
        previous_start = previous_end - timedelta(days=length - 1)
        return aggregation.period_summary(
            self._between(events, start, end), self._between(events, previous_start, previous_end), label
        )

    def get_dashboard(self) -> dict:
        """Daily, weekly and monthly summaries with charts plus the day/time breakdowns"""
        yesterday = self.today - timedelta(days=1)
        week_start = yesterday - timedelta(days=6)
        month_start = yesterday - timedelta(days=BREAKDOWN_DAYS - 1)

        earliest = min(
            month_start - timedelta(days=BREAKDOWN_DAYS),
            aggregation.monthly_windows(yesterday)[0].start,
            aggregation.weekly_windows(yesterday)[0].start,
        )
        events = self.load_events(earliest, yesterday)
        logger.info(f"📊 Building analytics dashboard from {len(events)} events ({earliest} to {yesterday})")

        recent = self._between(events, month_start, yesterday)
        tz = self.tz

        daily = self._summary(events, yesterday, yesterday, f"{yesterday:%A, %B} {yesterday.day}")
        daily["chart"] = aggregation.conversion_by_day(events, yesterday, tz)
        daily["visitorChart"] = aggregation.visitor_conversion_by_day(events, yesterday, tz)

        weekly = self._summary(
            events, week_start, yesterday, f"{aggregation.short_label(week_start)} - {aggregation.short_label(yesterday)}"
        )
        weekly["chart"] = aggregation.conversion_by_week(events, yesterday, tz)
        weekly["visitorChart"] = aggregation.visitor_conversion_by_week(events, yesterday, tz)

        monthly = self._summary(
            events, month_start, yesterday, f"{aggregation.short_label(month_start)} - {aggregation.short_label(yesterday)}"
        )
        monthly["chart"] = aggregation.conversion_by_month(events, yesterday, tz)
        monthly["visitorChart"] = aggregation.visitor_conversion_by_month(events, yesterday, tz)

        return {
            "success": True,
            "configured": True,
            "daily": daily,
            "weekly": weekly,
            "monthly": monthly,
            "dayOfWeek": aggregation.day_of_week_performance(recent, tz),
            "timeOfDay": aggregation.time_of_day_performance(recent, tz),
            "dayTimeHeatmap": aggregation.day_time_heatmap(recent, tz),
        }
