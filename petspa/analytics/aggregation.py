"""
Traffic and conversion aggregation for the admin analytics dashboard.

Every function here is pure: it receives events that have already been
loaded for the window of interest and returns plain dicts ready for JSON.
Timestamps without tzinfo are treated as UTC and bucketed in the shop's
local timezone.
"""

import math
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Iterable, NamedTuple, Optional

PAGE_VIEW = "page_view"
APPOINTMENT_CLICK = "appointment_click"
PHONE_CLICK = "phone_click"
FORM_OPEN = "form_open"
FORM_START = "form_start"
FORM_SUBMIT = "form_submit"
FORM_ABANDON = "form_abandon"

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


class TimeBucket(NamedTuple):
    name: str
    time_range: str
    start_hour: int
    end_hour: int  # exclusive

    def contains(self, hour: int) -> bool:
        return self.start_hour <= hour < self.end_hour


BUSINESS_BUCKETS = (
    TimeBucket("Morning", "8am - 11am", 8, 11),
    TimeBucket("Lunch", "11am - 2pm", 11, 14),
    TimeBucket("Afternoon", "2pm - 6pm", 14, 18),
)
OTHER_BUCKET = "Other"
OTHER_RANGE = "Before 8am / After 6pm"

# Heatmap cells at or below this percentile of visitor counts are flagged
OPPORTUNITY_PERCENTILE = 0.33
TREND_DEAD_BAND = 1.0


class TrackedEvent(NamedTuple):
    event_type: str
    visitor_id: Optional[str]
    occurred_at: datetime


# ============================================================================
# HELPERS
# ============================================================================


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentage(numerator: int, denominator: int) -> int:
    """Whole-number percentage, 0 when there is nothing to divide by"""
    if denominator <= 0:
        return 0
    return round_half_up(numerator / denominator * 100)


def to_local(moment: datetime, tz: tzinfo) -> datetime:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz)


def day_index(moment: datetime) -> int:
    """0 = Sunday .. 6 = Saturday"""
    return (moment.weekday() + 1) % 7


def time_bucket_name(hour: int) -> str:
    for bucket in BUSINESS_BUCKETS:
        if bucket.contains(hour):
            return bucket.name
    return OTHER_BUCKET


def count_visitors(events: Iterable[TrackedEvent]) -> int:
    """Distinct visitor ids among page views; anonymous page views count once each"""
    visitor_ids = set()
    anonymous = 0
    for event in events:
        if event.event_type != PAGE_VIEW:
            continue
        if event.visitor_id:
            visitor_ids.add(event.visitor_id)
        else:
            anonymous += 1
    return len(visitor_ids) + anonymous


def count_type(events: Iterable[TrackedEvent], event_type: str) -> int:
    return sum(1 for event in events if event.event_type == event_type)


def _performance(events: list[TrackedEvent]) -> dict:
    visitors = count_visitors(events)
    clicks = count_type(events, APPOINTMENT_CLICK)
    submits = count_type(events, FORM_SUBMIT)
    return {
        "visitors": visitors,
        "appointmentClicks": clicks,
        "formSubmits": submits,
        "clickRate": percentage(clicks, visitors),
        "conversionRate": percentage(submits, clicks),
    }


# ============================================================================
# DAY / TIME BREAKDOWNS
# ============================================================================


def day_of_week_performance(events: Iterable[TrackedEvent], tz: tzinfo) -> list[dict]:
    """Seven buckets, Sunday first"""
    by_day: dict[int, list[TrackedEvent]] = defaultdict(list)
    for event in events:
        by_day[day_index(to_local(event.occurred_at, tz))].append(event)

    return [{"day": DAY_NAMES[i], "dayIndex": i, **_performance(by_day[i])} for i in range(7)]


def time_of_day_performance(events: Iterable[TrackedEvent], tz: tzinfo) -> list[dict]:
    """Morning, Lunch, Afternoon and everything outside business hours"""
    by_bucket: dict[str, list[TrackedEvent]] = defaultdict(list)
    for event in events:
        by_bucket[time_bucket_name(to_local(event.occurred_at, tz).hour)].append(event)

    ranges = [(b.name, b.time_range) for b in BUSINESS_BUCKETS] + [(OTHER_BUCKET, OTHER_RANGE)]
    return [{"bucket": name, "timeRange": time_range, **_performance(by_bucket[name])} for name, time_range in ranges]


def day_time_heatmap(events: Iterable[TrackedEvent], tz: tzinfo) -> list[dict]:
    """
    Day x business-hours grid (21 cells, off-hours excluded).

    ``intensity`` scales visitors against the busiest cell. A cell is an
    opportunity when it had some traffic but sits in the bottom third of
    cell visitor counts.
    """
    cells: dict[tuple[int, str], list[TrackedEvent]] = defaultdict(list)
    for event in events:
        local = to_local(event.occurred_at, tz)
        bucket = time_bucket_name(local.hour)
        if bucket != OTHER_BUCKET:
            cells[(day_index(local), bucket)].append(event)

    results = []
    for i in range(7):
        for bucket in BUSINESS_BUCKETS:
            cell_events = cells[(i, bucket.name)]
            visitors = count_visitors(cell_events)
            clicks = count_type(cell_events, APPOINTMENT_CLICK)
            results.append(
                {
                    "day": DAY_NAMES[i],
                    "dayIndex": i,
                    "bucket": bucket.name,
                    "timeRange": bucket.time_range,
                    "visitors": visitors,
                    "appointmentClicks": clicks,
                    "formSubmits": count_type(cell_events, FORM_SUBMIT),
                    "clickRate": percentage(clicks, visitors),
                }
            )

    max_visitors = max([cell["visitors"] for cell in results] + [1])
    sorted_visitors = sorted(cell["visitors"] for cell in results)
    low_threshold = sorted_visitors[math.floor(len(sorted_visitors) * OPPORTUNITY_PERCENTILE)]

    for cell in results:
        cell["intensity"] = round_half_up(cell["visitors"] / max_visitors * 100)
        cell["isOpportunity"] = 0 < cell["visitors"] <= low_threshold

    return results


# ============================================================================
# TREND CHARTS
# ============================================================================


class Window(NamedTuple):
    start: date
    end: date  # inclusive
    label: str

    @property
    def key(self) -> str:
        return self.start.strftime("%Y%m%d")


def short_label(day: date) -> str:
    return f"{day:%b} {day.day}"


def daily_windows(end: date, days: int = 14) -> list[Window]:
    return [Window(d, d, short_label(d)) for d in (end - timedelta(days=i) for i in range(days - 1, -1, -1))]


def weekly_windows(end: date, weeks: int = 8) -> list[Window]:
    """Rolling 7-day windows, the last one ending on ``end``"""
    windows = []
    for i in range(weeks - 1, -1, -1):
        week_end = end - timedelta(days=7 * i)
        week_start = week_end - timedelta(days=6)
        windows.append(Window(week_start, week_end, short_label(week_start)))
    return windows


def monthly_windows(end: date, months: int = 6) -> list[Window]:
    """Calendar months up to the month containing ``end``, never past ``end``"""
    windows = []
    for i in range(months - 1, -1, -1):
        year, month = divmod(end.year * 12 + end.month - 1 - i, 12)
        month_start = date(year, month + 1, 1)
        next_year, next_month = divmod(year * 12 + month + 1, 12)
        month_end = min(date(next_year, next_month + 1, 1) - timedelta(days=1), end)
        windows.append(Window(month_start, month_end, f"{month_start:%b}"))
    return windows


def _events_by_local_date(events: Iterable[TrackedEvent], tz: tzinfo) -> dict[date, list[TrackedEvent]]:
    by_date: dict[date, list[TrackedEvent]] = defaultdict(list)
    for event in events:
        by_date[to_local(event.occurred_at, tz).date()].append(event)
    return by_date


def _window_events(by_date: dict[date, list[TrackedEvent]], window: Window) -> list[TrackedEvent]:
    collected = []
    day = window.start
    while day <= window.end:
        collected.extend(by_date.get(day, ()))
        day += timedelta(days=1)
    return collected


def conversion_series(events: Iterable[TrackedEvent], windows: list[Window], tz: tzinfo) -> list[dict]:
    """Appointment clicks -> form submits per window"""
    by_date = _events_by_local_date(events, tz)
    series = []
    for window in windows:
        window_events = _window_events(by_date, window)
        clicks = count_type(window_events, APPOINTMENT_CLICK)
        submits = count_type(window_events, FORM_SUBMIT)
        series.append(
            {
                "date": window.key,
                "label": window.label,
                "appointmentClicks": clicks,
                "formSubmits": submits,
                "conversionRate": percentage(submits, clicks),
            }
        )
    return series


def visitor_conversion_series(events: Iterable[TrackedEvent], windows: list[Window], tz: tzinfo) -> list[dict]:
    """Visitors -> appointment clicks per window"""
    by_date = _events_by_local_date(events, tz)
    series = []
    for window in windows:
        window_events = _window_events(by_date, window)
        visitors = count_visitors(window_events)
        clicks = count_type(window_events, APPOINTMENT_CLICK)
        series.append(
            {
                "date": window.key,
                "label": window.label,
                "totalVisitors": visitors,
                "appointmentClicks": clicks,
                "conversionRate": percentage(clicks, visitors),
            }
        )
    return series


def conversion_by_day(events, end: date, tz: tzinfo, days: int = 14) -> list[dict]:
    return conversion_series(events, daily_windows(end, days), tz)


def conversion_by_week(events, end: date, tz: tzinfo, weeks: int = 8) -> list[dict]:
    return conversion_series(events, weekly_windows(end, weeks), tz)


def conversion_by_month(events, end: date, tz: tzinfo, months: int = 6) -> list[dict]:
    return conversion_series(events, monthly_windows(end, months), tz)


def visitor_conversion_by_day(events, end: date, tz: tzinfo, days: int = 14) -> list[dict]:
    return visitor_conversion_series(events, daily_windows(end, days), tz)


def visitor_conversion_by_week(events, end: date, tz: tzinfo, weeks: int = 8) -> list[dict]:
    return visitor_conversion_series(events, weekly_windows(end, weeks), tz)


def visitor_conversion_by_month(events, end: date, tz: tzinfo, months: int = 6) -> list[dict]:
    return visitor_conversion_series(events, monthly_windows(end, months), tz)


# ============================================================================
# PERIOD SUMMARIES
# ============================================================================


def calculate_trend(current: int, previous: int) -> dict:
    """Percent change against the previous period; within +/-1% counts as flat"""
    if previous == 0:
        return {
            "current": current,
            "previous": previous,
            "change": 100 if current > 0 else 0,
            "direction": "up" if current > 0 else "flat",
        }

    change = (current - previous) / previous * 100
    if change > TREND_DEAD_BAND:
        direction = "up"
    elif change < -TREND_DEAD_BAND:
        direction = "down"
    else:
        direction = "flat"
    return {"current": current, "previous": previous, "change": round(abs(change), 1), "direction": direction}


def _totals(events: list[TrackedEvent]) -> dict:
    return {
        "totalUsers": count_visitors(events),
        "pageViews": count_type(events, PAGE_VIEW),
        "appointmentClicks": count_type(events, APPOINTMENT_CLICK),
        "phoneClicks": count_type(events, PHONE_CLICK),
        "formOpens": count_type(events, FORM_OPEN),
        "formStarts": count_type(events, FORM_START),
        "formSubmits": count_type(events, FORM_SUBMIT),
        "formAbandons": count_type(events, FORM_ABANDON),
    }


TRENDED_METRICS = ("totalUsers", "pageViews", "appointmentClicks", "phoneClicks", "formSubmits")


def period_summary(current: Iterable[TrackedEvent], previous: Iterable[TrackedEvent], label: str) -> dict:
    current_totals = _totals(list(current))
    previous_totals = _totals(list(previous))
    return {
        "period": label,
        **current_totals,
        "trends": {
            metric: calculate_trend(current_totals[metric], previous_totals[metric]) for metric in TRENDED_METRICS
        },
    }
