from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from petspa.analytics import aggregation
from petspa.analytics.aggregation import TrackedEvent
from petspa.analytics.service import AnalyticsService

TZ = ZoneInfo("America/New_York")
# Tuesday
TUESDAY = datetime(2026, 10, 13, 10, 15, tzinfo=TZ)


def events(event_type, count, at=TUESDAY, visitor_prefix="v"):
    return [TrackedEvent(event_type, f"{visitor_prefix}{i}", at) for i in range(count)]


def by_day(results, name):
    return next(r for r in results if r["day"] == name)


def test_tuesday_click_rate_and_empty_sunday():
    tracked = events("page_view", 10) + events("appointment_click", 2) + events("form_submit", 1)

    results = aggregation.day_of_week_performance(tracked, TZ)

    assert [r["day"] for r in results] == list(aggregation.DAY_NAMES)
    tuesday = by_day(results, "Tuesday")
    assert tuesday["visitors"] == 10
    assert tuesday["appointmentClicks"] == 2
    assert tuesday["clickRate"] == 20
    assert tuesday["conversionRate"] == 50
    sunday = by_day(results, "Sunday")
    assert sunday == {
        "day": "Sunday",
        "dayIndex": 0,
        "visitors": 0,
        "appointmentClicks": 0,
        "formSubmits": 0,
        "clickRate": 0,
        "conversionRate": 0,
    }


def test_events_are_bucketed_in_local_time():
    # 01:30 UTC Wednesday is still Tuesday evening in New York
    late = datetime(2026, 10, 14, 1, 30, tzinfo=timezone.utc)

    results = aggregation.day_of_week_performance(events("page_view", 3, at=late), TZ)

    assert by_day(results, "Tuesday")["visitors"] == 3
    assert by_day(results, "Wednesday")["visitors"] == 0


def test_naive_timestamps_are_treated_as_utc():
    naive = datetime(2026, 10, 13, 14, 0)  # 10:00 in New York

    results = aggregation.time_of_day_performance(events("page_view", 1, at=naive), TZ)

    assert next(r for r in results if r["bucket"] == "Morning")["visitors"] == 1


def test_visitors_are_distinct_ids_and_anonymous_views_count_once_each():
    tracked = [
        TrackedEvent("page_view", "alice", TUESDAY),
        TrackedEvent("page_view", "alice", TUESDAY),
        TrackedEvent("page_view", "bob", TUESDAY),
        TrackedEvent("page_view", None, TUESDAY),
        TrackedEvent("page_view", None, TUESDAY),
        TrackedEvent("appointment_click", "carol", TUESDAY),
    ]

    assert aggregation.count_visitors(tracked) == 4


@pytest.mark.parametrize(
    "hour,bucket",
    [(7, "Other"), (8, "Morning"), (10, "Morning"), (11, "Lunch"), (13, "Lunch"), (14, "Afternoon"), (17, "Afternoon"), (18, "Other")],
)
def test_time_bucket_boundaries(hour, bucket):
    assert aggregation.time_bucket_name(hour) == bucket


def test_time_of_day_has_four_buckets():
    results = aggregation.time_of_day_performance([], TZ)

    assert [r["bucket"] for r in results] == ["Morning", "Lunch", "Afternoon", "Other"]
    assert all(r["clickRate"] == 0 and r["conversionRate"] == 0 for r in results)


def test_rates_round_half_up():
    assert aggregation.percentage(1, 8) == 13
    assert aggregation.percentage(1, 3) == 33
    assert aggregation.percentage(2, 3) == 67
    assert aggregation.percentage(5, 0) == 0


def test_heatmap_grid_and_opportunities():
    tracked = []
    # Busy Saturday morning, quiet Monday lunch, nothing elsewhere
    tracked += events("page_view", 20, at=datetime(2026, 10, 17, 9, 0, tzinfo=TZ), visitor_prefix="sat")
    tracked += events("appointment_click", 5, at=datetime(2026, 10, 17, 9, 30, tzinfo=TZ))
    tracked += events("page_view", 2, at=datetime(2026, 10, 12, 12, 0, tzinfo=TZ), visitor_prefix="mon")
    # Off-hours traffic is excluded from the grid
    tracked += events("page_view", 50, at=datetime(2026, 10, 14, 21, 0, tzinfo=TZ), visitor_prefix="night")

    grid = aggregation.day_time_heatmap(tracked, TZ)

    assert len(grid) == 21
    assert {cell["bucket"] for cell in grid} == {"Morning", "Lunch", "Afternoon"}
    cell = {(c["day"], c["bucket"]): c for c in grid}
    saturday = cell[("Saturday", "Morning")]
    assert saturday["intensity"] == 100
    assert saturday["clickRate"] == 25
    assert saturday["isOpportunity"] is False
    monday = cell[("Monday", "Lunch")]
    assert monday["intensity"] == 10
    # Most cells are empty so the bottom-third threshold is 0; empty cells are never opportunities
    assert monday["isOpportunity"] is False
    assert not any(c["isOpportunity"] for c in grid if c["visitors"] == 0)


def test_heatmap_flags_low_traffic_cells():
    tracked = []
    base = datetime(2026, 10, 11, tzinfo=TZ)  # Sunday
    for day in range(7):
        for hour, count in ((9, 30), (12, 3), (15, 30)):
            at = base + timedelta(days=day, hours=hour)
            tracked += events("page_view", count, at=at, visitor_prefix=f"{day}-{hour}-")

    grid = aggregation.day_time_heatmap(tracked, TZ)

    assert all(c["isOpportunity"] == (c["bucket"] == "Lunch") for c in grid)


@pytest.mark.parametrize(
    "current,previous,change,direction",
    [
        (120, 100, 20.0, "up"),
        (80, 100, 20.0, "down"),
        (100, 100, 0.0, "flat"),
        (1005, 1000, 0.5, "flat"),
        (5, 0, 100, "up"),
        (0, 0, 0, "flat"),
    ],
)
def test_calculate_trend(current, previous, change, direction):
    trend = aggregation.calculate_trend(current, previous)

    assert trend["change"] == change
    assert trend["direction"] == direction


def test_conversion_by_day_covers_fourteen_days():
    end = date(2026, 10, 18)
    tracked = events("appointment_click", 4, at=datetime(2026, 10, 18, 11, tzinfo=TZ)) + events(
        "form_submit", 1, at=datetime(2026, 10, 18, 12, tzinfo=TZ)
    )

    series = aggregation.conversion_by_day(tracked, end, TZ)

    assert len(series) == 14
    assert series[0]["date"] == "20261005"
    assert series[-1] == {
        "date": "20261018",
        "label": "Oct 18",
        "appointmentClicks": 4,
        "formSubmits": 1,
        "conversionRate": 25,
    }


def test_weekly_windows_end_on_the_given_day():
    windows = aggregation.weekly_windows(date(2026, 10, 18))

    assert len(windows) == 8
    assert windows[-1].start == date(2026, 10, 12)
    assert windows[-1].end == date(2026, 10, 18)
    assert windows[0].start == date(2026, 8, 24)


def test_monthly_windows_cross_year_and_stop_at_end():
    windows = aggregation.monthly_windows(date(2026, 2, 10))

    assert [w.label for w in windows] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]
    assert windows[3].end == date(2025, 12, 31)
    assert windows[-1].end == date(2026, 2, 10)


def test_visitor_conversion_by_week():
    tracked = events("page_view", 8, at=datetime(2026, 10, 15, 9, tzinfo=TZ)) + events(
        "appointment_click", 2, at=datetime(2026, 10, 15, 9, tzinfo=TZ)
    )

    series = aggregation.visitor_conversion_by_week(tracked, date(2026, 10, 18), TZ)

    assert series[-1]["totalVisitors"] == 8
    assert series[-1]["conversionRate"] == 25
    assert all(point["totalVisitors"] == 0 for point in series[:-1])


def test_period_summary_includes_trends():
    current = events("page_view", 6) + events("phone_click", 2) + events("form_abandon", 1)
    previous = events("page_view", 3, visitor_prefix="old")

    summary = aggregation.period_summary(current, previous, "Oct 13")

    assert summary["period"] == "Oct 13"
    assert summary["totalUsers"] == 6
    assert summary["phoneClicks"] == 2
    assert summary["formAbandons"] == 1
    assert summary["trends"]["totalUsers"] == {"current": 6, "previous": 3, "change": 100.0, "direction": "up"}
    assert summary["trends"]["phoneClicks"]["direction"] == "up"


def test_dashboard_reads_stored_events(db_session):
    service = AnalyticsService(db_session, tz=TZ, today=date(2026, 10, 19))
    for i in range(10):
        service.record_event("page_view", visitor_id=f"v{i}", occurred_at=TUESDAY)
    service.record_event("appointment_click", visitor_id="v1", occurred_at=TUESDAY)
    service.record_event("appointment_click", visitor_id="v2", occurred_at=TUESDAY)
    # Today's events are not part of any window yet
    service.record_event("page_view", visitor_id="today", occurred_at=datetime(2026, 10, 19, 9, tzinfo=TZ))

    dashboard = service.get_dashboard()

    assert dashboard["success"] is True
    assert by_day(dashboard["dayOfWeek"], "Tuesday")["clickRate"] == 20
    assert dashboard["weekly"]["totalUsers"] == 10
    assert dashboard["daily"]["totalUsers"] == 0
    assert dashboard["daily"]["period"] == "Sunday, October 18"
    assert len(dashboard["daily"]["chart"]) == 14
    assert len(dashboard["monthly"]["chart"]) == 6
    assert len(dashboard["dayTimeHeatmap"]) == 21


def test_tracking_endpoint_stores_event(client, db_session):
    response = client.post(
        "/api/analytics/events",
        json={"eventType": "appointment_click", "visitorId": "abc123", "page": "/services"},
    )

    assert response.status_code == 201
    assert response.json() == {"success": True}
    stored = AnalyticsService(db_session).load_events(date(2000, 1, 1), date(2100, 1, 1))
    assert [(e.event_type, e.visitor_id) for e in stored] == [("appointment_click", "abc123")]


def test_tracking_endpoint_rejects_unknown_event(client):
    response = client.post("/api/analytics/events", json={"eventType": "scroll"})

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "eventType"
