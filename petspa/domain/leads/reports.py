"""Lead history reports for the admin dashboard and the weekly Slack summary"""

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Iterable

from ...analytics.aggregation import percentage, round_half_up
from ...models import Lead

# Placeholder address used when old paper records were imported
HISTORICAL_EMAIL = "historical@pupperazi.com"


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _append_unique(values: list, value) -> None:
    if value and value not in values:
        values.append(value)


def repeat_customer_report(leads: Iterable[Lead], now: datetime) -> dict:
    """
    Group leads by email into per-customer visit histories.

    Every request counts as a visit. Customers are sorted by total visits,
    most first; ``avgDaysBetweenVisits`` is None with fewer than two visits.
    """
    now = _as_utc(now)
    cutoff_90 = now - timedelta(days=90)
    cutoff_30 = now - timedelta(days=30)

    grouped: dict[str, dict] = {}
    for lead in sorted(leads, key=lambda row: (_as_utc(row.created_at), row.id)):
        email = (lead.email or "").strip().lower()
        if not email or email == HISTORICAL_EMAIL:
            continue

        customer = grouped.setdefault(
            email, {"names": [], "phones": [], "pets": [], "visits": [], "additionalInfo": []}
        )
        _append_unique(customer["names"], lead.name)
        _append_unique(customer["phones"], lead.phone)
        _append_unique(customer["pets"], lead.pets_name_and_breed)
        customer["visits"].append(_as_utc(lead.created_at))
        customer["additionalInfo"].append(
            {
                "dateTimeRequested": lead.date_time_requested,
                "newCustomer": lead.new_customer,
                "message": lead.message,
            }
        )

    customers = []
    for email, history in grouped.items():
        visits = history["visits"]
        gaps = [(later - earlier).total_seconds() / 86400 for earlier, later in zip(visits, visits[1:])]
        customers.append(
            {
                "email": email,
                "name": history["names"][0] if history["names"] else "Unknown",
                "phone": history["phones"][0] if history["phones"] else "",
                "totalAppointments": len(visits),
                "appointmentsLast90Days": sum(1 for visit in visits if visit >= cutoff_90),
                "appointmentsLast30Days": sum(1 for visit in visits if visit >= cutoff_30),
                "firstVisit": visits[0].isoformat(),
                "lastVisit": visits[-1].isoformat(),
                "petInfo": history["pets"],
                "avgDaysBetweenVisits": round_half_up(sum(gaps) / len(gaps)) if gaps else None,
                "additionalInfo": history["additionalInfo"],
            }
        )
    customers.sort(key=lambda c: c["totalAppointments"], reverse=True)

    total = len(customers)
    repeat = sum(1 for c in customers if c["totalAppointments"] >= 2)
    return {
        "summary": {
            "totalCustomers": total,
            "repeatCustomers": repeat,
            "repeatRate": percentage(repeat, total),
            "activeIn90Days": sum(1 for c in customers if c["appointmentsLast90Days"] > 0),
            "activeIn30Days": sum(1 for c in customers if c["appointmentsLast30Days"] > 0),
            "avgAppointmentsPerCustomer": round(sum(c["totalAppointments"] for c in customers) / total, 1)
            if total
            else 0,
        },
        "customers": customers,
    }


def leads_by_source(leads: Iterable[Lead]) -> dict[str, int]:
    return dict(Counter(lead.source or "direct" for lead in leads))
