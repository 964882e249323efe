"""
Error Alert Service
Posts critical intake failures to Slack
"""

import json
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

import httpx

from ..config import BUSINESS_TIMEZONE, SLACK_ANALYTICS_WEBHOOK, SLACK_ERROR_WEBHOOK

logger = logging.getLogger(__name__)


def build_alert_blocks(endpoint: str, error: str, context: Optional[dict] = None, timestamp: Optional[datetime] = None) -> dict:
    """Slack Block Kit payload for an error alert"""
    timestamp = timestamp or datetime.now(timezone.utc)
    local_time = timestamp.astimezone(ZoneInfo(BUSINESS_TIMEZONE)).strftime("%m/%d/%Y, %I:%M:%S %p %Z")

    blocks: list[dict[str, Any]] = [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": "🚨 Pupperazi Error Alert", "emoji": True},
        },
        {
            "type": "section",
            "fields": [
                {"type": "mrkdwn", "text": f"*Endpoint:*\n`{endpoint}`"},
                {"type": "mrkdwn", "text": f"*Time:*\n{local_time}"},
            ],
        },
        {"type": "section", "text": {"type": "mrkdwn", "text": f"*Error:*\n```{error}```"}},
    ]
    if context:
        blocks.append(
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": f"*Context:*\n```{json.dumps(context, indent=2, default=str)}```"},
            }
        )
    blocks.append(
        {
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": "⚠️ Action may be required • pupperazipetspa.com"}],
        }
    )
    return {"blocks": blocks}


async def send_error_alert(
    endpoint: str,
    error: str,
    context: Optional[dict] = None,
    webhook_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """Send an alert to Slack. Returns False (and logs) on any failure."""
    webhook_url = webhook_url or SLACK_ERROR_WEBHOOK
    if not webhook_url:
        logger.error("No Slack webhook configured for error alerts")
        return False

    try:
        async with httpx.AsyncClient(transport=transport, timeout=10.0) as client:
            response = await client.post(webhook_url, json=build_alert_blocks(endpoint, error, context))
            return response.is_success
    except httpx.HTTPError as e:
        logger.error(f"Failed to send error alert to Slack: {e}")
        return False


def mask_contact_fields(form_data: dict) -> dict:
    """Hide email and phone values before they leave the server"""
    masked = dict(form_data)
    for key, value in form_data.items():
        lowered = key.lower()
        if not value:
            continue
        if "email" in lowered:
            masked[key] = "***@***.***"
        elif "phone" in lowered:
            masked[key] = "***-***-****"
    return masked


async def send_form_error_alert(form_type: str, error: str, form_data: Optional[dict] = None, **kwargs) -> bool:
    """Alert for a failed public form (contact, booking, lead)"""
    context = mask_contact_fields(form_data) if isinstance(form_data, dict) else None
    return await send_error_alert(endpoint=f"/api/{form_type}", error=error, context=context, **kwargs)


# ============================================================================
# WEEKLY LEADS REPORT
# ============================================================================

STATUS_EMOJI = {"new": "🆕", "contacted": "📞", "converted": "✅"}


def build_leads_report_blocks(stats: dict, by_source: dict, recent_leads: list, today: Optional[date] = None) -> dict:
    """Slack Block Kit payload summarising the last seven days of leads"""
    today = today or datetime.now(ZoneInfo(BUSINESS_TIMEZONE)).date()
    week_ago = today - timedelta(days=7)
    period = f"{week_ago.strftime('%b')} {week_ago.day} - {today.strftime('%b')} {today.day}, {today.year}"

    status_lines = "\n".join(
        f"{STATUS_EMOJI.get(status, '📋')} {status}: {count}" for status, count in stats.get("byStatus", {}).items()
    )
    top_sources = sorted(by_source.items(), key=lambda item: item[1], reverse=True)[:5]
    source_lines = "\n".join(f"• {source}: {count}" for source, count in top_sources)

    recent_lines = []
    for lead in recent_leads[:5]:
        created = lead.created_at.strftime("%m/%d/%Y") if lead.created_at else "unknown date"
        recent_lines.append(f"• {lead.name or 'Unknown'} ({created}) - via {lead.source or 'direct'}")

    blocks: list[dict[str, Any]] = [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": "📊 Pupperazi - Weekly Leads Report", "emoji": True},
        },
        {"type": "section", "text": {"type": "mrkdwn", "text": f"*Period:* {period}"}},
        {
            "type": "section",
            "fields": [
                {"type": "mrkdwn", "text": f"*This Week:*\n{stats.get('thisWeek', 0)} leads"},
                {"type": "mrkdwn", "text": f"*This Month:*\n{stats.get('thisMonth', 0)} leads"},
                {"type": "mrkdwn", "text": f"*All Time:*\n{stats.get('total', 0)} leads"},
            ],
        },
        {"type": "divider"},
        {"type": "section", "text": {"type": "mrkdwn", "text": f"*Status Breakdown:*\n{status_lines or 'No leads yet'}"}},
        {"type": "section", "text": {"type": "mrkdwn", "text": f"*Top Sources:*\n{source_lines or 'No sources yet'}"}},
    ]
    if recent_lines:
        blocks.append(
            {"type": "section", "text": {"type": "mrkdwn", "text": "*Recent Leads:*\n" + "\n".join(recent_lines)}}
        )
    blocks.append(
        {
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": "📈 Weekly summary • pupperazipetspa.com"}],
        }
    )
    return {"blocks": blocks}


async def send_leads_report(
    stats: dict,
    by_source: dict,
    recent_leads: list,
    webhook_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """Post the weekly leads summary. Returns False (and logs) on any failure."""
    webhook_url = webhook_url or SLACK_ANALYTICS_WEBHOOK
    if not webhook_url:
        logger.warning("⚠️ No Slack analytics webhook configured, skipping weekly leads report")
        return False

    try:
        async with httpx.AsyncClient(transport=transport, timeout=10.0) as client:
            response = await client.post(webhook_url, json=build_leads_report_blocks(stats, by_source, recent_leads))
            if response.is_success:
                logger.info(f"✅ Weekly leads report sent ({stats.get('thisWeek', 0)} leads this week)")
            return response.is_success
    except httpx.HTTPError as e:
        logger.error(f"Failed to send weekly leads report to Slack: {e}")
        return False


def get_alert_webhook() -> Optional[str]:
    """Dependency for the error-alert webhook so tests can point it elsewhere"""
    return SLACK_ERROR_WEBHOOK


def get_report_webhook() -> Optional[str]:
    return SLACK_ANALYTICS_WEBHOOK
