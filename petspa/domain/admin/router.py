"""Admin router - Authenticated dashboard endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...analytics.service import AnalyticsService
from ...auth import require_admin
from ...database import get_db
from ...services.alert_service import get_report_webhook, send_leads_report
from ..leads.schemas import LeadResponse, LeadStatusUpdate
from ..leads.service import LeadService
from .schemas import AdminLoginRequest, AdminLoginResponse, AppointmentStatusUpdate, CustomerUpdate
from .service import AdminService, authenticate_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db)


def get_admin_lead_service(db: Session = Depends(get_db)) -> LeadService:
    """LeadService without a dispatcher; admin routes never notify"""
    return LeadService(db)


def get_admin_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)


# ============================================================================
# AUTH
# ============================================================================


@router.post("/auth", response_model=AdminLoginResponse)
async def login(data: AdminLoginRequest, db: Session = Depends(get_db)):
    """Exchange admin credentials for a bearer token"""
    return AdminLoginResponse(token=authenticate_admin(db, data.password, data.username))


# ============================================================================
# LEADS
# ============================================================================


@router.get("/leads")
async def list_leads(
    status: Optional[str] = Query(None),
    _admin: dict = Depends(require_admin),
    service: LeadService = Depends(get_admin_lead_service),
):
    leads = service.get_leads(status)
    return {"success": True, "data": [LeadResponse.model_validate(lead) for lead in leads]}


@router.get("/leads/stats")
async def lead_stats(
    _admin: dict = Depends(require_admin),
    service: LeadService = Depends(get_admin_lead_service),
):
    stats = service.get_stats()
    stats["recentLeads"] = [LeadResponse.model_validate(lead) for lead in stats["recentLeads"]]
    return {"success": True, **stats}


@router.post("/leads/weekly-report")
async def weekly_leads_report(
    _admin: dict = Depends(require_admin),
    service: LeadService = Depends(get_admin_lead_service),
    webhook_url: Optional[str] = Depends(get_report_webhook),
):
    """Post the weekly leads summary to Slack on demand"""
    report = service.get_weekly_report()
    recent = report.pop("recentLeads")
    slack_sent = False
    if webhook_url:
        slack_sent = await send_leads_report(report, report["bySource"], recent, webhook_url=webhook_url)
    else:
        logger.warning("⚠️ Weekly leads report requested but no Slack webhook is configured")
    return {"success": True, "slackSent": slack_sent, "stats": report}


@router.get("/leads/{lead_id}")
async def get_lead(
    lead_id: int,
    _admin: dict = Depends(require_admin),
    service: LeadService = Depends(get_admin_lead_service),
):
    return {"success": True, "data": LeadResponse.model_validate(service.get_lead(lead_id))}


@router.patch("/leads/{lead_id}")
async def update_lead_status(
    lead_id: int,
    data: LeadStatusUpdate,
    _admin: dict = Depends(require_admin),
    service: LeadService = Depends(get_admin_lead_service),
):
    lead = service.update_status(lead_id, data.status)
    return {"success": True, "data": LeadResponse.model_validate(lead)}


@router.delete("/leads/{lead_id}")
async def delete_lead(
    lead_id: int,
    _admin: dict = Depends(require_admin),
    service: LeadService = Depends(get_admin_lead_service),
):
    service.delete_lead(lead_id)
    return {"success": True, "message": "Lead deleted"}


# ============================================================================
# APPOINTMENTS
# ============================================================================


@router.get("/appointments")
async def list_appointments(
    status: Optional[str] = Query(None),
    date: Optional[str] = Query(None),
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return {"success": True, "data": service.get_appointments(status, date)}


@router.get("/appointments/{appointment_id}")
async def get_appointment(
    appointment_id: str,
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return {"success": True, "data": service.get_appointment(appointment_id)}


@router.patch("/appointments/{appointment_id}")
async def update_appointment_status(
    appointment_id: str,
    data: AppointmentStatusUpdate,
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Move an appointment along pending -> confirmed -> completed/cancelled"""
    return {"success": True, "data": service.update_appointment_status(appointment_id, data.status)}


@router.delete("/appointments/{appointment_id}")
async def delete_appointment(
    appointment_id: str,
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    service.delete_appointment(appointment_id)
    return {"success": True, "message": "Appointment deleted"}


# ============================================================================
# CUSTOMERS
# ============================================================================


@router.get("/customers")
async def list_customers(
    search: Optional[str] = Query(None),
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return {"success": True, "data": service.get_customers(search)}


@router.get("/customers/repeat")
async def repeat_customers(
    _admin: dict = Depends(require_admin),
    service: LeadService = Depends(get_admin_lead_service),
):
    """Visit history for customers who have requested more than once"""
    return {"success": True, **service.get_repeat_customers()}


@router.get("/customers/{customer_id}")
async def get_customer(
    customer_id: int,
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return {"success": True, "data": service.get_customer(customer_id)}


@router.put("/customers/{customer_id}")
async def update_customer(
    customer_id: int,
    data: CustomerUpdate,
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return {"success": True, "data": service.update_customer(customer_id, data)}


@router.delete("/customers/{customer_id}")
async def delete_customer(
    customer_id: int,
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    service.delete_customer(customer_id)
    return {"success": True, "message": "Customer deleted"}


# ============================================================================
# DASHBOARD & ANALYTICS
# ============================================================================


@router.get("/dashboard")
async def dashboard(
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return {"success": True, "data": service.get_dashboard()}


@router.get("/analytics")
async def analytics(
    _admin: dict = Depends(require_admin),
    service: AnalyticsService = Depends(get_admin_analytics_service),
):
    """Traffic and conversion breakdowns from tracked site events"""
    return service.get_dashboard()
