"""Admin service - Authentication and dashboard operations"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import ADMIN_PASSWORD, BUSINESS_TIMEZONE
from ...models import AdminUser, Appointment, Customer
from ...security_utils import constant_time_compare, create_admin_token, verify_password
from .repository import AdminRepository
from .schemas import (
    AppointmentDetail,
    AppointmentSummary,
    CustomerDetail,
    CustomerSummary,
    CustomerUpdate,
    PetSummary,
    ServiceSummary,
)

logger = logging.getLogger(__name__)

# Appointment lifecycle; completed and cancelled are terminal
ALLOWED_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}


def can_transition(current: str, new: str) -> bool:
    return current == new or new in ALLOWED_TRANSITIONS.get(current, set())


def authenticate_admin(db: Session, password: str, username: Optional[str] = None) -> str:
    """
    Check admin credentials and issue a session token.

    With a username the password is checked against the stored bcrypt hash;
    without one it is checked against ADMIN_PASSWORD.
    """
    if username:
        user = db.query(AdminUser).filter(AdminUser.username == username, AdminUser.active.is_(True)).first()
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"⚠️ Failed admin login for {username}")
            raise HTTPException(status_code=401, detail="Invalid username or password")
        logger.info(f"🔑 Admin {username} logged in")
        return create_admin_token(user.username, user.role)

    if not ADMIN_PASSWORD:
        logger.error("❌ ADMIN_PASSWORD not configured, password-only login disabled")
        raise HTTPException(status_code=401, detail="Invalid password")
    if not constant_time_compare(password, ADMIN_PASSWORD):
        logger.warning("⚠️ Failed admin password login")
        raise HTTPException(status_code=401, detail="Invalid password")

    logger.info("🔑 Admin logged in with shared password")
    return create_admin_token("admin")


def _service_summaries(appointment: Appointment) -> list[ServiceSummary]:
    return [
        ServiceSummary(
            id=link.service.id,
            name=link.service.name,
            price=link.service.price,
            duration=link.service.duration,
            category=link.service.category,
            quantity=link.quantity,
        )
        for link in appointment.services
        if link.service is not None
    ]


def appointment_summary(appointment: Appointment) -> AppointmentSummary:
    customer, pet = appointment.customer, appointment.pet
    return AppointmentSummary(
        id=appointment.id,
        customerName=f"{customer.first_name} {customer.last_name}",
        customerEmail=customer.email,
        customerPhone=customer.phone,
        petName=pet.name,
        petBreed=pet.breed,
        petSize=pet.size,
        services=_service_summaries(appointment),
        date=appointment.date,
        time=appointment.time,
        status=appointment.status,
        totalDuration=appointment.total_duration,
        createdAt=appointment.created_at,
    )


def appointment_detail(appointment: Appointment) -> AppointmentDetail:
    return AppointmentDetail(
        **appointment_summary(appointment).model_dump(),
        customerAddress=appointment.customer.address,
        customerEmergencyContact=appointment.customer.emergency_contact,
        petNotes=appointment.pet.notes,
        notes=appointment.notes,
    )


def _customer_fields(customer: Customer) -> dict:
    dates = sorted((a.date for a in customer.appointments), reverse=True)
    return {
        "id": customer.id,
        "firstName": customer.first_name,
        "lastName": customer.last_name,
        "email": customer.email,
        "phone": customer.phone,
        "address": customer.address,
        "emergencyContact": customer.emergency_contact,
        "petCount": len(customer.pets),
        "totalBookings": len(customer.appointments),
        "lastBooking": dates[0] if dates else None,
        "createdAt": customer.created_at,
    }


CUSTOMER_FIELD_MAP = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phone": "phone",
    "address": "address",
    "emergencyContact": "emergency_contact",
    "marketingConsent": "marketing_consent",
}
# Optional contact details an admin may blank out
CLEARABLE_FIELDS = {"phone", "address", "emergency_contact"}


class AdminService:
    """Service layer for the admin dashboard"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AdminRepository()

    # ------------------------------------------------------------------
    # Appointments
    # ------------------------------------------------------------------

    def get_appointments(self, status: Optional[str] = None, date: Optional[str] = None) -> list[AppointmentSummary]:
        return [appointment_summary(a) for a in self.repo.get_appointments(self.db, status, date)]

    def _get_appointment(self, appointment_id: str) -> Appointment:
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    def get_appointment(self, appointment_id: str) -> AppointmentDetail:
        return appointment_detail(self._get_appointment(appointment_id))

    def update_appointment_status(self, appointment_id: str, status: str) -> AppointmentDetail:
        appointment = self._get_appointment(appointment_id)
        if not can_transition(appointment.status, status):
            logger.warning(f"⚠️ Rejected appointment {appointment_id} transition {appointment.status} -> {status}")
            raise HTTPException(
                status_code=409,
                detail=f"Cannot change appointment status from {appointment.status} to {status}",
            )

        logger.info(f"🔄 Appointment {appointment_id} status {appointment.status} -> {status}")
        self.repo.update(self.db, appointment, {"status": status})
        return appointment_detail(self._get_appointment(appointment_id))

    def delete_appointment(self, appointment_id: str) -> None:
        appointment = self._get_appointment(appointment_id)
        self.repo.delete(self.db, appointment)
        logger.info(f"🗑️ Appointment {appointment_id} deleted")

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def get_customers(self, search: Optional[str] = None) -> list[CustomerSummary]:
        return [CustomerSummary(**_customer_fields(c)) for c in self.repo.get_customers(self.db, search)]

    def _get_customer(self, customer_id: int) -> Customer:
        customer = self.repo.get_customer_by_id(self.db, customer_id)
        if not customer:
            raise HTTPException(status_code=404, detail="Customer not found")
        return customer

    def get_customer(self, customer_id: int) -> CustomerDetail:
        customer = self._get_customer(customer_id)
        appointments = sorted(customer.appointments, key=lambda a: (a.date, a.time), reverse=True)
        return CustomerDetail(
            **_customer_fields(customer),
            marketingConsent=customer.marketing_consent,
            contactMethod=customer.contact_method,
            reminderPreference=customer.reminder_preference,
            pets=[
                PetSummary(id=p.id, name=p.name, breed=p.breed, size=p.size, notes=p.notes) for p in customer.pets
            ],
            appointments=[appointment_summary(a) for a in appointments],
        )

    def update_customer(self, customer_id: int, data: CustomerUpdate) -> CustomerDetail:
        customer = self._get_customer(customer_id)
        updates = {CUSTOMER_FIELD_MAP[field]: value for field, value in data.model_dump(exclude_unset=True).items()}
        required = sorted(field for field, value in updates.items() if value is None and field not in CLEARABLE_FIELDS)
        if required:
            raise HTTPException(status_code=400, detail=f"Cannot clear required fields: {', '.join(required)}")
        if "email" in updates and self.repo.email_in_use(self.db, updates["email"], customer_id):
            raise HTTPException(status_code=409, detail="Another customer already uses this email")

        self.repo.update(self.db, customer, updates)
        logger.info(f"✏️ Customer {customer_id} updated: {sorted(updates)}")
        return self.get_customer(customer_id)

    def delete_customer(self, customer_id: int) -> None:
        customer = self._get_customer(customer_id)
        self.repo.delete(self.db, customer)
        logger.info(f"🗑️ Customer {customer_id} deleted with pets and appointments")

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def get_dashboard(self, today: Optional[datetime] = None) -> dict:
        today_date = (today or datetime.now(ZoneInfo(BUSINESS_TIMEZONE))).date()
        week_start = today_date - timedelta(days=(today_date.weekday() + 1) % 7)
        week_end = week_start + timedelta(days=6)

        recent = self.repo.get_appointments(self.db, limit=10)
        return {
            "stats": {
                "totalBookings": self.repo.count_appointments(self.db),
                "todayBookings": self.repo.count_appointments(
                    self.db, date_from=today_date.isoformat(), date_to=today_date.isoformat()
                ),
                "thisWeekBookings": self.repo.count_appointments(
                    self.db, date_from=week_start.isoformat(), date_to=week_end.isoformat()
                ),
                "pendingConfirmations": self.repo.count_appointments(self.db, status="pending"),
            },
            "recentBookings": [
                {
                    "id": a.id,
                    "customerName": f"{a.customer.first_name} {a.customer.last_name}",
                    "petName": a.pet.name,
                    "service": ", ".join(s.name for s in _service_summaries(a)),
                    "date": a.date,
                    "time": a.time,
                    "status": a.status,
                }
                for a in recent
            ],
        }
