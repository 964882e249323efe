from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

APPOINTMENT_STATUSES = ("pending", "confirmed", "completed", "cancelled")
LEAD_STATUSES = ("new", "contacted", "converted", "closed")
PET_SIZES = ("small", "medium", "large")
SERVICE_CATEGORIES = ("grooming", "bath", "addon", "boarding")
EVENT_TYPES = (
    "page_view",
    "appointment_click",
    "phone_click",
    "form_open",
    "form_start",
    "form_submit",
    "form_abandon",
)


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=True)
    address = Column(String(500), nullable=True)
    emergency_contact = Column(String(255), nullable=True)
    marketing_consent = Column(Boolean, default=False, nullable=False)
    contact_method = Column(String(20), nullable=True)  # email, phone, either
    reminder_preference = Column(String(20), nullable=True)  # email, text, both
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    pets = relationship("Pet", back_populates="customer", cascade="all, delete-orphan")
    appointments = relationship(
        "Appointment", back_populates="customer", cascade="all, delete-orphan"
    )


class Pet(Base):
    __tablename__ = "pets"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    breed = Column(String(100), nullable=False)
    size = Column(String(10), default="medium", nullable=False)  # small, medium, large
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    customer = relationship("Customer", back_populates="pets")
    appointments = relationship("Appointment", back_populates="pet")


class Service(Base):
    __tablename__ = "services"

    id = Column(String(100), primary_key=True)  # slug, e.g. "full-groom"
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False)  # minutes
    price = Column(String(50), nullable=False)  # display price, e.g. "$65+"
    category = Column(String(20), nullable=False)  # grooming, bath, addon, boarding
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(50), primary_key=True)  # PP-<base36 timestamp>
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    pet_id = Column(Integer, ForeignKey("pets.id"), nullable=False, index=True)
    date = Column(String(20), nullable=False)  # YYYY-MM-DD as picked in the wizard
    time = Column(String(20), nullable=False)
    status = Column(String(20), default="pending", nullable=False)
    notes = Column(Text, nullable=True)
    total_duration = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="appointments")
    pet = relationship("Pet", back_populates="appointments")
    services = relationship(
        "AppointmentService", back_populates="appointment", cascade="all, delete-orphan"
    )


class AppointmentService(Base):
    __tablename__ = "appointment_services"

    appointment_id = Column(String(50), ForeignKey("appointments.id"), primary_key=True)
    service_id = Column(String(100), ForeignKey("services.id"), primary_key=True)
    quantity = Column(Integer, default=1, nullable=False)

    appointment = relationship("Appointment", back_populates="services")
    service = relationship("Service")


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), default="admin", nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Lead(Base):
    __tablename__ = "leads"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=True)
    name_and_phone = Column(String(255), nullable=True)  # combined field exactly as submitted
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    new_customer = Column(String(10), nullable=True)  # "yes" / "no" as submitted
    pets_name_and_breed = Column(String(255), nullable=True)
    date_time_requested = Column(String(255), nullable=True)  # free text from the popup
    message = Column(Text, nullable=True)
    source = Column(String(50), default="appointment_form", nullable=False)
    status = Column(String(20), default="new", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)


class AnalyticsEvent(Base):
    __tablename__ = "analytics_events"

    id = Column(Integer, primary_key=True, index=True)
    event_type = Column(String(50), nullable=False, index=True)
    visitor_id = Column(String(100), nullable=True, index=True)
    page = Column(String(500), nullable=True)
    occurred_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
