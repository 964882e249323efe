"""Admin domain schemas - Pydantic models for the dashboard API"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email


class AdminLoginRequest(BaseModel):
    username: Optional[str] = None
    password: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if not v:
            raise ValueError("Password is required")
        return v


class AdminLoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    token: str


class AppointmentStatusUpdate(BaseModel):
    status: Literal["pending", "confirmed", "completed", "cancelled"]


class ServiceSummary(BaseModel):
    id: str
    name: str
    price: str
    duration: int
    category: str
    quantity: int = 1


class AppointmentSummary(BaseModel):
    id: str
    customerName: str
    customerEmail: str
    customerPhone: Optional[str] = None
    petName: str
    petBreed: str
    petSize: str
    services: list[ServiceSummary]
    date: str
    time: str
    status: str
    totalDuration: int
    createdAt: Optional[datetime] = None


class AppointmentDetail(AppointmentSummary):
    customerAddress: Optional[str] = None
    customerEmergencyContact: Optional[str] = None
    petNotes: Optional[str] = None
    notes: Optional[str] = None


class PetSummary(BaseModel):
    id: int
    name: str
    breed: str
    size: str
    notes: Optional[str] = None


class CustomerSummary(BaseModel):
    id: int
    firstName: str
    lastName: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    emergencyContact: Optional[str] = None
    petCount: int
    totalBookings: int
    lastBooking: Optional[str] = None
    createdAt: Optional[datetime] = None


class CustomerDetail(CustomerSummary):
    marketingConsent: bool
    contactMethod: Optional[str] = None
    reminderPreference: Optional[str] = None
    pets: list[PetSummary]
    appointments: list[AppointmentSummary]


class CustomerUpdate(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    emergencyContact: Optional[str] = None
    marketingConsent: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v):
        return validate_email(v)
