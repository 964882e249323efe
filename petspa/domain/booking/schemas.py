"""Booking domain schemas - Pydantic models for the booking wizard"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from ...shared.validators import validate_email


REQUIRED_MESSAGES = {
    "selectedDate": "Date is required",
    "selectedTime": "Time is required",
    "name": "Pet name is required",
    "breed": "Pet breed is required",
    "firstName": "First name is required",
    "lastName": "Last name is required",
    "phone": "Phone number is required",
}


def _require_text(v: str, info: ValidationInfo) -> str:
    v = v.strip()
    if not v:
        raise ValueError(REQUIRED_MESSAGES[info.field_name])
    return v


class SelectedService(BaseModel):
    id: str
    name: str
    duration: int
    price: str
    description: str
    category: Literal["grooming", "bath", "addon", "boarding"]


class PetInfo(BaseModel):
    name: str
    breed: str
    size: Optional[Literal["small", "medium", "large"]] = None
    notes: Optional[str] = None

    @field_validator("name", "breed")
    @classmethod
    def validate_required(cls, v, info: ValidationInfo):
        return _require_text(v, info)


class OwnerInfo(BaseModel):
    firstName: str
    lastName: str
    email: str
    phone: str
    address: Optional[str] = None
    emergencyContact: Optional[str] = None

    @field_validator("firstName", "lastName", "phone")
    @classmethod
    def validate_required(cls, v, info: ValidationInfo):
        return _require_text(v, info)

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v):
        try:
            normalized = validate_email(v)
        except ValueError:
            raise ValueError("Valid email is required") from None
        if not normalized:
            raise ValueError("Valid email is required")
        return normalized


class BookingPreferences(BaseModel):
    contactMethod: Literal["email", "phone", "either"]
    reminderPreference: Literal["email", "text", "both"]
    marketingConsent: bool


class BookingRequest(BaseModel):
    """Everything the multi-step booking wizard collects"""

    selectedServices: list[SelectedService]
    selectedDate: str
    selectedTime: str
    petInfo: PetInfo
    ownerInfo: OwnerInfo
    preferences: BookingPreferences

    @field_validator("selectedDate", "selectedTime")
    @classmethod
    def validate_required(cls, v, info: ValidationInfo):
        return _require_text(v, info)

    @field_validator("selectedServices")
    @classmethod
    def validate_services(cls, v):
        if not v:
            raise ValueError("At least one service must be selected")
        return v

    @property
    def total_duration(self) -> int:
        return sum(service.duration for service in self.selectedServices)


class AppointmentDetails(BaseModel):
    id: str
    pet: PetInfo
    owner: OwnerInfo
    services: list[SelectedService]
    date: str
    time: str
    duration: int


class BookingResponse(BaseModel):
    success: bool = True
    message: str
    bookingId: str
    appointmentDetails: AppointmentDetails


class ServiceResponse(BaseModel):
    """Catalog entry shown in the wizard's first step"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    duration: int
    price: str
    category: str
