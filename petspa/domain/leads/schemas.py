"""Lead domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import validate_email

NEW_CUSTOMER_TOKENS = ("yes", "no")

# Messages used when a field is missing or not a string at all
LEAD_FIELD_MESSAGES = {
    "nameAndPhone": "Name and phone are required",
    "email": "Please enter a valid email address",
    "newCustomer": "Please indicate if you are a new customer",
    "petsNameAndBreed": "Pet name and breed are required",
    "dateTimeRequested": "Please enter a valid date and time",
    "message": "Message must be at least 10 characters",
}


class LeadSubmission(BaseModel):
    """Popup / appointment-request form payload"""

    nameAndPhone: str
    email: str
    newCustomer: str
    petsNameAndBreed: str
    dateTimeRequested: Optional[str] = None
    message: str

    @field_validator("nameAndPhone")
    @classmethod
    def validate_name_and_phone(cls, v):
        v = v.strip()
        if not v:
            raise ValueError(LEAD_FIELD_MESSAGES["nameAndPhone"])
        if len(v) > 100:
            raise ValueError("Entry is too long")
        return v

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v):
        try:
            normalized = validate_email(v)
        except ValueError:
            raise ValueError(LEAD_FIELD_MESSAGES["email"]) from None
        if not normalized:
            raise ValueError(LEAD_FIELD_MESSAGES["email"])
        return normalized

    @field_validator("newCustomer")
    @classmethod
    def validate_new_customer(cls, v):
        if v not in NEW_CUSTOMER_TOKENS:
            raise ValueError(LEAD_FIELD_MESSAGES["newCustomer"])
        return v

    @field_validator("petsNameAndBreed")
    @classmethod
    def validate_pets(cls, v):
        v = v.strip()
        if not v:
            raise ValueError(LEAD_FIELD_MESSAGES["petsNameAndBreed"])
        if len(v) > 200:
            raise ValueError("Entry is too long")
        return v

    @field_validator("dateTimeRequested")
    @classmethod
    def validate_requested_time(cls, v):
        if v is None:
            return v
        v = v.strip()
        if len(v) > 200:
            raise ValueError("Entry is too long")
        return v or None

    @field_validator("message")
    @classmethod
    def validate_message(cls, v):
        v = v.strip()
        if len(v) < 10:
            raise ValueError(LEAD_FIELD_MESSAGES["message"])
        if len(v) > 1000:
            raise ValueError("Message is too long")
        return v

    @property
    def customer_type(self) -> str:
        return "New Customer" if self.newCustomer == "yes" else "Existing Customer"


class NotificationFlags(BaseModel):
    businessSms: bool
    customerSms: bool
    customerEmail: bool
    businessEmail: bool


class LeadIntakeResponse(BaseModel):
    success: bool = True
    message: str
    leadId: Optional[int] = None
    notifications: NotificationFlags


class LeadResponse(BaseModel):
    """Schema for lead rows returned to the admin dashboard"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: Optional[str] = None
    name_and_phone: Optional[str] = None
    email: str
    phone: Optional[str] = None
    new_customer: Optional[str] = None
    pets_name_and_breed: Optional[str] = None
    date_time_requested: Optional[str] = None
    message: Optional[str] = None
    source: str
    status: str
    created_at: Optional[datetime] = None


class LeadStatusUpdate(BaseModel):
    status: Literal["new", "contacted", "converted", "closed"]
