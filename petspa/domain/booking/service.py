"""Booking service - Turns a completed booking wizard into an appointment"""

import asyncio
import logging
import time
from collections import Counter

from sqlalchemy.orm import Session

from ...email_service import ResendEmailSender
from ...email_templates import booking_confirmation_template, new_booking_notification_template
from ...models import Customer, Pet, Service
from ...shared.errors import ChannelDeliveryError
from .repository import BookingRepository
from .schemas import AppointmentDetails, BookingRequest, BookingResponse

logger = logging.getLogger(__name__)

BASE36_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def generate_booking_id(timestamp_ms: int) -> str:
    """PP-<millisecond timestamp in upper-case base 36>"""
    return f"PP-{to_base36(timestamp_ms)}"


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session, email_sender: ResendEmailSender):
        self.db = db
        self.repo = BookingRepository()
        self.email_sender = email_sender

    def get_services(self) -> list[Service]:
        return self.repo.get_active_services(self.db)

    def _find_or_create_customer(self, data: BookingRequest) -> Customer:
        owner = data.ownerInfo
        customer = self.repo.get_customer_by_email(self.db, owner.email)
        if customer:
            logger.info(f"👤 Existing customer {customer.id} for {owner.email}")
            return customer

        return self.repo.create_customer(
            self.db,
            first_name=owner.firstName,
            last_name=owner.lastName,
            email=owner.email,
            phone=owner.phone,
            address=owner.address or None,
            emergency_contact=owner.emergencyContact or None,
            marketing_consent=data.preferences.marketingConsent,
            contact_method=data.preferences.contactMethod,
            reminder_preference=data.preferences.reminderPreference,
        )

    def _find_or_create_pet(self, customer: Customer, data: BookingRequest) -> Pet:
        pet_info = data.petInfo
        pet = self.repo.find_pet(self.db, customer.id, pet_info.name, pet_info.breed)
        if pet:
            return pet
        return self.repo.create_pet(
            self.db,
            customer.id,
            name=pet_info.name,
            breed=pet_info.breed,
            size=pet_info.size or "medium",
            notes=pet_info.notes or None,
        )

    def _next_booking_id(self) -> str:
        timestamp_ms = int(time.time() * 1000)
        booking_id = generate_booking_id(timestamp_ms)
        while self.repo.appointment_exists(self.db, booking_id):
            timestamp_ms += 1
            booking_id = generate_booking_id(timestamp_ms)
        return booking_id

    def _link_services(self, booking_id: str, data: BookingRequest) -> None:
        # The same service picked twice becomes one row with quantity 2
        quantities = Counter(selected.id for selected in data.selectedServices)
        linked = set()
        for selected in data.selectedServices:
            if selected.id in linked:
                continue
            linked.add(selected.id)
            if not self.repo.get_service(self.db, selected.id):
                logger.info(f"➕ Adding service {selected.id} to catalog from booking")
                self.repo.create_service(
                    self.db,
                    id=selected.id,
                    name=selected.name,
                    description=selected.description,
                    duration=selected.duration,
                    price=selected.price,
                    category=selected.category,
                )
            self.repo.add_appointment_service(self.db, booking_id, selected.id, quantities[selected.id])

    def create_booking(self, data: BookingRequest) -> str:
        """Persist customer, pet, appointment and its services in one transaction"""
        try:
            customer = self._find_or_create_customer(data)
            pet = self._find_or_create_pet(customer, data)
            booking_id = self._next_booking_id()
            self.repo.create_appointment(
                self.db,
                id=booking_id,
                customer_id=customer.id,
                pet_id=pet.id,
                date=data.selectedDate,
                time=data.selectedTime,
                status="confirmed",
                total_duration=data.total_duration,
            )
            self._link_services(booking_id, data)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"✅ Booking {booking_id} created for customer {customer.id}, pet {pet.id}")
        return booking_id

    async def send_confirmation_emails(self, booking_id: str, data: BookingRequest) -> dict:
        """Customer confirmation and shop notification; failures are logged only"""
        services = [s.model_dump() for s in data.selectedServices]
        owner = data.ownerInfo
        pet = data.petInfo

        customer_email = self.email_sender.send(
            to=owner.email,
            subject=f"Appointment Confirmed - {pet.name} on {data.selectedDate}",
            mjml_content=booking_confirmation_template(
                booking_id=booking_id,
                first_name=owner.firstName,
                pet_name=pet.name,
                services=services,
                date=data.selectedDate,
                time=data.selectedTime,
                total_duration=data.total_duration,
            ),
            channel="booking_customer_email",
        )
        business_email = self.email_sender.send(
            to=self.email_sender.config.admin_email or self.email_sender.config.reply_to,
            subject=f"New Booking: {owner.firstName} {owner.lastName} - {pet.name}",
            mjml_content=new_booking_notification_template(
                booking_id=booking_id,
                owner=owner.model_dump(),
                pet=pet.model_dump(),
                services=services,
                date=data.selectedDate,
                time=data.selectedTime,
                total_duration=data.total_duration,
                preferences=data.preferences.model_dump(),
            ),
            reply_to=owner.email,
            channel="booking_business_email",
        )

        outcomes = await asyncio.gather(customer_email, business_email, return_exceptions=True)
        results = {}
        for name, outcome in zip(("customer", "business"), outcomes):
            if isinstance(outcome, ChannelDeliveryError):
                logger.warning(f"⚠️ Booking {booking_id} {name} email not sent: {outcome.reason}")
                results[name] = False
            elif isinstance(outcome, Exception):
                logger.error(f"❌ Booking {booking_id} {name} email failed: {outcome}")
                results[name] = False
            else:
                results[name] = True
        return results

    async def book(self, data: BookingRequest) -> BookingResponse:
        logger.info(f"📥 Booking request from {data.ownerInfo.email} for {data.selectedDate} {data.selectedTime}")
        booking_id = self.create_booking(data)
        await self.send_confirmation_emails(booking_id, data)

        return BookingResponse(
            message="Appointment booked successfully! Check your email for confirmation.",
            bookingId=booking_id,
            appointmentDetails=AppointmentDetails(
                id=booking_id,
                pet=data.petInfo,
                owner=data.ownerInfo,
                services=data.selectedServices,
                date=data.selectedDate,
                time=data.selectedTime,
                duration=data.total_duration,
            ),
        )
