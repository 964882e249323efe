"""Booking repository - Customers, pets, services and appointments"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentService, Customer, Pet, Service


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_customer_by_email(db: Session, email: str) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.email == email).first()

    @staticmethod
    def create_customer(db: Session, **customer_data) -> Customer:
        customer = Customer(**customer_data)
        db.add(customer)
        db.flush()
        return customer

    @staticmethod
    def find_pet(db: Session, customer_id: int, name: str, breed: str) -> Optional[Pet]:
        return (
            db.query(Pet)
            .filter(Pet.customer_id == customer_id, Pet.name == name, Pet.breed == breed)
            .first()
        )

    @staticmethod
    def create_pet(db: Session, customer_id: int, **pet_data) -> Pet:
        pet = Pet(customer_id=customer_id, **pet_data)
        db.add(pet)
        db.flush()
        return pet

    @staticmethod
    def appointment_exists(db: Session, appointment_id: str) -> bool:
        return db.query(Appointment.id).filter(Appointment.id == appointment_id).first() is not None

    @staticmethod
    def create_appointment(db: Session, **appointment_data) -> Appointment:
        appointment = Appointment(**appointment_data)
        db.add(appointment)
        db.flush()
        return appointment

    @staticmethod
    def get_service(db: Session, service_id: str) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def create_service(db: Session, **service_data) -> Service:
        service = Service(**service_data)
        db.add(service)
        db.flush()
        return service

    @staticmethod
    def add_appointment_service(db: Session, appointment_id: str, service_id: str, quantity: int = 1) -> None:
        db.add(AppointmentService(appointment_id=appointment_id, service_id=service_id, quantity=quantity))

    @staticmethod
    def get_active_services(db: Session) -> list[Service]:
        return db.query(Service).filter(Service.active.is_(True)).order_by(Service.category, Service.name).all()
