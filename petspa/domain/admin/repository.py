"""Admin repository - Appointment and customer queries for the dashboard"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, AppointmentService, Customer


class AdminRepository:
    """Repository for admin dashboard database operations"""

    @staticmethod
    def _appointment_query(db: Session):
        return db.query(Appointment).options(
            joinedload(Appointment.customer),
            joinedload(Appointment.pet),
            joinedload(Appointment.services).joinedload(AppointmentService.service),
        )

    @staticmethod
    def get_appointments(
        db: Session, status: Optional[str] = None, date: Optional[str] = None, limit: Optional[int] = None
    ) -> list[Appointment]:
        query = AdminRepository._appointment_query(db)
        if status:
            query = query.filter(Appointment.status == status)
        if date:
            query = query.filter(Appointment.date == date)
        query = query.order_by(Appointment.created_at.desc(), Appointment.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: str) -> Optional[Appointment]:
        return AdminRepository._appointment_query(db).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def count_appointments(
        db: Session, status: Optional[str] = None, date_from: Optional[str] = None, date_to: Optional[str] = None
    ) -> int:
        query = db.query(func.count(Appointment.id))
        if status:
            query = query.filter(Appointment.status == status)
        if date_from:
            query = query.filter(Appointment.date >= date_from)
        if date_to:
            query = query.filter(Appointment.date <= date_to)
        return query.scalar() or 0

    @staticmethod
    def get_customers(db: Session, search: Optional[str] = None) -> list[Customer]:
        query = db.query(Customer).options(joinedload(Customer.pets), joinedload(Customer.appointments))
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    func.lower(Customer.first_name).like(pattern),
                    func.lower(Customer.last_name).like(pattern),
                    func.lower(Customer.email).like(pattern),
                )
            )
        return query.order_by(Customer.created_at.desc(), Customer.id.desc()).all()

    @staticmethod
    def get_customer_by_id(db: Session, customer_id: int) -> Optional[Customer]:
        return (
            db.query(Customer)
            .options(
                joinedload(Customer.pets),
                joinedload(Customer.appointments).joinedload(Appointment.pet),
                joinedload(Customer.appointments)
                .joinedload(Appointment.services)
                .joinedload(AppointmentService.service),
            )
            .filter(Customer.id == customer_id)
            .first()
        )

    @staticmethod
    def email_in_use(db: Session, email: str, exclude_customer_id: int) -> bool:
        return (
            db.query(Customer.id).filter(Customer.email == email, Customer.id != exclude_customer_id).first()
            is not None
        )

    @staticmethod
    def update(db: Session, obj, updates: dict):
        for field, value in updates.items():
            setattr(obj, field, value)
        db.commit()
        db.refresh(obj)
        return obj

    @staticmethod
    def delete(db: Session, obj) -> None:
        db.delete(obj)
        db.commit()
