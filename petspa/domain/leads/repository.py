"""Lead repository - Database operations for leads"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Lead


class LeadRepository:
    """Repository for lead database operations"""

    @staticmethod
    def create_lead(db: Session, **lead_data) -> Lead:
        """Insert a new lead"""
        lead = Lead(**lead_data)
        db.add(lead)
        db.commit()
        db.refresh(lead)
        return lead

    @staticmethod
    def get_leads(db: Session, status: Optional[str] = None) -> list[Lead]:
        """All leads, newest first"""
        query = db.query(Lead)
        if status:
            query = query.filter(Lead.status == status)
        return query.order_by(Lead.created_at.desc(), Lead.id.desc()).all()

    @staticmethod
    def get_lead_by_id(db: Session, lead_id: int) -> Optional[Lead]:
        return db.query(Lead).filter(Lead.id == lead_id).first()

    @staticmethod
    def update_status(db: Session, lead: Lead, status: str) -> Lead:
        lead.status = status
        db.commit()
        db.refresh(lead)
        return lead

    @staticmethod
    def delete_lead(db: Session, lead: Lead) -> None:
        db.delete(lead)
        db.commit()

    @staticmethod
    def count_since(db: Session, since: Optional[datetime] = None) -> int:
        query = db.query(func.count(Lead.id))
        if since is not None:
            query = query.filter(Lead.created_at >= since)
        return query.scalar() or 0

    @staticmethod
    def count_by_status(db: Session) -> dict[str, int]:
        rows = db.query(Lead.status, func.count(Lead.id)).group_by(Lead.status).all()
        return {status: count for status, count in rows}

    @staticmethod
    def get_recent(db: Session, limit: int = 10) -> list[Lead]:
        return db.query(Lead).order_by(Lead.created_at.desc(), Lead.id.desc()).limit(limit).all()
