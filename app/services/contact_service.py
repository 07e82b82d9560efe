# app/services/contact_service.py
import logging
import math
import uuid
from datetime import datetime, time
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.core.database import utcnow
from app.core.exceptions import NotFoundError
from app.models.contact import Contact
from app.schemas.contact_schemas import ContactCreateSchema, ContactUpdateSchema

logger = logging.getLogger("api.contact")


def escape_like(value: str) -> str:
    """Escapa os curingas do LIKE para que a busca seja literal."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ContactService:
    def __init__(self, db: Session):
        self.db = db

    def create_contact(
        self,
        contact_data: ContactCreateSchema,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        source: str = "website",
    ) -> Contact:
        contact = Contact(
            name=contact_data.name,
            email=contact_data.email,
            phone=contact_data.phone,
            subject=contact_data.subject,
            message=contact_data.message,
            company=contact_data.company,
            ip_address=ip_address,
            user_agent=user_agent,
            source=source,
            tags=[],
        )
        self.db.add(contact)
        self.db.commit()
        logger.info("Contact %s received from %s", contact.id, contact.email)
        return contact

    def find_contact(self, contact_id: Optional[str]) -> Optional[Contact]:
        try:
            contact_uuid = uuid.UUID(str(contact_id))
        except ValueError:
            return None
        return self.db.get(Contact, str(contact_uuid))

    def get_contact(self, contact_id: str, message: str = "Contact not found") -> Contact:
        contact = self.find_contact(contact_id)
        if contact is None:
            raise NotFoundError(message)
        return contact

    def open_contact(self, contact_id: str) -> Contact:
        """Retorna o contato e o marca como lido se ainda for novo."""
        contact = self.get_contact(contact_id)
        if contact.status == "new":
            contact.status = "read"
            self.db.commit()
        return contact

    def update_contact(self, contact_id: str, update_data: ContactUpdateSchema) -> Contact:
        contact = self.get_contact(contact_id)
        for field, value in update_data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(contact, field, value)
        self.db.commit()
        return contact

    def mark_replied(self, contact: Contact) -> Contact:
        contact.status = "replied"
        self.db.commit()
        return contact

    def delete_contact(self, contact_id: str) -> None:
        contact = self.get_contact(contact_id)
        self.db.delete(contact)
        self.db.commit()
        logger.info("Contact %s deleted", contact_id)

    def list_contacts(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Contact], Dict[str, object]]:
        filters = []
        if status:
            filters.append(Contact.status == status)
        if priority:
            filters.append(Contact.priority == priority)
        if search:
            pattern = f"%{escape_like(search.lower())}%"
            filters.append(
                or_(
                    func.lower(Contact.name).like(pattern, escape="\\"),
                    func.lower(Contact.email).like(pattern, escape="\\"),
                    func.lower(Contact.subject).like(pattern, escape="\\"),
                    func.lower(Contact.message).like(pattern, escape="\\"),
                    func.lower(Contact.company).like(pattern, escape="\\"),
                )
            )

        total = self.db.execute(select(func.count(Contact.id)).where(*filters)).scalar_one()
        contacts = self.db.execute(
            select(Contact)
            .where(*filters)
            .order_by(Contact.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()

        pages = math.ceil(total / limit) if limit else 0
        pagination = {
            "current": page,
            "pages": pages,
            "total": total,
            "has_next": page < pages,
            "has_prev": page > 1,
        }
        return list(contacts), pagination

    def get_public_stats(self, now: Optional[datetime] = None) -> Dict[str, int]:
        now = now or utcnow()
        start_of_day = datetime.combine(now.date(), time.min)
        total = self.db.execute(select(func.count(Contact.id))).scalar_one()
        today = self.db.execute(
            select(func.count(Contact.id)).where(Contact.created_at >= start_of_day)
        ).scalar_one()
        return {"total_submissions": total, "today_submissions": today}
