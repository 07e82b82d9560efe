# app/models/contact.py
import uuid

from sqlalchemy import JSON, Column, DateTime, Index, String, Text

from app.core.database import Base, utcnow


class Contact(Base):
    """
    Mensagem enviada pelo formulário de contato do site
    """
    __tablename__ = "contacts"
    __table_args__ = (
        # Consultas da janela de duplicidade e do limite por IP
        Index("ix_contacts_email_created_at", "email", "created_at"),
        Index("ix_contacts_ip_created_at", "ip_address", "created_at"),
    )

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=True)
    subject = Column(String(200), nullable=True)
    message = Column(Text, nullable=False)
    company = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default="new", index=True)
    priority = Column(String(20), nullable=False, default="medium")
    tags = Column(JSON, nullable=False, default=list)
    source = Column(String(50), nullable=False, default="website")
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(512), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Contact {self.id} {self.email} [{self.status}]>"
