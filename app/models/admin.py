# app/models/admin.py
import uuid
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy import Boolean, Column, DateTime, String

from app.auth.password_handler import get_password_hash, verify_password
from app.core.database import Base, utcnow


class Administrator(Base):
    """
    Administrador do painel. A senha nunca é armazenada em texto plano:
    `set_password` (ou a atribuição de `admin.password`, com o custo padrão)
    gera um novo hash e é o único caminho que altera `password_hash`.
    """
    __tablename__ = "administrators"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(20), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=True)
    role = Column(String(20), nullable=False, default="admin")
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __init__(self, password=None, password_context=None, **kwargs):
        if kwargs.get("email"):
            kwargs["email"] = kwargs["email"].strip().lower()
        super().__init__(**kwargs)
        if password is not None:
            self.set_password(password, password_context)

    @property
    def password(self):
        raise AttributeError("password is write-only")

    @password.setter
    def password(self, plain_password: str) -> None:
        self.set_password(plain_password)

    def set_password(self, plain_password: str, context: Optional[CryptContext] = None) -> None:
        # Novo salt a cada troca de senha
        self.password_hash = get_password_hash(plain_password, context)

    def check_password(self, plain_password: str, context: Optional[CryptContext] = None) -> bool:
        return verify_password(plain_password, self.password_hash, context)

    @property
    def is_super_admin(self) -> bool:
        return self.role == "super_admin"

    def __repr__(self) -> str:
        return f"<Administrator {self.username} ({self.role})>"
