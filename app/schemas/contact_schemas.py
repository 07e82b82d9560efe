# app/schemas/contact_schemas.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, constr, field_validator

from app.schemas.admin_schemas import CamelModel

ContactStatus = Literal["new", "read", "replied", "resolved"]
ContactPriority = Literal["low", "medium", "high", "urgent"]

PHONE_PATTERN = r"^\+?[0-9][0-9\s\-().]{6,19}$"


class ContactCreateSchema(BaseModel):
    name: constr(strip_whitespace=True, min_length=2, max_length=100, pattern=r"^[a-zA-Z\s]+$")
    email: EmailStr
    phone: Optional[constr(strip_whitespace=True, pattern=PHONE_PATTERN)] = None
    subject: Optional[constr(strip_whitespace=True, max_length=200)] = None
    message: constr(strip_whitespace=True, min_length=10, max_length=2000)
    company: Optional[constr(strip_whitespace=True, max_length=100)] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("phone", "subject", "company", mode="before")
    @classmethod
    def empty_to_none(cls, value):
        # Campos opcionais enviados vazios pelo formulário
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ContactUpdateSchema(BaseModel):
    status: Optional[ContactStatus] = None
    priority: Optional[ContactPriority] = None
    tags: Optional[List[constr(strip_whitespace=True, min_length=1, max_length=50)]] = None


class ContactReplySchema(BaseModel):
    subject: constr(strip_whitespace=True, min_length=1, max_length=200)
    message: constr(strip_whitespace=True, min_length=1, max_length=5000)


class ContactVerifySchema(BaseModel):
    contact_id: Optional[str] = Field(default=None, alias="contactId")

    model_config = ConfigDict(populate_by_name=True)


class ContactResponseSchema(CamelModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    subject: Optional[str] = None
    message: str
    company: Optional[str] = None
    status: ContactStatus
    priority: ContactPriority
    tags: List[str] = []
    source: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PaginationSchema(CamelModel):
    current: int
    pages: int
    total: int
    has_next: bool
    has_prev: bool
