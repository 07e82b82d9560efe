# app/schemas/admin_schemas.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, constr, field_validator
from pydantic.alias_generators import to_camel

AdminRole = Literal["admin", "super_admin"]


class CamelModel(BaseModel):
    """Modelo de resposta serializado com chaves camelCase."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AdminLoginSchema(BaseModel):
    # Aceita username ou email no mesmo campo
    username: constr(strip_whitespace=True, min_length=1)
    password: constr(min_length=1)


class AdminCreateSchema(BaseModel):
    username: constr(strip_whitespace=True, min_length=3, max_length=20, pattern=r"^[a-zA-Z0-9_]+$")
    email: EmailStr
    password: constr(min_length=6)
    full_name: Optional[constr(strip_whitespace=True, max_length=100)] = Field(default=None, alias="fullName")
    role: AdminRole = "admin"

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class ChangePasswordSchema(BaseModel):
    current_password: constr(min_length=1) = Field(alias="currentPassword")
    new_password: constr(min_length=6) = Field(alias="newPassword")

    model_config = ConfigDict(populate_by_name=True)


class AdminSummarySchema(CamelModel):
    id: str
    username: str
    email: str
    full_name: Optional[str] = None
    role: AdminRole


class AdminLoginInfoSchema(AdminSummarySchema):
    last_login: Optional[datetime] = None


class AdminProfileSchema(AdminLoginInfoSchema):
    created_at: datetime


class AdminTokenData(BaseModel):
    admin_id: str
    username: Optional[str] = None
    role: Optional[str] = None
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
