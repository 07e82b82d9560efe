# app/services/admin_service.py
import logging
import uuid
from typing import Optional, Tuple

from passlib.context import CryptContext
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth.password_handler import pwd_context
from app.core.database import utcnow
from app.core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from app.models.admin import Administrator
from app.schemas.admin_schemas import AdminCreateSchema

logger = logging.getLogger("api.auth")

# Mesma mensagem para usuário inexistente e senha incorreta
INVALID_CREDENTIALS = "Invalid credentials"


class AdminService:
    def __init__(self, db: Session, password_context: Optional[CryptContext] = None):
        self.db = db
        # Contexto com o BCRYPT_ROUNDS da aplicação
        self.password_context = password_context or pwd_context

    def get_admin_by_id(self, admin_id: str) -> Optional[Administrator]:
        try:
            admin_uuid = uuid.UUID(str(admin_id))
        except ValueError:
            return None
        return self.db.get(Administrator, str(admin_uuid))

    def find_by_identifier(self, identifier: str) -> Optional[Administrator]:
        """
        Busca um administrador ATIVO cujo username ou email seja igual ao identificador
        """
        if not identifier:
            return None
        identifier = identifier.strip()
        stmt = select(Administrator).where(
            or_(
                Administrator.username == identifier,
                Administrator.email == identifier.lower(),
            ),
            Administrator.is_active.is_(True),
        )
        return self.db.execute(stmt).scalars().first()

    def verify_password(self, admin: Administrator, candidate: str) -> bool:
        return admin.check_password(candidate, self.password_context)

    def set_password(self, admin: Administrator, new_password: str) -> Administrator:
        admin.set_password(new_password, self.password_context)
        self.db.commit()
        return admin

    def touch_last_login(self, admin: Administrator) -> Administrator:
        admin.last_login = utcnow()
        self.db.commit()
        return admin

    def authenticate(self, identifier: str, password: str) -> Administrator:
        admin = self.find_by_identifier(identifier)
        if admin is None:
            logger.info("Login failed: unknown or inactive admin '%s'", identifier)
            raise AuthError(INVALID_CREDENTIALS)

        if not self.verify_password(admin, password):
            logger.info("Login failed: wrong password for admin '%s'", admin.username)
            raise AuthError(INVALID_CREDENTIALS)

        self.touch_last_login(admin)
        logger.info("Admin '%s' logged in", admin.username)
        return admin

    def get_existing(self, username: str, email: str) -> Optional[Administrator]:
        stmt = select(Administrator).where(
            or_(Administrator.username == username, Administrator.email == email.lower())
        )
        return self.db.execute(stmt).scalars().first()

    def create_admin(self, admin_data: AdminCreateSchema) -> Administrator:
        if self.get_existing(admin_data.username, admin_data.email):
            raise ConflictError("Admin with this username or email already exists")

        admin = Administrator(
            username=admin_data.username,
            email=admin_data.email,
            password=admin_data.password,
            password_context=self.password_context,
            full_name=admin_data.full_name,
            role=admin_data.role,
        )
        self.db.add(admin)
        try:
            self.db.commit()
        except IntegrityError:
            # Corrida entre a verificação acima e o insert
            self.db.rollback()
            raise ConflictError("Admin with this username or email already exists")

        logger.info("Admin '%s' created with role '%s'", admin.username, admin.role)
        return admin

    def change_password(self, admin_id: str, current_password: str, new_password: str) -> Administrator:
        admin = self.get_admin_by_id(admin_id)
        if admin is None:
            raise NotFoundError("Admin not found")

        if not self.verify_password(admin, current_password):
            raise ValidationError("Current password is incorrect")

        self.set_password(admin, new_password)
        logger.info("Admin '%s' changed password", admin.username)
        return admin

    def deactivate_admin(self, admin_id: str) -> Administrator:
        admin = self.get_admin_by_id(admin_id)
        if admin is None:
            raise NotFoundError("Admin not found")
        admin.is_active = False
        self.db.commit()
        logger.info("Admin '%s' deactivated", admin.username)
        return admin

    def ensure_super_admin(
        self,
        username: str,
        email: str,
        password: str,
        full_name: Optional[str] = None,
    ) -> Tuple[Administrator, bool]:
        """
        Cria o super administrador inicial caso nenhum exista.
        Retorna (admin, criado).
        """
        existing = self.db.execute(
            select(Administrator).where(Administrator.role == "super_admin")
        ).scalars().first()
        if existing is not None:
            return existing, False

        admin = self.create_admin(
            AdminCreateSchema(
                username=username,
                email=email,
                password=password,
                full_name=full_name,
                role="super_admin",
            )
        )
        return admin, True
