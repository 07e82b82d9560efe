"""
Cria a primeira conta de super administrador para acessar o painel.

Uso: `contact-backend-setup` (ou `python -m app.scripts.setup_admin`).
Os dados vêm de SEED_ADMIN_USERNAME / SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD.
"""
import logging
import sys
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.auth.password_handler import build_password_context
from app.core.config import Settings, settings as default_settings
from app.core.database import Database
from app.core.exceptions import AppError
from app.core.logging_middleware import setup_logging
from app.services.admin_service import AdminService

logger = logging.getLogger("api.setup")


def setup_database(settings: Settings) -> bool:
    database = Database(settings.DATABASE_URL)
    try:
        database.open()
        with database.session() as session:
            service = AdminService(session, build_password_context(settings.BCRYPT_ROUNDS))
            admin, created = service.ensure_super_admin(
                username=settings.SEED_ADMIN_USERNAME,
                email=settings.SEED_ADMIN_EMAIL,
                password=settings.SEED_ADMIN_PASSWORD,
                full_name=settings.SEED_ADMIN_FULL_NAME,
            )
    except (AppError, PydanticValidationError, SQLAlchemyError) as e:
        logger.error("Setup failed: %s", e)
        return False
    finally:
        database.close()

    if created:
        logger.info("Super admin account created: %s <%s>", admin.username, admin.email)
        if settings.SEED_ADMIN_PASSWORD == Settings.model_fields["SEED_ADMIN_PASSWORD"].default:
            logger.warning("The default password is in use. Change it after the first login!")
    else:
        logger.info("Super admin already exists: %s <%s>", admin.username, admin.email)
    return True


def main(settings: Optional[Settings] = None) -> int:
    settings = settings or default_settings
    setup_logging(settings)
    return 0 if setup_database(settings) else 1


if __name__ == "__main__":
    sys.exit(main())
