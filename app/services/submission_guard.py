# app/services/submission_guard.py
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.database import utcnow
from app.core.exceptions import DuplicateSubmissionError, RateLimitError
from app.models.contact import Contact

logger = logging.getLogger("api.contact")


class SubmissionGuard:
    """
    Verificações feitas antes de gravar uma mensagem de contato:
    envio duplicado (mesmo email e mensagem na janela curta) e limite
    de envios por IP (janela longa).

    As janelas são limiares de tempo simples (created_at >= agora - janela),
    não um log deslizante exato. A verificação e o insert não são atômicos:
    dois envios idênticos simultâneos podem passar os dois.
    """

    def __init__(
        self,
        db: Session,
        duplicate_window: timedelta = timedelta(minutes=5),
        max_submissions: int = 5,
        rate_window: timedelta = timedelta(hours=1),
    ):
        self.db = db
        self.duplicate_window = duplicate_window
        self.max_submissions = max_submissions
        self.rate_window = rate_window

    @classmethod
    def from_settings(cls, db: Session, settings: Settings) -> "SubmissionGuard":
        return cls(
            db,
            duplicate_window=timedelta(minutes=settings.DUPLICATE_WINDOW_MINUTES),
            max_submissions=settings.CONTACT_RATE_LIMIT_MAX,
            rate_window=timedelta(minutes=settings.CONTACT_RATE_LIMIT_WINDOW_MINUTES),
        )

    def is_duplicate(self, email: str, message: str, now: Optional[datetime] = None) -> bool:
        now = now or utcnow()
        since = now - self.duplicate_window
        stmt = (
            select(Contact.id)
            .where(
                Contact.email == email.strip().lower(),
                Contact.message == message,
                Contact.created_at >= since,
            )
            .limit(1)
        )
        return self.db.execute(stmt).first() is not None

    def count_recent_submissions(self, ip_address: str, now: Optional[datetime] = None) -> int:
        now = now or utcnow()
        since = now - self.rate_window
        stmt = select(func.count(Contact.id)).where(
            Contact.ip_address == ip_address,
            Contact.created_at >= since,
        )
        return self.db.execute(stmt).scalar_one()

    def is_rate_limited(self, ip_address: Optional[str], now: Optional[datetime] = None) -> bool:
        if not ip_address:
            return False
        return self.count_recent_submissions(ip_address, now) >= self.max_submissions

    def check(self, email: str, message: str, ip_address: Optional[str], now: Optional[datetime] = None) -> None:
        """
        Levanta RateLimitError ou DuplicateSubmissionError (ambos 429)
        se o envio não puder ser aceito.
        """
        now = now or utcnow()

        if self.is_rate_limited(ip_address, now):
            logger.warning("Contact rate limit reached for ip %s", ip_address)
            raise RateLimitError(
                "Too many contact form submissions, please try again later.",
                headers={"Retry-After": str(int(self.rate_window.total_seconds()))},
            )

        if self.is_duplicate(email, message, now):
            logger.info("Duplicate contact submission from %s", email)
            raise DuplicateSubmissionError()
