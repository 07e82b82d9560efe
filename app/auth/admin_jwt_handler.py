# app/auth/admin_jwt_handler.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from app.core.config import Settings
from app.core.exceptions import ExpiredToken, InvalidToken
from app.schemas.admin_schemas import AdminTokenData

logger = logging.getLogger("api.auth")


class AdminTokenHandler:
    """
    Emite e valida os tokens de sessão dos administradores.

    O token é stateless: não existe lista de revogação, ele expira
    naturalmente. A verificação do status ativo do administrador é feita
    pela dependência `get_current_admin_user` a cada requisição.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_delta: timedelta = timedelta(hours=24)):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdminTokenHandler":
        if settings.uses_insecure_jwt_secret:
            logger.warning(
                "JWT_SECRET is not set: tokens are signed with the development fallback secret. "
                "Never run like this outside development."
            )
        return cls(
            secret_key=settings.jwt_signing_key,
            algorithm=settings.JWT_ALGORITHM,
            expires_delta=settings.access_token_expires,
        )

    def create_access_token(
        self,
        admin_id: str,
        username: str,
        role: str,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self.expires_delta)

        to_encode: Dict[str, Any] = {
            "sub": str(admin_id),
            "id": str(admin_id),
            "username": username,
            "role": role,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> AdminTokenData:
        """
        Decodifica o token e valida assinatura e expiração.
        Levanta ExpiredToken se expirado e InvalidToken para qualquer outro problema.
        """
        if not token:
            raise InvalidToken()
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise ExpiredToken()
        except JWTError as e:
            logger.debug("Rejected admin token: %s", e)
            raise InvalidToken()

        admin_id = payload.get("sub") or payload.get("id")
        if not admin_id:
            raise InvalidToken()

        return AdminTokenData(
            admin_id=str(admin_id),
            username=payload.get("username"),
            role=payload.get("role"),
            issued_at=_timestamp_to_datetime(payload.get("iat")),
            expires_at=_timestamp_to_datetime(payload.get("exp")),
        )


def _timestamp_to_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return None
