from typing import Optional, List
from datetime import timedelta

from pydantic_settings import BaseSettings, SettingsConfigDict

# Segredo usado somente quando JWT_SECRET não está definido (apenas desenvolvimento)
DEVELOPMENT_JWT_SECRET = "your-secret-key"


class Settings(BaseSettings):
    # Configurações básicas da aplicação
    APP_NAME: str = "Contact Backend API"
    APP_DESCRIPTION: str = "API para formulário de contato e painel administrativo"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"

    # Prefixo da API
    API_PREFIX: str = "/api"

    # Configurações de segurança
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24 horas
    BCRYPT_ROUNDS: int = 12

    # Configurações de banco de dados
    DATABASE_URL: str = "sqlite:///./contact_backend.db"

    # Configurações de e-mail
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_TIMEOUT: int = 10
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PANEL_URL: str = "http://localhost:3000/admin"
    COMPANY_NAME: str = "Contact Backend"

    # Configuração de CORS
    CORS_ORIGINS: str = "http://localhost:3000"
    CORS_MAX_AGE: int = 3600  # 1 hora

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "100/15 minutes"
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    CONTACT_RATE_LIMIT_MAX: int = 5
    CONTACT_RATE_LIMIT_WINDOW_MINUTES: int = 60
    DUPLICATE_WINDOW_MINUTES: int = 5

    # Configurações de logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # "text" ou "json"
    LOG_TO_FILE: bool = False
    LOG_FILE: str = "api.log"
    LOG_MAX_SIZE: int = 10 * 1024 * 1024  # 10 MB
    LOG_BACKUP_COUNT: int = 5

    # Administrador inicial criado pelo script de setup
    SEED_ADMIN_USERNAME: str = "superadmin"
    SEED_ADMIN_EMAIL: str = "admin@example.com"
    SEED_ADMIN_PASSWORD: str = "admin123456"
    SEED_ADMIN_FULL_NAME: Optional[str] = "Super Admin"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def uses_insecure_jwt_secret(self) -> bool:
        """
        Indica que o segredo de assinatura é o fallback de desenvolvimento
        """
        return not self.JWT_SECRET

    @property
    def jwt_signing_key(self) -> str:
        return self.JWT_SECRET or DEVELOPMENT_JWT_SECRET

    @property
    def access_token_expires(self) -> timedelta:
        return timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Cria a instância de configurações
settings = Settings()
