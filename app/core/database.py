# app/core/database.py
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger("api.database")

# Base declarativa para os modelos
Base = declarative_base()


def utcnow() -> datetime:
    """Data/hora atual em UTC, sem tzinfo (formato armazenado no banco)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Database:
    """
    Handle de persistência com ciclo de vida explícito.

    É aberto no startup da aplicação (lifespan) e fechado no shutdown;
    as rotas recebem sessões através da dependência `get_db`.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    def open(self) -> "Database":
        if self.engine is not None:
            return self

        engine_kwargs = {"echo": self.echo}
        if self.url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            # Banco em memória precisa de uma única conexão compartilhada
            if ":memory:" in self.url or self.url in ("sqlite://", "sqlite+pysqlite://"):
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(self.url, **engine_kwargs)
        self._session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

        # Importa os modelos para registrá-los em Base.metadata
        from app import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database connected: %s", self.engine.url.render_as_string(hide_password=True))
        return self

    @contextmanager
    def session(self) -> Iterator[Session]:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        session = self._session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connection closed")
        self.engine = None
        self._session_factory = None


def get_db(request: Request) -> Iterator[Session]:
    """Dependência FastAPI que fornece uma sessão do banco da aplicação."""
    database: Database = request.app.state.db
    with database.session() as session:
        yield session
