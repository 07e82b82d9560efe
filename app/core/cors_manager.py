from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings


def get_cors_origins(settings: Settings) -> List[str]:
    """
    Obtém as origens permitidas para CORS

    "*" não é aceito em produção: retorna lista vazia para forçar
    a configuração explícita
    """
    origins = settings.cors_origin_list
    if "*" in origins and settings.is_production:
        return []
    return origins


def setup_cors(app: FastAPI, settings: Settings) -> FastAPI:
    """
    Configura o middleware CORS; credenciais são permitidas para o painel admin
    """
    origins = get_cors_origins(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin", "X-Requested-With"],
        expose_headers=["X-Request-ID", "Retry-After"],
        max_age=settings.CORS_MAX_AGE,
    )
    return app
