import logging
import time

from fastapi import Request
from limits import RateLimitItem, parse
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import Settings
from app.core.exceptions import RateLimitError

logger = logging.getLogger("api.ratelimit")

# Um único contador por IP para todas as rotas da API
API_LIMIT_NAMESPACE = "api"


def build_limiter(settings: Settings) -> Limiter:
    """
    Limiter do slowapi usado só como armazenamento dos contadores
    (memory:// por padrão, ou RATE_LIMIT_STORAGE_URI).
    """
    return Limiter(
        key_func=get_remote_address,
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        enabled=settings.RATE_LIMIT_ENABLED,
    )


def parse_api_limit(settings: Settings) -> RateLimitItem:
    return parse(settings.RATE_LIMIT_DEFAULT)


async def enforce_api_rate_limit(request: Request) -> None:
    """
    Limite geral da API por IP (100 requisições / 15 minutos por padrão).
    Dependência incluída em todos os routers sob API_PREFIX; rotas de serviço
    (/ e /health) ficam de fora.
    """
    limiter: Limiter = request.app.state.limiter
    if not limiter.enabled:
        return

    limit: RateLimitItem = request.app.state.api_rate_limit
    client_ip = get_remote_address(request)

    if limiter.limiter.hit(limit, API_LIMIT_NAMESPACE, client_ip):
        return

    reset_at, _ = limiter.limiter.get_window_stats(limit, API_LIMIT_NAMESPACE, client_ip)
    logger.warning("Rate limit exceeded for %s on %s (%s)", client_ip, request.url.path, limit)
    raise RateLimitError(headers={"Retry-After": str(max(int(reset_at - time.time()), 0))})
