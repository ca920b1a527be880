from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from dns_switcher.config import settings
from dns_switcher.middleware.client_ip import forwarded_address


def client_rate_limit_key(request: Request) -> str:
    # Behind a proxy every peer is the proxy; bucket by the client it names.
    return forwarded_address(request) or get_remote_address(request)


limiter = Limiter(key_func=client_rate_limit_key, enabled=settings.RATE_LIMIT_ENABLED)
