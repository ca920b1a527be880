from fastapi import Request
import ipaddress

from dns_switcher.config import settings
from dns_switcher.exceptions import InvalidClientAddress


def forwarded_address(request: Request) -> str:
    """Raw client address: the trusted proxy header, else the TCP peer."""
    address = ""
    if settings.TRUSTED_IP_HEADER:
        address = request.headers.get(settings.TRUSTED_IP_HEADER, "").strip()
    if not address and request.client:
        address = request.client.host
    return address


def get_client_ip(request: Request) -> str:
    address = forwarded_address(request)
    try:
        ipaddress.IPv4Address(address)
    except ValueError:
        raise InvalidClientAddress(address or "unknown")
    return address
