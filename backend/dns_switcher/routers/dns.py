from fastapi import APIRouter, Depends, Request

from dns_switcher.config import settings
from dns_switcher.extensions import limiter
from dns_switcher.middleware.client_ip import get_client_ip
from dns_switcher.schemas.dns import DnsMode, DnsStatus, DnsStatusResponse
from dns_switcher.services.dns_mode import ModeTransitionEngine
from dns_switcher.services.dns_status import resolve_mode
from dns_switcher.services.lease_store import LeaseStore
from dns_switcher.services.routeros_api import open_lease_store

router = APIRouter(prefix="/api/dns", tags=["DNS"])


def _engine(store: LeaseStore) -> ModeTransitionEngine:
    return ModeTransitionEngine(
        store=store,
        custom_dns=settings.CUSTOM_DNS,
        managed_comment=settings.APP_COMMENT,
        dhcp_server=settings.DHCP_SERVER,
    )


def _status(mode: DnsMode, ip: str) -> DnsStatusResponse:
    return DnsStatusResponse(data=DnsStatus(status=mode, ip=ip))


@router.get("", response_model=DnsStatusResponse)
async def get_dns_status(
    client_ip: str = Depends(get_client_ip),
    store: LeaseStore = Depends(open_lease_store),
):
    """Current DNS mode of the calling client."""
    lease = await store.get_lease_by_address(client_ip)
    return _status(resolve_mode(lease, settings.APP_COMMENT), client_ip)


@router.put("", response_model=DnsStatusResponse)
@limiter.limit(settings.RATE_LIMIT_MUTATIONS)
async def switch_to_custom_dns(
    request: Request,
    client_ip: str = Depends(get_client_ip),
    store: LeaseStore = Depends(open_lease_store),
):
    """Pin the caller's lease and attach the custom DNS option."""
    lease = await _engine(store).switch_to_custom(client_ip)
    return _status(resolve_mode(lease, settings.APP_COMMENT), client_ip)


@router.delete("", response_model=DnsStatusResponse)
@limiter.limit(settings.RATE_LIMIT_MUTATIONS)
async def reset_to_default_dns(
    request: Request,
    client_ip: str = Depends(get_client_ip),
    store: LeaseStore = Depends(open_lease_store),
):
    """Remove the managed lease; the router re-issues a dynamic one on renewal."""
    await _engine(store).reset_to_default(client_ip)
    return _status(DnsMode.DEFAULT, client_ip)
