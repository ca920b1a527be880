"""
MikroTik RouterOS REST API client.
RouterOS v7 exposes REST under /rest on the www/www-ssl service.
Auth: HTTP Basic.
Reads are GET with query filters and return a JSON list, creates are PUT
returning the new record, deletes are DELETE /<path>/<.id>.
Error format: {"error": 400, "message": "Bad Request", "detail": "..."}
"""
import logging
from typing import AsyncIterator, Optional, Type

import httpx
from pydantic import BaseModel, ValidationError

from dns_switcher.config import settings
from dns_switcher.exceptions import (
    OptionCreationFailed,
    StoreRequestRejected,
    StoreUnavailable,
)
from dns_switcher.schemas.routeros import ArpEntry, DhcpOption, DhcpOptionCreate, Lease, LeaseCreate

logger = logging.getLogger(__name__)

LEASE_PATH = "/ip/dhcp-server/lease"
OPTION_PATH = "/ip/dhcp-server/option"
ARP_PATH = "/ip/arp"


class RouterOSClient:
    """Lease Store backed by one router. Use as ``async with`` so the
    connection pool is closed on every exit path."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        use_ssl: bool = True,
        verify: bool = False,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        scheme = "https" if use_ssl else "http"
        self.base_url = f"{scheme}://{host}:{port}/rest"
        self.auth = (username, password)
        self.verify = verify
        self.timeout = timeout
        self.node_label = f"{host}:{port}"
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "RouterOSClient":
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=self.auth,
            verify=self.verify,
            timeout=self.timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *exc_info) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        if self._client is None:
            raise RuntimeError("RouterOSClient used outside of 'async with'")
        logger.debug("RouterOS %s %s %s", method, path, kwargs.get("params") or "")
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("RouterOS %s %s failed (%s): %s", method, path, self.node_label, e)
            raise StoreUnavailable(f"Router {self.node_label} unreachable: {e}") from e

        if resp.status_code in (401, 403) or resp.status_code >= 500:
            logger.warning("RouterOS %s %s returned %d (%s)", method, path, resp.status_code, self.node_label)
            raise StoreUnavailable(
                f"Router {self.node_label} returned HTTP {resp.status_code}: {_error_text(resp)}"
            )
        if resp.status_code >= 400:
            logger.warning("RouterOS %s %s rejected (%d): %s", method, path, resp.status_code, _error_text(resp))
            raise StoreRequestRejected(f"Router rejected {method} {path}: {_error_text(resp)}")
        return resp

    async def _find_one(self, path: str, model: Type[BaseModel], **filters: str):
        resp = await self._request("GET", path, params=filters)
        rows = _json(resp)
        if not isinstance(rows, list):
            raise StoreUnavailable(f"Unexpected reply for {path}: {str(rows)[:200]}")
        # RouterOS filters on the query string, but re-check the key so a
        # router ignoring the filter can't hand back somebody else's record.
        for row in rows:
            if all(row.get(k) == v for k, v in filters.items()):
                return _parse(model, row)
        return None

    async def _create(self, path: str, body: BaseModel, model: Type[BaseModel]):
        resp = await self._request("PUT", path, json=body.model_dump(by_alias=True, exclude_none=True))
        return _parse(model, _json(resp))

    # ── DHCP leases ─────────────────────────────────────────────────────────

    async def get_lease_by_address(self, ip: str) -> Optional[Lease]:
        return await self._find_one(LEASE_PATH, Lease, address=ip)

    async def create_lease(self, lease: LeaseCreate) -> Lease:
        created = await self._create(LEASE_PATH, lease, Lease)
        logger.info("Created static lease %s for %s (%s)", created.id, lease.address, lease.mac_address)
        return created

    async def delete_lease(self, lease_id: str) -> None:
        await self._request("DELETE", f"{LEASE_PATH}/{lease_id}")
        logger.info("Deleted lease %s on %s", lease_id, self.node_label)

    # ── ARP ─────────────────────────────────────────────────────────────────

    async def find_hardware_address(self, ip: str) -> Optional[ArpEntry]:
        entry = await self._find_one(ARP_PATH, ArpEntry, address=ip)
        # Incomplete ARP entries carry no MAC
        if entry is None or not entry.mac_address:
            return None
        return entry

    # ── DHCP options ────────────────────────────────────────────────────────

    async def get_option_by_name(self, name: str) -> Optional[DhcpOption]:
        return await self._find_one(OPTION_PATH, DhcpOption, name=name)

    async def create_option(self, option: DhcpOptionCreate) -> DhcpOption:
        try:
            created = await self._create(OPTION_PATH, option, DhcpOption)
        except StoreRequestRejected as e:
            raise OptionCreationFailed(f"Could not create DHCP option '{option.name}': {e.message}") from e
        logger.info("Created DHCP option '%s' (code %d, value %s)", created.name, created.code, created.value)
        return created


def _json(resp: httpx.Response):
    try:
        return resp.json()
    except ValueError as e:
        raise StoreUnavailable(f"Router returned non-JSON reply: {resp.text[:200]}") from e


def _parse(model: Type[BaseModel], data):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise StoreUnavailable(f"Malformed {model.__name__} record from router: {e}") from e


def _error_text(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:200] or resp.reason_phrase
    if isinstance(data, dict):
        return str(data.get("detail") or data.get("message") or data)
    return str(data)[:200]


def build_client() -> RouterOSClient:
    return RouterOSClient(
        host=settings.MIKROTIK_HOST,
        port=settings.MIKROTIK_PORT,
        username=settings.MIKROTIK_USERNAME,
        password=settings.MIKROTIK_PASSWORD,
        use_ssl=settings.MIKROTIK_USE_SSL,
        verify=settings.MIKROTIK_SSL_VERIFY,
        timeout=settings.MIKROTIK_TIMEOUT,
    )


async def open_lease_store() -> AsyncIterator[RouterOSClient]:
    """FastAPI dependency: one router session per request."""
    async with build_client() as store:
        yield store
