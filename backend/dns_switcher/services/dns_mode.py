"""
DNS mode transitions for a single client IP.

Each transition is split into a pure planning step, which inspects the
client's current lease, and an execution step that performs the Lease Store
writes the plan calls for. Requests for the same IP are not serialized:
two concurrent switch_to_custom calls can both plan CREATE and race at the
router, which alone decides the outcome.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Optional

from dns_switcher.exceptions import ForeignLeaseConflict, NoIdentityFound
from dns_switcher.schemas.routeros import Lease, LeaseCreate
from dns_switcher.services.dns_option import ensure_custom_dns_option
from dns_switcher.services.lease_store import LeaseStore

logger = logging.getLogger(__name__)


class SwitchPlan(str, enum.Enum):
    NOOP = "noop"                        # already CUSTOM
    CONFLICT = "conflict"                # static lease owned by someone else
    REPLACE_DYNAMIC = "replace_dynamic"  # drop router lease, pin a managed one
    CREATE = "create"                    # no lease, identify client via ARP


class ResetPlan(str, enum.Enum):
    NOOP = "noop"
    CONFLICT = "conflict"
    DELETE = "delete"


def plan_switch_to_custom(lease: Optional[Lease], managed_comment: str) -> SwitchPlan:
    if lease is None:
        return SwitchPlan.CREATE
    if lease.dynamic:
        return SwitchPlan.REPLACE_DYNAMIC
    if lease.comment == managed_comment:
        return SwitchPlan.NOOP
    return SwitchPlan.CONFLICT


def plan_reset_to_default(lease: Optional[Lease], managed_comment: str) -> ResetPlan:
    if lease is None:
        return ResetPlan.NOOP
    if lease.comment != managed_comment:
        return ResetPlan.CONFLICT
    return ResetPlan.DELETE


@dataclass
class ModeTransitionEngine:
    store: LeaseStore
    custom_dns: str
    managed_comment: str
    dhcp_server: str = ""

    async def switch_to_custom(self, ip: str) -> Lease:
        lease = await self.store.get_lease_by_address(ip)
        plan = plan_switch_to_custom(lease, self.managed_comment)
        logger.debug("switch_to_custom %s: plan=%s", ip, plan.value)

        if plan is SwitchPlan.NOOP:
            return lease
        if plan is SwitchPlan.CONFLICT:
            raise ForeignLeaseConflict(ip, lease.comment)

        if plan is SwitchPlan.REPLACE_DYNAMIC:
            mac_address = lease.mac_address
            server = lease.server or self.dhcp_server
            await self.store.delete_lease(lease.id)
            logger.info("Removed dynamic lease %s for %s before pinning it", lease.id, ip)
        else:
            arp = await self.store.find_hardware_address(ip)
            if arp is None:
                raise NoIdentityFound(ip)
            mac_address = arp.mac_address
            server = self.dhcp_server

        option = await ensure_custom_dns_option(self.store, self.custom_dns, self.managed_comment)
        created = await self.store.create_lease(LeaseCreate(
            address=ip,
            mac_address=mac_address,
            comment=self.managed_comment,
            dhcp_option=option.name,
            server=server or None,
        ))
        logger.info("Client %s (%s) switched to custom DNS %s", ip, mac_address, self.custom_dns)
        return created

    async def reset_to_default(self, ip: str) -> None:
        lease = await self.store.get_lease_by_address(ip)
        plan = plan_reset_to_default(lease, self.managed_comment)
        logger.debug("reset_to_default %s: plan=%s", ip, plan.value)

        if plan is ResetPlan.NOOP:
            return
        if plan is ResetPlan.CONFLICT:
            raise ForeignLeaseConflict(ip, lease.comment)

        await self.store.delete_lease(lease.id)
        logger.info("Client %s reset to default DNS (lease %s removed)", ip, lease.id)
