"""
Lease Store interface consumed by the DNS mode logic.

The router's DHCP lease, ARP and DHCP option tables are the only source of
truth; implementations hold no state between requests.
"""
from typing import Optional, Protocol

from dns_switcher.schemas.routeros import ArpEntry, DhcpOption, DhcpOptionCreate, Lease, LeaseCreate


class LeaseStore(Protocol):
    async def get_lease_by_address(self, ip: str) -> Optional[Lease]: ...

    async def find_hardware_address(self, ip: str) -> Optional[ArpEntry]: ...

    async def create_lease(self, lease: LeaseCreate) -> Lease: ...

    async def delete_lease(self, lease_id: str) -> None: ...

    async def get_option_by_name(self, name: str) -> Optional[DhcpOption]: ...

    async def create_option(self, option: DhcpOptionCreate) -> DhcpOption: ...
