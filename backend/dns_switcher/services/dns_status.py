from typing import Optional

from dns_switcher.schemas.dns import DnsMode
from dns_switcher.schemas.routeros import Lease


def resolve_mode(lease: Optional[Lease], managed_comment: str) -> DnsMode:
    """Map a client's lease (or its absence) to a DNS mode. First match wins."""
    if lease is None:
        return DnsMode.DEFAULT
    if lease.dynamic:
        return DnsMode.DEFAULT
    if lease.comment != managed_comment:
        return DnsMode.UNMANAGED
    return DnsMode.CUSTOM
