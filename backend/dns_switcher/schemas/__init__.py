from dns_switcher.schemas.routeros import Lease, LeaseCreate, DhcpOption, DhcpOptionCreate, ArpEntry
from dns_switcher.schemas.dns import DnsMode, DnsStatus, DnsStatusResponse, ErrorDetail, ErrorResponse, ServiceInfo

__all__ = [
    "Lease", "LeaseCreate", "DhcpOption", "DhcpOptionCreate", "ArpEntry",
    "DnsMode", "DnsStatus", "DnsStatusResponse", "ErrorDetail", "ErrorResponse", "ServiceInfo",
]
