"""
Provisioning of the router-global DHCP option that pushes the custom DNS
server to clients on lease renewal.
"""
import ipaddress
import logging

from dns_switcher.schemas.routeros import DhcpOption, DhcpOptionCreate
from dns_switcher.services.lease_store import LeaseStore

logger = logging.getLogger(__name__)

CUSTOM_DNS_OPTION_NAME = "Custom DNS Server"
DHCP_OPTION_DNS_SERVERS = 6


def encode_dns_option_value(ipv4: str) -> str:
    """``1.1.1.1`` -> ``0x01010101``: each octet as two lowercase hex digits."""
    octets = ipaddress.IPv4Address(ipv4).packed
    return "0x" + "".join(f"{octet:02x}" for octet in octets)


async def ensure_custom_dns_option(
    store: LeaseStore, custom_dns: str, managed_comment: str
) -> DhcpOption:
    """Return the custom DNS option, creating it on first use.

    An existing option is reused as-is, even when its value no longer
    matches ``custom_dns``.
    """
    existing = await store.get_option_by_name(CUSTOM_DNS_OPTION_NAME)
    if existing is not None:
        expected = encode_dns_option_value(custom_dns)
        if existing.value.lower() != expected:
            # TODO: decide whether a stale value should be rewritten in place
            logger.warning(
                "DHCP option '%s' holds %s but CUSTOM_DNS encodes to %s; reusing existing value",
                CUSTOM_DNS_OPTION_NAME, existing.value, expected,
            )
        return existing

    option = DhcpOptionCreate(
        name=CUSTOM_DNS_OPTION_NAME,
        code=DHCP_OPTION_DNS_SERVERS,
        value=encode_dns_option_value(custom_dns),
        comment=managed_comment,
    )
    return await store.create_option(option)
