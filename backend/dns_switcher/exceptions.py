"""
Error taxonomy for DNS mode lookups and transitions.

Each error carries the HTTP status it maps to; the API layer renders it
into the response envelope without further translation.
"""


class DnsSwitcherError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoIdentityFound(DnsSwitcherError):
    """Client has neither a DHCP lease nor an ARP entry."""
    status_code = 404

    def __init__(self, ip: str):
        super().__init__(
            f"No DHCP lease or ARP entry found for {ip}; "
            "connect the device to the network and try again"
        )
        self.ip = ip


class ForeignLeaseConflict(DnsSwitcherError):
    """A lease exists for the client that this service does not own."""
    status_code = 409

    def __init__(self, ip: str, comment: str = ""):
        super().__init__(
            f"Client {ip} has a lease with comment '{comment}' that is not "
            "managed by DNS Switcher; refusing to modify it"
        )
        self.ip = ip
        self.comment = comment


class InvalidClientAddress(DnsSwitcherError):
    status_code = 400

    def __init__(self, address: str):
        super().__init__(f"Client address '{address}' is not an IPv4 address")
        self.address = address


class StoreUnavailable(DnsSwitcherError):
    """The router could not be reached or failed transport-side."""
    status_code = 503


class StoreRequestRejected(DnsSwitcherError):
    """The router answered but refused the request."""
    status_code = 502


class OptionCreationFailed(StoreRequestRejected):
    pass
