"""
Host address lookup.

Resolves the local outbound IPv4 address that is echoed back to callers
and included in notifications.
"""
import logging
import socket

from .exceptions import AddressLookupError

logger = logging.getLogger(__name__)

UNKNOWN_ADDRESS = 'Unknown'


class HostAddressResolver:
    """
    Resolve the first IPv4 address registered for this host's name.

    Usage:
        resolver = HostAddressResolver()
        ip = resolver.resolve()  # '10.0.0.12' or 'Unknown'
    """

    def __init__(self, hostname=None):
        self.hostname = hostname

    def lookup(self):
        """
        Return the first IPv4 address of the host.

        Raises:
            AddressLookupError: If the host name has no IPv4 address
        """
        hostname = self.hostname or socket.gethostname()
        try:
            entries = socket.getaddrinfo(hostname, None, family=socket.AF_INET)
        except (socket.gaierror, UnicodeError) as e:
            raise AddressLookupError(f"Could not resolve {hostname}: {e}") from e

        for _family, _type, _proto, _canonname, sockaddr in entries:
            if sockaddr and sockaddr[0]:
                return sockaddr[0]

        raise AddressLookupError(f"No IPv4 address found for {hostname}")

    def resolve(self):
        """Return the host IPv4 address, or 'Unknown' when none can be found."""
        try:
            return self.lookup()
        except AddressLookupError as e:
            logger.warning(f"Server IP lookup failed, using '{UNKNOWN_ADDRESS}': {e.message}")
            return UNKNOWN_ADDRESS
