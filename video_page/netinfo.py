import ipaddress
import socket

import psutil

from .errors import AddressDiscoveryError


def get_local_ips() -> list[str]:
    """Non-loopback IPv4 addresses bound to this host's interfaces."""
    try:
        interfaces = psutil.net_if_addrs()
    except (OSError, psutil.Error) as e:
        raise AddressDiscoveryError(str(e)) from e

    ips = []
    for addrs in interfaces.values():
        for addr in addrs:
            if addr.family != socket.AF_INET:
                continue
            if ipaddress.ip_address(addr.address).is_loopback:
                continue
            if addr.address not in ips:
                ips.append(addr.address)
    return ips
