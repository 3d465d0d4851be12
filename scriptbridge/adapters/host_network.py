"""Local address discovery for the debug server."""

from __future__ import annotations

import socket
from typing import List


def resolve_local_ipv4() -> str:
    """Return the primary local IPv4 used for outbound LAN traffic."""
    probe = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        probe.connect(("8.8.8.8", 80))
        return probe.getsockname()[0]
    finally:
        probe.close()


def list_host_addresses() -> List[str]:
    """Return non-loopback IPv4 addresses, primary first; loopback as last resort."""
    addresses: List[str] = []
    try:
        addresses.append(resolve_local_ipv4())
    except OSError:
        pass
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except socket.gaierror:
        infos = []
    for info in infos:
        address = info[4][0]
        if address not in addresses and not address.startswith("127."):
            addresses.append(address)
    return addresses or ["127.0.0.1"]


__all__ = ["list_host_addresses", "resolve_local_ipv4"]
