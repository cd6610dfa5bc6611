"""Detection of the host's physical LAN IPv4 address.

The gateway prints this address at startup and returns it from `/health` so a
developer can reach the server from a phone or another machine on the same
network. Virtual adapters (VM host-only networks, VPN tunnels) are skipped
by name and by address prefix; the remaining candidates are ranked and the
best one wins.
"""

import ipaddress
import socket
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import NamedTuple

import psutil

from paybridge.common.logging import logger

FALLBACK_ADDRESS = "localhost"

MAIN_NETWORK_PRIORITY = 10
WIRED_PRIORITY = 5
DEFAULT_PRIORITY = 1


class InterfaceAddress(NamedTuple):
    """One address bound to a network interface."""

    family: str
    address: str
    internal: bool = False


class NetworkCandidate(NamedTuple):
    name: str
    address: str
    priority: int


InterfaceTable = Mapping[str, Sequence[InterfaceAddress]]


@dataclass(frozen=True)
class NetworkRules:
    """Filtering and ranking data for candidate selection.

    Name fragments are matched case-insensitively as substrings of the
    interface name; address prefixes are matched with `str.startswith`.
    """

    ignored_name_fragments: tuple[str, ...] = (
        "vmware",
        "virtualbox",
        "wintun",
        "radmin",
        "vpn",
        "teredo",
        "loopback",
    )
    ignored_address_prefixes: tuple[str, ...] = (
        "169.254.",  # link-local autoconfiguration
        "26.",  # Radmin VPN
        "192.168.56.",  # VirtualBox host-only
    )
    wired_name_fragments: tuple[str, ...] = ("ethernet", "eth")
    main_network_prefix: str = "192.168.0."

    def ignores_interface(self, name: str) -> bool:
        lowered = name.lower()
        return any(fragment in lowered for fragment in self.ignored_name_fragments)

    def ignores_address(self, address: str) -> bool:
        return any(address.startswith(prefix) for prefix in self.ignored_address_prefixes)

    def priority(self, name: str, address: str) -> int:
        if address.startswith(self.main_network_prefix):
            return MAIN_NETWORK_PRIORITY
        lowered = name.lower()
        if any(fragment in lowered for fragment in self.wired_name_fragments):
            return WIRED_PRIORITY
        return DEFAULT_PRIORITY


DEFAULT_RULES = NetworkRules()


def _is_loopback(address: str) -> bool:
    try:
        return ipaddress.ip_address(address).is_loopback
    except ValueError:
        return False


def read_interfaces() -> dict[str, list[InterfaceAddress]]:
    """Snapshot the live interface table as `InterfaceAddress` entries."""

    table: dict[str, list[InterfaceAddress]] = {}
    for name, addrs in psutil.net_if_addrs().items():
        entries = table.setdefault(name, [])
        for addr in addrs:
            if addr.family == socket.AF_INET:
                family = "IPv4"
            elif addr.family == socket.AF_INET6:
                family = "IPv6"
            else:
                continue
            entries.append(InterfaceAddress(family, addr.address, _is_loopback(addr.address)))
    return table


def _load(interfaces: InterfaceTable | None) -> InterfaceTable:
    if interfaces is not None:
        return interfaces
    try:
        return read_interfaces()
    except (OSError, RuntimeError) as exc:
        logger.warning("interface enumeration failed: %s", exc)
        return {}


def list_candidates(
    interfaces: InterfaceTable | None = None,
    rules: NetworkRules = DEFAULT_RULES,
) -> list[NetworkCandidate]:
    """Return usable addresses ordered best first.

    Ordering is by descending priority; equal priorities keep discovery order.
    """

    candidates = []
    for name, addrs in _load(interfaces).items():
        if rules.ignores_interface(name):
            continue
        for addr in addrs:
            if addr.family != "IPv4" or addr.internal or rules.ignores_address(addr.address):
                continue
            candidates.append(NetworkCandidate(name, addr.address, rules.priority(name, addr.address)))
    return sorted(candidates, key=lambda candidate: -candidate.priority)


def resolve_local_address(
    interfaces: InterfaceTable | None = None,
    rules: NetworkRules = DEFAULT_RULES,
) -> str:
    """Pick the LAN address to advertise, or "localhost" when none is usable.

    `interfaces` defaults to the live table. This never raises.
    """

    candidates = list_candidates(interfaces, rules)
    if candidates:
        selected = candidates[0]
        logger.info("local address detected address=%s interface=%s", selected.address, selected.name)
        return selected.address

    logger.warning("no physical network address found, using %s", FALLBACK_ADDRESS)
    return FALLBACK_ADDRESS


def describe_interfaces(interfaces: InterfaceTable | None = None) -> list[tuple[str, str]]:
    """List every external IPv4 address as (interface, address), unfiltered."""

    return [
        (name, addr.address)
        for name, addrs in _load(interfaces).items()
        for addr in addrs
        if addr.family == "IPv4" and not addr.internal
    ]
