"""Known Socket contract addresses used to vet routed-funds destinations."""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Mapping, Optional

from ...config import settings

SOCKET_REGISTRY = "0xc30141B657f4216252dc59Af2e7CdB9D8792e1B0"
SOCKET_GATEWAY = "0x3a23F943181408EAC424116Af7b7790c94Cb97a5"

# chain id -> contract name -> address
SOCKET_ADDRESSES: Dict[int, Dict[str, str]] = {
    1: {"registry": SOCKET_REGISTRY, "gateway": SOCKET_GATEWAY},        # Ethereum
    10: {"registry": SOCKET_REGISTRY, "gateway": SOCKET_GATEWAY},       # Optimism
    56: {"registry": SOCKET_REGISTRY, "gateway": SOCKET_GATEWAY},       # BSC
    100: {"registry": SOCKET_REGISTRY, "gateway": SOCKET_GATEWAY},      # Gnosis
    137: {"registry": SOCKET_REGISTRY, "gateway": SOCKET_GATEWAY},      # Polygon
    250: {"registry": SOCKET_REGISTRY, "gateway": SOCKET_GATEWAY},      # Fantom
    8453: {"gateway": SOCKET_GATEWAY},                                  # Base
    42161: {"registry": SOCKET_REGISTRY, "gateway": SOCKET_GATEWAY},    # Arbitrum
    43114: {"registry": SOCKET_REGISTRY, "gateway": SOCKET_GATEWAY},    # Avalanche
}


class AddressAllowlist:
    """Per-chain set of destinations accepted for routed-funds transactions.

    Addresses compare case-insensitively so checksummed and lowercased
    forms of the same contract match.

    Usage:
        allowlist = AddressAllowlist.default()
        allowlist.contains(137, "0xc30141b657f4216252dc59af2e7cdb9d8792e1b0")  # True
    """

    def __init__(self, addresses: Optional[Mapping[int, Iterable[str]]] = None) -> None:
        self._addresses: Dict[int, FrozenSet[str]] = {}
        for chain_id, chain_addresses in (addresses or {}).items():
            self.extend(chain_id, chain_addresses)

    @classmethod
    def default(cls) -> "AddressAllowlist":
        """Built-in Socket deployments plus any configured extra addresses."""
        allowlist = cls({chain_id: named.values() for chain_id, named in SOCKET_ADDRESSES.items()})
        for chain_id, extra in settings.extra_allowed_addresses.items():
            allowlist.extend(chain_id, extra)
        return allowlist

    def extend(self, chain_id: int, addresses: Iterable[str]) -> None:
        normalized = {address.lower() for address in addresses if address}
        self._addresses[int(chain_id)] = self._addresses.get(int(chain_id), frozenset()) | normalized

    def addresses(self, chain_id: int) -> FrozenSet[str]:
        return self._addresses.get(int(chain_id), frozenset())

    def contains(self, chain_id: int, address: Optional[str]) -> bool:
        if not address:
            return False
        return address.lower() in self.addresses(chain_id)

    def __repr__(self) -> str:
        return f"AddressAllowlist(chains={sorted(self._addresses)})"
