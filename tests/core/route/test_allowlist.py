import pytest

from bridge_exec.config import settings
from bridge_exec.core.route import SOCKET_ADDRESSES, AddressAllowlist
from bridge_exec.core.route.allowlist import SOCKET_GATEWAY, SOCKET_REGISTRY


def test_default_contains_registry_on_supported_chains():
    allowlist = AddressAllowlist.default()

    for chain_id, named in SOCKET_ADDRESSES.items():
        for address in named.values():
            assert allowlist.contains(chain_id, address)


def test_matching_ignores_case():
    allowlist = AddressAllowlist({1: [SOCKET_REGISTRY]})

    assert allowlist.contains(1, SOCKET_REGISTRY.lower())
    assert allowlist.contains(1, SOCKET_REGISTRY.upper().replace("0X", "0x"))


def test_addresses_are_scoped_per_chain():
    allowlist = AddressAllowlist({1: [SOCKET_REGISTRY]})

    assert not allowlist.contains(137, SOCKET_REGISTRY)
    assert allowlist.addresses(137) == frozenset()


def test_empty_address_is_never_allowed():
    allowlist = AddressAllowlist({1: [SOCKET_REGISTRY]})

    assert allowlist.contains(1, None) is False
    assert allowlist.contains(1, "") is False


def test_extend_merges_addresses():
    allowlist = AddressAllowlist({8453: [SOCKET_GATEWAY]})
    allowlist.extend(8453, ["0xAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA"])

    assert allowlist.addresses(8453) == {
        SOCKET_GATEWAY.lower(),
        "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa",
    }


def test_default_includes_configured_extras(monkeypatch):
    extra = "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"
    monkeypatch.setattr(settings, "socket_extra_allowed_addresses", f"324:{extra}, 1:{extra}")

    allowlist = AddressAllowlist.default()

    assert allowlist.contains(324, extra)
    assert allowlist.contains(1, extra)
    assert allowlist.contains(1, SOCKET_REGISTRY)


def test_default_rejects_malformed_extras(monkeypatch):
    monkeypatch.setattr(settings, "socket_extra_allowed_addresses", "not-a-pair")

    with pytest.raises(ValueError):
        AddressAllowlist.default()
