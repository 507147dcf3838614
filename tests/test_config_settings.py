import pytest

from bridge_exec.config import Settings


def test_socket_api_key_legacy_bungee_alias(monkeypatch):
    """Socket API key should load from the legacy Bungee name when unset."""

    monkeypatch.delenv("SOCKET_API_KEY", raising=False)
    monkeypatch.setenv("BUNGEE_API_KEY", "alias-from-legacy")

    settings = Settings()

    assert settings.socket_api_key == "alias-from-legacy"
    assert settings.has_socket_key is True


def test_socket_api_key_direct_env(monkeypatch):
    """Environment-provided Socket key remains the primary source."""

    monkeypatch.setenv("SOCKET_API_KEY", "primary-key")
    monkeypatch.setenv("BUNGEE_API_KEY", "alias-from-legacy")

    settings = Settings()

    assert settings.socket_api_key == "primary-key"


def test_status_check_interval_defaults_to_ten_seconds(monkeypatch):
    monkeypatch.delenv("STATUS_CHECK_INTERVAL_MS", raising=False)

    assert Settings().status_check_interval_ms == 10000


def test_status_check_interval_from_env(monkeypatch):
    monkeypatch.setenv("STATUS_CHECK_INTERVAL_MS", "2500")

    assert Settings().status_check_interval_ms == 2500


def test_extra_allowed_addresses_parsing(monkeypatch):
    monkeypatch.setenv(
        "SOCKET_EXTRA_ALLOWED_ADDRESSES",
        "1:0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa, 1:0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb,324:0xcc",
    )

    settings = Settings()

    assert settings.extra_allowed_addresses == {
        1: [
            "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa",
            "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb",
        ],
        324: ["0xcc"],
    }


def test_extra_allowed_addresses_rejects_missing_chain(monkeypatch):
    monkeypatch.setenv("SOCKET_EXTRA_ALLOWED_ADDRESSES", "0xaaaa")

    with pytest.raises(ValueError):
        Settings().extra_allowed_addresses
