"""Unit tests for manager and transport configuration."""

from __future__ import annotations

import pytest

from apimanager.config import ManagerConfig, TransportConfig, identity
from apimanager.errors import ConfigurationError


class TestTransportConfig:
    """Tests for TransportConfig defaults and conversions."""

    @pytest.mark.parametrize(
        ("timeout_ms", "expected"),
        [(10_000, 10.0), (250, 0.25), (0, None), (None, None)],
    )
    def test_timeout_s(self, timeout_ms: int | None, expected: float | None) -> None:
        """Zero or missing timeouts disable the timeout."""
        config = TransportConfig(base_url="https://api.test", timeout_ms=timeout_ms)

        assert config.timeout_s == expected

    def test_absent_timeout_disables_timeout(self) -> None:
        """Configurations without a timeout never time out."""
        assert TransportConfig(base_url="https://api.test").timeout_s is None
        mapped = TransportConfig.from_mapping({"base_url": "https://api.test"})
        assert mapped.timeout_ms is None
        assert mapped.timeout_s is None

    def test_from_env_without_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An unset APIMANAGER_TIMEOUT_MS leaves the timeout disabled."""
        monkeypatch.setenv("APIMANAGER_BASE_URL", "https://api.test")
        monkeypatch.delenv("APIMANAGER_TIMEOUT_MS", raising=False)

        assert TransportConfig.from_env().timeout_s is None

    def test_defaults_accept_every_status(self) -> None:
        """No status predicate is configured by default."""
        config = TransportConfig(base_url="https://api.test")

        assert config.status_accepted is None
        assert config.verify_tls is True
        assert dict(config.headers) == {}

    def test_from_env_reads_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """from_env reads the base URL, timeout and TLS flag."""
        monkeypatch.setenv("APIMANAGER_BASE_URL", " https://api.test ")
        monkeypatch.setenv("APIMANAGER_TIMEOUT_MS", "500")
        monkeypatch.setenv("APIMANAGER_VERIFY_TLS", "off")

        config = TransportConfig.from_env()

        assert config.base_url == "https://api.test"
        assert config.timeout_ms == 500
        assert config.verify_tls is False

    def test_from_env_requires_base_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A missing base URL is a configuration error."""
        monkeypatch.delenv("APIMANAGER_BASE_URL", raising=False)

        with pytest.raises(ConfigurationError, match="APIMANAGER_BASE_URL"):
            TransportConfig.from_env()

    @pytest.mark.parametrize("raw", ["soon", "-1"])
    def test_from_env_rejects_bad_timeout(
        self, monkeypatch: pytest.MonkeyPatch, raw: str
    ) -> None:
        """Timeouts must be non-negative integers."""
        monkeypatch.setenv("APIMANAGER_BASE_URL", "https://api.test")
        monkeypatch.setenv("APIMANAGER_TIMEOUT_MS", raw)

        with pytest.raises(ConfigurationError, match="APIMANAGER_TIMEOUT_MS"):
            TransportConfig.from_env()

    def test_from_env_rejects_bad_tls_flag(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The TLS flag must be a recognisable boolean."""
        monkeypatch.setenv("APIMANAGER_BASE_URL", "https://api.test")
        monkeypatch.setenv("APIMANAGER_VERIFY_TLS", "maybe")

        with pytest.raises(ConfigurationError, match="APIMANAGER_VERIFY_TLS"):
            TransportConfig.from_env()


class TestManagerConfigFromMapping:
    """Tests for ManagerConfig.from_mapping."""

    def test_builds_nested_transport(self) -> None:
        """The nested transport mapping becomes a TransportConfig."""

        def auth(use_auth: bool) -> dict[str, str]:
            return {"Authorization": "Bearer token"} if use_auth else {}

        config = ManagerConfig.from_mapping(
            {
                "transport": {
                    "base_url": "https://api.test",
                    "headers": {"Accept": "application/json"},
                    "timeout_ms": 2000,
                    "status_accepted": lambda status: status == 200,
                    "on_rejected_status": [],
                },
                "get_auth_header": auth,
                "before_request": [],
                "after_request": [],
            }
        )

        assert config.transport.base_url == "https://api.test"
        assert config.transport.headers == {"Accept": "application/json"}
        assert config.transport.timeout_ms == 2000
        assert config.get_auth_header is auth
        assert config.extract_result is identity
        assert config.extract_error is identity

    def test_missing_transport(self) -> None:
        """A configuration without transport settings is rejected."""
        with pytest.raises(ConfigurationError, match="transport"):
            ManagerConfig.from_mapping({"before_request": []})

    def test_missing_base_url(self) -> None:
        """Transport settings must include a base URL."""
        with pytest.raises(ConfigurationError, match="base_url"):
            ManagerConfig.from_mapping({"transport": {"headers": {}}})


def test_identity_returns_value() -> None:
    """identity is the default payload extractor."""
    marker = object()

    assert identity(marker) is marker
