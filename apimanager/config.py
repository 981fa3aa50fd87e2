"""Configuration for API managers and their shared transport."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import os
import typing as typ

from apimanager.errors import ConfigurationError

if typ.TYPE_CHECKING:
    from apimanager.hooks import HookSpec

AuthHeaderFn = cabc.Callable[[bool], cabc.Mapping[str, str] | None]
StatusPredicate = cabc.Callable[[int], bool]
PayloadExtractor = cabc.Callable[[typ.Any], typ.Any]

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def identity(value: typ.Any) -> typ.Any:  # noqa: ANN401
    """Return ``value`` unchanged."""
    return value


@dataclasses.dataclass(frozen=True, slots=True)
class TransportConfig:
    """Configuration for the shared HTTP transport.

    Attributes
    ----------
    base_url
        Base URL that every descriptor URL is resolved against.
    headers
        Default headers sent with every request.
    timeout_ms
        Request timeout in milliseconds. ``0`` or ``None``, the default,
        disables the timeout.
    status_accepted
        Predicate deciding which statuses the transport treats as successful.
        ``None`` accepts every status.
    on_rejected_status
        Hook or sequence of hooks called with the error for refused statuses.
    verify_tls
        Whether TLS certificates are verified for outbound requests.

    """

    base_url: str
    headers: cabc.Mapping[str, str] = dataclasses.field(default_factory=dict)
    timeout_ms: int | None = None
    status_accepted: StatusPredicate | None = None
    on_rejected_status: HookSpec = None
    verify_tls: bool = True

    @property
    def timeout_s(self) -> float | None:
        """Return the timeout in seconds, or ``None`` for no timeout."""
        if not self.timeout_ms:
            return None
        return self.timeout_ms / 1000

    @staticmethod
    def _parse_timeout_from_env() -> int | None:
        raw_timeout = os.environ.get("APIMANAGER_TIMEOUT_MS")
        if raw_timeout is None:
            return None

        try:
            timeout_ms = int(raw_timeout)
        except ValueError as exc:
            raise ConfigurationError.invalid_env(
                "APIMANAGER_TIMEOUT_MS", raw_timeout, "Must be a non-negative integer"
            ) from exc

        if timeout_ms < 0:
            raise ConfigurationError.invalid_env(
                "APIMANAGER_TIMEOUT_MS", raw_timeout, "Must be a non-negative integer"
            )
        return timeout_ms

    @staticmethod
    def _parse_verify_tls_from_env() -> bool:
        raw_verify = os.environ.get("APIMANAGER_VERIFY_TLS")
        if raw_verify is None:
            return True

        normalized = raw_verify.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        raise ConfigurationError.invalid_env(
            "APIMANAGER_VERIFY_TLS", raw_verify, "Must be a boolean flag"
        )

    @classmethod
    def from_env(cls) -> TransportConfig:
        """Build a transport configuration from environment variables.

        Reads the following environment variables:

        - ``APIMANAGER_BASE_URL``: Required base URL
        - ``APIMANAGER_TIMEOUT_MS``: Optional timeout in milliseconds
        - ``APIMANAGER_VERIFY_TLS``: Optional TLS verification flag

        Raises
        ------
        ConfigurationError
            If the base URL is missing or a value is invalid.

        """
        base_url = os.environ.get("APIMANAGER_BASE_URL", "").strip()
        if not base_url:
            raise ConfigurationError.missing_config("APIMANAGER_BASE_URL")

        return cls(
            base_url=base_url,
            timeout_ms=cls._parse_timeout_from_env(),
            verify_tls=cls._parse_verify_tls_from_env(),
        )

    @classmethod
    def from_mapping(cls, mapping: cabc.Mapping[str, typ.Any]) -> TransportConfig:
        """Build a transport configuration from a plain mapping."""
        if "base_url" not in mapping:
            raise ConfigurationError.missing_config("transport.base_url")
        return cls(
            base_url=mapping["base_url"],
            headers=dict(mapping.get("headers") or {}),
            timeout_ms=mapping.get("timeout_ms"),
            status_accepted=mapping.get("status_accepted"),
            on_rejected_status=mapping.get("on_rejected_status"),
            verify_tls=mapping.get("verify_tls", True),
        )


@dataclasses.dataclass(frozen=True, slots=True)
class ManagerConfig:
    """Configuration supplied once when creating an API manager.

    Attributes
    ----------
    transport
        Settings for the shared HTTP transport.
    get_auth_header
        Called per request with the descriptor's ``use_auth`` flag; the
        returned headers are merged over the request headers.
    before_request
        Hook or hooks called before each request.
    after_request
        Hook or hooks called after each request, successful or not.
    extract_result
        Applied to successful payloads before they are returned.
    extract_error
        Applied to rejection payloads before they are raised.

    """

    transport: TransportConfig
    get_auth_header: AuthHeaderFn | None = None
    before_request: HookSpec = None
    after_request: HookSpec = None
    extract_result: PayloadExtractor = identity
    extract_error: PayloadExtractor = identity

    @classmethod
    def from_mapping(cls, mapping: cabc.Mapping[str, typ.Any]) -> ManagerConfig:
        """Build a manager configuration from a plain mapping.

        The mapping mirrors the dataclass fields, with ``transport`` given as
        a nested mapping.

        Raises
        ------
        ConfigurationError
            If ``transport`` or ``transport.base_url`` is missing.

        """
        raw_transport = mapping.get("transport")
        if not isinstance(raw_transport, cabc.Mapping):
            raise ConfigurationError.missing_config("transport")
        return cls(
            transport=TransportConfig.from_mapping(raw_transport),
            get_auth_header=mapping.get("get_auth_header"),
            before_request=mapping.get("before_request"),
            after_request=mapping.get("after_request"),
            extract_result=mapping.get("extract_result") or identity,
            extract_error=mapping.get("extract_error") or identity,
        )


__all__ = [
    "AuthHeaderFn",
    "ManagerConfig",
    "PayloadExtractor",
    "StatusPredicate",
    "TransportConfig",
    "identity",
]
