"""Shape checks for plain-mapping manager configurations.

These checks are an optional pre-flight step before
:meth:`apimanager.config.ManagerConfig.from_mapping`. They compare the key set
and the primitive kind of each value against a reference shape; they do not
look inside nested values beyond the transport mapping.
"""

from __future__ import annotations

import collections.abc as cabc
import enum
import typing as typ


class ValueKind(enum.StrEnum):
    """Primitive kinds a configuration value is checked against."""

    STRING = "string"
    MAPPING = "mapping"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    CALLABLE = "callable"
    HOOKS = "callable or sequence"


TRANSPORT_CONFIG_SHAPE: dict[str, ValueKind] = {
    "base_url": ValueKind.STRING,
    "headers": ValueKind.MAPPING,
    "timeout_ms": ValueKind.INTEGER,
    "status_accepted": ValueKind.CALLABLE,
    "on_rejected_status": ValueKind.HOOKS,
}

TRANSPORT_CONFIG_OPTIONAL: dict[str, ValueKind] = {"verify_tls": ValueKind.BOOLEAN}

MANAGER_CONFIG_SHAPE: dict[str, ValueKind] = {
    "transport": ValueKind.MAPPING,
    "get_auth_header": ValueKind.CALLABLE,
    "before_request": ValueKind.HOOKS,
    "after_request": ValueKind.HOOKS,
}

MANAGER_CONFIG_OPTIONAL: dict[str, ValueKind] = {
    "extract_result": ValueKind.CALLABLE,
    "extract_error": ValueKind.CALLABLE,
}


def _matches(value: object, kind: ValueKind) -> bool:
    match kind:
        case ValueKind.STRING:
            return isinstance(value, str)
        case ValueKind.MAPPING:
            return isinstance(value, cabc.Mapping)
        case ValueKind.INTEGER:
            return isinstance(value, int) and not isinstance(value, bool)
        case ValueKind.BOOLEAN:
            return isinstance(value, bool)
        case ValueKind.CALLABLE:
            return callable(value)
        case ValueKind.HOOKS:
            return callable(value) or (
                isinstance(value, cabc.Sequence) and not isinstance(value, str | bytes)
            )


def shape_issues(
    config: object,
    shape: cabc.Mapping[str, ValueKind],
    *,
    optional: cabc.Mapping[str, ValueKind] | None = None,
    prefix: str = "",
) -> list[str]:
    """Return every mismatch between ``config`` and the reference ``shape``.

    Keys in ``shape`` are required. Keys in ``optional`` may be omitted but are
    kind-checked when present. Any other key is reported as unexpected.
    """
    if not isinstance(config, cabc.Mapping):
        return [f"{prefix or 'config'} must be a mapping"]

    known = {**(optional or {}), **shape}
    mapping = typ.cast("cabc.Mapping[str, object]", config)
    issues = [f"{prefix}{key}: missing" for key in shape if key not in mapping]
    issues.extend(
        f"{prefix}{key}: unexpected key" for key in mapping if key not in known
    )
    issues.extend(
        f"{prefix}{key}: expected {kind}, got {type(mapping[key]).__name__}"
        for key, kind in known.items()
        if key in mapping and not _matches(mapping[key], kind)
    )
    return issues


def transport_config_issues(config: object) -> list[str]:
    """Return shape issues for a transport configuration mapping."""
    return shape_issues(
        config,
        TRANSPORT_CONFIG_SHAPE,
        optional=TRANSPORT_CONFIG_OPTIONAL,
        prefix="transport.",
    )


def manager_config_issues(config: object) -> list[str]:
    """Return shape issues for a manager configuration mapping.

    The nested ``transport`` mapping is checked too once it is present.
    """
    issues = shape_issues(config, MANAGER_CONFIG_SHAPE, optional=MANAGER_CONFIG_OPTIONAL)
    if issues:
        return issues
    mapping = typ.cast("cabc.Mapping[str, object]", config)
    return transport_config_issues(mapping["transport"])


def validate_transport_config(config: object) -> bool:
    """Return whether ``config`` matches the transport configuration shape."""
    return not transport_config_issues(config)


def validate_manager_config(config: object) -> bool:
    """Return whether ``config`` matches the manager configuration shape."""
    return not manager_config_issues(config)


__all__ = [
    "MANAGER_CONFIG_OPTIONAL",
    "MANAGER_CONFIG_SHAPE",
    "TRANSPORT_CONFIG_OPTIONAL",
    "TRANSPORT_CONFIG_SHAPE",
    "ValueKind",
    "manager_config_issues",
    "shape_issues",
    "transport_config_issues",
    "validate_manager_config",
    "validate_transport_config",
]
