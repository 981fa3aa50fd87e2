"""Declarative HTTP API functions.

Describe an endpoint once (URL template, request type, parameter names, auth
flag) and get back an async callable that performs the request through a
shared ``httpx`` client.

Public API
----------
create_manager
    Build an :class:`ApiManager` from a :class:`ManagerConfig`.
ApiManager
    Compiles descriptors into request functions sharing one transport.
ManagerConfig, TransportConfig
    Frozen configuration dataclasses.
FunctionDescriptor, RequestType, RAW_BODY
    Descriptor model.
ConfigurationError, RequestRejectedError, RejectionKind
    Error taxonomy.
validate_manager_config, validate_transport_config
    Optional pre-flight shape checks for mapping configurations.
"""

from __future__ import annotations

from .compiler import (
    RAW_BODY,
    CompiledFunction,
    FunctionCompiler,
    FunctionDescriptor,
    RequestType,
    validate_descriptor,
)
from .config import ManagerConfig, TransportConfig
from .errors import (
    ConfigurationError,
    RejectionKind,
    RequestRejectedError,
    TransportStatusError,
)
from .executor import RequestExecutor
from .form import MultipartForm
from .manager import ApiManager, create_manager
from .transport import TransportHandle, build_transport
from .validation import (
    manager_config_issues,
    validate_manager_config,
    validate_transport_config,
)

__all__ = [
    "RAW_BODY",
    "ApiManager",
    "CompiledFunction",
    "ConfigurationError",
    "FunctionCompiler",
    "FunctionDescriptor",
    "ManagerConfig",
    "MultipartForm",
    "RejectionKind",
    "RequestExecutor",
    "RequestRejectedError",
    "RequestType",
    "TransportConfig",
    "TransportHandle",
    "TransportStatusError",
    "build_transport",
    "create_manager",
    "manager_config_issues",
    "validate_descriptor",
    "validate_manager_config",
    "validate_transport_config",
]
