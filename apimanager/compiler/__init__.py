"""Request-function compiler: descriptors in, request callables out."""

from __future__ import annotations

from .compiler import CompiledFunction, FunctionCompiler, substitute_url
from .descriptor import (
    RAW_BODY,
    CallPlan,
    FunctionDescriptor,
    KeyedBody,
    RawBody,
    RequestType,
    validate_descriptor,
)

__all__ = [
    "RAW_BODY",
    "CallPlan",
    "CompiledFunction",
    "FunctionCompiler",
    "FunctionDescriptor",
    "KeyedBody",
    "RawBody",
    "RequestType",
    "substitute_url",
    "validate_descriptor",
]
