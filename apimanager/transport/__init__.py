"""Shared HTTP transport built on httpx."""

from __future__ import annotations

from .client import TransportHandle, build_transport, new_debug_id

__all__ = ["TransportHandle", "build_transport", "new_debug_id"]
