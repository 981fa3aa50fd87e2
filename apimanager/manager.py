"""Manager facade composing transport, executor and compiler."""

from __future__ import annotations

import typing as typ

from apimanager.compiler import CompiledFunction, FunctionCompiler, validate_descriptor
from apimanager.errors import ConfigurationError
from apimanager.executor import RequestExecutor
from apimanager.logging import get_logger, log_info
from apimanager.transport import TransportHandle, build_transport

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import types

    import httpx

    from apimanager.compiler import FunctionDescriptor
    from apimanager.config import ManagerConfig

    DescriptorInput = FunctionDescriptor | cabc.Mapping[str, typ.Any]

logger = get_logger(__name__)


class ApiManager:
    """Build request functions that share one transport and executor.

    Examples
    --------
    >>> import asyncio
    >>> from apimanager import ManagerConfig, TransportConfig, create_manager
    >>> manager = create_manager(
    ...     ManagerConfig(transport=TransportConfig(base_url="https://api.test"))
    ... )
    >>> functions = manager.compile_many(
    ...     {
    ...         "get_user": {
    ...             "url": "/users/{id}",
    ...             "request_type": "fetch",
    ...             "url_parameters": ["id"],
    ...             "headers": {},
    ...             "use_auth": False,
    ...         }
    ...     }
    ... )
    >>> # user = asyncio.run(functions["get_user"](7))
    >>> asyncio.run(manager.aclose())

    """

    def __init__(
        self,
        config: ManagerConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Build the shared transport handle, executor and compiler."""
        self._config = config
        self._transport = build_transport(
            config.transport, transport=transport, http_client=http_client
        )
        self._executor = RequestExecutor(
            self._transport,
            get_auth_header=config.get_auth_header,
            before_request=config.before_request,
            after_request=config.after_request,
        )
        self._compiler = FunctionCompiler(
            self._executor,
            extract_result=config.extract_result,
            extract_error=config.extract_error,
        )

    @property
    def config(self) -> ManagerConfig:
        """Return the configuration the manager was created with."""
        return self._config

    @property
    def debug_id(self) -> str:
        """Return the correlation token used in log records."""
        return self._transport.debug_id

    def compile_one(self, name: str, descriptor: DescriptorInput) -> CompiledFunction:
        """Validate and compile a single descriptor.

        Raises
        ------
        ConfigurationError
            If the descriptor is invalid.

        """
        return self._compiler.compile(name, descriptor)

    def compile_many(
        self, descriptors: cabc.Mapping[str, DescriptorInput]
    ) -> dict[str, CompiledFunction]:
        """Validate every descriptor, then compile them all.

        Raises
        ------
        ConfigurationError
            Naming the first invalid entry; nothing is compiled in that case.

        """
        validated: dict[str, FunctionDescriptor] = {}
        for name, descriptor in descriptors.items():
            try:
                validated[name] = validate_descriptor(name, descriptor)
            except ConfigurationError as exc:
                raise ConfigurationError.invalid_batch_entry(name, exc) from exc

        functions = {
            name: self._compiler.compile(name, descriptor)
            for name, descriptor in validated.items()
        }
        log_info(
            logger,
            "correlation_id=%s compiled_functions=%d",
            self.debug_id,
            len(functions),
        )
        return functions

    def get_request_executor(self) -> RequestExecutor:
        """Return the shared request executor."""
        return self._executor

    def get_transport_handle(self) -> TransportHandle:
        """Return the shared transport handle."""
        return self._transport

    async def aclose(self) -> None:
        """Close the shared transport."""
        await self._transport.aclose()

    async def __aenter__(self) -> ApiManager:
        """Return the manager for use in ``async with``."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Close the shared transport on exit."""
        await self.aclose()


def create_manager(
    config: ManagerConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> ApiManager:
    """Create an :class:`ApiManager` for ``config``.

    ``transport`` replaces the network transport of the shared httpx client,
    which is how tests route requests to ``httpx.MockTransport``.
    ``http_client`` shares an existing client instead; the manager then
    leaves closing it to the caller.
    """
    return ApiManager(config, transport=transport, http_client=http_client)


__all__ = ["ApiManager", "create_manager"]
