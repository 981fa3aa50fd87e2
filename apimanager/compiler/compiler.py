"""Compile function descriptors into request callables."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import functools
import typing as typ

from apimanager.config import identity
from apimanager.errors import ConfigurationError, RequestRejectedError
from apimanager.form import MultipartForm
from apimanager.logging import get_logger, log_debug

from .descriptor import CallPlan, RequestType, valid_request_types, validate_descriptor

if typ.TYPE_CHECKING:
    from apimanager.config import PayloadExtractor
    from apimanager.executor import RequestExecutor

    from .descriptor import FunctionDescriptor

logger = get_logger(__name__)


def substitute_url(
    template: str, names: cabc.Sequence[str], values: cabc.Sequence[object]
) -> str:
    """Replace the first ``{name}`` occurrence for each name, in declared order."""
    url = template
    for name, value in zip(names, values, strict=True):
        url = url.replace(f"{{{name}}}", str(value), 1)
    return url


@dataclasses.dataclass(frozen=True, slots=True)
class _PreparedCall:
    url: str
    body: object
    form: MultipartForm
    headers: dict[str, str]
    use_auth: bool


def _dispatch_create(
    executor: RequestExecutor, call: _PreparedCall
) -> cabc.Awaitable[object]:
    if call.form:
        return executor.create_with_form(call.url, call.form, call.headers, call.use_auth)
    return executor.create_with_body(call.url, call.body, call.headers, call.use_auth)


# fetch-binary requests are always unauthenticated and carry no descriptor headers.
_DISPATCH: dict[
    RequestType,
    cabc.Callable[[RequestExecutor, _PreparedCall], cabc.Awaitable[object]],
] = {
    RequestType.FETCH: lambda executor, call: executor.fetch(
        call.url, call.headers, call.use_auth
    ),
    RequestType.CREATE: _dispatch_create,
    RequestType.REPLACE: lambda executor, call: executor.replace(
        call.url, call.body, call.headers, call.use_auth
    ),
    RequestType.REMOVE: lambda executor, call: executor.remove(
        call.url, call.headers, call.use_auth
    ),
    RequestType.FETCH_BINARY: lambda executor, call: executor.fetch_binary(call.url),
}


class CompiledFunction:
    """Callable produced from one validated descriptor.

    Calling the function checks its arguments synchronously and returns an
    awaitable; configuration problems therefore raise
    :class:`~apimanager.errors.ConfigurationError` at the call site, before
    any request exists. Awaiting the result returns the response payload or
    raises :class:`~apimanager.errors.RequestRejectedError`.
    """

    def __init__(
        self,
        name: str,
        descriptor: FunctionDescriptor,
        executor: RequestExecutor,
        *,
        extract_result: PayloadExtractor = identity,
        extract_error: PayloadExtractor = identity,
    ) -> None:
        """Bind the descriptor to the shared executor."""
        self.__name__ = name
        self.descriptor = descriptor
        self._executor = executor
        self._extract_result = extract_result
        self._extract_error = extract_error

    @functools.cached_property
    def plan(self) -> CallPlan:
        """Return the resolved call plan, computed on first use."""
        return CallPlan.from_descriptor(self.__name__, self.descriptor)

    def __call__(self, *inputs: object) -> cabc.Awaitable[object]:
        """Build the request for ``inputs`` and return its awaitable outcome."""
        plan = self.plan
        if len(inputs) != plan.arity:
            raise ConfigurationError.arity_mismatch(
                self.__name__, plan.arity, len(inputs)
            )
        if plan.request_type is None:
            raise ConfigurationError.unsupported_request_type(
                self.__name__, self.descriptor.request_type, valid_request_types()
            )

        url_count = len(plan.url_parameters)
        body_end = url_count + plan.body.length
        call = _PreparedCall(
            url=substitute_url(
                self.descriptor.url, plan.url_parameters, inputs[:url_count]
            ),
            body=plan.body.build(inputs[url_count:body_end]),
            form=MultipartForm(zip(plan.form, inputs[body_end:], strict=True)),
            headers=dict(self.descriptor.headers),
            use_auth=self.descriptor.use_auth,
        )
        log_debug(
            logger,
            "function=%s request_type=%s url=%s",
            self.__name__,
            plan.request_type,
            call.url,
        )
        request = _DISPATCH[plan.request_type](self._executor, call)
        return self._settle(
            request, extract=plan.request_type is not RequestType.FETCH_BINARY
        )

    async def _settle(self, request: cabc.Awaitable[object], *, extract: bool) -> object:
        try:
            result = await request
        except RequestRejectedError as exc:
            exc.payload = self._extract_error(exc.payload)
            raise
        return self._extract_result(result) if extract else result

    def __repr__(self) -> str:
        """Return a debug representation naming the function."""
        return (
            f"CompiledFunction({self.__name__!r}, "
            f"request_type={self.descriptor.request_type!r})"
        )


class FunctionCompiler:
    """Turn descriptors into :class:`CompiledFunction` callables."""

    def __init__(
        self,
        executor: RequestExecutor,
        *,
        extract_result: PayloadExtractor = identity,
        extract_error: PayloadExtractor = identity,
    ) -> None:
        """Initialise the compiler around the shared executor."""
        self._executor = executor
        self._extract_result = extract_result
        self._extract_error = extract_error

    def compile(
        self,
        name: str,
        descriptor: FunctionDescriptor | cabc.Mapping[str, typ.Any],
    ) -> CompiledFunction:
        """Validate ``descriptor`` and return its compiled function.

        Raises
        ------
        ConfigurationError
            If the descriptor is invalid.

        """
        validated = validate_descriptor(name, descriptor)
        return CompiledFunction(
            name,
            validated,
            self._executor,
            extract_result=self._extract_result,
            extract_error=self._extract_error,
        )


__all__ = ["CompiledFunction", "FunctionCompiler", "substitute_url"]
