"""Request executor: one coroutine per HTTP semantic.

Two independent success criteria apply to every call. The transport decides
whether a status is acceptable at all (``status_accepted``); refused statuses,
network errors and timeouts are *transport* rejections. A response the
transport accepted is then only a success when its status is exactly 200;
any other status is a *status* rejection. Both surface as
:class:`~apimanager.errors.RequestRejectedError` and are told apart by its
``kind`` and ``payload``.
"""

from __future__ import annotations

import base64
import enum
import http
import typing as typ

import httpx
import msgspec

from apimanager.errors import RequestRejectedError
from apimanager.hooks import HookChain
from apimanager.observability import RequestEventLogger

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from apimanager.config import AuthHeaderFn
    from apimanager.form import MultipartForm
    from apimanager.hooks import HookSpec
    from apimanager.transport import TransportHandle

OK_STATUS = http.HTTPStatus.OK
_DEFAULT_BINARY_CONTENT_TYPE = "application/octet-stream"


class Verb(enum.StrEnum):
    """Verb labels passed to hooks and log records."""

    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    IMAGE = "IMAGE"


def decode_payload(response: httpx.Response) -> object:
    """Return the response body decoded as JSON, falling back to text."""
    if not response.content:
        return None
    try:
        return msgspec.json.decode(response.content)
    except msgspec.DecodeError:
        return response.text


def to_data_uri(response: httpx.Response) -> str:
    """Return the response body as a base64 ``data:`` URI."""
    content_type = response.headers.get("content-type", _DEFAULT_BINARY_CONTENT_TYPE)
    encoded = base64.b64encode(response.content).decode("ascii")
    return f"data:{content_type.lower()};base64,{encoded}"


def _body_kwargs(body: object) -> dict[str, object]:
    # Text and bytes are sent untouched; everything else is JSON encoded.
    if isinstance(body, str | bytes):
        return {"content": body}
    return {"json": body}


def _error_payload(exc: httpx.HTTPError) -> object:
    if isinstance(exc, httpx.HTTPStatusError):
        return decode_payload(exc.response)
    return exc


class RequestExecutor:
    """Run hooks around transport calls and normalize their outcome.

    Parameters
    ----------
    transport
        Shared transport handle that issues the requests.
    get_auth_header
        Called with the ``use_auth`` flag on every request; its headers are
        merged over the caller's headers.
    before_request
        Hook or hooks called with ``(verb, url, body, headers)``.
    after_request
        Hook or hooks called with ``(verb, url, headers, body, outcome)``
        where ``outcome`` is the response or the transport error.

    """

    def __init__(
        self,
        transport: TransportHandle,
        *,
        get_auth_header: AuthHeaderFn | None = None,
        before_request: HookSpec = None,
        after_request: HookSpec = None,
    ) -> None:
        """Initialise the executor around a shared transport handle."""
        self._transport = transport
        self._get_auth_header = get_auth_header if callable(get_auth_header) else None
        self._before_request = HookChain.from_spec(before_request)
        self._after_request = HookChain.from_spec(after_request)
        self._events = RequestEventLogger(transport.debug_id)

    @property
    def transport(self) -> TransportHandle:
        """Return the shared transport handle."""
        return self._transport

    def effective_headers(
        self, headers: cabc.Mapping[str, str] | None, use_auth: bool
    ) -> dict[str, str]:
        """Return a fresh header dict with the auth headers merged over it."""
        merged = dict(headers or {})
        if self._get_auth_header is not None:
            merged.update(self._get_auth_header(use_auth) or {})
        return merged

    async def fetch(
        self,
        url: str,
        headers: cabc.Mapping[str, str] | None = None,
        use_auth: bool = False,
    ) -> object:
        """Send a GET request and return the decoded payload."""
        response = await self._execute(Verb.GET, "GET", url, headers, use_auth)
        return decode_payload(response)

    async def replace(
        self,
        url: str,
        body: object = None,
        headers: cabc.Mapping[str, str] | None = None,
        use_auth: bool = False,
    ) -> object:
        """Send a PUT request with ``body`` and return the decoded payload."""
        body = {} if body is None else body
        response = await self._execute(
            Verb.PUT, "PUT", url, headers, use_auth, body=body, **_body_kwargs(body)
        )
        return decode_payload(response)

    async def create_with_body(
        self,
        url: str,
        body: object = None,
        headers: cabc.Mapping[str, str] | None = None,
        use_auth: bool = False,
    ) -> object:
        """Send a POST request with ``body`` and return the decoded payload."""
        body = {} if body is None else body
        response = await self._execute(
            Verb.POST, "POST", url, headers, use_auth, body=body, **_body_kwargs(body)
        )
        return decode_payload(response)

    async def create_with_form(
        self,
        url: str,
        form: MultipartForm,
        headers: cabc.Mapping[str, str] | None = None,
        use_auth: bool = False,
    ) -> object:
        """Send a multipart POST request and return the decoded payload."""
        response = await self._execute(
            Verb.POST, "POST", url, headers, use_auth, body=form, files=form.to_files()
        )
        return decode_payload(response)

    async def remove(
        self,
        url: str,
        headers: cabc.Mapping[str, str] | None = None,
        use_auth: bool = False,
    ) -> object:
        """Send a DELETE request and return the decoded payload."""
        response = await self._execute(Verb.DELETE, "DELETE", url, headers, use_auth)
        return decode_payload(response)

    async def fetch_binary(
        self,
        url: str,
        headers: cabc.Mapping[str, str] | None = None,
        use_auth: bool = False,
    ) -> str:
        """Fetch raw bytes and return them as a base64 ``data:`` URI.

        Transport rejections carry the raw transport error as their payload.
        """
        response = await self._execute(
            Verb.IMAGE, "GET", url, headers, use_auth, raw_error_payload=True
        )
        return to_data_uri(response)

    async def _execute(  # noqa: PLR0913
        self,
        verb: Verb,
        method: str,
        url: str,
        headers: cabc.Mapping[str, str] | None,
        use_auth: bool,
        *,
        body: object = None,
        raw_error_payload: bool = False,
        **send_kwargs: typ.Any,  # noqa: ANN401
    ) -> httpx.Response:
        request_headers = self.effective_headers(headers, use_auth)
        hook_body = {} if body is None else body
        self._before_request(verb, url, hook_body, request_headers)
        self._events.log_request_started(verb=verb, url=url)

        try:
            response = await self._transport.send(
                method, url, headers=request_headers, **send_kwargs
            )
        except httpx.HTTPError as exc:
            self._after_request(verb, url, request_headers, hook_body, exc)
            rejection = RequestRejectedError.transport(
                verb, exc, exc if raw_error_payload else _error_payload(exc)
            )
            self._events.log_request_rejected(
                verb=verb,
                url=url,
                kind=rejection.kind,
                status_code=rejection.status_code,
                error=exc,
            )
            raise rejection from exc

        self._after_request(verb, url, request_headers, hook_body, response)
        if response.status_code != OK_STATUS:
            rejection = RequestRejectedError.status(
                verb, response.status_code, decode_payload(response)
            )
            self._events.log_request_rejected(
                verb=verb,
                url=url,
                kind=rejection.kind,
                status_code=response.status_code,
            )
            raise rejection

        self._events.log_request_completed(
            verb=verb, url=url, status_code=response.status_code
        )
        return response


__all__ = ["OK_STATUS", "RequestExecutor", "Verb", "decode_payload", "to_data_uri"]
