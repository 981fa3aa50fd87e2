"""Transport handle wrapping a configured ``httpx.AsyncClient``."""

from __future__ import annotations

import secrets
import string
import typing as typ

import httpx

from apimanager.errors import TransportStatusError
from apimanager.hooks import HookChain
from apimanager.logging import get_logger, log_debug

if typ.TYPE_CHECKING:
    from apimanager.config import TransportConfig

logger = get_logger(__name__)

_DEBUG_ID_ALPHABET = string.ascii_letters + string.digits
_DEBUG_ID_LENGTH = 12

FormFiles = list[tuple[str, typ.Any]]


def new_debug_id(length: int = _DEBUG_ID_LENGTH) -> str:
    """Return a random alphanumeric token for log correlation."""
    return "".join(secrets.choice(_DEBUG_ID_ALPHABET) for _ in range(length))


class TransportHandle:
    """Configured HTTP client shared by every request of one manager.

    The handle applies ``status_accepted`` as its only success criterion.
    Refused responses raise :class:`TransportStatusError` after the
    ``on_rejected_status`` hooks have seen the same error.

    ``debug_id`` is a cosmetic correlation token; it never takes part in
    request logic or equality.
    """

    def __init__(
        self,
        config: TransportConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the handle, creating an owned client when none is given."""
        self._config = config
        self._on_rejected_status = HookChain.from_spec(config.on_rejected_status)
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(
                base_url=config.base_url,
                headers=dict(config.headers),
                timeout=config.timeout_s,
                verify=config.verify_tls,
                transport=transport,
            )
        self._client = http_client
        self.debug_id = new_debug_id()

    @property
    def config(self) -> TransportConfig:
        """Return the configuration the handle was built from."""
        return self._config

    @property
    def client(self) -> httpx.AsyncClient:
        """Return the underlying httpx client."""
        return self._client

    def is_accepted(self, status_code: int) -> bool:
        """Return whether ``status_code`` counts as a transport success."""
        predicate = self._config.status_accepted
        if predicate is None:
            return True
        return bool(predicate(status_code))

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        json: object = None,
        content: str | bytes | None = None,
        files: FormFiles | None = None,
    ) -> httpx.Response:
        """Issue a request relative to the base URL.

        Raises
        ------
        TransportStatusError
            If the response status is refused by ``status_accepted``.
        httpx.HTTPError
            For network failures and timeouts.

        """
        log_debug(
            logger,
            "transport_id=%s method=%s url=%s",
            self.debug_id,
            method,
            url,
        )
        response = await self._client.request(
            method,
            url,
            headers=headers,
            json=json,
            content=content,
            files=files,
        )
        if not self.is_accepted(response.status_code):
            error = TransportStatusError.refused(response)
            self._on_rejected_status(error)
            raise error
        return response

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()


def build_transport(
    config: TransportConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> TransportHandle:
    """Build the shared transport handle for one manager.

    A caller-supplied ``http_client`` is used as-is and stays open when the
    handle is closed; ``transport`` only applies to the owned client.
    """
    return TransportHandle(config, transport=transport, http_client=http_client)


__all__ = ["FormFiles", "TransportHandle", "build_transport", "new_debug_id"]
