"""Error taxonomy for API managers and compiled request functions."""

from __future__ import annotations

import enum
import typing as typ

import httpx

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class ConfigurationError(ValueError):
    """Raised when a manager configuration or function descriptor is invalid.

    Configuration errors are always raised synchronously: at compile time for
    malformed descriptors, or when a compiled function is called with the
    wrong number of arguments, before any request is issued.
    """

    @classmethod
    def missing_fields(
        cls, name: str, fields: cabc.Iterable[str]
    ) -> ConfigurationError:
        """Return an error for a descriptor missing required fields."""
        listed = ", ".join(fields)
        return cls(
            f"Invalid function object for {name}. Missing or invalid "
            f"properties: {listed}"
        )

    @classmethod
    def invalid_descriptor(cls, name: str, detail: str) -> ConfigurationError:
        """Return an error for a descriptor that cannot be decoded."""
        return cls(f"Invalid function object for {name}: {detail}")

    @classmethod
    def conflicting_body_and_form(cls, name: str) -> ConfigurationError:
        """Return an error for a create descriptor declaring body and form."""
        return cls(
            f"Invalid function object for {name}. A create request cannot "
            "declare both body_parameters and form_parameters"
        )

    @classmethod
    def invalid_body_parameters(cls, name: str) -> ConfigurationError:
        """Return an error for body parameters of an unsupported shape."""
        return cls(
            f"Invalid body parameter {name}. Expect string or sequence of string"
        )

    @classmethod
    def invalid_form_parameters(cls, name: str) -> ConfigurationError:
        """Return an error for form parameters of an unsupported shape."""
        return cls(f"Invalid form parameter {name}. Expect sequence of string")

    @classmethod
    def arity_mismatch(cls, name: str, expected: int, got: int) -> ConfigurationError:
        """Return an error for a call with the wrong number of inputs."""
        return cls(
            f"Invalid number of parameters in function {name}. "
            f"Expected {expected}, but got {got}"
        )

    @classmethod
    def unsupported_request_type(
        cls, name: str, request_type: str, valid: cabc.Iterable[str]
    ) -> ConfigurationError:
        """Return an error for a request type outside the supported set."""
        valid_str = ", ".join(f"'{value}'" for value in valid)
        return cls(
            f"Invalid request type '{request_type}' in function {name}. "
            f"Must be one of {valid_str}"
        )

    @classmethod
    def invalid_batch_entry(cls, name: str, exc: BaseException) -> ConfigurationError:
        """Return an error naming the batch entry that failed validation."""
        return cls(f"Function batch rejected at entry '{name}': {exc}")

    @classmethod
    def missing_config(cls, key: str) -> ConfigurationError:
        """Return an error for a manager configuration missing a key."""
        return cls(f"Manager configuration is missing required key '{key}'")

    @classmethod
    def invalid_env(cls, variable: str, value: str, constraint: str) -> ConfigurationError:
        """Return an error for an environment variable with an invalid value."""
        return cls(f"Invalid {variable} '{value}'. {constraint}")


class RejectionKind(enum.StrEnum):
    """Which success criterion a rejected request failed.

    ``TRANSPORT`` covers network errors, timeouts and statuses refused by the
    transport's ``status_accepted`` predicate. ``STATUS`` covers responses the
    transport accepted whose status is not exactly 200.
    """

    TRANSPORT = "transport"
    STATUS = "status"


class RequestRejectedError(Exception):
    """Raised when a request does not produce a successful payload.

    Attributes
    ----------
    payload
        Best-available payload: the decoded response body, or the raw
        transport error when no response body exists.
    status_code
        HTTP status code of the response, if one was received.
    kind
        Which success criterion the request failed.

    """

    def __init__(
        self,
        message: str,
        *,
        payload: object,
        kind: RejectionKind,
        status_code: int | None = None,
    ) -> None:
        """Initialise the rejection with its payload and classification."""
        self.payload = payload
        self.kind = kind
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def status(cls, verb: str, status_code: int, payload: object) -> RequestRejectedError:
        """Return a rejection for an accepted response whose status is not 200."""
        return cls(
            f"{verb} request returned HTTP {status_code}",
            payload=payload,
            kind=RejectionKind.STATUS,
            status_code=status_code,
        )

    @classmethod
    def transport(
        cls, verb: str, exc: httpx.HTTPError, payload: object
    ) -> RequestRejectedError:
        """Return a rejection for a failed transport call."""
        status_code = None
        if isinstance(exc, httpx.HTTPStatusError):
            status_code = exc.response.status_code
        return cls(
            f"{verb} request failed: {exc}",
            payload=payload,
            kind=RejectionKind.TRANSPORT,
            status_code=status_code,
        )


class TransportStatusError(httpx.HTTPStatusError):
    """Raised by a transport handle for statuses refused by ``status_accepted``."""

    @classmethod
    def refused(cls, response: httpx.Response) -> TransportStatusError:
        """Return an error wrapping a response whose status was refused."""
        return cls(
            f"HTTP {response.status_code} refused by status_accepted",
            request=response.request,
            response=response,
        )


__all__ = [
    "ConfigurationError",
    "RejectionKind",
    "RequestRejectedError",
    "TransportStatusError",
]
