"""Function descriptors and the call plans derived from them."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import enum
import typing as typ

import msgspec

from apimanager.errors import ConfigurationError

RAW_BODY = "raw"
"""Conventional ``body_parameters`` value selecting raw-value body mode."""

_REQUIRED_FIELDS = ("url", "request_type", "url_parameters", "use_auth", "headers")


class RequestType(enum.StrEnum):
    """Request semantics a descriptor can declare."""

    FETCH = "fetch"
    CREATE = "create"
    REPLACE = "replace"
    REMOVE = "remove"
    FETCH_BINARY = "fetch-binary"


_REQUEST_TYPE_ALIASES: dict[str, RequestType] = {
    "get": RequestType.FETCH,
    "post": RequestType.CREATE,
    "put": RequestType.REPLACE,
    "delete": RequestType.REMOVE,
    "image": RequestType.FETCH_BINARY,
}


def parse_request_type(value: str) -> RequestType | None:
    """Return the request type for ``value`` or one of its verb aliases."""
    normalized = value.strip().lower()
    alias = _REQUEST_TYPE_ALIASES.get(normalized)
    if alias is not None:
        return alias
    try:
        return RequestType(normalized)
    except ValueError:
        return None


def valid_request_types() -> list[str]:
    """Return every accepted request type spelling."""
    return [member.value for member in RequestType] + list(_REQUEST_TYPE_ALIASES)


class FunctionDescriptor(msgspec.Struct, kw_only=True, frozen=True):
    """Declarative definition of one endpoint.

    Attributes
    ----------
    url : str
        URL template, relative to the manager's base URL, with ``{name}``
        placeholders.
    request_type : str
        A :class:`RequestType` value or one of the verbs ``get``, ``post``,
        ``put``, ``delete`` and ``image``.
    url_parameters : tuple[str, ...]
        Placeholder names, filled from the leading call arguments.
    headers : dict[str, str]
        Headers sent with the request, before auth headers are merged.
    use_auth : bool
        Passed to the manager's ``get_auth_header`` on every call.
    body_parameters : object
        Sequence of body field names, or a string for raw-value mode.
    form_parameters : object
        Sequence of multipart field names.

    """

    url: str
    request_type: str
    url_parameters: tuple[str, ...]
    headers: dict[str, str]
    use_auth: bool
    body_parameters: typ.Any = None
    form_parameters: typ.Any = None


@dataclasses.dataclass(frozen=True, slots=True)
class KeyedBody:
    """Body assembled as a mapping from field names to call arguments."""

    names: tuple[str, ...] = ()

    @property
    def length(self) -> int:
        """Return how many call arguments the body consumes."""
        return len(self.names)

    def build(self, values: cabc.Sequence[object]) -> dict[str, object]:
        """Return the body mapping for ``values``."""
        return dict(zip(self.names, values, strict=True))

    def __bool__(self) -> bool:
        """Return whether the body declares any field."""
        return bool(self.names)


@dataclasses.dataclass(frozen=True, slots=True)
class RawBody:
    """Body made of a single call argument passed through unchanged."""

    @property
    def length(self) -> int:
        """Return how many call arguments the body consumes."""
        return 1

    def build(self, values: cabc.Sequence[object]) -> object:
        """Return the single value as the entire body."""
        return values[0]

    def __bool__(self) -> bool:
        """Raw bodies always carry a value."""
        return True


BodyShape = KeyedBody | RawBody


def _is_name_sequence(value: object) -> bool:
    return (
        isinstance(value, cabc.Sequence)
        and not isinstance(value, str | bytes)
        and all(isinstance(item, str) for item in value)
    )


def body_shape(name: str, body_parameters: object) -> BodyShape:
    """Return the body variant declared by ``body_parameters``.

    Raises
    ------
    ConfigurationError
        If the value is neither a string nor a sequence of names.

    """
    if body_parameters is None:
        return KeyedBody()
    if isinstance(body_parameters, str):
        return RawBody()
    if _is_name_sequence(body_parameters):
        return KeyedBody(tuple(typ.cast("cabc.Sequence[str]", body_parameters)))
    raise ConfigurationError.invalid_body_parameters(name)


def form_names(name: str, form_parameters: object) -> tuple[str, ...]:
    """Return the multipart field names declared by ``form_parameters``.

    Raises
    ------
    ConfigurationError
        If the value is not a sequence of names.

    """
    if form_parameters is None:
        return ()
    if _is_name_sequence(form_parameters):
        return tuple(typ.cast("cabc.Sequence[str]", form_parameters))
    raise ConfigurationError.invalid_form_parameters(name)


@dataclasses.dataclass(frozen=True, slots=True)
class CallPlan:
    """Argument layout and dispatch target resolved from a descriptor."""

    url_parameters: tuple[str, ...]
    body: BodyShape
    form: tuple[str, ...]
    request_type: RequestType | None

    @property
    def arity(self) -> int:
        """Return the number of positional arguments a call must supply."""
        return len(self.url_parameters) + self.body.length + len(self.form)

    @classmethod
    def from_descriptor(cls, name: str, descriptor: FunctionDescriptor) -> CallPlan:
        """Resolve the plan; unsupported request types resolve to ``None``."""
        return cls(
            url_parameters=descriptor.url_parameters,
            body=body_shape(name, descriptor.body_parameters),
            form=form_names(name, descriptor.form_parameters),
            request_type=parse_request_type(descriptor.request_type),
        )


def _missing_fields(mapping: cabc.Mapping[str, object]) -> list[str]:
    missing: list[str] = []
    for field in _REQUIRED_FIELDS:
        value = mapping.get(field)
        if value is None or (field in {"url", "request_type"} and not value):
            missing.append(field)
    return missing


def _declares_values(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return True
    return isinstance(value, cabc.Sized) and len(value) > 0


def _check_body_form_conflict(name: str, descriptor: FunctionDescriptor) -> None:
    if parse_request_type(descriptor.request_type) is not RequestType.CREATE:
        return
    if _declares_values(descriptor.body_parameters) and _declares_values(
        descriptor.form_parameters
    ):
        raise ConfigurationError.conflicting_body_and_form(name)


def validate_descriptor(
    name: str,
    descriptor: FunctionDescriptor | cabc.Mapping[str, typ.Any],
) -> FunctionDescriptor:
    """Validate ``descriptor`` and return it as a :class:`FunctionDescriptor`.

    Plain mappings are converted with ``msgspec``; the input is never
    modified.

    Raises
    ------
    ConfigurationError
        If a required field is missing or has the wrong type, or a create
        descriptor declares both body and form parameters.

    """
    if isinstance(descriptor, FunctionDescriptor):
        missing = _missing_fields(msgspec.structs.asdict(descriptor))
        if missing:
            raise ConfigurationError.missing_fields(name, missing)
        validated = descriptor
    elif isinstance(descriptor, cabc.Mapping):
        missing = _missing_fields(descriptor)
        if missing:
            raise ConfigurationError.missing_fields(name, missing)
        try:
            validated = msgspec.convert(dict(descriptor), type=FunctionDescriptor)
        except msgspec.ValidationError as exc:
            raise ConfigurationError.invalid_descriptor(name, str(exc)) from exc
    else:
        raise ConfigurationError.invalid_descriptor(
            name, f"expected a mapping, got {type(descriptor).__name__}"
        )

    _check_body_form_conflict(name, validated)
    return validated


__all__ = [
    "RAW_BODY",
    "BodyShape",
    "CallPlan",
    "FunctionDescriptor",
    "KeyedBody",
    "RawBody",
    "RequestType",
    "body_shape",
    "form_names",
    "parse_request_type",
    "valid_request_types",
    "validate_descriptor",
]
