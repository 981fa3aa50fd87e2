"""Unit tests for descriptor validation and call plans."""

from __future__ import annotations

import typing as typ

import pytest

from apimanager.compiler.descriptor import (
    RAW_BODY,
    CallPlan,
    FunctionDescriptor,
    KeyedBody,
    RawBody,
    RequestType,
    body_shape,
    form_names,
    parse_request_type,
    validate_descriptor,
)
from apimanager.errors import ConfigurationError


def _descriptor(**overrides: typ.Any) -> dict[str, typ.Any]:  # noqa: ANN401
    descriptor: dict[str, typ.Any] = {
        "url": "/users/{id}",
        "request_type": "fetch",
        "url_parameters": ["id"],
        "headers": {"Content-Type": "application/json"},
        "use_auth": False,
    }
    descriptor.update(overrides)
    return descriptor


class TestValidateDescriptor:
    """Tests for validate_descriptor."""

    def test_converts_mapping(self) -> None:
        """A valid mapping becomes a FunctionDescriptor."""
        descriptor = validate_descriptor("getUser", _descriptor())

        assert isinstance(descriptor, FunctionDescriptor)
        assert descriptor.url_parameters == ("id",)
        assert descriptor.body_parameters is None

    def test_does_not_mutate_input(self) -> None:
        """Validation leaves the input mapping untouched."""
        raw = _descriptor(body_parameters=["name"], request_type="replace")
        snapshot = {key: value for key, value in raw.items()}

        validate_descriptor("putUser", raw)

        assert raw == snapshot

    @pytest.mark.parametrize(
        "field", ["url", "request_type", "url_parameters", "use_auth", "headers"]
    )
    def test_missing_required_field(self, field: str) -> None:
        """Every required field must be present."""
        raw = _descriptor()
        del raw[field]

        with pytest.raises(ConfigurationError, match=field) as exc:
            validate_descriptor("getUser", raw)
        assert "getUser" in str(exc.value)

    @pytest.mark.parametrize("field", ["url", "request_type"])
    def test_empty_strings_are_missing(self, field: str) -> None:
        """An empty URL or request type counts as missing."""
        with pytest.raises(ConfigurationError, match=field):
            validate_descriptor("getUser", _descriptor(**{field: ""}))

    def test_empty_parameter_lists_and_headers_are_valid(self) -> None:
        """Empty url_parameters and headers are allowed."""
        descriptor = validate_descriptor(
            "listUsers", _descriptor(url="/users", url_parameters=[], headers={})
        )

        assert descriptor.url_parameters == ()
        assert descriptor.headers == {}

    def test_use_auth_false_is_present(self) -> None:
        """use_auth=False is a value, not an omission."""
        descriptor = validate_descriptor("getUser", _descriptor(use_auth=False))

        assert descriptor.use_auth is False

    def test_wrong_field_type(self) -> None:
        """Fields of the wrong type are rejected."""
        with pytest.raises(ConfigurationError, match="getUser"):
            validate_descriptor("getUser", _descriptor(use_auth="yes"))

    def test_rejects_non_mapping(self) -> None:
        """Descriptors must be mappings or FunctionDescriptor instances."""
        with pytest.raises(ConfigurationError, match="expected a mapping"):
            validate_descriptor("getUser", ["url"])  # type: ignore[arg-type]

    def test_accepts_struct_instance(self) -> None:
        """A FunctionDescriptor instance is returned as-is."""
        descriptor = FunctionDescriptor(
            url="/users",
            request_type="get",
            url_parameters=(),
            headers={},
            use_auth=True,
        )

        assert validate_descriptor("listUsers", descriptor) is descriptor

    def test_create_with_body_and_form_is_rejected(self) -> None:
        """A create descriptor cannot declare both body and form fields."""
        raw = _descriptor(
            url="/users",
            url_parameters=[],
            request_type="post",
            body_parameters=["name"],
            form_parameters=["avatar"],
        )

        with pytest.raises(ConfigurationError, match="both body_parameters"):
            validate_descriptor("createUser", raw)

    def test_replace_with_body_and_form_is_allowed(self) -> None:
        """The body/form conflict only applies to create requests."""
        raw = _descriptor(
            request_type="replace",
            body_parameters=["name"],
            form_parameters=["avatar"],
        )

        assert validate_descriptor("putUser", raw).form_parameters == ["avatar"]


class TestRequestType:
    """Tests for request type parsing."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("get", RequestType.FETCH),
            ("post", RequestType.CREATE),
            ("put", RequestType.REPLACE),
            ("delete", RequestType.REMOVE),
            ("image", RequestType.FETCH_BINARY),
            ("fetch-binary", RequestType.FETCH_BINARY),
            ("Create", RequestType.CREATE),
        ],
    )
    def test_aliases(self, raw: str, expected: RequestType) -> None:
        """Source verbs and semantic names both resolve."""
        assert parse_request_type(raw) is expected

    def test_unknown(self) -> None:
        """Unknown values resolve to None."""
        assert parse_request_type("patch") is None


class TestBodyAndFormShapes:
    """Tests for body_shape and form_names."""

    def test_absent_body_is_empty_keyed(self) -> None:
        """No body parameters means an empty keyed body."""
        assert body_shape("f", None) == KeyedBody(())

    def test_string_selects_raw_mode(self) -> None:
        """Any string selects raw-value mode."""
        assert isinstance(body_shape("f", RAW_BODY), RawBody)
        assert isinstance(body_shape("f", "payload"), RawBody)

    def test_keyed_body_builds_mapping(self) -> None:
        """Keyed bodies map names to values in order."""
        shape = body_shape("f", ["name", "age"])

        assert shape.length == 2
        assert shape.build(["Ada", 36]) == {"name": "Ada", "age": 36}

    def test_raw_body_passes_value_through(self) -> None:
        """Raw bodies use the single value unchanged."""
        value = {"already": "shaped"}

        assert RawBody().build([value]) is value

    @pytest.mark.parametrize("value", [5, {"name": 1}, [1, 2]])
    def test_invalid_body(self, value: object) -> None:
        """Non-string, non-name-sequence body parameters are rejected."""
        with pytest.raises(ConfigurationError, match="Invalid body parameter f"):
            body_shape("f", value)

    @pytest.mark.parametrize("value", ["avatar", 3, [None]])
    def test_invalid_form(self, value: object) -> None:
        """Form parameters must be a sequence of names."""
        with pytest.raises(ConfigurationError, match="Invalid form parameter f"):
            form_names("f", value)

    def test_call_plan_arity(self) -> None:
        """Arity counts URL, body and form arguments; raw bodies count once."""
        descriptor = validate_descriptor(
            "f",
            _descriptor(
                url="/a/{x}/{y}",
                url_parameters=["x", "y"],
                request_type="replace",
                body_parameters=RAW_BODY,
                form_parameters=["file", "note"],
            ),
        )

        plan = CallPlan.from_descriptor("f", descriptor)

        assert plan.arity == 5
        assert plan.request_type is RequestType.REPLACE
