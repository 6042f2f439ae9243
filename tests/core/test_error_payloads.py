# tests/core/test_error_payloads.py
"""
Testes da conversão de exceções em BuildflowErrorPayload.
"""

import json

import pytest

from buildflow.core import errors
from buildflow.core.config.errors import InvalidBuildConfigError
from buildflow.core.exceptions import (
    AmbiguousPluginRegistration,
    BundlerLoadFailure,
    MalformedMountDirective,
    MissingPluginInput,
    PluginLoadFailure,
)


@pytest.mark.parametrize(
    "exc_cls, code",
    [
        (MalformedMountDirective, errors.MALFORMED_MOUNT_DIRECTIVE),
        (AmbiguousPluginRegistration, errors.AMBIGUOUS_PLUGIN_REGISTRATION),
        (MissingPluginInput, errors.MISSING_PLUGIN_INPUT),
        (BundlerLoadFailure, errors.BUNDLER_LOAD_FAILURE),
        (PluginLoadFailure, errors.PLUGIN_LOAD_FAILURE),
    ],
)
def test_typed_exceptions_map_to_stable_codes(exc_cls, code):
    exc = exc_cls(message="boom", details={"specifier": "x"}, hint="fix it")

    payload = errors.exception_to_error(exc)

    assert payload.type == code
    assert payload.message == "boom"
    assert payload.details == {"specifier": "x"}
    assert payload.hint == "fix it"
    assert str(exc) == "boom"


def test_config_error_maps_to_config_invalid():
    payload = errors.exception_to_error(InvalidBuildConfigError("plugins deve ser lista"))

    assert payload.type == errors.CONFIG_INVALID
    assert payload.details["exception_class"] == "InvalidBuildConfigError"


def test_unknown_exception_is_wrapped():
    payload = errors.exception_to_error(RuntimeError("kaboom"))

    assert payload.type == errors.RESOLUTION_UNEXPECTED_ERROR
    assert payload.details == {"exception_class": "RuntimeError", "exc_message": "kaboom"}


def test_payload_is_json_serializable():
    payload = errors.exception_to_error(
        MalformedMountDirective(message="bad mount", details={"directive": "mount:foo", "cmd": "copy src"})
    )

    assert json.loads(json.dumps(payload.to_dict()))["type"] == "MALFORMED_MOUNT_DIRECTIVE"
