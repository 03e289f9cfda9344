from __future__ import annotations

from dataclasses import dataclass

import pytest
from pydantic import ValidationError

from mimekit.components.codecs import JSONCodec, MsgPackCodec, XMLCodec
from mimekit.errors import (
    BlacklistedErrorTypeError,
    DuplicateErrorTypeError,
    ErrorEnvelope,
    ErrorReconstructionError,
    ErrorTypeRegistry,
    RemoteError,
    UnknownErrorTypeError,
    WireError,
    type_tag,
    unwrap_envelope,
    wrap_error,
)
from mimekit.types import WireResponse


class PlainWireError(WireError):
    """No dataclass fields and no payload hooks."""


@dataclass(eq=False)
class QuotaExceeded(WireError):
    limit: int
    used: int


class LocalError(Exception):
    pass


# ---- registry --------------------------------------------------------------

def test_register_returns_tag(halp_error):
    registry = ErrorTypeRegistry()

    assert registry.register_error_type(halp_error) == "tests.halp"
    assert registry.is_registered("tests.halp")
    assert not registry.is_registered("")


def test_register_accepts_an_instance():
    registry = ErrorTypeRegistry()

    tag = registry.register_error_type(QuotaExceeded(limit=1, used=2))

    assert tag == f"{__name__}.QuotaExceeded"


def test_duplicate_registration(error_types, halp_error):
    with pytest.raises(DuplicateErrorTypeError):
        error_types.register_error_type(halp_error)


@pytest.mark.parametrize("prototype", [WireError, RemoteError, Exception, BaseException, ValueError, PlainWireError])
def test_blacklisted_prototypes(prototype):
    with pytest.raises(BlacklistedErrorTypeError):
        ErrorTypeRegistry().register_error_type(prototype)


def test_type_tags():
    assert type_tag(ValueError("x")) == "ValueError"
    assert type_tag(LocalError) == f"{__name__}.LocalError"
    assert type_tag(QuotaExceeded(1, 2)) == f"{__name__}.QuotaExceeded"


# ---- envelope model --------------------------------------------------------

def test_envelope_wire_names():
    env = ErrorEnvelope.model_validate({"type": "t", "errorString": "m", "error": {"a": 1}})

    assert (env.type_name, env.message, env.payload) == ("t", "m", {"a": 1})
    assert env.to_wire() == {"type": "t", "errorString": "m", "error": {"a": 1}}
    assert ErrorEnvelope(type_name="t", message="m").to_wire() == {"type": "t", "errorString": "m"}


def test_envelope_message_never_empty():
    assert ErrorEnvelope(type_name="t").message == "t"
    assert ErrorEnvelope.model_validate({"errorString": ""}).message == "remote error"


def test_envelope_rejects_unrelated_documents():
    with pytest.raises(ValidationError):
        ErrorEnvelope.model_validate({"str": "bar", "num": 10})


# ---- wrap / unwrap ---------------------------------------------------------

def test_unregistered_error_degrades_to_message(error_types):
    original = LocalError("disk on fire")

    env = wrap_error(original, error_types)
    assert env.payload is None

    rebuilt = unwrap_envelope(env, error_types)
    assert isinstance(rebuilt, RemoteError)
    assert str(rebuilt) == str(original)
    assert rebuilt is not original
    assert rebuilt.type_name == f"{__name__}.LocalError"


def test_registered_error_is_rebuilt(error_types, halp_error):
    env = wrap_error(halp_error(code=50, reason="Halp"), error_types)

    assert env.type_name == "tests.halp"
    assert env.payload == {"code": 50, "reason": "Halp"}

    rebuilt = unwrap_envelope(env, error_types)
    assert isinstance(rebuilt, halp_error)
    assert (rebuilt.code, rebuilt.reason) == (50, "Halp")


def test_unregistered_wire_error_keeps_only_message(error_types):
    env = wrap_error(QuotaExceeded(limit=10, used=11), error_types)

    assert env.payload is None
    assert env.message == "QuotaExceeded(limit=10, used=11)"


def test_strict_unwrap_of_unknown_tag(error_types):
    env = ErrorEnvelope(type_name="elsewhere.Boom", message="boom")

    with pytest.raises(UnknownErrorTypeError):
        unwrap_envelope(env, error_types, strict=True)


def test_rejected_payload(error_types, caplog):
    env = ErrorEnvelope(type_name="tests.halp", message="bad", payload={"code": "fifty"})

    with caplog.at_level("WARNING", logger="mimekit.errors.envelope"):
        rebuilt = unwrap_envelope(env, error_types)
    assert isinstance(rebuilt, RemoteError)
    assert rebuilt.payload == {"code": "fifty"}
    assert "payload for tests.halp rejected" in caplog.text

    with pytest.raises(ErrorReconstructionError):
        unwrap_envelope(env, error_types, strict=True)


def test_registered_tag_without_payload(error_types):
    rebuilt = unwrap_envelope(ErrorEnvelope(type_name="tests.halp", message="no data"), error_types)

    assert isinstance(rebuilt, RemoteError)
    assert str(rebuilt) == "no data"


def test_remote_error_rewraps_unchanged(error_types):
    remote = RemoteError("relayed", type_name="far.away.Error", payload={"x": 1})

    env = wrap_error(remote, error_types)

    assert (env.type_name, env.message, env.payload) == ("far.away.Error", "relayed", {"x": 1})


# ---- across formats --------------------------------------------------------

@pytest.mark.parametrize("codec_cls", [JSONCodec, XMLCodec, MsgPackCodec])
def test_custom_error_survives_every_format(codec_cls, error_types, halp_error):
    codec = codec_cls(error_types=error_types)
    response = WireResponse(status_code=500)

    codec.encode_response(response, halp_error(code=50, reason="Halp"))
    err = codec.decode_response(response)

    assert type(err) is halp_error
    assert err.code == 50
    assert err.reason == "Halp"


@pytest.mark.parametrize("codec_cls", [JSONCodec, XMLCodec, MsgPackCodec])
def test_unregistered_error_across_formats(codec_cls, error_types):
    codec = codec_cls(error_types=error_types)
    response = WireResponse(status_code=418)

    codec.encode_response(response, LocalError("teapot"))
    err = codec.decode_response(response)

    assert isinstance(err, RemoteError)
    assert str(err) == "teapot"


def test_json_envelope_layout(error_types, halp_error):
    body = JSONCodec(error_types=error_types).encode_error(halp_error(code=50, reason="Halp"))

    assert body == (
        b'{"type":"tests.halp","errorString":"HalpError(code=50, reason=\'Halp\')",'
        b'"error":{"code":50,"reason":"Halp"}}'
    )


def test_xml_envelope_layout(error_types):
    body = XMLCodec(error_types=error_types).encode_error(LocalError("x"))

    assert body.startswith(b"<error-envelope><type>")
    assert b"<error-string>x</error-string>" in body
    assert b"<error>" not in body


def test_strict_codec_raises_for_unknown_types(error_types):
    lenient = JSONCodec(error_types=error_types)
    strict = JSONCodec(error_types=error_types, strict_errors=True)
    response = WireResponse(status_code=500)
    lenient.encode_response(response, LocalError("x"))

    with pytest.raises(UnknownErrorTypeError):
        strict.decode_response(response)
