import pytest

from mimekit import create_dispatcher
from mimekit.bootstrap import register_builtin_codecs
from mimekit.components.codecs import CodecRegistrationError, MsgPackCodec
from mimekit.conf import DEFAULTS, Settings
from mimekit.errors import ErrorTypeRegistry
from mimekit.registry import RegistryFrozenError
from mimekit.registry.codecs import CodecRegistry

DEFAULT_FORMAT = "application/xml"
SNIFF_MAX_BODY_BYTES = 2048
lowercase_is_ignored = True
MIMEKIT_STRICT_ERROR_TYPES = True


def test_defaults_show_through():
    settings = Settings()

    assert settings["DEFAULT_FORMAT"] == "application/json"
    assert settings.as_dict() == DEFAULTS


def test_layers_and_overrides():
    settings = Settings({"DEFAULT_FORMAT": "application/xml"})
    settings["SNIFF_MAX_BODY_BYTES"] = 10

    assert settings["DEFAULT_FORMAT"] == "application/xml"
    assert settings["SNIFF_MAX_BODY_BYTES"] == 10

    del settings["SNIFF_MAX_BODY_BYTES"]
    assert settings["SNIFF_MAX_BODY_BYTES"] == DEFAULTS["SNIFF_MAX_BODY_BYTES"]


def test_update_from_object():
    settings = Settings()
    settings.update_from_object(__name__)

    assert settings["DEFAULT_FORMAT"] == "application/xml"
    assert settings["SNIFF_MAX_BODY_BYTES"] == 2048
    assert "lowercase_is_ignored" not in settings


def test_update_from_object_with_namespace():
    settings = Settings()
    settings.update_from_object(__name__, namespace="MIMEKIT")

    assert settings["STRICT_ERROR_TYPES"] is True
    assert settings["DEFAULT_FORMAT"] == "application/json"


def test_update_from_envvar(monkeypatch):
    monkeypatch.setenv("MIMEKIT_CONFIG_MODULE", __name__)
    settings = Settings()
    settings.update_from_envvar()

    assert settings["DEFAULT_FORMAT"] == "application/xml"


def test_update_from_env_coerces_to_default_types():
    settings = Settings()
    settings.update_from_env({
        "MIMEKIT_SNIFF_MAX_BODY_BYTES": "64",
        "MIMEKIT_STRICT_ERROR_TYPES": "yes",
        "MIMEKIT_BUILTIN_CODECS": "msgpack, json",
        "MIMEKIT_CONFIG_MODULE": "ignored.module",
        "OTHER_DEFAULT_FORMAT": "text/xml",
    })

    assert settings["SNIFF_MAX_BODY_BYTES"] == 64
    assert settings["STRICT_ERROR_TYPES"] is True
    assert settings["BUILTIN_CODECS"] == ("msgpack", "json")
    assert settings["DEFAULT_FORMAT"] == "application/json"
    assert "CONFIG_MODULE" not in settings


def test_update_from_env_keeps_value_on_bad_int(caplog):
    settings = Settings()
    settings.update_from_env({"MIMEKIT_SNIFF_MAX_BODY_BYTES": "lots"})

    assert settings["SNIFF_MAX_BODY_BYTES"] == DEFAULTS["SNIFF_MAX_BODY_BYTES"]
    assert "non-integer override" in caplog.text


# ---- bootstrap ---------------------------------------------------------------

def test_builtin_families_register_every_format_id():
    registry = CodecRegistry()
    register_builtin_codecs(registry, ErrorTypeRegistry())

    assert registry.keys() == (
        "application/json",
        "text/json",
        "application/xml",
        "text/xml",
        "application/msgpack",
        "application/x-msgpack",
    )
    assert registry.get("text/json").format_id == "text/json"
    assert registry.hints("application/xml") == frozenset("<")
    assert registry.hints("application/msgpack") == frozenset()


def test_unknown_family():
    with pytest.raises(CodecRegistrationError):
        register_builtin_codecs(CodecRegistry(), ErrorTypeRegistry(), families=["yaml"])


def test_create_dispatcher_from_settings():
    settings = Settings({
        "DEFAULT_FORMAT": "application/msgpack",
        "BUILTIN_CODECS": ("msgpack",),
        "FREEZE_REGISTRIES": True,
        "SNIFF_MAX_BODY_BYTES": 99,
    })

    dispatcher = create_dispatcher(settings)

    assert dispatcher.default_format == "application/msgpack"
    assert dispatcher.codecs.keys() == ("application/msgpack", "application/x-msgpack")
    assert dispatcher.sniffer.max_body_bytes == 99
    with pytest.raises(RegistryFrozenError):
        dispatcher.codecs.register("application/vnd.other", MsgPackCodec(error_types=ErrorTypeRegistry()))


def test_create_dispatcher_shares_error_types(halp_error):
    error_types = ErrorTypeRegistry()
    error_types.register_error_type(halp_error)

    dispatcher = create_dispatcher(Settings({"STRICT_ERROR_TYPES": True}), error_types=error_types)
    codec = dispatcher.codecs.get("application/json")

    assert codec.error_types is error_types
    assert codec.strict_errors is True


def test_create_dispatcher_reads_environment(monkeypatch):
    monkeypatch.delenv("MIMEKIT_CONFIG_MODULE", raising=False)
    monkeypatch.setenv("MIMEKIT_DEFAULT_FORMAT", "text/xml")

    assert create_dispatcher().default_format == "text/xml"
