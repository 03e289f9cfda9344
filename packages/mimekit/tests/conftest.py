from __future__ import annotations

from dataclasses import dataclass

import pytest

from mimekit.bootstrap import register_builtin_codecs
from mimekit.dispatch import Dispatcher
from mimekit.errors import ErrorTypeRegistry, WireError
from mimekit.registry.codecs import CodecRegistry


@dataclass(eq=False)
class HalpError(WireError):
    error_tag = "tests.halp"

    code: int = 0
    reason: str = ""


@pytest.fixture
def halp_error():
    return HalpError


@pytest.fixture
def error_types():
    registry = ErrorTypeRegistry()
    registry.register_error_type(HalpError)
    return registry


@pytest.fixture
def codecs(error_types):
    registry = CodecRegistry()
    register_builtin_codecs(registry, error_types)
    return registry


@pytest.fixture
def dispatcher(codecs):
    return Dispatcher(codecs)
