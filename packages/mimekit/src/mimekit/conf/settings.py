"""Layered configuration.

Lookups fall through, in order: values set on the instance (or loaded by an
``update_from_*`` helper), the layers passed to the constructor, then
:data:`~mimekit.conf.defaults.DEFAULTS`. Only UPPERCASE names are settings.
"""

import importlib
import logging
import os
from collections import ChainMap
from typing import Any, Iterator, Mapping, MutableMapping

from .defaults import DEFAULTS

logger = logging.getLogger(__name__)

__all__ = ["Settings", "ENV_PREFIX", "CONFIG_MODULE_ENVVAR"]

ENV_PREFIX = "MIMEKIT_"
CONFIG_MODULE_ENVVAR = "MIMEKIT_CONFIG_MODULE"

_TRUE = frozenset({"1", "true", "yes", "on"})


def _setting_names(mapping: Mapping[str, Any], namespace: str | None) -> dict[str, Any]:
    """Keep UPPERCASE keys; with ``namespace``, keep ``<namespace>_KEY`` keys as ``KEY``."""
    if namespace is None:
        return {key: value for key, value in mapping.items() if key.isupper()}
    prefix = f"{namespace}_"
    return {
        key.removeprefix(prefix): value
        for key, value in mapping.items()
        if key.startswith(prefix) and len(key) > len(prefix)
    }


def _from_env(raw: str, current: Any) -> Any:
    """Interpret an environment string using the type of the value it replaces."""
    if isinstance(current, bool):
        return raw.strip().lower() in _TRUE
    if isinstance(current, int):
        try:
            return int(raw)
        except ValueError:
            logger.warning("settings: ignoring non-integer override %r", raw)
            return current
    if isinstance(current, tuple):
        return tuple(filter(None, (part.strip() for part in raw.split(","))))
    return raw


class Settings(MutableMapping[str, Any]):
    """Mapping of setting name to value, layered over the package defaults."""

    def __init__(self, *layers: Mapping[str, Any]) -> None:
        self._overrides: dict[str, Any] = {}
        self._chain = ChainMap(self._overrides, *map(dict, layers), dict(DEFAULTS))

    def __getitem__(self, key: str) -> Any:
        return self._chain[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._overrides[key] = value

    def __delitem__(self, key: str) -> None:
        del self._overrides[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._chain)

    def __len__(self) -> int:
        return len(self._chain)

    def __repr__(self) -> str:
        return f"Settings(overrides={sorted(self._overrides)!r})"

    # Loading -----------------------------------------------------------------
    def update_from_mapping(self, mapping: Mapping[str, Any], *, namespace: str | None = None) -> None:
        self._overrides.update(_setting_names(mapping, namespace))

    def update_from_object(self, obj: str, *, namespace: str | None = None) -> None:
        """Load the UPPERCASE globals of the module named ``obj``."""
        self.update_from_mapping(vars(importlib.import_module(obj)), namespace=namespace)

    def update_from_envvar(self, envvar: str = CONFIG_MODULE_ENVVAR, *, namespace: str | None = None) -> None:
        """Load the module named by ``envvar``, if that variable is set."""
        module_name = os.environ.get(envvar)
        if module_name:
            logger.debug("settings: loading %s from $%s", module_name, envvar)
            self.update_from_object(module_name, namespace=namespace)

    def update_from_env(self, environ: Mapping[str, str] | None = None, *, prefix: str = ENV_PREFIX) -> None:
        """Overlay ``MIMEKIT_<KEY>`` variables, coerced to the type of the current value."""
        environ = os.environ if environ is None else environ
        for name, raw in environ.items():
            if name == CONFIG_MODULE_ENVVAR:
                continue
            key = name.removeprefix(prefix)
            if key == name or not key:
                continue
            self[key] = _from_env(raw, self.get(key))

    def as_dict(self) -> dict[str, Any]:
        return dict(self._chain)
