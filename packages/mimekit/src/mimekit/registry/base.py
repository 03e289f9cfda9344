# mimekit/registry/base.py


import logging
from threading import RLock
from typing import Any, Callable, Generic, Iterator, Literal, TypeVar, overload

from asgiref.sync import sync_to_async

from .exceptions import (
    RegistryDuplicateError,
    RegistryEmptyError,
    RegistryFrozenError,
    RegistryLookupError,
)

logger = logging.getLogger(__name__)

K = TypeVar("K")
T = TypeVar("T")


class BaseRegistry(Generic[K, T]):
    """Framework-agnostic registry keyed by a normalized key K storing values of T.

    Registries are meant to be populated once at startup and read afterwards.
    Writers serialize on a re-entrant lock and publish a fresh copy of the
    store; readers take no lock and see the last published store, so lookups
    never wait on a registration in progress. :meth:`freeze` turns the
    registry read-only once bootstrap is done.

    Subclasses pick the exception types raised for duplicates and misses so
    each registry can surface its own domain errors.
    """

    duplicate_error: type[RegistryDuplicateError] = RegistryDuplicateError
    lookup_error: type[RegistryLookupError] = RegistryLookupError
    empty_error: type[RegistryEmptyError] = RegistryEmptyError

    def __init__(self, *, coerce_key: Callable[[Any], K]) -> None:
        self._coerce = coerce_key
        self._lock = RLock()
        self._store: dict[K, T] = {}
        self._frozen = False

    def _register(self, key: Any, value: T) -> K:
        """Internal: store ``value`` under the coerced ``key``."""
        k = self._coerce(key)

        with self._lock:
            self._check_mutable()
            if k in self._store:
                raise self.duplicate_error(f"Already registered: {k}")
            # copy-on-write; published stores are never mutated
            store = dict(self._store)
            store[k] = value
            self._store = store
        return k

    # --- registration ---

    def register(self, key: Any, value: T) -> None:
        """
        Registers ``value`` under ``key``.

        :param key: The key to register under; coerced by the registry.
        :param value: The value to store.
        :raises RegistryDuplicateError: If the key is already registered.
        :raises RegistryFrozenError: If the registry has been frozen.
        """
        k = self._register(key, value)
        logger.debug("%s: registered %s", type(self).__name__, k)

    async def aregister(self, key: Any, value: T) -> None:
        """Async wrapper around `register`."""
        return await sync_to_async(self.register)(key, value)

    # --- retrieval ---

    def get(self, key: Any) -> T:
        """
        Retrieve the value registered under ``key``.

        :param key: The key to look up; coerced by the registry.
        :return: The registered value.
        :raises RegistryEmptyError: If nothing has been registered at all.
        :raises RegistryLookupError: If the key is not registered.
        """
        k = self._coerce(key)
        store = self._store
        if not store:
            raise self.empty_error("Nothing has been registered")
        try:
            return store[k]
        except KeyError as err:
            raise self.lookup_error(f"{key!r} not found or not registered") from err

    async def aget(self, key: Any) -> T:
        """Async wrapper around `get`."""
        return await sync_to_async(self.get)(key)

    def try_get(self, key: Any) -> T | None:
        """Return the registered value or None when ``key`` is missing."""
        try:
            return self.get(key)
        except RegistryLookupError:
            return None

    async def atry_get(self, key: Any) -> T | None:
        """Async wrapper around `try_get`."""
        try:
            return await self.aget(key)
        except RegistryLookupError:
            return None

    # --- counting ---

    def count(self) -> int:
        """Counts the number of registered entries."""
        return len(self._store)

    # --- enumerate all entries ---

    @overload
    def keys(self) -> tuple[K, ...]: ...
    @overload
    def keys(self, *, as_csv: Literal[True]) -> str: ...
    @overload
    def keys(self, *, as_csv: Literal[False]) -> tuple[K, ...]: ...

    def keys(self, *, as_csv: bool = False):
        """Registered keys in registration order (comma-joined with ``as_csv``, for log lines)."""
        snapshot = tuple(self._store)
        return ",".join(map(str, snapshot)) if as_csv else snapshot

    def items(self) -> tuple[tuple[K, T], ...]:
        """Return a snapshot of ``(key, value)`` pairs in registration order."""
        return tuple(self._store.items())

    # --- mutation / control ---

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RegistryFrozenError(f"{type(self).__name__} is frozen; register everything at startup")

    def clear(self) -> None:
        """Drop every entry. Used by tests and hot reloads; refused once frozen."""
        with self._lock:
            self._check_mutable()
            self._store = {}

    def freeze(self) -> None:
        """Make the registry read-only. Lookups stay valid; registration and clear raise."""
        with self._lock:
            self._frozen = True
        logger.debug("%s frozen with %d entries", type(self).__name__, len(self._store))

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, key: Any) -> bool:
        try:
            k = self._coerce(key)
        except (TypeError, ValueError):
            return False
        return k in self._store

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[K]:  # pragma: no cover - convenience
        return iter(self.keys())
