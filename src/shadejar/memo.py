from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

_UNSET = object()


class Once(Generic[T]):
    """Compute a value on first access and hand out the same value afterwards.

    Concurrent first callers block on the lock until the single computation
    finishes. A failed computation is not cached; the exception propagates and
    the next call tries again.
    """

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._value: object = _UNSET
        self._lock = threading.Lock()
        self.calls = 0

    @property
    def computed(self) -> bool:
        return self._value is not _UNSET

    def get(self) -> T:
        if self._value is _UNSET:
            with self._lock:
                if self._value is _UNSET:
                    self.calls += 1
                    self._value = self._factory()
        return self._value  # type: ignore[return-value]
