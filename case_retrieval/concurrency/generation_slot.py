# case_retrieval/concurrency/generation_slot.py
import threading
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class GenerationSlot(Generic[T]):
    """
    Single-writer / many-reader handoff for the current index generation.
    - Readers take a reference with `current()` and keep using that snapshot;
      the condition is held only for the reference read, never across a query.
    - The writer replaces the whole reference in one step with `publish()`.
    """
    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._value: Optional[T] = None

    def current(self) -> Optional[T]:
        with self._cond:
            return self._value

    def publish(self, value: T) -> Optional[T]:
        """Install `value` as current and return the one it replaced."""
        with self._cond:
            previous = self._value
            self._value = value
            self._cond.notify_all()
        return previous

    def wait_for_generation(self, timeout: Optional[float] = None) -> Optional[T]:
        """Block until something has been published (or timeout), then return it."""
        with self._cond:
            self._cond.wait_for(lambda: self._value is not None, timeout=timeout)
            return self._value
