"""Synchronous signals with disposer-based subscription.

Every connect() returns a zero-argument disposer; owners keep the disposers
and call them on teardown, the same way settings reactions are disposed.
"""

from typing import Callable


Disposer = Callable[[], None]


class Signal:
    """Ordered, synchronous listener list.

    emit() delivers to a snapshot of the listeners, so a listener may
    disconnect itself (or others) mid-delivery without skipping anyone
    still connected when emit() started.
    """

    __slots__ = ("_listeners",)

    def __init__(self) -> None:
        self._listeners: list[Callable] = []

    def connect(self, listener: Callable) -> Disposer:
        self._listeners.append(listener)

        def dispose() -> None:
            self.disconnect(listener)

        return dispose

    def disconnect(self, listener: Callable) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def disconnect_all(self) -> None:
        self._listeners.clear()

    def emit(self, *args) -> None:
        for listener in tuple(self._listeners):
            listener(*args)

    def __len__(self) -> int:
        return len(self._listeners)


def dispose_all(disposers: list[Disposer]) -> None:
    """Call and drop every disposer in the list."""
    while disposers:
        disposers.pop()()
