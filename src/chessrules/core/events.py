"""Change-notification registry owned by the board.

Observers are plain no-argument callables. The board calls them
synchronously after every mutating operation; they are expected to re-read
whatever state they display.
"""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType

BoardObserver = Callable[[], None]


class Subscription:
    """Handle returned by :meth:`ChangeNotifier.subscribe`.

    Usable as a context manager so that teardown always unsubscribes::

        with board.subscribe(view.refresh):
            ...
    """

    __slots__ = ("_notifier", "observer")

    def __init__(self, notifier: ChangeNotifier, observer: BoardObserver) -> None:
        self._notifier = notifier
        self.observer = observer

    @property
    def active(self) -> bool:
        return self.observer in self._notifier

    def cancel(self) -> bool:
        """Unsubscribe. Returns False if already cancelled."""
        return self._notifier.unsubscribe(self.observer)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cancel()


class ChangeNotifier:
    """Ordered registry of observers with a re-entrancy guard."""

    __slots__ = ("_observers", "_notifying")

    def __init__(self) -> None:
        self._observers: list[BoardObserver] = []
        self._notifying = False

    def subscribe(self, observer: BoardObserver) -> Subscription:
        if observer not in self._observers:
            self._observers.append(observer)
        return Subscription(self, observer)

    def unsubscribe(self, observer: BoardObserver | Subscription) -> bool:
        if isinstance(observer, Subscription):
            observer = observer.observer
        try:
            self._observers.remove(observer)
        except ValueError:
            return False
        return True

    @property
    def notifying(self) -> bool:
        """True while observers are being called."""
        return self._notifying

    def notify(self) -> None:
        # Snapshot so observers may unsubscribe themselves.
        self._notifying = True
        try:
            for observer in list(self._observers):
                observer()
        finally:
            self._notifying = False

    def __contains__(self, observer: object) -> bool:
        return observer in self._observers

    def __len__(self) -> int:
        return len(self._observers)
