"""Observer hooks for host notifications.

The host owns one :class:`EventHook` per notification (e.g. theme changes).
Plugins :meth:`~EventHook.attach` a callback and keep the returned
:class:`Subscription`; disposing it detaches the callback exactly once, no
matter how many times ``dispose()`` is called.

Usage::

    hook = EventHook("theme_changed")
    sub = hook.attach(on_theme_changed)
    hook.emit(Theme.DARK, Theme.LIGHT)
    sub.dispose()
"""

from typing import Callable, List
from logging import getLogger

logger = getLogger(__name__)

Observer = Callable[..., None]


class Subscription:
    """Handle returned by :meth:`EventHook.attach`."""

    def __init__(self, hook: "EventHook", observer: Observer):
        self._hook = hook
        self._observer = observer
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> bool:
        """Detach the observer.  Returns ``True`` only on the first call."""
        if self._disposed:
            return False
        self._disposed = True
        return self._hook.detach(self._observer)


class EventHook:
    """An ordered list of observers for one kind of notification."""

    def __init__(self, name: str = ""):
        self.name = name
        self._observers: List[Observer] = []

    def attach(self, observer: Observer) -> Subscription:
        self._observers.append(observer)
        logger.debug("Attached observer to %s (%d total)", self.name, len(self._observers))
        return Subscription(self, observer)

    def detach(self, observer: Observer) -> bool:
        """Remove *observer*; returns ``False`` if it was not attached."""
        try:
            self._observers.remove(observer)
        except ValueError:
            return False
        logger.debug("Detached observer from %s (%d left)", self.name, len(self._observers))
        return True

    def emit(self, *args) -> None:
        # Snapshot so observers may detach themselves while being notified.
        for observer in list(self._observers):
            observer(*args)

    def __len__(self) -> int:
        return len(self._observers)


__all__ = ["EventHook", "Subscription", "Observer"]
