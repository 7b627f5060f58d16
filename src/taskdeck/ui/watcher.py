"""Mixin that manages store watches with auto-cleanup."""

from __future__ import annotations

from contextlib import contextmanager

from taskdeck.model.observable import Callback, Observable


class StoreWatcherMixin:
    """Mixin for widgets and screens that watch an Observable store.

    Subclasses should:
    - Call ``_init_watcher()`` in ``__init__``
    - Use ``self.store_watch(store, callback)`` instead of ``store.watch(...)``
    - Use ``with self.suppressing():`` around their own store writes when
      they have already updated the display
    - Skip unwatching in ``on_unmount`` -- the mixin handles cleanup
    """

    def _init_watcher(self) -> None:
        self._unwatches: list = []
        self._suppressing = False

    def store_watch(self, store: Observable, callback: Callback) -> None:
        """Register a watch that is auto-guarded by suppression and auto-cleaned on unmount."""

        def guarded(source, op, old, new) -> None:
            if not self._suppressing:
                callback(source, op, old, new)

        self._unwatches.append(store.watch(guarded))

    @contextmanager
    def suppressing(self):
        """Context manager that suppresses watch callbacks for store writes."""
        self._suppressing = True
        try:
            yield
        finally:
            self._suppressing = False

    def on_unmount(self) -> None:
        for unwatch in self._unwatches:
            unwatch()
        self._unwatches.clear()
