"""Change notification for client-side stores."""

from __future__ import annotations

from typing import Any, Callable

Callback = Callable[[Any, str, Any, Any], None]


class Observable:
    """Mixin giving a store a list of watchers.

    Watchers are called as ``callback(source, op, old, new)`` after every
    mutation, in registration order. ``op`` names the mutation.
    """

    def _init_watchers(self) -> None:
        self._watchers: list[Callback] = []
        self._version = 0

    def watch(self, callback: Callback) -> Callable[[], None]:
        """Register a watcher. Returns an unwatch callable."""
        self._watchers.append(callback)

        def unwatch() -> None:
            if callback in self._watchers:
                self._watchers.remove(callback)

        return unwatch

    @property
    def version(self) -> int:
        """Bumped on every emitted change."""
        return self._version

    def _emit(self, op: str, old: Any, new: Any) -> None:
        self._version += 1
        for cb in list(self._watchers):
            cb(self, op, old, new)
