"""Disposable subscription handles.

Every external change notification (filesystem, editor focus) hands back a
``Subscription``. Disposing is idempotent, and a subscription can be used as
a context manager so it is released on every exit path.
"""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType


class Subscription:
    """Handle that runs a release callback exactly once."""

    def __init__(self, release: Callable[[], None] | None = None) -> None:
        self._release = release
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        release, self._release = self._release, None
        if release is not None:
            release()

    def __enter__(self) -> Subscription:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()


class CompositeSubscription(Subscription):
    """Owns several subscriptions and releases them in reverse order."""

    def __init__(self, *children: Subscription) -> None:
        super().__init__(self._release_children)
        self._children: list[Subscription] = list(children)

    def add(self, child: Subscription) -> None:
        if self.disposed:
            # Late additions are released immediately
            child.dispose()
            return
        self._children.append(child)

    def __len__(self) -> int:
        return len(self._children)

    def _release_children(self) -> None:
        children, self._children = self._children, []
        for child in reversed(children):
            child.dispose()
