"""Framework-free change notification for view-model state.

Call context:
    ``MaintenanceVM`` derives from :class:`Observable` and owns several
    :class:`ObservableList` collections. NiceGUI pages and the CLI subscribe to
    refresh their rendering.

Contract:
    Listeners run synchronously, in registration order, before the mutating
    call returns. Collections are rebuilt by clear-then-repopulate, so
    consumers must expect one ``reset`` event followed by ``insert`` events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, TypeVar, overload

T = TypeVar("T")

COLLECTION_RESET = "reset"
COLLECTION_INSERT = "insert"
COLLECTION_REPLACE = "replace"


@dataclass(frozen=True)
class PropertyChanged:
    """Notification payload for a scalar field change."""

    name: str
    value: Any


@dataclass(frozen=True)
class CollectionChanged:
    """Notification payload for a collection mutation."""

    name: str
    action: str
    index: Optional[int] = None
    item: Any = None


ChangeEvent = PropertyChanged | CollectionChanged
Listener = Callable[[ChangeEvent], None]
Unsubscribe = Callable[[], None]


class ListenerList:
    """Ordered listener registry with a synchronous notify helper."""

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def add(self, listener: Listener) -> Unsubscribe:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def notify(self, event: ChangeEvent) -> None:
        # Copy so listeners may unsubscribe while being notified.
        for listener in list(self._listeners):
            listener(event)

    def __len__(self) -> int:
        return len(self._listeners)


class Observable:
    """Base class exposing ``subscribe`` and a ``_set_field`` mutation helper."""

    def __init__(self) -> None:
        self._listeners = ListenerList()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register ``listener`` for property and collection events."""
        return self._listeners.add(listener)

    def _set_field(self, name: str, value: Any) -> bool:
        """Assign ``self._<name>`` and notify when the value changed."""
        attr = f"_{name}"
        if hasattr(self, attr) and getattr(self, attr) == value:
            return False
        setattr(self, attr, value)
        self._notify(name, value)
        return True

    def _notify(self, name: str, value: Any) -> None:
        self._listeners.notify(PropertyChanged(name=name, value=value))

    def _forward(self, event: ChangeEvent) -> None:
        self._listeners.notify(event)


class ObservableList(Generic[T]):
    """List wrapper that reports every mutation to its owner's listeners."""

    def __init__(self, name: str, sink: Callable[[ChangeEvent], None]) -> None:
        self.name = name
        self._items: List[T] = []
        self._sink = sink

    def reset(self, items: Iterable[T]) -> None:
        """Clear, then append ``items`` one by one (one reset + N inserts)."""
        incoming = list(items)
        self._items.clear()
        self._sink(CollectionChanged(name=self.name, action=COLLECTION_RESET))
        for item in incoming:
            self.append(item)

    def clear(self) -> None:
        self._items.clear()
        self._sink(CollectionChanged(name=self.name, action=COLLECTION_RESET))

    def append(self, item: T) -> None:
        self._items.append(item)
        index = len(self._items) - 1
        self._sink(CollectionChanged(name=self.name, action=COLLECTION_INSERT, index=index, item=item))

    def replace_at(self, index: int, item: T) -> None:
        self._items[index] = item
        self._sink(CollectionChanged(name=self.name, action=COLLECTION_REPLACE, index=index, item=item))

    def index(self, item: T) -> int:
        return self._items.index(item)

    def snapshot(self) -> List[T]:
        """Return a detached copy safe to hand to use cases."""
        return list(self._items)

    @overload
    def __getitem__(self, index: int) -> T: ...
    @overload
    def __getitem__(self, index: slice) -> List[T]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"ObservableList({self.name!r}, {self._items!r})"


__all__ = [
    "COLLECTION_INSERT",
    "COLLECTION_REPLACE",
    "COLLECTION_RESET",
    "ChangeEvent",
    "CollectionChanged",
    "Listener",
    "ListenerList",
    "Observable",
    "ObservableList",
    "PropertyChanged",
    "Unsubscribe",
]
