from __future__ import annotations

from typing import List

from winopt.viewmodels.observable import (
    COLLECTION_INSERT,
    COLLECTION_REPLACE,
    COLLECTION_RESET,
    ChangeEvent,
    CollectionChanged,
    Observable,
    ObservableList,
    PropertyChanged,
)


class _Model(Observable):
    def __init__(self) -> None:
        super().__init__()
        self._title = "a"
        self.items: ObservableList[str] = ObservableList("items", self._forward)

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        self._set_field("title", value)


def test_property_change_notifies_only_on_change() -> None:
    model = _Model()
    events: List[ChangeEvent] = []
    model.subscribe(events.append)

    model.title = "a"
    model.title = "b"

    assert events == [PropertyChanged(name="title", value="b")]


def test_reset_emits_reset_then_inserts() -> None:
    model = _Model()
    events: List[ChangeEvent] = []
    model.subscribe(events.append)

    model.items.reset(["x", "y"])

    assert [e.action for e in events if isinstance(e, CollectionChanged)] == [
        COLLECTION_RESET,
        COLLECTION_INSERT,
        COLLECTION_INSERT,
    ]
    assert list(model.items) == ["x", "y"]


def test_replace_at_and_snapshot_is_detached() -> None:
    model = _Model()
    model.items.reset(["x"])
    events: List[ChangeEvent] = []
    model.subscribe(events.append)

    copy = model.items.snapshot()
    model.items.replace_at(0, "z")

    assert copy == ["x"]
    assert model.items[0] == "z"
    assert events == [CollectionChanged(name="items", action=COLLECTION_REPLACE, index=0, item="z")]


def test_unsubscribe_stops_delivery() -> None:
    model = _Model()
    events: List[ChangeEvent] = []
    unsubscribe = model.subscribe(events.append)

    unsubscribe()
    model.title = "c"

    assert events == []
