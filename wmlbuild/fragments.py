from __future__ import annotations

from typing import Any, Iterator

from .errors import UnsupportedArgumentError


class Fragments:
    """Ordered sibling nodes passed around as one builder argument.

    Consumers never store the group itself; they read ``items()`` and take
    the members in insertion order. Not safe for concurrent ``add`` calls.
    """

    def __init__(self, items: tuple[Any, ...] | list[Any] = ()) -> None:
        self._items: list[Any] = list(items)

    def add(self, *items: Any) -> "Fragments":
        self._items.extend(items)
        return self

    def items(self) -> tuple[Any, ...]:
        return tuple(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Fragments({len(self._items)} items)"


def frags(*initial: Any) -> Fragments:
    return Fragments().add(*initial)


def flatten(
    items: tuple[Any, ...] | list[Any],
    element: str = "Fragments",
    _expanding: set[int] | None = None,
) -> Iterator[Any]:
    # nested groups are expanded only here, at consumption
    expanding = set() if _expanding is None else _expanding
    for item in items:
        if not isinstance(item, Fragments):
            yield item
            continue
        if id(item) in expanding:
            raise UnsupportedArgumentError(element, "Fragments containing itself", item)
        expanding.add(id(item))
        yield from flatten(item.items(), element, expanding)
        expanding.discard(id(item))
