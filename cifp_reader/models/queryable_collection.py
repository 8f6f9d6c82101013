"""
Chainable in-memory queries over model objects.

Base class of ``ProcedureCollection``; filters return a new collection of
the same class so they can be chained.
"""

from collections.abc import Iterable
from typing import Callable, Generic, List, Optional, TypeVar, Union

T = TypeVar('T')


class QueryableCollection(Generic[T]):
    """
    A lightweight, chainable collection.

    Examples:
        procedures.filter(lambda p: p.airport == 'KATL').first()
    """

    def __init__(self, items: Union[List[T], Iterable]):
        self._items: List[T] = items if isinstance(items, list) else list(items)

    def filter(self, predicate: Callable[[T], bool]) -> 'QueryableCollection[T]':
        """
        Keep the items for which ``predicate`` is true.

        Returns:
            New collection of the same class
        """
        return self.__class__([item for item in self._items if predicate(item)])

    def first(self) -> Optional[T]:
        return self._items[0] if self._items else None

    def all(self) -> List[T]:
        return self._items

    def count(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self.__class__(self._items[index])
        return self._items[index]

    def __bool__(self):
        return bool(self._items)

    def __repr__(self):
        count = len(self._items)
        preview = []
        for item in self._items[:3]:
            label = getattr(item, 'name', None) or getattr(item, 'identifier', None)
            preview.append(repr(label) if label else f"<{type(item).__name__}>")
        if count > 3:
            preview.append('...')
        return f"{self.__class__.__name__}([{', '.join(preview)}], count={count})"
