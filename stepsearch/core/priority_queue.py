# stepsearch/core/priority_queue.py
#!/usr/bin/env python3
"""
Array-backed binary min-heap.

Index i has its parent at (i - 1) // 2 and children at 2i + 1 / 2i + 2.
Items are ordered by key(item) (or by the items themselves). Membership is
by identity, tracked in a position index so contains() and update() do not
scan the array. The same object may be queued more than once; every copy
is dequeued separately.
"""

from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, Set, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):

    def __init__(self, key: Optional[Callable[[T], Any]] = None):
        self._data: List[T] = []
        self._pos: Dict[int, Set[int]] = {}   # id(item) -> indices in _data
        self._key = key

    # -------------------- queries --------------------

    @property
    def count(self) -> int:
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:
        return bool(self._data)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._data))

    def contains(self, item: T) -> bool:
        return id(item) in self._pos

    __contains__ = contains

    def peek(self) -> T:
        if not self._data:
            raise IndexError("peek from an empty priority queue")
        return self._data[0]

    def to_list(self) -> List[T]:
        """Snapshot in heap order (not sorted)."""
        return list(self._data)

    # -------------------- mutation --------------------

    def enqueue(self, item: T) -> None:
        self._data.append(item)
        i = len(self._data) - 1
        self._track(item, i)
        self._sift_up(i)

    def dequeue(self) -> T:
        if not self._data:
            raise IndexError("dequeue from an empty priority queue")
        front = self._data[0]
        self._untrack(front, 0)
        last = self._data.pop()
        if self._data:
            self._untrack(last, len(self._data))
            self._data[0] = last
            self._track(last, 0)
            self._sift_down(0)
        return front

    def update(self, item: T) -> None:
        """Restore heap order after item's key changed in place."""
        try:
            indices = self._pos[id(item)]
        except KeyError:
            raise KeyError("item is not queued") from None
        if len(indices) == 1:
            i = self._sift_up(next(iter(indices)))
            self._sift_down(i)
            return
        # several copies share the new key; re-heapify bottom-up
        for i in range(len(self._data) // 2 - 1, -1, -1):
            self._sift_down(i)

    def clear(self) -> None:
        self._data.clear()
        self._pos.clear()

    # -------------------- heap helpers --------------------

    def _track(self, item: T, i: int) -> None:
        self._pos.setdefault(id(item), set()).add(i)

    def _untrack(self, item: T, i: int) -> None:
        indices = self._pos[id(item)]
        indices.discard(i)
        if not indices:
            del self._pos[id(item)]

    def _less(self, a: T, b: T) -> bool:
        if self._key is None:
            return a < b
        return self._key(a) < self._key(b)

    def _swap(self, i: int, j: int) -> None:
        data = self._data
        a, b = data[i], data[j]
        data[i], data[j] = b, a
        if a is b:
            return
        self._untrack(a, i)
        self._untrack(b, j)
        self._track(a, j)
        self._track(b, i)

    def _sift_up(self, child: int) -> int:
        while child > 0:
            parent = (child - 1) // 2
            if not self._less(self._data[child], self._data[parent]):
                break
            self._swap(child, parent)
            child = parent
        return child

    def _sift_down(self, parent: int) -> int:
        last = len(self._data) - 1
        while True:
            child = parent * 2 + 1
            if child > last:
                break
            right = child + 1
            if right <= last and self._less(self._data[right], self._data[child]):
                child = right
            if not self._less(self._data[child], self._data[parent]):
                break
            self._swap(parent, child)
            parent = child
        return parent

    def __repr__(self) -> str:
        return f"PriorityQueue(count={len(self._data)})"
