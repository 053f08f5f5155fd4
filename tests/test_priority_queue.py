"""
Unit tests for the binary-heap priority queue.
"""

import random

import pytest

from stepsearch.core.priority_queue import PriorityQueue


class Item:
    def __init__(self, priority, label=""):
        self.priority = priority
        self.label = label

    def __repr__(self):
        return f"Item({self.priority}, {self.label!r})"


def keyed() -> PriorityQueue:
    return PriorityQueue(key=lambda item: item.priority)


class TestOrdering:
    """Dequeue order follows priority."""

    def test_output_non_decreasing(self):
        rng = random.Random(7)
        q = keyed()
        for _ in range(200):
            q.enqueue(Item(rng.randint(0, 50)))
        out = [q.dequeue().priority for _ in range(len(q))]
        assert out == sorted(out)

    def test_plain_values_without_key(self):
        q = PriorityQueue()
        for v in [5, 3, 9, 1, 4, 2]:
            q.enqueue(v)
        assert [q.dequeue() for _ in range(6)] == [1, 2, 3, 4, 5, 9]

    def test_peek_returns_minimum_without_removing(self):
        q = keyed()
        a, b = Item(2), Item(1)
        q.enqueue(a)
        q.enqueue(b)
        assert q.peek() is b
        assert q.count == 2

    def test_interleaved_enqueue_dequeue(self):
        q = PriorityQueue()
        q.enqueue(10)
        q.enqueue(4)
        assert q.dequeue() == 4
        q.enqueue(2)
        q.enqueue(7)
        assert [q.dequeue(), q.dequeue(), q.dequeue()] == [2, 7, 10]


class TestCount:
    """Count bookkeeping."""

    def test_count_is_enqueues_minus_dequeues(self):
        q = PriorityQueue()
        for v in range(12):
            q.enqueue(v)
        for _ in range(5):
            q.dequeue()
        assert q.count == 7
        assert len(q) == 7

    def test_clear(self):
        q = keyed()
        item = Item(1)
        q.enqueue(item)
        q.clear()
        assert q.count == 0
        assert item not in q


class TestMembership:
    """contains() is by identity."""

    def test_contains_same_object(self):
        q = keyed()
        a = Item(3)
        q.enqueue(a)
        assert q.contains(a)
        assert a in q

    def test_equal_priority_other_object_not_contained(self):
        q = keyed()
        q.enqueue(Item(3, "a"))
        assert not q.contains(Item(3, "a"))

    def test_dequeued_item_no_longer_contained(self):
        q = keyed()
        a = Item(1)
        q.enqueue(a)
        q.dequeue()
        assert a not in q

    def test_same_object_queued_twice(self):
        q = keyed()
        a, b = Item(1), Item(2)
        q.enqueue(a)
        q.enqueue(b)
        q.enqueue(a)
        assert q.count == 3
        assert q.dequeue() is a
        assert a in q
        assert q.dequeue() is a
        assert a not in q
        assert q.dequeue() is b


class TestRepeatedValues:
    """Equal values, including shared small ints and strings."""

    def test_repeated_small_ints(self):
        q = PriorityQueue()
        for v in [3, 1, 3, 2, 1]:
            q.enqueue(v)
        assert q.count == 5
        assert [q.dequeue() for _ in range(5)] == [1, 1, 2, 3, 3]
        assert q.count == 0

    def test_repeated_strings(self):
        q = PriorityQueue()
        for v in ["b", "a", "b", "a"]:
            q.enqueue(v)
        assert q.contains("a")
        assert [q.dequeue() for _ in range(4)] == ["a", "a", "b", "b"]
        assert not q.contains("a")

    def test_count_with_duplicates(self):
        rng = random.Random(11)
        q = PriorityQueue()
        values = [rng.randint(0, 5) for _ in range(60)]
        for v in values:
            q.enqueue(v)
        out = [q.dequeue() for _ in range(25)]
        assert q.count == 35
        assert out == sorted(out)
        rest = [q.dequeue() for _ in range(35)]
        assert out + rest == sorted(values)

    def test_update_item_queued_twice(self):
        q = keyed()
        items = [Item(p) for p in (4, 5, 6)]
        shared = Item(9)
        for it in items + [shared, shared]:
            q.enqueue(it)
        shared.priority = 0
        q.update(shared)
        assert q.dequeue() is shared
        assert q.dequeue() is shared
        assert [q.dequeue().priority for _ in range(3)] == [4, 5, 6]


class TestUpdate:
    """Re-keying an item that is already queued."""

    def test_decrease_moves_item_to_front(self):
        q = keyed()
        items = [Item(p) for p in (5, 6, 7, 8, 9)]
        for it in items:
            q.enqueue(it)
        items[-1].priority = 0
        q.update(items[-1])
        assert q.dequeue() is items[-1]

    def test_increase_moves_item_back(self):
        q = keyed()
        items = [Item(p) for p in (1, 2, 3)]
        for it in items:
            q.enqueue(it)
        items[0].priority = 10
        q.update(items[0])
        assert [q.dequeue().priority for _ in range(3)] == [2, 3, 10]

    def test_update_unknown_item_raises(self):
        q = keyed()
        with pytest.raises(KeyError):
            q.update(Item(1))


class TestEmptyQueue:
    """Empty access is a contract violation."""

    def test_dequeue_empty_raises(self):
        with pytest.raises(IndexError):
            PriorityQueue().dequeue()

    def test_peek_empty_raises(self):
        with pytest.raises(IndexError):
            PriorityQueue().peek()

    def test_empty_is_falsy(self):
        assert not PriorityQueue()
