"""
LIFO containers for audio samples.

Two interchangeable implementations of the same contract:

    ArrayStack   contiguous ``array.array('d')`` buffer, doubles when full
    ListStack    singly-linked nodes, fail-fast iteration

Example usage:
    >>> from backmask.stacks import make_stack
    >>> stack = make_stack("list")
    >>> stack.push(1.0)
    >>> stack.push(2.0)
    >>> stack.pop()
    2.0
"""

from __future__ import annotations

import abc
import array
import logging
from typing import Iterator

from backmask.errors import ConcurrentModificationError, EmptyStackError

logger = logging.getLogger(__name__)


# =============================================================================
# Contract
# =============================================================================


class SampleStack(abc.ABC):
    """Capability set shared by every stack variant."""

    @abc.abstractmethod
    def is_empty(self) -> bool:
        """Return True when the stack holds no samples."""

    @abc.abstractmethod
    def count(self) -> int:
        """Return the number of samples currently held."""

    @abc.abstractmethod
    def push(self, x: float) -> None:
        """Add ``x`` as the new top."""

    @abc.abstractmethod
    def pop(self) -> float:
        """Remove and return the top sample.

        Raises:
            EmptyStackError: if the stack is empty.
        """

    @abc.abstractmethod
    def peek(self) -> float:
        """Return the top sample without removing it.

        Raises:
            EmptyStackError: if the stack is empty.
        """

    def __len__(self) -> int:
        return self.count()

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(count={self.count()})"


# =============================================================================
# Array-backed variant
# =============================================================================


class ArrayStack(SampleStack):
    """Stack stored in a contiguous buffer of doubles.

    The buffer starts at ``INITIAL_CAPACITY`` slots and doubles whenever a
    push finds it full, so pushes are amortized O(1). Pops never shrink it.
    """

    INITIAL_CAPACITY = 5

    __slots__ = ("_data", "_top")

    def __init__(self) -> None:
        self._data = array.array("d", [0.0]) * self.INITIAL_CAPACITY
        self._top = -1  # index of the top element, -1 when empty

    @property
    def capacity(self) -> int:
        return len(self._data)

    def is_empty(self) -> bool:
        return self._top == -1

    def count(self) -> int:
        return self._top + 1

    def push(self, x: float) -> None:
        if self._top == len(self._data) - 1:
            self._grow()
        self._top += 1
        self._data[self._top] = x

    def pop(self) -> float:
        if self._top < 0:
            raise EmptyStackError("pop from empty stack")
        value = self._data[self._top]
        self._top -= 1
        return value

    def peek(self) -> float:
        if self._top < 0:
            raise EmptyStackError("peek from empty stack")
        return self._data[self._top]

    def _grow(self) -> None:
        old = self._data
        new = array.array("d", [0.0]) * (2 * len(old))
        new[: len(old)] = old
        self._data = new
        logger.debug(f"ArrayStack grew from {len(old)} to {len(new)} slots")


# =============================================================================
# List-backed variant
# =============================================================================


class _Node:
    __slots__ = ("value", "next")

    def __init__(self, value: float, next: _Node | None = None) -> None:
        self.value = value
        self.next = next


class ListStack(SampleStack):
    """Stack stored as a chain of nodes, top first.

    Every push and pop bumps a generation counter; iterators created before
    the bump refuse to continue. ``count()`` walks the chain, so it is O(n).
    """

    __slots__ = ("_head", "_generation")

    def __init__(self) -> None:
        self._head: _Node | None = None
        self._generation = 0

    def is_empty(self) -> bool:
        return self._head is None

    def count(self) -> int:
        # O(n): no running counter is kept.
        counter = 0
        for _ in self:
            counter += 1
        return counter

    def push(self, x: float) -> None:
        self._head = _Node(float(x), self._head)
        self._generation += 1

    def pop(self) -> float:
        if self._head is None:
            raise EmptyStackError("pop from empty stack")
        node = self._head
        self._head = node.next
        self._generation += 1
        return node.value

    def peek(self) -> float:
        if self._head is None:
            raise EmptyStackError("peek from empty stack")
        return self._head.value

    def __iter__(self) -> ListStackIterator:
        """Iterate from top to bottom without modifying the stack."""
        return ListStackIterator(self)


class ListStackIterator(Iterator[float]):
    """Single-pass, read-only traversal of a ListStack.

    Any push or pop on the stack after this iterator was created makes the
    next ``has_next()`` or ``next()`` raise ConcurrentModificationError.
    """

    __slots__ = ("_stack", "_node", "_expected_generation")

    def __init__(self, stack: ListStack) -> None:
        self._stack = stack
        self._node = stack._head
        self._expected_generation = stack._generation

    def _check(self) -> None:
        if self._stack._generation != self._expected_generation:
            raise ConcurrentModificationError("stack was modified during iteration")

    def has_next(self) -> bool:
        self._check()
        return self._node is not None

    def __next__(self) -> float:
        self._check()
        if self._node is None:
            raise StopIteration
        value = self._node.value
        self._node = self._node.next
        return value

    def __iter__(self) -> ListStackIterator:
        return self


# =============================================================================
# Selection by name
# =============================================================================

STACK_TYPES: dict[str, type[SampleStack]] = {
    "array": ArrayStack,
    "list": ListStack,
}


def make_stack(name: str) -> SampleStack:
    """Create an empty stack of the variant registered under ``name``."""
    try:
        cls = STACK_TYPES[name.lower()]
    except KeyError:
        valid = ", ".join(repr(n) for n in STACK_TYPES)
        raise ValueError(f"Invalid stack type {name!r}; choose {valid}") from None
    return cls()
