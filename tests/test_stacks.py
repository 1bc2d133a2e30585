"""Tests for backmask stack variants."""

import pytest

from backmask.errors import ConcurrentModificationError, EmptyStackError
from backmask.stacks import (
    STACK_TYPES,
    ArrayStack,
    ListStack,
    ListStackIterator,
    SampleStack,
    make_stack,
)


@pytest.fixture(params=["array", "list"])
def stack(request):
    """A fresh stack of each variant."""
    return make_stack(request.param)


# =============================================================================
# Shared contract
# =============================================================================


class TestContract:
    def test_new_stack_is_empty(self, stack):
        assert stack.is_empty()
        assert stack.count() == 0
        assert len(stack) == 0
        assert not stack

    def test_lifo_order(self, stack):
        values = [1.5, -2.0, 0.0, 32767.0, -32768.0, 7.25]
        for v in values:
            stack.push(v)
        popped = [stack.pop() for _ in values]
        assert popped == list(reversed(values))
        assert stack.is_empty()

    def test_lifo_order_past_initial_capacity(self, stack):
        values = [float(i) for i in range(100)]
        for v in values:
            stack.push(v)
        assert [stack.pop() for _ in values] == values[::-1]

    def test_peek_does_not_remove(self, stack):
        stack.push(3.0)
        stack.push(4.0)
        assert stack.peek() == 4.0
        assert stack.peek() == 4.0
        assert stack.count() == 2

    def test_count_tracks_pushes_minus_pops(self, stack):
        for i in range(12):
            stack.push(float(i))
        for k in range(1, 8):
            stack.pop()
            assert stack.count() == 12 - k
            assert stack.is_empty() is (stack.count() == 0)

    def test_interleaved_push_pop(self, stack):
        stack.push(1.0)
        stack.push(2.0)
        assert stack.pop() == 2.0
        stack.push(3.0)
        assert stack.pop() == 3.0
        assert stack.pop() == 1.0
        assert stack.is_empty()

    def test_integers_come_back_as_floats(self, stack):
        stack.push(10)
        value = stack.pop()
        assert value == 10.0
        assert isinstance(value, float)

    def test_pop_empty_raises(self, stack):
        with pytest.raises(EmptyStackError):
            stack.pop()

    def test_peek_empty_raises(self, stack):
        with pytest.raises(EmptyStackError):
            stack.peek()

    def test_pop_after_drain_raises(self, stack):
        stack.push(1.0)
        stack.pop()
        with pytest.raises(EmptyStackError):
            stack.pop()
        with pytest.raises(EmptyStackError):
            stack.peek()

    def test_empty_stack_error_is_index_error(self, stack):
        with pytest.raises(IndexError):
            stack.pop()

    def test_is_sample_stack(self, stack):
        assert isinstance(stack, SampleStack)

    def test_repr(self, stack):
        stack.push(1.0)
        assert repr(stack) == f"{type(stack).__name__}(count=1)"


# =============================================================================
# Array-backed variant
# =============================================================================


class TestArrayStack:
    def test_initial_capacity(self):
        s = ArrayStack()
        assert s.capacity == ArrayStack.INITIAL_CAPACITY == 5

    def test_no_growth_until_full(self):
        s = ArrayStack()
        for i in range(5):
            s.push(float(i))
        assert s.capacity == 5

    def test_doubles_when_pushing_into_full_buffer(self):
        s = ArrayStack()
        capacities = []
        for i in range(21):
            before = s.capacity
            full = s.count() == before
            s.push(float(i))
            if full:
                assert s.capacity >= 2 * before
            else:
                assert s.capacity == before
            capacities.append(s.capacity)
        assert capacities[4] == 5
        assert capacities[5] == 10
        assert capacities[10] == 20
        assert capacities[20] == 40

    def test_growth_preserves_values(self):
        s = ArrayStack()
        for i in range(6):
            s.push(float(i) * 1.5)
        assert [s.pop() for _ in range(6)] == [7.5, 6.0, 4.5, 3.0, 1.5, 0.0]

    def test_pop_never_shrinks(self):
        s = ArrayStack()
        for i in range(11):
            s.push(float(i))
        assert s.capacity == 20
        while not s.is_empty():
            s.pop()
        assert s.capacity == 20

    def test_empty_guard_uses_buffer_index(self):
        class NeverEmptyArrayStack(ArrayStack):
            def is_empty(self):
                return False

        s = NeverEmptyArrayStack()
        s.push(1.0)
        s.push(2.0)
        assert s.pop() == 2.0
        assert s.pop() == 1.0
        with pytest.raises(EmptyStackError):
            s.pop()
        with pytest.raises(EmptyStackError):
            s.peek()
        assert s.count() == 0

    def test_stale_slot_not_visible_after_pop(self):
        s = ArrayStack()
        s.push(1.0)
        s.push(2.0)
        s.pop()
        assert s.peek() == 1.0
        s.pop()
        with pytest.raises(EmptyStackError):
            s.peek()


# =============================================================================
# List-backed variant
# =============================================================================


class TestListStack:
    def test_iterates_top_to_bottom(self):
        s = ListStack()
        for v in (1.0, 2.0, 3.0):
            s.push(v)
        assert list(s) == [3.0, 2.0, 1.0]

    def test_iteration_does_not_mutate(self):
        s = ListStack()
        s.push(1.0)
        s.push(2.0)
        list(s)
        assert s.count() == 2
        assert s.pop() == 2.0

    def test_iterator_type(self):
        s = ListStack()
        it = iter(s)
        assert isinstance(it, ListStackIterator)
        assert iter(it) is it

    def test_has_next(self):
        s = ListStack()
        s.push(1.0)
        it = iter(s)
        assert it.has_next()
        assert next(it) == 1.0
        assert not it.has_next()
        with pytest.raises(StopIteration):
            next(it)

    def test_iterator_is_single_pass(self):
        s = ListStack()
        s.push(1.0)
        it = iter(s)
        assert list(it) == [1.0]
        assert list(it) == []
        assert list(s) == [1.0]

    def test_empty_iteration(self):
        assert list(ListStack()) == []

    def test_push_invalidates_iterator(self):
        s = ListStack()
        s.push(1.0)
        it = iter(s)
        s.push(2.0)
        with pytest.raises(ConcurrentModificationError):
            it.has_next()
        with pytest.raises(ConcurrentModificationError):
            next(it)

    def test_pop_invalidates_iterator(self):
        s = ListStack()
        s.push(1.0)
        s.push(2.0)
        it = iter(s)
        s.pop()
        with pytest.raises(ConcurrentModificationError):
            next(it)

    def test_mutation_mid_iteration_detected(self):
        s = ListStack()
        for v in (1.0, 2.0, 3.0):
            s.push(v)
        seen = []
        with pytest.raises(ConcurrentModificationError):
            for v in s:
                seen.append(v)
                s.pop()
        assert seen == [3.0]

    def test_iterator_created_after_mutation_is_valid(self):
        s = ListStack()
        s.push(1.0)
        s.pop()
        s.push(5.0)
        assert list(s) == [5.0]

    def test_failed_pop_does_not_invalidate(self):
        s = ListStack()
        it = iter(s)
        with pytest.raises(EmptyStackError):
            s.pop()
        assert not it.has_next()

    def test_count_walks_chain(self):
        s = ListStack()
        for i in range(50):
            s.push(float(i))
        assert s.count() == 50

    def test_concurrent_error_is_runtime_error(self):
        s = ListStack()
        it = iter(s)
        s.push(1.0)
        with pytest.raises(RuntimeError):
            it.has_next()


# =============================================================================
# Selection by name
# =============================================================================


class TestMakeStack:
    def test_registry(self):
        assert set(STACK_TYPES) == {"array", "list"}
        assert STACK_TYPES["array"] is ArrayStack
        assert STACK_TYPES["list"] is ListStack

    def test_make_each(self):
        assert isinstance(make_stack("array"), ArrayStack)
        assert isinstance(make_stack("list"), ListStack)

    def test_case_insensitive(self):
        assert isinstance(make_stack("ARRAY"), ArrayStack)
        assert isinstance(make_stack("List"), ListStack)

    def test_fresh_instances(self):
        assert make_stack("list") is not make_stack("list")

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Invalid stack type"):
            make_stack("queue")
