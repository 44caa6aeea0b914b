from __future__ import annotations

import itertools
import threading

import numpy as np
import pytest

from bounceiter.direct import BounceCursor
from bounceiter.direction import Direction
from bounceiter.errors import (
    AliasingError,
    EmptySequenceError,
    StaleViewError,
    ThreadAffinityError,
)


def take_values(cursor: BounceCursor, n: int) -> list:
    return [slot.value for slot in itertools.islice(cursor, n)]


def test_forward_cursor_values() -> None:
    """Check that a forward cursor over 1..5 yields the documented scenario."""
    data = [1, 2, 3, 4, 5]
    with BounceCursor(data) as cursor:
        assert take_values(cursor, 13) == [1, 2, 3, 4, 5, 4, 3, 2, 1, 2, 3, 4, 5]


def test_reverse_cursor_values() -> None:
    """Check that a reverse cursor over 1..5 yields the documented scenario."""
    data = [1, 2, 3, 4, 5]
    expected = [5, 4, 3, 2, 1, 2, 3, 4, 5, 4, 3, 2, 1, 2, 3, 4, 5]
    with BounceCursor(data, reverse=True) as cursor:
        assert take_values(cursor, 17) == expected


@pytest.mark.parametrize('reverse', [False, True])
def test_single_element_cursor(reverse: bool) -> None:
    """Check that a cursor over one element yields it forever."""
    with BounceCursor([1], reverse=reverse) as cursor:
        assert take_values(cursor, 5) == [1, 1, 1, 1, 1]
        assert cursor.direction is Direction.NO_BOUNCE


def test_write_through_slots() -> None:
    """Check that doubling the first 5 yielded slots doubles the buffer."""
    data = [1, 2, 3, 4, 5]
    with BounceCursor(data) as cursor:
        for slot in itertools.islice(cursor, 5):
            slot.value = slot.value * 2
    assert data == [2, 4, 6, 8, 10]


def test_write_through_numpy_slots() -> None:
    """Check that numpy slots read views of and write into the buffer."""
    data = np.arange(1, 6)
    with BounceCursor(data) as cursor:
        for slot in itertools.islice(cursor, 9):
            assert slot.view == data[slot.index]
            slot.value = slot.view + 1
    np.testing.assert_array_equal(data, [3, 4, 5, 6, 6])


def test_list_slot_has_no_view() -> None:
    """Check that asking a list-backed slot for an array view fails."""
    with BounceCursor([1, 2]) as cursor:
        with pytest.raises(TypeError):
            _ = next(cursor).view


def test_empty_buffer_is_rejected() -> None:
    """Check that constructing a cursor over an empty buffer fails loudly."""
    with pytest.raises(EmptySequenceError):
        BounceCursor([])
    with pytest.raises(EmptySequenceError):
        BounceCursor(np.array([]), reverse=True)


def test_only_latest_slot_is_live() -> None:
    """Check that stepping invalidates the previously yielded slot."""
    data = [1, 2, 3]
    with BounceCursor(data) as cursor:
        first = cursor.step()
        second = cursor.step()
        assert not first.live and second.live
        with pytest.raises(StaleViewError):
            _ = first.value
        with pytest.raises(StaleViewError):
            first.value = 10
        second.value = 20
    assert data == [1, 20, 3]


def test_closing_invalidates_slots_and_cursor() -> None:
    """Check that a closed cursor neither steps nor serves its last slot."""
    cursor = BounceCursor([1, 2, 3])
    slot = cursor.step()
    cursor.close()
    assert cursor.closed
    with pytest.raises(StaleViewError):
        _ = slot.value
    with pytest.raises(StaleViewError):
        cursor.step()
    cursor.close()


def test_second_cursor_over_same_buffer_is_refused() -> None:
    """Check that a buffer can be borrowed by one open cursor at a time."""
    data = [1, 2, 3]
    with BounceCursor(data):
        with pytest.raises(AliasingError):
            BounceCursor(data)
        with BounceCursor(list(data)):  # an equal copy is a different buffer
            pass
    with BounceCursor(data, reverse=True) as cursor:
        assert cursor.step().value == 3


def test_cursor_is_confined_to_its_thread() -> None:
    """Check that stepping from another thread raises ThreadAffinityError."""
    errors: list[BaseException] = []

    def pull(cursor: BounceCursor) -> None:
        try:
            cursor.step()
        except ThreadAffinityError as e:
            errors.append(e)

    with BounceCursor([1, 2, 3]) as cursor:
        thread = threading.Thread(target=pull, args=(cursor,))
        thread.start()
        thread.join()
        assert cursor.position == 0
    assert len(errors) == 1


def test_stale_numpy_view_cannot_write() -> None:
    """Check that a view kept past its step cannot modify the buffer."""
    data = np.array([1, 2])
    with BounceCursor(data) as cursor:
        old_view = cursor.step().view
        cursor.step()
        new_slot = cursor.step()  # back at index 0
        assert new_slot.index == 0
        with pytest.raises(ValueError):
            old_view[...] = 99
        new_slot.value = 5
        assert old_view == 5
    np.testing.assert_array_equal(data, [5, 2])


def test_rows_of_2d_buffer_are_read_only() -> None:
    """Check that row values of a 2-d buffer are read-only views."""
    data = np.zeros((3, 2))
    with BounceCursor(data) as cursor:
        slot = cursor.step()
        row = slot.value
        with pytest.raises(ValueError):
            row[...] = 7.0
        slot.value = [1.0, 2.0]
        np.testing.assert_array_equal(row, [1.0, 2.0])
        cursor.step()
        with pytest.raises(ValueError):
            row[...] = 7.0
    np.testing.assert_array_equal(data, [[1.0, 2.0], [0.0, 0.0], [0.0, 0.0]])
