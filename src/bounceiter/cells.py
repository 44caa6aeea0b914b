from __future__ import annotations

import copy
import logging
import threading
import weakref
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

from typing_extensions import Self

from bounceiter.errors import CellBusyError, PoisonedCellError, ThreadAffinityError

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(eq=False)
class _CellState(Generic[T]):
    """Value and guard bookkeeping shared by every handle of one cell."""

    value: T
    thread: int = field(default_factory=threading.get_ident)
    readers: int = 0  # number of open `read` guards
    writing: bool = False
    poisoned: bool = False
    version: int = 0  # incremented by every completed write
    handles: weakref.WeakSet = field(default_factory=weakref.WeakSet)


class WriteGuard(Generic[T]):
    """Exclusive access to a cell value for the duration of a `write` block."""

    __slots__ = ('_state',)

    def __init__(self, state: _CellState[T]) -> None:
        self._state = state

    @property
    def value(self) -> T:
        return self._state.value

    @value.setter
    def value(self, value: T) -> None:
        self._state.value = value


class SharedCell(Generic[T]):
    """A cheaply clonable handle to one reader/writer-guarded value.

    Handles returned by `clone` share the same cell: a write through any of
    them is seen by all. Many `read` guards may be open at once, or a single
    `write` guard, never both. An exception escaping a `write` block poisons
    the cell for good. Cells are confined to the thread that created them.
    """

    __slots__ = ('_state', '__weakref__')

    def __init__(self, value: T) -> None:
        self._attach(_CellState(value))

    def _attach(self, state: _CellState[T]) -> None:
        self._state = state
        state.handles.add(self)

    def clone(self) -> Self:
        """Return a new handle onto the same cell; the value is not copied."""
        new = self.__class__.__new__(self.__class__)
        new._attach(self._state)
        return new

    @property
    def strong_count(self) -> int:
        """Number of handles of this cell that are still alive."""
        return len(self._state.handles)

    @property
    def version(self) -> int:
        return self._state.version

    @property
    def poisoned(self) -> bool:
        return self._state.poisoned

    def ptr_eq(self, other: SharedCell[Any]) -> bool:
        """True if `other` is a handle onto this very cell."""
        return self._state is other._state

    def _check(self) -> _CellState[T]:
        state = self._state
        if threading.get_ident() != state.thread:
            raise ThreadAffinityError('SharedCell used outside of its creating thread')
        if state.poisoned:
            raise PoisonedCellError('Cell was poisoned by a failed writer')
        return state

    @contextmanager
    def read(self) -> Iterator[T]:
        """Hold a shared read guard and yield the current value."""
        state = self._check()
        if state.writing:
            raise CellBusyError('Cannot read a cell while it is being written')
        state.readers += 1
        try:
            yield state.value
        finally:
            state.readers -= 1

    @contextmanager
    def write(self) -> Iterator[WriteGuard[T]]:
        """Hold the exclusive write guard, poison the cell if the block fails."""
        state = self._check()
        if state.writing or state.readers:
            raise CellBusyError('Cannot write a cell while it is read or written')
        state.writing = True
        try:
            yield WriteGuard(state)
        except Exception:
            state.poisoned = True
            logger.debug('SharedCell poisoned by an exception in a write block')
            raise
        else:
            state.version += 1
        finally:
            state.writing = False

    def get(self) -> T:
        with self.read() as value:
            return value

    def set(self, value: T) -> None:
        with self.write() as guard:
            guard.value = value

    def update(self, func: Callable[[T], T]) -> T:
        """Replace the value by `func(value)` under one guard, return it."""
        with self.write() as guard:
            guard.value = func(guard.value)
            return guard.value

    def __repr__(self) -> str:
        if self._state.poisoned:
            return f'{self.__class__.__name__}(<poisoned>)'
        return f'{self.__class__.__name__}({self._state.value!r})'


def wrap(values: Iterable[T]) -> list[SharedCell[T]]:
    """Copy each element into its own independent `SharedCell`."""
    return [SharedCell(copy.deepcopy(value)) for value in values]


def unwrap(cells: Iterable[SharedCell[T]]) -> list[T]:
    """Read the current value out of every cell, raise if any guard fails."""
    return [cell.get() for cell in cells]
