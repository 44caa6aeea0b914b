from __future__ import annotations

import logging
import threading
from typing import Any, Generic, MutableSequence, Optional, TypeVar, Union

import numpy as np
from typing_extensions import Self

from bounceiter.direction import BounceState, Direction
from bounceiter.errors import AliasingError, StaleViewError, ThreadAffinityError

logger = logging.getLogger(__name__)

T = TypeVar('T')

Buffer = Union[MutableSequence[T], np.ndarray]

_borrowed: set[int] = set()  # ids of buffers held by a live `BounceCursor`


class Slot(Generic[T]):
    """A mutable view of one buffer element, valid until the cursor steps."""

    __slots__ = ('_cursor', '_generation', 'index')

    def __init__(self, cursor: BounceCursor[T], index: int, generation: int) -> None:
        self._cursor = cursor
        self._generation = generation
        self.index = index

    def _buffer(self) -> Buffer:
        self._cursor._check_thread()
        if self._generation != self._cursor._generation or self._cursor.closed:
            raise StaleViewError(f'Slot at index {self.index} is no longer the live view')
        return self._cursor._buffer

    @property
    def value(self) -> T:
        """Element at the slot; rows of n-d arrays come back read-only."""
        buffer = self._buffer()
        if isinstance(buffer, np.ndarray) and buffer.ndim > 1:
            return self.view
        return buffer[self.index]

    @value.setter
    def value(self, value: T) -> None:
        self._buffer()[self.index] = value

    @property
    def view(self) -> np.ndarray:
        """Zero-copy read-only view of the element, numpy buffers only.

        Writes must go through `value` so that a stale slot cannot modify
        the buffer through a view taken while it was still live.
        """
        buffer = self._buffer()
        if not isinstance(buffer, np.ndarray):
            raise TypeError(f'{type(buffer).__name__} buffer has no array views')
        view = buffer[self.index, ...]
        view.flags.writeable = False
        return view

    @property
    def live(self) -> bool:
        return self._generation == self._cursor._generation and not self._cursor.closed

    def __repr__(self) -> str:
        state = 'live' if self.live else 'stale'
        return f'{self.__class__.__name__}(index={self.index}, {state})'


class BounceCursor(Generic[T]):
    """Walk a caller-owned buffer back and forth forever, yielding `Slot`s.

    The cursor holds an exclusive borrow of `buffer`: while it is open, no
    other `BounceCursor` may be created over the same object, and only the
    most recently yielded `Slot` may be read or written. Both the cursor and
    its slots are confined to the thread that created the cursor. Call
    `close` (or use the cursor as a context manager) to return the borrow.

    buffer: `MutableSequence` or `np.ndarray`
        Non-empty buffer, its length must not change while borrowed.
    reverse: `bool`
        Start at the last element and walk towards the first one.
    """

    def __init__(self, buffer: Buffer, reverse: bool = False) -> None:
        self.state = BounceState.starting(len(buffer), reverse=reverse)
        if id(buffer) in _borrowed:
            raise AliasingError('Buffer is already borrowed by another BounceCursor')
        _borrowed.add(id(buffer))
        self._buffer: Optional[Buffer] = buffer
        self._thread: int = threading.get_ident()
        self._generation: int = 0

    @property
    def closed(self) -> bool:
        return self._buffer is None

    @property
    def position(self) -> int:
        return self.state.position

    @property
    def direction(self) -> Direction:
        return self.state.direction

    def __len__(self) -> int:
        return self.state.length

    def _check_thread(self) -> None:
        if threading.get_ident() != self._thread:
            raise ThreadAffinityError('BounceCursor used outside of its creating thread')

    def step(self) -> Slot[T]:
        """Invalidate the previous slot and return a view of the next item."""
        self._check_thread()
        if self.closed:
            raise StaleViewError('Cannot step a closed BounceCursor')
        self._generation += 1
        return Slot(self, self.state.step(), self._generation)

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> Slot[T]:
        return self.step()

    def close(self) -> None:
        """Release the buffer borrow, all slots become stale."""
        if self._buffer is None:
            return
        _borrowed.discard(id(self._buffer))
        self._buffer = None
        self._generation += 1
        logger.debug('BounceCursor released its buffer')

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, '_buffer', None) is not None:
            _borrowed.discard(id(self._buffer))
