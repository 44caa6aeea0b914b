from __future__ import annotations

import logging
from typing import Generic, Iterable, Optional, Sequence, TypeVar

from typing_extensions import Self

from bounceiter.cells import SharedCell, unwrap, wrap
from bounceiter.direction import BounceState, Direction
from bounceiter.utils.iterating import Peekable

logger = logging.getLogger(__name__)

T = TypeVar('T')


class SharedBounceCursor(Generic[T]):
    """Walk a list of `SharedCell`s back and forth, yielding cloned handles.

    The cursor owns the list but not the cells: every handle it yields (or
    that existed before) may read and write the element independently. The
    walk can be inspected with `peek_before` / `peek_after` and restarted
    with `reset` / `reset_rev` without re-wrapping anything.
    """

    def __init__(self, cells: Iterable[SharedCell[T]], reverse: bool = False) -> None:
        self._cells: list[SharedCell[T]] = list(cells)
        self.state = BounceState.starting(len(self._cells), reverse=reverse)

    @classmethod
    def from_values(cls, values: Iterable[T], reverse: bool = False) -> Self:
        """Wrap every value into a fresh cell and bounce over those."""
        return cls(wrap(values), reverse=reverse)

    @property
    def cells(self) -> Sequence[SharedCell[T]]:
        return tuple(self._cells)

    @property
    def position(self) -> int:
        return self.state.position

    @property
    def direction(self) -> Direction:
        return self.state.direction

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> SharedCell[T]:
        return self._cells[self.state.step()].clone()

    def _clone_at(self, index: int) -> Optional[SharedCell[T]]:
        if 0 <= index < len(self._cells):
            return self._cells[index].clone()
        return None

    def peek_before(self) -> Optional[SharedCell[T]]:
        """Handle at index `position - 1`, or None; bounce order is ignored."""
        return self._clone_at(self.state.position - 1)

    def peek_after(self) -> Optional[SharedCell[T]]:
        """Handle at index `position + 1`, or None; bounce order is ignored."""
        return self._clone_at(self.state.position + 1)

    def reset(self) -> None:
        """Restart the walk from the first cell."""
        self.state.reset()
        logger.debug(f'Cursor over {len(self)} cells reset to the first one')

    def reset_rev(self) -> None:
        """Restart the walk from the last cell."""
        self.state.reset_rev()
        logger.debug(f'Cursor over {len(self)} cells reset to the last one')

    def values(self) -> list[T]:
        """Current value of every cell in index order."""
        return unwrap(self._cells)

    def peekable(self) -> Peekable[SharedCell[T]]:
        """Wrap in a one-item lookahead that also forwards resets."""
        return Peekable(self)
