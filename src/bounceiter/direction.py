from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

import numpy as np
from typing_extensions import Self

from bounceiter.errors import EmptySequenceError

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    """Heading of a bouncing traversal; the value is the index increment."""

    FORWARD = +1
    REVERSE = -1
    NO_BOUNCE = 0  # length <= 1, never changes


@dataclass
class BounceState:
    """Position and direction of a back-and-forth walk over `length` items.

    The walk is a triangle wave over indices: for length 5 starting at 0 it
    reads 0, 1, 2, 3, 4, 3, 2, 1, 0, 1, ... and never repeats an endpoint.
    `correct` restores `0 <= position < length` right before each read, so
    `position` may legitimately sit at `length` between two steps.
    """

    length: int
    position: int = 0  # index that the next `step` is going to produce
    direction: Direction = Direction.FORWARD

    def __post_init__(self) -> None:
        if self.length < 1:
            raise EmptySequenceError('Cannot bounce over an empty sequence')
        if not 0 <= self.position < self.length:
            raise ValueError(f'Position {self.position} outside of 0..{self.length - 1}')
        if self.length == 1:
            self.direction = Direction.NO_BOUNCE
        elif self.direction is Direction.NO_BOUNCE:
            raise ValueError(f'{self.length}-long sequence must bounce, got NO_BOUNCE')

    @classmethod
    def starting(cls, length: int, reverse: bool = False) -> Self:
        """Return a new state at index 0, or at `length - 1` if `reverse`."""
        if reverse:
            return cls(length=length, position=length - 1, direction=Direction.REVERSE)
        return cls(length=length, position=0, direction=Direction.FORWARD)

    def correct(self) -> int:
        """Reflect the position back into range and return it, do not advance."""
        if self.length <= 1:
            self.direction = Direction.NO_BOUNCE
            self.position = 0
            return self.position
        if self.position >= self.length:
            logger.debug(f'Bounced at far end of {self.length}-long sequence')
            self.direction = Direction.REVERSE
            self.position = self.length - 2
        if self.position == 0:  # also right after a bounce when length == 2
            self.direction = Direction.FORWARD
        if not 0 <= self.position < self.length:
            raise AssertionError(f'Internal error: {self.position=}, {self.length=}')
        return self.position

    def advance(self) -> None:
        self.position += self.direction.value

    def step(self) -> int:
        """Return the index to be produced now and move past it."""
        index = self.correct()
        self.advance()
        return index

    def reset(self) -> None:
        """Restart from index 0, the direction follows on the next step."""
        self.position = 0

    def reset_rev(self) -> None:
        """Restart from the last index, the direction follows on next step."""
        self.position = self.length - 1


def bounce_indices(length: int, n: int, reverse: bool = False) -> np.ndarray:
    """Closed-form first `n` indices of a bouncing walk over `length` items."""
    if length < 1:
        raise EmptySequenceError('Cannot bounce over an empty sequence')
    if length == 1:
        return np.zeros(n, dtype=np.intp)
    period = 2 * (length - 1)
    phase = (np.arange(n, dtype=np.intp) + (length - 1 if reverse else 0)) % period
    return np.where(phase < length, phase, period - phase)
