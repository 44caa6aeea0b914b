from __future__ import annotations

import logging

from bounceiter.cells import SharedCell, WriteGuard, unwrap, wrap
from bounceiter.direct import BounceCursor, Slot
from bounceiter.direction import BounceState, Direction, bounce_indices
from bounceiter.errors import (
    AliasingError,
    BounceError,
    CellBusyError,
    CellGuardError,
    EmptySequenceError,
    OwnershipError,
    PoisonedCellError,
    StaleViewError,
    ThreadAffinityError,
)
from bounceiter.shared import SharedBounceCursor
from bounceiter.utils.iterating import Peekable, bounce

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'AliasingError',
    'BounceCursor',
    'BounceError',
    'BounceState',
    'CellBusyError',
    'CellGuardError',
    'Direction',
    'EmptySequenceError',
    'OwnershipError',
    'Peekable',
    'PoisonedCellError',
    'SharedBounceCursor',
    'SharedCell',
    'Slot',
    'StaleViewError',
    'ThreadAffinityError',
    'WriteGuard',
    'bounce',
    'bounce_indices',
    'unwrap',
    'wrap',
]
