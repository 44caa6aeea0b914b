from __future__ import annotations


class BounceError(Exception):
    """Base class of every error raised by `bounceiter`."""


class EmptySequenceError(BounceError, ValueError):
    """A bouncing traversal was requested over a sequence of length 0."""


class OwnershipError(BounceError, RuntimeError):
    """An exclusive borrow, a view or a cell was used outside its rules."""


class AliasingError(OwnershipError):
    """The buffer is already borrowed by another live `BounceCursor`."""


class StaleViewError(OwnershipError):
    """A `Slot` was used after its cursor stepped further or was closed."""


class ThreadAffinityError(OwnershipError):
    """A cursor, slot or cell was touched outside of its creating thread."""


class CellGuardError(BounceError, RuntimeError):
    """The guard of a `SharedCell` could not be acquired."""


class CellBusyError(CellGuardError):
    """Requested access conflicts with a read or write guard already held."""


class PoisonedCellError(CellGuardError):
    """A writer failed while holding the guard, the cell value is untrusted."""
