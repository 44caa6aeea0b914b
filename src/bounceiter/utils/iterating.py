from __future__ import annotations

from typing import Generic, Iterable, Iterator, Optional, TypeVar

from typing_extensions import Self

from bounceiter.direction import BounceState

T = TypeVar('T')

_empty = object()  # sentinel object: marks an empty lookahead buffer


def bounce(iterable: Iterable[T]) -> Iterator[T]:
    """Iterate elements of input sequence back and forth, no repeated edges."""
    seq = list(iterable)
    return _bounce(seq, BounceState.starting(len(seq)))


def _bounce(seq: list[T], state: BounceState) -> Iterator[T]:
    while True:
        yield seq[state.step()]


class Peekable(Generic[T]):
    """One-item lookahead over any iterator; never advances it twice.

    `peek` pulls the next item from the wrapped iterator and keeps it until
    `next` hands it out, so mutating a peeked handle changes what `next`
    returns. `reset` / `reset_rev` drop the buffered item, then delegate to
    the wrapped cursor.
    """

    def __init__(self, iterator: Iterator[T]) -> None:
        self.iterator = iterator
        self._peeked: object = _empty

    @property
    def buffered(self) -> bool:
        return self._peeked is not _empty

    def peek(self, default: Optional[T] = None) -> Optional[T]:
        if self._peeked is _empty:
            try:
                self._peeked = next(self.iterator)
            except StopIteration:
                return default
        return self._peeked

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> T:
        if self._peeked is not _empty:
            item, self._peeked = self._peeked, _empty
            return item
        return next(self.iterator)

    def reset(self) -> None:
        self._peeked = _empty
        self.iterator.reset()

    def reset_rev(self) -> None:
        self._peeked = _empty
        self.iterator.reset_rev()
