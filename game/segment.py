"""
Module with the Segment record and the Chain arena.
"""

from enum import Enum
from dataclasses import dataclass, field
from itertools import count
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np


GridPos = Tuple[int, int]

ZERO: GridPos = (0, 0)


class ChainInvariantError(RuntimeError):
    """Raised when the chain topology is broken (no tail, no head, cycles)."""


class Direction(Enum):
    """Movement directions on the plane, as grid deltas.

    The camera looks straight down with +Z as screen-up,
    so screen-left is world +X.
    """
    LEFT = (1, 0)
    RIGHT = (-1, 0)
    UP = (0, 1)
    DOWN = (0, -1)

    @property
    def opposite(self) -> "Direction":
        dx, dy = self.value
        return Direction((-dx, -dy))


def add(a: GridPos, b: GridPos) -> GridPos:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: GridPos, b: GridPos) -> GridPos:
    return (a[0] - b[0], a[1] - b[1])


class EntityAllocator:
    """Hands out stable integer ids shared by segments and treats."""

    def __init__(self, start: int = 1):
        self._counter = count(start)
        self._start = start
        self._last: Optional[int] = None

    def allocate(self) -> int:
        self._last = next(self._counter)
        return self._last

    def was_issued(self, entity_id: int) -> bool:
        """True if *entity_id* came out of this allocator."""
        if self._last is None:
            return False
        return self._start <= entity_id <= self._last


@dataclass(eq=False)
class Segment:
    """One unit of the chain."""
    id: int
    position: GridPos
    prev_position: GridPos
    direction: GridPos = ZERO
    link: Optional[int] = None  # tail-ward neighbour, None = tail
    rendered: np.ndarray = field(default=None, repr=False)

    def __post_init__(self):
        if self.rendered is None:
            self.rendered = np.array(self.position, dtype=np.float64)

    @property
    def is_tail(self) -> bool:
        return self.link is None


class Chain:
    """
    Arena of segments keyed by entity id.

    Holds the grid positions, the tail-ward links and the head role.
    The tail role is implied by ``link is None``.
    """

    def __init__(self, allocator: EntityAllocator):
        self.allocator = allocator
        self.segments: Dict[int, Segment] = {}
        self.head_id: Optional[int] = None

    @classmethod
    def seed(cls, allocator: EntityAllocator, start_pos: GridPos,
             length: int = 1, direction: GridPos = ZERO) -> "Chain":
        """
        Creates the starting chain.

        Args:
            allocator: id source shared with the treat field
            start_pos: head grid position
            length: seed length (>= 1)
            direction: initial head direction; body segments are laid
                out behind the head, against this direction
        """
        if length < 1:
            raise ValueError(f"seed length must be >= 1, got {length}")

        chain = cls(allocator)
        dx, dy = direction
        x, y = start_pos

        # Build head first, then each segment tail-ward of the previous one
        previous: Optional[Segment] = None
        for i in range(length):
            pos = (x - i * dx, y - i * dy)
            segment = Segment(id=allocator.allocate(), position=pos, prev_position=pos)
            chain.segments[segment.id] = segment
            if previous is None:
                segment.direction = tuple(direction)
                chain.head_id = segment.id
            else:
                previous.link = segment.id
            previous = segment

        return chain

    def __len__(self) -> int:
        return len(self.segments)

    def __contains__(self, segment_id: int) -> bool:
        return segment_id in self.segments

    def __getitem__(self, segment_id: int) -> Segment:
        return self.segments[segment_id]

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments.values())

    @property
    def head(self) -> Segment:
        if self.head_id is None or self.head_id not in self.segments:
            raise ChainInvariantError("chain has no head")
        return self.segments[self.head_id]

    @property
    def tail(self) -> Segment:
        """The unique segment with no tail-ward link."""
        tails = [s for s in self.segments.values() if s.is_tail]
        if not tails:
            raise ChainInvariantError("chain has no tail")
        if len(tails) > 1:
            raise ChainInvariantError(
                f"chain has {len(tails)} tails: {[s.id for s in tails]}"
            )
        return tails[0]

    def headward_lookup(self) -> Dict[int, Segment]:
        """Maps each tail-ward neighbour id to the segment linking to it."""
        lookup: Dict[int, Segment] = {}
        for segment in self.segments.values():
            if segment.link is None:
                continue
            if segment.link in lookup:
                raise ChainInvariantError(
                    f"segments {lookup[segment.link].id} and {segment.id} "
                    f"both link to {segment.link}"
                )
            lookup[segment.link] = segment
        return lookup

    def ordered(self) -> List[Segment]:
        """Segments from tail to head, following the links."""
        lookup = self.headward_lookup()
        current = self.tail
        path = [current]
        while current.id in lookup:
            current = lookup[current.id]
            path.append(current)
            if len(path) > len(self.segments):
                raise ChainInvariantError("chain links form a cycle")
        if current.id != self.head_id:
            raise ChainInvariantError(
                f"traversal ended at {current.id}, head is {self.head_id}"
            )
        if len(path) != len(self.segments):
            raise ChainInvariantError(
                f"traversal visited {len(path)} of {len(self.segments)} segments"
            )
        return path

    def positions(self) -> List[GridPos]:
        """Grid positions from head to tail."""
        return [s.position for s in reversed(self.ordered())]

    def occupied(self) -> set:
        """Set of occupied grid cells."""
        return {s.position for s in self.segments.values()}
