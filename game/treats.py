"""
Module with treats, the treat-eaten queue and the treat field.
"""

import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .segment import Chain, EntityAllocator, GridPos

logger = logging.getLogger(__name__)


@dataclass
class Treat:
    """A consumable item on the grid."""
    id: int
    x: int
    y: int

    @property
    def position(self) -> GridPos:
        return (self.x, self.y)


@dataclass(frozen=True)
class TreatEaten:
    """Raised when a segment lands on a treat."""
    treat_id: int
    eater_id: int


class EventQueue:
    """Bounded FIFO of notifications, cleared when drained."""

    def __init__(self, capacity: int = 64):
        self.capacity = capacity
        self._events: deque = deque()

    def __len__(self) -> int:
        return len(self._events)

    def send(self, event: TreatEaten) -> None:
        if len(self._events) >= self.capacity:
            raise OverflowError(
                f"event queue full ({self.capacity}), dropping {event}"
            )
        self._events.append(event)

    def drain(self) -> List[TreatEaten]:
        """Returns pending events in arrival order and clears the queue."""
        events = list(self._events)
        self._events.clear()
        return events


class TreatField:
    """
    Spawns treats on free cells of the bounded plane and detects when a
    segment lands on one.
    """

    def __init__(
        self,
        allocator: EntityAllocator,
        half_extent: int = 9,
        max_treats: int = 1,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            allocator: id source shared with the chain
            half_extent: cells span [-half_extent, half_extent] on both axes
            max_treats: treats kept on the field at once
            rng: random source (seeded for reproducible spawns)
        """
        self.allocator = allocator
        self.half_extent = half_extent
        self.max_treats = max_treats
        self.rng = rng or random.Random()
        self.treats: Dict[int, Treat] = {}

    @property
    def bounds(self) -> Tuple[int, int]:
        return (-self.half_extent, self.half_extent)

    def free_cells(self, occupied: set) -> List[GridPos]:
        lo, hi = self.bounds
        taken = occupied | {t.position for t in self.treats.values()}
        return [
            (x, y)
            for x in range(lo, hi + 1)
            for y in range(lo, hi + 1)
            if (x, y) not in taken
        ]

    def place(self, position: GridPos) -> Treat:
        """Puts a treat at an explicit cell."""
        treat = Treat(id=self.allocator.allocate(), x=position[0], y=position[1])
        self.treats[treat.id] = treat
        return treat

    def remove(self, treat_id: int) -> Optional[Treat]:
        """Takes a treat off the field; unknown ids are a no-op."""
        return self.treats.pop(treat_id, None)

    def spawn(self, occupied: set) -> Optional[Treat]:
        """
        Creates a treat at a random free cell.

        Returns:
            Treat or None if no space available
        """
        free = self.free_cells(occupied)
        if not free:
            return None
        treat = self.place(self.rng.choice(free))
        logger.debug("Spawned treat %d at %s", treat.id, treat.position)
        return treat

    def respawn(self, chain: Chain) -> List[Treat]:
        """Tops the field back up to ``max_treats``."""
        spawned = []
        while len(self.treats) < self.max_treats:
            treat = self.spawn(chain.occupied())
            if treat is None:
                break
            spawned.append(treat)
        return spawned

    def detect(self, chain: Chain, queue: EventQueue) -> List[TreatEaten]:
        """
        Removes every treat sharing a cell with a segment and queues a
        notification for it.
        """
        by_cell = {}
        for segment in chain:
            by_cell.setdefault(segment.position, segment.id)

        events = []
        for treat in list(self.treats.values()):
            eater = by_cell.get(treat.position)
            if eater is None:
                continue
            event = TreatEaten(treat_id=treat.id, eater_id=eater)
            queue.send(event)
            self.remove(treat.id)
            events.append(event)
        return events
