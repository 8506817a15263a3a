"""
Direction intent: maps an input snapshot to the head's next step.
"""

from dataclasses import dataclass
from typing import Optional

from .segment import Chain, Direction, GridPos, ZERO, sub


@dataclass(frozen=True)
class InputSnapshot:
    """Which keys are held this frame."""
    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    quit: bool = False

    def pressed(self):
        """Held directions in priority order (left, right, up, down)."""
        flags = (
            (self.left, Direction.LEFT),
            (self.right, Direction.RIGHT),
            (self.up, Direction.UP),
            (self.down, Direction.DOWN),
        )
        return [d for held, d in flags if held]


def is_reversal(candidate: Direction, position: GridPos, prev_position: GridPos) -> bool:
    """True if *candidate* would step straight back into the cell just left."""
    return sub(position, prev_position) == candidate.opposite.value


def resolve_direction(
    snapshot: InputSnapshot,
    position: GridPos,
    prev_position: GridPos,
    current: GridPos = ZERO,
) -> GridPos:
    """
    Picks the direction for the next tick.

    Args:
        snapshot: held keys
        position: head grid position
        prev_position: head position before the last step
        current: direction kept when nothing valid is pressed

    Returns:
        The last held direction (left, right, up, down order) that does not
        reverse into the previous cell, or *current*
    """
    chosen: Optional[GridPos] = None
    for candidate in snapshot.pressed():
        if is_reversal(candidate, position, prev_position):
            continue
        chosen = candidate.value

    return current if chosen is None else chosen


def apply_intent(chain: Chain, snapshot: InputSnapshot) -> GridPos:
    """Updates the head direction in place and returns it."""
    head = chain.head
    head.direction = resolve_direction(
        snapshot, head.position, head.prev_position, head.direction
    )
    return head.direction
