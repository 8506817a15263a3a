"""
Growth handler: splices a new tail segment per eaten treat.
"""

import logging
from typing import List

from .segment import Chain, Segment
from .treats import EventQueue

logger = logging.getLogger(__name__)


def grow(chain: Chain, new_id: int) -> Segment:
    """
    Appends one segment behind the current tail.

    The new segment sits on the cell the old tail just vacated and
    becomes the tail.
    """
    old_tail = chain.tail
    cell = old_tail.prev_position
    segment = Segment(id=new_id, position=cell, prev_position=cell)
    old_tail.link = segment.id
    chain.segments[segment.id] = segment
    return segment


def process_growth(chain: Chain, queue: EventQueue) -> List[Segment]:
    """
    Drains the queue and grows the chain once per notification,
    in arrival order.

    Notifications naming an id the allocator never issued, or one that
    is already a segment, are skipped.
    """
    added = []
    for event in queue.drain():
        if event.treat_id in chain or not chain.allocator.was_issued(event.treat_id):
            logger.warning(
                "Ignoring treat-eaten notification for unknown or consumed treat %d",
                event.treat_id,
            )
            continue
        segment = grow(chain, event.treat_id)
        logger.debug(
            "Segment %d ate treat, chain grew to %d (new tail at %s)",
            event.eater_id, len(chain), segment.position,
        )
        added.append(segment)
    return added
