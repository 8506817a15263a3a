"""
Chain propagation: shifts grid positions one cell along the chain.
"""

from .segment import Chain, ChainInvariantError, ZERO, add


def propagate(chain: Chain) -> None:
    """
    Advances the chain by one discrete step.

    Walks from the tail toward the head. Each segment takes the position
    its head-ward neighbour holds *before* that neighbour is processed,
    which gives the same result as updating every segment at once.
    Afterwards every segment with a direction (the head) steps by it.

    Raises:
        ChainInvariantError: no unique tail, or the walk does not end at
            the head after visiting every segment
    """
    lookup = chain.headward_lookup()
    current = chain.tail

    visited = 1
    while True:
        neighbour = lookup.get(current.id)
        if neighbour is None:
            break
        current.prev_position = current.position
        current.position = neighbour.position
        current = neighbour
        visited += 1
        if visited > len(chain):
            raise ChainInvariantError("chain links form a cycle")

    if current.id != chain.head_id:
        raise ChainInvariantError(
            f"propagation ended at {current.id}, head is {chain.head_id}"
        )
    if visited != len(chain):
        raise ChainInvariantError(
            f"propagation visited {visited} of {len(chain)} segments"
        )

    for segment in chain:
        if segment.direction != ZERO:
            segment.prev_position = segment.position
            segment.position = add(segment.position, segment.direction)
