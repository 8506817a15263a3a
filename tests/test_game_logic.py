"""
Unit tests for chain logic (segments, intent, propagation, growth).
"""

import pytest
from game.segment import (
    Chain, ChainInvariantError, Direction, EntityAllocator, Segment,
)
from game.intent import InputSnapshot, resolve_direction, apply_intent
from game.propagation import propagate
from game.growth import grow, process_growth
from game.treats import EventQueue, TreatEaten


def make_chain(length, start=(0, 0), direction=(1, 0)):
    return Chain.seed(EntityAllocator(), start, length, direction)


def assert_simple_path(chain):
    path = chain.ordered()
    assert len(path) == len(chain)
    assert len({s.id for s in path}) == len(chain)
    assert path[0].link is None
    assert path[-1].id == chain.head_id
    for tailward, headward in zip(path, path[1:]):
        assert headward.link == tailward.id


class TestDirection:
    def test_direction_values(self):
        assert Direction.LEFT.value == (1, 0)
        assert Direction.RIGHT.value == (-1, 0)
        assert Direction.UP.value == (0, 1)
        assert Direction.DOWN.value == (0, -1)

    def test_opposite(self):
        assert Direction.LEFT.opposite == Direction.RIGHT
        assert Direction.UP.opposite == Direction.DOWN


class TestEntityAllocator:
    def test_ids_are_unique(self):
        allocator = EntityAllocator()
        ids = [allocator.allocate() for _ in range(5)]
        assert len(set(ids)) == 5

    def test_was_issued(self):
        allocator = EntityAllocator()
        assert not allocator.was_issued(1)
        first = allocator.allocate()
        assert allocator.was_issued(first)
        assert not allocator.was_issued(first + 1)


class TestChainSeed:
    def test_single_segment(self):
        chain = make_chain(1, direction=(0, 0))
        assert len(chain) == 1
        assert chain.head is chain.tail
        assert chain.head.position == (0, 0)
        assert chain.head.prev_position == (0, 0)

    def test_seed_lays_body_behind_head(self):
        chain = make_chain(3, start=(5, 5), direction=(1, 0))
        assert chain.positions() == [(5, 5), (4, 5), (3, 5)]
        assert chain.head.direction == (1, 0)
        assert chain.tail.direction == (0, 0)
        assert_simple_path(chain)

    def test_head_and_tail_differ(self):
        chain = make_chain(2)
        assert chain.head.id != chain.tail.id

    def test_seed_length_zero(self):
        with pytest.raises(ValueError):
            make_chain(0)

    def test_rendered_starts_on_grid(self):
        chain = make_chain(1, start=(3, -2))
        assert list(chain.head.rendered) == [3.0, -2.0]

    def test_no_tail_is_fatal(self):
        chain = make_chain(2)
        chain.tail.link = chain.head_id
        with pytest.raises(ChainInvariantError):
            chain.tail

    def test_two_tails_is_fatal(self):
        chain = make_chain(2)
        chain.head.link = None
        with pytest.raises(ChainInvariantError):
            chain.tail


class TestDirectionIntent:
    def test_fresh_head_accepts_any_direction(self):
        d = resolve_direction(InputSnapshot(right=True), (0, 0), (0, 0))
        assert d == Direction.RIGHT.value

    def test_reverse_rejected(self):
        # moved (1, 0) last step, pressing the opposite key
        d = resolve_direction(
            InputSnapshot(right=True), (1, 0), (0, 0), current=(1, 0)
        )
        assert d == (1, 0)

    def test_turn_accepted(self):
        d = resolve_direction(
            InputSnapshot(up=True), (1, 0), (0, 0), current=(1, 0)
        )
        assert d == (0, 1)

    def test_no_input_keeps_direction(self):
        d = resolve_direction(InputSnapshot(), (1, 0), (0, 0), current=(1, 0))
        assert d == (1, 0)

    def test_priority_last_valid_wins(self):
        # left, right, up, down order: down is last
        snap = InputSnapshot(left=True, up=True, down=True)
        assert resolve_direction(snap, (0, 0), (0, 0)) == Direction.DOWN.value

    def test_priority_skips_rejected(self):
        # last step was DOWN (0, -1); UP is a reversal, so LEFT wins
        snap = InputSnapshot(left=True, up=True)
        assert resolve_direction(snap, (0, -1), (0, 0)) == Direction.LEFT.value

    def test_apply_intent_only_touches_head(self):
        chain = make_chain(3, direction=(1, 0))
        apply_intent(chain, InputSnapshot(up=True))
        assert chain.head.direction == (0, 1)
        assert all(s.direction == (0, 0) for s in chain if s.id != chain.head_id)


class TestPropagation:
    @pytest.mark.parametrize("length", [1, 2, 3, 7])
    def test_shift_by_one(self, length):
        chain = make_chain(length, start=(0, 0), direction=(1, 0))
        # bend the chain so positions are distinct and non-collinear
        for up in range(length):
            chain.head.direction = (0, 1) if up % 2 else (1, 0)
            propagate(chain)
        chain.head.direction = (1, 0)

        before = chain.positions()
        propagate(chain)
        after = chain.positions()

        assert after[0] == (before[0][0] + 1, before[0][1])
        assert after[1:] == before[:-1]

    def test_prev_positions_track_previous_cell(self):
        chain = make_chain(3, start=(2, 0), direction=(1, 0))
        before = {s.id: s.position for s in chain}
        propagate(chain)
        for s in chain:
            assert s.prev_position == before[s.id]

    def test_no_collapse_in_long_chain(self):
        chain = make_chain(10, direction=(1, 0))
        for _ in range(5):
            propagate(chain)
        assert len(set(chain.positions())) == 10

    def test_zero_direction_head_stays(self):
        chain = make_chain(1, start=(4, 4), direction=(0, 0))
        propagate(chain)
        assert chain.head.position == (4, 4)

    def test_missing_tail_is_fatal(self):
        chain = make_chain(3)
        chain.tail.link = chain.head_id  # cycle, no tail
        with pytest.raises(ChainInvariantError):
            propagate(chain)

    def test_orphan_segment_is_fatal(self):
        chain = make_chain(2)
        orphan = Segment(id=chain.allocator.allocate(), position=(9, 9), prev_position=(9, 9))
        orphan.link = chain.tail.id
        chain.segments[orphan.id] = orphan
        # orphan now claims to be head-ward of the tail alongside the head
        with pytest.raises(ChainInvariantError):
            propagate(chain)

    def test_wrong_head_is_fatal(self):
        chain = make_chain(3)
        chain.head_id = chain.tail.id
        with pytest.raises(ChainInvariantError):
            propagate(chain)


class TestGrowth:
    def test_grow_at_tail_prev_position(self):
        chain = make_chain(1, direction=(1, 0))
        propagate(chain)
        old_tail = chain.tail
        vacated = old_tail.prev_position

        segment = grow(chain, chain.allocator.allocate())

        assert len(chain) == 2
        assert segment.position == vacated
        assert segment.prev_position == vacated
        assert segment.direction == (0, 0)
        assert chain.tail is segment
        assert old_tail.link == segment.id

    def test_growth_is_monotonic(self):
        chain = make_chain(2, direction=(1, 0))
        queue = EventQueue()
        for k in range(6):
            propagate(chain)
            queue.send(TreatEaten(treat_id=chain.allocator.allocate(), eater_id=chain.head_id))
            process_growth(chain, queue)
            assert len(chain) == 2 + k + 1
            assert_simple_path(chain)

    def test_two_notifications_same_tick(self):
        chain = make_chain(1, direction=(1, 0))
        propagate(chain)
        original_tail = chain.tail
        queue = EventQueue()
        a = chain.allocator.allocate()
        b = chain.allocator.allocate()
        queue.send(TreatEaten(treat_id=a, eater_id=chain.head_id))
        queue.send(TreatEaten(treat_id=b, eater_id=chain.head_id))

        added = process_growth(chain, queue)

        assert len(added) == 2
        assert len(chain) == 3
        assert original_tail.link == a
        assert chain[a].link == b
        assert chain.tail.id == b
        assert_simple_path(chain)

    def test_queue_cleared_after_read(self):
        chain = make_chain(1)
        queue = EventQueue()
        queue.send(TreatEaten(treat_id=chain.allocator.allocate(), eater_id=chain.head_id))
        process_growth(chain, queue)
        assert len(queue) == 0
        assert process_growth(chain, queue) == []
        assert len(chain) == 2

    def test_duplicate_notification_ignored(self):
        chain = make_chain(1)
        queue = EventQueue()
        treat_id = chain.allocator.allocate()
        queue.send(TreatEaten(treat_id=treat_id, eater_id=chain.head_id))
        queue.send(TreatEaten(treat_id=treat_id, eater_id=chain.head_id))
        process_growth(chain, queue)
        assert len(chain) == 2

    def test_unknown_treat_ignored(self):
        chain = make_chain(1)
        queue = EventQueue()
        queue.send(TreatEaten(treat_id=999, eater_id=chain.head_id))
        assert process_growth(chain, queue) == []
        assert len(chain) == 1

    def test_grown_chain_keeps_following(self):
        chain = make_chain(1, direction=(1, 0))
        propagate(chain)
        grow(chain, chain.allocator.allocate())
        propagate(chain)
        assert chain.positions() == [(2, 0), (1, 0)]
