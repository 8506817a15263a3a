"""
Per-frame simulation pipeline for the snake chain.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .growth import process_growth
from .intent import InputSnapshot, apply_intent
from .interpolation import clamp_rate, interpolate, world_positions
from .propagation import propagate
from .scheduler import TickScheduler, clamp_interval
from .segment import Chain, EntityAllocator, GridPos, ZERO
from .treats import EventQueue, TreatEaten, TreatField

logger = logging.getLogger(__name__)


@dataclass
class SimulationContext:
    """Tunables and frame time handed to every update."""
    tick_interval_ms: float = 250.0
    lerp_rate: float = 10.0
    delta_seconds: float = 0.0

    def __post_init__(self):
        self.tick_interval_ms = clamp_interval(self.tick_interval_ms)
        self.lerp_rate = clamp_rate(self.lerp_rate)

    def set_tick_interval(self, interval_ms: float) -> None:
        self.tick_interval_ms = clamp_interval(interval_ms)

    def set_lerp_rate(self, rate: float) -> None:
        self.lerp_rate = clamp_rate(rate)

    @classmethod
    def from_config(cls, config: dict) -> "SimulationContext":
        game = config["game"]
        return cls(
            tick_interval_ms=game["tick_interval_ms"],
            lerp_rate=game["lerp_rate"],
        )


@dataclass
class FrameReport:
    """What happened during one ``update``."""
    ticked: bool = False
    eaten: List[TreatEaten] = field(default_factory=list)
    grown: int = 0
    quit: bool = False


class Simulation:
    """
    Snake chain simulation.

    Each ``update`` runs, in order: direction intent, tick scheduler,
    propagation and treat detection (on a tick), growth, treat respawn,
    interpolation.
    """

    def __init__(
        self,
        half_extent: int = 9,
        start_pos: GridPos = (0, 0),
        start_direction: GridPos = ZERO,
        seed_length: int = 1,
        max_treats: int = 1,
        event_capacity: int = 64,
        segment_level: float = 0.0,
        seed: Optional[int] = None,
        spawn_treats: bool = True,
    ):
        """
        Args:
            half_extent: plane spans [-half_extent, half_extent] cells
            start_pos: initial head cell
            start_direction: initial head direction
            seed_length: initial chain length
            max_treats: treats kept on the field
            event_capacity: treat-eaten queue bound
            segment_level: vertical coordinate of rendered segments
            seed: random seed for treat placement
            spawn_treats: False leaves treat placement to the caller
        """
        self.half_extent = half_extent
        self.start_pos = tuple(start_pos)
        self.start_direction = tuple(start_direction)
        self.seed_length = seed_length
        self.max_treats = max_treats
        self.event_capacity = event_capacity
        self.segment_level = segment_level
        self.spawn_treats = spawn_treats

        # Interval is taken from the context on every update
        self.scheduler = TickScheduler()

        # Game state (initialized in reset)
        self.allocator: Optional[EntityAllocator] = None
        self.chain: Optional[Chain] = None
        self.treats: Optional[TreatField] = None
        self.events: Optional[EventQueue] = None
        self.frames: int = 0

        self.reset(seed=seed)

    @classmethod
    def from_config(cls, config: dict, **kwargs) -> "Simulation":
        game = config["game"]
        return cls(
            half_extent=game["grid_half_extent"],
            start_pos=tuple(game["start_position"]),
            start_direction=tuple(game["start_direction"]),
            seed_length=game["seed_length"],
            max_treats=game["max_treats"],
            event_capacity=game["event_capacity"],
            segment_level=game["segment_level"],
            seed=game.get("seed"),
            **kwargs,
        )

    def reset(self, seed: Optional[int] = None) -> Dict[str, Any]:
        """Recreates the chain and the treat field."""
        self.allocator = EntityAllocator()
        self.chain = Chain.seed(
            self.allocator, self.start_pos, self.seed_length, self.start_direction
        )
        self.treats = TreatField(
            self.allocator,
            half_extent=self.half_extent,
            max_treats=self.max_treats,
            rng=random.Random(seed),
        )
        self.events = EventQueue(self.event_capacity)
        self.scheduler.reset()
        self.frames = 0

        if self.spawn_treats:
            self.treats.respawn(self.chain)

        logger.info(
            "Simulation reset: length %d at %s",
            len(self.chain), self.start_pos,
        )
        return self.get_info()

    def update(self, snapshot: InputSnapshot, context: SimulationContext) -> FrameReport:
        """
        Runs one frame.

        Args:
            snapshot: held keys this frame
            context: tunables and elapsed seconds since the last frame
        """
        report = FrameReport(quit=snapshot.quit)
        if snapshot.quit:
            return report

        self.frames += 1
        apply_intent(self.chain, snapshot)

        self.scheduler.set_interval(context.tick_interval_ms)
        if self.scheduler.advance(context.delta_seconds):
            report.ticked = True
            self.tick()
            report.eaten = self.treats.detect(self.chain, self.events)

        # Growth only ever sees a settled chain
        report.grown = len(process_growth(self.chain, self.events))

        if self.spawn_treats:
            self.treats.respawn(self.chain)

        interpolate(self.chain, context.lerp_rate, context.delta_seconds)
        return report

    def tick(self) -> None:
        """One discrete step of the chain."""
        propagate(self.chain)

    def notify_eaten(self, treat_id: int, eater_id: int) -> None:
        """
        Queues a treat-eaten notification from an outside collaborator.

        The treat leaves the field once the notification is queued.
        """
        self.events.send(TreatEaten(treat_id=treat_id, eater_id=eater_id))
        self.treats.remove(treat_id)

    def render_positions(self) -> Dict[int, Tuple[float, float, float]]:
        """Interpolated 3-D position per segment id."""
        return world_positions(self.chain, self.segment_level)

    def get_info(self) -> Dict[str, Any]:
        return {
            "length": len(self.chain),
            "head": self.chain.head.position,
            "direction": self.chain.head.direction,
            "ticks": self.scheduler.ticks,
            "frames": self.frames,
            "treats": [t.position for t in self.treats.treats.values()],
        }
