from .segment import Chain, ChainInvariantError, Direction, EntityAllocator, Segment
from .intent import InputSnapshot, resolve_direction, apply_intent
from .scheduler import TickScheduler
from .propagation import propagate
from .growth import grow, process_growth
from .interpolation import interpolate, approach
from .treats import Treat, TreatEaten, EventQueue, TreatField
from .simulation import Simulation, SimulationContext, FrameReport
from .config import DEFAULT_CONFIG, load_config
