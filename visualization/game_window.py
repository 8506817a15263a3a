"""
Interactive Pygame window for the snake chain, with a live tuning panel.

Usage:
    python -m visualization.game_window
    python -m visualization.game_window --config configs/game.yaml
    python -m visualization.game_window --interval 150 --lerp-rate 12
"""

import argparse
import logging
import sys
from pathlib import Path

import pygame

sys.path.append(str(Path(__file__).parent.parent))

from game.config import load_config
from game.intent import InputSnapshot
from game.simulation import Simulation, SimulationContext
from visualization.renderer import Renderer

logger = logging.getLogger(__name__)


PANEL_COLORS = {
    "panel_bg": (20, 20, 30),
    "panel_border": (60, 60, 80),
    "text": (255, 255, 255),
    "paused": (200, 50, 50),
}

KEY_BINDINGS = {
    "left": (pygame.K_LEFT, pygame.K_a),
    "right": (pygame.K_RIGHT, pygame.K_d),
    "up": (pygame.K_UP, pygame.K_w),
    "down": (pygame.K_DOWN, pygame.K_s),
}


def snapshot_from_keys(pressed, quit_requested: bool = False) -> InputSnapshot:
    """Builds an input snapshot from ``pygame.key.get_pressed()``."""
    held = {
        name: any(pressed[key] for key in keys)
        for name, keys in KEY_BINDINGS.items()
    }
    return InputSnapshot(quit=quit_requested, **held)


class GameWindow:
    """
    Runs the simulation in a pygame window.

    Args:
        config: configuration dict (see game.config.DEFAULT_CONFIG)
    """

    PANEL_HEIGHT = 70
    INTERVAL_STEP_MS = 25.0
    RATE_STEP = 1.0

    def __init__(self, config: dict):
        self.config = config
        self.fps = config["display"]["fps"]
        self.paused = False

        self.sim = Simulation.from_config(config)
        self.context = SimulationContext.from_config(config)
        self.renderer = Renderer(
            half_extent=config["game"]["grid_half_extent"],
            cell_size=config["display"]["cell_size"],
            render_mode=config["display"]["render_mode"],
            panel_height=self.PANEL_HEIGHT,
        )

    def run(self) -> None:
        """Main loop."""
        clock = pygame.time.Clock()
        try:
            running = True
            while running:
                quit_requested = False
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        quit_requested = True
                    elif event.type == pygame.KEYDOWN:
                        quit_requested = self._handle_keydown(event.key) or quit_requested

                snapshot = snapshot_from_keys(pygame.key.get_pressed(), quit_requested)
                delta = clock.tick(self.fps) / 1000.0
                running = self.step(snapshot, delta)

                self.draw()
                if self.renderer.render_mode == "human":
                    pygame.display.flip()
        finally:
            self.renderer.close()

        info = self.sim.get_info()
        print(f"Final length: {info['length']}  ticks: {info['ticks']}")

    def step(self, snapshot: InputSnapshot, delta_seconds: float) -> bool:
        """Advances one frame. Returns False once quit is requested."""
        self.context.delta_seconds = 0.0 if self.paused else delta_seconds
        report = self.sim.update(snapshot, self.context)
        if report.grown:
            logger.info("Chain length %d", len(self.sim.chain))
        return not report.quit

    def _handle_keydown(self, key: int) -> bool:
        """Handles tuning keys. Returns True if the key requests quit."""
        if key == pygame.K_ESCAPE:
            return True

        if key == pygame.K_p:
            self.paused = not self.paused
        elif key == pygame.K_r:
            self.sim.reset(seed=self.config["game"].get("seed"))
        elif key == pygame.K_LEFTBRACKET:
            self.context.set_tick_interval(self.context.tick_interval_ms - self.INTERVAL_STEP_MS)
            logger.info("Tick interval %.0f ms", self.context.tick_interval_ms)
        elif key == pygame.K_RIGHTBRACKET:
            self.context.set_tick_interval(self.context.tick_interval_ms + self.INTERVAL_STEP_MS)
            logger.info("Tick interval %.0f ms", self.context.tick_interval_ms)
        elif key == pygame.K_MINUS:
            self.context.set_lerp_rate(self.context.lerp_rate - self.RATE_STEP)
            logger.info("Lerp rate %.2f", self.context.lerp_rate)
        elif key in (pygame.K_EQUALS, pygame.K_PLUS):
            self.context.set_lerp_rate(self.context.lerp_rate + self.RATE_STEP)
            logger.info("Lerp rate %.2f", self.context.lerp_rate)
        return False

    def draw(self):
        chain = self.sim.chain
        frame = self.renderer.render(
            self.sim.render_positions(),
            head_id=chain.head.id,
            tail_id=chain.tail.id,
            treats=[t.position for t in self.sim.treats.treats.values()],
        )
        self._draw_panel(self.renderer.screen)
        return frame

    def _draw_panel(self, screen: pygame.Surface) -> None:
        """Draws the tuning panel under the plane."""
        top = self.renderer.plane_size
        width = self.renderer.window_width
        pygame.draw.rect(
            screen, PANEL_COLORS["panel_bg"],
            pygame.Rect(0, top, width, self.PANEL_HEIGHT)
        )
        pygame.draw.line(screen, PANEL_COLORS["panel_border"], (0, top), (width, top), 2)

        font = self.renderer.font
        lines = [
            f"Length: {len(self.sim.chain)}   Ticks: {self.sim.scheduler.ticks}",
            f"Interval: {self.context.tick_interval_ms:.0f} ms  [ / ]"
            f"   Lerp Rate: {self.context.lerp_rate:.2f}  - / =",
            "Arrows/WASD move   P pause   R reset   ESC quit",
        ]
        y = top + 6
        for line in lines:
            surf = font.render(line, True, PANEL_COLORS["text"])
            screen.blit(surf, (8, y))
            y += 20

        if self.paused:
            surf = font.render("PAUSED", True, PANEL_COLORS["paused"])
            screen.blit(surf, (width - surf.get_width() - 8, top + 6))


def main():
    parser = argparse.ArgumentParser(description="Snake Chain")
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to config YAML (defaults are used when omitted)"
    )
    parser.add_argument(
        "--interval", type=float, default=None,
        help="Tick interval in milliseconds"
    )
    parser.add_argument(
        "--lerp-rate", type=float, default=None,
        help="Interpolation rate"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed for treat placement"
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    overrides = {"game": {}}
    if args.interval is not None:
        overrides["game"]["tick_interval_ms"] = args.interval
    if args.lerp_rate is not None:
        overrides["game"]["lerp_rate"] = args.lerp_rate
    if args.seed is not None:
        overrides["game"]["seed"] = args.seed

    config = load_config(args.config, overrides)
    window = GameWindow(config)
    window.run()


if __name__ == "__main__":
    main()
