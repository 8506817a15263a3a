"""
Pygame renderer: top-down view of the snake plane.
"""

import pygame
import numpy as np
from typing import Dict, Iterable, Optional, Tuple

from game.segment import GridPos


class Renderer:
    """Draws the 3-D positions seen from a camera straight above the plane."""

    # Colors
    COLORS = {
        "background": (0, 0, 0),
        "plane": (60, 60, 66),
        "grid": (75, 75, 82),
        "snake_head": (245, 245, 245),
        "snake_body": (200, 200, 210),
        "snake_tail": (110, 110, 130),
        "treat": (220, 40, 40),
        "treat_glow": (255, 140, 140),
        "text": (255, 255, 255),
    }

    def __init__(
        self,
        half_extent: int,
        cell_size: int = 28,
        render_mode: str = "human",
        panel_height: int = 0,
    ):
        """
        Args:
            half_extent: plane spans [-half_extent, half_extent] cells
            cell_size: cell size in pixels
            render_mode: "human" or "rgb_array"
            panel_height: extra pixels below the plane for the tuning panel
        """
        self.half_extent = half_extent
        self.cell_size = cell_size
        self.render_mode = render_mode

        cells = 2 * half_extent + 1
        self.plane_size = cells * cell_size
        self.window_width = self.plane_size
        self.window_height = self.plane_size + panel_height

        pygame.init()
        pygame.display.set_caption("Snake Chain")

        if render_mode == "human":
            self.screen = pygame.display.set_mode(
                (self.window_width, self.window_height)
            )
        else:
            self.screen = pygame.Surface(
                (self.window_width, self.window_height)
            )

        self.font = pygame.font.Font(None, 22)

    def world_to_screen(self, x: float, z: float) -> Tuple[int, int]:
        """
        Projects world (x, z) to pixel coordinates.

        Screen-left is world +X and screen-up is world +Z.
        """
        centre = self.plane_size / 2
        return (
            int(round(centre - x * self.cell_size)),
            int(round(centre - z * self.cell_size)),
        )

    def render(
        self,
        positions: Dict[int, Tuple[float, float, float]],
        head_id: int,
        tail_id: int,
        treats: Iterable[GridPos],
    ) -> Optional[np.ndarray]:
        """
        Renders the current frame.

        Args:
            positions: segment id -> (x, level, z)
            head_id: id drawn with the head color
            tail_id: id drawn with the tail color
            treats: treat grid cells

        Returns:
            RGB array if render_mode == "rgb_array", otherwise None
        """
        self.screen.fill(self.COLORS["background"])
        self._draw_plane()

        for treat in treats:
            self._draw_treat(treat)

        # Head last so it stays on top when segments overlap
        ordered = sorted(positions.items(), key=lambda item: item[0] == head_id)
        for segment_id, (x, _, z) in ordered:
            if segment_id == head_id:
                color = self.COLORS["snake_head"]
            elif segment_id == tail_id:
                color = self.COLORS["snake_tail"]
            else:
                color = self.COLORS["snake_body"]
            self._draw_sphere(x, z, color)

        if self.render_mode == "human":
            return None
        return np.transpose(
            pygame.surfarray.array3d(self.screen),
            (1, 0, 2)
        )

    def _draw_plane(self):
        """Draws the plane and its grid lines."""
        pygame.draw.rect(
            self.screen, self.COLORS["plane"],
            pygame.Rect(0, 0, self.plane_size, self.plane_size)
        )
        for i in range(2 * self.half_extent + 2):
            offset = i * self.cell_size
            pygame.draw.line(
                self.screen, self.COLORS["grid"],
                (offset, 0), (offset, self.plane_size)
            )
            pygame.draw.line(
                self.screen, self.COLORS["grid"],
                (0, offset), (self.plane_size, offset)
            )

    def _draw_sphere(self, x: float, z: float, color: Tuple[int, int, int]):
        cx, cy = self.world_to_screen(x, z)
        pygame.draw.circle(self.screen, color, (cx, cy), self.cell_size // 2 - 2)

    def _draw_treat(self, cell: GridPos):
        cx, cy = self.world_to_screen(cell[0], cell[1])
        radius = self.cell_size // 2 - 4
        pygame.draw.circle(self.screen, self.COLORS["treat"], (cx, cy), radius)
        pygame.draw.circle(
            self.screen, self.COLORS["treat_glow"], (cx - 3, cy - 3), 3
        )

    def close(self):
        """Closes pygame."""
        pygame.quit()
