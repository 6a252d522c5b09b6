"""
Human Play Mode
===============

Play SumStack interactively. The window is a pure consumer of the engine:
it draws GameSession snapshots and forwards clicks.

Controls:
    - Mouse: Click blocks to select / deselect
    - 1: New classic game
    - 2: New time-attack game
    - R: Restart in the current mode
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--mode classic|time]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from sumstack.core.config_loader import load_config, GameConfig
from sumstack.core.game import GameSession
from sumstack.core.scheduler import ManualScheduler
from sumstack.core.state import GameMode
from sumstack.core.state_snapshot import GameSnapshot


class SumStackRenderer:
    """Dark board with emerald accents."""

    def __init__(self, config: GameConfig, window_width: int, window_height: int):
        self._config = config
        self._window_width = window_width
        self._window_height = window_height

        # Colors
        self._bg = (9, 9, 11)
        self._board_fill = (24, 24, 27)
        self._board_border = (39, 39, 42)
        self._block_fill = (39, 39, 42)
        self._block_new = (52, 52, 60)
        self._block_selected = (16, 185, 129)
        self._text = (244, 244, 245)
        self._text_dim = (113, 113, 122)
        self._danger = (239, 68, 68)
        self._accent = (52, 211, 153)

        pygame.font.init()
        self._font_huge = pygame.font.Font(None, 64)
        self._font_large = pygame.font.Font(None, 44)
        self._font_medium = pygame.font.Font(None, 30)
        self._font_small = pygame.font.Font(None, 22)

        self._calculate_layout()

    def _calculate_layout(self) -> None:
        """Fit the grid below the HUD."""
        rows, cols = self._config.grid.rows, self._config.grid.cols
        self._top_ui_height = 110
        self._bottom_ui_height = 40
        self._gap = 6

        available_w = self._window_width - 40
        available_h = self._window_height - self._top_ui_height - self._bottom_ui_height - 20
        self._cell = min(available_w // cols, available_h // rows)

        board_w = self._cell * cols
        board_h = self._cell * rows
        self._board_x = (self._window_width - board_w) // 2
        self._board_y = self._top_ui_height + (available_h - board_h) // 2
        self._board_rect = pygame.Rect(self._board_x, self._board_y, board_w, board_h)

    def cell_at(self, pos: Tuple[int, int]) -> Optional[Tuple[int, int]]:
        """Grid (row, col) under a screen position, or None."""
        if not self._board_rect.collidepoint(pos):
            return None
        col = (pos[0] - self._board_x) // self._cell
        row = (pos[1] - self._board_y) // self._cell
        return int(row), int(col)

    def render(self, screen: pygame.Surface, snapshot: GameSnapshot, started: bool) -> None:
        """Render the complete scene."""
        screen.fill(self._bg)
        self._draw_hud(screen, snapshot)
        self._draw_board(screen, snapshot)
        self._draw_controls(screen)

        if not started:
            self._draw_banner(screen, "SUMSTACK", "Press 1 for classic, 2 for time")
        elif snapshot.game_over:
            self._draw_banner(screen, "GAME OVER", f"Score {snapshot.score:,} - press R")

    def _draw_hud(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        label = self._font_small.render("TARGET", True, self._text_dim)
        screen.blit(label, (20, 14))
        target = self._font_huge.render(str(snapshot.target), True, self._text)
        screen.blit(target, (20, 32))

        sum_color = self._danger if snapshot.selected_sum > snapshot.target else self._accent
        label = self._font_small.render("CURRENT SUM", True, self._text_dim)
        screen.blit(label, (150, 14))
        current = self._font_huge.render(str(snapshot.selected_sum), True, sum_color)
        screen.blit(current, (150, 32))

        score = self._font_medium.render(f"Score {snapshot.score:,}", True, self._text)
        screen.blit(score, (self._window_width - score.get_width() - 20, 18))
        level = self._font_small.render(
            f"Level {snapshot.level} - {snapshot.mode.value}", True, self._text_dim
        )
        screen.blit(level, (self._window_width - level.get_width() - 20, 48))

        if snapshot.mode is GameMode.TIME:
            bar_w = self._window_width - 40
            fill_w = int(bar_w * max(0.0, min(1.0, snapshot.time_fraction)))
            color = self._danger if snapshot.time_fraction < 0.3 else self._accent
            pygame.draw.rect(screen, self._board_border, (20, 92, bar_w, 8), border_radius=4)
            pygame.draw.rect(screen, color, (20, 92, fill_w, 8), border_radius=4)

    def _draw_board(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        pygame.draw.rect(screen, self._board_fill, self._board_rect, border_radius=12)
        pygame.draw.rect(screen, self._board_border, self._board_rect, 2, border_radius=12)

        rows, cols = snapshot.shape
        for r in range(rows):
            for c in range(cols):
                value = int(snapshot.values[r, c])
                if value == 0:
                    continue
                rect = pygame.Rect(
                    self._board_x + c * self._cell + self._gap // 2,
                    self._board_y + r * self._cell + self._gap // 2,
                    self._cell - self._gap,
                    self._cell - self._gap
                )
                if snapshot.selected[r, c]:
                    fill = self._block_selected
                elif snapshot.is_new[r, c]:
                    fill = self._block_new
                else:
                    fill = self._block_fill
                pygame.draw.rect(screen, fill, rect, border_radius=8)
                text = self._font_large.render(str(value), True, self._text)
                screen.blit(text, text.get_rect(center=rect.center))

    def _draw_controls(self, screen: pygame.Surface) -> None:
        hint = self._font_small.render("1 Classic   2 Time   R Restart   ESC Quit", True, self._text_dim)
        screen.blit(hint, (20, self._window_height - self._bottom_ui_height + 12))

    def _draw_banner(self, screen: pygame.Surface, title: str, subtitle: str) -> None:
        overlay = pygame.Surface((self._window_width, self._window_height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 170))
        screen.blit(overlay, (0, 0))

        title_surface = self._font_huge.render(title, True, self._text)
        sub_surface = self._font_medium.render(subtitle, True, self._text_dim)
        cx, cy = self._window_width // 2, self._window_height // 2
        screen.blit(title_surface, title_surface.get_rect(center=(cx, cy - 24)))
        screen.blit(sub_surface, sub_surface.get_rect(center=(cx, cy + 24)))


class HumanPlayer:
    """Interactive SumStack game driven by the pygame frame clock."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        mode: Optional[str] = None,
        window_width: int = 420,
        window_height: int = 760,
        target_fps: int = 60
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed
        self._target_fps = target_fps

        # Virtual clock advanced by real frame time
        self._scheduler = ManualScheduler()
        self._session = GameSession(config=config, seed=seed, scheduler=self._scheduler)
        self._mode = GameMode.parse(mode) if mode else GameMode.CLASSIC
        self._started = False
        if mode:
            self._start(self._mode)

        pygame.init()
        self._screen = pygame.display.set_mode((window_width, window_height))
        pygame.display.set_caption("SumStack")
        self._clock = pygame.time.Clock()
        self._renderer = SumStackRenderer(config, window_width, window_height)
        self._running = True

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== SumStack ===")
        print("Click blocks that add up to the target")
        print("1 classic, 2 time, R restart, ESC quit")
        print()

        try:
            while self._running:
                self._handle_events()
                self._render()
                elapsed_ms = self._clock.tick(self._target_fps)
                # Clamp long frames (window drag, breakpoints)
                self._scheduler.advance(min(elapsed_ms / 1000.0, 0.25))
        finally:
            self._session.close()
            pygame.quit()

        return self._session.score

    def _start(self, mode: GameMode) -> None:
        self._mode = mode
        self._session.init_game(mode, seed=self._seed)
        self._started = True

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_1:
                    self._start(GameMode.CLASSIC)
                elif event.key == pygame.K_2:
                    self._start(GameMode.TIME)
                elif event.key == pygame.K_r and self._started:
                    self._start(self._mode)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._click(event.pos)

    def _click(self, pos: Tuple[int, int]) -> None:
        if not self._started or self._session.is_over:
            return
        cell = self._renderer.cell_at(pos)
        if cell is None:
            return
        score_before = self._session.score
        self._session.click_cell(*cell)
        if self._session.score > score_before:
            print(f"  +{self._session.score - score_before} (Total: {self._session.score})")
        if self._session.is_over:
            print(f"\nGAME OVER - Score: {self._session.score}")

    def _render(self) -> None:
        self._renderer.render(self._screen, self._session.snapshot(), self._started)
        pygame.display.flip()


def main() -> int:
    parser = argparse.ArgumentParser(description="Play SumStack")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--mode", choices=[m.value for m in GameMode], default=None,
                        help="Start immediately in this mode")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--verbose", action="store_true", help="Log engine events")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s"
    )

    if not PYGAME_AVAILABLE:
        print("Error: pygame is required. Install with: pip install pygame")
        return 1

    player = HumanPlayer(config=load_config(args.config), seed=args.seed, mode=args.mode)
    score = player.run()
    print(f"Final score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
