# gridstar/app/viewer.py
#!/usr/bin/env python3
"""
A* Stepper Viewer — Minimal Controls + Metrics

- Keyboard:
    [1]..[9]     -> switch scenario (sorted by file name)
    [SPACE]      -> run/pause
    [N]          -> single step
    [R]          -> reset (same barriers)
    [G]          -> regenerate barriers with a new seed
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit

Config:
- ENV: GRIDSTAR_SCENARIO=<name|path>, GRIDSTAR_SEED=<int>, GRIDSTAR_LOG_LEVEL=<level>
- CLI: --scenario=<name|path>, --seed=<int>
"""

from dataclasses import replace
from typing import Dict, List, Optional, Tuple
import logging
import os
import random
import sys

import pygame

from gridstar.core.astar import AStarEngine, initialize_from_config
from gridstar.core.config import SearchConfig, resolve_config, load_scenario, scenario_files
from gridstar.core.errors import GridstarError
from gridstar.core.types import CellState, StepStatus

logger = logging.getLogger(__name__)

# ---------- Config ----------
WINDOW_SIZE = 720        # grid area, square
PANEL_W = 300            # right band: metrics + buttons
GRID_MARGIN = 16
FONT_NAME = None  # default pygame font
STEPS_PER_SEC_DEFAULT = 100
FPS = 60

# Colors
WHITE       = (255,255,255)
GRID_LINE   = (100,100,100)
CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)

STATE_COLOURS: Dict[CellState, Tuple[int, int, int]] = {
    CellState.EMPTY:    (255, 255, 255),
    CellState.START:    (  0,   0, 255),
    CellState.BARRIER:  (  0,   0,   0),
    CellState.PATH:     (255,  50,   0),
    CellState.VISITED:  (  0, 180,   0),
    CellState.FRONTIER: (255, 234,   0),
    CellState.TARGET:   (255,   0,   0),
}

STATUS_LABELS = {
    StepStatus.CONTINUING: "Running",
    StepStatus.FOUND: "Done",
    StepStatus.EXHAUSTED: "No path",
}


def state_colour(state: CellState) -> Tuple[int, int, int]:
    return STATE_COLOURS[state]


# ---------- Step pacing ----------
class StepPacer:
    """Turns a steps/sec rate into a whole number of steps per frame.

    The fractional remainder carries over, so over one second of frames the
    number of steps equals the rate.
    """
    def __init__(self, fps: int = FPS):
        self.fps = fps
        self._budget = 0  # in 1/fps step units

    def steps_for_frame(self, steps_per_sec: int) -> int:
        self._budget += steps_per_sec
        n, self._budget = divmod(self._budget, self.fps)
        return n

    def reset(self):
        self._budget = 0


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event):
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()


# ---------- Viewer ----------
class Viewer:
    def __init__(self, config: SearchConfig):
        pygame.init()

        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        win_w = GRID_MARGIN*2 + WINDOW_SIZE + PANEL_W
        win_h = GRID_MARGIN*2 + WINDOW_SIZE
        self.screen = pygame.display.set_mode((win_w, win_h))
        self._right_band = pygame.Rect(GRID_MARGIN*2 + WINDOW_SIZE, 0, PANEL_W, win_h)
        self._buttons: List[UIButton] = []

        self.scenarios = scenario_files()
        self.clock = pygame.time.Clock()
        self.steps_per_sec = STEPS_PER_SEC_DEFAULT
        self.running = False
        self.state = "Idle"
        self.pacer = StepPacer()

        self.config = config
        self.engine: AStarEngine = initialize_from_config(config)
        self._last_metrics: dict = {}
        self._apply_engine()
        self._build_buttons()

    def _apply_engine(self):
        self.cell_size = max(1, WINDOW_SIZE // self.engine.grid.size)
        self._last_metrics = {}
        self.running = False
        self.state = "Idle"
        pygame.display.set_caption(f"A-Star — {self.config.name}")

    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(FPS)

    def _tick_algorithm(self):
        for _ in range(self.pacer.steps_for_frame(self.steps_per_sec)):
            if not self.running:
                break
            self._do_step()

    def _do_step(self):
        if self.engine.finished:
            return
        try:
            res = self.engine.step()
        except GridstarError as ex:
            logger.error("Search failed: %s", ex)
            self.state = "Error"; self.running = False
            return
        if res.status is not StepStatus.CONTINUING:
            self.running = False
            self.state = STATUS_LABELS[res.status]
        else:
            self.state = "Running" if self.running else "Paused"
        if res.metrics:
            self._last_metrics = res.metrics
        self._refresh_active_states()

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_SPACE:
                    self._toggle_run()
                elif e.key == pygame.K_r:
                    self._reset()
                elif e.key == pygame.K_g:
                    self._regenerate()
                elif e.key == pygame.K_n:
                    self._do_step()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_speed(+10)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_speed(-10)
                elif pygame.K_1 <= e.key <= pygame.K_9:
                    keys = list(self.scenarios)
                    idx = e.key - pygame.K_1
                    if idx < len(keys):
                        self._switch_scenario(keys[idx])
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                for b in self._buttons:
                    b.handle_mouse(e)

    def _switch_scenario(self, key: str):
        try:
            config = load_scenario(self.scenarios[key])
            engine = initialize_from_config(config)
        except GridstarError as ex:
            logger.error("Failed to load scenario %s: %s", key, ex)
            return
        self.config, self.engine = config, engine
        self._apply_engine()
        self._refresh_active_states()

    def _regenerate(self):
        config = replace(self.config, seed=random.randrange(1 << 30))
        try:
            self.engine = initialize_from_config(config)
        except GridstarError as ex:
            logger.error("Failed to regenerate barriers: %s", ex)
            return
        self.config = config
        logger.info("Regenerated %s with seed %d", config.name, config.seed)
        self._apply_engine()
        self._refresh_active_states()

    def _reset(self):
        self.engine.reset()
        self._apply_engine()
        self._refresh_active_states()

    def _toggle_run(self):
        if self.engine.finished or self.state == "Error":
            return
        self.running = not self.running
        self.pacer.reset()
        self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(1, min(600, self.steps_per_sec + dv)))

    # ---------- drawing ----------
    def _draw(self):
        self.screen.fill(WHITE)
        self._draw_cells()
        self._draw_grid_lines()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_cells(self):
        cs = self.cell_size
        grid = self.engine.grid
        for x in range(grid.size):
            for y in range(grid.size):
                rect = pygame.Rect(GRID_MARGIN + x*cs, GRID_MARGIN + y*cs, cs, cs)
                pygame.draw.rect(self.screen, state_colour(self.engine.cell_state(x, y)), rect)

    def _draw_grid_lines(self):
        cs = self.cell_size
        extent = cs * self.engine.grid.size
        for offset in range(0, extent + 1, cs):
            pygame.draw.line(self.screen, GRID_LINE, (GRID_MARGIN + offset, GRID_MARGIN),
                             (GRID_MARGIN + offset, GRID_MARGIN + extent))
            pygame.draw.line(self.screen, GRID_LINE, (GRID_MARGIN, GRID_MARGIN + offset),
                             (GRID_MARGIN + extent, GRID_MARGIN + offset))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 260  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 38
        gap = 10

        def add(label, cb) -> UIButton:
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb)
            self._buttons.append(btn)
            return btn

        self.btn_run = add("Run / Pause", self._toggle_run); y += h + gap
        add("Step Once", self._do_step); y += h + gap
        add("Reset", self._reset); y += h + gap
        add("New Barriers", self._regenerate); y += h + gap

        minus_rect = pygame.Rect(x, y, (w-8)//2, h)
        plus_rect  = pygame.Rect(x + (w-8)//2 + 8, y, (w-8)//2, h)
        self._buttons.append(UIButton("Speed −", minus_rect, lambda: self._bump_speed(-10)))
        self._buttons.append(UIButton("Speed +", plus_rect,  lambda: self._bump_speed(+10)))

        self._refresh_active_states()

    def _refresh_active_states(self):
        if self._buttons:
            self.btn_run.set_active(self.running)

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 240
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        line("Metrics", big=True, color=ACCENT_GOLD)
        m = self._last_metrics
        line(f"Expanded: {m.get('popped', 0)}")
        line(f"Open: {m.get('open_size', 0)}")
        line(f"Closed: {m.get('closed_count', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost") is not None:
            line(f"Total Cost: {m['total_cost']}")
        line("-" * 26)
        line(f"Scenario: {self.config.name}")
        line(f"State: {self.state}")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def configure_logging(env=None) -> None:
    env = os.environ if env is None else env
    level_name = env.get("GRIDSTAR_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def main(argv: Optional[List[str]] = None):
    configure_logging()
    argv = sys.argv[1:] if argv is None else argv
    try:
        viewer = Viewer(resolve_config(argv))
    except GridstarError as ex:
        logger.error("Failed to load scenario: %s", ex)
        sys.exit(1)
    viewer.run()


if __name__ == "__main__":
    main()
