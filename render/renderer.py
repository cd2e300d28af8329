"""
camo_sim module: render/renderer.py

Pygame rendering of a population snapshot.

Positions belong to the viewer, not the simulation: they are kept here keyed
by organism id and only ever read from snapshots.
"""

from __future__ import annotations
import random
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import pygame

import config
from evolution.stats import GenerationRecord, chart_series, format_config
from organism.colors import RGB, rgb
from organism.organism import OrganismView
from render import colors

Pos = Tuple[float, float]


class PositionField:
    """Random scatter of organism positions inside the arena rectangle."""

    def __init__(self, rect: pygame.Rect, rng: Optional[random.Random] = None):
        self.rect = rect
        self.rng = rng or random.Random()
        self.positions: Dict[int, Pos] = {}

    def _random_pos(self) -> Pos:
        r = config.ORGANISM_RADIUS
        return (
            self.rng.uniform(self.rect.left + r, self.rect.right - r),
            self.rng.uniform(self.rect.top + r, self.rect.bottom - r),
        )

    def sync(self, views: Sequence[OrganismView]) -> None:
        ids = {v.id for v in views}
        self.positions = {i: p for i, p in self.positions.items() if i in ids}
        for v in views:
            if v.id not in self.positions:
                self.positions[v.id] = self._random_pos()

    def scramble(self, views: Sequence[OrganismView]) -> None:
        for v in views:
            if not v.eliminated:
                self.positions[v.id] = self._random_pos()

    def jitter(self, views: Sequence[OrganismView], amount: float) -> None:
        r = config.ORGANISM_RADIUS
        for v in views:
            if v.eliminated or v.id not in self.positions:
                continue
            x, y = self.positions[v.id]
            x += self.rng.uniform(-amount, amount)
            y += self.rng.uniform(-amount, amount)
            x = max(self.rect.left + r, min(self.rect.right - r, x))
            y = max(self.rect.top + r, min(self.rect.bottom - r, y))
            self.positions[v.id] = (x, y)

    def hit(self, views: Sequence[OrganismView], x: float, y: float) -> Optional[int]:
        """Id of the living organism under (x, y), nearest first."""
        reach2 = (config.ORGANISM_RADIUS + 2) ** 2
        best, best_d2 = None, float("inf")
        for v in views:
            if v.eliminated or v.id not in self.positions:
                continue
            px, py = self.positions[v.id]
            d2 = (px - x) ** 2 + (py - y) ** 2
            if d2 <= reach2 and d2 < best_d2:
                best, best_d2 = v.id, d2
        return best


def draw_population(screen: pygame.Surface, views: Sequence[OrganismView], field: PositionField, env: RGB) -> None:
    pygame.draw.rect(screen, env, field.rect)
    r = config.ORGANISM_RADIUS

    # eliminated first so the living draw on top
    for v in views:
        if v.eliminated and v.id in field.positions:
            x, y = field.positions[v.id]
            pygame.draw.circle(screen, env, (int(x), int(y)), r)

    for v in views:
        if v.eliminated:
            continue
        x, y = field.positions[v.id]
        pygame.draw.circle(screen, rgb(v.color_code), (int(x), int(y)), r)
        if v.being_captured:
            pygame.draw.circle(screen, colors.CAPTURE_RING, (int(x), int(y)), r + 4, 2)


def draw_hud(screen: pygame.Surface, stats: dict) -> None:
    font = pygame.font.Font(None, 24)

    lines = [
        f"Generation: {stats.get('generation', 1)}   Phase: {stats.get('phase', '')}",
        f"Living: {stats.get('living', 0)}   Mode: {stats.get('mode', '-')}",
        f"Cross-family: {'on' if stats.get('cross_family') else 'off'}   Reshuffle: {'on' if stats.get('reshuffle') else 'off'}",
        "[M]anual [A]uto [E]nd [R]eset [X] cross-family [S] reshuffle [B] background",
    ]

    y = 10
    for line in lines:
        txt = font.render(line, True, colors.HUD_TEXT)
        screen.blit(txt, (12, y))
        y += 20


def draw_record(screen: pygame.Surface, record: Optional[GenerationRecord], top: int) -> None:
    """Start/survived table of the most recent generation, one column per color."""
    if record is None:
        return
    font = pygame.font.Font(None, 20)
    x0, col_w, row_h = 12, 30, 18

    header = font.render(f"Gen {record.generation}", True, colors.HUD_TEXT)
    screen.blit(header, (x0, top))
    rows: List[Tuple[str, int]] = [("start", record.total_start), ("survived", record.total_survived)]
    for i, (label, total) in enumerate(rows):
        txt = font.render(f"{label} ({total})", True, colors.HUD_DIM)
        screen.blit(txt, (x0, top + row_h * (i + 1)))

    x = x0 + 110
    for code in record.color_order:
        tally = record.colors[code]
        pygame.draw.rect(screen, rgb(code), pygame.Rect(x, top, col_w - 4, row_h - 4))
        for i, value in enumerate((tally.start, tally.survived)):
            txt = font.render(str(value), True, colors.HUD_TEXT)
            screen.blit(txt, (x, top + row_h * (i + 1)))
        x += col_w


def draw_chart(screen: pygame.Surface, history: Sequence[GenerationRecord], rect: pygame.Rect) -> None:
    """
    Start count per color across generations. Tracked colors get thick
    lines, any other color that ever appeared a thin one.
    """
    pygame.draw.rect(screen, colors.PANEL_BG, rect)
    font = pygame.font.Font(None, 18)
    screen.blit(font.render("Start population per generation", True, colors.HUD_DIM), (rect.left + 6, rect.top + 4))
    if not history:
        return

    plot = rect.inflate(-24, -34).move(6, 8)
    pygame.draw.line(screen, colors.HUD_DIM, plot.bottomleft, plot.bottomright, 1)
    pygame.draw.line(screen, colors.HUD_DIM, plot.bottomleft, plot.topleft, 1)

    n = len(history)
    step = plot.width / max(1, n - 1)

    def _point(i: int, value: int) -> Tuple[int, int]:
        y = plot.bottom - plot.height * min(value, config.TARGET_POP) / config.TARGET_POP
        return (int(plot.left + i * step), int(y))

    series = chart_series(history)
    # thin lines first so the tracked colors stay on top
    ordered = sorted(series, key=lambda code: code in config.TRACKED_COLORS)
    for code in ordered:
        width = 3 if code in config.TRACKED_COLORS else 1
        points = [_point(i, v) for i, v in enumerate(series[code])]
        if len(points) > 1:
            pygame.draw.lines(screen, rgb(code), False, points, width)
        else:
            pygame.draw.circle(screen, rgb(code), points[0], width + 1)


def draw_pending(screen: pygame.Surface, pending: Optional[Mapping[int, int]], rect: pygame.Rect) -> None:
    """The bred config waiting for the operator to confirm the next generation."""
    pygame.draw.rect(screen, colors.PANEL_BG, rect)
    font = pygame.font.Font(None, 18)
    screen.blit(font.render(f"Next generation: {format_config(pending)}", True, colors.HUD_TEXT), (rect.left + 6, rect.top + 4))
    if not pending:
        return

    x, y = rect.left + 6, rect.top + 24
    for code in sorted(pending):
        if x + 26 > rect.right:
            x, y = rect.left + 6, y + 34
        pygame.draw.rect(screen, rgb(code), pygame.Rect(x, y, 22, 14))
        screen.blit(font.render(str(pending[code]), True, colors.HUD_TEXT), (x, y + 16))
        x += 28


def draw_history(screen: pygame.Surface, history: Sequence[GenerationRecord], rect: pygame.Rect) -> None:
    """One line per recorded generation, newest at the bottom."""
    pygame.draw.rect(screen, colors.PANEL_BG, rect)
    font = pygame.font.Font(None, 18)
    row_h = 16
    rows = max(0, (rect.height - 8) // row_h)
    y = rect.top + 4
    for record in list(history)[-rows:] if rows else []:
        line = f"Gen {record.generation}: {record.total_start} -> {record.total_survived}  "
        line += " ".join(f"{c}:{record.colors[c].start}/{record.colors[c].survived}" for c in record.color_order)
        screen.blit(font.render(line, True, colors.HUD_TEXT), (rect.left + 6, y))
        y += row_h
