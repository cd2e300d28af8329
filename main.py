"""
Camouflage selection viewer: organisms are picked off by how much their
color stands out from the background; survivors breed with color mutation.
"""

from __future__ import annotations
import argparse
import logging
import random
from typing import List, Optional

import config
from errors import SimulationError
from evolution.selection import EliminationMode
from evolution.stats import GenerationRecord, format_config, format_record
from organism.organism import GenerationConfig, OrganismView, parse_generation_config
from world.simulation import Phase, SimulationController

logger = logging.getLogger("camo_sim")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Natural selection under predation by color visibility.")
    p.add_argument("--config", help="starting mix as code:count pairs, e.g. '15:40,29:40' (must total 80)")
    p.add_argument("--env", default=config.DEFAULT_ENV_COLOR, help="environment color as #RRGGBB")
    p.add_argument("--speed", type=float, default=config.AUTO_TICK_INTERVAL, help="seconds per automatic elimination")
    p.add_argument("--seed", type=int, help="random seed for reproducible runs")
    p.add_argument("--cross-family", action="store_true", help="let mutation cross color families")
    p.add_argument("--headless", action="store_true", help="run automatic generations without a window")
    p.add_argument("--generations", type=int, default=10, help="generations to run in headless mode")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s",
        datefmt="%H:%M:%S",
    )


def starting_config(text: Optional[str]) -> GenerationConfig:
    if text:
        return parse_generation_config(text)
    return dict(config.DEFAULT_START_CONFIG)


def log_generation(record: GenerationRecord, pending: GenerationConfig) -> None:
    logger.info("\n%s", format_record(record))
    logger.info("next generation: %s", format_config(pending))


def run_headless(sim: SimulationController, start: GenerationConfig, generations: int) -> List[GenerationRecord]:
    sim.generation_observers.append(log_generation)
    sim.start_selection("auto", start)
    sim.run_until_idle()
    for _ in range(generations - 1):
        sim.start_selection("auto")
        sim.run_until_idle()
    return list(sim.history)


def run_viewer(sim: SimulationController, start: GenerationConfig, seed: Optional[int]) -> None:
    import pygame

    from render import colors
    from render.renderer import (
        PositionField,
        draw_chart,
        draw_history,
        draw_hud,
        draw_pending,
        draw_population,
        draw_record,
    )

    pygame.init()
    screen = pygame.display.set_mode((config.SCREEN_W, config.SCREEN_H))
    pygame.display.set_caption("camo_sim (Predation by Visibility)")
    clock = pygame.time.Clock()

    arena = pygame.Rect(10, 100, 620, config.SCREEN_H - 190)
    side_x = arena.right + 10
    side_w = config.SCREEN_W - side_x - 10
    chart_rect = pygame.Rect(side_x, 100, side_w, 220)
    pending_rect = pygame.Rect(side_x, chart_rect.bottom + 10, side_w, 80)
    history_rect = pygame.Rect(side_x, pending_rect.bottom + 10, side_w, arena.bottom - pending_rect.bottom - 10)
    field = PositionField(arena, random.Random(seed))
    views: List[OrganismView] = []
    reshuffle = False
    env_index = 0
    move_accum = 0.0

    def on_tick(snapshot: List[OrganismView]) -> None:
        nonlocal views
        eliminated_before = sum(v.eliminated for v in views)
        views = snapshot
        field.sync(views)
        if reshuffle and sum(v.eliminated for v in views) > eliminated_before:
            field.scramble(views)

    sim.tick_observers.append(on_tick)
    sim.generation_observers.append(log_generation)

    def begin(mode: str) -> None:
        try:
            if sim.phase == Phase.AWAITING_CONFIG:
                sim.start_selection(mode, start)
            else:
                sim.start_selection(mode)
        except SimulationError as exc:
            logger.warning("%s", exc)

    running = True
    while running:
        dt = min(clock.tick(60) / 1000.0, 1 / 30)

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_m:
                    begin("manual")
                elif e.key == pygame.K_a:
                    begin("auto")
                elif e.key == pygame.K_e:
                    try:
                        sim.end_selection()
                    except SimulationError as exc:
                        logger.warning("%s", exc)
                elif e.key == pygame.K_r:
                    sim.reset()
                elif e.key == pygame.K_x:
                    sim.set_allow_cross_family(not sim.allow_cross_family)
                elif e.key == pygame.K_s:
                    reshuffle = not reshuffle
                elif e.key == pygame.K_b:
                    env_index = (env_index + 1) % len(colors.ENV_PRESETS)
                    sim.set_environment_color(colors.ENV_PRESETS[env_index])
            elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                target = field.hit(views, *e.pos)
                if target is not None:
                    try:
                        sim.request_elimination(target)
                    except SimulationError as exc:
                        logger.debug("%s", exc)

        sim.update(dt)

        # organisms wander while the predator hunts on its own
        if sim.phase == Phase.SELECTION and sim.state.mode == EliminationMode.AUTOMATIC:
            move_accum += dt
            if move_accum >= config.MOVEMENT_INTERVAL:
                move_accum -= config.MOVEMENT_INTERVAL
                field.jitter(views, config.MAX_MOVEMENT)

        screen.fill(colors.HUD_BG)
        draw_population(screen, views, field, sim.environment_rgb)
        draw_hud(
            screen,
            {
                "generation": sim.generation,
                "phase": sim.phase.value,
                "living": sim.living_count,
                "mode": sim.state.mode.value if sim.state.mode else "-",
                "cross_family": sim.allow_cross_family,
                "reshuffle": reshuffle,
            },
        )
        history = sim.history
        draw_record(screen, history[-1] if history else None, arena.bottom + 10)
        draw_chart(screen, history, chart_rect)
        draw_pending(screen, sim.pending_config, pending_rect)
        draw_history(screen, history, history_rect)

        pygame.display.flip()

    pygame.quit()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        start = starting_config(args.config)
        sim = SimulationController(
            rng=random.Random(args.seed),
            environment=args.env,
            allow_cross_family=args.cross_family,
            tick_interval=args.speed,
        )
    except (SimulationError, ValueError) as exc:
        logger.error("%s", exc)
        return 2

    if args.headless:
        try:
            run_headless(sim, start, args.generations)
        except SimulationError as exc:
            logger.error("%s", exc)
            return 2
        return 0

    run_viewer(sim, start, args.seed)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
