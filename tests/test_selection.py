import random

import pytest

from errors import InvalidElimination
from evolution.selection import AutoRun, SelectionEngine
from organism.colors import rgb
from organism.organism import build_population, living

BLACK = (0, 0, 0)


def make_population(n, code=15):
    return build_population({code: n})


def test_manual_capture_flow():
    pop = make_population(5)
    engine = SelectionEngine(random.Random(0))
    org = engine.begin_capture(pop, pop[2].id)
    assert org.being_captured and not org.eliminated

    with pytest.raises(InvalidElimination):
        engine.validate_capture(pop, org.id)

    assert engine.commit_capture(org) is True
    assert org.eliminated and not org.being_captured
    assert engine.commit_capture(org) is False

    with pytest.raises(InvalidElimination):
        engine.validate_capture(pop, org.id)


def test_manual_capture_of_unknown_organism():
    engine = SelectionEngine(random.Random(0))
    with pytest.raises(InvalidElimination):
        engine.validate_capture(make_population(3), -1)


@pytest.mark.parametrize(
    "size,target,expected_eliminated",
    [
        (80, None, 60),
        (80, 10, 10),
        (80, 200, 60),
        (25, 100, 5),
        (21, 1, 1),
        (20, None, 0),
        (12, None, 0),
        (80, 0, 0),
        (80, -4, 0),
    ],
)
def test_automatic_selection_counts(size, target, expected_eliminated):
    pop = build_population({1: size // 2, 29: size - size // 2})
    engine = SelectionEngine(random.Random(size), min_survivors=20)
    eliminated = engine.run_automatic(pop, BLACK, target)

    assert eliminated == expected_eliminated
    assert sum(o.eliminated for o in pop) == expected_eliminated
    assert len(living(pop)) == size - expected_eliminated
    if target is not None and target >= 0 and size > 20:
        assert len(living(pop)) == max(20, size - target)
    assert not any(o.being_captured for o in pop)


def test_auto_target_is_living_minus_floor():
    pop = make_population(50)
    pop[0].eliminated = True
    engine = SelectionEngine(random.Random(0), min_survivors=20)
    assert engine.auto_target(pop) == 29
    assert engine.start_run(pop).target == 29


def test_zero_total_weight_stops_early():
    pop = make_population(30, code=29)
    engine = SelectionEngine(random.Random(0), base_weight=0.0)
    run = engine.start_run(pop)
    assert engine.step(run, pop, rgb(29)) is False
    assert run.stopped_early
    assert run.eliminated == 0
    assert len(living(pop)) == 30


def test_draw_is_proportional_to_weight(scripted):
    pop = build_population({29: 1, 35: 1})
    engine = SelectionEngine(scripted([0.0, 0.99]))
    assert engine.draw_capture(pop, BLACK).color_code == 29
    assert engine.draw_capture(pop, BLACK).color_code == 35


def test_mark_and_commit_are_separate_steps():
    pop = make_population(30)
    engine = SelectionEngine(random.Random(3))
    run = engine.start_run(pop)

    victim = engine.mark_next(run, pop, BLACK)
    assert victim.being_captured and not victim.eliminated
    assert run.pending_id == victim.id
    with pytest.raises(RuntimeError):
        engine.mark_next(run, pop, BLACK)

    assert engine.commit_pending(run, pop) is victim
    assert victim.eliminated
    assert run.eliminated == 1
    assert engine.commit_pending(run, pop) is None


def test_weights_follow_the_current_environment(scripted):
    # same draw, different environment -> different victim
    pop = build_population({29: 1, 35: 1})
    engine = SelectionEngine(scripted([0.3, 0.3]))
    assert engine.draw_capture(pop, BLACK).color_code == 35
    assert engine.draw_capture(pop, (255, 255, 255)).color_code == 29


def test_no_organism_is_taken_twice():
    pop = make_population(40)
    engine = SelectionEngine(random.Random(11))
    run = AutoRun(target=20)
    taken = []
    while True:
        engine.commit_pending(run, pop)
        if engine.is_done(run, pop):
            break
        taken.append(engine.mark_next(run, pop, BLACK).id)
    assert len(taken) == len(set(taken)) == 20
