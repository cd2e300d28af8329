import math
import random

import pytest

from evolution.mutate import (
    mutate_color,
    mutation_candidates,
    ring_distance,
    weighted_pick,
    wrap_code,
)
from organism.colors import family


def test_wrap_code_ring():
    assert wrap_code(36) == 1
    assert wrap_code(37) == 2
    assert wrap_code(0) == 35
    assert wrap_code(-1) == 34
    assert wrap_code(17) == 17
    assert wrap_code(71) == 1
    assert wrap_code(-35) == 35


def test_wide_radius_gives_unique_codes_on_the_ring():
    cands = mutation_candidates(10, allow_cross_family=True, radius=20)
    codes = [c for c, _ in cands]
    assert len(codes) == len(set(codes)) == 34
    assert 10 not in codes
    assert all(1 <= c <= 35 for c in codes)


def test_ring_distance_takes_short_arc_and_floors_at_one():
    assert ring_distance(1, 35) == 1
    assert ring_distance(1, 34) == 2
    assert ring_distance(10, 12) == 2
    assert ring_distance(5, 5) == 1


def test_candidates_within_family():
    cands = mutation_candidates(1, allow_cross_family=False)
    assert [c for c, _ in cands] == [2, 3]
    assert cands[0][1] == pytest.approx(1 / math.log10(2.1))
    assert cands[1][1] == pytest.approx(1 / math.log10(3.1))


def test_candidates_across_families_wrap_around():
    cands = dict(mutation_candidates(1, allow_cross_family=True))
    assert sorted(cands) == [2, 3, 34, 35]
    assert cands[35] == pytest.approx(cands[2])
    assert cands[34] == pytest.approx(cands[3])


def test_candidates_at_upper_band_edge():
    assert [c for c, _ in mutation_candidates(7, allow_cross_family=False)] == [5, 6]
    assert [c for c, _ in mutation_candidates(35, allow_cross_family=False)] == [33, 34]


def test_near_neighbors_weigh_more():
    cands = dict(mutation_candidates(15, allow_cross_family=False))
    assert cands[14] > cands[13]
    assert cands[16] > cands[17]


def test_scripted_draws(scripted):
    # weights: code 2 -> 3.10, code 3 -> 2.03
    assert mutate_color(1, False, scripted([0.0])) == 2
    assert mutate_color(1, False, scripted([0.5])) == 2
    assert mutate_color(1, False, scripted([0.7])) == 3
    assert mutate_color(1, False, scripted([0.999])) == 3


def test_empty_neighborhood_returns_parent(scripted):
    rng = scripted([])
    assert mutate_color(12, True, rng, radius=0) == 12
    assert rng.calls == 0


def test_family_is_kept_without_cross_family(rng):
    for parent in (1, 4, 7, 8, 14, 21, 22, 28, 29, 35):
        for _ in range(300):
            child = mutate_color(parent, False, rng)
            assert child != parent
            assert family(child) == family(parent)


def test_parent_one_stays_in_low_band(rng):
    seen = {mutate_color(1, False, rng) for _ in range(2000)}
    assert seen <= {1, 2, 3, 5, 6, 7}
    assert not seen & set(range(8, 36))


def test_cross_family_reaches_the_wrapped_neighbors(rng):
    seen = {mutate_color(1, True, rng) for _ in range(2000)}
    assert seen == {2, 3, 34, 35}


def test_weighted_pick_edge_cases(scripted):
    assert weighted_pick([], [], scripted([])) is None
    assert weighted_pick(["a", "b"], [0.0, 0.0], scripted([0.5])) is None
    # draw landing exactly on a boundary picks the earlier item
    assert weighted_pick(["a", "b"], [1.0, 1.0], scripted([0.5])) == "a"
    assert weighted_pick(["a", "b"], [1.0, 1.0], scripted([0.75])) == "b"


def test_weighted_pick_converges_to_weight_ratio():
    rng = random.Random(7)
    n = 100_000
    hits = sum(1 for _ in range(n) if weighted_pick(["a", "b"], [1.0, 3.0], rng) == "a")
    assert abs(hits / n - 0.25) < 0.01
