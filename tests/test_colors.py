import pytest

from errors import InvalidColorCode
from organism.colors import FAMILY_BANDS, all_codes, family, hex_to_rgb, rgb


def test_family_bands():
    assert [family(c) for c in range(1, 8)] == [1] * 7
    assert [family(c) for c in range(8, 22)] == [2] * 14
    assert [family(c) for c in range(22, 29)] == [3] * 7
    assert [family(c) for c in range(29, 36)] == [4] * 7


def test_bands_partition_the_palette():
    covered = []
    for first, last, _ in FAMILY_BANDS:
        covered.extend(range(first, last + 1))
    assert sorted(covered) == all_codes() == list(range(1, 36))


@pytest.mark.parametrize("bad", [0, 36, -3, "5", 5.0, True, None])
def test_out_of_range_code_is_rejected(bad):
    with pytest.raises(InvalidColorCode):
        family(bad)
    with pytest.raises(InvalidColorCode):
        rgb(bad)


def test_invalid_color_code_is_a_value_error():
    with pytest.raises(ValueError):
        family(99)


def test_rgb_lookup():
    assert rgb(29) == (0x33, 0x33, 0x33)
    assert rgb(35) == (0xF2, 0xF2, 0xF2)
    assert rgb(1) == (0xD9, 0x31, 0x31)


def test_hex_to_rgb_forms():
    assert hex_to_rgb("#000000") == (0, 0, 0)
    assert hex_to_rgb("ffffff") == (255, 255, 255)
    assert hex_to_rgb("#abc") == (0xAA, 0xBB, 0xCC)


@pytest.mark.parametrize("bad", ["", "#12345", "#zzzzzz", "not a color", "#-1-1-1", "+f+f+f", "#-0a"])
def test_hex_to_rgb_rejects_garbage(bad):
    with pytest.raises(ValueError):
        hex_to_rgb(bad)


def test_signed_hex_environment_is_rejected():
    from world.simulation import SimulationController

    with pytest.raises(ValueError):
        SimulationController(environment="#-1-1-1")
    sim = SimulationController(environment="#000000")
    with pytest.raises(ValueError):
        sim.set_environment_color("+f+f+f")
    assert sim.environment_rgb == (0, 0, 0)
