from models import IDENTITY, Orientation, Tile
from solver.orientation import (
    ORIENTATIONS,
    apply_orientation,
    flip_horizontal,
    flip_vertical,
    rotate_right,
    variants,
)
from tests.data import SAMPLE_TILES
from tiles import parse_tiles

SMALL = ("123", "456", "789")


def test_small_grid_transforms():
    assert rotate_right(SMALL) == ("741", "852", "963")
    assert flip_vertical(SMALL) == ("789", "456", "123")
    assert flip_horizontal(SMALL) == ("321", "654", "987")


def test_rotate_handles_rectangles():
    assert rotate_right(("ab", "cd", "ef")) == ("eca", "fdb")


def test_round_trips_on_every_sample_tile():
    for tile in parse_tiles(SAMPLE_TILES):
        rows = tile.rows
        assert rotate_right(rotate_right(rotate_right(rotate_right(rows)))) == rows
        assert flip_vertical(flip_vertical(rows)) == rows
        assert flip_horizontal(flip_horizontal(rows)) == rows
        assert rotate_right(rows) != rows


def test_horizontal_flip_is_half_turn_of_vertical_flip():
    rows = parse_tiles(SAMPLE_TILES)[0].rows
    assert flip_horizontal(rows) == rotate_right(rotate_right(flip_vertical(rows)))


def test_eight_distinct_orientations():
    assert len(ORIENTATIONS) == 8
    assert len(set(ORIENTATIONS)) == 8
    assert ORIENTATIONS[0] == IDENTITY


def test_asymmetric_tile_has_eight_variants():
    for tile in parse_tiles(SAMPLE_TILES):
        vs = variants(tile)
        assert len(vs) == 8
        assert len({v.rows for v in vs}) == 8
        assert all(v.tile_id == tile.id for v in vs)
        assert vs[0].rows == tile.rows


def test_variant_set_independent_of_starting_orientation():
    tile = parse_tiles(SAMPLE_TILES)[3]
    turned = Tile(tile.id, apply_orientation(tile.rows, Orientation(1, True)))
    assert {v.rows for v in variants(turned)} == {v.rows for v in variants(tile)}


def test_symmetric_tile_is_deduplicated():
    blank = Tile(9, tuple("." * 10 for _ in range(10)))
    assert len(variants(blank)) == 1

    # symmetric under the half turn only
    rows = ["." * 10 for _ in range(10)]
    rows[0] = ".#" + "." * 8
    rows[9] = "." * 8 + "#."
    vs = variants(Tile(10, tuple(rows)))
    assert len(vs) == 4
    assert len({v.rows for v in vs}) == 4
