import pytest

from models import Tile
from solver.cache import CandidateCache
from solver.orientation import variants
from tests.data import SAMPLE_TILES
from tiles import parse_tiles


@pytest.fixture(scope="module")
def sample_cache():
    return CandidateCache.populate(parse_tiles(SAMPLE_TILES))


def test_cache_holds_every_variant(sample_cache):
    assert len(sample_cache) == 9 * 8
    assert sample_cache.tile_ids == (2311, 1951, 1171, 1427, 1489, 2473, 2971, 2729, 3079)
    assert sample_cache.edge_width == 10


def test_every_variant_is_reachable_from_each_index(sample_cache):
    for v in sample_cache.all:
        assert v in sample_cache.by_left(v.left)
        assert v in sample_cache.by_top(v.top)
        assert v in sample_cache.by_left_top(v.left, v.top)


def test_indexes_hold_nothing_extra(sample_cache):
    total = len(sample_cache.all)
    assert sum(len(vs) for vs in sample_cache.lefts.values()) == total
    assert sum(len(vs) for vs in sample_cache.tops.values()) == total
    assert sum(len(vs) for vs in sample_cache.lefttops.values()) == total
    for (left, top), vs in sample_cache.lefttops.items():
        assert all(v.left == left and v.top == top for v in vs)


def test_unknown_edge_gives_empty_list(sample_cache):
    missing = next(e for e in range(1024) if e not in sample_cache.lefts)
    assert sample_cache.by_left(missing) == []
    assert sample_cache.by_left_top(missing, 0) == []


def test_mixed_tile_sizes_rejected():
    small = Tile(1, ("..", ".."))
    big = parse_tiles(SAMPLE_TILES)[0]
    with pytest.raises(ValueError, match="wide"):
        CandidateCache.populate([big, small])


def test_symmetric_tile_indexed_once_per_distinct_grid():
    blank = Tile(5, tuple("." * 10 for _ in range(10)))
    cache = CandidateCache.populate([blank])
    assert len(cache) == len(variants(blank)) == 1
    assert cache.by_left_top(0, 0)[0].tile_id == 5
