import logging
import math

import pytest

from evergrove.config import WorldConfig
from evergrove.placeables import Transform, Tree
from evergrove.world import ChunkGrid, TerrainKind
from evergrove.world_gen.core import WorldGenerator
from evergrove.world_gen.phases.decorations import cell_random
from tests.noise_utils import StubNoise


def occupied(grid):
    return sorted(cell.grid_position for cell in grid.occupied_cells())


def snapshot(grid):
    return sorted(
        (cell.grid_position, cell.occupant.position, cell.occupant.transform.as_tuple())
        for cell in grid.occupied_cells()
    )


def centers(grid):
    return [(x + 0.5, z + 0.5) for (x, z) in occupied(grid)]


def test_scenario_accepts_exactly_two_cells(small_config):
    noise = StubNoise({(0, 0), (1, 1), (3, 3)})
    generator = WorldGenerator(small_config, noise=noise)
    grid = ChunkGrid((0, 0), 4)
    placed = generator.generate_chunk(grid)
    assert occupied(grid) == [(0, 0), (3, 3)]
    assert len(placed) == 2

    again = ChunkGrid((0, 0), 4)
    WorldGenerator(small_config, noise=StubNoise({(0, 0), (1, 1), (3, 3)})).generate_chunk(again)
    assert snapshot(again) == snapshot(grid)


def test_first_candidate_in_x_major_order_wins(small_config):
    generator = WorldGenerator(small_config, noise=StubNoise())
    grid = ChunkGrid((0, 0), 4)
    generator.generate_chunk(grid)
    assert occupied(grid) == [(0, 0), (0, 3), (3, 0), (3, 3)]


def test_noise_is_sampled_at_offset_and_scaled_coordinates():
    config = WorldConfig(chunk_size=2, noise_scale=0.5, world_seed=10, min_tree_spacing=0)
    noise = StubNoise()
    WorldGenerator(config, noise=noise).generate_chunk(ChunkGrid((1, -1), 2))
    assert noise.samples == [
        ((2 + 10) * 0.5, (-2 + 10) * 0.5),
        ((2 + 10) * 0.5, (-1 + 10) * 0.5),
        ((3 + 10) * 0.5, (-2 + 10) * 0.5),
        ((3 + 10) * 0.5, (-1 + 10) * 0.5),
    ]


def test_skips_occupied_and_non_open_cells(small_config):
    config = small_config.copy(min_tree_spacing=0.0)

    def policy(x, z):
        return TerrainKind.IMPASSABLE if x == 1 else TerrainKind.FAST_PATH if x == 2 else TerrainKind.OPEN

    grid = ChunkGrid((0, 0), 4, policy)
    grid.get_cell(0, 0).occupant = 'rock'
    WorldGenerator(config, noise=StubNoise()).generate_chunk(grid)
    assert grid.get_cell(0, 0).occupant == 'rock'
    for cell in grid.iter_cells():
        x, z = cell.grid_position
        if x in (1, 2):
            assert cell.is_empty
        elif (x, z) != (0, 0):
            assert isinstance(cell.occupant, Tree)


def test_below_threshold_places_nothing(small_config):
    grid = ChunkGrid((0, 0), 4)
    WorldGenerator(small_config, noise=StubNoise(set())).generate_chunk(grid)
    assert occupied(grid) == []


def test_trees_are_registered_as_occupants(config):
    generator = WorldGenerator(config.copy(tree_threshold=0.0))
    grid = ChunkGrid((2, -3), config.chunk_size)
    placed = generator.generate_chunk(grid)
    assert placed
    for tree in placed:
        assert tree.cell.occupant is tree
        x, z = tree.cell.grid_position
        # Jitter never moves a tree out of its cell
        assert math.floor(tree.position[0]) == x
        assert math.floor(tree.position[2]) == z
        assert tree.position[1] == 0.0
        assert 0 <= tree.transform.rotation < config.max_rotation
        assert abs(tree.transform.scale - config.base_scale) <= config.scale_variation + 1e-9
        assert abs(tree.transform.offset_x) <= config.position_jitter
        assert abs(tree.transform.offset_z) <= config.position_jitter


@pytest.mark.parametrize('chunk', [(0, 0), (-1, -1), (7, -12), (-40, 3)])
def test_generation_is_deterministic(config, chunk):
    a = ChunkGrid(chunk, config.chunk_size)
    b = ChunkGrid(chunk, config.chunk_size)
    WorldGenerator(config).generate_chunk(a)
    WorldGenerator(config).generate_chunk(b)
    assert snapshot(a) == snapshot(b)


def test_different_seeds_give_different_layouts(config):
    layouts = set()
    for seed in (1, 2, 3):
        grid = ChunkGrid((0, 0), config.chunk_size)
        WorldGenerator(config.copy(world_seed=seed, tree_threshold=0.5)).generate_chunk(grid)
        layouts.add(tuple(occupied(grid)))
    assert len(layouts) > 1


@pytest.mark.parametrize('spacing', [1.0, 2.5, 4.0, 6.5])
def test_spacing_invariant(config, spacing):
    cfg = config.copy(tree_threshold=0.0, min_tree_spacing=spacing)
    for chunk in [(0, 0), (-3, 5)]:
        grid = ChunkGrid(chunk, cfg.chunk_size)
        WorldGenerator(cfg).generate_chunk(grid)
        points = centers(grid)
        assert points
        for (i, (ax, az)) in enumerate(points):
            for (bx, bz) in points[i + 1:]:
                assert math.hypot(ax - bx, az - bz) >= spacing


def test_zero_spacing_fills_every_candidate(small_config):
    grid = ChunkGrid((0, 0), 4)
    WorldGenerator(small_config.copy(min_tree_spacing=0.0), noise=StubNoise()).generate_chunk(grid)
    assert len(occupied(grid)) == 16


def test_missing_factory_leaves_chunk_empty(small_config, caplog):
    generator = WorldGenerator(small_config, placeable_factory=None, noise=StubNoise())
    grid = ChunkGrid((0, 0), 4)
    with caplog.at_level(logging.WARNING):
        assert generator.generate_chunk(grid) == []
    assert occupied(grid) == []
    assert any(record.levelno == logging.WARNING for record in caplog.records)


def test_custom_factory_receives_transform_and_parent(small_config):
    calls = []

    def factory(position, transform, cell, parent):
        calls.append((position, transform, cell.grid_position, parent))
        return object()

    generator = WorldGenerator(small_config, placeable_factory=factory, noise=StubNoise({(0, 0), (3, 3)}))
    generator.generate_chunk(ChunkGrid((0, 0), 4), parent='chunk-node')
    assert [c[2] for c in calls] == [(0, 0), (3, 3)]
    assert all(c[3] == 'chunk-node' for c in calls)
    assert all(isinstance(c[1], Transform) for c in calls)


def test_cell_random_streams_are_keyed_by_position():
    assert cell_random(42, 3, -4).random() == cell_random(42, 3, -4).random()
    assert cell_random(42, 3, -4).random() != cell_random(42, 3, 4).random()
    assert cell_random(42, 3, -4).random() != cell_random(43, 3, -4).random()
