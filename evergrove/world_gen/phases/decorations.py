import logging
import random
from typing import TYPE_CHECKING, Any, Optional

from evergrove.common import CELL_CENTER_OFFSET
from evergrove.placeables import Transform
from evergrove.utils import autoslots
from evergrove.world import ChunkGrid
from evergrove.world_gen.noise import SimplexNoise
from evergrove.world_gen.phase import AbstractPhase

if TYPE_CHECKING:
    from evergrove.abc import NoiseSource, Vec3
    from evergrove.world import Cell
    from evergrove.world_gen.core import WorldGenerator

FLIP_CONSTANT = 4009383296558120008
MASK_32 = 2 ** 32 - 1
MASK_64 = 2 ** 64 - 1


def cell_random(seed: int, x: int, z: int) -> random.Random:
    return random.Random((((seed & MASK_64) << 32 | (x & MASK_32)) << 32) | (z & MASK_32))


def planar_distance_sq(a: 'Vec3', b: 'Vec3') -> float:
    dx = a[0] - b[0]
    dz = a[2] - b[2]
    return dx * dx + dz * dz


@autoslots
class TreeDecorationPhase(AbstractPhase):
    """
    Scatters trees over the open, empty cells of a chunk.

    Cells are visited x-major (see ChunkGrid.iter_cells). A cell is a candidate
    when the noise at ((x + seed) * scale, (z + seed) * scale) reaches the
    threshold, and the candidate is kept unless its cell center lies closer than
    min_tree_spacing to a tree already kept in the same chunk. Trees in
    neighbouring chunks are never looked at, so two trees on either side of a
    chunk edge may be closer than min_tree_spacing.

    The jitter, rotation and scale of a tree come from a random stream seeded by
    the world seed and the cell's global position, so a chunk that is unloaded
    and generated again looks exactly the same.
    """
    noise: 'NoiseSource'

    def __init__(self, generator: 'WorldGenerator', noise: Optional['NoiseSource'] = None) -> None:
        super().__init__(generator)
        if noise is None:
            noise = SimplexNoise(generator.seed ^ FLIP_CONSTANT)
        self.noise = noise

    def is_candidate(self, cell: 'Cell') -> bool:
        if not cell.is_placeable:
            return False
        config = self.generator.config
        x, z = cell.grid_position
        value = self.noise.sample(
            (x + self.generator.seed) * config.noise_scale,
            (z + self.generator.seed) * config.noise_scale,
        )
        return value >= config.tree_threshold

    def make_transform(self, cell: 'Cell') -> Transform:
        config = self.generator.config
        rand = cell_random(self.generator.seed, *cell.grid_position)
        offset_x = rand.uniform(-config.position_jitter, config.position_jitter)
        offset_z = rand.uniform(-config.position_jitter, config.position_jitter)
        rotation = rand.random() * config.max_rotation
        scale = config.base_scale + rand.uniform(-config.scale_variation, config.scale_variation)
        return Transform(offset_x, offset_z, rotation, scale)

    def generate_chunk(self, grid: ChunkGrid, parent: Any = None) -> list[Any]:
        factory = self.generator.placeable_factory
        if factory is None:
            logging.warning('No placeable factory configured, chunk %s left without trees', grid.chunk_coordinate)
            return []
        min_spacing_sq = self.generator.config.min_tree_spacing ** 2
        accepted: list['Vec3'] = []
        placed: list[Any] = []
        for cell in grid.iter_cells():
            if not self.is_candidate(cell):
                continue
            wx, wy, wz = cell.world_position
            center = (wx + CELL_CENTER_OFFSET, wy, wz + CELL_CENTER_OFFSET)
            if any(planar_distance_sq(center, other) < min_spacing_sq for other in accepted):
                continue
            accepted.append(center)
            transform = self.make_transform(cell)
            position = (center[0] + transform.offset_x, center[1], center[2] + transform.offset_z)
            tree = factory(position, transform, cell, parent)
            cell.occupant = tree
            placed.append(tree)
        return placed
