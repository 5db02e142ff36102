import logging
from typing import TYPE_CHECKING, Any, Optional

from evergrove.config import WorldConfig
from evergrove.placeables import tree_factory
from evergrove.utils import autoslots
from evergrove.world_gen.phase import AbstractPhase
from evergrove.world_gen.phases.decorations import TreeDecorationPhase

if TYPE_CHECKING:
    from evergrove.abc import NoiseSource, PlaceableFactory
    from evergrove.world import ChunkGrid

_DEFAULT_FACTORY: Any = object()


@autoslots
class WorldGenerator:
    config: WorldConfig
    seed: int
    placeable_factory: Optional['PlaceableFactory']
    trees: 'TreeDecorationPhase'
    phases: list[AbstractPhase]

    def __init__(self,
        config: WorldConfig,
        placeable_factory: Optional['PlaceableFactory'] = _DEFAULT_FACTORY,
        noise: Optional['NoiseSource'] = None,
    ) -> None:
        self.config = config
        self.seed = config.world_seed
        if placeable_factory is _DEFAULT_FACTORY:
            placeable_factory = tree_factory
        self.placeable_factory = placeable_factory
        self.trees = TreeDecorationPhase(self, noise)
        self.phases = [
            self.trees,
        ]

    def generate_chunk(self, grid: 'ChunkGrid', parent: Any = None) -> list[Any]:
        placed: list[Any] = []
        for phase in self.phases:
            placed.extend(phase.generate_chunk(grid, parent))
        logging.debug('Generated chunk %s with %i objects', grid.chunk_coordinate, len(placed))
        return placed
