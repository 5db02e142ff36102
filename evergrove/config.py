from typing import Any

from typing_extensions import Self

from evergrove import common
from evergrove.errors import ConfigurationError
from evergrove.utils import autoslots


@autoslots
class WorldConfig:
    """
    Every knob of a streamed world. There is no file format, values are set in
    code or on the command line (see evergrove.main).

        chunk_size       -- Cells per chunk edge, must be positive
        view_distance    -- Radius (in chunks) of the loaded disc, negative loads nothing
        noise_scale      -- Frequency of the placement noise
        tree_threshold   -- Minimum normalized noise value (0 to 1) for a tree
        world_seed       -- Seed shared by the noise and the per-cell random streams
        min_tree_spacing -- Minimum planar distance between trees of one chunk
        base_scale       -- Scale of an unvaried tree
        scale_variation  -- Trees are scaled by base_scale +/- this
        position_jitter  -- Trees are offset from their cell center by up to this
        max_rotation     -- Trees are turned by 0 up to this many degrees
    """
    chunk_size: int
    view_distance: int
    noise_scale: float
    tree_threshold: float
    world_seed: int
    min_tree_spacing: float
    base_scale: float
    scale_variation: float
    position_jitter: float
    max_rotation: float

    def __init__(self,
        chunk_size: int = common.CHUNK_SIZE,
        view_distance: int = common.VIEW_DISTANCE,
        noise_scale: float = common.NOISE_SCALE,
        tree_threshold: float = common.TREE_THRESHOLD,
        world_seed: int = common.WORLD_SEED,
        min_tree_spacing: float = common.MIN_TREE_SPACING,
        base_scale: float = common.BASE_SCALE,
        scale_variation: float = common.SCALE_VARIATION,
        position_jitter: float = common.POSITION_JITTER,
        max_rotation: float = common.MAX_ROTATION,
    ) -> None:
        self.chunk_size = chunk_size
        self.view_distance = view_distance
        self.noise_scale = noise_scale
        self.tree_threshold = tree_threshold
        self.world_seed = world_seed
        self.min_tree_spacing = min_tree_spacing
        self.base_scale = base_scale
        self.scale_variation = scale_variation
        self.position_jitter = position_jitter
        self.max_rotation = max_rotation
        self.validate()

    def validate(self) -> None:
        if not isinstance(self.chunk_size, int) or isinstance(self.chunk_size, bool):
            raise ConfigurationError('chunk_size', self.chunk_size, 'must be an integer')
        if self.chunk_size <= 0:
            raise ConfigurationError('chunk_size', self.chunk_size, 'must be positive')
        if not isinstance(self.view_distance, int) or isinstance(self.view_distance, bool):
            raise ConfigurationError('view_distance', self.view_distance, 'must be an integer')
        if not isinstance(self.world_seed, int) or isinstance(self.world_seed, bool):
            raise ConfigurationError('world_seed', self.world_seed, 'must be an integer')
        if self.noise_scale < 0:
            raise ConfigurationError('noise_scale', self.noise_scale, 'must not be negative')
        if self.min_tree_spacing < 0:
            raise ConfigurationError('min_tree_spacing', self.min_tree_spacing, 'must not be negative')
        if self.base_scale <= 0:
            raise ConfigurationError('base_scale', self.base_scale, 'must be positive')
        if not 0 <= self.scale_variation < self.base_scale:
            raise ConfigurationError('scale_variation', self.scale_variation, 'must be in [0, base_scale)')
        if not 0 <= self.position_jitter < common.CELL_CENTER_OFFSET:
            raise ConfigurationError('position_jitter', self.position_jitter, 'must be in [0, 0.5)')
        if self.max_rotation < 0:
            raise ConfigurationError('max_rotation', self.max_rotation, 'must not be negative')

    def copy(self, **changes: Any) -> Self:
        values = {name: getattr(self, name) for name in type(self).__annotations__}
        values.update(changes)
        return type(self)(**values)

    def __repr__(self) -> str:
        return (
            f'<WorldConfig seed={self.world_seed} chunk_size={self.chunk_size} '
            f'view_distance={self.view_distance}>'
        )
