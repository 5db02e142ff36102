import logging
import time
from typing import TYPE_CHECKING, Any, Optional

from evergrove.abc import ChunkPos, WorldPos
from evergrove.config import WorldConfig
from evergrove.errors import ConfigurationError
from evergrove.utils import autoslots
from evergrove.world import Cell, ChunkGrid, chunk_coords, chunk_origin
from evergrove.world_gen.core import WorldGenerator

if TYPE_CHECKING:
    from evergrove.abc import ChunkPresenter, TerrainPolicy


def required_chunks(center: ChunkPos, view_distance: int) -> set[ChunkPos]:
    if view_distance < 0:
        return set()
    cx, cz = center
    radius_sq = view_distance * view_distance
    return {
        (cx + dx, cz + dz)
        for dx in range(-view_distance, view_distance + 1)
        for dz in range(-view_distance, view_distance + 1)
        if dx * dx + dz * dz <= radius_sq
    }


def chunk_distance_sq(a: ChunkPos, b: ChunkPos) -> int:
    return (a[0] - b[0]) * (a[0] - b[0]) + (a[1] - b[1]) * (a[1] - b[1])


@autoslots
class ActiveChunk:
    grid: ChunkGrid
    handle: Any
    placed: list[Any]

    def __init__(self, grid: ChunkGrid, handle: Any, placed: list[Any]) -> None:
        self.grid = grid
        self.handle = handle
        self.placed = placed

    def live_objects(self) -> list[Any]:
        # Placed objects that have removed themselves stay listed until the chunk is released
        return [obj for obj in self.placed if not getattr(obj, 'removed', False)]

    def __repr__(self) -> str:
        return f'<ActiveChunk {self.grid.chunk_coordinate} placed={len(self.live_objects())}>'


@autoslots
class ChunkUpdate:
    center: Optional[ChunkPos]
    created: list[ChunkPos]
    destroyed: list[ChunkPos]

    def __init__(self,
        center: Optional[ChunkPos] = None,
        created: Optional[list[ChunkPos]] = None,
        destroyed: Optional[list[ChunkPos]] = None,
    ) -> None:
        self.center = center
        self.created = [] if created is None else created
        self.destroyed = [] if destroyed is None else destroyed

    def __bool__(self) -> bool:
        return self.center is not None

    def __repr__(self) -> str:
        return f'<ChunkUpdate center={self.center} created={len(self.created)} destroyed={len(self.destroyed)}>'


@autoslots
class ChunkManager:
    """
    Keeps the active chunks in step with a single observer.

    Work only happens when the observer crosses into another chunk. Then every
    chunk within view_distance (a disc, measured in chunks) that is not active
    yet is built, handed to the presenter and populated, and every active
    chunk outside the disc is released. Both passes finish before
    on_observer_moved returns, so callers never see a half-built chunk.

    Movement updates must be serialized by the caller; a nested call from a
    collaborator callback raises RuntimeError.
    """
    config: WorldConfig
    generator: WorldGenerator
    presenter: Optional['ChunkPresenter']
    parent: Any
    terrain_policy: Optional['TerrainPolicy']

    active: dict[ChunkPos, ActiveChunk]
    last_observer_chunk: Optional[ChunkPos]
    total_created: int
    total_destroyed: int
    last_update_seconds: float
    _updating: bool

    def __init__(self,
        config: WorldConfig,
        generator: Optional[WorldGenerator] = None,
        presenter: Optional['ChunkPresenter'] = None,
        parent: Any = None,
        terrain_policy: Optional['TerrainPolicy'] = None,
    ) -> None:
        # WorldConfig is mutable, so it may no longer hold what validate() checked
        if config.chunk_size <= 0:
            raise ConfigurationError('chunk_size', config.chunk_size, 'must be positive')
        self.config = config
        self.generator = WorldGenerator(config) if generator is None else generator
        self.presenter = presenter
        self.parent = parent
        self.terrain_policy = terrain_policy
        self.active = {}
        self.last_observer_chunk = None
        self.total_created = 0
        self.total_destroyed = 0
        self.last_update_seconds = 0.0
        self._updating = False

    @property
    def side_length(self) -> int:
        return self.config.chunk_size

    def chunk_coords(self, x: float, z: float) -> ChunkPos:
        return chunk_coords(x, z, self.config.chunk_size)

    def chunk_origin(self, chunk: ChunkPos) -> tuple[int, int]:
        return chunk_origin(chunk, self.config.chunk_size)

    def required_chunks(self, center: ChunkPos) -> set[ChunkPos]:
        return required_chunks(center, self.config.view_distance)

    def on_observer_moved(self, position: WorldPos) -> ChunkUpdate:
        if self._updating:
            raise RuntimeError('on_observer_moved is not re-entrant')
        current = self.chunk_coords(position[0], position[2])
        if current == self.last_observer_chunk:
            return ChunkUpdate()
        self._updating = True
        try:
            start = time.perf_counter()
            update = self._update_chunks(current)
            end = time.perf_counter()
        except BaseException:
            # No center after a failed update, so the next move diffs from scratch
            self.last_observer_chunk = None
            raise
        finally:
            self._updating = False
        self.last_update_seconds = end - start
        logging.debug(
            'Observer entered chunk %s: loaded %i, unloaded %i chunks in %f seconds',
            current, len(update.created), len(update.destroyed), end - start
        )
        return update

    def _update_chunks(self, current: ChunkPos) -> ChunkUpdate:
        self.last_observer_chunk = current
        required = self.required_chunks(current)
        update = ChunkUpdate(current)
        distance = lambda c: chunk_distance_sq(c, current)
        for chunk in sorted(required.difference(self.active), key=distance):
            self.active[chunk] = self._spawn_chunk(chunk)
            self.total_created += 1
            update.created.append(chunk)
        for chunk in sorted(set(self.active).difference(required), key=distance, reverse=True):
            self._release_chunk(self.active.pop(chunk))
            self.total_destroyed += 1
            update.destroyed.append(chunk)
        return update

    def _spawn_chunk(self, chunk: ChunkPos) -> ActiveChunk:
        grid = ChunkGrid(chunk, self.config.chunk_size, self.terrain_policy)
        handle = None
        if self.presenter is not None:
            handle = self.presenter.build(grid, self.parent)
        try:
            placed = self.generator.generate_chunk(grid, handle)
        except Exception:
            if self.presenter is not None:
                self.presenter.destroy(handle)
            raise
        return ActiveChunk(grid, handle, placed)

    def _release_chunk(self, chunk: ActiveChunk) -> None:
        if self.presenter is not None:
            self.presenter.destroy(chunk.handle)

    def clear(self) -> None:
        if self._updating:
            raise RuntimeError('Cannot clear chunks during an update')
        for chunk in list(self.active):
            self._release_chunk(self.active.pop(chunk))
            self.total_destroyed += 1
        self.last_observer_chunk = None

    def is_chunk_active(self, chunk: ChunkPos) -> bool:
        return chunk in self.active

    def get_chunk_or_none(self, chunk: ChunkPos) -> Optional[ChunkGrid]:
        active = self.active.get(chunk)
        if active is None:
            return None
        return active.grid

    def get_cell_at_world_position(self, position: WorldPos) -> Optional[Cell]:
        grid = self.get_chunk_or_none(self.chunk_coords(position[0], position[2]))
        if grid is None:
            return None
        return grid.get_cell_from_world_position(position)

    def diagnostics_snapshot(self) -> dict[str, int]:
        return {
            'active_chunks': len(self.active),
            'placed_objects': sum(len(chunk.live_objects()) for chunk in self.active.values()),
            'occupied_cells': sum(len(chunk.grid.occupied_cells()) for chunk in self.active.values()),
            'total_created': self.total_created,
            'total_destroyed': self.total_destroyed,
        }

    def __repr__(self) -> str:
        return f'<ChunkManager center={self.last_observer_chunk} len(active)={len(self.active)}>'
