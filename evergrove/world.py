import enum
import math
from typing import TYPE_CHECKING, Any, Iterator, Optional

from evergrove.abc import ChunkPos, GridPos, Vec3, WorldPos
from evergrove.errors import ConfigurationError
from evergrove.utils import autoslots

if TYPE_CHECKING:
    from evergrove.abc import TerrainPolicy


class TerrainKind(enum.IntEnum):
    OPEN = 0
    IMPASSABLE = 1
    FAST_PATH = 2


PLACEABLE_TERRAIN = TerrainKind.OPEN


def chunk_coords(x: float, z: float, side_length: int) -> ChunkPos:
    return math.floor(x) // side_length, math.floor(z) // side_length


def chunk_origin(chunk: ChunkPos, side_length: int) -> tuple[int, int]:
    return chunk[0] * side_length, chunk[1] * side_length


def grid_coords(x: float, z: float) -> GridPos:
    return math.floor(x), math.floor(z)


def default_terrain(x: int, z: int) -> TerrainKind:
    return TerrainKind.OPEN


@autoslots
class Cell:
    _grid_position: GridPos
    terrain_kind: TerrainKind
    occupant: Optional[Any]

    def __init__(self, grid_position: GridPos, terrain_kind: TerrainKind = TerrainKind.OPEN) -> None:
        self._grid_position = grid_position
        self.terrain_kind = terrain_kind
        self.occupant = None

    @property
    def grid_position(self) -> GridPos:
        return self._grid_position

    @property
    def world_position(self) -> Vec3:
        return float(self._grid_position[0]), 0.0, float(self._grid_position[1])

    @property
    def is_empty(self) -> bool:
        return self.occupant is None

    @property
    def is_placeable(self) -> bool:
        return self.is_empty and self.terrain_kind == PLACEABLE_TERRAIN

    def clear_occupant(self) -> Optional[Any]:
        occupant = self.occupant
        self.occupant = None
        return occupant

    def __repr__(self) -> str:
        return f'<Cell {self._grid_position} {self.terrain_kind.name} occupant={self.occupant!r}>'


@autoslots
class ChunkGrid:
    """
    A square of side_length * side_length cells, created all at once. Cells are
    indexed as cells[x][z] with local coordinates; the cell at local (x, z) has
    the global grid position (chunk_x * side_length + x, chunk_z * side_length + z).
    """
    chunk_coordinate: ChunkPos
    side_length: int
    cells: list[list[Cell]]

    def __init__(self,
        chunk_coordinate: ChunkPos,
        side_length: int,
        terrain_policy: Optional['TerrainPolicy'] = None,
    ) -> None:
        if side_length <= 0:
            raise ConfigurationError('side_length', side_length, 'must be positive')
        if terrain_policy is None:
            terrain_policy = default_terrain
        self.chunk_coordinate = chunk_coordinate
        self.side_length = side_length
        ox, oz = chunk_origin(chunk_coordinate, side_length)
        self.cells = [
            [
                Cell((ox + x, oz + z), TerrainKind(terrain_policy(ox + x, oz + z)))
                for z in range(side_length)
            ]
            for x in range(side_length)
        ]

    @property
    def origin(self) -> tuple[int, int]:
        return chunk_origin(self.chunk_coordinate, self.side_length)

    def get_cell(self, x: int, z: int) -> Optional[Cell]:
        if x < 0 or x >= self.side_length or z < 0 or z >= self.side_length:
            return None
        return self.cells[x][z]

    def get_cell_from_grid_position(self, x: int, z: int) -> Optional[Cell]:
        ox, oz = self.origin
        return self.get_cell(x - ox, z - oz)

    def get_cell_from_world_position(self, position: WorldPos) -> Optional[Cell]:
        x, z = grid_coords(position[0], position[2])
        return self.get_cell_from_grid_position(x, z)

    def contains_grid_position(self, x: int, z: int) -> bool:
        return self.get_cell_from_grid_position(x, z) is not None

    def iter_cells(self) -> Iterator[Cell]:
        # x-major: all of column x = 0 first, then x = 1, and so on
        for column in self.cells:
            yield from column

    def occupied_cells(self) -> list[Cell]:
        return [cell for cell in self.iter_cells() if not cell.is_empty]

    def __repr__(self) -> str:
        return f'<ChunkGrid {self.chunk_coordinate} side_length={self.side_length}>'
