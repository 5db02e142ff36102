from typing import TYPE_CHECKING, Any, Protocol, Sequence, Union

if TYPE_CHECKING:
    from evergrove.placeables import Transform
    from evergrove.world import Cell, ChunkGrid

ChunkPos = tuple[int, int]
GridPos = tuple[int, int]
Vec3 = tuple[float, float, float]
WorldPos = Union[Vec3, Sequence[float]]


class ChunkPresenter(Protocol):
    def build(self, grid: 'ChunkGrid', parent: Any) -> Any: ...
    def destroy(self, handle: Any) -> None: ...


class PlaceableFactory(Protocol):
    def __call__(self, position: Vec3, transform: 'Transform', cell: 'Cell', parent: Any) -> Any: ...


class TerrainPolicy(Protocol):
    def __call__(self, x: int, z: int) -> Any: ...


class NoiseSource(Protocol):
    def sample(self, x: float, z: float) -> float: ...
