import logging
from typing import TYPE_CHECKING, Any, Optional

from evergrove.abc import ChunkPos, Vec3
from evergrove.utils import autoslots

if TYPE_CHECKING:
    from evergrove.world import Cell, ChunkGrid


@autoslots
class Transform:
    offset_x: float
    offset_z: float
    rotation: float # Degrees about the vertical axis
    scale: float

    def __init__(self, offset_x: float, offset_z: float, rotation: float, scale: float) -> None:
        self.offset_x = offset_x
        self.offset_z = offset_z
        self.rotation = rotation
        self.scale = scale

    def as_tuple(self) -> tuple[float, float, float, float]:
        return self.offset_x, self.offset_z, self.rotation, self.scale

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self) -> int:
        return hash(self.as_tuple())

    def __repr__(self) -> str:
        return f'Transform({self.offset_x}, {self.offset_z}, {self.rotation}, {self.scale})'


@autoslots
class Tree:
    position: Vec3
    transform: Transform
    cell: Optional['Cell']
    parent: Any

    def __init__(self, position: Vec3, transform: Transform, cell: 'Cell', parent: Any = None) -> None:
        self.position = position
        self.transform = transform
        self.cell = cell
        self.parent = parent

    @property
    def removed(self) -> bool:
        return self.cell is None

    def remove(self) -> None:
        if self.cell is None:
            return
        if self.cell.occupant is self:
            self.cell.clear_occupant()
        logging.debug('Removed tree at %s', self.cell.grid_position)
        self.cell = None

    def __repr__(self) -> str:
        x, _, z = self.position
        return f'<Tree x={x:.2f} z={z:.2f} rotation={self.transform.rotation:.1f} scale={self.transform.scale:.2f}>'


@autoslots
class ChunkHandle:
    chunk: ChunkPos
    children: list[Any]

    def __init__(self, chunk: ChunkPos) -> None:
        self.chunk = chunk
        self.children = []

    def __repr__(self) -> str:
        return f'<ChunkHandle {self.chunk} children={len(self.children)}>'


@autoslots
class RecordingPresenter:
    """
    Headless stand-in for a renderer. Every built chunk gets a ChunkHandle that
    collects the objects placed under it, and destroying the handle removes
    them, like destroying a parent node would in a scene graph.
    """
    handles: dict[ChunkPos, ChunkHandle]
    built: int
    destroyed: int

    def __init__(self) -> None:
        self.handles = {}
        self.built = 0
        self.destroyed = 0

    def build(self, grid: 'ChunkGrid', parent: Any) -> ChunkHandle:
        handle = ChunkHandle(grid.chunk_coordinate)
        self.handles[grid.chunk_coordinate] = handle
        self.built += 1
        return handle

    def destroy(self, handle: ChunkHandle) -> None:
        for child in handle.children:
            remove = getattr(child, 'remove', None)
            if remove is not None:
                remove()
        handle.children.clear()
        self.handles.pop(handle.chunk, None)
        self.destroyed += 1


def tree_factory(position: Vec3, transform: Transform, cell: 'Cell', parent: Any) -> Tree:
    tree = Tree(position, transform, cell, parent)
    if isinstance(parent, ChunkHandle):
        parent.children.append(tree)
    return tree
