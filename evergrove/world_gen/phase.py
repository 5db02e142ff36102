import abc
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from evergrove.world import ChunkGrid
    from evergrove.world_gen.core import WorldGenerator


class AbstractPhase(abc.ABC):
    generator: 'WorldGenerator'

    def __init__(self, generator: 'WorldGenerator') -> None:
        self.generator = generator

    @abc.abstractmethod
    def generate_chunk(self, grid: 'ChunkGrid', parent: Any = None) -> list[Any]:
        raise NotImplementedError
