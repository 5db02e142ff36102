from opensimplex import OpenSimplex

from evergrove.utils import autoslots


@autoslots
class SimplexNoise:
    """OpenSimplex noise rescaled from [-1, 1] to [0, 1]"""
    simplex: OpenSimplex

    def __init__(self, seed: int) -> None:
        self.simplex = OpenSimplex(seed)

    def sample(self, x: float, z: float) -> float:
        value = (self.simplex.noise2(x, z) + 1) / 2
        return min(max(value, 0.0), 1.0)
