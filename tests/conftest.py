import pytest

from evergrove.config import WorldConfig
from evergrove.placeables import RecordingPresenter


@pytest.fixture()
def small_config():
    return WorldConfig(
        chunk_size=4,
        view_distance=1,
        noise_scale=1.0,
        tree_threshold=0.5,
        world_seed=0,
        min_tree_spacing=3.0,
    )


@pytest.fixture()
def config():
    return WorldConfig(chunk_size=16, view_distance=1, world_seed=1234, tree_threshold=0.45)


@pytest.fixture()
def presenter():
    return RecordingPresenter()
