VERSION_DISPLAY_NAME = '0.1.0'

CHUNK_SIZE = 32
VIEW_DISTANCE = 4

NOISE_SCALE = 0.08
TREE_THRESHOLD = 0.6
WORLD_SEED = 42
MIN_TREE_SPACING = 2.0

BASE_SCALE = 1.0
SCALE_VARIATION = 0.3
POSITION_JITTER = 0.2 # Must stay below half a cell so trees never leave their cell
MAX_ROTATION = 360.0

CELL_CENTER_OFFSET = 0.5
