import logging
import math
import sys
import threading
import time
from datetime import timedelta
from typing import Callable, Iterator, TypeVar

import colorama
import humanize

from evergrove import common
from evergrove.config import WorldConfig
from evergrove.errors import ConfigurationError
from evergrove.placeables import RecordingPresenter
from evergrove.streaming import ChunkManager
from evergrove.utils import get_opt, init_logger, mean
from evergrove.world_gen.core import WorldGenerator

_T = TypeVar('_T')

DEFAULT_STEPS = 600
DEFAULT_SPEED = 1.5
WANDER_PERIOD = 40


def opt_or_default(opt: str, convert: Callable[[str], _T], default: _T) -> _T:
    try:
        value = get_opt(opt)
    except (ValueError, IndexError):
        return default
    return convert(value)


def observer_path(steps: int, speed: float) -> Iterator[tuple[float, float, float]]:
    # Heads east while drifting north and south, so chunks are entered from every side
    for step in range(steps):
        x = step * speed
        z = math.sin(step / WANDER_PERIOD) * speed * WANDER_PERIOD
        yield (x, 0.0, z)


def config_from_argv() -> WorldConfig:
    return WorldConfig(
        chunk_size=opt_or_default('--chunk-size', int, common.CHUNK_SIZE),
        view_distance=opt_or_default('--view-distance', int, common.VIEW_DISTANCE),
        noise_scale=opt_or_default('--noise-scale', float, common.NOISE_SCALE),
        tree_threshold=opt_or_default('--threshold', float, common.TREE_THRESHOLD),
        world_seed=opt_or_default('--seed', int, common.WORLD_SEED),
        min_tree_spacing=opt_or_default('--spacing', float, common.MIN_TREE_SPACING),
    )


def run(config: WorldConfig, steps: int, speed: float) -> ChunkManager:
    presenter = RecordingPresenter()
    manager = ChunkManager(config, WorldGenerator(config), presenter)
    logging.info('Streaming world with seed %i (%r)', config.world_seed, config)
    update_times: list[float] = []
    start = time.perf_counter()
    for position in observer_path(steps, speed):
        update = manager.on_observer_moved(position)
        if update:
            update_times.append(manager.last_update_seconds)
            logging.info(
                'Entered chunk %s (+%i/-%i chunks)', update.center, len(update.created), len(update.destroyed)
            )
    end = time.perf_counter()
    snapshot = manager.diagnostics_snapshot()
    logging.info(
        'Walked %s steps in %s, crossing %s chunk borders',
        humanize.intcomma(steps), humanize.precisedelta(timedelta(seconds=end - start), minimum_unit='milliseconds'),
        humanize.intcomma(len(update_times)),
    )
    logging.info(
        'Generated %s chunks, released %s, %s trees currently placed (mean update %.2f ms)',
        humanize.intcomma(snapshot['total_created']), humanize.intcomma(snapshot['total_destroyed']),
        humanize.intcomma(snapshot['placed_objects']), mean(update_times) * 1000,
    )
    manager.clear()
    return manager


def main() -> None:
    threading.current_thread().name = 'WorldThread'
    init_logger('world.log')
    with colorama.colorama_text():
        logging.info('Evergrove %s', common.VERSION_DISPLAY_NAME)
        try:
            config = config_from_argv()
            steps = opt_or_default('--steps', int, DEFAULT_STEPS)
            speed = opt_or_default('--speed', float, DEFAULT_SPEED)
        except ConfigurationError as e:
            logging.critical('%s', e)
            sys.exit(1)
        except ValueError as e:
            logging.critical('Invalid command-line argument: %s', e)
            sys.exit(1)
        try:
            run(config, steps, speed)
        except KeyboardInterrupt:
            logging.info('Closing due to keyboard interrupt.')


if __name__ == '__main__':
    main()
