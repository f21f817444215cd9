'''
mapgen.py -- region-composited cave generation for whole chunks.

For every column of a chunk the cave, cavern and water region fields are
sampled, a RegionClassifier turns the samples into generator choices, and the
chosen carvers dig the column. Chunks outside whitelisted dimensions, and
chunks that hit a cave dead zone while vanilla caves are enabled, are handed
to the default generator instead.
'''
#std/external libs
import collections
import concurrent.futures
import enum
import threading
import time

#local libs
import logutil
from config import CHUNK_SIZE, SUB_CHUNK_SIZE
from blocks import LAVA, WATER, resolve_liquid_block
from carvers import build_carvers, ChunkGenerator, VanillaCaveGenerator
from regions import (BoundarySmoother, LiquidKind, RegionClassifier, ThresholdSet,
                     WATER_SENTINEL, cave_region_field, cavern_region_field, water_region_field)
from settings import CaveSettings
from util import chunkize, flatten_bedrock, sub_chunk_surface_bounds

SUB_CHUNKS = CHUNK_SIZE // SUB_CHUNK_SIZE


class ColumnResult(enum.Enum):
    CONTINUE = 'continue'
    ABORT_TO_DEFAULT = 'abort_to_default'


class ChunkResult(enum.Enum):
    DONE = 'done'
    ABORT_TO_DEFAULT = 'abort_to_default'


class ChunkOutcome(enum.Enum):
    BETTER_CAVES = 'better_caves'
    DEFAULT = 'default'


ColumnContext = collections.namedtuple('ColumnContext', [
    'world_x', 'world_z', 'local_x', 'local_z', 'max_surface_height', 'min_surface_height'])


class WorldContext(object):
    """Everything cave generation needs for one world, built once from its seed.

    Read-only after construction, so chunks can be generated from any thread.
    """

    def __init__(self, seed, settings=None, default_generator=None):
        if settings is None:
            settings = CaveSettings()
        self.seed = seed
        self.settings = settings

        self.thresholds = ThresholdSet.from_settings(settings)
        self.cave_region = cave_region_field(seed, settings.cave_region_size)
        self.cavern_region = cavern_region_field(seed, settings.cavern_region_size)
        self.water_region = water_region_field(seed, settings.cavern_region_size)

        smoother = None
        if settings.enable_boundary_smoothing:
            smoother = BoundarySmoother(self.thresholds.lava_cavern, self.thresholds.floored_cavern,
                                        settings.boundary_smoothing_width)
        self.classifier = RegionClassifier(self.thresholds, settings, smoother)

        self.liquid_blocks = {
            LiquidKind.LAVA: resolve_liquid_block(settings.lava_block, LAVA),
            LiquidKind.WATER: resolve_liquid_block(settings.water_block, WATER),
        }
        self.carvers = build_carvers(seed, settings)
        if default_generator is None:
            default_generator = VanillaCaveGenerator(seed, settings.liquid_altitude)
        self.default_generator = default_generator
        self.better_caves = BetterCaveGenerator(self)

        logutil.log('CAVES', f"world context ready: seed={seed} thresholds={tuple(round(t, 3) for t in self.thresholds)}")

    def is_whitelisted(self, dimension):
        return self.settings.enable_global_whitelist or dimension in self.settings.whitelisted_dimensions


def _carve(context, kind, chunk_x, chunk_z, chunk, column, bottom_y, top_y, liquid_block, amplitude=None):
    context.carvers[kind].generate_column(
        chunk_x, chunk_z, chunk, column.local_x, column.local_z, bottom_y, top_y,
        column.max_surface_height, column.min_surface_height, context.settings.surface_cutoff,
        liquid_block, amplitude)


def dispatch_column(context, chunk_x, chunk_z, chunk, column):
    """Classify one column and run its carvers: smoothing pass, then cave, then cavern."""
    settings = context.settings
    cave_noise = context.cave_region.sample(column.world_x, column.world_z)
    if settings.enable_vanilla_caves and context.classifier.is_cave_dead_zone(cave_noise):
        return ColumnResult.ABORT_TO_DEFAULT

    cavern_noise = context.cavern_region.sample(column.world_x, column.world_z)
    water_noise = WATER_SENTINEL
    if settings.enable_water_regions:
        water_noise = context.water_region.sample(column.world_x, column.world_z)

    decision = context.classifier.classify(cave_noise, cavern_noise, water_noise)
    liquid_block = context.liquid_blocks[decision.liquid]

    if decision.smoothing is not None:
        s = decision.smoothing
        _carve(context, s.generator, chunk_x, chunk_z, chunk, column, s.bottom_y, s.top_y,
               liquid_block, s.amplitude)
    if decision.cave_generator is not None:
        _carve(context, decision.cave_generator, chunk_x, chunk_z, chunk, column,
               decision.cave_bottom_y, column.max_surface_height, liquid_block)
    if decision.cavern_generator is not None:
        _carve(context, decision.cavern_generator, chunk_x, chunk_z, chunk, column,
               decision.cavern_bottom_y, decision.cavern_top_y, liquid_block)
    return ColumnResult.CONTINUE


class BetterCaveGenerator(ChunkGenerator):
    """Runs the column dispatcher over a chunk in 2x2 sub-chunks."""

    def __init__(self, context):
        self.context = context

    def generate(self, chunk_x, chunk_z, chunk):
        max_altitude = self.context.settings.max_cave_altitude
        for sub_x in range(SUB_CHUNKS):
            for sub_z in range(SUB_CHUNKS):
                # Surface height is measured once per sub-chunk, not per column.
                max_surface, min_surface = sub_chunk_surface_bounds(chunk, sub_x, sub_z)
                max_surface = min(max_surface, max_altitude)
                for offset_x in range(SUB_CHUNK_SIZE):
                    for offset_z in range(SUB_CHUNK_SIZE):
                        local_x = sub_x * SUB_CHUNK_SIZE + offset_x
                        local_z = sub_z * SUB_CHUNK_SIZE + offset_z
                        column = ColumnContext(chunk_x * CHUNK_SIZE + local_x, chunk_z * CHUNK_SIZE + local_z,
                                               local_x, local_z, max_surface, min_surface)
                        if dispatch_column(self.context, chunk_x, chunk_z, chunk, column) is ColumnResult.ABORT_TO_DEFAULT:
                            logutil.log('CHUNK', f"cave dead zone at column ({local_x}, {local_z})")
                            return ChunkResult.ABORT_TO_DEFAULT
        return ChunkResult.DONE


def generate_chunk(context, chunk_x, chunk_z, chunk, dimension=0):
    """Carve the caves of one chunk in place and report which generator did it."""
    logutil.set_chunk((chunk_x, chunk_z))
    try:
        if not context.is_whitelisted(dimension):
            logutil.log('CHUNK', f"dimension {dimension} not whitelisted, using default generator")
            context.default_generator.generate(chunk_x, chunk_z, chunk)
            return ChunkOutcome.DEFAULT

        if context.settings.flatten_bedrock:
            flatten_bedrock(chunk)

        if context.better_caves.generate(chunk_x, chunk_z, chunk) is ChunkResult.ABORT_TO_DEFAULT:
            context.default_generator.generate(chunk_x, chunk_z, chunk)
            return ChunkOutcome.DEFAULT
        return ChunkOutcome.BETTER_CAVES
    finally:
        logutil.set_chunk(None)


def generate_chunks(context, requests, workers=None):
    """Generate many chunks concurrently.

    `requests` holds (chunk_x, chunk_z, chunk) or (chunk_x, chunk_z, chunk,
    dimension) tuples; chunks must be distinct arrays. Outcomes come back in
    request order.
    """
    requests = list(requests)
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(generate_chunk, context, *request) for request in requests]
        return [f.result() for f in futures]


# -------- Process-wide context, created on the first chunk request --------

world_context = None
_world_context_lock = threading.Lock()


def initialize_cave_generator(seed=None, settings=None):
    global world_context
    if seed is None:
        seed = int(time.time())
    with _world_context_lock:
        world_context = WorldContext(seed, settings)
    return world_context


def get_world_context(seed=None, settings=None):
    global world_context
    if world_context is None:
        with _world_context_lock:
            if world_context is None:
                world_context = WorldContext(int(time.time()) if seed is None else seed, settings)
    return world_context


def generate_cave_sector(position, blocks, dimension=0):
    """Carve caves into the sector at block-space `position`, using the process-wide context."""
    chunk_x, chunk_z = chunkize(position)
    return generate_chunk(get_world_context(), chunk_x, chunk_z, blocks, dimension)
