'''
regions.py -- splits the horizontal plane into cave and cavern regions.

Three independent noise fields are sampled per column: the cave region field
picks a cave generator, the cavern region field picks a cavern generator, and
the (optional) water region field picks the liquid. Each field is compared
against cutoffs derived from user-facing frequency settings.
'''
import collections
import enum

import numpy

import noise
from config import CHUNK_HEIGHT


class Frequency(enum.Enum):
    NONE = 'None'
    RARE = 'Rare'
    NORMAL = 'Normal'
    COMMON = 'Common'
    VERY_COMMON = 'VeryCommon'
    ALWAYS = 'Always'
    CUSTOM = 'Custom'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        key = str(value).replace('_', '').replace(' ', '').lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"unknown frequency {value!r}")


class RegionSize(enum.Enum):
    SMALL = 'Small'
    MEDIUM = 'Medium'
    LARGE = 'Large'
    EXTRA_LARGE = 'ExtraLarge'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        key = str(value).replace('_', '').replace(' ', '').lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"unknown region size {value!r}")


class RegionKind(enum.Enum):
    CELLULAR = 'cellular'
    COHERENT = 'coherent'


class GeneratorKind(enum.Enum):
    CUBIC_CAVE = 'cubic_cave'
    SIMPLEX_CAVE = 'simplex_cave'
    LAVA_CAVERN = 'lava_cavern'
    FLOORED_CAVERN = 'floored_cavern'
    WATER_CAVERN = 'water_cavern'

    @property
    def is_cavern(self):
        return self in (GeneratorKind.LAVA_CAVERN, GeneratorKind.FLOORED_CAVERN, GeneratorKind.WATER_CAVERN)


class LiquidKind(enum.Enum):
    LAVA = 'lava'
    WATER = 'water'


# Seed offsets keep the three fields independent for the same world seed.
CAVE_REGION_SEED_OFFSET = 222
CAVERN_REGION_SEED_OFFSET = 333
WATER_REGION_SEED_OFFSET = 444

CAVE_REGION_FREQUENCIES = {
    RegionSize.SMALL: 0.007,
    RegionSize.MEDIUM: 0.005,
    RegionSize.LARGE: 0.0032,
    RegionSize.EXTRA_LARGE: 0.001,
}
CAVERN_REGION_FREQUENCIES = {
    RegionSize.SMALL: 0.01,
    RegionSize.MEDIUM: 0.007,
    RegionSize.LARGE: 0.005,
    RegionSize.EXTRA_LARGE: 0.001,
}
WATER_REGION_FREQUENCY = 0.003
WATER_REGION_FREQUENCY_EXTRA_LARGE = 0.0005

# Stands in for the water field when water regions are off; above every cutoff.
WATER_SENTINEL = 99.0


def int32(value):
    """Truncate to a signed 32-bit integer, the way world seeds are narrowed."""
    value = int(value) & 0xFFFFFFFF
    return value - (1 << 32) if value >= (1 << 31) else value


class RegionField(object):
    """A seeded scalar field over (x, z) with values in [-1, 1]."""

    def __init__(self, seed, frequency, kind=RegionKind.COHERENT,
                 distance=noise.DistanceFunction.NATURAL):
        self.seed = seed
        self.frequency = frequency
        self.kind = kind
        if kind is RegionKind.CELLULAR:
            self.noise = noise.CellularNoise(seed=seed, distance=distance)
        else:
            self.noise = noise.SimplexNoise(seed=seed)

    def sample(self, x, z):
        Z = numpy.array([[x, z]], dtype=numpy.float64) * self.frequency
        return float(numpy.clip(self.noise.noise(Z)[0], -1.0, 1.0))

    def sample_grid(self, xs, zs):
        """Sample every (x, z) pair of the two coordinate vectors; result is indexed [x, z]."""
        X, Z = numpy.meshgrid(numpy.asarray(xs), numpy.asarray(zs), indexing='ij')
        coords = numpy.stack([X.ravel(), Z.ravel()], axis=-1) * self.frequency
        return numpy.clip(self.noise.noise(coords), -1.0, 1.0).reshape(X.shape)

    def __repr__(self):
        return f"RegionField(seed={self.seed}, frequency={self.frequency}, kind={self.kind.name})"


def cave_region_field(world_seed, size):
    return RegionField(int32(world_seed) + CAVE_REGION_SEED_OFFSET, CAVE_REGION_FREQUENCIES[size],
                       RegionKind.CELLULAR, noise.DistanceFunction.NATURAL)


def cavern_region_field(world_seed, size):
    return RegionField(int32(world_seed) + CAVERN_REGION_SEED_OFFSET, CAVERN_REGION_FREQUENCIES[size],
                       RegionKind.COHERENT)


def water_region_field(world_seed, cavern_size):
    frequency = WATER_REGION_FREQUENCY
    if cavern_size is RegionSize.EXTRA_LARGE:
        frequency = WATER_REGION_FREQUENCY_EXTRA_LARGE
    return RegionField(int32(world_seed) + WATER_REGION_SEED_OFFSET, frequency,
                       RegionKind.CELLULAR, noise.DistanceFunction.NATURAL)


# -------- Threshold tables --------

# Each axis: literal cutoffs per frequency, the row used for anything not
# listed, and the linear formula for a custom fraction f in [0, 1].
ThresholdTable = collections.namedtuple('ThresholdTable', ['name', 'levels', 'default', 'custom'])

CUBIC_CAVE_TABLE = ThresholdTable(
    'cubic_cave',
    {Frequency.NONE: -99.0, Frequency.RARE: -0.6, Frequency.COMMON: -0.2, Frequency.VERY_COMMON: 0.0},
    0.0,
    lambda f: -1.0 + f,
)
SIMPLEX_CAVE_TABLE = ThresholdTable(
    'simplex_cave',
    {Frequency.NONE: 99.0, Frequency.RARE: 0.6, Frequency.COMMON: 0.2, Frequency.VERY_COMMON: 0.0},
    0.0,
    lambda f: 1.0 - f,
)
LAVA_CAVERN_TABLE = ThresholdTable(
    'lava_cavern',
    {Frequency.NONE: -99.0, Frequency.RARE: -0.8, Frequency.COMMON: -0.3, Frequency.VERY_COMMON: -0.1},
    -0.4,
    lambda f: -1.0 + f,
)
FLOORED_CAVERN_TABLE = ThresholdTable(
    'floored_cavern',
    {Frequency.NONE: 99.0, Frequency.RARE: 0.8, Frequency.COMMON: 0.3, Frequency.VERY_COMMON: 0.1},
    0.4,
    lambda f: 1.0 - f,
)
WATER_REGION_TABLE = ThresholdTable(
    'water_region',
    {Frequency.RARE: -0.4, Frequency.COMMON: 0.1, Frequency.VERY_COMMON: 0.3, Frequency.ALWAYS: 99.0},
    -0.15,
    lambda f: 2.0 * f - 1.0,
)


def threshold(table, frequency, custom_fraction=None):
    """Map a frequency setting to a noise cutoff using one axis table."""
    frequency = Frequency.parse(frequency)
    if frequency is Frequency.CUSTOM:
        return table.custom(float(custom_fraction if custom_fraction is not None else 0.0))
    return table.levels.get(frequency, table.default)


class ThresholdSet(collections.namedtuple('ThresholdSet', [
        'cubic_cave', 'simplex_cave', 'lava_cavern', 'floored_cavern', 'water_region'])):
    __slots__ = ()

    @classmethod
    def from_settings(cls, settings):
        return cls(
            cubic_cave=threshold(CUBIC_CAVE_TABLE, settings.cubic_cave_frequency,
                                 settings.cubic_cave_custom_frequency),
            simplex_cave=threshold(SIMPLEX_CAVE_TABLE, settings.simplex_cave_frequency,
                                   settings.simplex_cave_custom_frequency),
            lava_cavern=threshold(LAVA_CAVERN_TABLE, settings.lava_cavern_frequency,
                                  settings.lava_cavern_custom_frequency),
            floored_cavern=threshold(FLOORED_CAVERN_TABLE, settings.floored_cavern_frequency,
                                     settings.floored_cavern_custom_frequency),
            water_region=threshold(WATER_REGION_TABLE, settings.water_region_frequency,
                                   settings.water_region_custom_frequency),
        )


# -------- Per-column decisions --------

SmoothingPass = collections.namedtuple('SmoothingPass', ['generator', 'bottom_y', 'top_y', 'amplitude'])


class RegionDecision(collections.namedtuple('RegionDecision', [
        'cave_generator', 'cave_bottom_y',
        'cavern_generator', 'cavern_bottom_y', 'cavern_top_y',
        'liquid', 'smoothing'])):
    __slots__ = ()

    @property
    def smooth_amplitude(self):
        return self.smoothing.amplitude if self.smoothing is not None else None


class BoundarySmoother(object):
    """Blend weights for columns just inside the cave/cavern boundary bands.

    The band [lava, lava + width] ramps from 1 at the lava threshold to 0 at
    its far edge, and [floored - width, floored] ramps from 0 to 1 at the
    floored threshold. Only one band applies to a column; the lava band wins
    when they overlap.
    """

    LAVA = 'lava'
    FLOORED = 'floored'

    def __init__(self, lava_threshold, floored_threshold, width=0.15):
        self.lava_threshold = lava_threshold
        self.floored_threshold = floored_threshold
        self.width = width

    def _ramp(self, cavern_noise, threshold):
        return min(1.0, max(0.0, 1.0 - abs(cavern_noise - threshold) / self.width))

    def amplitude(self, cavern_noise):
        """Return (band, amplitude in [0, 1]) for a column inside a band, else None."""
        if self.lava_threshold <= cavern_noise <= self.lava_threshold + self.width:
            return self.LAVA, self._ramp(cavern_noise, self.lava_threshold)
        if self.floored_threshold - self.width <= cavern_noise <= self.floored_threshold:
            return self.FLOORED, self._ramp(cavern_noise, self.floored_threshold)
        return None


class RegionClassifier(object):
    """Picks generators, bounds and liquid for a column from its region noise."""

    def __init__(self, thresholds, settings, smoother=None):
        self.thresholds = thresholds
        self.smoother = smoother
        self.enable_water_regions = settings.enable_water_regions
        self.cave_bottoms = {
            GeneratorKind.CUBIC_CAVE: settings.cubic_cave_bottom,
            GeneratorKind.SIMPLEX_CAVE: settings.simplex_cave_bottom,
        }
        self.lava_bounds = (settings.lava_cavern_bottom, settings.lava_cavern_top)
        self.floored_bounds = (settings.floored_cavern_bottom, settings.floored_cavern_top)

    def is_cave_dead_zone(self, cave_noise):
        return self.thresholds.cubic_cave <= cave_noise < self.thresholds.simplex_cave

    def cave(self, cave_noise):
        if cave_noise < self.thresholds.cubic_cave:
            kind = GeneratorKind.CUBIC_CAVE
        elif cave_noise >= self.thresholds.simplex_cave:
            kind = GeneratorKind.SIMPLEX_CAVE
        else:
            return None, CHUNK_HEIGHT - 1
        return kind, self.cave_bottoms[kind]

    def liquid(self, water_noise):
        if water_noise < self.thresholds.water_region:
            return LiquidKind.WATER
        return LiquidKind.LAVA

    def _flooded_cavern(self, liquid):
        if self.enable_water_regions and liquid is LiquidKind.WATER:
            return GeneratorKind.WATER_CAVERN
        return GeneratorKind.LAVA_CAVERN

    def smoothing(self, cavern_noise, liquid):
        if self.smoother is None:
            return None
        band = self.smoother.amplitude(cavern_noise)
        if band is None:
            return None
        which, amp = band
        if which == BoundarySmoother.LAVA:
            return SmoothingPass(self._flooded_cavern(liquid), self.lava_bounds[0], self.lava_bounds[1], amp)
        return SmoothingPass(GeneratorKind.FLOORED_CAVERN, self.floored_bounds[0], self.floored_bounds[1], amp)

    def classify(self, cave_noise, cavern_noise, water_noise=WATER_SENTINEL):
        cave_gen, cave_bottom = self.cave(cave_noise)
        liquid = self.liquid(water_noise)

        if cavern_noise < self.thresholds.lava_cavern:
            # Water caverns share the lava cavern's bounds.
            cavern_gen = self._flooded_cavern(liquid)
            cavern_bottom, cavern_top = self.lava_bounds
        elif cavern_noise <= self.thresholds.floored_cavern:
            # Between the cavern thresholds the cave generator keeps going as a single layer.
            cavern_gen = cave_gen
            cavern_bottom = cavern_top = cave_bottom
        else:
            cavern_gen = GeneratorKind.FLOORED_CAVERN
            cavern_bottom, cavern_top = self.floored_bounds

        return RegionDecision(cave_gen, cave_bottom, cavern_gen, cavern_bottom, cavern_top,
                              liquid, self.smoothing(cavern_noise, liquid))
