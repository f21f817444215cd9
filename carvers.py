'''
carvers.py -- carves cave and cavern columns out of a chunk.

The region compositor decides which carver handles each column; a carver only
decides, block by block, whether to turn rock into air or liquid. All carvers
share one entry point, CaveCarver.generate_column, and differ by kind.
'''
import collections

import numpy

import config
import noise
from config import CHUNK_SIZE, CHUNK_HEIGHT
from blocks import AIR, LAVA, BLOCK_CARVABLE
from regions import GeneratorKind, int32
from util import column_heights

NoiseProfile = collections.namedtuple('NoiseProfile', [
    'octaves', 'gain', 'frequency', 'num_generators', 'noise_threshold',
    'y_compression', 'xz_compression'])

KIND_SEED_OFFSETS = {
    GeneratorKind.CUBIC_CAVE: 1011,
    GeneratorKind.SIMPLEX_CAVE: 2022,
    GeneratorKind.LAVA_CAVERN: 3033,
    GeneratorKind.FLOORED_CAVERN: 4044,
    GeneratorKind.WATER_CAVERN: 5055,
}

# Cavern roofs close over this many blocks.
CAVERN_ROOF_TAPER = 4


def load_profiles(profiles=None):
    """Parse {kind name: tuple} settings into {GeneratorKind: NoiseProfile}."""
    if profiles is None:
        profiles = config.CARVER_PROFILES
    return {kind: NoiseProfile(*profiles[kind.value]) for kind in GeneratorKind}


class CaveCarver(object):
    """Noise-driven carver for one generator kind.

    Caves carve narrow tunnels along the zero crossings of several noise
    fields and close off as they approach the surface. Caverns carve wide
    chambers wherever the averaged field is high, and keep their roofs below
    the lowest surface of the chunk.
    """

    def __init__(self, kind, seed, profile, liquid_altitude=None):
        self.kind = kind
        self.profile = profile
        if liquid_altitude is None:
            liquid_altitude = config.LIQUID_ALTITUDE
        self.liquid_altitude = liquid_altitude
        base = int32(seed) + KIND_SEED_OFFSETS[kind]
        self.noises = [noise.SimplexNoise(seed=base + 17 * i) for i in range(max(1, profile.num_generators))]

    def _column_noise(self, real_x, real_z, ys):
        p = self.profile
        Z = numpy.empty((len(ys), 3))
        Z[:, 0] = real_x * p.xz_compression * p.frequency
        Z[:, 1] = ys * p.y_compression * p.frequency
        Z[:, 2] = real_z * p.xz_compression * p.frequency
        return numpy.array([n.fractal(Z, p.octaves, p.gain) for n in self.noises])

    def generate_column(self, chunk_x, chunk_z, chunk, local_x, local_z, bottom_y, top_y,
                        max_surface_height, min_surface_height, surface_cutoff, liquid_block,
                        blend_amplitude=None):
        bottom_y = max(int(bottom_y), 0)
        top_y = min(int(top_y), CHUNK_HEIGHT - 1)
        if self.kind.is_cavern:
            top_y = min(top_y, int(min_surface_height) - 1)
        if bottom_y > top_y:
            return

        ys = numpy.arange(bottom_y, top_y + 1)
        real_x = chunk_x * CHUNK_SIZE + local_x
        real_z = chunk_z * CHUNK_SIZE + local_z
        fields = self._column_noise(real_x, real_z, ys)
        thresh = numpy.full(len(ys), float(self.profile.noise_threshold))

        if self.kind.is_cavern:
            value = fields.mean(0)
            ramp = numpy.clip((ys - (top_y - CAVERN_ROOF_TAPER)) / float(CAVERN_ROOF_TAPER), 0.0, 1.0)
        else:
            value = (1.0 - numpy.abs(fields)).mean(0)
            if surface_cutoff > 0:
                ramp = numpy.clip((ys - (max_surface_height - surface_cutoff)) / float(surface_cutoff), 0.0, 1.0)
            else:
                ramp = numpy.zeros(len(ys))
        # Raise the threshold towards 1 near the edges so openings close off.
        thresh = thresh + (1.0 - thresh) * ramp

        if blend_amplitude is not None:
            value = value * blend_amplitude

        column = chunk[local_x, bottom_y:top_y + 1, local_z]
        carve = (value > thresh) & BLOCK_CARVABLE[column].astype(bool)
        flooded = ys <= self.liquid_altitude
        if self.kind is GeneratorKind.FLOORED_CAVERN:
            # Floored caverns keep solid ground where others would hold liquid.
            carve &= ~flooded
        column[carve & flooded] = liquid_block
        column[carve & ~flooded] = AIR


def build_carvers(seed, settings):
    profiles = load_profiles(settings.carver_profiles)
    return {kind: CaveCarver(kind, seed, profiles[kind], settings.liquid_altitude) for kind in GeneratorKind}


# -------- Whole-chunk generators --------

class ChunkGenerator(object):
    """Something that fills in the caves of a whole chunk."""

    def generate(self, chunk_x, chunk_z, chunk):
        raise NotImplementedError


class ChunkNoise2D(object):
    """2D simplex noise sampled over the columns of one chunk, indexed [x, z]."""

    def __init__(self, seed, step=CHUNK_SIZE, step_offset=0, scale=1, offset=0):
        self.noise = noise.SimplexNoise(seed=seed)
        self.seed = seed
        self.step = step
        self.scale = scale
        self.offset = offset
        X, Z = numpy.meshgrid(numpy.arange(CHUNK_SIZE), numpy.arange(CHUNK_SIZE), indexing='ij')
        self.Z = numpy.stack([X.ravel(), Z.ravel()], axis=-1) + step_offset

    def __call__(self, chunk_x, chunk_z):
        Z = self.Z + numpy.array([chunk_x * CHUNK_SIZE, chunk_z * CHUNK_SIZE])
        N = self.noise.noise(Z / self.step) * self.scale + self.offset
        return N.reshape((CHUNK_SIZE, CHUNK_SIZE))


class VanillaCaveGenerator(ChunkGenerator):
    """Default cave generator: height-banded caves from two 2D noise fields.

    Much cheaper than the region compositor since it never samples 3D noise;
    used for dimensions outside the whitelist and as the vanilla fallback.
    """

    def __init__(self, seed, liquid_altitude=None):
        seed = int32(seed)
        self.seed = seed
        self.cave_height_noise = ChunkNoise2D(seed=seed + 120, step=120.0, step_offset=3100, scale=1.0, offset=0.0)
        self.cave_density_noise = ChunkNoise2D(seed=seed + 121, step=60.0, step_offset=4100, scale=1.0, offset=0.0)
        self.cave_height_fine = ChunkNoise2D(seed=seed + 122, step=45.0, step_offset=5100, scale=0.6, offset=0.0)
        self.density = float(getattr(config, 'VANILLA_CAVE_DENSITY', 0.6))
        self.min_roof = float(getattr(config, 'VANILLA_MIN_ROOF', 20.0))
        self.liquid_altitude = config.LIQUID_ALTITUDE if liquid_altitude is None else liquid_altitude

    def generate(self, chunk_x, chunk_z, chunk):
        elevation = column_heights(chunk).astype(float)   # (X,Z)
        height_pref = self.cave_height_noise(chunk_x, chunk_z)
        height_fine = self.cave_height_fine(chunk_x, chunk_z)
        height01 = numpy.clip(0.5 + 0.5 * height_pref + 0.25 * height_fine, 0.0, 1.0)
        max_roof = CHUNK_HEIGHT - 6.0
        ground_cap = numpy.clip(elevation, self.min_roof, max_roof)

        roof_offset = 18.0 * height01  # ~6..16 blocks below surface
        roof = numpy.clip(ground_cap - roof_offset, self.min_roof, max_roof)

        density2d = 0.5 + 0.5 * self.cave_density_noise(chunk_x, chunk_z)  # 0..1 (X,Z)
        # Smooth density laterally to encourage wider, connected patches.
        density2d = (density2d +
                     numpy.roll(density2d, 1, 0) + numpy.roll(density2d, -1, 0) +
                     numpy.roll(density2d, 1, 1) + numpy.roll(density2d, -1, 1)) / 5.0
        depth = 4.0 + 12.0 * density2d                             # 4..16-ish
        floor = numpy.maximum(self.min_roof - 1.0, roof - depth)

        y_grid = numpy.arange(CHUNK_HEIGHT, dtype=float)[None, :, None]   # (1,Y,1)
        vertical_mask = (y_grid >= floor[:, None, :]) & (y_grid <= roof[:, None, :])
        below_surface = y_grid < (elevation[:, None, :] - 2.0)
        density_gate = (density2d > self.density)[:, None, :]
        carvable = BLOCK_CARVABLE[chunk].astype(bool)

        carve = vertical_mask & below_surface & density_gate & carvable

        # Small lateral dilation to connect nearby passages while respecting height masks.
        for _ in range(2):
            neighbor = numpy.zeros_like(carve, dtype=bool)
            neighbor[1:, :, :] |= carve[:-1, :, :]
            neighbor[:-1, :, :] |= carve[1:, :, :]
            neighbor[:, :, 1:] |= carve[:, :, :-1]
            neighbor[:, :, :-1] |= carve[:, :, 1:]
            carve |= neighbor & vertical_mask & below_surface & density_gate & carvable

        flooded = y_grid <= self.liquid_altitude
        chunk[carve & flooded] = LAVA
        chunk[carve & ~flooded] = AIR
