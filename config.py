# Size of chunks used for cave generation.
CHUNK_SIZE = 16 #width and depth (x and z)
CHUNK_HEIGHT = 256 #height of world (y)
# Surface heights are measured once per SUB_CHUNK_SIZE x SUB_CHUNK_SIZE block of columns.
SUB_CHUNK_SIZE = 2

# Dimensions that get region-composited caves; everything else uses the default generator.
ENABLE_GLOBAL_WHITELIST = False
WHITELISTED_DIMENSIONS = (0,)

# Move all bedrock to y=0 before carving.
FLATTEN_BEDROCK = True

# Caves never carve above this altitude, whatever the local surface height.
MAX_CAVE_ALTITUDE = 128

# Depth below the surface over which caves close off.
SURFACE_CUTOFF = 10

# When True, columns between the cubic and simplex cave thresholds hand the
# whole chunk to the default generator instead of leaving it uncarved.
ENABLE_VANILLA_CAVES = False

# Region sizes: Small, Medium, Large, ExtraLarge
CAVE_REGION_SIZE = 'Medium'
CAVERN_REGION_SIZE = 'Medium'

# Frequencies: None, Rare, Normal, Common, VeryCommon, Custom (water also takes Always).
# Custom frequencies are fractions in [0, 1].
CUBIC_CAVE_FREQUENCY = 'VeryCommon'
CUBIC_CAVE_CUSTOM_FREQUENCY = 1.0
CUBIC_CAVE_BOTTOM = 1

SIMPLEX_CAVE_FREQUENCY = 'VeryCommon'
SIMPLEX_CAVE_CUSTOM_FREQUENCY = 1.0
SIMPLEX_CAVE_BOTTOM = 1

LAVA_CAVERN_FREQUENCY = 'Normal'
LAVA_CAVERN_CUSTOM_FREQUENCY = 0.6
LAVA_CAVERN_BOTTOM = 1
LAVA_CAVERN_TOP = 35

FLOORED_CAVERN_FREQUENCY = 'Normal'
FLOORED_CAVERN_CUSTOM_FREQUENCY = 0.6
FLOORED_CAVERN_BOTTOM = 1
FLOORED_CAVERN_TOP = 35

# Close off cavern edges with an extra blended carve near region boundaries.
ENABLE_BOUNDARY_SMOOTHING = True
# Half-width of the blend band, in noise units.
BOUNDARY_SMOOTHING_WIDTH = 0.15

# Water regions swap lava for water in some areas.
ENABLE_WATER_REGIONS = True
WATER_REGION_FREQUENCY = 'Normal'
WATER_REGION_CUSTOM_FREQUENCY = 0.5

# Liquid blocks by name; unknown names fall back to the stock Lava/Water blocks.
LAVA_BLOCK = 'Lava'
WATER_BLOCK = 'Water'
# Carved blocks at or below this y fill with liquid instead of air.
LIQUID_ALTITUDE = 10

# Per-carver noise settings:
# (octaves, gain, frequency, num_generators, noise_threshold, y_compression, xz_compression)
CARVER_PROFILES = {
    'cubic_cave': (1, 0.3, 0.03, 2, 0.92, 2.2, 0.9),
    'simplex_cave': (1, 0.3, 0.025, 2, 0.9, 2.2, 0.9),
    'lava_cavern': (1, 0.3, 0.02, 2, 0.3, 1.3, 0.7),
    'floored_cavern': (1, 0.3, 0.02, 2, 0.3, 1.3, 0.7),
    'water_cavern': (1, 0.3, 0.02, 2, 0.3, 1.3, 0.7),
}

# Default generator (used outside whitelisted dimensions and for vanilla fallback).
VANILLA_CAVE_DENSITY = 0.6  # columns above this density get caves
VANILLA_MIN_ROOF = 20.0

# Enable ANSI colors in logs.
LOG_COLOR = True

# Drop log lines below this level (DEBUG, INFO, WARN, ERROR).
LOG_LEVEL = 'INFO'

# Log per-chunk decisions (delegations to the default generator).
LOG_CAVES = False
