'''
settings.py -- a validated snapshot of the cave generation config.

Values come from the `config` module unless overridden by keyword, e.g.
CaveSettings(enable_water_regions=False). Everything is validated here, once,
so chunk generation never has to check configuration again.
'''
import config
from regions import Frequency, RegionSize


class ConfigError(ValueError):
    pass


# keyword -> config attribute
FIELDS = {
    'enable_global_whitelist': 'ENABLE_GLOBAL_WHITELIST',
    'whitelisted_dimensions': 'WHITELISTED_DIMENSIONS',
    'flatten_bedrock': 'FLATTEN_BEDROCK',
    'max_cave_altitude': 'MAX_CAVE_ALTITUDE',
    'surface_cutoff': 'SURFACE_CUTOFF',
    'enable_vanilla_caves': 'ENABLE_VANILLA_CAVES',
    'cave_region_size': 'CAVE_REGION_SIZE',
    'cavern_region_size': 'CAVERN_REGION_SIZE',
    'cubic_cave_frequency': 'CUBIC_CAVE_FREQUENCY',
    'cubic_cave_custom_frequency': 'CUBIC_CAVE_CUSTOM_FREQUENCY',
    'cubic_cave_bottom': 'CUBIC_CAVE_BOTTOM',
    'simplex_cave_frequency': 'SIMPLEX_CAVE_FREQUENCY',
    'simplex_cave_custom_frequency': 'SIMPLEX_CAVE_CUSTOM_FREQUENCY',
    'simplex_cave_bottom': 'SIMPLEX_CAVE_BOTTOM',
    'lava_cavern_frequency': 'LAVA_CAVERN_FREQUENCY',
    'lava_cavern_custom_frequency': 'LAVA_CAVERN_CUSTOM_FREQUENCY',
    'lava_cavern_bottom': 'LAVA_CAVERN_BOTTOM',
    'lava_cavern_top': 'LAVA_CAVERN_TOP',
    'floored_cavern_frequency': 'FLOORED_CAVERN_FREQUENCY',
    'floored_cavern_custom_frequency': 'FLOORED_CAVERN_CUSTOM_FREQUENCY',
    'floored_cavern_bottom': 'FLOORED_CAVERN_BOTTOM',
    'floored_cavern_top': 'FLOORED_CAVERN_TOP',
    'enable_boundary_smoothing': 'ENABLE_BOUNDARY_SMOOTHING',
    'boundary_smoothing_width': 'BOUNDARY_SMOOTHING_WIDTH',
    'enable_water_regions': 'ENABLE_WATER_REGIONS',
    'water_region_frequency': 'WATER_REGION_FREQUENCY',
    'water_region_custom_frequency': 'WATER_REGION_CUSTOM_FREQUENCY',
    'lava_block': 'LAVA_BLOCK',
    'water_block': 'WATER_BLOCK',
    'liquid_altitude': 'LIQUID_ALTITUDE',
    'carver_profiles': 'CARVER_PROFILES',
}

FREQUENCY_FIELDS = ('cubic_cave', 'simplex_cave', 'lava_cavern', 'floored_cavern', 'water_region')


class CaveSettings(object):

    def __init__(self, **overrides):
        unknown = set(overrides) - set(FIELDS)
        if unknown:
            raise ConfigError(f"unknown cave settings: {', '.join(sorted(unknown))}")
        for key, attr in FIELDS.items():
            value = overrides[key] if key in overrides else getattr(config, attr)
            setattr(self, key, value)
        self._validate()

    def _validate(self):
        for name in FREQUENCY_FIELDS:
            try:
                setattr(self, name + '_frequency', Frequency.parse(getattr(self, name + '_frequency')))
            except ValueError as e:
                raise ConfigError(f"{name}_frequency: {e}") from e
            fraction = float(getattr(self, name + '_custom_frequency'))
            if not 0.0 <= fraction <= 1.0:
                raise ConfigError(f"{name}_custom_frequency must be in [0, 1], got {fraction}")
            setattr(self, name + '_custom_frequency', fraction)
        for name in ('cave_region_size', 'cavern_region_size'):
            try:
                setattr(self, name, RegionSize.parse(getattr(self, name)))
            except ValueError as e:
                raise ConfigError(f"{name}: {e}") from e

        if self.surface_cutoff < 0:
            raise ConfigError(f"surface_cutoff must not be negative, got {self.surface_cutoff}")
        if self.boundary_smoothing_width <= 0:
            raise ConfigError("boundary_smoothing_width must be positive")
        for name in ('lava_cavern', 'floored_cavern'):
            bottom = getattr(self, name + '_bottom')
            top = getattr(self, name + '_top')
            if bottom > top:
                raise ConfigError(f"{name} bottom ({bottom}) is above its top ({top})")
        self.whitelisted_dimensions = frozenset(self.whitelisted_dimensions)

    def __repr__(self):
        fields = ', '.join(f"{k}={getattr(self, k)!r}" for k in FIELDS if k != 'carver_profiles')
        return f"CaveSettings({fields})"
