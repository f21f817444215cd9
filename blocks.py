import numpy

import logutil


class UnknownBlockError(KeyError):
    pass


class Block(object):
    name = None
    solid = True
    liquid = False
    # Carvers leave these blocks in place.
    carvable = True

class Stone(Block):
    name = 'Stone'

class Dirt(Block):
    name = 'Dirt'

class DirtWithGrass(Block):
    name = 'Grass'

class Sand(Block):
    name = 'Sand'

class Sandstone(Block):
    name = 'Sandstone'

class Gravel(Block):
    name = 'Gravel'

class CobbleStone(Block):
    name = 'Cobblestone'

class Plank(Block):
    name = 'Plank'

class Bedrock(Block):
    name = 'Bedrock'
    carvable = False

class Obsidian(Block):
    name = 'Obsidian'

class CoalOre(Block):
    name = 'Coal Ore'

class IronOre(Block):
    name = 'Iron Ore'

class GoldOre(Block):
    name = 'Gold Ore'

class DiamondOre(Block):
    name = 'Diamond Ore'

class Water(Block):
    name = 'Water'
    solid = False
    liquid = True
    carvable = False

class Lava(Block):
    name = 'Lava'
    solid = False
    liquid = True
    carvable = False

class Magma(Block):
    name = 'Magma'
    liquid = True
    carvable = False


# Order fixes the numeric ids; 0 is always air.
BLOCKS = [
    Stone,
    Dirt,
    DirtWithGrass,
    Sand,
    Sandstone,
    Gravel,
    CobbleStone,
    Plank,
    Bedrock,
    Obsidian,
    CoalOre,
    IronOre,
    GoldOre,
    DiamondOre,
    Water,
    Lava,
    Magma,
]

AIR = 0
BLOCK_ID = {}
BLOCK_ID['Air'] = AIR
for i, b in enumerate(BLOCKS):
    BLOCK_ID[b.name] = i + 1

BLOCK_NAME = {v: k for k, v in BLOCK_ID.items()}
BLOCK_SOLID = numpy.array([False] + [x.solid for x in BLOCKS], dtype=numpy.uint8)
BLOCK_LIQUID = numpy.array([False] + [x.liquid for x in BLOCKS], dtype=numpy.uint8)
BLOCK_CARVABLE = numpy.array([False] + [x.carvable for x in BLOCKS], dtype=numpy.uint8)

STONE = BLOCK_ID['Stone']
BEDROCK = BLOCK_ID['Bedrock']
WATER = BLOCK_ID['Water']
LAVA = BLOCK_ID['Lava']


def block_id(name):
    """Look up a block id by its registered name (case-insensitive)."""
    if name in BLOCK_ID:
        return BLOCK_ID[name]
    key = str(name).strip().lower()
    for block_name, bid in BLOCK_ID.items():
        if block_name.lower() == key:
            return bid
    raise UnknownBlockError(name)


def resolve_liquid_block(name, default):
    """Resolve a configured liquid block name, falling back to `default` with a warning.

    A name that is unknown, or names a block that is not a liquid, never fails
    generation; the stock block is used instead.
    """
    try:
        bid = block_id(name)
    except UnknownBlockError as e:
        logutil.log('BLOCKS', f"Unable to use block '{name}': unknown block {e}", level='WARN')
        logutil.log('BLOCKS', f"Using {BLOCK_NAME[default]} instead...", level='WARN')
        return default
    if not BLOCK_LIQUID[bid]:
        logutil.log('BLOCKS', f"Unable to use block '{name}': not a liquid", level='WARN')
        logutil.log('BLOCKS', f"Using {BLOCK_NAME[default]} instead...", level='WARN')
        return default
    logutil.log('BLOCKS', f"Using block '{name}' as liquid in cave generation...")
    return bid
