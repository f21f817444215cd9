import numpy

from config import CHUNK_SIZE, CHUNK_HEIGHT, SUB_CHUNK_SIZE
from blocks import AIR, BEDROCK, STONE


def normalize(position):
    """ Accepts `position` of arbitrary precision and returns the block
    containing that position.

    Parameters
    ----------
    position : tuple of len 3

    Returns
    -------
    block_position : tuple of ints of len 3

    """
    x, y, z = position
    x, y, z = (int(round(x)), int(round(y)), int(round(z)))
    return (x, y, z)


def chunkize(position):
    """ Returns the (chunk_x, chunk_z) grid coordinates of the chunk that
    contains `position`.

    Parameters
    ----------
    position : tuple of len 3, in block space

    Returns
    -------
    chunk : tuple of len 2

    """
    x, y, z = normalize(position)
    return (x // CHUNK_SIZE, z // CHUNK_SIZE)


def empty_chunk():
    return numpy.zeros((CHUNK_SIZE, CHUNK_HEIGHT, CHUNK_SIZE), dtype='u2')


def column_heights(chunk):
    """Highest non-air y of every column, indexed [x, z]; -1 for empty columns."""
    filled = chunk != AIR
    any_filled = filled.any(axis=1)
    top_from_rev = numpy.argmax(filled[:, ::-1, :], axis=1)
    heights = (chunk.shape[1] - 1) - top_from_rev
    return numpy.where(any_filled, heights, -1)


def surface_altitude(chunk, x, z):
    filled = numpy.nonzero(chunk[x, :, z] != AIR)[0]
    return int(filled[-1]) if len(filled) else -1


def sub_chunk_surface_bounds(chunk, sub_x, sub_z):
    """(max, min) surface altitude over one SUB_CHUNK_SIZE x SUB_CHUNK_SIZE block of columns."""
    x0 = sub_x * SUB_CHUNK_SIZE
    z0 = sub_z * SUB_CHUNK_SIZE
    heights = column_heights(chunk[x0:x0 + SUB_CHUNK_SIZE, :, z0:z0 + SUB_CHUNK_SIZE])
    return int(heights.max()), int(heights.min())


def flatten_bedrock(chunk):
    """Leave bedrock only at y=0; stray bedrock above becomes stone."""
    upper = chunk[:, 1:, :]
    upper[upper == BEDROCK] = STONE
    chunk[:, 0, :] = BEDROCK
