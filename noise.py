#
# Vectorised noise samplers for region selection and cave carving.
#
# The N-D simplex noise follows the rank-ordering method of Stefan Gustavson's
# 2012 public domain simplex noise, evaluated over numpy coordinate arrays.
#
# Every sampler works on an (n, N) array of coordinates and returns n values
# in [-1, 1]. Samplers are immutable after construction, so one instance can
# be shared by any number of threads.
#
import enum
import itertools

import numpy


# The reference permutation, used when no seed is given.
p = numpy.array( [151,160,137,91,90,15,
    131,13,201,95,96,53,194,233,7,225,140,36,103,30,69,142,8,99,37,240,21,10,23,
    190, 6,148,247,120,234,75,0,26,197,62,94,252,219,203,117,35,11,32,57,177,33,
    88,237,149,56,87,174,20,125,136,171,168, 68,175,74,165,71,134,139,48,27,166,
    77,146,158,231,83,111,229,122,60,211,133,230,220,105,92,41,55,46,245,40,244,
    102,143,54, 65,25,63,161, 1,216,80,73,209,76,132,187,208, 89,18,169,200,196,
    135,130,116,188,159,86,164,100,109,198,173,186, 3,64,52,217,226,250,124,123,
    5,202,38,147,118,126,255,82,85,212,207,206,59,227,47,16,58,17,182,189,28,42,
    223,183,170,213,119,248,152, 2,44,154,163, 70,221,153,101,155,167, 43,172,9,
    129,22,39,253, 19,98,108,110,79,113,224,232,178,185, 112,104,218,246,97,228,
    251,34,242,193,238,210,144,12,191,179,162,241, 81,51,145,235,249,14,239,107,
    49,192,214, 31,181,199,106,157,184, 84,204,176,115,121,50,45,127, 4,150,254,
    138,236,205,93,222,114,67,29,24,72,243,141,128,195,78,66,215,61,156,180] )


def fastfloor(x):
    return numpy.array(numpy.floor(x), dtype=numpy.int64)


def _permutation(seed):
    """Doubled 512 entry permutation table, so lookups never need wrapping."""
    if seed is None:
        base = p
    else:
        rng = numpy.random.RandomState(int(seed) & 0xFFFFFFFF)
        base = rng.permutation(256)
    return numpy.concatenate([base, base]).astype(numpy.int64)


def _gradients(N):
    # Edge midpoints of the N-cube: every vector of -1/0/1 with at most one zero.
    grad = numpy.array(list(itertools.product((0, -1, 1), repeat=N))[1:])
    return grad[numpy.abs(grad).sum(-1) >= N - 1]


class DistanceFunction(enum.Enum):
    EUCLIDEAN = 'euclidean'
    MANHATTAN = 'manhattan'
    NATURAL = 'natural'


class SimplexNoise(object):
    """N-D simplex noise; coherent and continuous everywhere."""

    def __init__(self, seed=None):
        self.seed = seed
        self.perm0 = _permutation(seed)
        self._grads = {N: _gradients(N) for N in (2, 3)}

    def _gradients(self, N):
        if N in self._grads:
            return self._grads[N]
        return _gradients(N)

    def noise(self, Z):
        Z = numpy.asarray(Z, dtype=numpy.float64)
        N = Z.shape[-1] #number of dimensions
        N1 = N + 1 #corners of a simplex
        Fn = 1.0*(N1**0.5 - 1)/N
        Gn = 1.0*(N1 - N1**0.5)/N/N1

        # Skew the input space to find the simplex cell and its origin.
        s = Z.sum(-1) * Fn
        i = fastfloor(Z + s[:, numpy.newaxis])
        t = i.sum(-1) * Gn
        z0 = Z - (i - t[:, numpy.newaxis])
        # Wrap lattice coordinates to the permutation size so large inputs stay valid.
        i = numpy.mod(i, 256)

        # Magnitude ordering of the offsets decides which simplex we are in.
        rank = numpy.zeros(Z.shape)
        for l, k in itertools.combinations(range(N), 2):
            rank[:, k] += z0[:, k] >= z0[:, l]
            rank[:, l] += z0[:, k] < z0[:, l]

        b = numpy.arange(N1)[:, numpy.newaxis, numpy.newaxis]
        ind = rank >= N - b
        zk = z0 - ind + 1.0 * b * Gn

        indi = ind + i
        grad = self._gradients(N)
        gik = 0
        for x in range(N - 1, -1, -1):
            gik = self.perm0[indi[:, :, x] + gik]
        gik = gik % grad.shape[0]

        tk = 0.5 - (zk*zk).sum(-1)
        tp = tk >= 0
        tk = tp * tk * tk
        nk = tp * tk * tk * (grad[gik]*zk).sum(-1)

        return numpy.clip(nk.sum(0) * (2**6), -1.0, 1.0)

    def fractal(self, Z, octaves=1, gain=0.5, lacunarity=2.0):
        """Sum of octaves, normalised back into [-1, 1]."""
        Z = numpy.asarray(Z, dtype=numpy.float64)
        total = numpy.zeros(Z.shape[0])
        amp = 1.0
        norm = 0.0
        freq = 1.0
        for _ in range(max(1, octaves)):
            total += self.noise(Z * freq) * amp
            norm += amp
            amp *= gain
            freq *= lacunarity
        return total / norm


class CellularNoise(object):
    """2D cellular (Voronoi) noise returning the value of the nearest cell.

    Feature points sit one per lattice cell, jittered from the cell centre.
    Every point whose nearest feature is the same gets the same value, so the
    output is a patchwork of flat regions.
    """

    def __init__(self, seed=None, distance=DistanceFunction.NATURAL, jitter=0.45):
        self.seed = seed
        self.distance = distance
        self.jitter = jitter
        self.perm0 = _permutation(seed)
        rng = numpy.random.RandomState((int(seed) if seed is not None else 0) & 0xFFFFFFFF)
        self.cell_values = rng.uniform(-1.0, 1.0, 256)
        self.cell_offsets = rng.uniform(-1.0, 1.0, (256, 2))

    def _hash(self, cx, cz):
        return self.perm0[(cx & 255) + self.perm0[cz & 255]]

    def _distance(self, dx, dz):
        if self.distance is DistanceFunction.EUCLIDEAN:
            return dx*dx + dz*dz
        if self.distance is DistanceFunction.MANHATTAN:
            return numpy.abs(dx) + numpy.abs(dz)
        return numpy.abs(dx) + numpy.abs(dz) + (dx*dx + dz*dz)

    def noise(self, Z):
        Z = numpy.asarray(Z, dtype=numpy.float64)
        base = fastfloor(Z)
        best = numpy.full(Z.shape[0], numpy.inf)
        best_hash = numpy.zeros(Z.shape[0], dtype=numpy.int64)
        for dx in (-1, 0, 1):
            for dz in (-1, 0, 1):
                cx = base[:, 0] + dx
                cz = base[:, 1] + dz
                h = self._hash(cx, cz)
                fx = cx + 0.5 + self.cell_offsets[h, 0] * self.jitter
                fz = cz + 0.5 + self.cell_offsets[h, 1] * self.jitter
                d = self._distance(Z[:, 0] - fx, Z[:, 1] - fz)
                closer = d < best
                best = numpy.where(closer, d, best)
                best_hash = numpy.where(closer, h, best_hash)
        return self.cell_values[best_hash]
