'''
preview.py -- render the cave/cavern region layout of a world as a PNG.

    python preview.py --seed 1234 --size 256 --scale 4 --out regions.png

Hue shows the cave generator, brightness the cavern generator, a blue tint
marks water regions and boundary smoothing bands are drawn lighter.
'''
import argparse
import time

import numpy
from PIL import Image

import logutil
from regions import GeneratorKind, LiquidKind, WATER_SENTINEL
from mapgen import WorldContext
from settings import CaveSettings

CAVE_COLORS = {
    None: (60, 60, 60),
    GeneratorKind.CUBIC_CAVE: (170, 120, 70),
    GeneratorKind.SIMPLEX_CAVE: (90, 150, 90),
}
CAVERN_SHADE = {
    None: 0.6,
    GeneratorKind.CUBIC_CAVE: 0.8,
    GeneratorKind.SIMPLEX_CAVE: 0.8,
    GeneratorKind.LAVA_CAVERN: 1.0,
    GeneratorKind.WATER_CAVERN: 1.0,
    GeneratorKind.FLOORED_CAVERN: 0.45,
}
WATER_TINT = numpy.array([40, 90, 200])


def region_map(context, origin_x, origin_z, size, scale):
    """RGB array (size, size, 3) of the region layout; rows run along z."""
    xs = origin_x + numpy.arange(size) * scale
    zs = origin_z + numpy.arange(size) * scale
    cave = context.cave_region.sample_grid(xs, zs)
    cavern = context.cavern_region.sample_grid(xs, zs)
    if context.settings.enable_water_regions:
        water = context.water_region.sample_grid(xs, zs)
    else:
        water = numpy.full(cave.shape, WATER_SENTINEL)

    image = numpy.zeros((size, size, 3), dtype=numpy.uint8)
    classify = context.classifier.classify
    for i in range(size):
        for j in range(size):
            decision = classify(float(cave[i, j]), float(cavern[i, j]), float(water[i, j]))
            color = numpy.array(CAVE_COLORS[decision.cave_generator], dtype=float)
            color *= CAVERN_SHADE[decision.cavern_generator]
            if decision.liquid is LiquidKind.WATER:
                color = 0.6 * color + 0.4 * WATER_TINT
            if decision.smoothing is not None:
                color = color + (255 - color) * 0.35 * decision.smoothing.amplitude
            image[j, i] = numpy.clip(color, 0, 255)
    return image


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--x', type=int, default=0, help='world x of the top-left pixel')
    parser.add_argument('--z', type=int, default=0, help='world z of the top-left pixel')
    parser.add_argument('--size', type=int, default=256, help='image width and height in pixels')
    parser.add_argument('--scale', type=int, default=4, help='blocks per pixel')
    parser.add_argument('--no-water', action='store_true', help='disable water regions')
    parser.add_argument('--out', default='regions.png')
    args = parser.parse_args(argv)

    seed = args.seed if args.seed is not None else int(time.time())
    settings = CaveSettings(enable_water_regions=not args.no_water)
    context = WorldContext(seed, settings)
    t = time.time()
    image = region_map(context, args.x, args.z, args.size, args.scale)
    Image.fromarray(image, 'RGB').save(args.out)
    logutil.log('PREVIEW', f"wrote {args.out} ({args.size}x{args.size}, seed {seed}) in {time.time() - t:.1f}s")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
