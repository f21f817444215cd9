import concurrent.futures
import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import mapgen
from blocks import BEDROCK, LAVA, STONE, WATER
from mapgen import ChunkOutcome, ChunkResult, WorldContext, generate_chunk, generate_chunks
from regions import GeneratorKind
from settings import CaveSettings
from util import empty_chunk


class FakeField(object):
    """Region field returning scripted values; the last value repeats."""

    def __init__(self, *values):
        self.values = values
        self.calls = 0

    def sample(self, x, z):
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


class RecordingCarver(object):

    def __init__(self, kind, log):
        self.kind = kind
        self.log = log

    def generate_column(self, chunk_x, chunk_z, chunk, local_x, local_z, bottom_y, top_y,
                        max_surface_height, min_surface_height, surface_cutoff, liquid_block,
                        blend_amplitude=None):
        self.log.append(dict(kind=self.kind, chunk=(chunk_x, chunk_z), column=(local_x, local_z),
                             bottom=bottom_y, top=top_y, max_surface=max_surface_height,
                             min_surface=min_surface_height, liquid=liquid_block,
                             amplitude=blend_amplitude))


class RecordingDefault(object):

    def __init__(self):
        self.calls = []

    def generate(self, chunk_x, chunk_z, chunk):
        self.calls.append((chunk_x, chunk_z))


def _context(cave=-0.5, cavern=0.0, water=0.5, seed=1, **overrides):
    context = WorldContext(seed, CaveSettings(**overrides), default_generator=RecordingDefault())
    context.cave_region = cave if isinstance(cave, FakeField) else FakeField(cave)
    context.cavern_region = cavern if isinstance(cavern, FakeField) else FakeField(cavern)
    context.water_region = water if isinstance(water, FakeField) else FakeField(water)
    context.carve_log = []
    context.carvers = {kind: RecordingCarver(kind, context.carve_log) for kind in GeneratorKind}
    return context


def _terrain(surface=64):
    chunk = empty_chunk()
    chunk[:, :surface + 1, :] = STONE
    return chunk


def test_dimension_outside_whitelist_uses_default_generator():
    context = _context()
    outcome = generate_chunk(context, 2, 3, _terrain(), dimension=1)
    assert outcome is ChunkOutcome.DEFAULT
    assert context.default_generator.calls == [(2, 3)]
    assert context.cave_region.calls == 0
    assert context.cavern_region.calls == 0
    assert context.carve_log == []


def test_global_whitelist_covers_every_dimension():
    context = _context(enable_global_whitelist=True)
    outcome = generate_chunk(context, 0, 0, _terrain(), dimension=-1)
    assert outcome is ChunkOutcome.BETTER_CAVES
    assert context.default_generator.calls == []
    assert context.cave_region.calls == 256


def test_every_column_is_dispatched_once():
    context = _context()
    generate_chunk(context, 0, 0, _terrain())
    columns = {entry['column'] for entry in context.carve_log}
    assert len(columns) == 256
    assert context.cave_region.calls == 256
    assert context.cavern_region.calls == 256


def test_water_disabled_never_samples_water_field():
    context = _context(cavern=-0.9, water=-0.9, enable_water_regions=False)
    generate_chunk(context, 0, 0, _terrain())
    assert context.water_region.calls == 0
    caverns = [e for e in context.carve_log if e['kind'].is_cavern]
    assert caverns
    assert all(e['kind'] is GeneratorKind.LAVA_CAVERN for e in caverns)
    assert all(e['liquid'] == LAVA for e in context.carve_log)


def test_water_region_selects_water_cavern():
    context = _context(cavern=-0.9, water=-0.9, enable_water_regions=True)
    generate_chunk(context, 0, 0, _terrain())
    assert context.water_region.calls == 256
    caverns = [e for e in context.carve_log if e['kind'].is_cavern]
    assert all(e['kind'] is GeneratorKind.WATER_CAVERN for e in caverns)
    assert all(e['liquid'] == WATER for e in context.carve_log)
    assert (caverns[0]['bottom'], caverns[0]['top']) == (context.settings.lava_cavern_bottom,
                                                         context.settings.lava_cavern_top)


def test_smoothing_pass_runs_before_cave_and_cavern():
    context = _context(cave=-0.5, cavern=-0.3, water=0.5)
    generate_chunk(context, 0, 0, _terrain())
    first = [e for e in context.carve_log if e['column'] == (0, 0)]
    assert [e['kind'] for e in first] == [GeneratorKind.LAVA_CAVERN, GeneratorKind.CUBIC_CAVE,
                                          GeneratorKind.CUBIC_CAVE]
    smoothing, cave, cavern = first
    assert smoothing['amplitude'] == pytest.approx(0.333, abs=1e-3)
    assert (smoothing['bottom'], smoothing['top']) == (1, 35)
    assert cave['amplitude'] is None
    assert (cave['bottom'], cave['top']) == (1, 64)
    # Between the cavern thresholds the cave generator runs as a single layer.
    assert (cavern['bottom'], cavern['top']) == (1, 1)


def test_smoothing_disabled():
    context = _context(cave=-0.5, cavern=-0.3, enable_boundary_smoothing=False)
    generate_chunk(context, 0, 0, _terrain())
    assert all(e['amplitude'] is None for e in context.carve_log)
    assert len(context.carve_log) == 2 * 256


def test_dead_zone_aborts_to_default_when_vanilla_caves_enabled():
    cave = FakeField(-0.9, -0.9, -0.9, 0.0)
    context = _context(cave=cave, cavern=0.0, enable_vanilla_caves=True,
                       cubic_cave_frequency='Rare', simplex_cave_frequency='Rare')
    outcome = generate_chunk(context, 4, 5, _terrain())
    assert outcome is ChunkOutcome.DEFAULT
    # Columns (0,0), (0,1), (1,0) run; (1,1) hits the dead zone.
    assert cave.calls == 4
    assert context.cavern_region.calls == 3
    assert context.default_generator.calls == [(4, 5)]
    assert {e['column'] for e in context.carve_log} == {(0, 0), (0, 1), (1, 0)}


def test_better_caves_reports_abort():
    context = _context(cave=0.0, enable_vanilla_caves=True,
                       cubic_cave_frequency='Rare', simplex_cave_frequency='Rare')
    assert context.better_caves.generate(0, 0, _terrain()) is ChunkResult.ABORT_TO_DEFAULT
    assert context.cave_region.calls == 1
    assert context.default_generator.calls == []


def test_dead_zone_without_vanilla_caves_leaves_caves_out():
    context = _context(cave=0.0, cavern=-0.9, cubic_cave_frequency='Rare',
                       simplex_cave_frequency='Rare')
    outcome = generate_chunk(context, 0, 0, _terrain())
    assert outcome is ChunkOutcome.BETTER_CAVES
    assert context.default_generator.calls == []
    kinds = {e['kind'] for e in context.carve_log}
    assert kinds == {GeneratorKind.LAVA_CAVERN}


def test_surface_bounds_are_shared_per_sub_chunk():
    chunk = _terrain(64)
    chunk[0, 65:101, 0] = STONE
    chunk[1, 60:, 1] = 0
    context = _context(cavern=-0.9, max_cave_altitude=80)
    generate_chunk(context, 0, 0, chunk)
    by_column = {}
    for e in context.carve_log:
        by_column.setdefault(e['column'], set()).add((e['max_surface'], e['min_surface']))
    for column in [(0, 0), (0, 1), (1, 0), (1, 1)]:
        assert by_column[column] == {(80, 59)}
    assert by_column[(2, 2)] == {(64, 64)}
    assert by_column[(15, 15)] == {(64, 64)}


def test_max_cave_altitude_clamps_surface():
    context = _context(max_cave_altitude=50)
    generate_chunk(context, 0, 0, _terrain(64))
    caves = [e for e in context.carve_log if e['top'] == e['max_surface']]
    assert caves
    assert {e['max_surface'] for e in context.carve_log} == {50}


def test_flatten_bedrock_before_carving():
    context = _context()
    chunk = _terrain(64)
    chunk[:, 3, :] = BEDROCK
    generate_chunk(context, 0, 0, chunk)
    assert np.all(chunk[:, 0, :] == BEDROCK)
    assert not np.any(chunk[:, 1:, :] == BEDROCK)


def test_bedrock_left_alone_when_flattening_disabled():
    context = _context(flatten_bedrock=False)
    chunk = _terrain(64)
    chunk[:, 3, :] = BEDROCK
    generate_chunk(context, 0, 0, chunk)
    assert np.all(chunk[:, 3, :] == BEDROCK)
    assert np.all(chunk[:, 0, :] == STONE)


def test_unknown_liquid_block_falls_back(capsys):
    context = WorldContext(1, CaveSettings(lava_block='Nope', water_block='Stone'))
    assert context.liquid_blocks[mapgen.LiquidKind.LAVA] == LAVA
    assert context.liquid_blocks[mapgen.LiquidKind.WATER] == WATER
    out = capsys.readouterr().out
    assert "Unable to use block 'Nope'" in out
    assert "Unable to use block 'Stone'" in out


# -------- Real generation --------

def test_generation_is_deterministic():
    a = _terrain(70)
    b = _terrain(70)
    assert generate_chunk(WorldContext(99), 3, -2, a) is ChunkOutcome.BETTER_CAVES
    assert generate_chunk(WorldContext(99), 3, -2, b) is ChunkOutcome.BETTER_CAVES
    assert np.array_equal(a, b)
    assert np.all(a[:, 0, :] == BEDROCK)
    # Nothing above the terrain is ever filled in.
    assert np.all(a[:, 71:, :] == 0)


def test_generate_chunks_matches_sequential():
    context = WorldContext(3)
    requests = [(0, 0, _terrain()), (1, 0, _terrain()), (-1, 2, _terrain()), (5, 5, _terrain(), 1)]
    expected_chunks = [_terrain() for _ in requests]
    expected = [generate_chunk(context, r[0], r[1], c, *r[3:]) for r, c in zip(requests, expected_chunks)]
    outcomes = generate_chunks(context, requests, workers=4)
    assert outcomes == expected
    assert outcomes[-1] is ChunkOutcome.DEFAULT
    for request, chunk in zip(requests, expected_chunks):
        assert np.array_equal(request[2], chunk)


# -------- Process-wide context --------

def test_lazy_context_is_built_once(monkeypatch):
    monkeypatch.setattr(mapgen, 'world_context', None)
    with concurrent.futures.ThreadPoolExecutor(max_workers=8) as executor:
        contexts = list(executor.map(lambda _: mapgen.get_world_context(seed=5), range(16)))
    assert all(c is contexts[0] for c in contexts)
    assert contexts[0].seed == 5
    assert mapgen.get_world_context(seed=6) is contexts[0]


def test_initialize_replaces_context(monkeypatch):
    monkeypatch.setattr(mapgen, 'world_context', None)
    first = mapgen.initialize_cave_generator(seed=7)
    assert mapgen.get_world_context() is first
    second = mapgen.initialize_cave_generator(seed=8, settings=CaveSettings(enable_water_regions=False))
    assert second is not first
    assert mapgen.get_world_context().seed == 8


def test_generate_cave_sector_uses_chunk_of_position(monkeypatch):
    context = _context(cavern=-0.9)
    monkeypatch.setattr(mapgen, 'world_context', context)
    outcome = mapgen.generate_cave_sector((40, 10, -5), _terrain())
    assert outcome is ChunkOutcome.BETTER_CAVES
    assert {e['chunk'] for e in context.carve_log} == {(2, -1)}
    outcome = mapgen.generate_cave_sector((40, 10, -5), _terrain(), dimension=1)
    assert outcome is ChunkOutcome.DEFAULT
    assert context.default_generator.calls == [(2, -1)]
