"""Unit tests for SimulationEngine — population, tick phases, diffusion, admin."""

from __future__ import annotations

import pytest

from oilsweep.simulation.boat import BoatStatus
from oilsweep.simulation.grid import MAX_GRID, PORT, Wind
from oilsweep.simulation.oil import ORIGIN_COLOR, OilCell, brighten, darken
from oilsweep.simulation.profiles import ScenarioProfile

pytestmark = pytest.mark.unit


def _profile(**kwargs) -> ScenarioProfile:
    """Quiet profile: every gate off and an empty sea unless overridden."""
    base = dict(key="test", name="Test", decay_rate=0, diffusion_rate=0, initial_oil=0)
    base.update(kwargs)
    return ScenarioProfile(**base)


def _seed_oil(engine, *cells: OilCell) -> None:
    engine._oil.extend(cells)


def _positions(engine) -> list[tuple[int, int]]:
    return [c.position for c in engine.oil_cells]


class TestPopulate:

    def test_single_boat_world(self, make_engine):
        engine = make_engine("single_boat")
        engine.populate()
        boats = engine.boats
        assert len(boats) == 1
        assert boats[0].position == PORT
        assert len(engine.oil_cells) == 30
        assert engine.wind is Wind.WEST
        assert engine.tick_count == 0

    def test_spill_is_contiguous(self, make_engine):
        engine = make_engine("single_boat")
        engine.populate()
        cells = engine.oil_cells
        for prev, cell in zip(cells, cells[1:]):
            assert abs(cell.x - prev.x) + abs(cell.y - prev.y) <= 1
        for cell in cells:
            assert 0 <= cell.x <= MAX_GRID and 0 <= cell.y <= MAX_GRID

    def test_repopulate_starts_over(self, make_engine):
        engine = make_engine("single_boat")
        engine.populate()
        engine.add_boat()
        engine.set_wind(Wind.NORTH)
        engine.populate()
        assert len(engine.boats) == 1
        assert len(engine.oil_cells) == 30
        assert engine.wind is Wind.WEST

    def test_manual_keeps_prepared_world(self, make_engine):
        engine = make_engine("manual")
        engine.add_boat()
        engine.add_oil_cell()
        engine.set_wind("north")
        engine.populate()
        assert len(engine.boats) == 1
        assert len(engine.oil_cells) == 1
        assert engine.wind is Wind.NORTH

    def test_settings_override_profile_defaults(self, make_engine):
        engine = make_engine("single_boat", decay_rate=7, initial_oil_cells=4, boat_battery_capacity=9)
        engine.populate()
        assert engine.decay_rate == 7
        assert engine.diffusion_rate == 50
        assert engine.rotation_rate == 15
        assert len(engine.oil_cells) == 4
        assert engine.boats[0].batt_cap == 9

    def test_populate_resets_gates(self, make_engine):
        engine = make_engine(_profile(spawn_rate=2, initial_oil=20))
        engine.populate()
        engine.tick()
        engine.populate()
        engine.tick()
        assert engine.boats == []
        engine.tick()
        assert len(engine.boats) == 1


class TestTick:

    def test_no_oil_means_done(self, make_engine):
        engine = make_engine("manual")
        engine.populate()
        assert engine.tick() is False
        assert engine.tick_count == 0

    def test_spawn_every_tick(self, make_engine):
        engine = make_engine(_profile(spawn_rate=1, initial_oil=20))
        engine.populate()
        for expected in range(1, 4):
            assert engine.tick() is True
            assert len(engine.boats) == expected
        assert engine.tick_count == 3

    def test_disabled_spawn_never_adds_boats(self, make_engine):
        engine = make_engine(_profile(initial_oil=20))
        engine.populate()
        for _ in range(10):
            engine.tick()
        assert engine.boats == []

    def test_decay_darkens_every_cell(self, make_engine):
        engine = make_engine(_profile(decay_rate=1, initial_oil=10))
        engine.populate()
        before = [c.color for c in engine.oil_cells]
        engine.tick()
        after = [c.color for c in engine.oil_cells]
        assert after == [darken(c) for c in before]

    def test_decay_rate_gates_darkening(self, make_engine):
        engine = make_engine(_profile(decay_rate=3, initial_oil=1))
        engine.populate()
        colors = []
        for _ in range(3):
            engine.tick()
            colors.append(engine.oil_cells[0].color)
        assert colors[0] == colors[1] == ORIGIN_COLOR
        assert colors[2] == darken(ORIGIN_COLOR)

    def test_rotation_picks_new_winds(self, make_engine):
        engine = make_engine(_profile(rotation_rate=1, initial_oil=1))
        engine.populate()
        seen = set()
        for _ in range(60):
            engine.tick()
            seen.add(engine.wind)
        assert seen <= set(Wind)
        assert len(seen) >= 3

    def test_wind_fixed_without_rotation(self, make_engine):
        engine = make_engine(_profile(initial_oil=1, initial_wind=Wind.EAST))
        engine.populate()
        for _ in range(30):
            engine.tick()
        assert engine.wind is Wind.EAST

    def test_boats_clean_sequentially(self, make_engine):
        engine = make_engine(_profile())
        engine.add_boat()
        engine.add_boat()
        _seed_oil(engine, OilCell(*PORT))
        assert engine.tick() is True
        boats = engine.boats
        assert sorted(b.load_used for b in boats) == [0, 1]
        assert engine.oil_cells == []
        assert engine.tick() is False

    def test_boat_eventually_cleans_spill(self, make_engine):
        engine = make_engine(_profile(initial_boats=1, initial_oil=5))
        engine.populate()
        for _ in range(1000):
            if not engine.tick():
                break
        assert engine.oil_cells == []
        assert engine.boats[0].load_used == 5


class TestDiffusion:

    def _engine(self, make_engine, wind: Wind, *cells: OilCell):
        engine = make_engine(_profile(diffusion_rate=1, initial_wind=wind))
        _seed_oil(engine, *cells)
        return engine

    def test_west_grows_toward_larger_x(self, make_engine):
        engine = self._engine(
            make_engine, Wind.WEST, OilCell(5, 5), OilCell(7, 5), OilCell(6, 9)
        )
        engine.tick()
        assert _positions(engine)[3:] == [(8, 5), (7, 9)]

    def test_east_grows_toward_smaller_x(self, make_engine):
        engine = self._engine(make_engine, Wind.EAST, OilCell(5, 5), OilCell(7, 5))
        engine.tick()
        assert _positions(engine)[2:] == [(4, 5)]

    def test_north_grows_toward_larger_y(self, make_engine):
        engine = self._engine(
            make_engine, Wind.NORTH, OilCell(2, 3), OilCell(2, 8), OilCell(4, 1)
        )
        engine.tick()
        assert _positions(engine)[3:] == [(2, 9), (4, 2)]

    def test_south_grows_toward_smaller_y(self, make_engine):
        engine = self._engine(make_engine, Wind.SOUTH, OilCell(2, 3), OilCell(2, 8))
        engine.tick()
        assert _positions(engine)[2:] == [(2, 2)]

    def test_no_wind_no_spread(self, make_engine):
        engine = self._engine(make_engine, Wind.NONE, OilCell(2, 3), OilCell(2, 8))
        engine.tick()
        assert len(engine.oil_cells) == 2

    def test_new_cell_brighter_than_edge(self, make_engine):
        edge = OilCell(7, 5, (100, 0, 0))
        engine = self._engine(make_engine, Wind.WEST, OilCell(5, 5, (10, 0, 0)), edge)
        engine.tick()
        assert engine.oil_cells[-1].color == brighten((100, 0, 0))

    def test_tied_edges_keep_first_seen(self, make_engine):
        engine = self._engine(
            make_engine, Wind.WEST, OilCell(7, 5, (50, 0, 0)), OilCell(7, 5, (90, 0, 0))
        )
        engine.tick()
        assert engine.oil_cells[-1].color == brighten((50, 0, 0))

    def test_spread_clamped_at_grid_edge(self, make_engine):
        engine = self._engine(make_engine, Wind.WEST, OilCell(MAX_GRID, 3))
        engine.tick()
        assert _positions(engine) == [(MAX_GRID, 3), (MAX_GRID, 3)]

    def test_one_new_cell_per_row(self, make_engine):
        cells = [OilCell(x, y) for x in range(3) for y in range(4)]
        engine = self._engine(make_engine, Wind.WEST, *cells)
        engine.tick()
        assert len(engine.oil_cells) == len(cells) + 4


class TestAdministrative:

    def test_add_boat_at_port(self, make_engine):
        engine = make_engine("manual", boat_load_capacity=12)
        boat = engine.add_boat()
        assert boat.position == PORT
        assert boat.load_cap == 12
        assert engine.boats == [boat]

    def test_clear_boats(self, make_engine):
        engine = make_engine("single_boat")
        engine.populate()
        engine.clear_boats()
        assert engine.boats == []

    def test_add_oil_on_empty_sea(self, make_engine):
        engine = make_engine("manual")
        cell = engine.add_oil_cell()
        assert 0 <= cell.x < MAX_GRID and 0 <= cell.y < MAX_GRID
        assert cell.color == ORIGIN_COLOR

    def test_add_oil_next_to_newest(self, make_engine):
        engine = make_engine("manual")
        _seed_oil(engine, OilCell(50, 50, (40, 0, 0)))
        cell = engine.add_oil_cell()
        assert abs(cell.x - 50) + abs(cell.y - 50) == 1
        assert cell.color == brighten((40, 0, 0))

    def test_clear_oil(self, make_engine):
        engine = make_engine("single_boat")
        engine.populate()
        engine.clear_oil_cells()
        assert engine.oil_cells == []
        assert engine.tick() is False

    def test_set_wind(self, make_engine):
        engine = make_engine("manual")
        assert engine.set_wind("no") is Wind.NONE
        assert engine.wind is Wind.NONE
        with pytest.raises(ValueError):
            engine.set_wind("up")
        assert engine.wind is Wind.NONE

    def test_recall_boats(self, make_engine):
        engine = make_engine(_profile(initial_boats=2, initial_oil=3))
        engine.populate()
        for _ in range(3):
            engine.tick()
        engine.recall_boats()
        for boat in engine.boats:
            assert boat.position == PORT
            assert boat.batt_used == 0 and boat.load_used == 0
            assert boat.status is BoatStatus.MOVING

    def test_force_stop(self, make_engine):
        engine = make_engine(_profile(initial_boats=2, initial_oil=3))
        engine.populate()
        engine.tick()
        engine.force_stop()
        assert all(b.status is BoatStatus.STOPPED for b in engine.boats)

    def test_accessors_return_copies(self, make_engine):
        engine = make_engine("single_boat")
        engine.populate()
        engine.boats.clear()
        engine.oil_cells.clear()
        assert len(engine.boats) == 1
        assert len(engine.oil_cells) == 30


class TestSnapshot:

    def test_snapshot_shape(self, make_engine):
        engine = make_engine("auto_spawn")
        engine.populate()
        snap = engine.snapshot()
        assert snap["profile"] == "auto_spawn"
        assert snap["tick"] == 0
        assert snap["wind"] == "WEST"
        assert snap["rates"] == {"spawn": 50, "decay": 20, "diffusion": 50, "rotation": 0}
        assert len(snap["boats"]) == 1
        assert len(snap["oil"]) == 30
