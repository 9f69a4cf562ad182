"""Tests for fleet movement."""

import pytest

from space_war.engine.ledger import find_fleet, fleets_at, units_owned
from space_war.engine.movement import move_fleet, reset_movement
from space_war.errors import IllegalStateError, InvalidAdjacencyError, NotFoundError
from space_war.models import Fleet, GameState, Player, StarSystem, Unit, UnitType


def create_line_state():
    """Three systems in a line A - B - C plus an isolated D."""
    state = GameState(id="game-1", current_player_id="p1", round=1)
    state.systems = [
        StarSystem(id="A", name="Altair", owner_id="p1", resource_value=3,
                   connected_systems=["B"], has_shipyard=True),
        StarSystem(id="B", name="Bellatrix", owner_id=None, resource_value=1,
                   connected_systems=["A", "C"]),
        StarSystem(id="C", name="Capella", owner_id="p2", resource_value=3,
                   connected_systems=["B"], has_shipyard=True),
        StarSystem(id="D", name="Deneb", owner_id=None, resource_value=1),
    ]
    state.players = [
        Player(id="p1", display_name="Ada", resources=0),
        Player(id="p2", display_name="Bob", resources=0),
    ]
    state.fleets = [
        Fleet(
            id="p1-f001", owner_id="p1", location_system_id="A",
            units=[
                Unit(id="u-0001", type=UnitType.FIGHTER, movement_remaining=2),
                Unit(id="u-0002", type=UnitType.FIGHTER, movement_remaining=2),
                Unit(id="u-0003", type=UnitType.BATTLESHIP, movement_remaining=1),
            ],
        ),
    ]
    return state


def unit_ids_at(state, owner_id, system_id):
    fleet = find_fleet(state, owner_id, system_id)
    return sorted(u.id for u in fleet.units) if fleet else []


class TestResetMovement:
    def test_reset_restores_full_allowance(self):
        state = create_line_state()
        for unit in state.fleets[0].units:
            unit.movement_remaining = 0

        count = reset_movement(state, "p1")

        assert count == 3
        allowances = {u.id: u.movement_remaining for u in state.fleets[0].units}
        assert allowances == {"u-0001": 2, "u-0002": 2, "u-0003": 1}

    def test_reset_only_touches_own_units(self):
        state = create_line_state()
        state.fleets.append(
            Fleet(id="p2-f001", owner_id="p2", location_system_id="C",
                  units=[Unit(id="u-0009", type=UnitType.FIGHTER)])
        )
        reset_movement(state, "p1")
        assert find_fleet(state, "p2", "C").units[0].movement_remaining == 0


class TestMoveFleet:
    def test_move_conserves_units(self):
        state = create_line_state()
        before_source = len(find_fleet(state, "p1", "A").units)

        result = move_fleet(state, "p1", "A", "B", ["u-0001", "u-0003"])

        assert result.moved_unit_ids == ["u-0001", "u-0003"]
        assert len(find_fleet(state, "p1", "A").units) == before_source - 2
        assert unit_ids_at(state, "p1", "B") == ["u-0001", "u-0003"]
        assert unit_ids_at(state, "p1", "A") == ["u-0002"]
        assert units_owned(state, "p1") == 3

    def test_move_spends_one_point_per_hop(self):
        state = create_line_state()
        move_fleet(state, "p1", "A", "B", ["u-0001", "u-0003"])
        remaining = {u.id: u.movement_remaining for u in find_fleet(state, "p1", "B").units}
        assert remaining == {"u-0001": 1, "u-0003": 0}

    def test_second_hop_by_separate_command(self):
        state = create_line_state()
        move_fleet(state, "p1", "A", "B", ["u-0001"])
        move_fleet(state, "p1", "B", "C", ["u-0001"])
        fleet = find_fleet(state, "p1", "C")
        assert [u.id for u in fleet.units] == ["u-0001"]
        assert fleet.units[0].movement_remaining == 0

    def test_exhausted_unit_cannot_move(self):
        state = create_line_state()
        move_fleet(state, "p1", "A", "B", ["u-0003"])
        with pytest.raises(IllegalStateError, match="movement remaining"):
            move_fleet(state, "p1", "B", "A", ["u-0003"])
        assert unit_ids_at(state, "p1", "B") == ["u-0003"]

    def test_ineligible_units_are_skipped(self):
        state = create_line_state()
        state.fleets[0].units[1].movement_remaining = 0

        result = move_fleet(state, "p1", "A", "B", ["u-0001", "u-0002", "u-0404"])

        assert result.moved_unit_ids == ["u-0001"]
        assert result.skipped_unit_ids == ["u-0002", "u-0404"]
        assert unit_ids_at(state, "p1", "B") == ["u-0001"]

    def test_duplicate_ids_move_once(self):
        state = create_line_state()
        result = move_fleet(state, "p1", "A", "B", ["u-0001", "u-0001"])
        assert result.moved_unit_ids == ["u-0001"]
        assert find_fleet(state, "p1", "B").units[0].movement_remaining == 1

    def test_non_adjacent_rejected(self):
        state = create_line_state()
        with pytest.raises(InvalidAdjacencyError):
            move_fleet(state, "p1", "A", "C", ["u-0001"])
        with pytest.raises(InvalidAdjacencyError):
            move_fleet(state, "p1", "A", "D", ["u-0001"])
        assert unit_ids_at(state, "p1", "A") == ["u-0001", "u-0002", "u-0003"]

    def test_no_units_at_source_rejected(self):
        state = create_line_state()
        with pytest.raises(NotFoundError, match="no units"):
            move_fleet(state, "p1", "B", "C", ["u-0001"])

    def test_unknown_unit_ids_rejected(self):
        state = create_line_state()
        with pytest.raises(NotFoundError):
            move_fleet(state, "p1", "A", "B", ["u-9999"])

    def test_cannot_move_enemy_units(self):
        state = create_line_state()
        with pytest.raises(NotFoundError):
            move_fleet(state, "p2", "A", "B", ["u-0001"])

    def test_unknown_system_rejected(self):
        state = create_line_state()
        with pytest.raises(NotFoundError):
            move_fleet(state, "p1", "A", "Z", ["u-0001"])

    def test_moving_whole_fleet_prunes_source(self):
        state = create_line_state()
        move_fleet(state, "p1", "A", "B", ["u-0001", "u-0002", "u-0003"])
        assert find_fleet(state, "p1", "A") is None
        assert len(state.fleets) == 1

    def test_merges_into_existing_destination_fleet(self):
        state = create_line_state()
        move_fleet(state, "p1", "A", "B", ["u-0001"])
        move_fleet(state, "p1", "A", "B", ["u-0002"])
        fleets_at_b = [f for f in state.fleets if f.location_system_id == "B"]
        assert len(fleets_at_b) == 1
        assert len(fleets_at_b[0].units) == 2

    def test_uncontested_arrival_takes_ownership(self):
        state = create_line_state()
        result = move_fleet(state, "p1", "A", "B", ["u-0001"])
        assert result.owner_before is None
        assert result.owner_after == "p1"
        assert state.get_system("B").owner_id == "p1"
        assert not result.contested

    def test_undefended_enemy_system_changes_hands(self):
        state = create_line_state()
        move_fleet(state, "p1", "A", "B", ["u-0001"])
        move_fleet(state, "p1", "B", "C", ["u-0001"])
        assert state.get_system("C").owner_id == "p1"

    def test_contested_arrival_keeps_previous_owner(self):
        state = create_line_state()
        state.fleets.append(
            Fleet(id="p2-f001", owner_id="p2", location_system_id="B",
                  units=[Unit(id="u-0009", type=UnitType.DESTROYER)])
        )
        state.get_system("B").owner_id = "p2"

        result = move_fleet(state, "p1", "A", "B", ["u-0001"])

        assert result.contested
        assert state.get_system("B").owner_id == "p2"
        assert {f.owner_id for f in fleets_at(state, "B")} == {"p1", "p2"}
