"""Tests for galaxy construction and home system assignment."""

import pytest

from space_war.engine.galaxy import (
    DEFAULT_LANES,
    DEFAULT_SYSTEMS,
    assign_home_systems,
    build_galaxy,
    default_galaxy,
    validate_galaxy,
)
from space_war.errors import IllegalStateError
from space_war.models import GameState, Player, StarSystem


def test_default_galaxy_has_twelve_systems():
    systems = default_galaxy()
    assert len(systems) == 12
    assert [s.id for s in systems] == [f"sys-{i}" for i in range(1, 13)]
    assert systems[0].name == "Sol"


def test_default_galaxy_is_symmetric():
    systems = default_galaxy()
    by_id = {s.id: s for s in systems}
    for system in systems:
        for neighbor_id in system.connected_systems:
            assert system.id in by_id[neighbor_id].connected_systems


def test_default_galaxy_is_connected():
    systems = default_galaxy()
    by_id = {s.id: s for s in systems}
    seen = {"sys-1"}
    frontier = ["sys-1"]
    while frontier:
        current = frontier.pop()
        for neighbor_id in by_id[current].connected_systems:
            if neighbor_id not in seen:
                seen.add(neighbor_id)
                frontier.append(neighbor_id)
    assert seen == set(by_id)


def test_default_galaxy_shipyards():
    shipyards = [s.name for s in default_galaxy() if s.has_shipyard]
    assert shipyards == ["Sol", "Sirius", "Altair", "Capella"]


def test_default_galaxy_starts_unowned():
    assert all(s.owner_id is None for s in default_galaxy())


def test_default_galaxy_returns_fresh_copies():
    first = default_galaxy()
    first[0].owner_id = "p1"
    assert default_galaxy()[0].owner_id is None


def test_lane_count_matches_adjacency():
    systems = build_galaxy(DEFAULT_SYSTEMS, DEFAULT_LANES)
    assert sum(len(s.connected_systems) for s in systems) == 2 * len(DEFAULT_LANES)


def test_build_galaxy_rejects_unknown_lane_endpoint():
    with pytest.raises(ValueError, match="unknown system"):
        build_galaxy([("a", "Alpha", 1, True)], [("a", "b")])


def test_build_galaxy_ignores_duplicate_lanes():
    systems = build_galaxy(
        [("a", "Alpha", 1, True), ("b", "Beta", 1, False)],
        [("a", "b"), ("b", "a")],
    )
    assert systems[0].connected_systems == ["b"]
    assert systems[1].connected_systems == ["a"]


def test_validate_galaxy_rejects_asymmetric_lane():
    systems = [
        StarSystem(id="a", name="Alpha", owner_id=None, resource_value=1, connected_systems=["b"]),
        StarSystem(id="b", name="Beta", owner_id=None, resource_value=1),
    ]
    with pytest.raises(ValueError, match="Asymmetric lane"):
        validate_galaxy(systems)


def test_validate_galaxy_rejects_dangling_neighbor():
    systems = [
        StarSystem(id="a", name="Alpha", owner_id=None, resource_value=1, connected_systems=["z"]),
    ]
    with pytest.raises(ValueError, match="unknown neighbor"):
        validate_galaxy(systems)


def test_validate_galaxy_rejects_duplicate_ids():
    systems = [
        StarSystem(id="a", name="Alpha", owner_id=None, resource_value=1),
        StarSystem(id="a", name="Alpha Again", owner_id=None, resource_value=1),
    ]
    with pytest.raises(ValueError, match="Duplicate system id"):
        validate_galaxy(systems)


def test_assign_home_systems_in_join_order():
    state = GameState(id="game-1", systems=default_galaxy())
    state.players = [
        Player(id="p1", display_name="Ada", resources=10),
        Player(id="p2", display_name="Bob", resources=10),
    ]

    assign_home_systems(state)

    assert state.players[0].home_systems == ["sys-1"]
    assert state.players[1].home_systems == ["sys-4"]
    assert state.get_system("sys-1").owner_id == "p1"
    assert state.get_system("sys-4").owner_id == "p2"


def test_assign_home_systems_rejects_too_many_players():
    systems = build_galaxy(
        [("a", "Alpha", 1, True), ("b", "Beta", 1, False)],
        [("a", "b")],
    )
    state = GameState(id="game-1", systems=systems)
    state.players = [
        Player(id="p1", display_name="Ada", resources=10),
        Player(id="p2", display_name="Bob", resources=10),
    ]

    with pytest.raises(IllegalStateError):
        assign_home_systems(state)

    # Nothing assigned
    assert all(s.owner_id is None for s in state.systems)
    assert all(p.home_systems == [] for p in state.players)
