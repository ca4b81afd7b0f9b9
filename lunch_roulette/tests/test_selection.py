from __future__ import annotations

from unittest.mock import patch

import pytest

from lunch_roulette.errors import InsufficientOptions
from lunch_roulette.selection.engine import (
    WEEK_MS,
    cooldown_ends_at,
    is_on_cooldown,
    pick,
    select_eligible,
    spin,
)
from lunch_roulette.state.models import Restaurant, ServerState

DAY_MS = 24 * 60 * 60 * 1000
T0 = 1_700_000_000_000

A = Restaurant(id="1", name="A", blacklisted=False)
B = Restaurant(id="2", name="B", blacklisted=True)
C = Restaurant(id="3", name="C", blacklisted=False)


def test_scenario_blacklisted_is_not_eligible():
    eligible = select_eligible([A, B, C], 2, T0)
    assert eligible == [A, C]


@patch("lunch_roulette.selection.engine.random.random")
def test_pick_only_chooses_eligible(mock_random):
    eligible = select_eligible([A, B, C], 2, T0)
    mock_random.return_value = 0.0
    assert pick(eligible) == A
    mock_random.return_value = 0.999999
    assert pick(eligible) == C


@patch("lunch_roulette.selection.engine.random.random", return_value=0.5)
def test_pick_uses_floor_of_random_times_length(mock_random):
    options = [Restaurant(id=str(i), name=str(i)) for i in range(4)]
    assert pick(options).id == "2"


def test_blacklisted_excluded_regardless_of_cooldown():
    cooled = Restaurant(id="4", name="D", blacklisted=True, last_selected_date=T0 - 10 * WEEK_MS)
    fresh = Restaurant(id="5", name="E", blacklisted=True)
    assert select_eligible([cooled, fresh], 1, T0) == []


def test_just_picked_is_excluded():
    picked = A.model_copy(update={"last_selected_date": T0})
    assert select_eligible([picked], 2, T0) == []
    assert is_on_cooldown(picked, 2, T0)


def test_cooldown_boundary_is_exclusive():
    picked = A.model_copy(update={"last_selected_date": T0})
    boundary = T0 + 2 * WEEK_MS
    assert select_eligible([picked], 2, boundary) == []
    assert is_on_cooldown(picked, 2, boundary)
    assert select_eligible([picked], 2, boundary + 1) == [picked]
    assert not is_on_cooldown(picked, 2, boundary + 1)


def test_scenario_thirteen_and_fifteen_days():
    picked = A.model_copy(update={"last_selected_date": T0})
    assert select_eligible([picked], 2, T0 + 13 * DAY_MS) == []
    assert select_eligible([picked], 2, T0 + 15 * DAY_MS) == [picked]


def test_shorter_cooldown_applies_retroactively():
    picked = A.model_copy(update={"last_selected_date": T0})
    now = T0 + 10 * DAY_MS
    assert select_eligible([picked], 2, now) == []
    assert select_eligible([picked], 1, now) == [picked]


def test_cooldown_ends_at():
    assert cooldown_ends_at(A, 2) is None
    picked = A.model_copy(update={"last_selected_date": T0})
    assert cooldown_ends_at(picked, 3) == T0 + 3 * WEEK_MS


@pytest.mark.parametrize("count", [0, 1])
def test_pick_needs_two_options(count):
    with pytest.raises(InsufficientOptions):
        pick([A, C][:count])


@patch("lunch_roulette.selection.engine.random.random", return_value=0.0)
def test_spin_stamps_choice(mock_random):
    state = ServerState(restaurants=[A, B, C], cooldown_weeks=2)
    chosen, new_state = spin(state, T0)
    assert chosen.id == "1"
    assert chosen.last_selected_date == T0
    assert new_state.restaurants[0].last_selected_date == T0
    assert new_state.restaurants[1:] == [B, C]
    # input document untouched
    assert state.restaurants[0].last_selected_date is None


def test_spin_with_one_option_leaves_state_unchanged():
    state = ServerState(restaurants=[A, B], cooldown_weeks=2)
    before = state.model_copy(deep=True)
    with pytest.raises(InsufficientOptions):
        spin(state, T0)
    assert state == before


@patch("lunch_roulette.selection.engine.random.random", return_value=0.0)
def test_repeated_spins_exhaust_options(mock_random):
    state = ServerState(restaurants=[A, C], cooldown_weeks=2)
    _, state = spin(state, T0)
    with pytest.raises(InsufficientOptions):
        spin(state, T0 + DAY_MS)
