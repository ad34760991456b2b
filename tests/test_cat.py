"""
Tests for the cat entity: action state machine, time integration, petting,
and persistence.

See catmind/mind/cat_core.py for implementation.
"""

import random

import pytest
from pydantic import ValidationError

from catmind.core.behavior_config import parse_behavior_config
from catmind.core.schemas import ExternalState, InternalState
from catmind.mind.cat_core import Cat
from catmind.mind.schemas import CatSnapshot, CatStatus, Personality, Preferences

from helpers import NO_TOY, flat_config, make_cat, run_frame


# =============================================================================
# ACTION STATE MACHINE
# =============================================================================

def test_idle_cat_selects_immediately(clock, time_manager):
    cat = make_cat(time_manager)

    assert cat.get_current_action() is None

    result = run_frame(cat, clock)

    action = cat.get_current_action()
    assert result is not None
    assert result.movement is not None
    assert action is not None
    assert action.start_time == 0.0
    assert action.duration == cat.calculator.get_action_config(action.name).duration


def test_action_kept_until_duration_elapses(clock, time_manager):
    cat = make_cat(time_manager, seed=3)
    run_frame(cat, clock)
    first = cat.get_current_action()

    while time_manager.get_total_time() + 16.0 < first.duration:
        run_frame(cat, clock)
        assert cat.get_current_action() == first


def test_expiry_reselects_in_the_same_frame(clock, time_manager):
    cat = make_cat(time_manager, seed=5)
    run_frame(cat, clock)
    first = cat.get_current_action()

    while time_manager.get_total_time() < first.duration:
        run_frame(cat, clock)

    # The stored clock has now reached the duration: the next call must pick again
    now = time_manager.get_total_time()
    result = run_frame(cat, clock)

    second = cat.get_current_action()
    assert second is not None
    assert second.start_time == now
    assert result.internal_state_change is not None  # full result of a fresh selection


def test_continuing_frame_returns_movement_only(clock, time_manager):
    cat = make_cat(time_manager, config=flat_config({"sit": 0.0}))
    first = run_frame(cat, clock)
    second = run_frame(cat, clock)

    assert first.internal_state_change == {"playfulness": 0.033, "fear": -0.033}
    assert second.internal_state_change is None
    assert second.external_state_change is None
    assert second.movement.animation_commands[0].animation_key == "sit"


def test_zero_duration_reselects_every_frame(clock, time_manager):
    cat = make_cat(time_manager, config=flat_config({"sit": 0.0, "run_away": 0.0}, duration=0))

    starts = []
    for _ in range(5):
        result = run_frame(cat, clock)
        assert result.internal_state_change is not None
        starts.append(cat.get_current_action().start_time)

    assert starts == sorted(set(starts))


def test_continuing_action_applies_per_second_effects(clock, time_manager):
    state = InternalState(bonding=0.0, playfulness=0.0, fear=0.0)
    cat = make_cat(time_manager, config=flat_config({"sit": 0.0}), state=state)

    # Selection frame: no elapsed time, nothing applied
    run_frame(cat, clock, milliseconds=0.0)
    assert cat.get_internal_state() == state

    run_frame(cat, clock, milliseconds=500.0)

    decay = 0.0001 * 0.5
    internal = cat.get_internal_state()
    assert internal.playfulness == pytest.approx(0.033 * 0.5 - decay)
    assert internal.fear == pytest.approx(-0.033 * 0.5)
    assert internal.bonding == 0.0


def test_external_influence_scaled_by_elapsed_time(clock, time_manager):
    state = InternalState(bonding=0.0, playfulness=0.0, fear=0.0)
    cat = make_cat(time_manager, state=state, seed=1)
    influence = cat.calculator.config.external_state_influence
    external = ExternalState(toy_presence=True, toy_distance=500.0, user_presence=True)

    clock.advance(2000.0)
    expected = state.decrease_playfulness(0.0001 * 2).apply_external_influence(external, influence, 2.0)
    cat.update(external, 0.0, 0.0, 700.0, 0.0)

    # First frame selects an action, so only decay and influence apply
    assert cat.get_internal_state().bonding == pytest.approx(expected.bonding)
    assert cat.get_internal_state().playfulness == pytest.approx(expected.playfulness)
    assert cat.get_internal_state().fear == pytest.approx(expected.fear)


def test_update_replaces_external_state(clock, time_manager):
    cat = make_cat(time_manager)
    external = ExternalState(toy_presence=True, toy_distance=80.0, user_presence=False)

    run_frame(cat, clock, external=external, toy=(480.0, 300.0))

    assert cat.get_external_state() == external


def test_unknown_action_produces_no_command(clock, time_manager):
    config = parse_behavior_config({
        "emotion_calculation": {"valence": {"inputs": ["bonding"], "weights": [1.0]}},
        "actions": {"fly": {"inputs": ["valence"], "weights": [1.0], "duration": 1000}},
    })
    cat = make_cat(time_manager, config=config)

    assert run_frame(cat, clock) is None
    assert cat.get_current_action() is None


# =============================================================================
# MOVEMENT THROUGH THE CAT
# =============================================================================

def test_chase_then_play_with_toy(clock, time_manager):
    """Toy 200px away: chase at speed 200, then stop and play once close."""
    cat = make_cat(time_manager, config=flat_config({"play_with_toy": 0.0}, duration=3000))
    far = ExternalState(toy_presence=True, toy_distance=200.0)

    result = run_frame(cat, clock, external=far, position=(0.0, 0.0), toy=(120.0, 160.0))
    movement = result.movement
    assert (movement.delta_x, movement.delta_y) == (120.0, 160.0)
    assert movement.speed == 200
    assert movement.flip_x is True
    assert result.external_state_change == {"is_playing": True}

    near = ExternalState(toy_presence=True, toy_distance=28.0)
    result = run_frame(cat, clock, external=near, position=(100.0, 140.0), toy=(120.0, 160.0))
    assert result.movement.is_stationary
    assert result.movement.animation_commands[0].animation_key == "play"
    assert cat.get_current_action().name == "play_with_toy"


def test_chase_re_aims_at_moving_toy(clock, time_manager):
    cat = make_cat(time_manager, config=flat_config({"play_with_toy": 0.0}, duration=3000))
    external = ExternalState(toy_presence=True, toy_distance=300.0)

    run_frame(cat, clock, external=external, position=(0.0, 0.0), toy=(300.0, 0.0))
    result = run_frame(cat, clock, external=external, position=(0.0, 0.0), toy=(-300.0, 0.0))

    assert result.movement.delta_x == -300.0
    assert result.movement.flip_x is False


# =============================================================================
# INVARIANTS
# =============================================================================

def test_state_stays_in_range_under_any_sequence(clock, time_manager):
    cat = make_cat(time_manager, seed=11)
    chaos = random.Random(99)

    for _ in range(500):
        if chaos.random() < 0.3:
            cat.pet_by_user(chaos.uniform(0.0, 50.0))
        has_toy = chaos.random() < 0.5
        external = ExternalState(
            toy_presence=has_toy,
            toy_distance=chaos.uniform(0.0, 400.0) if has_toy else 0.0,
            user_presence=chaos.random() < 0.8,
            is_playing=chaos.random() < 0.3
        )
        toy = (chaos.uniform(0, 800), chaos.uniform(0, 600)) if has_toy else None
        run_frame(cat, clock, milliseconds=chaos.uniform(0.0, 20000.0), external=external, toy=toy)

        for value in cat.get_internal_state().as_dict().values():
            assert -1.0 <= value <= 1.0


# =============================================================================
# PETTING
# =============================================================================

def test_frightened_cat_dislikes_petting(time_manager):
    """fear 0.8: bonding drops by 0.02 about 70% of the time."""
    cat = make_cat(time_manager, state=InternalState(bonding=0.0, playfulness=0.0, fear=0.8), seed=42)

    decreases = 0
    trials = 2000
    for _ in range(trials):
        cat.internal_state = InternalState(bonding=0.0, playfulness=0.0, fear=0.8)
        cat.pet_by_user(1.0)
        bonding = cat.get_internal_state().bonding
        if bonding != 0.0:
            assert bonding == pytest.approx(-0.02)
            decreases += 1

    assert decreases / trials == pytest.approx(0.7, abs=0.05)


def test_content_cat_bonds(time_manager):
    cat = make_cat(time_manager, state=InternalState(bonding=0.5, playfulness=0.5, fear=0.0))

    cat.pet_by_user()

    assert cat.get_internal_state().bonding == pytest.approx(0.58)


def test_bonding_gain_capped_per_pet(time_manager):
    cat = make_cat(time_manager, state=InternalState(bonding=0.5, playfulness=0.5, fear=0.0))

    cat.pet_by_user(intensity=3.0)

    assert cat.get_internal_state().bonding == pytest.approx(0.6)


def test_unhappy_cat_sometimes_warms_up(time_manager):
    state = InternalState(bonding=-1.0, playfulness=-1.0, fear=0.4)
    cat = make_cat(time_manager, state=state, seed=8)
    assert cat.get_current_emotions()["valence"] < -0.1

    outcomes = set()
    for _ in range(200):
        cat.internal_state = state
        cat.pet_by_user(1.0)
        outcomes.add(round(cat.get_internal_state().bonding, 6))

    assert outcomes == {-1.0, round(-1.0 + 0.01, 6)}


def test_petting_without_valence_emotion_treats_valence_as_zero(time_manager):
    config = parse_behavior_config({
        "emotion_calculation": {"calm": {"inputs": ["fear"], "weights": [-1.0]}},
        "actions": {"sit": {"inputs": ["calm"], "weights": [1.0]}},
    })
    cat = make_cat(time_manager, config=config, state=InternalState(bonding=0.0, playfulness=0.0, fear=0.0))

    cat.pet_by_user()

    assert cat.get_internal_state().bonding == pytest.approx(0.08)


def test_petting_clamps(time_manager):
    cat = make_cat(time_manager, state=InternalState(bonding=0.99, playfulness=0.5, fear=0.0))

    cat.pet_by_user()

    assert cat.get_internal_state().bonding == 1.0


# =============================================================================
# ACCESSORS
# =============================================================================

@pytest.mark.parametrize("bonding,level", [
    (-1.0, 0),
    (-0.5, 2),
    (0.0, 5),
    (0.39, 6),
    (0.99, 9),
    (1.0, 10),
])
def test_bonding_level(time_manager, bonding, level):
    cat = make_cat(time_manager, state=InternalState(bonding=bonding, playfulness=0.0, fear=0.0))

    assert cat.get_bonding_level() == level


def test_current_emotions_follow_internal_state(time_manager):
    cat = make_cat(time_manager)

    assert cat.get_current_emotions() == cat.calculator.calculate_emotions(cat.get_internal_state())


def test_status(clock, time_manager):
    cat = make_cat(time_manager, config=flat_config({"sit": 0.0}))
    run_frame(cat, clock)
    clock.advance(100.0)
    time_manager.update()

    status = cat.get_status()

    assert isinstance(status, CatStatus)
    assert status.name == "Mike"
    assert status.current_action.name == "sit"
    assert status.action_elapsed == pytest.approx(116.0)
    assert status.bonding_level == 0
    assert "valence" in status.emotions


def test_create_default(time_manager):
    cat = Cat.create_default(time_manager)

    assert cat.name == "Tanuki"
    assert cat.id.startswith("cat-")
    assert cat.get_internal_state() == InternalState.create_default()
    assert cat.personality == Personality()
    assert cat.preferences.toy_types == ["ball", "feather", "mouse"]


# =============================================================================
# PERSISTENCE
# =============================================================================

def test_snapshot_round_trip(time_manager):
    personality = Personality(social=0.2, active=0.9, bold=0.1, dependent=0.4, friendly=0.3)
    preferences = Preferences(toy_types=["laser"], movement_speed=0.2, randomness=0.9)
    original = make_cat(time_manager, state=InternalState(bonding=0.31, playfulness=-0.42, fear=0.17))
    original.personality = personality
    original.preferences = preferences

    payload = original.to_snapshot().model_dump_json()
    restored = Cat.from_snapshot(CatSnapshot.model_validate_json(payload), "Mike", time_manager)

    assert restored.name == "Mike"
    assert restored.personality == personality
    assert restored.preferences == preferences
    for axis, value in original.get_internal_state().as_dict().items():
        assert getattr(restored.get_internal_state(), axis) == pytest.approx(value)

    external = ExternalState(toy_presence=True, toy_distance=75.0)
    before = original.calculator.calculate_action_probabilities(original.get_internal_state(), external)
    after = restored.calculator.calculate_action_probabilities(restored.get_internal_state(), external)
    assert after == pytest.approx(before)


def test_snapshot_rejects_out_of_range_state():
    with pytest.raises(ValidationError):
        CatSnapshot(bonding=1.2, playfulness=0.0, fear=0.0)


def test_save_and_load(tmp_path, time_manager):
    cat = make_cat(time_manager, state=InternalState(bonding=0.5, playfulness=0.1, fear=-0.3))
    path = tmp_path / "saves" / "mike.json"

    cat.save_state(path)
    loaded = Cat.load_state(path, "Mike", time_manager)

    assert loaded.get_internal_state() == cat.get_internal_state()
    assert loaded.personality == cat.personality


def test_load_missing_save_returns_none(tmp_path, time_manager):
    assert Cat.load_state(tmp_path / "missing.json", "Mike", time_manager) is None


def test_load_malformed_save_raises(tmp_path, time_manager):
    path = tmp_path / "bad.json"
    path.write_text('{"bonding": 3.0, "playfulness": 0.0, "fear": 0.0}')

    with pytest.raises(ValidationError):
        Cat.load_state(path, "Mike", time_manager)
