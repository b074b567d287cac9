import random
import pytest

from arena.battle.machine import MAX_AUTO_ROUNDS, BattleStateMachine, attack, note, start_battle
from arena.battle.models import CreatureStats, LogCategory, Outcome, Side, Turn
from arena.battle.effectiveness import Effectiveness
from arena.core.errors import InvalidTurnError, MalformedCreatureRecord


class FixedRng:
    def __init__(self, value=0.9): self.value = value
    def uniform(self, a, b): return self.value


def mon(name, types=('normal',), hp=100, attack=100, defense=100):
    return CreatureStats(id=0, name=name, types=tuple(types),
                         base_stats={'hp': hp, 'attack': attack, 'defense': defense})


def test_start_battle_initial_state():
    state = start_battle(mon('alpha', hp=80), mon('beta', hp=60))
    assert state.player_hp == 80
    assert state.opponent_hp == 60
    assert state.turn is Turn.PLAYER
    assert state.outcome is Outcome.NONE
    assert state.log == ()
    assert state.hp_ratio(Side.PLAYER) == 1.0


def test_player_attack_flips_turn_and_logs():
    state = start_battle(mon('alpha'), mon('beta'))
    nxt = attack(state, Side.PLAYER, FixedRng(0.9))
    assert nxt.opponent_hp == 100 - 25
    assert nxt.player_hp == 100
    assert nxt.turn is Turn.OPPONENT
    assert len(nxt.log) == 1
    entry = nxt.log[0]
    assert entry.category is LogCategory.PLAYER_ATTACK
    assert entry.damage == 25
    assert entry.effectiveness is Effectiveness.NEUTRAL
    assert entry.defender_hp == 75
    # Original state untouched
    assert state.opponent_hp == 100 and state.log == ()


def test_opponent_attack_after_player():
    state = attack(start_battle(mon('alpha'), mon('beta')), Side.PLAYER, FixedRng(0.9))
    nxt = attack(state, Side.OPPONENT, FixedRng(0.9))
    assert nxt.player_hp == 75
    assert nxt.turn is Turn.PLAYER
    assert nxt.log[-1].category is LogCategory.OPPONENT_ATTACK


def test_out_of_turn_attack_rejected_without_change():
    state = start_battle(mon('alpha'), mon('beta'))
    with pytest.raises(InvalidTurnError) as exc:
        attack(state, Side.OPPONENT, FixedRng())
    assert exc.value.expected == 'player'
    assert exc.value.attempted == 'opponent'
    assert state.turn is Turn.PLAYER
    assert state.player_hp == 100 and state.opponent_hp == 100
    assert len(state.log) == 0


def test_double_attack_rejected():
    machine = BattleStateMachine(mon('alpha'), mon('beta'), FixedRng())
    machine.attack(Side.PLAYER)
    before = machine.state
    with pytest.raises(InvalidTurnError):
        machine.attack(Side.PLAYER)
    assert machine.state == before


def test_knockout_finishes_battle():
    state = start_battle(mon('alpha'), mon('beta', hp=10))
    done = attack(state, Side.PLAYER, FixedRng(0.9))
    assert done.opponent_hp == 0
    assert done.turn is Turn.FINISHED
    assert done.outcome is Outcome.PLAYER_WON
    assert done.winner is Side.PLAYER
    assert [e.category for e in done.log] == [LogCategory.PLAYER_ATTACK, LogCategory.VICTORY]


def test_opponent_knockout_is_defeat():
    state = start_battle(mon('alpha', hp=5), mon('beta'))
    state = attack(state, Side.PLAYER, FixedRng(0.9))
    state = attack(state, Side.OPPONENT, FixedRng(0.9))
    assert state.player_hp == 0
    assert state.outcome is Outcome.OPPONENT_WON
    assert state.log[-1].category is LogCategory.DEFEAT


def test_no_attack_after_finish():
    done = attack(start_battle(mon('alpha'), mon('beta', hp=10)), Side.PLAYER, FixedRng())
    for side in (Side.PLAYER, Side.OPPONENT, Turn.FINISHED):
        with pytest.raises(InvalidTurnError):
            attack(done, side, FixedRng())
    assert done.opponent_hp == 0 and done.player_hp == 100


def test_immune_attack_deals_zero_and_passes_turn():
    ghost = mon('gastly', types=('ghost',), attack=255)
    target = mon('rattata', types=('normal',), defense=1)
    machine = BattleStateMachine(ghost, target, random.Random(3))
    for _ in range(20):
        machine.attack(Side.PLAYER)
        assert machine.state.opponent_hp == target.hp
        assert machine.log[-1].damage == 0
        assert machine.log[-1].effectiveness is Effectiveness.NO_EFFECT
        machine.opponent_turn()
        if machine.is_over():
            break
    assert machine.state.opponent_hp == target.hp


def test_hp_never_increases_and_never_negative():
    machine = BattleStateMachine(mon('alpha', ('fire',), hp=90, attack=80),
                                 mon('beta', ('grass',), hp=120, defense=70), random.Random(99))
    prev = (machine.state.player_hp, machine.state.opponent_hp)
    while not machine.is_over():
        machine.play_round()
        cur = (machine.state.player_hp, machine.state.opponent_hp)
        assert cur[0] <= prev[0] and cur[1] <= prev[1]
        assert min(cur) >= 0
        prev = cur
    assert (machine.outcome is not Outcome.NONE) == machine.is_over()


def test_outcome_set_iff_finished_through_battle():
    machine = BattleStateMachine(mon('alpha'), mon('beta'), random.Random(5))
    while not machine.is_over():
        assert machine.outcome is Outcome.NONE
        machine.play_round()
    assert machine.outcome is not Outcome.NONE


def test_play_round_returns_new_entries():
    machine = BattleStateMachine(mon('alpha'), mon('beta'), FixedRng(0.9))
    entries = machine.play_round()
    assert [e.category for e in entries] == [LogCategory.PLAYER_ATTACK, LogCategory.OPPONENT_ATTACK]
    assert machine.turn is Turn.PLAYER


def test_play_round_skips_opponent_after_knockout():
    machine = BattleStateMachine(mon('alpha'), mon('beta', hp=1), FixedRng(0.9))
    entries = machine.play_round()
    assert [e.category for e in entries] == [LogCategory.PLAYER_ATTACK, LogCategory.VICTORY]


def test_run_auto_stalemate_when_both_immune():
    a = mon('gastly', types=('ghost',))
    b = mon('rattata', types=('normal',))
    machine = BattleStateMachine(a, b, random.Random(1))
    assert machine.run_auto(max_rounds=10) is Outcome.NONE
    assert len(machine.log) == 20


def test_rematch_resets_state():
    machine = BattleStateMachine(mon('alpha'), mon('beta', hp=10), FixedRng())
    machine.run_auto()
    assert machine.is_over()
    fresh = machine.rematch(mon('gamma', hp=70))
    s = fresh.state
    assert s.player_hp == 100 and s.opponent_hp == 70
    assert s.turn is Turn.PLAYER
    assert s.outcome is Outcome.NONE
    assert s.log == ()


def test_start_battle_after_finished_is_fresh():
    player, opponent = mon('alpha'), mon('beta', hp=10)
    done = attack(start_battle(player, opponent), Side.PLAYER, FixedRng())
    assert done.is_finished
    again = start_battle(player, opponent)
    assert again.opponent_hp == 10 and again.turn is Turn.PLAYER and again.log == ()


def test_reveal_stages_super_effective_hit():
    state = attack(start_battle(mon('charmander', ('fire',)), mon('bulbasaur', ('grass',))),
                   Side.PLAYER, FixedRng(0.9))
    lines = list(state.log[0].reveal())
    assert [c for c, _ in lines] == [LogCategory.PLAYER_ATTACK, LogCategory.INFO, LogCategory.OPPONENT_DAMAGE]
    assert "super effective" in lines[1][1]
    assert "50" in lines[2][1]


def test_note_appends_presentation_entries_only():
    state = start_battle(mon('alpha'), mon('beta'))
    noted = note(state, LogCategory.ERROR, "Failed to fetch a new opponent.")
    assert noted.log[-1].category is LogCategory.ERROR
    assert noted.turn is state.turn and noted.player_hp == state.player_hp
    with pytest.raises(ValueError):
        note(state, LogCategory.VICTORY, "nope")


def test_string_turn_accepted():
    state = start_battle(mon('alpha'), mon('beta'))
    assert attack(state, 'player', FixedRng()).turn is Turn.OPPONENT


def test_run_auto_default_limit_is_shared_constant():
    machine = BattleStateMachine(mon('gastly', types=('ghost',)), mon('rattata'), random.Random(1))
    assert machine.run_auto() is Outcome.NONE
    assert len(machine.log) == 2 * MAX_AUTO_ROUNDS


@pytest.mark.parametrize("stats, field", [
    ({'hp': 50, 'defense': 40}, 'attack'),
    ({'hp': 50, 'attack': 40, 'defense': 0}, 'defense'),
    ({'hp': 0, 'attack': 40, 'defense': 40}, 'hp'),
    ({'hp': 50, 'attack': -3, 'defense': 40}, 'attack'),
    ({'hp': 50, 'attack': 40.5, 'defense': 40}, 'attack'),
])
def test_start_battle_rejects_unusable_stats(stats, field):
    broken = CreatureStats(id=9, name='broken', types=('normal',), base_stats=stats)
    with pytest.raises(MalformedCreatureRecord) as exc:
        start_battle(broken, mon('beta'))
    assert exc.value.field == field
    with pytest.raises(MalformedCreatureRecord):
        start_battle(mon('alpha'), broken)
    with pytest.raises(MalformedCreatureRecord):
        BattleStateMachine(broken, mon('beta'), FixedRng())


@pytest.mark.parametrize("types", [(), ('fire', 'water', 'grass')])
def test_start_battle_rejects_bad_type_count(types):
    with pytest.raises(MalformedCreatureRecord) as exc:
        start_battle(mon('alpha', types=types), mon('beta'))
    assert exc.value.field == 'types'
