"""Turn controller: phases, retries, opponent fallthrough and game end."""

import unittest

from ctf import FlagGameEnv
from ctf.core.actions import ActionOutcome, Intent
from ctf.core.types import GameResult, MoveDir, SkillClass, SpeedClass, Team, TurnPhase, WinReason
from ctf.core.validation import RejectReason
from ctf.entities import Unit
from ctf.scenario import Scenario
from ctf.utils import ScriptedRandom


def unit(unit_id, team, pos, fast=False, expert=False) -> Unit:
    return Unit(
        id=unit_id,
        team=team,
        speed=SpeedClass.FAST if fast else SpeedClass.SLOW,
        skill=SkillClass.EXPERT if expert else SkillClass.NOVICE,
        pos=pos,
    )


def duel_scenario(**kwargs) -> Scenario:
    """3x3 board, RED flag top-left, BLUE flag bottom-right, RED human and first."""
    units = kwargs.pop("units", None) or [
        unit(0, Team.RED, (0, 0), fast=True, expert=True),
        unit(1, Team.BLUE, (1, 2)),
    ]
    return Scenario(
        rows=3,
        cols=3,
        units=units,
        flags={Team.RED: (0, 0), Team.BLUE: (2, 2)},
        human_team=kwargs.pop("human_team", Team.RED),
        first_team=kwargs.pop("first_team", Team.RED),
        seed=0,
        **kwargs,
    )


def board_snapshot(world):
    return (
        {u.id: u.pos for u in world.get_all_units()},
        {pos: [u.id for u in world.board.units_at(*pos)] for pos in world.board.occupied_positions()},
    )


class TestLifecycle(unittest.TestCase):
    def test_step_before_reset_raises(self) -> None:
        with self.assertRaises(RuntimeError):
            FlagGameEnv().step(Intent.move(0, MoveDir.RIGHT))

    def test_reset_starts_the_first_round(self) -> None:
        env = FlagGameEnv()
        state = env.reset(duel_scenario())

        world = state["world"]
        self.assertIs(world, env.state)
        self.assertIs(env.phase, TurnPhase.AWAITING_HUMAN)
        self.assertIs(env.awaiting_team, Team.RED)
        self.assertTrue(env.awaiting_human)
        self.assertEqual(world.round_count, 0)
        self.assertEqual(env.rounds_played, 0)

    def test_reset_accepts_scenario_dict(self) -> None:
        env = FlagGameEnv()
        env.reset(duel_scenario(first_team=Team.BLUE).to_dict())
        self.assertIs(env.phase, TurnPhase.AWAITING_OPPONENT)

    def test_reset_does_not_touch_the_scenario(self) -> None:
        scenario = duel_scenario()
        env = FlagGameEnv()
        env.reset(scenario)
        env.step(Intent.move(0, MoveDir.RIGHT, distance=2))
        self.assertEqual(scenario.units[0].pos, (0, 0))


class TestHumanTurn(unittest.TestCase):
    def setUp(self) -> None:
        self.env = FlagGameEnv()
        self.env.reset(duel_scenario())
        self.world = self.env.state

    def assert_retry(self, intent: Intent, reason: RejectReason) -> ActionOutcome:
        before = board_snapshot(self.world)
        _, outcome, done, info = self.env.step(intent)

        self.assertFalse(outcome.success)
        self.assertFalse(outcome.resolved)
        self.assertIs(outcome.reason, reason)
        self.assertFalse(done)
        self.assertFalse(info.turn_passed)
        self.assertIs(self.env.phase, TurnPhase.AWAITING_HUMAN)
        self.assertIs(self.world.active_team, Team.RED)
        self.assertEqual(self.world.action_log, [])
        self.assertEqual(board_snapshot(self.world), before)
        return outcome

    def test_rejected_move_keeps_the_turn(self) -> None:
        outcome = self.assert_retry(Intent.move(0, MoveDir.LEFT, distance=1), RejectReason.OUT_OF_BOUNDS)
        self.assertIn("out of bounds", outcome.message)

    def test_intent_level_rejections(self) -> None:
        self.assert_retry(Intent.move(42, MoveDir.RIGHT), RejectReason.UNKNOWN_UNIT)
        self.assert_retry(Intent.move(1, MoveDir.UP), RejectReason.WRONG_TEAM)
        self.assert_retry(Intent.attack(0, "diagonal"), RejectReason.INVALID_DIRECTION)

    def test_eliminated_unit_cannot_act(self) -> None:
        env = FlagGameEnv()
        env.reset(duel_scenario(units=[
            unit(0, Team.RED, (0, 1)),
            unit(2, Team.RED, (1, 1)),
            unit(1, Team.BLUE, (2, 1)),
        ]))
        env.state.get_unit(0).eliminate("Hit in torso")

        _, outcome, _, _ = env.step(Intent.move(0, MoveDir.DOWN, distance=1))

        self.assertIs(outcome.reason, RejectReason.UNIT_ELIMINATED)
        self.assertIs(env.phase, TurnPhase.AWAITING_HUMAN)

    def test_more_than_one_intent_is_an_error(self) -> None:
        with self.assertRaises(ValueError):
            self.env.step([Intent.move(0, MoveDir.RIGHT), Intent.move(0, MoveDir.DOWN)])

    def test_agent_on_the_human_side_submits_candidates(self) -> None:
        candidates = [Intent.move(0, MoveDir.LEFT, distance=1), Intent.move(0, MoveDir.RIGHT, distance=1)]

        _, outcome, _, info = self.env.step(candidates, as_candidates=True)

        self.assertTrue(outcome.success)
        self.assertEqual(len(info.attempts), 2)
        self.assertIs(self.env.phase, TurnPhase.AWAITING_OPPONENT)

    def test_successful_move_passes_the_turn(self) -> None:
        _, outcome, done, info = self.env.step(Intent.move(0, MoveDir.RIGHT, distance=1))

        self.assertTrue(outcome.success)
        self.assertEqual(outcome.message, "Unit 0 moved to (1, 0).")
        self.assertFalse(done)
        self.assertTrue(info.turn_passed)
        self.assertIs(self.env.phase, TurnPhase.AWAITING_OPPONENT)
        self.assertIs(self.env.awaiting_team, Team.BLUE)
        self.assertEqual(len(self.world.action_log), 1)
        self.assertEqual(self.env.rounds_played, 1)

    def test_miss_passes_the_turn(self) -> None:
        env = FlagGameEnv()
        env.reset(duel_scenario(units=[
            unit(0, Team.RED, (1, 1)),
            unit(2, Team.RED, (0, 1)),
            unit(1, Team.BLUE, (1, 2)),
        ]))
        env.state.rng = ScriptedRandom([0.90])

        _, outcome, _, info = env.step(Intent.attack(0, MoveDir.DOWN, attack_range=1))

        self.assertFalse(outcome.success)
        self.assertTrue(outcome.resolved)
        self.assertEqual(outcome.message, "Unit 0 missed the shot.")
        self.assertTrue(info.turn_passed)
        self.assertIs(env.phase, TurnPhase.AWAITING_OPPONENT)


class TestOpponentTurn(unittest.TestCase):
    def setUp(self) -> None:
        self.env = FlagGameEnv()
        self.env.reset(duel_scenario())
        self.env.step(Intent.move(0, MoveDir.RIGHT, distance=1))

    def test_first_successful_candidate_wins(self) -> None:
        candidates = [
            Intent.attack(1, MoveDir.LEFT, attack_range=1),
            Intent.move(1, MoveDir.DOWN, distance=1),
            Intent.move(1, MoveDir.LEFT, distance=1),
            Intent.move(1, MoveDir.UP, distance=1),
        ]

        _, outcome, _, info = self.env.step(candidates)

        self.assertEqual([a.intent for a in info.attempts], candidates[:3])
        self.assertIs(info.attempts[0].outcome.reason, RejectReason.NO_VALID_TARGET)
        self.assertIs(info.attempts[1].outcome.reason, RejectReason.OUT_OF_BOUNDS)
        self.assertTrue(outcome.success)
        self.assertEqual(self.env.state.get_unit(1).pos, (0, 2))

    def test_no_candidates_still_passes_the_turn(self) -> None:
        _, outcome, done, info = self.env.step([])

        self.assertFalse(outcome.success)
        self.assertEqual(outcome.message, "Blue Team couldn't perform any actions.")
        self.assertFalse(done)
        self.assertTrue(info.round_completed)
        self.assertEqual(self.env.state.round_count, 1)
        self.assertIs(self.env.phase, TurnPhase.ROUND_COMPLETE)
        self.assertIs(self.env.awaiting_team, Team.RED)
        self.assertEqual(self.env.state.action_log[-1].message, outcome.message)

    def test_acted_flags_reset_when_the_next_round_starts(self) -> None:
        world = self.env.state
        self.env.step([])
        self.assertTrue(world.get_unit(0).acted_this_round)

        self.env.step(Intent.move(0, MoveDir.DOWN, distance=1))

        self.assertEqual(world.round_count, 1)
        self.assertFalse(world.get_unit(1).acted_this_round)
        self.assertTrue(world.get_unit(0).acted_this_round)

    def test_team_without_live_units_passes(self) -> None:
        env = FlagGameEnv()
        env.reset(duel_scenario(units=[
            unit(0, Team.RED, (0, 1)),
            unit(1, Team.BLUE, (2, 1)),
        ]))
        # Eliminated outside the turn flow, so no evaluation has run yet.
        env.state.get_unit(0).eliminate("Hit in torso")

        _, outcome, done, _ = env.step(Intent.move(0, MoveDir.DOWN, distance=1))

        self.assertEqual(outcome.message, "No active units available for the Red Team.")
        self.assertTrue(done)
        self.assertIs(env.winner, Team.BLUE)
        self.assertIs(env.state.win_reason, WinReason.ELIMINATION)


class TestGameEnd(unittest.TestCase):
    def test_capture_in_two_moves(self) -> None:
        env = FlagGameEnv()
        env.reset(duel_scenario())
        # The fast unit's AUTO roll always comes up two squares.
        env.state.rng = ScriptedRandom([0.10, 0.20])

        _, outcome, done, _ = env.step(Intent.move(0, MoveDir.RIGHT))
        self.assertEqual(outcome.message, "Unit 0 moved to (2, 0).")
        self.assertFalse(done)

        env.step([])
        _, outcome, done, info = env.step(Intent.move(0, MoveDir.DOWN))

        self.assertTrue(done)
        self.assertEqual(env.state.get_unit(0).pos, (2, 2))
        self.assertIs(env.phase, TurnPhase.GAME_OVER)
        self.assertIs(env.winner, Team.RED)
        self.assertIs(env.state.result, GameResult.RED_WINS)
        self.assertIs(env.state.win_reason, WinReason.CAPTURE)
        self.assertIs(info.victory.reason, WinReason.CAPTURE)
        self.assertEqual(env.rounds_played, 2)
        self.assertIsNone(env.awaiting_team)

        with self.assertRaises(RuntimeError):
            env.step(Intent.move(0, MoveDir.UP))

    def test_torso_hit_ends_the_game_mid_round(self) -> None:
        env = FlagGameEnv()
        env.reset(duel_scenario(units=[
            unit(0, Team.RED, (1, 1), expert=True),
            unit(2, Team.RED, (0, 1)),
            unit(1, Team.BLUE, (1, 2)),
        ]))
        env.state.rng = ScriptedRandom([0.30])

        _, outcome, done, info = env.step(Intent.attack(0, MoveDir.DOWN, attack_range=1))

        self.assertTrue(done)
        self.assertEqual(outcome.eliminated_unit_ids, frozenset({1}))
        self.assertEqual(outcome.message, "Unit 0 hit opponent unit 1's torso! Unit 1 is eliminated!")
        self.assertIs(env.state.win_reason, WinReason.ELIMINATION)
        self.assertFalse(info.round_completed)
        self.assertEqual(env.state.round_count, 0)

    def test_round_limit_is_a_draw(self) -> None:
        env = FlagGameEnv()
        env.reset(duel_scenario(max_rounds=1))

        env.step(Intent.move(0, MoveDir.RIGHT, distance=1))
        _, _, done, info = env.step([])

        self.assertTrue(done)
        self.assertIs(env.state.result, GameResult.DRAW)
        self.assertIsNone(env.winner)
        self.assertIs(env.state.win_reason, WinReason.ROUND_LIMIT)
        self.assertIs(info.victory.reason, WinReason.ROUND_LIMIT)
        self.assertTrue(info.round_completed)


if __name__ == "__main__":
    unittest.main()
