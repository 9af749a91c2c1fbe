"""Win evaluation order: capture, elimination, retreat."""

import unittest

from ctf.core.types import GameResult, SkillClass, SpeedClass, Team, WinReason
from ctf.entities import Unit
from ctf.mechanics import VictoryConditions, VictoryResult
from ctf.scenario import Scenario
from ctf.world import RuleOptions


def unit(unit_id, team, pos) -> Unit:
    return Unit(id=unit_id, team=team, speed=SpeedClass.SLOW, skill=SkillClass.NOVICE, pos=pos)


def build_state(*units, rules=None):
    # RED flag (0, 0), BLUE flag (4, 4)
    return Scenario(
        rows=5, cols=5, units=list(units),
        human_team=Team.RED, first_team=Team.RED, seed=0, rules=rules,
    ).build_state()


class TestVictoryConditions(unittest.TestCase):
    def setUp(self) -> None:
        self.victory = VictoryConditions()

    def test_in_progress(self) -> None:
        state = build_state(unit(0, Team.RED, (1, 0)), unit(1, Team.BLUE, (3, 4)))
        result = self.victory.check_all(state)
        self.assertFalse(result.is_game_over)
        self.assertIs(result.result, GameResult.IN_PROGRESS)
        self.assertIsNone(result.winner)

    def test_capture(self) -> None:
        state = build_state(unit(0, Team.RED, (4, 4)), unit(1, Team.BLUE, (2, 2)))
        result = self.victory.check_all(state)
        self.assertIs(result.winner, Team.RED)
        self.assertIs(result.reason, WinReason.CAPTURE)
        self.assertIs(result.result, GameResult.RED_WINS)

    def test_eliminated_unit_on_flag_does_not_capture(self) -> None:
        state = build_state(
            unit(0, Team.RED, (4, 4)),
            unit(2, Team.RED, (1, 0)),
            unit(1, Team.BLUE, (2, 2)),
        )
        state.get_unit(0).eliminate("Hit in torso")
        self.assertFalse(self.victory.check_all(state).is_game_over)

    def test_capture_is_checked_before_elimination(self) -> None:
        state = build_state(unit(0, Team.RED, (0, 1)), unit(1, Team.BLUE, (0, 0)))
        state.get_unit(0).eliminate("Hit in torso")

        result = self.victory.check_all(state)

        self.assertIs(result.winner, Team.BLUE)
        self.assertIs(result.reason, WinReason.CAPTURE)

    def test_elimination_beats_retreat(self) -> None:
        state = build_state(unit(0, Team.RED, (1, 1)), unit(1, Team.BLUE, (4, 4)))
        state.get_unit(0).eliminate("Hit in torso")

        result = self.victory.check_all(state)

        self.assertIs(result.winner, Team.BLUE)
        self.assertIs(result.reason, WinReason.ELIMINATION)

    def test_retreat(self) -> None:
        state = build_state(
            unit(0, Team.RED, (0, 0)),
            unit(2, Team.RED, (0, 0)),
            unit(3, Team.RED, (2, 2)),
            unit(1, Team.BLUE, (3, 3)),
        )
        # One RED unit is still out in the field.
        self.assertFalse(self.victory.check_all(state).is_game_over)

        state.get_unit(3).eliminate("Hit in torso")
        result = self.victory.check_all(state)

        self.assertIs(result.winner, Team.BLUE)
        self.assertIs(result.reason, WinReason.RETREAT)
        self.assertIn("retreat", result.message)

    def test_red_is_checked_first_when_both_retreat(self) -> None:
        state = build_state(unit(0, Team.RED, (0, 0)), unit(1, Team.BLUE, (4, 4)))
        result = self.victory.check_all(state)
        self.assertIs(result.winner, Team.BLUE)
        self.assertIs(result.reason, WinReason.RETREAT)

    def test_retreat_can_wait_for_every_survivor_to_act(self) -> None:
        state = build_state(
            unit(0, Team.RED, (0, 0)),
            unit(1, Team.BLUE, (2, 2)),
            rules=RuleOptions(retreat_requires_all_acted=True),
        )
        self.assertFalse(self.victory.check_all(state).is_game_over)

        state.get_unit(0).acted_this_round = True
        self.assertIs(self.victory.check_all(state).reason, WinReason.RETREAT)

    def test_all_acted_option_needs_every_survivor_marked(self) -> None:
        # One action per side per round leaves the second survivor unmarked.
        state = build_state(
            unit(0, Team.RED, (0, 0)),
            unit(2, Team.RED, (0, 0)),
            unit(1, Team.BLUE, (2, 2)),
            rules=RuleOptions(retreat_requires_all_acted=True),
        )
        state.get_unit(0).acted_this_round = True
        self.assertFalse(self.victory.check_all(state).is_game_over)

        state.get_unit(2).acted_this_round = True
        self.assertIs(self.victory.check_all(state).winner, Team.BLUE)


class TestVictoryResult(unittest.TestCase):
    def test_dict_round_trip(self) -> None:
        result = VictoryResult.win(Team.BLUE, WinReason.ELIMINATION, "done")
        self.assertEqual(VictoryResult.from_dict(result.to_dict()), result)
        self.assertTrue(result.to_dict()["is_game_over"])


if __name__ == "__main__":
    unittest.main()
