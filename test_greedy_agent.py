"""Greedy opponent: candidate ordering, nearest-unit stickiness and the all-units variant."""

import unittest

from agents import AgentSpec, GreedyAgent, TeamIntel, create_agent_from_spec
from ctf import FlagGameEnv
from ctf.core.actions import Intent, Requested
from ctf.core.types import ActionType, MoveDir, SkillClass, SpeedClass, Team
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


def scenario(*units) -> Scenario:
    # RED flag (0, 0), BLUE flag (4, 4); BLUE is the greedy side and acts first.
    return Scenario(rows=5, cols=5, units=list(units), human_team=Team.RED, first_team=Team.BLUE, seed=0)


class TestApproachDirections(unittest.TestCase):
    def test_primary_axis_first(self) -> None:
        self.assertEqual(GreedyAgent.approach_directions((4, 2), (0, 0)), [MoveDir.LEFT, MoveDir.UP])
        self.assertEqual(GreedyAgent.approach_directions((1, 4), (0, 0)), [MoveDir.UP, MoveDir.LEFT])
        self.assertEqual(GreedyAgent.approach_directions((0, 0), (1, 3)), [MoveDir.DOWN, MoveDir.RIGHT])

    def test_ties_prefer_horizontal(self) -> None:
        self.assertEqual(GreedyAgent.approach_directions((4, 4), (0, 0)), [MoveDir.LEFT, MoveDir.UP])

    def test_zero_gaps_are_skipped(self) -> None:
        self.assertEqual(GreedyAgent.approach_directions((0, 4), (0, 0)), [MoveDir.UP])
        self.assertEqual(GreedyAgent.approach_directions((2, 2), (2, 2)), [])


class TestTeamIntel(unittest.TestCase):
    def test_view_skips_eliminated_units(self) -> None:
        state = scenario(
            unit(0, Team.RED, (1, 1)),
            unit(4, Team.RED, (0, 2)),
            unit(1, Team.BLUE, (4, 4)),
            unit(2, Team.BLUE, (3, 3)),
        ).build_state()
        state.get_unit(4).eliminate("Hit in torso")
        state.get_unit(2).eliminate("Hit in torso")

        intel = TeamIntel.build(state, Team.BLUE)

        self.assertEqual(intel.enemy_flag, (0, 0))
        self.assertEqual([e.id for e in intel.enemies], [0])
        self.assertEqual([u.id for u in intel.friendlies], [1, 2])
        self.assertEqual([u.id for u in intel.by_distance_to_enemy_flag()], [1])

    def test_metadata_lists_remaining_enemies(self) -> None:
        state = scenario(unit(0, Team.RED, (1, 1)), unit(1, Team.BLUE, (4, 2))).build_state()
        _, meta = GreedyAgent(Team.BLUE).get_intents({"world": state})
        self.assertEqual(meta["enemies_left"], [0])


class TestCandidates(unittest.TestCase):
    def test_novice_candidate_order(self) -> None:
        state = scenario(unit(0, Team.RED, (1, 1)), unit(1, Team.BLUE, (4, 2))).build_state()
        intents, meta = GreedyAgent(Team.BLUE).get_intents({"world": state})

        scan = [Intent.attack(1, d, attack_range=1) for d in (MoveDir.UP, MoveDir.DOWN, MoveDir.LEFT, MoveDir.RIGHT)]
        moves = [Intent.move(1, MoveDir.LEFT, distance=1), Intent.move(1, MoveDir.UP, distance=1)]
        self.assertEqual(intents, scan + moves + scan)
        self.assertEqual(meta["units"], [1])
        self.assertEqual(meta["candidates"], 10)

    def test_expert_scans_every_range_and_fast_moves_full_capacity(self) -> None:
        state = scenario(unit(0, Team.RED, (1, 1)), unit(1, Team.BLUE, (4, 4), fast=True, expert=True)).build_state()
        intents, _ = GreedyAgent(Team.BLUE).get_intents({"world": state})

        attacks = [(i.direction, i.amount) for i in intents[:8]]
        self.assertEqual(attacks, [
            (MoveDir.UP, Requested(1)), (MoveDir.UP, Requested(2)),
            (MoveDir.DOWN, Requested(1)), (MoveDir.DOWN, Requested(2)),
            (MoveDir.LEFT, Requested(1)), (MoveDir.LEFT, Requested(2)),
            (MoveDir.RIGHT, Requested(1)), (MoveDir.RIGHT, Requested(2)),
        ])
        moves = [i for i in intents if i.kind is ActionType.MOVE]
        self.assertEqual(moves, [Intent.move(1, MoveDir.LEFT, distance=2), Intent.move(1, MoveDir.UP, distance=2)])
        self.assertEqual(len(intents), 18)

    def test_only_the_nearest_unit_is_used(self) -> None:
        state = scenario(
            unit(0, Team.RED, (0, 1)),
            unit(1, Team.BLUE, (4, 4)),
            unit(2, Team.BLUE, (2, 1)),
        ).build_state()
        intents, meta = GreedyAgent(Team.BLUE).get_intents({"world": state})

        self.assertEqual({i.unit_id for i in intents}, {2})
        self.assertEqual(meta["units"], [2])

    def test_distance_ties_keep_roster_order(self) -> None:
        state = scenario(
            unit(0, Team.RED, (0, 1)),
            unit(3, Team.BLUE, (2, 1)),
            unit(5, Team.BLUE, (1, 2)),
        ).build_state()
        intents, _ = GreedyAgent(Team.BLUE).get_intents({"world": state})
        self.assertEqual({i.unit_id for i in intents}, {3})

    def test_try_all_units_variant(self) -> None:
        state = scenario(
            unit(0, Team.RED, (0, 1)),
            unit(1, Team.BLUE, (4, 4)),
            unit(2, Team.BLUE, (2, 1)),
        ).build_state()
        intents, meta = GreedyAgent(Team.BLUE, try_all_units=True).get_intents({"world": state})

        self.assertEqual(meta["units"], [2, 1])
        self.assertEqual(intents[0].unit_id, 2)
        self.assertEqual(intents[-1].unit_id, 1)

    def test_no_live_units_no_candidates(self) -> None:
        state = scenario(unit(0, Team.RED, (0, 1)), unit(1, Team.BLUE, (4, 4))).build_state()
        state.get_unit(1).eliminate("Hit in torso")

        intents, meta = GreedyAgent(Team.BLUE).get_intents({"world": state})

        self.assertEqual(intents, [])
        self.assertEqual(meta["candidates"], 0)


class TestGreedyInGame(unittest.TestCase):
    def test_shoots_an_adjacent_enemy_first(self) -> None:
        env = FlagGameEnv()
        state = env.reset(scenario(unit(0, Team.RED, (2, 1)), unit(2, Team.RED, (0, 3)), unit(1, Team.BLUE, (2, 2))))
        env.state.rng = ScriptedRandom([0.30])

        intents, _ = GreedyAgent(Team.BLUE).get_intents(state)
        _, outcome, _, info = env.step(intents)

        self.assertTrue(outcome.success)
        self.assertEqual(len(info.attempts), 1)
        self.assertEqual(outcome.eliminated_unit_ids, frozenset({0}))

    def test_stuck_nearest_unit_means_no_action(self) -> None:
        units = (
            unit(0, Team.RED, (1, 0)),
            unit(1, Team.BLUE, (2, 0)),
            unit(2, Team.BLUE, (4, 4)),
        )
        env = FlagGameEnv()
        state = env.reset(scenario(*units))
        # Both shots at the blocking unit miss.
        env.state.rng = ScriptedRandom([0.90, 0.90])

        intents, _ = GreedyAgent(Team.BLUE).get_intents(state)
        _, outcome, _, info = env.step(intents)

        self.assertEqual(outcome.message, "Blue Team couldn't perform any actions.")
        self.assertEqual(len(info.attempts), len(intents))
        self.assertEqual(env.state.get_unit(2).pos, (4, 4))
        self.assertEqual(env.state.rng.draws, 2)

    def test_try_all_units_moves_the_next_unit(self) -> None:
        units = (
            unit(0, Team.RED, (1, 0)),
            unit(1, Team.BLUE, (2, 0)),
            unit(2, Team.BLUE, (4, 4)),
        )
        env = FlagGameEnv()
        state = env.reset(scenario(*units))
        env.state.rng = ScriptedRandom([0.90, 0.90])

        agent = create_agent_from_spec(
            AgentSpec(team=Team.BLUE, type="greedy", init_params={"try_all_units": True})
        ).agent
        intents, _ = agent.get_intents(state)
        _, outcome, _, _ = env.step(intents)

        self.assertTrue(outcome.success)
        self.assertEqual(env.state.get_unit(2).pos, (3, 4))


if __name__ == "__main__":
    unittest.main()
