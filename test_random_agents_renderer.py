"""
End-to-end headless games with the bundled agents.

Running normally (``python test_random_agents_renderer.py``) will launch the
live viewer, pit a RandomAgent against the GreedyAgent, and stream turns to
the UI in real time. The unittest entrypoint runs short headless games
through GameRunner to ensure rendering keeps up with gameplay.
"""

import time
import unittest

from agents import AgentSpec
from ctf import Scenario, WebRenderer, create_random_scenario
from ctf.core import Team
from ctf.core.types import GameResult
from game_runner import GameRunner, run_multiple_games


def make_headless_scenario(seed: int = 4, max_rounds: int = 40) -> Scenario:
    return create_random_scenario(
        rows=5,
        cols=5,
        units_per_team=3,
        seed=seed,
        max_rounds=max_rounds,
        agents=[
            AgentSpec(team=Team.RED, type="random", init_params={"seed": 1}),
            AgentSpec(team=Team.BLUE, type="greedy"),
        ],
    )


class TestRandomAgentsRender(unittest.TestCase):
    def test_random_vs_greedy_streams_frames(self) -> None:
        runner = GameRunner(make_headless_scenario())
        renderer = WebRenderer(port=5052, live=False, auto_open=False)

        frames = runner.run(include_history=True)
        for frame in frames:
            renderer.capture({"world": frame.world}, frame.outcome)

        self.assertTrue(runner.done)
        self.assertTrue(frames[-1].done)
        self.assertEqual(len(renderer.frames), len(frames))
        self.assertTrue(renderer.result()["game_over"])
        self.assertEqual(renderer.result()["result"], runner.world.result.value)
        self.assertLessEqual(runner.round, 40)
        self.assertIsNot(runner.world.result, GameResult.IN_PROGRESS)
        self.assertIn("intents", frames[0].to_dict())

    def test_human_team_without_agent_needs_intents(self) -> None:
        scenario = make_headless_scenario()
        scenario.agents = [AgentSpec(team=Team.BLUE, type="greedy")]
        scenario.human_team = Team.RED
        scenario.first_team = Team.RED
        runner = GameRunner(scenario)

        self.assertTrue(runner.needs_human_input)
        with self.assertRaises(ValueError):
            runner.step()
        with self.assertRaises(RuntimeError):
            runner.run()

    def test_same_seed_same_result(self) -> None:
        first = GameRunner(make_headless_scenario(seed=9)).run()
        second = GameRunner(make_headless_scenario(seed=9)).run()
        self.assertEqual(first.world.to_dict()["units"], second.world.to_dict()["units"])

    def test_run_multiple_games_summary(self) -> None:
        summary = run_multiple_games(3, seed=10, max_rounds=30)
        self.assertEqual(summary["games"], 3)
        self.assertEqual(sum(summary["results"].values()), 3)
        self.assertEqual(set(summary["results"]), {"red_wins", "blue_wins", "draw"})


if __name__ == "__main__":
    print("Starting live random-agent demo at http://localhost:5056 ...")
    runner = GameRunner(make_headless_scenario(seed=None, max_rounds=150))
    renderer = WebRenderer(port=5056, live=True, auto_open=True)
    renderer.capture(runner.state)

    while not runner.done:
        frame = runner.step()
        renderer.capture(runner.state, frame.outcome)
        time.sleep(0.35)

    print(f"Game finished: {runner.world.game_over_reason}")
