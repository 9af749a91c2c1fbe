"""
Scenario system for creating and managing game setups.

A scenario is everything needed to start a game: board size, flags, the
units with their classes and starting squares, which team the human plays,
who moves first, the seed and the rule switches. Scenarios are plain config;
the live game is built from one with ``build_state()``.
"""

from __future__ import annotations

import json
import random
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from infra.logger import get_logger
from infra.paths import PROJECT_ROOT, SCENARIO_STORAGE_DIR

from .core.types import GridPos, SkillClass, SpeedClass, Team, TurnPhase
from .entities.unit import Unit
from .utils.id_generator import IdGenerator
from .world.board import Board
from .world.state import GameState, RuleOptions

if TYPE_CHECKING:
    from agents import AgentSpec

logger = get_logger(__name__)


class ScenarioError(ValueError):
    """Raised for setup parameters that cannot produce a playable game."""


# Cumulative probabilities for the unit class draw, in draw order.
UNIT_CLASS_TABLE = (
    (0.15, SpeedClass.FAST, SkillClass.EXPERT),
    (0.40, SpeedClass.SLOW, SkillClass.EXPERT),
    (0.90, SpeedClass.FAST, SkillClass.NOVICE),
    (1.00, SpeedClass.SLOW, SkillClass.NOVICE),
)


def default_flags(rows: int, cols: int) -> Dict[Team, GridPos]:
    return {Team.RED: (0, 0), Team.BLUE: (cols - 1, rows - 1)}


class Scenario:
    """
    A complete, self-contained game setup.

    Example:
        scenario = Scenario(
            rows=3, cols=3,
            flags={Team.RED: (0, 0), Team.BLUE: (2, 2)},
            units=[
                Unit(id=0, team=Team.RED, speed=SpeedClass.FAST, skill=SkillClass.EXPERT, pos=(0, 0)),
                Unit(id=1, team=Team.BLUE, speed=SpeedClass.SLOW, skill=SkillClass.NOVICE, pos=(1, 2)),
            ],
            human_team=Team.RED,
            first_team=Team.RED,
            seed=7,
        )
        state = scenario.build_state()
    """

    def __init__(
        self,
        rows: int = 5,
        cols: int = 5,
        units: Optional[List[Unit]] = None,
        flags: Optional[Dict[Team, GridPos]] = None,
        seed: Optional[int] = None,
        human_team: Optional[Team] = None,
        first_team: Optional[Team] = None,
        max_rounds: Optional[int] = None,
        rules: Optional[RuleOptions] = None,
        agents: Optional[List["AgentSpec"]] = None,
    ):
        """
        Args:
            rows: Board rows (>= 1)
            cols: Board columns (>= 1)
            units: Units with their starting positions set in `pos`
            flags: Flag square per team (default: RED top-left, BLUE bottom-right)
            seed: Seed for the game's random source (None = random)
            human_team: Team driven by intents from the input layer (None = coin flip)
            first_team: Team that acts first each round (None = coin flip)
            max_rounds: Optional round cap; reaching it ends the game as a draw
            rules: Rule switches for the ambiguous readings
            agents: Optional agent specs (opponent, or both sides for headless play)
        """
        if rows < 1 or cols < 1:
            raise ScenarioError(f"Board dimensions must be positive, got {rows}x{cols}")
        if max_rounds is not None and max_rounds < 1:
            raise ScenarioError(f"max_rounds must be positive, got {max_rounds}")

        self.rows = rows
        self.cols = cols
        self.flags: Dict[Team, GridPos] = dict(flags) if flags else default_flags(rows, cols)
        self.seed = seed
        self.human_team = human_team
        self.first_team = first_team
        self.max_rounds = max_rounds
        self.rules = rules or RuleOptions()
        self.agents: Optional[List["AgentSpec"]] = agents

        self.units: List[Unit] = []
        for unit in units or []:
            self.add_unit(unit)

    def add_unit(self, unit: Unit) -> Scenario:
        """Add a unit; its `pos` is the starting square."""
        if any(u.id == unit.id for u in self.units):
            raise ScenarioError(f"Duplicate unit id {unit.id}")
        if not (0 <= unit.pos[0] < self.cols and 0 <= unit.pos[1] < self.rows):
            raise ScenarioError(f"{unit.label()} starts outside the board at {unit.pos}")
        self.units.append(unit)
        return self

    def units_per_team(self, team: Team) -> int:
        return sum(1 for u in self.units if u.team is team)

    def validate(self) -> None:
        """
        Reject setups that cannot produce a game.

        Raises:
            ScenarioError: On missing teams or bad flags
        """
        for team in Team:
            if self.units_per_team(team) < 1:
                raise ScenarioError(f"{team.display_name} needs at least one unit")
        try:
            Board(self.rows, self.cols, self.flags)
        except ValueError as exc:
            raise ScenarioError(str(exc)) from exc

    def build_state(self) -> GameState:
        """
        Create a fresh GameState from this scenario.

        Units are copied, so one scenario can start any number of games. Coin
        flips for the human team and the first team are drawn, in that order,
        from the game's own random source.
        """
        self.validate()
        rng = random.Random(self.seed)
        human_team = self.human_team or (Team.RED if rng.randint(0, 1) == 0 else Team.BLUE)
        first_team = self.first_team or (human_team if rng.randint(0, 1) == 0 else human_team.opponent)

        board = Board(self.rows, self.cols, self.flags)
        units: Dict[int, Unit] = {}
        for template in sorted(self.units, key=lambda u: u.id):
            unit = Unit.from_dict(template.to_dict())
            start = unit.pos
            unit.pos = (-1, -1)
            board.place(unit, *start)
            if unit.start_pos == (-1, -1):
                unit.start_pos = start
            units[unit.id] = unit

        logger.info(
            "Built %dx%d game: %d RED / %d BLUE units, human=%s, first=%s, seed=%s",
            self.rows, self.cols,
            self.units_per_team(Team.RED), self.units_per_team(Team.BLUE),
            human_team.name, first_team.name, self.seed,
        )
        return GameState(
            board=board,
            units=units,
            rng=rng,
            human_team=human_team,
            first_team=first_team,
            rules=self.rules,
            max_rounds=self.max_rounds,
            phase=TurnPhase.ROUND_COMPLETE,
        )

    def clone(self) -> Scenario:
        return Scenario.from_dict(self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        data: Dict[str, Any] = {
            "config": {
                "rows": self.rows,
                "cols": self.cols,
                "seed": self.seed,
                "human_team": self.human_team.name if self.human_team else None,
                "first_team": self.first_team.name if self.first_team else None,
                "max_rounds": self.max_rounds,
                "flags": {team.name: list(pos) for team, pos in self.flags.items()},
                "rules": self.rules.to_dict(),
            },
            "units": [u.to_dict() for u in self.units],
        }
        if self.agents is not None:
            data["agents"] = self._serialize_agents(self.agents)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Scenario:
        """
        Deserialize from ``to_dict()`` output (or a hand-written equivalent).

        Raises:
            ScenarioError: If the data describes an invalid setup
        """
        config = data.get("config", {})
        try:
            flags = config.get("flags")
            scenario = cls(
                rows=int(config.get("rows", 5)),
                cols=int(config.get("cols", 5)),
                flags={Team[name]: tuple(pos) for name, pos in flags.items()} if flags else None,
                seed=config.get("seed"),
                human_team=Team[config["human_team"]] if config.get("human_team") else None,
                first_team=Team[config["first_team"]] if config.get("first_team") else None,
                max_rounds=config.get("max_rounds"),
                rules=RuleOptions.from_dict(config.get("rules")),
                agents=cls._deserialize_agents(data.get("agents")),
            )
            for unit_data in data.get("units", []):
                scenario.add_unit(Unit.from_dict(unit_data))
        except ScenarioError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise ScenarioError(f"Malformed scenario data: {exc}") from exc
        return scenario

    @staticmethod
    def _serialize_agents(agents: List["AgentSpec"]) -> List[Dict[str, Any]]:
        # Local import to avoid circular imports during module load
        from agents import AgentSpec
        return [a.to_dict() if isinstance(a, AgentSpec) else a for a in agents]  # type: ignore[misc]

    @staticmethod
    def _deserialize_agents(data: Any) -> Optional[List["AgentSpec"]]:
        if data is None:
            return None
        # Local import to avoid circular imports during module load
        from agents import AgentSpec
        agents_list: List[AgentSpec] = []
        for value in data:
            if isinstance(value, AgentSpec):
                agents_list.append(value)
            elif isinstance(value, dict):
                agents_list.append(AgentSpec.from_dict(value))
            else:
                raise TypeError(f"Agent definition must be AgentSpec or dict, got {type(value)}")
        return agents_list

    def save_json(self, filepath: str | Path | None = None, indent: int = 2) -> Path:
        """
        Save the scenario as JSON.

        Args:
            filepath: Target path. If None, saves under storage/scenarios with a timestamped name.
            indent: JSON indentation (default: 2)

        Returns:
            The path written
        """
        if filepath is None:
            SCENARIO_STORAGE_DIR.mkdir(parents=True, exist_ok=True)
            timestamp = time.strftime("%Y%m%d_%H%M%S")
            filepath = SCENARIO_STORAGE_DIR / f"scenario_{timestamp}.json"
        else:
            filepath = Path(filepath)
            if not filepath.is_absolute():
                filepath = PROJECT_ROOT / filepath
            filepath.parent.mkdir(parents=True, exist_ok=True)

        logger.info("Saving scenario JSON to %s", filepath)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=indent, ensure_ascii=False)
        return filepath

    @classmethod
    def load_json(cls, filepath: str | Path) -> Scenario:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def __str__(self) -> str:
        return (f"Scenario({self.rows}x{self.cols}, red={self.units_per_team(Team.RED)}, "
                f"blue={self.units_per_team(Team.BLUE)})")

    def __repr__(self) -> str:
        return f"Scenario(units={self.units})"


# =============================================================================
# SCENARIO BUILDERS
# =============================================================================

def draw_unit_classes(rng: random.Random) -> tuple[SpeedClass, SkillClass]:
    roll = rng.random()
    for threshold, speed, skill in UNIT_CLASS_TABLE:
        if roll < threshold:
            return speed, skill
    return UNIT_CLASS_TABLE[-1][1], UNIT_CLASS_TABLE[-1][2]


def spawn_positions(flag: GridPos, count: int, rows: int, cols: int) -> List[GridPos]:
    """
    Starting squares for a team: one unit per cell, beginning on the flag.

    The sweep walks along the flag's row away from its edge, then continues
    on the next row inward, starting again from the flag's column.
    """
    start_x, start_y = flag
    step_x = 1 if start_x == 0 else -1
    step_y = 1 if start_y == 0 else -1
    positions: List[GridPos] = []
    x, y = start_x, start_y
    while len(positions) < count:
        positions.append((x, y))
        x += step_x
        if not 0 <= x < cols:
            x = start_x
            y += step_y
            if not 0 <= y < rows:
                break
    return positions


def create_random_scenario(
    rows: int = 5,
    cols: int = 5,
    units_per_team: int = 3,
    seed: Optional[int] = None,
    human_team: Optional[Team] = None,
    first_team: Optional[Team] = None,
    max_rounds: Optional[int] = None,
    rules: Optional[RuleOptions] = None,
    agents: Optional[List["AgentSpec"]] = None,
) -> Scenario:
    """
    Build the classic randomized setup.

    Flags go to opposite corners (which team gets the top-left corner is a
    coin flip), every unit draws its class from UNIT_CLASS_TABLE, and teams
    spawn around their own flag, RED first.

    Raises:
        ScenarioError: For non-positive sizes or a board too small for both teams
    """
    if rows < 1 or cols < 1:
        raise ScenarioError(f"Board dimensions must be positive, got {rows}x{cols}")
    if units_per_team < 1:
        raise ScenarioError(f"Units per team must be positive, got {units_per_team}")
    if 2 * units_per_team > rows * cols:
        raise ScenarioError(
            f"A {rows}x{cols} board cannot hold {units_per_team} units per team "
            f"without the two spawn areas overlapping"
        )

    rng = random.Random(seed)
    corners = [(0, 0), (cols - 1, rows - 1)]
    if rng.randint(0, 1) == 1:
        corners.reverse()
    flags = {Team.RED: corners[0], Team.BLUE: corners[1]}

    ids = IdGenerator()
    units: List[Unit] = []
    for team in (Team.RED, Team.BLUE):
        for pos in spawn_positions(flags[team], units_per_team, rows, cols):
            speed, skill = draw_unit_classes(rng)
            units.append(Unit(id=ids.next_id(), team=team, speed=speed, skill=skill, pos=pos, start_pos=pos))

    return Scenario(
        rows=rows,
        cols=cols,
        units=units,
        flags=flags,
        seed=seed,
        human_team=human_team,
        first_team=first_team,
        max_rounds=max_rounds,
        rules=rules,
        agents=agents,
    )


if __name__ == "__main__":
    # Can be run via python -m ctf.scenario
    from infra.logger import configure_logging
    configure_logging(level="INFO", json=True)
    create_random_scenario(seed=42).save_json()
