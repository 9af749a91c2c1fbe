"""HTTP API entrypoint for driving the game from a web UI."""

from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ctf.core.actions import Intent
from ctf.core.types import ActionType, Team
from ctf.rendering import RenderStateBuilder
from ctf.scenario import Scenario, ScenarioError, create_random_scenario
from game_runner import GameRunner
from infra.logger import get_logger

app = FastAPI(title="Capture the Flag")
runner: GameRunner | None = None
log = get_logger(__name__)

# Allow the browser-based control panel (served from file:// or other origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class StartRequest(BaseModel):
    scenario: dict | None = None
    rows: int = 5
    cols: int = 5
    units_per_team: int = 3
    seed: int | None = None
    human_team: str | None = None
    max_rounds: int | None = None


class ActionRequest(BaseModel):
    unit_id: int
    kind: ActionType
    direction: str | int
    amount: int | str | None = Field(default=None, description='Distance/range, or "auto"/null to roll')


class StepRequest(BaseModel):
    injections: dict | None = None


def _require_runner() -> GameRunner:
    if runner is None:
        raise HTTPException(400, "No active game")
    return runner


def _snapshot(active: GameRunner) -> Dict[str, Any]:
    return RenderStateBuilder.build(active.state)


def _frames_payload(frames) -> List[Dict[str, Any]]:
    return [frame.to_dict() for frame in frames]


@app.post("/start")
def start(request: StartRequest):
    global runner
    try:
        if request.scenario is not None:
            scenario = Scenario.from_dict(request.scenario)
        else:
            scenario = create_random_scenario(
                rows=request.rows,
                cols=request.cols,
                units_per_team=request.units_per_team,
                seed=request.seed,
                human_team=Team[request.human_team.upper()] if request.human_team else None,
                max_rounds=request.max_rounds,
            )
    except (ScenarioError, KeyError) as exc:
        raise HTTPException(400, f"Invalid scenario: {exc}") from exc

    try:
        runner = GameRunner(scenario)
    except (ValueError, TypeError) as exc:
        # Unknown agent types or bad agent parameters.
        raise HTTPException(400, f"Invalid agent setup: {exc}") from exc

    # The opponent may act first; play it up to the human's turn.
    frames = runner.advance_agents() if runner.human_controlled else []
    log.info("Game started via API (human=%s)", runner.world.human_team.name)
    return {"success": True, "frames": _frames_payload(frames), "state": _snapshot(runner)}


@app.post("/action")
def action(request: ActionRequest):
    active = _require_runner()
    if active.done:
        raise HTTPException(409, "Game is already finished")
    if not active.needs_human_input:
        raise HTTPException(409, "It is not the human team's turn")

    try:
        intent = Intent.from_dict(request.model_dump(mode="json"))
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc

    frame = active.step(intent)
    frames = [frame]
    if frame.outcome is not None and frame.outcome.resolved:
        frames.extend(active.advance_agents())
    return {
        "outcome": frame.outcome.to_dict() if frame.outcome else None,
        "frames": _frames_payload(frames),
        "state": _snapshot(active),
    }


@app.post("/step")
def step(request: StepRequest):
    active = _require_runner()
    if active.needs_human_input:
        raise HTTPException(409, "Waiting for a human action")
    try:
        return active.step(injections=request.injections).to_dict()
    except RuntimeError as exc:
        raise HTTPException(400, str(exc)) from exc


@app.get("/status")
def status():
    if runner is None:
        return {"active": False}
    return {
        "active": True,
        "round": runner.round,
        "phase": runner.world.phase.value,
        "awaiting_team": runner.awaiting_team.name if runner.awaiting_team else None,
        "needs_human_input": runner.needs_human_input,
        "done": runner.done,
        "winner": runner.world.winner.name if runner.world.winner else None,
    }


@app.get("/state")
def state():
    return _snapshot(_require_runner())
