"""
Browser viewer for live games and saved replays.

``WebRenderer`` records one render snapshot per captured turn, keeps a
running action log built from the captured outcomes, and serves both from a
Flask app with a SocketIO channel for live pushes:

    GET /                      viewer page
    GET /api/current           latest snapshot
    GET /api/frames            every snapshot (replay)
    GET /api/frames/<index>    one snapshot
    GET /api/teams             active counts and elimination causes per team
    GET /api/log               resolved actions and no-ops, oldest first
    GET /api/result            result, winner and reason once decided

The server runs in a daemon thread; it only reads what ``capture`` stored.
"""

from __future__ import annotations

import json
import threading
import time
import webbrowser
from pathlib import Path
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, send_from_directory
from flask_socketio import SocketIO, emit

from infra.logger import get_logger

from ..core.actions import ActionOutcome
from .render_state import RenderStateBuilder

logger = get_logger(__name__)

REPLAY_FORMAT_VERSION = "1.1"
STATIC_DIR = Path(__file__).resolve().parent / "static"


class WebRenderer:
    """Capture snapshots of a game and serve them to the browser viewer."""

    def __init__(self, port: int = 5000, live: bool = True, auto_open: bool = True):
        self.port = port
        self.live = live
        self.frames: List[Dict[str, Any]] = []
        self.action_log: List[Dict[str, Any]] = []

        self.app = Flask(__name__, static_folder=str(STATIC_DIR), static_url_path="")
        self.socketio = SocketIO(self.app, cors_allowed_origins="*", async_mode="threading")
        self._register_routes()
        self._register_events()

        self._server_thread: Optional[threading.Thread] = None
        if live:
            self._start_server(auto_open=auto_open)

    @property
    def latest(self) -> Optional[Dict[str, Any]]:
        return self.frames[-1] if self.frames else None

    def capture(self, state: Dict[str, Any], outcome: Optional[ActionOutcome] = None) -> Dict[str, Any]:
        """
        Record a snapshot of the game and push it to connected viewers.

        Args:
            state: Environment state dict returned by FlagGameEnv
            outcome: Outcome of the action just resolved, if any

        Returns:
            The captured snapshot
        """
        snapshot = RenderStateBuilder.build(state, outcome)
        self.frames.append(snapshot)
        if outcome is not None:
            self.action_log.append(self._log_entry(snapshot, outcome))

        if self.live:
            self.socketio.emit("state_update", snapshot)
        return snapshot

    def result(self) -> Dict[str, Any]:
        """Final standing as far as the captured frames know it."""
        latest = self.latest
        if latest is None:
            return {"game_over": False, "result": None, "winner": None, "reason": None, "rounds": 0}
        return {
            "game_over": latest["game_over"],
            "result": latest["result"],
            "winner": latest["winner"],
            "reason": latest["game_over_reason"],
            "rounds": latest["round"],
        }

    def save(self, filename: str | Path) -> Path:
        """Write frames and the action log to a JSON replay file."""
        payload = {
            "version": REPLAY_FORMAT_VERSION,
            "frames": self.frames,
            "actions": self.action_log,
        }
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("Saved %d frames to %s", len(self.frames), path)
        return path

    def load_replay(self, filename: str | Path, auto_open: bool = True) -> None:
        """Load a replay file and make sure the viewer is being served."""
        data = json.loads(Path(filename).read_text(encoding="utf-8"))
        self.frames = list(data.get("frames", []))
        self.action_log = list(data.get("actions", []))
        logger.info("Loaded replay %s (%d frames)", filename, len(self.frames))

        if not self._is_server_running():
            self._start_server(auto_open=auto_open)
        elif auto_open:
            self._open_browser()

    def clear(self) -> None:
        """Forget captured frames before a new game."""
        self.frames.clear()
        self.action_log.clear()

    # ------------------------------------------------------------------
    # Flask / SocketIO
    # ------------------------------------------------------------------
    def _register_routes(self) -> None:
        app = self.app

        @app.route("/")
        def index():
            return send_from_directory(STATIC_DIR, "index.html")

        @app.route("/api/current")
        def current():
            if self.latest is None:
                return jsonify({"error": "No game captured yet"}), 404
            return jsonify(self.latest)

        @app.route("/api/frames")
        def frames():
            return jsonify({"frames": self.frames, "total_frames": len(self.frames)})

        @app.route("/api/frames/<int:index>")
        def frame(index: int):
            if 0 <= index < len(self.frames):
                return jsonify(self.frames[index])
            return jsonify({"error": f"Frame {index} not found"}), 404

        @app.route("/api/teams")
        def teams():
            return jsonify(self.latest["teams"] if self.latest else {})

        @app.route("/api/log")
        def action_log():
            return jsonify({"actions": self.action_log})

        @app.route("/api/result")
        def result():
            return jsonify(self.result())

    def _register_events(self) -> None:
        @self.socketio.on("connect")
        def handle_connect():
            logger.debug("Viewer connected")
            if self.latest is not None:
                emit("state_update", self.latest)

        @self.socketio.on("request_log")
        def handle_log_request():
            emit("action_log", {"actions": self.action_log})

    @staticmethod
    def _log_entry(snapshot: Dict[str, Any], outcome: ActionOutcome) -> Dict[str, Any]:
        teams = {unit["id"]: unit["team"] for unit in snapshot["units"]}
        return {
            "round": snapshot["round"],
            "team": teams.get(outcome.unit_id) if outcome.unit_id is not None else None,
            **outcome.to_dict(),
        }

    # ------------------------------------------------------------------
    # Server thread
    # ------------------------------------------------------------------
    def _serve(self) -> None:
        self.socketio.run(
            self.app,
            host="0.0.0.0",
            port=self.port,
            debug=False,
            use_reloader=False,
            allow_unsafe_werkzeug=True,
        )

    def _start_server(self, auto_open: bool = True) -> None:
        if self._is_server_running():
            if auto_open:
                self._open_browser()
            return

        self._server_thread = threading.Thread(target=self._serve, daemon=True)
        self._server_thread.start()
        logger.info("Viewer listening on http://localhost:%d", self.port)

        if auto_open:
            # The browser would otherwise race the server socket.
            time.sleep(1.0)
            self._open_browser()

    def _open_browser(self) -> None:
        webbrowser.open(f"http://localhost:{self.port}")

    def _is_server_running(self) -> bool:
        return self._server_thread is not None and self._server_thread.is_alive()
