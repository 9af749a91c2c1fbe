"""Local launcher that runs the API and serves the UI from one command."""

import argparse
import json
import threading
import webbrowser

import uvicorn

from infra.logger import configure_logging, get_logger
from infra.settings import load_settings


def _open_browser(url: str, delay: float = 1.0) -> None:
    """Open the UI in the default browser after the server spins up."""
    timer = threading.Timer(delay, lambda: webbrowser.open(url))
    timer.daemon = True
    timer.start()


def _build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the capture-the-flag backend, or simulate games headlessly.")
    parser.add_argument("--log-level", default=settings.log_level, help=f"Log level (default: {settings.log_level})")
    subparsers = parser.add_subparsers(dest="command")

    _add_serve_arguments(parser)

    simulate = subparsers.add_parser("simulate", help="Play headless agent-vs-agent games")
    simulate.add_argument("--games", type=int, default=10, help="Number of games (default: 10)")
    simulate.add_argument("--rows", type=int, default=5)
    simulate.add_argument("--cols", type=int, default=5)
    simulate.add_argument("--units", type=int, default=3, help="Units per team (default: 3)")
    simulate.add_argument("--seed", type=int, default=settings.seed, help="Base seed; game i uses seed + i")
    simulate.add_argument("--max-rounds", type=int, default=200, help="Round cap per game, draw when reached")
    simulate.add_argument("--red", default="greedy", help="Agent type for RED (default: greedy)")
    simulate.add_argument("--blue", default="greedy", help="Agent type for BLUE (default: greedy)")
    return parser


def _add_serve_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port for the API/UI (default: 8000)")
    parser.add_argument(
        "--reload",
        dest="reload",
        action="store_true",
        default=True,
        help="Enable auto-reload for development (default: on)",
    )
    parser.add_argument(
        "--no-reload",
        dest="reload",
        action="store_false",
        help="Disable auto-reload",
    )
    parser.add_argument("--no-browser", action="store_true", help="Do not auto-open the UI in the browser")


def serve(args, log) -> None:
    url = f"http://{args.host}:{args.port}"
    if not args.no_browser:
        _open_browser(f"{url}/docs")

    log.info("Starting capture-the-flag backend at %s", url)
    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )


def simulate(args, log) -> dict:
    from game_runner import run_multiple_games

    log.info("Simulating %d games (%s vs %s)", args.games, args.red, args.blue)
    summary = run_multiple_games(
        args.games,
        rows=args.rows,
        cols=args.cols,
        units_per_team=args.units,
        seed=args.seed,
        max_rounds=args.max_rounds,
        red_agent=args.red,
        blue_agent=args.blue,
    )
    print(json.dumps(summary, indent=2))
    return summary


def main(argv=None):
    settings = load_settings()
    args = _build_parser(settings).parse_args(argv)

    # Configure logging once at startup (console + file).
    configure_logging(level=args.log_level.upper(), json=settings.log_json)
    log = get_logger(__name__)

    if args.command == "simulate":
        simulate(args, log)
    else:
        serve(args, log)


if __name__ == "__main__":
    main()
