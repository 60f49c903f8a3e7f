"""Entry point: ``python -m arcade_engine``.

Supports two modes:
  - ``python -m arcade_engine serve``  -> FastAPI server hosting live sessions
  - ``python -m arcade_engine cli``    -> headless run of one variant on a manual clock
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)

VARIANT_KEYS = ("snake", "pacman", "flappy", "invaders", "memory")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tick-driven arcade simulation engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI session server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--max-sessions", type=int, default=64)
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run one variant headless with scripted input")
    cli.add_argument("variant", choices=VARIANT_KEYS)
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--ticks", type=int, default=500, help="Tick (or action) budget per run")
    cli.add_argument("--runs", type=int, default=1)
    cli.add_argument("--input-rate", type=float, default=0.25, help="Chance of a scripted intent per tick")
    cli.add_argument("--difficulty", type=str, default=None, choices=["easy", "medium", "hard"])
    cli.add_argument("--replay", type=str, default="replay.json")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from arcade_engine.api.app import create_app
    from arcade_engine.config import ServerConfig

    config = ServerConfig(
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        max_sessions=args.max_sessions,
    )
    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from arcade_engine.config import SessionConfig
    from arcade_engine.core.enums import LifecycleState
    from arcade_engine.engine.clock import ManualClock
    from arcade_engine.engine.session import create_session
    from arcade_engine.utils.logging import setup_logging
    from arcade_engine.utils.replay import ReplayRecorder
    from arcade_engine.utils.script import ScriptedInput
    from arcade_engine.variants import MemoryVariant, resolve_variant

    setup_logging(args.log_level)

    variant = resolve_variant(args.variant)
    config: SessionConfig | dict
    if args.difficulty is not None and variant.key == MemoryVariant.key:
        config = MemoryVariant.config_for(args.difficulty, seed=args.seed, log_level=args.log_level)
    else:
        config = {"seed": args.seed, "log_level": args.log_level}

    clock = ManualClock()
    session = create_session(variant, config, clock=clock)
    recorder = ReplayRecorder(args.replay, seed=args.seed, variant=variant.key)
    session.on_snapshot(recorder.record)
    script = ScriptedInput(variant.key, args.seed, rate=args.input_rate)

    logger.info("=== %s headless run started (seed=%d) ===", variant.title, args.seed)
    scores: list[int] = []
    for run in range(args.runs):
        if run > 0:
            session.restart()
        session.start()
        for step in range(args.ticks):
            snapshot = session.snapshot()
            intent = script.next_intent(snapshot, step)
            if intent is not None:
                session.submit_intent(intent)
            if variant.tick_driven:
                clock.advance(1)
            elif clock.running:
                clock.advance(1)  # the conceal timer fires immediately in headless mode
            if session.state == LifecycleState.OVER:
                break
        final = session.snapshot()
        scores.append(final.score)
        logger.info(
            "Run %d finished: state=%s outcome=%s score=%d ticks=%d",
            run, final.lifecycle_state.value,
            final.outcome.value if final.outcome else "-", final.score, final.tick,
        )

    recorder.flush()
    session.dispose()
    logger.info("=== Done: best score %d over %d run(s) ===", max(scores, default=0), len(scores))


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    if args.command == "cli":
        _run_cli(args)
    else:
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)


if __name__ == "__main__":
    main()
