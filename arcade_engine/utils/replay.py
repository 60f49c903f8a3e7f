"""Replay serialization: per-tick snapshots written to a JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from arcade_engine.core.snapshot import Snapshot

logger = logging.getLogger(__name__)


class ReplayRecorder:
    """Accumulates snapshots and flushes them to a JSON replay file."""

    __slots__ = ("_path", "_ticks", "_seed", "_variant")

    def __init__(self, path: str | Path, seed: int, variant: str) -> None:
        self._path = Path(path)
        self._seed = seed
        self._variant = variant
        self._ticks: list[dict[str, Any]] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def recorded(self) -> int:
        return len(self._ticks)

    def record(self, snapshot: Snapshot, intent: Any = None) -> None:
        actors = [
            {
                "id": a.id,
                "kind": a.kind.value,
                "pos": [a.x, a.y],
                "hp": a.hp,
                "length": 1 + len(a.segments),
            }
            for a in snapshot.actors
        ]
        self._ticks.append(
            {
                "run": snapshot.run_index,
                "tick": snapshot.tick,
                "intent": _intent_label(intent),
                "score": snapshot.score,
                "state": snapshot.lifecycle_state.value,
                "interval_ms": snapshot.interval_ms,
                "actors": actors,
            }
        )

    def flush(self) -> None:
        """Write accumulated data to disk."""
        replay = {
            "version": "1.0",
            "variant": self._variant,
            "seed": self._seed,
            "total_ticks": len(self._ticks),
            "ticks": self._ticks,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(replay, indent=2), encoding="utf-8")
        logger.info("Replay saved to %s (%d ticks)", self._path, len(self._ticks))


def _intent_label(intent: Any) -> Any:
    if intent is None:
        return None
    value = getattr(intent, "value", None)
    if value is not None:
        return value
    card_id = getattr(intent, "card_id", None)
    if card_id is not None:
        return {"reveal": card_id}
    return str(intent)
