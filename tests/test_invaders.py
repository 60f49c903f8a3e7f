"""Tests for the invaders variant: formation march, bullets and bunkers."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.arena import ArcadeArena, build_loop
from arcade_engine.core.entity_model import EntityModel
from arcade_engine.core.enums import ActorKind, Intent, Outcome
from arcade_engine.core.models import Actor, Vector2
from arcade_engine.systems.rng import DeterministicRNG
from arcade_engine.variants.invaders import InvadersVariant, row_value


def _make_model(rows: int = 1, columns: int = 1, bunkers: int = 0) -> EntityModel:
    variant = InvadersVariant()
    config = variant.configure({"actor_counts": {"rows": rows, "columns": columns, "bunkers": bunkers}})
    return variant.initial_model(config, DeterministicRNG(3))


def _only_invader(model: EntityModel) -> Actor:
    invaders = model.of_kind(ActorKind.ENEMY)
    assert len(invaders) == 1
    return invaders[0]


def _add_bullet(model: EntityModel, x: float, y: float) -> Actor:
    bullet = Actor(
        id=model.allocate_actor_id(),
        kind=ActorKind.PROJECTILE,
        position=Vector2(x, y),
        size=Vector2(4, 12),
        tag="bullet",
    )
    model.add_actor(bullet)
    return bullet


class TestFormation:

    def test_default_layout(self):
        model = _make_model(rows=5, columns=10, bunkers=4)
        invaders = model.of_kind(ActorKind.ENEMY)
        assert len(invaders) == 50
        assert len(model.of_kind(ActorKind.STATIC)) == 4
        assert sorted({a.value for a in invaders}) == [10, 20, 30]

    def test_row_values(self):
        assert [row_value(r) for r in range(5)] == [30, 20, 20, 10, 10]

    def test_reverses_and_drops_at_edge(self):
        model = _make_model()
        _only_invader(model).position = Vector2(768, 40)
        loop = build_loop(InvadersVariant(), model)

        invader = _only_invader(loop.tick(None).model)
        assert invader.position == Vector2(768, 45)
        assert invader.direction == Intent.LEFT

        invader = _only_invader(loop.tick(None).model)
        assert invader.position == Vector2(758, 45)

    def test_shift_is_clamped_at_edge(self):
        model = _make_model()
        _only_invader(model).position = Vector2(765, 40)
        invader = _only_invader(build_loop(InvadersVariant(), model).tick(None).model)
        assert invader.position == Vector2(768, 40)
        assert invader.direction == Intent.RIGHT

    def test_crossing_the_line_loses(self):
        model = _make_model()
        _only_invader(model).position = Vector2(300, 361)
        result = build_loop(InvadersVariant(), model).tick(None)
        assert result.outcome == Outcome.LOST
        assert not result.terminated


class TestPlayer:

    def test_fire_spawns_bullet_above_cannon(self):
        model = build_loop(InvadersVariant(), _make_model()).tick(Intent.FIRE).model
        bullets = model.of_kind(ActorKind.PROJECTILE)
        assert len(bullets) == 1
        assert bullets[0].position == Vector2(398, 520)
        assert model.stats["shots"] == 1

    def test_bullet_moves_up(self):
        loop = build_loop(InvadersVariant(), _make_model())
        loop.tick(Intent.FIRE)
        bullet = loop.tick(None).model.of_kind(ActorKind.PROJECTILE)[0]
        assert bullet.position.y == 512

    def test_cannon_stays_on_screen(self):
        model = _make_model()
        model.player.position = Vector2(0, 560)
        result = build_loop(InvadersVariant(), model).tick(Intent.LEFT)
        assert result.model.player.position == Vector2(0, 560)

    def test_invader_touching_cannon_ends_run(self):
        model = _make_model()
        _only_invader(model).position = Vector2(370, 340)
        model.player.position = Vector2(380, 340)
        result = build_loop(InvadersVariant(), model).tick(None)
        assert result.terminated


class TestHits:

    def test_bullet_destroys_invader_and_wins(self):
        model = _make_model()
        invader = _only_invader(model)
        invader.position = Vector2(100, 100)
        bullet = _add_bullet(model, 110, 118)
        result = build_loop(InvadersVariant(), model).tick(None)

        assert result.model.score == invader.value == 30
        assert bullet.id not in result.model.actors
        assert result.outcome == Outcome.WON

    def test_bunker_absorbs_bullet(self):
        model = _make_model(bunkers=1)
        bunker = model.of_kind(ActorKind.STATIC)[0]
        bullet = _add_bullet(model, 150, 470)
        result = build_loop(InvadersVariant(), model).tick(None)

        assert bullet.id not in result.model.actors
        assert result.model.actors[bunker.id].hp == 2

    def test_bullet_leaving_screen_is_removed(self):
        model = _make_model()
        bullet = _add_bullet(model, 200, 4)
        result = build_loop(InvadersVariant(), model).tick(None)
        assert bullet.id not in result.model.actors


class TestInvadersSession:

    def test_only_steps_and_fire_accepted(self):
        arena = ArcadeArena("invaders")
        arena.start()
        assert arena.press(Intent.UP) is False
        assert arena.press(Intent.FIRE) is True
        arena.run_ticks(1)
        assert len(arena.actors(ActorKind.PROJECTILE)) == 1
