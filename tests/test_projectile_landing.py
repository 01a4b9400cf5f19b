"""
Tests for projectile flight, aim rules and the landing pipeline.
"""

import math

import pytest

from gauntlet.orb_core.config_loader import load_config
from gauntlet.orb_core.hex_geometry import HexGeometry
from gauntlet.orb_core.orb_grid import OrbGrid
from gauntlet.orb_core.projectile import CollisionResolver, ProjectileOrb, resolve_landing
from gauntlet.orb_core.rules import AimRules, CeilingRules, TerminationRules


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def geometry(config):
    return HexGeometry(config)


@pytest.fixture
def grid(geometry):
    return OrbGrid(geometry)


@pytest.fixture
def resolver(geometry, config):
    return CollisionResolver(geometry, config)


def fill(grid, cells):
    for uid, ((row, col), color) in enumerate(sorted(cells.items()), start=100):
        grid.place(uid, color, row, col)


def flying(x, y, vx=0.0, vy=-12.0, color=0):
    orb = ProjectileOrb(uid=1, color=color, x=x, y=y)
    orb.launch((vx, vy))
    return orb


class TestAimRules:
    """Test aim clamping and launch velocity."""

    def test_straight_up(self, config):
        """Angle 0 fires straight up at full speed."""
        aim = AimRules(config)
        vx, vy = aim.launch_velocity(0.0)
        assert vx == pytest.approx(0.0)
        assert vy == pytest.approx(-12.0)

    def test_clamped(self, config):
        """Angles beyond the limit are clamped."""
        aim = AimRules(config)
        assert aim.clamp_angle(3.0) == pytest.approx(1.45)
        assert aim.clamp_angle(-3.0) == pytest.approx(-1.45)

    def test_angle_towards_pointer(self, config):
        """Pointer aiming sends the orb toward the pointer."""
        aim = AimRules(config)
        assert aim.angle_towards(400, 100) == pytest.approx(0.0)
        assert aim.angle_towards(500, 470) == pytest.approx(math.pi / 4)
        assert aim.angle_towards(300, 470) == pytest.approx(-math.pi / 4)

    def test_pointer_below_launcher_is_clamped(self, config):
        """Pointing backwards saturates at the limit."""
        aim = AimRules(config)
        assert abs(aim.angle_towards(410, 600)) == pytest.approx(1.45)

    def test_speed_is_constant(self, config):
        """Every aim launches at the configured speed."""
        aim = AimRules(config)
        for angle in (-1.2, -0.3, 0.7, 1.45):
            vx, vy = aim.launch_velocity(angle)
            assert math.hypot(vx, vy) == pytest.approx(config.projectile.speed)


class TestCollisionResolver:
    """Test per-tick projectile motion."""

    def test_walls(self, resolver):
        """Wall thresholds are inset by radius plus wall_inset."""
        assert resolver.walls == (140.0, 660.0)

    def test_moves_by_velocity(self, resolver, grid):
        """Free flight advances by exactly one velocity step."""
        orb = flying(400, 300, vx=3.0, vy=-4.0)
        assert resolver.advance(orb, grid) is False
        assert orb.position == (403.0, 296.0)

    def test_left_wall_reflects(self, resolver, grid):
        """Crossing the left wall while moving left flips vx."""
        orb = flying(145, 300, vx=-12.0, vy=0.0)
        resolver.advance(orb, grid)
        assert orb.vx == 12.0

    def test_right_wall_reflects(self, resolver, grid):
        """Crossing the right wall while moving right flips vx."""
        orb = flying(655, 300, vx=12.0, vy=0.0)
        resolver.advance(orb, grid)
        assert orb.vx == -12.0

    def test_no_reflection_when_moving_inward(self, resolver, grid):
        """An orb already heading back inside is left alone."""
        orb = flying(135, 300, vx=3.0, vy=0.0)
        resolver.advance(orb, grid)
        assert orb.x == 138.0
        assert orb.vx == 3.0

    def test_ceiling_clamps_and_arrives(self, resolver, grid):
        """Passing the ceiling clamps y and ends the flight."""
        orb = flying(400, 25)
        assert resolver.advance(orb, grid) is True
        assert orb.y == 20.0

    def test_contact_with_resting_orb(self, resolver, grid):
        """Arrival happens once the distance drops below one diameter."""
        fill(grid, {(2, 8): 1})  # center (380, 88)
        orb = flying(380, 140)
        assert resolver.advance(orb, grid) is False  # y=128, distance 40
        assert resolver.advance(orb, grid) is True   # y=116, distance 28


class TestLanding:
    """Test the snap / match / support pipeline."""

    def test_match_removes_cluster(self, resolver, grid, config):
        """Three same-colored orbs plus the projectile clear together."""
        fill(grid, {(0, 0): 4, (0, 1): 4, (0, 2): 4})
        orb = flying(120, 60, color=4)
        assert resolver.advance(orb, grid) is True

        result = resolve_landing(grid, orb, config)
        assert result.placed.cell == (1, 1)
        assert result.landing_row == 1
        assert result.matched
        assert len(result.removed) == 4
        assert result.floating == []
        assert len(grid) == 0

    def test_short_cluster_stays(self, resolver, grid, config):
        """Two orbs do not clear; neighbors jiggle."""
        fill(grid, {(0, 1): 4})
        orb = flying(120, 60, color=4)
        resolver.advance(orb, grid)

        result = resolve_landing(grid, orb, config)
        assert not result.matched
        assert len(result.cluster) == 2
        assert len(grid) == 2
        assert grid.get((0, 1)).jiggle == config.rules.jiggle_ticks
        assert result.placed.jiggle == 0

    def test_floating_orbs_detach(self, resolver, grid, config):
        """Orbs hanging from a cleared cluster are removed as floating."""
        fill(grid, {(0, 4): 1, (1, 4): 1, (2, 4): 2})
        orb = flying(260, 30, color=1)
        assert resolver.advance(orb, grid) is True

        result = resolve_landing(grid, orb, config)
        assert result.placed.cell == (0, 5)
        assert result.matched
        assert {o.cell for o in result.removed} == {(0, 4), (0, 5), (1, 4)}
        assert [o.cell for o in result.floating] == [(2, 4)]
        assert len(grid) == 0

    def test_no_floating_without_match(self, resolver, grid, config):
        """Support is only re-evaluated after a clear."""
        fill(grid, {(0, 4): 1, (1, 4): 2})
        orb = flying(260, 30, color=3)
        resolver.advance(orb, grid)

        result = resolve_landing(grid, orb, config)
        assert not result.matched
        assert result.floating == []
        assert len(grid) == 3


class TestCeilingAndTermination:
    """Test shot counting and loss conditions."""

    def test_descent_countdown(self, config):
        """The descent is due after shots_before_descent shots."""
        ceiling = CeilingRules(config)
        for _ in range(config.rules.shots_before_descent - 1):
            ceiling.record_shot()
        assert not ceiling.descent_due
        ceiling.record_shot()
        assert ceiling.descent_due
        ceiling.complete_descent()
        assert ceiling.shots_until_descent == config.rules.shots_before_descent
        assert ceiling.descents == 1

    def test_landing_limit(self, config):
        """Landing at the limit row ends the game."""
        term = TerminationRules(config)
        assert not term.check_landing(10).terminated
        result = term.check_landing(11)
        assert result.terminated
        assert result.reason == "landing_breach"

    def test_descent_limit(self, config):
        """A descent that reaches the limit row ends the game."""
        term = TerminationRules(config)
        assert not term.check_descent(-1).terminated
        assert term.check_descent(11).reason == "ceiling_breach"

    def test_shot_cap_truncates(self, config):
        """The shot cap is a truncation, not a loss."""
        term = TerminationRules(config)
        result = term.check_shot_cap(config.caps.max_shots)
        assert result.truncated
        assert not result.terminated
