"""
Scoring System
==============

Applies cluster and floating-orb scores based on game configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gauntlet.orb_core.config_loader import GameConfig, get_config


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    orb_count: int
    color: int
    is_floating_bonus: bool = False

    def __repr__(self) -> str:
        if self.is_floating_bonus:
            return f"ScoreEvent(floating x{self.orb_count}={self.points})"
        return f"ScoreEvent(cluster {self.color} x{self.orb_count}={self.points})"


class ScoreTracker:
    """
    Tracks the run score.

    - Cleared cluster: cluster_orb_points per orb
    - Detached floating orbs: floating_orb_points per orb

    The score never decreases; it survives level transitions and is only
    cleared by reset() when a new run starts.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._score: int = 0
        self._clusters: int = 0
        self._orbs_dropped: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def clusters(self) -> int:
        """Total number of clusters cleared."""
        return self._clusters

    @property
    def orbs_dropped(self) -> int:
        """Total number of floating orbs detached."""
        return self._orbs_dropped

    def cluster_score(self, size: int) -> int:
        """Points for clearing a cluster of ``size`` orbs."""
        return size * self._config.scoring.cluster_orb_points

    def floating_score(self, count: int) -> int:
        """Points for detaching ``count`` floating orbs."""
        return count * self._config.scoring.floating_orb_points

    def apply_cluster(self, size: int, color: int) -> ScoreEvent:
        """
        Apply score for a cleared cluster and return the event.

        Args:
            size: Number of orbs in the cluster.
            color: Cluster color.
        """
        points = self.cluster_score(size)
        self._score += points
        self._clusters += 1
        return ScoreEvent(points=points, orb_count=size, color=color)

    def apply_floating(self, count: int) -> ScoreEvent:
        """Apply the bonus for ``count`` detached orbs and return the event."""
        points = self.floating_score(count)
        self._score += points
        self._orbs_dropped += count
        return ScoreEvent(points=points, orb_count=count, color=-1, is_floating_bonus=True)

    def reset(self) -> None:
        """Reset score to zero."""
        self._score = 0
        self._clusters = 0
        self._orbs_dropped = 0
