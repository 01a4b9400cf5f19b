"""
Configuration Loader
====================

Loads and validates game_config.yaml and levels.yaml, providing typed access
to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml


@dataclass(frozen=True)
class BoardConfig:
    """Board geometry and launcher placement."""
    width: int           # Board width in pixels
    height: int          # Board height in pixels
    wall_inset: float    # Side walls sit this far inside each edge
    launcher_x: float    # Launcher (aiming orb) center
    launcher_y: float


@dataclass(frozen=True)
class GridConfig:
    """Offset hex grid layout."""
    orb_diameter: float
    row_spacing: float
    origin_x: float
    cols: int
    usable_cols: int     # Neighbor lookups are limited to [0, usable_cols)
    scan_rows: int       # Rows searched when snapping a projectile

    @property
    def orb_radius(self) -> float:
        return self.orb_diameter / 2


@dataclass(frozen=True)
class ProjectileConfig:
    """Fired orb parameters."""
    speed: float
    max_aim_angle: float


@dataclass(frozen=True)
class PhysicsConfig:
    """Falling orb motion."""
    gravity: float
    fall_spread_x: float
    fall_lift_y: float


@dataclass(frozen=True)
class RulesConfig:
    """Match, ceiling and level progression rules."""
    match_min: int
    num_chevrons: int
    shots_before_descent: int
    ceiling_row_limit: int
    jiggle_ticks: int
    level_clear_delay_ticks: int


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring parameters."""
    cluster_orb_points: int
    floating_orb_points: int


@dataclass(frozen=True)
class ParticleConfig:
    """Burst particles spawned for every removed orb."""
    per_orb: int
    speed: float
    min_life: int
    max_life: int
    min_size: float
    max_size: float


@dataclass(frozen=True)
class OrbColorConfig:
    """A single palette entry."""
    id: int
    name: str
    symbol: str
    color: Tuple[int, int, int]


@dataclass(frozen=True)
class AudioConfig:
    """Sound effect files and playback volume."""
    enabled: bool
    volume: float
    sound_dir: str
    effects: Tuple[Tuple[str, str], ...]  # (event name, file name)

    def effect_files(self) -> Dict[str, str]:
        return dict(self.effects)


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits used by the Gymnasium wrapper."""
    max_shots: int
    max_ticks_per_shot: int


@dataclass(frozen=True)
class ObservationConfig:
    """Observation image parameters."""
    image_width: int
    image_height: int
    render_style: str


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    grid: GridConfig
    projectile: ProjectileConfig
    physics: PhysicsConfig
    rules: RulesConfig
    scoring: ScoringConfig
    particles: ParticleConfig
    palette: Tuple[OrbColorConfig, ...]
    audio: AudioConfig
    caps: CapsConfig
    observation: ObservationConfig
    levels_file: str
    config_dir: str

    @property
    def num_colors(self) -> int:
        """Number of palette colors."""
        return len(self.palette)

    @property
    def levels_path(self) -> str:
        """Absolute path of the level table."""
        return os.path.join(self.config_dir, self.levels_file)

    def get_color(self, color_id: int) -> OrbColorConfig:
        """Get palette entry by ID."""
        if 0 <= color_id < len(self.palette):
            return self.palette[color_id]
        raise ValueError(f"Invalid color ID: {color_id}")


@dataclass(frozen=True)
class LevelLayout:
    """One authored level: a row-major matrix of color index or None."""
    name: str
    rows: Tuple[Tuple[Optional[int], ...], ...]

    @classmethod
    def from_cells(
        cls,
        cells: Dict[Tuple[int, int], int],
        cols: int,
        name: str = "custom"
    ) -> "LevelLayout":
        """
        Build a layout from a sparse {(row, col): color} mapping.

        Rows run from 0 to the deepest populated row; an empty mapping gives
        a single empty row.
        """
        row_count = max((r for r, _ in cells), default=0) + 1
        rows = tuple(
            tuple(cells.get((r, c)) for c in range(cols))
            for r in range(row_count)
        )
        return cls(name=name, rows=rows)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def cells(self):
        """Yield (row, col, color) for every non-empty cell."""
        for r, row in enumerate(self.rows):
            for c, color in enumerate(row):
                if color is not None:
                    yield r, c, color


def _parse_color(color_data: List) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _parse_palette_entry(entry: dict) -> OrbColorConfig:
    """Parse a single palette entry from YAML."""
    return OrbColorConfig(
        id=int(entry["id"]),
        name=str(entry["name"]),
        symbol=str(entry.get("symbol", "")),
        color=_parse_color(entry["color"])
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    # Validate palette IDs are sequential
    for i, entry in enumerate(config.palette):
        if entry.id != i:
            raise ValueError(f"Palette ID mismatch: expected {i}, got {entry.id}")

    if config.rules.num_chevrons > len(config.palette):
        raise ValueError(
            f"num_chevrons ({config.rules.num_chevrons}) exceeds "
            f"palette size ({len(config.palette)})"
        )

    if config.grid.usable_cols > config.grid.cols:
        raise ValueError(
            f"usable_cols ({config.grid.usable_cols}) exceeds "
            f"cols ({config.grid.cols})"
        )

    if config.rules.ceiling_row_limit >= config.grid.scan_rows:
        raise ValueError(
            f"ceiling_row_limit ({config.rules.ceiling_row_limit}) must be "
            f"below scan_rows ({config.grid.scan_rows})"
        )

    if config.observation.render_style != "solid":
        raise ValueError(f"render_style must be 'solid', got '{config.observation.render_style}'")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        width=int(board_data["width"]),
        height=int(board_data["height"]),
        wall_inset=float(board_data.get("wall_inset", 0)),
        launcher_x=float(board_data["launcher_x"]),
        launcher_y=float(board_data["launcher_y"])
    )

    grid_data = raw["grid"]
    diameter = float(grid_data["orb_diameter"])
    grid = GridConfig(
        orb_diameter=diameter,
        row_spacing=float(grid_data.get("row_spacing", diameter)),
        origin_x=float(grid_data.get("origin_x", diameter / 2)),
        cols=int(grid_data["cols"]),
        usable_cols=int(grid_data.get("usable_cols", grid_data["cols"])),
        scan_rows=int(grid_data["scan_rows"])
    )

    projectile_data = raw["projectile"]
    projectile = ProjectileConfig(
        speed=float(projectile_data["speed"]),
        max_aim_angle=float(projectile_data.get("max_aim_angle", 1.45))
    )

    physics_data = raw["physics"]
    physics = PhysicsConfig(
        gravity=float(physics_data["gravity"]),
        fall_spread_x=float(physics_data.get("fall_spread_x", 2.0)),
        fall_lift_y=float(physics_data.get("fall_lift_y", 2.0))
    )

    rules_data = raw["rules"]
    rules = RulesConfig(
        match_min=int(rules_data.get("match_min", 3)),
        num_chevrons=int(rules_data["num_chevrons"]),
        shots_before_descent=int(rules_data["shots_before_descent"]),
        ceiling_row_limit=int(rules_data["ceiling_row_limit"]),
        jiggle_ticks=int(rules_data.get("jiggle_ticks", 10)),
        level_clear_delay_ticks=int(rules_data["level_clear_delay_ticks"])
    )

    scoring_data = raw["scoring"]
    scoring = ScoringConfig(
        cluster_orb_points=int(scoring_data["cluster_orb_points"]),
        floating_orb_points=int(scoring_data["floating_orb_points"])
    )

    # Particles are decorative; every field has a default
    particle_data = raw.get("particles", {})
    particles = ParticleConfig(
        per_orb=int(particle_data.get("per_orb", 10)),
        speed=float(particle_data.get("speed", 8.0)),
        min_life=int(particle_data.get("min_life", 20)),
        max_life=int(particle_data.get("max_life", 40)),
        min_size=float(particle_data.get("min_size", 2)),
        max_size=float(particle_data.get("max_size", 6))
    )

    palette = tuple(_parse_palette_entry(p) for p in raw["palette"])

    audio_data = raw.get("audio", {})
    audio = AudioConfig(
        enabled=bool(audio_data.get("enabled", True)),
        volume=float(audio_data.get("volume", 0.6)),
        sound_dir=str(audio_data.get("sound_dir", "sounds")),
        effects=tuple(
            (str(name), str(path))
            for name, path in audio_data.get("effects", {}).items()
        )
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_shots=int(caps_data.get("max_shots", 400)),
        max_ticks_per_shot=int(caps_data.get("max_ticks_per_shot", 600))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        image_width=int(obs_data.get("image_width", 400)),
        image_height=int(obs_data.get("image_height", 300)),
        render_style=str(obs_data.get("render_style", "solid"))
    )

    config = GameConfig(
        board=board,
        grid=grid,
        projectile=projectile,
        physics=physics,
        rules=rules,
        scoring=scoring,
        particles=particles,
        palette=palette,
        audio=audio,
        caps=caps,
        observation=observation,
        levels_file=str(raw.get("levels_file", "levels.yaml")),
        config_dir=str(config_path.resolve().parent)
    )

    _validate_config(config)
    return config


def parse_levels(raw_levels: List[dict], num_colors: int) -> Tuple[LevelLayout, ...]:
    """
    Build level layouts from already-parsed YAML data.

    Rows are taken as authored; only color indices are checked.
    """
    levels = []
    for i, level_data in enumerate(raw_levels):
        rows = []
        for row in level_data["layout"]:
            parsed_row = []
            for cell in row:
                if cell is None:
                    parsed_row.append(None)
                    continue
                color = int(cell)
                if not 0 <= color < num_colors:
                    raise ValueError(f"Level {i}: color {color} outside palette [0, {num_colors})")
                parsed_row.append(color)
            rows.append(tuple(parsed_row))
        levels.append(LevelLayout(
            name=str(level_data.get("name", f"level {i + 1}")),
            rows=tuple(rows)
        ))
    return tuple(levels)


def load_levels(
    levels_path: Optional[str] = None,
    config: Optional[GameConfig] = None
) -> Tuple[LevelLayout, ...]:
    """
    Load the level table from YAML.

    Args:
        levels_path: Path to levels.yaml. If None, uses the config's levels_file.
        config: Game configuration. Uses default if None.

    Returns:
        Tuple of level layouts in play order.

    Raises:
        FileNotFoundError: If the level file doesn't exist.
        ValueError: If a level references an unknown color.
    """
    if config is None:
        config = get_config()

    path = Path(levels_path if levels_path is not None else config.levels_path)
    if not path.exists():
        raise FileNotFoundError(f"Level file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    levels = parse_levels(raw["levels"], config.num_colors)
    if not levels:
        raise ValueError(f"Level file contains no levels: {path}")
    return levels


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
