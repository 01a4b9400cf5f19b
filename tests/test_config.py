"""
Tests for configuration and level loading.
"""

import os

import pytest
import yaml

from gauntlet.orb_core.config_loader import (
    LevelLayout,
    get_config,
    load_config,
    load_levels,
    parse_levels,
    reload_config,
)


DEFAULT_CONFIG = os.path.join(
    os.path.dirname(os.path.dirname(__file__)), "gauntlet", "game_config.yaml"
)


def write_config(tmp_path, mutate):
    with open(DEFAULT_CONFIG, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    mutate(raw)
    path = tmp_path / "game_config.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(raw, f, allow_unicode=True)
    return str(path)


class TestLoadConfig:
    """Test game_config.yaml parsing and validation."""

    def test_defaults(self):
        """Shipped config carries the reference geometry and rules."""
        config = load_config()
        assert (config.board.width, config.board.height) == (800, 600)
        assert config.grid.orb_radius == 20
        assert config.grid.row_spacing == 34
        assert config.rules.num_chevrons == 7
        assert config.rules.shots_before_descent == 8
        assert config.rules.ceiling_row_limit == 11
        assert config.num_colors == 7

    def test_palette_order(self):
        """Palette ids match their positions."""
        config = load_config()
        for i, entry in enumerate(config.palette):
            assert entry.id == i
            assert len(entry.color) == 3
        assert config.get_color(0).name == "aries"

    def test_invalid_color_id(self):
        """Unknown color ids are rejected."""
        config = load_config()
        with pytest.raises(ValueError):
            config.get_color(config.num_colors)

    def test_missing_file(self, tmp_path):
        """A missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "absent.yaml"))

    def test_palette_id_gap(self, tmp_path):
        """Non-sequential palette ids fail validation."""
        def mutate(raw):
            raw["palette"][3]["id"] = 9

        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, mutate))

    def test_too_many_chevrons(self, tmp_path):
        """More chevrons than palette colors fails validation."""
        def mutate(raw):
            raw["rules"]["num_chevrons"] = 8

        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, mutate))

    def test_bad_render_style(self, tmp_path):
        """Only the solid render style is supported."""
        def mutate(raw):
            raw["observation"]["render_style"] = "sprite"

        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, mutate))

    def test_ceiling_limit_inside_scan_rows(self, tmp_path):
        """The ceiling limit must be a scanned row."""
        def mutate(raw):
            raw["rules"]["ceiling_row_limit"] = raw["grid"]["scan_rows"]

        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, mutate))

    def test_optional_sections_default(self, tmp_path):
        """Audio, caps and observation fall back to defaults when absent."""
        def mutate(raw):
            for key in ("audio", "caps", "observation", "particles"):
                raw.pop(key)

        config = load_config(write_config(tmp_path, mutate))
        assert config.caps.max_shots == 400
        assert config.observation.render_style == "solid"
        assert config.audio.effect_files() == {}
        assert config.particles.per_orb == 10

    def test_cached_config(self):
        """get_config returns one shared instance until reloaded."""
        first = get_config()
        assert get_config() is first
        reloaded = reload_config()
        assert reloaded is not first
        assert get_config() is reloaded


class TestLevels:
    """Test the level table."""

    def test_shipped_levels(self):
        """Three authored levels, each twelve columns wide."""
        levels = load_levels()
        assert len(levels) == 3
        for level in levels:
            assert level.row_count >= 1
            assert all(len(row) == 12 for row in level.rows)

    def test_first_level_cells(self):
        """Cells yield only populated positions."""
        level = load_levels()[0]
        cells = list(level.cells())
        assert cells[0] == (0, 0, 1)
        assert all(color is not None for _, _, color in cells)
        assert (1, 5) not in {(r, c) for r, c, _ in cells}

    def test_parse_levels_names(self):
        """Unnamed levels get a positional name."""
        levels = parse_levels([{"layout": [[0, None, 1]]}], num_colors=7)
        assert levels[0].name == "level 1"
        assert levels[0].rows == ((0, None, 1),)

    def test_color_outside_palette(self):
        """Level colors must index the palette."""
        with pytest.raises(ValueError):
            parse_levels([{"layout": [[0, 7]]}], num_colors=7)

    def test_empty_level_file(self, tmp_path):
        """A level file with no levels is rejected."""
        path = tmp_path / "levels.yaml"
        path.write_text("levels: []\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_levels(str(path))

    def test_missing_level_file(self, tmp_path):
        """A missing level file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_levels(str(tmp_path / "absent.yaml"))

    def test_from_cells(self):
        """Sparse cells expand to full rows."""
        layout = LevelLayout.from_cells({(0, 1): 3, (2, 0): 5}, cols=4)
        assert layout.rows == (
            (None, 3, None, None),
            (None, None, None, None),
            (5, None, None, None),
        )
        assert sorted(layout.cells()) == [(0, 1, 3), (2, 0, 5)]

    def test_from_cells_empty(self):
        """No cells gives a single empty row."""
        layout = LevelLayout.from_cells({}, cols=3)
        assert layout.rows == ((None, None, None),)
