"""Tests for ConfigManager and the renderer's config view."""
import json
from pathlib import Path

import pytest

from xpcard.utils.config_manager import ConfigManager
from xpcard.utils.xp_card_generator import CardImageConfig, DEFAULT_BOLD_FONTS


@pytest.fixture
def config_dir(tmp_path):
    original = ConfigManager._base_path
    directory = tmp_path / "config"
    directory.mkdir()
    ConfigManager.set_base_path(directory)
    yield directory
    ConfigManager.set_base_path(original)
    ConfigManager.clear()


def test_load_all_reads_json_files(config_dir):
    (config_dir / "xp_card.json").write_text(json.dumps({"assets_dir": "assets/cards"}), encoding="utf-8")
    ConfigManager.load_all()
    assert ConfigManager.get("xp_card") == {"assets_dir": "assets/cards"}


def test_invalid_json_is_skipped(config_dir, caplog):
    (config_dir / "broken.json").write_text("{not json", encoding="utf-8")
    (config_dir / "xp_card.json").write_text("{}", encoding="utf-8")
    with caplog.at_level("ERROR"):
        ConfigManager.load_all()
    assert ConfigManager.get("broken") is None
    assert ConfigManager.get("xp_card") == {}
    assert "Invalid JSON in broken.json" in caplog.text


def test_missing_directory_leaves_config_empty(tmp_path):
    original = ConfigManager._base_path
    ConfigManager.set("stale", 1)
    ConfigManager.set_base_path(tmp_path / "does-not-exist")
    try:
        ConfigManager.load_all()
        assert ConfigManager.get("stale") is None
    finally:
        ConfigManager.set_base_path(original)


def test_reload_picks_up_changes(config_dir):
    path = config_dir / "xp_card.json"
    path.write_text(json.dumps({"assets_dir": "a"}), encoding="utf-8")
    ConfigManager.load_all()
    path.write_text(json.dumps({"assets_dir": "b"}), encoding="utf-8")
    ConfigManager.reload()
    assert ConfigManager.get("xp_card")["assets_dir"] == "b"


def test_shipped_config_is_valid_json():
    shipped = Path(__file__).parent.parent / "data" / "config" / "xp_card.json"
    data = json.loads(shipped.read_text(encoding="utf-8"))
    assert data["assets_dir"] == "img"


class TestCardImageConfig:

    def setup_method(self):
        ConfigManager.clear()

    def teardown_method(self):
        ConfigManager.clear()

    def test_defaults_without_config(self):
        assert CardImageConfig.background_path() == Path("img/xp_bg.png")
        assert CardImageConfig.shadow_path() == Path("img/shadow.png")
        assert CardImageConfig.role_icon_path(25) == Path("img/role_25.png")
        assert CardImageConfig.bold_font_paths() == DEFAULT_BOLD_FONTS
        assert CardImageConfig.avatar_timeout() == 10.0
        assert CardImageConfig.compress_level() == 6

    def test_overrides(self):
        ConfigManager.set("xp_card", {
            "assets_dir": "assets",
            "role_icon_pattern": "roles/{tier}.webp",
            "fonts": {"bold_search_paths": ["Custom.ttf"], "bar_search_paths": ["Bar.ttf"]},
            "avatar": {"timeout_seconds": 2.5},
        })
        assert CardImageConfig.role_icon_path(10) == Path("assets/roles/10.webp")
        assert CardImageConfig.bold_font_paths() == ["Custom.ttf"]
        assert CardImageConfig.bar_font_paths() == ["Bar.ttf"]
        assert CardImageConfig.avatar_timeout() == 2.5

    def test_non_dict_section_falls_back(self):
        ConfigManager.set("xp_card", ["not", "a", "dict"])
        assert CardImageConfig.background_path() == Path("img/xp_bg.png")
