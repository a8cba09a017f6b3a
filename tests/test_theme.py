"""Tests for mdlive.theme — bundled theme and fallback chain."""

from __future__ import annotations

from pathlib import Path

from mdlive.config import MdliveConfig
from mdlive.theme import bundled_theme_path, get_asset_dirs, get_template_dirs


class TestBundledTheme:
    """Verify the bundled default theme has the files the server needs."""

    def test_page_template_present(self) -> None:
        page = bundled_theme_path() / "templates" / "page.html"
        assert page.is_file()
        source = page.read_text(encoding="utf-8")
        assert "{{ title }}" in source
        assert "content | safe" in source
        assert "</body>" in source

    def test_livereload_script_present(self) -> None:
        script = bundled_theme_path() / "assets" / "livereload.js"
        assert script.is_file()
        source = script.read_text(encoding="utf-8")
        assert "data-mdlive-reload" in source
        assert "location.reload()" in source


class TestFallbackChain:
    def test_user_templates_first(self, tmp_path: Path) -> None:
        dirs = get_template_dirs(MdliveConfig(root=tmp_path))
        assert dirs == (tmp_path / "templates", bundled_theme_path() / "templates")

    def test_user_assets_first(self, tmp_path: Path) -> None:
        dirs = get_asset_dirs(MdliveConfig(root=tmp_path))
        assert dirs == (tmp_path / "static", bundled_theme_path() / "assets")

    def test_missing_user_dir_still_listed(self, tmp_path: Path) -> None:
        dirs = get_template_dirs(MdliveConfig(root=tmp_path))
        assert not dirs[0].exists()

    def test_bundled_dir_not_duplicated(self) -> None:
        theme = bundled_theme_path()
        config = MdliveConfig(root=theme, templates_dir="templates", static_dir="assets")
        assert get_template_dirs(config) == (theme / "templates",)
        assert get_asset_dirs(config) == (theme / "assets",)
