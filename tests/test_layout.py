from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
UI_SOURCES = [ROOT / "app.py", *sorted((ROOT / "sections").glob("*.py"))]


@pytest.mark.parametrize("path", UI_SOURCES, ids=lambda p: p.name)
def test_ui_uses_width_instead_of_container_width(path):
    assert "use_container_width" not in path.read_text(encoding="utf-8")


def test_refresh_clears_price_cache():
    source = (ROOT / "app.py").read_text(encoding="utf-8")
    assert source.count("cached_price_points.clear()") == 2
