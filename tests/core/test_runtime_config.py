from pathlib import Path

import pytest

from dreamplet.core.runtime_config import runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.font_dirs == ()
    assert cfg.spline_step == 0.05
    assert cfg.spline_tension == 0.5
    assert cfg.band_padding == 0.1
    assert cfg.point_padding == 0.5
    assert cfg.font_size == 16.0
    assert cfg.line_height == 1.2


def test_runtime_config_is_cached(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    assert runtime_config() is runtime_config()


def test_discovered_config_overrides_single_keys(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".dreamplet" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text(
        'spline:\n  step: 0.1\npaths:\n  font_dirs:\n    - "./fonts_discovered"\n',
        encoding="utf-8",
    )

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.spline_step == 0.1
    # 同じセクションの未指定キーは同梱デフォルトを保つ。
    assert cfg.spline_tension == 0.5
    assert cfg.font_dirs == (Path("fonts_discovered"),)


def test_home_config_is_discovered(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    home_cfg = tmp_path / ".config" / "dreamplet" / "config.yaml"
    home_cfg.parent.mkdir(parents=True, exist_ok=True)
    home_cfg.write_text("typography:\n  line_height: 2.0\n", encoding="utf-8")

    cfg = runtime_config()
    assert cfg.config_path == home_cfg
    assert cfg.line_height == 2.0


def test_explicit_config_overrides_discovered_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".dreamplet" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text("scales:\n  band_padding: 0.2\n  point_padding: 0.3\n", encoding="utf-8")

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("scales:\n  band_padding: 0.0\n", encoding="utf-8")

    set_config_path(explicit)
    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.band_padding == 0.0
    assert cfg.point_padding == 0.3


def test_font_dirs_accepts_pathsep_string(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    import os

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text(f'paths:\n  font_dirs: "a{os.pathsep}b"\n', encoding="utf-8")
    set_config_path(explicit)

    assert runtime_config().font_dirs == (Path("a"), Path("b"))


def test_missing_explicit_config_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    set_config_path(tmp_path / "missing.yaml")
    with pytest.raises(FileNotFoundError):
        runtime_config()


@pytest.mark.parametrize(
    ("text", "exc"),
    [
        ("version: 2\n", RuntimeError),
        ("- 1\n- 2\n", RuntimeError),
        ("spline: 3\n", RuntimeError),
        ("spline:\n  step: fast\n", RuntimeError),
        ("spline:\n  step: 0\n", ValueError),
        ("scales:\n  band_padding: 1.0\n", ValueError),
        ("typography:\n  font_size: -1\n", ValueError),
        ("spline: [\n", RuntimeError),
    ],
)
def test_invalid_config_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, text: str, exc):
    _isolate_config_discovery(tmp_path, monkeypatch)
    explicit = tmp_path / "bad.yaml"
    explicit.write_text(text, encoding="utf-8")
    set_config_path(explicit)
    with pytest.raises(exc):
        runtime_config()
