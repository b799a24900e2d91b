# どこで: `src/dreamplet/core/font_resolver.py`。
# 何を: グリフ計測用フォントの探索・解決を提供する。
# なぜ: config.yaml の `font_dirs` からフォント名だけで計測用フォントを指定できるようにするため。

from __future__ import annotations

from pathlib import Path

from dreamplet.core.runtime_config import runtime_config

_FONT_EXTENSIONS = (".ttf", ".otf", ".ttc")

_FONT_FILES_CACHE: dict[tuple[str, ...], tuple[Path, ...]] = {}


def _search_dirs() -> tuple[Path, ...]:
    cfg = runtime_config()
    return tuple(Path(d).expanduser() for d in cfg.font_dirs)


def list_font_files() -> tuple[Path, ...]:
    """探索ディレクトリ配下のフォントファイルを安定順で返す（キャッシュ）。"""

    dirs = _search_dirs()
    key = tuple(str(d) for d in dirs)
    cached = _FONT_FILES_CACHE.get(key)
    if cached is not None:
        return cached

    seen: list[Path] = []
    for root in dirs:
        if not root.is_dir():
            continue
        for ext in _FONT_EXTENSIONS:
            for fp in root.glob(f"**/*{ext}"):
                resolved = fp.resolve()
                if resolved.is_file():
                    seen.append(resolved)

    out = tuple(sorted(set(seen)))
    _FONT_FILES_CACHE[key] = out
    return out


def resolve_font_path(font: str | Path) -> Path:
    """`font` 指定を実体ファイルへ解決して返す。

    解決順:
    0) 実在するパス（絶対/相対）
    1) 探索ディレクトリ直下のファイル名一致
    2) ファイル名/stem の部分一致（空白・大文字小文字を無視）
    """

    raw = str(font).strip()
    if not raw:
        raise ValueError("font は空文字列であってはならない")

    direct_path = Path(raw).expanduser()
    if direct_path.is_file():
        return direct_path.resolve()

    dirs = _search_dirs()
    for d in dirs:
        fp = d / raw
        if fp.is_file():
            return fp.resolve()

    key = raw.lower().replace(" ", "")
    for fp in list_font_files():
        name = fp.name.lower().replace(" ", "")
        stem = fp.stem.lower().replace(" ", "")
        if key in name or key in stem:
            return fp

    searched = ", ".join(str(d) for d in dirs) if dirs else "(none)"
    cfg = runtime_config()
    example_yaml = "paths:\n  font_dirs:\n    - \"~/Fonts\"\n"
    hint = (
        "フォントが見つかりません。"
        " `font` に実在パスを渡すか、config.yaml の `paths.font_dirs` を設定してください"
        "（例: ./.dreamplet/config.yaml または ~/.config/dreamplet/config.yaml）。"
        f"\n\n{example_yaml}\nsearched_dirs={searched}, config_path={cfg.config_path}"
    )
    raise FileNotFoundError(hint)


__all__ = ["list_font_files", "resolve_font_path"]
