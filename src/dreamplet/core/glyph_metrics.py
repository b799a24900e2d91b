"""
どこで: `src/dreamplet/core/glyph_metrics.py`。フォントに基づくグリフ幅計測。
何を: fontTools の advance 幅（hmtx / unitsPerEm）から、`layout_arc_text` に渡せる計測関数を提供する。
なぜ: 描画面の measureText が無い環境（テスト・オフライン書き出し）でも同じ配置を再現できるようにするため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from dreamplet.core.font_resolver import resolve_font_path

logger = logging.getLogger(__name__)

# space グリフが hmtx に無いフォント向けの既定 advance [em]。
_SPACE_FALLBACK_EM = 0.25

_FONTS: dict[str, Any] = {}


def load_font(path: Path, font_index: int = 0) -> Any:
    """TTFont を取得する（キャッシュ）。"""
    from fontTools.ttLib import TTFont  # type: ignore[import-untyped]

    idx = max(0, int(font_index))
    resolved = Path(path).resolve()
    cache_key = f"{resolved}|{idx}"
    cached = _FONTS.get(cache_key)
    if cached is not None:
        return cached

    if resolved.suffix.lower() == ".ttc":
        font = TTFont(resolved, fontNumber=idx)
    else:
        font = TTFont(resolved)
    _FONTS[cache_key] = font
    return font


def char_advance_em(char: str, tt_font: Any) -> float:
    """1em を 1.0 とした advance の比率を返す。フォントに無い文字は 0.0。"""
    units_per_em = float(tt_font["head"].unitsPerEm)
    metrics = tt_font["hmtx"].metrics

    if char == " " and "space" in metrics:
        return float(metrics["space"][0]) / units_per_em

    cmap = tt_font.getBestCmap()
    glyph_name = cmap.get(ord(char)) if cmap is not None else None
    if glyph_name is None or glyph_name not in metrics:
        if char == " ":
            return _SPACE_FALLBACK_EM
        logger.warning("Character '%s' (U+%04X) not found in font", char, ord(char))
        return 0.0
    return float(metrics[glyph_name][0]) / units_per_em


class FontGlyphMeasurer:
    """フォントの advance 幅でグリフ幅を返す計測関数。

    Parameters
    ----------
    font : str | Path
        フォント指定。`resolve_font_path` で解決する。
    font_size : float
        1em のピクセル数。
    font_index : int, optional
        .ttc 内のフォント番号。
    """

    def __init__(self, font: str | Path, font_size: float, *, font_index: int = 0) -> None:
        size = float(font_size)
        if size <= 0:
            raise ValueError(f"font_size は正の値である必要がある: got={font_size!r}")
        self.path = resolve_font_path(font)
        self.font_size = size
        self._font = load_font(self.path, font_index)
        self._advance_em: dict[str, float] = {}

    def __call__(self, glyph: str) -> float:
        total = 0.0
        for ch in glyph:
            em = self._advance_em.get(ch)
            if em is None:
                em = char_advance_em(ch, self._font)
                self._advance_em[ch] = em
            total += em
        return total * self.font_size


__all__ = ["FontGlyphMeasurer", "char_advance_em", "load_font"]
