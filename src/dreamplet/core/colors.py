"""
どこで: `src/dreamplet/core/colors.py`。色モデルの正規化・補間。
何を: 3 形式（RGB 配列 / 単一輝度 / hex 文字列）の色入力を clamp 済みの `Color` に正規化し、
      CSS 文字列化・hex 補間・ランダム色・グラデーション停止点の整形を提供する。
なぜ: 描画面へ渡す色表現を 1 箇所で統一し、範囲外のチャンネル値が描画側へ漏れないようにするため。
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable

import numpy as np

from dreamplet.core.numbers import clamp, hex_str, random_int

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")

ColorInput = Any


@dataclass(frozen=True, slots=True)
class Color:
    """clamp 済みの RGBA 色。

    Parameters
    ----------
    r, g, b : float
        [0, 255] のチャンネル値。
    a : float
        [0, 1] の不透明度。
    """

    r: float
    g: float
    b: float
    a: float = 1.0

    def css(self) -> str:
        """`rgba(r, g, b, a)` 形式の文字列を返す。"""
        return f"rgba({_fmt(self.r)}, {_fmt(self.g)}, {_fmt(self.b)}, {_fmt(self.a)})"

    def hex(self) -> str:
        """`#rrggbb` 形式（小文字）を返す。チャンネルは 0.5 を切り上げて整数へ丸める。"""
        return "#" + "".join(hex_str(_round_half_up(c)) for c in (self.r, self.g, self.b))


BLACK = Color(0, 0, 0, 1)


def _fmt(value: float) -> str:
    v = float(value)
    if v.is_integer():
        return str(int(v))
    return repr(v)


def _is_number(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def parse_hex(text: str) -> tuple[int, int, int]:
    """`#rgb` / `#rrggbb`（`#` は省略可、大文字小文字不問）を (r, g, b) に変換する。

    パターンに一致しない文字列は (0, 0, 0) を返す。
    """
    digits = _expand_hex_digits(text)
    if digits is None:
        logger.debug("Malformed hex color %r, falling back to black", text)
        return (0, 0, 0)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def _expand_hex_digits(text: str) -> str | None:
    m = _HEX_RE.match(str(text))
    if m is None:
        return None
    digits = m.group(1)
    if len(digits) == 3:
        # 各桁を複製して 6 桁へ展開する（"f0a" -> "ff00aa"）。
        digits = "".join(ch * 2 for ch in digits)
    return digits.lower()


def normalize_hex(text: str) -> str | None:
    """hex 色を `#rrggbb`（小文字）へ正規化する。不正な文字列は None。"""
    digits = _expand_hex_digits(text)
    if digits is None:
        return None
    return "#" + digits


def to_color(value: ColorInput, alpha: float = 1.0) -> Color:
    """色入力を clamp 済みの `Color` に正規化する。

    Parameters
    ----------
    value : sequence | float | str
        長さ 3 の RGB 配列、全チャンネル共通の単一輝度、または hex 文字列。
    alpha : float, optional
        不透明度。[0, 1] に clamp する。

    Returns
    -------
    Color
        正規化済みの色。長さ 3 以外の配列やサポート外の型は不透明な黒になる。
    """
    if isinstance(value, str):
        r, g, b = parse_hex(value)
        return Color(r, g, b, clamp(alpha, 0, 1))

    if _is_number(value):
        v = clamp(value, 0, 255)
        return Color(v, v, v, clamp(alpha, 0, 1))

    if isinstance(value, (list, tuple, np.ndarray)):
        items = list(value)
        if len(items) == 3 and all(_is_number(c) for c in items):
            r, g, b = (clamp(c, 0, 255) for c in items)
            return Color(r, g, b, clamp(alpha, 0, 1))

    logger.debug("Unsupported color input %r, falling back to black", value)
    return BLACK


def color_to_css(value: ColorInput, alpha: float = 1.0) -> str:
    """色入力を `rgba(r, g, b, a)` 文字列に変換する。"""
    return to_color(value, alpha).css()


def blend_hex(color1: str, color2: str, proportion: float) -> str:
    """2 つの hex 色を線形補間した `#rrggbb` を返す。

    Parameters
    ----------
    color1, color2 : str
        hex 色（3 桁/6 桁、`#` 省略可）。
    proportion : float
        補間係数。[0, 1] に clamp する。0 で `color1`、1 で `color2`。

    Returns
    -------
    str
        補間色。どちらかが不正な hex の場合は `#000000`。
    """
    t = clamp(float(proportion), 0.0, 1.0)
    c1 = normalize_hex(color1)
    c2 = normalize_hex(color2)
    if c1 is None or c2 is None:
        logger.debug("Cannot blend %r and %r, falling back to black", color1, color2)
        return "#000000"

    out = []
    for i in (1, 3, 5):
        v1 = int(c1[i : i + 2], 16)
        v2 = int(c2[i : i + 2], 16)
        out.append(hex_str(_round_half_up((1.0 - t) * v1 + t * v2)))
    return "#" + "".join(out)


def _round_half_up(value: float) -> int:
    # 組み込み round は偶数丸めのため、0.5 は常に切り上げる。
    return int(np.floor(value + 0.5))


def random_hex(*, rng: np.random.Generator | None = None) -> str:
    """ランダムな `#rrggbb` を返す（各チャンネル独立に [0, 255] の一様整数）。"""
    gen = rng if rng is not None else np.random.default_rng()
    return "#" + "".join(hex_str(random_int(0, 255, rng=gen)) for _ in range(3))


def gradient_stops(stops: Iterable[tuple[float, ColorInput]]) -> tuple[tuple[float, str], ...]:
    """グラデーション停止点を (offset, css) の昇順タプル列に整形する。

    offset は [0, 1] に clamp し、色は `color_to_css` で正規化する。
    同じ offset の停止点は入力順を保つ。
    """
    out: list[tuple[float, str]] = []
    for item in stops:
        try:
            offset, color = item
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"gradient の stop は (offset, color) の組である必要がある: got={item!r}"
            ) from exc
        out.append((float(clamp(float(offset), 0.0, 1.0)), color_to_css(color)))
    out.sort(key=lambda s: s[0])
    return tuple(out)


__all__ = [
    "BLACK",
    "Color",
    "blend_hex",
    "color_to_css",
    "gradient_stops",
    "normalize_hex",
    "parse_hex",
    "random_hex",
    "to_color",
]
