"""
どこで: `src/dreamplet/core/typography.py`。テキスト配置の計算。
何を: 複数行テキストの行位置と、円弧に沿ったグリフごとの位置・回転を計算する。
なぜ: 描画面に依存せずに配置だけを求め、呼び出し側の fillText 相当へそのまま渡せるようにするため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Protocol

from dreamplet.core.runtime_config import runtime_config

TextAlign = Literal["left", "center", "right"]
_ALIGNS = ("left", "center", "right")


class GlyphMeasurer(Protocol):
    """グリフ 1 文字の描画幅（ピクセル）を返す計測関数。"""

    def __call__(self, glyph: str) -> float: ...


@dataclass(frozen=True, slots=True)
class TextLine:
    text: str
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class GlyphPlacement:
    """1 グリフの配置。

    Parameters
    ----------
    glyph : str
        描画する文字。
    x, y : float
        グリフ中心のワールド座標。
    rotation : float
        グリフの回転角 [rad]。
    """

    glyph: str
    x: float
    y: float
    rotation: float


@dataclass(frozen=True, slots=True)
class ArcTextParams:
    """円弧テキストの配置条件。

    Parameters
    ----------
    x, y : float
        円の中心。
    radius : float
        円の半径。
    start_angle : float
        配置開始角 [rad]。
    font_size : float | None, optional
        グリフ高さ。None の場合は config の `typography.font_size`。
    align : {"left", "center", "right"}, optional
        start_angle に対する揃え。"center" は文字列全体を start_angle に中央揃えする。
    outside : bool, optional
        False なら半径を font_size だけ縮め、円の内側に収める。
    inwards : bool, optional
        True なら文字の上端を円の中心へ向ける。
    kerning : float, optional
        グリフ間に足す追加幅（ピクセル）。
    """

    x: float
    y: float
    radius: float
    start_angle: float
    font_size: float | None = None
    align: TextAlign = "center"
    outside: bool = True
    inwards: bool = False
    kerning: float = 0.0


@dataclass(frozen=True, slots=True)
class ArcTextLayout:
    """`layout_arc_text` の結果。`next_angle` は続きの文字列の start_angle に使える。"""

    placements: tuple[GlyphPlacement, ...]
    next_angle: float


def layout_lines(
    text: str,
    x: float,
    y: float,
    font_size: float | None = None,
    line_height: float | None = None,
) -> tuple[TextLine, ...]:
    """改行区切りのテキストを行ごとの描画位置に分解する。

    各行は `font_size * line_height` ずつ下へ送る。
    """
    cfg = runtime_config()
    size = cfg.font_size if font_size is None else float(font_size)
    lh = cfg.line_height if line_height is None else float(line_height)
    advance = size * lh

    out: list[TextLine] = []
    line_y = float(y)
    for line in str(text).split("\n"):
        out.append(TextLine(text=line, x=float(x), y=line_y))
        line_y += advance
    return tuple(out)


def _is_mirrored(align: str, inwards: bool) -> bool:
    return (align in ("center", "right") and inwards) or (align == "left" and not inwards)


def layout_arc_text(text: str, measure_glyph: GlyphMeasurer, params: ArcTextParams) -> ArcTextLayout:
    """テキストを円弧に沿って 1 グリフずつ配置する。

    Parameters
    ----------
    text : str
        配置する文字列。
    measure_glyph : GlyphMeasurer
        グリフ幅の計測関数。
    params : ArcTextParams
        配置条件。

    Returns
    -------
    ArcTextLayout
        描画順のグリフ配置と、`start_angle` に消費した角度を足した次の開始角。

    Raises
    ------
    ValueError
        align が不正、または実効半径（radius - font_size、内側配置ではさらに font_size を引く）が 0 以下の場合。

    Notes
    -----
    角度幅は `幅 / 実効半径` で求める。ピクセル一定の kerning は半径により角度が変わるため、
    グリフごとに回転を積み上げる。
    """
    align = params.align
    if align not in _ALIGNS:
        raise ValueError(f"align は {_ALIGNS} のいずれかである必要がある: got={align!r}")

    font_size = runtime_config().font_size if params.font_size is None else float(params.font_size)
    kerning = float(params.kerning)
    clockwise = 1.0 if align == "left" else -1.0

    radius = float(params.radius)
    if not params.outside:
        radius -= font_size
    eff_radius = radius - font_size
    if eff_radius <= 0.0:
        raise ValueError(
            f"実効半径が 0 以下になる: radius={params.radius}, font_size={font_size}, outside={params.outside}"
        )

    glyphs = list(text)
    if _is_mirrored(align, params.inwards):
        glyphs.reverse()
    widths = [float(measure_glyph(g)) for g in glyphs]

    angle = float(params.start_angle) + math.pi / 2.0
    if not params.inwards:
        angle += math.pi

    if align == "center":
        last = len(widths) - 1
        for i, w in enumerate(widths):
            gap = 0.0 if i == last else kerning
            angle += (w + gap) / eff_radius / 2.0 * -clockwise

    local_y = (1.0 if params.inwards else -1.0) * (font_size / 2.0 - radius)
    cx = float(params.x)
    cy = float(params.y)

    placements: list[GlyphPlacement] = []
    consumed = 0.0
    for glyph, w in zip(glyphs, widths):
        lead = w / 2.0 / eff_radius * clockwise
        angle += lead
        placements.append(
            GlyphPlacement(
                glyph=glyph,
                x=cx - local_y * math.sin(angle),
                y=cy + local_y * math.cos(angle),
                rotation=angle,
            )
        )
        trail = (w / 2.0 + kerning) / eff_radius * clockwise
        angle += trail
        consumed += lead + trail

    return ArcTextLayout(placements=tuple(placements), next_angle=float(params.start_angle) + consumed)


__all__ = [
    "ArcTextLayout",
    "ArcTextParams",
    "GlyphMeasurer",
    "GlyphPlacement",
    "TextAlign",
    "TextLine",
    "layout_arc_text",
    "layout_lines",
]
