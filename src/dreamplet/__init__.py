# どこで: `src/dreamplet/__init__.py`。
# 何を: ルート `dreamplet` パッケージを定義し、色・scale・spline・テキスト配置の公開関数を再エクスポートする。
# なぜ: ユーザーコードから `import dreamplet` だけで主要な計算関数に届くようにするため。

from __future__ import annotations

from dreamplet.core.colors import (
    Color,
    blend_hex,
    color_to_css,
    gradient_stops,
    normalize_hex,
    random_hex,
    to_color,
)
from dreamplet.core.numbers import choose, clamp, deg2rad, hex_str, random_int, thousand_sep
from dreamplet.core.runtime_config import runtime_config, set_config_path
from dreamplet.core.scales import (
    make_band_scale,
    make_linear_scale,
    make_ordinal_scale,
    make_point_scale,
)
from dreamplet.core.spline import SplinePath, rasterize_spline
from dreamplet.core.typography import (
    ArcTextLayout,
    ArcTextParams,
    GlyphPlacement,
    TextLine,
    layout_arc_text,
    layout_lines,
)

__all__ = [
    "ArcTextLayout",
    "ArcTextParams",
    "Color",
    "GlyphPlacement",
    "SplinePath",
    "TextLine",
    "blend_hex",
    "choose",
    "clamp",
    "color_to_css",
    "deg2rad",
    "gradient_stops",
    "hex_str",
    "layout_arc_text",
    "layout_lines",
    "make_band_scale",
    "make_linear_scale",
    "make_ordinal_scale",
    "make_point_scale",
    "normalize_hex",
    "random_hex",
    "random_int",
    "rasterize_spline",
    "runtime_config",
    "set_config_path",
    "thousand_sep",
    "to_color",
]
