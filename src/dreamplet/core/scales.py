"""
どこで: `src/dreamplet/core/scales.py`。抽象ドメインから数値レンジへの写像。
何を: linear / band / point / ordinal の 4 種の scale を提供する。
なぜ: 連続値・カテゴリ値をピクセル座標へ写す標準的な手段を、padding/step の意味を揃えて再現するため。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, Sequence

from dreamplet.core.runtime_config import runtime_config


def _as_pair(value: Sequence[float], *, name: str) -> tuple[float, float]:
    try:
        a, b = value
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} は長さ 2 のシーケンスである必要がある: got={value!r}") from exc
    return float(a), float(b)


def _as_labels(domain: Sequence[Hashable], *, kind: str) -> tuple[Hashable, ...]:
    labels = tuple(domain)
    if not labels:
        raise ValueError(f"{kind} scale の domain は空であってはならない")
    if len(set(labels)) != len(labels):
        raise ValueError(f"{kind} scale の domain に重複ラベルがある: {labels!r}")
    return labels


@dataclass(frozen=True, slots=True)
class LinearScale:
    """数値区間 [d0, d1] を [r0, r1] へ線形に写す。"""

    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        return (float(value) - d0) / (d1 - d0) * (r1 - r0) + r0


@dataclass(frozen=True, slots=True)
class BandScale:
    """ラベル列を等幅バンドの開始位置へ写す。"""

    domain: tuple[Hashable, ...]
    range: tuple[float, float]
    padding: float
    step: float
    _index: dict[Hashable, int] = field(repr=False, compare=False)

    def __call__(self, value: Hashable) -> float | None:
        index = self._index.get(value)
        if index is None:
            return None
        r0 = self.range[0]
        return r0 + index * (self.step + self.padding * self.step)

    def bandwidth(self) -> float:
        return self.step * (1.0 - self.padding)


@dataclass(frozen=True, slots=True)
class PointScale:
    """ラベル列を等間隔の点へ写す（両端に padding*step の余白）。"""

    domain: tuple[Hashable, ...]
    range: tuple[float, float]
    padding: float
    step: float
    _index: dict[Hashable, int] = field(repr=False, compare=False)

    def __call__(self, value: Hashable) -> float | None:
        index = self._index.get(value)
        if index is None:
            return None
        return self.range[0] + self.step * (index + self.padding)


@dataclass(frozen=True, slots=True)
class OrdinalScale:
    """ラベルを位置で range の値へ写す（range が短ければ循環する）。"""

    domain: tuple[Hashable, ...]
    range: tuple[Any, ...]
    _mapping: dict[Hashable, Any] = field(repr=False, compare=False)

    def __call__(self, value: Hashable) -> Any | None:
        return self._mapping.get(value)


def make_linear_scale(domain: Sequence[float], range: Sequence[float]) -> LinearScale:
    """linear scale を生成する。

    Raises
    ------
    ValueError
        `d0 == d1`（退化したドメイン）の場合。
    """
    d0, d1 = _as_pair(domain, name="domain")
    r = _as_pair(range, name="range")
    if d0 == d1:
        raise ValueError(f"linear scale の domain 両端が等しい: domain={(d0, d1)!r}")
    return LinearScale(domain=(d0, d1), range=r)


def make_band_scale(
    domain: Sequence[Hashable],
    range: Sequence[float],
    padding: float | None = None,
) -> BandScale:
    """band scale を生成する。

    Parameters
    ----------
    domain : Sequence[Hashable]
        重複のないラベル列。
    range : Sequence[float]
        出力区間 (r0, r1)。
    padding : float | None, optional
        バンド間の余白比率。None の場合は config の `scales.band_padding`。

    Notes
    -----
    `step = (r1 - r0) / (n + padding * (n - 1))`、
    `bandwidth = step * (1 - padding)`、
    位置は `r0 + index * (step + padding * step)`。
    """
    labels = _as_labels(domain, kind="band")
    r0, r1 = _as_pair(range, name="range")
    pad = runtime_config().band_padding if padding is None else float(padding)
    n = len(labels)
    denom = n + pad * (n - 1)
    if denom == 0:
        raise ValueError(f"band scale の step が定義できない: n={n}, padding={pad}")
    step = (r1 - r0) / denom
    return BandScale(
        domain=labels,
        range=(r0, r1),
        padding=pad,
        step=step,
        _index={label: i for i, label in enumerate(labels)},
    )


def make_point_scale(
    domain: Sequence[Hashable],
    range: Sequence[float],
    padding: float | None = None,
) -> PointScale:
    """point scale を生成する。

    Notes
    -----
    `step = (r1 - r0) / (n - 1 + 2 * padding)`、位置は `r0 + step * (index + padding)`。
    ラベル 1 つかつ padding 0 は step が定義できないため ValueError。
    """
    labels = _as_labels(domain, kind="point")
    r0, r1 = _as_pair(range, name="range")
    pad = runtime_config().point_padding if padding is None else float(padding)
    n = len(labels)
    denom = n - 1 + 2.0 * pad
    if denom == 0:
        raise ValueError(f"point scale の step が定義できない: n={n}, padding={pad}")
    step = (r1 - r0) / denom
    return PointScale(
        domain=labels,
        range=(r0, r1),
        padding=pad,
        step=step,
        _index={label: i for i, label in enumerate(labels)},
    )


def make_ordinal_scale(domain: Sequence[Hashable], range: Sequence[Any]) -> OrdinalScale:
    """ordinal scale を生成する。

    同じラベルが複数回現れた場合は後の位置の値が使われる。
    """
    labels = tuple(domain)
    values = tuple(range)
    if not values:
        raise ValueError("ordinal scale の range は空であってはならない")
    mapping = {label: values[i % len(values)] for i, label in enumerate(labels)}
    return OrdinalScale(domain=labels, range=values, _mapping=mapping)


__all__ = [
    "BandScale",
    "LinearScale",
    "OrdinalScale",
    "PointScale",
    "make_band_scale",
    "make_linear_scale",
    "make_ordinal_scale",
    "make_point_scale",
]
