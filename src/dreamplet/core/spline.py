"""
どこで: `src/dreamplet/core/spline.py`。Hermite / Catmull-Rom スプラインのラスタライズ。
何を: 2D 経由点列から、各点を通る滑らかな曲線を近似する密なポリラインを生成する（開/閉曲線）。
なぜ: 外部の曲線フィッティングに頼らず、任意の経由点を通る曲線を 1 本のパスとして描けるようにするため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from dreamplet.core.runtime_config import runtime_config


@njit(cache=True)
def _hermite_segment(
    p0: np.ndarray,
    p1: np.ndarray,
    m0: np.ndarray,
    m1: np.ndarray,
    ts: np.ndarray,
) -> np.ndarray:
    """1 セグメント分の Hermite 基底を ts でサンプルした (len(ts), 2) 配列を返す。"""
    out = np.empty((ts.shape[0], 2), dtype=np.float64)
    for k in range(ts.shape[0]):
        t = ts[k]
        t2 = t * t
        t3 = t2 * t
        c1 = 2.0 * t3 - 3.0 * t2 + 1.0
        c2 = -2.0 * t3 + 3.0 * t2
        c3 = t3 - 2.0 * t2 + t
        c4 = t3 - t2
        for j in range(2):
            out[k, j] = c1 * p0[j] + c2 * p1[j] + c3 * m0[j] + c4 * m1[j]
    return out


@njit(cache=True)
def _segment_samples(
    points: np.ndarray, i: int, tension: float, closed: bool, ts: np.ndarray
) -> np.ndarray:
    """セグメント i の接線を求め、ts でサンプルした (len(ts), 2) 配列を返す。

    閉曲線のみ n を法として巻き戻し、開曲線は端点へ clamp する（片側差分）。
    """
    n = points.shape[0]
    if closed:
        prev = (i - 1) % n
        nxt = (i + 1) % n
        nxt2 = (i + 2) % n
    else:
        prev = i - 1 if i > 0 else 0
        nxt = i + 1
        nxt2 = i + 2 if i + 2 < n else n - 1
    m0 = (points[nxt] - points[prev]) * tension
    m1 = (points[nxt2] - points[i]) * tension
    return _hermite_segment(points[i], points[nxt], m0, m1, ts)


@njit(cache=True)
def _rasterize_core(points: np.ndarray, tension: float, closed: bool, ts: np.ndarray) -> np.ndarray:
    n = points.shape[0]
    n_seg = n if closed else n - 1
    m = ts.shape[0]
    out = np.empty((1 + n_seg * m, 2), dtype=np.float64)
    out[0, 0] = points[0, 0]
    out[0, 1] = points[0, 1]
    for i in range(n_seg):
        out[1 + i * m : 1 + (i + 1) * m] = _segment_samples(points, i, tension, closed, ts)
    return out


def _sample_params(step: float) -> np.ndarray:
    """(0, 1] 上のサンプル位置を返す。間隔は step 以下で最大の 1/k。"""
    count = max(1, math.ceil(1.0 / step - 1e-9))
    ts = np.linspace(0.0, 1.0, count + 1, dtype=np.float64)[1:]
    ts[-1] = 1.0
    return ts


def _as_points(points: Sequence[float] | Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    try:
        arr = np.array(points, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ValueError("spline の points は数値の列である必要がある") from exc

    if arr.ndim == 1:
        if arr.size % 2 != 0:
            raise ValueError(f"平坦な points の長さは偶数である必要がある: got={arr.size}")
        arr = arr.reshape(-1, 2)
    elif arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"points は (x, y) の組の列である必要がある: shape={arr.shape}")

    if arr.shape[0] < 2:
        raise ValueError(f"spline には少なくとも 2 点が必要: got={arr.shape[0]}")
    if not np.all(np.isfinite(arr)):
        raise ValueError("points に非有限値が含まれている")

    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, slots=True)
class SplinePath:
    """ラスタライズ済みスプラインの遅延・再走査可能な点列。

    反復のたびにセグメント単位で評価し直すため、何度でも先頭から走査できる。
    隣接セグメントの継ぎ目の点は 1 度だけ出力する。
    """

    points: np.ndarray
    tension: float
    closed: bool
    ts: np.ndarray

    @property
    def n_segments(self) -> int:
        n = int(self.points.shape[0])
        return n if self.closed else n - 1

    def __len__(self) -> int:
        return 1 + self.n_segments * int(self.ts.shape[0])

    def __iter__(self) -> Iterator[tuple[float, float]]:
        pts = self.points
        yield (float(pts[0, 0]), float(pts[0, 1]))
        for i in range(self.n_segments):
            seg = _segment_samples(pts, i, float(self.tension), bool(self.closed), self.ts)
            for x, y in seg:
                yield (float(x), float(y))

    def to_array(self) -> np.ndarray:
        """全点を一括評価した読み取り専用の (N, 2) float64 配列を返す。"""
        coords = _rasterize_core(self.points, float(self.tension), bool(self.closed), self.ts)
        coords.setflags(write=False)
        return coords


def rasterize_spline(
    points: Sequence[float] | Sequence[Sequence[float]] | np.ndarray,
    tension: float | None = None,
    closed: bool = False,
    *,
    step: float | None = None,
) -> SplinePath:
    """経由点列を通る Hermite スプラインをポリラインとして返す。

    Parameters
    ----------
    points : sequence
        平坦な `[x0, y0, x1, y1, ...]` か `(N, 2)` の座標列。2 点以上。
    tension : float | None, optional
        接線の倍率。None の場合は config の `spline.tension`。
    closed : bool, optional
        True なら最後の点から最初の点へ戻る閉曲線にする。
    step : float | None, optional
        Hermite 基底のサンプリング刻み（0 < step <= 1）。None の場合は config の `spline.step`。

    Returns
    -------
    SplinePath
        `(x, y)` を順に返す反復可能オブジェクト。閉曲線では始点と終点が一致する。

    Raises
    ------
    ValueError
        点が 2 未満、座標が不正、または step が範囲外の場合。
    """
    pts = _as_points(points)
    cfg = runtime_config()
    tau = cfg.spline_tension if tension is None else float(tension)
    if not math.isfinite(tau):
        raise ValueError(f"tension は有限値である必要がある: got={tension!r}")
    step_f = cfg.spline_step if step is None else float(step)
    if not (0.0 < step_f <= 1.0):
        raise ValueError(f"step は 0 < step <= 1 である必要がある: got={step!r}")

    ts = _sample_params(step_f)
    ts.setflags(write=False)
    return SplinePath(points=pts, tension=tau, closed=bool(closed), ts=ts)


__all__ = ["SplinePath", "rasterize_spline"]
