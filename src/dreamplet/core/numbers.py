# どこで: `src/dreamplet/core/numbers.py`。
# 何を: clamp / 乱数整数 / 16 進整形などの数値ユーティリティを提供する。
# なぜ: colors や scales が共通に使う小さな純関数を 1 箇所に集約するため。

from __future__ import annotations

import math
import re
from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")

_THOUSANDS_RE = re.compile(r"(\d+)(\d{3})")


def clamp(value: float, bound1: float, bound2: float) -> float:
    """`value` を [min(bound1, bound2), max(bound1, bound2)] に収める。

    境界の順序は問わない（`clamp(5, 10, 0) == 5`）。
    """
    lo = min(bound1, bound2)
    hi = max(bound1, bound2)
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def random_int(a: int, b: int, *, rng: np.random.Generator | None = None) -> int:
    """[min(a, b), max(a, b)] の一様整数を返す（両端を含む）。

    Parameters
    ----------
    a, b : int
        範囲の両端。順序は問わない。
    rng : np.random.Generator | None, optional
        乱数生成器。None の場合は新規に生成する。
    """
    gen = rng if rng is not None else np.random.default_rng()
    lo = int(min(a, b))
    hi = int(max(a, b))
    return int(gen.integers(lo, hi, endpoint=True))


def choose(items: Sequence[T], *, rng: np.random.Generator | None = None) -> T:
    """`items` から 1 要素を一様に選ぶ。"""
    if len(items) == 0:
        raise ValueError("choose の items は空であってはならない")
    return items[random_int(0, len(items) - 1, rng=rng)]


def deg2rad(angle: float) -> float:
    return float(angle) * math.pi / 180.0


def hex_str(value: float) -> str:
    """[0, 255] に clamp した整数を 2 桁の小文字 16 進文字列にする。"""
    v = int(clamp(int(value), 0, 255))
    return f"{v:02x}"


def thousand_sep(value: float, sep: str) -> str:
    """整数部に 3 桁ごとの区切り文字を挿入した文字列を返す。

    小数部はそのまま残す（`thousand_sep(1234567.5, ",") == "1,234,567.5"`）。
    """
    text = str(value)
    head, dot, tail = text.partition(".")
    while _THOUSANDS_RE.search(head):
        head = _THOUSANDS_RE.sub(lambda m: m.group(1) + sep + m.group(2), head, count=1)
    return head + dot + tail


__all__ = ["choose", "clamp", "deg2rad", "hex_str", "random_int", "thousand_sep"]
