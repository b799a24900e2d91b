"""色モデル（正規化・hex 補間・ランダム色）に関するテスト群。"""

from __future__ import annotations

import re

import numpy as np
import pytest

from dreamplet.core.colors import (
    BLACK,
    Color,
    blend_hex,
    color_to_css,
    gradient_stops,
    normalize_hex,
    parse_hex,
    random_hex,
    to_color,
)


@pytest.mark.parametrize(
    ("rgb", "alpha"),
    [
        ((0, 0, 0), 0.0),
        ((255, 128, 1), 1.0),
        ((12, 34, 56), 0.25),
        ((10.5, 20, 30), 0.5),
    ],
)
def test_valid_triplet_channels_are_kept(rgb, alpha) -> None:
    c = to_color(list(rgb), alpha)
    assert (c.r, c.g, c.b, c.a) == (*rgb, alpha)


def test_color_to_css_format() -> None:
    assert color_to_css([255, 0, 10], 0.5) == "rgba(255, 0, 10, 0.5)"
    assert color_to_css([255, 0, 10]) == "rgba(255, 0, 10, 1)"


def test_channels_and_alpha_are_clamped() -> None:
    c = to_color([300, -5, 128], 2.0)
    assert (c.r, c.g, c.b, c.a) == (255, 0, 128, 1)
    assert to_color([1, 2, 3], -1.0).a == 0


def test_single_intensity_applies_to_all_channels() -> None:
    assert to_color(100, 0.3) == Color(100, 100, 100, 0.3)
    assert to_color(999) == Color(255, 255, 255, 1)
    assert to_color(np.int64(7)) == Color(7, 7, 7, 1)


def test_wrong_sequence_length_is_opaque_black() -> None:
    assert to_color([1, 2], 0.2) == BLACK
    assert to_color([1, 2, 3, 4], 0.2) == BLACK


def test_unsupported_types_are_opaque_black() -> None:
    assert to_color(None, 0.5) == BLACK
    assert to_color({"r": 1}, 0.5) == BLACK
    assert to_color(True) == BLACK


def test_short_hex_expands_to_long_hex() -> None:
    assert color_to_css("#fff") == color_to_css("#ffffff")
    assert parse_hex("#f0a") == (255, 0, 170)
    assert parse_hex("A0B") == parse_hex("#aa00bb")


def test_malformed_hex_is_black_with_alpha_kept() -> None:
    assert parse_hex("#ggg") == (0, 0, 0)
    assert parse_hex("#abcd") == (0, 0, 0)
    assert to_color("nope", 0.4) == Color(0, 0, 0, 0.4)


def test_color_hex_roundtrips_channels() -> None:
    assert to_color("#0a0B0c").hex() == "#0a0b0c"


def test_color_hex_rounds_half_up_like_blend() -> None:
    assert Color(0.5, 2.5, 127.5).hex() == "#010380"
    # blend_hex と同じ丸め規則になる（2.5 -> 3）。
    assert blend_hex("#000000", "#050505", 0.5) == "#030303"
    assert to_color([2.5, 2.5, 2.5]).hex() == blend_hex("#000000", "#050505", 0.5)


def test_normalize_hex() -> None:
    assert normalize_hex("ABC") == "#aabbcc"
    assert normalize_hex("#123456") == "#123456"
    assert normalize_hex("#12345") is None


@pytest.mark.parametrize("t", [0.0, 0.3, 0.5, 1.0, 7.0])
def test_blend_with_itself_is_identity(t: float) -> None:
    assert blend_hex("#3a7", "3a7", t) == normalize_hex("#3a7")


def test_blend_endpoints() -> None:
    a = "#102030"
    b = "F0E0D0"
    assert blend_hex(a, b, 0) == normalize_hex(a)
    assert blend_hex(a, b, 1) == normalize_hex(b)
    assert blend_hex(a, b, -3) == normalize_hex(a)
    assert blend_hex(a, b, 3) == normalize_hex(b)


def test_blend_midpoint_rounds_half_up() -> None:
    # 0x00 と 0x01 の中点 0.5 は 1 に丸める。
    assert blend_hex("#000000", "#010101", 0.5) == "#010101"
    assert blend_hex("#000000", "#ffffff", 0.5) == "#808080"


def test_blend_invalid_input_is_black() -> None:
    assert blend_hex("#zzzzzz", "#ffffff", 0.5) == "#000000"
    assert blend_hex("#ffffff", "", 0.5) == "#000000"


def test_random_hex_format() -> None:
    rng = np.random.default_rng(0)
    for _ in range(200):
        assert re.fullmatch(r"#[0-9a-f]{6}", random_hex(rng=rng))
    assert re.fullmatch(r"#[0-9a-f]{6}", random_hex())


def test_random_hex_is_reproducible_with_seed() -> None:
    a = random_hex(rng=np.random.default_rng(42))
    b = random_hex(rng=np.random.default_rng(42))
    assert a == b


def test_gradient_stops_are_sorted_and_normalized() -> None:
    stops = gradient_stops([(1.0, "#fff"), (-0.5, [255, 0, 0]), (0.5, 0)])
    assert stops == (
        (0.0, "rgba(255, 0, 0, 1)"),
        (0.5, "rgba(0, 0, 0, 1)"),
        (1.0, "rgba(255, 255, 255, 1)"),
    )


def test_gradient_stops_rejects_non_pairs() -> None:
    with pytest.raises(ValueError):
        gradient_stops([0.5])
