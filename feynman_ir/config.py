"""Configuration helpers for the codec and the stroke generators."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class CodecConfig:
    """Constants of the TikZ subset text format."""

    scale: float = 20.0
    precision: int = 2
    min_point_radius: float = 0.04
    min_line_width_pt: float = 0.4
    arrow_comment_key: str = "edge-arrow"
    ellipse_fill: str = "gray!20"
    tip_name: str = "Stealth"
    default_stroke_width: float = 2.0


@dataclass
class StrokeConfig:
    """Sampling and decoration parameters of the path generators."""

    wavy_amplitude: float = 2.6
    wavy_wavelength: float = 15.0
    wavy_step: float = 1.5
    wavy_min_steps: int = 26
    wavy_curve_samples: int = 96

    spring_amplitude: float = 5.0
    spring_wavelength: float = 7.0
    spring_step: float = 0.9
    spring_min_steps: int = 42
    spring_curve_samples: int = 140
    spring_tangential_ratio: float = 0.25

    plain_curve_samples: int = 64
    min_decorated_length: float = 2.0

    arrow_size: float = 10.0
    arrow_setback: float = 1.1
    arrow_half_width: float = 0.45
    cross_half_length: float = 6.0


_CODEC_CONFIG = CodecConfig()
_STROKE_CONFIG = StrokeConfig()


def get_codec_config() -> CodecConfig:
    return copy.deepcopy(_CODEC_CONFIG)


def set_codec_config(config: CodecConfig) -> None:
    global _CODEC_CONFIG
    _CODEC_CONFIG = copy.deepcopy(config)


def get_stroke_config() -> StrokeConfig:
    return copy.deepcopy(_STROKE_CONFIG)


def set_stroke_config(config: StrokeConfig) -> None:
    global _STROKE_CONFIG
    _STROKE_CONFIG = copy.deepcopy(config)
