"""
Visual Encoder
==============

Turns neuron and connection values into drawing parameters.

Policy:
    Neuron fill    - neuron hue at opacity = clamp(value, 0, 1)
    Neuron label   - value with LABEL_PRECISION decimals at the center
    Bias label     - signed bias below the neuron (optional)
    Connection     - positive hue for weight >= 0, negative hue otherwise;
                     opacity = clamp(|weight|, 0, 1), width grows with it

Opacity saturates for |weight| > 1: every strong weight looks equally
strong. Both mappings are monotonic so magnitude and polarity can be read
without a label on every edge.

pygame draws opaque pixels, so opacity is applied by blending the hue into
the canvas background color.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from config import Config

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class NeuronStyle:
    """How to draw one neuron."""
    fill: Color
    alpha: float
    label: str


@dataclass(frozen=True)
class ConnectionStyle:
    """How to draw one connection."""
    color: Color
    alpha: float
    width: int
    positive: bool


def clamp_unit(value: Optional[float]) -> float:
    """Clamp to [0, 1]; None and NaN count as 0."""
    if value is None or not np.isfinite(value):
        # +inf saturates, everything else non-finite is treated as absent
        return 1.0 if value == math.inf else 0.0
    return float(np.clip(value, 0.0, 1.0))


def interpolate_color(color1: Color, color2: Color, t: float) -> Color:
    """Linear blend from color1 (t=0) to color2 (t=1)."""
    t = max(0.0, min(1.0, t))
    r = int(round(color1[0] + (color2[0] - color1[0]) * t))
    g = int(round(color1[1] + (color2[1] - color1[1]) * t))
    b = int(round(color1[2] + (color2[2] - color1[2]) * t))
    return (r, g, b)


class VisualEncoder:
    """
    Fixed encoding policy built from a Config.

    Example:
        >>> encoder = VisualEncoder(Config())
        >>> encoder.neuron_style(0.73).label
        '0.73'
        >>> encoder.connection_style(-2.0).alpha
        1.0
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.background = self.config.COLOR_BACKGROUND
        self.neuron_color = self.config.COLOR_NEURON
        self.weight_positive = self.config.COLOR_WEIGHT_POS
        self.weight_negative = self.config.COLOR_WEIGHT_NEG
        self.precision = self.config.LABEL_PRECISION
        self.min_width = self.config.MIN_CONNECTION_WIDTH
        self.max_width = self.config.MAX_CONNECTION_WIDTH

    def format_value(self, value: Optional[float], precision: Optional[int] = None) -> str:
        """Fixed-precision label; None and NaN render as zero."""
        digits = self.precision if precision is None else precision
        if value is None or (isinstance(value, float) and math.isnan(value)):
            value = 0.0
        return f"{value:.{digits}f}"

    def neuron_style(self, value: Optional[float]) -> NeuronStyle:
        alpha = clamp_unit(value)
        return NeuronStyle(
            fill=interpolate_color(self.background, self.neuron_color, alpha),
            alpha=alpha,
            label=self.format_value(value),
        )

    def bias_label(self, bias: Optional[float]) -> str:
        if bias is None or math.isnan(bias):
            bias = 0.0
        return f"b={bias:+.{self.precision}f}"

    def connection_style(self, weight: Optional[float]) -> ConnectionStyle:
        if weight is None or math.isnan(weight):
            weight = 0.0
        positive = weight >= 0
        alpha = clamp_unit(abs(weight))
        hue = self.weight_positive if positive else self.weight_negative
        width = self.min_width + int(round(alpha * (self.max_width - self.min_width)))
        return ConnectionStyle(
            color=interpolate_color(self.background, hue, alpha),
            alpha=alpha,
            width=width,
            positive=positive,
        )
