"""Numeric helpers for presenting a posterior: labels and curve points.

These produce plain data for a chart or a label; no formatting or rendering
happens here.
"""

from __future__ import annotations

import math

import numpy as np

CONFIDENCE_LABELS = (
    (20.0, "Very Low"),
    (40.0, "Low"),
    (60.0, "Moderate"),
    (80.0, "High"),
)


def confidence_label(percent: float) -> str:
    for upper, label in CONFIDENCE_LABELS:
        if percent < upper:
            return label
    return "Very High"


def distribution_curve(
    mean: float,
    interval: tuple[float, float],
    samples=None,
    step: float = 2.0,
) -> list[dict[str, float]]:
    """Points ``{"x", "y"}`` across 0..100 describing the posterior shape.

    With ``samples`` (probabilities in [0, 1]) the curve is a density
    histogram of the draws in bins of width ``step`` centred on each x,
    scaled so the bars integrate to 100.  Without samples it falls back to a
    normal curve at ``mean`` whose standard deviation is a quarter of the
    interval width.

    Parameters
    ----------
    mean : float
        Posterior mean in percent.
    interval : tuple[float, float]
        Credible interval in percent.
    samples : array-like | None
        Raw posterior draws.
    step : float
        Spacing between x points.

    Returns
    -------
    list[dict[str, float]]
    """
    if step <= 0:
        raise ValueError("step must be positive")
    xs = np.arange(0.0, 100.0 + step / 2, step)

    if samples is not None and len(samples) > 0:
        percents = np.asarray(samples, dtype=float) * 100
        edges = np.concatenate([xs - step / 2, [xs[-1] + step / 2]])
        counts, _ = np.histogram(percents, bins=edges)
        ys = counts / (percents.size * step) * 100
    else:
        std = (interval[1] - interval[0]) / 4 or 1.0
        z = (xs - mean) / std
        ys = np.exp(-0.5 * z * z) / (std * math.sqrt(2 * math.pi)) * 100

    return [{"x": float(x), "y": float(y)} for x, y in zip(xs, ys)]
