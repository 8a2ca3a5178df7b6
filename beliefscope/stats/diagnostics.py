"""Summary statistics and sampling-quality diagnostics.

All functions take the raw draws (probabilities in [0, 1]) in the order they
were produced; ordering matters for the Geweke and autocorrelation checks.
Percent outputs are on the 0-100 scale.
"""

from __future__ import annotations

import math

import numpy as np

from beliefscope.stats.schemas import ConvergenceDiagnostic

GEWEKE_THRESHOLD = 1.96
MIN_AUTOCORRELATION_SIZE = 10
AUTOCORRELATION_BOUNDS = (-0.5, 0.99)


# ======================================================================
# Summary
# ======================================================================


def summarize(
    samples: np.ndarray, credible_mass: float = 0.95
) -> tuple[float, tuple[float, float]]:
    """Posterior mean and equal-tailed credible interval, in percent.

    The interval bounds are order statistics of the sorted draws taken at
    ``floor(n * tail)`` and ``floor(n * (1 - tail))``, without interpolation.

    Returns
    -------
    tuple[float, tuple[float, float]]
        (mean, (lower, upper))
    """
    draws = np.asarray(samples, dtype=float)
    n = draws.size
    if n == 0:
        raise ValueError("samples must not be empty")
    ordered = np.sort(draws)
    tail = round((1 - credible_mass) / 2, 12)
    low_idx = min(int(math.floor(n * tail)), n - 1)
    high_idx = min(int(math.floor(n * (1 - tail))), n - 1)
    mean = float(np.mean(draws)) * 100
    return mean, (float(ordered[low_idx]) * 100, float(ordered[high_idx]) * 100)


def win_percentage(samples: np.ndarray) -> float:
    """Share of draws above 0.5, as a whole percent."""
    draws = np.asarray(samples, dtype=float)
    return float(round(float(np.mean(draws > 0.5)) * 100))


# ======================================================================
# Convergence
# ======================================================================


def geweke_z_score(
    samples: np.ndarray, first: float = 0.1, last: float = 0.5
) -> float:
    """Geweke z-score comparing the first ``first`` and last ``last`` of the draws.

    z = (mean_1 - mean_2) / sqrt(var_1 / n_1 + var_2 / n_2)

    Ill-conditioned cases (empty segments, zero variance in both) give NaN,
    which is reported as 0.
    """
    draws = np.asarray(samples, dtype=float)
    n = draws.size
    head = draws[: int(n * first)]
    tail = draws[int(n * (1 - last)):]
    if head.size == 0 or tail.size == 0:
        return 0.0

    with np.errstate(divide="ignore", invalid="ignore"):
        se = np.sqrt(np.var(head) / head.size + np.var(tail) / tail.size)
        z = (np.mean(head) - np.mean(tail)) / se
    z = float(z)
    return 0.0 if math.isnan(z) else z


def lag1_autocorrelation(samples: np.ndarray) -> float:
    """Lag-1 autocorrelation; 0 for fewer than two draws or zero variance."""
    draws = np.asarray(samples, dtype=float)
    if draws.size < 2:
        return 0.0
    centered = draws - np.mean(draws)
    denom = float(np.dot(centered, centered))
    if denom == 0:
        return 0.0
    return float(np.dot(centered[:-1], centered[1:])) / denom


def effective_sample_size(samples: np.ndarray) -> float:
    """Effective sample size ``n / (1 + 2 * rho)``.

    ``rho`` is the lag-1 autocorrelation clamped to [-0.5, 0.99].  Below 10
    draws the autocorrelation estimate is too noisy and ``n`` is returned.
    The result is rounded and floored at 1.  Mildly negative correlation
    yields an ESS above ``n``.  At the lower clamp the denominator is zero,
    and ``n`` is reported instead.
    """
    n = int(np.asarray(samples).size)
    if n < MIN_AUTOCORRELATION_SIZE:
        return float(n)
    low, high = AUTOCORRELATION_BOUNDS
    rho = min(max(lag1_autocorrelation(samples), low), high)
    denom = 1 + 2 * rho
    if denom <= 0:
        return float(n)
    return float(max(1, round(n / denom)))


def monte_carlo_standard_error(samples: np.ndarray, ess: float | None = None) -> float:
    """sqrt(sample variance / ESS)."""
    draws = np.asarray(samples, dtype=float)
    if draws.size < 2:
        return 0.0
    if ess is None:
        ess = effective_sample_size(draws)
    return float(math.sqrt(float(np.var(draws, ddof=1)) / ess))


def convergence_diagnostic(samples: np.ndarray) -> ConvergenceDiagnostic:
    z = geweke_z_score(samples)
    ess = effective_sample_size(samples)
    return ConvergenceDiagnostic(
        geweke_z_score=z,
        is_converged=abs(z) < GEWEKE_THRESHOLD,
        effective_sample_size=ess,
        mc_error=monte_carlo_standard_error(samples, ess),
    )
