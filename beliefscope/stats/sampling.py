"""Monte Carlo draws from a Beta posterior.

Moderate parameters (both in [0.1, 1000]) are sampled by pushing a base-2
van der Corput sequence through the Beta quantile function.  The
low-discrepancy points cover the unit interval more evenly than pseudo-random
uniforms, which tightens Monte Carlo error for the same sample count.  Each
call starts the sequence at a random offset in [0, 999] so separate runs do
not reuse the same points.

Extreme parameters are sampled by log-space acceptance-rejection against a
uniform proposal, comparing each candidate's log density to the log density at
the mode.  A parameter at or below 1 makes the density unbounded at that
boundary; any candidate above the mode density then hands over to ``direct``.

Sampling runs as an ordered chain of strategies.  The first one that returns
a full set of finite draws wins:

    quasi_random | rejection  ->  direct  ->  mode

The final ``mode`` strategy returns a constant sample at the distribution's
mode.  It always succeeds but carries no spread at all, so reaching it is an
accuracy degradation and is logged as such.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import NamedTuple

import numpy as np
from scipy import stats as sp_stats

from beliefscope.core.config import settings
from beliefscope.stats.bayesian import BetaParameters

logger = logging.getLogger(__name__)

QUASI_RANDOM_MAX_OFFSET = 1000
ENVELOPE_TOLERANCE = 1e-9

# Draws are clipped into the open unit interval.
_LOWEST = np.finfo(float).tiny
_HIGHEST = np.nextafter(1.0, 0.0)

DrawFn = Callable[[BetaParameters, int, np.random.Generator], np.ndarray | None]


class SamplingStrategy(NamedTuple):
    name: str
    draw: DrawFn


class SampleDraw(NamedTuple):
    samples: np.ndarray
    method: str


# ======================================================================
# Low-discrepancy sequence
# ======================================================================


def van_der_corput(indices, base: int = 2) -> np.ndarray:
    """Radical inverse of each index in ``base``.

    This is the one-dimensional Halton sequence: index 1 -> 0.5, 2 -> 0.25,
    3 -> 0.75, 4 -> 0.125, ...

    Parameters
    ----------
    indices : array-like of int
        Non-negative sequence positions.
    base : int
        Radix, at least 2.

    Returns
    -------
    np.ndarray
        Points in [0, 1); index 0 maps to 0.
    """
    if base < 2:
        raise ValueError("base must be at least 2")
    remaining = np.array(indices, dtype=np.int64, ndmin=1)
    if np.any(remaining < 0):
        raise ValueError("indices must be non-negative")
    points = np.zeros(remaining.shape, dtype=float)
    fraction = 1.0 / base
    while np.any(remaining > 0):
        points += fraction * (remaining % base)
        remaining //= base
        fraction /= base
    return points


# ======================================================================
# Strategies
# ======================================================================


def quasi_random_draws(
    params: BetaParameters, n: int, rng: np.random.Generator
) -> np.ndarray:
    """Inverse-CDF transform of an offset van der Corput sequence."""
    offset = int(rng.integers(0, QUASI_RANDOM_MAX_OFFSET))
    # Start at offset + 1 so the point 0 (quantile 0) never appears.
    uniforms = van_der_corput(offset + np.arange(1, n + 1))
    return sp_stats.beta.ppf(uniforms, params.alpha, params.beta)


def direct_draws(
    params: BetaParameters, n: int, rng: np.random.Generator
) -> np.ndarray:
    return rng.beta(params.alpha, params.beta, size=n)


def rejection_draws(
    params: BetaParameters,
    n: int,
    rng: np.random.Generator,
    attempt_factor: int | None = None,
) -> np.ndarray | None:
    """Log-space acceptance-rejection against Uniform(0, 1).

    A candidate ``x`` is accepted when ``log(u) < log_pdf(x) - log_pdf(mode)``.
    Proposals are drawn in vectorised batches until ``n`` are accepted or
    ``attempt_factor * n`` proposals have been spent.

    Returns
    -------
    np.ndarray | None
        ``n`` accepted draws, or None when the attempt budget ran out or the
        mode density failed to bound a candidate.
    """
    if attempt_factor is None:
        attempt_factor = settings.REJECTION_ATTEMPT_FACTOR
    log_peak = params.log_pdf(params.mode())
    budget = attempt_factor * n
    accepted: list[np.ndarray] = []
    count = 0

    while count < n and budget > 0:
        batch = min(budget, max(4 * (n - count), 1024))
        budget -= batch
        candidates = rng.random(batch)
        with np.errstate(divide="ignore", invalid="ignore"):
            log_u = np.log(rng.random(batch))
            log_ratio = params.log_pdf(candidates) - log_peak
        if np.any(log_ratio > ENVELOPE_TOLERANCE):
            logger.debug("Mode density does not bound %r; envelope rejected", params)
            return None
        keep = candidates[log_u < log_ratio]
        accepted.append(keep)
        count += keep.size

    if count < n:
        logger.debug(
            "Rejection sampler accepted %d of %d draws for %r", count, n, params
        )
        return None
    return np.concatenate(accepted)[:n]


def mode_draws(
    params: BetaParameters, n: int, rng: np.random.Generator
) -> np.ndarray:
    return np.full(n, params.mode(), dtype=float)


QUASI_RANDOM = SamplingStrategy("quasi_random", quasi_random_draws)
DIRECT = SamplingStrategy("direct", direct_draws)
REJECTION = SamplingStrategy("rejection", rejection_draws)
MODE = SamplingStrategy("mode", mode_draws)


def default_strategies(
    params: BetaParameters, use_quasi_random: bool = True
) -> list[SamplingStrategy]:
    """Fallback chain for the regime ``params`` falls in."""
    if not params.is_moderate():
        return [REJECTION, DIRECT, MODE]
    if use_quasi_random:
        return [QUASI_RANDOM, DIRECT, MODE]
    return [DIRECT, MODE]


# ======================================================================
# Entry point
# ======================================================================


def _usable(draws: np.ndarray | None, n: int) -> bool:
    return draws is not None and draws.shape == (n,) and bool(np.all(np.isfinite(draws)))


def sample_posterior(
    params: BetaParameters,
    n: int | None = None,
    rng: np.random.Generator | int | None = None,
    use_quasi_random: bool | None = None,
    strategies: Sequence[SamplingStrategy] | None = None,
) -> SampleDraw:
    """Draw ``n`` samples from ``Beta(alpha, beta)``.

    Parameters
    ----------
    params : BetaParameters
        Posterior parameters.
    n : int | None
        Number of draws; defaults to ``settings.SAMPLE_COUNT``.
    rng : np.random.Generator | int | None
        Random source or seed.  A Generator is consumed in place.
    use_quasi_random : bool | None
        Use the van der Corput sampler in the moderate regime; defaults to
        ``settings.USE_QUASI_RANDOM``.
    strategies : Sequence[SamplingStrategy] | None
        Override the fallback chain.

    Returns
    -------
    SampleDraw
        Draws in the open unit interval and the name of the strategy that
        produced them.
    """
    if n is None:
        n = settings.SAMPLE_COUNT
    if n <= 0:
        raise ValueError("sample count must be positive")
    if use_quasi_random is None:
        use_quasi_random = settings.USE_QUASI_RANDOM
    rng = np.random.default_rng(rng)
    if strategies is None:
        strategies = default_strategies(params, use_quasi_random)
    if not strategies:
        raise ValueError("at least one sampling strategy is required")

    for position, strategy in enumerate(strategies):
        draws = strategy.draw(params, n, rng)
        if _usable(draws, n):
            if position > 0:
                logger.warning(
                    "Sampling %r fell back to %s after %s",
                    params,
                    strategy.name,
                    ", ".join(s.name for s in strategies[:position]),
                )
            return SampleDraw(np.clip(draws, _LOWEST, _HIGHEST), strategy.name)

    # Only reachable when a caller-supplied chain omits MODE.
    logger.warning("All sampling strategies failed for %r; using mode", params)
    return SampleDraw(np.clip(mode_draws(params, n, rng), _LOWEST, _HIGHEST), MODE.name)
