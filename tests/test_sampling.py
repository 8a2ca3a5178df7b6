"""Tests for posterior sampling and sampling-quality diagnostics.

Covers:
- van der Corput sequence values
- Quasi-random and direct sampling in the moderate regime
- Log-space rejection sampling for extreme parameters
- The fallback chain down to the mode (accuracy degradation path)
- Summary statistics, Geweke z-score, ESS, and Monte Carlo error
"""

import logging
import math

import numpy as np
import pytest

from beliefscope.stats.bayesian import BetaParameters
from beliefscope.stats.diagnostics import (
    convergence_diagnostic,
    effective_sample_size,
    geweke_z_score,
    lag1_autocorrelation,
    monte_carlo_standard_error,
    summarize,
    win_percentage,
)
from beliefscope.stats.sampling import (
    DIRECT,
    MODE,
    REJECTION,
    SamplingStrategy,
    default_strategies,
    rejection_draws,
    sample_posterior,
    van_der_corput,
)


def _always_fails(params, n, rng):
    return None


def _non_finite(params, n, rng):
    return np.full(n, np.nan)


# ======================================================================
# Low-discrepancy sequence
# ======================================================================


class TestVanDerCorput:
    def test_first_points(self):
        points = van_der_corput([0, 1, 2, 3, 4, 5, 6, 7])
        assert points.tolist() == [0.0, 0.5, 0.25, 0.75, 0.125, 0.625, 0.375, 0.875]

    def test_base_three(self):
        points = van_der_corput([1, 2, 3], base=3)
        assert np.allclose(points, [1 / 3, 2 / 3, 1 / 9])

    def test_more_even_than_pseudo_random(self):
        """Low-discrepancy points should track the uniform mean closely."""
        points = van_der_corput(np.arange(1, 1025))
        assert abs(points.mean() - 0.5) < 1e-3

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            van_der_corput([1, 2], base=1)
        with pytest.raises(ValueError):
            van_der_corput([-1])


# ======================================================================
# Moderate regime
# ======================================================================


class TestModerateSampling:
    def test_quasi_random_is_default(self):
        draw = sample_posterior(BetaParameters(10, 5), 10_000, rng=7)
        assert draw.method == "quasi_random"
        assert draw.samples.shape == (10_000,)
        assert np.all((draw.samples > 0) & (draw.samples < 1))

    def test_quasi_random_mean_is_tight(self):
        draw = sample_posterior(BetaParameters(10, 5), 10_000, rng=7)
        assert draw.samples.mean() == pytest.approx(10 / 15, abs=0.002)

    def test_direct_when_quasi_random_disabled(self):
        draw = sample_posterior(BetaParameters(10, 5), 10_000, rng=7, use_quasi_random=False)
        assert draw.method == "direct"
        assert draw.samples.mean() == pytest.approx(10 / 15, abs=0.01)

    def test_same_seed_same_draws(self):
        a = sample_posterior(BetaParameters(3, 4), 2_000, rng=123)
        b = sample_posterior(BetaParameters(3, 4), 2_000, rng=123)
        assert np.array_equal(a.samples, b.samples)

    def test_non_positive_count_raises(self):
        with pytest.raises(ValueError):
            sample_posterior(BetaParameters(2, 2), 0)

    def test_default_chains(self):
        moderate = BetaParameters(5, 5)
        assert [s.name for s in default_strategies(moderate)] == ["quasi_random", "direct", "mode"]
        assert [s.name for s in default_strategies(moderate, False)] == ["direct", "mode"]
        extreme = BetaParameters(2000, 0.5)
        assert [s.name for s in default_strategies(extreme)] == ["rejection", "direct", "mode"]


# ======================================================================
# Extreme regime
# ======================================================================


class TestExtremeSampling:
    def test_skewed_extreme_has_no_nan_or_inf(self):
        params = BetaParameters(2000, 0.5)
        draw = sample_posterior(params, 5_000, rng=11)
        assert draw.method == "direct"
        assert np.all(np.isfinite(draw.samples))
        assert np.all((draw.samples > 0) & (draw.samples < 1))
        assert draw.samples.mean() == pytest.approx(params.mean(), abs=1e-3)

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_unbounded_density_rejects_mode_envelope(self, seed):
        """beta <= 1 puts density above the mode value near x = 1."""
        params = BetaParameters(2000, 0.5)
        assert rejection_draws(params, 5_000, np.random.default_rng(seed)) is None

    def test_unbounded_density_falls_back_to_direct(self, caplog):
        with caplog.at_level(logging.WARNING, logger="beliefscope.stats.sampling"):
            draw = sample_posterior(BetaParameters(0.5, 2000), 2_000, rng=4)
        assert draw.method == "direct"
        assert draw.samples.mean() == pytest.approx(0.5 / 2000.5, abs=1e-3)
        assert "fell back to direct" in caplog.text

    def test_rejection_sampler_accepts_around_mode(self):
        params = BetaParameters(2000, 2000)
        draws = rejection_draws(params, 2_000, np.random.default_rng(3))
        assert draws is not None
        assert draws.shape == (2_000,)
        assert draws.mean() == pytest.approx(0.5, abs=0.01)

    def test_rejection_exhaustion_returns_none(self):
        """A very peaked target cannot be filled from a small budget."""
        params = BetaParameters(1e5, 1e5)
        assert rejection_draws(params, 1_000, np.random.default_rng(3), attempt_factor=1) is None

    def test_exhaustion_falls_back_to_direct(self, caplog):
        params = BetaParameters(1e5, 1e5)
        with caplog.at_level(logging.WARNING, logger="beliefscope.stats.sampling"):
            draw = sample_posterior(params, 1_000, rng=5)
        assert draw.method == "direct"
        assert draw.samples.mean() == pytest.approx(0.5, abs=0.001)
        assert "fell back to direct" in caplog.text


class TestFallbackChain:
    """The last-resort mode fallback is a degradation, not a correct sample."""

    def test_mode_is_last_resort(self, caplog):
        params = BetaParameters(1e5, 1e5)
        chain = [REJECTION, SamplingStrategy("direct", _non_finite), MODE]
        with caplog.at_level(logging.WARNING, logger="beliefscope.stats.sampling"):
            draw = sample_posterior(params, 500, rng=1, strategies=chain)
        assert draw.method == "mode"
        assert np.allclose(draw.samples, 0.5)
        assert "fell back to mode" in caplog.text

    def test_mode_fallback_diagnostics_are_degenerate_but_finite(self):
        params = BetaParameters(2000, 0.5)
        chain = [SamplingStrategy("rejection", _always_fails), MODE]
        draw = sample_posterior(params, 500, rng=1, strategies=chain)
        assert np.all(draw.samples == 0.99)
        diag = convergence_diagnostic(draw.samples)
        assert diag.geweke_z_score == 0.0
        assert diag.is_converged is True
        assert diag.mc_error == 0.0

    def test_chain_without_mode_still_returns(self):
        params = BetaParameters(3, 3)
        chain = [SamplingStrategy("broken", _always_fails)]
        draw = sample_posterior(params, 100, rng=1, strategies=chain)
        assert draw.method == "mode"
        assert np.allclose(draw.samples, 0.5)

    def test_first_success_wins(self):
        draw = sample_posterior(BetaParameters(3, 3), 100, rng=1, strategies=[DIRECT, MODE])
        assert draw.method == "direct"


# ======================================================================
# Summaries
# ======================================================================


class TestSummaries:
    def test_empirical_quantiles(self):
        samples = np.arange(1000) / 1000
        mean, (low, high) = summarize(samples)
        assert mean == pytest.approx(49.95)
        assert low == pytest.approx(2.5)
        assert high == pytest.approx(97.5)

    def test_interval_brackets_mean(self):
        samples = np.random.default_rng(0).beta(2, 9, size=5_000)
        mean, (low, high) = summarize(samples)
        assert 0 <= low <= mean <= high <= 100

    def test_single_sample(self):
        mean, (low, high) = summarize(np.array([0.3]))
        assert mean == pytest.approx(30.0)
        assert low == high == pytest.approx(30.0)

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            summarize(np.array([]))

    def test_win_percentage(self):
        assert win_percentage(np.array([0.2, 0.6, 0.7, 0.9])) == 75.0
        assert win_percentage(np.array([0.5, 0.5])) == 0.0

    def test_win_percentage_complements(self):
        samples = np.random.default_rng(4).beta(6, 5, size=3_333)
        win = win_percentage(samples)
        assert win + (100 - win) == 100
        assert 0 <= win <= 100


# ======================================================================
# Convergence diagnostics
# ======================================================================


class TestGeweke:
    def test_constant_samples_normalized_to_zero(self):
        assert geweke_z_score(np.full(100, 0.4)) == 0.0

    def test_drifting_chain_not_converged(self):
        chain = np.linspace(0.1, 0.9, 1_000)
        assert abs(geweke_z_score(chain)) > 1.96

    def test_quasi_random_draws_converge(self):
        draw = sample_posterior(BetaParameters(10, 5), 10_000, rng=42)
        diag = convergence_diagnostic(draw.samples)
        assert diag.is_converged is True
        assert abs(diag.geweke_z_score) < 1.96

    def test_tiny_input(self):
        assert geweke_z_score(np.array([0.1, 0.2])) == 0.0


class TestEffectiveSampleSize:
    def test_small_samples_return_n(self):
        assert effective_sample_size(np.array([0.1, 0.5, 0.9])) == 3

    def test_independent_draws_near_n(self):
        samples = np.random.default_rng(8).random(10_000)
        ess = effective_sample_size(samples)
        assert 9_000 <= ess <= 11_000

    def test_moderate_negative_correlation_exceeds_n(self):
        """An MA(1) chain with rho near -0.3 keeps the plain formula."""
        e = np.random.default_rng(12).standard_normal(1_001)
        chain = e[1:] - 0.3 * e[:-1]
        rho = lag1_autocorrelation(chain)
        assert -0.45 < rho < -0.15
        ess = effective_sample_size(chain)
        assert ess == round(1_000 / (1 + 2 * rho))
        assert ess > 1_000

    def test_highly_correlated_clamped(self):
        """rho near 1 is clamped to 0.99: ESS = n / 2.98."""
        chain = np.linspace(0, 1, 1_000)
        assert lag1_autocorrelation(chain) > 0.99
        assert effective_sample_size(chain) == round(1_000 / 2.98)

    def test_alternating_sequence_capped_at_n(self):
        chain = np.tile([0.2, 0.8], 50)
        assert lag1_autocorrelation(chain) < -0.5
        assert effective_sample_size(chain) == 100

    def test_constant_sequence(self):
        assert lag1_autocorrelation(np.full(50, 0.3)) == 0.0
        assert effective_sample_size(np.full(50, 0.3)) == 50

    def test_mc_error(self):
        samples = np.random.default_rng(9).random(5_000)
        ess = effective_sample_size(samples)
        expected = math.sqrt(np.var(samples, ddof=1) / ess)
        assert monte_carlo_standard_error(samples, ess) == pytest.approx(expected)
        assert monte_carlo_standard_error(samples) == pytest.approx(expected)
