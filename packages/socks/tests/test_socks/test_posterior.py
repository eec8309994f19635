"""Test the grid posterior module."""

import pickle
import warnings

import numpy as np
import pytest
from socks.likelihood import log_likelihood, log_likelihood_stopped
from socks.posterior import (
    DegeneratePosteriorError,
    GridConfigurationError,
    Posterior,
    PosteriorTable,
    grid_posterior,
)
from socks.priors import BaathPrior, FactoredPrior, FlatPrior, NegativeBinomialCountPrior
from socks.priors.flat import IMPROPER_PRIOR_MESSAGE


def _zero_prior(p: int, s: int) -> float:
    """Flat log-prior of zero, picklable."""
    return 0.0


@pytest.fixture
def small_table() -> PosteriorTable:
    """Posterior for k = 2 on a 3 x 2 grid with a flat prior."""
    return grid_posterior(2, 1, 2, log_prior_fn=_zero_prior, edge_tolerance=None)


def test_posterior_combines_prior_and_likelihood() -> None:
    """Test the unnormalised posterior on a single grid point."""
    posterior_fn = Posterior(2, log_likelihood, lambda p, s: -1.5)
    assert posterior_fn(1, 1) == pytest.approx(np.log(2 / 3) - 1.5)
    assert posterior_fn.evaluate(1, 1) == pytest.approx((-1.5, np.log(2 / 3)))


def test_posterior_picklable() -> None:
    """Test that Posterior is picklable and works after unpickling."""
    posterior_fn = Posterior(4, log_likelihood, _zero_prior)
    unpickled = pickle.loads(pickle.dumps(posterior_fn))
    assert unpickled(3, 4) == posterior_fn(3, 4)


def test_small_grid_by_hand(small_table: PosteriorTable) -> None:
    """Feasible points (1, 1), (2, 0), (2, 1) have likelihoods 2/3, 2/3, 4/5."""
    expected = np.array([0.0, 0.0, 0.0, 2 / 3, 2 / 3, 0.8])
    expected /= expected.sum()

    np.testing.assert_array_equal(small_table.p, [0, 0, 1, 1, 2, 2])
    np.testing.assert_array_equal(small_table.s, [0, 1, 0, 1, 0, 1])
    np.testing.assert_array_equal(small_table.n, [0, 1, 2, 3, 4, 5])
    np.testing.assert_array_equal(small_table.k, np.full(6, 2))
    np.testing.assert_allclose(small_table.posterior, expected)
    assert small_table.mode() == (2, 1)


def test_table_columns(small_table: PosteriorTable) -> None:
    """Test derived columns of the table."""
    assert len(small_table) == 6
    np.testing.assert_allclose(small_table.prior, np.ones(6))
    expected_ll = [log_likelihood(p, s, 2) for p, s in zip(small_table.p, small_table.s)]
    np.testing.assert_allclose(small_table.log_likelihood, expected_ll)
    feasible = small_table.posterior > 0
    np.testing.assert_allclose(
        small_table.log_posterior[feasible], np.log(small_table.posterior[feasible])
    )
    assert np.all(np.isneginf(small_table.log_posterior[~feasible]))


def test_marginals(small_table: PosteriorTable) -> None:
    """Test marginalising the posterior over p, s and n."""
    p_values, p_mass = small_table.marginal_p()
    np.testing.assert_array_equal(p_values, [0, 1, 2])
    np.testing.assert_allclose(p_mass, [0.0, 0.3125, 0.6875])

    s_values, s_mass = small_table.marginal_s()
    np.testing.assert_array_equal(s_values, [0, 1])
    np.testing.assert_allclose(s_mass, [0.3125, 0.6875])

    n_values, n_mass = small_table.marginal_n()
    np.testing.assert_array_equal(n_values, np.arange(6))
    assert n_mass.sum() == pytest.approx(1.0)


def test_marginal_n_collects_points() -> None:
    """Different (p, s) with the same n share a marginal bin."""
    table = grid_posterior(3, 6, 0, log_prior_fn=_zero_prior, edge_tolerance=None)
    n_values, n_mass = table.marginal_n()
    np.testing.assert_array_equal(n_values, np.arange(13))
    # n = 6 from (0, 6), (1, 4), (2, 2), (3, 0)
    assert n_mass[6] == pytest.approx(4 / len(table))


def test_to_records(small_table: PosteriorTable) -> None:
    """Test the record view of the table."""
    records = small_table.to_records()
    assert len(records) == 6
    assert set(records[3]) == {
        "p",
        "s",
        "n",
        "k",
        "log_prior",
        "log_likelihood",
        "prior",
        "log_posterior",
        "posterior",
    }
    assert records[3]["p"] == 1
    assert records[3]["s"] == 1
    assert records[3]["posterior"] == pytest.approx(0.3125)


def test_table_is_read_only(small_table: PosteriorTable) -> None:
    """Test that the table cannot be mutated."""
    with pytest.raises(ValueError):
        small_table.posterior[0] = 1.0
    with pytest.raises(AttributeError):
        small_table.k = np.zeros(6)


@pytest.mark.parametrize(
    "prior_fn",
    [
        FlatPrior(),
        BaathPrior(),
        FactoredPrior(
            NegativeBinomialCountPrior(12, 8), NegativeBinomialCountPrior(3, 3)
        ),
    ],
)
def test_posterior_sums_to_one(prior_fn) -> None:
    """Test that the posterior is normalised for each prior."""
    table = grid_posterior(50, 50, 11, log_prior_fn=prior_fn, edge_tolerance=None)
    assert table.posterior.sum() == pytest.approx(1.0, abs=1e-9)
    assert np.all(table.posterior[table.n < 11] == 0.0)


def test_stopped_likelihood_grid() -> None:
    """Test the grid posterior with the stopping-time likelihood."""
    table = grid_posterior(
        40, 20, 11, log_likelihood_stopped, BaathPrior(), edge_tolerance=None
    )
    assert table.posterior.sum() == pytest.approx(1.0, abs=1e-9)
    assert np.all(table.posterior[table.n < 12] == 0.0)


def test_idempotent() -> None:
    """Test that identical inputs produce identical tables."""
    first = grid_posterior(20, 10, 5, log_prior_fn=BaathPrior(), edge_tolerance=None)
    second = grid_posterior(20, 10, 5, log_prior_fn=BaathPrior(), edge_tolerance=None)
    for column in first.columns:
        np.testing.assert_array_equal(getattr(first, column), getattr(second, column))


def test_missing_prior_warns() -> None:
    """Test that the flat fallback is announced and recorded."""
    with pytest.warns(UserWarning, match="improper"):
        table = grid_posterior(5, 5, 3, edge_tolerance=None)
    assert any("improper" in message for message in table.diagnostics)
    assert table.posterior.sum() == pytest.approx(1.0)


def test_explicit_prior_has_no_diagnostics() -> None:
    """Test that a proper prior on wide bounds produces no diagnostics."""
    table = grid_posterior(100, 100, 11, log_prior_fn=BaathPrior())
    assert table.diagnostics == ()


def test_edge_mass_warns() -> None:
    """Test that mass piling up on the grid edge is reported."""
    with pytest.warns(UserWarning, match="grid edge"):
        table = grid_posterior(6, 6, 5, log_prior_fn=_zero_prior)
    assert any("grid edge" in message for message in table.diagnostics)


def test_explicit_flat_prior_warns() -> None:
    """Test that passing the improper flat prior explicitly is also reported."""
    with pytest.warns(UserWarning, match="improper"):
        table = grid_posterior(5, 5, 3, log_prior_fn=FlatPrior(), edge_tolerance=None)
    assert table.diagnostics == (IMPROPER_PRIOR_MESSAGE,)


@pytest.mark.parametrize(("p_max", "s_max"), [(200, 0), (0, 200)])
def test_zero_bound_is_not_an_edge(p_max: int, s_max: int) -> None:
    """Test that a zero bound does not count as a truncated edge."""
    with warnings.catch_warnings():
        warnings.simplefilter("error", UserWarning)
        table = grid_posterior(p_max, s_max, 3, log_prior_fn=BaathPrior())
    assert table.diagnostics == ()


def test_infeasible_bounds() -> None:
    """Test that bounds unable to produce k distinct socks are rejected."""
    with pytest.raises(GridConfigurationError, match="distinct socks"):
        grid_posterior(3, 4, 8, log_prior_fn=_zero_prior)


def test_all_neginf_is_degenerate() -> None:
    """Test that a prior with no mass where data is possible is rejected."""

    def tiny_drum_prior(p: int, s: int) -> float:
        return 0.0 if p + s < 3 else -np.inf

    with pytest.raises(DegeneratePosteriorError):
        grid_posterior(5, 5, 3, log_prior_fn=tiny_drum_prior)


@pytest.mark.parametrize("bad_value", [np.nan, np.inf, "zero", None])
def test_invalid_prior_values(bad_value) -> None:
    """Test that NaN, +inf or non-numeric log-priors are rejected."""
    with pytest.raises(GridConfigurationError, match="log-prior"):
        grid_posterior(3, 3, 2, log_prior_fn=lambda p, s: bad_value)


def test_invalid_likelihood_values() -> None:
    """Test that a NaN log-likelihood is rejected."""
    with pytest.raises(GridConfigurationError, match="log-likelihood"):
        grid_posterior(
            3, 3, 2, log_likelihood_fn=lambda p, s, k: np.nan, log_prior_fn=_zero_prior
        )


@pytest.mark.parametrize(
    ("p_max", "s_max", "k"), [(-1, 5, 2), (5, -1, 2), (5, 5, -1), (5.0, 5, 2)]
)
def test_invalid_grid(p_max, s_max, k) -> None:
    """Test that negative or non-integer grid inputs raise a ValueError."""
    with pytest.raises(ValueError):
        grid_posterior(p_max, s_max, k, log_prior_fn=_zero_prior)
