"""Brute-force grid posterior over the number of pairs and singletons."""

from collections.abc import Callable
from dataclasses import dataclass, fields
from typing import Any, TypeAlias
from warnings import warn

import numpy as np

from .likelihood import LogLikelihoodFunction, log_likelihood
from .priors import FlatPrior
from .priors.flat import IMPROPER_PRIOR_MESSAGE

LogPriorFunction: TypeAlias = Callable[[int, int], float]


class GridConfigurationError(ValueError):
    """The grid, prior or likelihood cannot produce a meaningful posterior."""


class DegeneratePosteriorError(ValueError):
    """Every grid point has zero unnormalised posterior mass."""


class Posterior:
    """
    Unnormalised log-posterior for a fixed observation k.

    Combines a log-likelihood function of (p, s, k) and a log-prior function of
    (p, s), checking that both return valid values.
    """

    def __init__(
        self,
        k: int,
        likelihood_fn: LogLikelihoodFunction,
        prior_fn: LogPriorFunction,
    ) -> None:
        """
        Initialize the Posterior.

        Parameters
        ----------
        k : int
            Number of distinct socks observed.
        likelihood_fn : Callable[[int, int, int], float]
            Function of (p, s, k) returning the log-likelihood.
        prior_fn : Callable[[int, int], float]
            Function of (p, s) returning the log-prior.
        """
        self.k = k
        self.likelihood_fn = likelihood_fn
        self.prior_fn = prior_fn

    def evaluate(self, p: int, s: int) -> tuple[float, float]:
        """
        Evaluate the log-prior and log-likelihood at one grid point.

        Returns
        -------
        log_prior, log_likelihood : float
            Both may be -inf.

        Raises
        ------
        GridConfigurationError
            If either function returns NaN, +inf or a non-numeric value.
        """
        log_prior = _checked("log-prior", self.prior_fn(p, s), p, s)
        log_lik = _checked("log-likelihood", self.likelihood_fn(p, s, self.k), p, s)
        return log_prior, log_lik

    def __call__(self, p: int, s: int) -> float:
        """Unnormalised log-posterior at (p, s)."""
        log_prior, log_lik = self.evaluate(p, s)
        return log_prior + log_lik


@dataclass(frozen=True, eq=False)
class PosteriorTable:
    """
    Normalised posterior over a rectangular (p, s) grid, stored column-wise.

    Row i describes grid point (p[i], s[i]) with n[i] = 2 p[i] + s[i] socks.
    All arrays are read-only. `posterior` sums to one over the grid; mass the
    untruncated posterior would put outside the grid is ignored.
    """

    p: np.ndarray
    s: np.ndarray
    n: np.ndarray
    k: np.ndarray
    log_prior: np.ndarray
    log_likelihood: np.ndarray
    prior: np.ndarray
    log_posterior: np.ndarray
    posterior: np.ndarray
    diagnostics: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for column in self.columns:
            getattr(self, column).flags.writeable = False

    @property
    def columns(self) -> list[str]:
        """Names of the per-point columns."""
        return [f.name for f in fields(self) if f.name != "diagnostics"]

    def __len__(self) -> int:
        return self.p.size

    def mode(self) -> tuple[int, int]:
        """Grid point (p, s) with the largest posterior probability.

        Ties resolve to the first point in grid order.
        """
        i = int(np.argmax(self.posterior))
        return int(self.p[i]), int(self.s[i])

    def marginal_n(self) -> tuple[np.ndarray, np.ndarray]:
        """Posterior marginal of the total number of socks n = 2p + s."""
        return self._marginal(self.n)

    def marginal_p(self) -> tuple[np.ndarray, np.ndarray]:
        """Posterior marginal of the number of pairs."""
        return self._marginal(self.p)

    def marginal_s(self) -> tuple[np.ndarray, np.ndarray]:
        """Posterior marginal of the number of singletons."""
        return self._marginal(self.s)

    def _marginal(self, values: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """
        Sum the posterior over grid points sharing the same value.

        Returns
        -------
        unique_values : ndarray of int
            Sorted distinct values.
        mass : ndarray of float
            Posterior mass of each value.
        """
        unique_values, inverse = np.unique(values, return_inverse=True)
        mass = np.bincount(inverse, weights=self.posterior)
        return unique_values, mass

    def to_records(self) -> list[dict[str, Any]]:
        """One dictionary per grid point, keyed by column name."""
        columns = {name: getattr(self, name).tolist() for name in self.columns}
        return [dict(zip(columns, row)) for row in zip(*columns.values())]


def grid_posterior(
    p_max: int,
    s_max: int,
    k: int,
    log_likelihood_fn: LogLikelihoodFunction = log_likelihood,
    log_prior_fn: LogPriorFunction | None = None,
    edge_tolerance: float | None = 1e-3,
) -> PosteriorTable:
    """
    Posterior over every (p, s) with 0 <= p <= p_max and 0 <= s <= s_max.

    The grid truncates an unbounded parameter space. If the prior puts
    appreciable mass beyond the bounds the truncation biases the result, so
    the bounds should be chosen with negligible prior mass outside them.

    Parameters
    ----------
    p_max : int
        Largest number of pairs on the grid.
    s_max : int
        Largest number of singletons on the grid.
    k : int
        Number of distinct socks observed.
    log_likelihood_fn : Callable[[int, int, int], float], optional
        Log-likelihood of (p, s, k). Default is `log_likelihood`.
    log_prior_fn : Callable[[int, int], float] | None, optional
        Log-prior of (p, s). If None, a FlatPrior is used; it is improper and
        a warning is issued and recorded in the table's diagnostics. The
        same happens for any prior whose `proper` attribute is False.
    edge_tolerance : float | None, optional
        Warn if more than this posterior mass lies on the outer edge of the
        grid (p == p_max > 0 or s == s_max > 0). None disables the check.
        Default is 1e-3.

    Returns
    -------
    PosteriorTable
        The normalised posterior, in row-major (p, then s) order.

    Raises
    ------
    ValueError
        If the bounds or k are not non-negative integers.
    GridConfigurationError
        If no grid point can produce k distinct socks, or a prior or
        likelihood function returns NaN or +inf.
    DegeneratePosteriorError
        If the unnormalised posterior is zero at every grid point.
    """
    _validate_grid(p_max=p_max, s_max=s_max, k=k)
    if k > p_max + s_max:
        raise GridConfigurationError(
            f"No grid point can produce {k} distinct socks: need p_max + s_max >= {k}, "
            f"got {p_max} + {s_max}."
        )

    diagnostics = []
    if log_prior_fn is None:
        log_prior_fn = FlatPrior()
    if getattr(log_prior_fn, "proper", True) is False:
        diagnostics.append(IMPROPER_PRIOR_MESSAGE)
        warn(IMPROPER_PRIOR_MESSAGE, stacklevel=2)

    posterior_fn = Posterior(k, log_likelihood_fn, log_prior_fn)

    size = (p_max + 1) * (s_max + 1)
    p = np.empty(size, dtype=int)
    s = np.empty(size, dtype=int)
    log_prior = np.empty(size)
    log_lik = np.empty(size)

    i = 0
    for p_i in range(p_max + 1):
        for s_i in range(s_max + 1):
            p[i], s[i] = p_i, s_i
            log_prior[i], log_lik[i] = posterior_fn.evaluate(p_i, s_i)
            i += 1

    log_unnormalised = log_prior + log_lik
    log_max = np.max(log_unnormalised)
    if np.isneginf(log_max):
        raise DegeneratePosteriorError(
            "Unnormalised posterior is zero at every grid point; "
            "the prior has no mass where the observation is possible."
        )

    # Shifting by the maximum leaves the normalised posterior unchanged
    shifted = log_unnormalised - log_max
    weights = np.exp(shifted)
    normalisation = np.sum(weights)
    posterior = weights / normalisation
    log_posterior = shifted - np.log(normalisation)

    if edge_tolerance is not None:
        # a zero bound is the natural boundary of the parameter, not a truncation
        on_edge = ((p == p_max) & (p_max > 0)) | ((s == s_max) & (s_max > 0))
        edge_mass = float(np.sum(posterior[on_edge]))
        if edge_mass > edge_tolerance:
            message = (
                f"Posterior mass on the grid edge is {edge_mass:.3g} "
                f"(p_max={p_max}, s_max={s_max}); the bounds may be truncating "
                "the posterior."
            )
            diagnostics.append(message)
            warn(message, stacklevel=2)

    return PosteriorTable(
        p=p,
        s=s,
        n=2 * p + s,
        k=np.full(size, k, dtype=int),
        log_prior=log_prior,
        log_likelihood=log_lik,
        prior=np.exp(log_prior),
        log_posterior=log_posterior,
        posterior=posterior,
        diagnostics=tuple(diagnostics),
    )


def _checked(name: str, value: Any, p: int, s: int) -> float:
    """
    Convert a log-density value to float, rejecting NaN and +inf.

    Raises
    ------
    GridConfigurationError
        If the value is not numeric, is NaN, or is +inf.
    """
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise GridConfigurationError(
            f"{name} function returned a non-numeric value {value!r} at p={p}, s={s}."
        ) from e
    if np.isnan(value) or value == np.inf:
        raise GridConfigurationError(
            f"{name} function returned {value} at p={p}, s={s}."
        )
    return value


def _validate_grid(**bounds: int) -> None:
    """
    Validate that grid bounds and the observation are non-negative integers.

    Raises
    ------
    ValueError
        If any value is negative or not an integer.
    """
    for name, value in bounds.items():
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise ValueError(f"{name} must be an integer, got {value!r}.")
        if value < 0:
            raise ValueError(f"{name} must be non-negative, got {value}.")
