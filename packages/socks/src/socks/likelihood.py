"""Likelihood functions for the distinct-socks observation."""

from collections.abc import Callable, Iterable
from enum import StrEnum, auto
from typing import TypeAlias

import numpy as np
import scipy.special as sp

LogLikelihoodFunction: TypeAlias = Callable[[int, int, int], float]


class LikelihoodType(StrEnum):
    """Enumeration of supported likelihood models."""

    FIXED = auto()
    STOPPED = auto()


def log_choose(n: int, m: int) -> float:
    """
    Natural log of the binomial coefficient C(n, m).

    Parameters
    ----------
    n : int
        Size of the set.
    m : int
        Size of the subset.

    Returns
    -------
    float
        log C(n, m), or -inf when m < 0 or m > n.
    """
    if m < 0 or m > n:
        return -np.inf
    return float(sp.gammaln(n + 1) - sp.gammaln(m + 1) - sp.gammaln(n - m + 1))


def log_sum_exp(log_terms: Iterable[float]) -> float:
    """
    Stable log(sum(exp(x))), factoring out the largest term.

    Terms equal to -inf contribute nothing. An empty input, or one where every
    term is -inf, returns -inf.
    """
    terms = np.fromiter(log_terms, dtype=float)
    if terms.size == 0 or np.all(np.isneginf(terms)):
        return -np.inf
    return float(sp.logsumexp(terms))


def log_likelihood(p: int, s: int, k: int) -> float:
    """
    Log-probability that the first k socks drawn are all distinct.

    The drum holds p pairs (2p socks) and s singletons. Drawing k socks without
    replacement, the probability that no two of them belong to the same pair is

        C(2p + s, k)^-1 * sum_j 2^(k - j) C(s, j) C(p, k - j)

    where j counts the singletons among the k socks drawn.

    Parameters
    ----------
    p : int
        Number of pairs.
    s : int
        Number of singleton socks.
    k : int
        Number of distinct socks observed.

    Returns
    -------
    float
        The log-likelihood, -inf when k > p + s.

    Raises
    ------
    ValueError
        If any argument is not a non-negative integer.
    """
    _validate_counts(p=p, s=s, k=k)

    # there are only p + s distinct sock types
    if k > p + s:
        return -np.inf

    log_denominator = log_choose(2 * p + s, k)
    log_terms = [
        (k - j) * np.log(2) + log_choose(s, j) + log_choose(p, k - j) - log_denominator
        for j in range(min(k, s) + 1)
    ]
    # rounding in gammaln can push a certain draw just above log(1)
    return min(log_sum_exp(log_terms), 0.0)


def log_likelihood_stopped(p: int, s: int, k: int) -> float:
    """
    Log-likelihood under a stopping rule.

    Instead of a fixed sample of k socks, drawing stops at the first sock that
    matches one already drawn, and that happens on draw k + 1. This multiplies
    the fixed-sample likelihood by the probability that the next sock matches
    one of the k already drawn:

        k (k + 1) / (2p + s - k)

    Only defined when k + 1 <= 2p + s; otherwise returns -inf. With k = 0 the
    factor is zero (the first sock cannot match anything), so -inf as well.
    """
    _validate_counts(p=p, s=s, k=k)
    n = 2 * p + s
    if k == 0 or k + 1 > n:
        return -np.inf
    ll = log_likelihood(p, s, k)
    if np.isneginf(ll):
        return -np.inf
    return float(np.log(k) + np.log(k + 1) - np.log(n - k) + ll)


_LIKELIHOOD_FUNCTIONS: dict[LikelihoodType, LogLikelihoodFunction] = {
    LikelihoodType.FIXED: log_likelihood,
    LikelihoodType.STOPPED: log_likelihood_stopped,
}


def get_likelihood_function(name: str | LikelihoodType) -> LogLikelihoodFunction:
    """Look up a log-likelihood function by name ("fixed" or "stopped")."""
    try:
        likelihood_type = LikelihoodType(str(name).lower())
    except ValueError as e:
        raise ValueError(f"Unknown likelihood type: {name}") from e
    return _LIKELIHOOD_FUNCTIONS[likelihood_type]


def _validate_counts(**counts: int) -> None:
    """
    Validate that every count is a non-negative integer.

    Raises
    ------
    ValueError
        If any count is negative or not an integer.
    """
    for name, value in counts.items():
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise ValueError(f"{name} must be an integer, got {value!r}.")
        if value < 0:
            raise ValueError(f"{name} must be non-negative, got {value}.")
