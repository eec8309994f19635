"""Monte Carlo simulation of drawing socks from the drum."""

import numpy as np


def draw_is_distinct(p: int, s: int, k: int, rng: np.random.Generator) -> bool:
    """
    Draw k socks without replacement and check that no two form a pair.

    Socks are labelled by type: pair socks 0..p-1 appear twice, singletons
    p..p+s-1 appear once.

    Parameters
    ----------
    p : int
        Number of pairs.
    s : int
        Number of singleton socks.
    k : int
        Number of socks drawn.
    rng : np.random.Generator
        Random number generator.

    Returns
    -------
    bool
        True if all k socks drawn are of distinct types.

    Raises
    ------
    ValueError
        If k exceeds the number of socks 2p + s.
    """
    drum = _sock_drum(p, s)
    if k > drum.size:
        raise ValueError(f"Cannot draw {k} socks from a drum of {drum.size}.")
    drawn = rng.choice(drum, size=k, replace=False)
    return np.unique(drawn).size == k


def estimate_likelihood(
    p: int, s: int, k: int, num_draws: int, rng: np.random.Generator
) -> float:
    """
    Monte Carlo estimate of the probability that k drawn socks are distinct.

    Estimates exp(log_likelihood(p, s, k)) as the fraction of num_draws
    independent draws in which every sock is distinct. Returns 0.0 when k is
    larger than the drum, where no draw is possible.
    """
    if num_draws <= 0:
        raise ValueError("num_draws must be positive.")
    if k > 2 * p + s:
        return 0.0
    hits = sum(draw_is_distinct(p, s, k, rng) for _ in range(num_draws))
    return hits / num_draws


def _sock_drum(p: int, s: int) -> np.ndarray:
    """Type labels of all 2p + s socks."""
    return np.concatenate([np.repeat(np.arange(p), 2), np.arange(p, p + s)])
