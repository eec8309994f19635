"""Baath's two-stage prior on the sock counts."""

from dataclasses import dataclass

import numpy as np
from scipy.stats import beta

from ._protocols import PriorType
from .count import NegativeBinomialCountPrior


class BaathPrior:
    """Baath's prior: a total sock count and a proportion of pairs.

    The generative model is

        n ~ NegativeBinomial(mean=n_mu, sd=n_sd)
        theta ~ Beta(theta_a, theta_b)
        p = round(floor(n / 2) * theta)
        s = n - 2p

    so theta is the proportion of the floor(n / 2) possible pairs that are
    actually paired. The implied prior on (p, s) has the closed form

        P(p, s) = NB(2p + s) * [F(hi) - F(lo)]

    with m = floor(n / 2), lo = clip((p - 0.5) / m, 0, 1),
    hi = clip((p + 0.5) / m, 0, 1) and F the Beta CDF. When m = 0 (n is 0
    or 1) no pair can be formed, so p = 0 with probability one.

    Parameters
    ----------
    n_mu : float, optional
        Mean total number of socks. Default is 30.
    n_sd : float, optional
        Standard deviation of the total number of socks. Default is 15.
    theta_a, theta_b : float, optional
        Beta shape parameters for the proportion of pairs. Defaults are 15 and 2.

    Raises
    ------
    ValueError
        If the Beta shape parameters are not positive, or the negative binomial
        parameters are invalid.
    """

    proper = True

    def __init__(
        self,
        n_mu: float = 30.0,
        n_sd: float = 15.0,
        theta_a: float = 15.0,
        theta_b: float = 2.0,
    ) -> None:
        if theta_a <= 0 or theta_b <= 0:
            raise ValueError("Beta shape parameters must be positive.")
        self.n_prior = NegativeBinomialCountPrior(n_mu, n_sd)
        self.theta_a = float(theta_a)
        self.theta_b = float(theta_b)
        self._theta_dist = beta(self.theta_a, self.theta_b)
        self._theta_median = float(self._theta_dist.median())

    def __call__(self, p: int, s: int) -> float:
        """Baath log-prior for p pairs and s singletons."""
        if p < 0 or s < 0:
            return -np.inf
        n = 2 * p + s
        log_prior_n = self.n_prior(n)
        if np.isneginf(log_prior_n):
            return -np.inf
        return float(log_prior_n + self._log_prob_pairs(p, n // 2))

    def _log_prob_pairs(self, p: int, max_pairs: int) -> float:
        """Log-probability that round(max_pairs * theta) equals p."""
        if max_pairs == 0:
            return 0.0 if p == 0 else -np.inf

        lo = np.clip((p - 0.5) / max_pairs, 0.0, 1.0)
        hi = np.clip((p + 0.5) / max_pairs, 0.0, 1.0)
        # Difference of survival functions keeps precision near theta = 1
        if lo >= self._theta_median:
            prob = self._theta_dist.sf(lo) - self._theta_dist.sf(hi)
        else:
            prob = self._theta_dist.cdf(hi) - self._theta_dist.cdf(lo)

        if prob <= 0:
            return -np.inf
        return float(np.log(prob))

    def sample(self, num_samples: int, rng: np.random.Generator) -> np.ndarray:
        """Sample (p, s) through the generative model.

        Returns
        -------
        samples : ndarray of int, shape (num_samples, 2)
            Columns (p, s).
        """
        n = self.n_prior.sample(num_samples, rng)
        theta = self._theta_dist.rvs(size=num_samples, random_state=rng)
        p = np.rint((n // 2) * theta).astype(int)
        s = n - 2 * p
        return np.column_stack([p, s])

    @property
    def config_params(self) -> list[float]:
        """Hyperparameters (n_mu, n_sd, theta_a, theta_b)."""
        return [self.n_prior.mu, self.n_prior.sd, self.theta_a, self.theta_b]


@dataclass
class BaathPriorConfig:
    """Configuration for Baath's prior."""

    n_mu: float = 30.0
    n_sd: float = 15.0
    theta_a: float = 15.0
    theta_b: float = 2.0

    type = PriorType.BAATH

    def to_prior(self) -> BaathPrior:
        """Build a BaathPrior from this config."""
        return BaathPrior(
            n_mu=self.n_mu,
            n_sd=self.n_sd,
            theta_a=self.theta_a,
            theta_b=self.theta_b,
        )
