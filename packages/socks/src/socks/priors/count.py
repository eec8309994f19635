"""Negative binomial prior on a single sock count."""

import numpy as np
from scipy.stats import nbinom


class NegativeBinomialCountPrior:
    """Negative binomial prior on a non-negative count, given by mean and sd.

    The negative binomial is overdispersed, so the standard deviation must
    satisfy ``sd**2 > mu``. It is converted to scipy's parameterisation with

        size = mu**2 / (sd**2 - mu),  prob = size / (size + mu)

    Parameters
    ----------
    mu : float
        Mean count.
    sd : float
        Standard deviation of the count.

    Raises
    ------
    ValueError
        If `mu` is not positive or `sd**2` does not exceed `mu`.
    """

    def __init__(self, mu: float, sd: float) -> None:
        if mu <= 0:
            raise ValueError("Negative binomial mean must be positive.")
        if sd**2 <= mu:
            raise ValueError(
                "Negative binomial variance must exceed the mean (sd**2 > mu)."
            )
        self.mu = float(mu)
        self.sd = float(sd)
        self.size = self.mu**2 / (self.sd**2 - self.mu)
        self.prob = self.size / (self.size + self.mu)
        self._dist = nbinom(self.size, self.prob)

    def __call__(self, count: int) -> float:
        """Log-pmf of the count; -inf for negative counts."""
        if count < 0:
            return -np.inf
        return float(self._dist.logpmf(count))

    def sample(self, num_samples: int, rng: np.random.Generator) -> np.ndarray:
        """Draw counts, shape (num_samples,)."""
        return np.asarray(
            self._dist.rvs(size=num_samples, random_state=rng), dtype=int
        )

    @property
    def config_params(self) -> list[float]:
        """Mean and standard deviation of the prior."""
        return [self.mu, self.sd]
