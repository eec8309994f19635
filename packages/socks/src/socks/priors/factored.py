"""Factored Prior with independent priors on pairs and singletons."""

from dataclasses import dataclass

import numpy as np

from ._protocols import CountPrior, PriorType
from .count import NegativeBinomialCountPrior


class FactoredPrior:
    """
    Represents a prior on (p, s) that factorises into independent count priors.

        log P(p, s) = log P_pairs(p) + log P_singles(s)

    With two NegativeBinomialCountPrior components this is the independent
    negative binomial prior. If the pairs component returns -inf the singles
    component is not evaluated.

    Parameters
    ----------
    pairs_prior : CountPrior
        Prior on the number of pairs p.
    singles_prior : CountPrior
        Prior on the number of singleton socks s.
    """

    proper = True

    def __init__(self, pairs_prior: CountPrior, singles_prior: CountPrior) -> None:
        self.pairs_prior = pairs_prior
        self.singles_prior = singles_prior

    def __call__(self, p: int, s: int) -> float:
        """Factored log-prior."""
        log_prior_p = self.pairs_prior(p)
        if np.isneginf(log_prior_p):
            return -np.inf  # Early exit
        return float(log_prior_p + self.singles_prior(s))

    def sample(self, num_samples: int, rng: np.random.Generator) -> np.ndarray:
        """Sample from the factored prior.

        Returns
        -------
        samples : ndarray of int, shape (num_samples, 2)
            Columns (p, s), drawn independently.
        """
        samples = np.empty((num_samples, 2), dtype=int)
        samples[:, 0] = self.pairs_prior.sample(num_samples, rng)
        samples[:, 1] = self.singles_prior.sample(num_samples, rng)
        return samples


@dataclass
class FactoredPriorConfig:
    """Configuration for an independent negative binomial prior on (p, s).

    Parameters
    ----------
    pairs_mu, pairs_sd : float
        Mean and standard deviation of the number of pairs.
    singles_mu, singles_sd : float
        Mean and standard deviation of the number of singletons.
    """

    pairs_mu: float = 12.0
    pairs_sd: float = 8.0
    singles_mu: float = 3.0
    singles_sd: float = 3.0

    type = PriorType.FACTORED

    def to_prior(self) -> FactoredPrior:
        """Build a FactoredPrior from this config."""
        return FactoredPrior(
            pairs_prior=NegativeBinomialCountPrior(self.pairs_mu, self.pairs_sd),
            singles_prior=NegativeBinomialCountPrior(
                self.singles_mu, self.singles_sd
            ),
        )
