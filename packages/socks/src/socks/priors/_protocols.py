"""Common Prior Protocols."""

from enum import StrEnum, auto
from typing import Protocol

import numpy as np


class PriorType(StrEnum):
    """Enumeration of supported prior types."""

    FLAT = auto()
    BAATH = auto()
    FACTORED = auto()


class PriorFunction(Protocol):
    """Protocol for priors over the sock counts (p, s)."""

    def __call__(self, p: int, s: int) -> float:
        """Calculate the log-prior for p pairs and s singletons.

        Parameters
        ----------
        p : int
            Number of pairs.
        s : int
            Number of singleton socks.

        Returns
        -------
        log_prior : float
            Log-prior value, -inf where the prior has no mass.
        """

    def sample(self, num_samples: int, rng: np.random.Generator) -> np.ndarray:
        """Sample from the prior.

        Parameters
        ----------
        num_samples : int
            Number of samples to draw.
        rng : np.random.Generator
            Random number generator.

        Returns
        -------
        samples : ndarray of int, shape (num_samples, 2)
            Samples drawn from the prior, columns (p, s).
        """


class CountPrior(Protocol):
    """Protocol for univariate priors over a non-negative count."""

    def __call__(self, count: int) -> float:
        """Log-probability of the count."""

    def sample(self, num_samples: int, rng: np.random.Generator) -> np.ndarray:
        """Draw num_samples counts, shape (num_samples,)."""


class PriorConfigFactory(Protocol):
    """Protocol for configuration objects that build a PriorFunction."""

    type: PriorType

    def to_prior(self) -> PriorFunction:
        """Convert the configuration to a prior function."""
